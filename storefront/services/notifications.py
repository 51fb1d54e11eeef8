# storefront/services/notifications.py
# Post-commit order notifications: an SQS message for workers and an SNS alert for humans.
import json
import logging
from datetime import datetime, timezone

from storefront.core.errors import ConfigurationError

logger = logging.getLogger(__name__)


class Notifier:
    """Does nothing. Used when QUEUE_TYPE=sync."""

    enabled = False

    def order_placed(self, order, user) -> None:
        pass


class QueueNotifier(Notifier):
    """
    Sends order messages through SQS and SNS.

    Each channel is skipped when its queue URL / topic ARN is empty.
    Errors propagate; the order service decides whether they matter.
    """

    enabled = True

    def __init__(self, clients, queue_url: str = "", topic_arn: str = ""):
        self.clients = clients
        self.queue_url = queue_url
        self.topic_arn = topic_arn

    def order_placed(self, order, user) -> None:
        created_at = datetime.now(timezone.utc).isoformat()
        items = [
            {
                "productId": item.product_id,
                "productName": item.product_name,
                "quantity": item.quantity,
                "price": item.price,
            }
            for item in order.items
        ]
        if self.queue_url:
            message = {
                "orderId": order.id,
                "userId": user.id,
                "userEmail": user.email,
                "userName": user.name,
                "items": items,
                "totalAmount": order.total_amount,
                "createdAt": created_at,
            }
            self.clients.sqs.send_message(
                QueueUrl=self.queue_url,
                MessageBody=json.dumps(message, ensure_ascii=False),
                MessageAttributes={
                    "orderType": {"DataType": "String", "StringValue": "NEW_ORDER"},
                },
            )
            logger.info(f"[Orders] SQS message sent for order #{order.id}")

        if self.topic_arn:
            self.clients.sns.publish(
                TopicArn=self.topic_arn,
                Subject=f"New order #{order.id}",
                Message=json.dumps(
                    {
                        "orderId": order.id,
                        "userId": user.id,
                        "userName": user.name,
                        "totalAmount": order.total_amount,
                        "itemCount": len(items),
                        "createdAt": created_at,
                    },
                    ensure_ascii=False,
                ),
            )
            logger.info(f"[Orders] SNS notification published for order #{order.id}")


def create_notifier(settings, clients) -> Notifier:
    if settings.QUEUE_TYPE == "sqs":
        return QueueNotifier(clients, settings.SQS_QUEUE_URL, settings.SNS_TOPIC_ARN)
    if settings.QUEUE_TYPE == "sync":
        return Notifier()
    raise ConfigurationError(f"Unsupported QUEUE_TYPE: {settings.QUEUE_TYPE!r}")
