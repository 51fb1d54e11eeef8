# storefront/services/orders.py
# Checkout: turns the user's cart into an order, then notifies SQS/SNS on a best-effort basis.
#
# The writes below are separate statements with no surrounding transaction. A failure
# halfway leaves the order partially written, and two concurrent checkouts of the same
# product can both pass the stock check and drive stock negative.
import logging

from storefront.core.errors import BadRequestError, InsufficientStockError, NotFoundError
from storefront.models.order import OrderStatus
from storefront.schemas import AuthUser, Order, OrderItem

logger = logging.getLogger(__name__)

CHECKOUT_LINES_SQL = """
    SELECT ci.id, ci.product_id, ci.quantity, p.name, p.price, p.stock
    FROM cart_items ci
    JOIN products p ON ci.product_id = p.id
    WHERE ci.user_id = ?
    ORDER BY ci.id
"""


def place_order(ctx, user: AuthUser) -> Order:
    """
    Creates a pending order from the cart.

    Args:
        ctx: application context
        user: authenticated user

    Returns:
        The stored order header with its line items

    Raises:
        BadRequestError: the cart is empty
        InsufficientStockError: a line asks for more than is in stock; nothing is written
    """
    lines = ctx.db.execute(CHECKOUT_LINES_SQL, [user.id])
    if not lines:
        raise BadRequestError("Cart is empty")

    for line in lines:
        if line["stock"] < line["quantity"]:
            raise InsufficientStockError(line["name"], line["stock"], line["quantity"])

    # Prices come from the same snapshot the stock check used
    total_amount = sum(line["price"] * line["quantity"] for line in lines)

    order_id = ctx.db.execute(
        "INSERT INTO orders (user_id, total_amount, status) VALUES (?, ?, ?)",
        [user.id, total_amount, OrderStatus.pending.value],
    )["insert_id"]

    for line in lines:
        ctx.db.execute(
            "INSERT INTO order_items (order_id, product_id, product_name, quantity, price) VALUES (?, ?, ?, ?, ?)",
            [order_id, line["product_id"], line["name"], line["quantity"], line["price"]],
        )
        ctx.db.execute(
            "UPDATE products SET stock = stock - ? WHERE id = ?",
            [line["quantity"], line["product_id"]],
        )

    ctx.db.execute("DELETE FROM cart_items WHERE user_id = ?", [user.id])
    logger.info(f"[Orders] Order #{order_id} placed by user #{user.id}: {len(lines)} items, total {total_amount}")

    order = get_order(ctx, order_id)
    _notify(ctx, order, user)
    return order


def _notify(ctx, order: Order, user: AuthUser) -> None:
    """Order is already committed here; a failed publish is only logged."""
    if not ctx.notifier.enabled:
        return
    try:
        ctx.notifier.order_placed(order, user)
    except Exception as e:
        logger.error(f"[Orders] SQS/SNS publish failed for order #{order.id}: {e}")


def _items_for(ctx, order_id: int) -> list[OrderItem]:
    rows = ctx.db.execute("SELECT * FROM order_items WHERE order_id = ? ORDER BY id", [order_id])
    return [OrderItem.model_validate(row) for row in rows]


def get_order(ctx, order_id: int) -> Order:
    headers = ctx.db.execute("SELECT * FROM orders WHERE id = ?", [order_id])
    if not headers:
        raise NotFoundError("Order not found")
    header = headers[0]
    return Order(**header, items=_items_for(ctx, order_id))


def list_orders(ctx, user_id: int) -> list[Order]:
    """The user's orders, newest first, each with its items."""
    headers = ctx.db.execute(
        "SELECT * FROM orders WHERE user_id = ? ORDER BY created_at DESC, id DESC",
        [user_id],
    )
    return [Order(**header, items=_items_for(ctx, header["id"])) for header in headers]
