# storefront/services/reviews.py
# Review storage: the relational "reviews" table (local) or a DynamoDB table (dynamodb).
# Both list newest first and stamp created_at at write time.
import json
import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone

from boto3.dynamodb.conditions import Key
from botocore.exceptions import ClientError

from storefront.core.errors import BadRequestError, ConfigurationError, NotFoundError
from storefront.schemas import Review, ReviewInput

logger = logging.getLogger(__name__)

SORT_KEY = "createdAt#userId"


class ReviewStore(ABC):
    @abstractmethod
    def list_reviews(self, product_id: int) -> list[Review]:
        """Reviews for one product, newest first."""

    @abstractmethod
    def create_review(self, review: ReviewInput) -> Review:
        ...


class SqlReviewStore(ReviewStore):
    """Reviews in the relational store; image URLs are kept as a JSON array in a text column."""

    def __init__(self, db):
        self.db = db

    @staticmethod
    def _from_row(row: dict) -> Review:
        return Review(
            id=row["id"],
            product_id=row["product_id"],
            user_id=row["user_id"],
            user_name=row["user_name"],
            rating=row["rating"],
            content=row["content"],
            image_urls=json.loads(row["image_urls"]) if row.get("image_urls") else [],
            created_at=row["created_at"],
        )

    def list_reviews(self, product_id: int) -> list[Review]:
        # id breaks ties between reviews written within the same second
        rows = self.db.execute(
            "SELECT * FROM reviews WHERE product_id = ? ORDER BY created_at DESC, id DESC",
            [product_id],
        )
        return [self._from_row(row) for row in rows]

    def create_review(self, review: ReviewInput) -> Review:
        result = self.db.execute(
            "INSERT INTO reviews (product_id, user_id, user_name, rating, content, image_urls) "
            "VALUES (?, ?, ?, ?, ?, ?)",
            [
                review.product_id,
                review.user_id,
                review.user_name,
                review.rating,
                review.content,
                json.dumps(review.image_urls),
            ],
        )
        rows = self.db.execute("SELECT * FROM reviews WHERE id = ?", [result["insert_id"]])
        return self._from_row(rows[0])


def utc_timestamp() -> str:
    """ISO-8601 UTC with milliseconds, e.g. 2024-05-01T09:30:00.123Z; sorts lexicographically."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class DynamoReviewStore(ReviewStore):
    """
    Reviews in DynamoDB.

    Partition key: productId (string)
    Sort key:      "createdAt#userId" = "<ISO timestamp>#<user id>"

    The timestamp prefix gives newest-first order with ScanIndexForward=False;
    the user id suffix keeps two reviews written in the same millisecond apart.
    """

    def __init__(self, clients, table_name: str):
        self.clients = clients
        self.table_name = table_name

    @property
    def table(self):
        return self.clients.dynamodb.Table(self.table_name)

    def ensure_table(self) -> None:
        """Creates the table with its key schema if it does not exist yet."""
        try:
            self.clients.dynamodb.create_table(
                TableName=self.table_name,
                KeySchema=[
                    {"AttributeName": "productId", "KeyType": "HASH"},
                    {"AttributeName": SORT_KEY, "KeyType": "RANGE"},
                ],
                AttributeDefinitions=[
                    {"AttributeName": "productId", "AttributeType": "S"},
                    {"AttributeName": SORT_KEY, "AttributeType": "S"},
                ],
                BillingMode="PAY_PER_REQUEST",
            )
            logger.info(f"[Reviews] DynamoDB table {self.table_name} created")
        except ClientError as e:
            if e.response["Error"]["Code"] != "ResourceInUseException":
                raise

    @staticmethod
    def _from_item(item: dict) -> Review:
        # numbers come back from DynamoDB as Decimal
        return Review(
            id=item["reviewId"],
            product_id=int(item["productId"]),
            user_id=int(item["userId"]),
            user_name=item["userName"],
            rating=int(item["rating"]),
            content=item.get("content"),
            image_urls=list(item.get("imageUrls") or []),
            created_at=item["createdAt"],
        )

    def list_reviews(self, product_id: int) -> list[Review]:
        params = {
            "KeyConditionExpression": Key("productId").eq(str(product_id)),
            "ScanIndexForward": False,
        }
        items = []
        while True:
            response = self.table.query(**params)
            items.extend(response.get("Items", []))
            if "LastEvaluatedKey" not in response:
                break
            params["ExclusiveStartKey"] = response["LastEvaluatedKey"]
        return [self._from_item(item) for item in items]

    def create_review(self, review: ReviewInput) -> Review:
        now = utc_timestamp()
        item = {
            "productId": str(review.product_id),
            SORT_KEY: f"{now}#{review.user_id}",
            "reviewId": str(uuid.uuid4()),
            "userId": review.user_id,
            "userName": review.user_name,
            "rating": review.rating,
            "content": review.content,
            "imageUrls": list(review.image_urls),
            "createdAt": now,
        }
        self.table.put_item(Item=item)
        return self._from_item(item)


def create_review_store(settings, db, clients) -> ReviewStore:
    if settings.REVIEW_STORE == "local":
        store = SqlReviewStore(db)
    elif settings.REVIEW_STORE == "dynamodb":
        store = DynamoReviewStore(clients, settings.DYNAMODB_TABLE)
    else:
        raise ConfigurationError(f"Unsupported REVIEW_STORE: {settings.REVIEW_STORE!r}")
    logger.info(f"[Reviews] Using {settings.REVIEW_STORE} review store")
    return store


REVIEWS_TTL = 60


def reviews_cache_key(product_id: int) -> str:
    return f"reviews:{product_id}"


def list_product_reviews(ctx, product_id: int) -> list[Review]:
    rows = ctx.cache.get_or_set(
        reviews_cache_key(product_id),
        lambda: [r.model_dump(mode="json") for r in ctx.reviews.list_reviews(product_id)],
        REVIEWS_TTL,
    )
    return [Review.model_validate(row) for row in rows]


def submit_review(ctx, product_id: int, user, rating, content: str | None, image_urls=None) -> Review:
    """Validates, writes through the configured store and drops this product's cached list."""
    if isinstance(rating, bool) or not isinstance(rating, int) or not 1 <= rating <= 5:
        raise BadRequestError("Rating must be between 1 and 5")
    if not content or not content.strip():
        raise BadRequestError("Review content is required")
    if not ctx.db.execute("SELECT id FROM products WHERE id = ?", [product_id]):
        raise NotFoundError("Product not found")

    review = ctx.reviews.create_review(
        ReviewInput(
            product_id=product_id,
            user_id=user.id,
            user_name=user.name,
            rating=rating,
            content=content.strip(),
            image_urls=list(image_urls or []),
        )
    )
    ctx.cache.delete(reviews_cache_key(product_id))
    logger.info(f"[Reviews] Review {review.id} added to product #{product_id}")
    return review
