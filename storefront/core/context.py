# storefront/core/context.py
# Everything the services need, built once at startup and passed around explicitly.
import logging
from dataclasses import dataclass

from storefront.core.aws import AwsClients
from storefront.core.config import Settings
from storefront.db.store import RelationalStore, create_store
from storefront.services.cache import Cache, create_cache
from storefront.services.notifications import Notifier, create_notifier
from storefront.services.reviews import ReviewStore, create_review_store
from storefront.services.storage import BlobStore, create_storage

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: Settings
    db: RelationalStore
    cache: Cache
    storage: BlobStore
    reviews: ReviewStore
    notifier: Notifier
    aws: AwsClients

    def close(self) -> None:
        self.cache.close()
        self.db.dispose()


def build_context(settings: Settings, aws: AwsClients | None = None, init_schema: bool = True) -> AppContext:
    """
    Selects and constructs every backend from settings.

    Raises:
        ConfigurationError: on an unknown backend identifier
    """
    settings.validate()
    aws = aws or AwsClients(settings.S3_REGION, settings.DYNAMODB_REGION)
    db = create_store(settings)
    if init_schema:
        db.init_schema()
    ctx = AppContext(
        settings=settings,
        db=db,
        cache=create_cache(settings),
        storage=create_storage(settings, aws),
        reviews=create_review_store(settings, db, aws),
        notifier=create_notifier(settings, aws),
        aws=aws,
    )
    logger.info(f"Context ready: {settings.summary()}")
    return ctx
