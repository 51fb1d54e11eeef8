import pytest
from moto import mock_aws

from storefront.core.aws import AwsClients
from storefront.core.config import Settings
from storefront.core.context import build_context

REGION = "us-east-1"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        DB_TYPE="sqlite",
        SQLITE_PATH=str(tmp_path / "data" / "test.db"),
        STORAGE_TYPE="local",
        UPLOAD_DIR=str(tmp_path / "uploads"),
        REVIEW_STORE="local",
        CACHE_TYPE="memory",
        QUEUE_TYPE="sync",
        SECRET_KEY="test-secret",
        ENVIRONMENT="test",
    )


@pytest.fixture
def ctx(settings):
    context = build_context(settings)
    yield context
    context.close()


@pytest.fixture
def aws(monkeypatch):
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", REGION)
    with mock_aws():
        yield AwsClients(REGION, REGION)


def make_user(ctx, email="buyer@example.com", name="Buyer"):
    result = ctx.db.execute(
        "INSERT INTO users (email, password_hash, name) VALUES (?, ?, ?)",
        [email, "not-a-real-hash", name],
    )
    return result["insert_id"]


def make_product(ctx, name="Widget", price=1000, stock=5, category="Electronics", description=""):
    result = ctx.db.execute(
        "INSERT INTO products (name, description, price, image_url, category, stock) VALUES (?, ?, ?, ?, ?, ?)",
        [name, description, price, f"/images/{name}.jpg", category, stock],
    )
    return result["insert_id"]


def put_in_cart(ctx, user_id, product_id, quantity):
    """Inserts a cart row directly, bypassing the cart service's stock check."""
    return ctx.db.execute(
        "INSERT INTO cart_items (user_id, product_id, quantity) VALUES (?, ?, ?)",
        [user_id, product_id, quantity],
    )["insert_id"]
