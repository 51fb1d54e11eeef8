# storefront/db/seed.py
# Seeds a test user and a small catalog. Safe to run repeatedly.
# Run: python -m storefront.db.seed
import logging

from storefront.core import security
from storefront.core.config import get_settings
from storefront.core.context import build_context
from storefront.services.reviews import DynamoReviewStore

logger = logging.getLogger(__name__)

TEST_USER = {"email": "test@test.com", "password": "password123", "name": "Test User"}

PRODUCTS = [
    {"name": "Galaxy S24 Ultra", "description": "Flagship smartphone with a 200MP camera and titanium frame.",
     "price": 1698000, "image_url": "/images/products/product-1.jpg", "category": "Electronics", "stock": 50},
    {"name": "Gram 17 Laptop", "description": "Ultralight 17-inch laptop, 1.35kg, 16GB RAM, 512GB SSD.",
     "price": 1890000, "image_url": "/images/products/product-2.jpg", "category": "Electronics", "stock": 30},
    {"name": "AirPods Pro (2nd gen)", "description": "Active noise cancelling earbuds with USB-C case.",
     "price": 359000, "image_url": "/images/products/product-3.jpg", "category": "Electronics", "stock": 100},
    {"name": "Down Puffer Jacket", "description": "Lightweight goose down jacket for winter commutes.",
     "price": 189000, "image_url": "/images/products/product-4.jpg", "category": "Fashion", "stock": 40},
    {"name": "Running Shoes", "description": "Cushioned daily trainers with a breathable mesh upper.",
     "price": 129000, "image_url": "/images/products/product-5.jpg", "category": "Fashion", "stock": 60},
    {"name": "Hand Drip Coffee Set", "description": "Ceramic dripper, glass server and 40 paper filters.",
     "price": 45000, "image_url": "/images/products/product-6.jpg", "category": "Kitchen", "stock": 80},
    {"name": "Cast Iron Skillet 26cm", "description": "Pre-seasoned skillet that works on induction.",
     "price": 59000, "image_url": "/images/products/product-7.jpg", "category": "Kitchen", "stock": 25},
    {"name": "Organic Green Tea", "description": "First flush loose leaf tea, 100g tin.",
     "price": 18000, "image_url": "/images/products/product-8.jpg", "category": "Food", "stock": 200},
]


def seed(ctx) -> dict:
    """Inserts the test user and catalog rows that are missing; returns how many of each were added."""
    added = {"users": 0, "products": 0}

    if isinstance(ctx.reviews, DynamoReviewStore):
        ctx.reviews.ensure_table()

    if not ctx.db.execute("SELECT id FROM users WHERE email = ?", [TEST_USER["email"]]):
        ctx.db.execute(
            "INSERT INTO users (email, password_hash, name) VALUES (?, ?, ?)",
            [TEST_USER["email"], security.get_password_hash(TEST_USER["password"]), TEST_USER["name"]],
        )
        added["users"] += 1

    for product in PRODUCTS:
        if ctx.db.execute("SELECT id FROM products WHERE name = ?", [product["name"]]):
            continue
        ctx.db.execute(
            "INSERT INTO products (name, description, price, image_url, category, stock) VALUES (?, ?, ?, ?, ?, ?)",
            [product["name"], product["description"], product["price"], product["image_url"],
             product["category"], product["stock"]],
        )
        added["products"] += 1

    logger.info(f"[Seed] Added {added['users']} users and {added['products']} products")
    return added


def main():
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)
    ctx = build_context(settings)
    try:
        seed(ctx)
    finally:
        ctx.close()


if __name__ == "__main__":
    main()
