# storefront/services/catalog.py
# Product listing and detail, read through the cache.
from storefront.core.errors import NotFoundError
from storefront.schemas import Product

LIST_TTL = 60
DETAIL_TTL = 120


def list_cache_key(category: str | None, search: str | None) -> str:
    return f"products:{category or 'all'}:{search or ''}"


def detail_cache_key(product_id: int) -> str:
    return f"product:{product_id}"


def list_products(ctx, category: str | None = None, search: str | None = None) -> list[Product]:
    """Newest first; search matches name or description."""

    def _load():
        sql = "SELECT * FROM products WHERE 1=1"
        params = []
        if category:
            sql += " AND category = ?"
            params.append(category)
        if search:
            sql += " AND (name LIKE ? OR description LIKE ?)"
            pattern = f"%{search}%"
            params.extend([pattern, pattern])
        sql += " ORDER BY created_at DESC, id DESC"
        rows = ctx.db.execute(sql, params)
        return [Product.model_validate(row).model_dump(mode="json") for row in rows]

    rows = ctx.cache.get_or_set(list_cache_key(category, search), _load, LIST_TTL)
    return [Product.model_validate(row) for row in rows]


def get_product(ctx, product_id: int) -> Product:
    key = detail_cache_key(product_id)
    cached = ctx.cache.get(key)
    if cached is not None:
        return Product.model_validate(cached)

    rows = ctx.db.execute("SELECT * FROM products WHERE id = ?", [product_id])
    if not rows:
        raise NotFoundError("Product not found")
    product = Product.model_validate(rows[0])
    ctx.cache.set(key, product.model_dump(mode="json"), DETAIL_TTL)
    return product
