# storefront/services/cart.py
# Cart operations. One row per (user, product); adding an existing product bumps its quantity.
from storefront.core.errors import BadRequestError, NotFoundError
from storefront.schemas import CartItem, CartLine

CART_LINES_SQL = """
    SELECT ci.id, ci.product_id, ci.quantity,
           p.name AS product_name, p.price AS product_price,
           p.image_url AS product_image_url, p.stock
    FROM cart_items ci
    JOIN products p ON ci.product_id = p.id
    WHERE ci.user_id = ?
    ORDER BY ci.id
"""


def list_cart(ctx, user_id: int) -> list[CartLine]:
    return [CartLine.model_validate(row) for row in ctx.db.execute(CART_LINES_SQL, [user_id])]


def add_item(ctx, user_id: int, product_id: int | None, quantity: int = 1) -> CartItem:
    if not product_id:
        raise BadRequestError("Product id is required")
    if quantity < 1:
        raise BadRequestError("Quantity must be at least 1")

    products = ctx.db.execute("SELECT * FROM products WHERE id = ?", [product_id])
    if not products:
        raise NotFoundError("Product not found")
    if products[0]["stock"] < quantity:
        raise BadRequestError("Not enough stock")

    existing = ctx.db.execute(
        "SELECT * FROM cart_items WHERE user_id = ? AND product_id = ?",
        [user_id, product_id],
    )
    if existing:
        new_quantity = existing[0]["quantity"] + quantity
        ctx.db.execute("UPDATE cart_items SET quantity = ? WHERE id = ?", [new_quantity, existing[0]["id"]])
        return CartItem(id=existing[0]["id"], product_id=product_id, quantity=new_quantity)

    result = ctx.db.execute(
        "INSERT INTO cart_items (user_id, product_id, quantity) VALUES (?, ?, ?)",
        [user_id, product_id, quantity],
    )
    return CartItem(id=result["insert_id"], product_id=product_id, quantity=quantity)


def update_item(ctx, user_id: int, item_id: int, quantity: int | None) -> CartItem:
    if not quantity or quantity < 1:
        raise BadRequestError("Quantity must be at least 1")

    items = ctx.db.execute("SELECT * FROM cart_items WHERE id = ? AND user_id = ?", [item_id, user_id])
    if not items:
        raise NotFoundError("Cart item not found")

    products = ctx.db.execute("SELECT stock FROM products WHERE id = ?", [items[0]["product_id"]])
    if not products or products[0]["stock"] < quantity:
        raise BadRequestError("Not enough stock")

    ctx.db.execute("UPDATE cart_items SET quantity = ? WHERE id = ?", [quantity, item_id])
    return CartItem(id=item_id, product_id=items[0]["product_id"], quantity=quantity)


def remove_item(ctx, user_id: int, item_id: int) -> None:
    result = ctx.db.execute("DELETE FROM cart_items WHERE id = ? AND user_id = ?", [item_id, user_id])
    if result["changes"] == 0:
        raise NotFoundError("Cart item not found")


def clear_cart(ctx, user_id: int) -> int:
    return ctx.db.execute("DELETE FROM cart_items WHERE user_id = ?", [user_id])["changes"]
