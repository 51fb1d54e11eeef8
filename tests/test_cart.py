import pytest

from conftest import make_product, make_user
from storefront.core.errors import BadRequestError, NotFoundError
from storefront.services import cart


@pytest.fixture
def user_id(ctx):
    return make_user(ctx)


def test_add_item_merges_same_product(ctx, user_id):
    product = make_product(ctx, stock=10)
    first = cart.add_item(ctx, user_id, product, 2)
    second = cart.add_item(ctx, user_id, product, 3)

    assert second.id == first.id
    assert second.quantity == 5
    lines = cart.list_cart(ctx, user_id)
    assert len(lines) == 1
    assert (lines[0].product_name, lines[0].product_price, lines[0].quantity) == ("Widget", 1000, 5)


def test_add_item_validation(ctx, user_id):
    product = make_product(ctx, stock=1)
    with pytest.raises(BadRequestError):
        cart.add_item(ctx, user_id, None)
    with pytest.raises(BadRequestError):
        cart.add_item(ctx, user_id, product, 0)
    with pytest.raises(BadRequestError):
        cart.add_item(ctx, user_id, product, 2)
    with pytest.raises(NotFoundError):
        cart.add_item(ctx, user_id, 999)


def test_update_item(ctx, user_id):
    product = make_product(ctx, stock=4)
    item = cart.add_item(ctx, user_id, product)

    assert cart.update_item(ctx, user_id, item.id, 4).quantity == 4
    with pytest.raises(BadRequestError):
        cart.update_item(ctx, user_id, item.id, 5)
    with pytest.raises(BadRequestError):
        cart.update_item(ctx, user_id, item.id, 0)


def test_cannot_touch_someone_elses_item(ctx, user_id):
    other = make_user(ctx, email="other@example.com")
    item = cart.add_item(ctx, other, make_product(ctx))

    with pytest.raises(NotFoundError):
        cart.update_item(ctx, user_id, item.id, 1)
    with pytest.raises(NotFoundError):
        cart.remove_item(ctx, user_id, item.id)


def test_remove_and_clear(ctx, user_id):
    a = cart.add_item(ctx, user_id, make_product(ctx, name="A"))
    cart.add_item(ctx, user_id, make_product(ctx, name="B"))
    cart.add_item(ctx, user_id, make_product(ctx, name="C"))

    cart.remove_item(ctx, user_id, a.id)
    assert [line.product_name for line in cart.list_cart(ctx, user_id)] == ["B", "C"]
    assert cart.clear_cart(ctx, user_id) == 2
    assert cart.list_cart(ctx, user_id) == []
