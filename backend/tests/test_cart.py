"""
Cart accumulator tests.

Verifies:
- Adding a product twice increments its line instead of duplicating it
- Quantity adjustments clamp at 1 and ignore unknown products
- Subtotals and total are always derived from quantity x unit price
- Session state round trip keeps money exact
"""

from decimal import Decimal

from grocerpos.records import Product
from grocerpos.services.cart_service import Cart


def _product(pid: str, price: str, name: str | None = None) -> Product:
    return Product(id=pid, sku=f"SKU-{pid}", name=name or f"Product {pid}", price=Decimal(price), stock_quantity=50)


class TestCartAdd:

    def test_new_product_starts_at_one(self):
        cart = Cart()
        item = cart.add(_product("a", "10.00"))

        assert item.quantity == 1
        assert item.subtotal == Decimal("10.00")
        assert not cart.is_empty()

    def test_existing_product_increments(self):
        cart = Cart()
        product = _product("a", "10.00")
        cart.add(product)
        item = cart.add(product)

        assert len(cart.lines()) == 1
        assert item.quantity == 2
        assert item.subtotal == Decimal("20.00")

    def test_lines_keep_insertion_order(self):
        cart = Cart()
        cart.add(_product("b", "5.00"))
        cart.add(_product("a", "10.00"))
        cart.add(_product("b", "5.00"))

        assert [line.product_id for line in cart.lines()] == ["b", "a"]


class TestCartQuantity:

    def test_delta_adjusts_and_recomputes_subtotal(self):
        cart = Cart()
        cart.add(_product("a", "2.50"))
        item = cart.set_quantity("a", 3)

        assert item.quantity == 4
        assert item.subtotal == Decimal("10.00")

    def test_quantity_never_drops_below_one(self):
        cart = Cart()
        cart.add(_product("a", "2.50"))
        cart.set_quantity("a", 1)

        item = cart.set_quantity("a", -10)

        assert item.quantity == 1
        assert cart.total() == Decimal("2.50")

    def test_unknown_product_is_ignored(self):
        cart = Cart()
        cart.add(_product("a", "2.50"))

        assert cart.set_quantity("missing", 5) is None
        assert [line.product_id for line in cart.lines()] == ["a"]

    def test_remove_and_clear(self):
        cart = Cart()
        cart.add(_product("a", "1.00"))
        cart.add(_product("b", "2.00"))

        cart.remove("a")
        assert [line.product_id for line in cart.lines()] == ["b"]

        cart.remove("not-there")
        cart.clear()
        assert cart.is_empty()
        assert cart.total() == Decimal("0.00")


class TestCartTotals:

    def test_total_is_sum_of_subtotals(self):
        cart = Cart()
        a = _product("a", "10.00")
        cart.add(a)
        cart.add(a)
        cart.add(_product("b", "5.00"))

        assert cart.total() == Decimal("25.00")
        assert [str(line.subtotal) for line in cart.lines()] == ["20.00", "5.00"]

    def test_to_dict_serializes_money_as_strings(self):
        cart = Cart()
        cart.add(_product("a", "0.10"))
        cart.set_quantity("a", 2)

        data = cart.to_dict()
        assert data["total"] == "0.30"
        assert data["item_count"] == 3
        assert data["items"][0]["unit_price"] == "0.10"
        assert data["items"][0]["subtotal"] == "0.30"


class TestCartState:

    def test_state_round_trip_is_exact(self):
        cart = Cart()
        cart.add(_product("a", "19999.99", name="Cooking oil 2L"))
        cart.set_quantity("a", 2)

        restored = Cart.from_state(cart.to_state())

        assert restored.lines()[0].name == "Cooking oil 2L"
        assert restored.lines()[0].quantity == 3
        assert restored.total() == Decimal("59999.97")

    def test_missing_state_is_empty_cart(self):
        assert Cart.from_state(None).is_empty()
