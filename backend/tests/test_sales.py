"""
Sales history tests: listing, detail with product names and cascading delete.
"""

import pytest
from decimal import Decimal

from grocerpos.services import sales_service
from grocerpos.services.cart_service import Cart
from grocerpos.services.checkout_service import CheckoutCommitter
from grocerpos.services.sales_service import SaleNotFoundError

from conftest import stock_of


def _checkout(store, context, *products):
    cart = Cart()
    for product in products:
        cart.add(product)
    return CheckoutCommitter(store, context).commit(cart).sale


class TestSalesHistory:

    def test_list_newest_first(self, store, context, products):
        first = _checkout(store, context, products["RICE-5"])
        second = _checkout(store, context, products["SOAP-3"])
        store.update("sales", {"created_at": first.created_at.replace(year=2020)}, {"id": first.id})

        ids = [s.id for s in sales_service.list_sales(store)]
        assert ids == [second.id, first.id]

    def test_detail_includes_product_name_and_sku(self, store, context, products):
        sale = _checkout(store, context, products["RICE-5"], products["EGG-10"], products["RICE-5"])

        detail = sales_service.get_sale(store, sale.id)

        by_sku = {item.product_sku: item for item in detail.items}
        assert set(by_sku) == {"RICE-5", "EGG-10"}
        assert by_sku["RICE-5"].product_name == "Rice 5kg"
        assert by_sku["RICE-5"].quantity == 2
        assert by_sku["RICE-5"].subtotal == Decimal("130000.00")
        assert detail.total_amount == Decimal("158000.00")

        payload = detail.to_dict(include_items=True)
        assert {item["product"]["sku"] for item in payload["items"]} == {"RICE-5", "EGG-10"}

    def test_unknown_sale(self, store):
        with pytest.raises(SaleNotFoundError):
            sales_service.get_sale(store, "missing")


class TestDeleteSale:

    def test_delete_removes_sale_and_items(self, store, context, products):
        sale = _checkout(store, context, products["RICE-5"], products["SOAP-3"])
        keep = _checkout(store, context, products["EGG-10"])

        sales_service.delete_sale(store, sale.id)

        assert store.select("sales", {"id": sale.id}) == []
        assert store.select("sale_items", {"sale_id": sale.id}) == []
        assert len(store.select("sale_items", {"sale_id": keep.id})) == 1

    def test_delete_does_not_restore_stock(self, store, context, products):
        sale = _checkout(store, context, products["RICE-5"])

        sales_service.delete_sale(store, sale.id)

        assert stock_of(store, products["RICE-5"].id) == 19

    def test_delete_unknown_sale(self, store):
        with pytest.raises(SaleNotFoundError):
            sales_service.delete_sale(store, "missing")
