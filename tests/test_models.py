"""Tests for models.order."""

from __future__ import annotations

import pytest

from models.order import Order, OrderDetail, Product


def test_identity_can_be_assigned_once(make_order) -> None:
    order = make_order()
    order.id = 10248
    order.id = 10248
    with pytest.raises(AttributeError):
        order.id = 10249
    assert order.id == 10248


def test_constructor_details_get_back_reference(make_order) -> None:
    template = make_order()
    detail = OrderDetail(product=Product(id=3), unit_price=10.0, quantity=1)
    order = Order(
        customer=template.customer,
        employee=template.employee,
        shipper=template.shipper,
        order_date=template.order_date,
        required_date=template.required_date,
        ship_name=template.ship_name,
        shipping_address=template.shipping_address,
        order_details=[detail],
    )
    assert detail.order is order


def test_detail_equality_ignores_back_reference(make_order) -> None:
    a, b = make_order(), make_order()
    assert a.order_details == b.order_details
    assert a == b


def test_str(make_order) -> None:
    order = make_order()
    assert str(order) == "Order (new) | ALFKI | 2 line(s)"
