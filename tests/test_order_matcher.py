from decimal import Decimal

import pytest

from db.models import Order
from services.errors import ValidationError
from services import order_matcher
from services.order_matcher import match_order
from services.orders_service import OrderItemsService, OrdersService
from tests.factories import OrderFactory, ProjectFactory


def _orders(session, project, vendor=None):
    q = session.query(Order).filter(Order.project_id == project.id)
    if vendor:
        q = q.filter(Order.vendor_name == vendor)
    return q.all()


def test_first_item_for_vendor_opens_an_order(session):
    project = ProjectFactory()
    item = OrderItemsService.create(session, project.id, {"vendor": "Acme", "unitCost": "5"})

    orders = _orders(session, project)
    assert len(orders) == 1
    assert orders[0].vendor_name == "Acme"
    assert orders[0].status == "open"
    assert orders[0].paid_for_by is None
    assert item.order_id == orders[0].id


def test_second_item_reuses_the_open_order(session):
    project = ProjectFactory()
    first = OrderItemsService.create(session, project.id, {"vendor": "Acme"})
    second = OrderItemsService.create(session, project.id, {"vendor": "Acme"})

    assert second.order_id == first.order_id
    assert len(_orders(session, project)) == 1
    assert len(first.order.items) == 2


def test_committed_order_is_not_reused(session):
    project = ProjectFactory()
    first = OrderItemsService.create(session, project.id, {"vendor": "Acme"})
    OrdersService.update(session, first.order, {"status": "ordered"})

    later = OrderItemsService.create(session, project.id, {"vendor": "Acme"})

    assert later.order_id != first.order_id
    assert later.order.status == "open"
    statuses = sorted(o.status for o in _orders(session, project, "Acme"))
    assert statuses == ["open", "ordered"]


@pytest.mark.parametrize("vendor", [None, "", "   "])
def test_no_vendor_leaves_item_unclassified(session, vendor):
    project = ProjectFactory()
    item = OrderItemsService.create(session, project.id, {"vendor": vendor, "description": "bolts"})
    assert item.order_id is None
    assert _orders(session, project) == []
    assert OrderItemsService.unclassified(session, project.id) == [item]


def test_vendors_are_matched_per_project(session):
    p1, p2 = ProjectFactory(), ProjectFactory()
    a = OrderItemsService.create(session, p1.id, {"vendor": "Acme"})
    b = OrderItemsService.create(session, p2.id, {"vendor": "Acme"})
    assert a.order_id != b.order_id


def test_vendor_reassignment_moves_item_and_keeps_old_order(session):
    project = ProjectFactory()
    item = OrderItemsService.create(session, project.id, {"vendor": "Acme"})
    old_order_id = item.order_id

    OrderItemsService.update(session, item, {"vendor": "Globex"})

    assert item.order.vendor_name == "Globex"
    assert item.order_id != old_order_id
    old = session.get(Order, old_order_id)
    assert old is not None
    assert old.items == []


def test_reassignment_to_blank_vendor_unclassifies(session):
    project = ProjectFactory()
    item = OrderItemsService.create(session, project.id, {"vendor": "Acme"})
    OrderItemsService.update(session, item, {"vendor": ""})
    assert item.order_id is None


def test_reassignment_joins_existing_open_order(session):
    project = ProjectFactory()
    acme = OrderItemsService.create(session, project.id, {"vendor": "Acme"})
    loose = OrderItemsService.create(session, project.id, {})
    OrderItemsService.update(session, loose, {"vendor": "Acme"})
    assert loose.order_id == acme.order_id


def test_update_without_vendor_keeps_order(session):
    project = ProjectFactory()
    item = OrderItemsService.create(session, project.id, {"vendor": "Acme"})
    order_id = item.order_id
    OrderItemsService.update(session, item, {"quantity": 3, "unitCost": "$2.50"})
    assert item.order_id == order_id
    assert item.quantity == 3
    assert item.unit_cost == Decimal("2.50")


def test_match_order_returns_none_without_vendor(session):
    project = ProjectFactory()
    assert match_order(session, project.id, None) is None


def test_match_order_is_idempotent(session):
    project = ProjectFactory()
    first = match_order(session, project.id, "Acme")
    assert match_order(session, project.id, "Acme") is first


@pytest.mark.parametrize("quantity", [0, -2, "two", 1.5, 10001])
def test_bad_quantity_rejected_before_routing(session, quantity):
    project = ProjectFactory()
    with pytest.raises(ValidationError):
        OrderItemsService.create(session, project.id, {"vendor": "Acme", "quantity": quantity})
    assert _orders(session, project) == []


def test_defaults_for_new_item(session):
    project = ProjectFactory()
    item = OrderItemsService.create(session, project.id, {"vendor": "Acme"})
    assert item.quantity == 1
    assert item.unit_cost == Decimal("0.00")
    assert item.part_number == ""


def test_concurrent_open_order_is_reused(session, monkeypatch):
    project = ProjectFactory()
    winner = OrderFactory(project=project, vendor_name="Acme", status="open")

    real_find = order_matcher.find_open_order
    calls = []

    def stale_find(session_, project_id, vendor):
        calls.append(vendor)
        if len(calls) == 1:
            return None
        return real_find(session_, project_id, vendor)

    monkeypatch.setattr(order_matcher, "find_open_order", stale_find)

    item = OrderItemsService.create(session, project.id, {"vendor": "Acme"})

    assert len(calls) == 2
    assert item.order_id == winner.id
    open_orders = [o for o in _orders(session, project, "Acme") if o.status == "open"]
    assert open_orders == [winner]
