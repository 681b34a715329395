"""
services.order_stats - Spending rollups for committed orders.

Committed = status other than "open".  Each order's total is
Σ(quantity × unit_cost) + tax + shipping.  Nothing is stored; both views
are rebuilt from the database on every call.
"""

from __future__ import annotations

from decimal import Decimal

from sqlalchemy.orm import Session

import config
from db.models import Order
from schema.statuses import OPEN_ORDER_STATUS


def committed_orders(session: Session, project_id: str) -> list[Order]:
    return (
        session.query(Order)
        .filter(
            Order.project_id == project_id,
            Order.status != OPEN_ORDER_STATUS,
        )
        .order_by(Order.vendor_name, Order.ordered_at, Order.created_at)
        .all()
    )


def by_vendor(orders: list[Order]) -> dict:
    """{vendor: {"orders": [order + totalCost], "totalCost": Decimal}}"""
    out: dict[str, dict] = {}
    for order in orders:
        bucket = out.setdefault(
            order.vendor_name, {"orders": [], "totalCost": Decimal("0")},
        )
        total = order.total_cost
        d = order.to_dict()
        d["totalCost"] = total
        bucket["orders"].append(d)
        bucket["totalCost"] += total
    return out


def by_purchaser(orders: list[Order]) -> dict:
    """{purchaser: {"reimbursed": Decimal, "outstanding": Decimal}}"""
    out: dict[str, dict] = {}
    for order in orders:
        who = order.paid_for_by or config.UNKNOWN_PURCHASER
        bucket = out.setdefault(
            who, {"reimbursed": Decimal("0"), "outstanding": Decimal("0")},
        )
        key = "reimbursed" if order.reimbursed else "outstanding"
        bucket[key] += order.total_cost
    return out


def _floats(obj):
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, dict):
        return {k: _floats(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_floats(v) for v in obj]
    return obj


def project_stats(session: Session, project_id: str, *, as_float: bool = True) -> dict:
    """
    Compute ``{"byVendor": …, "byPurchaser": …}`` for a project.
    ``as_float=False`` keeps Decimal amounts (used by tests and reports).
    """
    orders = committed_orders(session, project_id)
    stats = {
        "byVendor": by_vendor(orders),
        "byPurchaser": by_purchaser(orders),
    }
    return _floats(stats) if as_float else stats
