"""
services.order_matcher - Route order items to their vendor's open order.

    no vendor                    → None (item stays unclassified)
    open order for vendor exists → that order
    otherwise                    → a new open order for the vendor

Orders that have moved on to "ordered" or "received" never receive
auto-routed items; the next item for that vendor provisions a fresh
open order.  A vendor therefore has any number of historical orders
but at most one open bucket per project.

The find-or-create runs in a savepoint.  When a concurrent request
wins the insert, the partial unique index on open orders rejects ours
and the lookup is repeated, so both items land in the same order.
"""

from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from db.models import Order
from schema.statuses import OPEN_ORDER_STATUS

logger = logging.getLogger(__name__)


def normalize_vendor(vendor) -> str:
    return str(vendor or "").strip()


def find_open_order(session: Session, project_id: str, vendor: str) -> Optional[Order]:
    return (
        session.query(Order)
        .filter(
            Order.project_id == project_id,
            Order.vendor_name == vendor,
            Order.status == OPEN_ORDER_STATUS,
        )
        .order_by(Order.created_at)
        .first()
    )


def match_order(session: Session, project_id: str, vendor) -> Optional[Order]:
    """
    Return the open order ``vendor``'s items belong to, creating it if
    needed, or None when no vendor is given.
    """
    vendor = normalize_vendor(vendor)
    if not vendor:
        return None

    order = find_open_order(session, project_id, vendor)
    if order is not None:
        return order

    try:
        with session.begin_nested():
            order = Order(
                project_id=project_id,
                vendor_name=vendor,
                status=OPEN_ORDER_STATUS,
            )
            session.add(order)
            session.flush()
    except IntegrityError:
        order = find_open_order(session, project_id, vendor)
        if order is None:
            raise
        logger.info("Open order for %r created concurrently; reusing %s",
                    vendor, order.id)
        return order

    logger.info("Opened new order %s for vendor %r in project %s",
                order.id, vendor, project_id)
    return order
