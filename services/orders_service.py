"""
services.orders_service - Orders and order items.

Orders are normally provisioned by services.order_matcher as a side
effect of adding an item; users then edit them (status, costs,
purchaser) and may delete them once empty.

All session management is the caller's responsibility.
"""

from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from db.models import Order, OrderItem
from schema.statuses import OPEN_ORDER_STATUS, is_order_status
from services.errors import Conflict, NotFound, StructuralError, ValidationError
from services.field_parsing import (
    optional_text, parse_date, parse_money, parse_quantity,
)
from services.order_matcher import find_open_order, match_order
from services.projects_service import ProjectsService

logger = logging.getLogger(__name__)


class OrdersService:

    # ── Read ───────────────────────────────────────────────────────────

    @staticmethod
    def get(session: Session, order_id: str) -> Order:
        order = session.get(Order, order_id)
        if order is None:
            raise NotFound("Order not found")
        return order

    @staticmethod
    def list_for_project(
        session: Session, project_id: str, status: str | None = None
    ) -> list[Order]:
        q = session.query(Order).filter(Order.project_id == project_id)
        if status:
            if not is_order_status(status):
                raise ValidationError("Invalid order status")
            q = q.filter(Order.status == status)
        return q.order_by(Order.vendor_name, Order.ordered_at).all()

    @staticmethod
    def list_all(
        session: Session,
        project_id: str,
        vendor: str | None = None,
        purchaser: str | None = None,
    ) -> list[Order]:
        """Every order of the project, newest first, optionally filtered."""
        q = session.query(Order).filter(Order.project_id == project_id)
        if vendor:
            q = q.filter(Order.vendor_name == vendor)
        if purchaser:
            q = q.filter(Order.paid_for_by == purchaser)
        return q.order_by(
            Order.ordered_at.desc(), Order.vendor_name, Order.created_at,
        ).all()

    @staticmethod
    def vendors(session: Session) -> list[str]:
        rows = (
            session.query(Order.vendor_name)
            .distinct()
            .order_by(Order.vendor_name)
            .all()
        )
        return [r[0] for r in rows if r[0]]

    # ── Update ─────────────────────────────────────────────────────────

    @staticmethod
    def update(session: Session, order: Order, data: dict) -> Order:
        if data.get("status"):
            status = data["status"]
            if not is_order_status(status):
                raise ValidationError("Invalid order status")
            if status == OPEN_ORDER_STATUS and order.status != OPEN_ORDER_STATUS:
                other = find_open_order(session, order.project_id, order.vendor_name)
                if other is not None and other.id != order.id:
                    raise Conflict(
                        f"An open order for {order.vendor_name} already exists"
                    )
            order.status = status
        if "orderedAt" in data:
            order.ordered_at = parse_date(data["orderedAt"], "Ordered date")
        if "paidForBy" in data:
            order.paid_for_by = optional_text(data["paidForBy"])
        if "taxCost" in data:
            order.tax_cost = parse_money(data["taxCost"], "Tax cost")
        if "shippingCost" in data:
            order.shipping_cost = parse_money(data["shippingCost"], "Shipping cost")
        if data.get("notes") is not None:
            order.notes = str(data["notes"])
        if isinstance(data.get("reimbursed"), bool):
            order.reimbursed = data["reimbursed"]

        session.flush()
        return order

    # ── Delete ─────────────────────────────────────────────────────────

    @staticmethod
    def delete(session: Session, order: Order) -> None:
        has_items = session.query(OrderItem.id).filter(
            OrderItem.order_id == order.id
        ).first() is not None
        if has_items:
            logger.warning("Refused to delete order %s: it has items", order.id)
            raise StructuralError("Can't delete a non-empty order")
        session.delete(order)
        session.flush()
        logger.info("Deleted order %s (%s)", order.id, order.vendor_name)


class OrderItemsService:

    @staticmethod
    def get(session: Session, item_id: str) -> OrderItem:
        item = session.get(OrderItem, item_id)
        if item is None:
            raise NotFound("Order item not found")
        return item

    @staticmethod
    def unclassified(session: Session, project_id: str) -> list[OrderItem]:
        return (
            session.query(OrderItem)
            .filter(
                OrderItem.project_id == project_id,
                OrderItem.order_id.is_(None),
            )
            .order_by(OrderItem.created_at)
            .all()
        )

    @staticmethod
    def create(session: Session, project_id: str, data: dict) -> OrderItem:
        """
        Add a line item.  A non-empty ``vendor`` routes it to that vendor's
        open order (created on demand); no vendor leaves it unclassified.
        The order and the item are written in the caller's transaction.
        """
        quantity = parse_quantity(data.get("quantity"))
        unit_cost = parse_money(data.get("unitCost"), "Unit cost")

        project = ProjectsService.lock(session, project_id)
        order = match_order(session, project.id, data.get("vendor"))

        item = OrderItem(
            project_id=project.id,
            order=order,
            quantity=quantity,
            part_number=str(data.get("partNumber") or ""),
            description=str(data.get("description") or ""),
            unit_cost=unit_cost,
            notes=str(data.get("notes") or ""),
        )
        session.add(item)
        session.flush()
        logger.info("Added order item %s to %s", item.id,
                    f"order {order.id}" if order else "unclassified")
        return item

    @staticmethod
    def update(session: Session, item: OrderItem, data: dict) -> OrderItem:
        """
        Edit an item.  When ``vendor`` is present the item is re-routed;
        its previous order is left as is, even if now empty.
        """
        if "vendor" in data:
            ProjectsService.lock(session, item.project_id)
            item.order = match_order(session, item.project_id, data["vendor"])

        if "quantity" in data:
            item.quantity = parse_quantity(data["quantity"])
        if data.get("partNumber") is not None:
            item.part_number = str(data["partNumber"])
        if data.get("description") is not None:
            item.description = str(data["description"])
        if "unitCost" in data:
            item.unit_cost = parse_money(data["unitCost"], "Unit cost")
        if data.get("notes") is not None:
            item.notes = str(data["notes"])

        session.flush()
        return item

    @staticmethod
    def delete(session: Session, item: OrderItem) -> None:
        order = item.order
        session.delete(item)
        session.flush()
        if order is not None:
            session.expire(order, ["items"])
