"""
db.models - SQLAlchemy ORM declarations.

Tables
------
users        - login accounts with a permission level.
projects     - top-level container; owns parts, orders and order items.
parts        - parts and assemblies.  part_number is allocated by
               services.sequence_service and is only unique within
               (project, type, parent scope).
orders       - one vendor purchase.  At most one "open" order per
               (project, vendor), enforced by a partial unique index.
order_items  - order line items.  order_id NULL = unclassified.
settings     - single-row application settings (id is always 1).
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    Boolean, CheckConstraint, Column, Date, DateTime, ForeignKey, Index,
    Integer, Numeric, String, Text, text,
)
from sqlalchemy.orm import DeclarativeBase, relationship

from schema.statuses import (
    DEFAULT_PART_STATUS, DEFAULT_PRIORITY, ORDER_STATUSES, PART_STATUSES,
    PART_TYPES, PERMISSIONS,
)


class Base(DeclarativeBase):
    pass


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _uuid() -> str:
    return str(uuid.uuid4())


def _in(column: str, values) -> str:
    quoted = ", ".join(f"'{v}'" for v in values)
    return f"{column} IN ({quoted})"


def _money(value) -> float:
    return float(value if value is not None else Decimal("0"))


def _iso(value) -> str | None:
    return value.isoformat() if value else None


class User(Base):
    __tablename__ = "users"

    id            = Column(String(36), primary_key=True, default=_uuid)
    email         = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    first_name    = Column(String(255), nullable=False)
    last_name     = Column(String(255), nullable=False)
    permission    = Column(String(20), nullable=False, default="readonly")
    enabled       = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint(_in("permission", PERMISSIONS), name="ck_users_permission"),
    )

    def to_dict(self) -> dict:
        # password_hash never leaves the service layer
        return {
            "id": self.id,
            "email": self.email,
            "first_name": self.first_name,
            "last_name": self.last_name,
            "permission": self.permission,
            "enabled": bool(self.enabled),
            "created_at": _iso(self.created_at),
        }


class Project(Base):
    __tablename__ = "projects"

    id                 = Column(String(36), primary_key=True, default=_uuid)
    name               = Column(String(255), nullable=False)
    part_number_prefix = Column(String(50), nullable=False)
    hide_dashboards    = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    parts = relationship(
        "Part", back_populates="project",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    orders = relationship(
        "Order", back_populates="project",
        cascade="all, delete-orphan", passive_deletes=True,
    )
    order_items = relationship(
        "OrderItem", back_populates="project",
        cascade="all, delete-orphan", passive_deletes=True,
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "part_number_prefix": self.part_number_prefix,
            "hide_dashboards": bool(self.hide_dashboards),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Part(Base):
    __tablename__ = "parts"

    id             = Column(String(36), primary_key=True, default=_uuid)
    project_id     = Column(String(36),
                            ForeignKey("projects.id", ondelete="CASCADE"),
                            nullable=False, index=True)
    part_number    = Column(Integer, nullable=False)
    type           = Column(String(20), nullable=False, index=True)
    name           = Column(String(255), nullable=False)
    parent_part_id = Column(String(36),
                            ForeignKey("parts.id", ondelete="SET NULL"),
                            nullable=True, index=True)
    status         = Column(String(50), nullable=False,
                            default=DEFAULT_PART_STATUS, index=True)
    notes          = Column(Text, default="")

    # ── Material (advisory, not validated) ─────────────────────────────
    source_material = Column(String(255), default="")
    have_material   = Column(Boolean, nullable=False, default=False)
    quantity        = Column(String(50), default="")
    cut_length      = Column(String(50), default="")

    priority        = Column(Integer, nullable=False, default=DEFAULT_PRIORITY)
    drawing_created = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    project = relationship("Project", back_populates="parts")
    parent  = relationship("Part", remote_side=[id])

    __table_args__ = (
        CheckConstraint(_in("type", PART_TYPES), name="ck_parts_type"),
        CheckConstraint(_in("status", PART_STATUSES), name="ck_parts_status"),
        CheckConstraint("priority IN (0, 1, 2)", name="ck_parts_priority"),
        Index("ix_parts_project_type_number", "project_id", "type", "part_number"),
    )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "part_number": self.part_number,
            "type": self.type,
            "name": self.name,
            "parent_part_id": self.parent_part_id,
            "status": self.status,
            "notes": self.notes or "",
            "source_material": self.source_material or "",
            "have_material": bool(self.have_material),
            "quantity": self.quantity or "",
            "cut_length": self.cut_length or "",
            "priority": self.priority,
            "drawing_created": bool(self.drawing_created),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Order(Base):
    __tablename__ = "orders"

    id            = Column(String(36), primary_key=True, default=_uuid)
    project_id    = Column(String(36),
                           ForeignKey("projects.id", ondelete="CASCADE"),
                           nullable=False, index=True)
    vendor_name   = Column(String(255), nullable=False, index=True)
    status        = Column(String(20), nullable=False, default="open", index=True)
    ordered_at    = Column(Date, nullable=True)
    paid_for_by   = Column(String(255), nullable=True)
    tax_cost      = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    shipping_cost = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    notes         = Column(Text, default="")
    reimbursed    = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    project = relationship("Project", back_populates="orders")
    items   = relationship(
        "OrderItem", back_populates="order",
        lazy="selectin", order_by="OrderItem.created_at",
        passive_deletes=True,
    )

    __table_args__ = (
        CheckConstraint(_in("status", ORDER_STATUSES), name="ck_orders_status"),
        CheckConstraint("tax_cost >= 0", name="ck_orders_tax"),
        CheckConstraint("shipping_cost >= 0", name="ck_orders_shipping"),
        # One live "open" bucket per vendor within a project
        Index(
            "uq_orders_open_vendor", "project_id", "vendor_name",
            unique=True,
            sqlite_where=text("status = 'open'"),
            postgresql_where=text("status = 'open'"),
        ),
    )

    @property
    def items_cost(self) -> Decimal:
        return sum((i.line_cost for i in self.items), Decimal("0"))

    @property
    def total_cost(self) -> Decimal:
        return (self.items_cost
                + (self.tax_cost or Decimal("0"))
                + (self.shipping_cost or Decimal("0")))

    def to_dict(self, with_items: bool = True) -> dict:
        d = {
            "id": self.id,
            "project_id": self.project_id,
            "vendor_name": self.vendor_name,
            "status": self.status,
            "ordered_at": _iso(self.ordered_at),
            "paid_for_by": self.paid_for_by,
            "tax_cost": _money(self.tax_cost),
            "shipping_cost": _money(self.shipping_cost),
            "notes": self.notes or "",
            "reimbursed": bool(self.reimbursed),
            "total_cost": _money(self.total_cost),
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }
        if with_items:
            d["order_items"] = [i.to_dict() for i in self.items]
        return d


class OrderItem(Base):
    __tablename__ = "order_items"

    id          = Column(String(36), primary_key=True, default=_uuid)
    project_id  = Column(String(36),
                         ForeignKey("projects.id", ondelete="CASCADE"),
                         nullable=False, index=True)
    order_id    = Column(String(36),
                         ForeignKey("orders.id", ondelete="SET NULL"),
                         nullable=True, index=True)
    quantity    = Column(Integer, nullable=False, default=1)
    part_number = Column(String(255), default="")      # vendor SKU
    description = Column(String(255), default="")
    unit_cost   = Column(Numeric(10, 2), nullable=False, default=Decimal("0"))
    notes       = Column(Text, default="")

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    project = relationship("Project", back_populates="order_items")
    order   = relationship("Order", back_populates="items")

    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity"),
        CheckConstraint("unit_cost >= 0", name="ck_order_items_unit_cost"),
    )

    @property
    def line_cost(self) -> Decimal:
        return (self.unit_cost or Decimal("0")) * (self.quantity or 0)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "project_id": self.project_id,
            "order_id": self.order_id,
            "quantity": self.quantity,
            "part_number": self.part_number or "",
            "description": self.description or "",
            "unit_cost": _money(self.unit_cost),
            "notes": self.notes or "",
            "created_at": _iso(self.created_at),
            "updated_at": _iso(self.updated_at),
        }


class Settings(Base):
    """
    Single-row application settings.  Read once per request via
    services.settings_service and handed to callers as a value.
    """
    __tablename__ = "settings"

    id                 = Column(Integer, primary_key=True, default=1)
    hide_unused_fields = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime, default=_utcnow)
    updated_at = Column(DateTime, default=_utcnow, onupdate=_utcnow)

    __table_args__ = (
        CheckConstraint("id = 1", name="ck_settings_singleton"),
    )

    def to_dict(self) -> dict:
        return {"hide_unused_fields": bool(self.hide_unused_fields)}
