"""
api.routes_orders - Orders, order items, vendor list and spending stats.
"""

from flask import jsonify, request

from api import api_bp, json_body
from api.auth import editor_required
from db import get_session
from services.order_stats import project_stats
from services.orders_service import OrderItemsService, OrdersService
from services.projects_service import ProjectsService


# ── Orders ─────────────────────────────────────────────────────────────

@api_bp.route("/projects/<project_id>/orders")
def list_orders(project_id: str):
    """GET /api/projects/{id}/orders?status=open|ordered|received"""
    status = request.args.get("status", "").strip() or None
    session = get_session()
    try:
        ProjectsService.get(session, project_id)
        orders = OrdersService.list_for_project(session, project_id, status)
        return jsonify([o.to_dict() for o in orders])
    finally:
        session.close()


@api_bp.route("/projects/<project_id>/orders/all")
def list_all_orders(project_id: str):
    """GET /api/projects/{id}/orders/all?vendor=&purchaser="""
    vendor = request.args.get("vendor", "").strip() or None
    purchaser = request.args.get("purchaser", "").strip() or None
    session = get_session()
    try:
        ProjectsService.get(session, project_id)
        orders = OrdersService.list_all(session, project_id, vendor, purchaser)
        return jsonify([o.to_dict() for o in orders])
    finally:
        session.close()


@api_bp.route("/projects/<project_id>/orders/stats")
def order_stats(project_id: str):
    """GET /api/projects/{id}/orders/stats → {byVendor, byPurchaser}"""
    session = get_session()
    try:
        ProjectsService.get(session, project_id)
        return jsonify(project_stats(session, project_id))
    finally:
        session.close()


@api_bp.route("/orders/<order_id>")
def get_order(order_id: str):
    session = get_session()
    try:
        order = OrdersService.get(session, order_id)
        d = order.to_dict()
        d["project"] = order.project.to_dict()
        return jsonify(d)
    finally:
        session.close()


@api_bp.route("/orders/<order_id>", methods=["PUT"])
@editor_required
def update_order(order_id: str):
    """
    PUT /api/orders/{id}
    {status?, orderedAt?, paidForBy?, taxCost?, shippingCost?, notes?, reimbursed?}
    """
    data = json_body()
    session = get_session()
    try:
        order = OrdersService.get(session, order_id)
        OrdersService.update(session, order, data)
        session.commit()
        return jsonify(order.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/orders/<order_id>", methods=["DELETE"])
@editor_required
def delete_order(order_id: str):
    """DELETE /api/orders/{id}  (refused while the order has items)"""
    session = get_session()
    try:
        OrdersService.delete(session, OrdersService.get(session, order_id))
        session.commit()
        return "", 204
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── Order items ────────────────────────────────────────────────────────

@api_bp.route("/projects/<project_id>/order-items/unclassified")
def unclassified_items(project_id: str):
    session = get_session()
    try:
        ProjectsService.get(session, project_id)
        items = OrderItemsService.unclassified(session, project_id)
        return jsonify([i.to_dict() for i in items])
    finally:
        session.close()


@api_bp.route("/projects/<project_id>/order-items", methods=["POST"])
@editor_required
def create_order_item(project_id: str):
    """
    POST /api/projects/{id}/order-items
    {vendor?, quantity?, partNumber?, description?, unitCost?, notes?}
    """
    data = json_body()
    session = get_session()
    try:
        item = OrderItemsService.create(session, project_id, data)
        session.commit()
        return jsonify(item.to_dict()), 201
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/order-items/<item_id>", methods=["PUT"])
@editor_required
def update_order_item(item_id: str):
    data = json_body()
    session = get_session()
    try:
        item = OrderItemsService.get(session, item_id)
        OrderItemsService.update(session, item, data)
        session.commit()
        return jsonify(item.to_dict())
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@api_bp.route("/order-items/<item_id>", methods=["DELETE"])
@editor_required
def delete_order_item(item_id: str):
    session = get_session()
    try:
        OrderItemsService.delete(session, OrderItemsService.get(session, item_id))
        session.commit()
        return "", 204
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# ── Vendors ────────────────────────────────────────────────────────────

@api_bp.route("/vendors")
def list_vendors():
    """Distinct vendor names across all projects, for autocomplete."""
    session = get_session()
    try:
        return jsonify(OrdersService.vendors(session))
    finally:
        session.close()
