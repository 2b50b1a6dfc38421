"""
Order routes: placing orders, the admin order list, status/transaction
updates and the buyer's own order history.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pymongo.database import Database

from database import (
    create_document,
    delete_document,
    get_db,
    get_document,
    get_documents,
    parse_object_id,
    serialize_doc,
    update_document,
)
from errors import NotFoundError
from schemas import Order, OrderCreate, OrderPatch, normalize_email

router = APIRouter(tags=["orders"])

COLLECTION = "order"


@router.post("/order", status_code=status.HTTP_201_CREATED)
def place_order(body: OrderCreate, db: Database = Depends(get_db)):
    # status is server-controlled on placement
    order = Order(**body.model_dump())
    doc = create_document(db, COLLECTION, order)
    return serialize_doc(doc)


@router.get("/orders")
def list_orders(db: Database = Depends(get_db)):
    orders = get_documents(db, COLLECTION)
    return {"success": True, "orders": [serialize_doc(o) for o in orders]}


@router.get("/orders/{order_id}")
def get_order(order_id: str, db: Database = Depends(get_db)):
    oid = parse_object_id(order_id, "order")
    doc = get_document(db, COLLECTION, oid)
    if not doc:
        raise NotFoundError("Order", order_id)
    return {"success": True, "order": serialize_doc(doc)}


@router.patch("/orders/{order_id}")
def patch_order(order_id: str, body: OrderPatch, db: Database = Depends(get_db)):
    """Set status and/or transactionId. Any listed status may follow any other."""
    oid = parse_object_id(order_id, "order")
    doc = update_document(db, COLLECTION, oid, body.changes())
    if not doc:
        raise NotFoundError("Order", order_id)
    return {"success": True, "order": serialize_doc(doc)}


@router.delete("/orders/{order_id}")
def delete_order(order_id: str, db: Database = Depends(get_db)):
    oid = parse_object_id(order_id, "order")
    doc = delete_document(db, COLLECTION, oid)
    if not doc:
        raise NotFoundError("Order", order_id)
    return {"success": True, "message": "Order deleted successfully", "deletedOrder": serialize_doc(doc)}


@router.get("/my-orders")
def my_orders(email: Optional[str] = Query(None), db: Database = Depends(get_db)):
    orders = get_documents(db, COLLECTION, {"buyerEmail": normalize_email(email)})
    # 404 on an empty history, unlike /orders
    if not orders:
        raise NotFoundError("Order", message="No orders found for this email")
    return {"success": True, "orders": [serialize_doc(o) for o in orders]}
