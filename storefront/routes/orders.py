"""
Order routes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config.database import get_database
from ..schemas import CreateOrderRequest, OrderResponse, UpdateOrderStatusRequest
from ..schemas.order import CANCELLED
from ..utils.auth import get_current_user, require_admin
from ..utils.dependencies import (
    Pagination,
    ensure_owner_or_admin,
    get_document_or_404,
    get_pagination,
    validate_object_id,
    verify_products_exist,
)
from ..utils.serializers import serialize_doc, serialize_docs, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/orders", tags=["Orders"])

ADDRESS_SNAPSHOT_FIELDS = ("street", "city", "state", "phone_number", "postal_code", "country", "type")


async def _release_stock(db, items: List[dict], now) -> None:
    for item in items:
        await db.products.update_one(
            {"_id": item["product"]},
            {
                "$inc": {"stock_quantity": item["quantity"]},
                "$set": {"updated_at": now}
            }
        )


async def _reserve_stock(db, items: List[dict], now) -> None:
    """
    Decrement stock for every item, or for none of them.

    Each decrement only matches while enough stock is left, so concurrent
    checkouts cannot drive a product below zero.

    Raises:
        HTTPException: 400 if a product ran out of stock in the meantime
    """
    reserved = []
    for item in items:
        result = await db.products.update_one(
            {"_id": item["product"], "stock_quantity": {"$gte": item["quantity"]}},
            {
                "$inc": {"stock_quantity": -item["quantity"]},
                "$set": {"updated_at": now}
            }
        )
        if result.matched_count == 0:
            await _release_stock(db, reserved, now)
            raise HTTPException(
                status_code=400,
                detail=f"Insufficient stock for product {item['product']}"
            )
        reserved.append(item)


@router.post("", status_code=201, response_model=OrderResponse)
async def create_order(order: CreateOrderRequest, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Place an order for the logged-in user"""
    try:
        address = await get_document_or_404(
            db, "addresses", order.address, "Address", extra_filter={"user": current_user["_id"]}
        )
        products = await verify_products_exist([item.product for item in order.items], db)

        total = 0.0
        order_items = []

        for item in order.items:
            product = products[item.product]

            if product["stock_quantity"] < item.quantity:
                raise HTTPException(
                    status_code=400,
                    detail=f"Insufficient stock for product {item.product}. Available: {product['stock_quantity']}, Requested: {item.quantity}"
                )

            item_total = product["price"] * item.quantity
            total += item_total

            order_items.append({
                "product": product["_id"],
                "title": product["title"],
                "thumbnail": product.get("thumbnail"),
                "price": product["price"],
                "quantity": item.quantity,
                "total_price": item_total
            })

        now = utcnow()
        await _reserve_stock(db, order_items, now)

        order_doc = {
            "user": current_user["_id"],
            "items": order_items,
            "address": {field: address.get(field) for field in ADDRESS_SNAPSHOT_FIELDS},
            "status": "Pending",
            "payment_mode": order.payment_mode,
            "total": round(total, 2),
            "created_at": now,
            "updated_at": now
        }

        try:
            result = await db.orders.insert_one(order_doc)
        except Exception:
            await _release_stock(db, order_items, utcnow())
            raise

        created_order = await db.orders.find_one({"_id": result.inserted_id})

        logger.info(f"Order created: {result.inserted_id} for user {current_user['_id']}")
        return serialize_doc(created_order)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create order: {str(e)}")
        raise HTTPException(status_code=500, detail="Error creating an order, please try again later")


@router.get("", status_code=200, response_model=List[OrderResponse])
async def list_orders(
    response: Response,
    pagination: Pagination = Depends(get_pagination),
    admin=Depends(require_admin),
    db=Depends(get_database)
):
    """List every order, newest first"""
    try:
        total_count = await db.orders.count_documents({})

        cursor = db.orders.find(
            {}, sort=[("created_at", -1), ("_id", -1)], skip=pagination.skip, limit=pagination.limit
        )
        orders = await cursor.to_list(length=pagination.limit)

        response.headers["X-Total-Count"] = str(total_count)
        return serialize_docs(orders)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch orders: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching orders, please try again later")


@router.get("/user/{user_id}", status_code=200, response_model=List[OrderResponse])
async def get_user_orders(user_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Get the orders of a specific user, newest first"""
    try:
        owner_id = validate_object_id(user_id, "user")
        ensure_owner_or_admin(current_user, owner_id)

        cursor = db.orders.find({"user": owner_id}, sort=[("created_at", -1), ("_id", -1)])
        orders = await cursor.to_list(length=None)

        return serialize_docs(orders)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch orders for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching orders, please try again later")


@router.patch("/{order_id}", status_code=200, response_model=OrderResponse)
async def update_order_status(
    order_id: str,
    status_update: UpdateOrderStatusRequest,
    current_user=Depends(get_current_user),
    db=Depends(get_database)
):
    """Update order status. Customers may only cancel their own orders."""
    try:
        order = await get_document_or_404(db, "orders", order_id, "Order")
        ensure_owner_or_admin(current_user, order["user"])

        if not current_user.get("is_admin"):
            if status_update.status != CANCELLED:
                raise HTTPException(status_code=403, detail="Only administrators can change the order status")
            if order["status"] != "Pending":
                raise HTTPException(status_code=400, detail=f"An order that is {order['status']} cannot be cancelled")

        # Cancelled is terminal, stock was restored when it got there
        if order["status"] == CANCELLED:
            raise HTTPException(status_code=400, detail="A cancelled order cannot be changed")

        now = utcnow()
        result = await db.orders.update_one(
            {"_id": order["_id"], "status": order["status"]},
            {
                "$set": {
                    "status": status_update.status,
                    "updated_at": now
                }
            }
        )
        if result.matched_count == 0:
            raise HTTPException(status_code=409, detail="Order was updated concurrently, please try again")

        if status_update.status == CANCELLED:
            await _release_stock(db, order["items"], now)
            logger.info(f"Stock restored for cancelled order {order_id}")

        updated_order = await db.orders.find_one({"_id": order["_id"]})

        logger.info(f"Order status updated: {order_id} -> {status_update.status}")
        return serialize_doc(updated_order)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update order status {order_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error updating order, please try again later")
