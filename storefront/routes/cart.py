"""
Shopping cart routes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config.database import get_database
from ..schemas import AddToCartRequest, CartItemResponse, UpdateCartItemRequest
from ..utils.auth import get_current_user
from ..utils.dependencies import ensure_owner_or_admin, get_document_or_404, validate_object_id
from ..utils.populate import populate_products
from ..utils.serializers import serialize_doc, serialize_docs, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/cart", tags=["Cart"])


async def _get_own_line(db, cart_id: str, current_user) -> dict:
    line = await get_document_or_404(db, "carts", cart_id, "Cart item")
    ensure_owner_or_admin(current_user, line["user"])
    return line


@router.post("", status_code=201, response_model=CartItemResponse)
async def add_to_cart(item: AddToCartRequest, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Add a product to the logged-in user's cart"""
    try:
        product = await get_document_or_404(
            db, "products", item.product, "Product", extra_filter={"is_deleted": {"$ne": True}}
        )

        result = await db.carts.insert_one({
            "user": current_user["_id"],
            "product": product["_id"],
            "quantity": item.quantity,
            "created_at": utcnow()
        })
        created = await db.carts.find_one({"_id": result.inserted_id})
        await populate_products(db, [created])

        return serialize_doc(created)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to add product {item.product} to cart: {str(e)}")
        raise HTTPException(status_code=500, detail="Error adding product to cart, please try again later")


@router.get("/user/{user_id}", status_code=200, response_model=List[CartItemResponse])
async def get_user_cart(user_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Get the cart of a specific user"""
    try:
        owner_id = validate_object_id(user_id, "user")
        ensure_owner_or_admin(current_user, owner_id)

        lines = await db.carts.find({"user": owner_id}, sort=[("created_at", 1), ("_id", 1)]).to_list(length=None)
        await populate_products(db, lines)

        return serialize_docs(lines)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch cart for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching cart items, please try again later")


@router.patch("/{cart_id}", status_code=200, response_model=CartItemResponse)
async def update_cart_item(
    cart_id: str,
    item_update: UpdateCartItemRequest,
    current_user=Depends(get_current_user),
    db=Depends(get_database)
):
    """Change the quantity of a cart line"""
    try:
        line = await _get_own_line(db, cart_id, current_user)

        await db.carts.update_one({"_id": line["_id"]}, {"$set": {"quantity": item_update.quantity}})
        updated = await db.carts.find_one({"_id": line["_id"]})
        await populate_products(db, [updated])

        return serialize_doc(updated)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update cart item {cart_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error updating cart items, please try again later")


@router.delete("/user/{user_id}", status_code=204)
async def clear_user_cart(user_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Remove every line of a user's cart"""
    try:
        owner_id = validate_object_id(user_id, "user")
        ensure_owner_or_admin(current_user, owner_id)

        result = await db.carts.delete_many({"user": owner_id})
        logger.info(f"Cart cleared for user {user_id} ({result.deleted_count} items)")
        return Response(status_code=204)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to clear cart for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Some error occurred while resetting your cart")


@router.delete("/{cart_id}", status_code=200, response_model=CartItemResponse)
async def delete_cart_item(cart_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Remove one line from a cart"""
    try:
        line = await _get_own_line(db, cart_id, current_user)

        await db.carts.delete_one({"_id": line["_id"]})

        return serialize_doc(line)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete cart item {cart_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error deleting cart item, please try again later")
