"""
Wishlist routes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response
from pymongo.errors import DuplicateKeyError

from ..config.database import get_database
from ..schemas import AddToWishlistRequest, UpdateWishlistItemRequest, WishlistItemResponse
from ..utils.auth import get_current_user
from ..utils.dependencies import (
    Pagination,
    ensure_owner_or_admin,
    get_document_or_404,
    get_pagination,
    validate_object_id,
)
from ..utils.populate import populate_products
from ..utils.serializers import serialize_doc, serialize_docs, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/wishlist", tags=["Wishlist"])


async def _get_own_line(db, wishlist_id: str, current_user) -> dict:
    line = await get_document_or_404(db, "wishlists", wishlist_id, "Wishlist item")
    ensure_owner_or_admin(current_user, line["user"])
    return line


@router.post("", status_code=201, response_model=WishlistItemResponse)
async def add_to_wishlist(item: AddToWishlistRequest, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Add a product to the logged-in user's wishlist"""
    try:
        product = await get_document_or_404(db, "products", item.product, "Product")

        if await db.wishlists.find_one({"user": current_user["_id"], "product": product["_id"]}):
            raise HTTPException(status_code=400, detail="Product is already in your wishlist")

        try:
            result = await db.wishlists.insert_one({
                "user": current_user["_id"],
                "product": product["_id"],
                "note": item.note,
                "created_at": utcnow()
            })
        except DuplicateKeyError:
            raise HTTPException(status_code=400, detail="Product is already in your wishlist")

        created = await db.wishlists.find_one({"_id": result.inserted_id})
        await populate_products(db, [created])

        return serialize_doc(created)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to add product {item.product} to wishlist: {str(e)}")
        raise HTTPException(status_code=500, detail="Error adding product to wishlist, please try again later")


@router.get("/user/{user_id}", status_code=200, response_model=List[WishlistItemResponse])
async def get_user_wishlist(
    user_id: str,
    response: Response,
    pagination: Pagination = Depends(get_pagination),
    current_user=Depends(get_current_user),
    db=Depends(get_database)
):
    """List the wishlist of a user, newest first"""
    try:
        owner_id = validate_object_id(user_id, "user")
        ensure_owner_or_admin(current_user, owner_id)

        filter_query = {"user": owner_id}
        total_count = await db.wishlists.count_documents(filter_query)

        cursor = db.wishlists.find(
            filter_query, sort=[("created_at", -1), ("_id", -1)], skip=pagination.skip, limit=pagination.limit
        )
        lines = await cursor.to_list(length=pagination.limit)
        await populate_products(db, lines)

        response.headers["X-Total-Count"] = str(total_count)
        return serialize_docs(lines)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch wishlist for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching your wishlist, please try again later")


@router.patch("/{wishlist_id}", status_code=200, response_model=WishlistItemResponse)
async def update_wishlist_item(
    wishlist_id: str,
    item_update: UpdateWishlistItemRequest,
    current_user=Depends(get_current_user),
    db=Depends(get_database)
):
    """Change the note of a wishlist line"""
    try:
        line = await _get_own_line(db, wishlist_id, current_user)

        await db.wishlists.update_one({"_id": line["_id"]}, {"$set": {"note": item_update.note}})
        updated = await db.wishlists.find_one({"_id": line["_id"]})
        await populate_products(db, [updated])

        return serialize_doc(updated)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update wishlist item {wishlist_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error updating your wishlist, please try again later")


@router.delete("/{wishlist_id}", status_code=200, response_model=WishlistItemResponse)
async def delete_wishlist_item(wishlist_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Remove a product from a wishlist"""
    try:
        line = await _get_own_line(db, wishlist_id, current_user)

        await db.wishlists.delete_one({"_id": line["_id"]})

        return serialize_doc(line)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete wishlist item {wishlist_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error deleting that product from your wishlist, please try again later")
