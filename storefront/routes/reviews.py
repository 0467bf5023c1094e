"""
Product review routes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, Response

from ..config.database import get_database
from ..schemas import CreateReviewRequest, ReviewResponse, UpdateReviewRequest
from ..utils.auth import get_current_user
from ..utils.dependencies import (
    Pagination,
    ensure_owner_or_admin,
    get_document_or_404,
    get_pagination,
    validate_object_id,
)
from ..utils.populate import populate
from ..utils.serializers import public_profile, serialize_doc, serialize_docs, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reviews", tags=["Reviews"])


async def _with_author(db, reviews: List[dict]) -> List[dict]:
    return await populate(db, reviews, "user", "users", transform=public_profile)


@router.post("", status_code=201, response_model=ReviewResponse)
async def create_review(review: CreateReviewRequest, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Review a product as the logged-in user"""
    try:
        product = await get_document_or_404(db, "products", review.product, "Product")

        now = utcnow()
        result = await db.reviews.insert_one({
            "user": current_user["_id"],
            "product": product["_id"],
            "rating": review.rating,
            "comment": review.comment,
            "created_at": now,
            "updated_at": now
        })
        created = await db.reviews.find_one({"_id": result.inserted_id})
        await _with_author(db, [created])

        logger.info(f"Review {result.inserted_id} added to product {review.product}")
        return serialize_doc(created)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create review: {str(e)}")
        raise HTTPException(status_code=500, detail="Error posting review, please try again later")


@router.get("/product/{product_id}", status_code=200, response_model=List[ReviewResponse])
async def get_product_reviews(
    product_id: str,
    response: Response,
    pagination: Pagination = Depends(get_pagination),
    db=Depends(get_database)
):
    """List reviews of a product, newest first"""
    try:
        filter_query = {"product": validate_object_id(product_id, "product")}

        total_count = await db.reviews.count_documents(filter_query)

        cursor = db.reviews.find(
            filter_query, sort=[("created_at", -1), ("_id", -1)], skip=pagination.skip, limit=pagination.limit
        )
        reviews = await cursor.to_list(length=pagination.limit)
        await _with_author(db, reviews)

        response.headers["X-Total-Count"] = str(total_count)
        return serialize_docs(reviews)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch reviews for product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error getting reviews for this product, please try again later")


@router.patch("/{review_id}", status_code=200, response_model=ReviewResponse)
async def update_review(
    review_id: str,
    review_update: UpdateReviewRequest,
    current_user=Depends(get_current_user),
    db=Depends(get_database)
):
    """Edit a review"""
    try:
        review = await get_document_or_404(db, "reviews", review_id, "Review")
        ensure_owner_or_admin(current_user, review["user"])

        update_doc = review_update.model_dump(exclude_none=True)
        update_doc["updated_at"] = utcnow()
        await db.reviews.update_one({"_id": review["_id"]}, {"$set": update_doc})

        updated = await db.reviews.find_one({"_id": review["_id"]})
        await _with_author(db, [updated])

        return serialize_doc(updated)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update review {review_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error updating review, please try again later")


@router.delete("/{review_id}", status_code=200, response_model=ReviewResponse)
async def delete_review(review_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Delete a review"""
    try:
        review = await get_document_or_404(db, "reviews", review_id, "Review")
        ensure_owner_or_admin(current_user, review["user"])

        await db.reviews.delete_one({"_id": review["_id"]})

        return serialize_doc(review)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete review {review_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error deleting review, please try again later")
