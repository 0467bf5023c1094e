"""
FastAPI dependencies for pagination and common validations
"""
from fastapi import HTTPException, Query
from motor.motor_asyncio import AsyncIOMotorDatabase
from bson import ObjectId
from typing import Dict, Any, List, Optional, Union
from dataclasses import dataclass
import logging

from ..config.settings import get_settings

logger = logging.getLogger(__name__)
settings = get_settings()


def validate_object_id(object_id: Union[str, ObjectId], resource_name: str = "resource") -> ObjectId:
    """
    Validate and convert string to ObjectId

    Args:
        object_id: String representation of ObjectId
        resource_name: Name of the resource for error messages

    Returns:
        Valid ObjectId instance

    Raises:
        HTTPException: If ObjectId format is invalid
    """
    if isinstance(object_id, ObjectId):
        return object_id
    if not ObjectId.is_valid(object_id):
        raise HTTPException(
            status_code=400,
            detail=f"Invalid {resource_name} ID format: {object_id}"
        )
    return ObjectId(object_id)


async def get_document_or_404(
    db: AsyncIOMotorDatabase,
    collection: str,
    document_id: Union[str, ObjectId],
    resource_name: str,
    extra_filter: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Fetch a single document by ID

    Args:
        db: Database instance
        collection: Collection name
        document_id: Document ID to look up
        resource_name: Name of the resource for error messages
        extra_filter: Additional conditions the document must satisfy

    Returns:
        The document if found

    Raises:
        HTTPException: If the ID is invalid or the document is not found
    """
    object_id = validate_object_id(document_id, resource_name.lower())

    query = {"_id": object_id}
    if extra_filter:
        query.update(extra_filter)

    document = await db[collection].find_one(query)
    if not document:
        raise HTTPException(
            status_code=404,
            detail=f"{resource_name} not found"
        )

    return document


async def verify_products_exist(product_ids: List[str], db: AsyncIOMotorDatabase) -> Dict[str, Dict[str, Any]]:
    """
    Verify that multiple products exist and are not deleted

    Args:
        product_ids: List of product IDs to verify
        db: Database instance

    Returns:
        Dictionary mapping product_id -> product document

    Raises:
        HTTPException: If any product is not found or has invalid ID format
    """
    object_ids = [validate_object_id(product_id, "product") for product_id in product_ids]

    cursor = db.products.find({"_id": {"$in": object_ids}, "is_deleted": {"$ne": True}})
    found_products = await cursor.to_list(length=None)

    product_map = {str(product["_id"]): product for product in found_products}

    missing_products = sorted(set(product_ids) - set(product_map.keys()))
    if missing_products:
        raise HTTPException(
            status_code=404,
            detail=f"Products not found: {', '.join(missing_products)}"
        )

    return product_map


@dataclass
class Pagination:
    """Page-based pagination resolved from query parameters."""
    page: int
    limit: int

    @property
    def skip(self) -> int:
        return (self.page - 1) * self.limit


def get_pagination(
    page: int = Query(1, ge=1, description="Page number, starting at 1"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Items per page"),
) -> Pagination:
    return Pagination(page=page, limit=limit)


def ensure_owner_or_admin(current_user: Dict[str, Any], owner_id: Union[str, ObjectId, None]) -> None:
    """
    Allow the owner of a resource or an admin through

    Raises:
        HTTPException: 403 if the caller is neither
    """
    if current_user.get("is_admin"):
        return
    if owner_id is None or str(owner_id) != str(current_user["_id"]):
        raise HTTPException(
            status_code=403,
            detail="You are not allowed to access this resource"
        )
