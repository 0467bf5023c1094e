"""
Product catalog routes
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from ..config.database import get_database
from ..schemas import CreateProductRequest, ProductResponse, UpdateProductRequest
from ..utils.auth import require_admin
from ..utils.dependencies import Pagination, get_document_or_404, get_pagination, validate_object_id
from ..utils.populate import populate, populate_one
from ..utils.serializers import serialize_doc, serialize_docs, utcnow

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["Products"])

SORTABLE_FIELDS = {"price", "title", "created_at", "discount_percentage", "stock_quantity"}


async def _check_references(db, brand: Optional[str], category: Optional[str]) -> dict:
    """Resolve brand and category IDs, failing with 404 on unknown ones"""
    references = {}
    if brand is not None:
        references["brand"] = (await get_document_or_404(db, "brands", brand, "Brand"))["_id"]
    if category is not None:
        references["category"] = (await get_document_or_404(db, "categories", category, "Category"))["_id"]
    return references


@router.post("", status_code=201, response_model=ProductResponse)
async def create_product(product: CreateProductRequest, admin=Depends(require_admin), db=Depends(get_database)):
    """Create a new product"""
    try:
        references = await _check_references(db, product.brand, product.category)

        now = utcnow()
        product_doc = {
            **product.model_dump(),
            **references,
            "is_deleted": False,
            "created_at": now,
            "updated_at": now
        }

        result = await db.products.insert_one(product_doc)
        created_product = await db.products.find_one({"_id": result.inserted_id})

        logger.info(f"Product created: {created_product['title']} (ID: {result.inserted_id})")
        return serialize_doc(created_product)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create product: {str(e)}")
        raise HTTPException(status_code=500, detail="Error adding product, please try again later")


@router.get("", status_code=200, response_model=List[ProductResponse])
async def list_products(
    response: Response,
    brand: Optional[List[str]] = Query(None, description="Filter by brand IDs"),
    category: Optional[List[str]] = Query(None, description="Filter by category IDs"),
    sort: Optional[str] = Query(None, description="Field to sort by"),
    order: str = Query("asc", pattern="^(asc|desc)$", description="Sort direction"),
    user: bool = Query(False, description="Hide soft-deleted products"),
    pagination: Pagination = Depends(get_pagination),
    db=Depends(get_database)
):
    """List products with optional filtering, sorting and pagination"""
    try:
        filter_query = {}

        if brand:
            filter_query["brand"] = {"$in": [validate_object_id(b, "brand") for b in brand]}
        if category:
            filter_query["category"] = {"$in": [validate_object_id(c, "category") for c in category]}
        if user:
            filter_query["is_deleted"] = False

        if sort is not None and sort not in SORTABLE_FIELDS:
            raise HTTPException(
                status_code=400,
                detail=f"Cannot sort by {sort}. Sortable fields: {sorted(SORTABLE_FIELDS)}"
            )
        if sort is None:
            sort_order = [("created_at", -1), ("_id", -1)]
        else:
            direction = 1 if order == "asc" else -1
            # _id breaks ties so pages never overlap
            sort_order = [(sort, direction), ("_id", direction)]

        total_count = await db.products.count_documents(filter_query)

        cursor = db.products.find(
            filter_query, sort=sort_order, skip=pagination.skip, limit=pagination.limit
        )
        products = await cursor.to_list(length=pagination.limit)
        await populate(db, products, "brand", "brands")

        response.headers["X-Total-Count"] = str(total_count)
        return serialize_docs(products)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch products: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching products, please try again later")


@router.get("/{product_id}", status_code=200, response_model=ProductResponse)
async def get_product(product_id: str, db=Depends(get_database)):
    """Get a specific product by ID"""
    try:
        product = await get_document_or_404(db, "products", product_id, "Product")
        await populate_one(db, product, "brand", "brands")
        await populate_one(db, product, "category", "categories")
        return serialize_doc(product)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error getting product details, please try again later")


@router.patch("/undelete/{product_id}", status_code=200, response_model=ProductResponse)
async def undelete_product(product_id: str, admin=Depends(require_admin), db=Depends(get_database)):
    """Restore a soft-deleted product"""
    return await _set_deleted(db, product_id, False)


@router.patch("/{product_id}", status_code=200, response_model=ProductResponse)
async def update_product(
    product_id: str,
    product_update: UpdateProductRequest,
    admin=Depends(require_admin),
    db=Depends(get_database)
):
    """Update a product"""
    try:
        product = await get_document_or_404(db, "products", product_id, "Product")

        update_doc = product_update.model_dump(exclude_none=True)
        update_doc.update(await _check_references(db, product_update.brand, product_update.category))
        update_doc["updated_at"] = utcnow()

        await db.products.update_one({"_id": product["_id"]}, {"$set": update_doc})
        updated_product = await db.products.find_one({"_id": product["_id"]})

        logger.info(f"Product updated: {product_id}")
        return serialize_doc(updated_product)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error updating product, please try again later")


@router.delete("/{product_id}", status_code=200, response_model=ProductResponse)
async def delete_product(product_id: str, admin=Depends(require_admin), db=Depends(get_database)):
    """Soft-delete a product"""
    return await _set_deleted(db, product_id, True)


async def _set_deleted(db, product_id: str, is_deleted: bool) -> dict:
    action = "delete" if is_deleted else "restore"
    try:
        product = await get_document_or_404(db, "products", product_id, "Product")

        await db.products.update_one(
            {"_id": product["_id"]},
            {"$set": {"is_deleted": is_deleted, "updated_at": utcnow()}}
        )
        updated_product = await db.products.find_one({"_id": product["_id"]})
        await populate_one(db, updated_product, "brand", "brands")

        logger.info(f"Product {action}d: {product_id}")
        return serialize_doc(updated_product)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to {action} product {product_id}: {str(e)}")
        raise HTTPException(status_code=500, detail=f"Error trying to {action} product, please try again later")
