"""
Brand and category routes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import DuplicateKeyError

from ..config.database import get_database
from ..schemas import BrandResponse, CategoryResponse, CreateBrandRequest, CreateCategoryRequest
from ..utils.auth import require_admin
from ..utils.serializers import serialize_doc, serialize_docs

logger = logging.getLogger(__name__)

brands_router = APIRouter(prefix="/brands", tags=["Brands"])
categories_router = APIRouter(prefix="/categories", tags=["Categories"])


async def _list_names(db, collection: str) -> list:
    return serialize_docs(await db[collection].find({}, sort=[("name", 1)]).to_list(length=None))


async def _create_named(db, collection: str, resource_name: str, name: str) -> dict:
    if await db[collection].find_one({"name": name}):
        raise HTTPException(status_code=400, detail=f"{resource_name} already exists")
    try:
        result = await db[collection].insert_one({"name": name})
    except DuplicateKeyError:
        raise HTTPException(status_code=400, detail=f"{resource_name} already exists")

    logger.info(f"{resource_name} created: {name} (ID: {result.inserted_id})")
    return serialize_doc(await db[collection].find_one({"_id": result.inserted_id}))


@brands_router.get("", status_code=200, response_model=List[BrandResponse])
async def list_brands(db=Depends(get_database)):
    """List all brands"""
    try:
        return await _list_names(db, "brands")
    except Exception as e:
        logger.error(f"Failed to fetch brands: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching brands")


@brands_router.post("", status_code=201, response_model=BrandResponse)
async def create_brand(brand: CreateBrandRequest, admin=Depends(require_admin), db=Depends(get_database)):
    """Create a brand"""
    try:
        return await _create_named(db, "brands", "Brand", brand.name)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create brand: {str(e)}")
        raise HTTPException(status_code=500, detail="Error creating brand")


@categories_router.get("", status_code=200, response_model=List[CategoryResponse])
async def list_categories(db=Depends(get_database)):
    """List all categories"""
    try:
        return await _list_names(db, "categories")
    except Exception as e:
        logger.error(f"Failed to fetch categories: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching categories")


@categories_router.post("", status_code=201, response_model=CategoryResponse)
async def create_category(category: CreateCategoryRequest, admin=Depends(require_admin), db=Depends(get_database)):
    """Create a category"""
    try:
        return await _create_named(db, "categories", "Category", category.name)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to create category: {str(e)}")
        raise HTTPException(status_code=500, detail="Error creating category")
