"""
Saved address routes
"""
import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException

from ..config.database import get_database
from ..schemas import AddressResponse, CreateAddressRequest, UpdateAddressRequest
from ..utils.auth import get_current_user
from ..utils.dependencies import ensure_owner_or_admin, get_document_or_404, validate_object_id
from ..utils.serializers import serialize_doc, serialize_docs

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/address", tags=["Addresses"])


@router.post("", status_code=201, response_model=AddressResponse)
async def create_address(address: CreateAddressRequest, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Save an address for the logged-in user"""
    try:
        result = await db.addresses.insert_one({"user": current_user["_id"], **address.model_dump()})
        created = await db.addresses.find_one({"_id": result.inserted_id})
        return serialize_doc(created)

    except Exception as e:
        logger.error(f"Failed to create address: {str(e)}")
        raise HTTPException(status_code=500, detail="Error adding address, please try again later")


@router.get("/user/{user_id}", status_code=200, response_model=List[AddressResponse])
async def get_user_addresses(user_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """List the saved addresses of a user"""
    try:
        owner_id = validate_object_id(user_id, "user")
        ensure_owner_or_admin(current_user, owner_id)

        addresses = await db.addresses.find({"user": owner_id}).to_list(length=None)
        return serialize_docs(addresses)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to fetch addresses for user {user_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error fetching addresses, please try again later")


@router.patch("/{address_id}", status_code=200, response_model=AddressResponse)
async def update_address(
    address_id: str,
    address_update: UpdateAddressRequest,
    current_user=Depends(get_current_user),
    db=Depends(get_database)
):
    """Update a saved address"""
    try:
        address = await get_document_or_404(db, "addresses", address_id, "Address")
        ensure_owner_or_admin(current_user, address["user"])

        update_doc = address_update.model_dump(exclude_none=True)
        if update_doc:
            await db.addresses.update_one({"_id": address["_id"]}, {"$set": update_doc})

        updated = await db.addresses.find_one({"_id": address["_id"]})
        return serialize_doc(updated)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to update address {address_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error updating address, please try again later")


@router.delete("/{address_id}", status_code=200, response_model=AddressResponse)
async def delete_address(address_id: str, current_user=Depends(get_current_user), db=Depends(get_database)):
    """Delete a saved address"""
    try:
        address = await get_document_or_404(db, "addresses", address_id, "Address")
        ensure_owner_or_admin(current_user, address["user"])

        await db.addresses.delete_one({"_id": address["_id"]})
        return serialize_doc(address)

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Failed to delete address {address_id}: {str(e)}")
        raise HTTPException(status_code=500, detail="Error deleting address, please try again later")
