"""
Resolve ObjectId references into the documents they point at
"""
from typing import Any, Callable, Dict, List, Optional

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase


async def populate(
    db: AsyncIOMotorDatabase,
    docs: List[Dict[str, Any]],
    field: str,
    collection: str,
    transform: Optional[Callable[[Dict[str, Any]], Any]] = None,
) -> List[Dict[str, Any]]:
    """
    Replace ``doc[field]`` with the referenced document, in place

    All references are fetched with a single ``$in`` query. A reference to
    a missing document becomes None.

    Args:
        db: Database instance
        docs: Documents holding the reference
        field: Name of the reference field
        collection: Collection the reference points into
        transform: Optional function applied to every fetched document

    Returns:
        The same list of documents
    """
    ref_ids = {doc[field] for doc in docs if isinstance(doc.get(field), ObjectId)}
    if not ref_ids:
        return docs

    cursor = db[collection].find({"_id": {"$in": list(ref_ids)}})
    referenced = {ref["_id"]: ref for ref in await cursor.to_list(length=None)}

    for doc in docs:
        if not isinstance(doc.get(field), ObjectId):
            continue
        ref = referenced.get(doc[field])
        if ref is not None and transform is not None:
            ref = transform(ref)
        doc[field] = ref

    return docs


async def populate_one(
    db: AsyncIOMotorDatabase,
    doc: Dict[str, Any],
    field: str,
    collection: str,
    transform: Optional[Callable[[Dict[str, Any]], Any]] = None,
) -> Dict[str, Any]:
    await populate(db, [doc], field, collection, transform)
    return doc


async def populate_products(
    db: AsyncIOMotorDatabase,
    docs: List[Dict[str, Any]],
    field: str = "product",
) -> List[Dict[str, Any]]:
    """Populate a product reference and the brand of every product found."""
    await populate(db, docs, field, "products")
    # Several lines may share one product document
    products = list({id(doc[field]): doc[field] for doc in docs if isinstance(doc.get(field), dict)}.values())
    await populate(db, products, "brand", "brands")
    return docs
