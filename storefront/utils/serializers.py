"""
MongoDB document serialization utilities
"""
from datetime import datetime, timezone
from typing import Dict, Any, List, Optional
from bson import ObjectId


SANITIZED_USER_FIELDS = ("_id", "email", "is_verified", "is_admin")
PUBLIC_PROFILE_FIELDS = ("_id", "name")


def utcnow() -> datetime:
    """Naive UTC timestamp, matching what pymongo hands back from the database."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def serialize_doc(doc: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """
    Convert ObjectIds to strings and mark stored timestamps as UTC

    Args:
        doc: MongoDB document dictionary, possibly with populated references

    Returns:
        Serialized copy of the document, or None if input is None
    """
    if doc is None:
        return None

    # convert_object_ids builds new containers, the input stays untouched
    return convert_object_ids(doc)


def serialize_docs(docs: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    Serialize a list of MongoDB documents

    Args:
        docs: List of MongoDB document dictionaries

    Returns:
        List of serialized documents
    """
    return [serialize_doc(doc) for doc in docs if doc is not None]


def convert_object_ids(doc: Any) -> Any:
    """
    Recursively convert ObjectId instances to strings in a document
    Naive datetimes come back from MongoDB in UTC and get that offset attached

    Args:
        doc: Document that may contain ObjectIds at any level

    Returns:
        Document with all ObjectIds converted to strings and timezone-aware datetimes
    """
    if isinstance(doc, dict):
        return {key: convert_object_ids(value) for key, value in doc.items()}
    elif isinstance(doc, list):
        return [convert_object_ids(item) for item in doc]
    elif isinstance(doc, ObjectId):
        return str(doc)
    elif isinstance(doc, datetime) and doc.tzinfo is None:
        return doc.replace(tzinfo=timezone.utc)
    else:
        return doc


def sanitize_user(user: Dict[str, Any]) -> Dict[str, Any]:
    """
    Reduce a user document to the fields that are safe to put in a token
    or hand to the client after authentication.
    """
    return serialize_doc({field: user.get(field) for field in SANITIZED_USER_FIELDS})


def user_profile(user: Dict[str, Any]) -> Dict[str, Any]:
    """Full user document without the password hash."""
    return serialize_doc({key: value for key, value in user.items() if key != "password"})


def public_profile(user: Optional[Dict[str, Any]]) -> Optional[Dict[str, Any]]:
    """Name-only view of a user, shown next to reviews."""
    if user is None:
        return None
    return {field: user.get(field) for field in PUBLIC_PROFILE_FIELDS}
