from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId
from fastapi.encoders import jsonable_encoder

from src.exceptions import InvalidIdentifier


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """Return the ObjectId for a 24-hex string, or None when it is malformed."""
    if isinstance(value, ObjectId):
        return value
    # ObjectId(None) would mint a new id
    if not isinstance(value, str):
        return None
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None


def require_object_id(value: Any) -> ObjectId:
    object_id = parse_object_id(value)
    if object_id is None:
        raise InvalidIdentifier(f"Invalid ID format: {value}")
    return object_id


def serialize_document(document: Optional[dict]) -> Optional[dict]:
    """Render a Mongo document as JSON-safe data, ObjectIds become strings."""
    if document is None:
        return None
    return jsonable_encoder(document, custom_encoder={ObjectId: str})
