from bson import ObjectId
from bson.errors import InvalidId


def to_object_id(value) -> ObjectId | None:
    """Convert a string id to an ObjectId, or None when it is not a valid one."""
    if value is None:
        return None
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        return None
