from bson import ObjectId
from bson.errors import InvalidId
from fastapi import HTTPException, status


def to_object_id(value: str) -> ObjectId:
    """Parse a path/body id, turning malformed values into a 400."""
    try:
        return ObjectId(value)
    except (InvalidId, TypeError) as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid id") from exc
