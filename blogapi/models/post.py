from datetime import datetime, timezone

from blogapi.models.user import serialize_user


def new_post(title: str, image_url: str, content: str, creator_id) -> dict:
    return {
        "title": title,
        "imageUrl": image_url,
        "content": content,
        "creator": creator_id,
    }


def to_iso(value: datetime) -> str:
    # Mongo devuelve fechas sin zona horaria, siempre en UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def serialize_post(post: dict) -> dict:
    """Outbound shape of a post.

    ``creator`` is the serialized user when the reference was populated and
    the creator id as a string otherwise.
    """
    creator = post["creator"]
    if isinstance(creator, dict):
        creator = serialize_user(creator)
    else:
        creator = str(creator)
    return {
        "_id": str(post["_id"]),
        "title": post["title"],
        "imageUrl": post["imageUrl"],
        "content": post["content"],
        "creator": creator,
        "createdAt": to_iso(post["createdAt"]),
        "updatedAt": to_iso(post["updatedAt"]),
    }
