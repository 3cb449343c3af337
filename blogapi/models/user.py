DEFAULT_STATUS = "I am new!"


def new_user(name: str, email: str, password_hash: str) -> dict:
    return {
        "name": name,
        "email": email,
        "password": password_hash,
        "status": DEFAULT_STATUS,
        "posts": [],
    }


def serialize_user(user: dict) -> dict:
    """Outbound shape of a user. The password hash never leaves the server."""
    return {
        "_id": str(user["_id"]),
        "name": user["name"],
        "email": user["email"],
        "password": None,
        "status": user.get("status", DEFAULT_STATUS),
        "posts": [str(post_id) for post_id in user.get("posts", [])],
    }
