class ApiError(Exception):
    """Error with an HTTP-like status code and optional field-level details."""

    status_code = 500

    def __init__(self, message: str, data: list[dict] | None = None):
        super().__init__(message)
        self.message = message
        self.data = data

    def to_dict(self) -> dict:
        return {"message": self.message, "status": self.status_code, "data": self.data}


class InvalidInput(ApiError):
    status_code = 422


class Conflict(ApiError):
    status_code = 422


class NotFound(ApiError):
    status_code = 404


class NotAuthenticated(ApiError):
    status_code = 401


class NotAuthorized(ApiError):
    status_code = 403
