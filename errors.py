"""Request errors, each mapped to one HTTP status and a JSON ``{"error": ...}`` body."""


class ViewerError(Exception):
    status = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {"error": self.message}


class InvalidRequest(ViewerError):
    """Missing or malformed query parameter, or a path that is not a file."""
    status = 400


class Forbidden(ViewerError):
    """Path escapes the workspace root or is hidden by the visibility policy."""
    status = 403

    def __init__(self, message: str = "forbidden"):
        super().__init__(message)


class NotFound(ViewerError):
    status = 404

    def __init__(self, message: str = "file not found"):
        super().__init__(message)


class UnsupportedType(ViewerError):
    status = 400

    def __init__(self, message: str = "unsupported file type"):
        super().__init__(message)


class InternalFailure(ViewerError):
    status = 500
