# errors.py — erreurs applicatives (code HTTP + code court pour l'API JSON)


class AppError(Exception):
    status = 500
    code = "error"
    message = "Unexpected error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.message)
        self.message = message or self.message


class InvalidCredentials(AppError):
    status = 401
    code = "invalid_credentials"
    message = "Invalid username or password"


class Unauthorized(AppError):
    status = 403
    code = "unauthorized"
    message = "Unauthorized"


class Forbidden(AppError):
    status = 403
    code = "forbidden"
    message = "Administrator role required"


class NotFound(AppError):
    status = 404
    code = "not_found"
    message = "Not found"


class ValidationError(AppError):
    status = 400
    code = "bad_request"
    message = "Missing or invalid field"


class Conflict(ValidationError):
    status = 409
    code = "conflict"
    message = "Already exists"


class PersistenceError(AppError):
    status = 500
    code = "server_error"
    message = "Internal error, see server logs"


def check_length(value: str, limit: int, label: str) -> None:
    if len(value) > limit:
        raise ValidationError(f"{label} is too long (max {limit} characters)")
