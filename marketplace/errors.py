from flask import jsonify
from werkzeug.exceptions import HTTPException


class ApiError(Exception):
    status_code = 500
    code = "unexpected"
    default_message = "Something went wrong!"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self):
        return {"message": self.message, "error": self.code}


class Unauthenticated(ApiError):
    status_code = 401
    code = "unauthenticated"
    default_message = "Not authorized, token failed"


class WrongRole(ApiError):
    status_code = 401
    code = "wrong_role"
    default_message = "Not authorized for this role"


class IdentityNotFound(ApiError):
    """The credential is valid but its account was removed after issuance."""

    status_code = 401
    code = "identity_not_found"
    default_message = "Account not found"


class NotVerified(ApiError):
    status_code = 403
    code = "not_verified"
    default_message = (
        "Your seller account is not verified yet. Please wait for admin approval."
    )


class Forbidden(ApiError):
    status_code = 403
    code = "forbidden"
    default_message = "You do not have permission to perform this action."


class NotFound(ApiError):
    status_code = 404
    code = "not_found"
    default_message = "Not found"


class ValidationError(ApiError):
    status_code = 400
    code = "validation_error"
    default_message = "Invalid request"


class Conflict(ApiError):
    status_code = 409
    code = "conflict"
    default_message = "Resource already exists"


class Unexpected(ApiError):
    pass


def register_error_handlers(app):
    @app.errorhandler(ApiError)
    def handle_api_error(error: ApiError):
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(HTTPException)
    def handle_http_error(error: HTTPException):
        return jsonify({"message": error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected_error(error: Exception):
        app.logger.exception("Unhandled error: %s", error)
        return jsonify(Unexpected().to_dict()), 500
