# catalog/errors.py
from pydantic import ValidationError

from .utils.api import err


class DomainError(Exception):
    """Base for every business-rule violation raised by the services."""
    status_code = 400

    def __init__(self, message, data=None):
        super().__init__(message)
        self.message = message
        self.data = data


class NotFound(DomainError):
    status_code = 404


class Conflict(DomainError):
    status_code = 409


class InvalidInput(DomainError):
    status_code = 400


class InvalidState(DomainError):
    status_code = 400


class UnprocessableEntity(DomainError):
    status_code = 422


def _validation_errors(exc: ValidationError):
    return [
        {"field": ".".join(str(p) for p in e["loc"]), "message": e["msg"]}
        for e in exc.errors(include_url=False)
    ]


def validation_messages(exc: ValidationError):
    return [f"{e['field'] or 'body'}: {e['message']}" for e in _validation_errors(exc)]


def register_error_handlers(app):
    @app.errorhandler(DomainError)
    def handle_domain_error(e):
        return err(e.message, status_code=e.status_code, data=e.data)

    @app.errorhandler(ValidationError)
    def handle_validation_error(e):
        return err("Invalid request data", status_code=400, data={"errors": _validation_errors(e)})

    @app.errorhandler(404)
    def handle_not_found(e):
        return err("Resource not found", status_code=404)

    @app.errorhandler(405)
    def handle_method_not_allowed(e):
        return err("Method not allowed", status_code=405)
