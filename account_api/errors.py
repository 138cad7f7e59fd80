"""Application errors and their HTTP representations."""

from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

CREDENTIALS_INCORRECT = "The provided credentials are incorrect."
UNAUTHENTICATED = "Unauthenticated"

# Field messages keyed by pydantic error type (plus the custom types raised by
# the request schemas)
FIELD_MESSAGES = {
    "required": "The {attribute} field is required.",
    "string_type": "The {attribute} must be a string.",
    "string_too_short": "The {attribute} must be at least {min_length} characters.",
    "string_too_long": "The {attribute} must not be greater than {max_length} characters.",
    "email": "The {attribute} must be a valid email address.",
    "unique": "The {attribute} has already been taken.",
    "confirmed": "The {attribute} confirmation does not match.",
}
DEFAULT_FIELD_MESSAGE = "The {attribute} is invalid."


def field_message(kind: str, field: str, **context: Any) -> str:
    """Render the message for one failing field."""
    template = FIELD_MESSAGES.get(kind, DEFAULT_FIELD_MESSAGE)
    return template.format(attribute=field.replace("_", " "), **context)


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and value.strip() == "")


class ValidationError(Exception):
    """Input failed one or more validation rules.

    Carries every failing message keyed by field so that a client sees all
    problems at once, not only the first one.
    """

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = {field: list(messages) for field, messages in errors.items() if messages}
        super().__init__(self.message)

    @classmethod
    def with_messages(cls, messages: dict[str, str | list[str]]) -> "ValidationError":
        """Build an error from a field -> message(s) mapping."""
        return cls(
            {
                field: [value] if isinstance(value, str) else list(value)
                for field, value in messages.items()
            }
        )

    @classmethod
    def from_pydantic(cls, exc: PydanticValidationError) -> "ValidationError":
        """Translate a pydantic error into per-field messages."""
        errors: dict[str, list[str]] = {}
        for error in exc.errors():
            field = str(error["loc"][0]) if error["loc"] else "input"
            kind = error["type"]
            if kind == "confirmed":
                field = field.removesuffix("_confirmation")
            elif kind == "missing" or _is_blank(error.get("input")):
                kind = "required"
            elif kind == "value_error" and "email address" in error["msg"]:
                kind = "email"
            errors.setdefault(field, []).append(
                field_message(kind, field, **error.get("ctx", {}))
            )
        return cls(errors)

    @property
    def message(self) -> str:
        """Summary line: first message plus a count of the remaining ones."""
        messages = [m for field_messages in self.errors.values() for m in field_messages]
        if not messages:
            return "The given data was invalid."
        summary = messages[0]
        remaining = len(messages) - 1
        if remaining:
            plural = "error" if remaining == 1 else "errors"
            summary += f" (and {remaining} more {plural})"
        return summary


class UnauthenticatedError(Exception):
    """Request carried no valid bearer token."""

    def __init__(self, message: str = UNAUTHENTICATED):
        self.message = message
        super().__init__(message)


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Render a ValidationError as 422 with per-field messages."""
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={"message": exc.message, "errors": exc.errors},
    )


async def unauthenticated_error_handler(
    request: Request, exc: UnauthenticatedError
) -> JSONResponse:
    """Render an UnauthenticatedError as 401."""
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"message": exc.message},
        headers={"WWW-Authenticate": "Bearer"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the application's error handlers to a FastAPI app."""
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(UnauthenticatedError, unauthenticated_error_handler)
