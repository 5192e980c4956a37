from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError

from app.core.errors import ValidationFailed

ModelT = TypeVar("ModelT", bound=BaseModel)

_LOCATION_ROOTS = {"body", "query", "path", "header"}
_VALUE_ERROR_PREFIX = "Value error, "


def format_error(error: Mapping[str, Any]) -> str:
    """Render one pydantic error entry as a readable sentence."""
    location = [str(part) for part in error.get("loc", ()) if part not in _LOCATION_ROOTS]
    message = str(error.get("msg") or "Invalid value")
    if message.startswith(_VALUE_ERROR_PREFIX):
        message = message[len(_VALUE_ERROR_PREFIX):]
    if not location:
        return message
    return f'"{".".join(location)}" {message[:1].lower()}{message[1:]}'


def format_errors(errors: Iterable[Mapping[str, Any]]) -> List[str]:
    return [format_error(error) for error in errors]


def validate_payload(
    schema: Type[ModelT], data: Optional[Mapping[str, Any]]
) -> Tuple[Optional[str], Optional[ModelT]]:
    """Validate ``data`` against ``schema``.

    Returns ``(error, None)`` with the first violation on failure, otherwise
    ``(None, value)``.
    """
    try:
        return None, schema.model_validate(dict(data or {}))
    except ValidationError as exc:
        return format_error(exc.errors()[0]), None


def query_dict(params: Mapping[str, Any]) -> Dict[str, Any]:
    """Drop blank query values so schema defaults apply."""
    return {key: value for key, value in params.items() if value not in ("", None)}


def parse_query(schema: Type[ModelT], params: Mapping[str, Any]) -> ModelT:
    """Validate query parameters, raising the first violation as a validation error."""
    error, value = validate_payload(schema, query_dict(params))
    if error:
        raise ValidationFailed(error)
    return value
