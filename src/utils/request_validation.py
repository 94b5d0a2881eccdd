"""
Request validation - checks one part of a request against a schema
Returns a success-or-failure result instead of raising, so routes branch explicitly.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, Tuple, Type, TypeVar, Union

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError as PydanticValidationError

from utils.error_handling import log_business_error

logger = logging.getLogger(__name__)

Source = Literal["query", "body", "params"]
SchemaT = TypeVar("SchemaT", bound=BaseModel)


@dataclass
class ValidationSuccess:
    """Input accepted; value is the coerced schema instance"""
    value: Any
    ok: bool = field(default=True, init=False)


@dataclass
class ValidationFailure:
    """Input rejected; errors is a list of {field, message, type}"""
    errors: List[Dict[str, Any]]
    ok: bool = field(default=False, init=False)


ValidationResult = Union[ValidationSuccess, ValidationFailure]


def format_errors(raw_errors, messages: Optional[Dict[Tuple[str, str], str]] = None) -> List[Dict[str, Any]]:
    """
    Flatten pydantic error entries into the API's field error shape

    Args:
        raw_errors: Entries from pydantic's ValidationError.errors()
        messages: Overrides keyed by (field, error type); pydantic's message is used otherwise
    """
    messages = messages or {}
    formatted = []
    for error in raw_errors:
        field_name = ".".join(str(loc) for loc in error.get("loc", ())) or "body"
        error_type = error.get("type", "unknown")
        formatted.append({
            "field": field_name,
            "message": messages.get((field_name, error_type), error.get("msg", "Invalid value")),
            "type": error_type
        })
    return formatted


def validate_data(schema: Type[SchemaT], data: Any) -> ValidationResult:
    try:
        return ValidationSuccess(schema.model_validate(data))
    except PydanticValidationError as e:
        return ValidationFailure(format_errors(e.errors(), getattr(schema, "error_messages", None)))


async def read_source(request: Request, source: Source) -> Any:
    """Extract the raw input for a source; an empty body reads as {}"""
    if source == "query":
        return dict(request.query_params)
    if source == "params":
        return dict(request.path_params)
    body = await request.body()
    if not body.strip():
        return {}
    return json.loads(body)


async def validate_request(request: Request, source: Source, schema: Type[SchemaT]) -> ValidationResult:
    """
    Validate one part of the request against a schema

    Args:
        request: Incoming request
        source: Which part to check - query parameters, JSON body, or path parameters
        schema: Pydantic model describing accepted input

    Returns:
        ValidationSuccess with the coerced model, or ValidationFailure with field errors
    """
    try:
        data = await read_source(request, source)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        return ValidationFailure([{"field": "body", "message": f"Invalid JSON: {e}", "type": "json_invalid"}])

    return validate_data(schema, data)


def validation_error_response(failure: ValidationFailure, context: str = "") -> JSONResponse:
    """400 response for a rejected request; the handler never runs"""
    log_business_error(
        "validation",
        f"Request validation failed: {len(failure.errors)} validation errors",
        {"endpoint": context, "validation_errors": failure.errors}
    )
    return JSONResponse(
        status_code=400,
        content={"message": "Validation Error", "errors": failure.errors}
    )
