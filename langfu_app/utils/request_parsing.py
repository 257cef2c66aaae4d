"""Helpers for reading and validating JSON request bodies."""

from typing import Type, TypeVar

from flask import request
from pydantic import BaseModel, ValidationError as PydanticValidationError

from ..core.error_handlers import validation_error_from_pydantic

SchemaT = TypeVar('SchemaT', bound=BaseModel)


def parse_json_body(schema: Type[SchemaT], message: str = 'Missing required fields') -> SchemaT:
    """Validate the request JSON against ``schema`` or raise a 400 ValidationError."""
    data = request.get_json(silent=True)
    if data is None:
        data = {}
    try:
        return schema.model_validate(data)
    except PydanticValidationError as exc:
        raise validation_error_from_pydantic(exc, message) from exc
