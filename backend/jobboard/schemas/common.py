"""Shared helpers for payload validation."""
from typing import Any, Dict, List, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ValidationError
from pydantic_core import PydanticCustomError

from jobboard.exceptions import Issue, ValidationFailure

ModelT = TypeVar("ModelT", bound=BaseModel)


def blank_to_none(value: Any) -> Any:
    """Empty or whitespace-only strings mean "not provided"."""
    if isinstance(value, str) and not value.strip():
        return None
    return value


def require_text(value: Any, label: str) -> Any:
    """Reject missing or blank strings with a "<label> is required" message."""
    if value is None or (isinstance(value, str) and not value.strip()):
        raise PydanticCustomError("required", "{label} is required", {"label": label})
    return value


def external_path(model: Type[BaseModel], loc: Tuple[Any, ...]) -> Tuple[Any, ...]:
    """
    Address an error by the field's external (alias) name.

    pydantic reports a missing key that was filled from its default under
    the Python attribute name; a key that was sent is reported under its alias.
    """
    if loc and isinstance(loc[0], str):
        field = model.model_fields.get(loc[0])
        if field is not None and field.alias:
            return (field.alias,) + tuple(loc[1:])
    return tuple(loc)


def issues_from_error(model: Type[BaseModel], exc: ValidationError) -> List[Issue]:
    """Flatten a pydantic ValidationError into field-addressed issues."""
    return [
        Issue(path=external_path(model, error["loc"]), message=error["msg"])
        for error in exc.errors()
    ]


def validate_payload(model: Type[ModelT], payload: Any, context: Optional[Dict[str, Any]] = None) -> ModelT:
    """
    Validate a raw payload against a model, reporting every problem at once.

    Raises:
        ValidationFailure: with one Issue per failing field
    """
    try:
        return model.model_validate(payload if payload is not None else {}, context=context)
    except ValidationError as e:
        raise ValidationFailure(issues_from_error(model, e)) from e
