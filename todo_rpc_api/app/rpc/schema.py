"""
Schema validation for procedure inputs and outputs.

A :class:`Schema` wraps any annotation pydantic understands (a model,
``str``, ``bool``, ``List[SomeModel]`` ...) behind one small contract:
``validate`` returns the normalised value or raises
:class:`SchemaValidationError` listing *every* violated constraint,
and ``dump`` turns a validated value into plain JSON data.  The same
schema object is used on the way in, on the way out and by clients
that want to rebuild typed values from a response.

Validation is strict: primitives are never coerced, so ``"true"`` or
``1`` is not a ``bool`` and ``1`` is not a ``str``.
"""

from __future__ import annotations

from typing import Annotated, Any, Dict, List, Optional, Type, TypeVar

from pydantic import BaseModel, Field, TypeAdapter, ValidationError, create_model

ModelT = TypeVar("ModelT", bound=BaseModel)


class SchemaValidationError(ValueError):
    """Raised when a value does not match its declared schema."""

    def __init__(self, schema_name: str, issues: List[Dict[str, Any]]) -> None:
        self.schema_name = schema_name
        self.issues = issues
        summary = "; ".join(
            f"{issue['path'] or '<root>'}: {issue['message']}" for issue in issues
        )
        super().__init__(f"{schema_name} validation failed: {summary}")


def _issues_from(exc: ValidationError) -> List[Dict[str, Any]]:
    issues: List[Dict[str, Any]] = []
    for error in exc.errors(include_url=False):
        issues.append(
            {
                "path": ".".join(str(part) for part in error.get("loc", ())),
                "message": error.get("msg", ""),
                "type": error.get("type", ""),
                "input": error.get("input"),
            }
        )
    return issues


class Schema:
    """A declared shape that values can be validated against."""

    def __init__(self, annotation: Any, *, name: Optional[str] = None) -> None:
        self.annotation = annotation
        self.name = name or getattr(annotation, "__name__", None) or repr(annotation)
        self._adapter: TypeAdapter[Any] = TypeAdapter(annotation)

    def __repr__(self) -> str:
        return f"Schema({self.name})"

    def validate(self, value: Any) -> Any:
        """Return ``value`` normalised to the schema or raise."""
        try:
            return self._adapter.validate_python(value, strict=True)
        except ValidationError as exc:
            raise SchemaValidationError(self.name, _issues_from(exc)) from exc

    def dump(self, value: Any) -> Any:
        """Serialise an already validated value to JSON-compatible data."""
        return self._adapter.dump_python(value, mode="json")

    def json_schema(self) -> Dict[str, Any]:
        return self._adapter.json_schema()


def partial(model: Type[ModelT], *, name: Optional[str] = None) -> Type[BaseModel]:
    """Derive a model from ``model`` where every field is optional.

    Field constraints (lengths, formats) are kept, so a supplied value
    is validated exactly as on creation; omitted fields simply stay
    unset.  Use ``model_dump(exclude_unset=True)`` to get the fields the
    caller actually sent.
    """
    fields: Dict[str, Any] = {}
    for field_name, field_info in model.model_fields.items():
        annotation: Any = field_info.annotation
        if field_info.metadata:
            annotation = Annotated[(annotation, *field_info.metadata)]
        fields[field_name] = (
            annotation,
            Field(default=None, alias=field_info.alias, description=field_info.description),
        )
    return create_model(  # type: ignore[call-overload]
        name or f"Partial{model.__name__}",
        __config__=model.model_config,
        **fields,
    )
