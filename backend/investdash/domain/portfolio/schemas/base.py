from __future__ import annotations

from collections.abc import Mapping
from typing import Annotated, Any, TypeVar

from pydantic import AfterValidator, AnyUrl, BaseModel, ConfigDict, StringConstraints, TypeAdapter
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from investdash.shared.exceptions import ValidationError


M = TypeVar("M", bound=BaseModel)

_url_adapter = TypeAdapter(AnyUrl)


def _check_url(value: str) -> str:
    _url_adapter.validate_python(value)
    return value


# Keeps the value exactly as stored; AnyUrl would normalize it.
UrlStr = Annotated[str, AfterValidator(_check_url)]

# Three-letter code, upper-cased on input.
CurrencyCode = Annotated[str, StringConstraints(strip_whitespace=True, to_upper=True, min_length=3, max_length=3)]


class RecordModel(BaseModel):
    """
    Base for records crossing the store boundary.

    Attribute names are the store's column names (snake_case); the alias
    generator provides the camelCase names used by API clients.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        frozen=True,
    )


def _field_name(model: type[BaseModel], loc: tuple[Any, ...]) -> str:
    if not loc:
        return "__root__"
    head = str(loc[0])
    for name, info in model.model_fields.items():
        if head in (name, info.alias):
            return name
    return head


def parse_record(model: type[M], raw: Mapping[str, Any] | BaseModel) -> M:
    """Validate a raw record; raise ValidationError naming the first bad field."""
    if isinstance(raw, BaseModel):
        raw = raw.model_dump()
    try:
        return model.model_validate(dict(raw))
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        raise ValidationError(model.__name__, _field_name(model, tuple(first["loc"])), first["msg"]) from exc


def to_record(obj: BaseModel, *, exclude_unset: bool = False) -> dict[str, Any]:
    """Serialize a model into a store row keyed by column name."""
    return obj.model_dump(exclude_unset=exclude_unset)
