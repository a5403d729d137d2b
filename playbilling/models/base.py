"""
Typed Response Model - the casting layer shared by every value object.

Every entity is an immutable dataclass paired with a constant schema that maps
attribute names onto JSON keys. A single generic constructor walks the schema:

- absent keys (or JSON null) become None
- scalar keys are stored verbatim, without coercion
- nested keys are cast recursively through the target entity's from_array()

The decoded response is kept as raw_data and is the authoritative
serialization: to_array() returns it unchanged, so fields the SDK does not
model survive a round trip.
"""

import copy
import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, ClassVar, TypeVar

from playbilling.exceptions import MalformedResponseError

RawResponse = Mapping[str, Any]

E = TypeVar("E", bound="Entity")


@dataclass(frozen=True)
class FieldSpec:
    """One row of an entity schema."""

    key: str  # JSON field name as sent by the API
    cast: "type[Entity] | None" = None  # None: stored verbatim
    many: bool = False  # raw value is a list of mappings

    @property
    def is_nested(self) -> bool:
        return self.cast is not None


def scalar(key: str) -> FieldSpec:
    """Schema row for a value stored as received."""
    return FieldSpec(key)


def nested(key: str, target: "type[Entity]") -> FieldSpec:
    """Schema row for a sub-mapping cast into ``target``."""
    return FieldSpec(key, target)


def nested_list(key: str, target: "type[Entity]") -> FieldSpec:
    """Schema row for a list of sub-mappings, each cast into ``target``."""
    return FieldSpec(key, target, many=True)


@dataclass(frozen=True)
class Entity:
    """
    Base class for every typed API object.

    Subclasses are frozen dataclasses whose fields all default to None and
    whose ``schema`` lists exactly those fields.

    Usage:
        purchase = SubscriptionPurchaseV2.from_array(response)
        purchase.line_items[0].expiry_time
        purchase.to_array() == response
    """

    schema: ClassVar[Mapping[str, FieldSpec]] = MappingProxyType({})

    raw_data: dict[str, Any] = field(default_factory=dict, repr=False)

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)
        # Schemas are read-only once the class is defined
        if "schema" in cls.__dict__:
            cls.schema = MappingProxyType(dict(cls.__dict__["schema"]))

    @classmethod
    def from_array(cls: type[E], raw: Any) -> E:
        """
        Build an entity from a decoded JSON object.

        Args:
            raw: Decoded response body

        Returns:
            Fully constructed entity

        Raises:
            MalformedResponseError: If raw, or any nested value the schema
                casts, is not the expected shape
        """
        if not isinstance(raw, Mapping):
            raise MalformedResponseError(cls.__name__, raw)

        data = copy.deepcopy(dict(raw))
        values = {
            attribute: _cast_field(cls, spec, data.get(spec.key))
            for attribute, spec in cls.schema.items()
        }
        return cls(raw_data=data, **values)

    def get_raw_data(self) -> dict[str, Any]:
        """Return a copy of the response this entity was built from."""
        return copy.deepcopy(self.raw_data)

    def to_array(self) -> dict[str, Any]:
        """Serialize back to the original response mapping."""
        return self.get_raw_data()

    def to_json(self) -> str:
        """Canonical JSON encoding of to_array()."""
        return json.dumps(
            self.to_array(),
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
        )

    def has(self, attribute: str) -> bool:
        """Whether a schema attribute was present in the response."""
        if attribute not in self.schema:
            raise AttributeError(f"{type(self).__name__} has no field '{attribute}'")
        return getattr(self, attribute) is not None


def _cast_field(owner: type[Entity], spec: FieldSpec, value: Any) -> Any:
    if value is None or spec.cast is None:
        return value

    if not spec.many:
        return _cast_nested(owner, spec.key, spec.cast, value)

    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        raise MalformedResponseError(owner.__name__, value, path=spec.key, expected="a list")

    return tuple(
        _cast_nested(owner, f"{spec.key}[{index}]", spec.cast, item)
        for index, item in enumerate(value)
    )


def _cast_nested(owner: type[Entity], path: str, target: type[Entity], value: Any) -> Entity:
    try:
        return target.from_array(value)
    except MalformedResponseError as exc:
        full_path = f"{path}.{exc.path}" if exc.path else path
        raise MalformedResponseError(
            owner.__name__, exc.value, path=full_path, expected=exc.expected
        ) from exc
