"""
Schema-driven conversion between wire values and record instances.

A wire value is a JSON-compatible tree (dicts, lists, strings, numbers, booleans, None).
A record instance is a plain dict keyed by logical field names. The descriptors in a
``DescriptorRegistry`` define how one maps onto the other:

- Absent optional fields (missing keys or ``None``) are omitted on the wire and left
  out of deserialized instances. Empty collections are present, not absent.
- Absent required fields raise ``MissingFieldError``.
- Unknown wire keys are dropped on deserialization.
- Enum values must be one of the declared literals.

Errors carry the path of the first failing value in field declaration order.
"""

import enum
import typing as t
from collections.abc import Mapping
from datetime import datetime
from uuid import UUID

from catalogkit._internal.logging import log_debug
from catalogkit.exceptions import (
    InvalidEnumValueError,
    MissingFieldError,
    PathSegment,
    TypeMismatchError,
)

from .descriptors import (
    CollectionOf,
    EnumRef,
    MapOf,
    Primitive,
    PrimitiveKind,
    RecordDescriptor,
    RecordRef,
    TypeRef,
)
from .registry import DescriptorRegistry, get_default_registry

RecordInstance = t.Dict[str, t.Any]
DescriptorLike = t.Union[str, RecordDescriptor]
_Path = t.Tuple[PathSegment, ...]


class Marshaler:
    def __init__(self, registry: t.Optional[DescriptorRegistry] = None) -> None:
        self.registry = registry if registry is not None else get_default_registry()

    def serialize(
        self, instance: t.Mapping[str, t.Any], descriptor: DescriptorLike
    ) -> t.Dict[str, t.Any]:
        return self._serialize_record(instance, self._resolve(descriptor), ())

    def deserialize(self, wire_value: t.Any, descriptor: DescriptorLike) -> RecordInstance:
        return self._deserialize_record(wire_value, self._resolve(descriptor), ())

    def _resolve(self, descriptor: DescriptorLike) -> RecordDescriptor:
        if isinstance(descriptor, RecordDescriptor):
            return descriptor
        return self.registry.get_record(descriptor)

    def _select_variant(
        self, descriptor: RecordDescriptor, discriminator_value: t.Any
    ) -> RecordDescriptor:
        if isinstance(discriminator_value, enum.Enum):
            discriminator_value = discriminator_value.value
        variant_name = descriptor.get_variant(discriminator_value)
        if variant_name is None or variant_name == descriptor.name:
            return descriptor
        return self.registry.get_record(variant_name)

    # Serialization

    def _serialize_record(
        self, instance: t.Any, descriptor: RecordDescriptor, path: _Path
    ) -> t.Dict[str, t.Any]:
        if not isinstance(instance, Mapping):
            raise TypeMismatchError(path, f"'{descriptor.name}' record", instance)

        if descriptor.discriminator is not None:
            descriptor = self._select_variant(descriptor, instance.get(descriptor.discriminator))

        wire: t.Dict[str, t.Any] = dict()
        for field in descriptor.fields:
            field_path = path + (field.name,)
            value = instance.get(field.name)
            if value is None:
                if field.required:
                    raise MissingFieldError(field_path, descriptor.name, field.name)
                continue
            wire[field.wire_name] = self._serialize_value(value, field.type, field_path)

        unknown = [k for k in instance.keys() if descriptor.get_field(k) is None]
        if unknown:
            log_debug(
                f"Dropped unknown fields of '{descriptor.name}' on serialization: {unknown}",
                pretty=False,
            )
        return wire

    def _serialize_value(self, value: t.Any, type_ref: TypeRef, path: _Path) -> t.Any:
        if isinstance(type_ref, Primitive):
            return _serialize_primitive(value, type_ref.kind, path)

        if isinstance(type_ref, EnumRef):
            literal = value.value if isinstance(value, enum.Enum) else value
            return self._check_enum_literal(literal, type_ref, path)

        if isinstance(type_ref, RecordRef):
            return self._serialize_record(value, self.registry.get_record(type_ref.name), path)

        if isinstance(type_ref, CollectionOf):
            if not _is_sequence(value):
                raise TypeMismatchError(path, "array", value)
            return [
                self._serialize_value(item, type_ref.item, path + (idx,))
                for idx, item in enumerate(value)
            ]

        if isinstance(type_ref, MapOf):
            _check_string_map(value, path)
            return {
                key: self._serialize_value(item, type_ref.value, path + (key,))
                for key, item in value.items()
            }

        raise TypeError(f"Unsupported type reference: {type_ref!r}")

    # Deserialization

    def _deserialize_record(
        self, wire_value: t.Any, descriptor: RecordDescriptor, path: _Path
    ) -> RecordInstance:
        if not isinstance(wire_value, Mapping):
            raise TypeMismatchError(path, f"'{descriptor.name}' object", wire_value)

        if descriptor.discriminator is not None:
            discriminator_field = descriptor.get_discriminator_field()
            descriptor = self._select_variant(
                descriptor, wire_value.get(discriminator_field.wire_name)
            )

        instance: RecordInstance = dict()
        for field in descriptor.fields:
            field_path = path + (field.wire_name,)
            value = wire_value.get(field.wire_name)
            if value is None:
                if field.required:
                    raise MissingFieldError(field_path, descriptor.name, field.wire_name)
                continue
            instance[field.name] = self._deserialize_value(value, field.type, field_path)

        unknown = [k for k in wire_value.keys() if descriptor.get_field_by_wire_name(k) is None]
        if unknown:
            log_debug(
                f"Ignored unknown keys of '{descriptor.name}' on deserialization: {unknown}",
                pretty=False,
            )
        return instance

    def _deserialize_value(self, value: t.Any, type_ref: TypeRef, path: _Path) -> t.Any:
        if isinstance(type_ref, Primitive):
            return _deserialize_primitive(value, type_ref.kind, path)

        if isinstance(type_ref, EnumRef):
            return self._check_enum_literal(value, type_ref, path)

        if isinstance(type_ref, RecordRef):
            return self._deserialize_record(value, self.registry.get_record(type_ref.name), path)

        if isinstance(type_ref, CollectionOf):
            if not _is_sequence(value):
                raise TypeMismatchError(path, "array", value)
            return [
                self._deserialize_value(item, type_ref.item, path + (idx,))
                for idx, item in enumerate(value)
            ]

        if isinstance(type_ref, MapOf):
            _check_string_map(value, path)
            return {
                key: self._deserialize_value(item, type_ref.value, path + (key,))
                for key, item in value.items()
            }

        raise TypeError(f"Unsupported type reference: {type_ref!r}")

    def _check_enum_literal(self, value: t.Any, type_ref: EnumRef, path: _Path) -> str:
        enum_descriptor = self.registry.get_enum(type_ref.name)
        if value not in enum_descriptor:
            raise InvalidEnumValueError(
                path, enum_descriptor.name, value, enum_descriptor.literals
            )
        return value


def _is_sequence(value: t.Any) -> bool:
    # Collections are lists on both sides; tuples are rejected
    return isinstance(value, list)


def _check_string_map(value: t.Any, path: _Path):
    if not isinstance(value, Mapping):
        raise TypeMismatchError(path, "object", value)
    for key in value.keys():
        if not isinstance(key, str):
            raise TypeMismatchError(path + (str(key),), "string key", key)


def _check_json_primitive(value: t.Any, kind: PrimitiveKind, path: _Path):
    # bool is a subclass of int
    if kind is PrimitiveKind.string:
        valid = isinstance(value, str)
    elif kind is PrimitiveKind.integer:
        valid = isinstance(value, int) and not isinstance(value, bool)
    elif kind is PrimitiveKind.number:
        valid = isinstance(value, (int, float)) and not isinstance(value, bool)
    elif kind is PrimitiveKind.boolean:
        valid = isinstance(value, bool)
    else:
        valid = True

    if not valid:
        raise TypeMismatchError(path, kind.value, value)


def _serialize_primitive(value: t.Any, kind: PrimitiveKind, path: _Path) -> t.Any:
    if kind is PrimitiveKind.date_time:
        if not isinstance(value, datetime):
            raise TypeMismatchError(path, "datetime", value)
        return value.isoformat()

    if kind is PrimitiveKind.uuid:
        if not isinstance(value, UUID):
            raise TypeMismatchError(path, "UUID", value)
        return str(value)

    _check_json_primitive(value, kind, path)
    return value


def _deserialize_primitive(value: t.Any, kind: PrimitiveKind, path: _Path) -> t.Any:
    if kind is PrimitiveKind.date_time:
        if not isinstance(value, str):
            raise TypeMismatchError(path, "date-time string", value)
        # fromisoformat() takes RFC 3339 with "Z" and truncates sub-microsecond digits
        try:
            return datetime.fromisoformat(value)
        except ValueError:
            raise TypeMismatchError(path, "ISO-8601 date-time string", value) from None

    if kind is PrimitiveKind.uuid:
        if not isinstance(value, str):
            raise TypeMismatchError(path, "UUID string", value)
        try:
            return UUID(value)
        except ValueError:
            raise TypeMismatchError(path, "UUID string", value) from None

    _check_json_primitive(value, kind, path)
    return value


def serialize(
    instance: t.Mapping[str, t.Any],
    descriptor: DescriptorLike,
    registry: t.Optional[DescriptorRegistry] = None,
) -> t.Dict[str, t.Any]:
    return Marshaler(registry).serialize(instance, descriptor)


def deserialize(
    wire_value: t.Any,
    descriptor: DescriptorLike,
    registry: t.Optional[DescriptorRegistry] = None,
) -> RecordInstance:
    return Marshaler(registry).deserialize(wire_value, descriptor)
