"""
Immutable descriptors that drive marshaling.

A ``RecordDescriptor`` lists the fields of one API record in declaration order.
Each ``FieldDescriptor`` maps a logical (in-memory) name to a wire name and a
type reference. Type references are written in descriptor tables as strings:

```
string | integer | number | boolean | date-time | uuid | any
Array<T>
Record<string, T>
SomeName            # an enum if declared as one, otherwise a record
```
"""

import enum
import re
import typing as t

import attrs

from catalogkit.exceptions import DescriptorError


class PrimitiveKind(str, enum.Enum):
    string = "string"
    integer = "integer"
    number = "number"
    boolean = "boolean"
    date_time = "date-time"
    uuid = "uuid"
    any = "any"


PRIMITIVE_NAMES = frozenset(kind.value for kind in PrimitiveKind)


@attrs.frozen
class Primitive:
    kind: PrimitiveKind = attrs.field(converter=PrimitiveKind)

    def __str__(self):
        return self.kind.value


@attrs.frozen
class EnumRef:
    name: str

    def __str__(self):
        return self.name


@attrs.frozen
class RecordRef:
    name: str

    def __str__(self):
        return self.name


@attrs.frozen
class CollectionOf:
    item: "TypeRef"

    def __str__(self):
        return f"Array<{self.item}>"


@attrs.frozen
class MapOf:
    value: "TypeRef"

    def __str__(self):
        return f"Record<string, {self.value}>"


TypeRef = t.Union[Primitive, EnumRef, RecordRef, CollectionOf, MapOf]

_ARRAY_RE = re.compile(r"^Array<(?P<item>.+)>$")
_MAP_RE = re.compile(r"^Record<\s*string\s*,(?P<value>.+)>$")
_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.]*$")


def parse_type_ref(text: str, enum_names: t.Container[str] = frozenset()) -> TypeRef:
    """
    Parse a type reference string.
    Bare names listed in ``enum_names`` become ``EnumRef``s, other bare names ``RecordRef``s.
    """
    text = text.strip()

    match = _ARRAY_RE.match(text)
    if match:
        return CollectionOf(parse_type_ref(match.group("item"), enum_names))

    match = _MAP_RE.match(text)
    if match:
        return MapOf(parse_type_ref(match.group("value"), enum_names))

    if text in PRIMITIVE_NAMES:
        return Primitive(text)

    if not _NAME_RE.match(text):
        raise DescriptorError(f"Malformed type reference: '{text}'")

    if text in enum_names:
        return EnumRef(text)
    return RecordRef(text)


def iter_named_refs(type_ref: TypeRef) -> t.Iterator[t.Union[EnumRef, RecordRef]]:
    if isinstance(type_ref, (EnumRef, RecordRef)):
        yield type_ref
    elif isinstance(type_ref, CollectionOf):
        yield from iter_named_refs(type_ref.item)
    elif isinstance(type_ref, MapOf):
        yield from iter_named_refs(type_ref.value)


def _check_name(instance, attribute, value):
    if not isinstance(value, str) or not value:
        raise DescriptorError(f"'{attribute.name}' should be a non-empty string, not {value!r}")


def _to_variant_pairs(variants: t.Union[t.Mapping[str, str], t.Iterable[t.Tuple[str, str]]]):
    return tuple(sorted(dict(variants).items()))


@attrs.frozen
class FieldDescriptor:
    name: str = attrs.field(validator=_check_name)
    type: TypeRef
    wire_name: str = attrs.field(
        default=attrs.Factory(lambda self: self.name, takes_self=True), validator=_check_name
    )
    required: bool = True


@attrs.frozen
class RecordDescriptor:
    name: str = attrs.field(validator=_check_name)
    fields: t.Tuple[FieldDescriptor, ...] = attrs.field(converter=tuple)
    discriminator: t.Optional[str] = None
    # Pairs of (discriminator literal, variant record name)
    variants: t.Tuple[t.Tuple[str, str], ...] = attrs.field(
        factory=tuple, converter=_to_variant_pairs
    )
    description: t.Optional[str] = attrs.field(default=None, eq=False)

    def __attrs_post_init__(self):
        names = [f.name for f in self.fields]
        wire_names = [f.wire_name for f in self.fields]
        for kind, values in (("field name", names), ("wire name", wire_names)):
            duplicates = sorted({v for v in values if values.count(v) > 1})
            if duplicates:
                raise DescriptorError(
                    f"Duplicate {kind}(s) in record '{self.name}': " + ", ".join(duplicates)
                )

        if self.discriminator is not None and self.discriminator not in names:
            raise DescriptorError(
                f"Discriminator '{self.discriminator}' is not a field of record '{self.name}'"
            )
        if self.variants and self.discriminator is None:
            raise DescriptorError(f"Record '{self.name}' has variants but no discriminator")

    @property
    def field_names(self) -> t.List[str]:
        return [f.name for f in self.fields]

    @property
    def wire_names(self) -> t.List[str]:
        return [f.wire_name for f in self.fields]

    def get_field(self, name: str) -> t.Optional[FieldDescriptor]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def get_field_by_wire_name(self, wire_name: str) -> t.Optional[FieldDescriptor]:
        for f in self.fields:
            if f.wire_name == wire_name:
                return f
        return None

    def get_discriminator_field(self) -> FieldDescriptor:
        field = self.get_field(self.discriminator) if self.discriminator is not None else None
        if field is None:
            raise DescriptorError(f"Record '{self.name}' has no discriminator field")
        return field

    def get_variant(self, discriminator_value: t.Any) -> t.Optional[str]:
        for literal, record_name in self.variants:
            if literal == discriminator_value:
                return record_name
        return None


@attrs.frozen
class EnumDescriptor:
    name: str = attrs.field(validator=_check_name)
    literals: t.Tuple[str, ...] = attrs.field(converter=tuple)

    def __attrs_post_init__(self):
        if len(self.literals) == 0:
            raise DescriptorError(f"Enum '{self.name}' has no literals")
        for literal in self.literals:
            if not isinstance(literal, str):
                raise DescriptorError(f"Literal {literal!r} of enum '{self.name}' is not a string")
        if len(set(self.literals)) != len(self.literals):
            raise DescriptorError(f"Duplicate literals in enum '{self.name}'")

    def __contains__(self, value: object) -> bool:
        return isinstance(value, str) and value in self.literals
