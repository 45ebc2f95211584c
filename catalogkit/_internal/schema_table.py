import json
import typing as t
from pathlib import Path

import attrs
import cattrs
import yaml
from cattrs.errors import BaseValidationError, ForbiddenExtraKeysError

from catalogkit._internal.logging import log_debug
from catalogkit.exceptions import DescriptorError

from .descriptors import EnumDescriptor, FieldDescriptor, RecordDescriptor, parse_type_ref
from .registry import DescriptorRegistry

if t.TYPE_CHECKING:
    from _typeshed import StrPath

YAML_SUFFIXES = (".yaml", ".yml")
JSON_SUFFIXES = (".json",)


@attrs.define
class _FieldEntry:
    name: str
    type: str
    wire_name: t.Optional[str] = None
    required: bool = True


@attrs.define
class _RecordEntry:
    name: str
    fields: t.List[_FieldEntry] = attrs.Factory(list)
    description: t.Optional[str] = None
    discriminator: t.Optional[str] = None
    variants: t.Dict[str, str] = attrs.Factory(dict)


@attrs.define
class _EnumEntry:
    name: str
    literals: t.List[str]


@attrs.define
class _TableDocument:
    enums: t.List[_EnumEntry] = attrs.Factory(list)
    records: t.List[_RecordEntry] = attrs.Factory(list)


converter = cattrs.Converter(forbid_extra_keys=True)


def parse_descriptor_table(
    document: t.Any, source: str = "descriptor table"
) -> DescriptorRegistry:
    if not isinstance(document, dict):
        raise DescriptorError(f"Malformed {source}: top level should be a mapping")

    try:
        table = converter.structure(document, _TableDocument)
    except BaseValidationError as e:
        details = "; ".join(cattrs.transform_error(e))
        raise DescriptorError(f"Malformed {source}: {details}") from e
    except ForbiddenExtraKeysError as e:
        raise DescriptorError(f"Malformed {source}: {e}") from e

    registry = DescriptorRegistry()
    for enum_entry in table.enums:
        try:
            registry.register_enum(
                EnumDescriptor(name=enum_entry.name, literals=enum_entry.literals)
            )
        except DescriptorError as e:
            raise DescriptorError(f"Invalid enum '{enum_entry.name}' in {source}: {e}") from e

    enum_names = {e.name for e in table.enums}
    for record_entry in table.records:
        try:
            fields = [
                FieldDescriptor(
                    name=f.name,
                    type=parse_type_ref(f.type, enum_names),
                    wire_name=f.wire_name if f.wire_name else f.name,
                    required=f.required,
                )
                for f in record_entry.fields
            ]
            registry.register_record(
                RecordDescriptor(
                    name=record_entry.name,
                    fields=fields,
                    discriminator=record_entry.discriminator,
                    variants=record_entry.variants,
                    description=record_entry.description,
                )
            )
        except DescriptorError as e:
            raise DescriptorError(
                f"Invalid record '{record_entry.name}' in {source}: {e}"
            ) from e

    return registry


def load_descriptor_table(path: "StrPath") -> DescriptorRegistry:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
        raise DescriptorError(f"Unsupported descriptor table format: '{path}'")

    with open(path, "r") as f:
        if suffix in YAML_SUFFIXES:
            document = yaml.safe_load(f)
        else:
            document = json.load(f)

    registry = parse_descriptor_table(document, source=f"descriptor table '{path}'")
    log_debug(f"Parsed descriptor table {path}", pretty=False)
    return registry


def dump_descriptor_table(registry: DescriptorRegistry, path: "StrPath") -> None:
    path = Path(path)
    suffix = path.suffix.lower()
    if suffix not in YAML_SUFFIXES + JSON_SUFFIXES:
        raise DescriptorError(f"Unsupported descriptor table format: '{path}'")

    table = _TableDocument(
        enums=[_EnumEntry(name=e.name, literals=list(e.literals)) for e in registry.enums()],
        records=[
            _RecordEntry(
                name=r.name,
                fields=[
                    _FieldEntry(
                        name=f.name,
                        type=str(f.type),
                        wire_name=f.wire_name if f.wire_name != f.name else None,
                        required=f.required,
                    )
                    for f in r.fields
                ],
                description=r.description,
                discriminator=r.discriminator,
                variants=dict(r.variants),
            )
            for r in registry.records()
        ],
    )
    d = attrs.asdict(table, recurse=True, filter=lambda _, value: value is not None)

    if not path.parent.exists():
        path.parent.mkdir(parents=True)

    with open(path, "w") as f:
        if suffix in YAML_SUFFIXES:
            f.write(yaml.dump(d, default_flow_style=False, sort_keys=False))
        else:
            json.dump(d, f, indent=2)
