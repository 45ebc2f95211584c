import threading
import typing as t

from catalogkit._internal import constants
from catalogkit._internal.logging import log_debug
from catalogkit.exceptions import (
    DescriptorError,
    DescriptorRegistryError,
    UnknownEnumTypeError,
    UnknownRecordTypeError,
)

from .descriptors import EnumDescriptor, EnumRef, RecordDescriptor, iter_named_refs


class DescriptorRegistry:
    """
    Table of record and enum descriptors, keyed by name.

    Fill it once, then only read from it. Lookups never mutate the table, so a
    populated registry can be shared between threads.
    """

    def __init__(
        self,
        records: t.Iterable[RecordDescriptor] = (),
        enums: t.Iterable[EnumDescriptor] = (),
    ) -> None:
        self._records: t.Dict[str, RecordDescriptor] = dict()
        self._enums: t.Dict[str, EnumDescriptor] = dict()
        for enum_descriptor in enums:
            self.register_enum(enum_descriptor)
        for record_descriptor in records:
            self.register_record(record_descriptor)

    def register_record(self, descriptor: RecordDescriptor, overwrite: bool = False) -> None:
        if descriptor.name in self._enums:
            raise DescriptorRegistryError(
                f"Name '{descriptor.name}' is already registered as an enum"
            )
        if not overwrite and descriptor.name in self._records:
            raise DescriptorRegistryError(f"Record already registered: '{descriptor.name}'")
        self._records[descriptor.name] = descriptor

    def register_enum(self, descriptor: EnumDescriptor, overwrite: bool = False) -> None:
        if descriptor.name in self._records:
            raise DescriptorRegistryError(
                f"Name '{descriptor.name}' is already registered as a record"
            )
        if not overwrite and descriptor.name in self._enums:
            raise DescriptorRegistryError(f"Enum already registered: '{descriptor.name}'")
        self._enums[descriptor.name] = descriptor

    def get_record(self, name: str) -> RecordDescriptor:
        try:
            return self._records[name]
        except KeyError:
            raise UnknownRecordTypeError(name) from None

    def get_enum(self, name: str) -> EnumDescriptor:
        try:
            return self._enums[name]
        except KeyError:
            raise UnknownEnumTypeError(name) from None

    def has_record(self, name: str) -> bool:
        return name in self._records

    def has_enum(self, name: str) -> bool:
        return name in self._enums

    def records(self) -> t.List[RecordDescriptor]:
        return list(self._records.values())

    def enums(self) -> t.List[EnumDescriptor]:
        return list(self._enums.values())

    def validate(self) -> None:
        """Check that every type reference and every discriminator variant resolves."""
        for record in self._records.values():
            for field in record.fields:
                for ref in iter_named_refs(field.type):
                    if isinstance(ref, EnumRef):
                        self.get_enum(ref.name)
                    else:
                        self.get_record(ref.name)

            for literal, variant_name in record.variants:
                variant = self.get_record(variant_name)
                discriminator = record.get_discriminator_field().name
                if variant.get_field(discriminator) is None:
                    raise DescriptorError(
                        f"Variant '{variant_name}' of record '{record.name}' "
                        f"(for {literal!r}) has no discriminator field '{discriminator}'"
                    )


_default_registry: t.Optional[DescriptorRegistry] = None
_default_registry_lock = threading.Lock()


def get_default_registry() -> DescriptorRegistry:
    """
    Returns the process-wide registry.
    Built from the descriptor table at ``constants.SCHEMA_TABLE_PATH`` on first use.
    """
    global _default_registry

    if _default_registry is None:
        with _default_registry_lock:
            if _default_registry is None:
                from .schema_table import load_descriptor_table

                registry = load_descriptor_table(constants.SCHEMA_TABLE_PATH)
                registry.validate()
                log_debug(
                    f"Loaded {len(registry.records())} records and {len(registry.enums())} "
                    f"enums from {constants.SCHEMA_TABLE_PATH}",
                    pretty=False,
                )
                _default_registry = registry

    return _default_registry


def get_field_map(record_name: str) -> RecordDescriptor:
    return get_default_registry().get_record(record_name)
