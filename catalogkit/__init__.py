from catalogkit._internal.catalog_clients import CatalogAPIClient
from catalogkit._internal.configs import CatalogClientConfig
from catalogkit._internal.descriptors import (
    CollectionOf,
    EnumDescriptor,
    EnumRef,
    FieldDescriptor,
    MapOf,
    Primitive,
    PrimitiveKind,
    RecordDescriptor,
    RecordRef,
    parse_type_ref,
)
from catalogkit._internal.logging import init_logger
from catalogkit._internal.marshaler import Marshaler, deserialize, serialize
from catalogkit._internal.registry import (
    DescriptorRegistry,
    get_default_registry,
    get_field_map,
)
from catalogkit._internal.schema_table import (
    dump_descriptor_table,
    load_descriptor_table,
    parse_descriptor_table,
)

from ._versions import pkg_version as __version__

__all__ = [
    "CatalogAPIClient",
    "CatalogClientConfig",
    "CollectionOf",
    "EnumDescriptor",
    "EnumRef",
    "FieldDescriptor",
    "MapOf",
    "Primitive",
    "PrimitiveKind",
    "RecordDescriptor",
    "RecordRef",
    "parse_type_ref",
    "init_logger",
    "Marshaler",
    "deserialize",
    "serialize",
    "DescriptorRegistry",
    "get_default_registry",
    "get_field_map",
    "dump_descriptor_table",
    "load_descriptor_table",
    "parse_descriptor_table",
    "__version__",
]
