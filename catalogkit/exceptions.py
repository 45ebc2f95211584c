import typing as t
from typing import Optional

ROOT_PATH_STR = "<root>"

PathSegment = t.Union[str, int]


def format_path(path: t.Sequence[PathSegment]) -> str:
    if len(path) == 0:
        return ROOT_PATH_STR
    return ".".join(str(segment) for segment in path)


def _describe_value(value: t.Any, max_len: int = 40) -> str:
    if isinstance(value, (str, int, float)) or value is None:
        described = repr(value)
        if len(described) > max_len:
            described = described[: max_len - 3] + "..."
        return f"{type(value).__name__} {described}"
    return type(value).__name__


class CatalogException(Exception):
    """
    Base class for all catalogkit's errors.
    Each custom exception should be derived from this class.
    """

    pass


class MarshalError(CatalogException):
    """
    Raised while converting between wire values and record instances.

    ``path`` locates the first failing value. Segments are field names (wire names
    on deserialization, logical names on serialization), list indices and map keys.
    """

    def __init__(self, path: t.Sequence[PathSegment], msg: str):
        self.path = tuple(path)
        self.msg = msg
        super().__init__(str(self))

    @property
    def path_str(self) -> str:
        return format_path(self.path)

    def __str__(self):
        return f"{self.path_str}: {self.msg}"


class MissingFieldError(MarshalError):
    def __init__(self, path: t.Sequence[PathSegment], record: str, field: str):
        self.record = record
        self.field = field
        super().__init__(path, f"required field '{field}' of '{record}' is missing")


class InvalidEnumValueError(MarshalError):
    def __init__(
        self,
        path: t.Sequence[PathSegment],
        enum_name: str,
        value: t.Any,
        literals: t.Sequence[str],
    ):
        self.enum_name = enum_name
        self.value = value
        self.literals = tuple(literals)
        allowed = ", ".join(repr(lit) for lit in self.literals)
        super().__init__(path, f"{value!r} is not a valid '{enum_name}' (allowed: {allowed})")


class TypeMismatchError(MarshalError):
    def __init__(self, path: t.Sequence[PathSegment], expected: str, actual: t.Any):
        self.expected = expected
        self.actual = actual
        super().__init__(path, f"expected {expected}, got {_describe_value(actual)}")


class UnknownTypeError(CatalogException):
    kind = "type"

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown {self.kind}: '{name}'")


class UnknownRecordTypeError(UnknownTypeError):
    kind = "record type"


class UnknownEnumTypeError(UnknownTypeError):
    kind = "enum type"


class DescriptorError(CatalogException):
    pass


class DescriptorRegistryError(DescriptorError):
    pass


class NotConfigured(CatalogException):
    pass


class ClientError(CatalogException):
    def __init__(
        self,
        url: str,
        status_code: int,
        reason: str,
        detail: str,
        msg_prefix: Optional[str] = None,
    ):
        self.url = url
        self.status_code = status_code
        self.reason = reason
        self.detail = detail
        self.msg_prefix = msg_prefix

    def __str__(self):
        basic_err_msg = f"{self.url} - Response {self.status_code} {self.reason}"
        if self.msg_prefix:
            err_msg = f"{self.msg_prefix} ({basic_err_msg})"
        else:
            err_msg = "Request failed to " + basic_err_msg
        err_msg += f"\n\nDetails:\n{self.detail}"
        return err_msg


class CatalogClientError(ClientError):
    pass
