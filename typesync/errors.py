"""
Error types for typesync.

Every error a caller can act on derives from TypesyncError and carries
structured attributes (paths, names, locations) in addition to its message.
InvariantViolation is deliberately separate: it signals a defect, not a
user error, and library code never catches it.
"""

from __future__ import annotations

from collections.abc import Sequence


def format_path(path: Sequence[str]) -> str:
    """Join a diagnostic path into a dotted string."""
    return ".".join(path)


class TypesyncError(Exception):
    """Base exception class for all typesync errors."""

    pass


class SerdeError(TypesyncError):
    """A shape that cannot round-trip through a structural serialization format."""

    description = "invalid type"

    def __init__(self, path: Sequence[str] = (), detail: str | None = None):
        self.path = tuple(path)
        self.detail = detail
        message = f"{self.description} at {format_path(self.path) or '<root>'!r}"
        if detail:
            message += f": {detail}"
        super().__init__(message)


class InvalidMapKeyError(SerdeError):
    """Raised when a map key does not reduce to a string-like or number-like type."""

    description = "a map key must be a 'string' or 'number' type"


class InvalidInternallyTaggedEnumError(SerdeError):
    """Raised when an internally tagged enum holds a variant the tag cannot be merged into."""

    description = "an internally tagged enum cannot contain this variant"


class InvalidUsageOfSkipError(SerdeError):
    """Raised when skipping a field or variant removes content required for decoding."""

    description = "the usage of skip means the type can't be serialized"


class EnumReprError(TypesyncError):
    """Raised when an enum representation is incompatible with the enum's shape."""

    def __init__(self, path: Sequence[str], reason: str):
        self.path = tuple(path)
        self.reason = reason
        super().__init__(f"Invalid enum representation for {format_path(self.path)!r}: {reason}")


class NamingError(TypesyncError):
    """Base class for naming problems."""

    pass


class ForbiddenNameError(NamingError):
    """Raised when a type name collides with a reserved word of the target syntax."""

    def __init__(self, path: Sequence[str], name: str, language: str):
        self.path = tuple(path)
        self.name = name
        self.language = language
        super().__init__(
            f"Attempted to export {format_path(self.path)!r} but its name {name!r} "
            f"conflicts with a reserved keyword in {language}. Try renaming it."
        )


class InvalidNameError(NamingError):
    """Raised when a type name contains characters the target syntax does not allow."""

    def __init__(self, path: Sequence[str], name: str):
        self.path = tuple(path)
        self.name = name
        super().__init__(f"Attempted to export {format_path(self.path)!r} but its name {name!r} contains an invalid character.")


class DuplicateTypeNameError(NamingError):
    """Raised when two distinct types render to the same display name."""

    def __init__(self, name: str, first, second):
        self.name = name
        self.locations = (first, second)
        super().__init__(f"Detected multiple types with the same name {name!r}: declared at {first} and at {second}")


class BigIntForbiddenError(TypesyncError):
    """Raised when a 64-bit or wider integer is exported under the 'fail' policy."""

    def __init__(self, path: Sequence[str]):
        self.path = tuple(path)
        super().__init__(
            f"Attempted to export {format_path(self.path)!r} but the configuration forbids exporting "
            "big integer types (i64, u64, i128, u128, isize, usize) because their precision cannot be "
            "guaranteed. Set the 'bigint' option to 'string', 'number' or 'bigint' to allow it."
        )


class ExportError(TypesyncError):
    """Base class for structural and backend errors."""

    pass


class UnsupportedShapeError(ExportError):
    """Raised when a backend cannot express a shape."""

    def __init__(self, path: Sequence[str], reason: str):
        self.path = tuple(path)
        self.reason = reason
        super().__init__(f"Unsupported shape at {format_path(self.path)!r}: {reason}")


class InvalidReferenceError(ExportError):
    """Raised when a reference points at a type missing from the collection."""

    def __init__(self, type_id, path: Sequence[str] = ()):
        self.type_id = type_id
        self.path = tuple(path)
        super().__init__(f"Reference to {type_id} at {format_path(self.path)!r} is not registered in the collection")


class InvalidOpaqueReferenceError(ExportError):
    """Raised when a backend does not know how to render an opaque reference."""

    def __init__(self, kind: str, path: Sequence[str] = (), language: str = ""):
        self.kind = kind
        self.path = tuple(path)
        self.language = language
        target = f" to {language}" if language else ""
        super().__init__(f"Opaque reference of kind {kind!r} at {format_path(self.path)!r} cannot be exported{target}")


class InvalidSchemaVersionError(ExportError):
    """Raised for an unknown schema-version selector."""

    def __init__(self, selector: str):
        self.selector = selector
        super().__init__(f"Invalid schema version: {selector!r}")


class UnsupportedLayoutError(ExportError):
    """Raised when an operation does not support the configured layout."""

    pass


class OutputValidationError(ExportError):
    """Raised when rendered output fails the pre-write sanity check."""

    pass


class ExportIOError(TypesyncError):
    """Wraps a filesystem failure while writing output."""

    def __init__(self, message: str, path=None):
        self.path = path
        super().__init__(message)


class FormatterError(ExportIOError):
    """Raised when an external formatter cannot be run or exits with an error."""

    pass


class InvariantViolation(RuntimeError):
    """An internal invariant was broken. This is a defect, never a user error."""

    pass
