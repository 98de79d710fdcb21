"""
Go-specific naming utilities.

Handles Go reserved words, predeclared identifiers, package naming and the
identifiers generated code refers to.
"""

import posixpath
from dataclasses import dataclass

from ...core.naming import camel_case, sanitize_identifier
from ...core.schema import SchemaFile

# Go reserved words
GO_RESERVED_WORDS = frozenset(
    {
        "break",
        "case",
        "chan",
        "const",
        "continue",
        "default",
        "defer",
        "else",
        "fallthrough",
        "for",
        "func",
        "go",
        "goto",
        "if",
        "import",
        "interface",
        "map",
        "package",
        "range",
        "return",
        "select",
        "struct",
        "switch",
        "type",
        "var",
    }
)

# Predeclared identifiers; import aliases must not shadow these.
GO_PREDECLARED = frozenset(
    {
        "any",
        "bool",
        "byte",
        "comparable",
        "complex64",
        "complex128",
        "error",
        "float32",
        "float64",
        "int",
        "int8",
        "int16",
        "int32",
        "int64",
        "rune",
        "string",
        "uint",
        "uint8",
        "uint16",
        "uint32",
        "uint64",
        "uintptr",
        "true",
        "false",
        "iota",
        "nil",
        "append",
        "cap",
        "clear",
        "close",
        "complex",
        "copy",
        "delete",
        "imag",
        "len",
        "make",
        "max",
        "min",
        "new",
        "panic",
        "print",
        "println",
        "real",
        "recover",
    }
)


@dataclass(frozen=True)
class GoIdent:
    """A Go identifier together with the package that declares it."""

    name: str
    import_path: str


@dataclass(frozen=True)
class GoImportPath:
    """A Go package import path."""

    path: str

    def ident(self, name: str) -> GoIdent:
        return GoIdent(name, self.path)

    def __str__(self) -> str:
        return self.path


# Runtime packages referenced by generated code.
PROTOIMPL_PACKAGE = GoImportPath("google.golang.org/protobuf/runtime/protoimpl")
PROTOREFLECT_PACKAGE = GoImportPath("google.golang.org/protobuf/reflect/protoreflect")


def go_sanitized(name: str) -> str:
    """Sanitize ``name`` into a valid Go identifier."""
    return sanitize_identifier(name, GO_RESERVED_WORDS)


def go_camel_case(name: str) -> str:
    """Convert a schema name into an exported Go name."""
    return camel_case(name)


def clean_package_name(name: str) -> str:
    return go_sanitized(name)


def base_package_name(import_path: str) -> str:
    """Default package name for an import path: its cleaned last element."""
    return clean_package_name(posixpath.basename(import_path.rstrip("/")))


def go_package_name(file: SchemaFile) -> str:
    """Package name used in the package clause of a file's output."""
    if file.go_package_name:
        return clean_package_name(file.go_package_name)
    return base_package_name(file.go_import_path)


def descriptor_ident(file: SchemaFile) -> GoIdent:
    """Identifier of the file descriptor singleton, e.g. ``File_foo_bar_proto``."""
    return GoIdent("File_" + go_sanitized(file.path), file.go_import_path)


def is_exported(name: str) -> bool:
    """Go exports identifiers whose first character is an upper-case letter."""
    return bool(name) and name[0].isupper()
