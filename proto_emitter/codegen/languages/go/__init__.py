"""
Go code generator module.

Emits Go source files with version markers, imports and public-import
forwarding declarations.
"""

from .generator import (
    GoGenerator,
    default_body_emitters,
    emit_enums,
    emit_file_descriptor,
    emit_messages,
    should_forward,
)
from .file import GoGeneratedFile
from .introspect import Declaration, DeclKind, ExprShape, GoSource, parse_source
from .naming import GoIdent, GoImportPath, descriptor_ident, go_package_name

__all__ = [
    "GoGenerator",
    "GoGeneratedFile",
    "default_body_emitters",
    "emit_enums",
    "emit_messages",
    "emit_file_descriptor",
    "should_forward",
    # Introspection
    "Declaration",
    "DeclKind",
    "ExprShape",
    "GoSource",
    "parse_source",
    # Naming
    "GoIdent",
    "GoImportPath",
    "descriptor_ident",
    "go_package_name",
]
