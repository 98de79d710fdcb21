"""
Core schema representation for code generation.

Converts a protoc-style code generator request (as a JSON-compatible dict)
into immutable descriptors that generators work with.
"""

import posixpath
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .config import PATHS_IMPORT, GeneratorConfig
from .generator import SchemaError

# FileDescriptorProto field numbers used as source-location paths.
PACKAGE_FIELD_NUMBER = 2
SYNTAX_FIELD_NUMBER = 12


@dataclass(frozen=True)
class CompilerVersion:
    """Version of the compiler that produced the request."""

    major: int = 0
    minor: int = 0
    patch: int = 0
    suffix: str = ""

    def __str__(self) -> str:
        version = f"v{self.major}.{self.minor}.{self.patch}"
        if self.suffix:
            version += f"-{self.suffix}"
        return version

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompilerVersion":
        return cls(
            major=int(data.get("major", 0)),
            minor=int(data.get("minor", 0)),
            patch=int(data.get("patch", 0)),
            suffix=data.get("suffix", "") or "",
        )


@dataclass(frozen=True)
class SourceLocation:
    """Comments attached to one element of a schema file."""

    path: Tuple[int, ...]
    leading_comments: str = ""
    trailing_comments: str = ""
    leading_detached_comments: Tuple[str, ...] = ()


@dataclass(frozen=True)
class ImportEdge:
    """A dependency of one schema file on another."""

    path: str
    public: bool = False
    weak: bool = False

    def __post_init__(self):
        if self.public and self.weak:
            raise SchemaError(
                f"import {self.path!r} cannot be both public and weak", path=self.path
            )


@dataclass(frozen=True)
class EnumValue:
    name: str
    number: int


@dataclass(frozen=True)
class EnumDecl:
    name: str
    values: Tuple[EnumValue, ...] = ()


@dataclass(frozen=True)
class MessageDecl:
    name: str
    nested_messages: Tuple["MessageDecl", ...] = ()
    enums: Tuple[EnumDecl, ...] = ()


@dataclass(frozen=True)
class SchemaFile:
    """One loaded IDL file and everything needed to emit its output."""

    path: str
    go_import_path: str
    proto_package: str = ""
    go_package_name: Optional[str] = None
    imports: Tuple[ImportEdge, ...] = ()
    deprecated: bool = False
    messages: Tuple[MessageDecl, ...] = ()
    enums: Tuple[EnumDecl, ...] = ()
    source_locations: Dict[Tuple[int, ...], SourceLocation] = field(
        default_factory=dict, compare=False
    )
    generate: bool = False
    generated_filename_prefix: str = ""

    def location(self, *path: int) -> SourceLocation:
        """Return the comments recorded for a source path (empty if none)."""
        return self.source_locations.get(tuple(path), SourceLocation(tuple(path)))


@dataclass
class CodeGeneratorRequest:
    """The descriptor set and options handed to the generator by its host."""

    file_to_generate: List[str]
    proto_file: List[Dict[str, Any]]
    parameter: str = ""
    compiler_version: Optional[CompilerVersion] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CodeGeneratorRequest":
        """
        Build a request from its JSON form.

        Raises:
            SchemaError: If required sections are missing or mistyped
        """
        if not isinstance(data, dict):
            raise SchemaError("request must be a JSON object")

        proto_files = data.get("proto_file", [])
        if not isinstance(proto_files, list):
            raise SchemaError("request 'proto_file' must be a list")

        to_generate = data.get("file_to_generate", [])
        if not isinstance(to_generate, list):
            raise SchemaError("request 'file_to_generate' must be a list")

        version = data.get("compiler_version")
        return cls(
            file_to_generate=list(to_generate),
            proto_file=proto_files,
            parameter=data.get("parameter", "") or "",
            compiler_version=CompilerVersion.from_dict(version) if version is not None else None,
        )


def build_schema_files(
    request: CodeGeneratorRequest, config: GeneratorConfig
) -> List[SchemaFile]:
    """
    Convert every descriptor of a request into a SchemaFile.

    Raises:
        SchemaError: On malformed descriptors or unknown files to generate
    """
    wanted = set(request.file_to_generate)
    files = [
        _build_schema_file(descriptor, config, generate=descriptor.get("name") in wanted)
        for descriptor in request.proto_file
    ]

    known = {f.path for f in files}
    for path in request.file_to_generate:
        if path not in known:
            raise SchemaError(f"no descriptor for file to generate: {path}", path=path)
    return files


def _build_schema_file(
    descriptor: Dict[str, Any], config: GeneratorConfig, generate: bool
) -> SchemaFile:
    path = descriptor.get("name")
    if not path:
        raise SchemaError("file descriptor without a name")

    options = descriptor.get("options") or {}
    import_path, package_name = _resolve_go_package(path, options, config)

    prefix = posixpath.splitext(path)[0]
    if config.paths == PATHS_IMPORT:
        prefix = posixpath.join(import_path, posixpath.basename(prefix))

    return SchemaFile(
        path=path,
        go_import_path=import_path,
        proto_package=descriptor.get("package", ""),
        go_package_name=package_name,
        imports=_build_imports(path, descriptor),
        deprecated=bool(options.get("deprecated", False)),
        messages=tuple(_build_message(m) for m in descriptor.get("message_type", [])),
        enums=tuple(_build_enum(e) for e in descriptor.get("enum_type", [])),
        source_locations=_build_locations(descriptor.get("source_code_info") or {}),
        generate=generate,
        generated_filename_prefix=prefix,
    )


def _resolve_go_package(
    path: str, options: Dict[str, Any], config: GeneratorConfig
) -> Tuple[str, Optional[str]]:
    """Return (import path, explicit package name or None) for a file."""
    go_package = config.import_path_overrides.get(path) or options.get("go_package", "")
    if not go_package:
        raise SchemaError(
            f"unable to determine Go import path for {path!r}: "
            f"set option go_package or pass M{path}=<import path>",
            path=path,
        )
    import_path, sep, name = go_package.partition(";")
    if not import_path:
        raise SchemaError(f"invalid go_package {go_package!r} in {path!r}", path=path)
    return import_path, (name or None) if sep else None


def _build_imports(path: str, descriptor: Dict[str, Any]) -> Tuple[ImportEdge, ...]:
    dependencies = descriptor.get("dependency", [])
    public = set(descriptor.get("public_dependency", []))
    weak = set(descriptor.get("weak_dependency", []))

    for index in public | weak:
        if not isinstance(index, int) or not 0 <= index < len(dependencies):
            raise SchemaError(
                f"dependency index {index!r} out of range in {path!r}", path=path
            )

    try:
        return tuple(
            ImportEdge(dep, public=i in public, weak=i in weak)
            for i, dep in enumerate(dependencies)
        )
    except SchemaError as e:
        raise SchemaError(f"{path}: {e.message}", path=path) from e


def _build_enum(data: Dict[str, Any]) -> EnumDecl:
    return EnumDecl(
        name=_require_name(data, "enum"),
        values=tuple(
            EnumValue(_require_name(v, "enum value"), int(v.get("number", 0)))
            for v in data.get("value", [])
        ),
    )


def _build_message(data: Dict[str, Any]) -> MessageDecl:
    return MessageDecl(
        name=_require_name(data, "message"),
        nested_messages=tuple(_build_message(m) for m in data.get("nested_type", [])),
        enums=tuple(_build_enum(e) for e in data.get("enum_type", [])),
    )


def _build_locations(info: Dict[str, Any]) -> Dict[Tuple[int, ...], SourceLocation]:
    locations: Dict[Tuple[int, ...], SourceLocation] = {}
    for loc in info.get("location", []):
        key = tuple(loc.get("path", []))
        # The first location recorded for a path wins.
        if key in locations:
            continue
        locations[key] = SourceLocation(
            path=key,
            leading_comments=loc.get("leading_comments", ""),
            trailing_comments=loc.get("trailing_comments", ""),
            leading_detached_comments=tuple(loc.get("leading_detached_comments", [])),
        )
    return locations


def _require_name(data: Dict[str, Any], what: str) -> str:
    name = data.get("name")
    if not name:
        raise SchemaError(f"{what} without a name")
    return name
