"""
Go code generator implementation.

Emits one Go file per schema file: header and version markers, the package
clause, imports of dependencies and forwarding declarations for every
public import.
"""

from pathlib import Path
from typing import Callable, List, Optional, Sequence

from .... import __version__
from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.emitter import Plugin
from ...core.generator import (
    CodeGenerator,
    GeneratorError,
    ImportCycleError,
    MissingDependencyError,
)
from ...core.schema import (
    PACKAGE_FIELD_NUMBER,
    SYNTAX_FIELD_NUMBER,
    EnumDecl,
    ImportEdge,
    MessageDecl,
    SchemaFile,
)
from .file import GoGeneratedFile
from .introspect import Declaration, DeclKind, ExprShape, parse_source
from .naming import (
    PROTOIMPL_PACKAGE,
    PROTOREFLECT_PACKAGE,
    GoImportPath,
    descriptor_ident,
    go_camel_case,
    go_package_name,
)

logger = get_logger(__name__)

BodyEmitter = Callable[["GoGenerator", GoGeneratedFile, SchemaFile], None]


def should_forward(decl: Declaration, descriptor_name: str) -> bool:
    """
    Decide whether a declaration of a publicly imported file is re-exported.

    Unexported names, the file descriptor and declarations that already
    refer to a symbol of another package (``type T = pkg.T``) are skipped.
    """
    if not decl.exported:
        return False
    if decl.name == descriptor_name:
        return False
    if decl.expr is ExprShape.SELECTOR:
        return False
    return True


class GoGenerator(CodeGenerator):
    """Code generator for Go files."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        body_emitters: Optional[Sequence[BodyEmitter]] = None,
    ):
        """
        Initialize Go generator.

        Args:
            config: Run configuration
            body_emitters: Callables emitting a file's declarations after its
                imports; defaults to enums, messages and the file descriptor
        """
        super().__init__(config)
        if body_emitters is None:
            body_emitters = default_body_emitters() if self.config.emit_declarations else []
        self.body_emitters: List[BodyEmitter] = list(body_emitters)

        # Files whose generation is in progress, outermost first.
        self._chain: List[str] = []

    def get_template_directory(self) -> Path:
        """Return the Go templates directory."""
        return Path(__file__).parent / "templates"

    @property
    def language_name(self) -> str:
        return "go"

    @property
    def file_extension(self) -> str:
        return ".go"

    @property
    def plugin_version(self) -> str:
        return self.config.plugin_version or f"v{__version__}"

    def generate_file(
        self, plugin: Plugin, file: SchemaFile, detached: bool = False
    ) -> GoGeneratedFile:
        """
        Emit the Go source for ``file``.

        Raises:
            ImportCycleError: If ``file`` is already being generated further
                up the current chain of public imports
        """
        if file.path in self._chain:
            raise ImportCycleError(
                f"public import cycle through {file.path}",
                path=file.path,
                chain=self._chain + [file.path],
            )

        filename = plugin.output_filename(file, self.file_extension)
        g = plugin.open_file(
            filename, file.go_import_path, detached=detached, factory=GoGeneratedFile
        )
        if not g.is_empty:
            # Already emitted as part of this run.
            return g

        self._chain.append(file.path)
        try:
            self._generate_header(plugin, g, file)
            self._generate_standalone_comments(g, file, SYNTAX_FIELD_NUMBER)
            self._generate_standalone_comments(g, file, PACKAGE_FIELD_NUMBER)

            g.emit("package ", go_package_name(file))
            g.emit()

            self._generate_version_check(g)

            for imp in file.imports:
                self._generate_import(plugin, g, file, imp)

            for emit_body in self.body_emitters:
                emit_body(self, g, file)
        finally:
            self._chain.pop()

        logger.debug(
            "Emitted %s (%d lines%s)", filename, len(g.lines), ", detached" if detached else ""
        )
        return g

    def _generate_header(self, plugin: Plugin, g: GoGeneratedFile, file: SchemaFile) -> None:
        """Write the banner, the version comment and the provenance line."""
        version = plugin.request.compiler_version
        context = {
            "plugin_name": self.config.plugin_name,
            "plugin_version": self.plugin_version,
            "compiler_version": str(version) if version is not None else "(unknown)",
            "version_markers": self.config.generate_version_markers,
            "deprecated": file.deprecated,
            "path": file.path,
        }
        g.write(self.render_template("header.go.j2", context))

    def _generate_standalone_comments(
        self, g: GoGeneratedFile, file: SchemaFile, field_number: int
    ) -> None:
        """Copy the leading comments of a file-level element into the output."""
        loc = file.location(field_number)
        if not loc.leading_detached_comments and not loc.leading_comments:
            return
        context = {
            "detached": loc.leading_detached_comments,
            "leading": loc.leading_comments,
        }
        g.write(self.render_template("comments.go.j2", context))

    def _generate_version_check(self, g: GoGeneratedFile) -> None:
        """Emit a static check that the runtime supports this generated code."""
        if not self.config.generate_version_markers:
            return
        context = {
            "enforce_version": g.qualified_ident(PROTOIMPL_PACKAGE.ident("EnforceVersion")),
            "min_version": g.qualified_ident(PROTOIMPL_PACKAGE.ident("MinVersion")),
            "max_version": g.qualified_ident(PROTOIMPL_PACKAGE.ident("MaxVersion")),
            "gen_version": self.config.gen_version,
        }
        g.write(self.render_template("version_check.go.j2", context))

    def _generate_import(
        self, plugin: Plugin, g: GoGeneratedFile, file: SchemaFile, imp: ImportEdge
    ) -> None:
        try:
            imp_file = plugin.find_file(imp.path)
        except MissingDependencyError as e:
            logger.debug("Skipping import in %s: %s", file.path, e)
            plugin.warn(f"{file.path}: skipped import of {imp.path} (not in the loaded file set)")
            return

        if imp_file.go_import_path == file.go_import_path:
            # Don't generate imports or aliases for types in the same Go package.
            return

        # Import all non-weak dependencies, even if they are not referenced,
        # so the full transitive closure of types is linked into the binary.
        if not imp.weak:
            g.import_package(GoImportPath(imp_file.go_import_path))

        if imp.public:
            self._forward_public_import(plugin, g, imp_file)

    def _forward_public_import(
        self, plugin: Plugin, g: GoGeneratedFile, imp_file: SchemaFile
    ) -> None:
        """
        Forward every exported symbol of a publicly imported file.

        The imported file is generated into a detached buffer, materialized
        and parsed; each surviving top-level declaration becomes an alias in
        ``g``.
        """
        chain = self._chain + [imp_file.path]
        try:
            imp_gen = self.generate_file(plugin, imp_file, detached=True)
            source = parse_source(imp_gen.materialize(), imp_gen.filename)
        except GeneratorError as e:
            raise e.with_chain(chain)

        descriptor_name = descriptor_ident(imp_file).name
        imp_path = GoImportPath(imp_file.go_import_path)

        g.emit("// Symbols defined in public import of ", imp_file.path, ".")
        g.emit()
        for decl in source.declarations:
            if decl.kind is DeclKind.IMPORT:
                continue
            if not should_forward(decl, descriptor_name):
                logger.debug("Not forwarding %s from %s", decl.name, imp_file.path)
                continue
            g.emit(decl.kind.value, " ", decl.name, " = ", imp_path.ident(decl.name))
        g.emit()


def emit_enums(generator: GoGenerator, g: GoGeneratedFile, file: SchemaFile) -> None:
    """Declare every top-level and nested enum with its values."""

    def walk_enum(enum: EnumDecl, parent_name: Optional[str]) -> None:
        name = go_camel_case(enum.name)
        if parent_name:
            name = f"{parent_name}_{name}"
        # Values are prefixed by the enclosing message, or the enum itself at top level.
        prefix = parent_name or name
        values = [
            {"name": f"{prefix}_{value.name}", "number": value.number}
            for value in enum.values
        ]
        g.write(generator.render_template("enum.go.j2", {"name": name, "values": values}))

    def walk_message(message: MessageDecl, parent_name: Optional[str]) -> None:
        name = _message_name(message, parent_name)
        for enum in message.enums:
            walk_enum(enum, name)
        for nested in message.nested_messages:
            walk_message(nested, name)

    for enum in file.enums:
        walk_enum(enum, None)
    for message in file.messages:
        walk_message(message, None)


def emit_messages(generator: GoGenerator, g: GoGeneratedFile, file: SchemaFile) -> None:
    """Declare one struct type per message, nested ones as ``Outer_Inner``."""

    def walk(message: MessageDecl, parent_name: Optional[str]) -> None:
        name = _message_name(message, parent_name)
        g.write(generator.render_template("message.go.j2", {"name": name}))
        for nested in message.nested_messages:
            walk(nested, name)

    for message in file.messages:
        walk(message, None)


def emit_file_descriptor(
    generator: GoGenerator, g: GoGeneratedFile, file: SchemaFile
) -> None:
    """Declare the file descriptor singleton."""
    g.emit(
        "var ",
        descriptor_ident(file).name,
        " ",
        PROTOREFLECT_PACKAGE.ident("FileDescriptor"),
    )


def default_body_emitters() -> List[BodyEmitter]:
    return [emit_enums, emit_messages, emit_file_descriptor]


def _message_name(message: MessageDecl, parent_name: Optional[str]) -> str:
    name = go_camel_case(message.name)
    return f"{parent_name}_{name}" if parent_name else name
