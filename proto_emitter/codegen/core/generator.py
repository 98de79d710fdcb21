"""
Base generator interface for all code generation targets.

Defines the error taxonomy, the contract language generators implement,
and the top-level driver that turns a loaded request into output files.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence

from ...logging_config import get_logger
from .config import GeneratorConfig
from .templates import TemplateEngine, create_template_engine

if TYPE_CHECKING:
    from .emitter import GeneratedFile, Plugin
    from .schema import SchemaFile

logger = get_logger(__name__)


class GeneratorError(Exception):
    """Base exception for code generation errors.

    Carries the offending file path and, for errors raised while following
    public imports, the chain of files that led to it.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        chain: Optional[Sequence[str]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.path = path
        self.chain: List[str] = list(chain or [])

    def with_chain(self, chain: Sequence[str]) -> "GeneratorError":
        """Attach the import chain unless a deeper frame already did."""
        if not self.chain:
            self.chain = list(chain)
        return self

    def __str__(self) -> str:
        if self.chain:
            return f"{self.message} (import chain: {' -> '.join(self.chain)})"
        return self.message


class SchemaError(GeneratorError):
    """The loaded descriptor set is malformed."""


class MissingDependencyError(GeneratorError):
    """An import names a file that is not part of the loaded set."""


class SourceSyntaxError(GeneratorError):
    """Generated source could not be parsed."""

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ):
        location = path or "<source>"
        if line is not None:
            location = f"{location}:{line}:{column or 1}"
        super().__init__(f"{location}: {message}", path=path)
        self.line = line
        self.column = column


class ImportCycleError(GeneratorError):
    """Public imports form a cycle."""


class UnrecognizedDeclarationError(GeneratorError):
    """A top-level declaration has a shape the forwarding rules do not cover."""


class CodeGenerator(ABC):
    """Abstract base class for all code generators."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        """Initialize generator with optional configuration."""
        self.config = config or GeneratorConfig()
        self._template_engine: Optional[TemplateEngine] = None
        self._setup_templates()

    def _setup_templates(self):
        """Setup template engine for this generator."""
        self._template_engine = create_template_engine(self.get_template_directory())

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the name of the target language (e.g., 'go')."""
        pass

    @property
    @abstractmethod
    def file_extension(self) -> str:
        """Return the file extension for generated files (e.g., '.go')."""
        pass

    @abstractmethod
    def get_template_directory(self) -> Path:
        """Return the directory containing templates for this generator."""
        pass

    @property
    def template_engine(self) -> TemplateEngine:
        """Get the template engine for this generator."""
        if self._template_engine is None:
            self._setup_templates()
        return self._template_engine

    @abstractmethod
    def generate_file(
        self, plugin: "Plugin", file: "SchemaFile", detached: bool = False
    ) -> "GeneratedFile":
        """
        Emit the generated source for one schema file.

        Args:
            plugin: Run state holding the loaded files and output buffers
            file: Schema file to generate
            detached: Emit into a private buffer that is never part of the
                run's output (used to inspect another file's output)

        Returns:
            The buffer holding the emitted source
        """
        pass

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """Render a template with context."""
        return self.template_engine.render_template(template_name, context)


class GenerationResult:
    """Container for generation results and metadata."""

    def __init__(
        self,
        files: Dict[str, str],
        warnings: List[str] = None,
        metadata: Dict[str, Any] = None,
        supported_features: int = 0,
    ):
        """
        Initialize generation result.

        Args:
            files: Generated content keyed by output filename
            warnings: Any warnings from generation
            metadata: Additional metadata about generation
            supported_features: Feature bitmask reported to the host
        """
        self.files = files
        self.warnings = warnings or []
        self.metadata = metadata or {}
        self.supported_features = supported_features
        self.success = True
        self.error_message: Optional[str] = None
        self.exception: Optional[Exception] = None

    @classmethod
    def error(cls, message: str, exception: Exception = None) -> "GenerationResult":
        """Create a failed generation result."""
        result = cls(files={})
        result.success = False
        result.error_message = message
        result.exception = exception
        return result


def generate_code(generator: CodeGenerator, plugin: "Plugin") -> GenerationResult:
    """
    Generate every requested file of a run.

    A fatal generator error aborts the whole run; no partial output is
    returned.

    Args:
        generator: Code generator instance
        plugin: Run state built from the request

    Returns:
        GenerationResult with output files, warnings, and metadata
    """
    try:
        for file in plugin.files:
            if not file.generate:
                continue
            logger.info("Generating %s", file.path)
            generator.generate_file(plugin, file)

        files = plugin.response()

    except GeneratorError as e:
        logger.error("Code generation failed: %s", e)
        return GenerationResult.error(f"Code generation failed: {e}", exception=e)

    metadata = {
        "language": generator.language_name,
        "file_extension": generator.file_extension,
        "file_count": len(files),
        "schema_count": len(plugin.files),
        "version_markers": plugin.config.generate_version_markers,
    }

    return GenerationResult(
        files,
        warnings=list(plugin.warnings),
        metadata=metadata,
        supported_features=plugin.config.supported_features,
    )
