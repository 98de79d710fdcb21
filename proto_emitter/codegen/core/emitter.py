"""
Output buffers and per-run state.

A ``Plugin`` owns the loaded schema files and every output buffer opened
during one generation run. A ``GeneratedFile`` is an append-only buffer
bound to one output filename; its text is only rendered on
``materialize()``.
"""

from typing import Callable, Dict, List, Optional, Tuple

from ...logging_config import get_logger
from .config import GeneratorConfig
from .generator import MissingDependencyError
from .schema import CodeGeneratorRequest, SchemaFile, build_schema_files

logger = get_logger(__name__)


class GeneratedFile:
    """Append-only buffer of generated lines."""

    def __init__(self, filename: str, import_path: str = ""):
        self.filename = filename
        self.import_path = import_path
        self.detached = False
        self.materialized = False
        self._lines: List[str] = []

    def emit(self, *parts) -> None:
        """Append one line made of ``parts``; no parts appends a blank line."""
        self._lines.append("".join(self.render_part(part) for part in parts))

    def write(self, block: str) -> None:
        """Append a multi-line block, one buffer line per text line."""
        if block.endswith("\n"):
            block = block[:-1]
        self._lines.extend(block.split("\n"))

    def render_part(self, part) -> str:
        """Turn one ``emit`` argument into text."""
        return str(part)

    def mark_detached(self) -> None:
        """Exclude this buffer from the run's output; it can still be materialized."""
        self.detached = True

    @property
    def lines(self) -> Tuple[str, ...]:
        return tuple(self._lines)

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def render(self) -> str:
        """Assemble the final text from the buffered lines."""
        return "\n".join(self._lines) + "\n"

    def validate(self, content: str) -> None:
        """Check rendered content; language buffers override this."""

    def materialize(self) -> str:
        """
        Render the buffer to its final text.

        Raises:
            GeneratorError: If the rendered text fails validation
        """
        content = self.render()
        self.validate(content)
        self.materialized = True
        return content


FileFactory = Callable[..., GeneratedFile]


class Plugin:
    """State of one generation run: loaded files and opened buffers."""

    def __init__(self, request: CodeGeneratorRequest, config: Optional[GeneratorConfig] = None):
        self.request = request
        self.config = config or GeneratorConfig()
        self.files: List[SchemaFile] = build_schema_files(request, self.config)
        self.files_by_path: Dict[str, SchemaFile] = {f.path: f for f in self.files}
        self.warnings: List[str] = []
        self._generated: Dict[str, GeneratedFile] = {}

    def find_file(self, path: str) -> SchemaFile:
        """
        Look up a loaded file by path.

        Raises:
            MissingDependencyError: If the file is not part of this run
        """
        try:
            return self.files_by_path[path]
        except KeyError:
            raise MissingDependencyError(
                f"{path} is not in the loaded file set", path=path
            ) from None

    def output_filename(self, file: SchemaFile, extension: str) -> str:
        return f"{file.generated_filename_prefix}{self.config.file_suffix}{extension}"

    def open_file(
        self,
        filename: str,
        import_path: str,
        detached: bool = False,
        factory: FileFactory = GeneratedFile,
    ) -> GeneratedFile:
        """
        Open the output buffer for ``filename``.

        Non-detached opens are registered once per run: opening the same
        filename again returns the existing buffer. Detached opens always
        get a private buffer that never reaches the output set.
        """
        if detached:
            generated = factory(filename, import_path)
            generated.mark_detached()
            return generated

        existing = self._generated.get(filename)
        if existing is not None:
            logger.debug("Reusing output buffer for %s", filename)
            return existing

        generated = factory(filename, import_path)
        self._generated[filename] = generated
        return generated

    def warn(self, message: str) -> None:
        """Record a non-fatal problem once per run."""
        if message not in self.warnings:
            self.warnings.append(message)

    def generated_files(self) -> List[GeneratedFile]:
        """Buffers that belong to the run's output, in opening order."""
        return [g for g in self._generated.values() if not g.detached]

    def response(self) -> Dict[str, str]:
        """Materialize every output buffer, keyed by filename."""
        return {g.filename: g.materialize() for g in self.generated_files()}
