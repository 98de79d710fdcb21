"""
Output buffer for generated Go files.

Tracks the packages a file refers to, qualifies identifiers with a
per-file package alias and inserts the import block when the buffer is
materialized. Materialized Go text is parsed before it is returned, so a
buffer that is not valid Go fails loudly.
"""

from typing import Dict, List

from ....logging_config import get_logger
from ...core.emitter import GeneratedFile
from .introspect import parse_source
from .naming import GO_PREDECLARED, GoIdent, GoImportPath, base_package_name

logger = get_logger(__name__)


class GoGeneratedFile(GeneratedFile):
    """Generated Go file with automatic import management."""

    def __init__(self, filename: str, import_path: str = ""):
        super().__init__(filename, import_path)
        # Import path -> package alias used in this file, in first-use order.
        self._package_names: Dict[str, str] = {}
        self._used_package_names = set(GO_PREDECLARED)
        # Imports requested without any referenced symbol.
        self._manual_imports: List[str] = []

    def import_package(self, import_path) -> None:
        """Import a package even if no identifier from it is referenced."""
        path = str(import_path)
        if path != self.import_path and path not in self._manual_imports:
            self._manual_imports.append(path)

    def qualified_ident(self, ident: GoIdent) -> str:
        """Return ``ident`` as written in this file, importing its package."""
        if ident.import_path == self.import_path:
            return ident.name

        name = self._package_names.get(ident.import_path)
        if name is None:
            base = base_package_name(ident.import_path)
            name = base
            suffix = 1
            while name in self._used_package_names:
                name = f"{base}{suffix}"
                suffix += 1
            self._package_names[ident.import_path] = name
            self._used_package_names.add(name)
        return f"{name}.{ident.name}"

    def render_part(self, part) -> str:
        if isinstance(part, GoIdent):
            return self.qualified_ident(part)
        if isinstance(part, GoImportPath):
            return f'"{part.path}"'
        return str(part)

    def import_specs(self) -> List[str]:
        """Import lines for the import block, sorted by path."""
        specs = {path: f'{name} "{path}"' for path, name in self._package_names.items()}
        for path in self._manual_imports:
            specs.setdefault(path, f'_ "{path}"')
        return [specs[path] for path in sorted(specs)]

    def render(self) -> str:
        if not self.filename.endswith(".go"):
            return super().render()

        lines = list(self.lines)
        specs = self.import_specs()
        if specs:
            for i, line in enumerate(lines):
                if line.startswith("package "):
                    block = ["", "import ("] + [f"\t{spec}" for spec in specs] + [")"]
                    lines[i + 1 : i + 1] = block
                    break
        return "\n".join(lines) + "\n"

    def validate(self, content: str) -> None:
        if not self.filename.endswith(".go"):
            return
        parse_source(content, self.filename)
        logger.debug("Validated %s", self.filename)
