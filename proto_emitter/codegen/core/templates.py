"""
Template engine wrapper for code generation.

Provides a simple interface for Jinja2 template rendering
with the filters generated source needs.
"""

from pathlib import Path
from typing import Any, Dict

from jinja2 import Environment, FileSystemLoader, StrictUndefined


class TemplateError(Exception):
    """Exception raised for template-related errors."""

    pass


class TemplateEngine:
    """Wrapper for Jinja2 template engine with code generation utilities."""

    def __init__(self, template_dir: Path):
        """
        Initialize template engine.

        Args:
            template_dir: Directory containing template files
        """
        self.template_dir = template_dir
        self._env = None
        self._setup_environment()

    def _setup_environment(self):
        """Setup Jinja2 environment with code generation utilities."""
        # Generated source is not markup; never escape.
        self._env = Environment(
            loader=FileSystemLoader(str(self.template_dir)),
            autoescape=False,
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )

        self._env.filters["comment"] = self._comment_filter

    def render_template(self, template_name: str, context: Dict[str, Any]) -> str:
        """
        Render a template with the given context.

        Args:
            template_name: Name of template file
            context: Variables to pass to template

        Returns:
            Rendered template content
        """
        try:
            template = self._env.get_template(template_name)
            return template.render(**context)
        except Exception as e:
            raise TemplateError(
                f"Failed to render template {template_name}: {str(e)}"
            ) from e

    # Template filters for code generation

    def _comment_filter(self, value: str, style: str = "//") -> str:
        """Prefix every line with a line-comment marker.

        Text is kept verbatim after the marker, so protoc comments (which
        keep their leading space) read as ``// text``.
        """
        text = str(value)
        if text.endswith("\n"):
            text = text[:-1]
        return "\n".join(f"{style}{line}" for line in text.split("\n"))


def create_template_engine(template_dir: Path) -> TemplateEngine:
    """Create a template engine reading from ``template_dir``."""
    return TemplateEngine(template_dir)
