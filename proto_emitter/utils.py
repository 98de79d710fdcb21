"""Utility functions for loading requests and writing generated files.

Requests are JSON documents mirroring protoc's CodeGeneratorRequest; they
can come from a local file, a URL or standard input.
"""

import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, TextIO
from urllib.parse import urlparse

import requests

from .codegen.core.generator import SchemaError
from .codegen.core.schema import CodeGeneratorRequest
from .logging_config import get_logger

logger = get_logger(__name__)


class RequestLoaderError(Exception):
    """Raised when a request cannot be read or parsed."""

    pass


def load_json_from_file(file_path: str | Path) -> tuple[str, Any]:
    """Load JSON data from a local file.

    Returns:
        Tuple of (source description, parsed JSON data).

    Raises:
        FileNotFoundError: If file doesn't exist.
        RequestLoaderError: If file cannot be read or JSON is invalid.
    """
    file_path = Path(file_path)
    logger.debug("Loading request from file: %s", file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    try:
        with file_path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise RequestLoaderError(f"Invalid JSON in file {file_path}: {e}") from e
    except OSError as e:
        raise RequestLoaderError(f"Error reading file {file_path}: {e}") from e

    logger.info("Loaded request from %s", file_path)
    return str(file_path), data


def load_json_from_url(url: str, timeout: int = 30) -> tuple[str, Any]:
    """Load JSON data from a URL.

    Raises:
        RequestLoaderError: If URL is invalid, request fails, or response isn't valid JSON.
    """
    logger.debug("Loading request from URL: %s", url)

    parsed_url = urlparse(url)
    if not all([parsed_url.scheme, parsed_url.netloc]):
        raise RequestLoaderError(f"Invalid URL: {url}")

    try:
        response = requests.get(url, timeout=timeout)
        response.raise_for_status()
        data = response.json()
    except requests.exceptions.Timeout as e:
        raise RequestLoaderError(f"Request timeout for URL: {url}") from e
    except requests.exceptions.HTTPError as e:
        raise RequestLoaderError(
            f"HTTP error {e.response.status_code} for URL: {url}"
        ) from e
    except ValueError as e:
        raise RequestLoaderError(f"Invalid JSON response from URL {url}: {e}") from e
    except requests.exceptions.RequestException as e:
        raise RequestLoaderError(f"Request error for URL {url}: {e}") from e

    logger.info("Loaded request from %s", url)
    return url, data


def load_json_from_stream(stream: TextIO) -> tuple[str, Any]:
    """Load JSON data from an open text stream (usually stdin)."""
    try:
        return "<stdin>", json.load(stream)
    except json.JSONDecodeError as e:
        raise RequestLoaderError(f"Invalid JSON on standard input: {e}") from e


def load_request(
    file_path: str | Path | None = None,
    url: str | None = None,
    stream: Optional[TextIO] = None,
    timeout: int = 30,
) -> tuple[str, CodeGeneratorRequest]:
    """Load a code generator request from exactly one source.

    Args:
        file_path: Path to a local JSON request.
        url: URL serving a JSON request.
        stream: Text stream holding a JSON request.
        timeout: Request timeout in seconds (only used for URLs).

    Returns:
        Tuple of (source description, request).

    Raises:
        RequestLoaderError: If the sources are ambiguous or loading fails.
    """
    sources = [s for s in (file_path, url, stream) if s is not None]
    if len(sources) != 1:
        raise RequestLoaderError("Exactly one of file_path, url or stream must be provided")

    if file_path is not None:
        source, data = load_json_from_file(file_path)
    elif url is not None:
        source, data = load_json_from_url(url, timeout)
    else:
        source, data = load_json_from_stream(stream or sys.stdin)

    try:
        return source, CodeGeneratorRequest.from_dict(data)
    except SchemaError as e:
        raise RequestLoaderError(f"Invalid request in {source}: {e}") from e


def write_generated_files(files: Dict[str, str], output_dir: str | Path) -> List[Path]:
    """Write generated files below ``output_dir``, creating directories.

    Returns:
        Paths written, in filename order.
    """
    root = Path(output_dir)
    written = []
    for filename in sorted(files):
        target = root / filename
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(files[filename], encoding="utf-8")
        logger.debug("Wrote %s", target)
        written.append(target)
    return written
