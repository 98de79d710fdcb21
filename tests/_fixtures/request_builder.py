"""Builders for the JSON form of code generator requests."""

from __future__ import annotations

from typing import Any, Callable, Dict, Iterable, List, Optional

from proto_emitter.codegen.core.schema import CodeGeneratorRequest


def proto_file(
    name: str,
    go_package: Optional[str],
    *,
    dependency: Iterable[str] = (),
    public: Iterable[int] = (),
    weak: Iterable[int] = (),
    messages: Iterable[Any] = (),
    enums: Iterable[Dict[str, Any]] = (),
    deprecated: bool = False,
    locations: Iterable[Dict[str, Any]] = (),
) -> Dict[str, Any]:
    """Build the JSON form of one file descriptor.

    ``messages`` accepts plain names or full message dicts.
    """
    options: Dict[str, Any] = {}
    if go_package is not None:
        options["go_package"] = go_package
    if deprecated:
        options["deprecated"] = True
    return {
        "name": name,
        "package": name.rsplit(".", 1)[0].replace("/", "."),
        "dependency": list(dependency),
        "public_dependency": list(public),
        "weak_dependency": list(weak),
        "message_type": [m if isinstance(m, dict) else {"name": m} for m in messages],
        "enum_type": list(enums),
        "options": options,
        "source_code_info": {"location": list(locations)},
    }


def request_dict(
    *files: Dict[str, Any],
    generate: Optional[List[str]] = None,
    compiler_version: Optional[Dict[str, Any]] = None,
    parameter: str = "",
) -> Dict[str, Any]:
    data: Dict[str, Any] = {
        "file_to_generate": generate if generate is not None else [f["name"] for f in files],
        "proto_file": list(files),
        "parameter": parameter,
    }
    if compiler_version is not None:
        data["compiler_version"] = compiler_version
    return data


def make_request(*files: Dict[str, Any], **kwargs: Any) -> CodeGeneratorRequest:
    return CodeGeneratorRequest.from_dict(request_dict(*files, **kwargs))


def raw_body(path: str, *lines: str) -> Callable:
    """Body emitter appending raw Go lines to one file's output."""

    def emit(generator, g, file):
        if file.path == path:
            for line in lines:
                g.emit(line)

    return emit
