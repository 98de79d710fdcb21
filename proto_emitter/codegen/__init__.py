"""
Code generation module.

Turns a protoc-style code generator request into generated source files.
"""

from typing import Any, Dict, Optional, Union

from .registry import (
    GeneratorRegistry,
    RegistryError,
    get_generator,
    get_registry,
    is_language_supported,
    list_supported_languages,
)
from .core.generator import (
    CodeGenerator,
    GenerationResult,
    GeneratorError,
    ImportCycleError,
    SchemaError,
    SourceSyntaxError,
    UnrecognizedDeclarationError,
    generate_code,
)
from .core.emitter import GeneratedFile, Plugin
from .core.schema import CodeGeneratorRequest, SchemaFile, ImportEdge
from .core.config import GeneratorConfig, ConfigError, ConfigManager, load_config


def generate_from_request(
    request: Union[CodeGeneratorRequest, Dict[str, Any]],
    language: str = "go",
    config: Optional[GeneratorConfig] = None,
) -> GenerationResult:
    """
    Generate code for every file a request asks for.

    Args:
        request: Request object or its JSON form
        language: Target language name
        config: Generator configuration; when omitted it is built from the
            request's parameter string

    Returns:
        GenerationResult with generated files
    """
    try:
        if isinstance(request, dict):
            request = CodeGeneratorRequest.from_dict(request)
        if config is None:
            config = load_config(parameter=request.parameter)
        plugin = Plugin(request, config)
    except GeneratorError as e:
        return GenerationResult.error(f"Invalid request: {e}", exception=e)

    generator = get_generator(language, config)
    return generate_code(generator, plugin)


__all__ = [
    "GeneratorRegistry",
    "RegistryError",
    "CodeGenerator",
    "GenerationResult",
    "GeneratorError",
    "ImportCycleError",
    "SchemaError",
    "SourceSyntaxError",
    "UnrecognizedDeclarationError",
    "GeneratedFile",
    "Plugin",
    "CodeGeneratorRequest",
    "SchemaFile",
    "ImportEdge",
    "GeneratorConfig",
    "ConfigError",
    "ConfigManager",
    "generate_code",
    "generate_from_request",
    "get_generator",
    "get_registry",
    "is_language_supported",
    "list_supported_languages",
    "load_config",
]
