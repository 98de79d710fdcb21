"""
Core code generation components.

Provides the run state, output buffers, configuration and base classes used
by all language generators.
"""

from .generator import (
    CodeGenerator,
    GeneratorError,
    GenerationResult,
    ImportCycleError,
    MissingDependencyError,
    SchemaError,
    SourceSyntaxError,
    UnrecognizedDeclarationError,
    generate_code,
)
from .schema import (
    CodeGeneratorRequest,
    CompilerVersion,
    EnumDecl,
    EnumValue,
    ImportEdge,
    MessageDecl,
    SchemaFile,
    SourceLocation,
    build_schema_files,
)
from .emitter import GeneratedFile, Plugin
from .config import (
    FEATURE_PROTO3_OPTIONAL,
    ConfigError,
    ConfigManager,
    GeneratorConfig,
    load_config,
    parse_parameter,
)
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface and errors
    "CodeGenerator",
    "GeneratorError",
    "GenerationResult",
    "ImportCycleError",
    "MissingDependencyError",
    "SchemaError",
    "SourceSyntaxError",
    "UnrecognizedDeclarationError",
    "generate_code",
    # Schema system
    "CodeGeneratorRequest",
    "CompilerVersion",
    "EnumDecl",
    "EnumValue",
    "ImportEdge",
    "MessageDecl",
    "SchemaFile",
    "SourceLocation",
    "build_schema_files",
    # Run state and output buffers
    "GeneratedFile",
    "Plugin",
    # Configuration system
    "FEATURE_PROTO3_OPTIONAL",
    "ConfigError",
    "ConfigManager",
    "GeneratorConfig",
    "load_config",
    "parse_parameter",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]
