"""
Language-specific code generators.

Each subpackage provides a CodeGenerator implementation for one target
language.
"""
