from __future__ import annotations

from typing import Callable, Iterable, Optional

import pytest

from proto_emitter.codegen.core.config import GeneratorConfig
from proto_emitter.codegen.core.emitter import Plugin
from proto_emitter.codegen.core.generator import GenerationResult, generate_code
from proto_emitter.codegen.core.schema import CodeGeneratorRequest
from proto_emitter.codegen.languages.go import GoGenerator, default_body_emitters
from tests._fixtures.request_builder import make_request, proto_file


@pytest.fixture
def config() -> GeneratorConfig:
    return GeneratorConfig(plugin_version="v1.2.3")


@pytest.fixture
def run(config: GeneratorConfig):
    """Run generation for a request and return the GenerationResult."""

    def _run(
        request: CodeGeneratorRequest,
        extra_bodies: Iterable[Callable] = (),
        run_config: Optional[GeneratorConfig] = None,
    ) -> GenerationResult:
        cfg = run_config or config
        generator = GoGenerator(cfg, default_body_emitters() + list(extra_bodies))
        return generate_code(generator, Plugin(request, cfg))

    return _run


@pytest.fixture
def widget_request() -> CodeGeneratorRequest:
    """a.proto (pkgA) publicly imports b.proto (pkgB), which declares Widget."""
    return make_request(
        proto_file("a.proto", "example.com/pkgA", dependency=["b.proto"], public=[0]),
        proto_file("b.proto", "example.com/pkgB", messages=["Widget"]),
        generate=["a.proto", "b.proto"],
        compiler_version={"major": 3, "minor": 21, "patch": 12},
    )
