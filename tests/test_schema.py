"""Building schema files from request descriptors."""

from __future__ import annotations

import pytest

from proto_emitter.codegen.core.config import GeneratorConfig
from proto_emitter.codegen.core.generator import SchemaError
from proto_emitter.codegen.core.schema import (
    CodeGeneratorRequest,
    ImportEdge,
    build_schema_files,
)

from tests._fixtures.request_builder import make_request, proto_file


def _files(request, **config):
    return {f.path: f for f in build_schema_files(request, GeneratorConfig(**config))}


def test_import_edges_carry_public_and_weak_flags() -> None:
    request = make_request(
        proto_file(
            "a.proto",
            "example.com/a",
            dependency=["b.proto", "c.proto", "d.proto"],
            public=[0],
            weak=[2],
        ),
        generate=["a.proto"],
    )
    imports = _files(request)["a.proto"].imports
    assert imports == (
        ImportEdge("b.proto", public=True),
        ImportEdge("c.proto"),
        ImportEdge("d.proto", weak=True),
    )


def test_import_cannot_be_public_and_weak() -> None:
    with pytest.raises(SchemaError, match="both public and weak"):
        ImportEdge("b.proto", public=True, weak=True)

    request = make_request(
        proto_file("a.proto", "example.com/a", dependency=["b.proto"], public=[0], weak=[0]),
    )
    with pytest.raises(SchemaError, match="a.proto"):
        _files(request)


def test_dependency_index_out_of_range() -> None:
    request = make_request(proto_file("a.proto", "example.com/a", public=[3]))
    with pytest.raises(SchemaError, match="out of range"):
        _files(request)


def test_go_package_with_explicit_name() -> None:
    request = make_request(proto_file("a.proto", "example.com/v2/a;apb"))
    file = _files(request)["a.proto"]
    assert file.go_import_path == "example.com/v2/a"
    assert file.go_package_name == "apb"


def test_import_path_override_wins_over_option() -> None:
    request = make_request(proto_file("a.proto", "example.com/a"))
    file = _files(request, import_path_overrides={"a.proto": "example.com/mapped"})["a.proto"]
    assert file.go_import_path == "example.com/mapped"


def test_missing_go_package() -> None:
    request = make_request(proto_file("a.proto", None))
    with pytest.raises(SchemaError, match="unable to determine Go import path"):
        _files(request)


def test_filename_prefix_depends_on_paths_mode() -> None:
    request = make_request(proto_file("protos/a.proto", "example.com/api/apb"))

    assert _files(request)["protos/a.proto"].generated_filename_prefix == "protos/a"
    imported = _files(request, paths="import")["protos/a.proto"]
    assert imported.generated_filename_prefix == "example.com/api/apb/a"


def test_only_requested_files_are_marked_for_generation() -> None:
    request = make_request(
        proto_file("a.proto", "example.com/a"),
        proto_file("b.proto", "example.com/b"),
        generate=["a.proto"],
    )
    files = _files(request)
    assert files["a.proto"].generate
    assert not files["b.proto"].generate


def test_unknown_file_to_generate() -> None:
    request = make_request(proto_file("a.proto", "example.com/a"), generate=["z.proto"])
    with pytest.raises(SchemaError, match="z.proto"):
        _files(request)


def test_source_locations_first_entry_wins() -> None:
    request = make_request(
        proto_file(
            "a.proto",
            "example.com/a",
            locations=[
                {"path": [2], "leading_comments": " first\n"},
                {"path": [2], "leading_comments": " second\n"},
            ],
        )
    )
    file = _files(request)["a.proto"]
    assert file.location(2).leading_comments == " first\n"
    assert file.location(12).leading_detached_comments == ()


def test_nested_declarations() -> None:
    request = make_request(
        proto_file(
            "a.proto",
            "example.com/a",
            messages=[{"name": "Outer", "nested_type": [{"name": "Inner"}]}],
            enums=[{"name": "Kind", "value": [{"name": "A", "number": 3}]}],
        )
    )
    file = _files(request)["a.proto"]
    assert file.messages[0].nested_messages[0].name == "Inner"
    assert file.enums[0].values[0].number == 3


@pytest.mark.parametrize(
    "data",
    [
        [],
        {"proto_file": {}},
        {"file_to_generate": "a.proto"},
    ],
)
def test_request_shape_is_checked(data) -> None:
    with pytest.raises(SchemaError):
        CodeGeneratorRequest.from_dict(data)


def test_descriptor_without_name() -> None:
    request = CodeGeneratorRequest.from_dict({"proto_file": [{"options": {}}]})
    with pytest.raises(SchemaError, match="without a name"):
        _files(request)
