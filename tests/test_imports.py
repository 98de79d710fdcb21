"""Import handling of generated Go files."""

from __future__ import annotations

from proto_emitter.codegen import generate_from_request

from tests._fixtures.request_builder import make_request, proto_file


def _imports(content: str) -> list[str]:
    start = content.index("import (\n") + len("import (\n")
    end = content.index("\n)\n", start)
    return [line.strip() for line in content[start:end].split("\n")]


def test_unreferenced_dependency_becomes_blank_import(run) -> None:
    request = make_request(
        proto_file("a.proto", "example.com/pkgA", dependency=["c.proto"]),
        proto_file("c.proto", "example.com/pkgC"),
        generate=["a.proto"],
    )
    content = run(request).files["a.generated.go"]

    assert '_ "example.com/pkgC"' in _imports(content)
    assert "Symbols defined in public import" not in content


def test_weak_dependency_is_not_imported(run) -> None:
    request = make_request(
        proto_file("a.proto", "example.com/pkgA", dependency=["w.proto"], weak=[0]),
        proto_file("w.proto", "example.com/weak"),
        generate=["a.proto"],
    )
    content = run(request).files["a.generated.go"]
    assert "example.com/weak" not in content


def test_missing_dependency_is_skipped(run) -> None:
    request = make_request(
        proto_file("a.proto", "example.com/pkgA", dependency=["gone.proto"], public=[0]),
    )
    result = run(request)

    assert result.success
    assert "gone" not in result.files["a.generated.go"]
    assert result.warnings == ["a.proto: skipped import of gone.proto (not in the loaded file set)"]


def test_skipped_import_is_reported_once(run) -> None:
    request = make_request(
        proto_file("a.proto", "example.com/pkgA", dependency=["b.proto"], public=[0]),
        proto_file("b.proto", "example.com/pkgB", dependency=["gone.proto"], messages=["Widget"]),
        generate=["a.proto", "b.proto"],
    )
    result = run(request)

    assert result.success
    assert result.warnings == ["b.proto: skipped import of gone.proto (not in the loaded file set)"]


def test_same_package_dependency_is_neither_imported_nor_forwarded(run) -> None:
    request = make_request(
        proto_file("a.proto", "example.com/pkgA", dependency=["a2.proto"], public=[0]),
        proto_file("a2.proto", "example.com/pkgA", messages=["Sibling"]),
        generate=["a.proto"],
    )
    content = run(request).files["a.generated.go"]

    assert "Symbols defined in public import" not in content
    assert "Sibling" not in content
    assert '"example.com/pkgA"' not in content


def test_only_requested_files_are_emitted(run) -> None:
    request = make_request(
        proto_file("a.proto", "example.com/pkgA", dependency=["c.proto"]),
        proto_file("c.proto", "example.com/pkgC"),
        generate=["a.proto"],
    )
    assert list(run(request).files) == ["a.generated.go"]


def test_import_path_override_changes_reference() -> None:
    request = make_request(
        proto_file("a.proto", "example.com/pkgA", dependency=["c.proto"]),
        proto_file("c.proto", None),
        generate=["a.proto"],
        parameter="Mc.proto=example.com/mapped/cpb",
    )
    result = generate_from_request(request)

    assert result.success, result.error_message
    assert '_ "example.com/mapped/cpb"' in _imports(result.files["a.generated.go"])


def test_missing_go_package_fails_the_run() -> None:
    request = make_request(proto_file("a.proto", None))
    result = generate_from_request(request)

    assert not result.success
    assert result.error_message.startswith("Invalid request:")
    assert "unable to determine Go import path" in result.error_message
