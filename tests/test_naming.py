from __future__ import annotations

import pytest

from proto_emitter.codegen.core.naming import camel_case, sanitize_identifier
from proto_emitter.codegen.core.schema import SchemaFile
from proto_emitter.codegen.languages.go.naming import (
    base_package_name,
    descriptor_ident,
    go_package_name,
    go_sanitized,
    is_exported,
)


@pytest.mark.parametrize(
    "name, expected",
    [
        ("foo_bar", "FooBar"),
        ("fooBar", "FooBar"),
        ("foo.bar", "FooBar"),
        ("Foo.Bar", "Foo_Bar"),
        ("_my_field_name_2", "XMyFieldName_2"),
        ("foo_2bar", "Foo_2Bar"),
        ("HTTPRequest", "HTTPRequest"),
    ],
)
def test_camel_case(name: str, expected: str) -> None:
    assert camel_case(name) == expected


@pytest.mark.parametrize(
    "name, expected",
    [
        ("foo/bar.proto", "foo_bar_proto"),
        ("2fa", "_2fa"),
        ("", "_"),
        ("héllo", "héllo"),
    ],
)
def test_sanitize_identifier(name: str, expected: str) -> None:
    assert sanitize_identifier(name) == expected


def test_go_sanitized_avoids_keywords() -> None:
    assert go_sanitized("type") == "_type"
    assert go_sanitized("types") == "types"


def test_package_names() -> None:
    assert base_package_name("example.com/my-lib/") == "my_lib"
    plain = SchemaFile(path="a.proto", go_import_path="example.com/v1/things")
    named = SchemaFile(path="a.proto", go_import_path="example.com/v1", go_package_name="thingspb")
    assert go_package_name(plain) == "things"
    assert go_package_name(named) == "thingspb"


def test_descriptor_ident() -> None:
    file = SchemaFile(path="dir/a.v1.proto", go_import_path="example.com/a")
    ident = descriptor_ident(file)
    assert ident.name == "File_dir_a_v1_proto"
    assert ident.import_path == "example.com/a"


def test_is_exported() -> None:
    assert is_exported("Widget")
    assert not is_exported("widget")
    assert not is_exported("_Widget")
    assert not is_exported("")
