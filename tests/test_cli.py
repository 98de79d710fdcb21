"""Command-line interface behaviour."""

from __future__ import annotations

import io
import json
from pathlib import Path

from proto_emitter.cli import build_parser, main

from tests._fixtures.request_builder import proto_file, request_dict


def _write_request(tmp_path: Path, **kwargs) -> Path:
    data = request_dict(
        proto_file("a.proto", "example.com/pkgA", dependency=["b.proto"], public=[0]),
        proto_file("b.proto", "example.com/pkgB", messages=["Widget"]),
        generate=["a.proto"],
        **kwargs,
    )
    path = tmp_path / "request.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_parser_defaults() -> None:
    args = build_parser().parse_args(["request.json"])
    assert args.file == "request.json"
    assert args.language == "go"
    assert args.output_dir == "."
    assert args.dry_run is False


def test_writes_generated_files(tmp_path: Path) -> None:
    request = _write_request(tmp_path)
    out = tmp_path / "gen"

    assert main([str(request), "-o", str(out)]) == 0

    content = (out / "a.generated.go").read_text(encoding="utf-8")
    assert "type Widget = pkgB.Widget\n" in content
    assert not (out / "b.generated.go").exists()


def test_dry_run_writes_nothing(tmp_path: Path) -> None:
    request = _write_request(tmp_path)
    out = tmp_path / "gen"

    assert main([str(request), "-o", str(out), "--dry-run"]) == 0
    assert not out.exists()


def test_parameter_from_request_and_flag_override(tmp_path: Path) -> None:
    request = _write_request(tmp_path, parameter="paths=import")
    out = tmp_path / "gen"

    assert main([str(request), "-o", str(out)]) == 0
    assert (out / "example.com" / "pkgA" / "a.generated.go").exists()

    other = tmp_path / "other"
    assert main([str(request), "-o", str(other), "--parameter", "paths=source_relative"]) == 0
    assert (other / "a.generated.go").exists()


def test_no_version_markers_flag(tmp_path: Path) -> None:
    request = _write_request(tmp_path)
    out = tmp_path / "gen"

    assert main([str(request), "-o", str(out), "--no-version-markers"]) == 0
    content = (out / "a.generated.go").read_text(encoding="utf-8")
    assert "// versions:" not in content
    assert "protoimpl" not in content


def test_reads_request_from_stdin(tmp_path: Path, monkeypatch) -> None:
    request = _write_request(tmp_path)
    monkeypatch.setattr("sys.stdin", io.StringIO(request.read_text(encoding="utf-8")))
    out = tmp_path / "gen"

    assert main(["--stdin", "-o", str(out)]) == 0
    assert (out / "a.generated.go").exists()


def test_list_languages(capsys) -> None:
    assert main(["--list-languages"]) == 0
    out = capsys.readouterr().out
    assert "golang" in out
    assert "GoGenerator" in out


def test_missing_input_is_an_error() -> None:
    assert main([]) == 1


def test_missing_file_is_an_error(tmp_path: Path) -> None:
    assert main([str(tmp_path / "nope.json")]) == 1


def test_unsupported_language(tmp_path: Path) -> None:
    request = _write_request(tmp_path)
    assert main([str(request), "--language", "cobol"]) == 1


def test_bad_parameter_is_an_error(tmp_path: Path) -> None:
    request = _write_request(tmp_path)
    assert main([str(request), "--parameter", "colour=blue"]) == 1


def test_generation_failure_is_an_error(tmp_path: Path) -> None:
    data = request_dict(
        proto_file("a.proto", "example.com/pkgA", dependency=["b.proto"], public=[0]),
        proto_file("b.proto", "example.com/pkgB", dependency=["a.proto"], public=[0]),
        generate=["a.proto"],
    )
    path = tmp_path / "cycle.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    out = tmp_path / "gen"

    assert main([str(path), "-o", str(out)]) == 1
    assert not out.exists()


def test_log_file_receives_debug_records(tmp_path: Path) -> None:
    request = _write_request(tmp_path)
    log_file = tmp_path / "emit.log"

    assert main([str(request), "-o", str(tmp_path / "gen"), "--log-file", str(log_file)]) == 0
    assert "Generating a.proto" in log_file.read_text(encoding="utf-8")
