"""
Tests for the `jsviz` command line entry point.
"""

import json

from jsviz.__main__ import main


def _write(tmp_path, source, name="prog.js"):
    path = tmp_path / name
    path.write_text(source, encoding="utf-8")
    return path


def test_text_output(tmp_path, capsys):
    path = _write(tmp_path, 'let x = 1;\nconsole.log("x is", x);')
    assert main([str(path)]) == 0
    lines = capsys.readouterr().out.splitlines()
    assert lines[0] == "  0 [block-enter] 1:0 Start execution"
    assert "  1 [declaration] 1:0 Declare let x = 1" in lines
    assert lines[-1] == "console.log: x is 1"


def test_json_output(tmp_path, capsys):
    path = _write(tmp_path, "let x = 1;")
    assert main([str(path), "--json"]) == 0
    data = json.loads(capsys.readouterr().out)
    assert [step["description"] for step in data] == [
        "Start execution", "Declare let x = 1", "End execution"]


def test_output_file(tmp_path, capsys):
    path = _write(tmp_path, "let x = 1;")
    out = tmp_path / "timeline.json"
    assert main([str(path), "--json", "-o", str(out)]) == 0
    assert capsys.readouterr().out == ""
    assert json.loads(out.read_text(encoding="utf-8"))[1]["description"] == "Declare let x = 1"


def test_loop_ceiling_flag(tmp_path, capsys):
    path = _write(tmp_path, "let n = 0;\nwhile (true) { n++; }")
    assert main([str(path), "--max-loop-iterations", "2"]) == 0
    out = capsys.readouterr().out
    assert "Update n to 2" in out
    assert "Update n to 3" not in out


def test_program_error(tmp_path, capsys):
    path = _write(tmp_path, "let a = 1;\nmissing;")
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "Error: missing is not defined" in captured.out
    assert "error[E0002]" in captured.err


def test_missing_file(tmp_path, capsys):
    assert main([str(tmp_path / "nope.js")]) == 1
    assert "file not found" in capsys.readouterr().err


def test_directory_is_rejected(tmp_path, capsys):
    assert main([str(tmp_path)]) == 1
    assert "not a file" in capsys.readouterr().err


def test_driver_run_file(tmp_path, session_driver):
    path = _write(tmp_path, "const z = 3;")
    result = session_driver.run_file(path)
    assert result.success
    assert result.source_file == str(path)
    assert result.final_step.scope_snapshot.value_of("z") == 3


def test_undecodable_file(tmp_path, capsys):
    path = tmp_path / "latin1.js"
    path.write_bytes("let s = 'café';".encode("latin-1"))
    assert main([str(path)]) == 1
    captured = capsys.readouterr()
    assert "could not read file" in captured.err
    assert captured.out == ""


def test_utf8_source(tmp_path, capsys):
    path = _write(tmp_path, "const s = 'café';")
    assert main([str(path)]) == 0
    assert 'Declare const s = "café"' in capsys.readouterr().out
