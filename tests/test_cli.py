"""Tests for the command-line driver."""

import io

from conftest import binary, expr_stmt, lit, print_, ret, var

from treelox.cli import load_program, main
from treelox.model.program import Program


def _write(tmp_path, *stmts):
    path = tmp_path / "program.json"
    path.write_text(Program(statements=list(stmts)).model_dump_json())
    return str(path)


class TestMain:
    def test_runs_program(self, tmp_path, capsys):
        code = main([_write(tmp_path, print_(binary(lit(1), "+", lit(2))))])
        assert code == 0
        assert capsys.readouterr().out == "3\n"

    def test_static_error_exit_code(self, tmp_path, capsys):
        code = main([_write(tmp_path, ret())])
        captured = capsys.readouterr()
        assert code == 65
        assert "Can't return from top-level code." in captured.err

    def test_runtime_error_exit_code(self, tmp_path, capsys):
        code = main([_write(tmp_path, print_(var("nope", line=4)))])
        captured = capsys.readouterr()
        assert code == 70
        assert captured.err == "Undefined variable 'nope'.\n[line 4]\n"

    def test_invalid_tree(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text('{"statements": [{"kind": "goto"}]}')
        assert main([str(path)]) == 65
        assert "invalid syntax tree" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert main([str(tmp_path / "absent.json")]) == 64
        assert "cannot read" in capsys.readouterr().err

    def test_reads_stdin(self, monkeypatch, capsys):
        text = Program(statements=[print_(lit("piped"))]).model_dump_json()
        monkeypatch.setattr("sys.stdin", io.StringIO(text))
        assert main([]) == 0
        assert capsys.readouterr().out == "piped\n"

    def test_echo_flag(self, tmp_path, capsys):
        assert main(["--echo", _write(tmp_path, expr_stmt(lit("shown")))]) == 0
        assert capsys.readouterr().out == "shown\n"

    def test_usage_error(self, capsys):
        assert main(["--no-such-flag"]) == 64


class TestLoadProgram:
    def test_load(self):
        program = load_program('{"statements": [{"kind": "print", "expression": {"kind": "literal", "value": 2}}]}')
        assert program.statements[0].expression.value == 2.0
