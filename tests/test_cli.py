"""
tests/test_cli.py — ``funge`` command line
==========================================
Exit status and messages for every fatal condition, plus a normal run.
"""
from __future__ import annotations

import io

import pytest

from funge import __version__
from funge.channel import StreamChannel
from funge.cli import main


@pytest.fixture
def program(tmp_path):
    def _write(text, name="prog.bf"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return str(path)
    return _write


@pytest.fixture
def stdin(monkeypatch):
    def _feed(data: bytes):
        monkeypatch.setattr("sys.stdin", io.TextIOWrapper(io.BytesIO(data)))
    return _feed


def exit_code(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


class TestRun:
    def test_hello(self, program, capsysbinary):
        main([program('"!dlrow ,olleH">:#,_@')])
        assert capsysbinary.readouterr().out == b"Hello, world!"

    def test_decimal_output(self, program, capsysbinary):
        main([program("52*.@")])
        assert capsysbinary.readouterr().out == b"10 "

    def test_numeric_input(self, program, stdin, capsysbinary):
        stdin(b"3\n4\n")
        main([program("&&+.@")])
        assert capsysbinary.readouterr().out == b"7 "

    def test_byte_input(self, program, stdin, capsysbinary):
        stdin(b"hi")
        main([program("~:!#@_,")])
        assert capsysbinary.readouterr().out == b"hi"

    def test_verbose_still_runs(self, program, capsysbinary):
        main(["-v", program("1.@")])
        assert capsysbinary.readouterr().out == b"1 "

    def test_non_ascii_allowed_without_strict(self, program, capsysbinary):
        main([program("@ é")])
        assert capsysbinary.readouterr().out == b""

    def test_full_height_file_with_final_newline(self, program, capsysbinary):
        main([program("@\n" * 256)])
        assert capsysbinary.readouterr().out == b""

    def test_version(self, capsys):
        assert exit_code(["--version"]) == 0
        assert __version__ in capsys.readouterr().out


class TestFailures:
    def test_missing_argument(self, capsys):
        assert exit_code([]) == 2
        assert "source" in capsys.readouterr().err

    def test_missing_file(self, tmp_path, capsys):
        assert exit_code([str(tmp_path / "nope.bf")]) == 1
        assert "failed to read source file" in capsys.readouterr().err

    def test_undecodable_file(self, tmp_path, capsys):
        path = tmp_path / "bin.bf"
        path.write_bytes(b"\xff\xfe@")
        assert exit_code([str(path)]) == 1
        assert "failed to read source file" in capsys.readouterr().err

    def test_too_tall(self, program, capsys):
        assert exit_code([program("@\n" * 257)]) == 1
        assert "too many lines (> 256)" in capsys.readouterr().err

    def test_too_wide(self, program, capsys):
        assert exit_code([program("@\n\n" + " " * 257)]) == 1
        assert "too many columns (> 256) on line 3" in capsys.readouterr().err

    def test_strict_non_ascii(self, program, capsys):
        assert exit_code(["--strict", program("@ é")]) == 1
        assert "non-ASCII" in capsys.readouterr().err

    def test_division_by_zero(self, program, capsys):
        assert exit_code([program("50/.@")]) == 1
        assert "division by zero" in capsys.readouterr().err

    def test_bad_numeric_input(self, program, stdin, capsys):
        stdin(b"twelve\n")
        assert exit_code([program("&.@")]) == 1
        assert "invalid numeric input" in capsys.readouterr().err

    def test_write_failure(self, program, monkeypatch, capsys):
        def broken(self, value):
            raise BrokenPipeError("closed")
        monkeypatch.setattr(StreamChannel, "write_byte", broken)
        assert exit_code([program("1,@")]) == 1
        assert "failed to write to stdout" in capsys.readouterr().err

    def test_interrupt_exits_130(self, program, monkeypatch, capsys):
        def interrupted(state, channel, **kwargs):
            raise KeyboardInterrupt
        monkeypatch.setattr("funge.vm.run", interrupted)
        assert exit_code([program("@")]) == 130
        assert "Interrupted" in capsys.readouterr().err

    def test_no_output_before_load_error(self, program, capsysbinary):
        with pytest.raises(SystemExit):
            main([program("1.@\n" + "x" * 300)])
        assert capsysbinary.readouterr().out == b""
