import os
import sys

import configargparse
import pytest

# Add the parent directory to sys.path so we can import u16view modules
sys.path.insert(0, os.path.dirname(os.path.dirname(__file__)))

import u16view.apptools
import u16view.u16scan
from u16view.buffers import units_from_str


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    """Run in an empty directory so no stray u16view.conf is picked up"""
    monkeypatch.chdir(tmp_path)
    for name in list(os.environ):
        if name.startswith("U16VIEW_"):
            monkeypatch.delenv(name)
    return tmp_path


def write_text(path, text, encoding="utf-16"):
    path.write_bytes(text.encode(encoding))
    return str(path)


class TestLoadUnits:
    def test_native_utf16_is_zero_copy(self, workdir):
        filename = write_text(workdir / "native.txt", "hello")
        units = u16view.u16scan.load_units(filename)
        assert units.tolist() == units_from_str("hello").tolist()
        assert isinstance(units.obj, bytes)

    def test_other_byte_order_is_decoded(self, workdir):
        swapped = "utf-16-be" if sys.byteorder == "little" else "utf-16-le"
        bom = b"\xfe\xff" if swapped == "utf-16-be" else b"\xff\xfe"
        path = workdir / "swapped.txt"
        path.write_bytes(bom + "hello".encode(swapped))
        units = u16view.u16scan.load_units(str(path))
        assert units.tolist() == units_from_str("hello").tolist()

    def test_utf8(self, workdir):
        filename = write_text(workdir / "utf8.txt", "a\U0001F600", "utf-8")
        units = u16view.u16scan.load_units(filename, "utf-8")
        assert units.tolist() == [0x61, 0xD83D, 0xDE00]

    def test_bad_bytes_raise(self, workdir):
        path = workdir / "bad.txt"
        path.write_bytes(b"\xff\xfe\x61")
        with pytest.raises(UnicodeDecodeError):
            u16view.u16scan.load_units(str(path))


class TestMain:
    def test_flat_report(self, workdir, capsys):
        filename = write_text(workdir / "a.txt", "hello world")
        assert u16view.u16scan.main([filename, "--find", "o", "--split", " "]) == 0
        out = capsys.readouterr().out
        assert f"{filename}: units=11 valid=True rtl=False" in out
        assert f"{filename}: find 'o' index=4 count=2" in out
        assert f"{filename}: split 2 parts 'hello' 'world'" in out

    def test_indent_report(self, workdir, capsys):
        filename = write_text(workdir / "a.txt", "abc")
        assert u16view.u16scan.main([filename, "--style", "indent", "--find", "c"]) == 0
        out = capsys.readouterr().out
        assert "\tcode units: 3" in out
        assert "\t\tfirst index: 2" in out

    def test_null_style_prints_nothing(self, workdir, capsys):
        filename = write_text(workdir / "a.txt", "abc")
        assert u16view.u16scan.main([filename, "--style", "null"]) == 0
        assert capsys.readouterr().out == ""

    def test_case_insensitive_and_trim(self, workdir, capsys):
        filename = write_text(workdir / "a.txt", "  Hello  ")
        argv = [filename, "--find", "h", "--no-case-sensitive", "--trim"]
        assert u16view.u16scan.main(argv) == 0
        out = capsys.readouterr().out
        assert "units=5" in out
        assert "find 'h' index=0 count=1" in out

    def test_skip_empty_parts(self, workdir, capsys):
        filename = write_text(workdir / "a.txt", "a,,b")
        assert u16view.u16scan.main([filename, "--split", ",", "--skip-empty-parts"]) == 0
        assert "split 2 parts 'a' 'b'" in capsys.readouterr().out

    def test_missing_file_fails(self, workdir, capsys):
        good = write_text(workdir / "a.txt", "abc")
        missing = str(workdir / "missing.txt")
        assert u16view.u16scan.main([good, missing]) == 1
        captured = capsys.readouterr()
        assert "units=3" in captured.out
        assert missing in captured.err

    def test_config_file(self, workdir, capsys):
        (workdir / "u16view.conf").write_text("style = indent\n")
        filename = write_text(workdir / "a.txt", "abc")
        assert u16view.u16scan.main([filename]) == 0
        assert "\tcode units: 3" in capsys.readouterr().out

    def test_environment_variable(self, workdir, capsys, monkeypatch):
        monkeypatch.setenv("U16VIEW_STYLE", "null")
        filename = write_text(workdir / "a.txt", "abc")
        assert u16view.u16scan.main([filename]) == 0
        assert capsys.readouterr().out == ""

    def test_verbose_and_timing_go_to_stderr(self, workdir, capsys):
        filename = write_text(workdir / "a.txt", "abc")
        assert u16view.u16scan.main([filename, "-vv", "--time"]) == 0
        err = capsys.readouterr().err
        assert "viewing 3 code units" in err
        assert "Total scan time" in err


class TestAppTools:
    def test_quiet_reduces_verbosity(self, workdir):
        cap = u16view.apptools.create_parser("test", config_files=[])
        args = u16view.apptools.parseargs(cap, ["-vv", "-q"])
        assert args.verbose == 1
        assert args.time is False

    def test_parser_type(self, workdir):
        cap = u16view.apptools.create_parser("test", config_files=[])
        assert isinstance(cap, configargparse.ArgumentParser)

    def test_default_config_files(self, workdir):
        files = u16view.apptools.default_config_files()
        assert files[0] == "/etc/xdg/u16view/u16view.conf"
        assert files[-1] == os.path.join(str(workdir), "u16view.conf")
