"""Test the flightdata command-line tool end to end.

    python3 tests/test_cli.py
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

import contextlib
import io
import json
import logging
import shutil
import tempfile

from flightdata.cli import main
from flightdata.config import load_config
from flightdata.decoder import encode_packet

EXAMPLE_CONFIG = os.path.join(os.path.dirname(__file__), "..", "examples",
                              "xenia2_config.json")


def run(*argv):
    """Run the CLI, returning (exit_code, stdout)."""
    out = io.StringIO()
    code = 0
    with contextlib.redirect_stdout(out):
        try:
            main(list(argv))
        except SystemExit as e:
            code = e.code or 0
    return code, out.getvalue()


def write_data(tmpdir, data):
    path = os.path.join(tmpdir, "data.bin")
    with open(path, "wb") as f:
        f.write(data)
    return path


def sample_stream():
    config = load_config(EXAMPLE_CONFIG)
    return (encode_packet(config, 1, [1.0, 2.0, 3.0])
            + encode_packet(config, 2, [1013.25, 21.5])
            + encode_packet(config, 1, [4.0, 5.0, 6.0]))


def test_check():
    print("test_check...", end="")

    code, out = run("check", "-c", EXAMPLE_CONFIG)
    assert code == 0
    assert "name: Xenia-2" in out
    assert "sensors: 3" in out
    assert "Configuration is valid!" in out
    assert "temperature" in out and "float_32" in out

    tmpdir = tempfile.mkdtemp()
    try:
        bad = os.path.join(tmpdir, "bad.json")
        with open(bad, "w") as f:
            json.dump({"name": "dup", "sensors": [
                {"name": "a", "id": 1, "values": []},
                {"name": "b", "id": 1, "values": []},
            ]}, f)
        code, out = run("check", "-c", bad)
        assert code == 1
        assert "Rocket invalid: Multiple sensors with ID: 1" in out
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_convert_csv():
    print("test_convert_csv...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        data = write_data(tmpdir, sample_stream())
        output = os.path.join(tmpdir, "out.csv")
        code, _ = run("convert", "-c", EXAMPLE_CONFIG, data, output)
        assert code == 0

        with open(output) as f:
            lines = f.read().splitlines()
        assert lines == [
            "ACC_x,ACC_y,ACC_z,LSM_x,LSM_y,LSM_z,BMP_pressure,BMP_temperature",
            ",,,1.00000000,2.00000000,3.00000000,1013.25000000,21.50000000",
            ",,,4.00000000,5.00000000,6.00000000,,",
        ]

        code, _ = run("convert", "-c", EXAMPLE_CONFIG, "--columns",
                      "BMP_temperature,LSM_x", data, output)
        assert code == 0
        with open(output) as f:
            lines = f.read().splitlines()
        assert lines == [
            "LSM_x,BMP_temperature",
            "1.00000000,21.50000000",
            "4.00000000,",
        ]
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_convert_keep_going():
    """A bad byte aborts by default and is skipped with --keep-going."""
    print("test_convert_keep_going...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        data = write_data(tmpdir, b"\xee" + sample_stream())
        output = os.path.join(tmpdir, "out.csv")

        code, _ = run("convert", "-c", EXAMPLE_CONFIG, data, output)
        assert code == 1

        code, _ = run("convert", "-c", EXAMPLE_CONFIG, "--keep-going", data, output)
        assert code == 0
        with open(output) as f:
            lines = f.read().splitlines()
        assert len(lines) == 3
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


class _Records(logging.Handler):
    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_error_offset():
    """Errors report the byte where the bad packet starts."""
    print("test_error_offset...", end="")

    good = sample_stream()
    handler = _Records()
    log = logging.getLogger("flightdata.cli")
    log.addHandler(handler)
    tmpdir = tempfile.mkdtemp()
    try:
        data = write_data(tmpdir, good + b"\xee" + good)
        output = os.path.join(tmpdir, "out.csv")

        code, _ = run("convert", "-c", EXAMPLE_CONFIG, data, output)
        assert code == 1
        code, _ = run("dump", "-c", EXAMPLE_CONFIG, data)
        assert code == 1
        code, _ = run("info", "-c", EXAMPLE_CONFIG, data)
        assert code == 1
    finally:
        log.removeHandler(handler)
        shutil.rmtree(tmpdir)

    errors = [r for r in handler.records if r.levelno == logging.ERROR]
    assert len(errors) == 3
    for r in errors:
        assert r.args[0] == len(good), r.getMessage()

    print(" OK")


def test_convert_latex():
    print("test_convert_latex...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        data = write_data(tmpdir, sample_stream())
        output = os.path.join(tmpdir, "report.tex")
        code, _ = run("convert", "-c", EXAMPLE_CONFIG, "--to", "latex", data, output)
        assert code == 0
        with open(output) as f:
            text = f.read()
        assert text.startswith("\\documentclass{article}")
        assert "The Xenia 2 rocket has 3 sensors: ACC, LSM, BMP." in text
        assert "The pressure value has 1 samples." in text
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_dump_and_info():
    print("test_dump_and_info...", end="")

    tmpdir = tempfile.mkdtemp()
    try:
        data = write_data(tmpdir, sample_stream())

        code, out = run("dump", "-c", EXAMPLE_CONFIG, data)
        assert code == 0
        lines = out.splitlines()
        assert len(lines) == 3
        assert lines[0].endswith("LSM: x=1.0, y=2.0, z=3.0")
        assert lines[1].endswith("BMP: pressure=1013.25, temperature=21.5")

        code, out = run("info", "-c", EXAMPLE_CONFIG, data)
        assert code == 0
        assert "Rocket:  Xenia 2" in out
        assert "Size:    35 bytes" in out
        lsm_x = [l for l in out.splitlines() if l.strip().startswith("LSM_x")][0]
        assert lsm_x.split()[1:] == ["2", "1.00000000", "4.00000000"]
    finally:
        shutil.rmtree(tmpdir)

    print(" OK")


def test_missing_config():
    print("test_missing_config...", end="")

    code, _ = run("info", "-c", "/nonexistent/config.json", "data.bin")
    assert code == 1

    print(" OK")


if __name__ == "__main__":
    print("flightdata CLI tests")
    print("====================\n")

    test_check()
    test_convert_csv()
    test_convert_keep_going()
    test_convert_latex()
    test_dump_and_info()
    test_missing_config()
    test_error_offset()

    print("\nAll tests passed.")
