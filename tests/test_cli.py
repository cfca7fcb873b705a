"""
test_cli.py — Command-Line Driver Tests
=========================================
"""

import json

import pytest
from chunkfile.main import EXIT_ERROR, EXIT_INVALID, EXIT_OK, main


@pytest.fixture
def ten_byte_file(tmp_path):
    path = tmp_path / "ten.txt"
    path.write_bytes(b"0123456789")
    return str(path)


class TestDump:
    """Tests for the dump command."""

    def test_text_dump(self, ten_byte_file, capsys):
        assert main(["dump", "--fname", ten_byte_file, "--csiz", "4"]) == EXIT_OK
        out = capsys.readouterr().out

        assert out.startswith("filesize 10\n")
        remaining = [
            int(line.split()[1]) for line in out.splitlines() if line.startswith("remaining ")
        ]
        assert remaining == [6, 2, 0]
        assert "0123" in out and "4567" in out and "89" in out

    def test_hex_dump(self, ten_byte_file, capsys):
        assert main(["dump", "--file", ten_byte_file, "--chunk-size", "16", "-x"]) == EXIT_OK
        out = capsys.readouterr().out
        assert "0x30 0x31 0x32" in out

    def test_missing_file(self, tmp_path, capsys):
        assert main(["dump", "--fname", str(tmp_path / "missing")]) == EXIT_ERROR

    def test_bad_chunk_size(self, ten_byte_file):
        assert main(["dump", "--fname", ten_byte_file, "--csiz", "0"]) == EXIT_ERROR

    def test_requires_file(self):
        with pytest.raises(SystemExit):
            main(["dump"])

    def test_unknown_log_level(self, ten_byte_file, capsys):
        """An unknown level is a usage error, not a traceback."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--log-level", "LOUD", "dump", "--fname", ten_byte_file])
        assert exc_info.value.code == 2
        assert "invalid choice" in capsys.readouterr().err

    def test_log_level_case_insensitive(self, ten_byte_file):
        assert main(["--log-level", "debug", "dump", "--fname", ten_byte_file]) == EXIT_OK


class TestManifestAndVerify:
    """Tests for the manifest and verify commands."""

    def test_manifest_to_stdout(self, ten_byte_file, capsys):
        assert main(["manifest", "--file", ten_byte_file, "--chunk-size", "4"]) == EXIT_OK
        manifest = json.loads(capsys.readouterr().out)
        assert manifest["chunk_count"] == 3
        assert manifest["file_size"] == 10

    def test_verify_round_trip(self, ten_byte_file, tmp_path, capsys):
        manifest_path = str(tmp_path / "ten.manifest.json")
        assert main(
            ["manifest", "--file", ten_byte_file, "--chunk-size", "4", "-o", manifest_path]
        ) == EXIT_OK

        assert main(["verify", "--file", ten_byte_file, "--manifest", manifest_path]) == EXIT_OK
        assert main(
            ["verify", "--file", ten_byte_file, "--manifest", manifest_path, "--index", "2"]
        ) == EXIT_OK

    def test_verify_detects_change(self, ten_byte_file, tmp_path, capsys):
        manifest_path = str(tmp_path / "ten.manifest.json")
        main(["manifest", "--file", ten_byte_file, "--chunk-size", "4", "-o", manifest_path])

        with open(ten_byte_file, "wb") as f:
            f.write(b"0123X56789")

        assert main(["verify", "--file", ten_byte_file, "--manifest", manifest_path]) == EXIT_INVALID
        assert main(
            ["verify", "--file", ten_byte_file, "--manifest", manifest_path, "--index", "0"]
        ) == EXIT_OK

    def test_verify_bad_index(self, ten_byte_file, tmp_path):
        manifest_path = str(tmp_path / "ten.manifest.json")
        main(["manifest", "--file", ten_byte_file, "--chunk-size", "4", "-o", manifest_path])
        assert main(
            ["verify", "--file", ten_byte_file, "--manifest", manifest_path, "--index", "3"]
        ) == EXIT_ERROR
