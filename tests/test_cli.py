"""
Tests for the command line tool

Run with: python -m pytest tests/test_cli.py -v
"""

import json
import os

import pytest

from filecache.cache.store import FileCache
from filecache.cli import EXIT_CONFIG, EXIT_FALSE, EXIT_OK, main, parse_args


def run_cli(cache_dir: str, *argv: str) -> int:
    return main(["--dir", cache_dir, *argv])


class TestParseArgs:
    """Test argument parsing."""

    def test_subcommand_required(self):
        """Test a subcommand must be given."""
        with pytest.raises(SystemExit):
            parse_args([])

    def test_global_and_entry_ttl(self):
        """Test the default ttl and per-entry ttl are separate options."""
        args = parse_args(["--ttl", "60", "set", "key", "value", "--ttl", "5"])
        assert args.ttl == 60
        assert args.entry_ttl == 5
        assert args.command == "set"


class TestCommands:
    """Test each subcommand against a real directory."""

    def test_set_then_get(self, cache_dir: str, capsys):
        """Test a value written from the CLI can be read back."""
        assert run_cli(cache_dir, "set", "greeting", "hello") == EXIT_OK
        capsys.readouterr()

        assert run_cli(cache_dir, "get", "greeting") == EXIT_OK
        assert "hello" in capsys.readouterr().out.splitlines()

    def test_values_visible_to_library(self, cache_dir: str):
        """Test the CLI and FileCache share the same files."""
        run_cli(cache_dir, "set", "key", "value")
        assert FileCache(cache_dir).get("key") == "value"

    def test_get_miss(self, cache_dir: str, capsys):
        """Test a miss without --default exits 1 and prints nothing."""
        assert run_cli(cache_dir, "get", "missing") == EXIT_FALSE
        assert capsys.readouterr().out == ""

    def test_get_miss_with_default(self, cache_dir: str, capsys):
        """Test --default is printed on a miss."""
        assert run_cli(cache_dir, "get", "missing", "--default", "none") == EXIT_OK
        assert "none" in capsys.readouterr().out.splitlines()

    def test_set_zero_ttl_deletes(self, cache_dir: str):
        """Test --ttl 0 removes the key."""
        run_cli(cache_dir, "set", "key", "value")
        assert run_cli(cache_dir, "set", "key", "value", "--ttl", "0") == EXIT_OK
        assert FileCache(cache_dir).has("key") is False

    def test_has(self, cache_dir: str, capsys):
        """Test has reports through output and exit status."""
        run_cli(cache_dir, "set", "key", "value")
        capsys.readouterr()

        assert run_cli(cache_dir, "has", "key") == EXIT_OK
        assert "true" in capsys.readouterr().out.splitlines()
        assert run_cli(cache_dir, "has", "other") == EXIT_FALSE
        assert "false" in capsys.readouterr().out.splitlines()

    def test_delete(self, cache_dir: str):
        """Test delete removes the key."""
        run_cli(cache_dir, "set", "key", "value")
        assert run_cli(cache_dir, "delete", "key") == EXIT_OK
        assert os.listdir(cache_dir) == []

    def test_clear(self, cache_dir: str):
        """Test clear removes every entry."""
        for key in ("a", "b", "c"):
            run_cli(cache_dir, "set", key, key)
        assert run_cli(cache_dir, "clear") == EXIT_OK
        assert os.listdir(cache_dir) == []

    def test_cleanup(self, cache_dir: str, capsys):
        """Test cleanup prints the number of removed files."""
        run_cli(cache_dir, "set", "old", "value", "--ttl", "-10")
        run_cli(cache_dir, "set", "new", "value")
        capsys.readouterr()

        assert run_cli(cache_dir, "cleanup") == EXIT_OK
        assert "1" in capsys.readouterr().out.splitlines()
        assert FileCache(cache_dir).has("new") is True

    def test_stats(self, cache_dir: str, capsys):
        """Test stats prints JSON."""
        run_cli(cache_dir, "set", "key", "value")
        capsys.readouterr()

        assert run_cli(cache_dir, "--ttl", "99", "stats") == EXIT_OK
        stats = json.loads(capsys.readouterr().out)
        assert stats["total_keys"] == 1
        assert stats["default_ttl"] == 99

    def test_json_codec(self, cache_dir: str):
        """Test --codec selects the value codec."""
        run_cli(cache_dir, "--codec", "json", "set", "key", "value")
        (name,) = os.listdir(cache_dir)
        with open(os.path.join(cache_dir, name), "rb") as fh:
            assert fh.read().endswith(b'"value"')


class TestErrors:
    """Test error exits."""

    def test_missing_directory(self, tmp_path):
        """Test an unusable directory exits with status 2."""
        assert run_cli(str(tmp_path / "missing"), "stats") == EXIT_CONFIG

    def test_unknown_codec(self, cache_dir: str):
        """Test an unknown codec exits with status 2."""
        assert run_cli(cache_dir, "--codec", "yaml", "stats") == EXIT_CONFIG
