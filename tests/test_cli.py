"""Tests for the hardlinkr command-line interface."""

import errno
import json
import os

from click.testing import CliRunner

from hardlinkr.cli import main


def _cross_device_link(src, dst, *args, **kwargs):
    raise OSError(errno.EXDEV, "Invalid cross-device link")


class TestMain:
    def test_dedups_target_directory(self, make_file, temp_dir):
        x = make_file("x", "hello")
        y = make_file("y", "hello")

        result = CliRunner().invoke(main, [str(temp_dir)])

        assert result.exit_code == 0, result.output
        assert x.samefile(y)
        assert "[LINKED]" in result.output
        assert "Linked:           1" in result.output
        assert "Space reclaimed:  5.0 B" in result.output

    def test_readonly_directories_come_first(self, make_file, temp_dir):
        r = make_file("ref/r", "A")
        r_copy = make_file("ref/r_copy", "A")
        t = make_file("target/t", "A")

        result = CliRunner().invoke(
            main, [str(temp_dir / "ref"), str(temp_dir / "target")]
        )

        assert result.exit_code == 0, result.output
        assert t.samefile(r)
        assert not r_copy.samefile(r)
        assert "Read-only:" in result.output

    def test_dry_run(self, make_file, temp_dir):
        x = make_file("x", "hello")
        y = make_file("y", "hello")

        result = CliRunner().invoke(main, ["--dry-run", str(temp_dir)])

        assert result.exit_code == 0, result.output
        assert not x.samefile(y)
        assert "DRY RUN MODE" in result.output
        assert "[WOULD LINK]" in result.output

    def test_min_size_and_exclude(self, make_file, temp_dir):
        small_a = make_file("a", "hi")
        small_b = make_file("b", "hi")
        tmp_a = make_file("c.tmp", "hello world")
        tmp_b = make_file("d.tmp", "hello world")

        result = CliRunner().invoke(
            main, ["--min-size", "3", "--exclude", "*.tmp", str(temp_dir)]
        )

        assert result.exit_code == 0, result.output
        assert not small_a.samefile(small_b)
        assert not tmp_a.samefile(tmp_b)

    def test_single_representative(self, make_file, temp_dir):
        make_file("a", "AAAA")
        b = make_file("b", "BBBB")
        c = make_file("c", "BBBB")

        result = CliRunner().invoke(main, ["--single-representative", str(temp_dir)])

        assert result.exit_code == 0, result.output
        assert not b.samefile(c)

    def test_failure_exits_non_zero(self, make_file, temp_dir, monkeypatch):
        make_file("x", "hello")
        y = make_file("y", "hello")
        monkeypatch.setattr(os, "link", _cross_device_link)

        result = CliRunner().invoke(main, [str(temp_dir)])

        monkeypatch.undo()
        assert result.exit_code == 1
        assert "[FAILED]" in result.output
        assert y.read_text() == "hello"

    def test_unlistable_directory_exits_non_zero(self, make_file, temp_dir, deny_listing):
        make_file("x", "hello")
        make_file("locked/y", "hello")
        deny_listing(temp_dir / "locked")

        result = CliRunner().invoke(main, [str(temp_dir)])

        assert result.exit_code == 1
        assert "[FAILED]" in result.output
        assert "Cannot list directory" in result.output

    def test_stop_on_error_aborts(self, make_file, temp_dir, monkeypatch):
        make_file("a", "hello")
        make_file("b", "hello")
        make_file("c", "hello")
        monkeypatch.setattr(os, "link", _cross_device_link)

        result = CliRunner().invoke(main, ["--stop-on-error", str(temp_dir)])

        monkeypatch.undo()
        assert result.exit_code == 1
        assert "Aborted" in result.output
        assert "Files visited:    2" in result.output

    def test_output_json(self, make_file, temp_dir):
        make_file("data/x", "hello")
        make_file("data/y", "hello")
        report_path = temp_dir / "report.json"

        result = CliRunner().invoke(
            main, ["--output-json", str(report_path), str(temp_dir / "data")]
        )

        assert result.exit_code == 0, result.output
        data = json.loads(report_path.read_text())
        assert data["summary"]["linked"] == 1
        assert [o["status"] for o in data["outcomes"]] == ["registered", "linked"]

    def test_config_file(self, make_file, temp_dir):
        x = make_file("data/x", "hello")
        y = make_file("data/y", "hello")
        config_path = temp_dir / "hardlinkr.yaml"
        config_path.write_text("linking:\n  dry_run: true\n")

        result = CliRunner().invoke(
            main, ["--config", str(config_path), str(temp_dir / "data")]
        )

        assert result.exit_code == 0, result.output
        assert not x.samefile(y)

    def test_missing_directory_is_usage_error(self, temp_dir):
        result = CliRunner().invoke(main, [str(temp_dir / "nope")])

        assert result.exit_code == 2

    def test_directory_required(self):
        result = CliRunner().invoke(main, [])

        assert result.exit_code == 2
