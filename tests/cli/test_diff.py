"""Tests for brdelta diff command."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Generator
from pathlib import Path
from typing import TYPE_CHECKING, Any
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from brdelta.cli.main import cli
from brdelta.core.logging import get_run_id

if TYPE_CHECKING:
    from conftest import LinearRepo

runner = CliRunner()


@pytest.fixture(autouse=True)
def isolated_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Generator[None, None, None]:
    """No user config, no BRDELTA__ env vars, and no leftover log handlers."""
    for name in list(os.environ):
        if name.upper().startswith("BRDELTA__"):
            monkeypatch.delenv(name)
    with patch("brdelta.config.loader.GLOBAL_CONFIG_PATH", tmp_path / "no-global.yaml"):
        yield
    logging.getLogger().handlers.clear()


def _show_info(path: Path, packages: dict[str, tuple[str, str | None]]) -> Path:
    data: dict[str, Any] = {}
    for name, (version, uri) in packages.items():
        uris = [f"git+{uri}"] if uri else ["https+https://example.org/dl.tar.gz"]
        data[name] = {"name": name, "version": version, "downloads": [{"uris": uris}]}
    path.write_text(json.dumps(data))
    return path


class TestDiffCommand:
    """brdelta diff command tests."""

    def test_given_snapshots_without_history_when_diff_then_prints_entries(self, tmp_path: Path) -> None:
        # Given
        first = _show_info(tmp_path / "a.json", {"zlib": ("1.2.11", None), "old": ("1", None)})
        second = _show_info(tmp_path / "b.json", {"zlib": ("1.2.13", None), "new": ("2", None)})

        # When
        result = runner.invoke(cli, ["diff", "--no-history", str(first), str(second)])

        # Then
        assert result.exit_code == 0, result.output
        assert "[+] new [added]" in result.output
        assert "[-] old [removed]" in result.output
        assert "[*] zlib [modified]" in result.output
        assert "version: 1.2.11 -> 1.2.13" in result.output

    def test_given_git_sources_when_diff_then_history_listed(
        self, tmp_path: Path, upstream: str, linear_repo: LinearRepo
    ) -> None:
        first = _show_info(tmp_path / "a.json", {"lib": ("v1", upstream)})
        second = _show_info(tmp_path / "b.json", {"lib": ("v3", upstream)})

        result = runner.invoke(
            cli, ["diff", "-w", str(tmp_path / "work"), str(first), str(second)]
        )

        assert result.exit_code == 0, result.output
        assert "       - Commit 3" in result.output
        assert "       - Commit 2" in result.output
        assert f"           - id: {linear_repo.commits[2]}" in result.output
        assert "           - author: Test User <test@example.com>" in result.output
        assert (tmp_path / "work" / "upstream").is_dir()

    def test_given_downgrade_when_diff_then_direction_reversed(self, tmp_path: Path, upstream: str) -> None:
        first = _show_info(tmp_path / "a.json", {"lib": ("v3", upstream)})
        second = _show_info(tmp_path / "b.json", {"lib": ("v1", upstream)})

        result = runner.invoke(cli, ["diff", "-w", str(tmp_path / "work"), str(first), str(second)])

        assert result.exit_code == 0, result.output
        assert result.output.count("- direction: reversed") == 2

    def test_given_failing_package_when_diff_then_others_still_reported(
        self, tmp_path: Path, upstream: str
    ) -> None:
        first = _show_info(tmp_path / "a.json", {"good": ("v1", upstream), "bad": ("v1", upstream)})
        second = _show_info(tmp_path / "b.json", {"good": ("v2", upstream), "bad": ("missing-tag", upstream)})

        result = runner.invoke(cli, ["diff", "-w", str(tmp_path / "work"), str(first), str(second)])

        assert result.exit_code == 0, result.output
        assert "[*] bad [modified]" in result.output
        assert "       - Commit 2" in result.output
        assert "bad: reference-not-found" in result.output

    def test_given_log_file_when_package_fails_then_summary_points_at_it(
        self, tmp_path: Path, upstream: str
    ) -> None:
        # Given
        log_file = tmp_path / "logs" / "brdelta.log"
        config = tmp_path / "config.yaml"
        config.write_text(
            f"logging:\n  level: INFO\n  outputs:\n    - format: json\n      destination: {log_file}\n"
        )
        first = _show_info(tmp_path / "a.json", {"bad": ("v1", upstream)})
        second = _show_info(tmp_path / "b.json", {"bad": ("missing-tag", upstream)})

        # When
        result = runner.invoke(
            cli,
            ["--config", str(config), "diff", "-w", str(tmp_path / "work"), str(first), str(second)],
        )

        # Then
        assert result.exit_code == 0, result.output
        compact = "".join(result.output.split())
        assert f"See{log_file}fordetails" in compact
        assert "history_failed" in log_file.read_text()

    def test_given_no_log_file_when_package_fails_then_no_pointer(
        self, tmp_path: Path, upstream: str
    ) -> None:
        first = _show_info(tmp_path / "a.json", {"bad": ("v1", upstream)})
        second = _show_info(tmp_path / "b.json", {"bad": ("missing-tag", upstream)})

        result = runner.invoke(cli, ["diff", "-w", str(tmp_path / "work"), str(first), str(second)])

        assert result.exit_code == 0, result.output
        assert "for details" not in result.output

    def test_given_skips_for_different_reasons_when_diff_then_counted_per_reason(
        self, tmp_path: Path, upstream: str
    ) -> None:
        for side in ("a", "b"):
            (tmp_path / side).mkdir()
        (tmp_path / "a" / "plain.mk").write_text("PLAIN_VERSION = 1.0\n")
        (tmp_path / "b" / "plain.mk").write_text("PLAIN_VERSION = 1.1\n")
        (tmp_path / "a" / "lib.mk").write_text(f"LIB_VERSION = v1\nLIB_SITE = {upstream}\n")
        (tmp_path / "b" / "lib.mk").write_text(f"LIB_SITE = {upstream}\n")

        result = runner.invoke(
            cli, ["diff", "-w", str(tmp_path / "work"), str(tmp_path / "a"), str(tmp_path / "b")]
        )

        assert result.exit_code == 0, result.output
        assert "1 package skipped: missing-version" in result.output
        assert "1 package skipped: no-git-source" in result.output
        assert "without git source" not in result.output

    def test_given_run_when_finished_then_run_id_cleared(self, tmp_path: Path) -> None:
        first = _show_info(tmp_path / "a.json", {})

        result = runner.invoke(cli, ["diff", "--no-history", str(first), str(first)])

        assert result.exit_code == 0, result.output
        assert get_run_id() is None

    def test_given_json_format_when_diff_then_report_written(self, tmp_path: Path, upstream: str) -> None:
        first = _show_info(tmp_path / "a.json", {"lib": ("v1", upstream)})
        second = _show_info(tmp_path / "b.json", {"lib": ("v2", upstream)})
        out = tmp_path / "report.json"

        result = runner.invoke(
            cli,
            ["diff", "-w", str(tmp_path / "work"), "-f", "json", "-o", str(out), str(first), str(second)],
        )

        assert result.exit_code == 0, result.output
        data = json.loads(out.read_text())
        assert data["packages"]["lib"]["history"][0]["summary"] == "Commit 2"
        assert data["enrichment"]["summary"]["enriched"] == 1

    def test_given_text_output_when_diff_then_file_written(self, tmp_path: Path) -> None:
        first = _show_info(tmp_path / "a.json", {"zlib": ("1", None)})
        second = _show_info(tmp_path / "b.json", {})
        out = tmp_path / "diff.txt"

        result = runner.invoke(cli, ["diff", "--no-history", "-o", str(out), str(first), str(second)])

        assert result.exit_code == 0, result.output
        assert out.read_text() == "[-] zlib [removed]\n"

    def test_given_json_without_output_when_diff_then_usage_error(self, tmp_path: Path) -> None:
        first = _show_info(tmp_path / "a.json", {})

        result = runner.invoke(cli, ["diff", "-f", "json", str(first), str(first)])

        assert result.exit_code == 2
        assert "--output" in result.output

    def test_given_recipe_directories_when_diff_then_compared(self, tmp_path: Path) -> None:
        for side, version in (("a", "1.0"), ("b", "1.1")):
            (tmp_path / side).mkdir()
            (tmp_path / side / "foo.mk").write_text(f"FOO_VERSION = {version}\n")

        result = runner.invoke(cli, ["diff", "--no-history", str(tmp_path / "a"), str(tmp_path / "b")])

        assert result.exit_code == 0, result.output
        assert "version: 1.0 -> 1.1" in result.output

    def test_given_broken_manifest_when_diff_then_error(self, tmp_path: Path) -> None:
        bad = tmp_path / "bad.json"
        bad.write_text("{")

        result = runner.invoke(cli, ["diff", "--no-history", str(bad), str(bad)])

        assert result.exit_code == 1
        assert "MANIFEST_PARSE_ERROR" in result.output

    def test_given_invalid_config_when_diff_then_error(self, tmp_path: Path) -> None:
        config = tmp_path / "config.yaml"
        config.write_text("history:\n  max_workers: 0\n")
        first = _show_info(tmp_path / "a.json", {})

        result = runner.invoke(cli, ["--config", str(config), "diff", str(first), str(first)])

        assert result.exit_code == 1
        assert "CONFIG_INVALID_VALUE" in result.output

    def test_version(self) -> None:
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "brdelta" in result.output
