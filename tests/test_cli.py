# Author: PB
# Maintainer: PB
# Original date: 2026.10.19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ------
# tests/test_cli.py

"""Tests for the layer-diff command line interface."""

import json

from typer.testing import CliRunner

from layer_diff.cli import app

from tests.fixtures.image_fixture import tar_file, write_docker_archive

runner = CliRunner()


class TestReport:
    """The image details report."""

    def test_table(self, app_archive):
        result = runner.invoke(app, ["report", str(app_archive)])

        assert result.exit_code == 0, result.output
        assert "example/app:1.0" in result.output
        assert "Image efficiency score: 56 %" in result.output
        assert "Total Image size: 5.3 kB" in result.output
        assert "Potential wasted space: 2.3 kB" in result.output
        # largest waste first
        assert result.output.index("/usr/bin/app") < result.output.index("/etc/app.conf")

    def test_limit(self, app_archive):
        result = runner.invoke(app, ["report", str(app_archive), "--limit", "1"])

        assert result.exit_code == 0, result.output
        assert "/usr/bin/app" in result.output
        assert "/etc/app.conf" not in result.output
        assert "(1 more)" in result.output

    def test_json(self, app_archive):
        result = runner.invoke(app, ["report", str(app_archive), "--format", "json"])

        assert result.exit_code == 0, result.output
        data = json.loads(result.stdout)
        assert data["image"] == "example/app:1.0"
        assert data["wasted_bytes"] == 2300
        assert data["image_size"] == 5300
        assert [d["path"] for d in data["inefficiencies"]] == ["/etc/app.conf", "/usr/bin/app"]
        assert data["inefficiencies"][0]["count"] == 2

    def test_unknown_format(self, app_archive):
        result = runner.invoke(app, ["report", str(app_archive), "--format", "xml"])

        assert result.exit_code == 1
        assert "Unknown format: xml" in result.output

    def test_missing_archive(self, tmp_path):
        result = runner.invoke(app, ["report", str(tmp_path / "missing.tar")])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestLayersAndTree:
    """Layer listing and tree views."""

    def test_layers(self, app_archive):
        result = runner.invoke(app, ["layers", str(app_archive)])

        assert result.exit_code == 0, result.output
        assert "ADD rootfs /" in result.output
        assert "RUN upgrade-app" in result.output

    def test_squashed_tree(self, app_archive):
        result = runner.invoke(app, ["tree", str(app_archive)])

        assert result.exit_code == 0, result.output
        assert "app.conf" in result.output
        assert "cache.bin" not in result.output
        assert "app-link → app" in result.output

    def test_layer_tree_shows_deletions(self, app_archive):
        result = runner.invoke(app, ["tree", str(app_archive), "--layer", "1"])

        assert result.exit_code == 0, result.output
        assert "cache.bin (deleted)" in result.output
        assert "app.conf" in result.output

    def test_changes_only_hides_untouched_paths(self, tmp_path):
        archive = write_docker_archive(tmp_path / "rewrite.tar", [
            [tar_file("etc/same.conf", 5), tar_file("opt/tool", 10)],
            [tar_file("etc/same.conf", 5), tar_file("opt/tool", 12)],
        ])
        full = runner.invoke(app, ["tree", str(archive), "--layer", "1"])
        changed = runner.invoke(app, ["tree", str(archive), "--layer", "1",
                                      "--changes-only"])

        assert full.exit_code == 0, full.output
        assert changed.exit_code == 0, changed.output
        assert "same.conf" in full.output
        assert "same.conf" not in changed.output
        assert "tool" in changed.output

    def test_layer_out_of_range(self, app_archive):
        result = runner.invoke(app, ["tree", str(app_archive), "--layer", "9"])

        assert result.exit_code == 1
        assert "Error:" in result.output


class TestCI:
    """Exit codes from the ci command."""

    def test_efficient_image_passes(self, efficient_archive):
        result = runner.invoke(app, ["ci", str(efficient_archive)])

        assert result.exit_code == 0, result.output
        assert "Result: PASS" in result.output

    def test_wasteful_image_fails(self, app_archive):
        result = runner.invoke(app, ["ci", str(app_archive)])

        assert result.exit_code == 1
        assert "FAIL" in result.output
        assert "lowest_efficiency" in result.output

    def test_relaxed_thresholds_pass(self, app_archive):
        result = runner.invoke(app, [
            "ci", str(app_archive),
            "--lowest-efficiency", "0.5",
            "--highest-user-wasted-percent", "0.95",
            "--highest-wasted-bytes", "3000",
        ])

        assert result.exit_code == 0, result.output
        assert "Result: PASS" in result.output
