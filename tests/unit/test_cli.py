"""
Unit Tests for the Command Line Entry Point
===========================================

Tests for argument handling, exit codes and printed messages.
"""

from functools import partial
from unittest.mock import patch

import pytest

from dmg_background import cli
from dmg_background.core.rendering.png_generator import BackgroundGenerator

from tests.utils.assertions import assert_png_dimensions
from tests.utils.mocks import FakeToolbox, write_png


@pytest.fixture
def run_cli(test_settings):
    """Run ``main`` against test settings and a fake toolbox."""

    def runner(toolbox: FakeToolbox, argv=None) -> int:
        generator_class = partial(BackgroundGenerator, locator=toolbox.locate, runner=toolbox.run)
        with patch("dmg_background.cli.get_settings", return_value=test_settings), patch(
            "dmg_background.cli.BackgroundGenerator", generator_class
        ), patch("dmg_background.cli.setup_logging"):
            return cli.main(argv or [])

    return runner


class TestMain:
    """Test the console entry point."""

    def test_success(self, run_cli, output_dir, capsys):
        """Test a successful run prints the size and exits 0."""
        exit_code = run_cli(FakeToolbox(installed=["rsvg-convert"]))

        out = capsys.readouterr().out
        assert exit_code == 0
        assert f"✓ DMG background created: {output_dir / 'dmg-background.png'} (540x380)" in out
        assert_png_dimensions(output_dir / "dmg-background.png", (540, 380))

    def test_no_tools(self, run_cli, output_dir, capsys):
        """Test no installed tool exits 1 with a failure message and no PNG."""
        exit_code = run_cli(FakeToolbox())

        out = capsys.readouterr().out
        assert exit_code == 1
        assert "❌ Failed to create background" in out
        assert "No rasterization tool available" in out
        assert not (output_dir / "dmg-background.png").exists()

    def test_invocation_failure(self, run_cli, capsys):
        """Test a failing tool exits 1."""
        exit_code = run_cli(FakeToolbox(installed=["magick"], failing=["magick"]))

        assert exit_code == 1
        assert "magick exited with status 1" in capsys.readouterr().out

    def test_unreadable_output(self, run_cli, output_dir, capsys):
        """Test an empty output file exits 1 with a message and leaves no PNG."""
        exit_code = run_cli(FakeToolbox(installed=["rsvg-convert"], corrupt=["rsvg-convert"]))

        assert exit_code == 1
        assert "❌ Failed to create background: rsvg-convert produced an unreadable image" in (
            capsys.readouterr().out
        )
        assert not (output_dir / "dmg-background.png").exists()

    def test_unwritable_output_dir(self, run_cli, tmp_path, capsys):
        """Test an output directory that cannot be created exits 1."""
        blocker = tmp_path / "blocker"
        blocker.write_text("not a directory")

        exit_code = run_cli(FakeToolbox(installed=["rsvg-convert"]), ["--output-dir", str(blocker / "out")])

        assert exit_code == 1
        assert "❌ Failed to create background: Cannot write" in capsys.readouterr().out

    def test_wide_preset_with_thumbnail(self, run_cli, output_dir, capsys):
        """Test --preset wide through the thumbnail service ends at 600x400."""
        exit_code = run_cli(FakeToolbox(installed=["qlmanage"]), ["--preset", "wide"])

        assert exit_code == 0
        assert "(600x400)" in capsys.readouterr().out
        assert_png_dimensions(output_dir / "dmg-background.png", (600, 400))

    def test_output_dir_override(self, run_cli, tmp_path):
        """Test --output-dir redirects both artifacts."""
        target = tmp_path / "elsewhere"
        exit_code = run_cli(FakeToolbox(installed=["rsvg-convert"]), ["--output-dir", str(target)])

        assert exit_code == 0
        assert (target / "dmg-background.png").is_file()
        assert (target / "dmg-background.svg").is_file()

    def test_backend_restriction(self, run_cli, capsys):
        """Test --backend limits the chain to the named tools."""
        toolbox = FakeToolbox(installed=["rsvg-convert", "qlmanage"])
        exit_code = run_cli(toolbox, ["--backend", "qlmanage"])

        assert exit_code == 0
        assert toolbox.invoked_tools == ["qlmanage"]

    def test_list_backends(self, run_cli, capsys):
        """Test --list-backends reports each backend without generating."""
        toolbox = FakeToolbox(installed=["qlmanage"])
        exit_code = run_cli(toolbox, ["--list-backends"])

        out = capsys.readouterr().out
        assert exit_code == 0
        assert "qlmanage       ✓ /usr/local/bin/qlmanage" in out
        assert "rsvg-convert   ✗ not installed" in out
        assert toolbox.calls == []

    def test_list_backends_none_installed(self, run_cli):
        """Test --list-backends exits 1 when nothing is installed."""
        assert run_cli(FakeToolbox(), ["--list-backends"]) == 1

    def test_unknown_backend_rejected_by_parser(self, run_cli):
        """Test argparse rejects unknown backend names."""
        with pytest.raises(SystemExit) as exc_info:
            run_cli(FakeToolbox(), ["--backend", "potrace"])
        assert exc_info.value.code == 2

    def test_invalid_configuration(self, run_cli, test_settings, capsys):
        """Test a bad configured backend order exits 1."""
        test_settings.backend_order = ["potrace"]

        assert run_cli(FakeToolbox()) == 1
        assert "❌ Invalid configuration" in capsys.readouterr().out

    def test_second_run_overwrites(self, run_cli, output_dir):
        """Test re-running leaves exactly one SVG and one PNG."""
        write_png(output_dir / "dmg-background.png", (10, 10))
        toolbox = FakeToolbox(installed=["rsvg-convert"])

        assert run_cli(toolbox) == 0
        assert run_cli(toolbox) == 0
        assert sorted(p.name for p in output_dir.iterdir()) == [
            "dmg-background.png",
            "dmg-background.svg",
        ]
        assert_png_dimensions(output_dir / "dmg-background.png", (540, 380))


class TestApplyOverrides:
    """Test command line overrides."""

    def test_no_overrides_returns_same_settings(self, test_settings):
        """Test settings are untouched without flags."""
        args = cli.build_parser().parse_args([])
        assert cli.apply_overrides(test_settings, args) is test_settings

    def test_verbose_sets_debug(self, test_settings):
        """Test -v switches to debug logging."""
        settings = test_settings.model_copy(update={"log_level": "INFO"})
        args = cli.build_parser().parse_args(["-v", "--backend", "inkscape", "--backend", "qlmanage"])
        updated = cli.apply_overrides(settings, args)

        assert updated.log_level == "DEBUG"
        assert updated.backend_order == ["inkscape", "qlmanage"]
        assert settings.log_level == "INFO"
