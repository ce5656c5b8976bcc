"""Tests for the command-line interface."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from go_mirage import CopyPlan, MetadataError, MirageOptions, Substitution
from go_mirage.go_mirage import main


class TestMain:
    """Tests for main()."""

    def test_missing_arguments(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that missing positional arguments print usage."""
        with pytest.raises(SystemExit) as exc_info:
            main(["only-source"])

        assert exc_info.value.code == 2
        assert "DSTDIR" in capsys.readouterr().err

    @patch("go_mirage.go_mirage.MirrorManager")
    def test_flags_override_defaults(
        self, mock_manager: MagicMock, go_project: Path, dst_dir: Path
    ) -> None:
        """Test that command-line flags end up in the options."""
        result = main(
            [
                "--dst-module",
                "example.com/dst",
                "--no-local-imports",
                "--include-tests",
                "--no-tidy",
                str(go_project / "cmd" / "tool"),
                str(dst_dir),
            ]
        )

        assert result == 0
        args, _kwargs = mock_manager.call_args
        assert args[2] == MirageOptions(
            dst_module="example.com/dst",
            local_imports=False,
            include_tests=True,
            tidy=False,
        )
        mock_manager.return_value.run.assert_called_once()

    @patch("go_mirage.go_mirage.MirrorManager")
    def test_config_file_under_flags(
        self, mock_manager: MagicMock, go_project: Path, dst_dir: Path
    ) -> None:
        """Test that the configuration file is read and flags win over it."""
        dst_dir.mkdir()
        (dst_dir / ".go-mirage.toml").write_text(
            '[tool.go-mirage]\ndst-module = "example.com/from-file"\nclean = false\n'
        )

        main(["--dst-module", "example.com/flag", str(go_project / "cmd" / "tool"), str(dst_dir)])

        options = mock_manager.call_args.args[2]
        assert options.dst_module == "example.com/flag"
        assert options.clean is False

    @patch("go_mirage.go_mirage.MirrorManager")
    def test_analyze_only(
        self,
        mock_manager: MagicMock,
        go_project: Path,
        dst_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that --analyze-only prints the plan and does not run."""
        mock_manager.return_value.prepare.return_value = CopyPlan(
            src_dir=go_project,
            dst_dir=dst_dir,
            src_import_path="example.com/m/cmd/tool",
            src_go_mod=go_project / "go.mod",
            dst_module="example.com/dst",
            substitutions=[Substitution("example.com/m/cmd/tool", "example.com/dst")],
        )

        result = main(["--analyze-only", str(go_project / "cmd" / "tool"), str(dst_dir)])

        assert result == 0
        assert "example.com/m/cmd/tool -> example.com/dst" in capsys.readouterr().out
        mock_manager.return_value.run.assert_not_called()

    def test_invalid_source_directory(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that a missing source directory is reported and exits 1."""
        result = main([str(tmp_path / "missing"), str(tmp_path / "dst")])

        assert result == 1
        assert "Error: Source directory not found" in capsys.readouterr().err

    @patch("go_mirage.go_mirage.MirrorManager")
    def test_run_failure(
        self,
        mock_manager: MagicMock,
        go_project: Path,
        dst_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        """Test that errors raised during the run are reported and exit 1."""
        mock_manager.return_value.run.side_effect = MetadataError("go list failed")

        result = main([str(go_project / "cmd" / "tool"), str(dst_dir)])

        assert result == 1
        assert "Error: go list failed" in capsys.readouterr().err

    def test_malformed_config_file(
        self, go_project: Path, dst_dir: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        """Test that a badly shaped configuration file is reported and exits 1."""
        config = go_project / "broken.toml"
        config.write_text('tool = "x"\n')

        result = main(["--config", str(config), str(go_project / "cmd" / "tool"), str(dst_dir)])

        assert result == 1
        assert "must be a table" in capsys.readouterr().err
