"""Tests for code quality checks."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path


class TestLinting:
    """Tests for linting and code quality."""

    def test_ruff_check_passes(self) -> None:
        """Test that ruff linting passes on the package and its tests."""
        project_root = Path(__file__).parent.parent

        result = subprocess.run(
            [sys.executable, "-m", "ruff", "check", "src", "tests"],
            cwd=project_root,
            capture_output=True,
            text=True,
        )

        if result.returncode != 0:
            print("Ruff check failed with output:")
            print(result.stdout)
            print(result.stderr)

        assert result.returncode == 0, "Ruff linting should pass without errors"
