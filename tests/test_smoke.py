"""Tests for probnet package import and basic smoke tests."""

import importlib
import subprocess
import sys

import pytest


class TestImport:
    """Test that probnet can be imported."""

    def test_import_probnet(self) -> None:
        """Test importing the probnet package."""
        import probnet

        assert hasattr(probnet, "__version__")

    def test_version_exists(self) -> None:
        """Test that __version__ is a non-empty string."""
        import probnet

        assert isinstance(probnet.__version__, str)
        assert len(probnet.__version__) > 0

    def test_reimport(self) -> None:
        """Test that probnet can be reimported."""
        import probnet

        importlib.reload(probnet)
        assert probnet.__version__

    def test_public_names(self) -> None:
        """Every name in __all__ resolves."""
        import probnet

        for name in probnet.__all__:
            assert hasattr(probnet, name), name


class TestCLISmoke:
    """Subprocess smoke tests for the probnet package."""

    @pytest.mark.skipif(
        subprocess.run(
            [sys.executable, "-m", "pip", "show", "probnet"],
            capture_output=True,
        ).returncode != 0,
        reason="probnet not installed via pip (run 'pip install -e .')",
    )
    def test_pip_show(self) -> None:
        """Test that pip show probnet succeeds."""
        result = subprocess.run(
            [sys.executable, "-m", "pip", "show", "probnet"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        assert "probnet" in result.stdout.lower()

    def test_python_c_version(self) -> None:
        """Test that version string is valid semver-like."""
        result = subprocess.run(
            [sys.executable, "-c", "import probnet; print(probnet.__version__)"],
            capture_output=True,
            text=True,
        )
        assert result.returncode == 0
        parts = result.stdout.strip().split(".")
        assert len(parts) >= 3, f"Version {result.stdout!r} is not semver-like"
