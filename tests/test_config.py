"""Tests for trellis.config — CompilerConfig frozen dataclass."""

from pathlib import Path

import pytest

from trellis.config import ORDERINGS, CompilerConfig
from trellis.errors import ConfigurationError


class TestCompilerConfig:
    def test_defaults(self) -> None:
        cfg = CompilerConfig()

        assert cfg.routes_dir == "routes"
        assert cfg.middleware_filename == "_middleware.py"
        assert cfg.handler_suffix == ".py"
        assert cfg.handler_name == "handler"
        assert cfg.middleware_factory == "middleware"
        assert cfg.ordering == "length"
        assert cfg.extract_metadata is True
        assert cfg.metadata_workers == 1

    def test_override(self) -> None:
        cfg = CompilerConfig(routes_dir=Path("app/routes"), ordering="specificity", metadata_workers=4)

        assert cfg.routes_dir == Path("app/routes")
        assert cfg.ordering == "specificity"
        assert cfg.metadata_workers == 4

    def test_frozen(self) -> None:
        cfg = CompilerConfig()

        with pytest.raises(AttributeError):
            cfg.ordering = "specificity"  # type: ignore[misc]

    def test_orderings(self) -> None:
        assert ORDERINGS == {"length", "specificity"}


class TestValidation:
    def test_unknown_ordering(self) -> None:
        with pytest.raises(ConfigurationError, match="Unknown route ordering 'random'"):
            CompilerConfig(ordering="random")

    def test_workers_must_be_positive(self) -> None:
        with pytest.raises(ConfigurationError, match="metadata_workers"):
            CompilerConfig(metadata_workers=0)

    def test_suffix_needs_dot(self) -> None:
        with pytest.raises(ConfigurationError, match="handler_suffix"):
            CompilerConfig(handler_suffix="py")
