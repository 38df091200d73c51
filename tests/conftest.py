"""Shared fixtures: build routes trees on disk from a mapping."""

import textwrap
from collections.abc import Callable, Mapping
from pathlib import Path

import pytest

TreeFactory = Callable[[Mapping[str, str]], Path]

HANDLER = """\
from trellis.http.response import text

def handler(event):
    return text("ok")
"""

EXTEND_MW = """\
from trellis.middleware import ScopeMiddleware

def middleware():
    return ScopeMiddleware.extend()
"""

OVERRIDE_MW = """\
from trellis.middleware import ScopeMiddleware

def middleware():
    return ScopeMiddleware.override()
"""


def tagging_middleware(tag: str, *, override: bool = False) -> str:
    """Middleware source that wraps the response body as ``tag(body)``."""
    factory = "override" if override else "extend"
    return textwrap.dedent(
        f"""\
        from trellis.http.response import text
        from trellis.middleware import ScopeMiddleware

        async def wrap_body(event, next):
            response = await next(event)
            return text("{tag}(" + response.text + ")", status=response.status)

        def middleware():
            return ScopeMiddleware.{factory}().use(wrap_body)
        """
    )


def text_handler(body: str) -> str:
    """Handler source returning a fixed plain-text body."""
    return textwrap.dedent(
        f"""\
        from trellis.http.response import text

        async def handler(event):
            return text({body!r})
        """
    )


@pytest.fixture
def make_tree(tmp_path: Path) -> TreeFactory:
    """Create files under ``tmp_path / "routes"`` and return that directory.

    Keys are paths relative to the routes root; a key ending in ``/``
    creates an empty directory.
    """

    def factory(files: Mapping[str, str]) -> Path:
        root = tmp_path / "routes"
        root.mkdir(exist_ok=True)
        for rel, content in files.items():
            target = root / rel
            if rel.endswith("/"):
                target.mkdir(parents=True, exist_ok=True)
                continue
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return root

    return factory
