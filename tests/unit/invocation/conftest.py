"""Fixtures for writing handler modules on the fly."""

import sys
import textwrap
from uuid import uuid4

import pytest


@pytest.fixture
def handler_module(tmp_path, monkeypatch):
    """Write a uniquely named module importable for the duration of a test.

    Returns a factory taking the module source and returning the module name.
    """
    monkeypatch.syspath_prepend(str(tmp_path))
    created: list[str] = []

    def _write(source: str) -> str:
        name = f"fn_handler_{uuid4().hex}"
        (tmp_path / f"{name}.py").write_text(textwrap.dedent(source))
        created.append(name)
        return name

    yield _write

    for name in created:
        sys.modules.pop(name, None)
