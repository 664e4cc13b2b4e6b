from pathlib import Path

import pytest

from olparse.keywords import KeywordRegistry, reset_registry

from tests.infrastructure.file_utils import write


@pytest.fixture(autouse=True)
def _fresh_registry(monkeypatch):
    # Every test starts from the packaged vocabulary
    monkeypatch.delenv("OLPARSE_KEYWORDS", raising=False)
    monkeypatch.delenv("OLPARSE_DEBUG", raising=False)
    reset_registry()
    yield
    reset_registry()


@pytest.fixture
def port_keywords() -> KeywordRegistry:
    """Small vocabulary where every term is far from the others."""
    return KeywordRegistry({
        "inputPort": ["location", "protocol", "interfaces"],
        "execution": ["single", "sequential", "concurrent"],
    })


@pytest.fixture
def srcfile(tmp_path: Path):
    """Factory: writes a source file under tmp_path and returns its path."""
    def _make(text: str, name: str = "main.ol") -> Path:
        return write(tmp_path / name, text)
    return _make
