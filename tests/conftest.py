"""Root test configuration: session-level cleanup of runtime artifacts"""

import shutil
from pathlib import Path

import pytest


_PROJECT_ROOT = Path(__file__).parent.parent

_CLEANUP_FILES = ["ai-build-report.json"]
_CLEANUP_DIRS = ["dist"]


@pytest.fixture(scope="session", autouse=True)
def cleanup_artifacts():
    """Remove build output created during the test session."""
    yield
    for name in _CLEANUP_FILES:
        p = _PROJECT_ROOT / name
        if p.exists():
            p.unlink()
    for name in _CLEANUP_DIRS:
        p = _PROJECT_ROOT / name
        if p.exists():
            shutil.rmtree(p)


@pytest.fixture(autouse=True)
def no_api_key(monkeypatch):
    """Keep tests off the network: no real credentials or MDXLATE_* overrides leak in."""
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")
    for name in ("MDXLATE_INPUT_DIR", "MDXLATE_OUTPUT_DIR", "MDXLATE_PROMPT", "MDXLATE_MODEL", "MDXLATE_WORKERS"):
        monkeypatch.delenv(name, raising=False)
