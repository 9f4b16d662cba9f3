# tests/conftest.py
import pytest

from core.config import get_settings

_ENV_VARS = (
    "GROQ_API_KEY",
    "GROQ_DEFAULT_MODEL",
    "GROQ_DEFAULT_TEMPERATURE",
    "GROQ_MAX_RETRIES",
    "INTENT_MODEL",
    "INTENT_TIMEOUT_MS",
    "INTENT_RELEVANCY_THRESHOLD",
    "INTENT_BATCH_SIZE",
    "INTENT_TINY_BATCH_FRACTION",
)


@pytest.fixture(autouse=True)
def _isolated_settings(monkeypatch, tmp_path):
    # A developer's environment or .env must not leak into the defaults under test.
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
