# tests/conftest.py
import os

# Settings validate at import time; give them a complete test environment.
os.environ.update(
    {
        "APP_ENV": "test",
        "REDIS_URL": "redis://localhost:6379/15",
        "ALLOWED_ORIGIN": "*",
        "RATE_LIMIT_TIMES": "1000",
        "RATE_LIMIT_SECONDS": "60",
        "MAX_FILE_MB": "1",
        "TRUST_PROXY": "false",
    }
)
for _var in ("GEMINI_API_KEY", "SUPABASE_URL", "SUPABASE_KEY"):
    os.environ.pop(_var, None)

import pytest

from tests.fakes import FakeEmbedder, FakeGenerator

KB_TEXT = """KELAYAKAN KENDARAAN:
Pekerja dilarang mengoperasikan kendaraan yang fungsi rem atau kemudi rusak.

LOCK OUT & TAG OUT:
Harus memasang personal LOTO dengan benar pada saat melakukan perbaikan unit.

KETINGGIAN:
Dilarang bekerja pada ketinggian lebih dari 1,8 meter tanpa full body harness.

short paragraph"""


@pytest.fixture
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def kb_text() -> str:
    return KB_TEXT
