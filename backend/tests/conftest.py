"""Test fixtures for Policy QA."""

from __future__ import annotations

import hashlib
import math
import re
import sys
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest
from qdrant_client import AsyncQdrantClient

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from policy_qa.core.capability import Configured  # noqa: E402
from policy_qa.ingest.embeddings import EmbeddingGateway  # noqa: E402
from policy_qa.models.entities import IndexConfig  # noqa: E402
from policy_qa.retrieval.vector_index import IndexManager  # noqa: E402

TEST_DIM = 64
_TOKEN_RE = re.compile(r"\w+")


def hashed_vector(text: str, dim: int = TEST_DIM) -> list[float]:
    """Deterministic bag-of-words embedding: token counts hashed into ``dim`` slots."""
    vector = [0.0] * dim
    for token in _TOKEN_RE.findall(text.lower()):
        digest = hashlib.blake2b(token.encode("utf-8"), digest_size=8).digest()
        vector[int.from_bytes(digest, "big") % dim] += 1.0
    norm = math.sqrt(sum(value * value for value in vector))
    if norm:
        vector = [value / norm for value in vector]
    return vector


class FakeEmbeddings:
    def __init__(self, dim: int) -> None:
        self.dim = dim
        self.calls: list[list[str]] = []

    async def create(self, model: str, input: Any) -> SimpleNamespace:
        texts = [input] if isinstance(input, str) else list(input)
        self.calls.append(texts)
        # Reverse order to make sure callers sort by index.
        data = [SimpleNamespace(index=idx, embedding=hashed_vector(text, self.dim)) for idx, text in enumerate(texts)]
        return SimpleNamespace(data=list(reversed(data)))


class FakeCompletions:
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.calls: list[dict[str, Any]] = []

    async def create(self, **kwargs: Any) -> SimpleNamespace:
        self.calls.append(kwargs)
        message = SimpleNamespace(content=self.reply)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


class FakeOpenAI:
    """Stands in for ``openai.AsyncOpenAI`` with the two endpoints the service uses."""

    def __init__(self, dim: int = TEST_DIM, reply: str = "Employees get 25 vacation days. (vacation.md, 0)") -> None:
        self.embeddings = FakeEmbeddings(dim)
        self.chat = SimpleNamespace(completions=FakeCompletions(reply))


@pytest.fixture(autouse=True)
def reset_state(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Reset global singletons and environment between tests."""
    monkeypatch.setenv("POLQA_QDRANT_URL", ":memory:")
    monkeypatch.setenv("POLQA_VECTOR_SIZE", str(TEST_DIM))
    monkeypatch.setenv("POLQA_DOCS_DIR", str(tmp_path / "docs"))
    cleared = (
        "POLQA_CONFIG",
        "POLQA_OPENAI_API_KEY",
        "POLQA_EMBEDDING_API_KEY",
        "POLQA_CHAT_API_KEY",
        "OPENAI_API_KEY",
        "QDRANT_URL",
    )
    for name in cleared:
        monkeypatch.delenv(name, raising=False)

    from policy_qa.api import dependencies as deps

    deps.reset_state()
    yield
    deps.reset_state()


@pytest.fixture
def docs_dir(tmp_path: Path) -> Path:
    path = tmp_path / "docs"
    path.mkdir()
    (path / "vacation.md").write_text(
        "# Vacation\n\nEmployees receive 25 vacation days per year.\n\nUnused vacation days expire in March.",
        encoding="utf-8",
    )
    (path / "remote.txt").write_text(
        "Remote work is allowed two days per week.\n\nManagers approve remote work requests.",
        encoding="utf-8",
    )
    (path / "notes.pdf").write_bytes(b"%PDF-1.4 not indexed")
    return path


@pytest.fixture
def fake_openai() -> FakeOpenAI:
    return FakeOpenAI()


@pytest.fixture
def index() -> IndexManager:
    client = AsyncQdrantClient(location=":memory:")
    return IndexManager(client, IndexConfig(collection_name="test_policies", vector_size=TEST_DIM))


@pytest.fixture
def embedding_gateway(fake_openai: FakeOpenAI) -> EmbeddingGateway:
    return EmbeddingGateway(Configured(fake_openai), model="text-embedding-3-small", vector_size=TEST_DIM)
