"""Tests for answer generation and the ask flow."""

import pytest

from policy_qa.answer.generator import NOT_FOUND_ANSWER, SYSTEM_PROMPT, AnswerGenerator
from policy_qa.answer.service import NO_LLM_ANSWER, QAService
from policy_qa.core.capability import Configured, Unconfigured
from policy_qa.core.errors import QuestionRequiredError
from policy_qa.ingest.embeddings import EmbeddingGateway
from policy_qa.models.entities import Chunk, IndexedPoint
from policy_qa.retrieval.search import Retriever
from policy_qa.retrieval.vector_index import IndexManager

from conftest import TEST_DIM, FakeOpenAI


def test_system_prompt_carries_exact_refusal() -> None:
    assert NOT_FOUND_ANSWER == "I couldn't find this in the available policies."
    assert f'say: "{NOT_FOUND_ANSWER}"' in SYSTEM_PROMPT
    assert "(file, chunk)" in SYSTEM_PROMPT


@pytest.mark.asyncio
async def test_generator_sends_question_and_sources(fake_openai: FakeOpenAI) -> None:
    generator = AnswerGenerator(fake_openai, model="gpt-4o-mini", temperature=0.2)
    answer = await generator.answer("How many days?", "Source 1 | file: a.md | chunk: 0\nX\n")

    assert answer == "Employees get 25 vacation days. (vacation.md, 0)"
    call = fake_openai.chat.completions.calls[0]
    assert call["model"] == "gpt-4o-mini"
    assert call["temperature"] == 0.2
    assert call["messages"][0] == {"role": "system", "content": SYSTEM_PROMPT}
    assert call["messages"][1]["content"].startswith("Question: How many days?\n\nSOURCES:\nSource 1")


async def _seeded_index(index: IndexManager) -> IndexManager:
    await index.ensure_collection()
    await index.upsert(
        [
            IndexedPoint(id=1, vector=[0.0] * TEST_DIM, chunk=Chunk("vacation.md", 0, "25 vacation days")),
            IndexedPoint(id=2, vector=[0.0] * TEST_DIM, chunk=Chunk("remote.txt", 0, "remote twice a week")),
        ]
    )
    return index


@pytest.mark.asyncio
@pytest.mark.parametrize("question", ["", "   ", None])
async def test_blank_question_is_rejected(index: IndexManager, question) -> None:
    gateway = EmbeddingGateway(Unconfigured(), model="m", vector_size=TEST_DIM)
    service = QAService(index, Retriever(index, gateway), Unconfigured())
    with pytest.raises(QuestionRequiredError, match="question is required"):
        await service.ask(question)


@pytest.mark.asyncio
async def test_without_generation_returns_advisory_and_snippets(index: IndexManager) -> None:
    await _seeded_index(index)
    gateway = EmbeddingGateway(Unconfigured(), model="m", vector_size=TEST_DIM)
    service = QAService(index, Retriever(index, gateway), Unconfigured(), limit=5)
    payload = await service.ask("vacation?")

    assert payload["answer"] == NO_LLM_ANSWER
    assert payload["retrieval"] == "fallback"
    assert len(payload["sources"]) == 2
    assert all(source["score"] == 1.0 for source in payload["sources"])
    assert "Source 1 | file:" in payload["snippets"]


@pytest.mark.asyncio
async def test_with_generation_returns_generated_answer(index: IndexManager, fake_openai: FakeOpenAI) -> None:
    await _seeded_index(index)
    gateway = EmbeddingGateway(Unconfigured(), model="m", vector_size=TEST_DIM)
    generator = AnswerGenerator(fake_openai, model="gpt-4o-mini")
    service = QAService(index, Retriever(index, gateway), Configured(generator), limit=1)
    payload = await service.ask("  How many vacation days?  ")

    assert payload["answer"] == "Employees get 25 vacation days. (vacation.md, 0)"
    assert "snippets" not in payload
    assert len(payload["sources"]) == 1
    sent = fake_openai.chat.completions.calls[0]["messages"][1]["content"]
    assert sent.startswith("Question: How many vacation days?\n")


@pytest.mark.asyncio
async def test_ask_bootstraps_missing_collection(index: IndexManager) -> None:
    gateway = EmbeddingGateway(Unconfigured(), model="m", vector_size=TEST_DIM)
    service = QAService(index, Retriever(index, gateway), Unconfigured())
    payload = await service.ask("anything")
    assert payload["sources"] == []
    assert payload["snippets"] == ""
    assert await index.client.collection_exists(index.collection)
