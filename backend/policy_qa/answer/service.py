"""Question answering flow."""

from __future__ import annotations

from typing import Any

from policy_qa.answer.generator import AnswerGenerator
from policy_qa.core.capability import Capability, Configured, Unconfigured
from policy_qa.core.errors import QuestionRequiredError
from policy_qa.core.logging import get_logger, log_context
from policy_qa.models.entities import RetrievalResult
from policy_qa.retrieval.context import build_context, to_sources
from policy_qa.retrieval.search import DEFAULT_LIMIT, Retriever
from policy_qa.retrieval.vector_index import IndexManager

logger = get_logger(__name__)

NO_LLM_ANSWER = "No LLM key configured. Here are the most relevant policy snippets I have (or recent snippets)."


class QAService:
    """Validate, retrieve, assemble context and (optionally) generate an answer."""

    def __init__(
        self,
        index: IndexManager,
        retriever: Retriever,
        generator: Capability[AnswerGenerator],
        limit: int = DEFAULT_LIMIT,
    ) -> None:
        self.index = index
        self.retriever = retriever
        self.generator = generator
        self.limit = limit

    async def ask(self, question: str | None) -> dict[str, Any]:
        question = (question or "").strip()
        if not question:
            raise QuestionRequiredError()

        with log_context(collection=self.index.collection):
            await self.index.ensure_collection()
            result = await self.retriever.retrieve(question, limit=self.limit)
            with log_context(retrieval_mode=result.mode):
                return await self._respond(question, result)

    async def _respond(self, question: str, result: RetrievalResult) -> dict[str, Any]:
        context = build_context(result.hits)
        sources = to_sources(result.hits)
        generator = self.generator
        if isinstance(generator, Unconfigured):
            logger.info("No chat model configured; returning %s snippets", len(result.hits))
            return {
                "ok": True,
                "answer": NO_LLM_ANSWER,
                "sources": sources,
                "snippets": context,
                "retrieval": result.mode,
            }
        if isinstance(generator, Configured):
            answer = await generator.client.answer(question, context)
            return {"ok": True, "answer": answer, "sources": sources, "retrieval": result.mode}
        raise TypeError(f"Unknown capability variant: {generator!r}")


__all__ = ["NO_LLM_ANSWER", "QAService"]
