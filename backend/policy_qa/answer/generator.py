"""Chat-completion answer generation."""

from __future__ import annotations

from openai import AsyncOpenAI

from policy_qa.core.logging import get_logger

logger = get_logger(__name__)

NOT_FOUND_ANSWER = "I couldn't find this in the available policies."

SYSTEM_PROMPT = f"""You are an internal company policy assistant.
Rules:
- Answer ONLY using the provided sources.
- If not found in sources, say: "{NOT_FOUND_ANSWER}"
- Keep it short and clear.
- At the end, list sources as: (file, chunk).
"""


def build_messages(question: str, context: str) -> list[dict[str, str]]:
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": f"Question: {question}\n\nSOURCES:\n{context}"},
    ]


class AnswerGenerator:
    """Answer a question strictly from an assembled context block."""

    def __init__(self, client: AsyncOpenAI, model: str, temperature: float = 0.2) -> None:
        self.client = client
        self.model = model
        self.temperature = temperature

    async def answer(self, question: str, context: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=build_messages(question, context),
            temperature=self.temperature,
        )
        if not response.choices:
            logger.warning("Chat completion returned no choices", extra={"ctx_model": self.model})
            return ""
        return response.choices[0].message.content or ""


__all__ = ["NOT_FOUND_ANSWER", "SYSTEM_PROMPT", "AnswerGenerator", "build_messages"]
