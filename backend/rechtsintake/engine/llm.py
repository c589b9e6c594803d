import logging
from typing import AsyncIterator

from openai import AsyncOpenAI

from ..config import settings

logger = logging.getLogger(__name__)

_client: AsyncOpenAI | None = None


def _get_client() -> AsyncOpenAI:
    global _client
    if _client is None:
        _client = AsyncOpenAI(api_key=settings.openai_api_key)
    return _client


async def chat_text(system_prompt: str, messages: list[dict]) -> str:
    """Single LLM call that returns plain text."""
    client = _get_client()
    response = await client.chat.completions.create(
        model=settings.openai_model,
        messages=[
            {"role": "system", "content": system_prompt},
            *messages,
        ],
        temperature=0.3,
        max_tokens=2048,
    )
    text = response.choices[0].message.content or ""
    logger.debug("Completion finished | model=%s | chars=%d", settings.openai_model, len(text))
    return text


async def stream_text(system_prompt: str, messages: list[dict]) -> AsyncIterator[str]:
    """Yield the reply as it arrives."""
    client = _get_client()
    stream = await client.chat.completions.create(
        model=settings.openai_model,
        messages=[
            {"role": "system", "content": system_prompt},
            *messages,
        ],
        temperature=0.3,
        max_tokens=2048,
        stream=True,
    )
    async for chunk in stream:
        if not chunk.choices:
            continue
        delta = chunk.choices[0].delta.content
        if delta:
            yield delta
