"""Translate normalized markup through the chat model in token-sized chunks."""

from __future__ import annotations

import logging
import re
from typing import List, Optional

from doctranslate.config import settings
from doctranslate.constants import language_name
from doctranslate.errors import TranslationError
from doctranslate.llm.openai_client import OpenAIChatClient
from doctranslate.llm.prompts import build_history, build_system_prompt, build_user_prompt
from doctranslate.utils.tokenization import count_tokens, get_cl100k_encoding

logger = logging.getLogger(__name__)

WRAPPING_FENCE = re.compile(r"^\s*```[\w-]*[ \t]*\n(.*?)\n?```\s*$", re.DOTALL)


def strip_code_fence(text: str) -> str:
    """Remove a code fence the model wrapped around its whole answer."""
    match = WRAPPING_FENCE.match(text)
    return match.group(1) if match else text


def split_markup(markup: str, max_tokens: int, encoding) -> List[str]:
    """Group blank-line separated blocks into chunks of at most ``max_tokens``.

    A single block larger than the budget becomes a chunk of its own.
    """
    blocks = [block for block in re.split(r"\n\s*\n", markup.strip()) if block.strip()]
    chunks: List[str] = []
    current: List[str] = []
    current_tokens = 0
    for block in blocks:
        block_tokens = count_tokens(block, encoding)
        if current and current_tokens + block_tokens > max_tokens:
            chunks.append("\n\n".join(current))
            current, current_tokens = [], 0
        current.append(block)
        current_tokens += block_tokens
    if current:
        chunks.append("\n\n".join(current))
    return chunks


class MarkupTranslator:
    """Translates markup while asking the model to keep its formatting."""

    def __init__(self, client: OpenAIChatClient | None = None, chunk_tokens: Optional[int] = None) -> None:
        self._client = client
        self.chunk_tokens = chunk_tokens or settings.translation_chunk_tokens

    @property
    def client(self) -> OpenAIChatClient:
        if self._client is None:
            self._client = OpenAIChatClient()
        return self._client

    def translate(
        self,
        markup: str,
        source_language: str,
        target_language: str,
        preserve_formatting: bool = True,
        custom_prompt: Optional[str] = None,
    ) -> str:
        if not markup.strip():
            raise TranslationError("Nothing to translate: the document markup is empty")
        source = language_name(source_language)
        target = language_name(target_language)
        system_prompt = build_system_prompt(source, target, preserve_formatting, custom_prompt)
        history = build_history(source, target, preserve_formatting)

        encoding = get_cl100k_encoding("splitting markup for translation")
        chunks = split_markup(markup, self.chunk_tokens, encoding)
        logger.info("Translating %s chunk(s) from %s to %s", len(chunks), source, target)

        translated: List[str] = []
        for position, chunk in enumerate(chunks, start=1):
            try:
                output = self.client.complete(system_prompt, build_user_prompt(chunk), history=history)
            except Exception as exc:
                raise TranslationError(f"Translation request failed: {exc}") from exc
            output = strip_code_fence(output).strip()
            if not output:
                raise TranslationError(f"Model returned an empty translation for chunk {position}")
            logger.debug("Chunk %s/%s: %s -> %s characters", position, len(chunks), len(chunk), len(output))
            translated.append(output)
        return "\n\n".join(translated) + "\n"
