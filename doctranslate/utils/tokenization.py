"""Helpers for loading tiktoken encodings with operator-controlled fallback."""

from __future__ import annotations

import logging
import sys
from typing import Optional

import tiktoken

from doctranslate.config import settings

logger = logging.getLogger(__name__)


def _should_fallback(context: str, reason: Exception) -> bool:
    message = (
        f"Failed to load tiktoken 'cl100k_base' while {context}. "
        f"Reason: {reason}"
    )
    if settings.allow_tiktoken_fallback:
        logger.warning(
            "%s. Sizing chunks by whitespace word count because ALLOW_TIKTOKEN_FALLBACK=1.",
            message,
        )
        return True

    if sys.stdin is not None and sys.stdin.isatty():
        choice = input(
            f"{message}.\n"
            "Type 'fallback' to size translation chunks by word count, "
            "or press Enter to abort: "
        )
        if choice.strip().lower() in {"fallback", "f", "y", "yes"}:
            logger.warning("Operator approved word-count fallback for %s.", context)
            return True
        raise RuntimeError("Operator rejected tiktoken fallback; aborting translation.")

    raise RuntimeError(
        f"{message}. Rerun with ALLOW_TIKTOKEN_FALLBACK=1 to allow word-count chunking."
    )


def get_cl100k_encoding(context: str) -> Optional[tiktoken.Encoding]:
    """Load the OpenAI tokenizer, or ``None`` when the operator allows the fallback."""
    try:
        return tiktoken.get_encoding("cl100k_base")
    except Exception as exc:
        if _should_fallback(context, exc):
            return None
        raise


def count_tokens(text: str, encoding: Optional[tiktoken.Encoding]) -> int:
    if encoding:
        return len(encoding.encode(text))
    return len(text.split())
