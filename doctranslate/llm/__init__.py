"""LLM integration helpers."""

from .openai_client import OpenAIChatClient
from .translator import MarkupTranslator

__all__ = ["MarkupTranslator", "OpenAIChatClient"]
