"""Thin wrapper around the OpenAI Responses API."""

from __future__ import annotations

from typing import Dict, List, Optional, Sequence

from openai import OpenAI

from doctranslate.config import settings


class OpenAIChatClient:
    """Lazily initializes the OpenAI Python SDK."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        model: Optional[str] = None,
    ) -> None:
        api_key = api_key or settings.openai_api_key
        if not api_key:
            raise ValueError("OPENAI_API_KEY is not configured in the environment.")
        self.model = model or settings.openai_model_chat
        self.client = OpenAI(api_key=api_key, base_url=base_url or settings.openai_base_url)

    def complete(
        self,
        system_prompt: str,
        user_prompt: str,
        history: Sequence[Dict[str, str]] = (),
        temperature: Optional[float] = None,
        max_output_tokens: Optional[int] = None,
    ) -> str:
        """Run one completion; ``history`` turns sit between system and user."""
        messages: List[Dict[str, str]] = [{"role": "system", "content": system_prompt}]
        messages.extend(history)
        messages.append({"role": "user", "content": user_prompt})
        response = self.client.responses.create(
            model=self.model,
            temperature=settings.translation_temperature if temperature is None else temperature,
            max_output_tokens=max_output_tokens or settings.translation_max_output_tokens,
            input=messages,
        )
        return self._extract_text(response)

    @staticmethod
    def _extract_text(response) -> str:
        chunks: list[str] = []
        for item in response.output or []:
            for content in getattr(item, "content", None) or []:
                content_type = getattr(content, "type", None)
                content_text = getattr(content, "text", None)
                if isinstance(content, dict):
                    content_type = content.get("type", content_type)
                    content_text = content.get("text", content_text)
                if content_type in {"output_text", "text"} and content_text:
                    chunks.append(str(content_text))
        return "\n".join(part.strip() for part in chunks if part).strip()
