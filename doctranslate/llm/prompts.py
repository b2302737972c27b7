"""Prompt templates for the translation stage."""

from __future__ import annotations

from typing import Dict, List, Optional, Tuple

SYSTEM_PROMPT = """You are a professional translator specialized in document translation with format preservation.
Your task is to translate documents from {source_language} to {target_language}.

Translation guidelines:
- Provide a faithful translation that maintains the tone and style of the original text.
- Adapt idioms and cultural references so they read naturally in {target_language}.
- Expand or interpret abbreviations that a {target_language} reader would not understand, according to context.
- Maintain all punctuation marks, quotation marks, parentheses and other symbols of the original text."""

FORMATTING_INSTRUCTIONS = """IMPORTANT: This document uses Markdown formatting. You MUST preserve all Markdown syntax in your translation:
- Keep all '#' for headings of any level
- Preserve '**text**' for bold
- Maintain '*text*' for italic
- Keep all list markers ('- ' or '1. ')
- Keep '---' separators and runs of underscores (fill-in blanks) unchanged
- Preserve line breaks and paragraph structure
- Fix broken sentences if there are strange characters or line breaks"""

CUSTOM_INSTRUCTIONS = """Additional Translation Instructions:
{custom_prompt}

Preserve all Markdown formatting in your translation."""

CLOSING_INSTRUCTION = "Respond ONLY with the translated text, maintaining all formatting markers."

TRANSLATION_EXAMPLES: Tuple[Tuple[str, str], ...] = (
    (
        "Please join us for the **community dinner** this Sunday.",
        "Por favor, acompáñenos en la **cena comunitaria** este domingo.",
    ),
    (
        "We all put time and effort into selecting the outfits we wear",
        "Todos ponemos tiempo y esfuerzo en seleccionar las ropas que usamos",
    ),
)


def build_system_prompt(
    source_language: str,
    target_language: str,
    preserve_formatting: bool,
    custom_prompt: Optional[str] = None,
) -> str:
    sections = [SYSTEM_PROMPT.format(source_language=source_language, target_language=target_language)]
    if preserve_formatting:
        sections.append(FORMATTING_INSTRUCTIONS)
    if custom_prompt and custom_prompt.strip():
        # Custom prompts reference the target language as {targetLanguage}.
        custom = custom_prompt.strip().replace("{targetLanguage}", target_language)
        sections.append(CUSTOM_INSTRUCTIONS.format(custom_prompt=custom))
    sections.append(CLOSING_INSTRUCTION)
    return "\n\n".join(sections)


def build_example_turn(source_language: str, target_language: str) -> Dict[str, str]:
    lines = [
        f"I understand. I'll translate the document from {source_language} to {target_language} "
        "while preserving all formatting and following your guidelines. "
        "Here are examples of how I'll handle different elements:",
    ]
    for original, translated in TRANSLATION_EXAMPLES:
        lines.append(f'Original: "{original}"\nTranslation: "{translated}"')
    return {"role": "assistant", "content": "\n\n".join(lines)}


def build_user_prompt(markup: str) -> str:
    return f"Please translate the following document:\n\n{markup}"


def build_history(
    source_language: str, target_language: str, preserve_formatting: bool
) -> List[Dict[str, str]]:
    """Assistant turns placed between the system prompt and the document."""
    if not preserve_formatting:
        return []
    return [build_example_turn(source_language, target_language)]
