import pytest

from doctranslate.errors import TranslationError
from doctranslate.llm.prompts import build_history, build_system_prompt
from doctranslate.llm.translator import MarkupTranslator, split_markup, strip_code_fence


class FakeClient:
    def __init__(self, reply=None, error=None):
        self.reply = reply
        self.error = error
        self.calls = []

    def complete(self, system_prompt, user_prompt, history=()):
        self.calls.append({"system": system_prompt, "user": user_prompt, "history": list(history)})
        if self.error:
            raise self.error
        if self.reply is not None:
            return self.reply
        return user_prompt.split("\n\n", 1)[1].upper()


@pytest.fixture(autouse=True)
def offline_tokenizer(monkeypatch):
    monkeypatch.setattr("doctranslate.llm.translator.get_cl100k_encoding", lambda context: None)


def test_strip_code_fence():
    assert strip_code_fence("```markdown\n# Hola\n\nMundo\n```") == "# Hola\n\nMundo"
    assert strip_code_fence("# Hola") == "# Hola"


def test_split_markup_respects_token_limit():
    markup = "one two three\n\nfour five\n\nsix"
    assert split_markup(markup, 5, None) == ["one two three\n\nfour five", "six"]
    assert split_markup(markup, 2, None) == ["one two three", "four five", "six"]


def test_translate_joins_chunks():
    client = FakeClient()
    translator = MarkupTranslator(client=client, chunk_tokens=3)
    result = translator.translate("# title\n\nbody text here", "en", "es")
    assert result == "# TITLE\n\nBODY TEXT HERE\n"
    assert len(client.calls) == 2


def test_prompts_use_language_names_and_examples():
    client = FakeClient(reply="hola")
    MarkupTranslator(client=client).translate("hello", "en", "es", custom_prompt="Use formal {targetLanguage}.")
    call = client.calls[0]
    assert "from English to Spanish" in call["system"]
    assert "Use formal Spanish." in call["system"]
    assert "'**text**'" in call["system"]
    assert call["history"][0]["role"] == "assistant"


def test_no_formatting_drops_examples():
    system = build_system_prompt("English", "French", preserve_formatting=False)
    assert "Markdown" not in system
    assert build_history("English", "French", preserve_formatting=False) == []


def test_empty_input_and_output_raise():
    translator = MarkupTranslator(client=FakeClient(reply="   "))
    with pytest.raises(TranslationError):
        translator.translate("  \n", "en", "es")
    with pytest.raises(TranslationError):
        translator.translate("hello", "en", "es")


def test_client_failure_becomes_translation_error():
    translator = MarkupTranslator(client=FakeClient(error=RuntimeError("rate limited")))
    with pytest.raises(TranslationError, match="rate limited"):
        translator.translate("hello", "en", "es")
