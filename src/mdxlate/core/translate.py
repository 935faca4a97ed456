"""Translation collaborator: masked text in, translated masked text out, via OpenAI chat completions"""

import logging
from typing import Callable

import openai
from openai import OpenAI

from mdxlate.config import Settings
from mdxlate.core.errors import TranslationError
from mdxlate.core.utils.tokens import HEADER_TOKEN


logger = logging.getLogger(__name__)

MIN_TEXT_LENGTH = 5

Translator = Callable[[str, Settings], str]


def make_client(settings: Settings) -> OpenAI:
    """OpenAI client; OPENAI_API_KEY / OPENAI_BASE_URL are read from the environment."""
    return OpenAI(timeout=settings.timeout, max_retries=settings.max_retries)


def _preview(content: str, width: int = 100) -> str:
    if len(content) <= 2 * width:
        return content
    return f"{content[:width]}------ ... ------{content[-width:]}"


def normalize(source: str, translated: str) -> str:
    """Put the header token back in front if the model dropped it."""
    if HEADER_TOKEN in source and HEADER_TOKEN not in translated:
        logger.warning("Header token missing from translation; re-adding it")
        return f"{HEADER_TOKEN}\n{translated}"
    return translated


def translate(text: str, settings: Settings, client: OpenAI = None) -> str:
    """Translate masked text with the configured model and system prompt.

    Raises TranslationError for API failures and empty responses.
    """
    if len((text or "").strip()) < MIN_TEXT_LENGTH:
        return text

    client = client or make_client(settings)
    request = {
        "model": settings.model,
        "messages": [
            {"role": "system", "content": settings.prompt or ""},
            {"role": "user", "content": text},
        ],
    }
    if settings.temperature is not None:
        request["temperature"] = settings.temperature

    logger.debug("Requesting translation: model=%s chars=%d", settings.model, len(text))
    try:
        completion = client.chat.completions.create(**request)
    except openai.OpenAIError as e:
        raise TranslationError(f"{type(e).__name__}: {e}") from e

    if not completion.choices:
        raise TranslationError("Response contained no choices")
    choice = completion.choices[0]
    content = choice.message.content if choice.message else None
    if not content or not content.strip():
        raise TranslationError(f"Empty response (finish_reason={choice.finish_reason})")

    if choice.finish_reason == "length":
        logger.warning("Model truncated output (finish_reason=length)")
    logger.debug("Translation response: %s", _preview(content))

    return normalize(text, content)


def identity(text: str, settings: Settings) -> str:
    """No-op translator; round-trips the masked text unchanged."""
    return text
