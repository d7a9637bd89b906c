# services/gemini.py
import logging

import httpx

from google import genai
from google.genai import types, errors as gerrors

from config import settings

_LOG = logging.getLogger(__name__)


class GenerationError(RuntimeError):
    """Gemini could not produce usable text."""


# ───────────── Client (lazy, keyed by API key) ─────────────
_client: genai.Client | None = None
_client_key: str | None = None


def _get_client() -> genai.Client:
    global _client, _client_key
    key = settings.gemini_api_key
    if not key:
        raise GenerationError("GEMINI_API_KEY not set in environment")
    if _client is None or _client_key != key:
        _client = genai.Client(api_key=key)
        _client_key = key
    return _client


# ───────────── Generation (async) ─────────────
async def generate(
    prompt: str,
    *,
    system: str | None = None,
    image: bytes | None = None,
    mime_type: str = "image/jpeg",
    temperature: float = 0.7,
    max_output_tokens: int = 2000,
) -> str:
    """Run a chat completion (optionally with one image) and return its text."""
    contents: list = [prompt]
    if image is not None:
        contents.append(types.Part.from_bytes(data=image, mime_type=mime_type))

    client = _get_client()
    try:
        resp = await client.aio.models.generate_content(
            model=settings.gemini_model,
            contents=contents,
            config=types.GenerateContentConfig(
                system_instruction=system,
                temperature=temperature,
                max_output_tokens=max_output_tokens,
            ),
        )
    except (gerrors.APIError, httpx.HTTPError) as e:
        _LOG.warning("Gemini generation failed: %s", e)
        raise GenerationError(str(e)) from e

    # take the first candidate’s text
    try:
        text = resp.candidates[0].content.parts[0].text
    except (AttributeError, IndexError, TypeError) as e:
        raise GenerationError("Gemini returned no candidates") from e
    if not text:
        raise GenerationError("Gemini returned empty text")
    return text
