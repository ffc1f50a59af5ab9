# sqlsandbox/llm.py

import logging

import httpx
from .config import settings
from .errors import UpstreamError

logger = logging.getLogger(__name__)


async def _gemini(client: httpx.AsyncClient, prompt: str) -> str:
    if not settings.gemini_api_key:
        raise UpstreamError("GEMINI_API_KEY is not set.")
    url = f"{settings.gemini_url}/models/{settings.gemini_model}:generateContent"
    resp = await client.post(
        url,
        headers={"x-goog-api-key": settings.gemini_api_key},
        json={"contents": [{"parts": [{"text": prompt}]}]},
    )
    resp.raise_for_status()
    data = resp.json()
    candidates = data.get("candidates") if isinstance(data, dict) else None
    if not candidates or not isinstance(candidates, list):
        raise UpstreamError("Gemini returned no candidates.")
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        raise UpstreamError("Gemini returned a candidate without text.")
    return "".join(
        p["text"] for p in parts if isinstance(p, dict) and isinstance(p.get("text"), str)
    )


async def _ollama(client: httpx.AsyncClient, prompt: str) -> str:
    url = f"{settings.ollama_url}/api/generate"
    resp = await client.post(
        url,
        json={"model": settings.ollama_model, "prompt": prompt, "stream": False},
    )
    resp.raise_for_status()
    data = resp.json()
    text = data.get("response") if isinstance(data, dict) else None
    if not isinstance(text, str):
        raise UpstreamError("Ollama returned no response text.")
    return text


PROVIDERS = {"gemini": _gemini, "ollama": _ollama}


async def generate_text(prompt: str, transport: httpx.AsyncBaseTransport | None = None) -> str:
    """
    Sends the prompt to the configured LLM and returns its raw text reply.
    Any failure along the way surfaces as UpstreamError; nothing is retried.
    """
    provider = PROVIDERS.get(settings.llm_provider)
    if provider is None:
        raise UpstreamError(f"Unknown LLM provider: {settings.llm_provider}")

    logger.info("Sending prompt to %s...", settings.llm_provider)
    try:
        async with httpx.AsyncClient(timeout=settings.llm_timeout, transport=transport) as client:
            text = await provider(client, prompt)
    except httpx.HTTPError as e:
        logger.error("Error calling %s: %s", settings.llm_provider, e)
        raise UpstreamError("Failed to generate SQL. Please try again.") from e
    except ValueError as e:
        # body was not JSON
        logger.error("Unreadable reply from %s: %s", settings.llm_provider, e)
        raise UpstreamError("Failed to generate SQL. Please try again.") from e

    if not text.strip():
        raise UpstreamError(f"{settings.llm_provider} returned an empty response.")
    logger.info("Received response from %s.", settings.llm_provider)
    return text
