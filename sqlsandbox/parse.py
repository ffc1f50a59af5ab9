# sqlsandbox/parse.py
import json
import logging
import re

from .errors import MalformedUpstreamResponse
from .models import SynthesisResult

logger = logging.getLogger(__name__)

_OPEN_FENCE = re.compile(r"^```[a-z]*\n?", re.IGNORECASE)
_CLOSE_FENCE = re.compile(r"\n?```$")


def strip_code_fences(s: str) -> str:
    s = s.strip()
    if s.startswith("```"):
        s = _OPEN_FENCE.sub("", s, count=1)
        s = _CLOSE_FENCE.sub("", s, count=1)
    return s.strip()


def parse_artifacts(text: str) -> SynthesisResult:
    """
    Turns the model's reply into the three SQL artifacts.
    Field values are passed through untouched; a missing key comes back as None.
    """
    cleaned = strip_code_fences(text)
    try:
        data = json.loads(cleaned)
    except json.JSONDecodeError as e:
        logger.error("Failed to parse LLM response as JSON: %s", text)
        raise MalformedUpstreamResponse(
            "Failed to parse LLM response. It might not be valid JSON."
        ) from e

    if not isinstance(data, dict):
        logger.error("LLM response is JSON but not an object: %s", text)
        raise MalformedUpstreamResponse(
            "Failed to parse LLM response. Expected a JSON object."
        )

    logger.info("Successfully parsed LLM response.")
    return SynthesisResult(
        query=data.get("query"),
        table_definition=data.get("tableDefinition"),
        seed_statements=data.get("seedStatements"),
    )
