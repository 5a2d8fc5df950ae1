import json
import logging
import re
from typing import Any, Optional

from decisionsherlock.errors import InvalidJson, NoJsonFound, preview
from decisionsherlock.prompts import RESULT_MARKER

logger = logging.getLogger(__name__)

# greedy: first "{" to last "}"
_BRACE_BLOCK_RE = re.compile(r"\{.*\}", re.DOTALL)
_LEADING_FENCE_RE = re.compile(r"^```[\w+-]*\s*")
_TRAILING_FENCE_RE = re.compile(r"\s*```\s*$")
_TRAILING_COMMA_RE = re.compile(r",\s*([}\]])")


def first_brace_block(text: str) -> Optional[str]:
    """
    Best-effort: the span from the first "{" to the last "}".
    Shared by the marker fallback and the last parse tier.
    """
    if not text:
        return None
    m = _BRACE_BLOCK_RE.search(text)
    return m.group(0) if m else None


def strip_fences(text: str) -> str:
    s = _LEADING_FENCE_RE.sub("", text.strip())
    s = _TRAILING_FENCE_RE.sub("", s)
    return s.strip()


def extract_json_candidate(raw_text: str, marker: str = RESULT_MARKER) -> str:
    pos = raw_text.find(marker) if raw_text else -1
    if pos != -1:
        candidate: Optional[str] = strip_fences(raw_text[pos + len(marker):])
    else:
        logger.warning("Result marker %s missing; falling back to first JSON object", marker)
        candidate = first_brace_block(raw_text)

    if not candidate:
        logger.error("Could not find JSON block in model output. Raw output: %s", preview(raw_text))
        raise NoJsonFound(raw_text or "")
    return candidate


def remove_trailing_commas(text: str) -> str:
    return _TRAILING_COMMA_RE.sub(r"\1", text)


def parse_lenient_json(candidate: str) -> Any:
    """
    Strict parse, then without trailing commas, then the first {...} block
    of the comma-cleaned text. Raises InvalidJson when all three fail.
    """
    try:
        return json.loads(candidate)
    except json.JSONDecodeError:
        pass

    cleaned = remove_trailing_commas(candidate)
    try:
        data = json.loads(cleaned)
        logger.warning("Parsed model JSON after removing trailing commas")
        return data
    except json.JSONDecodeError:
        pass

    block = first_brace_block(cleaned)
    if block:
        try:
            data = json.loads(block)
            logger.warning("Parsed model JSON from isolated brace block")
            return data
        except json.JSONDecodeError:
            pass

    logger.error("Failed to parse JSON candidate: %s", preview(candidate))
    raise InvalidJson(candidate)
