"""
Pull a single text string out of a model response of unknown shape.

Strategies are tried in order; the first one returning a non-empty string
wins. New provider shapes go into STRATEGIES, not into extract_text().
"""
from __future__ import annotations

import asyncio
import inspect
import json
import logging
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Tuple

logger = logging.getLogger(__name__)

_MISSING = object()

Strategy = Callable[[Any], Optional[str]]


def _field(obj: Any, name: str) -> Any:
    """Attribute or mapping-key lookup; _MISSING when neither exists."""
    if obj is None:
        return _MISSING
    if isinstance(obj, Mapping):
        return obj.get(name, _MISSING)
    try:
        return getattr(obj, name, _MISSING)
    except Exception:
        # properties on SDK objects may raise on access
        return _MISSING


def _nonempty_str(val: Any) -> Optional[str]:
    if isinstance(val, str) and val:
        return val
    return None


def _resolve(value: Any) -> Any:
    if not inspect.isawaitable(value):
        return value

    async def _await() -> Any:
        return await value

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_await())

    # inside a running loop: finish the awaitable on a private loop in a worker thread
    with ThreadPoolExecutor(max_workers=1) as pool:
        return pool.submit(asyncio.run, _await()).result()


def text_accessor(response: Any) -> Optional[str]:
    fn = _field(response, "text")
    if fn is _MISSING or not callable(fn):
        return None
    try:
        return _nonempty_str(_resolve(fn()))
    except Exception as e:
        logger.warning("response.text() call failed: %s", e)
        return None


def text_field(response: Any) -> Optional[str]:
    return _nonempty_str(_field(response, "text"))


def output_text_field(response: Any) -> Optional[str]:
    for name in ("output_text", "outputText"):
        val = _nonempty_str(_field(response, name))
        if val:
            return val
    return None


def _content_entry_text(entry: Any) -> Optional[str]:
    if isinstance(entry, str):
        return entry or None
    txt = _nonempty_str(_field(entry, "text"))
    if txt:
        return txt
    payload = _field(entry, "json")
    is_json_block = (
        _field(entry, "mimeType") == "application/json"
        or _field(entry, "mime_type") == "application/json"
        or _field(entry, "type") in ("json", "output_json")
    )
    if is_json_block and payload is not _MISSING and payload:
        try:
            return json.dumps(payload)
        except (TypeError, ValueError):
            return None
    return None


def output_entries(response: Any) -> Optional[str]:
    for name in ("output", "outputs"):
        entries = _field(response, name)
        if not isinstance(entries, (list, tuple)):
            continue
        for out in entries:
            if not out:
                continue
            txt = _nonempty_str(_field(out, "text"))
            if txt:
                return txt
            content = _field(out, "content")
            if isinstance(content, (list, tuple)):
                for entry in content:
                    if not entry:
                        continue
                    txt = _content_entry_text(entry)
                    if txt:
                        return txt
    return None


def serialize_whole(response: Any) -> Optional[str]:
    if response is None:
        return None
    if isinstance(response, str):
        return response or None
    dump = _field(response, "model_dump")
    if callable(dump):
        try:
            return json.dumps(dump(mode="json"))
        except Exception as e:
            logger.debug("model_dump() serialization failed: %s", e)
    try:
        return json.dumps(response, default=_jsonable)
    except (TypeError, ValueError):
        return str(response) or None


def _jsonable(obj: Any) -> Any:
    """json.dumps fallback: plain objects serialize as their fields."""
    if not callable(obj) and hasattr(obj, "__dict__"):
        return vars(obj)
    return str(obj)


STRATEGIES: List[Tuple[str, Strategy]] = [
    ("text_accessor", text_accessor),
    ("text_field", text_field),
    ("output_text_field", output_text_field),
    ("output_entries", output_entries),
    ("serialize_whole", serialize_whole),
]


def extract_text(response: Any) -> str:
    """Never raises; returns "" when nothing can be recovered."""
    for name, strategy in STRATEGIES:
        try:
            txt = strategy(response)
        except Exception as e:
            logger.warning("Text extraction strategy %s failed: %s", name, e)
            continue
        if txt:
            logger.debug("Extracted %d chars via %s", len(txt), name)
            return txt
    return ""
