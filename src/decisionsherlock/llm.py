from __future__ import annotations

import logging
from typing import Any, Dict, List, Protocol

from openai import OpenAI

from decisionsherlock.schemas import ContentPart, ModelRequest

logger = logging.getLogger(__name__)


class ModelInvoker(Protocol):
    def generate(self, request: ModelRequest) -> Any:
        """Send one request, return the provider's raw response object."""
        ...


def _data_url(part: ContentPart) -> str:
    return f"data:{part.mime_type or 'application/octet-stream'};base64,{part.data}"


def _to_input_content(part: ContentPart) -> Dict[str, Any]:
    if not part.is_inline_data:
        return {"type": "input_text", "text": part.text or ""}
    if (part.mime_type or "").startswith("image/"):
        return {"type": "input_image", "image_url": _data_url(part)}
    return {
        "type": "input_file",
        "filename": part.name or "attachment",
        "file_data": _data_url(part),
    }


def to_openai_input(request: ModelRequest) -> List[Dict[str, Any]]:
    items: List[Dict[str, Any]] = []
    for msg in request.messages:
        if msg.role == "system":
            # system instructions are text-only
            text = "\n".join(p.text for p in msg.parts if p.text)
            items.append({"role": "system", "content": text})
        else:
            items.append({"role": msg.role, "content": [_to_input_content(p) for p in msg.parts]})
    return items


class OpenAILLM:
    """
    OpenAI official SDK wrapper.

    generate() returns the untouched Responses API object; turning it into text
    is the extractor's job, since response shapes vary across SDK versions.
    """

    def __init__(self, api_key: str, client: OpenAI | None = None):
        # key comes from config.load_settings(), never from process-wide state here
        self.client = client or OpenAI(api_key=api_key)

    def generate(self, request: ModelRequest) -> Any:
        kwargs: Dict[str, Any] = {
            "model": request.model,
            "input": to_openai_input(request),
        }
        if request.temperature is not None:
            kwargs["temperature"] = request.temperature
        if request.response_mime_type == "text/plain":
            kwargs["text"] = {"format": {"type": "text"}}

        logger.debug(
            "Calling %s with %d message(s), temperature=%s",
            request.model,
            len(request.messages),
            request.temperature,
        )
        return self.client.responses.create(**kwargs)
