from __future__ import annotations

PREVIEW_CHARS = 2000


def preview(text: str | None, limit: int = PREVIEW_CHARS) -> str:
    """Bounded prefix of diagnostic text, safe to log."""
    if not text:
        return ""
    if len(text) <= limit:
        return text
    return text[:limit] + f"... [{len(text) - limit} more chars]"


class DecisionSherlockError(Exception):
    """Base class for terminal failures of a single analysis attempt."""

    user_message = "Sherlock encountered an error analyzing the evidence."

    def __init__(self, message: str | None = None, *, text: str | None = None):
        super().__init__(message or self.user_message)
        self.text = text

    @property
    def preview(self) -> str:
        return preview(self.text)


class ConfigError(DecisionSherlockError):
    def __init__(self, message: str):
        super().__init__(message)
        self.user_message = message


class ModelInvocationFailure(DecisionSherlockError):
    user_message = "The AI model call failed. Please try again."


class NoJsonFound(DecisionSherlockError):
    user_message = "The model did not return extractable JSON. Please try again."

    def __init__(self, raw_text: str):
        super().__init__(
            "Model output contained neither the result marker nor a JSON object.",
            text=raw_text,
        )

    @property
    def raw_text(self) -> str:
        return self.text or ""


class InvalidJson(DecisionSherlockError):
    user_message = "The AI returned invalid JSON. Please try again."

    def __init__(self, candidate: str):
        super().__init__("JSON candidate could not be parsed after cleaning.", text=candidate)

    @property
    def candidate(self) -> str:
        return self.text or ""
