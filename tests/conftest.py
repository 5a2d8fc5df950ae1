# ==============================
# Testing Fixtures
# ==============================
from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Callable, List

import pytest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT / "src"))
sys.path.insert(0, str(ROOT))

from decisionsherlock.schemas import Attachment, Criterion, DecisionSpec, ModelRequest, Option


class FakeLLM:
    """Deterministic stand-in for the model invoker; records every request."""

    def __init__(self, response: Any = None, error: Exception | None = None) -> None:
        self.response = response
        self.error = error
        self.requests: List[ModelRequest] = []

    def generate(self, request: ModelRequest) -> Any:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def fake_llm() -> Callable[..., FakeLLM]:
    return FakeLLM


@pytest.fixture
def decision_spec() -> DecisionSpec:
    return DecisionSpec(
        title="Apartment A vs Apartment B",
        description="Pick a rental for the next two years.",
        criteria=[
            Criterion(id="c1", name="Rent", weight=9),
            Criterion(id="c2", name="Location", weight=6),
        ],
        options=[
            Option(
                id="o1",
                name="Apartment A",
                description="Downtown, small",
                attachments=[
                    Attachment(id="a1", name="floorplan.png", mime_type="image/png", data="iVBORw0KGgo="),
                ],
            ),
            Option(id="o2", name="Apartment B", description="Suburbs, large"),
        ],
    )
