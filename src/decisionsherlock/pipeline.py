from __future__ import annotations

import logging
from typing import Callable

from decisionsherlock.config import DEFAULT_MODEL, DEFAULT_TEMPERATURE
from decisionsherlock.errors import ModelInvocationFailure, preview
from decisionsherlock.extract import extract_text
from decisionsherlock.llm import ModelInvoker
from decisionsherlock.normalize import normalize_result
from decisionsherlock.prompts import build_request
from decisionsherlock.schemas import AnalysisResult, DecisionSpec
from decisionsherlock.scoring import infer_winner
from decisionsherlock.utils import extract_json_candidate, parse_lenient_json

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[str, int], None]  # (stage_label, percent_0_100)


def analyze_decision(
    spec: DecisionSpec,
    llm: ModelInvoker,
    *,
    model: str = DEFAULT_MODEL,
    temperature: float | None = DEFAULT_TEMPERATURE,
    progress: ProgressCallback | None = None,
) -> AnalysisResult:
    """
    One model call, then text extraction -> JSON extraction -> lenient parse
    -> normalization -> winner inference.

    Raises ModelInvocationFailure, NoJsonFound or InvalidJson; never returns a
    fabricated result. No retries here.
    """
    def tick(label: str, pct: int) -> None:
        if progress is not None:
            progress(label, max(0, min(100, int(pct))))

    logger.debug(
        "Analyzing %r: %d criteria, %d options",
        spec.title,
        len(spec.criteria),
        len(spec.options),
    )

    tick("Building prompt...", 5)
    request = build_request(spec, model=model, temperature=temperature)

    tick("Waiting for the model...", 15)
    try:
        response = llm.generate(request)
    except Exception as e:
        logger.error("Model API error: %s", e)
        raise ModelInvocationFailure(f"Model call failed: {e}") from e

    tick("Reading model output...", 70)
    raw_text = extract_text(response)
    logger.debug("Raw model output: %s", preview(raw_text))

    tick("Extracting JSON...", 80)
    candidate = extract_json_candidate(raw_text)
    logger.debug("Cleaned JSON: %s", preview(candidate))
    parsed = parse_lenient_json(candidate)

    tick("Normalizing result...", 90)
    result = infer_winner(normalize_result(parsed))

    tick("Done", 100)
    return result
