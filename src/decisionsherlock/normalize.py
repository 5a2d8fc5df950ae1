"""
Project an untyped, loosely shaped parse tree onto AnalysisResult.

Every lookup goes through a field-name fallback table: the first alias whose
value is present and not null wins. Nothing in here raises on odd shapes;
missing or malformed values become defaults.
"""
from __future__ import annotations

import logging
import math
from collections.abc import Mapping
from typing import Any, Dict, List, Optional, Sequence

from decisionsherlock.schemas import AnalysisResult, CriterionScore, OptionAnalysis

logger = logging.getLogger(__name__)

UNKNOWN_OPTION_ID = "unknown"

OPTION_ID_KEYS = ("optionId", "option_id", "opt_id", "id")
CRITERIA_KEYS = ("criteriaAnalysis", "criteria_analysis", "criteria")
CRITERION_ID_KEYS = ("criteriaId", "criteria_id", "criterionId", "id")
SCORE_KEYS = ("score", "sc", "value")
REASONING_KEYS = ("reasoning", "reason", "notes")
PROS_KEYS = ("pros", "positives")
CONS_KEYS = ("cons", "negatives")
VERDICT_KEYS = ("verdict", "summary", "verdict_text")
WINNER_KEYS = ("winnerId", "winner_id", "winner")
RECOMMENDATION_KEYS = ("recommendation", "advice")
SUMMARY_KEYS = ("summary",)
TOP_RISKS_KEYS = ("topRisks", "top_risks", "risks")
NEXT_STEPS_KEYS = ("nextSteps", "next_steps", "actions")


def pick(obj: Any, keys: Sequence[str], default: Any = None) -> Any:
    if not isinstance(obj, Mapping):
        return default
    for k in keys:
        val = obj.get(k)
        if val is not None:
            return val
    return default


def pick_list(obj: Any, keys: Sequence[str]) -> Optional[List[Any]]:
    """First alias whose value is a list."""
    if not isinstance(obj, Mapping):
        return None
    for k in keys:
        val = obj.get(k)
        if isinstance(val, list):
            return val
    return None


def pick_str(obj: Any, keys: Sequence[str], default: str = "") -> str:
    val = pick(obj, keys)
    return default if val is None else str(val)


def clamp_score(value: Any) -> int:
    """Clamp to [0, 100] and round half up; anything non-numeric is 0."""
    if isinstance(value, bool) or value is None:
        return 0
    if isinstance(value, str):
        try:
            value = float(value.strip())
        except ValueError:
            return 0
    if isinstance(value, int):
        # exact path; huge JSON integers overflow float()
        return 0 if value < 0 else min(value, 100)
    if not isinstance(value, float):
        return 0
    v = value
    if math.isnan(v) or v < 0:
        return 0
    if v > 100:
        return 100
    return int(math.floor(v + 0.5))


def _string_list(values: Optional[List[Any]]) -> List[str]:
    return [str(x) for x in values or []]


def normalize_criterion(entry: Any) -> CriterionScore:
    if not isinstance(entry, Mapping):
        # a bare number stands for the score itself
        return CriterionScore(criteria_id="", score=clamp_score(entry))

    confidence = entry.get("confidence")
    return CriterionScore(
        criteria_id=pick_str(entry, CRITERION_ID_KEYS),
        score=clamp_score(pick(entry, SCORE_KEYS)),
        reasoning=pick_str(entry, REASONING_KEYS),
        confidence=None if confidence is None else clamp_score(confidence),
    )


def normalize_option(record: Any) -> OptionAnalysis:
    if not isinstance(record, Mapping):
        record = {}

    raw_criteria = pick(record, CRITERIA_KEYS, [])
    if not isinstance(raw_criteria, list):
        raw_criteria = []

    return OptionAnalysis(
        option_id=pick_str(record, OPTION_ID_KEYS, UNKNOWN_OPTION_ID),
        criteria_analysis=[normalize_criterion(ca) for ca in raw_criteria],
        pros=_string_list(pick_list(record, PROS_KEYS)),
        cons=_string_list(pick_list(record, CONS_KEYS)),
    )


def looks_like_option_record(obj: Any) -> bool:
    return pick(obj, OPTION_ID_KEYS) is not None and pick(obj, CRITERIA_KEYS) is not None


def locate_analysis(parsed: Any) -> List[Any]:
    candidate = parsed
    if isinstance(parsed, Mapping) and parsed.get("analysis") is not None:
        candidate = parsed["analysis"]

    if isinstance(candidate, list):
        return candidate
    if isinstance(candidate, Mapping):
        nested = candidate.get("analysis")
        if isinstance(nested, list):
            return nested
        if looks_like_option_record(candidate):
            return [candidate]
    if candidate:
        logger.warning("Parsed result.analysis is not an array; normalizing to an empty array")
    return []


def normalize_result(parsed: Any) -> AnalysisResult:
    top: Dict[str, Any] = dict(parsed) if isinstance(parsed, Mapping) else {}

    analysis = [normalize_option(rec) for rec in locate_analysis(parsed)]

    winner_id = pick_str(top, WINNER_KEYS)
    if winner_id and winner_id not in {a.option_id for a in analysis}:
        logger.warning("winnerId %r matches no analysed option; clearing it", winner_id)
        winner_id = ""

    top_risks = pick_list(top, TOP_RISKS_KEYS)
    next_steps = pick_list(top, NEXT_STEPS_KEYS)
    summary = pick(top, SUMMARY_KEYS)

    return AnalysisResult(
        analysis=analysis,
        verdict=pick_str(top, VERDICT_KEYS),
        winner_id=winner_id,
        recommendation=pick_str(top, RECOMMENDATION_KEYS),
        summary=None if summary is None else str(summary),
        top_risks=None if top_risks is None else _string_list(top_risks),
        next_steps=None if next_steps is None else _string_list(next_steps),
    )
