from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from decisionsherlock.schemas import AnalysisResult, Criterion, OptionAnalysis

logger = logging.getLogger(__name__)


def mean_score(option: OptionAnalysis) -> float:
    scores = [ca.score for ca in option.criteria_analysis]
    if not scores:
        return 0.0
    return sum(scores) / len(scores)


def weighted_score(option: OptionAnalysis, criteria: Iterable[Criterion]) -> float:
    """
    Weight-averaged score over criteria the option was scored on.
    Unknown criterion ids count with weight 1. Display only.
    """
    weights: Dict[str, int] = {c.id: c.weight for c in criteria}
    total = 0.0
    weight_sum = 0
    for ca in option.criteria_analysis:
        w = max(0, weights.get(ca.criteria_id, 1))
        total += ca.score * w
        weight_sum += w
    if weight_sum == 0:
        return 0.0
    return total / weight_sum


def infer_winner(result: AnalysisResult) -> AnalysisResult:
    """
    Fill an empty winner_id with the option having the highest unweighted mean
    (first one wins a tie). Needs at least two options to compare.

    Criterion weights are intentionally not consulted here.
    """
    if result.winner_id or len(result.analysis) <= 1:
        return result

    best: Optional[OptionAnalysis] = None
    best_mean = 0.0
    for option in result.analysis:
        avg = mean_score(option)
        if best is None or avg > best_mean:
            best, best_mean = option, avg

    if best is not None:
        logger.info("No winnerId returned; inferred %s (mean score %.1f)", best.option_id, best_mean)
        result.winner_id = best.option_id
    return result
