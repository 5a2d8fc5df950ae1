# ==============================
# Result Normalizer Tests
# ==============================
from __future__ import annotations

import math

import pytest

from decisionsherlock.normalize import clamp_score, locate_analysis, normalize_result
from decisionsherlock.utils import parse_lenient_json


@pytest.mark.parametrize(
    "value,expected",
    [
        (-5, 0),
        (150, 100),
        (87.6, 88),
        (87.5, 88),
        (87.4, 87),
        (42, 42),
        ("73", 73),
        ("n/a", 0),
        (None, 0),
        (True, 0),
        ({"x": 1}, 0),
        (math.nan, 0),
        (math.inf, 100),
        (10**400, 100),
        (-(10**400), 0),
    ],
)
def test_clamp_score(value, expected) -> None:
    assert clamp_score(value) == expected


def test_well_formed_result_round_trips() -> None:
    parsed = {
        "analysis": [
            {
                "optionId": "o1",
                "criteriaAnalysis": [
                    {"criteriaId": "c1", "score": 80, "reasoning": "cheap", "confidence": 70},
                    {"criteriaId": "c2", "score": 60, "reasoning": "far"},
                ],
                "pros": ["cheap"],
                "cons": ["far"],
            },
            {
                "optionId": "o2",
                "criteriaAnalysis": [{"criteriaId": "c1", "score": 55, "reasoning": "pricey"}],
                "pros": [],
                "cons": ["pricey"],
            },
        ],
        "verdict": "o1 wins",
        "winnerId": "o1",
        "recommendation": "Sign for o1",
    }
    result = normalize_result(parsed)
    assert result.option_ids() == ["o1", "o2"]
    assert [ca.score for ca in result.get("o1").criteria_analysis] == [80, 60]
    assert result.get("o1").criteria_analysis[0].confidence == 70
    assert result.get("o1").criteria_analysis[1].confidence is None
    assert result.winner_id == "o1"
    assert result.model_dump(by_alias=True, exclude_none=True)["analysis"][1] == parsed["analysis"][1]


def test_field_name_variants() -> None:
    parsed = {
        "analysis": [
            {
                "option_id": "o1",
                "criteria": [{"criterionId": "c1", "value": "91.2", "reason": "ok"}],
                "positives": ["a", 2],
                "negatives": None,
            }
        ],
        "summary": "short",
        "winner": "o1",
        "advice": "do it",
        "risks": ["rates rise"],
        "actions": ["call landlord"],
    }
    result = normalize_result(parsed)
    opt = result.analysis[0]
    assert opt.option_id == "o1"
    assert opt.criteria_analysis[0].criteria_id == "c1"
    assert opt.criteria_analysis[0].score == 91
    assert opt.criteria_analysis[0].reasoning == "ok"
    assert opt.pros == ["a", "2"]
    assert opt.cons == []
    assert result.verdict == "short"
    assert result.summary == "short"
    assert result.recommendation == "do it"
    assert result.top_risks == ["rates rise"]
    assert result.next_steps == ["call landlord"]


def test_missing_fields_default() -> None:
    result = normalize_result({"analysis": [{"criteriaAnalysis": "not a list"}]})
    opt = result.analysis[0]
    assert opt.option_id == "unknown"
    assert opt.criteria_analysis == []
    assert result.verdict == "" and result.winner_id == "" and result.recommendation == ""
    assert result.top_risks is None


def test_bare_number_entry_is_score() -> None:
    result = normalize_result({"analysis": [{"optionId": "o1", "criteriaAnalysis": [140]}]})
    assert result.analysis[0].criteria_analysis[0].score == 100


def test_single_object_analysis_is_wrapped() -> None:
    parsed = {
        "analysis": {"optionId": "o1", "criteriaAnalysis": [{"criteriaId": "c1", "score": 50}]},
        "verdict": "only one",
    }
    result = normalize_result(parsed)
    assert result.option_ids() == ["o1"]
    assert result.verdict == "only one"


def test_root_record_is_wrapped() -> None:
    assert len(locate_analysis({"optionId": "o1", "criteriaAnalysis": []})) == 1


@pytest.mark.parametrize("parsed", [None, 42, "text", {"analysis": "nope"}, {"analysis": {"foo": 1}}])
def test_implausible_shapes_give_empty_analysis(parsed) -> None:
    result = normalize_result(parsed)
    assert result.analysis == []


def test_top_level_list_is_the_analysis() -> None:
    result = normalize_result([{"optionId": "o1"}, {"optionId": "o2"}])
    assert result.option_ids() == ["o1", "o2"]


def test_unknown_winner_is_cleared() -> None:
    result = normalize_result({"analysis": [{"optionId": "o1", "criteriaAnalysis": []}], "winnerId": "o9"})
    assert result.winner_id == ""


def test_scores_always_in_range() -> None:
    parsed = {
        "analysis": [
            {"optionId": "o1", "criteriaAnalysis": [{"score": s, "confidence": s} for s in (-1, 1e9, "x", 12.5)]}
        ]
    }
    for ca in normalize_result(parsed).analysis[0].criteria_analysis:
        assert 0 <= ca.score <= 100
        assert 0 <= ca.confidence <= 100


def test_huge_json_integer_score_is_clamped() -> None:
    parsed = parse_lenient_json(
        '{"analysis":[{"optionId":"o1","criteriaAnalysis":[{"criteriaId":"c1","score":1' + "0" * 400 + "}]}]}"
    )
    assert normalize_result(parsed).analysis[0].criteria_analysis[0].score == 100
