# ==============================
# End-to-end Pipeline Tests (fake model)
# ==============================
from __future__ import annotations

import json
from types import SimpleNamespace

import pytest

from decisionsherlock.errors import InvalidJson, ModelInvocationFailure, NoJsonFound
from decisionsherlock.pipeline import analyze_decision

SCENARIO = (
    "###RESULT_JSON###\n"
    '{"analysis":[{"optionId":"o1","criteriaAnalysis":[{"criteriaId":"c1","score":150,"reasoning":"x"}],'
    '"pros":[],"cons":[]}],"verdict":"v","winnerId":"o1","recommendation":"r"}'
)


def test_scenario_score_is_clamped(fake_llm, decision_spec) -> None:
    llm = fake_llm(response=SimpleNamespace(output_text=SCENARIO))
    result = analyze_decision(decision_spec, llm=llm, model="test-model")

    assert result.option_ids() == ["o1"]
    assert result.analysis[0].criteria_analysis[0].score == 100
    assert result.verdict == "v"
    assert result.winner_id == "o1"
    assert result.recommendation == "r"

    assert len(llm.requests) == 1
    assert llm.requests[0].model == "test-model"


def test_winner_inferred_when_missing(fake_llm, decision_spec) -> None:
    payload = {
        "analysis": [
            {"optionId": "o1", "criteriaAnalysis": [{"criteriaId": "c1", "score": 72}]},
            {"optionId": "o2", "criteriaAnalysis": [{"criteriaId": "c1", "score": 90}]},
        ],
        "verdict": "close call",
    }
    text = "Thinking done.\n###RESULT_JSON###\n```json\n" + json.dumps(payload) + "\n```"
    result = analyze_decision(decision_spec, llm=fake_llm(response={"text": text}))
    assert result.winner_id == "o2"


def test_model_failure_is_wrapped_and_not_retried(fake_llm, decision_spec) -> None:
    llm = fake_llm(error=ConnectionError("boom"))
    with pytest.raises(ModelInvocationFailure) as exc:
        analyze_decision(decision_spec, llm=llm)
    assert isinstance(exc.value.__cause__, ConnectionError)
    assert len(llm.requests) == 1


def test_no_json_is_fatal(fake_llm, decision_spec) -> None:
    with pytest.raises(NoJsonFound):
        analyze_decision(decision_spec, llm=fake_llm(response={"text": "No idea."}))


def test_invalid_json_is_fatal(fake_llm, decision_spec) -> None:
    with pytest.raises(InvalidJson):
        analyze_decision(decision_spec, llm=fake_llm(response={"text": "###RESULT_JSON### {not: json"}))


def test_progress_reaches_done(fake_llm, decision_spec) -> None:
    seen = []
    analyze_decision(
        decision_spec,
        llm=fake_llm(response={"text": SCENARIO}),
        progress=lambda stage, pct: seen.append((stage, pct)),
    )
    assert seen[-1] == ("Done", 100)
    assert [p for _, p in seen] == sorted(p for _, p in seen)


def test_unknown_winner_is_cleared_then_inferred(fake_llm, decision_spec) -> None:
    payload = {
        "analysis": [
            {"optionId": "o1", "criteriaAnalysis": [{"criteriaId": "c1", "score": 40}]},
            {"optionId": "o2", "criteriaAnalysis": [{"criteriaId": "c1", "score": 85}]},
        ],
        "winnerId": "Apartment B",
    }
    text = "###RESULT_JSON###\n" + json.dumps(payload)
    result = analyze_decision(decision_spec, llm=fake_llm(response={"text": text}))
    assert result.winner_id == "o2"


def test_generation_parameters_are_keyword_only(fake_llm, decision_spec) -> None:
    with pytest.raises(TypeError):
        analyze_decision(decision_spec, fake_llm(response={"text": SCENARIO}), "test-model")
