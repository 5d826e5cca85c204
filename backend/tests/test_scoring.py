import json

import pytest

from app.models.database import Answer
from app.services.scoring import (
    EvaluationOk,
    default_evaluation,
    default_summary,
    interview_score,
    normalize_scores,
    parse_evaluation,
    parse_summary,
    rating_for_score,
    round_half_up,
)


def test_normalize_clamps_and_recomputes_overall():
    scores = normalize_scores(12, -3, 7)
    assert (scores.technical, scores.communication, scores.depth) == (10, 0, 7)
    assert scores.overall == 61

@pytest.mark.parametrize("triple", [
    (-100, -100, -100),
    (100, 100, 100),
    (3.3, 7.7, 10.0),
    (0, 10, 5),
    (float("inf"), float("-inf"), 4.5),
])
def test_normalized_scores_stay_in_range(triple):
    scores = normalize_scores(*triple)
    assert all(0 <= s <= 10 for s in scores[:3])
    assert 0 <= scores.overall <= 100

def test_weights_favour_technical_accuracy():
    assert normalize_scores(10, 0, 0).overall == 40
    assert normalize_scores(0, 10, 0).overall == 30
    assert normalize_scores(0, 0, 10).overall == 30

def test_round_half_up():
    assert round_half_up(62.5) == 63
    assert round_half_up(0.5) == 1
    assert round_half_up(61.4) == 61

def test_default_evaluation_is_a_fresh_value():
    first = default_evaluation()
    second = default_evaluation()
    assert first is not second
    first.strengths.append("changed")
    assert second.strengths == ["Attempted to answer the question"]
    assert (second.technical_score, second.overall_score) == (5, 50)

def test_parse_evaluation_ignores_ai_overall_score():
    raw = json.dumps({
        "technicalScore": 8,
        "communicationScore": 7,
        "depthScore": 6,
        "overallScore": 100,
        "strengths": ["Clear", None, ""],
        "weaknesses": "not a list",
        "idealAnswer": "  Use an example.  ",
        "encouragement": "Nice",
    })
    result = parse_evaluation(raw)
    assert isinstance(result, EvaluationOk)
    evaluation = result.evaluation
    assert evaluation.overall_score == 71
    assert evaluation.strengths == ["Clear"]
    assert evaluation.weaknesses == []
    assert evaluation.ideal_answer == "Use an example."
    assert evaluation.follow_up_tip is None

def test_parse_evaluation_rejects_invalid_json():
    result = parse_evaluation("{not json")
    assert result.kind == "parse_error"
    assert parse_evaluation(None).kind == "parse_error"

@pytest.mark.parametrize("payload", [
    [1, 2, 3],
    {"technicalScore": 8, "communicationScore": 7},
    {"technicalScore": 8, "communicationScore": "7", "depthScore": 6},
    {"technicalScore": True, "communicationScore": 7, "depthScore": 6},
])
def test_parse_evaluation_rejects_wrong_shape(payload):
    result = parse_evaluation(json.dumps(payload))
    assert result.kind == "shape_error"

def test_interview_score_counts_unanswered_questions_as_zero():
    answers = [Answer(technical_score=10, communication_score=10, depth_score=10)]
    assert interview_score(answers, total_questions=2) == 50
    assert interview_score(answers, total_questions=1) == 100
    assert interview_score([], total_questions=0) == 0

@pytest.mark.parametrize("score,rating", [
    (95, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (61, "Above Average"),
    (50, "Average"),
    (40, "Below Average"),
    (39, "Needs Improvement"),
])
def test_rating_bands(score, rating):
    assert rating_for_score(score) == rating

def test_default_summary_mentions_unanswered_questions():
    summary = default_summary(score=45, answered_count=3, total_questions=5)
    assert summary.rating == "Below Average"
    assert "2 unanswered question(s)" in summary.performance_summary
    assert summary.weaknesses[0] == "2 question(s) left unanswered"
    assert summary.readiness_level == "Not Ready"

def test_parse_summary_overrides_ai_score_and_rating():
    raw = json.dumps({"overallScore": 10, "rating": "Poor", "strengths": ["Calm"],
                      "readinessLevel": "Ready"})
    summary = parse_summary(raw, score=82)
    assert summary.overall_score == 82
    assert summary.rating == "Very Good"
    assert summary.strengths == ["Calm"]
    assert summary.readiness_level == "Ready"
    assert parse_summary("[]", score=82) is None
