"""Answer scoring: sub-score normalization, AI payload validation and
interview-level scoring.

Everything in here is pure. The AI is never trusted with arithmetic, so the
overall score of an answer and the total score of an interview are always
recomputed from the sub-scores.
"""
import json
import math
from typing import Any, Iterable, List, Literal, NamedTuple, Optional, Union

from pydantic import BaseModel

from app.models.schemas import Evaluation, InterviewSummaryData

TECHNICAL_WEIGHT = 0.4
COMMUNICATION_WEIGHT = 0.3
DEPTH_WEIGHT = 0.3

MIN_SUB_SCORE = 0.0
MAX_SUB_SCORE = 10.0

SCORE_FIELDS = ("technicalScore", "communicationScore", "depthScore")

RATING_BANDS = (
    (90, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (60, "Above Average"),
    (50, "Average"),
    (40, "Below Average"),
)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives.

    ``round()`` uses banker's rounding, which would turn 62.5 into 62.
    """
    return int(math.floor(value + 0.5))


class NormalizedScores(NamedTuple):
    technical: float
    communication: float
    depth: float
    overall: int


def clamp_sub_score(value: float) -> float:
    return min(MAX_SUB_SCORE, max(MIN_SUB_SCORE, float(value)))


def weighted_score(technical: float, communication: float, depth: float) -> float:
    """Weighted 0-10 combination of the three sub-scores"""
    return (
        technical * TECHNICAL_WEIGHT
        + communication * COMMUNICATION_WEIGHT
        + depth * DEPTH_WEIGHT
    )


def normalize_scores(technical: float, communication: float, depth: float) -> NormalizedScores:
    """Clamp each sub-score into [0, 10] and derive the 0-100 overall score."""
    technical = clamp_sub_score(technical)
    communication = clamp_sub_score(communication)
    depth = clamp_sub_score(depth)
    overall = round_half_up(weighted_score(technical, communication, depth) * 10)
    return NormalizedScores(technical, communication, depth, overall)


def default_evaluation() -> Evaluation:
    """Fallback evaluation used when the AI call fails or returns garbage.

    Returns a new object on every call so callers may annotate it freely.
    """
    return Evaluation(
        technical_score=5,
        communication_score=5,
        depth_score=5,
        overall_score=50,
        strengths=["Attempted to answer the question"],
        weaknesses=["Could provide more detailed response"],
        ideal_answer=(
            "A comprehensive answer would include specific examples and "
            "technical details relevant to the question."
        ),
        follow_up_tip="Try to provide concrete examples from your experience.",
        encouragement="Good effort! Keep practicing to improve.",
    )


class EvaluationOk(BaseModel):
    kind: Literal["ok"] = "ok"
    evaluation: Evaluation


class EvaluationParseError(BaseModel):
    kind: Literal["parse_error"] = "parse_error"
    detail: str


class EvaluationShapeError(BaseModel):
    kind: Literal["shape_error"] = "shape_error"
    detail: str


EvaluationResult = Union[EvaluationOk, EvaluationParseError, EvaluationShapeError]


def _is_number(value: Any) -> bool:
    # bool is an int subclass but "true" is not a score
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _string_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item is not None and str(item).strip()]


def _text(value: Any, default: str = "") -> str:
    return value.strip() if isinstance(value, str) else default


def parse_evaluation(raw: Optional[str]) -> EvaluationResult:
    """Validate an untrusted AI evaluation payload.

    Any ``overallScore`` the AI proposed is ignored and recomputed.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError) as e:
        return EvaluationParseError(detail=f"Invalid JSON: {e}")

    if not isinstance(payload, dict):
        return EvaluationShapeError(detail="Evaluation must be a JSON object")

    bad_fields = [name for name in SCORE_FIELDS if not _is_number(payload.get(name))]
    if bad_fields:
        return EvaluationShapeError(
            detail=f"Missing or non-numeric score fields: {', '.join(bad_fields)}"
        )

    scores = normalize_scores(
        payload["technicalScore"],
        payload["communicationScore"],
        payload["depthScore"],
    )
    follow_up_tip = _text(payload.get("followUpTip")) or None

    return EvaluationOk(
        evaluation=Evaluation(
            technical_score=scores.technical,
            communication_score=scores.communication,
            depth_score=scores.depth,
            overall_score=scores.overall,
            strengths=_string_list(payload.get("strengths")),
            weaknesses=_string_list(payload.get("weaknesses")),
            ideal_answer=_text(payload.get("idealAnswer")),
            follow_up_tip=follow_up_tip,
            encouragement=_text(payload.get("encouragement")),
        )
    )


def interview_score(answers: Iterable[Any], total_questions: int) -> int:
    """Total score (0-100) of an interview.

    Unanswered questions count as zero, so the weighted answer scores are
    divided by the number of questions asked, not the number answered.
    """
    if total_questions <= 0:
        return 0
    total = sum(
        weighted_score(
            a.technical_score or 0,
            a.communication_score or 0,
            a.depth_score or 0,
        )
        for a in answers
    )
    return round_half_up(total / total_questions * 10)


def rating_for_score(score: int) -> str:
    for threshold, rating in RATING_BANDS:
        if score >= threshold:
            return rating
    return "Needs Improvement"


def default_summary(score: int, answered_count: int, total_questions: int) -> InterviewSummaryData:
    """Fallback interview summary used when the AI summary is unavailable"""
    unanswered = max(0, total_questions - answered_count)
    if unanswered > 0:
        performance_summary = (
            f"You answered {answered_count} out of {total_questions} questions. "
            f"{unanswered} unanswered question(s) were scored as 0."
        )
        weaknesses = [
            f"{unanswered} question(s) left unanswered",
            "Review technical concepts",
            "Practice providing more detailed answers",
        ]
    else:
        performance_summary = (
            "You completed the interview. Review your answers to identify areas for improvement."
        )
        weaknesses = ["Review technical concepts", "Practice providing more detailed answers"]

    return InterviewSummaryData(
        overall_score=score,
        rating=rating_for_score(score),
        performance_summary=performance_summary,
        strengths=["Completed the interview", "Showed willingness to answer"],
        weaknesses=weaknesses,
        recommended_topics=["Interview preparation", "Technical fundamentals", "Communication skills"],
        action_plan="Practice more mock interviews and review common questions for your target role.",
        encouragement="Every interview is a learning opportunity. Keep practicing!",
        readiness_level="Almost Ready" if score >= 70 else "Not Ready",
    )


def parse_summary(raw: Optional[str], score: int) -> Optional[InterviewSummaryData]:
    """Read an AI summary payload, overriding its score and rating.

    Returns None when the payload is not a JSON object.
    """
    try:
        payload = json.loads(raw)
    except (TypeError, ValueError):
        return None
    if not isinstance(payload, dict):
        return None

    return InterviewSummaryData(
        overall_score=score,
        rating=rating_for_score(score),
        performance_summary=_text(payload.get("performanceSummary")),
        strengths=_string_list(payload.get("strengths")),
        weaknesses=_string_list(payload.get("weaknesses")),
        recommended_topics=_string_list(payload.get("recommendedTopics")),
        action_plan=_text(payload.get("actionPlan")),
        encouragement=_text(payload.get("encouragement")),
        readiness_level=_text(payload.get("readinessLevel"), "Not Ready") or "Not Ready",
    )
