"""Analytics over a user's completed interviews and the global leaderboard.

Interviews are expected in creation order (oldest first). Averages do not
care about order; the improvement rate and trend do.
"""
from collections import Counter
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence

from app.models.database import utcnow
from app.models.schemas import (
    AnalyticsOverview,
    AnalyticsResponse,
    INTERVIEW_TYPE_DISPLAY_NAMES,
    LeaderboardEntry,
    LeaderboardResponse,
    ROLE_DISPLAY_NAMES,
    RoleScore,
    ScoreHistoryPoint,
    SkillBreakdown,
    TypeScore,
)
from app.services.scoring import round_half_up

PERIOD_DAYS = {"week": 7, "month": 30}
TREND_WINDOW = 3
TREND_MARGIN = 5
HISTORY_LENGTH = 10
LEADERBOARD_SIZE = 50


def role_label(role: str) -> str:
    return ROLE_DISPLAY_NAMES.get(role, role)


def type_label(interview_type: str) -> str:
    return INTERVIEW_TYPE_DISPLAY_NAMES.get(interview_type, interview_type)


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values) if values else 0.0


def is_scored(interview: Any) -> bool:
    return interview.status == "completed" and interview.total_score is not None


def filter_by_period(interviews: Iterable[Any], period: str = "all",
                     now: Optional[datetime] = None) -> List[Any]:
    """Keep interviews finished (or, if unfinished, started) inside the window"""
    interviews = list(interviews)
    days = PERIOD_DAYS.get(period)
    if days is None:
        return interviews
    cutoff = (now or utcnow()) - timedelta(days=days)
    return [
        i for i in interviews
        if (i.completed_at or i.created_at) is not None
        and (i.completed_at or i.created_at) >= cutoff
    ]


def improvement_rate(scores: Sequence[float]) -> int:
    """Mean of the latest scores minus mean of the earliest ones.

    Both windows hold ``min(3, len(scores) // 2)`` scores so they never
    overlap; fewer than two scores give 0.
    """
    window = min(TREND_WINDOW, len(scores) // 2)
    if window == 0:
        return 0
    return round_half_up(_mean(scores[-window:]) - _mean(scores[:window]))


def classify_trend(rate: int) -> str:
    if rate > TREND_MARGIN:
        return "improving"
    if rate < -TREND_MARGIN:
        return "declining"
    return "stable"


def _group_scores(interviews: Iterable[Any], key) -> Dict[str, List[int]]:
    # Exact string grouping: "Backend" and "backend" stay separate groups
    groups: Dict[str, List[int]] = {}
    for interview in interviews:
        groups.setdefault(key(interview), []).append(interview.total_score)
    return groups


def skill_breakdown(answers: Iterable[Any]) -> SkillBreakdown:
    """Flat mean of each sub-score across every answer row"""
    answers = list(answers)
    if not answers:
        return SkillBreakdown()
    return SkillBreakdown(
        technical=round_half_up(_mean([a.technical_score or 0 for a in answers])),
        communication=round_half_up(_mean([a.communication_score or 0 for a in answers])),
        depth=round_half_up(_mean([a.depth_score or 0 for a in answers])),
    )


def build_analytics(interviews: Iterable[Any], period: str = "all",
                    now: Optional[datetime] = None) -> AnalyticsResponse:
    """Analytics payload for one user's interviews (oldest first)."""
    window = filter_by_period(interviews, period, now)
    completed = [i for i in window if is_scored(i)]
    scores = [i.total_score for i in completed]
    rate = improvement_rate(scores)

    overview = AnalyticsOverview(
        total_interviews=len(window),
        completed_interviews=len(completed),
        average_score=round_half_up(_mean(scores)),
        best_score=max(scores, default=0),
        worst_score=min(scores, default=0),
        improvement_rate=rate,
    )

    history = [
        ScoreHistoryPoint(
            date=f"{i.created_at:%b} {i.created_at.day}" if i.created_at else "",
            score=i.total_score,
            role=role_label(i.role),
        )
        for i in completed[-HISTORY_LENGTH:]
    ]

    by_role = [
        RoleScore(role=role_label(role), avg_score=round_half_up(_mean(values)), count=len(values))
        for role, values in _group_scores(completed, lambda i: i.role).items()
    ]
    by_type = [
        TypeScore(type=type_label(kind), avg_score=round_half_up(_mean(values)), count=len(values))
        for kind, values in _group_scores(completed, lambda i: i.interview_type).items()
    ]

    return AnalyticsResponse(
        overview=overview,
        score_history=history,
        score_by_role=by_role,
        score_by_type=by_type,
        skill_breakdown=skill_breakdown(a for i in completed for a in i.answers),
        recent_trend=classify_trend(rate),
    )


def _primary_role(counts: Counter) -> Optional[str]:
    # Most interviews wins; ties go to the alphabetically first role
    if not counts:
        return None
    return sorted(counts.items(), key=lambda kv: (-kv[1], kv[0]))[0][0]


def build_leaderboard(interviews: Iterable[Any], current_user_id: int,
                      limit: int = LEADERBOARD_SIZE,
                      role_counts: Optional[Dict[int, Counter]] = None) -> LeaderboardResponse:
    """Rank users by the average score of their completed interviews.

    ``interviews`` should already be filtered by period and role.
    ``role_counts`` holds each user's completed interviews per role across
    all time and roles; the primary role comes from it when given, and from
    ``interviews`` otherwise.
    """
    per_user: Dict[int, Dict[str, Any]] = {}
    for interview in interviews:
        if not is_scored(interview):
            continue
        stats = per_user.setdefault(interview.user_id, {
            "user": interview.user,
            "scores": [],
            "roles": Counter(),
        })
        stats["scores"].append(interview.total_score)
        stats["roles"][interview.role] += 1

    ranked = sorted(
        per_user.items(),
        key=lambda item: (-_mean(item[1]["scores"]), -max(item[1]["scores"]), item[0]),
    )

    entries = []
    for rank, (user_id, stats) in enumerate(ranked[:limit], start=1):
        user = stats["user"]
        roles = role_counts.get(user_id) if role_counts is not None else None
        primary_role = _primary_role(roles or stats["roles"])
        entries.append(LeaderboardEntry(
            rank=rank,
            user_id=user_id,
            name=(user.name if user is not None else None) or "Anonymous",
            image_url=user.image_url if user is not None else None,
            average_score=round_half_up(_mean(stats["scores"])),
            best_score=max(stats["scores"]),
            total_interviews=len(stats["scores"]),
            primary_role=role_label(primary_role) if primary_role else "General",
        ))

    current_rank = next((e.rank for e in entries if e.user_id == current_user_id), None)
    if current_rank is None and current_user_id in per_user:
        user_avg = round_half_up(_mean(per_user[current_user_id]["scores"]))
        current_rank = sum(1 for e in entries if e.average_score > user_avg) + 1

    return LeaderboardResponse(
        leaderboard=entries,
        current_user_rank=current_rank,
        current_user_id=current_user_id,
        total_users=len(entries),
    )
