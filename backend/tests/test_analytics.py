from collections import Counter
from datetime import datetime, timedelta

from app.models.database import Answer, Interview, User, utcnow
from app.services.analytics import (
    build_analytics,
    build_leaderboard,
    classify_trend,
    filter_by_period,
    improvement_rate,
)

NOW = datetime(2026, 3, 15, 12, 0, 0)


def make_interview(score, user_id=1, role="backend", interview_type="technical",
                   status="completed", days_ago=1, answers=(), user=None):
    created = NOW - timedelta(days=days_ago)
    return Interview(
        user_id=user_id,
        user=user,
        role=role,
        interview_type=interview_type,
        experience_level="1-3",
        status=status,
        total_score=score,
        created_at=created,
        completed_at=created if status == "completed" else None,
        answers=list(answers),
    )

def answer(technical, communication, depth, index=0):
    return Answer(
        question_index=index,
        technical_score=technical,
        communication_score=communication,
        depth_score=depth,
    )


def test_empty_analytics():
    analytics = build_analytics([], now=NOW)
    overview = analytics.overview
    assert overview.total_interviews == 0
    assert overview.completed_interviews == 0
    assert (overview.average_score, overview.best_score, overview.worst_score) == (0, 0, 0)
    assert overview.improvement_rate == 0
    assert analytics.recent_trend == "stable"
    assert analytics.score_history == []
    assert analytics.skill_breakdown.technical == 0

def test_rising_scores_are_improving():
    interviews = [make_interview(s, days_ago=10 - n) for n, s in enumerate([50, 70, 90])]
    analytics = build_analytics(interviews, now=NOW)
    overview = analytics.overview
    assert overview.average_score == 70
    assert overview.best_score == 90
    assert overview.worst_score == 50
    assert overview.improvement_rate == 40
    assert analytics.recent_trend == "improving"

def test_order_changes_trend_but_not_average():
    interviews = [make_interview(s) for s in [50, 70, 90]]
    reversed_analytics = build_analytics(list(reversed(interviews)), now=NOW)
    assert reversed_analytics.overview.average_score == 70
    assert reversed_analytics.overview.improvement_rate == -40
    assert reversed_analytics.recent_trend == "declining"

def test_unfinished_and_unscored_interviews_are_excluded():
    interviews = [
        make_interview(80),
        make_interview(None, status="pending"),
        make_interview(None, status="in_progress"),
        make_interview(None, status="completed"),
    ]
    overview = build_analytics(interviews, now=NOW).overview
    assert overview.total_interviews == 4
    assert overview.completed_interviews == 1
    assert overview.average_score == 80

def test_role_grouping_is_exact():
    interviews = [
        make_interview(60, role="backend"),
        make_interview(80, role="backend"),
        make_interview(70, role="Backend"),
        make_interview(90, role="frontend", interview_type="behavioral"),
    ]
    analytics = build_analytics(interviews, now=NOW)
    by_role = {r.role: (r.avg_score, r.count) for r in analytics.score_by_role}
    assert by_role == {
        "Backend Developer": (70, 2),
        "Backend": (70, 1),
        "Frontend Developer": (90, 1),
    }
    by_type = {t.type: t.count for t in analytics.score_by_type}
    assert by_type == {"Technical Interview": 3, "Behavioral Interview": 1}

def test_history_keeps_the_latest_ten():
    interviews = [make_interview(50 + n, days_ago=20 - n) for n in range(12)]
    history = build_analytics(interviews, now=NOW).score_history
    assert len(history) == 10
    assert history[0].score == 52
    assert history[-1].score == 61
    assert history[-1].date == "Mar 6"
    assert history[-1].role == "Backend Developer"

def test_skill_breakdown_is_a_flat_mean_over_answers():
    interviews = [
        make_interview(70, answers=[answer(10, 6, 4, 0), answer(8, 6, 4, 1)]),
        make_interview(30, answers=[answer(2, 3, 4)]),
        make_interview(None, status="pending", answers=[answer(0, 0, 0)]),
    ]
    breakdown = build_analytics(interviews, now=NOW).skill_breakdown
    assert (breakdown.technical, breakdown.communication, breakdown.depth) == (7, 5, 4)

def test_period_filter():
    interviews = [make_interview(90, days_ago=2), make_interview(40, days_ago=20),
                  make_interview(10, days_ago=60)]
    assert len(filter_by_period(interviews, "week", now=NOW)) == 1
    assert len(filter_by_period(interviews, "month", now=NOW)) == 2
    assert len(filter_by_period(interviews, "all", now=NOW)) == 3
    assert build_analytics(interviews, period="week", now=NOW).overview.average_score == 90

def test_improvement_rate_edges():
    assert improvement_rate([]) == 0
    assert improvement_rate([80]) == 0
    assert improvement_rate([40, 80]) == 40
    # windows never overlap and cap at three
    assert improvement_rate([10, 10, 10, 50, 90, 90, 90]) == 80

def test_trend_margin():
    assert classify_trend(5) == "stable"
    assert classify_trend(-5) == "stable"
    assert classify_trend(6) == "improving"
    assert classify_trend(-6) == "declining"


def test_leaderboard_ranks_by_average():
    alice = User(id=1, email="alice@example.com", name="Alice")
    bob = User(id=2, email="bob@example.com", name=None)
    interviews = [
        make_interview(90, user_id=1, user=alice),
        make_interview(70, user_id=1, user=alice, role="frontend"),
        make_interview(70, user_id=1, user=alice),
        make_interview(85, user_id=2, user=bob, role="data"),
        make_interview(None, user_id=2, user=bob, status="pending"),
    ]
    board = build_leaderboard(interviews, current_user_id=2)
    assert [e.user_id for e in board.leaderboard] == [2, 1]
    first, second = board.leaderboard
    assert (first.rank, first.name, first.average_score) == (1, "Anonymous", 85)
    assert first.total_interviews == 1
    assert first.primary_role == "Data Scientist / Analyst"
    assert (second.rank, second.average_score, second.best_score) == (2, 77, 90)
    assert second.primary_role == "Backend Developer"
    assert board.current_user_rank == 1
    assert board.total_users == 2

def test_leaderboard_ties_break_on_best_score():
    interviews = [
        make_interview(60, user_id=1), make_interview(80, user_id=1),
        make_interview(70, user_id=2), make_interview(70, user_id=2),
    ]
    board = build_leaderboard(interviews, current_user_id=1)
    assert [e.user_id for e in board.leaderboard] == [1, 2]

def test_current_user_outside_the_list():
    interviews = [make_interview(90 - n, user_id=n) for n in range(1, 5)]
    board = build_leaderboard(interviews, current_user_id=4, limit=2)
    assert [e.user_id for e in board.leaderboard] == [1, 2]
    assert board.current_user_rank == 3

def test_current_user_without_interviews_has_no_rank():
    board = build_leaderboard([make_interview(50, user_id=1)], current_user_id=9)
    assert board.current_user_rank is None
    assert board.current_user_id == 9

def test_primary_role_comes_from_all_time_role_counts():
    interviews = [make_interview(80, user_id=1, role="backend")]
    board = build_leaderboard(
        interviews, current_user_id=1,
        role_counts={1: Counter({"frontend": 2, "backend": 1})}
    )
    assert board.leaderboard[0].primary_role == "Frontend Developer"
    assert board.leaderboard[0].total_interviews == 1

def test_primary_role_ties_pick_the_first_role_alphabetically():
    interviews = [make_interview(80, user_id=1, role="frontend"),
                  make_interview(70, user_id=1, role="backend")]
    board = build_leaderboard(interviews, current_user_id=1)
    assert board.leaderboard[0].primary_role == "Backend Developer"

def test_period_filter_defaults_to_the_current_time():
    assert utcnow().tzinfo is None
    fresh = make_interview(75)
    fresh.created_at = fresh.completed_at = utcnow()
    stale = make_interview(75)
    stale.created_at = stale.completed_at = utcnow() - timedelta(days=8)
    assert filter_by_period([fresh, stale], "week") == [fresh]
