from collections import Counter
from typing import Dict, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from app.api.deps import get_current_user
from app.models.database import Interview, User, get_db
from app.models.schemas import AnalyticsResponse, LeaderboardResponse, Period
from app.services.analytics import build_analytics, build_leaderboard, filter_by_period

router = APIRouter()

def _completed_role_counts(db: Session, user_ids) -> Dict[int, Counter]:
    """Completed interviews per (user, role), regardless of any leaderboard filter"""
    counts: Dict[int, Counter] = {}
    if not user_ids:
        return counts
    rows = db.query(
        Interview.user_id, Interview.role, func.count(Interview.id)
    ).filter(
        Interview.status == "completed",
        Interview.user_id.in_(user_ids)
    ).group_by(Interview.user_id, Interview.role).all()
    for user_id, role, count in rows:
        counts.setdefault(user_id, Counter())[role] = count
    return counts

@router.get("/analytics", response_model=AnalyticsResponse)
async def get_analytics(
    period: Period = Query("all"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Score statistics, breakdowns and trend for the current user"""
    interviews = db.query(Interview).options(
        selectinload(Interview.answers)
    ).filter(
        Interview.user_id == user.id
    ).order_by(Interview.created_at.asc(), Interview.id.asc()).all()

    return build_analytics(interviews, period=period)

@router.get("/leaderboard", response_model=LeaderboardResponse)
async def get_leaderboard(
    role: Optional[str] = Query(None),
    period: Period = Query("all"),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Users ranked by their average completed-interview score"""
    query = db.query(Interview).options(
        selectinload(Interview.user)
    ).filter(
        Interview.status == "completed",
        Interview.total_score.isnot(None)
    )
    if role:
        query = query.filter(Interview.role == role)

    interviews = filter_by_period(query.all(), period)
    role_counts = _completed_role_counts(db, sorted({i.user_id for i in interviews}))
    return build_leaderboard(interviews, current_user_id=user.id, role_counts=role_counts)
