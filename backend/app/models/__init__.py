from .database import (
    Base, User, Interview, Answer, InterviewSummary, GeneratedProjectSet, get_db, init_db
)
from .schemas import (
    Question,
    InterviewCreate,
    CustomInterviewCreate,
    InterviewCreateResponse,
    SpeechMetrics,
    EvaluateAnswerRequest,
    Evaluation,
    InterviewSummaryData,
    AnalyticsResponse,
    LeaderboardResponse,
    InterviewOptions,
    FlashCard,
    ProjectSpecification
)

__all__ = [
    "Base",
    "User",
    "Interview",
    "Answer",
    "InterviewSummary",
    "GeneratedProjectSet",
    "get_db",
    "init_db",
    "Question",
    "InterviewCreate",
    "CustomInterviewCreate",
    "InterviewCreateResponse",
    "SpeechMetrics",
    "EvaluateAnswerRequest",
    "Evaluation",
    "InterviewSummaryData",
    "AnalyticsResponse",
    "LeaderboardResponse",
    "InterviewOptions",
    "FlashCard",
    "ProjectSpecification"
]
