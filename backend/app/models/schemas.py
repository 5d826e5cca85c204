from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import Dict, List, Literal, Optional
from datetime import datetime

ExperienceLevel = Literal["0-1", "1-3", "3-5", "5+"]
InterviewType = Literal["technical", "hr", "behavioral"]
InterviewDuration = Literal["15", "30"]
InterviewMode = Literal["interview", "practice"]
Difficulty = Literal["easy", "medium", "hard"]
Period = Literal["week", "month", "all"]
Trend = Literal["improving", "declining", "stable"]

ROLE_DISPLAY_NAMES: Dict[str, str] = {
    "frontend": "Frontend Developer",
    "backend": "Backend Developer",
    "fullstack": "Full Stack Developer",
    "data": "Data Scientist / Analyst",
    "devops": "DevOps Engineer",
    "mobile": "Mobile Developer",
    "hr": "HR / General",
    "data_engineer": "Data Engineer",
    "data_analyst": "Data Analyst",
    "data_scientist": "Data Scientist",
    "ml_engineer": "ML Engineer",
    "ai_engineer": "AI/LLM Engineer",
    "cloud_engineer": "Cloud Engineer",
    "sre": "Site Reliability Engineer",
    "mobile_android": "Android Developer",
    "mobile_ios": "iOS Developer",
    "security_engineer": "Security Engineer",
    "qa_engineer": "QA/Test Engineer",
    "product_manager": "Product Manager",
    "business_analyst": "Business Analyst",
}

EXPERIENCE_DISPLAY_NAMES: Dict[str, str] = {
    "0-1": "Fresher (0-1 years)",
    "1-3": "Junior (1-3 years)",
    "3-5": "Mid-Level (3-5 years)",
    "5+": "Senior (5+ years)",
}

INTERVIEW_TYPE_DISPLAY_NAMES: Dict[str, str] = {
    "technical": "Technical Interview",
    "hr": "HR Interview",
    "behavioral": "Behavioral Interview",
}

# Duration bucket -> number of questions asked
DURATION_QUESTION_COUNT: Dict[str, int] = {
    "15": 10,
    "30": 20,
}


class CamelModel(BaseModel):
    """Base model that speaks camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Question(CamelModel):
    id: int
    text: str = Field(..., min_length=1)
    difficulty: Difficulty = "medium"
    topic: str = "general"
    expected_time: int = 90  # seconds
    keywords: Optional[List[str]] = None  # only for document-derived questions

class InterviewCreate(CamelModel):
    role: str = Field(..., min_length=1, max_length=100)
    experience_level: ExperienceLevel
    interview_type: InterviewType
    duration: InterviewDuration = "15"
    tech_stack: List[str] = Field(default_factory=list)
    mode: InterviewMode = "interview"
    topics: List[str] = Field(default_factory=list)

class CustomInterviewCreate(CamelModel):
    role: str = Field(..., min_length=1, max_length=100)
    experience_level: ExperienceLevel
    interview_type: InterviewType = "technical"
    duration: InterviewDuration = "15"
    questions: List[Question] = Field(..., min_length=1)

class InterviewCreateResponse(CamelModel):
    success: bool = True
    interview_id: str
    questions: List[Question]

class InterviewRef(CamelModel):
    interview_id: str = Field(..., min_length=1)

class SpeechMetrics(CamelModel):
    filler_word_count: int = Field(..., ge=0)
    filler_words: Dict[str, int] = Field(default_factory=dict)
    words_per_minute: float = Field(..., ge=0)
    speaking_time: float = Field(..., ge=0)  # seconds

class TranscriptAnalysisRequest(CamelModel):
    transcript: str
    speaking_time: float = Field(..., ge=0)

class SpeechAnalysis(SpeechMetrics):
    total_words: int

class EvaluateAnswerRequest(CamelModel):
    interview_id: str = Field(..., min_length=1)
    question_index: int = Field(..., ge=0)
    question_text: str = Field(..., min_length=1)
    user_answer: str = Field(..., min_length=1)
    speech_metrics: Optional[SpeechMetrics] = None

class Evaluation(CamelModel):
    technical_score: float
    communication_score: float
    depth_score: float
    overall_score: int
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    ideal_answer: str = ""
    follow_up_tip: Optional[str] = None
    encouragement: str = ""
    # Keyword validation (document-derived questions only)
    keyword_score: Optional[int] = None
    keywords_covered: Optional[List[str]] = None
    keywords_missed: Optional[List[str]] = None
    keyword_validation_passed: Optional[bool] = None
    # Speech metrics (voice answers only)
    filler_word_count: Optional[int] = None
    filler_words: Optional[Dict[str, int]] = None
    words_per_minute: Optional[float] = None
    speaking_time: Optional[float] = None

class EvaluateAnswerResponse(CamelModel):
    success: bool = True
    evaluation: Evaluation

class InterviewSummaryData(CamelModel):
    overall_score: int
    rating: str
    performance_summary: str = ""
    strengths: List[str] = Field(default_factory=list)
    weaknesses: List[str] = Field(default_factory=list)
    recommended_topics: List[str] = Field(default_factory=list)
    action_plan: str = ""
    encouragement: str = ""
    readiness_level: str = "Not Ready"

class SummaryResponse(CamelModel):
    success: bool = True
    summary: InterviewSummaryData

class AnswerOut(CamelModel):
    question_index: int
    question_text: str
    user_answer: Optional[str] = None
    evaluation: Optional[Evaluation] = None
    created_at: Optional[datetime] = None

class InterviewDetail(CamelModel):
    interview_id: str
    role: str
    experience_level: str
    interview_type: str
    duration: str
    mode: str
    status: str
    total_score: Optional[int] = None
    questions: List[Question]
    answers: List[AnswerOut]
    summary: Optional[InterviewSummaryData] = None
    created_at: datetime
    completed_at: Optional[datetime] = None

class HistoryItem(CamelModel):
    interview_id: str
    role: str
    role_display: str
    experience_level: str
    interview_type: str
    mode: str
    status: str
    total_score: Optional[int] = None
    question_count: int
    answered_count: int
    created_at: datetime
    completed_at: Optional[datetime] = None

class HistoryResponse(CamelModel):
    interviews: List[HistoryItem]

class AnalyticsOverview(CamelModel):
    total_interviews: int = 0
    completed_interviews: int = 0
    average_score: int = 0
    best_score: int = 0
    worst_score: int = 0
    improvement_rate: int = 0

class ScoreHistoryPoint(CamelModel):
    date: str
    score: int
    role: str

class RoleScore(CamelModel):
    role: str
    avg_score: int
    count: int

class TypeScore(CamelModel):
    type: str
    avg_score: int
    count: int

class SkillBreakdown(CamelModel):
    technical: int = 0
    communication: int = 0
    depth: int = 0

class AnalyticsResponse(CamelModel):
    overview: AnalyticsOverview
    score_history: List[ScoreHistoryPoint]
    score_by_role: List[RoleScore]
    score_by_type: List[TypeScore]
    skill_breakdown: SkillBreakdown
    recent_trend: Trend

class LeaderboardEntry(CamelModel):
    rank: int
    user_id: int
    name: str
    image_url: Optional[str] = None
    average_score: int
    best_score: int
    total_interviews: int
    primary_role: str

class LeaderboardResponse(CamelModel):
    leaderboard: List[LeaderboardEntry]
    current_user_rank: Optional[int] = None
    current_user_id: int
    total_users: int

class InterviewOptions(CamelModel):
    roles: Dict[str, str] = ROLE_DISPLAY_NAMES
    experience_levels: Dict[str, str] = EXPERIENCE_DISPLAY_NAMES
    interview_types: Dict[str, str] = INTERVIEW_TYPE_DISPLAY_NAMES
    durations: Dict[str, int] = DURATION_QUESTION_COUNT

class FlashCard(CamelModel):
    id: str
    front: str
    back: str
    difficulty: Difficulty = "medium"
    tags: List[str] = Field(default_factory=list)
    hint: Optional[str] = None
    code_snippet: Optional[str] = None

class FlashCardsRequest(CamelModel):
    technology: str = Field(..., min_length=1, max_length=100)
    topic: str = Field(..., min_length=1, max_length=100)
    count: int = Field(10, ge=1, le=30)

class FlashCardsResponse(CamelModel):
    success: bool
    cards: List[FlashCard] = Field(default_factory=list)
    error: Optional[str] = None

ProjectDifficulty = Literal["beginner", "intermediate", "advanced"]

class WorkflowDiagram(CamelModel):
    title: str = ""
    type: str = "architecture"
    description: str = ""
    mermaid_code: str = ""
    image_url: str = ""

class ProjectSpecification(CamelModel):
    """A generated project idea.

    Only the fields the API relies on are typed; the rest of the AI's
    write-up (explanation, features, schema, endpoints, guide, ...) is kept
    as-is under its original key.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    title: str = Field(..., min_length=1)
    description: str = ""
    technology: str
    domain: str
    difficulty: ProjectDifficulty = "intermediate"
    estimated_days: int = Field(..., ge=1)
    workflow_diagrams: List[WorkflowDiagram] = Field(default_factory=list)
    created_at: str

class ProjectsRequest(CamelModel):
    technology: str = Field(..., min_length=1, max_length=100)
    domain: str = Field(..., min_length=1, max_length=100)

class ProjectsResponse(CamelModel):
    success: bool = True
    projects: List[ProjectSpecification]
    cached: bool = False
    cached_at: Optional[str] = None

class ProjectsExistResponse(CamelModel):
    exists: bool
