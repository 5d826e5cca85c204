import json
from typing import List

from sqlalchemy import (
    create_engine, Column, Integer, String, DateTime, Text, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker
from datetime import datetime, timezone
from app.config import settings

connect_args = {"check_same_thread": False} if settings.DATABASE_URL.startswith("sqlite") else {}
engine = create_engine(settings.DATABASE_URL, connect_args=connect_args)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()

def utcnow() -> datetime:
    """Naive UTC timestamp, the form every DateTime column stores"""
    return datetime.now(timezone.utc).replace(tzinfo=None)

# Interview status only ever moves forward along this order
STATUS_ORDER = ("pending", "in_progress", "completed")

class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False)
    name = Column(String(255), nullable=True)
    image_url = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    interviews = relationship("Interview", back_populates="user")

class Interview(Base):
    __tablename__ = "interviews"

    id = Column(Integer, primary_key=True, index=True)
    mock_id = Column(String(36), unique=True, nullable=False, index=True)  # UUID
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role = Column(String(100), nullable=False)  # frontend, backend, data, hr, ...
    experience_level = Column(String(20), nullable=False)  # 0-1, 1-3, 3-5, 5+
    interview_type = Column(String(50), nullable=False)  # technical, hr, behavioral
    duration = Column(String(10), default="15")  # 15, 30
    mode = Column(String(20), default="interview")  # interview, practice
    tech_stack_json = Column(Text, nullable=True)  # JSON array, kept for retakes
    topics_json = Column(Text, nullable=True)  # JSON array, kept for retakes
    questions_json = Column(Text, nullable=False)
    status = Column(String(20), default="pending")  # pending, in_progress, completed
    total_score = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=utcnow)
    completed_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="interviews")
    answers = relationship(
        "Answer", back_populates="interview", order_by="Answer.question_index"
    )
    summary = relationship("InterviewSummary", back_populates="interview", uselist=False)

    def advance_status(self, new_status: str) -> bool:
        """Move to ``new_status`` if it is ahead of the current one.

        Returns True when the status changed.
        """
        current = STATUS_ORDER.index(self.status or "pending")
        if STATUS_ORDER.index(new_status) <= current:
            return False
        self.status = new_status
        return True

    @property
    def tech_stack(self) -> List[str]:
        return json.loads(self.tech_stack_json) if self.tech_stack_json else []

    @property
    def topics(self) -> List[str]:
        return json.loads(self.topics_json) if self.topics_json else []

class Answer(Base):
    __tablename__ = "answers"
    __table_args__ = (
        UniqueConstraint("interview_id", "question_index", name="uq_answer_interview_question"),
    )

    id = Column(Integer, primary_key=True, index=True)
    interview_id = Column(Integer, ForeignKey("interviews.id"), nullable=False, index=True)
    question_index = Column(Integer, nullable=False)
    question_text = Column(Text, nullable=False)
    user_answer = Column(Text, nullable=True)
    feedback_json = Column(Text, nullable=True)
    technical_score = Column(Integer, nullable=True)
    communication_score = Column(Integer, nullable=True)
    depth_score = Column(Integer, nullable=True)
    ideal_answer = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    interview = relationship("Interview", back_populates="answers")

class InterviewSummary(Base):
    __tablename__ = "interview_summaries"

    id = Column(Integer, primary_key=True, index=True)
    interview_id = Column(Integer, ForeignKey("interviews.id"), nullable=False, unique=True)
    overall_score = Column(Integer, nullable=False)
    rating = Column(String(50), nullable=False)
    strengths_json = Column(Text, nullable=True)
    weaknesses_json = Column(Text, nullable=True)
    recommended_topics_json = Column(Text, nullable=True)
    action_plan = Column(Text, nullable=True)
    summary_text = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow)

    interview = relationship("Interview", back_populates="summary")

class GeneratedProjectSet(Base):
    """AI-generated project ideas cached per (technology, domain)"""
    __tablename__ = "generated_projects"
    __table_args__ = (
        UniqueConstraint("technology", "domain", name="uq_generated_projects_technology_domain"),
    )

    id = Column(Integer, primary_key=True, index=True)
    technology = Column(String(100), nullable=False)
    domain = Column(String(100), nullable=False)
    projects_json = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow)

def init_db(bind=None):
    """Create all tables on the given engine (the application engine by default)"""
    Base.metadata.create_all(bind=bind or engine)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
