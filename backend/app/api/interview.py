import json
import logging
import uuid
from typing import List, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.api.deps import get_current_user
from app.errors import (
    AppError, BAD_REQUEST, BadRequestError, ConflictError, ForbiddenError,
    INTERNAL_ERROR, NotFoundError
)
from app.models.database import Answer, Interview, InterviewSummary, User, get_db, utcnow
from app.models.schemas import (
    DURATION_QUESTION_COUNT,
    AnswerOut,
    CustomInterviewCreate,
    EvaluateAnswerRequest,
    EvaluateAnswerResponse,
    Evaluation,
    HistoryItem,
    HistoryResponse,
    InterviewCreate,
    InterviewCreateResponse,
    InterviewDetail,
    InterviewOptions,
    InterviewRef,
    InterviewSummaryData,
    Question,
    SpeechAnalysis,
    SummaryResponse,
    TranscriptAnalysisRequest,
)
from app.services.analytics import role_label
from app.services.keywords import apply_keyword_validation
from app.services.llm import llm_service
from app.services.scoring import interview_score, round_half_up
from app.services.speech import annotate_speech_metrics, speech_analyzer

logger = logging.getLogger(__name__)

router = APIRouter()

DEFAULT_QUESTION_COUNT = 10

def _get_owned_interview(db: Session, mock_id: str, user: User) -> Interview:
    interview = db.query(Interview).filter(Interview.mock_id == mock_id).first()
    if not interview:
        raise NotFoundError("Interview not found")
    if interview.user_id != user.id:
        raise ForbiddenError()
    return interview

def _load_questions(interview: Interview) -> List[Question]:
    data = json.loads(interview.questions_json or "{}")
    return [Question.model_validate(q) for q in data.get("questions", [])]

def _dump_questions(questions: List[Question]) -> str:
    return json.dumps({
        "questions": [q.model_dump(by_alias=True, exclude_none=True) for q in questions]
    })

def _answer_out(answer: Answer) -> AnswerOut:
    evaluation = None
    if answer.feedback_json:
        evaluation = Evaluation.model_validate_json(answer.feedback_json)
    return AnswerOut(
        question_index=answer.question_index,
        question_text=answer.question_text,
        user_answer=answer.user_answer,
        evaluation=evaluation,
        created_at=answer.created_at
    )

def _summary_out(summary: InterviewSummary) -> InterviewSummaryData:
    return InterviewSummaryData(
        overall_score=summary.overall_score,
        rating=summary.rating,
        performance_summary=summary.summary_text or "",
        strengths=json.loads(summary.strengths_json or "[]"),
        weaknesses=json.loads(summary.weaknesses_json or "[]"),
        recommended_topics=json.loads(summary.recommended_topics_json or "[]"),
        action_plan=summary.action_plan or ""
    )

def _new_interview(user: User, role: str, experience_level: str, interview_type: str,
                   duration: str, mode: str, questions: List[Question],
                   tech_stack: Optional[List[str]] = None,
                   topics: Optional[List[str]] = None) -> Interview:
    return Interview(
        mock_id=str(uuid.uuid4()),
        user_id=user.id,
        role=role,
        experience_level=experience_level,
        interview_type=interview_type,
        duration=duration,
        mode=mode,
        status="pending",
        questions_json=_dump_questions(questions),
        tech_stack_json=json.dumps(tech_stack) if tech_stack else None,
        topics_json=json.dumps(topics) if topics else None
    )

@router.get("/options", response_model=InterviewOptions)
async def get_interview_options():
    """Roles, experience levels, interview types and durations"""
    return InterviewOptions()

@router.post("/create", response_model=InterviewCreateResponse, response_model_exclude_none=True)
async def create_interview(
    request: InterviewCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an interview with AI-generated questions"""
    try:
        questions = await llm_service.generate_questions(
            role=request.role,
            experience_level=request.experience_level,
            interview_type=request.interview_type,
            question_count=DURATION_QUESTION_COUNT[request.duration],
            tech_stack=request.tech_stack,
            mode=request.mode,
            topics=request.topics
        )

        interview = _new_interview(
            user, request.role, request.experience_level, request.interview_type,
            request.duration, request.mode, questions,
            tech_stack=request.tech_stack, topics=request.topics
        )
        db.add(interview)
        db.commit()

        logger.info("Created interview %s for user %s with %d questions",
                    interview.mock_id, user.id, len(questions))
        return InterviewCreateResponse(interview_id=interview.mock_id, questions=questions)

    except AppError:
        raise
    except Exception as e:
        logger.exception("Create interview error")
        raise AppError(INTERNAL_ERROR, "Failed to create interview", status_code=500) from e

@router.post("/custom", response_model=InterviewCreateResponse, response_model_exclude_none=True)
async def create_custom_interview(
    request: CustomInterviewCreate,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Create an interview from caller-supplied (document-derived) questions"""
    questions = [
        q.model_copy(update={"id": index})
        for index, q in enumerate(request.questions, start=1)
    ]
    interview = _new_interview(
        user, request.role, request.experience_level, request.interview_type,
        request.duration, "interview", questions
    )
    db.add(interview)
    db.commit()

    logger.info("Created custom interview %s for user %s", interview.mock_id, user.id)
    return InterviewCreateResponse(interview_id=interview.mock_id, questions=questions)

@router.post("/evaluate", response_model=EvaluateAnswerResponse, response_model_exclude_none=True)
async def evaluate_answer(
    request: EvaluateAnswerRequest,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Evaluate one answer and store it"""
    try:
        interview = _get_owned_interview(db, request.interview_id, user)
        if interview.status == "completed":
            raise ConflictError("Interview is already completed")

        questions = _load_questions(interview)
        if request.question_index >= len(questions):
            raise BadRequestError(
                "Question index out of range",
                details={"questionIndex": request.question_index, "questionCount": len(questions)}
            )

        existing = db.query(Answer).filter(
            Answer.interview_id == interview.id,
            Answer.question_index == request.question_index
        ).first()
        if existing:
            raise ConflictError("Question already answered")

        if interview.advance_status("in_progress"):
            db.commit()

        evaluation = await llm_service.evaluate_answer(
            question=request.question_text,
            answer=request.user_answer,
            role=interview.role,
            experience_level=interview.experience_level
        )
        evaluation = apply_keyword_validation(
            evaluation, questions[request.question_index].keywords, request.user_answer
        )
        evaluation = annotate_speech_metrics(evaluation, request.speech_metrics)

        db.add(Answer(
            interview_id=interview.id,
            question_index=request.question_index,
            question_text=request.question_text,
            user_answer=request.user_answer,
            feedback_json=evaluation.model_dump_json(by_alias=True, exclude_none=True),
            technical_score=round_half_up(evaluation.technical_score),
            communication_score=round_half_up(evaluation.communication_score),
            depth_score=round_half_up(evaluation.depth_score),
            ideal_answer=evaluation.ideal_answer
        ))
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Question already answered") from e

        return EvaluateAnswerResponse(evaluation=evaluation)

    except AppError:
        raise
    except Exception as e:
        logger.exception("Evaluate answer error")
        raise AppError(INTERNAL_ERROR, "Failed to evaluate answer", status_code=500) from e

@router.post("/speech-metrics", response_model=SpeechAnalysis)
async def analyze_speech(request: TranscriptAnalysisRequest):
    """Filler words and speaking pace of a transcribed answer"""
    return speech_analyzer.analyze_transcript(request.transcript, request.speaking_time)

@router.post("/summary", response_model=SummaryResponse)
async def generate_summary(
    request: InterviewRef,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Summarize the interview and mark it completed"""
    try:
        interview = _get_owned_interview(db, request.interview_id, user)
        if interview.status == "completed":
            raise ConflictError("Interview is already completed")

        answers = list(interview.answers)
        if not answers:
            raise AppError(BAD_REQUEST, "No answers found", status_code=400)

        total_questions = len(_load_questions(interview))
        score = interview_score(answers, total_questions)

        answers_data = [
            {
                "question": a.question_text,
                "answer": a.user_answer or "",
                "technicalScore": a.technical_score or 0,
                "communicationScore": a.communication_score or 0,
                "depthScore": a.depth_score or 0,
            }
            for a in answers
        ]
        summary = await llm_service.generate_summary(
            answers=answers_data,
            role=role_label(interview.role),
            score=score,
            answered_count=len(answers),
            total_questions=total_questions
        )

        db.add(InterviewSummary(
            interview_id=interview.id,
            overall_score=summary.overall_score,
            rating=summary.rating,
            strengths_json=json.dumps(summary.strengths),
            weaknesses_json=json.dumps(summary.weaknesses),
            recommended_topics_json=json.dumps(summary.recommended_topics),
            action_plan=summary.action_plan,
            summary_text=summary.performance_summary
        ))
        interview.advance_status("completed")
        interview.total_score = score
        interview.completed_at = utcnow()
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            raise ConflictError("Interview is already completed") from e

        logger.info("Completed interview %s with score %d (%s)",
                    interview.mock_id, score, summary.rating)
        return SummaryResponse(summary=summary)

    except AppError:
        raise
    except Exception as e:
        logger.exception("Generate summary error")
        raise AppError(INTERNAL_ERROR, "Failed to generate summary", status_code=500) from e

@router.get("/history", response_model=HistoryResponse)
async def get_history(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """All of the user's interviews, newest first"""
    interviews = db.query(Interview).filter(
        Interview.user_id == user.id
    ).order_by(Interview.created_at.desc(), Interview.id.desc()).all()

    return HistoryResponse(interviews=[
        HistoryItem(
            interview_id=i.mock_id,
            role=i.role,
            role_display=role_label(i.role),
            experience_level=i.experience_level,
            interview_type=i.interview_type,
            mode=i.mode,
            status=i.status,
            total_score=i.total_score,
            question_count=len(_load_questions(i)),
            answered_count=len(i.answers),
            created_at=i.created_at,
            completed_at=i.completed_at
        )
        for i in interviews
    ])

@router.post("/retake", response_model=InterviewCreateResponse, response_model_exclude_none=True)
async def retake_interview(
    request: InterviewRef,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Start a fresh attempt with newly generated questions and the same settings"""
    original = _get_owned_interview(db, request.interview_id, user)
    try:
        questions = await llm_service.generate_questions(
            role=original.role,
            experience_level=original.experience_level,
            interview_type=original.interview_type,
            question_count=DURATION_QUESTION_COUNT.get(original.duration, DEFAULT_QUESTION_COUNT),
            tech_stack=original.tech_stack,
            mode=original.mode,
            topics=original.topics
        )

        interview = _new_interview(
            user, original.role, original.experience_level, original.interview_type,
            original.duration, original.mode, questions,
            tech_stack=original.tech_stack, topics=original.topics
        )
        db.add(interview)
        db.commit()

        logger.info("Retake of %s created as %s with %d questions",
                    original.mock_id, interview.mock_id, len(questions))
        return InterviewCreateResponse(interview_id=interview.mock_id, questions=questions)

    except AppError:
        raise
    except Exception as e:
        logger.exception("Retake interview error")
        raise AppError(INTERNAL_ERROR, "Failed to retake interview", status_code=500) from e

@router.get("/{interview_id}", response_model=InterviewDetail, response_model_exclude_none=True)
async def get_interview(
    interview_id: str,
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Interview details with its questions, answers and summary"""
    interview = _get_owned_interview(db, interview_id, user)
    summary: Optional[InterviewSummaryData] = None
    if interview.summary is not None:
        summary = _summary_out(interview.summary)

    return InterviewDetail(
        interview_id=interview.mock_id,
        role=interview.role,
        experience_level=interview.experience_level,
        interview_type=interview.interview_type,
        duration=interview.duration,
        mode=interview.mode,
        status=interview.status,
        total_score=interview.total_score,
        questions=_load_questions(interview),
        answers=[_answer_out(a) for a in interview.answers],
        summary=summary,
        created_at=interview.created_at,
        completed_at=interview.completed_at
    )
