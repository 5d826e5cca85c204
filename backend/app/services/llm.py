import json
import logging
import httpx
from typing import Dict, List, Optional
from app.config import settings
from app.errors import AppError, INTERNAL_ERROR, LLMServiceError
from app.models.schemas import (
    Evaluation, FlashCardsResponse, InterviewSummaryData, ProjectSpecification, Question
)
from app.services import prompts
from app.services.flashcards import (
    FLASHCARD_MAX_TOKENS, FLASHCARD_TEMPERATURE, FlashCardsOk, parse_flashcards
)
from app.services.projects import (
    PROJECT_COUNT, PROJECT_FALLBACK_MAX_TOKENS, PROJECT_MAX_TOKENS, PROJECT_TEMPERATURE, ProjectsOk,
    parse_projects
)
from app.services.scoring import (
    EvaluationOk,
    default_evaluation,
    default_summary,
    parse_evaluation,
    parse_summary,
)

logger = logging.getLogger(__name__)

VALID_DIFFICULTIES = ("easy", "medium", "hard")
VALID_EXPECTED_TIMES = (60, 90, 120)
MIN_QUESTION_LENGTH = 10

class LLMService:
    def __init__(self):
        self.base_url = settings.LLM_BASE_URL.rstrip("/")
        self.api_key = settings.LLM_API_KEY
        self.model = settings.LLM_MODEL
        self.quality_model = settings.LLM_QUALITY_MODEL
        self.client = httpx.AsyncClient(timeout=settings.LLM_TIMEOUT)
        if not self.api_key:
            logger.warning("LLM_API_KEY not set. AI features will use fallback responses.")

    async def complete(self, messages: List[Dict[str, str]], temperature: Optional[float] = None,
                       max_tokens: Optional[int] = None, model: Optional[str] = None) -> str:
        """Run a JSON-mode chat completion and return the message content"""
        if not self.api_key:
            raise LLMServiceError("LLM API key is not configured")

        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                headers={"Authorization": f"Bearer {self.api_key}"},
                json={
                    "model": model or self.model,
                    "messages": messages,
                    "temperature": settings.LLM_TEMPERATURE if temperature is None else temperature,
                    "max_tokens": max_tokens or settings.LLM_MAX_TOKENS,
                    "response_format": {"type": "json_object"},
                }
            )
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise LLMServiceError(
                "Completion request was rejected",
                details={"status_code": e.response.status_code}
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            raise LLMServiceError(f"Completion request failed: {e}") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise LLMServiceError("Completion response had no message content") from e
        if not content:
            raise LLMServiceError("Completion response was empty")
        return content

    async def generate_questions(self, role: str, experience_level: str, interview_type: str,
                                 question_count: int, tech_stack: Optional[List[str]] = None,
                                 mode: str = "interview",
                                 topics: Optional[List[str]] = None) -> List[Question]:
        """Generate interview questions, falling back to a fixed set if the AI is down"""
        prompt = prompts.question_generator_prompt(
            role=role,
            experience=experience_level,
            interview_type=interview_type,
            question_count=question_count,
            tech_stack=tech_stack,
            mode=mode,
            topics=topics,
        )
        try:
            raw = await self.complete([
                {"role": "system", "content": prompts.QUESTION_SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ])
        except LLMServiceError as e:
            logger.warning("Question generation failed, using fallback questions: %s", e)
            return self._get_fallback_questions(role, question_count)

        questions = self._parse_questions(raw)
        if not questions:
            logger.error("AI returned no usable questions: %.200s", raw)
            raise AppError(INTERNAL_ERROR, "Failed to generate valid questions", status_code=500)
        return questions

    async def evaluate_answer(self, question: str, answer: str, role: str,
                              experience_level: str) -> Evaluation:
        """Score an answer. Returns the default evaluation when the AI fails."""
        prompt = prompts.answer_evaluator_prompt(question, answer, role, experience_level)
        try:
            raw = await self.complete([
                {"role": "system", "content": prompts.EVALUATOR_SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ])
        except LLMServiceError as e:
            logger.warning("Answer evaluation failed, using default evaluation: %s", e)
            return default_evaluation()

        result = parse_evaluation(raw)
        if not isinstance(result, EvaluationOk):
            logger.warning("Unusable evaluation payload (%s): %s", result.kind, result.detail)
            return default_evaluation()
        return result.evaluation

    async def generate_summary(self, answers: List[Dict], role: str, score: int,
                               answered_count: int, total_questions: int) -> InterviewSummaryData:
        """Summarize a finished interview; score and rating are always ``score``'s"""
        prompt = prompts.summary_generator_prompt(answers, role)
        try:
            raw = await self.complete([
                {"role": "system", "content": prompts.SUMMARY_SYSTEM_MESSAGE},
                {"role": "user", "content": prompt},
            ])
        except LLMServiceError as e:
            logger.warning("Summary generation failed, using default summary: %s", e)
            return default_summary(score, answered_count, total_questions)

        summary = parse_summary(raw, score)
        if summary is None:
            logger.warning("Unusable summary payload: %.200s", raw)
            return default_summary(score, answered_count, total_questions)
        return summary

    async def complete_with_fallback(self, messages: List[Dict[str, str]], temperature: float,
                                     max_tokens: int, fallback_max_tokens: Optional[int] = None) -> str:
        """Try the quality model first, then the default model"""
        try:
            return await self.complete(messages, temperature, max_tokens, model=self.quality_model)
        except LLMServiceError as primary:
            if self.quality_model == self.model:
                raise
            logger.warning("%s failed, retrying with %s: %s", self.quality_model, self.model, primary)
            try:
                return await self.complete(
                    messages, temperature, fallback_max_tokens or max_tokens, model=self.model
                )
            except LLMServiceError as e:
                raise LLMServiceError(f"AI service error: {primary.message}") from e

    async def generate_flashcards(self, technology: str, topic: str, count: int) -> FlashCardsResponse:
        """Generate study flash cards. Failures are reported in the response, never raised."""
        messages = [
            {"role": "system", "content": prompts.FLASHCARD_SYSTEM_MESSAGE},
            {"role": "user", "content": prompts.flashcard_prompt(technology, topic, count)},
        ]
        try:
            raw = await self.complete_with_fallback(messages, FLASHCARD_TEMPERATURE, FLASHCARD_MAX_TOKENS)
        except LLMServiceError as e:
            logger.warning("Flash card generation failed for %s - %s: %s", technology, topic, e)
            return FlashCardsResponse(success=False, error=e.message)

        result = parse_flashcards(raw, technology, topic)
        if not isinstance(result, FlashCardsOk):
            logger.warning("Unusable flash card payload (%s): %s", result.kind, result.detail)
            return FlashCardsResponse(success=False, error="Failed to parse AI response")
        return FlashCardsResponse(success=True, cards=result.cards)

    async def generate_projects(self, technology: str, domain: str) -> List[ProjectSpecification]:
        """Generate portfolio project ideas; raises when nothing usable comes back"""
        messages = [
            {"role": "system", "content": prompts.PROJECT_SYSTEM_MESSAGE},
            {"role": "user", "content": prompts.project_prompt(technology, domain, PROJECT_COUNT)},
        ]
        raw = await self.complete_with_fallback(
            messages, PROJECT_TEMPERATURE, PROJECT_MAX_TOKENS, PROJECT_FALLBACK_MAX_TOKENS
        )

        result = parse_projects(raw, technology, domain)
        if not isinstance(result, ProjectsOk):
            logger.error("Unusable project payload (%s): %s", result.kind, result.detail)
            raise AppError(INTERNAL_ERROR, f"Failed to generate projects: {result.detail}", status_code=500)
        return result.projects

    def _parse_questions(self, response: str) -> List[Question]:
        """Parse and clean up the question list returned by the AI"""
        try:
            payload = json.loads(response)
        except ValueError:
            return []
        items = payload.get("questions") if isinstance(payload, dict) else None
        if not isinstance(items, list):
            return []

        questions = []
        for item in items:
            if not isinstance(item, dict):
                continue
            text = item.get("text")
            if not isinstance(text, str) or len(text.strip()) <= MIN_QUESTION_LENGTH:
                continue
            difficulty = item.get("difficulty")
            expected_time = item.get("expectedTime")
            topic = item.get("topic")
            questions.append(Question(
                id=len(questions) + 1,
                text=text.strip(),
                difficulty=difficulty if difficulty in VALID_DIFFICULTIES else "medium",
                topic=topic.strip() if isinstance(topic, str) and topic.strip() else "general",
                expected_time=expected_time if expected_time in VALID_EXPECTED_TIMES else 90,
            ))
        return questions

    def _get_fallback_questions(self, role: str, question_count: int) -> List[Question]:
        """Fallback questions when the AI is unavailable, trimmed to ``question_count``"""
        base = [
            (f"Tell me about yourself and your experience with {role} development.", "easy", "introduction", 60),
            (f"What are the key skills required for a {role} role?", "medium", "technical", 90),
            ("Describe a challenging project you worked on and how you overcame obstacles.",
             "medium", "experience", 90),
            ("How do you stay updated with the latest technologies in your field?", "medium", "learning", 90),
            ("Where do you see yourself in 5 years?", "easy", "career", 60),
            ("What is your approach to debugging complex issues?", "medium", "problem-solving", 90),
            (f"Explain a concept in {role} that you find particularly interesting.", "medium", "technical", 90),
            ("How do you handle tight deadlines and pressure?", "medium", "soft-skills", 90),
            ("What tools and technologies are you most proficient in?", "easy", "technical", 60),
            ("Describe your ideal work environment and team culture.", "easy", "culture", 60),
        ]
        return [
            Question(id=index, text=text, difficulty=difficulty, topic=topic, expected_time=expected_time)
            for index, (text, difficulty, topic, expected_time) in enumerate(base[:question_count], start=1)
        ]

# Global instance
llm_service = LLMService()
