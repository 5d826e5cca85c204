from .llm import llm_service, LLMService
from .speech import speech_analyzer, SpeechAnalyzer

__all__ = [
    "llm_service",
    "LLMService",
    "speech_analyzer",
    "SpeechAnalyzer"
]
