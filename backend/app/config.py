from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    # API Configuration
    API_HOST: str = "0.0.0.0"
    API_PORT: int = 8000
    DEBUG: bool = True
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["http://localhost:3000"]

    # Database
    DATABASE_URL: str = "sqlite:///./interview_coach.db"

    # LLM (any OpenAI-compatible chat completions endpoint, Groq by default)
    LLM_BASE_URL: str = "https://api.groq.com/openai/v1"
    LLM_API_KEY: Optional[str] = None
    LLM_MODEL: str = "llama-3.1-8b-instant"
    # Larger model for long-form content (flash cards, project ideas); LLM_MODEL is its fallback
    LLM_QUALITY_MODEL: str = "llama-3.3-70b-versatile"
    LLM_TIMEOUT: float = 60.0
    LLM_TEMPERATURE: float = 0.7
    LLM_MAX_TOKENS: int = 2048

    class Config:
        env_file = ".env"

settings = Settings()
