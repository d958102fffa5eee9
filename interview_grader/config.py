"""Application configuration."""
from pydantic_settings import BaseSettings
from typing import List


class Settings(BaseSettings):
    """Application settings."""

    # MongoDB
    mongodb_url: str = "mongodb://localhost:27017"
    mongodb_db_name: str = "interview_grader"

    # JWT (tokens are issued by the auth service, we only verify them)
    jwt_secret_key: str
    jwt_algorithm: str = "HS256"

    # Application
    app_name: str = "Interview Grader"
    app_version: str = "1.0.0"
    debug: bool = True
    log_level: str = "INFO"

    # CORS
    allowed_origins: str = "http://localhost:5173,http://localhost:3000"

    # Text evaluation (OpenAI)
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"
    evaluator_timeout_seconds: float = 20.0

    # Behavioral analysis service
    behavioral_api_url: str = "http://localhost:8000"
    behavioral_timeout_seconds: float = 30.0

    # Sessions left in progress longer than this are abandoned by the sweep
    stale_session_hours: int = 24

    @property
    def allowed_origins_list(self) -> List[str]:
        """Get allowed origins as a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()
