"""Configuration settings for the L9ani assistant engine"""
import os
from typing import List
from pydantic_settings import BaseSettings


def detect_environment() -> str:
    """
    Detect current environment from the hosting service name or env var.
    Returns: 'dev', 'staging', or 'prod'
    """
    # First check explicit ENVIRONMENT variable
    explicit_env = os.getenv("ENVIRONMENT", "").lower()
    if explicit_env in ("dev", "staging", "prod", "production", "development"):
        if explicit_env == "production":
            return "prod"
        if explicit_env == "development":
            return "dev"
        return explicit_env

    # Detect from container service name
    service_name = os.getenv("K_SERVICE", "")
    if "dev" in service_name.lower():
        return "dev"
    elif "staging" in service_name.lower():
        return "staging"
    elif service_name:
        return "prod"

    # Local development
    return "dev"


class Settings(BaseSettings):
    """Application settings using Pydantic for validation and environment variable loading"""

    # Application settings
    APP_NAME: str = "L9ani Assistant"
    ENVIRONMENT: str = detect_environment()
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Conversation settings
    DEFAULT_LANGUAGE: str = "en"
    MESSAGE_MAX_LENGTH: int = 1000
    DARIJA_TOKEN_RATIO: float = 0.2
    INTENT_CONFIDENCE_FLOOR: float = 0.3
    REPORT_ASK_OPTIONAL_FIELDS: bool = True

    # Conversation log limits
    CONVERSATION_LOG_MAX_SESSIONS: int = 1000
    CONVERSATION_LOG_MAX_MESSAGES: int = 50

    # Search settings
    MAX_SEARCH_RESULTS: int = 10
    SEARCH_RESULTS_SHOWN: int = 5
    SEARCH_SCORE_FLOOR: float = 1.0
    KEYWORD_MATCH_SCORE: float = 10.0
    COLOR_MATCH_SCORE: float = 20.0
    MIN_KEYWORD_LENGTH: int = 2

    # Front-end routes used in navigation actions
    REPORT_FORM_ROUTE: str = "/report-missing"
    REPORT_SIGHTING_ROUTE: str = "/report-sighting"
    MY_REPORTS_ROUTE: str = "/my-report"
    LOGIN_ROUTE: str = "/login"

    class Config:
        # Load from .env file
        env_file = ".env"
        case_sensitive = False


# Global settings instance
settings = Settings()
