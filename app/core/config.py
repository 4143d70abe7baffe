"""
Configuration management using Pydantic settings.
"""
from typing import List, Union
import os
from pydantic import AnyHttpUrl, validator
from pydantic_settings import BaseSettings
from dotenv import load_dotenv
load_dotenv()



class Settings(BaseSettings):
    """Application settings."""

    # API Configuration
    API_V1_PREFIX: str = "/api/v1"
    PROJECT_NAME: str = "Code Review Assistant"
    DEBUG: bool = True
    ENV: str = os.getenv("ENV", "local")

    # Database Configuration
    DATABASE_URL: str = os.getenv("DATABASE_URL", "")

    # LLMs Configuration
    OPENAI_API_KEY: str = os.getenv("OPENAI_API_KEY", "")
    CHAT_MODEL: str = os.getenv("CHAT_MODEL", "gpt-4.1")
    CHAT_TEMPERATURE: float = float(os.getenv("CHAT_TEMPERATURE", 1.0))
    CHAT_MAX_TOKENS: int = int(os.getenv("CHAT_MAX_TOKENS", 32768))
    EMBEDDING_MODEL: str = os.getenv("EMBEDDING_MODEL", "text-embedding-3-small")
    EMBEDDING_DIMENSION: int = int(os.getenv("EMBEDDING_DIMENSION", 1536))

    # LangSmith Tracing Configuration
    LANGSMITH_TRACING: bool = os.getenv("LANGSMITH_TRACING", "false").lower() == "true"
    LANGSMITH_ENDPOINT: str = os.getenv("LANGSMITH_ENDPOINT", "")
    LANGSMITH_API_KEY: str = os.getenv("LANGSMITH_API_KEY", "")
    LANGSMITH_PROJECT: str = os.getenv("LANGSMITH_PROJECT", "")

    # Code Review Configuration
    MAX_FILES_TO_REVIEW: int = int(os.getenv("MAX_FILES_TO_REVIEW", 10))
    CONTENT_BLOCKS_LIMIT: int = int(os.getenv("CONTENT_BLOCKS_LIMIT", 10))
    API_TIMEOUT_SECONDS: int = int(os.getenv("API_TIMEOUT_SECONDS", 120))  # completion calls
    FILE_CHUNK_SIZE: int = int(os.getenv("FILE_CHUNK_SIZE", 5000))
    HTTP_TIMEOUT_SECONDS: float = float(os.getenv("HTTP_TIMEOUT_SECONDS", 30))  # code host / Confluence fetches
    REVIEW_MAX_ATTEMPTS: int = int(os.getenv("REVIEW_MAX_ATTEMPTS", 3))
    REVIEW_BACKOFF_SECONDS: float = float(os.getenv("REVIEW_BACKOFF_SECONDS", 1.0))

    # Guideline Chunking Configuration
    GUIDELINE_CHUNK_SIZE: int = int(os.getenv("GUIDELINE_CHUNK_SIZE", 1000))
    GUIDELINE_MIN_CHUNK_LENGTH: int = int(os.getenv("GUIDELINE_MIN_CHUNK_LENGTH", 30))

    # Code Host Configuration
    GITHUB_TOKEN: str = os.getenv("GITHUB_TOKEN", "")
    GITHUB_API_URL: str = os.getenv("GITHUB_API_URL", "https://api.github.com")
    GITLAB_TOKEN: str = os.getenv("GITLAB_TOKEN", "")
    GITLAB_API_URL: str = os.getenv("GITLAB_API_URL", "https://gitlab.com/api/v4")

    # Confluence Configuration
    CONFLUENCE_BASE_URL: str = os.getenv("CONFLUENCE_BASE_URL", "")
    CONFLUENCE_USERNAME: str = os.getenv("CONFLUENCE_USERNAME", "")
    CONFLUENCE_API_TOKEN: str = os.getenv("CONFLUENCE_API_TOKEN", "")

    # CORS Configuration
    BACKEND_CORS_ORIGINS: Union[List[AnyHttpUrl], str] = "*"

    @validator("BACKEND_CORS_ORIGINS", pre=True)
    def assemble_cors_origins(cls, v):
        if v == "*" or v == ["*"]:
            return "*"
        if isinstance(v, str):
            return [i.strip() for i in v.split(",")]
        return v

    class Config:
        """Pydantic config."""

        env_file = ".env"
        case_sensitive = True
        extra = "ignore"


settings = Settings()
