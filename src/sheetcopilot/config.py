"""Configuration management for SheetCopilot."""

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel

load_dotenv()


def _parse_cors_origins() -> list[str]:
    """Parse CORS origins from environment variable."""
    cors_env = os.getenv("CORS_ALLOW_ORIGINS")
    if cors_env:
        return cors_env.split(",")
    return ["*"]


class Settings(BaseModel):
    """Application settings."""

    # LLM Provider settings ('openai', 'openrouter' or 'anthropic')
    llm_provider: str = os.getenv("LLM_PROVIDER", "openai")

    # Credentials, supplied out of band (never committed)
    openai_api_key: Optional[str] = os.getenv("OPENAI_API_KEY")
    openai_base_url: str = os.getenv("OPENAI_BASE_URL", "https://api.openai.com/v1")
    openrouter_api_key: Optional[str] = os.getenv("OPENROUTER_API_KEY")
    openrouter_base_url: str = os.getenv("OPENROUTER_BASE_URL", "https://openrouter.ai/api/v1")
    anthropic_api_key: Optional[str] = os.getenv("ANTHROPIC_API_KEY")

    # Completion request settings
    model_name: str = os.getenv("MODEL_NAME", "gpt-4o-mini")
    temperature: float = float(os.getenv("TEMPERATURE", "0.1"))
    max_tokens: int = int(os.getenv("MAX_TOKENS", "500"))
    request_timeout_seconds: float = float(os.getenv("REQUEST_TIMEOUT_SECONDS", "60"))

    # 'plain' sends the prompt only, 'tools' also declares the selection tools
    completion_mode: str = os.getenv("COMPLETION_MODE", "plain")
    max_tool_rounds: int = int(os.getenv("MAX_TOOL_ROUNDS", "3"))

    # Number of raw rows rendered into the prompt
    prompt_sample_rows: int = int(os.getenv("PROMPT_SAMPLE_ROWS", "3"))

    # Google Sheets API credentials
    google_credentials_path: Path = Path(os.getenv("GOOGLE_CREDENTIALS_PATH", "credentials.json"))
    google_token_path: Path = Path(os.getenv("GOOGLE_TOKEN_PATH", "token.json"))

    # Default selection when none is passed on the command line
    spreadsheet_id: Optional[str] = os.getenv("SPREADSHEET_ID")
    selection_range: Optional[str] = os.getenv("SELECTION_RANGE")

    # Server settings
    host: str = os.getenv("HOST", "127.0.0.1")
    port: int = int(os.getenv("PORT", "8000"))
    debug: bool = os.getenv("DEBUG", "false").lower() == "true"

    # CORS settings (comma-separated list of allowed origins, or * for all)
    cors_allow_origins: list[str] = _parse_cors_origins()

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    enable_call_logging: bool = os.getenv("ENABLE_CALL_LOGGING", "false").lower() == "true"
    call_log_path: Path = Path(os.getenv("CALL_LOG_PATH", "logs/llm_calls.jsonl"))


settings = Settings()
