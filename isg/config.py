"""
İSG Risk Engine Configuration — pydantic-settings based.

All settings are read from environment variables or .env file.
The Groq API key is optional: without it the AI hazard analysis is disabled
and everything else keeps working.
"""

from pydantic_settings import BaseSettings
from pydantic import Field


class Settings(BaseSettings):
    """Application-wide settings sourced from environment variables."""

    # ── LLM ──
    groq_api_key: str = Field(
        default="", description="Groq API key for the hazard analysis gateway"
    )
    isg_model: str = Field(
        default="meta-llama/llama-4-scout-17b-16e-instruct",
        description="Model identifier for Groq completions",
    )
    llm_timeout: int = Field(default=55, description="LLM request timeout in seconds")
    llm_max_retries: int = Field(default=3, description="Max LLM retry attempts")
    llm_temperature: float = Field(default=0.2, description="LLM temperature")
    llm_max_tokens: int = Field(
        default=2000, description="Completion token cap per hazard analysis"
    )
    photo_delay_seconds: float = Field(
        default=1.5, description="Pause between photos of a batch analysis (rate limit)"
    )

    # ── Drafts ──
    draft_dir: str = Field(
        default="drafts", description="Directory holding persisted wizard drafts"
    )
    drafts_enabled: bool = Field(
        default=True,
        description="Feature flag: autosave wizard sessions after every change",
    )

    # ── Uploads ──
    max_logo_bytes: int = Field(
        default=2 * 1024 * 1024, description="Max decoded size of an uploaded logo"
    )

    # ── Server ──
    port: int = Field(default=5001, description="Server port")
    host: str = Field(default="0.0.0.0", description="Server bind host")
    cors_origins: list[str] = Field(
        default=["*"], description="Allowed CORS origins"
    )

    # ── Audit ──
    audit_log_path: str = Field(
        default="submissions.jsonl",
        description="Path to JSON-lines audit log of submitted wizards",
    )

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }


# Singleton imported by other modules
settings = Settings()
