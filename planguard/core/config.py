"""
Configuration Settings.

This module defines the planguard configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.

Settings are read once, when the agent is wired together by
``planguard.agent_core.factory``; the core components themselves only take
plain constructor arguments.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

ToneName = Literal["formal", "casual", "technical"]

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class GuardrailConfig(BaseModel):
    """Guardrail configuration."""

    allowed_directories: Optional[List[str]] = Field(
        default=None,
        alias="PLANGUARD_ALLOWED_DIRECTORIES",
        description="Directories file paths must stay within; unset disables the file path guardrail",
    )
    file_tools: Optional[List[str]] = Field(
        default=None,
        alias="PLANGUARD_FILE_TOOLS",
        description="Only check these tools for path parameters (default: every tool)",
    )
    max_tool_calls: Optional[int] = Field(
        default=None,
        ge=0,
        alias="PLANGUARD_MAX_TOOL_CALLS",
        description="Maximum tool calls per window; unset disables the rate limit guardrail",
    )
    rate_window_seconds: float = Field(
        default=60.0, gt=0, alias="PLANGUARD_RATE_WINDOW_SECONDS", description="Rate limit window length in seconds"
    )

    model_config = {"populate_by_name": True}


class RuleConfig(BaseModel):
    """Planning rule configuration."""

    tone: Optional[ToneName] = Field(
        default=None, alias="PLANGUARD_TONE", description="Response tone (formal, casual, technical)"
    )
    max_response_words: Optional[int] = Field(
        default=None, gt=0, alias="PLANGUARD_MAX_RESPONSE_WORDS", description="Word limit for responses"
    )

    model_config = {"populate_by_name": True}


class ExecutorConfig(BaseModel):
    """Plan executor configuration."""

    continue_on_tool_error: bool = Field(
        default=False,
        alias="PLANGUARD_CONTINUE_ON_TOOL_ERROR",
        description="Run remaining steps after a tool failure and report partial_failure",
    )

    model_config = {"populate_by_name": True}


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    planguard settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="PLANGUARD_LOG_LEVEL",
    )
    log_format: str = Field(
        default="detailed",
        description="Log line format (simple, detailed, json)",
        alias="PLANGUARD_LOG_FORMAT",
    )
    log_file_dir: str = Field(
        default="logs",
        description="Directory for the log file when file logging is enabled",
        alias="PLANGUARD_LOG_FILE_DIR",
    )
    enable_file_logging: bool = Field(
        default=False,
        description="Also write logs to <log_file_dir>/planguard.log",
        alias="PLANGUARD_ENABLE_FILE_LOGGING",
    )

    # =====================================================================
    # Model Configuration
    # =====================================================================
    model: str = Field(
        default="openai:gpt-4o",
        description="pydantic-ai model identifier used by the planner",
        alias="PLANGUARD_MODEL",
    )

    # =====================================================================
    # Guardrail Configuration
    # =====================================================================
    allowed_directories: Optional[List[str]] = Field(default=None, alias="PLANGUARD_ALLOWED_DIRECTORIES")
    file_tools: Optional[List[str]] = Field(default=None, alias="PLANGUARD_FILE_TOOLS")
    max_tool_calls: Optional[int] = Field(default=None, ge=0, alias="PLANGUARD_MAX_TOOL_CALLS")
    rate_window_seconds: float = Field(default=60.0, gt=0, alias="PLANGUARD_RATE_WINDOW_SECONDS")

    # =====================================================================
    # Rule Configuration
    # =====================================================================
    tone: Optional[ToneName] = Field(default=None, alias="PLANGUARD_TONE")
    max_response_words: Optional[int] = Field(default=None, gt=0, alias="PLANGUARD_MAX_RESPONSE_WORDS")

    # =====================================================================
    # Executor Configuration
    # =====================================================================
    continue_on_tool_error: bool = Field(default=False, alias="PLANGUARD_CONTINUE_ON_TOOL_ERROR")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def guardrails(self) -> GuardrailConfig:
        """Get guardrail configuration."""
        return GuardrailConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def rules(self) -> RuleConfig:
        """Get planning rule configuration."""
        return RuleConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def executor(self) -> ExecutorConfig:
        """Get executor configuration."""
        return ExecutorConfig.model_validate(self.model_dump(by_alias=True))
