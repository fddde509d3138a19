"""
Pydantic configuration schema for CraftAgent.

This module defines all configuration models with validation.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from craftagent.agent.loop import DEFAULT_VOLATILE_TOOLS
from craftagent.agent.models import LoopConfig
from craftagent.functions.models import GameMode

# =============================================================================
# Model Service Configuration
# =============================================================================


class LLMConfig(BaseModel):
    """Model service connection."""

    model_config = ConfigDict(extra="allow")

    model: str = "openai/gpt-oss-20b"
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    api_base: Optional[str] = None  # Self-hosted OpenAI-compatible endpoint
    api_key: Optional[str] = None  # Falls back to the provider's env var
    timeout: Optional[float] = Field(default=None, gt=0)


# =============================================================================
# Agent Configuration
# =============================================================================


class AgentSettings(LoopConfig):
    """Bot identity, capability set and conversation loop settings."""

    name: str = Field(default="Bot", min_length=1)
    groups: list[str] = Field(default_factory=list)  # Enabled capability groups
    game_mode: GameMode = GameMode.SURVIVAL  # Used when no world is connected

    def loop_config(self) -> LoopConfig:
        """The loop-only part of these settings."""
        return LoopConfig.model_validate(self.model_dump(include=set(LoopConfig.model_fields)))


class CoalescerConfig(BaseModel):
    """Chat debounce settings."""

    window_seconds: float = Field(default=3.0, ge=0.0)


class MemoryConfig(BaseModel):
    """Conversation persistence."""

    enable: bool = True
    path: Optional[Path] = None  # Defaults to <CRAFTAGENT_HOME>/bots
    volatile_tools: list[str] = Field(default_factory=lambda: list(DEFAULT_VOLATILE_TOOLS))


class LoggingConfig(BaseModel):
    """Logging output."""

    level: Literal["debug", "info", "warning", "error"] = "info"


# =============================================================================
# Root Configuration
# =============================================================================


class Config(BaseModel):
    """Root configuration model for CraftAgent."""

    model_config = ConfigDict(extra="allow")

    llm: LLMConfig = Field(default_factory=LLMConfig)
    agent: AgentSettings = Field(default_factory=AgentSettings)
    coalescer: CoalescerConfig = Field(default_factory=CoalescerConfig)
    memory: MemoryConfig = Field(default_factory=MemoryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
