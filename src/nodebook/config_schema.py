# ─────────────────────────────────────────────────────────────────────
# Nodebook Core — Configuration Schema
# © 1998–2026 Miroslav Šotek. All rights reserved.
# ─────────────────────────────────────────────────────────────────────
"""
Schema validation for engine, ledger and logging settings using Pydantic.
Malformed settings fail at load time with a ``ValidationError``.
"""

import json
from pathlib import Path
from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

# All sub-models use extra='allow' so that extension fields pass through
# validation without being silently dropped.

PERIODS = ("daily", "weekly", "monthly", "categories")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class PetriParams(BaseModel):
    model_config = ConfigDict(extra='allow')
    initial_tokens: float = Field(default=1, ge=0)
    balance_epsilon: float = Field(default=1e-3, gt=0)
    monetary_decimals: int = Field(default=2, ge=0)
    max_reachable_states: int = Field(default=10_000, gt=0)


class LedgerParams(BaseModel):
    model_config = ConfigDict(extra='allow')
    default_period: str = "monthly"
    uncategorized_label: str = "uncategorized"

    @field_validator("default_period")
    @classmethod
    def known_period(cls, v: str):
        if v not in PERIODS:
            raise ValueError(f"default_period must be one of {', '.join(PERIODS)}")
        return v


class LoggingParams(BaseModel):
    model_config = ConfigDict(extra='allow')
    level: str = "WARNING"
    json_output: bool = False
    log_file: Optional[str] = None

    @field_validator("level")
    @classmethod
    def known_level(cls, v: str):
        upper = v.upper()
        if upper not in LOG_LEVELS:
            raise ValueError(f"level must be one of {', '.join(LOG_LEVELS)}")
        return upper


class NodebookConfig(BaseModel):
    model_config = ConfigDict(extra='allow')

    petri: PetriParams = Field(default_factory=PetriParams)
    ledger: LedgerParams = Field(default_factory=LedgerParams)
    logging: LoggingParams = Field(default_factory=LoggingParams)


def validate_config(config_dict: dict) -> NodebookConfig:
    """Validate a raw configuration dictionary and return a validated NodebookConfig."""
    return NodebookConfig.model_validate(config_dict)


def load_config(path: Union[str, Path]) -> NodebookConfig:
    """Read a JSON configuration file and validate it."""
    with open(path, "r", encoding="utf-8") as f:
        return validate_config(json.load(f))
