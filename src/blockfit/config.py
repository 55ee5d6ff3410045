"""
Engine settings.

Settings can be built in code or loaded from a YAML file:

    max_generation_retries: 200
    max_worker_retries: 10
    worker_timeout: 30
    seed: 42
"""

from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import BaseModel, Field

from .constants import (
    MAX_GENERATION_RETRIES,
    MAX_WORKER_RETRIES,
    PARTITION_MAX_STEPS,
    GROWTH_ATTEMPTS,
    WORKER_TIMEOUT,
)


class EngineSettings(BaseModel):
    """Tunable bounds for generation and the worker boundary."""
    max_generation_retries: int = Field(default=MAX_GENERATION_RETRIES, ge=1)
    max_worker_retries: int = Field(default=MAX_WORKER_RETRIES, ge=0)
    partition_max_steps: int = Field(default=PARTITION_MAX_STEPS, ge=1)
    growth_attempts: int = Field(default=GROWTH_ATTEMPTS, ge=1)
    worker_timeout: float = Field(default=WORKER_TIMEOUT, gt=0)
    allow_free_form: bool = False  # accept grown pieces that match no catalog shape
    seed: Optional[int] = None


def load_settings(config_path: Union[str, Path]) -> EngineSettings:
    """Load engine settings from a YAML file."""
    path = Path(config_path)

    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(path) as f:
        data = yaml.safe_load(f) or {}

    return EngineSettings(**data)
