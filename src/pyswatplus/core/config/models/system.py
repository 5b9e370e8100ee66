# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
System configuration model.

Contains SystemConfig for system-level settings: logging and parallelism.
"""

from pathlib import Path
from typing import Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from .base import FROZEN_CONFIG


class SystemConfig(BaseModel):
    """System-level configuration: logging, parallelism"""
    model_config = FROZEN_CONFIG

    n_thread: int = Field(default=1, validation_alias=AliasChoices('N_THREAD', 'NUM_PROCESSES'),
                          serialization_alias='N_THREAD')
    log_level: Literal['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'] = Field(default='INFO', alias='LOG_LEVEL')
    log_to_file: bool = Field(default=False, alias='LOG_TO_FILE')
    log_file: Optional[Path] = Field(default=None, alias='LOG_FILE')
    log_format: str = Field(default='detailed', alias='LOG_FORMAT')

    @field_validator('log_level', mode='before')
    @classmethod
    def normalize_log_level(cls, v):
        """Accept lowercase level names."""
        if isinstance(v, str):
            return v.upper()
        return v

    @field_validator('n_thread')
    @classmethod
    def validate_positive_integers(cls, v, info):
        """Ensure positive integers"""
        if v < 1:
            raise ValueError(f"{info.field_name} must be at least 1, got {v}")
        return v
