# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Demo data configuration model.
"""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator

from .base import FROZEN_CONFIG

DEFAULT_DEMO_URL = 'https://raw.githubusercontent.com/chrisschuerz/SWATdata/master/inst/extdata'


class DemoConfig(BaseModel):
    """Where demo datasets are downloaded from and cached"""
    model_config = FROZEN_CONFIG

    url: str = Field(default=DEFAULT_DEMO_URL, alias='DEMO_DATA_URL')
    version: str = Field(default='60.5.7', alias='DEMO_VERSION')
    cache_dir: Path = Field(default=Path('~/.cache/pyswatplus'), alias='DEMO_CACHE_DIR',
                            validate_default=True)
    max_retries: int = Field(default=3, alias='DEMO_MAX_RETRIES', ge=1, le=10)
    retry_delay: float = Field(default=5.0, alias='DEMO_RETRY_DELAY', ge=0)
    timeout: int = Field(default=120, alias='DEMO_TIMEOUT', ge=1)

    @field_validator('url')
    @classmethod
    def strip_trailing_slash(cls, v):
        return v.rstrip('/')

    @field_validator('cache_dir', mode='before')
    @classmethod
    def expand_cache_dir(cls, v):
        return Path(v).expanduser()
