# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Simulation configuration model.

Contains SimulationConfig describing a SWAT+ run: project location,
executable, simulation period, requested outputs and parameter sets.
"""

from datetime import date
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator

from ...constants import INTERVAL_ALIASES, OUTPUT_INTERVALS
from .base import FROZEN_CONFIG


class OutputSpec(BaseModel):
    """One entry of the OUTPUTS mapping (label -> file/variable/unit)."""
    model_config = FROZEN_CONFIG

    file: str
    variable: str
    unit: Union[int, str, List[int]] = 1


class SimulationConfig(BaseModel):
    """SWAT+ simulation settings"""
    model_config = FROZEN_CONFIG

    project_path: Optional[Path] = Field(default=None, alias='PROJECT_PATH')
    executable: Optional[str] = Field(default=None, alias='SWATPLUS_EXE')
    run_path: Optional[Path] = Field(default=None, alias='RUN_PATH')
    timeout: int = Field(default=3600, alias='SWATPLUS_TIMEOUT', ge=1, le=604800)

    start_date: Optional[date] = Field(default=None, alias='START_DATE')
    end_date: Optional[date] = Field(default=None, alias='END_DATE')
    years_skip: Optional[int] = Field(default=None, alias='YEARS_SKIP', ge=0)
    start_date_print: Optional[date] = Field(default=None, alias='START_DATE_PRINT')
    output_interval: str = Field(default='d', alias='OUTPUT_INTERVAL')

    outputs: Dict[str, OutputSpec] = Field(default_factory=dict, alias='OUTPUTS')
    parameters: Dict[str, Any] = Field(default_factory=dict, alias='PARAMETERS')
    run_index: Optional[List[int]] = Field(default=None, alias='RUN_INDEX')

    save_path: Optional[Path] = Field(default=None, alias='SAVE_PATH')
    save_file: Optional[str] = Field(default=None, alias='SAVE_FILE')
    add_date: bool = Field(default=True, alias='ADD_DATE')
    refresh: bool = Field(default=True, alias='REFRESH')
    keep_folder: bool = Field(default=False, alias='KEEP_FOLDER')
    quiet: bool = Field(default=False, alias='QUIET')

    @field_validator('output_interval', mode='before')
    @classmethod
    def normalize_interval(cls, v):
        """Map long interval names to their single letter code."""
        if not isinstance(v, str):
            return v
        v = v.strip().lower()
        v = INTERVAL_ALIASES.get(v, v)
        if v not in OUTPUT_INTERVALS:
            raise ValueError(
                f"OUTPUT_INTERVAL must be one of {sorted(OUTPUT_INTERVALS)}, got '{v}'"
            )
        return v

    @field_validator('project_path', 'run_path', 'save_path', mode='before')
    @classmethod
    def expand_paths(cls, v):
        """Expand user home in paths."""
        if v is None or v == '':
            return None
        return Path(v).expanduser()

    @model_validator(mode='after')
    def check_period(self):
        """End date must not precede the start date."""
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError(
                f"END_DATE ({self.end_date}) is before START_DATE ({self.start_date})"
            )
        return self
