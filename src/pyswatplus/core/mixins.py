# SPDX-License-Identifier: GPL-3.0-or-later
# Copyright (C) 2024-2026 pySWATplus Team

"""
Core mixins for pySWATplus modules.

Provides base mixins for logging and configuration access that runners,
loaders and plotters build upon.
"""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional


class LoggingMixin:
    """
    Mixin providing standardized logger access.

    Ensures a logger is always available, defaulting to one named after the
    class if none is explicitly set.
    """

    @property
    def logger(self) -> logging.Logger:
        """Get the logger instance."""
        _logger = getattr(self, '_logger', None)
        if _logger is None:
            module = self.__class__.__module__
            name = self.__class__.__name__
            self._logger = logging.getLogger(f"{module}.{name}")
            return self._logger
        return _logger

    @logger.setter
    def logger(self, value: logging.Logger) -> None:
        """Set the logger instance."""
        self._logger = value


class ConfigMixin:
    """
    Mixin for classes that use configuration settings.

    Provides a standardized way to access configuration regardless of whether
    it's a dictionary or a typed PySWATplusConfig object.
    """

    @property
    def config_dict(self) -> Dict[str, Any]:
        """Configuration as a flat dictionary of uppercase keys."""
        cfg = getattr(self, 'config', None)
        if cfg is None:
            return {}
        to_dict_func = getattr(cfg, 'to_dict', None)
        if callable(to_dict_func):
            return to_dict_func()
        if isinstance(cfg, dict):
            return cfg
        return {}

    def _get_config_value(self, typed_accessor: Callable[[], Any], default: Any = None,
                          dict_key: Optional[str] = None) -> Any:
        """
        Resolve a configuration value from the typed config or the dict form.

        Args:
            typed_accessor: Callable reading from the typed config, e.g.
                ``lambda: self.config.simulation.timeout``
            default: Value returned when nothing is configured
            dict_key: Flat key looked up when the typed access fails

        Returns:
            Resolved configuration value
        """
        try:
            value = typed_accessor()
            if value is not None:
                return value
        except (AttributeError, KeyError, TypeError):
            pass

        if dict_key is not None:
            value = self.config_dict.get(dict_key)
            if value is not None:
                return value
        return default

    @staticmethod
    def ensure_dir(path: Path) -> Path:
        """Create *path* (and parents) if it does not exist and return it."""
        path = Path(path)
        path.mkdir(parents=True, exist_ok=True)
        return path
