"""Unified settings — init kwargs, env vars, and pyproject.toml in one object.

Priority chain (highest to lowest):
  1. Init kwargs  — passed by the caller
  2. Env vars     — ``PARAMCOERCE_*`` prefix
  3. TOML table   — ``[tool.paramcoerce]`` in the discovered pyproject.toml
  4. Code defaults

Uses Pydantic Settings v2 with a custom :class:`TomlSettingsSource` fed by
:mod:`paramcoerce.config.discovery`.
"""

from __future__ import annotations

import threading
from pathlib import Path
from typing import Any

from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from paramcoerce.config.discovery import find_pyproject, load_tool_table


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from the ``[tool.paramcoerce]`` table."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = load_tool_table(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class CoerceSettings(BaseSettings):
    """Settings for the process-wide coercion engine.

    Attributes:
        strict: Raise :class:`~paramcoerce.errors.ConversionFailed` when a
            conversion method raises, instead of returning None.
        load_plugins: Discover ``paramcoerce.plugins`` entry points when the
            default engine is built.
        setup_logging: Let the default engine install the structlog handler
            on the ``paramcoerce`` logger when it is built.
        verbose: DEBUG-level logging for the ``paramcoerce`` logger.
        log_json: JSON log lines instead of console rendering.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "PARAMCOERCE_",
    }

    strict: bool = False
    load_plugins: bool = True
    setup_logging: bool = False
    verbose: bool = False
    log_json: bool = False

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def discover(cls, start: Path | None = None, **overrides: Any) -> CoerceSettings:
        """Build settings from the pyproject.toml nearest to *start*.

        *overrides* take precedence over every other source.
        """
        _tls.toml_path = find_pyproject(start)
        try:
            return cls(**overrides)
        finally:
            _tls.toml_path = None
