"""InmaskSettings: CLI flags, env vars and ``inmask.toml`` in one object.

Sources, highest priority first:

1. keyword arguments (the global CLI flags)
2. ``INMASK_*`` environment variables, ``__`` for nesting
   (``INMASK_LOCALE__DECIMAL_SEPARATOR=,``)
3. the ``inmask.toml`` that applies to the project
4. defaults baked into :mod:`inmask.config.models`

Sections are merged key by key, so an env var can override a single
``[locale]`` entry while the rest still comes from the file.
"""

from __future__ import annotations

from contextvars import ContextVar
from pathlib import Path
from typing import Any

import click
from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from inmask.config.discovery import find_config, read_config
from inmask.config.models import BUILTIN_PRESETS, LocaleConfig, MaskPreset, PluginsConfig

# Config file for the settings object currently being built.  pydantic-settings
# builds its sources inside the class, so the path cannot be passed in.
_active_config: ContextVar[Path | None] = ContextVar("inmask_active_config", default=None)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Top-level tables of ``inmask.toml`` as a settings source."""

    def __init__(self, settings_cls: type[BaseSettings], path: Path | None) -> None:
        super().__init__(settings_cls)
        self._tables: dict[str, Any] = read_config(path) if path is not None else {}

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        return self._tables.get(field_name), field_name, field_name in self._tables

    def __call__(self) -> dict[str, Any]:
        return dict(self._tables)


class InmaskSettings(BaseSettings):
    """Frozen settings shared by the CLI, the services and the plugins.

    Attributes:
        project_root: Directory holding ``inmask.toml`` (or the working
            directory when there is none).  Local plugins live below it.
        config_path: The config file that was read, if any.
        masks: User presets from ``[masks.<name>]``.  A user preset named
            like a built-in one replaces it.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "INMASK_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    locale: LocaleConfig = Field(default_factory=LocaleConfig)
    masks: dict[str, MaskPreset] = Field(default_factory=dict)
    plugins: PluginsConfig = Field(default_factory=PluginsConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Flags, then env vars, then the TOML file.  No dotenv or secrets."""
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, _active_config.get()),
        )

    def presets(self) -> dict[str, MaskPreset]:
        """Every preset name available to ``--preset``."""
        return {**BUILTIN_PRESETS, **self.masks}

    @property
    def plugin_dir(self) -> Path:
        return self.project_root / self.plugins.local_dir

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> InmaskSettings:
        """Build settings for one CLI invocation.

        An explicit *config_path* must exist.  Without one the config is
        discovered from *project_root* (or the working directory), and the
        project root defaults to the directory the config was found in.
        """
        if config_path:
            toml_path: Path | None = Path(config_path)
            if not toml_path.is_file():
                msg = f"Config file not found: {config_path}"
                raise click.ClickException(msg)
        else:
            toml_path = find_config(project_root)

        if project_root is None:
            project_root = toml_path.parent if toml_path is not None else Path.cwd()

        token = _active_config.set(toml_path)
        try:
            return cls(project_root=project_root, config_path=toml_path, **cli_flags)
        finally:
            _active_config.reset(token)
