"""Application configuration."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any

import platformdirs
from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

from jjreconcile.core.base import BaseConfig
from jjreconcile.core.log import Logger
from jjreconcile.core.yaml_settings import (
    CONFIG_FILENAME,
    YamlWithIncludesSettingsSource,
)

# Modules available for template substitution in YAML files
# Usage: {platformdirs.user_log_dir}, {os.getcwd}, {Path.cwd}
TEMPLATE_NAMESPACE = {
    'os': os,
    'platformdirs': platformdirs,
    'Path': Path,
}


class RunMode(BaseConfig):
    """How the resolver interacts with the operator.

    Fixed at startup and passed explicitly to every component.
    """

    model_config = ConfigDict(frozen=True)

    safe: bool = Field(
        default=False,
        description="Ask for confirmation before every jj command that "
        "changes the repository",
    )
    auto: bool = Field(
        default=False,
        description=(
            "Resolve empty interdiffs without prompting, use the external "
            "diff tool for interdiffs and pick the first candidate change"
        ),
    )


class JJConfig(BaseConfig):
    """Jujutsu binary and workspace."""

    binary: str = Field(
        default="jj",
        description="jj executable to run",
    )
    workdir: Path = Field(
        default_factory=Path.cwd,
        description="Path to the jj workspace",
    )
    diff_tool: str = Field(
        default=":git",
        description="Value passed to --tool for interdiffs in auto mode",
    )
    timeout: int | None = Field(
        default=None,
        description="Timeout for each jj command in seconds (none by default)",
    )


class Config(BaseConfig):
    """Application configuration loaded from YAML/env/CLI."""

    logger: Logger = Field(
        default=None,
        description="Logger configuration and runtime instance"
    )
    jj: JJConfig = Field(
        default_factory=JJConfig,
        description="Jujutsu settings"
    )
    mode: RunMode = Field(
        default_factory=RunMode,
        description="Default run mode; --safe and --auto override it"
    )
    run_name: str = Field(
        default="resolve",
        description="Name of this run, used for log file paths",
    )
    log_root: Path = Field(
        default_factory=(
            lambda: Path(platformdirs.user_state_dir()) / "jjreconcile"
        ),
        description=(
            "Root directory for all log files "
            "(supports {platformdirs.*} templates)"
        ),
    )
    commands: dict[str, dict[str, str]] = Field(
        default_factory=dict,
        description="Command templates organized by tool (jj)",
    )

    @model_validator(mode='after')
    def _setup_logger(self) -> 'Config':
        """Configure the global logger from the loaded settings."""
        from jjreconcile.core.log import setup_logger
        from jjreconcile.core.yaml_settings import _cleanup_bootstrap_logger

        if self.logger is None:
            self.logger = Logger()

        setup_logger(
            log_root=self.log_root,
            run_name=self.run_name,
            console=self.logger.console,
            otlp=self.logger.otlp,
            file=self.logger.file,
            level=self.logger.level,
        )

        _cleanup_bootstrap_logger()
        return self

    def close(self):
        """Close the global logger, then any other closeable children."""
        from jjreconcile.core.log import logger
        if logger is not None:
            logger.close()

        super().close()


class State(BaseSettings):
    """Settings root: configuration from YAML, .env, env vars and CLI.

    Environment variables use the JJRECONCILE_ prefix with "__"
    between nesting levels, e.g. JJRECONCILE_CONFIG__JJ__BINARY.
    """

    config: Config = Field(
        default_factory=Config,
        description="Application configuration (from YAML/env/CLI)",
    )
    include: list[str] | None = Field(
        default=None,
        description=(
            "Additional YAML files to include and merge. "
            "Use --include on CLI or include: in YAML files."
        ),
    )

    model_config = SettingsConfigDict(
        yaml_file=CONFIG_FILENAME,
        env_file=".env",
        env_prefix="JJRECONCILE_",
        env_nested_delimiter="__",
        cli_parse_args=True,
        cli_implicit_flags=True,
        cli_use_class_docs_for_groups=True,
        arbitrary_types_allowed=True,
        extra='ignore'
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Priority, highest first: init arguments, environment,
        .env, YAML files (packaged defaults included), file secrets."""
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlWithIncludesSettingsSource(settings_cls),
            file_secret_settings,
        )

    @model_validator(mode="after")
    def substitute_templates(self) -> "State":
        """Replace {config.*} and {platformdirs.*} templates in every
        string and Path field."""
        self._substitute_recursive(self)
        return self

    def _substitute_recursive(self, obj: Any) -> None:
        if isinstance(obj, BaseModel):
            if obj.model_config.get("frozen"):
                return
            for field_name in obj.__class__.model_fields:
                value = getattr(obj, field_name)
                new_value = self._substitute_value(value)
                if new_value is not value:
                    setattr(obj, field_name, new_value)
        elif isinstance(obj, dict):
            for key in obj:
                obj[key] = self._substitute_value(obj[key])
        elif isinstance(obj, list):
            for i in range(len(obj)):
                obj[i] = self._substitute_value(obj[i])

    def _substitute_value(self, value: Any) -> Any:
        if isinstance(value, str):
            return self._substitute_string(value)
        elif isinstance(value, Path):
            return Path(self._substitute_string(str(value)))
        elif isinstance(value, (BaseModel, dict, list)):
            self._substitute_recursive(value)
        return value

    def _substitute_string(self, value: str) -> str:
        """Replace {dotted.path} templates with their values.

        Unknown references are left untouched, which keeps the jj
        command placeholders like {revision} intact.

        Examples:
            "{config.jj.workdir}/.jj" -> "/home/user/repo/.jj"
            "{platformdirs.user_log_dir}" -> "~/.local/state/jjreconcile/log"
        """
        def replace_template(match):
            parts = match.group(1).split(".")

            if parts[0] in TEMPLATE_NAMESPACE:
                obj = TEMPLATE_NAMESPACE[parts[0]]
                parts = parts[1:]
            else:
                obj = self

            try:
                for part in parts:
                    obj = getattr(obj, part)

                if callable(obj):
                    obj = obj('jjreconcile', appauthor=False)

                return str(obj)
            except (AttributeError, TypeError):
                return match.group(0)

        return re.sub(r'\{([a-z._]+)\}', replace_template, value)


__all__ = ["State", "Config", "JJConfig", "RunMode"]
