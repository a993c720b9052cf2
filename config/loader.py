"""Tiered settings loader.

Configuration priority (highest to lowest):
1. Explicit overrides (passed by the caller)
2. Environment variables (REWIND_*)
3. Project config (<workspace>/.rewind/settings.json)
4. User config (~/.rewind/settings.json)
5. System defaults (config/defaults/settings.json)
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from config.schema import RewindSettings

logger = logging.getLogger(__name__)

# env var → (section, key)
ENV_OVERRIDES: dict[str, tuple[str, str]] = {
    "REWIND_DB_PATH": ("storage", "db_path"),
    "REWIND_PROJECTS_ROOT": ("versioning", "projects_root"),
    "REWIND_PRIMARY_BRANCH": ("versioning", "primary_branch"),
    "REWIND_HISTORY_DEPTH": ("versioning", "history_depth"),
    "REWIND_AUTHOR_NAME": ("author", "name"),
    "REWIND_AUTHOR_EMAIL": ("author", "email"),
    "REWIND_LOG_LEVEL": ("logging", "level"),
}


class SettingsLoader:
    """Merge settings from defaults, user, project, env and overrides."""

    def __init__(
        self,
        workspace_root: str | Path | None = None,
        env: Mapping[str, str] | None = None,
    ):
        self.workspace_root = Path(workspace_root).resolve() if workspace_root else None
        self._env = env if env is not None else os.environ
        self._system_defaults_dir = Path(__file__).parent / "defaults"

    def load(self, overrides: dict[str, Any] | None = None) -> RewindSettings:
        merged = self._deep_merge(
            self._load_system_defaults(),
            self._load_user_config(),
            self._load_project_config(),
            self._load_env_overrides(),
            overrides or {},
        )
        merged = self._expand_env_vars(merged)
        merged = self._remove_none_values(merged)
        return RewindSettings(**merged)

    def _load_system_defaults(self) -> dict[str, Any]:
        return self._load_json(self._system_defaults_dir / "settings.json")

    def _load_user_config(self) -> dict[str, Any]:
        """Load user config from ~/.rewind/settings.json."""
        return self._load_json(Path.home() / ".rewind" / "settings.json")

    def _load_project_config(self) -> dict[str, Any]:
        if not self.workspace_root:
            return {}
        return self._load_json(self.workspace_root / ".rewind" / "settings.json")

    def _load_env_overrides(self) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for env_name, (section, key) in ENV_OVERRIDES.items():
            value = self._env.get(env_name)
            if value:
                result.setdefault(section, {})[key] = value
        return result

    @staticmethod
    def _load_json(path: Path) -> dict[str, Any]:
        if not path.exists():
            return {}
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid settings file {path}: {exc}") from exc
        if not isinstance(data, dict):
            raise ValueError(f"Invalid settings file {path}: top level must be an object")
        logger.debug("Loaded settings tier from %s", path)
        return data

    def _deep_merge(self, *dicts: dict[str, Any]) -> dict[str, Any]:
        """Deep merge multiple dictionaries. Later dicts override earlier ones."""
        result: dict[str, Any] = {}
        for d in dicts:
            for key, value in d.items():
                if key not in result:
                    result[key] = value
                elif value is None:
                    continue
                elif isinstance(value, dict) and isinstance(result[key], dict):
                    result[key] = self._deep_merge(result[key], value)
                else:
                    result[key] = value
        return result

    def _expand_env_vars(self, obj: Any) -> Any:
        """Recursively expand ${VAR} and ~ in string values."""
        if isinstance(obj, dict):
            return {k: self._expand_env_vars(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [self._expand_env_vars(v) for v in obj]
        if isinstance(obj, str):
            return os.path.expandvars(os.path.expanduser(obj))
        return obj

    def _remove_none_values(self, obj: Any) -> Any:
        """Recursively remove None values to allow Pydantic defaults."""
        if isinstance(obj, dict):
            return {k: self._remove_none_values(v) for k, v in obj.items() if v is not None}
        return obj


def load_settings(
    workspace_root: str | Path | None = None,
    overrides: dict[str, Any] | None = None,
) -> RewindSettings:
    """Convenience wrapper around SettingsLoader."""
    return SettingsLoader(workspace_root=workspace_root).load(overrides)
