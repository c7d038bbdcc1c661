"""
Configuration loader for the tsbridge system.
Reads settings from YAML file with environment variable substitution.
"""
from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml


# Win32 MessageBox return identifiers (IDOK … IDCONTINUE)
DEFAULT_RESULT_CODES: dict[int, str] = {
    1: "ok",
    2: "cancel",
    3: "abort",
    4: "retry",
    5: "ignore",
    6: "yes",
    7: "no",
    10: "try_again",
    11: "continue",
}


@dataclass
class NativeConfig:
    backend: str = "auto"                                     # "auto" | "com" | "memory" | "null"
    environment_class_id: str = "Microsoft.SMS.TSEnvironment"
    progress_ui_class_id: str = "Microsoft.SMS.TsProgressUI"


@dataclass
class ProgressUiConfig:
    message_caption: str = "Message"
    error_code: int = 1
    error_timeout_seconds: int = 900
    reboot_timeout_seconds: int = 0
    result_codes: dict[int, str] = field(default_factory=lambda: dict(DEFAULT_RESULT_CODES))


@dataclass
class Settings:
    native: NativeConfig = field(default_factory=NativeConfig)
    progress_ui: ProgressUiConfig = field(default_factory=ProgressUiConfig)


_settings: Optional[Settings] = None


def _substitute_env_vars(value: str) -> str:
    """Replace ${VAR_NAME} patterns with environment variable values."""
    pattern = re.compile(r'\$\{(\w+)\}')
    def replacer(match):
        var_name = match.group(1)
        return os.environ.get(var_name, match.group(0))
    return pattern.sub(replacer, value)


def _process_values(obj: Any) -> Any:
    """Recursively substitute env vars in all string values."""
    if isinstance(obj, str):
        return _substitute_env_vars(obj)
    elif isinstance(obj, dict):
        return {k: _process_values(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_process_values(v) for v in obj]
    return obj


def _parse_result_codes(raw: dict[Any, Any]) -> dict[int, str]:
    """YAML keys may arrive as strings; the dialog engine speaks integers."""
    return {int(code): str(button) for code, button in raw.items()}


def load_settings(config_path: str = None) -> Settings:
    """Load settings from YAML file."""
    global _settings

    if config_path is None:
        config_path = os.environ.get(
            "TSBRIDGE_CONFIG",
            str(Path(__file__).parent / "settings.yaml"),
        )

    settings = Settings()

    if Path(config_path).exists():
        with open(config_path) as f:
            raw = yaml.safe_load(f) or {}
        raw = _process_values(raw)

        if "native" in raw:
            nat = raw["native"] or {}
            settings.native = NativeConfig(
                backend=nat.get("backend", settings.native.backend),
                environment_class_id=nat.get(
                    "environment_class_id", settings.native.environment_class_id),
                progress_ui_class_id=nat.get(
                    "progress_ui_class_id", settings.native.progress_ui_class_id),
            )

        if "progress_ui" in raw:
            ui = raw["progress_ui"] or {}
            defaults = ProgressUiConfig()
            settings.progress_ui = ProgressUiConfig(
                message_caption=ui.get("message_caption", defaults.message_caption),
                error_code=int(ui.get("error_code", defaults.error_code)),
                error_timeout_seconds=int(ui.get("error_timeout_seconds", defaults.error_timeout_seconds)),
                reboot_timeout_seconds=int(ui.get("reboot_timeout_seconds", defaults.reboot_timeout_seconds)),
                result_codes=_parse_result_codes(ui.get("result_codes") or defaults.result_codes),
            )

    _settings = settings
    return settings


def get_settings() -> Settings:
    """Return cached settings or load from default path."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop cached settings (for testing)."""
    global _settings
    _settings = None
