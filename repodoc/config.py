"""Configuration loading for repodoc (.repodoc.yml)."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from datetime import date
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

CONFIG_FILENAME = ".repodoc.yml"
FLATTEN_POLICIES = ("continue", "abort")

ENV_DESTINATION_KEYS = ("REPODOC_DESTINATION", "documentdestination")
ENV_TOKEN_KEYS = ("REPODOC_GIT_TOKEN", "GITHUB_TOKEN")


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class LLMConfig:
    """Generation backend settings from .repodoc.yml."""

    model: Optional[str] = None
    base_url: Optional[str] = None
    api_key: Optional[str] = None
    api_version: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[int] = None
    request_timeout: Optional[float] = None


@dataclass
class AcquisitionConfig:
    """Clone and flattening behaviour."""

    token: Optional[str] = None
    flatten_policy: str = "continue"


@dataclass
class PromptConfig:
    """Template lookup and placeholder handling."""

    templates_dir: Optional[Path] = None
    strict_placeholders: bool = False


@dataclass
class GenerationConfig:
    """Per-document failure handling."""

    continue_on_class_error: bool = True


@dataclass
class RepoDocConfig:
    """Represents the high-level settings defined in .repodoc.yml."""

    root: Path
    destination: Optional[Path] = None
    acquisition: AcquisitionConfig = field(default_factory=AcquisitionConfig)
    llm: LLMConfig = field(default_factory=LLMConfig)
    prompts: PromptConfig = field(default_factory=PromptConfig)
    generation: GenerationConfig = field(default_factory=GenerationConfig)


def load_config(config_path: Path, *, environ: Mapping[str, str] | None = None) -> RepoDocConfig:
    """Load configuration from disk and apply environment overrides."""
    env = os.environ if environ is None else environ
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    data: Dict[str, Any] = {}
    if config_file.exists():
        data = _read_config(config_file)

    destination_str = _as_str(data.get("destination"))
    destination = _resolve_path(root, destination_str) if destination_str else None

    acquisition_data = _as_dict(data.get("acquisition"))
    policy = (_as_str(acquisition_data.get("flatten_policy")) or "continue").lower()
    if policy not in FLATTEN_POLICIES:
        raise ConfigError(
            f"acquisition.flatten_policy must be one of {', '.join(FLATTEN_POLICIES)} (got '{policy}')"
        )
    acquisition = AcquisitionConfig(
        token=_as_str(acquisition_data.get("token")),
        flatten_policy=policy,
    )

    llm_data = _as_dict(data.get("llm"))
    llm = LLMConfig(
        model=_as_str(llm_data.get("model")),
        base_url=_as_str(llm_data.get("base_url")),
        api_key=_as_str(llm_data.get("api_key")),
        api_version=_as_str(llm_data.get("api_version")),
        temperature=_as_float(llm_data.get("temperature")),
        max_tokens=_as_int(llm_data.get("max_tokens")),
        request_timeout=_as_float(llm_data.get("request_timeout")),
    )

    prompt_data = _as_dict(data.get("prompts"))
    templates_dir_str = _as_str(prompt_data.get("templates_dir"))
    prompts = PromptConfig(
        templates_dir=_resolve_path(root, templates_dir_str) if templates_dir_str else None,
        strict_placeholders=bool(_as_bool(prompt_data.get("strict_placeholders"))),
    )

    generation_data = _as_dict(data.get("generation"))
    continue_on_error = _as_bool(generation_data.get("continue_on_class_error"))
    generation = GenerationConfig(
        continue_on_class_error=True if continue_on_error is None else continue_on_error
    )

    env_destination = _first_env_value(env, ENV_DESTINATION_KEYS)
    if env_destination:
        destination = Path(env_destination).expanduser()
    if acquisition.token is None:
        acquisition.token = _first_env_value(env, ENV_TOKEN_KEYS)

    return RepoDocConfig(
        root=root,
        destination=destination,
        acquisition=acquisition,
        llm=llm,
        prompts=prompts,
        generation=generation,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _resolve_path(root: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else (root / path)


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigError(f"{path.name} must contain a mapping at the root")
    return loaded


def _first_env_value(env: Mapping[str, str], keys: tuple[str, ...]) -> Optional[str]:
    for key in keys:
        value = env.get(key)
        if value and value.strip():
            return value.strip()
    return None


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    # YAML turns unquoted values such as 2024-02-01 into dates.
    if isinstance(value, date):
        return value.isoformat()
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


__all__ = [
    "AcquisitionConfig",
    "CONFIG_FILENAME",
    "ConfigError",
    "GenerationConfig",
    "LLMConfig",
    "PromptConfig",
    "RepoDocConfig",
    "load_config",
]
