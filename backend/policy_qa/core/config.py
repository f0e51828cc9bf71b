"""Application configuration handling."""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Mapping

import yaml
from pydantic import BaseModel, Field, field_validator

ENV_PREFIX = "POLQA_"
DEFAULT_CONFIG_PATH = Path("~/.config/policy-qa/config.yaml")

logger = logging.getLogger(__name__)

_YAML_KEY_MAP: Mapping[tuple[str, ...], str] = {
    ("openai", "api_key"): "openai_api_key",
    ("openai", "embedding_api_key"): "embedding_api_key",
    ("openai", "chat_api_key"): "chat_api_key",
    ("openai", "chat_model"): "chat_model",
    ("openai", "embedding_model"): "embedding_model",
    ("openai", "temperature"): "temperature",
    ("openai", "embedding_batch_size"): "embedding_batch_size",
    ("qdrant", "url"): "qdrant_url",
    ("qdrant", "collection"): "collection",
    ("qdrant", "vector_size"): "vector_size",
    ("ingest", "docs_dir"): "docs_dir",
    ("ingest", "max_chars"): "chunk_max_chars",
    ("retrieval", "top_k"): "top_k",
}


class Settings(BaseModel):
    """Runtime configuration loaded from YAML file and environment variables."""

    openai_api_key: str | None = None
    embedding_api_key: str | None = None
    chat_api_key: str | None = None
    chat_model: str = "gpt-4o-mini"
    embedding_model: str = "text-embedding-3-small"
    temperature: float = Field(default=0.2, ge=0.0, le=2.0)
    embedding_batch_size: int = Field(default=64, gt=0)
    qdrant_url: str = "http://localhost:6333"
    collection: str = "company_policies"
    vector_size: int = Field(default=1536, gt=0)
    docs_dir: Path = Field(default=Path("docs"))
    chunk_max_chars: int = Field(default=900, gt=0)
    top_k: int = Field(default=5, ge=1, le=50)

    model_config = {
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("docs_dir", mode="before")
    @classmethod
    def _expand_docs_dir(cls, value: Any) -> Path:
        if isinstance(value, Path):
            return value.expanduser()
        if isinstance(value, str):
            return Path(value).expanduser()
        raise TypeError("docs_dir must be a path or string")

    @field_validator("openai_api_key", "embedding_api_key", "chat_api_key", mode="before")
    @classmethod
    def _blank_key_is_missing(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @property
    def resolved_embedding_key(self) -> str | None:
        return self.embedding_api_key or self.openai_api_key

    @property
    def resolved_chat_key(self) -> str | None:
        return self.chat_api_key or self.openai_api_key

    @classmethod
    def from_yaml(cls, path: Path | None = None) -> "Settings":
        """Build settings from the YAML sections, then the environment.

        Environment values win over the file. Unknown YAML keys are logged
        and ignored.
        """
        data: dict[str, Any] = {}
        config_path = _config_path(path)
        if config_path is not None and config_path.is_file():
            data.update(_read_sections(config_path))
        data.update(_read_environment(os.environ))
        return cls(**data)


# Conventional variables of the services themselves; the prefixed form wins.
_ENV_ALIASES: Mapping[str, str] = {
    "OPENAI_API_KEY": "openai_api_key",
    "QDRANT_URL": "qdrant_url",
}


def _config_path(path: Path | None) -> Path | None:
    if path is not None:
        return path.expanduser()
    if os.environ.get(f"{ENV_PREFIX}CONFIG"):
        return Path(os.environ[f"{ENV_PREFIX}CONFIG"]).expanduser()
    default = DEFAULT_CONFIG_PATH.expanduser()
    return default if default.is_file() else None


def _read_sections(config_path: Path) -> dict[str, Any]:
    """Map ``openai``/``qdrant``/``ingest``/``retrieval`` sections onto fields."""
    with config_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, Mapping):
        raise ValueError(f"{config_path}: top level must be a mapping")

    fields: dict[str, Any] = {}
    unknown: list[str] = []
    for section, values in raw.items():
        if not isinstance(values, Mapping):
            # Flat form: ``collection: handbook`` at the top level.
            if section in Settings.model_fields:
                fields[section] = values
            else:
                unknown.append(str(section))
            continue
        for key, value in values.items():
            field_name = _YAML_KEY_MAP.get((section, key))
            if field_name is None:
                unknown.append(f"{section}.{key}")
            else:
                fields[field_name] = value
    if unknown:
        logger.warning("Ignoring unknown keys in %s: %s", config_path, ", ".join(sorted(unknown)))
    return fields


def _read_environment(environ: Mapping[str, str]) -> dict[str, Any]:
    fields = {
        field_name: environ[name]
        for name, field_name in _ENV_ALIASES.items()
        if environ.get(name)
    }
    for name, value in environ.items():
        if not name.startswith(ENV_PREFIX):
            continue
        field_name = name[len(ENV_PREFIX) :].lower()
        if field_name in Settings.model_fields:
            fields[field_name] = value
    return fields


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached settings accessor for dependency injection."""
    return Settings.from_yaml()


__all__ = ["Settings", "get_settings"]
