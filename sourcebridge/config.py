from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from sourcebridge.constants import DEFAULT_DESIRED_BUNDLE_SIZE_BYTES, DEFAULT_LOG_LEVEL
from sourcebridge.errors import ConfigError


@dataclass(slots=True)
class PipelineOptions:
    """Free-form pipeline options handed through to source implementations."""

    values: dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)


@dataclass(slots=True)
class SplitConfig:
    default_desired_bundle_size_bytes: int = DEFAULT_DESIRED_BUNDLE_SIZE_BYTES


@dataclass(slots=True)
class SourcePluginConfig:
    plugins: list[str] = field(default_factory=list)


@dataclass(slots=True)
class LoggingConfig:
    level: str = DEFAULT_LOG_LEVEL


@dataclass(slots=True)
class BridgeConfig:
    pipeline: PipelineOptions = field(default_factory=PipelineOptions)
    split: SplitConfig = field(default_factory=SplitConfig)
    sources: SourcePluginConfig = field(default_factory=SourcePluginConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @staticmethod
    def default() -> BridgeConfig:
        return BridgeConfig()


def load_config(path: str | Path | None) -> BridgeConfig:
    if path is None:
        return BridgeConfig.default()

    config_path = Path(path)
    if not config_path.exists():
        return BridgeConfig.default()

    with config_path.open("r", encoding="utf-8") as fh:
        raw = yaml.safe_load(fh) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"Config root must be a mapping: {config_path}")

    pipeline_raw = raw.get("pipeline", {}) or {}
    split_raw = raw.get("split", {}) or {}
    sources_raw = raw.get("sources", {}) or {}
    logging_raw = raw.get("logging", {}) or {}

    bundle_size = int(
        split_raw.get("default_desired_bundle_size_bytes", DEFAULT_DESIRED_BUNDLE_SIZE_BYTES)
    )
    if bundle_size <= 0:
        raise ConfigError(
            f"split.default_desired_bundle_size_bytes must be positive, got {bundle_size}"
        )

    return BridgeConfig(
        pipeline=PipelineOptions(values=dict(pipeline_raw.get("options", {}) or {})),
        split=SplitConfig(default_desired_bundle_size_bytes=bundle_size),
        sources=SourcePluginConfig(plugins=list(sources_raw.get("plugins", []) or [])),
        logging=LoggingConfig(level=str(logging_raw.get("level", DEFAULT_LOG_LEVEL))),
    )


def dump_default_config(path: str | Path) -> None:
    cfg = BridgeConfig.default()
    payload: dict[str, Any] = {
        "pipeline": {"options": dict(cfg.pipeline.values)},
        "split": {
            "default_desired_bundle_size_bytes": cfg.split.default_desired_bundle_size_bytes,
        },
        "sources": {"plugins": cfg.sources.plugins},
        "logging": {"level": cfg.logging.level},
    }
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with out.open("w", encoding="utf-8") as fh:
        yaml.safe_dump(payload, fh, sort_keys=False)
