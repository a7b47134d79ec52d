"""Persistent app settings schema and load/save helpers."""

from __future__ import annotations

import json
import os
import platform
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any


CONFIG_VERSION = 1

MIN_SIDE = 16
MAX_SIDE = 8192


@dataclass
class OutputConfig:
    width: int = 1080
    height: int = 1920


@dataclass
class FontsConfig:
    title_font: str | None = None
    provider_font: str | None = None


@dataclass
class RenderConfig:
    max_workers: int = 4
    provider_fallback: str = "Provider"


@dataclass
class DiagnosticsConfig:
    keep_log_files: int = 7


@dataclass
class AppConfig:
    config_version: int = CONFIG_VERSION
    output: OutputConfig = field(default_factory=OutputConfig)
    fonts: FontsConfig = field(default_factory=FontsConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    diagnostics: DiagnosticsConfig = field(default_factory=DiagnosticsConfig)


def config_root() -> Path:
    system = platform.system()
    if system == "Windows":
        base = Path(os.environ.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return base / "Thumbcard"
    if system == "Darwin":
        return Path.home() / "Library" / "Application Support" / "Thumbcard"
    return Path.home() / ".config" / "thumbcard"


def config_path() -> Path:
    return config_root() / "config.json"


def _merge(dataclass_type, raw: dict[str, Any]):
    defaults = dataclass_type()  # type: ignore[misc]
    if not isinstance(raw, dict):
        return defaults
    for k, v in raw.items():
        if hasattr(defaults, k):
            setattr(defaults, k, v)
    return defaults


def _clamp_int(value: Any, lo: int, hi: int, default: int) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError):
        return default
    return max(lo, min(hi, number))


def _normalize_output(cfg: AppConfig) -> None:
    defaults = OutputConfig()
    cfg.output.width = _clamp_int(cfg.output.width, MIN_SIDE, MAX_SIDE, defaults.width)
    cfg.output.height = _clamp_int(cfg.output.height, MIN_SIDE, MAX_SIDE, defaults.height)


def _normalize_render(cfg: AppConfig) -> None:
    cfg.render.max_workers = _clamp_int(cfg.render.max_workers, 1, 32, RenderConfig().max_workers)
    if not isinstance(cfg.render.provider_fallback, str):
        cfg.render.provider_fallback = RenderConfig().provider_fallback


def _normalize_diagnostics(cfg: AppConfig) -> None:
    cfg.diagnostics.keep_log_files = _clamp_int(cfg.diagnostics.keep_log_files, 2, 365, DiagnosticsConfig().keep_log_files)


def _normalize_fonts(cfg: AppConfig) -> None:
    for name in ("title_font", "provider_font"):
        value = getattr(cfg.fonts, name)
        if value is not None and (not isinstance(value, str) or not value.strip()):
            setattr(cfg.fonts, name, None)


def load_config(path: Path | None = None) -> AppConfig:
    path = path or config_path()
    if not path.exists():
        return AppConfig()

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return AppConfig()
    if not isinstance(data, dict):
        return AppConfig()

    cfg = AppConfig(
        config_version=CONFIG_VERSION,
        output=_merge(OutputConfig, data.get("output", {})),
        fonts=_merge(FontsConfig, data.get("fonts", {})),
        render=_merge(RenderConfig, data.get("render", {})),
        diagnostics=_merge(DiagnosticsConfig, data.get("diagnostics", {})),
    )

    _normalize_output(cfg)
    _normalize_render(cfg)
    _normalize_fonts(cfg)
    _normalize_diagnostics(cfg)
    return cfg


def save_config(cfg: AppConfig, path: Path | None = None) -> Path:
    cfg.config_version = CONFIG_VERSION
    path = path or config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(asdict(cfg), indent=2, sort_keys=True), encoding="utf-8")
    return path
