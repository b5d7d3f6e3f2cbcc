"""Configuration loading for ttsextract (.ttsextract.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

CONFIG_FILENAME = ".ttsextract.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ExtractConfig:
    """Which parts of a save to extract."""

    scripts: bool = False
    xml: bool = False
    linked: bool = False
    notes: bool = False
    unbundle: bool = False

    @classmethod
    def everything(cls) -> "ExtractConfig":
        return cls(scripts=True, xml=True, linked=True, notes=True, unbundle=True)

    def merged(self, other: "ExtractConfig") -> "ExtractConfig":
        """Return a config enabling anything enabled in either config."""
        return replace(
            self,
            scripts=self.scripts or other.scripts,
            xml=self.xml or other.xml,
            linked=self.linked or other.linked,
            notes=self.notes or other.notes,
            unbundle=self.unbundle or other.unbundle,
        )

    def any_enabled(self) -> bool:
        return self.scripts or self.xml or self.linked or self.notes


@dataclass
class DownloadConfig:
    """HTTP settings for fetching linked resources."""

    timeout: Optional[float] = 30.0
    user_agent: Optional[str] = None


@dataclass
class TTSExtractConfig:
    """Represents the settings defined in .ttsextract.yml."""

    root: Path
    extract: ExtractConfig = field(default_factory=ExtractConfig)
    download: DownloadConfig = field(default_factory=DownloadConfig)
    saves_dir: Optional[Path] = None


def load_config(config_path: Path) -> TTSExtractConfig:
    """Load configuration from disk; a missing file yields defaults."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return TTSExtractConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    extract_data = _as_dict(data.get("extract"))
    extract = ExtractConfig(
        scripts=_as_bool(extract_data.get("scripts")) or False,
        xml=_as_bool(extract_data.get("xml")) or False,
        linked=_as_bool(extract_data.get("linked")) or False,
        notes=_as_bool(extract_data.get("notes")) or False,
        unbundle=_as_bool(extract_data.get("unbundle")) or False,
    )

    download_data = _as_dict(data.get("download"))
    download = DownloadConfig()
    if download_data:
        timeout = _as_float(download_data.get("timeout"))
        if timeout is not None:
            download.timeout = timeout
        download.user_agent = _as_str(download_data.get("user_agent"))

    saves_dir_str = _as_str(data.get("saves_dir"))
    saves_dir = Path(saves_dir_str).expanduser() if saves_dir_str else None

    return TTSExtractConfig(root=root, extract=extract, download=download, saves_dir=saves_dir)


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Any:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float)) and not isinstance(value, bool) else None


def _as_float(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
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
    "CONFIG_FILENAME",
    "ConfigError",
    "DownloadConfig",
    "ExtractConfig",
    "TTSExtractConfig",
    "load_config",
]
