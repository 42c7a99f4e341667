"""Generation logging with per-subsystem channel toggles."""
from __future__ import annotations

import json
import logging
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Iterable, Optional

# One channel per pipeline stage; cache chatter is off unless asked for.
DEFAULT_CHANNELS = {
    "placement": True,
    "surface": True,
    "cache": False,
}


@dataclass
class LoggerConfig:
    """Log level and enabled channels, usually read from settings.json."""

    level: int = logging.INFO
    channels: Dict[str, bool] = field(default_factory=DEFAULT_CHANNELS.copy)

    @classmethod
    def from_settings(cls, settings_path: Path) -> "LoggerConfig":
        if not settings_path.exists():
            return cls()
        try:
            data = json.loads(settings_path.read_text())
        except json.JSONDecodeError:
            return cls()
        level = logging.getLevelName(str(data.get("logLevel", "INFO")).upper())
        channels = DEFAULT_CHANNELS.copy()
        channels.update(data.get("logChannels", {}))
        return cls(level=level if isinstance(level, int) else logging.INFO, channels=channels)

    @classmethod
    def quiet(cls) -> "LoggerConfig":
        return cls(level=logging.CRITICAL, channels={name: False for name in DEFAULT_CHANNELS})


class ChannelLogger:
    """Forwards records to ``cosmogen.<name>`` only while the channel is enabled."""

    def __init__(self, logger: logging.Logger, enabled: bool) -> None:
        self._logger = logger
        self._enabled = enabled

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = value

    def _emit(self, level: int, msg: str, *args, **kwargs) -> None:
        if self._enabled:
            self._logger.log(level, msg, *args, **kwargs)

    def debug(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.DEBUG, msg, *args, **kwargs)

    def info(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.INFO, msg, *args, **kwargs)

    def warning(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.WARNING, msg, *args, **kwargs)

    def error(self, msg: str, *args, **kwargs) -> None:
        self._emit(logging.ERROR, msg, *args, **kwargs)


class GenLogger:
    """Registry of channel loggers under the ``cosmogen`` logger."""

    def __init__(self, config: LoggerConfig) -> None:
        logging.basicConfig(
            level=config.level,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            stream=sys.stdout,
        )
        self._root = logging.getLogger("cosmogen")
        self._root.setLevel(config.level)
        self._channels: Dict[str, ChannelLogger] = {
            name: self._make_channel(name, enabled) for name, enabled in config.channels.items()
        }

    def _make_channel(self, name: str, enabled: bool) -> ChannelLogger:
        return ChannelLogger(self._root.getChild(name), enabled)

    def channel(self, name: str) -> ChannelLogger:
        if name not in self._channels:
            # Unknown channels start disabled until explicitly enabled.
            self._channels[name] = self._make_channel(name, False)
        return self._channels[name]

    def set_enabled(self, name: str, enabled: bool) -> None:
        self.channel(name).enabled = enabled

    def channels(self) -> Iterable[str]:
        return self._channels.keys()


def init_logger(settings_path: Optional[Path] = None) -> GenLogger:
    """Initialise a logger from settings.json."""

    return GenLogger(LoggerConfig.from_settings(settings_path or Path("settings.json")))


__all__ = ["ChannelLogger", "DEFAULT_CHANNELS", "GenLogger", "LoggerConfig", "init_logger"]
