"""Configuration data models."""

from dataclasses import dataclass, field, fields
from typing import Dict, Any, List, Optional, Tuple

DEFAULT_LANGUAGES = ["python", "javascript", "java", "c++", "go", "ruby", "swift"]


def _pick(cls, values: Optional[Dict[str, Any]]):
    """Build a config dataclass from a dict, ignoring unknown keys."""
    values = values or {}
    known = {f.name for f in fields(cls)}
    return cls(**{k: v for k, v in values.items() if k in known})


@dataclass
class CaptureConfig:
    """Configuration for capture module."""
    provider: str = "mss"
    monitor_id: int = 1
    settle_delay_seconds: float = 0.1


@dataclass
class QueueConfig:
    """Configuration for the screenshot queue."""
    max_size: int = 5
    thumbnail_width: int = 128
    thumbnail_height: int = 72

    @property
    def thumbnail_size(self) -> Tuple[int, int]:
        return (self.thumbnail_width, self.thumbnail_height)


@dataclass
class ProviderConfig:
    """Configuration for the vision model endpoint."""
    api_url: str = "https://api.openai.com/v1/chat/completions"
    model: str = "gpt-4o"
    max_tokens: int = 4000
    jpeg_quality: int = 70
    timeout_seconds: Optional[float] = None


@dataclass
class SolverConfig:
    """Configuration for solution requests."""
    default_language: str = "python"
    languages: List[str] = field(default_factory=lambda: list(DEFAULT_LANGUAGES))


@dataclass
class LoggingConfig:
    """Configuration for logging."""
    level: str = "WARNING"
    log_to_file: bool = False
    log_file: str = "~/.config/shotsolve/logs/shotsolve.log"
    log_to_console: bool = True
    console_colors: bool = True


@dataclass
class ShotSolveConfig:
    """Complete ShotSolve configuration."""
    capture: CaptureConfig = field(default_factory=CaptureConfig)
    queue: QueueConfig = field(default_factory=QueueConfig)
    provider: ProviderConfig = field(default_factory=ProviderConfig)
    solver: SolverConfig = field(default_factory=SolverConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, config: Optional[Dict[str, Any]]) -> "ShotSolveConfig":
        """Build typed config from a loaded configuration dictionary.

        Args:
            config: Dictionary as returned by ConfigLoader

        Returns:
            ShotSolveConfig with defaults for anything not given
        """
        config = config or {}
        return cls(
            capture=_pick(CaptureConfig, config.get("capture")),
            queue=_pick(QueueConfig, config.get("queue")),
            provider=_pick(ProviderConfig, config.get("provider")),
            solver=_pick(SolverConfig, config.get("solver")),
            logging=_pick(LoggingConfig, config.get("logging")),
        )
