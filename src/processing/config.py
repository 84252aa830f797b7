import os
from dataclasses import dataclass

HISTOGRAM_BINS = 256
HISTOGRAM_CANVAS_SIZE = 512


@dataclass(frozen=True)
class AppConfig:
    max_dim: int
    histogram_workers: int
    log_level: str
    host: str
    port: int


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw in (None, ""):
        return default
    try:
        return int(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from exc


def load_config() -> AppConfig:
    """Read the runtime settings from IMGPROC_* environment variables."""
    return AppConfig(
        max_dim=_env_int("IMGPROC_MAX_DIM", 1600),
        histogram_workers=max(1, _env_int("IMGPROC_HISTOGRAM_WORKERS", (os.cpu_count() or 2) - 1)),
        log_level=os.getenv("IMGPROC_LOG_LEVEL", "INFO").upper(),
        host=os.getenv("IMGPROC_HOST", "0.0.0.0"),
        port=_env_int("IMGPROC_PORT", 5000),
    )


APP_CONFIG = load_config()
