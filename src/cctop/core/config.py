"""cctop configuration.

Settings live in ~/.cctop/config.json. Every component that touches the
filesystem takes a Config value instead of looking paths up itself, so tests
can point a store or watcher at a temporary directory.

Environment overrides:
- CCTOP_HOME: base directory (default ~/.cctop)
- CCTOP_SESSIONS_DIR: sessions directory (default $CCTOP_HOME/sessions)
- CCTOP_DEMO=1: skip liveness filtering when listing sessions
"""

import os
from dataclasses import asdict, dataclass, replace
from datetime import timedelta
from pathlib import Path

import orjson

HOME_ENV = "CCTOP_HOME"
SESSIONS_DIR_ENV = "CCTOP_SESSIONS_DIR"
DEMO_ENV = "CCTOP_DEMO"

DEFAULT_STALE_AFTER_HOURS = 24.0
DEFAULT_NO_PID_MAX_AGE_HOURS = 24.0
DEFAULT_STDIN_TIMEOUT_SECONDS = 5.0


@dataclass(frozen=True)
class Config:
    """Resolved cctop settings.

    Attributes:
        base_dir: Root of cctop's data (~/.cctop)
        sessions_dir: One JSON file per session
        logs_dir: Per-session hook logs and _errors.log
        stale_after_hours: Age after which `cleanup` removes any session
        no_pid_max_age_hours: Age after which a PID-less session of the same
            project is swept at SessionStart
        stdin_timeout_seconds: Bound on reading the hook payload
        log_level: structlog filtering level
        demo: Keep dead sessions when listing
    """

    base_dir: Path
    sessions_dir: Path
    logs_dir: Path
    stale_after_hours: float = DEFAULT_STALE_AFTER_HOURS
    no_pid_max_age_hours: float = DEFAULT_NO_PID_MAX_AGE_HOURS
    stdin_timeout_seconds: float = DEFAULT_STDIN_TIMEOUT_SECONDS
    log_level: str = "INFO"
    demo: bool = False

    @classmethod
    def for_dir(cls, base_dir: Path, **overrides) -> "Config":
        """Build a config rooted at base_dir with default settings."""
        base_dir = Path(base_dir)
        config = cls(
            base_dir=base_dir,
            sessions_dir=base_dir / "sessions",
            logs_dir=base_dir / "logs",
        )
        return replace(config, **overrides)

    @property
    def config_path(self) -> Path:
        return self.base_dir / "config.json"

    @property
    def stale_after(self) -> timedelta:
        return timedelta(hours=self.stale_after_hours)

    @property
    def no_pid_max_age(self) -> timedelta:
        return timedelta(hours=self.no_pid_max_age_hours)

    def ensure_dirs(self) -> None:
        """Create the sessions and logs directories.

        Raises:
            OSError: If a directory cannot be created.
        """
        self.sessions_dir.mkdir(parents=True, exist_ok=True)
        self.logs_dir.mkdir(parents=True, exist_ok=True)

    def to_dict(self) -> dict:
        data = asdict(self)
        for key in ("base_dir", "sessions_dir", "logs_dir"):
            data[key] = str(data[key])
        return data


def get_base_dir() -> Path:
    """Get cctop's base directory, honoring CCTOP_HOME."""
    if env_home := os.environ.get(HOME_ENV):
        return Path(env_home)
    return Path.home() / ".cctop"


def read_settings(config_path: Path) -> dict:
    """Read the settings file, returning empty dict if missing or invalid."""
    if not config_path.exists():
        return {}
    try:
        content = config_path.read_bytes()
        settings = orjson.loads(content) if content else {}
    except (orjson.JSONDecodeError, OSError):
        return {}
    return settings if isinstance(settings, dict) else {}


def write_settings(config_path: Path, settings: dict) -> None:
    """Write the settings file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_bytes(orjson.dumps(settings, option=orjson.OPT_INDENT_2))


def _number(settings: dict, key: str, default: float, positive: bool = False) -> float:
    value = settings.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)) or value < 0:
        return default
    if positive and value == 0:
        return default
    return float(value)


def load_config(base_dir: Path | None = None) -> Config:
    """Load configuration from the environment and config.json.

    Missing keys use defaults. Invalid values are ignored.

    Args:
        base_dir: Override the base directory (default from get_base_dir()).

    Returns:
        The resolved Config.
    """
    base_dir = base_dir or get_base_dir()
    config = Config.for_dir(base_dir)
    settings = read_settings(config.config_path)

    sessions_dir = config.sessions_dir
    if env_sessions := os.environ.get(SESSIONS_DIR_ENV):
        sessions_dir = Path(env_sessions)

    log_level = settings.get("log_level", "INFO")
    if not isinstance(log_level, str) or log_level.upper() not in (
        "DEBUG",
        "INFO",
        "WARNING",
        "ERROR",
    ):
        log_level = "INFO"

    return replace(
        config,
        sessions_dir=sessions_dir,
        stale_after_hours=_number(
            settings, "stale_after_hours", DEFAULT_STALE_AFTER_HOURS
        ),
        no_pid_max_age_hours=_number(
            settings, "no_pid_max_age_hours", DEFAULT_NO_PID_MAX_AGE_HOURS
        ),
        stdin_timeout_seconds=_number(
            settings, "stdin_timeout_seconds", DEFAULT_STDIN_TIMEOUT_SECONDS, positive=True
        ),
        log_level=log_level.upper(),
        demo=os.environ.get(DEMO_ENV) == "1",
    )
