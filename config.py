"""Spendlog settings, kept in ~/.config/spendlog.toml.

The file is written with every default filled in on first run, so users can
edit it in place. Any key removed later falls back to its default again.
"""

from pathlib import Path
from dataclasses import dataclass
import tomllib
import tomli_w

_APP = "spendlog"
_PACKAGE_DIR = Path(__file__).parent


@dataclass
class Config:
    """Where the ledger lives, how much gets logged, how amounts are shown."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    currency: str = "$"

    @property
    def db_path(self) -> Path:
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        return cls.from_toml({})

    @classmethod
    def from_toml(cls, data: dict) -> "Config":
        """Build a Config from parsed TOML, defaulting every missing key.

        The database and log directories default to subdirectories of
        ``base_dir``, so moving ``base_dir`` moves both.
        """
        base_dir = Path(data.get("base_dir", Path.home() / "data" / _APP))
        database = data.get("database", {})
        logging_ = data.get("logging", {})
        display = data.get("display", {})

        return cls(
            base_dir=base_dir,
            db_data_dir=Path(database.get("data_dir", base_dir / "db")),
            db_filename=database.get("filename", f"{_APP}.db"),
            log_level=logging_.get("level", "INFO"),
            log_dir=Path(logging_.get("log_dir", base_dir / "logs")),
            currency=display.get("currency", "$"),
        )

    def to_toml(self) -> dict:
        return {
            "base_dir": str(self.base_dir),
            "database": {
                "data_dir": str(self.db_data_dir),
                "filename": self.db_filename,
            },
            "logging": {
                "level": self.log_level,
                "log_dir": str(self.log_dir),
            },
            "display": {
                "currency": self.currency,
            },
        }


def get_config_path() -> Path:
    return Path.home() / ".config" / f"{_APP}.toml"


def get_migrations_dir() -> Path:
    """SQL migrations ship with the code and are not configurable."""
    return _PACKAGE_DIR / "db" / "migrations"


def get_seed_dir() -> Path:
    """Default category table installed into an empty ledger."""
    return _PACKAGE_DIR / "db" / "seed"


def load_config() -> Config:
    """Read the settings file, writing the defaults first if there is none."""
    config_path = get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        return Config.from_toml(tomllib.load(f))


def _write_config(config: Config) -> None:
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "wb") as f:
        tomli_w.dump(config.to_toml(), f)
