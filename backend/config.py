import os
from dataclasses import dataclass

UNITS = ("kg", "lb")
LOG_FORMATS = ("text", "json")


class ConfigError(RuntimeError):
    """Raised when an environment value cannot be used."""


@dataclass(frozen=True)
class Settings:
    database_url: str = "sqlite:///gymprogress.db"
    log_level: str = "INFO"
    log_format: str = "text"
    default_unit: str = "kg"

    @classmethod
    def from_env(cls) -> "Settings":
        log_format = os.environ.get("GYMPROGRESS_LOG_FORMAT", "text").lower()
        if log_format not in LOG_FORMATS:
            raise ConfigError(f"GYMPROGRESS_LOG_FORMAT must be one of {LOG_FORMATS}")

        default_unit = os.environ.get("GYMPROGRESS_DEFAULT_UNIT", "kg").lower()
        if default_unit not in UNITS:
            raise ConfigError(f"GYMPROGRESS_DEFAULT_UNIT must be one of {UNITS}")

        return cls(
            database_url=os.environ.get("GYMPROGRESS_DATABASE_URL", cls.database_url),
            log_level=os.environ.get("GYMPROGRESS_LOG_LEVEL", "INFO").upper(),
            log_format=log_format,
            default_unit=default_unit,
        )


settings = Settings.from_env()
