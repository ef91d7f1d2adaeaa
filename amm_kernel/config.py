"""Runtime configuration for the amm-kernel command line."""

import os
from dataclasses import dataclass, replace

LOG_LEVELS = ("debug", "info", "warning", "error")


@dataclass(frozen=True)
class CliConfig:
    """Configuration of the command line tool.

    Attributes:
        log_level: Minimum structlog level (default: warning, so output stays
            clean JSON)
        json_logs: Render log lines as JSON instead of the console format
    """

    log_level: str = "warning"
    json_logs: bool = False

    def __post_init__(self) -> None:
        if self.log_level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {LOG_LEVELS}, got {self.log_level!r}")

    @classmethod
    def from_env(cls) -> "CliConfig":
        """Read AMM_KERNEL_LOG_LEVEL and AMM_KERNEL_LOG_JSON from the environment."""
        return cls(
            log_level=os.environ.get("AMM_KERNEL_LOG_LEVEL", cls.log_level).lower(),
            json_logs=os.environ.get("AMM_KERNEL_LOG_JSON", "false").lower()
            in ("true", "1", "yes"),
        )

    def with_overrides(
        self, log_level: str | None = None, json_logs: bool | None = None
    ) -> "CliConfig":
        """Return a copy with command line flags applied on top."""
        return replace(
            self,
            log_level=self.log_level if log_level is None else log_level,
            json_logs=self.json_logs if json_logs is None else json_logs,
        )


# Default configuration instance
DEFAULT_CLI_CONFIG = CliConfig()
