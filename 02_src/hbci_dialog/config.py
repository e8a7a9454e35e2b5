"""Project-level configuration and path helpers."""

from pathlib import Path
from typing import Union

from dotenv import load_dotenv
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
LOGS_DIR = PROJECT_ROOT / "04_logs"
DEFAULT_LOG_PATH = LOGS_DIR / "hbci_dialog.log"

PRODUCT_VERSION = "0.1.0"

PathLike = Union[str, Path]

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off", ""}


class DialogConfig(BaseSettings):
    """Settings consulted by the dialog driver.

    Read from HBCI_* environment variables; the log level from LOG_LEVEL.
    """

    model_config = SettingsConfigDict(env_prefix="HBCI_", extra="ignore")

    # client.errors.ignoreAddJobErrors
    ignore_add_job_errors: bool = Field(
        default=False,
        description="Drop tasks that cannot be added instead of raising",
    )
    product_name: str = Field(default="hbci-dialog", description="ProcPrep.prodName")
    product_version: str = Field(default=PRODUCT_VERSION, description="ProcPrep.prodVersion")
    max_segment_scan: int = Field(
        default=1000,
        ge=1,
        description="Upper bound when searching the first task segment in a response",
    )
    log_level: str = Field(
        default="INFO",
        validation_alias=AliasChoices("log_level", "LOG_LEVEL"),
        description="Level of the hbci_dialog logger",
    )

    @field_validator("ignore_add_job_errors", mode="before")
    @classmethod
    def parse_flag(cls, v):
        """Accept the yes/no spelling used by HBCI client properties."""
        if isinstance(v, str):
            value = v.strip().lower()
            if value in _TRUE_VALUES:
                return True
            if value in _FALSE_VALUES:
                return False
            raise ValueError(f"invalid boolean flag: {v!r}")
        return v

    @field_validator("log_level")
    @classmethod
    def normalize_level(cls, v: str) -> str:
        return v.upper()


def load_config(env_file: PathLike | None = None) -> DialogConfig:
    """Load .env (if any) into the environment and build DialogConfig from it."""
    if env_file is None:
        env_file = PROJECT_ROOT / ".env"
    if Path(env_file).exists():
        load_dotenv(env_file)

    return DialogConfig()
