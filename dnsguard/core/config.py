"""
Process settings for dnsguard
Decides where the persisted configuration lives before anything is read
"""

import os
from pathlib import Path
from typing import Union

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DATA_DIR = "data"       # data storage, relative to the working directory
FILTER_DIR = "filters"  # cache location for downloaded filters, under DATA_DIR
USER_FILTER_ID = 0      # reserved id of the user rules filter


class Settings(BaseSettings):
    """Process settings with environment variable support"""

    model_config = SettingsConfigDict(
        env_prefix="DNSGUARD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Config filename, can be overridden via the command line arguments
    config_file: str = Field(default="dnsguard.yaml")
    # Location of our directory, protects against CWD being somewhere else
    work_dir: Path = Field(default_factory=Path.cwd)

    log_format: str = Field(default="text")

    @field_validator("work_dir", mode="before")
    @classmethod
    def expand_work_dir(cls, v):
        """Expand ~ and make the working directory absolute"""
        return Path(v).expanduser().absolute()

    @field_validator("log_format")
    @classmethod
    def check_log_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("text", "json"):
            raise ValueError(f"unknown log format: {v}")
        return v

    @property
    def data_dir(self) -> Path:
        return self.work_dir / DATA_DIR

    @property
    def filter_dir(self) -> Path:
        return self.data_dir / FILTER_DIR

    @property
    def config_path(self) -> Path:
        return resolve_config_path(self.config_file, self.work_dir)


def resolve_config_path(filename: Union[str, Path], work_dir: Union[str, Path]) -> Path:
    """Return the effective path of the configuration file.

    An absolute filename is returned unchanged, anything else is joined to
    the working directory. No I/O is performed.
    """
    if os.path.isabs(filename):
        return Path(filename)
    return Path(work_dir) / filename
