"""
Configuration management using Pydantic Settings.

Settings come from CONVEX_AUTH_KEYS_* environment variables; the per-run
flags are parsed once into RunOptions and passed explicitly.
"""
import sys
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Tool settings with environment variable support."""

    project_root: Path = Field(
        default_factory=Path.cwd,
        description="Directory holding the env file and node_modules"
    )
    env_file_name: str = Field(default=".env.local", description="Local env file name")
    probe_timeout_seconds: float = Field(
        default=0.5,
        description="TCP connect timeout for the Convex backend reachability check"
    )
    debug: bool = Field(default=False, description="Enable debug logging")

    @field_validator("probe_timeout_seconds")
    @classmethod
    def validate_probe_timeout(cls, v: float) -> float:
        """Timeout must be positive."""
        if v <= 0:
            raise ValueError("Probe timeout must be greater than zero")
        return v

    @property
    def env_file_path(self) -> Path:
        """Absolute path of the env file."""
        return (self.project_root / self.env_file_name).resolve()

    @property
    def local_convex_bin(self) -> Path:
        """Convex CLI installed in the project's node_modules."""
        name = "convex.cmd" if sys.platform == "win32" else "convex"
        return (self.project_root / "node_modules" / ".bin" / name).resolve()

    class Config:
        env_prefix = "CONVEX_AUTH_KEYS_"
        case_sensitive = False
        extra = "ignore"


class RunOptions(BaseModel):
    """Flags selected for a single run."""

    write: bool = False
    sync_convex: bool = False
    apply: bool = False

    @classmethod
    def from_flags(cls, write: bool, sync_convex: bool, setup: bool, apply: bool) -> "RunOptions":
        """Build options; --setup implies both --write and --sync-convex."""
        return cls(
            write=write or setup,
            sync_convex=sync_convex or setup,
            apply=apply,
        )

    class Config:
        frozen = True


def load_settings(**overrides: Any) -> Settings:
    """
    Load settings from the environment.

    Args:
        **overrides: Explicit values (e.g. from CLI flags); None values are ignored

    Returns:
        Settings instance
    """
    values = {k: v for k, v in overrides.items() if v is not None}
    return Settings(**values)
