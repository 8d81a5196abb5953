"""
Custom exceptions for the key setup run.
"""
from typing import Optional


class AuthKeysException(Exception):
    """Base exception for setup errors. Carries the process exit code."""

    exit_code: int = 1

    def __init__(self, message: str, exit_code: Optional[int] = None):
        if exit_code is not None:
            self.exit_code = exit_code
        super().__init__(message)


class ConfigurationError(AuthKeysException):
    """Configuration or environment variable errors."""

    exit_code = 2


class BackendUnreachableError(AuthKeysException):
    """The Convex backend declared in the env file does not accept connections."""

    def __init__(self, url: str):
        self.url = url
        super().__init__(
            f"Convex backend isn't reachable at {url}. "
            "Start `pnpm dev:all` (or `npx convex dev`) and try again."
        )


class ConvexCLIError(AuthKeysException):
    """The Convex CLI could not be started or exited with a failure."""

    def __init__(self, message: str, key: str, exit_code: Optional[int] = None):
        self.key = key
        super().__init__(message, exit_code=exit_code if exit_code and exit_code > 0 else 1)
