"""
Setup flow: generate secrets, write them locally, sync them to Convex.

Modes come from RunOptions:
- write: upsert the generated values into the env file
- neither write nor sync_convex: print the generated values
- sync_convex: push allow-listed env file values to Convex, as a dry-run
  plan unless apply is also set
"""
import re
import sys
from typing import Awaitable, Callable, List, Optional, TextIO, Tuple
from urllib.parse import urlsplit

from convex_auth_keys.config import RunOptions, Settings
from convex_auth_keys.exceptions import BackendUnreachableError, ConvexCLIError
from convex_auth_keys.logging_config import get_logger
from convex_auth_keys.services.convex_cli import CommandRunner, build_env_set_command, run_command
from convex_auth_keys.services.env_file import get_env_var, read_env_file, upsert_env_vars, write_env_file
from convex_auth_keys.services.key_generator import GeneratedSecrets, generate_secrets
from convex_auth_keys.services.reachability import is_tcp_reachable

logger = get_logger(__name__)

CONVEX_URL_VAR = "NEXT_PUBLIC_CONVEX_URL"
CONVEX_SITE_URL_VAR = "CONVEX_SITE_URL"

# An explicit default port is treated as no port, so such URLs are not probed
DEFAULT_PORTS = {"http": 80, "https": 443, "ws": 80, "wss": 443, "ftp": 21}

# Synced to the Convex deployment, in this order, when set in the env file
CONVEX_ENV_VARS = (
    "CONVEX_AUTH_ADAPTER_SECRET",
    "OPENAI_API_KEY",
    "AI_BASE_URL",
    "AI_CHAT_MODEL",
    "AI_EMBEDDING_MODEL",
    "JWKS",
    "CONVEX_AUTH_PRIVATE_KEY",
    "AUTH_SECRET",
)

Probe = Callable[[str, int, float], Awaitable[bool]]
SecretsFactory = Callable[[], Awaitable[GeneratedSecrets]]


def derive_site_url(convex_url: str) -> Optional[str]:
    """Map https://x.convex.cloud to https://x.convex.site; None if no .cloud suffix."""
    site_url = re.sub(r"\.cloud\Z", ".site", convex_url)
    return site_url if site_url != convex_url else None


def parse_probe_target(url: str) -> Optional[Tuple[str, int]]:
    """
    Extract host and port for the reachability check.

    Returns:
        (host, port), or None when the URL has no host, no positive
        non-default port, or cannot be parsed
    """
    try:
        parts = urlsplit(url)
        port = parts.port
    except ValueError:
        logger.debug("convex_url_unparseable", url=url)
        return None
    if not parts.hostname or not port or port <= 0:
        return None
    if DEFAULT_PORTS.get(parts.scheme.lower()) == port:
        return None
    return parts.hostname, port


def collect_sync_candidates(content: str, convex_url: Optional[str]) -> List[Tuple[str, str]]:
    """
    Build the ordered (key, value) list to push to Convex.

    Args:
        content: Env file content
        convex_url: Value of NEXT_PUBLIC_CONVEX_URL, if any

    Returns:
        CONVEX_SITE_URL (when derivable) followed by every allow-listed
        variable with a non-empty value
    """
    candidates: List[Tuple[str, str]] = []
    if convex_url:
        site_url = derive_site_url(convex_url)
        if site_url is not None:
            candidates.append((CONVEX_SITE_URL_VAR, site_url))

    for key in CONVEX_ENV_VARS:
        value = get_env_var(content, key)
        if value:
            candidates.append((key, value))
    return candidates


class AuthKeySetup:
    """Runs one setup invocation."""

    def __init__(
        self,
        settings: Settings,
        options: RunOptions,
        runner: CommandRunner = run_command,
        probe: Probe = is_tcp_reachable,
        secrets_factory: SecretsFactory = generate_secrets,
        out: Optional[TextIO] = None,
        err: Optional[TextIO] = None,
    ):
        self.settings = settings
        self.options = options
        self.runner = runner
        self.probe = probe
        self.secrets_factory = secrets_factory
        self.out = out or sys.stdout
        self.err = err or sys.stderr

    async def run(self) -> None:
        """
        Execute the selected modes.

        Raises:
            BackendUnreachableError: NEXT_PUBLIC_CONVEX_URL points at a closed port
            ConvexCLIError: A `convex env set` call failed
        """
        generated = await self.secrets_factory()
        updates = generated.as_env_updates()

        if self.options.write:
            self.write_updates(updates)
        elif not self.options.sync_convex:
            for key, value in updates.items():
                self.out.write(f"{key}={value}\n")

        if self.options.sync_convex:
            await self.sync_convex()

    def write_updates(self, updates: dict) -> None:
        path = self.settings.env_file_path
        next_content = upsert_env_vars(read_env_file(path), updates)
        write_env_file(path, next_content)
        logger.info("env_file_written", path=str(path), keys=list(updates))
        self.out.write(f"Wrote auth values to {path}\n")

    async def sync_convex(self) -> None:
        content = read_env_file(self.settings.env_file_path)
        convex_url = get_env_var(content, CONVEX_URL_VAR)

        if convex_url:
            await self.ensure_backend_reachable(convex_url)

        candidates = collect_sync_candidates(content, convex_url)
        if not candidates:
            self.out.write(f"No Convex env vars found in {self.settings.env_file_name} to sync.\n")
            return

        if not self.options.apply:
            self.out.write("Convex env sync (dry-run). Run with --apply to execute:\n")
            for key, _ in candidates:
                self.out.write(f"- {key}\n")
            return

        for key, value in candidates:
            self.set_convex_env_var(key, value)

    async def ensure_backend_reachable(self, convex_url: str) -> None:
        target = parse_probe_target(convex_url)
        if target is None:
            return
        host, port = target
        if not await self.probe(host, port, self.settings.probe_timeout_seconds):
            logger.warning("convex_backend_unreachable", host=host, port=port)
            raise BackendUnreachableError(convex_url)

    def set_convex_env_var(self, key: str, value: str) -> None:
        """
        Set one variable on the Convex deployment.

        Raises:
            ConvexCLIError: The CLI could not be started or exited non-zero
        """
        argv = build_env_set_command(self.settings.local_convex_bin, key, value)
        try:
            result = self.runner(argv)
        except OSError as e:
            raise ConvexCLIError(
                f"Failed to run Convex CLI while setting {key}: {e}", key=key
            ) from e

        if result.stdout:
            self.out.write(result.stdout)
        if result.stderr:
            self.err.write(result.stderr)
        if result.exit_code != 0:
            raise ConvexCLIError(
                f"Failed to set Convex env var {key} (exit code {result.exit_code}).",
                key=key,
                exit_code=result.exit_code,
            )
        logger.info("convex_env_var_set", key=key)
