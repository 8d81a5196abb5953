"""
Services for generating, persisting and syncing auth secrets.
"""
from convex_auth_keys.services.convex_cli import CommandResult, run_command, build_env_set_command
from convex_auth_keys.services.env_file import upsert_env_vars, get_env_var, read_env_file, write_env_file
from convex_auth_keys.services.key_generator import GeneratedSecrets, generate_secrets
from convex_auth_keys.services.reachability import is_tcp_reachable
from convex_auth_keys.services.sync import AuthKeySetup, CONVEX_ENV_VARS

__all__ = [
    "AuthKeySetup",
    "CONVEX_ENV_VARS",
    "CommandResult",
    "GeneratedSecrets",
    "build_env_set_command",
    "generate_secrets",
    "get_env_var",
    "is_tcp_reachable",
    "read_env_file",
    "run_command",
    "upsert_env_vars",
    "write_env_file",
]
