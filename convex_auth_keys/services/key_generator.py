"""
Generation of the Convex Auth signing keypair and random secrets.
"""
from __future__ import annotations

import asyncio
import base64
import json
import secrets
from typing import Dict

from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from jwt.algorithms import RSAAlgorithm
from pydantic import BaseModel, Field

from convex_auth_keys.logging_config import get_logger

logger = get_logger(__name__)

RSA_KEY_SIZE = 2048
SECRET_BYTES = 32


class GeneratedSecrets(BaseModel):
    """Fresh values for one run. Never persisted anywhere except the env file."""

    auth_secret: str = Field(..., description="32 random bytes, base64")
    private_key: str = Field(..., description="RS256 private key, PKCS8 PEM")
    jwks: str = Field(..., description="Public key set as compact JSON")
    adapter_secret: str = Field(..., description="32 random bytes, hex")

    def as_env_updates(self) -> Dict[str, str]:
        """
        Values keyed by env var name, JSON-escaped for KEY="..." lines.

        Returns:
            Ordered mapping of the four variables
        """
        return {
            "AUTH_SECRET": json.dumps(self.auth_secret),
            "CONVEX_AUTH_PRIVATE_KEY": json.dumps(self.private_key),
            "JWKS": json.dumps(self.jwks),
            "CONVEX_AUTH_ADAPTER_SECRET": json.dumps(self.adapter_secret),
        }


def _generate_signing_keys() -> tuple[str, str]:
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=RSA_KEY_SIZE)

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode("ascii").rstrip("\n")

    public_jwk = json.loads(RSAAlgorithm.to_jwk(private_key.public_key()))
    # jose-style public JWK: kty/n/e only, plus the signature use hint
    jwk = {"use": "sig", "kty": public_jwk["kty"], "n": public_jwk["n"], "e": public_jwk["e"]}
    jwks = json.dumps({"keys": [jwk]}, separators=(",", ":"))
    return private_pem, jwks


async def generate_secrets() -> GeneratedSecrets:
    """
    Generate a new RS256 keypair plus the auth and adapter secrets.

    RSA generation runs in a worker thread so the event loop stays free.

    Returns:
        GeneratedSecrets with all four values
    """
    private_pem, jwks = await asyncio.to_thread(_generate_signing_keys)
    logger.debug("signing_keys_generated", key_size=RSA_KEY_SIZE)

    return GeneratedSecrets(
        auth_secret=base64.b64encode(secrets.token_bytes(SECRET_BYTES)).decode("ascii"),
        private_key=private_pem,
        jwks=jwks,
        adapter_secret=secrets.token_hex(SECRET_BYTES),
    )
