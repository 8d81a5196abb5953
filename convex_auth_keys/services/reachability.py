"""
TCP reachability check for the Convex backend.
"""
import asyncio
from typing import Optional

from convex_auth_keys.logging_config import get_logger

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SECONDS = 0.5


async def is_tcp_reachable(host: str, port: int, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> bool:
    """
    Check whether host:port accepts a TCP connection.

    Args:
        host: Hostname or IP address
        port: TCP port
        timeout: Seconds to wait for the connection

    Returns:
        True if the connection was established before the timeout, False on
        timeout or any connection error. Never raises.
    """
    writer: Optional[asyncio.StreamWriter] = None
    try:
        _, writer = await asyncio.wait_for(asyncio.open_connection(host, port), timeout=timeout)
        return True
    except (OSError, ValueError, asyncio.TimeoutError) as e:
        # ValueError covers idna failures for over-long host labels
        logger.debug("tcp_probe_failed", host=host, port=port, error=str(e) or type(e).__name__)
        return False
    finally:
        if writer is not None:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError:
                pass
