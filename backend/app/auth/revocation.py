"""JWT token revocation using a Redis blacklist.

Logout revokes exactly the presented token, keyed by its `jti` claim.
Entries live until the token would have expired anyway.
"""

import logging
import time

from app.utils.redis_client import get_redis

logger = logging.getLogger(__name__)


def _key(jti: str) -> str:
    return f"revoked:{jti}"


class TokenRevocation:
    """Manage JWT token revocation with Redis."""

    @staticmethod
    async def revoke_token(jti: str, expires_at: float) -> bool:
        """Add a token ID to the revocation list.

        Args:
            jti: the token's unique ID claim
            expires_at: Unix timestamp when the token naturally expires

        Returns:
            True if successfully revoked
        """
        ttl = int(expires_at - time.time())
        if ttl <= 0:
            # Already expired, nothing to blacklist
            return True

        redis_client = await get_redis()
        try:
            await redis_client.setex(_key(jti), ttl, str(int(time.time())))
            return True
        except Exception as e:
            logger.error(f"Failed to revoke token: {e}")
            return False

    @staticmethod
    async def is_revoked(jti: str) -> bool:
        """Check whether a token ID is revoked.

        Fails closed: if Redis cannot be reached the token is treated
        as revoked.
        """
        redis_client = await get_redis()
        try:
            return await redis_client.exists(_key(jti)) > 0
        except Exception as e:
            logger.error(f"Failed to check token revocation: {e}")
            return True
