"""Health check functions for the database dependency."""

import logging

logger = logging.getLogger(__name__)


async def check_database(db) -> dict:
    """
    Check that a connection can be leased and a trivial query answered.

    Args:
        db: Database (or any QueryExecutor) to check

    Returns:
        dict with keys:
            - healthy (bool): True if SELECT 1 returned 1
            - error (str or None): Error message if unhealthy
    """
    try:
        value = await db.get_one_field("SELECT 1 AS ok")
    except Exception as e:
        logger.debug(f"Database health check failed: {e}")
        return {
            "healthy": False,
            "error": str(e)
        }

    if value != 1:
        return {
            "healthy": False,
            "error": f"Unexpected health check result: {value!r}"
        }

    return {
        "healthy": True,
        "error": None
    }
