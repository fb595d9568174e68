"""
Audit decorators for endpoints that change accounts, teams or company data.
"""

import functools
import logging
from typing import Callable

logger = logging.getLogger("bizboard.audit")


def _describe_target(kwargs: dict) -> str:
    ids = [f"{key}={value}" for key, value in sorted(kwargs.items()) if key.endswith("_id")]
    return f" ({', '.join(ids)})" if ids else ""


def log_sensitive_operations(operation_type: str):
    """
    Log sensitive operations for audit purposes.

    The wrapped endpoint must take the principal as ``current_user``; path ids
    (``*_id`` keyword arguments) are included in the audit line.

    Args:
        operation_type: Type of operation being performed
    """
    def decorator(func: Callable):
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            current_user = kwargs.get("current_user")
            user_id = current_user.id if current_user else "anonymous"
            company_id = getattr(current_user, "company_id", None)
            target = _describe_target(kwargs)

            logger.info(f"{operation_type}{target} by user {user_id} of company {company_id}")
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                logger.warning(f"{operation_type}{target} failed for user {user_id}: {e}")
                raise
            logger.info(f"{operation_type}{target} completed for user {user_id}")
            return result

        return wrapper
    return decorator
