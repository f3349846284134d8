"""License decorators for function protection.
"""

from __future__ import annotations

import logging
from functools import wraps
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)


def _check(
    client: Any, error_message: str, *, raise_exception: bool, require_confirmed: bool
) -> bool:
    """Verify through the client; raise or report failure."""
    result = client.verify()
    if result.valid and (result.confirmed or not require_confirmed):
        return True
    if raise_exception:
        result.raise_for_status(require_confirmed=require_confirmed)
    logger.warning("License check failed: %s (%s)", error_message, result.message)
    return False


def requires_valid_license(
    license_client: Any | Callable[[Any], Any] | str,
    error_message: str = "License is not valid",
    *,
    raise_exception: bool = True,
    require_confirmed: bool = False,
) -> Callable:
    """Decorator that ensures function runs only when the license verifies.

    Args:
        license_client: LicenseClient instance, callable that returns one, or
            the name of an attribute holding one on ``self``
        error_message: Message logged when the license does not verify
        raise_exception: Raise the reason-specific ValidationError instead of
            returning None
        require_confirmed: Treat offline (unconfirmed) successes as failures

    Returns:
        Decorated function that only executes when the license is valid
    """

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            if isinstance(license_client, str):
                # Attribute name - get from self
                if not args:
                    msg = f"Cannot get client attribute '{license_client}' without self"
                    raise ValueError(msg)
                client = getattr(args[0], license_client)
            elif callable(license_client) and not hasattr(license_client, "verify"):
                client = license_client()
            else:
                client = license_client

            if not _check(
                client,
                error_message,
                raise_exception=raise_exception,
                require_confirmed=require_confirmed,
            ):
                return None
            return func(*args, **kwargs)

        return wrapper

    return decorator


def license_protected(
    get_license_client: Callable[..., Any],
    error_message: str = "License is not valid",
    *,
    raise_exception: bool = True,
) -> Callable:
    """Decorator that gets license client dynamically and checks license status."""

    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> Any:
            license_client = get_license_client()
            if not _check(
                license_client,
                error_message,
                raise_exception=raise_exception,
                require_confirmed=False,
            ):
                return None
            return func(*args, **kwargs)

        return wrapper

    return decorator
