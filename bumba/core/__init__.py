"""Core module for the BUMBA routing framework.

Usage:
    from bumba.core import BumbaError, InvalidInputError

    try:
        plan = router.route("implement", ["user authentication"])
    except InvalidInputError as e:
        print(f"Error: {e.code} - {e.message}")
"""

from bumba.core.exceptions import (
    BumbaError,
    ConfigurationError,
    RoutingTableError,
    InvalidInputError,
)

__all__ = [
    "BumbaError",
    "ConfigurationError",
    "RoutingTableError",
    "InvalidInputError",
]
