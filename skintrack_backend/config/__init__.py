"""Static configuration shipped with the codebase."""

from .profile import (
    DEFAULT_TITLE,
    DEMO_ACCOUNT_EMAIL,
    DEMO_ACCOUNT_NAME,
    GOAL_CATALOG,
)
from .storage import (
    ACCOUNT_COLLECTION_KEY,
    DEFAULT_DATABASE_URL,
    SESSION_MIRROR_KEY,
)

__all__ = [
    "ACCOUNT_COLLECTION_KEY",
    "DEFAULT_DATABASE_URL",
    "DEFAULT_TITLE",
    "DEMO_ACCOUNT_EMAIL",
    "DEMO_ACCOUNT_NAME",
    "GOAL_CATALOG",
    "SESSION_MIRROR_KEY",
]
