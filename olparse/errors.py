"""
Base exception for user-facing errors.

All expected errors that should be displayed to the user
as clean messages (without stack traces) must inherit from OLUserError.

Programming errors and bugs should NOT inherit from OLUserError:
they will propagate with full tracebacks.
"""

from __future__ import annotations


class OLUserError(Exception):
    """
    Base class for all user-facing errors in olparse.

    These errors indicate problems that the user can fix:
    malformed sources, broken keyword configuration, unreadable files, etc.
    """
    pass


__all__ = ["OLUserError"]
