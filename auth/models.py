"""
auth/models.py -- Domain dataclass for the resolved caller.

Pattern: Data class (pure data container, zero logic). Mirrors the approach
in clients/models.py -- dataclasses own domain shape; the resolver and the
access controller do the work.

Layer rule: no imports from api/, clients/, or cache/.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Identity:
    """The caller behind a token, resolved once per request and never persisted.

    client_id is what ownership checks compare against: a caller owns the
    client whose client_id equals its own.

    admin is the only source of elevated privilege. user_name and password
    are carried from the session record for completeness; nothing in this
    service checks the password.
    """

    client_id: str
    admin: bool = False
    user_id: str | None = None
    user_name: str | None = None
    password: str | None = field(default=None, repr=False)
