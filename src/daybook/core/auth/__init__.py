"""Google authentication.

Behind ``daybook[google]``; imports fail with a helpful message if the
Google libraries aren't installed.
"""

from .service_account import DEFAULT_SCOPES, DRIVE_APPDATA_SCOPE, ServiceAccountAuth

__all__ = [
    "DEFAULT_SCOPES",
    "DRIVE_APPDATA_SCOPE",
    "ServiceAccountAuth",
]
