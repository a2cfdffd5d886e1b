"""Service-account credentials for the Google Drive sync backend.

The diary only ever touches Drive's hidden per-app folder, so the default
scope is ``drive.appdata``. The key path comes from ``sync.service_account_key``.
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

DRIVE_APPDATA_SCOPE = "https://www.googleapis.com/auth/drive.appdata"
DEFAULT_SCOPES = [DRIVE_APPDATA_SCOPE]

_MISSING_EXTRA = "Google Drive sync needs the google extra: pip install daybook[google]"


class ServiceAccountAuth:
    """Lazily loaded service-account credentials plus a Drive v3 client factory."""

    def __init__(self, key_path: str | Path, scopes: list[str] | None = None):
        self.key_path = Path(key_path).expanduser()
        self.scopes = list(scopes or DEFAULT_SCOPES)
        self._credentials = None

    def _load(self):
        try:
            from google.oauth2.service_account import Credentials
        except ImportError as e:
            raise ImportError(_MISSING_EXTRA) from e

        if not self.key_path.is_file():
            raise FileNotFoundError(
                f"No service account key at {self.key_path} (check sync.service_account_key in your config)"
            )
        logger.debug(f"Loading service account key {self.key_path} for {', '.join(self.scopes)}")
        return Credentials.from_service_account_file(str(self.key_path), scopes=self.scopes)

    @property
    def credentials(self):
        if self._credentials is None:
            self._credentials = self._load()
        return self._credentials

    def get_drive_service(self):
        """Build a Drive v3 resource bound to these credentials."""
        try:
            from googleapiclient.discovery import build
        except ImportError as e:
            raise ImportError(_MISSING_EXTRA) from e
        return build("drive", "v3", credentials=self.credentials, cache_discovery=False)
