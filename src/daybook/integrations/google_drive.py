"""Google Drive blob store.

Keeps the diary documents in the Drive ``appDataFolder``, a hidden per-app
space, addressed by file name. Blocking Drive v3 calls run in a worker
thread so the event loop stays responsive.

Requires ``daybook[google]``.
"""

from __future__ import annotations

import asyncio
import io
import threading
from typing import Any

from loguru import logger

from daybook.core.storage.base import BlobStore, StorageError

APP_DATA_SPACE = "appDataFolder"


class GoogleDriveBlobStore(BlobStore):
    """Drive v3 implementation of :class:`~daybook.core.storage.BlobStore`.

    Args:
        auth: A :class:`~daybook.core.auth.ServiceAccountAuth` instance.
        mime_type: Content type recorded for uploaded blobs.
    """

    def __init__(self, auth, mime_type: str = "application/json", **config):
        super().__init__(**config)
        self.auth = auth
        self.mime_type = mime_type
        self._service = None
        self._file_ids: dict[str, str] = {}
        # Worker threads outlive a timed-out await; one request at a time keeps uploads in order.
        self._request_lock = threading.Lock()

    @property
    def name(self) -> str:
        return "gdrive"

    @property
    def service(self):
        if self._service is None:
            self._service = self.auth.get_drive_service()
        return self._service

    def _find_file_id(self, key: str) -> str | None:
        if key in self._file_ids:
            return self._file_ids[key]

        escaped = key.replace("\\", "\\\\").replace("'", "\\'")
        response = (
            self.service.files()
            .list(
                q=f"name = '{escaped}' and trashed = false",
                spaces=APP_DATA_SPACE,
                fields="files(id, name, modifiedTime)",
                pageSize=1,
            )
            .execute()
        )
        files = response.get("files", [])
        if not files:
            return None
        self._file_ids[key] = files[0]["id"]
        return self._file_ids[key]

    def _get_blocking(self, key: str) -> bytes | None:
        file_id = self._find_file_id(key)
        if file_id is None:
            return None

        try:
            from googleapiclient.http import MediaIoBaseDownload
        except ImportError:
            raise ImportError("Install with: pip install daybook[google]")

        buffer = io.BytesIO()
        downloader = MediaIoBaseDownload(buffer, self.service.files().get_media(fileId=file_id))
        done = False
        while not done:
            _status, done = downloader.next_chunk()
        return buffer.getvalue()

    def _put_blocking(self, key: str, data: bytes) -> None:
        try:
            from googleapiclient.http import MediaIoBaseUpload
        except ImportError:
            raise ImportError("Install with: pip install daybook[google]")

        media = MediaIoBaseUpload(io.BytesIO(data), mimetype=self.mime_type, resumable=False)
        file_id = self._find_file_id(key)
        if file_id is not None:
            self.service.files().update(fileId=file_id, media_body=media).execute()
            return

        metadata: dict[str, Any] = {"name": key, "parents": [APP_DATA_SPACE]}
        created = self.service.files().create(body=metadata, media_body=media, fields="id").execute()
        self._file_ids[key] = created["id"]
        logger.debug(f"Created {key} in Drive app data ({created['id']})")

    def _locked(self, fn, key: str, *args) -> Any:
        with self._request_lock:
            return fn(key, *args)

    async def _run(self, key: str, fn, *args) -> Any:
        try:
            return await asyncio.to_thread(self._locked, fn, key, *args)
        except ImportError:
            raise
        except Exception as e:
            # A cached id may point at a file deleted elsewhere; look it up again next time.
            self._file_ids.pop(key, None)
            raise StorageError(f"Google Drive request for {key} failed: {e}") from e

    async def get(self, key: str) -> bytes | None:
        return await self._run(key, self._get_blocking)

    async def put(self, key: str, data: bytes) -> None:
        await self._run(key, self._put_blocking, data)
