"""Media storage backends: local filesystem and Cloudinary upload API."""

from __future__ import annotations

import asyncio
import hashlib
import logging
import os
import time
from dataclasses import dataclass
from pathlib import Path

import httpx

from employer_portal.core.config import MediaSettings
from employer_portal.modules.media.exceptions import StorageError
from employer_portal.modules.media.models import StoredMedia

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/webp": ".webp",
    "image/avif": ".avif",
    "image/svg+xml": ".svg",
}


@dataclass(slots=True)
class LocalMediaStorage:
    """Writes uploads below ``root`` and serves them from ``base_url``."""

    root: Path
    base_url: str = "/media"

    async def upload(
        self,
        content: bytes,
        *,
        filename: str,
        content_type: str | None,
        folder: str,
    ) -> StoredMedia:
        if not content:
            raise StorageError("Het geüploade bestand is leeg")

        suffix = _EXTENSIONS.get(content_type or "") or Path(_sanitize_filename(filename) or "").suffix
        digest = hashlib.sha256(content).hexdigest()
        name = f"{digest[:16]}{os.urandom(4).hex()}"
        target_path = self.root / folder / f"{name}{suffix}"
        try:
            await asyncio.to_thread(_write_file, target_path, content)
        except OSError as exc:
            logger.error("Writing %s failed: %s", target_path, exc)
            raise StorageError("Fout bij uploaden van afbeelding") from exc

        public_id = f"{folder}/{name}"
        logger.info("Stored media %s (%s bytes)", public_id, len(content))
        return StoredMedia(
            secure_url=f"{self.base_url.rstrip('/')}/{public_id}{suffix}",
            public_id=public_id,
            bytes=len(content),
            format=suffix.lstrip(".") or "bin",
        )


@dataclass(slots=True)
class CloudinaryMediaStorage:
    """Signed uploads against the Cloudinary REST API."""

    cloud_name: str
    api_key: str
    api_secret: str
    root_folder: str = "employers"
    timeout_seconds: float = 30.0

    @property
    def upload_url(self) -> str:
        return f"https://api.cloudinary.com/v1_1/{self.cloud_name}/image/upload"

    def sign(self, params: dict[str, str]) -> str:
        to_sign = "&".join(f"{key}={params[key]}" for key in sorted(params))
        return hashlib.sha1(f"{to_sign}{self.api_secret}".encode("utf-8")).hexdigest()

    async def upload(
        self,
        content: bytes,
        *,
        filename: str,
        content_type: str | None,
        folder: str,
    ) -> StoredMedia:
        params = {
            "folder": f"{self.root_folder}/{folder}",
            "timestamp": str(int(time.time())),
        }
        data = {**params, "api_key": self.api_key, "signature": self.sign(params)}
        files = {"file": (_sanitize_filename(filename) or "upload", content, content_type or "application/octet-stream")}

        timeout = httpx.Timeout(self.timeout_seconds, connect=5.0)
        async with httpx.AsyncClient(timeout=timeout) as client:
            response = await client.post(self.upload_url, data=data, files=files)

        if response.status_code >= 400:
            logger.error("Cloudinary upload failed (%s): %s", response.status_code, response.text)
            raise StorageError("Fout bij uploaden van afbeelding")

        payload = response.json()
        return StoredMedia(
            secure_url=payload["secure_url"],
            public_id=payload["public_id"],
            bytes=int(payload.get("bytes") or len(content)),
            format=payload.get("format") or "",
        )


def build_media_storage(settings: MediaSettings) -> LocalMediaStorage | CloudinaryMediaStorage:
    if settings.backend == "cloudinary":
        if not (settings.cloudinary_cloud_name and settings.cloudinary_api_key and settings.cloudinary_api_secret):
            raise StorageError("Cloudinary niet geconfigureerd")
        return CloudinaryMediaStorage(
            cloud_name=settings.cloudinary_cloud_name,
            api_key=settings.cloudinary_api_key,
            api_secret=settings.cloudinary_api_secret,
            root_folder=settings.cloudinary_folder,
        )
    return LocalMediaStorage(root=Path(settings.local_dir).resolve(), base_url=settings.local_base_url)


def _write_file(path: Path, content: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(content)


def _sanitize_filename(filename: str | None) -> str | None:
    if not filename:
        return None
    name = os.path.basename(filename)
    return name.replace("\0", "").strip()
