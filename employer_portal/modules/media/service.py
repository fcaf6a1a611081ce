"""Employer media library: uploads, header selection and soft deletion."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.infrastructure.database.repositories.account_repository import SqlEmployerRepository
from employer_portal.infrastructure.database.repositories.lookup_repository import SqlLookupRepository
from employer_portal.infrastructure.database.repositories.media_repository import SqlMediaAssetRepository
from employer_portal.modules.accounts.models import Employer
from employer_portal.modules.accounts.repository import EmployerRepository
from employer_portal.modules.lookups.repository import LookupRepository

from .exceptions import MediaNotFoundError, MediaValidationError
from .models import MediaAsset, MediaLibrary
from .repository import MediaAssetRepository, MediaStorage
from .rules import (
    LOGO,
    SFEERBEELD,
    generate_alt_text,
    max_bytes_for,
    size_limit_message,
    validate_content_type,
    validate_media_type,
)

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024
HEADER_ACTIONS = {"set_header", "remove_header"}


@dataclass(slots=True)
class MediaService:
    repository: MediaAssetRepository
    employers: EmployerRepository
    lookups: LookupRepository
    storage: MediaStorage
    max_gallery_images: int = 10

    @classmethod
    def with_session(cls, session: AsyncSession, storage: MediaStorage, max_gallery_images: int = 10) -> "MediaService":
        return cls(
            SqlMediaAssetRepository(session),
            SqlEmployerRepository(session),
            SqlLookupRepository(session),
            storage,
            max_gallery_images,
        )

    async def list_library(self, employer_id: str) -> MediaLibrary:
        employer = await self._get_employer(employer_id)
        logo = None
        if employer.logo_id:
            logo = await self.repository.get_by_id(employer.logo_id)
            if logo is not None and logo.is_deleted:
                logo = None
        images = await self.repository.list_active(employer_id, SFEERBEELD)
        return MediaLibrary(
            logo=logo,
            images=list(images),
            header_image_id=employer.header_image_id,
            max_images=self.max_gallery_images,
        )

    async def upload(self, employer_id: str, media_type: str | None, upload: UploadFile) -> MediaAsset:
        media_type = validate_media_type(media_type)
        validate_content_type(media_type, upload.content_type)

        if media_type == SFEERBEELD:
            current = await self.repository.count_active(employer_id, SFEERBEELD)
            if current >= self.max_gallery_images:
                raise MediaValidationError(
                    f"Je kunt maximaal {self.max_gallery_images} afbeeldingen uploaden"
                )

        employer = await self._get_employer(employer_id)
        content = await _read_limited(upload, max_bytes_for(media_type), size_limit_message(media_type))

        stored = await self.storage.upload(
            content,
            filename=upload.filename or media_type,
            content_type=upload.content_type,
            folder=employer_id,
        )

        sector_name = await self._sector_name(employer)
        alt_text = generate_alt_text(
            media_type,
            employer.name,
            sector=sector_name,
            location=employer.location,
        )

        if media_type == LOGO and employer.logo_id:
            await self.repository.soft_delete(employer.logo_id)

        asset = await self.repository.create(
            employer_id=employer_id,
            type=media_type,
            url=stored.secure_url,
            public_id=stored.public_id,
            format=stored.format,
            file_size=stored.bytes,
            alt_text=alt_text,
        )

        if media_type == LOGO:
            await self.employers.update_employer(employer_id, {"logo_id": asset.id, "needs_sync": True})

        logger.info("Employer %s uploaded %s %s", employer_id, media_type, asset.id)
        return asset

    async def apply_action(self, employer_id: str, asset_id: str | None, action: str | None) -> str | None:
        """Run a header action and return the resulting header image id."""
        if not asset_id or not action:
            raise MediaValidationError("Asset ID en actie zijn verplicht")
        if action not in HEADER_ACTIONS:
            raise MediaValidationError("Ongeldige actie")

        employer = await self._get_employer(employer_id)
        await self._get_owned_image(employer_id, asset_id)

        if action == "set_header":
            await self.employers.update_employer(employer_id, {"header_image_id": asset_id, "needs_sync": True})
            return asset_id

        if employer.header_image_id == asset_id:
            await self.employers.update_employer(employer_id, {"header_image_id": None, "needs_sync": True})
            return None
        return employer.header_image_id

    async def delete(self, employer_id: str, asset_id: str | None, media_type: str | None = None) -> MediaAsset:
        if not asset_id:
            raise MediaValidationError("Asset ID en type zijn verplicht")
        if media_type == LOGO:
            raise MediaValidationError(
                "Een logo kan niet verwijderd worden, alleen vervangen door een nieuw logo te uploaden"
            )

        employer = await self._get_employer(employer_id)
        asset = await self.repository.get_by_id(asset_id)
        if asset is not None and asset.employer_id == employer_id and asset.type == LOGO:
            raise MediaValidationError(
                "Een logo kan niet verwijderd worden, alleen vervangen door een nieuw logo te uploaden"
            )
        asset = await self._get_owned_image(employer_id, asset_id)

        changes: dict[str, object] = {}
        if asset_id in employer.gallery:
            changes["gallery"] = [item for item in employer.gallery if item != asset_id]
        if employer.header_image_id == asset_id:
            changes["header_image_id"] = None
        if changes:
            changes["needs_sync"] = True
            await self.employers.update_employer(employer_id, changes)

        await self.repository.soft_delete(asset_id)
        logger.info("Employer %s deleted media %s", employer_id, asset_id)
        return asset

    async def delete_for_employer(self, employer_id: str) -> None:
        await self.repository.delete_for_employer(employer_id)

    async def _get_employer(self, employer_id: str) -> Employer:
        employer = await self.employers.get_by_id(employer_id)
        if employer is None:
            raise MediaNotFoundError("Werkgever niet gevonden")
        return employer

    async def _get_owned_image(self, employer_id: str, asset_id: str) -> MediaAsset:
        asset = await self.repository.get_by_id(asset_id)
        if asset is None or asset.is_deleted or asset.employer_id != employer_id or asset.type != SFEERBEELD:
            raise MediaNotFoundError("Afbeelding niet gevonden")
        return asset

    async def _sector_name(self, employer: Employer) -> str | None:
        if not employer.sector_id:
            return None
        lookup = await self.lookups.get_by_id(employer.sector_id)
        return lookup.name if lookup else None


async def _read_limited(upload: UploadFile, max_bytes: int, too_large_message: str) -> bytes:
    chunks: list[bytes] = []
    total_size = 0
    try:
        while True:
            chunk = await upload.read(CHUNK_SIZE)
            if not chunk:
                break
            total_size += len(chunk)
            if total_size > max_bytes:
                raise MediaValidationError(too_large_message)
            chunks.append(chunk)
    finally:
        await upload.close()

    if total_size == 0:
        raise MediaValidationError("Het geüploade bestand is leeg")
    return b"".join(chunks)
