"""SQLAlchemy implementation of the media asset repository."""

from __future__ import annotations

from typing import Iterable

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.db.models import MediaAsset as MediaAssetModel
from employer_portal.modules.media.models import MediaAsset


class SqlMediaAssetRepository:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_by_id(self, asset_id: str) -> MediaAsset | None:
        model = await self._session.get(MediaAssetModel, asset_id)
        return self._to_domain(model) if model else None

    async def get_many(self, asset_ids: Iterable[str]) -> list[MediaAsset]:
        ids = [asset_id for asset_id in asset_ids if asset_id]
        if not ids:
            return []
        stmt = select(MediaAssetModel).where(
            MediaAssetModel.id.in_(ids),
            MediaAssetModel.is_deleted.is_(False),
        )
        result = await self._session.execute(stmt)
        by_id = {model.id: self._to_domain(model) for model in result.scalars().all()}
        return [by_id[asset_id] for asset_id in ids if asset_id in by_id]

    async def list_active(self, employer_id: str, type: str | None = None) -> list[MediaAsset]:
        stmt = (
            select(MediaAssetModel)
            .where(
                MediaAssetModel.employer_id == employer_id,
                MediaAssetModel.is_deleted.is_(False),
            )
            .order_by(MediaAssetModel.created_at.desc())
        )
        if type is not None:
            stmt = stmt.where(MediaAssetModel.type == type)
        result = await self._session.execute(stmt)
        return [self._to_domain(model) for model in result.scalars().all()]

    async def count_active(self, employer_id: str, type: str) -> int:
        stmt = (
            select(func.count())
            .select_from(MediaAssetModel)
            .where(
                MediaAssetModel.employer_id == employer_id,
                MediaAssetModel.type == type,
                MediaAssetModel.is_deleted.is_(False),
            )
        )
        result = await self._session.execute(stmt)
        return int(result.scalar_one())

    async def create(
        self,
        *,
        employer_id: str,
        type: str,
        url: str,
        public_id: str | None,
        format: str | None,
        file_size: int | None,
        alt_text: str | None,
    ) -> MediaAsset:
        model = MediaAssetModel(
            employer_id=employer_id,
            type=type,
            url=url,
            public_id=public_id,
            format=format,
            file_size=file_size,
            alt_text=alt_text,
            is_deleted=False,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_domain(model)

    async def soft_delete(self, asset_id: str) -> None:
        stmt = (
            update(MediaAssetModel)
            .where(MediaAssetModel.id == asset_id)
            .values(is_deleted=True)
            .execution_options(synchronize_session="fetch")
        )
        await self._session.execute(stmt)

    async def delete_for_employer(self, employer_id: str) -> None:
        await self._session.execute(delete(MediaAssetModel).where(MediaAssetModel.employer_id == employer_id))

    @staticmethod
    def _to_domain(model: MediaAssetModel) -> MediaAsset:
        return MediaAsset(
            id=model.id,
            employer_id=model.employer_id,
            type=model.type,
            url=model.url,
            public_id=model.public_id,
            format=model.format,
            file_size=model.file_size,
            alt_text=model.alt_text,
            is_deleted=bool(model.is_deleted),
            created_at=model.created_at,
        )
