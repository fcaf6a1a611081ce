"""Employer media library endpoints."""
from typing import NoReturn, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, File, Form, Query, Request, UploadFile, status
from sqlalchemy.ext.asyncio import AsyncSession

from employer_portal.core.container import ApplicationContainer
from employer_portal.core.errors import api_error
from employer_portal.interfaces.http.deps import (
    client_ip,
    get_app_container,
    get_current_employer_user,
    get_db_session,
)
from employer_portal.modules.accounts import User
from employer_portal.modules.media import MediaAsset, MediaError, MediaNotFoundError, MediaValidationError
from employer_portal.modules.media.rules import LOGO, display_format, format_file_size
from employer_portal.modules.media.service import MediaService
from employer_portal.schemas import (
    MediaActionRequest,
    MediaActionResponse,
    MediaAssetResponse,
    MediaDeleteResponse,
    MediaLibraryResponse,
)

router = APIRouter()


def _media_service(db: AsyncSession, container: ApplicationContainer) -> MediaService:
    return MediaService.with_session(db, container.media_storage, container.settings.media.max_gallery_images)


def _to_response(asset: MediaAsset) -> MediaAssetResponse:
    return MediaAssetResponse(
        id=asset.id,
        type=asset.type,
        url=asset.url,
        format=display_format(None, asset.format),
        file_size=asset.file_size,
        file_size_label=format_file_size(asset.file_size) if asset.file_size else None,
        alt_text=asset.alt_text,
        created_at=asset.created_at,
    )


def _raise_media_error(exc: MediaError) -> NoReturn:
    if isinstance(exc, MediaNotFoundError):
        raise api_error(status.HTTP_404_NOT_FOUND, str(exc)) from exc
    if isinstance(exc, MediaValidationError):
        raise api_error(status.HTTP_400_BAD_REQUEST, str(exc)) from exc
    raise api_error(status.HTTP_500_INTERNAL_SERVER_ERROR, str(exc)) from exc


@router.get("", response_model=MediaLibraryResponse, summary="List logo and sfeerbeelden")
async def list_media(
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> MediaLibraryResponse:
    try:
        library = await _media_service(db, container).list_library(user.employer_id)
    except MediaError as exc:
        _raise_media_error(exc)
    return MediaLibraryResponse(
        logo=_to_response(library.logo) if library.logo else None,
        images=[_to_response(asset) for asset in library.images],
        header_image_id=library.header_image_id,
        max_images=library.max_images,
    )


@router.post(
    "",
    response_model=MediaAssetResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a logo or sfeerbeeld",
)
async def upload_media(
    request: Request,
    background_tasks: BackgroundTasks,
    file: UploadFile = File(...),
    type: Optional[str] = Form(default=None),
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> MediaAssetResponse:
    try:
        asset = await _media_service(db, container).upload(user.employer_id, type, file)
    except MediaError as exc:
        _raise_media_error(exc)
    finally:
        await file.close()
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "media_uploaded",
        actor_user_id=user.id,
        employer_id=user.employer_id,
        payload={"media_id": asset.id, "type": asset.type},
        ip_address=client_ip(request),
    )
    if asset.type == LOGO:
        background_tasks.add_task(container.sync_notifier.employer_changed, user.employer_id)
    return _to_response(asset)


@router.patch("", response_model=MediaActionResponse, summary="Set or remove the header image")
async def media_action(
    payload: MediaActionRequest,
    background_tasks: BackgroundTasks,
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> MediaActionResponse:
    try:
        header_id = await _media_service(db, container).apply_action(user.employer_id, payload.id, payload.action)
    except MediaError as exc:
        _raise_media_error(exc)
    await db.commit()

    background_tasks.add_task(container.sync_notifier.employer_changed, user.employer_id)
    return MediaActionResponse(header_image_id=header_id)


@router.delete("", response_model=MediaDeleteResponse, summary="Delete a sfeerbeeld")
async def delete_media(
    request: Request,
    background_tasks: BackgroundTasks,
    id: Optional[str] = Query(default=None),
    type: Optional[str] = Query(default=None),
    user: User = Depends(get_current_employer_user),
    db: AsyncSession = Depends(get_db_session),
    container: ApplicationContainer = Depends(get_app_container),
) -> MediaDeleteResponse:
    try:
        asset = await _media_service(db, container).delete(user.employer_id, id, type)
    except MediaError as exc:
        _raise_media_error(exc)
    await db.commit()

    background_tasks.add_task(
        container.event_logger.log,
        "media_deleted",
        actor_user_id=user.id,
        employer_id=user.employer_id,
        payload={"media_id": asset.id, "type": asset.type},
        ip_address=client_ip(request),
    )
    background_tasks.add_task(container.sync_notifier.employer_changed, user.employer_id)
    return MediaDeleteResponse(deleted_id=asset.id)
