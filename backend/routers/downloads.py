import logging
from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session, selectinload

from database import get_db
from download_lock import LockResolution, resolve_download_lock
from models import Registration
from registration_export import build_registrations_excel, encode_excel_base64
from schemas import DownloadEmptyResponse, DownloadRequest, DownloadResponse
from security import get_passkey_source, resolve_download_role
from time_utils import format_display_time
from vcards import build_vcf

logger = logging.getLogger(__name__)

router = APIRouter()

FIRST_COORDINATOR_MESSAGE = "You are the first coordinator, You can download both Contacts and the Excel Sheet"
ADMIN_NOT_DOWNLOADED_MESSAGE = "ADMIN MODE: Retrieved all data. (Status: Not yet downloaded by any coordinator)"
NO_REGISTRATIONS_MESSAGE = "No one registered yet!"


def _event_registrations(db: Session, event_name: str) -> List[Registration]:
    return (
        db.query(Registration)
        .options(selectinload(Registration.team_members))
        .filter(Registration.event_name == event_name)
        .order_by(Registration.created_at.desc(), Registration.id.desc())
        .all()
    )


def _download_message(resolution: LockResolution, is_admin: bool) -> str:
    log = resolution.log
    downloaded_at = format_display_time(log.download_time)
    if is_admin:
        if log.vcards_downloaded:
            return (
                "ADMIN MODE: Retrieved all data. "
                f"(Note: Originally downloaded by {log.first_downloader_name} at {downloaded_at})"
            )
        return ADMIN_NOT_DOWNLOADED_MESSAGE
    if resolution.is_first_download:
        return FIRST_COORDINATOR_MESSAGE
    return f"⚠ Alert : Contacts were ALREADY downloaded by *{log.first_downloader_name}*, At {downloaded_at}."


@router.post("/download", response_model=None)
def download_registrations(
    payload: DownloadRequest,
    db: Session = Depends(get_db),
    passkeys=Depends(get_passkey_source),
):
    is_admin = resolve_download_role(passkeys, payload.coords_value, payload.passkey)

    try:
        registrations = _event_registrations(db, payload.event_name)
        if not registrations:
            return DownloadEmptyResponse(message=NO_REGISTRATIONS_MESSAGE)

        resolution = resolve_download_lock(
            db,
            payload.event_name,
            payload.coordinator_name,
            is_admin=is_admin,
        )

        excel_base64 = encode_excel_base64(build_registrations_excel(registrations))
        vcf = build_vcf(payload.event_name, registrations) if resolution.granted_full_access else None

        return DownloadResponse(
            success=True,
            message=_download_message(resolution, is_admin),
            excel_base64=excel_base64,
            vcf=vcf,
        )
    except Exception:
        db.rollback()
        logger.exception("Download failed for event %s", payload.event_name)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Server Error processing download",
        )
