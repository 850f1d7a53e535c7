"""First-download lock for coordinator exports.

Each event owns one ``CoordinatorDownloadLog`` row. The first non-admin
download flips ``vcards_downloaded`` with a single conditional UPDATE, so under
concurrent requests exactly one coordinator wins. Admin downloads only read the
row.
"""
import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from models import CoordinatorDownloadLog
from time_utils import now_tz

logger = logging.getLogger(__name__)


@dataclass
class LockResolution:
    granted_full_access: bool
    is_first_download: bool
    log: CoordinatorDownloadLog


def get_download_log(db: Session, event_name: str) -> Optional[CoordinatorDownloadLog]:
    return db.query(CoordinatorDownloadLog).filter(CoordinatorDownloadLog.event_name == event_name).first()


def ensure_download_log(db: Session, event_name: str) -> CoordinatorDownloadLog:
    log = get_download_log(db, event_name)
    if log:
        return log

    db.add(CoordinatorDownloadLog(event_name=event_name, vcards_downloaded=False))
    try:
        db.commit()
        logger.info("Created download log for event %s", event_name)
    except IntegrityError:
        # Another request created it between our read and insert.
        db.rollback()
        logger.info("Download log for event %s created concurrently; re-reading", event_name)

    log = get_download_log(db, event_name)
    if log is None:
        raise RuntimeError(f"Download log for event {event_name!r} missing after create")
    return log


def claim_download_lock(db: Session, event_name: str, coordinator_name: str) -> bool:
    """Atomically claim the lock. Returns True only for the request that flipped it."""
    updated = (
        db.query(CoordinatorDownloadLog)
        .filter(
            CoordinatorDownloadLog.event_name == event_name,
            CoordinatorDownloadLog.vcards_downloaded == False,  # noqa: E712
        )
        .update(
            {
                CoordinatorDownloadLog.vcards_downloaded: True,
                CoordinatorDownloadLog.first_downloader_name: coordinator_name,
                CoordinatorDownloadLog.download_time: now_tz(),
            },
            synchronize_session=False,
        )
    )
    db.commit()
    return updated == 1


def resolve_download_lock(
    db: Session,
    event_name: str,
    coordinator_name: str,
    *,
    is_admin: bool,
) -> LockResolution:
    log = ensure_download_log(db, event_name)

    if is_admin:
        db.refresh(log)
        logger.info(
            "Admin download for event %s (already claimed: %s)",
            event_name,
            bool(log.vcards_downloaded),
        )
        return LockResolution(granted_full_access=True, is_first_download=False, log=log)

    won = claim_download_lock(db, event_name, coordinator_name)
    log = get_download_log(db, event_name)
    db.refresh(log)
    if won:
        logger.info("Coordinator %s claimed first download for event %s", coordinator_name, event_name)
    else:
        logger.info(
            "Coordinator %s is late for event %s; first download by %s",
            coordinator_name,
            event_name,
            log.first_downloader_name,
        )
    return LockResolution(granted_full_access=won, is_first_download=won, log=log)
