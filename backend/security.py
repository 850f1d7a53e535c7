import os
import secrets
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from fastapi import HTTPException, status

ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

MASTER_PASSKEY_KEY = "PASSKEY_MASTER"


class EnvPasskeySource:
    """Looks up configured passkeys in the process environment."""

    def get(self, key: str) -> Optional[str]:
        return os.environ.get(key)


def get_passkey_source() -> EnvPasskeySource:
    return EnvPasskeySource()


def event_passkey_key(coords_value: str) -> str:
    return f"PASSKEY_{str(coords_value or '').strip().upper()}"


def _matches(expected: Optional[str], supplied: Optional[str]) -> bool:
    if not expected or supplied is None:
        return False
    return secrets.compare_digest(expected.encode("utf-8"), supplied.encode("utf-8"))


def is_master_passkey(source, passkey: str) -> bool:
    return _matches(source.get(MASTER_PASSKEY_KEY), passkey)


def resolve_download_role(source, coords_value: str, passkey: str) -> bool:
    """Return True for the master passkey, False for a valid event passkey.

    Anything else is rejected with 401 before the caller touches the database.
    """
    if is_master_passkey(source, passkey):
        return True
    if not _matches(source.get(event_passkey_key(coords_value)), passkey):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid Passkey")
    return False
