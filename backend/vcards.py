import re
from typing import List, Sequence

from models import Registration
from registration_export import is_internal

NON_DIGIT_RE = re.compile(r"\D")

VCARD_TEMPLATE = (
    "BEGIN:VCARD\n"
    "VERSION:3.0\n"
    "FN:{display}\n"
    "N:;{display};;;\n"
    "TEL;TYPE=CELL:{phone}\n"
    "END:VCARD\n"
)


def generate_vcard(display_name: str, phone: str) -> str:
    return VCARD_TEMPLATE.format(display=display_name, phone=phone)


def contact_id(event_name: str, registration: Registration) -> str:
    """Build the short contact id, e.g. ``ha101`` or ``haEXT43210987``."""
    prefix = str(event_name or "")[:2].lower()
    if is_internal(registration):
        return f"{prefix}{registration.cap_roll or ''}"
    digits = NON_DIGIT_RE.sub("", registration.cap_phone or "")
    return f"{prefix}EXT{digits[-8:]}"


def registration_vcards(event_name: str, registration: Registration) -> List[str]:
    uid = contact_id(event_name, registration)
    cards = [generate_vcard(f"{uid}-1", registration.cap_phone)]
    members = registration.team_members or []
    if members and members[0].mem_phone:
        cards.append(generate_vcard(f"{uid}-2", members[0].mem_phone))
    return cards


def build_vcf(event_name: str, registrations: Sequence[Registration]) -> str:
    # Duplicate ids across registrations are emitted as-is.
    return "".join(
        card
        for registration in registrations
        for card in registration_vcards(event_name, registration)
    )
