import base64
import io
from typing import List, Sequence

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from models import ParticipantType, Registration
from time_utils import format_display_time

PLACEHOLDER = "-"
EXTERNAL_ROLL = "EXTERNAL"
SHEET_TITLE = "Participants"

BASE_COLUMNS = [
    ("Team Name", 25),
    ("Captain Name", 20),
    ("Captain Phone", 15),
    ("Captain Roll", 15),
    ("Type", 10),
    ("Registered At", 20),
]


def _participant_type_value(registration: Registration) -> str:
    value = registration.participant_type
    return value.value if isinstance(value, ParticipantType) else str(value or "")


def is_internal(registration: Registration) -> bool:
    return _participant_type_value(registration) == ParticipantType.INTERNAL.value


def max_team_members(registrations: Sequence[Registration]) -> int:
    return max((len(reg.team_members or []) for reg in registrations), default=0)


def build_export_columns(member_slots: int) -> List[tuple]:
    columns = list(BASE_COLUMNS)
    for i in range(1, member_slots + 1):
        columns.append((f"Mem {i} Name", 20))
        columns.append((f"Mem {i} Roll", 15))
        columns.append((f"Mem {i} Phone", 15))
    return columns


def build_export_row(registration: Registration, member_slots: int) -> list:
    row = [
        registration.team_name,
        registration.cap_name,
        registration.cap_phone,
        registration.cap_roll if is_internal(registration) else EXTERNAL_ROLL,
        _participant_type_value(registration),
        format_display_time(registration.created_at),
    ]
    members = list(registration.team_members or [])
    for index in range(member_slots):
        if index < len(members):
            member = members[index]
            row.extend([
                member.mem_name or PLACEHOLDER,
                member.mem_roll or PLACEHOLDER,
                member.mem_phone or PLACEHOLDER,
            ])
        else:
            row.extend([PLACEHOLDER, PLACEHOLDER, PLACEHOLDER])
    return row


def build_registrations_workbook(registrations: Sequence[Registration]) -> Workbook:
    member_slots = max_team_members(registrations)
    columns = build_export_columns(member_slots)

    wb = Workbook()
    ws = wb.active
    ws.title = SHEET_TITLE
    ws.append([header for header, _ in columns])
    for col_idx, (_, width) in enumerate(columns, start=1):
        ws.column_dimensions[get_column_letter(col_idx)].width = width

    for registration in registrations:
        ws.append(build_export_row(registration, member_slots))

    for cell in ws[1]:
        cell.font = Font(bold=True)
    return wb


def build_registrations_excel(registrations: Sequence[Registration]) -> bytes:
    output = io.BytesIO()
    build_registrations_workbook(registrations).save(output)
    return output.getvalue()


def encode_excel_base64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")
