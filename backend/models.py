from sqlalchemy import Column, Integer, String, Boolean, DateTime, Enum as SQLEnum, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from time_utils import now_tz
import enum


class ParticipantType(enum.Enum):
    INTERNAL = "INTERNAL"
    EXTERNAL = "EXTERNAL"


class Registration(Base):
    __tablename__ = "registrations"

    id = Column(Integer, primary_key=True, index=True)
    event_name = Column(String(100), index=True, nullable=False)
    team_name = Column(String(255), nullable=False)
    cap_name = Column(String(255), nullable=False)
    cap_phone = Column(String(20), nullable=False)
    cap_roll = Column(String(20), nullable=True)  # only meaningful for INTERNAL captains
    participant_type = Column(SQLEnum(ParticipantType), nullable=False)
    created_at = Column(DateTime(timezone=True), default=now_tz)

    team_members = relationship(
        "RegistrationTeamMember",
        back_populates="registration",
        order_by="RegistrationTeamMember.position",
        cascade="all, delete-orphan",
    )


class RegistrationTeamMember(Base):
    __tablename__ = "registration_team_members"

    id = Column(Integer, primary_key=True, index=True)
    registration_id = Column(Integer, ForeignKey("registrations.id"), nullable=False, index=True)
    position = Column(Integer, nullable=False, default=0)
    mem_name = Column(String(255), nullable=True)
    mem_roll = Column(String(20), nullable=True)
    mem_phone = Column(String(20), nullable=True)

    registration = relationship("Registration", back_populates="team_members")


class CoordinatorDownloadLog(Base):
    __tablename__ = "coordinator_download_logs"

    id = Column(Integer, primary_key=True, index=True)
    event_name = Column(String(100), unique=True, index=True, nullable=False)
    vcards_downloaded = Column(Boolean, default=False, nullable=False)
    first_downloader_name = Column(String(255), nullable=True)
    download_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=now_tz)
