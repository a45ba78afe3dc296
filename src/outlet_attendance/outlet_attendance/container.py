from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from .attendance.factory import AttendanceStrategyFactory
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_IDENTITY_TIMEOUT_SECONDS, DEFAULT_OTP_LENGTH
from .core.enums import SurveyFlowVariant
from .database.connection import DBConfig, DatabaseConnection
from .guards.base import RetryPolicy
from .outlets.mysql_outlet_repository import MySQLOutletRepository
from .outlets.repository import OutletRepository
from .progress.mysql_progress_store import MySQLProgressStore
from .progress.repository import ProgressStore
from .sessions.provider import HttpIdentityProvider, IdentityProvider
from .sessions.service import SessionService
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository


@dataclass(frozen=True)
class AppSettings:
    default_radius_meters: Optional[int] = None
    reset_progress_on_unload: bool = True
    survey_flow_variant: SurveyFlowVariant = SurveyFlowVariant.OTP
    otp_length: int = DEFAULT_OTP_LENGTH


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    outlets_repo: OutletRepository
    shifts_repo: ShiftRepository
    attendance_repo: AttendanceRepository
    progress_store_factory: Callable[[str], ProgressStore]

    identity: IdentityProvider
    session_service: SessionService
    attendance_service: AttendanceService

    retry_policy: RetryPolicy
    settings: AppSettings

    def progress_store(self, device_id: str) -> ProgressStore:
        return self.progress_store_factory(device_id)


def build_container(*, db_config: dict, settings) -> Container:
    """Wire MySQL repositories and the HTTP identity provider from a settings module."""
    conn = DatabaseConnection.get_instance(DBConfig.from_mapping(db_config))

    outlets_repo = MySQLOutletRepository(conn)
    shifts_repo = MySQLShiftRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)

    identity = HttpIdentityProvider(
        str(getattr(settings, "IDENTITY_BASE_URL")),
        timeout=float(getattr(settings, "IDENTITY_TIMEOUT_SECONDS", DEFAULT_IDENTITY_TIMEOUT_SECONDS)),
    )
    app_settings = AppSettings(
        default_radius_meters=getattr(settings, "DEFAULT_CHECKIN_RADIUS_METERS", None),
        reset_progress_on_unload=bool(getattr(settings, "RESET_PROGRESS_ON_UNLOAD", True)),
        survey_flow_variant=SurveyFlowVariant(getattr(settings, "SURVEY_FLOW_VARIANT", "otp")),
        otp_length=int(getattr(settings, "OTP_LENGTH", DEFAULT_OTP_LENGTH)),
    )

    return Container(
        conn=conn,
        outlets_repo=outlets_repo,
        shifts_repo=shifts_repo,
        attendance_repo=attendance_repo,
        progress_store_factory=lambda device_id: MySQLProgressStore(conn, device_id),
        identity=identity,
        session_service=SessionService(identity),
        attendance_service=AttendanceService(
            attendance_repo,
            outlets_repo,
            shifts_repo,
            strategy_factory=AttendanceStrategyFactory(),
            default_radius_meters=app_settings.default_radius_meters,
        ),
        retry_policy=RetryPolicy(
            count=int(getattr(settings, "GUARD_RETRY_COUNT", 3)),
            interval_seconds=float(getattr(settings, "GUARD_RETRY_INTERVAL_SECONDS", 0.5)),
            backoff=float(getattr(settings, "GUARD_RETRY_BACKOFF", 2.0)),
        ),
        settings=app_settings,
    )
