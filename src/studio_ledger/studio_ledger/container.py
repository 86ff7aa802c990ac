from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceLedger
from .catalog.mysql_catalog_repository import MySQLCatalogRepository
from .catalog.repository import CatalogRepository
from .catalog.service import CatalogService
from .core.constants import CHURN_THRESHOLD, CHURN_WINDOW, DEFAULT_REMINDER_DAYS
from .database.connection import DBConfig, DatabaseConnection
from .payments.mysql_payment_repository import MySQLPaymentRepository
from .payments.repository import PaymentRepository
from .payments.service import PaymentService
from .people.mysql_person_repository import MySQLPersonRepository
from .people.repository import PersonRepository
from .people.service import PeopleService
from .sessions.mysql_session_repository import MySQLSessionRepository
from .sessions.repository import SessionRepository
from .sessions.service import ScheduleService
from .state import StudioState, StudioStateLoader
from .suggestions.provider import SuggestionProvider
from .suggestions.rule_based import RuleBasedSuggestionProvider


@dataclass(frozen=True)
class StudioSettings:
    churn_window: int = CHURN_WINDOW
    churn_threshold: int = CHURN_THRESHOLD
    reminder_days: int = DEFAULT_REMINDER_DAYS


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]
    settings: StudioSettings

    sessions_repo: SessionRepository
    people_repo: PersonRepository
    attendance_repo: AttendanceRepository
    payments_repo: PaymentRepository
    catalog_repo: CatalogRepository

    state_loader: StudioStateLoader
    schedule_service: ScheduleService
    people_service: PeopleService
    attendance_ledger: AttendanceLedger
    payment_service: PaymentService
    catalog_service: CatalogService
    suggestion_provider: SuggestionProvider

    def load_state(self) -> StudioState:
        return self.state_loader.load()


def assemble(
    *,
    sessions_repo: SessionRepository,
    people_repo: PersonRepository,
    attendance_repo: AttendanceRepository,
    payments_repo: PaymentRepository,
    catalog_repo: CatalogRepository,
    settings: Optional[StudioSettings] = None,
    suggestion_provider: Optional[SuggestionProvider] = None,
    conn: Optional[DatabaseConnection] = None,
) -> Container:
    """Wire services around any set of repositories (MySQL in production, fakes in tests)."""
    settings = settings or StudioSettings()
    return Container(
        conn=conn,
        settings=settings,
        sessions_repo=sessions_repo,
        people_repo=people_repo,
        attendance_repo=attendance_repo,
        payments_repo=payments_repo,
        catalog_repo=catalog_repo,
        state_loader=StudioStateLoader(sessions_repo, people_repo, attendance_repo, payments_repo, catalog_repo),
        schedule_service=ScheduleService(sessions_repo),
        people_service=PeopleService(people_repo),
        attendance_ledger=AttendanceLedger(attendance_repo),
        payment_service=PaymentService(payments_repo, reminder_days=settings.reminder_days),
        catalog_service=CatalogService(catalog_repo),
        suggestion_provider=suggestion_provider or RuleBasedSuggestionProvider(),
    )


def build_container(*, db_config: dict, settings: Optional[StudioSettings] = None) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    return assemble(
        sessions_repo=MySQLSessionRepository(conn),
        people_repo=MySQLPersonRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        payments_repo=MySQLPaymentRepository(conn),
        catalog_repo=MySQLCatalogRepository(conn),
        settings=settings,
        conn=conn,
    )
