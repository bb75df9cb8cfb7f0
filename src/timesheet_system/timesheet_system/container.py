from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from .absences.mysql_absence_repository import MySQLAbsenceRepository
from .absences.repository import AbsenceRepository
from .absences.service import AbsenceService
from .accounting.calculator.standard_calculator import StandardWeeklyCalculator
from .accounting.service import WeeklyAccountingService
from .core.constants import HOURS_PER_ABSENCE_DAY, WEEKLY_NORMAL_THRESHOLD
from .database.connection import DBConfig, DatabaseConnection
from .holidays.mysql_holiday_repository import MySQLHolidayRepository
from .holidays.repository import HolidayRepository
from .holidays.service import HolidayService
from .hours.mysql_hour_repository import MySQLHourRepository
from .hours.repository import HourRepository
from .hours.service import HourLedgerService
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService
from .validations.mysql_validation_repository import MySQLWeekValidationRepository
from .validations.queue import ValidationQueueService
from .validations.repository import WeekValidationRepository
from .validations.service import ValidationService
from .validations.summary import WeeklySummaryService


@dataclass(frozen=True)
class Container:
    users_repo: UserRepository
    hours_repo: HourRepository
    absences_repo: AbsenceRepository
    holidays_repo: HolidayRepository
    validations_repo: WeekValidationRepository

    auth_service: AuthService
    hour_service: HourLedgerService
    absence_service: AbsenceService
    holiday_service: HolidayService
    accounting_service: WeeklyAccountingService
    validation_service: ValidationService
    queue_service: ValidationQueueService
    summary_service: WeeklySummaryService


def assemble(
    *,
    users_repo: UserRepository,
    hours_repo: HourRepository,
    absences_repo: AbsenceRepository,
    holidays_repo: HolidayRepository,
    validations_repo: WeekValidationRepository,
    weekly_normal_hours: Decimal = WEEKLY_NORMAL_THRESHOLD,
    hours_per_absence_day: Decimal = HOURS_PER_ABSENCE_DAY,
) -> Container:
    """Wire services on top of any repository implementation."""

    calculator = StandardWeeklyCalculator(
        threshold=Decimal(str(weekly_normal_hours)),
        hours_per_absence_day=Decimal(str(hours_per_absence_day)),
    )
    accounting_service = WeeklyAccountingService(hours_repo, absences_repo, holidays_repo, calculator=calculator)

    return Container(
        users_repo=users_repo,
        hours_repo=hours_repo,
        absences_repo=absences_repo,
        holidays_repo=holidays_repo,
        validations_repo=validations_repo,
        auth_service=AuthService(users_repo),
        hour_service=HourLedgerService(hours_repo, absences_repo, validations_repo, holidays_repo),
        absence_service=AbsenceService(
            absences_repo,
            hours_repo,
            validations_repo,
            hours_per_day=Decimal(str(hours_per_absence_day)),
        ),
        holiday_service=HolidayService(holidays_repo),
        accounting_service=accounting_service,
        validation_service=ValidationService(
            validations_repo, hours_repo, absences_repo, holidays_repo, accounting_service
        ),
        queue_service=ValidationQueueService(validations_repo, accounting_service, users_repo),
        summary_service=WeeklySummaryService(
            hours_repo, absences_repo, validations_repo, accounting_service, users_repo
        ),
    )


def build_container(
    *,
    db_config: dict,
    weekly_normal_hours: Decimal = WEEKLY_NORMAL_THRESHOLD,
    hours_per_absence_day: Decimal = HOURS_PER_ABSENCE_DAY,
) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble(
        users_repo=MySQLUserRepository(conn),
        hours_repo=MySQLHourRepository(conn),
        absences_repo=MySQLAbsenceRepository(conn),
        holidays_repo=MySQLHolidayRepository(conn),
        validations_repo=MySQLWeekValidationRepository(conn),
        weekly_normal_hours=weekly_normal_hours,
        hours_per_absence_day=hours_per_absence_day,
    )
