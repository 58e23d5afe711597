from __future__ import annotations

from dataclasses import dataclass
from typing import Optional
from zoneinfo import ZoneInfo

from .attendance.factory import AttendanceStrategyFactory
from .attendance.service import AttendanceService
from .common.datetime_utils import site_zone
from .common.locks import EmployeeLocks
from .corrections.service import CorrectionService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRepository
from .employees.repository import EmployeeRepository
from .employees.service import EmployeeLedger
from .leaves.service import LeaveService
from .notifications.notifier import LoggingNotifier, Notifier
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.service import ShiftService
from .stats.calculator import AttendanceStatsCalculator
from .stats.service import DashboardService


@dataclass(frozen=True)
class Container:
    zone: ZoneInfo

    employees_repo: EmployeeRepository
    shifts_repo: ShiftRepository

    ledger: EmployeeLedger
    attendance_service: AttendanceService
    correction_service: CorrectionService
    leave_service: LeaveService
    shift_service: ShiftService
    dashboard_service: DashboardService


def build_container(
    *,
    db_config: Optional[dict] = None,
    site_timezone: Optional[str] = None,
    employees_repo: Optional[EmployeeRepository] = None,
    shifts_repo: Optional[ShiftRepository] = None,
    notifier: Optional[Notifier] = None,
) -> Container:
    """Wire repositories and services.

    MySQL repositories are built from ``db_config`` unless both repositories
    are passed in (tests use in-memory ones).
    """
    zone = site_zone(site_timezone)

    if employees_repo is None or shifts_repo is None:
        if db_config is None:
            raise ValueError("db_config is required when repositories are not provided")
        conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
        employees_repo = employees_repo or MySQLEmployeeRepository(conn, zone=zone)
        shifts_repo = shifts_repo or MySQLShiftRepository(conn, zone=zone)

    notifier = notifier or LoggingNotifier()
    ledger = EmployeeLedger(employees_repo, EmployeeLocks())
    strategy_factory = AttendanceStrategyFactory()
    calculator = AttendanceStatsCalculator()

    attendance_service = AttendanceService(ledger, zone=zone, strategy_factory=strategy_factory, calculator=calculator)
    correction_service = CorrectionService(ledger, zone=zone, strategy_factory=strategy_factory, notifier=notifier)
    leave_service = LeaveService(ledger, zone=zone, notifier=notifier)
    shift_service = ShiftService(shifts_repo, ledger, zone=zone, notifier=notifier)
    dashboard_service = DashboardService(ledger, shift_service, zone=zone, calculator=calculator)

    return Container(
        zone=zone,
        employees_repo=employees_repo,
        shifts_repo=shifts_repo,
        ledger=ledger,
        attendance_service=attendance_service,
        correction_service=correction_service,
        leave_service=leave_service,
        shift_service=shift_service,
        dashboard_service=dashboard_service,
    )
