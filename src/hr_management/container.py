from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_GRACE_MINUTES
from .corrections.mysql_correction_repository import MySQLCorrectionRepository
from .corrections.repository import CorrectionRepository
from .corrections.service import CorrectionService
from .database.connection import DBConfig, DatabaseConnection
from .employees.mysql_employee_repository import MySQLEmployeeRoleRepository
from .employees.repository import EmployeeRoleRepository
from .employees.service import RoleService
from .exception_days.mysql_exception_day_repository import MySQLExceptionDayRepository
from .exception_days.repository import ExceptionDayRepository
from .exception_days.service import ExceptionDayService
from .hierarchy.mysql_hierarchy_repository import MySQLHierarchyRepository
from .hierarchy.repository import HierarchyRepository
from .hierarchy.service import HierarchyService
from .notifications.mysql_notification_repository import MySQLNotificationRepository
from .notifications.repository import NotificationRepository
from .notifications.service import NotificationService
from .rules.mysql_rule_repository import MySQLRuleRepository
from .rules.repository import RuleRepository
from .rules.service import AttendanceRuleService, GracePeriodProvider
from .shifts.factory import ShiftStartStrategyFactory
from .shifts.mysql_shift_repository import MySQLShiftRepository
from .shifts.repository import ShiftRepository
from .shifts.resolver import ShiftResolver
from .shifts.service import ShiftService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    shifts_repo: ShiftRepository
    rules_repo: RuleRepository
    attendance_repo: AttendanceRepository
    corrections_repo: CorrectionRepository
    hierarchy_repo: HierarchyRepository
    notifications_repo: NotificationRepository
    employees_repo: EmployeeRoleRepository
    exception_days_repo: ExceptionDayRepository

    shift_service: ShiftService
    rule_service: AttendanceRuleService
    attendance_service: AttendanceService
    correction_service: CorrectionService
    notification_service: NotificationService
    hierarchy_service: HierarchyService
    role_service: RoleService
    exception_day_service: ExceptionDayService


def wire_container(
    *,
    shifts_repo: ShiftRepository,
    rules_repo: RuleRepository,
    attendance_repo: AttendanceRepository,
    corrections_repo: CorrectionRepository,
    hierarchy_repo: HierarchyRepository,
    notifications_repo: NotificationRepository,
    employees_repo: EmployeeRoleRepository,
    exception_days_repo: ExceptionDayRepository,
    conn: Optional[DatabaseConnection] = None,
    default_grace_minutes: int = DEFAULT_GRACE_MINUTES,
) -> Container:
    """Build every service on top of the given repositories."""

    resolver = ShiftResolver(shifts_repo, strategy_factory=ShiftStartStrategyFactory())
    grace = GracePeriodProvider(rules_repo, default_minutes=default_grace_minutes)
    notification_service = NotificationService(notifications_repo)

    return Container(
        conn=conn,
        shifts_repo=shifts_repo,
        rules_repo=rules_repo,
        attendance_repo=attendance_repo,
        corrections_repo=corrections_repo,
        hierarchy_repo=hierarchy_repo,
        notifications_repo=notifications_repo,
        employees_repo=employees_repo,
        exception_days_repo=exception_days_repo,
        shift_service=ShiftService(shifts_repo),
        rule_service=AttendanceRuleService(rules_repo),
        attendance_service=AttendanceService(attendance_repo, resolver, grace),
        correction_service=CorrectionService(corrections_repo, attendance_repo),
        notification_service=notification_service,
        hierarchy_service=HierarchyService(hierarchy_repo, notification_service),
        role_service=RoleService(employees_repo),
        exception_day_service=ExceptionDayService(exception_days_repo, attendance_repo),
    )


def build_container(*, db_config: dict, default_grace_minutes: int = DEFAULT_GRACE_MINUTES) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))

    return wire_container(
        conn=conn,
        shifts_repo=MySQLShiftRepository(conn),
        rules_repo=MySQLRuleRepository(conn),
        attendance_repo=MySQLAttendanceRepository(conn),
        corrections_repo=MySQLCorrectionRepository(conn),
        hierarchy_repo=MySQLHierarchyRepository(conn),
        notifications_repo=MySQLNotificationRepository(conn),
        employees_repo=MySQLEmployeeRoleRepository(conn),
        exception_days_repo=MySQLExceptionDayRepository(conn),
        default_grace_minutes=default_grace_minutes,
    )
