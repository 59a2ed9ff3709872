from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Closed set of roles used for authorization and auxiliary profiles."""

    SYSTEM_ADMIN = "SystemAdmin"
    HR_ADMIN = "HRAdmin"
    LINE_MANAGER = "LineManager"
    PAYROLL_SPECIALIST = "PayrollSpecialist"
    EMPLOYEE = "Employee"


class ShiftType(str, Enum):
    NORMAL = "Normal"
    SPLIT = "Split"
    ROTATIONAL = "Rotational"
    CUSTOM = "Custom"


class AssignmentStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ClockMethod(str, Enum):
    WEB = "Web"
    DEVICE = "Device"
    MOBILE = "Mobile"
    OFFLINE_SYNC = "OfflineSync"


class OfflineEventType(str, Enum):
    IN = "IN"
    OUT = "OUT"


class ClockEventKind(str, Enum):
    CLOCK_IN = "ClockIn"
    CLOCK_OUT = "ClockOut"


class CorrectionType(str, Enum):
    CHECK_IN = "CheckIn"
    CHECK_OUT = "CheckOut"
    BOTH = "Both"


class RequestStatus(str, Enum):
    """States of the correction approval workflow."""

    PENDING = "Pending"
    APPROVED = "Approved"
    REJECTED = "Rejected"


class RuleType(str, Enum):
    GRACE_PERIOD = "GracePeriod"
    LATENESS_PENALTY = "LatenessPenalty"
    SHORT_TIME = "ShortTime"


class NotificationUrgency(str, Enum):
    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"


class ExceptionDayStatus(str, Enum):
    ACTIVE = "Active"
    INACTIVE = "Inactive"


class ReassignmentState(str, Enum):
    REQUESTED = "Requested"
    APPLIED = "Applied"
    NOTIFICATION_ATTEMPTED = "NotificationAttempted"
    REBUILD_TRIGGERED = "RebuildTriggered"
    REJECTED = "Rejected"
