from __future__ import annotations

from datetime import date

import pytest

from hr_management.core.enums import ExceptionDayStatus, Role
from hr_management.core.exceptions import AuthorizationError, ValidationError
from hr_management.exception_days.model import ExceptionDay
from hr_management.exception_days.service import ExceptionDayService


class InMemoryExceptionDays:
    def __init__(self):
        self.days: dict[int, ExceptionDay] = {}

    def create(self, *, name, category, exception_date):
        exception_id = len(self.days) + 1
        self.days[exception_id] = ExceptionDay(
            exception_id=exception_id, name=name, category=category, exception_date=exception_date
        )
        return exception_id

    def get_by_id(self, exception_id):
        return self.days.get(exception_id)

    def list_all(self, *, start=None, end=None, category=None):
        items = [
            d
            for d in self.days.values()
            if (start is None or d.exception_date >= start)
            and (end is None or d.exception_date <= end)
            and (category is None or d.category == category)
        ]
        return sorted(items, key=lambda d: d.exception_date, reverse=True)

    def exists_active_on(self, on_date):
        return any(d.exception_date == on_date and d.status == ExceptionDayStatus.ACTIVE for d in self.days.values())


class LinkRecorder:
    def __init__(self, touched=2):
        self.touched = touched
        self.links = []

    def link_exception(self, *, exception_id, on_date):
        self.links.append((exception_id, on_date))
        return self.touched


@pytest.fixture
def days():
    return InMemoryExceptionDays()


@pytest.fixture
def links():
    return LinkRecorder()


@pytest.fixture
def service(days, links):
    return ExceptionDayService(days, links)


def test_create_links_existing_attendance(service, days, links):
    exception_id = service.create(
        current_role=Role.HR_ADMIN, name=" Founders Day ", category="Holiday", exception_date=date(2026, 4, 1)
    )

    assert days.days[exception_id].name == "Founders Day"
    assert links.links == [(exception_id, date(2026, 4, 1))]
    assert service.is_exception_date(date(2026, 4, 1))
    assert not service.is_exception_date(date(2026, 4, 2))


def test_create_validation(service, links):
    with pytest.raises(AuthorizationError):
        service.create(current_role=Role.EMPLOYEE, name="Day off", category="Holiday", exception_date=date(2026, 4, 1))
    with pytest.raises(ValidationError):
        service.create(current_role=Role.HR_ADMIN, name="", category="Holiday", exception_date=date(2026, 4, 1))
    with pytest.raises(ValidationError):
        service.create(current_role=Role.HR_ADMIN, name="Closure", category="Facility", exception_date=None)
    assert links.links == []


def test_list_filters(service):
    for name, category, on in [
        ("New Year", "Holiday", date(2026, 1, 1)),
        ("Power outage", "Closure", date(2026, 2, 10)),
        ("Labour Day", "Holiday", date(2026, 5, 1)),
    ]:
        service.create(current_role=Role.SYSTEM_ADMIN, name=name, category=category, exception_date=on)

    assert [d.name for d in service.list_days()] == ["Labour Day", "Power outage", "New Year"]
    assert [d.name for d in service.list_days(category="Holiday")] == ["Labour Day", "New Year"]
    assert [d.name for d in service.list_days(start=date(2026, 2, 1), end=date(2026, 3, 1))] == ["Power outage"]
    with pytest.raises(ValidationError):
        service.list_days(start=date(2026, 3, 1), end=date(2026, 2, 1))
