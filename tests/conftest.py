from __future__ import annotations

from dataclasses import replace
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable, Optional

import pytest
from werkzeug.security import generate_password_hash

from src.timesheet_system.timesheet_system.absences.model import AbsenceRecord
from src.timesheet_system.timesheet_system.container import assemble
from src.timesheet_system.timesheet_system.core.enums import Role, WeekStatus
from src.timesheet_system.timesheet_system.holidays.model import Holiday
from src.timesheet_system.timesheet_system.hours.model import HourEntry
from src.timesheet_system.timesheet_system.users.model import SessionUser, User
from src.timesheet_system.timesheet_system.validations.model import WeekValidation

EMPLOYEE_ID = 1
OTHER_EMPLOYEE_ID = 2
MANAGER_ID = 10
ADMIN_ID = 11


class InMemoryUsers:
    def __init__(self, users: Iterable[User]):
        self._by_id = {u.user_id: u for u in users}

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._by_id.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return next((u for u in self._by_id.values() if u.username == username), None)

    def get_names(self, user_ids) -> dict[int, str]:
        return {i: self._by_id[i].full_name for i in user_ids if i in self._by_id}


class InMemoryHours:
    def __init__(self):
        self.rows: dict[tuple, HourEntry] = {}
        self._id = 0

    def upsert(self, *, employee_id, project_id, task_id, year, iso_week, day_hours, comment, status) -> HourEntry:
        key = (employee_id, project_id, task_id, year, iso_week)
        existing = self.rows.get(key)
        if existing:
            entry = replace(existing, day_hours=day_hours, comment=comment, status=status)
        else:
            self._id += 1
            entry = HourEntry(
                entry_id=self._id,
                employee_id=employee_id,
                project_id=project_id,
                task_id=task_id,
                year=year,
                iso_week=iso_week,
                day_hours=day_hours,
                comment=comment,
                status=status,
            )
        self.rows[key] = entry
        return entry

    def get_by_id(self, entry_id: int) -> Optional[HourEntry]:
        return next((e for e in self.rows.values() if e.entry_id == entry_id), None)

    def list_for_week(self, *, employee_id, year, iso_week):
        return sorted(
            (e for e in self.rows.values() if (e.employee_id, e.year, e.iso_week) == (employee_id, year, iso_week)),
            key=lambda e: e.entry_id,
        )

    def list_filtered(self, *, employee_id=None, project_id=None, year=None, iso_week=None, status=None, limit=500):
        out = [
            e
            for e in self.rows.values()
            if (employee_id is None or e.employee_id == employee_id)
            and (project_id is None or e.project_id == project_id)
            and (year is None or e.year == year)
            and (iso_week is None or e.iso_week == iso_week)
            and (status is None or e.status == status)
        ]
        out.sort(key=lambda e: (-e.year, -e.iso_week, e.entry_id))
        return out[:limit]

    def employee_ids_for_week(self, *, year, iso_week) -> set[int]:
        return {e.employee_id for e in self.rows.values() if (e.year, e.iso_week) == (year, iso_week)}

    def delete(self, *, entry_id) -> bool:
        for key, e in list(self.rows.items()):
            if e.entry_id == entry_id:
                del self.rows[key]
                return True
        return False

    def set_status_for_week(self, *, employee_id, year, iso_week, status) -> int:
        n = 0
        for key, e in self.rows.items():
            if (e.employee_id, e.year, e.iso_week) == (employee_id, year, iso_week):
                self.rows[key] = replace(e, status=status)
                n += 1
        return n


class InMemoryAbsences:
    def __init__(self):
        self.rows: dict[tuple, AbsenceRecord] = {}
        self._id = 0

    def upsert(self, *, employee_id, year, iso_week, absence_type, flags, reason, status, approval) -> AbsenceRecord:
        key = (employee_id, year, iso_week, absence_type)
        existing = self.rows.get(key)
        if existing:
            rec = replace(existing, flags=flags, reason=reason, status=status, approval=approval)
            if approval == WeekStatus.DRAFT:
                rec = replace(rec, decided_by=None, decided_at=None, comment=None)
        else:
            self._id += 1
            rec = AbsenceRecord(
                absence_id=self._id,
                employee_id=employee_id,
                year=year,
                iso_week=iso_week,
                absence_type=absence_type,
                flags=flags,
                reason=reason,
                status=status,
                approval=approval,
            )
        self.rows[key] = rec
        return rec

    def get_by_id(self, absence_id) -> Optional[AbsenceRecord]:
        return next((r for r in self.rows.values() if r.absence_id == absence_id), None)

    def list_for_week(self, *, employee_id, year, iso_week):
        return sorted(
            (r for r in self.rows.values() if (r.employee_id, r.year, r.iso_week) == (employee_id, year, iso_week)),
            key=lambda r: r.absence_id,
        )

    def list_filtered(self, *, employee_id=None, year=None, iso_week=None, status=None, approval=None, limit=500):
        out = [
            r
            for r in self.rows.values()
            if (employee_id is None or r.employee_id == employee_id)
            and (year is None or r.year == year)
            and (iso_week is None or r.iso_week == iso_week)
            and (status is None or r.status == status)
            and (approval is None or r.approval == approval)
        ]
        return sorted(out, key=lambda r: r.absence_id)[:limit]

    def employee_ids_for_week(self, *, year, iso_week) -> set[int]:
        return {r.employee_id for r in self.rows.values() if (r.year, r.iso_week) == (year, iso_week)}

    def delete(self, *, absence_id) -> bool:
        for key, r in list(self.rows.items()):
            if r.absence_id == absence_id:
                del self.rows[key]
                return True
        return False

    def delete_for_key(self, *, employee_id, year, iso_week, absence_type) -> bool:
        return self.rows.pop((employee_id, year, iso_week, absence_type), None) is not None

    def set_approval(self, *, absence_id, approval, from_statuses, decided_by=None, comment=None) -> bool:
        for key, r in self.rows.items():
            if r.absence_id == absence_id:
                if r.approval not in from_statuses:
                    return False
                self.rows[key] = replace(
                    r,
                    approval=approval,
                    decided_by=decided_by,
                    decided_at=datetime(2025, 3, 10, 9, 0) if decided_by else None,
                    comment=comment,
                )
                return True
        return False

    def set_status_for_week(self, *, employee_id, year, iso_week, status) -> int:
        n = 0
        for key, r in self.rows.items():
            if (r.employee_id, r.year, r.iso_week) == (employee_id, year, iso_week):
                self.rows[key] = replace(r, status=status)
                n += 1
        return n


class InMemoryHolidays:
    def __init__(self, holidays: Iterable[Holiday] = ()):
        self.by_date: dict[date, Holiday] = {h.holiday_date: h for h in holidays}

    def list_between(self, start: date, end: date):
        return sorted((h for d, h in self.by_date.items() if start <= d <= end), key=lambda h: h.holiday_date)

    def list_for_year(self, year: int):
        return self.list_between(date(year, 1, 1), date(year, 12, 31))

    def upsert(self, *, holiday_date: date, label: str) -> None:
        existing = self.by_date.get(holiday_date)
        holiday_id = existing.holiday_id if existing else len(self.by_date) + 1
        self.by_date[holiday_date] = Holiday(holiday_id=holiday_id, holiday_date=holiday_date, label=label)


class InMemoryValidations:
    def __init__(self):
        self.rows: dict[tuple[int, int, int], WeekValidation] = {}
        self._id = 0

    def get(self, *, employee_id, year, iso_week) -> Optional[WeekValidation]:
        return self.rows.get((employee_id, year, iso_week))

    def submit(self, *, employee_id, year, iso_week, total_hours, owed_hours) -> bool:
        key = (employee_id, year, iso_week)
        current = self.rows.get(key)
        if current and current.status not in {WeekStatus.DRAFT, WeekStatus.REJECTED}:
            return False
        if current is None:
            self._id += 1
        self.rows[key] = WeekValidation(
            validation_id=current.validation_id if current else self._id,
            employee_id=employee_id,
            year=year,
            iso_week=iso_week,
            status=WeekStatus.SUBMITTED,
            total_hours=total_hours,
            owed_hours=owed_hours,
            submitted_at=datetime(2025, 3, 7, 18, 0),
        )
        return True

    def decide(self, *, employee_id, year, iso_week, status, decided_by, comment, from_statuses) -> bool:
        key = (employee_id, year, iso_week)
        current = self.rows.get(key)
        if not current or current.status not in from_statuses:
            return False
        self.rows[key] = replace(
            current,
            status=status,
            validated_by=decided_by,
            validated_at=datetime(2025, 3, 10, 9, 0),
            comment=comment,
        )
        return True

    def reset_to_draft(self, *, employee_id, year, iso_week) -> bool:
        key = (employee_id, year, iso_week)
        current = self.rows.get(key)
        if not current or current.status == WeekStatus.DRAFT:
            return False
        self.rows[key] = replace(current, status=WeekStatus.DRAFT, validated_by=None, validated_at=None, comment=None)
        return True

    def list_by_status(self, status):
        rows = [v for v in self.rows.values() if v.status == status]
        # insertion order on purpose: the queue must sort on its own
        return rows

    def list_for_week(self, *, year, iso_week):
        return [v for v in self.rows.values() if (v.year, v.iso_week) == (year, iso_week)]


@pytest.fixture()
def users_repo():
    pw = generate_password_hash("secret123")
    return InMemoryUsers(
        [
            User(EMPLOYEE_ID, "Jean Dupont", "jdupont", pw, Role.EMPLOYEE),
            User(OTHER_EMPLOYEE_ID, "Marie Martin", "mmartin", pw, Role.EMPLOYEE),
            User(MANAGER_ID, "Paul Manager", "manager", pw, Role.MANAGER),
            User(ADMIN_ID, "Alice Admin", "admin", pw, Role.ADMIN),
            User(99, "Ancien Salarie", "ancien", pw, Role.EMPLOYEE, is_active=False),
        ]
    )


@pytest.fixture()
def hours_repo():
    return InMemoryHours()


@pytest.fixture()
def absences_repo():
    return InMemoryAbsences()


@pytest.fixture()
def holidays_repo():
    return InMemoryHolidays()


@pytest.fixture()
def validations_repo():
    return InMemoryValidations()


@pytest.fixture()
def container(users_repo, hours_repo, absences_repo, holidays_repo, validations_repo):
    return assemble(
        users_repo=users_repo,
        hours_repo=hours_repo,
        absences_repo=absences_repo,
        holidays_repo=holidays_repo,
        validations_repo=validations_repo,
    )


@pytest.fixture()
def employee():
    return SessionUser(user_id=EMPLOYEE_ID, full_name="Jean Dupont", role=Role.EMPLOYEE)


@pytest.fixture()
def other_employee():
    return SessionUser(user_id=OTHER_EMPLOYEE_ID, full_name="Marie Martin", role=Role.EMPLOYEE)


@pytest.fixture()
def manager():
    return SessionUser(user_id=MANAGER_ID, full_name="Paul Manager", role=Role.MANAGER)


@pytest.fixture()
def admin():
    return SessionUser(user_id=ADMIN_ID, full_name="Alice Admin", role=Role.ADMIN)


@pytest.fixture()
def log_week(container):
    """Save one entry (project 1 / task 1 by default) with Monday-first hours."""

    def _log(user, year, week, hours, *, project_id=1, task_id=1, employee_id=None):
        return container.hour_service.upsert_entry(
            user,
            project_id=project_id,
            task_id=task_id,
            year=year,
            iso_week=week,
            day_hours=[Decimal(str(h)) for h in hours],
            employee_id=employee_id,
        )

    return _log
