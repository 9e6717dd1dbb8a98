"""Agenda grid: time slots, per-day slot classification and appointment placement.

Everything here is pure; the caller passes `now` so results are reproducible.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Optional, Sequence

from ..appointments.model import Appointment
from ..common.datetime_utils import day_of_week, minutes_to_time, time_to_minutes
from ..core.constants import DEFAULT_DAY_END, DEFAULT_DAY_START, SLOT_MINUTES, WEEK_STARTS_ON
from ..core.enums import SlotState, ViewMode
from ..settings.model import DayOpeningHours

ALL_PROFESSIONALS = "all"

_PERIOD_DAYS = {ViewMode.DAILY: 1, ViewMode.THREE_DAYS: 3, ViewMode.WEEKLY: 7}


@dataclass(frozen=True)
class SlotCell:
    slot: time
    state: SlotState

    @property
    def bookable(self) -> bool:
        return self.state == SlotState.OPEN


@dataclass(frozen=True)
class Placement:
    """An appointment drawn on the grid, starting at row `row` and spanning `span` rows."""

    appointment: Appointment
    row: int
    span: int


@dataclass(frozen=True)
class AgendaDay:
    day: date
    hours: Optional[DayOpeningHours]
    cells: tuple[SlotCell, ...]
    placements: tuple[Placement, ...]


@dataclass(frozen=True)
class Agenda:
    view_mode: ViewMode
    anchor: date
    slots: tuple[time, ...]
    days: tuple[AgendaDay, ...]


def _default_slots() -> list[time]:
    return _slot_range(time_to_minutes(DEFAULT_DAY_START), time_to_minutes(DEFAULT_DAY_END))


def _slot_range(first: int, last: int) -> list[time]:
    return [minutes_to_time(m) for m in range(first, last + 1, SLOT_MINUTES)]


def build_time_slots(opening_hours: Sequence[DayOpeningHours]) -> list[time]:
    """Slots every 30 min from the earliest opening to the latest closing (inclusive)."""

    open_days = [h for h in (opening_hours or ()) if h.is_open and h.open_time and h.close_time]
    if not open_days:
        return _default_slots()

    first = min(time_to_minutes(h.open_time) for h in open_days)
    last = max(time_to_minutes(h.close_time) for h in open_days)
    return _slot_range(first, last) or _default_slots()


def hours_for_day(opening_hours: Sequence[DayOpeningHours], day: date) -> Optional[DayOpeningHours]:
    dow = day_of_week(day)
    for h in opening_hours or ():
        if h.day_of_week == dow:
            return h
    return None


def _slot_index(slots: Sequence[time], value: Optional[time]) -> int:
    if value is None:
        return -1
    try:
        return list(slots).index(value)
    except ValueError:
        return -1


def _within_hours(slot: time, hours: Optional[DayOpeningHours]) -> bool:
    if hours is None or not hours.is_open:
        return False
    return hours.open_time <= slot < hours.close_time


def _occupied_rows(slots: Sequence[time], appointments: Sequence[Appointment]) -> set[int]:
    rows: set[int] = set()
    for apt in appointments:
        start = _slot_index(slots, apt.start_time)
        end = _slot_index(slots, apt.end_time)
        # Times off the grid cannot be placed and do not block anything.
        if start == -1 or end == -1:
            continue
        rows.update(range(start, end))
    return rows


def appointments_for_day(
    appointments: Sequence[Appointment], day: date, professional_id: Optional[str] = ALL_PROFESSIONALS
) -> list[Appointment]:
    return [
        a
        for a in appointments
        if a.date == day and (not professional_id or professional_id == ALL_PROFESSIONALS or a.professional_id == professional_id)
    ]


def classify_day(
    day: date,
    slots: Sequence[time],
    hours: Optional[DayOpeningHours],
    appointments: Sequence[Appointment],
    *,
    now: datetime,
) -> list[SlotCell]:
    """State of every slot of one day. Precedence: closed, past, occupied, open."""

    occupied = _occupied_rows(slots, appointments)
    cells: list[SlotCell] = []
    for idx, slot in enumerate(slots):
        if not _within_hours(slot, hours):
            state = SlotState.CLOSED
        elif datetime.combine(day, slot) < now:
            state = SlotState.PAST
        elif idx in occupied:
            state = SlotState.OCCUPIED
        else:
            state = SlotState.OPEN
        cells.append(SlotCell(slot=slot, state=state))
    return cells


def place_appointments(slots: Sequence[time], appointments: Sequence[Appointment]) -> list[Placement]:
    out: list[Placement] = []
    for apt in sorted(appointments, key=lambda a: (a.start_time, a.appointment_id)):
        start = _slot_index(slots, apt.start_time)
        end = _slot_index(slots, apt.end_time)
        if start == -1 or end == -1 or end <= start:
            continue
        out.append(Placement(appointment=apt, row=start, span=end - start))
    return out


def days_in_view(view_mode: ViewMode, anchor: date) -> list[date]:
    if view_mode == ViewMode.WEEKLY:
        start = anchor - timedelta(days=(anchor.weekday() - WEEK_STARTS_ON) % 7)
        return [start + timedelta(days=i) for i in range(7)]
    if view_mode == ViewMode.THREE_DAYS:
        return [anchor + timedelta(days=i) for i in range(3)]
    return [anchor]


def shift_period(view_mode: ViewMode, anchor: date, direction: int) -> date:
    """Move the anchor one period back (direction=-1) or forward (direction=1)."""
    return anchor + timedelta(days=_PERIOD_DAYS[view_mode] * direction)


def is_past_slot(day: date, slot: time, *, now: datetime) -> bool:
    return datetime.combine(day, slot) < now


def build_agenda(
    *,
    view_mode: ViewMode,
    anchor: date,
    opening_hours: Sequence[DayOpeningHours],
    appointments: Sequence[Appointment],
    now: datetime,
    professional_id: Optional[str] = ALL_PROFESSIONALS,
) -> Agenda:
    slots = build_time_slots(opening_hours)
    days: list[AgendaDay] = []
    for day in days_in_view(view_mode, anchor):
        hours = hours_for_day(opening_hours, day)
        on_day = appointments_for_day(appointments, day, professional_id)
        days.append(
            AgendaDay(
                day=day,
                hours=hours,
                cells=tuple(classify_day(day, slots, hours, on_day, now=now)),
                placements=tuple(place_appointments(slots, on_day)),
            )
        )
    return Agenda(view_mode=view_mode, anchor=anchor, slots=tuple(slots), days=tuple(days))
