"""Weekly free-timing grids for rooms.

A room's ``free_timings`` maps a weekday to the time slots in which it may be
booked. Slots not listed are unavailable. Days and slots are kept in the
canonical ``WEEK_DAYS`` / ``TIME_SLOTS`` order so stored grids compare equal
regardless of the order in which cells were toggled.
"""
from __future__ import annotations

import logging
from typing import Any, Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from app.core.exceptions import InvalidInputError, ResourceNotFoundError
from app.models.room import Room

logger = logging.getLogger(__name__)

WEEK_DAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
TIME_SLOTS = [
    "7:00-7:55",
    "7:55-8:50",
    "8:50-9:45",
    "10:30-11:25",
    "11:25-12:20",
    "12:20-1:15",
    "1:15-2:10",
    "2:10-3:05",
    "3:05-4:00",
    "4:00-5:00",
]
AVAILABLE = "Available"
UNAVAILABLE = "Unavailable"


def _check_day(day: str) -> None:
    if day not in WEEK_DAYS:
        raise InvalidInputError(f'Unknown day "{day}"', details={"days": WEEK_DAYS})


def _check_slot(slot: str) -> None:
    if slot not in TIME_SLOTS:
        raise InvalidInputError(f'Unknown time slot "{slot}"', details={"time_slots": TIME_SLOTS})


def _ordered(slots: Iterable[str]) -> list[str]:
    wanted = set(slots)
    return [slot for slot in TIME_SLOTS if slot in wanted]


def normalize_free_timings(value: Any) -> dict[str, list[str]]:
    """Canonical ``{day: [slots]}`` from a map or the legacy ``[{day: [slots]}, ...]`` list; empty days dropped."""
    merged: dict[str, set[str]] = {}
    if isinstance(value, dict):
        entries = [value]
    elif isinstance(value, list):
        entries = [item for item in value if isinstance(item, dict)]
    else:
        entries = []
    for entry in entries:
        for day, slots in entry.items():
            _check_day(day)
            for slot in slots or []:
                _check_slot(slot)
                merged.setdefault(day, set()).add(slot)
    return {day: _ordered(merged[day]) for day in WEEK_DAYS if merged.get(day)}


def _get_room(db: Session, room_id: str) -> Room:
    room = db.get(Room, room_id)
    if room is None:
        raise ResourceNotFoundError("Room", room_id)
    return room


def free_slot_count(free_timings: dict[str, list[str]]) -> int:
    return sum(len(slots) for slots in free_timings.values())


def is_free(room: Room, day: str, slot: str) -> bool:
    return slot in (room.free_timings or {}).get(day, [])


def availability_grid(room: Room) -> dict[str, dict[str, str]]:
    timings = room.free_timings or {}
    return {
        day: {slot: AVAILABLE if slot in timings.get(day, []) else UNAVAILABLE for slot in TIME_SLOTS}
        for day in WEEK_DAYS
    }


def set_free_timings(db: Session, room_id: str, timings: Any) -> Room:
    room = _get_room(db, room_id)
    room.free_timings = normalize_free_timings(timings)
    return room


def toggle_free_timing(db: Session, room_id: str, day: str, slot: str, free: bool) -> Room:
    _check_day(day)
    _check_slot(slot)
    room = _get_room(db, room_id)
    timings = {key: list(value) for key, value in (room.free_timings or {}).items()}
    slots = set(timings.get(day, []))
    if free:
        slots.add(slot)
    else:
        slots.discard(slot)
    timings[day] = list(slots)
    room.free_timings = normalize_free_timings(timings)
    return room


def set_all_free_timings(db: Session, room_id: str, free: bool) -> Room:
    room = _get_room(db, room_id)
    room.free_timings = {day: list(TIME_SLOTS) for day in WEEK_DAYS} if free else {}
    return room


def reset_free_timings(db: Session, room_id: str) -> Room:
    return set_all_free_timings(db, room_id, False)


def rooms_free_at(
    db: Session,
    *,
    day: str | None = None,
    slot: str | None = None,
    room_type: str | None = None,
    faculty: str | None = None,
    min_capacity: int | None = None,
) -> list[Room]:
    """Active rooms matching the filters; with ``day`` (and ``slot``) only those free then."""
    if slot and not day:
        raise InvalidInputError("A time slot filter needs a day")
    if day:
        _check_day(day)
    if slot:
        _check_slot(slot)

    rooms = list(db.execute(select(Room).where(Room.active.is_(True)).order_by(Room.faculty, Room.number)).scalars())
    matched = []
    for room in rooms:
        if room_type and room.type != room_type:
            continue
        if faculty and room.faculty != faculty:
            continue
        if min_capacity is not None and (room.capacity or 0) < min_capacity:
            continue
        timings = room.free_timings or {}
        if slot and not is_free(room, day, slot):
            continue
        if day and not slot and not timings.get(day):
            continue
        matched.append(room)
    logger.debug("Room availability query matched %d of %d room(s)", len(matched), len(rooms))
    return matched
