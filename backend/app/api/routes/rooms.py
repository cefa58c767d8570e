from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.orm import Session

from app.api.deps import get_current_user, get_db, require_roles
from app.models.room import ROOM_BUILDINGS, ROOM_FEATURES, ROOM_TYPES, Room, RoomStatus
from app.models.user import User, UserRole
from app.schemas.room import (
    AvailabilitySlots,
    FreeTimingsBulk,
    FreeTimingToggle,
    FreeTimingsUpdate,
    RoomCreate,
    RoomFreeTimings,
    RoomOptions,
    RoomOut,
    RoomUpdate,
)
from app.services import room_availability
from app.services.audit import log_activity
from app.services.importers import EXAMPLE_DATASETS, known_room_faculties

router = APIRouter()

TIMING_EDITORS = (UserRole.tt_incharge, UserRole.super_admin)


def _ensure_known_faculty(db: Session, faculty: str) -> None:
    if faculty not in known_room_faculties(db):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f'Invalid faculty "{faculty}"')


def _ensure_unique(db: Session, faculty: str, number: str, exclude_id: str | None = None) -> None:
    existing = db.execute(select(Room).where(Room.faculty == faculty, Room.number == number)).scalar_one_or_none()
    if existing is not None and existing.id != exclude_id:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Room already exists for this faculty")


@router.get("/", response_model=list[RoomOut])
def list_rooms(
    search: str | None = Query(default=None, max_length=200),
    faculty: str | None = Query(default=None, max_length=200),
    feature: str | None = Query(default=None, max_length=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[RoomOut]:
    rooms = list(db.execute(select(Room).order_by(Room.faculty, Room.number)).scalars())
    if search:
        needle = search.strip().lower()
        rooms = [room for room in rooms if needle in room.number.lower() or needle in room.faculty.lower()]
    if faculty:
        rooms = [room for room in rooms if room.faculty == faculty]
    if feature:
        rooms = [room for room in rooms if feature in (room.features or [])]
    return rooms


@router.get("/options", response_model=RoomOptions)
def room_options(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RoomOptions:
    return RoomOptions(
        types=ROOM_TYPES,
        buildings=ROOM_BUILDINGS,
        statuses=[item.value for item in RoomStatus],
        faculties=known_room_faculties(db),
        features=ROOM_FEATURES,
    )


@router.get("/example")
def example_rooms(current_user: User = Depends(get_current_user)) -> dict:
    return EXAMPLE_DATASETS["rooms"]


@router.get("/availability/slots", response_model=AvailabilitySlots)
def availability_slots(current_user: User = Depends(get_current_user)) -> AvailabilitySlots:
    return AvailabilitySlots(days=room_availability.WEEK_DAYS, time_slots=room_availability.TIME_SLOTS)


@router.get("/availability", response_model=list[RoomOut])
def available_rooms(
    day: str | None = Query(default=None, max_length=20),
    time_slot: str | None = Query(default=None, max_length=20),
    room_type: str | None = Query(default=None, alias="type", max_length=100),
    faculty: str | None = Query(default=None, max_length=200),
    min_capacity: int | None = Query(default=None, ge=0),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> list[RoomOut]:
    return room_availability.rooms_free_at(
        db,
        day=day,
        slot=time_slot,
        room_type=room_type,
        faculty=faculty,
        min_capacity=min_capacity,
    )


def _timings_out(room: Room) -> RoomFreeTimings:
    timings = room.free_timings or {}
    return RoomFreeTimings(
        room_id=room.id,
        free_timings=timings,
        free_slot_count=room_availability.free_slot_count(timings),
        grid=room_availability.availability_grid(room),
    )


def _save_timings(db: Session, current_user: User, room: Room, description: str) -> RoomFreeTimings:
    log_activity(
        db,
        user=current_user,
        action="update",
        entity_type="room",
        entity_id=room.id,
        description=description,
    )
    db.commit()
    db.refresh(room)
    return _timings_out(room)


@router.get("/{room_id}/free-timings", response_model=RoomFreeTimings)
def get_free_timings(
    room_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
) -> RoomFreeTimings:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    return _timings_out(room)


@router.put("/{room_id}/free-timings", response_model=RoomFreeTimings)
def replace_free_timings(
    room_id: str,
    payload: FreeTimingsUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*TIMING_EDITORS)),
) -> RoomFreeTimings:
    room = room_availability.set_free_timings(db, room_id, payload.free_timings)
    return _save_timings(db, current_user, room, f"Updated free timings of room {room.number}")


@router.post("/{room_id}/free-timings/slot", response_model=RoomFreeTimings)
def toggle_free_timing(
    room_id: str,
    payload: FreeTimingToggle,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*TIMING_EDITORS)),
) -> RoomFreeTimings:
    room = room_availability.toggle_free_timing(db, room_id, payload.day, payload.time_slot, payload.is_free)
    state = "free" if payload.is_free else "unavailable"
    return _save_timings(db, current_user, room, f"Marked room {room.number} {state} on {payload.day} {payload.time_slot}")


@router.post("/{room_id}/free-timings/all", response_model=RoomFreeTimings)
def set_all_free_timings(
    room_id: str,
    payload: FreeTimingsBulk,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*TIMING_EDITORS)),
) -> RoomFreeTimings:
    room = room_availability.set_all_free_timings(db, room_id, payload.is_free)
    state = "free" if payload.is_free else "unavailable"
    return _save_timings(db, current_user, room, f"Marked every slot of room {room.number} {state}")


@router.delete("/{room_id}/free-timings", response_model=RoomFreeTimings)
def reset_free_timings(
    room_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(*TIMING_EDITORS)),
) -> RoomFreeTimings:
    room = room_availability.reset_free_timings(db, room_id)
    return _save_timings(db, current_user, room, f"Reset free timings of room {room.number}")


@router.post("/", response_model=RoomOut, status_code=status.HTTP_201_CREATED)
def create_room(
    payload: RoomCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> RoomOut:
    _ensure_known_faculty(db, payload.faculty)
    _ensure_unique(db, payload.faculty, payload.number)
    room = Room(**payload.model_dump(mode="json"))
    db.add(room)
    db.flush()
    log_activity(db, user=current_user, action="create", entity_type="room", entity_id=room.id)
    db.commit()
    db.refresh(room)
    return room


@router.put("/{room_id}", response_model=RoomOut)
def update_room(
    room_id: str,
    payload: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> RoomOut:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")

    data = payload.model_dump(mode="json", exclude_unset=True)
    for key, value in data.items():
        if value is None and key in {"number", "capacity", "faculty", "status", "features", "active"}:
            continue
        setattr(room, key, value)
    _ensure_known_faculty(db, room.faculty)
    _ensure_unique(db, room.faculty, room.number, exclude_id=room.id)

    log_activity(db, user=current_user, action="update", entity_type="room", entity_id=room.id)
    db.commit()
    db.refresh(room)
    return room


@router.delete("/{room_id}")
def delete_room(
    room_id: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(require_roles(UserRole.super_admin)),
) -> dict:
    room = db.get(Room, room_id)
    if room is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Room not found")
    db.delete(room)
    log_activity(db, user=current_user, action="delete", entity_type="room", entity_id=room_id)
    db.commit()
    return {"success": True}
