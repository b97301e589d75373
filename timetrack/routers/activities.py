from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..core.errors import UpdateFailed
from ..crud.activities import (
    activity_to_payload,
    create_activity,
    delete_activity,
    list_activities,
    update_activity,
)
from ..db.session import get_db
from ..schemas.account import MessageOut
from ..schemas.activity import ActivityCreated, ActivityEnvelope, ActivityList

router = APIRouter(prefix="/activity", tags=["activity"])


@router.get("/{date}/for/{user}", response_model=ActivityList, summary="Activities of one user on one day")
def api_list_day_activities(date: str, user: str, db: Session = Depends(get_db)):
    activities = list_activities(db, user, date=date)
    return ActivityList(activities=[activity_to_payload(a) for a in activities])


@router.get("/{user}", response_model=ActivityList, summary="All activities of one user")
def api_list_user_activities(user: str, db: Session = Depends(get_db)):
    activities = list_activities(db, user)
    return ActivityList(activities=[activity_to_payload(a) for a in activities])


@router.post("/", response_model=ActivityCreated)
def api_create_activity(payload: ActivityEnvelope, db: Session = Depends(get_db)):
    activity = create_activity(db, payload.activity)
    return ActivityCreated(message="ok", recordId=activity.id)


@router.put("/", response_model=MessageOut)
def api_update_activity(payload: ActivityEnvelope, db: Session = Depends(get_db)):
    if update_activity(db, payload.activity) == 0:
        raise UpdateFailed("Activity was not updated")
    return MessageOut(message="ok")


@router.delete("/{record_id}", response_model=MessageOut)
def api_delete_activity(record_id: str, db: Session = Depends(get_db)):
    # A missing record is acknowledged, not treated as an error.
    if delete_activity(db, record_id) == 0:
        return MessageOut(message="nothing deleted")
    return MessageOut(message="ok")
