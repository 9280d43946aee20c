from typing import Optional
from datetime import datetime
from pydantic import BaseModel

from gymflow.models.trainer_schedule import SlotStatus


class TrainerScheduleCreate(BaseModel):
    start_time: datetime
    end_time: datetime


class TrainerSchedule(BaseModel):
    id: int
    trainer_id: int
    gym_id: Optional[int] = None
    start_time: datetime
    end_time: datetime
    status: SlotStatus
    booked_by_id: Optional[int] = None
    booked_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
