from typing import Dict, Optional
from datetime import datetime
from pydantic import BaseModel


class EventLogCreate(BaseModel):
    event: Optional[str] = None
    page: Optional[str] = None
    details: Optional[str] = None


class UsageSummary(BaseModel):
    days: int
    total_events: int
    by_event: Dict[str, int]
    by_role: Dict[str, int]
    by_page: Dict[str, int]


class EventLog(BaseModel):
    id: int
    event: str
    page: str
    details: Optional[str] = None
    actor_id: int
    actor_role: str
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True
