from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field


class MacroLogBase(BaseModel):
    food: str
    calories: float = Field(0, ge=0)
    protein: float = Field(0, ge=0)
    carbs: float = Field(0, ge=0)
    fats: float = Field(0, ge=0)


class MacroLogCreate(MacroLogBase):
    pass


class MacroLogUpdate(BaseModel):
    food: Optional[str] = None
    calories: Optional[float] = Field(None, ge=0)
    protein: Optional[float] = Field(None, ge=0)
    carbs: Optional[float] = Field(None, ge=0)
    fats: Optional[float] = Field(None, ge=0)


class MacroLog(MacroLogBase):
    id: int
    member_id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
