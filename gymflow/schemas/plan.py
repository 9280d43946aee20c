from typing import Optional, List, Union
from datetime import datetime
from pydantic import BaseModel, Field

from gymflow.models.membership_request import RequestStatus
from gymflow.models.plan import PlanType


# ---- Peticiones de plan ----

class PlanRequestCreate(BaseModel):
    trainer_id: int
    request_type: PlanType


class PlanRequest(BaseModel):
    id: int
    member_id: int
    trainer_id: int
    request_type: PlanType
    status: RequestStatus
    created_at: Optional[datetime] = None
    resolved_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Elementos de los planes ----

class Exercise(BaseModel):
    name: str
    sets: Optional[Union[int, str]] = None
    reps: Optional[Union[int, str]] = None
    rest: Optional[str] = None


class Meal(BaseModel):
    name: str
    calories: Optional[float] = None
    protein: Optional[float] = None
    carbs: Optional[float] = None
    fats: Optional[float] = None
    time: Optional[str] = None


# ---- Planes de entrenamiento ----

class WorkoutPlanCreate(BaseModel):
    member_id: int
    title: str
    description: Optional[str] = None
    exercises: List[Exercise] = Field(default_factory=list)


class WorkoutPlanUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    exercises: Optional[List[Exercise]] = None


class WorkoutPlan(BaseModel):
    id: int
    trainer_id: int
    member_id: int
    gym_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    exercises: List[Exercise]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


# ---- Planes de dieta ----

class DietPlanCreate(BaseModel):
    member_id: int
    title: str
    description: Optional[str] = None
    meals: List[Meal] = Field(default_factory=list)


class DietPlanUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    meals: Optional[List[Meal]] = None


class DietPlan(BaseModel):
    id: int
    trainer_id: int
    member_id: int
    gym_id: Optional[int] = None
    title: str
    description: Optional[str] = None
    meals: List[Meal]
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True
