"""
Proveedores de dependencias para los endpoints.

Los servicios con políticas configurables se construyen con el ``Settings``
de la petición; el canal de anuncios vive en ``app.state`` y se crea en el
lifespan de la aplicación.
"""

from fastapi import BackgroundTasks, Depends
from starlette.requests import HTTPConnection

from gymflow.core.broadcast import BackgroundPublisher, Broadcaster
from gymflow.core.config import Settings, get_settings
from gymflow.services.announcement import AnnouncementService
from gymflow.services.membership import MembershipService
from gymflow.services.plan import PlanService
from gymflow.services.schedule import ScheduleService


def get_membership_service(settings: Settings = Depends(get_settings)) -> MembershipService:
    return MembershipService(settings)


def get_schedule_service(settings: Settings = Depends(get_settings)) -> ScheduleService:
    return ScheduleService(settings)


def get_plan_service(settings: Settings = Depends(get_settings)) -> PlanService:
    return PlanService(settings)


def get_broadcaster(connection: HTTPConnection) -> Broadcaster:
    return connection.app.state.broadcaster


def get_announcement_service(
    background_tasks: BackgroundTasks,
    broadcaster: Broadcaster = Depends(get_broadcaster),
) -> AnnouncementService:
    return AnnouncementService(BackgroundPublisher(broadcaster, background_tasks))
