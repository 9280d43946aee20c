# Importar todos los modelos para que create_all / Alembic los detecte
from gymflow.db.base_class import Base  # noqa
from gymflow.models.user import User  # noqa
from gymflow.models.gym import Gym  # noqa
from gymflow.models.user_gym import UserGym  # noqa
from gymflow.models.membership_request import MembershipRequest  # noqa
from gymflow.models.trainer_schedule import TrainerSchedule  # noqa
from gymflow.models.plan import PlanRequest, WorkoutPlan, DietPlan  # noqa
from gymflow.models.announcement import Announcement  # noqa
from gymflow.models.macro_log import MacroLog  # noqa
from gymflow.models.event_log import EventLog  # noqa
