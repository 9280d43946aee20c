from gymflow.models.user import User, UserRole
from gymflow.models.gym import Gym
from gymflow.models.user_gym import UserGym, GymRoleType
from gymflow.models.membership_request import MembershipRequest, RequestStatus
from gymflow.models.trainer_schedule import TrainerSchedule, SlotStatus
from gymflow.models.plan import PlanRequest, PlanType, WorkoutPlan, DietPlan
from gymflow.models.announcement import Announcement
from gymflow.models.macro_log import MacroLog
from gymflow.models.event_log import EventLog
