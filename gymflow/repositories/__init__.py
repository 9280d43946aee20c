from .user import user_repository
from .gym import gym_repository
from .user_gym import user_gym_repository
from .membership_request import membership_request_repository
from .trainer_schedule import trainer_schedule_repository
from .plan import plan_request_repository, workout_plan_repository, diet_plan_repository
from .announcement import announcement_repository
from .macro_log import macro_log_repository
from .event_log import event_log_repository
