"""
Tests del flujo de peticiones de plan y de los documentos de plan.
"""

import pytest

from gymflow.core.auth import Principal
from gymflow.core.config import Settings
from gymflow.core.exceptions import (
    AuthorizationError, ConflictError, InvalidStateError, NotFoundError, ValidationError
)
from gymflow.models.membership_request import RequestStatus
from gymflow.models.plan import PlanType
from gymflow.models.user import UserRole
from gymflow.schemas.plan import (
    DietPlanCreate, Exercise, Meal, PlanRequestCreate, WorkoutPlanCreate, WorkoutPlanUpdate
)
from gymflow.services.plan import PlanService
from tests.factories import make_user


@pytest.fixture
def service():
    return PlanService(Settings())


@pytest.fixture
def trainer(trainer_user):
    return Principal(id=trainer_user.id, role=UserRole.TRAINER)


@pytest.fixture
def member(member_user):
    return Principal(id=member_user.id, role=UserRole.MEMBER)


def workout_for(member_id, title="Fuerza 3 días"):
    return WorkoutPlanCreate(
        member_id=member_id,
        title=title,
        description="Rutina de base",
        exercises=[
            Exercise(name="Sentadilla", sets=4, reps=8, rest="90s"),
            Exercise(name="Press banca", sets=4, reps="6-8", rest="2m"),
        ],
    )


class TestPlanRequests:
    def test_request_is_pending(self, db, service, member, trainer):
        request = service.request_plan(
            db, member, PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.WORKOUT)
        )
        assert request.status == RequestStatus.PENDING
        assert request.request_type == PlanType.WORKOUT

    def test_identical_pending_request_conflicts(self, db, service, member, trainer):
        request_in = PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.DIET)
        service.request_plan(db, member, request_in)
        with pytest.raises(ConflictError):
            service.request_plan(db, member, request_in)

    def test_different_types_may_be_pending_together(self, db, service, member, trainer):
        service.request_plan(db, member, PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.DIET))
        service.request_plan(db, member, PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.WORKOUT))
        assert len(service.list_requests(db, member, pending_only=True)) == 2

    def test_unknown_trainer(self, db, service, member, other_member):
        # Un miembro no es un entrenador válido
        with pytest.raises(NotFoundError):
            service.request_plan(
                db, member, PlanRequestCreate(trainer_id=other_member.id, request_type=PlanType.DIET)
            )

    def test_approve_does_not_create_plan(self, db, service, member, trainer):
        request = service.request_plan(
            db, member, PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.WORKOUT)
        )
        resolved = service.resolve_request(db, trainer, request.id, "approve")
        assert resolved.status == RequestStatus.APPROVED
        assert service.list_plans(db, member, PlanType.WORKOUT) == []

    def test_resolve_twice_is_invalid_state(self, db, service, member, trainer):
        request = service.request_plan(
            db, member, PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.WORKOUT)
        )
        service.resolve_request(db, trainer, request.id, "deny")
        with pytest.raises(InvalidStateError):
            service.resolve_request(db, trainer, request.id, "approve")

    def test_only_addressed_trainer_resolves(self, db, service, member, trainer):
        request = service.request_plan(
            db, member, PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.WORKOUT)
        )
        coach = make_user(db, "coach@test.com", UserRole.TRAINER)
        with pytest.raises(AuthorizationError):
            service.resolve_request(db, Principal(id=coach.id, role=UserRole.TRAINER), request.id, "approve")

    def test_new_request_after_resolution(self, db, service, member, trainer):
        request_in = PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.DIET)
        first = service.request_plan(db, member, request_in)
        service.resolve_request(db, trainer, first.id, "approve")
        second = service.request_plan(db, member, request_in)
        assert second.status == RequestStatus.PENDING


class TestPlans:
    def test_trainer_creates_plan_without_request(self, db, service, member, trainer):
        plan = service.create_plan(db, trainer, PlanType.WORKOUT, workout_for(member.id))
        assert plan.trainer_id == trainer.id
        assert [e["name"] for e in plan.exercises] == ["Sentadilla", "Press banca"]
        assert [p.id for p in service.list_plans(db, member, PlanType.WORKOUT)] == [plan.id]

    def test_strict_policy_requires_approved_request(self, db, member, trainer):
        strict = PlanService(Settings(REQUIRE_APPROVED_PLAN_REQUEST=True))
        with pytest.raises(InvalidStateError):
            strict.create_plan(db, trainer, PlanType.WORKOUT, workout_for(member.id))

        request = strict.request_plan(
            db, member, PlanRequestCreate(trainer_id=trainer.id, request_type=PlanType.WORKOUT)
        )
        strict.resolve_request(db, trainer, request.id, "approve")
        plan = strict.create_plan(db, trainer, PlanType.WORKOUT, workout_for(member.id))
        assert plan.id is not None

        # Una petición de entrenamiento no autoriza una dieta
        with pytest.raises(InvalidStateError):
            strict.create_plan(db, trainer, PlanType.DIET, DietPlanCreate(member_id=member.id, title="Dieta"))

    def test_blank_title_is_rejected(self, db, service, member, trainer):
        with pytest.raises(ValidationError):
            service.create_plan(db, trainer, PlanType.WORKOUT, workout_for(member.id, title="  "))

    def test_update_replaces_fields_in_place(self, db, service, member, trainer):
        plan = service.create_plan(db, trainer, PlanType.WORKOUT, workout_for(member.id))
        updated = service.update_plan(
            db, trainer, PlanType.WORKOUT, plan.id,
            WorkoutPlanUpdate(exercises=[Exercise(name="Peso muerto", sets=3, reps=5)]),
        )
        assert updated.id == plan.id
        assert updated.title == "Fuerza 3 días"
        assert [e["name"] for e in updated.exercises] == ["Peso muerto"]

    def test_only_author_updates_or_deletes(self, db, service, member, trainer):
        plan = service.create_plan(db, trainer, PlanType.WORKOUT, workout_for(member.id))
        coach = Principal(id=make_user(db, "coach@test.com", UserRole.TRAINER).id, role=UserRole.TRAINER)
        with pytest.raises(AuthorizationError):
            service.update_plan(db, coach, PlanType.WORKOUT, plan.id, WorkoutPlanUpdate(title="Mío"))
        with pytest.raises(AuthorizationError):
            service.delete_plan(db, coach, PlanType.WORKOUT, plan.id)

    def test_delete_removes_permanently(self, db, service, member, trainer):
        plan = service.create_plan(
            db, trainer, PlanType.DIET,
            DietPlanCreate(member_id=member.id, title="Déficit", meals=[Meal(name="Avena", calories=350)]),
        )
        service.delete_plan(db, trainer, PlanType.DIET, plan.id)
        with pytest.raises(NotFoundError):
            service.get_plan(db, member, PlanType.DIET, plan.id)

    def test_plan_visible_to_target_member_only(self, db, service, member, trainer, other_member):
        plan = service.create_plan(db, trainer, PlanType.WORKOUT, workout_for(member.id))
        assert service.get_plan(db, member, PlanType.WORKOUT, plan.id).id == plan.id
        with pytest.raises(AuthorizationError):
            service.get_plan(db, Principal(id=other_member.id, role=UserRole.MEMBER), PlanType.WORKOUT, plan.id)
