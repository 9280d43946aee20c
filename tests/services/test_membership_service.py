"""
Tests de la máquina de estados de solicitudes de membresía.
"""

from datetime import timedelta

import pytest

from gymflow.core.auth import Principal
from gymflow.core.config import Settings
from gymflow.core.durations import compute_expiry
from gymflow.core.exceptions import (
    AuthorizationError, ConflictError, InvalidStateError, NotFoundError, ValidationError
)
from gymflow.core.timezone_utils import utcnow
from gymflow.models.membership_request import RequestStatus
from gymflow.models.user import UserRole
from gymflow.models.user_gym import GymRoleType
from gymflow.repositories.user_gym import user_gym_repository
from gymflow.schemas.membership import MembershipRequestCreate
from gymflow.services.membership import MembershipService
from tests.factories import add_to_roster, make_user


@pytest.fixture
def service():
    return MembershipService(Settings(MEMBERSHIP_RENEWAL_POLICY="replace"))


def as_member(user):
    return Principal(id=user.id, role=UserRole.MEMBER)


def as_gym(gym):
    return Principal(id=gym.id, role=UserRole.GYM)


class TestCreateRequest:
    def test_creates_pending_join_request(self, db, service, gym, member_user):
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 month")
        )
        assert request.status == RequestStatus.PENDING
        assert request.requested_duration == "1 month"
        assert request.is_renewal is False

    def test_second_pending_request_conflicts(self, db, service, gym, member_user):
        """Una sola solicitud pendiente por par (miembro, gimnasio)."""
        request_in = MembershipRequestCreate(gym_id=gym.id, duration="1 month")
        service.create_request(db, as_member(member_user), request_in)
        with pytest.raises(ConflictError):
            service.create_request(db, as_member(member_user), request_in)

    def test_new_request_allowed_after_resolution(self, db, service, gym, member_user):
        first = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 week")
        )
        service.resolve_request(db, as_gym(gym), first.id, "deny")

        second = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 week")
        )
        assert second.id != first.id
        assert second.status == RequestStatus.PENDING

    @pytest.mark.parametrize("duration", [None, "2 weeks", "1 Month"])
    def test_missing_or_unknown_duration_is_rejected(self, db, service, gym, member_user, duration):
        with pytest.raises(ValidationError):
            service.create_request(
                db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration=duration)
            )

    def test_unknown_gym(self, db, service, member_user):
        with pytest.raises(NotFoundError):
            service.create_request(
                db, as_member(member_user), MembershipRequestCreate(gym_id=999, duration="1 month")
            )

    def test_member_of_other_gym_conflicts(self, db, service, gym, other_gym, member_user):
        add_to_roster(db, member_user, other_gym, GymRoleType.MEMBER, "1 month")
        with pytest.raises(ConflictError):
            service.create_request(
                db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 month")
            )

    def test_request_in_own_gym_is_renewal(self, db, service, gym, member_user):
        add_to_roster(db, member_user, gym, GymRoleType.MEMBER, "1 week")
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="3 months")
        )
        assert request.is_renewal is True

    def test_gym_account_cannot_request(self, db, service, gym):
        with pytest.raises(AuthorizationError):
            service.create_request(db, as_gym(gym), MembershipRequestCreate(gym_id=gym.id, duration="1 week"))


class TestResolveRequest:
    def test_approve_join_adds_to_roster_and_sets_membership(self, db, service, gym, member_user):
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 month")
        )
        before = utcnow()
        resolved = service.resolve_request(db, as_gym(gym), request.id, "approve")
        after = utcnow()

        assert resolved.status == RequestStatus.APPROVED
        assert resolved.resolved_at is not None

        roster = user_gym_repository.get_in_gym(db, user_id=member_user.id, gym_id=gym.id)
        assert roster is not None
        assert roster.role == GymRoleType.MEMBER
        assert roster.membership_duration == "1 month"
        assert before <= roster.membership_start <= after
        assert roster.membership_expires_at == compute_expiry("1 month", roster.membership_start)
        assert roster.membership_status == "active"

    def test_deny_has_no_side_effects(self, db, service, gym, member_user):
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 month")
        )
        resolved = service.resolve_request(db, as_gym(gym), request.id, "deny")
        assert resolved.status == RequestStatus.DENIED
        assert user_gym_repository.get_by_user(db, user_id=member_user.id) is None

    def test_resolving_twice_is_invalid_state(self, db, service, gym, member_user):
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 month")
        )
        service.resolve_request(db, as_gym(gym), request.id, "approve")
        with pytest.raises(InvalidStateError):
            service.resolve_request(db, as_gym(gym), request.id, "deny")

    def test_missing_request(self, db, service, gym):
        with pytest.raises(NotFoundError):
            service.resolve_request(db, as_gym(gym), 12345, "approve")

    def test_other_gym_cannot_resolve(self, db, service, gym, other_gym, member_user):
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 month")
        )
        with pytest.raises(AuthorizationError):
            service.resolve_request(db, as_gym(other_gym), request.id, "approve")

    def test_trainer_of_gym_can_resolve_member_request(self, db, service, gym, gym_trainer, member_user):
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 week")
        )
        trainer = Principal(id=gym_trainer.id, role=UserRole.TRAINER)
        resolved = service.resolve_request(db, trainer, request.id, "approve")
        assert resolved.status == RequestStatus.APPROVED
        assert resolved.resolved_by_role == "TRAINER"

    def test_trainer_outside_gym_cannot_resolve(self, db, service, gym, trainer_user, member_user):
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 week")
        )
        trainer = Principal(id=trainer_user.id, role=UserRole.TRAINER)
        with pytest.raises(AuthorizationError):
            service.resolve_request(db, trainer, request.id, "approve")

    def test_approve_fails_atomically_if_member_joined_other_gym(self, db, service, gym, other_gym, member_user):
        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 month")
        )
        add_to_roster(db, member_user, other_gym, GymRoleType.MEMBER, "1 week")

        with pytest.raises(ConflictError):
            service.resolve_request(db, as_gym(gym), request.id, "approve")

        # Ni la solicitud ni el roster cambiaron
        assert service.get_request(db, request.id).status == RequestStatus.PENDING
        assert user_gym_repository.get_in_gym(db, user_id=member_user.id, gym_id=gym.id) is None


class TestRenewal:
    def test_replace_policy_recomputes_from_now(self, db, service, gym, member_user):
        row = add_to_roster(db, member_user, gym, GymRoleType.MEMBER, "1 year")
        long_expiry = row.membership_expires_at

        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 week")
        )
        service.resolve_request(db, as_gym(gym), request.id, "approve")

        info = service.get_membership(db, member_user.id)
        assert info.duration == "1 week"
        # Una renovación más corta acorta la membresía vigente
        assert info.end_date < long_expiry
        assert info.end_date == compute_expiry("1 week", info.start_date)

    def test_stack_policy_extends_from_current_expiry(self, db, gym, member_user):
        service = MembershipService(Settings(MEMBERSHIP_RENEWAL_POLICY="stack"))
        row = add_to_roster(db, member_user, gym, GymRoleType.MEMBER, "1 month")
        current_expiry = row.membership_expires_at

        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 week")
        )
        service.resolve_request(db, as_gym(gym), request.id, "approve")

        info = service.get_membership(db, member_user.id)
        assert info.end_date == current_expiry + timedelta(days=7)

    def test_stack_policy_on_expired_membership_starts_now(self, db, gym, member_user):
        service = MembershipService(Settings(MEMBERSHIP_RENEWAL_POLICY="stack"))
        row = add_to_roster(db, member_user, gym, GymRoleType.MEMBER, "1 week")
        row.membership_expires_at = utcnow() - timedelta(days=3)
        db.commit()

        request = service.create_request(
            db, as_member(member_user), MembershipRequestCreate(gym_id=gym.id, duration="1 week")
        )
        service.resolve_request(db, as_gym(gym), request.id, "approve")

        info = service.get_membership(db, member_user.id)
        assert info.status == "active"
        assert info.end_date == compute_expiry("1 week", info.start_date)


class TestTrainerJoin:
    def test_trainer_join_only_resolved_by_gym(self, db, service, gym, trainer_user):
        trainer = Principal(id=trainer_user.id, role=UserRole.TRAINER)
        request = service.create_request(db, trainer, MembershipRequestCreate(gym_id=gym.id))
        assert request.requester_role == GymRoleType.TRAINER
        assert request.requested_duration is None

        other_trainer = make_user(db, "coach@test.com", UserRole.TRAINER)
        add_to_roster(db, other_trainer, gym, GymRoleType.TRAINER)
        with pytest.raises(AuthorizationError):
            service.resolve_request(
                db, Principal(id=other_trainer.id, role=UserRole.TRAINER), request.id, "approve"
            )

        service.resolve_request(db, as_gym(gym), request.id, "approve")
        roster = user_gym_repository.get_by_user(db, user_id=trainer_user.id)
        assert roster.role == GymRoleType.TRAINER
        assert roster.membership_expires_at is None

    def test_trainer_already_in_gym_conflicts(self, db, service, gym, other_gym, gym_trainer):
        trainer = Principal(id=gym_trainer.id, role=UserRole.TRAINER)
        with pytest.raises(ConflictError):
            service.create_request(db, trainer, MembershipRequestCreate(gym_id=other_gym.id))


class TestSetMembership:
    def test_gym_sets_membership_directly(self, db, service, gym, member_user):
        add_to_roster(db, member_user, gym, GymRoleType.MEMBER, "1 week")
        info = service.set_membership(db, as_gym(gym), member_user.id, "6 months")
        assert info.duration == "6 months"
        assert info.end_date == compute_expiry("6 months", info.start_date)

    def test_non_member_of_gym(self, db, service, gym, member_user):
        with pytest.raises(NotFoundError):
            service.set_membership(db, as_gym(gym), member_user.id, "1 month")

    def test_unknown_duration(self, db, service, gym, member_user):
        add_to_roster(db, member_user, gym, GymRoleType.MEMBER, "1 week")
        with pytest.raises(ValidationError):
            service.set_membership(db, as_gym(gym), member_user.id, "1 decade")

    def test_membership_without_gym_is_empty(self, db, service, member_user):
        info = service.get_membership(db, member_user.id)
        assert info.gym_id is None
        assert info.duration is None
        assert info.status is None
