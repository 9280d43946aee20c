"""
Tests de operaciones administrativas: borrado de gimnasios y analítica de uso.
"""

from datetime import timedelta

from gymflow.core.timezone_utils import utcnow
from gymflow.models.announcement import Announcement
from gymflow.models.membership_request import MembershipRequest
from gymflow.models.trainer_schedule import TrainerSchedule
from gymflow.models.user_gym import GymRoleType, UserGym
from tests.factories import add_to_roster

API = "/api/v1"


class TestAdminGymDeletion:
    def test_delete_gym_cascades(
        self, client, db, gym, gym_trainer, member_user, other_member,
        admin_headers, gym_headers, trainer_headers, member_headers, other_member_headers,
    ):
        add_to_roster(db, member_user, gym, GymRoleType.MEMBER, "1 month")
        client.post(f"{API}/memberships/requests", json={"gym_id": gym.id, "duration": "1 week"},
                    headers=other_member_headers)
        client.post(f"{API}/announcements/", json={"message": "Hasta pronto"}, headers=gym_headers)
        start = utcnow() + timedelta(days=1)
        slot_id = client.post(
            f"{API}/schedule/slots",
            json={"start_time": start.isoformat(), "end_time": (start + timedelta(hours=1)).isoformat()},
            headers=trainer_headers,
        ).json()["id"]

        response = client.delete(f"{API}/admin/gyms/{gym.id}", headers=admin_headers)
        assert response.status_code == 204

        assert client.get(f"{API}/gyms/{gym.id}").status_code == 404
        membership = client.get(f"{API}/members/me/membership", headers=member_headers).json()
        assert membership["gym_id"] is None and membership["status"] is None

        db.expire_all()
        assert db.query(UserGym).count() == 0
        assert db.query(MembershipRequest).count() == 0
        assert db.query(Announcement).count() == 0
        slot = db.get(TrainerSchedule, slot_id)
        assert slot is not None and slot.gym_id is None

    def test_only_admins(self, client, gym, gym_headers):
        assert client.delete(f"{API}/admin/gyms/{gym.id}", headers=gym_headers).status_code == 403

    def test_unknown_gym(self, client, admin_headers):
        assert client.delete(f"{API}/admin/gyms/999", headers=admin_headers).status_code == 404


class TestAnalytics:
    def test_events_are_aggregated(self, client, admin_headers, member_headers, gym_headers):
        client.post(f"{API}/analytics/events", json={"page": "/dashboard"}, headers=member_headers)
        client.post(f"{API}/analytics/events", json={"page": "/dashboard"}, headers=gym_headers)
        created = client.post(
            f"{API}/analytics/events", json={"event": "Click", "page": "/plans", "details": "cta"},
            headers=member_headers,
        )
        assert created.status_code == 201
        assert created.json()["actor_role"] == "MEMBER"

        summary = client.get(f"{API}/admin/analytics?days=7", headers=admin_headers)
        assert summary.status_code == 200
        body = summary.json()
        assert body["total_events"] == 3
        assert body["by_event"] == {"Page View": 2, "Click": 1}
        assert body["by_role"] == {"MEMBER": 2, "GYM": 1}
        assert body["by_page"] == {"/dashboard": 2, "/plans": 1}

    def test_summary_requires_admin(self, client, member_headers):
        assert client.get(f"{API}/admin/analytics", headers=member_headers).status_code == 403
