from gymflow.core.config import Settings, get_settings
from gymflow.main import app

API = "/api/v1"


def workout_body(member_id, title="Hipertrofia"):
    return {
        "member_id": member_id,
        "title": title,
        "description": "4 semanas",
        "exercises": [
            {"name": "Dominadas", "sets": 4, "reps": 8, "rest": "2m"},
            {"name": "Remo", "sets": 3, "reps": 12, "rest": "90s"},
        ],
    }


class TestPlanEndpoints:
    def test_request_then_author_plan(self, client, member_user, trainer_user, member_headers, trainer_headers):
        created = client.post(
            f"{API}/plans/requests",
            json={"trainer_id": trainer_user.id, "request_type": "workout"},
            headers=member_headers,
        )
        assert created.status_code == 201
        request_id = created.json()["id"]

        duplicate = client.post(
            f"{API}/plans/requests",
            json={"trainer_id": trainer_user.id, "request_type": "workout"},
            headers=member_headers,
        )
        assert duplicate.status_code == 409

        received = client.get(f"{API}/plans/requests?pending_only=true", headers=trainer_headers).json()
        assert [r["id"] for r in received] == [request_id]

        resolved = client.post(
            f"{API}/plans/requests/{request_id}/action", json={"action": "approve"}, headers=trainer_headers
        )
        assert resolved.json()["status"] == "approved"
        # Aprobar no crea el plan
        assert client.get(f"{API}/plans/workouts", headers=member_headers).json() == []

        plan = client.post(f"{API}/plans/workouts", json=workout_body(member_user.id), headers=trainer_headers)
        assert plan.status_code == 201
        assert [e["name"] for e in plan.json()["exercises"]] == ["Dominadas", "Remo"]

        mine = client.get(f"{API}/plans/workouts", headers=member_headers).json()
        assert [p["id"] for p in mine] == [plan.json()["id"]]

    def test_update_and_delete_by_author(self, client, member_user, trainer_headers, member_headers):
        plan_id = client.post(
            f"{API}/plans/workouts", json=workout_body(member_user.id), headers=trainer_headers
        ).json()["id"]

        updated = client.put(f"{API}/plans/workouts/{plan_id}", json={"title": "Fuerza"}, headers=trainer_headers)
        assert updated.status_code == 200
        assert updated.json()["title"] == "Fuerza"
        assert len(updated.json()["exercises"]) == 2

        assert client.get(f"{API}/plans/workouts/{plan_id}", headers=member_headers).status_code == 200
        assert client.delete(f"{API}/plans/workouts/{plan_id}", headers=trainer_headers).status_code == 204
        assert client.get(f"{API}/plans/workouts/{plan_id}", headers=member_headers).status_code == 404

    def test_members_cannot_author_plans(self, client, member_user, member_headers):
        response = client.post(f"{API}/plans/workouts", json=workout_body(member_user.id), headers=member_headers)
        assert response.status_code == 403

    def test_diet_plan(self, client, member_user, trainer_headers, member_headers):
        body = {
            "member_id": member_user.id,
            "title": "Volumen",
            "meals": [{"name": "Desayuno", "calories": 600, "protein": 35, "carbs": 70, "fats": 18, "time": "08:00"}],
        }
        created = client.post(f"{API}/plans/diets", json=body, headers=trainer_headers)
        assert created.status_code == 201
        assert created.json()["meals"][0]["time"] == "08:00"
        assert len(client.get(f"{API}/plans/diets", headers=member_headers).json()) == 1

    def test_strict_policy_through_settings_override(self, client, member_user, trainer_headers):
        app.dependency_overrides[get_settings] = lambda: Settings(REQUIRE_APPROVED_PLAN_REQUEST=True)
        try:
            response = client.post(f"{API}/plans/workouts", json=workout_body(member_user.id), headers=trainer_headers)
        finally:
            app.dependency_overrides.pop(get_settings, None)
        assert response.status_code == 409
        assert response.json()["errorKind"] == "InvalidStateError"
