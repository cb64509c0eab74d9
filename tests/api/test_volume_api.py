"""
Tests for the volume API routes.

Tests cover:
- Seeding defaults
- Logging volume
- Summaries and recommendations
- Error responses
"""


def _seed(client, user_id="athlete-1", level="intermediate"):
    return client.post(f"/api/v1/volume/{user_id}/seed", json={"training_level": level})


class TestSeed:
    """Tests for POST /api/v1/volume/{user_id}/seed."""

    def test_seed(self, client):
        response = _seed(client)
        assert response.status_code == 201
        data = response.json()
        assert data["training_level"] == "intermediate"
        assert len(data["landmarks"]) == 18

    def test_seed_twice_conflicts(self, client):
        _seed(client)
        response = _seed(client, level="beginner")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "ALREADY_SEEDED"

    def test_invalid_level(self, client):
        response = _seed(client, level="elite")
        assert response.status_code == 422
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"


class TestLogVolume:
    """Tests for POST /api/v1/volume/{user_id}/log."""

    def test_log(self, client):
        _seed(client)
        response = client.post(
            "/api/v1/volume/athlete-1/log", json={"muscle_group": "chest", "volume": 16}
        )
        assert response.status_code == 200
        assert response.json()["current_volume"] == 16

    def test_negative_volume(self, client):
        _seed(client)
        response = client.post(
            "/api/v1/volume/athlete-1/log", json={"muscle_group": "chest", "volume": -3}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "NEGATIVE_VOLUME"

    def test_unknown_group(self, client):
        _seed(client)
        response = client.post(
            "/api/v1/volume/athlete-1/log", json={"muscle_group": "necks", "volume": 3}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_MUSCLE_GROUP"

    def test_not_seeded(self, client):
        response = client.post(
            "/api/v1/volume/nobody/log", json={"muscle_group": "chest", "volume": 10}
        )
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "LANDMARK_NOT_FOUND"


class TestSummary:
    """Tests for GET /api/v1/volume/{user_id}/summary."""

    def test_summary_classifies(self, client):
        _seed(client)
        client.put(
            "/api/v1/volume/athlete-1/landmarks/chest", json={"mev": 10, "mav": 16, "mrv": 22}
        )
        client.post("/api/v1/volume/athlete-1/log", json={"muscle_group": "chest", "volume": 18})

        response = client.get("/api/v1/volume/athlete-1/summary")

        assert response.status_code == 200
        groups = {g["muscle_group"]: g for g in response.json()["muscle_groups"]}
        assert groups["chest"]["status"] == "approaching_mrv"
        assert groups["chest"]["target_volume"] == 13
        assert groups["back"]["status"] == "below_mev"

    def test_invalid_landmark_edit(self, client):
        _seed(client)
        response = client.put(
            "/api/v1/volume/athlete-1/landmarks/chest", json={"mev": 20, "mav": 16, "mrv": 22}
        )
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_LANDMARKS"

    def test_recommendations(self, client):
        _seed(client)
        response = client.get("/api/v1/volume/athlete-1/recommendations")
        assert response.status_code == 200
        recs = response.json()["recommendations"]
        assert len(recs) == 18
        assert all(r["adjustment_type"] == "increase" for r in recs)

    def test_goal_range(self, client):
        _seed(client)
        response = client.get(
            "/api/v1/volume/athlete-1/goal-range/chest", params={"goal": "strength"}
        )
        assert response.status_code == 200
        assert set(response.json()) >= {"min", "optimal", "max"}
