"""Tests for /api/statistics."""
import pytest
from fastapi.testclient import TestClient
from main import app

client = TestClient(app)


class TestStatisticsAPI:

    def test_get_statistics(self):
        data = client.get("/api/statistics").json()["data"]
        assert data["completedArea"] == 12.5
        assert data["totalArea"] == 38.2
        assert data["progress"] == pytest.approx(12.5 / 38.2 * 100)

    def test_progress_derived_from_update(self):
        response = client.post("/api/statistics", json={"completedArea": 15, "totalArea": 40})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "统计数据更新成功"
        assert body["data"]["progress"] == 37.5

    def test_progress_zero_when_total_is_zero(self):
        data = client.post("/api/statistics", json={"completedArea": 0, "totalArea": 0}).json()["data"]
        assert data["progress"] == 0

    def test_completed_capped_at_total(self):
        data = client.post("/api/statistics", json={"completedArea": 50, "totalArea": 40}).json()["data"]
        assert data["completedArea"] == 40
        assert data["progress"] == 100

    def test_shrinking_total_caps_completed(self):
        data = client.post("/api/statistics", json={"totalArea": 10}).json()["data"]
        assert data["completedArea"] == 10
        assert data["totalArea"] == 10

    def test_progress_cannot_be_written(self):
        response = client.post("/api/statistics", json={"progress": 99})
        assert response.status_code == 400

    def test_empty_body_rejected(self):
        response = client.post("/api/statistics", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "请至少提供一个统计字段"
