"""Tests for task CRUD under /api/tasks."""
from fastapi.testclient import TestClient
from main import app

client = TestClient(app)


class TestTasksAPI:

    def test_list_seed_tasks(self):
        data = client.get("/api/tasks").json()["data"]
        assert [task["name"] for task in data] == ["A区灌溉作业", "B区病虫害检测", "D区施肥作业"]
        assert data[0] == {"id": 1, "name": "A区灌溉作业", "status": "active", "progress": 45}

    def test_create_task_defaults(self):
        response = client.post("/api/tasks", json={"name": "X"})
        assert response.status_code == 200
        body = response.json()
        assert body["message"] == "任务创建成功"
        task = body["data"]
        assert isinstance(task["id"], int)
        assert task["status"] == "pending"
        assert task["progress"] == 0

        listed = client.get("/api/tasks").json()["data"]
        assert listed[-1] == task

    def test_create_without_name_rejected(self):
        response = client.post("/api/tasks", json={"status": "active"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "message": "缺少必填字段: name"}

    def test_create_with_invalid_status_rejected(self):
        response = client.post("/api/tasks", json={"name": "Y", "status": "paused"})
        assert response.status_code == 400

    def test_update_task(self):
        response = client.put("/api/tasks/2", json={"status": "active", "progress": 10})
        body = response.json()
        assert body["message"] == "任务更新成功"
        assert body["data"] == {"id": 2, "name": "B区病虫害检测", "status": "active", "progress": 10}

    def test_update_progress_clamped(self):
        data = client.put("/api/tasks/1", json={"progress": 140}).json()["data"]
        assert data["progress"] == 100

    def test_update_missing_task(self):
        response = client.put("/api/tasks/99", json={"progress": 10})
        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "任务 #99 不存在"}

    def test_update_invalid_id(self):
        response = client.put("/api/tasks/abc", json={"progress": 10})
        assert response.status_code == 400
        assert response.json()["message"] == "无效的任务ID"

    def test_update_empty_body(self):
        response = client.put("/api/tasks/1", json={})
        assert response.status_code == 400
        assert response.json()["message"] == "请至少提供一个更新字段"

    def test_delete_task(self):
        response = client.delete("/api/tasks/3")
        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["message"] == "任务删除成功"
        assert "data" not in body
        assert [task["id"] for task in client.get("/api/tasks").json()["data"]] == [1, 2]

    def test_delete_missing_task(self):
        response = client.delete("/api/tasks/42")
        assert response.status_code == 404

    def test_deleted_id_is_not_reused(self):
        created = client.post("/api/tasks", json={"name": "temp"}).json()["data"]
        client.delete(f"/api/tasks/{created['id']}")
        again = client.post("/api/tasks", json={"name": "next"}).json()["data"]
        assert again["id"] != created["id"]
        ids = [task["id"] for task in client.get("/api/tasks").json()["data"]]
        assert len(ids) == len(set(ids))
