from __future__ import annotations


def test_list_tasks_in_display_order_with_request_id(client):
    test_client, _ = client
    resp = test_client.get("/tasks", headers={"X-Request-ID": "req-123"})
    assert resp.status_code == 200
    data = resp.json()
    assert [task["id"] for task in data["tasks"]] == ["a", "b"]
    assert data["request_id"] == "req-123"
    assert resp.headers["X-Request-ID"] == "req-123"


def test_create_task_records_audit_entry(client):
    test_client, store = client
    resp = test_client.post(
        "/tasks",
        json={"name": "Fire drill", "start": "2024-08-10", "end": "2024-08-10", "assignee_id": "user-1"},
    )
    assert resp.status_code == 201
    created = resp.json()["tasks"][0]
    assert created["priority"] == "Medium"
    assert created["status"] == "pending"
    assert created["id"] in store.graph

    audit = test_client.get("/audit-log").json()["entries"]
    assert audit[0]["action"] == "Create Task"
    assert "Fire drill" in audit[0]["details"]


def test_create_task_rejects_inverted_dates(client):
    test_client, store = client
    resp = test_client.post("/tasks", json={"name": "Bad", "start": "2024-08-10", "end": "2024-08-09"})
    assert resp.status_code == 422
    assert len(store.graph) == 2


def test_create_recurring_series(client):
    test_client, store = client
    resp = test_client.post(
        "/tasks/recurring",
        json={
            "template": {"name": "Pest control check", "start": "2024-08-01", "end": "2024-08-01"},
            "frequency": "weekly",
            "end_date": "2024-08-22",
        },
    )
    assert resp.status_code == 201
    tasks = resp.json()["tasks"]
    assert [task["start"] for task in tasks] == ["2024-08-01", "2024-08-08", "2024-08-15", "2024-08-22"]
    assert len({task["recurring_instance_id"] for task in tasks}) == 1
    assert len(store.graph) == 6

    entry = store.audit_log[-1]
    assert entry.action == "Create Recurring Tasks"
    assert "4 weekly" in entry.details


def test_recurring_rule_ending_before_template_end_creates_nothing(client):
    test_client, store = client
    resp = test_client.post(
        "/tasks/recurring",
        json={
            "template": {"name": "Deep clean", "start": "2024-08-01", "end": "2024-08-03"},
            "frequency": "daily",
            "end_date": "2024-08-02",
        },
    )
    assert resp.status_code == 201
    assert resp.json()["tasks"] == []
    assert store.audit_log == []


def test_patch_commits_batch_and_notifies_collaborator(client):
    test_client, store = client
    committed = []
    store.on_tasks_committed = lambda tasks: committed.append([task.id for task in tasks])
    resp = test_client.patch(
        "/tasks",
        json={"updates": [{"id": "a", "status": "in-progress"}, {"id": "b", "end": "2024-08-04"}]},
    )
    assert resp.status_code == 200
    assert [task["id"] for task in resp.json()["tasks"]] == ["a", "b"]
    assert committed == [["a", "b"]]
    assert store.graph.get("b").end.isoformat() == "2024-08-04"


def test_patch_with_inverted_dates_is_rejected_whole(client):
    test_client, store = client
    resp = test_client.patch(
        "/tasks",
        json={"updates": [{"id": "a", "name": "Renamed"}, {"id": "b", "end": "2024-07-01"}]},
    )
    assert resp.status_code == 422
    assert store.graph.get("a").name == "Kitchen audit"


def test_patch_rejects_parent_cycle(client):
    test_client, _ = client
    resp = test_client.patch("/tasks", json={"updates": [{"id": "a", "parent_id": "b"}]})
    assert resp.status_code == 422
    assert "ancestor" in resp.json()["detail"]


def test_patch_can_clear_parent(client):
    test_client, store = client
    resp = test_client.patch("/tasks", json={"updates": [{"id": "b", "parent_id": None}]})
    assert resp.status_code == 200
    assert store.graph.get("b").parent_id is None


def test_patch_never_stores_self_dependency(client):
    test_client, store = client
    resp = test_client.patch("/tasks", json={"updates": [{"id": "a", "dependencies": ["a", "b"]}]})
    assert resp.status_code == 200
    assert resp.json()["tasks"][0]["dependencies"] == ["b"]
    assert store.graph.get("a").dependencies == ("b",)


def test_patch_unknown_task_returns_404(client):
    test_client, _ = client
    resp = test_client.patch("/tasks", json={"updates": [{"id": "zzz", "name": "x"}]})
    assert resp.status_code == 404


def test_descendants_endpoint(client):
    test_client, _ = client
    resp = test_client.get("/tasks/a/descendants")
    assert resp.status_code == 200
    assert [task["id"] for task in resp.json()["descendants"]] == ["b"]
    assert test_client.get("/tasks/nope/descendants").status_code == 404


def test_users_lists_only_assignable(client):
    test_client, _ = client
    resp = test_client.get("/users")
    assert resp.status_code == 200
    assert [user["id"] for user in resp.json()["users"]] == ["user-1"]


def test_health(client):
    test_client, _ = client
    assert test_client.get("/health").json()["status"] == "ok"
