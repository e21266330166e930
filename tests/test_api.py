from regimeniq.main import app, get_store


BASE = "/users/user-1/patients/patient-1"


def _add(client, name, category="supplement", **fields):
    response = client.post(f"{BASE}/regimen", json={"name": name, "category": category, **fields})
    assert response.status_code == 201
    return response.json()


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_severity_endpoint(client):
    assert client.get("/severity/high").json()["label"] == "High Priority"
    assert client.get("/severity/whatever").json()["label"] == "Unknown"


def test_regimen_crud(client):
    item = _add(client, "Iron", dosage="65mg", start_date="2024-03-01")
    assert item["start_date"] == "2024-03-01"

    listed = client.get(f"{BASE}/regimen").json()
    assert [i["id"] for i in listed] == [item["id"]]

    updated = client.patch(f"/regimen/{item['id']}", json={"is_active": False})
    assert updated.status_code == 200
    assert updated.json()["is_active"] is False
    assert client.get(f"{BASE}/regimen", params={"active_only": True}).json() == []

    assert client.delete(f"/regimen/{item['id']}").status_code == 204
    assert client.get(f"{BASE}/regimen").json() == []


def test_invalid_category_rejected(client):
    response = client.post(f"{BASE}/regimen", json={"name": "Yoga", "category": "exercise"})

    assert response.status_code == 422


def test_unknown_regimen_item_is_404(client):
    response = client.patch("/regimen/missing", json={"notes": "x"})

    assert response.status_code == 404
    assert response.json()["detail"] == "Regimen item missing not found"
    assert client.delete("/regimen/missing").status_code == 404


def test_check_interactions_end_to_end(client):
    for name in ["Tamoxifen", "St. John's Wort", "Calcium", "Iron"]:
        _add(client, name)

    response = client.get(f"{BASE}/interactions/check")

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["error"] is None
    assert sorted(i["severity"] for i in body["data"]) == ["high", "low"]
    assert all(len(i["item_ids"]) == 2 for i in body["data"])


def test_check_with_no_interactions(client):
    _add(client, "Aspirin", category="medication")
    _add(client, "Aspirin", category="medication")

    body = client.get(f"{BASE}/interactions/check").json()

    assert body == {"success": True, "data": [], "error": None}


def test_check_reports_store_failure(client, failing_store):
    app.dependency_overrides[get_store] = lambda: failing_store

    response = client.get(f"{BASE}/interactions/check")

    assert response.status_code == 200
    assert response.json() == {"success": False, "data": None, "error": "Database unreachable"}


def test_multi_patient_summary(client):
    _add(client, "Warfarin", category="medication")
    _add(client, "Vitamin K")
    client.post(
        "/users/user-1/patients/patient-2/regimen",
        json={"name": "Calcium", "category": "supplement"},
    )

    response = client.get(
        "/users/user-1/interactions/check",
        params=[("patient_id", "patient-1"), ("patient_id", "patient-2")],
    )

    body = response.json()
    assert body["total_interactions"] == 1
    assert list(body["results"]) == ["patient-1", "patient-2"]
    assert body["results"]["patient-2"]["data"] == []


def test_save_and_discuss_interaction(client):
    _add(client, "Warfarin", category="medication")
    _add(client, "Vitamin E")
    detected = client.get(f"{BASE}/interactions/check").json()["data"][0]

    created = client.post(f"{BASE}/interactions", json=detected)
    assert created.status_code == 201
    saved = created.json()
    assert saved["severity"] == "moderate"
    assert saved["discussed_with_clinician"] is False

    patched = client.patch(
        f"/interactions/{saved['id']}",
        json={"discussed_with_clinician": True, "discussion_notes": "Reduce vitamin E dose"},
    )
    assert patched.json()["discussed_with_clinician"] is True

    listed = client.get(f"{BASE}/interactions").json()
    assert [i["id"] for i in listed] == [saved["id"]]

    assert client.delete(f"/interactions/{saved['id']}").status_code == 204
    assert client.delete(f"/interactions/{saved['id']}").status_code == 404


def test_save_rejects_single_item_interaction(client):
    item = _add(client, "Warfarin", category="medication")

    response = client.post(
        f"{BASE}/interactions",
        json={
            "item_ids": [item["id"], item["id"]],
            "items": [item, item],
            "severity": "high",
            "description": "x",
        },
    )

    assert response.status_code == 422


def test_delete_patient(client):
    _add(client, "Iron")

    assert client.delete(BASE).status_code == 204
    assert client.get(f"{BASE}/regimen").json() == []
