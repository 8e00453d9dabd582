from models.messages import ERR_ADD_REGION, ERR_UPDATE_REGION


def test_region_crud_and_item_counts(client, db, admin_headers):
    resp = client.post("/api/regions", json={"name": "Nord"}, headers=admin_headers)
    assert resp.status_code == 200, resp.text
    rid = resp.json()["id"]
    assert db.collection("regions").docs[rid] == {"name": "Nord"}

    db.collection("items").document("i1").set({"name": "Zelt", "regionId": rid})
    regions = client.get("/api/regions", headers=admin_headers).json()["regions"]
    assert regions == [{"id": rid, "name": "Nord", "itemCount": 1}]

    client.put(f"/api/regions/{rid}", json={"name": "Nordost"}, headers=admin_headers)
    assert db.collection("regions").docs[rid] == {"name": "Nordost"}

    client.delete(f"/api/regions/{rid}", headers=admin_headers)
    assert rid not in db.collection("regions").docs
    # items are left pointing at the deleted region
    assert db.collection("items").docs["i1"]["regionId"] == rid


def test_assign_items_to_region(client, db, admin_headers):
    db.collection("regions").document("r2").set({"name": "Süd"})
    db.collection("items").document("i1").set({"name": "Zelt", "regionId": "r1", "approved": True})

    resp = client.post("/api/regions/r2/assign", json={"item_ids": ["i1", "ghost"]}, headers=admin_headers)
    assert resp.json() == {"ok": True, "region_id": "r2", "updated": ["i1"], "skipped": ["ghost"]}
    assert db.collection("items").docs["i1"]["regionId"] == "r2"

    resp = client.post("/api/regions/r2/assign", json={"item_ids": []}, headers=admin_headers)
    assert resp.status_code == 422


def test_region_update_failure(client, db, admin_headers):
    db.collection("regions").fail_on.add("set")
    resp = client.put("/api/regions/r1", json={"name": "Nord"}, headers=admin_headers)
    assert resp.status_code == 502
    assert resp.json()["detail"] == ERR_UPDATE_REGION


def test_region_add_failure(client, db, admin_headers):
    db.collection("regions").fail_on.add("add")
    resp = client.post("/api/regions", json={"name": "Nord"}, headers=admin_headers)
    assert resp.status_code == 502
    assert resp.json()["detail"] == ERR_ADD_REGION
    assert client.get("/api/regions", headers=admin_headers).json()["db_error"] == ERR_ADD_REGION
