import uuid

import pytest


@pytest.fixture
def project(client, editor_headers):
    response = client.post("/api/projects", headers=editor_headers,
                           json={"name": "Overkill", "partNumberPrefix": "ok25"})
    assert response.status_code == 201
    return response.get_json()


def _create(client, headers, project, **body):
    return client.post(f"/api/projects/{project['id']}/parts", json=body, headers=headers)


def test_project_prefix_is_uppercased(project):
    assert project["part_number_prefix"] == "OK25"
    assert project["hide_dashboards"] is False


def test_project_requires_name_and_prefix(client, editor_headers):
    response = client.post("/api/projects", json={"name": "X"}, headers=editor_headers)
    assert response.status_code == 400
    assert "required" in response.get_json()["error"]


def test_create_assembly_and_children(client, editor_headers, project):
    asm = _create(client, editor_headers, project, type="assembly", name="Intake").get_json()
    assert asm["part_number"] == 100
    assert asm["formatted_number"] == "OK25-A-0100"

    c1 = _create(client, editor_headers, project, type="part", name="Roller", parentPartId=asm["id"])
    c2 = _create(client, editor_headers, project, type="part", name="Plate", parentPartId=asm["id"])
    assert c1.status_code == 201
    assert c1.get_json()["part_number"] == 101
    assert c2.get_json()["part_number"] == 102
    assert c2.get_json()["formatted_number"] == "OK25-P-0102"

    root = _create(client, editor_headers, project, type="part", name="Spacer").get_json()
    assert root["part_number"] == 1


def test_create_part_validation(client, editor_headers, project):
    assert _create(client, editor_headers, project, name="No type").status_code == 400
    assert _create(client, editor_headers, project, type="gizmo", name="X").status_code == 400
    response = _create(client, editor_headers, project, type="part", name="X",
                       parentPartId=str(uuid.uuid4()))
    assert response.status_code == 400
    assert response.get_json() == {"error": "Parent part not found"}


def test_create_part_in_unknown_project(client, editor_headers):
    response = client.post(f"/api/projects/{uuid.uuid4()}/parts",
                           json={"type": "part", "name": "X"}, headers=editor_headers)
    assert response.status_code == 404


def test_readonly_cannot_mutate(client, editor_headers, readonly_headers, project):
    assert _create(client, readonly_headers, project, type="part", name="X").status_code == 403
    part = _create(client, editor_headers, project, type="part", name="X").get_json()
    assert client.get(f"/api/parts/{part['id']}", headers=readonly_headers).status_code == 200
    assert client.delete(f"/api/parts/{part['id']}", headers=readonly_headers).status_code == 403
    assert client.patch(f"/api/parts/{part['id']}/status", json={"status": "done"},
                        headers=readonly_headers).status_code == 403


def test_delete_blocked_by_children(client, editor_headers, project):
    asm = _create(client, editor_headers, project, type="assembly", name="Shooter").get_json()
    child = _create(client, editor_headers, project, type="part", name="Hood",
                    parentPartId=asm["id"]).get_json()

    response = client.delete(f"/api/parts/{asm['id']}", headers=editor_headers)
    assert response.status_code == 400
    assert response.get_json() == {"error": "Can't delete assembly with existing children"}

    assert client.delete(f"/api/parts/{child['id']}", headers=editor_headers).status_code == 204
    assert client.delete(f"/api/parts/{asm['id']}", headers=editor_headers).status_code == 204
    assert client.get(f"/api/parts/{asm['id']}", headers=editor_headers).status_code == 404


def test_status_patch(client, editor_headers, project):
    part = _create(client, editor_headers, project, type="part", name="Axle").get_json()
    url = f"/api/parts/{part['id']}/status"

    response = client.patch(url, json={"status": "cnc"}, headers=editor_headers)
    assert response.status_code == 200
    assert response.get_json()["status"] == "cnc"

    response = client.patch(url, json={"status": "teleported"}, headers=editor_headers)
    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid status"}


def test_put_part(client, editor_headers, project):
    part = _create(client, editor_headers, project, type="part", name="Axle").get_json()
    response = client.put(f"/api/parts/{part['id']}", headers=editor_headers, json={
        "name": "Hex axle", "status": "lathe", "priority": 0, "haveMaterial": True,
    })
    body = response.get_json()
    assert response.status_code == 200
    assert (body["name"], body["status"], body["priority"], body["have_material"]) == \
        ("Hex axle", "lathe", 0, True)
    assert body["part_number"] == part["part_number"]


def test_get_part_includes_project_and_parent(client, editor_headers, project):
    asm = _create(client, editor_headers, project, type="assembly", name="Climber").get_json()
    child = _create(client, editor_headers, project, type="part", name="Hook",
                    parentPartId=asm["id"]).get_json()
    body = client.get(f"/api/parts/{child['id']}", headers=editor_headers).get_json()
    assert body["project"]["id"] == project["id"]
    assert body["parent"]["formatted_number"] == "OK25-A-0100"
    assert body["settings"] == {"hide_unused_fields": False}

    parent = client.get(f"/api/parts/{asm['id']}", headers=editor_headers).get_json()
    assert [c["id"] for c in parent["children"]] == [child["id"]]
    assert parent["parent"] is None


def test_list_parts_sorted(client, editor_headers, project):
    _create(client, editor_headers, project, type="assembly", name="Zed")
    _create(client, editor_headers, project, type="part", name="Alpha")
    url = f"/api/projects/{project['id']}/parts"
    by_number = [p["part_number"] for p in client.get(url, headers=editor_headers).get_json()]
    assert by_number == [1, 100]
    by_name = [p["name"] for p in client.get(f"{url}?sort=name", headers=editor_headers).get_json()]
    assert by_name == ["Alpha", "Zed"]


def test_dashboard_groups_unfinished_parts(client, editor_headers, project):
    a = _create(client, editor_headers, project, type="part", name="A").get_json()
    b = _create(client, editor_headers, project, type="part", name="B").get_json()
    c = _create(client, editor_headers, project, type="part", name="C").get_json()
    client.patch(f"/api/parts/{b['id']}/status", json={"status": "cnc"}, headers=editor_headers)
    client.patch(f"/api/parts/{c['id']}/status", json={"status": "done"}, headers=editor_headers)

    url = f"/api/projects/{project['id']}/dashboard"
    body = client.get(url, headers=editor_headers).get_json()
    assert body["totalParts"] == 2
    assert [p["id"] for p in body["partsByStatus"]["designing"]] == [a["id"]]
    assert [p["id"] for p in body["partsByStatus"]["cnc"]] == [b["id"]]
    assert body["partsByStatus"]["done"] == []
    assert body["project"] == {"name": "Overkill", "part_number_prefix": "OK25"}
    assert len(body["statusMap"]) == 20

    filtered = client.get(f"{url}?status=cnc", headers=editor_headers).get_json()
    assert filtered["totalParts"] == 1

    ignored = client.get(f"{url}?status=bogus", headers=editor_headers).get_json()
    assert ignored["totalParts"] == 2


def test_delete_project_cascades(client, editor_headers, project):
    asm = _create(client, editor_headers, project, type="assembly", name="Drive").get_json()
    _create(client, editor_headers, project, type="part", name="Gear", parentPartId=asm["id"])
    client.post(f"/api/projects/{project['id']}/order-items", json={"vendor": "Acme"},
                headers=editor_headers)

    assert client.delete(f"/api/projects/{project['id']}", headers=editor_headers).status_code == 204
    assert client.get(f"/api/projects/{project['id']}", headers=editor_headers).status_code == 404
    assert client.get(f"/api/parts/{asm['id']}", headers=editor_headers).status_code == 404


def test_lookup_by_formatted_number(client, editor_headers, project):
    asm = _create(client, editor_headers, project, type="assembly", name="Arm").get_json()
    child = _create(client, editor_headers, project, type="part", name="Pivot",
                    parentPartId=asm["id"]).get_json()
    url = f"/api/projects/{project['id']}/parts"

    found = client.get(f"{url}?number=ok25-p-0101", headers=editor_headers).get_json()
    assert [p["id"] for p in found] == [child["id"]]

    found = client.get(f"{url}?number=OK25-A-0100", headers=editor_headers).get_json()
    assert [p["id"] for p in found] == [asm["id"]]

    assert client.get(f"{url}?number=OTHER-P-0101", headers=editor_headers).get_json() == []

    response = client.get(f"{url}?number=garbage", headers=editor_headers)
    assert response.status_code == 400
    assert response.get_json() == {"error": "Invalid part number"}
