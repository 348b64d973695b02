"""Links recorded before a slug rename keep working after it."""
from planboard.services.reference_recorder import REMOVED_SECTION_MESSAGE


def resolve(client, path):
    resp = client.get("/api/navigation/resolve", query_string={"path": path})
    assert resp.status_code == 200
    return resp.get_json()


class TestResolveEndpoint:
    def test_static(self, client):
        assert resolve(client, "/quanly") == {"kind": "static", "path": "/quanly", "page_id": "plan-management"}

    def test_dynamic(self, client, make_menu):
        menu = make_menu("giaidoan1", "Giai đoạn 1")
        body = resolve(client, "/giaidoan1/")
        assert body["kind"] == "dynamic"
        assert body["menu_id"] == menu["menu_id"]
        assert body["current_slug"] == "giaidoan1"

    def test_not_found_is_200_with_redirect(self, client):
        body = resolve(client, "/does-not-exist")
        assert body["kind"] == "notFound"
        assert body["redirect_to"] == "/tongquan"

    def test_links(self, client, make_menu):
        make_menu("giaidoan1", "Giai đoạn 1")
        make_menu("drive", "Drive", kind="external-link", url="https://drive.example.com")
        links = client.get("/api/navigation/links").get_json()
        assert [(l["href"], l["external"]) for l in links] == [
            ("/giaidoan1", False), ("https://drive.example.com", True),
        ]

    def test_menu_path(self, client, make_menu):
        menu = make_menu("giaidoan1")
        body = client.get(f"/api/navigation/menus/{menu['menu_id']}/path").get_json()
        assert body == {"path": "/giaidoan1", "exists": True, "message": None}

    def test_menu_path_missing(self, client):
        body = client.get("/api/navigation/menus/gone/path").get_json()
        assert body == {"path": "/tongquan", "exists": False, "message": REMOVED_SECTION_MESSAGE}


class TestSlugRenameScenario:
    def test_rename_then_delete(self, client, admin_headers, member_headers, make_menu, make_task, assignee):
        menu = make_menu("giaidoan1", "Giai đoạn 1")
        menu_id = menu["menu_id"]
        task = make_task(menu_id, "Khảo sát", assignee_id=assignee)

        resp = client.post(f"/api/tasks/{task['task_id']}/complete",
                           json={"link": "https://drive.example.com/report"}, headers=member_headers)
        assert resp.status_code == 200
        record_id = resp.get_json()["record_id"]

        target = client.get(f"/api/activity/{record_id}/target").get_json()
        assert target["path"] == "/giaidoan1"

        resp = client.patch(f"/api/menus/{menu_id}", json={"slug": "giai-doan-1"}, headers=admin_headers)
        assert resp.status_code == 200

        assert resolve(client, "/giaidoan1")["kind"] == "notFound"
        renamed = resolve(client, "/giai-doan-1")
        assert renamed["kind"] == "dynamic"
        assert renamed["menu_id"] == menu_id

        target = client.get(f"/api/activity/{record_id}/target").get_json()
        assert target == {"path": "/giai-doan-1", "exists": True, "message": None}

        assert client.delete(f"/api/menus/{menu_id}", headers=admin_headers).status_code == 200
        target = client.get(f"/api/activity/{record_id}/target").get_json()
        assert target == {"path": "/tongquan", "exists": False, "message": REMOVED_SECTION_MESSAGE}
