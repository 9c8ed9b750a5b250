# tests/api/test_admin_api.py


def test_category_crud(admin_client):
    response = admin_client.post("/api/admin/categories", json={"name": "games", "display_name": "Juegos Épicos"})
    assert response.status_code == 200
    category = response.json()
    assert category["slug"] == "juegos-epicos"
    assert category["icon"] == "fa-folder"

    response = admin_client.put(f"/api/admin/categories/{category['id']}", json={"is_hidden": True})
    assert response.status_code == 200
    assert response.json()["is_hidden"] is True
    assert response.json()["display_name"] == "Juegos Épicos"

    assert [c["name"] for c in admin_client.get("/api/admin/categories").json()] == ["games"]

    assert admin_client.delete(f"/api/admin/categories/{category['id']}").status_code == 200
    assert admin_client.delete(f"/api/admin/categories/{category['id']}").status_code == 404
    assert admin_client.put("/api/admin/categories/999", json={"name": "x"}).status_code == 404


def test_duplicate_category_is_a_bad_request(admin_client):
    admin_client.post("/api/admin/categories", json={"name": "games"})
    response = admin_client.post("/api/admin/categories", json={"name": "games"})
    assert response.status_code == 400
    assert "already exists" in response.json()["detail"]


def test_invalid_slug_rejected(admin_client):
    response = admin_client.post("/api/admin/categories", json={"name": "games", "slug": "Bad Slug!"})
    assert response.status_code == 400


def test_subcategory_in_unknown_category(admin_client):
    response = admin_client.post("/api/admin/subcategories", json={"category_id": 999, "name": "x"})
    assert response.status_code == 404


def test_subcategory_parent_from_other_category(admin_client, api_tree):
    other = admin_client.post("/api/admin/categories", json={"name": "other"}).json()
    response = admin_client.post(
        "/api/admin/subcategories",
        json={"category_id": other["id"], "name": "child", "parent_subcategory_id": api_tree["setup"]["id"]},
    )
    assert response.status_code == 400


def test_subcategory_cycle_rejected(admin_client, api_tree):
    setup_id = api_tree["setup"]["id"]
    response = admin_client.put(
        f"/api/admin/subcategories/{setup_id}",
        json={"parent_subcategory_id": api_tree["advanced"]["id"]},
    )
    assert response.status_code == 400


def test_subcategory_listings(admin_client, api_tree):
    category_id = api_tree["category"]["id"]

    roots = admin_client.get(f"/api/admin/subcategories/{category_id}").json()
    assert [s["slug"] for s in roots] == ["setup"]

    everything = admin_client.get("/api/admin/subcategories/all").json()
    assert {s["slug"] for s in everything} == {"setup", "advanced"}

    flat = admin_client.get(f"/api/admin/subcategories/{category_id}/flat").json()
    assert [(s["slug"], s["level"], s["indented_name"]) for s in flat] == [
        ("setup", 0, "Setup"),
        ("advanced", 1, "  Advanced"),
    ]


def test_move_subcategory_to_root(admin_client, api_tree):
    advanced_id = api_tree["advanced"]["id"]
    response = admin_client.put(f"/api/admin/subcategories/{advanced_id}", json={"parent_subcategory_id": 0})
    assert response.status_code == 200
    assert response.json()["parent_subcategory_id"] is None


def test_admin_structure_includes_hidden(admin_client, api_tree):
    structure = admin_client.get("/api/admin/structure").json()
    setup = structure[0]["subcategories"][0]
    advanced = setup["subcategories"][0]

    assert advanced["slug"] == "advanced"
    assert advanced["is_hidden"] is True
    assert [g["slug"] for g in advanced["guides"]] == ["tuning"]


def test_delete_subcategory_removes_guides(admin_client, api_tree):
    setup_id = api_tree["setup"]["id"]
    assert admin_client.delete(f"/api/admin/subcategories/{setup_id}").status_code == 200

    assert admin_client.get("/api/admin/subcategories/all").json() == []
    assert admin_client.get("/api/admin/docs").json() == []


def test_document_listing(admin_client, api_tree):
    documents = admin_client.get("/api/admin/docs").json()
    by_slug = {d["slug"]: d for d in documents}

    assert set(by_slug) == {"quickstart", "tuning"}
    assert by_slug["quickstart"]["category_name"] == "Servers"
    assert by_slug["quickstart"]["subcategory_name"] == "Setup"
    assert by_slug["quickstart"]["path"] == "servers/setup/quickstart"
    assert "content" not in by_slug["quickstart"]


def test_document_create_derives_slug(admin_client, api_tree):
    setup_id = api_tree["setup"]["id"]
    first = admin_client.post("/api/admin/docs", json={"subcategory_id": setup_id, "title": "Port Forwarding"})
    second = admin_client.post("/api/admin/docs", json={"subcategory_id": setup_id, "title": "Port forwarding"})

    assert first.json()["slug"] == "port-forwarding"
    assert second.json()["slug"] == "port-forwarding-1"


def test_document_duplicate_slug(admin_client, api_tree):
    response = admin_client.post(
        "/api/admin/docs",
        json={"subcategory_id": api_tree["setup"]["id"], "title": "Again", "slug": "quickstart"},
    )
    assert response.status_code == 400


def test_document_update_and_move(admin_client, api_tree):
    guide_id = api_tree["guide"]["id"]
    response = admin_client.put(
        f"/api/admin/docs/{guide_id}",
        json={"title": "Quickstart", "subcategory_id": api_tree["advanced"]["id"]},
    )
    assert response.status_code == 200
    document = response.json()
    assert document["title"] == "Quickstart"
    assert document["path"] == "servers/advanced/quickstart"
    assert document["content"].startswith("# Quickstart")


def test_quick_edit(admin_client, api_tree):
    guide_id = api_tree["guide"]["id"]

    response = admin_client.post(f"/api/admin/docs/quick-edit/{guide_id}", json={"content": "Edited"})
    assert response.json() == {"success": True}

    assert admin_client.get(f"/api/admin/docs/content/{guide_id}").json() == {"content": "Edited"}
    assert admin_client.get(f"/api/admin/docs/{guide_id}").json()["title"] == "Médoc Quickstart"
    assert admin_client.post("/api/admin/docs/quick-edit/999", json={"content": "x"}).status_code == 404


def test_document_delete(admin_client, api_tree):
    guide_id = api_tree["guide"]["id"]
    assert admin_client.delete(f"/api/admin/docs/{guide_id}").status_code == 200
    assert admin_client.get(f"/api/admin/docs/{guide_id}").status_code == 404


def test_users(admin_client):
    users = admin_client.get("/api/admin/users").json()
    assert [u["username"] for u in users] == ["admin"]
    assert "password_hash" not in users[0]

    response = admin_client.post(
        "/api/admin/users",
        json={"username": "editor", "email": "editor@example.com", "password": "pw"},
    )
    assert response.status_code == 200
    editor = response.json()

    duplicate = admin_client.post(
        "/api/admin/users",
        json={"username": "editor", "email": "other@example.com", "password": "pw"},
    )
    assert duplicate.status_code == 400
    assert duplicate.json()["detail"] == "User already exists"

    assert admin_client.delete(f"/api/admin/users/{editor['id']}").status_code == 200
    assert admin_client.delete(f"/api/admin/users/{editor['id']}").status_code == 404


def test_cannot_delete_yourself(admin_client):
    admin = admin_client.get("/api/admin/users").json()[0]
    response = admin_client.delete(f"/api/admin/users/{admin['id']}")
    assert response.status_code == 400
    assert admin_client.get("/api/auth/me").status_code == 200


def test_update_user_renames_session(admin_client):
    me = admin_client.get("/api/auth/me").json()
    response = admin_client.put(f"/api/admin/users/{me['id']}", json={"username": "root"})
    assert response.status_code == 200
    assert admin_client.get("/api/auth/me").json()["username"] == "root"


def test_settings(admin_client):
    assert admin_client.get("/api/admin/settings").json() == {}

    response = admin_client.put("/api/admin/settings", json={"values": {"site_title": "Handbook"}})
    assert response.status_code == 200
    assert response.json() == {"site_title": "Handbook"}

    bad = admin_client.put("/api/admin/settings", json={"values": {"Not Valid": "x"}})
    assert bad.status_code == 400


def test_upload_image(admin_client):
    response = admin_client.post(
        "/api/admin/uploads",
        files={"file": ("logo.png", b"\x89PNG\r\n\x1a\nfake", "image/png")},
    )
    assert response.status_code == 200
    url = response.json()["url"]
    assert url.startswith("/api/uploads/") and url.endswith(".png")

    served = admin_client.get(url)
    assert served.status_code == 200
    assert served.content == b"\x89PNG\r\n\x1a\nfake"


def test_upload_rejects_other_types(admin_client):
    response = admin_client.post(
        "/api/admin/uploads",
        files={"file": ("script.exe", b"MZ", "application/octet-stream")},
    )
    assert response.status_code == 400
