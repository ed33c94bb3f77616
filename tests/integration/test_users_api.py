"""Integration tests for the /users HTTP routes."""

import pytest

pytestmark = pytest.mark.integration


def _create(client, **overrides):
    body = {
        "name": "Carol",
        "address": "3 Elm St",
        "email": "carol@example.com",
        "telephone": "555-0003",
    }
    body.update(overrides)
    response = client.post("/users", json=body)
    assert response.status_code == 201, response.text
    return response.json()


def _create_many(client, count):
    return [
        _create(
            client,
            name=f"User {i}",
            address=f"{i} Main St",
            email=f"user{i}@example.com",
            telephone=f"555-1{i:03d}",
        )
        for i in range(count)
    ]


class TestCreateUser:
    def test_create_returns_record_and_location(self, client, recorder):
        response = client.post(
            "/users",
            json={
                "name": "Carol",
                "address": "3 Elm St",
                "email": "carol@example.com",
                "telephone": "555-0003",
            },
        )

        assert response.status_code == 201
        body = response.json()
        assert body["id"] is not None
        assert "/users/" in response.headers["Location"]
        assert response.headers["Location"].endswith(f"/users/{body['id']}")
        assert recorder.events() == ["ADD"]

        fetched = client.get(f"/users/{body['id']}")
        assert fetched.status_code == 200
        assert fetched.json() == body
        assert fetched.json()["email"] == "carol@example.com"

    def test_legacy_add_route(self, client, recorder):
        response = client.post(
            "/users/add",
            json={
                "id": 999,
                "name": "Dave",
                "address": "4 Oak St",
                "email": "dave@example.com",
                "telephone": "555-0004",
            },
        )

        assert response.status_code == 201
        assert response.json()["id"] != 999
        assert recorder.events() == ["ADD"]

    def test_blank_name_is_rejected(self, client, recorder):
        response = client.post(
            "/users",
            json={"name": "", "address": "x", "email": "e@x.io", "telephone": "1"},
        )

        assert response.status_code == 400
        body = response.json()
        assert body["status"] == 400
        assert body["error"] == "Bad Request"
        assert body["message"] == "Validation failed"
        assert body["path"] == "/users"
        assert any(error.startswith("name:") for error in body["errors"])
        assert recorder.published == []
        assert client.get("/users").json() == []

    def test_every_field_error_is_reported(self, client):
        response = client.post("/users", json={"email": "not-an-email"})

        assert response.status_code == 400
        assert response.json()["errors"] == [
            "name: Name is required",
            "address: Address is required",
            "telephone: Telephone is required",
            "email: Email should be valid: prefix@domain.com",
        ]

    def test_malformed_body_is_rejected(self, client):
        response = client.post(
            "/users", content="{not json", headers={"Content-Type": "application/json"}
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"

    def test_wrong_field_type_is_rejected(self, client):
        response = client.post("/users", json={"name": ["a", "list"]})

        assert response.status_code == 400
        assert any(error.startswith("name:") for error in response.json()["errors"])


class TestReadUsers:
    def test_list_all(self, client):
        created = _create_many(client, 3)

        assert client.get("/users").json() == created

    def test_get_missing_user(self, client):
        response = client.get("/users/424242")

        assert response.status_code == 404
        assert response.content == b""

    def test_non_numeric_id(self, client):
        response = client.get("/users/abc")

        assert response.status_code == 400
        assert response.json()["errors"][0].startswith("user_id:")

    def test_paginated_query_params(self, client):
        created = _create_many(client, 5)

        response = client.get("/users/paginated", params={"page": 1, "size": 2})

        assert response.status_code == 200
        assert response.json() == {
            "content": created[2:4],
            "page": 1,
            "size": 2,
            "totalElements": 5,
            "totalPages": 3,
            "hasNext": True,
            "hasPrevious": True,
        }

    def test_paginated_defaults(self, client):
        _create_many(client, 12)

        body = client.get("/users/paginated").json()

        assert body["page"] == 0
        assert body["size"] == 10
        assert len(body["content"]) == 10
        assert body["hasNext"] is True

    def test_page_path_params(self, client):
        created = _create_many(client, 3)

        body = client.get("/users/1/2").json()

        assert body["content"] == created[2:]
        assert body["hasNext"] is False
        assert body["hasPrevious"] is True

    def test_page_past_the_end(self, client):
        _create_many(client, 3)

        body = client.get("/users/4/10").json()

        assert body["content"] == []
        assert body["totalElements"] == 3

    def test_walking_pages_reconstructs_the_list(self, client):
        created = _create_many(client, 7)

        walked = []
        page = 0
        while True:
            body = client.get(f"/users/{page}/3").json()
            walked.extend(body["content"])
            if not body["hasNext"]:
                break
            page += 1

        assert walked == created

    @pytest.mark.parametrize(
        "url",
        [
            "/users/-1/10",
            "/users/0/0",
            "/users/paginated?page=-1",
            "/users/paginated?size=0",
            "/users/0/0/search/carol",
        ],
    )
    def test_invalid_page_requests(self, client, url):
        response = client.get(url)

        assert response.status_code == 400
        assert response.json()["message"] == "Validation failed"


class TestSearchUsers:
    def test_search_by_unique_email_fragment(self, client):
        _create_many(client, 4)
        carol = _create(client)

        body = client.get("/users/0/10/search/carol@EXAMPLE").json()

        assert body["content"] == [carol]
        assert body["totalElements"] == 1

    def test_search_spans_fields(self, client):
        _create_many(client, 2)
        carol = _create(client)

        assert client.get("/users/0/10/search/elm st").json()["content"] == [carol]
        assert client.get("/users/0/10/search/0003").json()["content"] == [carol]

    def test_blank_search_matches_unfiltered_page(self, client):
        _create_many(client, 4)

        assert client.get("/users/0/3/search/%20").json() == client.get("/users/0/3").json()

    def test_search_is_paged(self, client):
        created = _create_many(client, 5)

        body = client.get("/users/1/2/search/user").json()

        assert body["content"] == created[2:4]
        assert body["totalElements"] == 5

    def test_reads_never_publish(self, client, recorder):
        _create_many(client, 2)
        recorder.published.clear()

        client.get("/users")
        client.get("/users/0/10")
        client.get("/users/0/10/search/user")
        client.get("/users/1")

        assert recorder.published == []


class TestUpdateUser:
    @pytest.mark.parametrize("route", ["/users/{id}", "/users/edit/{id}"])
    def test_update(self, client, recorder, route):
        carol = _create(client)
        recorder.published.clear()

        response = client.put(
            route.format(id=carol["id"]),
            json={
                "name": "Carol B",
                "address": "9 Pine St",
                "email": "carol.b@example.com",
                "telephone": "555-9999",
            },
        )

        assert response.status_code == 200
        assert response.json() == {
            "id": carol["id"],
            "name": "Carol B",
            "address": "9 Pine St",
            "email": "carol.b@example.com",
            "telephone": "555-9999",
        }
        assert client.get(f"/users/{carol['id']}").json() == response.json()
        assert recorder.events() == ["EDIT"]

    def test_update_ignores_body_id(self, client):
        carol = _create(client)

        response = client.put(
            f"/users/{carol['id']}", json={**carol, "id": 777, "name": "Renamed"}
        )

        assert response.json()["id"] == carol["id"]

    def test_update_missing_user(self, client, recorder):
        carol = _create(client)
        recorder.published.clear()

        response = client.put("/users/5000", json={**carol, "name": "Ghost"})

        assert response.status_code == 404
        assert response.content == b""
        assert recorder.published == []
        assert client.get("/users").json() == [carol]

    def test_update_validation(self, client, recorder):
        carol = _create(client)
        recorder.published.clear()

        response = client.put(f"/users/{carol['id']}", json={**carol, "telephone": " "})

        assert response.status_code == 400
        assert response.json()["errors"] == ["telephone: Telephone is required"]
        assert recorder.published == []

    def test_upsert_with_id_updates(self, client, recorder):
        carol = _create(client)
        recorder.published.clear()

        response = client.post("/users", json={**carol, "name": "Carol Upserted"})

        assert response.status_code == 200
        assert response.json()["name"] == "Carol Upserted"
        assert "Location" not in response.headers
        assert recorder.events() == ["EDIT"]
        assert len(client.get("/users").json()) == 1

    def test_upsert_with_unknown_id(self, client, recorder):
        carol = _create(client)
        recorder.published.clear()

        response = client.post("/users", json={**carol, "id": 31337})

        assert response.status_code == 404
        assert recorder.published == []


class TestDeleteUser:
    def test_delete(self, client, recorder):
        carol = _create(client)
        recorder.published.clear()

        response = client.delete(f"/users/{carol['id']}")

        assert response.status_code == 204
        assert response.content == b""
        assert recorder.events() == ["DELETE"]
        assert client.get(f"/users/{carol['id']}").status_code == 404

    def test_delete_missing_user(self, client, recorder):
        response = client.delete("/users/5000")

        assert response.status_code == 404
        assert response.content == b""
        assert recorder.published == []

    def test_ids_are_not_reused_after_delete(self, client):
        first = _create(client)
        client.delete(f"/users/{first['id']}")

        second = _create(client)

        assert second["id"] != first["id"]


class TestRelationalBackend:
    def test_duplicate_email_conflict(self, sql_client):
        _create(sql_client)

        response = sql_client.post(
            "/users",
            json={
                "name": "Other Carol",
                "address": "1 Elm St",
                "email": "carol@example.com",
                "telephone": "555-0000",
            },
        )

        assert response.status_code == 409
        body = response.json()
        assert body["error"] == "Conflict"
        assert body["errors"][0].startswith("email:")

    def test_crud_round_trip(self, sql_client):
        carol = _create(sql_client)

        updated = sql_client.put(f"/users/{carol['id']}", json={**carol, "name": "C"})
        assert updated.json()["name"] == "C"

        assert sql_client.get("/users/0/10/search/c").json()["totalElements"] == 1
        assert sql_client.delete(f"/users/{carol['id']}").status_code == 204
        assert sql_client.get("/users").json() == []

    @pytest.mark.parametrize(
        "url", [f"/users/{2**62}/10", f"/users/{2**62}/10/search/carol"]
    )
    def test_huge_page_index_returns_empty_page(self, sql_client, url):
        _create(sql_client)

        response = sql_client.get(url)

        assert response.status_code == 200
        body = response.json()
        assert body["content"] == []
        assert body["totalElements"] == 1
        assert body["hasNext"] is False

    def test_search_folds_non_ascii_case(self, sql_client):
        carol = _create(sql_client, address="Storgatan 1, 70210 Örebro")

        body = sql_client.get("/users/0/10/search/örebro").json()

        assert body["content"] == [carol]


class TestResponseHeaders:
    def test_request_id_is_echoed(self, client):
        response = client.get("/users", headers={"X-Request-ID": "abc-123"})

        assert response.headers["X-Request-ID"] == "abc-123"

    def test_request_id_is_generated(self, client):
        assert client.get("/users/1").headers["X-Request-ID"]

    def test_security_headers(self, client):
        response = client.get("/users")

        assert response.headers["X-Content-Type-Options"] == "nosniff"
        assert response.headers["X-Frame-Options"] == "DENY"

    def test_cors_exposes_location(self, client):
        response = client.post(
            "/users",
            json={
                "name": "Carol",
                "address": "3 Elm St",
                "email": "carol@example.com",
                "telephone": "555-0003",
            },
            headers={"Origin": "http://localhost:5173"},
        )

        assert response.headers["access-control-allow-origin"] == "http://localhost:5173"
        assert "Location" in response.headers["access-control-expose-headers"]

    def test_unexpected_error_envelope(self, client):
        def broken():
            raise RuntimeError("storage exploded")

        client.app.state.app_dependencies.user_store.list_all = broken

        response = client.get("/users")

        assert response.status_code == 500
        body = response.json()
        assert body["status"] == 500
        assert body["error"] == "Internal Server Error"
        assert body["path"] == "/users"
        assert "timestamp" in body
        assert "storage exploded" not in response.text
        assert response.headers["X-Request-ID"]
