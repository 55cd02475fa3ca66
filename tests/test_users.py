"""Tests for the user API endpoints."""

import time

import pytest
from fastapi.testclient import TestClient


def _fields(response) -> list[str]:
    return [violation["field"] for violation in response.json()]


@pytest.mark.unit
def test_list_users_empty(client: TestClient) -> None:
    """Test listing users on a fresh store returns an empty array."""
    response = client.get("/users")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.unit
def test_list_users_with_trailing_slash(client: TestClient, create_user) -> None:
    """Test /users/ is served the same as /users."""
    create_user()

    assert client.get("/users/").json() == client.get("/users").json()


@pytest.mark.unit
def test_list_users_returns_multiple_users_in_insertion_order(client: TestClient, create_user) -> None:
    """Test the list keeps insertion order."""
    create_user(name="User One", email="user1@example.com")
    create_user(name="User Two", email="user2@example.com")

    users = client.get("/users").json()
    assert [u["name"] for u in users] == ["User One", "User Two"]
    assert [u["id"] for u in users] == [1, 2]


@pytest.mark.unit
def test_repeated_list_is_byte_identical(client: TestClient, create_user) -> None:
    """Test repeated list requests without mutations return identical bodies."""
    create_user()
    create_user(name="Other", email="other@example.com")

    first = client.get("/users")
    second = client.get("/users")
    assert first.content == second.content


@pytest.mark.unit
def test_create_user(client: TestClient) -> None:
    """Test creating a user returns 201, the user and its location."""
    response = client.post("/users", json={"name": "Test User", "email": "test@example.com"})

    assert response.status_code == 201
    assert response.json() == {"id": 1, "name": "Test User", "email": "test@example.com"}
    assert response.headers["location"] == "/users/1"


@pytest.mark.unit
@pytest.mark.parametrize("client_id", [42, "x", None, {"nested": 1}])
def test_create_user_ignores_client_id(client: TestClient, client_id) -> None:
    """Test any id in the body is ignored."""
    response = client.post("/users", json={"id": client_id, "name": "Test User", "email": "test@example.com"})

    assert response.status_code == 201
    assert response.json()["id"] == 1


@pytest.mark.unit
@pytest.mark.parametrize("email", ["Jane@EXAMPLE.COM", "Jane Doe <jane@example.com>"])
def test_email_is_stored_as_submitted(client: TestClient, email: str) -> None:
    """Test a valid email round-trips unchanged through create, get and update."""
    created = client.post("/users", json={"name": "Jane", "email": email})
    assert created.status_code == 201
    assert created.json()["email"] == email
    assert client.get("/users/1").json()["email"] == email

    client.put("/users/1", json={"name": "Jane", "email": email.replace("Jane", "JANE", 1)})
    assert client.get("/users/1").json()["email"] == email.replace("Jane", "JANE", 1)


@pytest.mark.unit
def test_create_user_rejects_invalid_fields(client: TestClient) -> None:
    """Test an empty name and bad email are both reported and nothing is stored."""
    response = client.post("/users", json={"name": "", "email": "invalid-email"})

    assert response.status_code == 400
    assert _fields(response) == ["name", "email"]
    assert all(v["error"] for v in response.json())
    assert client.get("/users").json() == []


@pytest.mark.unit
@pytest.mark.parametrize(
    "payload, field",
    [
        ({"name": "", "email": "ok@example.com"}, "name"),
        ({"name": "   ", "email": "ok@example.com"}, "name"),
        ({"name": "x" * 101, "email": "ok@example.com"}, "name"),
        ({"email": "ok@example.com"}, "name"),
        ({"name": "Valid", "email": "invalid-email"}, "email"),
        ({"name": "Valid"}, "email"),
    ],
)
def test_create_user_violation_names_field(client: TestClient, payload: dict, field: str) -> None:
    """Test each rule violation names the offending field."""
    response = client.post("/users", json=payload)

    assert response.status_code == 400
    assert _fields(response) == [field]


@pytest.mark.unit
def test_create_user_accepts_boundary_name_lengths(client: TestClient) -> None:
    """Test names of 1 and 100 characters are accepted."""
    assert client.post("/users", json={"name": "x", "email": "a@example.com"}).status_code == 201
    assert client.post("/users", json={"name": "x" * 100, "email": "b@example.com"}).status_code == 201


@pytest.mark.unit
def test_create_user_malformed_body(client: TestClient) -> None:
    """Test malformed JSON is reported as a body violation."""
    response = client.post("/users", content=b"{not json", headers={"content-type": "application/json"})

    assert response.status_code == 400
    assert _fields(response) == ["body"]


@pytest.mark.unit
def test_create_user_wrong_field_type(client: TestClient) -> None:
    """Test a non-string name is reported against the name field."""
    response = client.post("/users", json={"name": ["a"], "email": "a@example.com"})

    assert response.status_code == 400
    assert _fields(response) == ["name"]


@pytest.mark.unit
def test_get_user(client: TestClient, create_user) -> None:
    """Test fetching a created user returns the same record."""
    created = create_user()

    response = client.get(f"/users/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


@pytest.mark.unit
def test_get_user_not_found(client: TestClient) -> None:
    """Test an unknown id returns 404 with an empty body."""
    response = client.get("/users/999")

    assert response.status_code == 404
    assert response.content == b""


@pytest.mark.unit
def test_non_integer_id_is_rejected(client: TestClient) -> None:
    """Test a non-integer path id is reported as a violation."""
    response = client.get("/users/abc")

    assert response.status_code == 400
    assert _fields(response) == ["user_id"]


@pytest.mark.unit
def test_update_user(client: TestClient, create_user) -> None:
    """Test updating a user returns 204 and the new values are visible."""
    created = create_user()

    response = client.put(
        f"/users/{created['id']}",
        json={"name": "Updated User", "email": "updated@example.com"},
    )
    assert response.status_code == 204
    assert response.content == b""

    fetched = client.get(f"/users/{created['id']}").json()
    assert fetched == {"id": created["id"], "name": "Updated User", "email": "updated@example.com"}


@pytest.mark.unit
def test_update_user_keeps_position(client: TestClient, create_user) -> None:
    """Test an updated user stays in its original list position."""
    create_user(name="First", email="first@example.com")
    create_user(name="Second", email="second@example.com")

    client.put("/users/1", json={"name": "First Renamed", "email": "first@example.com"})

    assert [u["name"] for u in client.get("/users").json()] == ["First Renamed", "Second"]


@pytest.mark.unit
def test_update_user_invalid_payload(client: TestClient, create_user) -> None:
    """Test an invalid update returns 400 and leaves the user unchanged."""
    created = create_user()

    response = client.put(f"/users/{created['id']}", json={"name": "", "email": "invalid-email"})
    assert response.status_code == 400
    assert _fields(response) == ["name", "email"]
    assert client.get(f"/users/{created['id']}").json() == created


@pytest.mark.unit
def test_update_unknown_user_is_not_found_before_validation(client: TestClient) -> None:
    """Test updating an unknown id returns 404 whatever the payload."""
    assert client.put("/users/999", json={"name": "Valid", "email": "valid@example.com"}).status_code == 404
    assert client.put("/users/999", json={"name": "", "email": "invalid-email"}).status_code == 404


@pytest.mark.unit
def test_delete_user(client: TestClient, create_user) -> None:
    """Test deleting a user returns 204 and the user is gone."""
    created = create_user()

    response = client.delete(f"/users/{created['id']}")
    assert response.status_code == 204
    assert response.content == b""
    assert client.get(f"/users/{created['id']}").status_code == 404


@pytest.mark.unit
def test_delete_unknown_user(client: TestClient) -> None:
    """Test deleting an unknown id returns 404."""
    assert client.delete("/users/999").status_code == 404


@pytest.mark.unit
def test_ids_are_not_reused_after_delete(client: TestClient, create_user) -> None:
    """Test ids keep increasing after a delete."""
    first = create_user(name="A", email="a@example.com")
    client.delete(f"/users/{first['id']}")

    second = create_user(name="B", email="b@example.com")
    third = create_user(name="C", email="c@example.com")

    assert (first["id"], second["id"], third["id"]) == (1, 2, 3)


@pytest.mark.unit
@pytest.mark.parametrize("mutation", ["create", "update", "delete"])
def test_list_reflects_mutation_after_cached_read(client: TestClient, create_user, mutation: str) -> None:
    """Test the list shows a mutation even when it was cached just before."""
    create_user()
    # Populate the list cache
    assert len(client.get("/users").json()) == 1

    if mutation == "create":
        create_user(name="Another", email="another@example.com")
        expected = ["Test User", "Another"]
    elif mutation == "update":
        client.put("/users/1", json={"name": "Renamed", "email": "renamed@example.com"})
        expected = ["Renamed"]
    else:
        client.delete("/users/1")
        expected = []

    assert [u["name"] for u in client.get("/users").json()] == expected


@pytest.mark.unit
def test_end_to_end_scenario(client: TestClient) -> None:
    """Test create, get, update, get, delete, get in sequence."""
    created = client.post("/users", json={"name": "Test User", "email": "test@example.com"})
    assert created.status_code == 201
    assert created.json() == {"id": 1, "name": "Test User", "email": "test@example.com"}

    fetched = client.get("/users/1")
    assert fetched.status_code == 200
    assert fetched.json() == created.json()

    updated = client.put("/users/1", json={"name": "Updated User", "email": "updated@example.com"})
    assert updated.status_code == 204

    fetched = client.get("/users/1")
    assert fetched.json() == {"id": 1, "name": "Updated User", "email": "updated@example.com"}

    assert client.delete("/users/1").status_code == 204
    assert client.get("/users/1").status_code == 404


@pytest.mark.unit
def test_bearer_token_does_not_affect_routing(client: TestClient, create_user) -> None:
    """Test an invalid bearer token does not change the response."""
    create_user()

    response = client.get("/users", headers={"Authorization": "Bearer not-a-real-token"})
    assert response.status_code == 200
    assert len(response.json()) == 1


@pytest.mark.slow
def test_list_users_performance(client: TestClient) -> None:
    """Test listing 1000 users responds within a second."""
    users_to_create = 1000
    for i in range(users_to_create):
        client.post("/users", json={"name": f"User {i}", "email": f"user{i}@example.com"})

    started = time.perf_counter()
    response = client.get("/users")
    elapsed = time.perf_counter() - started

    assert response.status_code == 200
    assert len(response.json()) == users_to_create
    assert elapsed < 1.0, "GET /users took too long to respond"
