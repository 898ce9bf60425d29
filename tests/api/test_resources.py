"""API resource tests."""

from datetime import timedelta

from falcon.testing import TestClient

from accessguard.domain.entities import Permission, PermissionScope

ADMIN = {"X-Test-User": "admin1"}
VIEWER = {"X-Test-User": "u1"}


def _start(client: TestClient, **body):
    payload = {"impersonated_user_id": "u1", "tenant_id": "t1", "reason": "ticket 77"}
    payload.update(body)
    return client.simulate_post("/v1/impersonation", json=payload, headers=ADMIN)


class TestHealth:
    def test_health_ok(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/health")
        assert r.status_code == 200
        assert r.json["status"] == "ok"


class TestEvaluate:
    def test_requires_auth(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/permissions/evaluate", json={"checks": []})
        assert r.status_code == 401

    def test_evaluates_checks_for_caller(self, client: TestClient) -> None:
        r = client.simulate_post(
            "/v1/permissions/evaluate",
            json={
                "checks": [
                    {"element_path": "contacts:list", "action": "visible"},
                    {"element_path": "contacts:list", "action": "editable"},
                ]
            },
            headers=VIEWER,
        )
        assert r.status_code == 200
        assert r.json["actor_id"] == "u1"
        assert r.json["impersonating"] is False
        assert [c["allowed"] for c in r.json["results"]] == [True, False]

    def test_rejects_unknown_action(self, client: TestClient) -> None:
        r = client.simulate_post(
            "/v1/permissions/evaluate",
            json={"checks": [{"element_path": "contacts:list", "action": "launch"}]},
            headers=VIEWER,
        )
        assert r.status_code == 400

    def test_rejects_empty_checks(self, client: TestClient) -> None:
        r = client.simulate_post("/v1/permissions/evaluate", json={"checks": []}, headers=VIEWER)
        assert r.status_code == 400

    def test_evaluates_as_impersonated_user(self, client: TestClient) -> None:
        assert _start(client).status_code == 201
        r = client.simulate_post(
            "/v1/permissions/evaluate",
            json={"checks": [{"element_path": "admin:impersonation", "action": "accessible"}]},
            headers=ADMIN,
        )
        assert r.status_code == 200
        assert r.json["actor_id"] == "u1"
        assert r.json["impersonating"] is True
        assert r.json["results"][0]["allowed"] is False

    def test_record_owner_comes_from_ownership_store(
        self, client: TestClient, role_store, ownership_store
    ) -> None:
        scope = PermissionScope(conditions=("record_owner",))
        role_store.grant("u2", "rep", Permission(name="crm:*:editable", scope=scope))
        ownership_store.owners.update({"c-foreign": "u9", "c-own": "u2"})
        checks = [{"element_path": "contacts:detail", "action": "editable"}]

        def allowed(context: dict) -> bool:
            r = client.simulate_post(
                "/v1/permissions/evaluate",
                json={"checks": checks, "context": context},
                headers={"X-Test-User": "u2"},
            )
            assert r.status_code == 200
            return r.json["results"][0]["allowed"]

        assert allowed({"record_id": "c-foreign", "record_owner_id": "u2"}) is False
        assert allowed({"record_id": "c-own"}) is True

    def test_rejects_non_string_record_id(self, client: TestClient) -> None:
        r = client.simulate_post(
            "/v1/permissions/evaluate",
            json={
                "checks": [{"element_path": "contacts:list"}],
                "context": {"record_id": 42},
            },
            headers=VIEWER,
        )
        assert r.status_code == 400


class TestPermissionCache:
    def test_invalidate_as_admin(self, client: TestClient) -> None:
        r = client.simulate_delete("/v1/permissions/cache/u1", headers=ADMIN)
        assert r.status_code == 200
        assert r.json["actor_id"] == "u1"

    def test_invalidate_forbidden(self, client: TestClient) -> None:
        r = client.simulate_delete("/v1/permissions/cache/admin1", headers=VIEWER)
        assert r.status_code == 403


class TestImpersonation:
    def test_status_without_session(self, client: TestClient) -> None:
        r = client.simulate_get("/v1/impersonation", headers=ADMIN)
        assert r.status_code == 200
        assert r.json == {"status": "no_session", "remaining_ms": -1, "session": None}

    def test_start_and_status(self, client: TestClient) -> None:
        r = _start(client)
        assert r.status_code == 201
        assert r.json["session"]["impersonated_user_id"] == "u1"
        assert r.json["remaining_ms"] == 8 * 60 * 60 * 1000

        status = client.simulate_get("/v1/impersonation", headers=ADMIN)
        assert status.json["status"] == "active"
        assert status.json["session"]["id"] == r.json["session"]["id"]

    def test_start_forbidden_for_non_admin(self, client: TestClient) -> None:
        r = client.simulate_post(
            "/v1/impersonation",
            json={"impersonated_user_id": "u2", "tenant_id": "t1"},
            headers=VIEWER,
        )
        assert r.status_code == 403

    def test_start_missing_tenant(self, client: TestClient) -> None:
        r = _start(client, tenant_id=None)
        assert r.status_code == 400

    def test_start_rate_limited(self, client: TestClient, limiter) -> None:
        for _ in range(10):
            assert _start(client).status_code == 201
        r = _start(client)
        assert r.status_code == 429

    def test_expired_status(self, client: TestClient, clock) -> None:
        _start(client)
        clock.advance(timedelta(hours=8))
        r = client.simulate_get("/v1/impersonation", headers=ADMIN)
        assert r.json["status"] == "expired"
        assert r.json["remaining_ms"] == -1
        assert r.json["session"] is None

    def test_end_writes_audit(self, client: TestClient, audit_sink) -> None:
        _start(client)
        client.simulate_post(
            "/v1/impersonation/actions",
            json={"action_type": "page-view", "resource": "dashboard"},
            headers=ADMIN,
        )
        r = client.simulate_delete("/v1/impersonation", headers=ADMIN)
        assert r.status_code == 200
        assert r.json["action_count"] == 1
        assert len(audit_sink.entries) == 1

    def test_end_without_session(self, client: TestClient) -> None:
        r = client.simulate_delete("/v1/impersonation", headers=ADMIN)
        assert r.status_code == 404


class TestImpersonationActions:
    def test_track_without_session(self, client: TestClient) -> None:
        r = client.simulate_post(
            "/v1/impersonation/actions",
            json={"action_type": "page-view", "resource": "dashboard"},
            headers=ADMIN,
        )
        assert r.status_code == 404

    def test_track_and_list(self, client: TestClient) -> None:
        _start(client)
        r = client.simulate_post(
            "/v1/impersonation/actions",
            json={
                "action_type": "api-call",
                "resource": "customers",
                "resource_id": "c1",
                "method": "get",
                "duration": 150,
            },
            headers=ADMIN,
        )
        assert r.status_code == 201
        assert r.json["method"] == "GET"
        assert r.json["status"] == 200

        listing = client.simulate_get("/v1/impersonation/actions", headers=ADMIN)
        assert listing.status_code == 200
        assert listing.json["count"] == 1
        assert listing.json["summary"]["api-call"] == 1
        assert listing.json["actions"][0]["resource_id"] == "c1"

    def test_track_missing_field(self, client: TestClient) -> None:
        _start(client)
        r = client.simulate_post(
            "/v1/impersonation/actions", json={"resource": "dashboard"}, headers=ADMIN
        )
        assert r.status_code == 400

    def test_track_invalid_crud(self, client: TestClient) -> None:
        _start(client)
        r = client.simulate_post(
            "/v1/impersonation/actions",
            json={"action_type": "update", "resource": "customers"},
            headers=ADMIN,
        )
        assert r.status_code == 400
