"""HTTP surface: status codes, error bodies and the onboarding round trip."""

import pytest
from httpx import AsyncClient

from src.teamgate.core.exceptions import DENIED_MESSAGE
from src.teamgate.core.health import reset_health_cache
from tests.helpers import auth_headers, create_master_admin, new_account

pytestmark = pytest.mark.integration


async def onboard(client: AsyncClient, name: str = "Acme", is_discoverable: bool = True):
    """Create a tenant over HTTP as a fresh account. Returns (account, response body)."""
    account = new_account()
    response = await client.post(
        "/api/v1/onboarding/tenants",
        json={"name": name, "is_discoverable": is_discoverable},
        headers=auth_headers(account),
    )
    assert response.status_code == 201, response.text
    return account, response.json()


async def role_id(client: AsyncClient, admin, name: str) -> str:
    response = await client.get("/api/v1/roles", headers=auth_headers(admin))
    assert response.status_code == 200, response.text
    return next(r["id"] for r in response.json() if r["name"] == name)


async def request_join(client: AsyncClient, tenant_id: str):
    applicant = new_account()
    response = await client.post(
        "/api/v1/onboarding/join-requests",
        json={"tenant_id": tenant_id, "message": "Let me in"},
        headers=auth_headers(applicant),
    )
    assert response.status_code == 201, response.text
    return applicant, response.json()


class TestErrorBodies:
    async def test_missing_credential(self, client):
        response = await client.get("/api/v1/me")

        assert response.status_code == 401
        body = response.json()
        assert body["code"] == "unauthenticated"
        assert body["next"] == "sign_in"
        assert body["request_id"] == response.headers["x-request-id"]

    async def test_malformed_credential(self, client):
        response = await client.get("/api/v1/me", headers={"Authorization": "Bearer nope"})

        assert response.status_code == 401

    async def test_account_without_user_record(self, client):
        response = await client.get("/api/v1/me", headers=auth_headers(new_account()))

        assert response.status_code == 403
        body = response.json()
        assert body["code"] == "incomplete_provisioning"
        assert body["next"] == "onboarding"

    async def test_denial_hides_missing_permission(self, client):
        admin, created = await onboard(client)
        applicant, membership = await request_join(client, created["tenant"]["id"])
        recruiter = await role_id(client, admin, "Recruiter")
        await client.post(
            f"/api/v1/memberships/{membership['id']}/approve",
            json={"role_id": recruiter},
            headers=auth_headers(admin),
        )

        response = await client.get("/api/v1/roles", headers=auth_headers(applicant))

        assert response.status_code == 403
        body = response.json()
        assert body["detail"] == DENIED_MESSAGE
        assert "roles.read" not in response.text

    async def test_malformed_tenant_header(self, client):
        admin, _ = await onboard(client)

        response = await client.get(
            "/api/v1/me", headers={**auth_headers(admin), "X-Tenant-ID": "acme"}
        )

        assert response.status_code == 400
        assert response.json()["code"] == "invalid_request"

    async def test_foreign_tenant_header(self, client):
        admin, _ = await onboard(client, "Mine")
        _, other = await onboard(client, "Theirs")

        response = await client.get(
            "/api/v1/roles", headers=auth_headers(admin, other["tenant"]["id"])
        )

        assert response.status_code == 403
        assert response.json()["detail"] == DENIED_MESSAGE


class TestOnboardingRoundTrip:
    async def test_creator_is_tenant_admin(self, client):
        admin, created = await onboard(client)

        assert created["membership"]["status"] == "approved"

        response = await client.get("/api/v1/me", headers=auth_headers(admin))
        assert response.status_code == 200
        me = response.json()
        assert me["tenant_id"] == created["tenant"]["id"]
        assert me["is_tenant_admin"] is True
        assert me["membership_approved"] is True
        assert "memberships.approve" in me["permissions"]

    async def test_applicant_has_no_tenant_yet(self, client):
        _, created = await onboard(client)
        applicant, membership = await request_join(client, created["tenant"]["id"])

        assert membership["status"] == "pending"

        response = await client.get("/api/v1/me", headers=auth_headers(applicant))
        assert response.status_code == 403
        assert response.json()["next"] == "tenant_selection"

        mine = await client.get("/api/v1/memberships", headers=auth_headers(applicant))
        assert mine.json()["total"] == 1
        assert [m["id"] for m in mine.json()["pending"]] == [membership["id"]]

    async def test_discovery_lists_open_tenants(self, client):
        await onboard(client, "Open", True)
        await onboard(client, "Closed", False)

        response = await client.get(
            "/api/v1/tenants/discoverable", headers=auth_headers(new_account())
        )

        assert response.status_code == 200
        assert [(t["name"], t["member_count"]) for t in response.json()] == [("Open", 1)]

    async def test_approve_then_approve_again(self, client):
        admin, created = await onboard(client)
        applicant, membership = await request_join(client, created["tenant"]["id"])

        pending = await client.get("/api/v1/memberships/pending", headers=auth_headers(admin))
        assert [m["id"] for m in pending.json()["items"]] == [membership["id"]]

        recruiter = await role_id(client, admin, "Recruiter")
        url = f"/api/v1/memberships/{membership['id']}/approve"
        first = await client.post(url, json={"role_id": recruiter}, headers=auth_headers(admin))
        second = await client.post(url, json={"role_id": recruiter}, headers=auth_headers(admin))

        assert first.status_code == 200
        assert first.json()["status"] == "approved"
        assert second.status_code == 409
        assert second.json()["code"] == "conflict"

        me = (await client.get("/api/v1/me", headers=auth_headers(applicant))).json()
        assert me["role_id"] == recruiter
        assert "candidate.create" in me["permissions"]

    async def test_reject_needs_reason(self, client):
        admin, created = await onboard(client)
        _, membership = await request_join(client, created["tenant"]["id"])

        response = await client.post(
            f"/api/v1/memberships/{membership['id']}/reject",
            json={"reason": ""},
            headers=auth_headers(admin),
        )

        assert response.status_code == 422

    async def test_reject(self, client):
        admin, created = await onboard(client)
        _, membership = await request_join(client, created["tenant"]["id"])

        response = await client.post(
            f"/api/v1/memberships/{membership['id']}/reject",
            json={"reason": "Not hiring"},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["status"] == "rejected"
        assert response.json()["rejection_reason"] == "Not hiring"


class TestPermissions:
    async def test_check_reports_decision(self, client):
        admin, _ = await onboard(client)

        allowed = await client.get(
            "/api/v1/permissions/check", params={"key": "job.read"}, headers=auth_headers(admin)
        )
        unknown = await client.get(
            "/api/v1/permissions/check",
            params={"key": "spaceship.fly"},
            headers=auth_headers(admin),
        )

        assert allowed.json() == {"key": "job.read", "allowed": True}
        assert unknown.status_code == 200
        assert unknown.json()["allowed"] is False

    async def test_catalog_by_module(self, client):
        admin, _ = await onboard(client)

        response = await client.get("/api/v1/permissions", headers=auth_headers(admin))

        assert response.status_code == 200
        body = response.json()
        assert "Candidates" in body["modules"]
        assert "memberships.approve" in body["tenant_admin_keys"]


class TestRolesAndMembers:
    async def test_create_role_and_assign(self, client):
        admin, created = await onboard(client)
        applicant, membership = await request_join(client, created["tenant"]["id"])
        recruiter = await role_id(client, admin, "Recruiter")
        await client.post(
            f"/api/v1/memberships/{membership['id']}/approve",
            json={"role_id": recruiter},
            headers=auth_headers(admin),
        )

        created_role = await client.post(
            "/api/v1/roles",
            json={"name": "Sourcer", "permissions": ["candidate.read"]},
            headers=auth_headers(admin),
        )
        assert created_role.status_code == 201, created_role.text

        response = await client.put(
            f"/api/v1/members/{applicant.id}/role",
            json={"role_id": created_role.json()["id"]},
            headers=auth_headers(admin),
        )
        assert response.status_code == 200
        assert response.json()["role_id"] == created_role.json()["id"]

        members = await client.get("/api/v1/members", headers=auth_headers(admin))
        assert {m["id"] for m in members.json()} == {str(admin.id), str(applicant.id)}

    async def test_get_and_rename_role(self, client):
        admin, _ = await onboard(client)
        recruiter = await role_id(client, admin, "Recruiter")

        fetched = await client.get(f"/api/v1/roles/{recruiter}", headers=auth_headers(admin))
        renamed = await client.patch(
            f"/api/v1/roles/{recruiter}",
            json={"name": "Talent Partner"},
            headers=auth_headers(admin),
        )

        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Recruiter"
        assert renamed.status_code == 200
        assert renamed.json()["name"] == "Talent Partner"
        assert renamed.json()["permissions"] == fetched.json()["permissions"]

    async def test_rename_to_taken_name(self, client):
        admin, _ = await onboard(client)
        recruiter = await role_id(client, admin, "Recruiter")

        response = await client.patch(
            f"/api/v1/roles/{recruiter}", json={"name": "Finance"}, headers=auth_headers(admin)
        )

        assert response.status_code == 409

    async def test_admin_only_key_rejected(self, client):
        admin, _ = await onboard(client)

        response = await client.post(
            "/api/v1/roles",
            json={"name": "Gatekeeper", "permissions": ["memberships.approve"]},
            headers=auth_headers(admin),
        )

        assert response.status_code == 400


class TestCurrentTenant:
    async def test_admin_updates_settings(self, client):
        admin, _ = await onboard(client, "Acme", is_discoverable=True)

        response = await client.patch(
            "/api/v1/tenants/current",
            json={"name": "  Acme Staffing ", "is_discoverable": False},
            headers=auth_headers(admin),
        )

        assert response.status_code == 200
        assert response.json()["name"] == "Acme Staffing"
        assert response.json()["is_discoverable"] is False
        listed = await client.get(
            "/api/v1/tenants/discoverable", headers=auth_headers(new_account())
        )
        assert listed.json() == []

    async def test_member_cannot_update(self, client):
        admin, created = await onboard(client)
        applicant, membership = await request_join(client, created["tenant"]["id"])
        recruiter = await role_id(client, admin, "Recruiter")
        await client.post(
            f"/api/v1/memberships/{membership['id']}/approve",
            json={"role_id": recruiter},
            headers=auth_headers(admin),
        )

        response = await client.patch(
            "/api/v1/tenants/current", json={"name": "Mine now"}, headers=auth_headers(applicant)
        )

        assert response.status_code == 403


class TestAuditLogs:
    async def test_admin_sees_own_tenant_entries(self, client):
        admin, created = await onboard(client, "Mine")
        await onboard(client, "Theirs")
        await request_join(client, created["tenant"]["id"])

        response = await client.get("/api/v1/audit/logs", headers=auth_headers(admin))

        assert response.status_code == 200
        items = response.json()["items"]
        assert [i["action"] for i in items] == ["membership.request", "tenant.create"]
        assert {i["tenant_id"] for i in items} == {created["tenant"]["id"]}

    async def test_filter_by_action(self, client):
        admin, created = await onboard(client)
        await request_join(client, created["tenant"]["id"])
        await request_join(client, created["tenant"]["id"])

        response = await client.get(
            "/api/v1/audit/logs",
            params={"action": "membership.request", "limit": 1},
            headers=auth_headers(admin),
        )

        body = response.json()
        assert [i["action"] for i in body["items"]] == ["membership.request"]
        assert body["has_more"] is True

        rest = await client.get(
            "/api/v1/audit/logs",
            params={"action": "membership.request", "cursor": body["next_cursor"]},
            headers=auth_headers(admin),
        )
        assert len(rest.json()["items"]) == 1
        assert rest.json()["items"][0]["id"] != body["items"][0]["id"]

    async def test_entity_history(self, client):
        admin, _ = await onboard(client)
        recruiter = await role_id(client, admin, "Recruiter")
        await client.patch(
            f"/api/v1/roles/{recruiter}", json={"name": "Sourcer"}, headers=auth_headers(admin)
        )
        await client.put(
            f"/api/v1/roles/{recruiter}/permissions",
            json={"permissions": ["job.read"]},
            headers=auth_headers(admin),
        )

        response = await client.get(
            f"/api/v1/audit/logs/entity/role/{recruiter}", headers=auth_headers(admin)
        )

        assert response.status_code == 200
        assert [i["action"] for i in response.json()] == [
            "role.update",
            "role.permissions_update",
        ]
        assert response.json()[0]["changes"] == {"name": "Sourcer"}

    async def test_member_without_audit_view(self, client):
        admin, created = await onboard(client)
        applicant, membership = await request_join(client, created["tenant"]["id"])
        recruiter = await role_id(client, admin, "Recruiter")
        await client.post(
            f"/api/v1/memberships/{membership['id']}/approve",
            json={"role_id": recruiter},
            headers=auth_headers(admin),
        )

        response = await client.get("/api/v1/audit/logs", headers=auth_headers(applicant))

        assert response.status_code == 403
        assert response.json()["detail"] == DENIED_MESSAGE


class TestAdmin:
    async def test_requires_master_admin(self, client):
        admin, _ = await onboard(client)

        response = await client.get("/api/v1/admin/tenants", headers=auth_headers(admin))

        assert response.status_code == 403

    async def test_master_admin_lists_tenants(self, client, db_session):
        await onboard(client, "Acme")
        master = await create_master_admin(db_session)

        response = await client.get("/api/v1/admin/tenants", headers=auth_headers(master))

        assert response.status_code == 200
        assert [t["name"] for t in response.json()["items"]] == ["Acme"]

    async def test_master_admin_creates_tenant_without_joining(self, client, db_session):
        master = await create_master_admin(db_session)

        response = await client.post(
            "/api/v1/admin/tenants",
            json={"name": "Managed", "is_discoverable": True},
            headers=auth_headers(master),
        )

        assert response.status_code == 201
        tenant_id = response.json()["id"]
        roles = await client.get("/api/v1/roles", headers=auth_headers(master, tenant_id))
        assert roles.status_code == 200
        assert sum(r["is_tenant_admin"] for r in roles.json()) == 1

        me = (await client.get("/api/v1/me", headers=auth_headers(master))).json()
        assert me["tenant_id"] is None

    async def test_master_admin_lists_users(self, client, db_session):
        admin, _ = await onboard(client)
        master = await create_master_admin(db_session)

        response = await client.get("/api/v1/admin/users", headers=auth_headers(master))

        assert response.status_code == 200
        by_id = {u["id"]: u for u in response.json()["items"]}
        assert by_id[str(master.id)]["is_master_admin"] is True
        assert by_id[str(admin.id)]["tenant_id"] is not None

    async def test_promote_member(self, client, db_session):
        admin, created = await onboard(client)
        applicant, membership = await request_join(client, created["tenant"]["id"])
        recruiter = await role_id(client, admin, "Recruiter")
        await client.post(
            f"/api/v1/memberships/{membership['id']}/approve",
            json={"role_id": recruiter},
            headers=auth_headers(admin),
        )
        master = await create_master_admin(db_session)

        response = await client.patch(
            f"/api/v1/admin/users/{applicant.id}",
            json={"is_master_admin": True},
            headers=auth_headers(master),
        )

        assert response.status_code == 200
        assert response.json()["is_master_admin"] is True
        assert response.json()["tenant_id"] is None
        me = (await client.get("/api/v1/me", headers=auth_headers(applicant))).json()
        assert me["is_master_admin"] is True

    async def test_promote_requires_master_admin(self, client):
        admin, created = await onboard(client)
        applicant, _ = await request_join(client, created["tenant"]["id"])

        response = await client.patch(
            f"/api/v1/admin/users/{applicant.id}",
            json={"is_master_admin": True},
            headers=auth_headers(admin),
        )

        assert response.status_code == 403

    async def test_last_tenant_admin_not_promoted(self, client, db_session):
        admin, _ = await onboard(client)
        master = await create_master_admin(db_session)

        response = await client.patch(
            f"/api/v1/admin/users/{admin.id}",
            json={"is_master_admin": True},
            headers=auth_headers(master),
        )

        assert response.status_code == 409

    async def test_master_admin_me(self, client, db_session):
        master = await create_master_admin(db_session)

        response = await client.get("/api/v1/me", headers=auth_headers(master))

        assert response.status_code == 200
        assert response.json()["is_master_admin"] is True
        assert response.json()["permissions"] == ["*"]


class TestHealth:
    async def test_health(self, client):
        reset_health_cache()

        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["database"] == "healthy"
        assert response.json()["redis"] == "not_configured"
