"""
API tests for Project controller.

This module contains API endpoint tests for the project controller: listing,
CRUD, team management, authentication and the error envelope.
"""

import uuid
from unittest.mock import patch

import pytest
from fastapi import status
from httpx import AsyncClient

from app.core.config import settings
from tests.factories import create_user


class TestListProjects:
    """Test cases for GET /api/projects/."""

    @pytest.mark.asyncio
    async def test_list_projects_basic(self, client_for, manager_user, test_project):
        response = await client_for(manager_user).get("/api/projects/")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["status"] == "success"
        assert data["message"] == "Projects retrieved successfully"
        assert data["total"] == 1
        assert data["total_pages"] == 1
        assert data["current_page"] == 1
        project = data["projects"][0]
        assert project["name"] == "Apollo"
        assert project["manager"]["id"] == str(manager_user.id)
        assert project["team"][0]["role"] == "developer"

    @pytest.mark.asyncio
    async def test_developer_sees_only_own_projects(
        self, client_for, developer_user, outsider_user, test_project
    ):
        member_view = await client_for(developer_user).get("/api/projects/")
        assert [p["id"] for p in member_view.json()["projects"]] == [str(test_project.id)]

        outsider_view = await client_for(outsider_user).get("/api/projects/")
        assert outsider_view.json()["projects"] == []
        assert outsider_view.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_filters_and_pagination(self, client_for, admin_user):
        client = client_for(admin_user)
        for i in range(3):
            await client.post("/api/projects/", json={"name": f"Batch {i}", "priority": "high"})
        await client.post("/api/projects/", json={"name": "Quiet", "priority": "low"})

        response = await client.get("/api/projects/", params={"priority": "high", "limit": 2})

        data = response.json()
        assert data["total"] == 3
        assert data["total_pages"] == 2
        assert len(data["projects"]) == 2

        searched = await client.get("/api/projects/", params={"search": "quiet"})
        assert [p["name"] for p in searched.json()["projects"]] == ["Quiet"]

    @pytest.mark.asyncio
    async def test_invalid_status_filter_is_rejected(self, client_for, admin_user):
        response = await client_for(admin_user).get("/api/projects/", params={"status": "archived"})

        assert response.status_code == 422
        assert response.json()["error_code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_limit_above_maximum_is_rejected(self, client_for, admin_user):
        response = await client_for(admin_user).get("/api/projects/", params={"limit": 101})

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_limit_follows_configured_maximum(self, client_for, admin_user):
        client = client_for(admin_user)

        with patch.object(settings, "max_page_size", 200):
            accepted = await client.get("/api/projects/", params={"limit": 150})
            rejected = await client.get("/api/projects/", params={"limit": 201})

        assert accepted.status_code == status.HTTP_200_OK
        assert accepted.json()["current_page"] == 1
        assert rejected.status_code == 422
        assert rejected.json()["error_code"] == "VALIDATION_ERROR"
        assert rejected.json()["details"]["errors"][0]["loc"] == ["query", "limit"]


class TestGetProject:
    """Test cases for GET /api/projects/{id}."""

    @pytest.mark.asyncio
    async def test_get_project_with_live_tasks(
        self, client_for, developer_user, test_project, test_tasks
    ):
        response = await client_for(developer_user).get(f"/api/projects/{test_project.id}")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["project"]["id"] == str(test_project.id)
        assert len(data["tasks"]) == 2
        task_ids = {t["id"] for t in data["tasks"]}
        assert str(test_tasks[2].id) not in task_ids

    @pytest.mark.asyncio
    async def test_get_project_nonexistent(self, client_for, admin_user):
        response = await client_for(admin_user).get(f"/api/projects/{uuid.uuid4()}")

        assert response.status_code == status.HTTP_404_NOT_FOUND
        data = response.json()
        assert data["status"] == "error"
        assert data["message"] == "Project not found"
        assert data["error_code"] == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_get_project_forbidden_for_outsider(
        self, client_for, outsider_user, test_project
    ):
        response = await client_for(outsider_user).get(f"/api/projects/{test_project.id}")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["error_code"] == "PERMISSION_DENIED"

    @pytest.mark.asyncio
    async def test_get_project_invalid_uuid(self, client_for, admin_user):
        response = await client_for(admin_user).get("/api/projects/not-a-uuid")

        assert response.status_code == 422


class TestCreateProject:
    """Test cases for POST /api/projects/."""

    @pytest.mark.asyncio
    async def test_create_project_success(self, client_for, manager_user, developer_user):
        payload = {
            "name": "New Project",
            "description": "A new test project",
            "team": [{"user_id": str(developer_user.id)}],
        }

        response = await client_for(manager_user).post("/api/projects/", json=payload)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["message"] == "Project created successfully"
        assert data["data"]["name"] == "New Project"
        assert data["data"]["status"] == "planned"
        assert data["data"]["priority"] == "medium"
        assert data["data"]["manager_id"] == str(manager_user.id)
        assert data["data"]["team"][0]["user_id"] == str(developer_user.id)
        assert data["data"]["team"][0]["role"] == "developer"

    @pytest.mark.asyncio
    async def test_developer_cannot_create(self, client_for, developer_user):
        response = await client_for(developer_user).post("/api/projects/", json={"name": "Nope"})

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_manager_cannot_be_supplied(self, client_for, manager_user, other_manager):
        response = await client_for(manager_user).post(
            "/api/projects/", json={"name": "Hijack", "manager_id": str(other_manager.id)}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_create_project_missing_name(self, client_for, manager_user):
        response = await client_for(manager_user).post(
            "/api/projects/", json={"description": "No name"}
        )

        assert response.status_code == 422
        data = response.json()
        assert data["status"] == "error"
        assert any(err["loc"][-1] == "name" for err in data["details"])


class TestUpdateProject:
    """Test cases for PUT /api/projects/{id}."""

    @pytest.mark.asyncio
    async def test_update_project_partial(self, client_for, manager_user, test_project):
        response = await client_for(manager_user).put(
            f"/api/projects/{test_project.id}", json={"status": "active"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["status"] == "active"
        assert data["name"] == "Apollo"
        assert data["description"] == "Launch tracking dashboard"

    @pytest.mark.asyncio
    async def test_team_member_cannot_update(self, client_for, developer_user, test_project):
        response = await client_for(developer_user).put(
            f"/api/projects/{test_project.id}", json={"name": "Renamed"}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN

    @pytest.mark.asyncio
    async def test_null_name_is_rejected(self, client_for, manager_user, test_project):
        response = await client_for(manager_user).put(
            f"/api/projects/{test_project.id}", json={"name": None}
        )

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_update_project_nonexistent(self, client_for, admin_user):
        response = await client_for(admin_user).put(
            f"/api/projects/{uuid.uuid4()}", json={"name": "Ghost"}
        )

        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestDeleteProject:
    """Test cases for DELETE /api/projects/{id}."""

    @pytest.mark.asyncio
    async def test_delete_project_success(self, client_for, manager_user, test_project, test_tasks):
        client = client_for(manager_user)

        response = await client.delete(f"/api/projects/{test_project.id}")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Project deleted successfully"
        assert response.json()["data"] is None

        follow_up = await client.get(f"/api/projects/{test_project.id}")
        assert follow_up.status_code == status.HTTP_404_NOT_FOUND
        listing = await client.get("/api/projects/")
        assert listing.json()["total"] == 0

    @pytest.mark.asyncio
    async def test_delete_twice_is_not_found(self, client_for, manager_user, test_project):
        client = client_for(manager_user)
        await client.delete(f"/api/projects/{test_project.id}")

        response = await client.delete(f"/api/projects/{test_project.id}")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_other_manager_cannot_delete(self, client_for, other_manager, test_project):
        response = await client_for(other_manager).delete(f"/api/projects/{test_project.id}")

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestTeamEndpoints:
    """Test cases for the team sub-resource."""

    @pytest.mark.asyncio
    async def test_add_team_member(self, client_for, manager_user, outsider_user, test_project):
        response = await client_for(manager_user).post(
            f"/api/projects/{test_project.id}/team",
            json={"user_id": str(outsider_user.id), "role": "qa"},
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["message"] == "Team member added successfully"
        assert [m["role"] for m in data["data"]["team"]] == ["developer", "qa"]
        assert data["data"]["team"][1]["user"]["name"] == outsider_user.name

    @pytest.mark.asyncio
    async def test_add_duplicate_member_is_conflict(
        self, client_for, manager_user, developer_user, test_project
    ):
        response = await client_for(manager_user).post(
            f"/api/projects/{test_project.id}/team", json={"user_id": str(developer_user.id)}
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        data = response.json()
        assert data["error_code"] == "CONFLICT"
        assert data["details"]["user_id"] == str(developer_user.id)

    @pytest.mark.asyncio
    async def test_remove_team_member(
        self, client_for, manager_user, developer_user, test_project
    ):
        response = await client_for(manager_user).delete(
            f"/api/projects/{test_project.id}/team/{developer_user.id}"
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["message"] == "Team member removed successfully"
        assert response.json()["data"]["team"] == []

    @pytest.mark.asyncio
    async def test_developer_cannot_change_team(
        self, client_for, developer_user, outsider_user, test_project
    ):
        response = await client_for(developer_user).post(
            f"/api/projects/{test_project.id}/team", json={"user_id": str(outsider_user.id)}
        )

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestAuthentication:
    """Requests without a valid bearer token never reach the handlers."""

    @pytest.mark.asyncio
    async def test_projects_unauthorized_access(self, client: AsyncClient, test_project):
        endpoints = [
            ("GET", "/api/projects/"),
            ("GET", f"/api/projects/{test_project.id}"),
            ("PUT", f"/api/projects/{test_project.id}"),
            ("DELETE", f"/api/projects/{test_project.id}"),
        ]

        for method, endpoint in endpoints:
            response = await client.request(
                method, endpoint, json={"name": "x"} if method == "PUT" else None
            )

            assert response.status_code in (
                status.HTTP_401_UNAUTHORIZED,
                status.HTTP_403_FORBIDDEN,
            )

    @pytest.mark.asyncio
    async def test_invalid_token_is_unauthorized(self, client: AsyncClient):
        client.headers["Authorization"] = "Bearer not-a-real-token"

        response = await client.get("/api/projects/")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.asyncio
    async def test_token_for_unknown_user(self, client_for):
        class Ghost:
            id = uuid.uuid4()
            role = "admin"

        response = await client_for(Ghost()).get("/api/projects/")

        assert response.status_code == status.HTTP_404_NOT_FOUND

    @pytest.mark.asyncio
    async def test_inactive_user_is_forbidden(self, client_for, test_db):
        user = await create_user(test_db, role="admin", is_active=False)

        response = await client_for(user).get("/api/projects/")

        assert response.status_code == status.HTTP_403_FORBIDDEN
