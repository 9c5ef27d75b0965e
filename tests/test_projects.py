import unittest
from datetime import date

from app import app, db
from models.project import Project
from tests.utils.api import ApiTestCase


class ProjectLifecycleTestCase(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner_id = self.create_user("Owner", "owner@projecthub.io")
        self.stranger_id = self.create_user("Stranger", "stranger@projecthub.io")
        self.owner_headers = self.auth_headers(self.owner_id)
        self.stranger_headers = self.auth_headers(self.stranger_id)

    def test_create_defaults_owner_to_caller(self):
        response = self.client.post(
            "/api/projects",
            json={"name": "Website", "status": "planning", "start_date": "2024-01-01"},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 201)
        data = response.get_json()["data"]
        self.assertEqual(data["owner_id"], self.owner_id)
        self.assertEqual(data["owner"], {"id": self.owner_id, "name": "Owner"})
        self.assertEqual(data["start_date"], "2024-01-01")
        self.assertEqual(data["tasks"], [])

    def test_create_rejects_expired_token(self):
        original_ttl = app.config["JWT_TTL_MINUTES"]
        app.config["JWT_TTL_MINUTES"] = -5
        try:
            headers = self.auth_headers(self.owner_id)
        finally:
            app.config["JWT_TTL_MINUTES"] = original_ttl

        response = self.client.post("/api/projects", json={"name": "P1"}, headers=headers)

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json(), {"message": "Token expired"})
        with app.app_context():
            self.assertEqual(Project.query.count(), 0)

    def test_create_rejects_logged_out_token(self):
        response = self.client.post("/api/logout", headers=self.owner_headers)
        self.assertEqual(response.status_code, 200)

        response = self.client.post(
            "/api/projects",
            json={"name": "P1"},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json(), {"message": "Token invalid"})
        with app.app_context():
            self.assertEqual(Project.query.count(), 0)

    def test_view_with_bad_token_is_unauthenticated(self):
        project_id = self.create_project(self.owner_id)

        response = self.client.get(
            f"/api/projects/{project_id}",
            headers={"Authorization": "Bearer not-a-token"},
        )

        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.get_json()["message"], "Token invalid")

    def test_create_keeps_explicit_owner(self):
        response = self.client.post(
            "/api/projects",
            json={"name": "Website", "owner_id": self.stranger_id},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 201)
        self.assertEqual(response.get_json()["data"]["owner_id"], self.stranger_id)

    def test_create_rejects_end_before_start(self):
        response = self.client.post(
            "/api/projects",
            json={"name": "Backwards", "start_date": "2024-05-01", "end_date": "2024-04-01"},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 422)
        self.assertEqual(
            response.get_json()["errors"]["end_date"],
            ["The end date must be a date after or equal to start date."],
        )
        with app.app_context():
            self.assertEqual(Project.query.count(), 0)

    def test_create_rejects_unknown_status_and_owner(self):
        response = self.client.post(
            "/api/projects",
            json={"name": "Website", "status": "archived", "owner_id": 999},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 422)
        errors = response.get_json()["errors"]
        self.assertEqual(errors["status"], ["The selected status is invalid."])
        self.assertEqual(errors["owner_id"], ["The selected owner id is invalid."])

    def test_create_rejects_malformed_date(self):
        response = self.client.post(
            "/api/projects",
            json={"name": "Website", "start_date": "01/02/2024"},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 422)
        self.assertEqual(
            response.get_json()["errors"]["start_date"],
            ["The start date is not a valid date."],
        )

    def test_only_owner_can_update(self):
        project_id = self.create_project(self.owner_id, name="Website")

        response = self.client.put(
            f"/api/projects/{project_id}",
            json={"name": "Hijacked"},
            headers=self.stranger_headers,
        )
        self.assertEqual(response.status_code, 403)
        self.assertEqual(response.get_json(), {"message": "Forbidden"})

        response = self.client.put(
            f"/api/projects/{project_id}",
            json={"name": "Website v2"},
            headers=self.owner_headers,
        )
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["data"]["name"], "Website v2")

    def test_update_requires_token(self):
        project_id = self.create_project(self.owner_id)

        response = self.client.patch(f"/api/projects/{project_id}", json={"name": "X"})

        self.assertEqual(response.status_code, 401)

    def test_update_of_missing_project_is_not_found(self):
        response = self.client.put(
            "/api/projects/404",
            json={"name": ""},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 404)
        self.assertEqual(response.get_json(), {"message": "Project not found"})

    def test_partial_update_only_touches_supplied_fields(self):
        project_id = self.create_project(
            self.owner_id,
            name="Website",
            description="Marketing site",
            status="planning",
        )

        response = self.client.patch(
            f"/api/projects/{project_id}",
            json={"status": "ongoing"},
            headers=self.owner_headers,
        )

        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertEqual(data["status"], "ongoing")
        self.assertEqual(data["name"], "Website")
        self.assertEqual(data["description"], "Marketing site")

    def test_update_checks_dates_against_stored_values(self):
        project_id = self.create_project(
            self.owner_id,
            start_date=date(2024, 3, 1),
            end_date=date(2024, 6, 1),
        )

        response = self.client.patch(
            f"/api/projects/{project_id}",
            json={"end_date": "2024-02-01"},
            headers=self.owner_headers,
        )
        self.assertEqual(response.status_code, 422)
        self.assertIn("end_date", response.get_json()["errors"])

        response = self.client.patch(
            f"/api/projects/{project_id}",
            json={"start_date": "2024-07-01"},
            headers=self.owner_headers,
        )
        self.assertEqual(response.status_code, 422)
        self.assertIn("start_date", response.get_json()["errors"])

        with app.app_context():
            project = db.session.get(Project, project_id)
            self.assertEqual(project.start_date, date(2024, 3, 1))
            self.assertEqual(project.end_date, date(2024, 6, 1))

    def test_only_owner_can_delete(self):
        project_id = self.create_project(self.owner_id)
        self.create_task(project_id)

        response = self.client.delete(f"/api/projects/{project_id}", headers=self.stranger_headers)
        self.assertEqual(response.status_code, 403)

        response = self.client.get(f"/api/projects/{project_id}", headers=self.owner_headers)
        self.assertEqual(response.status_code, 200)

        response = self.client.delete(f"/api/projects/{project_id}", headers=self.owner_headers)
        self.assertEqual(response.status_code, 204)
        self.assertEqual(response.data, b"")

        response = self.client.get(f"/api/projects/{project_id}", headers=self.owner_headers)
        self.assertEqual(response.status_code, 404)

        response = self.client.get("/api/tasks")
        self.assertEqual(response.get_json()["data"]["total"], 0)


class ProjectVisibilityTestCase(ApiTestCase):
    def setUp(self):
        super().setUp()
        self.owner_id = self.create_user("Owner", "owner@projecthub.io")
        self.assignee_id = self.create_user("Assignee", "assignee@projecthub.io")
        self.stranger_id = self.create_user("Stranger", "stranger@projecthub.io")
        self.project_id = self.create_project(self.owner_id, name="Website")
        self.create_task(self.project_id, name="Design", assigned_to=self.assignee_id)
        self.create_task(self.project_id, name="Build")

    def test_owner_sees_relations(self):
        response = self.client.get(
            f"/api/projects/{self.project_id}",
            headers=self.auth_headers(self.owner_id),
        )

        self.assertEqual(response.status_code, 200)
        data = response.get_json()["data"]
        self.assertEqual(data["owner"], {"id": self.owner_id, "name": "Owner"})
        self.assertEqual([task["name"] for task in data["tasks"]], ["Design", "Build"])
        self.assertEqual(data["tasks"][0]["assignee"], {"id": self.assignee_id, "name": "Assignee"})
        self.assertIsNone(data["tasks"][1]["assignee"])

    def test_assignee_can_view_but_not_update(self):
        headers = self.auth_headers(self.assignee_id)

        response = self.client.get(f"/api/projects/{self.project_id}/detail", headers=headers)
        self.assertEqual(response.status_code, 200)

        response = self.client.put(
            f"/api/projects/{self.project_id}",
            json={"name": "Mine now"},
            headers=headers,
        )
        self.assertEqual(response.status_code, 403)

    def test_stranger_and_anonymous_are_forbidden(self):
        response = self.client.get(
            f"/api/projects/{self.project_id}",
            headers=self.auth_headers(self.stranger_id),
        )
        self.assertEqual(response.status_code, 403)

        response = self.client.get(f"/api/projects/{self.project_id}")
        self.assertEqual(response.status_code, 403)

    def test_project_tasks_listing(self):
        response = self.client.get(f"/api/projects/{self.project_id}/tasks")
        self.assertEqual(response.status_code, 401)

        response = self.client.get(
            f"/api/projects/{self.project_id}/tasks",
            headers=self.auth_headers(self.stranger_id),
        )
        self.assertEqual(response.status_code, 403)

        response = self.client.get(
            f"/api/projects/{self.project_id}/tasks",
            headers=self.auth_headers(self.assignee_id),
        )
        self.assertEqual(response.status_code, 200)
        page = response.get_json()["data"]
        self.assertEqual(page["total"], 2)
        self.assertEqual(page["data"][0]["project"]["id"], self.project_id)

    def test_user_projects_lists_owned_projects_only(self):
        self.create_project(self.stranger_id, name="Elsewhere")

        response = self.client.get("/api/user/projects", headers=self.auth_headers(self.owner_id))

        self.assertEqual(response.status_code, 200)
        page = response.get_json()["data"]
        self.assertEqual([project["name"] for project in page["data"]], ["Website"])

        response = self.client.get("/api/user/projects", headers=self.auth_headers(self.assignee_id))
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.get_json()["data"]["data"], [])

        response = self.client.get("/api/user/projects")
        self.assertEqual(response.status_code, 401)


class ProjectPaginationTestCase(ApiTestCase):
    def test_listing_is_paginated(self):
        owner_id = self.create_user("Owner", "owner@projecthub.io")
        for index in range(16):
            self.create_project(owner_id, name=f"Project {index}")

        response = self.client.get("/api/projects")
        self.assertEqual(response.status_code, 200)
        page = response.get_json()["data"]
        self.assertEqual(page["current_page"], 1)
        self.assertEqual(page["per_page"], 15)
        self.assertEqual(page["total"], 16)
        self.assertEqual(page["last_page"], 2)
        self.assertEqual(page["from"], 1)
        self.assertEqual(page["to"], 15)
        self.assertEqual(len(page["data"]), 15)
        self.assertEqual(page["data"][0]["name"], "Project 0")
        self.assertEqual(page["next_page_url"], "http://localhost/api/projects?page=2")
        self.assertIsNone(page["prev_page_url"])

        response = self.client.get("/api/projects?page=2")
        page = response.get_json()["data"]
        self.assertEqual([project["name"] for project in page["data"]], ["Project 15"])
        self.assertEqual(page["from"], 16)
        self.assertIsNone(page["next_page_url"])

    def test_empty_listing(self):
        response = self.client.get("/api/projects")

        self.assertEqual(response.status_code, 200)
        page = response.get_json()["data"]
        self.assertEqual(page["data"], [])
        self.assertEqual(page["total"], 0)
        self.assertEqual(page["last_page"], 1)
        self.assertIsNone(page["from"])


if __name__ == "__main__":
    unittest.main()
