"""Tests for the jobs endpoints."""

import pytest

from database.store import Table
from tests.factories import make_jobs


class TestListJobs:
    @pytest.mark.asyncio
    async def test_default_page_size_and_shape(self, client, store):
        await make_jobs(store, 12)
        response = await client.get("/jobs")

        assert response.status_code == 200
        body = response.json()
        assert len(body["data"]) == 10
        assert body["pagination"] == {"page": 1, "pageSize": 10, "total": 12}
        assert [job["order"] for job in body["data"]] == list(range(10))
        assert {"createdAt", "updatedAt", "slug"} <= set(body["data"][0])

    @pytest.mark.asyncio
    async def test_out_of_range_page(self, client, store):
        await make_jobs(store, 3)
        response = await client.get("/jobs", params={"page": 5, "pageSize": 2})
        assert response.status_code == 200
        assert response.json() == {"data": [], "pagination": {"page": 5, "pageSize": 2, "total": 3}}

    @pytest.mark.asyncio
    async def test_tags_and_status_filters(self, client):
        await client.post("/jobs", json={"title": "Remote Urgent", "tags": ["Remote", "Urgent"]})
        await client.post("/jobs", json={"title": "Remote Only", "tags": ["Remote"]})

        response = await client.get("/jobs", params={"tags": "Remote,Urgent", "status": "active"})
        assert [job["title"] for job in response.json()["data"]] == ["Remote Urgent"]

    @pytest.mark.asyncio
    async def test_bad_page(self, client):
        response = await client.get("/jobs", params={"page": 0})
        assert response.status_code == 422


class TestCreateJob:
    @pytest.mark.asyncio
    async def test_create(self, client):
        response = await client.post(
            "/jobs", json={"title": "  Senior Backend Engineer ", "tags": ["Remote", "Remote"]}
        )

        assert response.status_code == 201
        job = response.json()
        assert job["title"] == "Senior Backend Engineer"
        assert job["slug"] == "senior-backend-engineer"
        assert job["status"] == "active"
        assert job["order"] == 0
        assert job["openings"] == 1
        assert job["tags"] == ["Remote"]

    @pytest.mark.asyncio
    async def test_new_job_goes_last(self, client, store):
        await make_jobs(store, 2)
        response = await client.post("/jobs", json={"title": "Third"})
        assert response.json()["order"] == 2

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [{}, {"title": ""}, {"title": "   "}])
    async def test_title_required(self, client, body):
        response = await client.post("/jobs", json=body)
        assert response.status_code == 422
        assert response.json()["message"] == "Title is required"

    @pytest.mark.asyncio
    async def test_slug_collision(self, client, store):
        await client.post("/jobs", json={"title": "Data Scientist"})
        response = await client.post("/jobs", json={"title": "data   scientist!"})

        assert response.status_code == 422
        assert response.json()["message"] == "Slug already exists"
        assert await store.count(Table.JOBS) == 1


class TestUpdateJob:
    @pytest.mark.asyncio
    async def test_rename_reslugs(self, client):
        job = (await client.post("/jobs", json={"title": "Data Scientist"})).json()
        response = await client.patch(f"/jobs/{job['id']}", json={"title": "ML Engineer"})

        assert response.status_code == 200
        assert response.json()["slug"] == "ml-engineer"
        assert response.json()["updatedAt"] > job["updatedAt"]

    @pytest.mark.asyncio
    async def test_rename_into_existing_slug(self, client):
        await client.post("/jobs", json={"title": "Data Scientist"})
        other = (await client.post("/jobs", json={"title": "ML Engineer"})).json()

        response = await client.patch(f"/jobs/{other['id']}", json={"title": "Data Scientist"})
        assert response.status_code == 422
        assert response.json()["message"] == "Slug already exists"

    @pytest.mark.asyncio
    async def test_same_title_keeps_slug(self, client):
        job = (await client.post("/jobs", json={"title": "Data Scientist"})).json()
        response = await client.patch(f"/jobs/{job['id']}", json={"title": "Data Scientist", "openings": 3})
        assert response.json()["slug"] == "data-scientist"
        assert response.json()["openings"] == 3

    @pytest.mark.asyncio
    async def test_order_not_writable(self, client, store):
        jobs = await make_jobs(store, 2)
        await client.patch(f"/jobs/{jobs[0].id}", json={"order": 1})
        assert (await store.get(Table.JOBS, jobs[0].id)).order == 0

    @pytest.mark.asyncio
    async def test_unknown(self, client):
        response = await client.patch("/jobs/job_missing", json={"title": "x"})
        assert response.status_code == 404
        assert response.json() == {"message": "Job not found"}


class TestArchiveAndReorder:
    @pytest.mark.asyncio
    async def test_archive_toggles(self, client, store):
        job = (await make_jobs(store, 1))[0]
        first = await client.post(f"/jobs/{job.id}/archive")
        second = await client.post(f"/jobs/{job.id}/archive")
        assert first.json()["status"] == "archived"
        assert second.json()["status"] == "active"

    @pytest.mark.asyncio
    async def test_reorder(self, client, store):
        jobs = await make_jobs(store, 4)
        response = await client.patch(
            f"/jobs/{jobs[0].id}/reorder", json={"fromOrder": 0, "toOrder": 2}
        )

        assert response.status_code == 200
        assert response.json() == {"success": True}
        listed = (await client.get("/jobs")).json()["data"]
        assert [job["id"] for job in listed] == [jobs[1].id, jobs[2].id, jobs[0].id, jobs[3].id]
        assert [job["order"] for job in listed] == [0, 1, 2, 3]

    @pytest.mark.asyncio
    async def test_reorder_unknown(self, client):
        response = await client.patch("/jobs/job_missing/reorder", json={"fromOrder": 0, "toOrder": 1})
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_get_job(self, client, store):
        job = (await make_jobs(store, 1))[0]
        assert (await client.get(f"/jobs/{job.id}")).json()["id"] == job.id
        assert (await client.get("/jobs/job_missing")).status_code == 404
