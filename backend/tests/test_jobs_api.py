"""
SmartNotesX Backend — Jobs Endpoint Tests
===========================================

What we test:
    ✅ Only admins post, update and delete jobs
    ✅ Public listing hides expired and non-active postings
    ✅ Applying: success, duplicate, deadline passed, unknown job
    ✅ Applicant and admin views of applications
    ✅ Deleting a job removes its applications
"""

import pytest

from tests.conftest import future, job_payload


async def post_job(client, headers, **overrides):
    response = await client.post("/api/jobs", json=job_payload(**overrides), headers=headers)
    assert response.status_code == 201, response.text
    return response.json()["data"]


class TestPostings:
    @pytest.mark.asyncio
    async def test_admin_posts_job(self, client, admin):
        admin_user, headers = admin

        response = await client.post("/api/jobs", json=job_payload(), headers=headers)

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Job posted successfully"
        job = body["data"]
        assert job["title"] == "Backend Intern"
        assert job["status"] == "active"
        assert job["locationType"] == "Hybrid"
        assert job["stipend"] == {"amount": 25000, "currency": "INR", "duration": "per month"}
        assert job["eligibility"]["minCGPA"] == 7.5
        assert job["applicants"] == []
        assert job["postedBy"]["id"] == str(admin_user.id)
        assert job["companyLogo"]

    @pytest.mark.asyncio
    async def test_student_cannot_post(self, client, student):
        _, headers = student

        response = await client.post("/api/jobs", json=job_payload(), headers=headers)

        assert response.status_code == 403
        assert response.json()["message"] == "Access denied. Admin privileges required."

    @pytest.mark.asyncio
    async def test_anonymous_cannot_post(self, client):
        response = await client.post("/api/jobs", json=job_payload())
        assert response.status_code == 401

    @pytest.mark.asyncio
    async def test_invalid_job_type_rejected(self, client, admin):
        _, headers = admin
        response = await client.post("/api/jobs", json=job_payload(type="Gig"), headers=headers)

        assert response.status_code == 400
        assert any(error["field"] == "type" for error in response.json()["errors"])

    @pytest.mark.asyncio
    async def test_update_only_sent_fields(self, client, admin):
        _, headers = admin
        job = await post_job(client, headers)

        response = await client.put(
            f"/api/jobs/{job['id']}",
            json={"status": "closed", "isVerified": True},
            headers=headers,
        )

        assert response.status_code == 200
        updated = response.json()["data"]
        assert updated["status"] == "closed"
        assert updated["isVerified"] is True
        assert updated["title"] == job["title"]
        assert updated["skills"] == job["skills"]

    @pytest.mark.asyncio
    async def test_update_unknown_job(self, client, admin):
        _, headers = admin
        response = await client.put(
            "/api/jobs/00000000-0000-0000-0000-000000000000",
            json={"title": "Nope nope"},
            headers=headers,
        )
        assert response.status_code == 404
        assert response.json()["message"] == "Job not found"


class TestListing:
    @pytest.mark.asyncio
    async def test_public_listing_hides_expired_and_closed(self, client, admin):
        _, headers = admin
        await post_job(client, headers, title="Open Role")
        await post_job(client, headers, title="Expired Role", applicationDeadline=future(-1))
        await post_job(client, headers, title="Closed Role", status="closed")

        data = (await client.get("/api/jobs")).json()["data"]

        assert [job["title"] for job in data["jobs"]] == ["Open Role"]
        assert data["pagination"]["total"] == 1

    @pytest.mark.asyncio
    async def test_filters_and_search(self, client, admin):
        _, headers = admin
        await post_job(client, headers, title="ML Intern", type="Internship", location="Pune", locationType="Remote")
        await post_job(client, headers, title="SDE I", type="Job", location="Hyderabad", locationType="On-site")

        jobs = (await client.get("/api/jobs", params={"type": "Job"})).json()["data"]["jobs"]
        assert [job["title"] for job in jobs] == ["SDE I"]

        jobs = (await client.get("/api/jobs", params={"location": "pun"})).json()["data"]["jobs"]
        assert [job["title"] for job in jobs] == ["ML Intern"]

        jobs = (await client.get("/api/jobs", params={"locationType": "On-site"})).json()["data"]["jobs"]
        assert [job["title"] for job in jobs] == ["SDE I"]

        jobs = (await client.get("/api/jobs", params={"search": "ml"})).json()["data"]["jobs"]
        assert [job["title"] for job in jobs] == ["ML Intern"]

    @pytest.mark.asyncio
    async def test_detail_is_public(self, client, admin):
        _, headers = admin
        job = await post_job(client, headers)

        response = await client.get(f"/api/jobs/{job['id']}")

        assert response.status_code == 200
        assert response.json()["data"]["id"] == job["id"]


class TestApplications:
    @pytest.mark.asyncio
    async def test_apply_success(self, client, admin, student):
        _, admin_headers = admin
        user, headers = student
        job = await post_job(client, admin_headers)

        response = await client.post(
            f"/api/jobs/{job['id']}/apply",
            json={"coverLetter": "I have built three FastAPI services."},
            headers=headers,
        )

        assert response.status_code == 201
        body = response.json()
        assert body["message"] == "Application submitted successfully"
        assert body["data"]["jobId"] == job["id"]
        assert body["data"]["applicantId"] == user["id"]
        assert body["data"]["status"] == "applied"
        assert body["data"]["coverLetter"] == "I have built three FastAPI services."

        detail = (await client.get(f"/api/jobs/{job['id']}")).json()["data"]
        assert detail["applicants"] == [user["id"]]

    @pytest.mark.asyncio
    async def test_apply_without_body(self, client, admin, student):
        _, admin_headers = admin
        _, headers = student
        job = await post_job(client, admin_headers)

        response = await client.post(f"/api/jobs/{job['id']}/apply", headers=headers)

        assert response.status_code == 201
        assert "coverLetter" not in response.json()["data"]

    @pytest.mark.asyncio
    async def test_apply_twice_rejected(self, client, admin, student):
        _, admin_headers = admin
        _, headers = student
        job = await post_job(client, admin_headers)
        await client.post(f"/api/jobs/{job['id']}/apply", headers=headers)

        response = await client.post(f"/api/jobs/{job['id']}/apply", headers=headers)

        assert response.status_code == 400
        assert response.json()["message"] == "You have already applied for this job"

    @pytest.mark.asyncio
    async def test_apply_after_deadline_rejected(self, client, admin, student):
        _, admin_headers = admin
        _, headers = student
        job = await post_job(client, admin_headers, applicationDeadline=future(-2))

        response = await client.post(f"/api/jobs/{job['id']}/apply", headers=headers)

        assert response.status_code == 400
        assert response.json()["message"] == "Application deadline has passed"

    @pytest.mark.asyncio
    async def test_apply_unknown_job(self, client, student):
        _, headers = student
        response = await client.post(
            "/api/jobs/00000000-0000-0000-0000-000000000000/apply",
            headers=headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_cover_letter_length_limit(self, client, admin, student):
        _, admin_headers = admin
        _, headers = student
        job = await post_job(client, admin_headers)

        response = await client.post(
            f"/api/jobs/{job['id']}/apply",
            json={"coverLetter": "x" * 1001},
            headers=headers,
        )
        assert response.status_code == 400

    @pytest.mark.asyncio
    async def test_my_applications_include_job(self, client, admin, student, other_student):
        _, admin_headers = admin
        _, headers = student
        _, other_headers = other_student
        job = await post_job(client, admin_headers)
        other_job = await post_job(client, admin_headers, title="Data Analyst")
        await client.post(f"/api/jobs/{job['id']}/apply", headers=headers)
        await client.post(f"/api/jobs/{other_job['id']}/apply", headers=other_headers)

        response = await client.get("/api/jobs/user/my-applications", headers=headers)

        assert response.status_code == 200
        applications = response.json()["data"]
        assert len(applications) == 1
        assert applications[0]["job"]["title"] == "Backend Intern"

    @pytest.mark.asyncio
    async def test_my_applications_embed_job_applicants(self, client, admin, student):
        _, admin_headers = admin
        user, headers = student
        job = await post_job(client, admin_headers)
        await client.post(f"/api/jobs/{job['id']}/apply", headers=headers)

        response = await client.get("/api/jobs/user/my-applications", headers=headers)

        assert response.status_code == 200
        application = response.json()["data"][0]
        assert application["jobId"] == job["id"]
        assert application["job"]["applicants"] == [user["id"]]
        assert application["job"]["postedBy"]["id"] == job["postedBy"]["id"]

    @pytest.mark.asyncio
    async def test_admin_sees_applicants(self, client, admin, student):
        _, admin_headers = admin
        user, headers = student
        job = await post_job(client, admin_headers)
        await client.post(f"/api/jobs/{job['id']}/apply", headers=headers)

        response = await client.get(f"/api/jobs/{job['id']}/applications", headers=admin_headers)

        assert response.status_code == 200
        applicant = response.json()["data"][0]["applicant"]
        assert applicant["id"] == user["id"]
        assert applicant["email"] == "asha@example.com"
        assert applicant["semester"] == 5

    @pytest.mark.asyncio
    async def test_student_cannot_list_applicants(self, client, admin, student):
        _, admin_headers = admin
        _, headers = student
        job = await post_job(client, admin_headers)

        response = await client.get(f"/api/jobs/{job['id']}/applications", headers=headers)
        assert response.status_code == 403

    @pytest.mark.asyncio
    async def test_applications_for_unknown_job(self, client, admin):
        _, admin_headers = admin
        response = await client.get(
            "/api/jobs/00000000-0000-0000-0000-000000000000/applications",
            headers=admin_headers,
        )
        assert response.status_code == 404

    @pytest.mark.asyncio
    async def test_delete_job_removes_applications(self, client, admin, student):
        _, admin_headers = admin
        _, headers = student
        job = await post_job(client, admin_headers)
        await client.post(f"/api/jobs/{job['id']}/apply", headers=headers)

        response = await client.delete(f"/api/jobs/{job['id']}", headers=admin_headers)

        assert response.status_code == 200
        assert response.json()["message"] == "Job deleted successfully"
        assert (await client.get(f"/api/jobs/{job['id']}")).status_code == 404
        mine = await client.get("/api/jobs/user/my-applications", headers=headers)
        assert mine.json()["data"] == []
