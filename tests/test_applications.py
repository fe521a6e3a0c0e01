# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Applications and saved jobs."""

import pytest
from httpx import AsyncClient

pytestmark = pytest.mark.anyio


@pytest.fixture
async def posting(make_company, make_job):
    company = await make_company()
    job = await make_job(company)
    return company, job


async def _apply(client: AsyncClient, candidate: dict, job_id: str, message: str | None = None):
    return await client.post(
        "/api/v1/candidate/applications",
        json={"job_id": job_id, "message": message},
        headers=candidate["headers"],
    )


async def _job(client: AsyncClient, job_id: str) -> dict:
    return (await client.get(f"/api/v1/jobs/{job_id}")).json()


async def test_apply_and_list(client: AsyncClient, posting, make_candidate):
    company, job = posting
    candidate = await make_candidate()

    r = await _apply(client, candidate, job["id"], "Hello!")
    assert r.status_code == 201
    application = r.json()
    assert application["status"] == "pending"
    assert application["company_id"] == company["company"]["id"]
    assert application["candidate_id"] == candidate["candidate"]["id"]
    assert (await _job(client, job["id"]))["applicants"] == 1

    mine = (await client.get("/api/v1/candidate/applications", headers=candidate["headers"])).json()
    assert [a["id"] for a in mine] == [application["id"]]


async def test_apply_twice_conflicts(client: AsyncClient, posting, make_candidate):
    _, job = posting
    candidate = await make_candidate()
    assert (await _apply(client, candidate, job["id"])).status_code == 201
    r = await _apply(client, candidate, job["id"])
    assert r.status_code == 409
    assert (await _job(client, job["id"]))["applicants"] == 1


async def test_apply_to_inactive_or_missing_job(client: AsyncClient, posting, make_candidate):
    company, job = posting
    candidate = await make_candidate()
    await client.patch(f"/api/v1/company/jobs/{job['id']}/deactivate", headers=company["headers"])
    assert (await _apply(client, candidate, job["id"])).status_code == 400
    assert (await _apply(client, candidate, "f" * 24)).status_code == 404
    assert (await _apply(client, candidate, "bad")).status_code == 400


async def test_company_reviews_applicants(client: AsyncClient, posting, make_candidate):
    company, job = posting
    candidate = await make_candidate(name="Ana")
    application = (await _apply(client, candidate, job["id"])).json()

    r = await client.get(f"/api/v1/company/jobs/{job['id']}/applicants", headers=company["headers"])
    assert r.status_code == 200
    body = r.json()
    assert body["job"]["applicants"] == 1
    assert len(body["applicants"]) == 1
    assert body["applicants"][0]["candidate"]["name"] == "Ana"
    assert body["applicants"][0]["application"]["id"] == application["id"]

    r = await client.patch(
        f"/api/v1/company/applications/{application['id']}/status",
        json={"status": "viewed"},
        headers=company["headers"],
    )
    assert r.status_code == 200
    assert r.json()["status"] == "viewed"
    assert r.json()["viewed_at"] is not None

    r = await client.patch(
        f"/api/v1/company/applications/{application['id']}/status",
        json={"status": "hired-on-the-spot"},
        headers=company["headers"],
    )
    assert r.status_code == 400


async def test_other_company_cannot_update_status(client: AsyncClient, posting, make_company, make_candidate):
    _, job = posting
    intruder = await make_company()
    candidate = await make_candidate()
    application = (await _apply(client, candidate, job["id"])).json()
    r = await client.patch(
        f"/api/v1/company/applications/{application['id']}/status",
        json={"status": "rejected"},
        headers=intruder["headers"],
    )
    assert r.status_code == 403


async def test_cancel_pending_application(client: AsyncClient, posting, make_candidate):
    _, job = posting
    candidate = await make_candidate()
    other = await make_candidate()
    application = (await _apply(client, candidate, job["id"])).json()

    path = f"/api/v1/candidate/applications/{application['id']}"
    assert (await client.delete(path, headers=other["headers"])).status_code == 403
    assert (await client.delete(path, headers=candidate["headers"])).status_code == 200
    assert (await client.delete(path, headers=candidate["headers"])).status_code == 404
    assert (await _job(client, job["id"]))["applicants"] == 0


async def test_cannot_cancel_after_company_moved_it(client: AsyncClient, posting, make_candidate):
    company, job = posting
    candidate = await make_candidate()
    application = (await _apply(client, candidate, job["id"])).json()
    await client.patch(
        f"/api/v1/company/applications/{application['id']}/status",
        json={"status": "interview"},
        headers=company["headers"],
    )
    r = await client.delete(f"/api/v1/candidate/applications/{application['id']}", headers=candidate["headers"])
    assert r.status_code == 400


async def test_saved_jobs(client: AsyncClient, posting, make_candidate):
    company, job = posting
    candidate = await make_candidate()
    headers = candidate["headers"]

    assert (await client.post("/api/v1/candidate/saved-jobs", json={"job_id": job["id"]}, headers=headers)).status_code == 201
    assert (await client.post("/api/v1/candidate/saved-jobs", json={"job_id": job["id"]}, headers=headers)).status_code == 409
    assert (await client.post("/api/v1/candidate/saved-jobs", json={"job_id": "a" * 24}, headers=headers)).status_code == 404

    saved = (await client.get("/api/v1/candidate/saved-jobs", headers=headers)).json()
    assert [s["job"]["id"] for s in saved] == [job["id"]]

    # Deleted jobs drop out of the list
    await client.delete(f"/api/v1/company/jobs/{job['id']}", headers=company["headers"])
    assert (await client.get("/api/v1/candidate/saved-jobs", headers=headers)).json() == []

    assert (await client.delete(f"/api/v1/candidate/saved-jobs/{job['id']}", headers=headers)).status_code == 200
    assert (await client.delete(f"/api/v1/candidate/saved-jobs/{job['id']}", headers=headers)).status_code == 404


async def test_candidate_profile_update(client: AsyncClient, make_candidate):
    candidate = await make_candidate()
    r = await client.put(
        "/api/v1/candidate/me",
        json={
            "name": "Ana Souza",
            "skills": ["Python", "FastAPI"],
            "experiences": [{"title": "Dev", "company": "Acme", "start_date": "2022-01", "is_current": True}],
            "github": "https://github.com/ana",
        },
        headers=candidate["headers"],
    )
    assert r.status_code == 200
    body = r.json()
    assert body["skills"] == ["Python", "FastAPI"]
    assert body["experiences"][0]["company"] == "Acme"

    me = (await client.get("/api/v1/candidate/me", headers=candidate["headers"])).json()
    assert me["name"] == "Ana Souza"
