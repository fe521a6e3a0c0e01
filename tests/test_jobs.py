# Copyright (C) 2025 EmpregaBem Contributors
# SPDX-License-Identifier: GPL-3.0-or-later

"""Job posting (company) and public job listing."""

import pytest
from httpx import AsyncClient

from conftest import job_payload

pytestmark = pytest.mark.anyio


async def test_create_job(client: AsyncClient, make_company, make_job):
    company = await make_company(name="Acme")
    job = await make_job(company)
    assert job["company_id"] == company["company"]["id"]
    assert job["company"] == "Acme"
    assert job["is_active"] is True
    assert job["views"] == 0
    assert job["applicants"] == 0

    mine = await client.get("/api/v1/company/jobs", headers=company["headers"])
    assert [j["id"] for j in mine.json()] == [job["id"]]


async def test_create_job_validation(client: AsyncClient, make_company):
    company = await make_company()
    r = await client.post("/api/v1/company/jobs", json={"title": ""}, headers=company["headers"])
    assert r.status_code == 422


async def test_public_listing_filters(client: AsyncClient, make_company, make_job):
    company = await make_company()
    sp = await make_job(company, location="São Paulo, SP", salary=5000, level="Junior")
    rj = await make_job(company, location="Rio de Janeiro, RJ", salary=12000, job_type="PJ")
    hidden = await make_job(company, location="Remote")
    r = await client.patch(f"/api/v1/company/jobs/{hidden['id']}/deactivate", headers=company["headers"])
    assert r.json()["is_active"] is False

    all_jobs = (await client.get("/api/v1/jobs")).json()
    assert {j["id"] for j in all_jobs} == {sp["id"], rj["id"]}

    by_location = (await client.get("/api/v1/jobs", params={"location": "rio"})).json()
    assert [j["id"] for j in by_location] == [rj["id"]]

    by_type = (await client.get("/api/v1/jobs", params={"job_type": "pj"})).json()
    assert [j["id"] for j in by_type] == [rj["id"]]

    by_level = (await client.get("/api/v1/jobs", params={"level": "JUNIOR"})).json()
    assert [j["id"] for j in by_level] == [sp["id"]]

    by_salary = (await client.get("/api/v1/jobs", params={"min_salary": 10000})).json()
    assert [j["id"] for j in by_salary] == [rj["id"]]


async def test_priority_orders_listing(client: AsyncClient, make_company, make_job):
    company = await make_company()
    normal = await make_job(company, title="Normal")
    featured = await make_job(company, title="Featured", priority=10)
    listing = (await client.get("/api/v1/jobs")).json()
    assert [j["id"] for j in listing] == [featured["id"], normal["id"]]


async def test_get_job_and_views(client: AsyncClient, make_company, make_job):
    company = await make_company()
    job = await make_job(company)

    r = await client.post(f"/api/v1/jobs/{job['id']}/view")
    assert r.status_code == 200
    await client.post(f"/api/v1/jobs/{job['id']}/view")

    r = await client.get(f"/api/v1/jobs/{job['id']}")
    assert r.status_code == 200
    assert r.json()["views"] == 2


async def test_job_id_validation(client: AsyncClient):
    assert (await client.get("/api/v1/jobs/not-an-id")).status_code == 400
    assert (await client.get("/api/v1/jobs/" + "0" * 24)).status_code == 404
    assert (await client.post("/api/v1/jobs/" + "0" * 24 + "/view")).status_code == 404


async def test_update_and_delete_job(client: AsyncClient, make_company, make_job):
    company = await make_company()
    job = await make_job(company)

    r = await client.put(
        f"/api/v1/company/jobs/{job['id']}",
        json=job_payload(title="Senior Backend Developer", level="Senior"),
        headers=company["headers"],
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Senior Backend Developer"

    r = await client.delete(f"/api/v1/company/jobs/{job['id']}", headers=company["headers"])
    assert r.status_code == 200
    assert (await client.get(f"/api/v1/jobs/{job['id']}")).status_code == 404


async def test_other_company_cannot_manage_job(client: AsyncClient, make_company, make_job):
    owner = await make_company()
    intruder = await make_company()
    job = await make_job(owner)

    for method, path, kwargs in [
        ("PUT", f"/api/v1/company/jobs/{job['id']}", {"json": job_payload()}),
        ("DELETE", f"/api/v1/company/jobs/{job['id']}", {}),
        ("PATCH", f"/api/v1/company/jobs/{job['id']}/deactivate", {}),
        ("GET", f"/api/v1/company/jobs/{job['id']}/applicants", {}),
    ]:
        r = await client.request(method, path, headers=intruder["headers"], **kwargs)
        assert r.status_code == 403, (method, path)

    assert (await client.get(f"/api/v1/jobs/{job['id']}")).status_code == 200


async def test_company_profile_update(client: AsyncClient, make_company):
    company = await make_company()
    r = await client.put(
        "/api/v1/company/me",
        json={"name": "New Name", "about": "We build things", "sector": "Tech"},
        headers=company["headers"],
    )
    assert r.status_code == 200
    body = r.json()
    assert body["name"] == "New Name"
    assert body["sector"] == "Tech"
    assert body["email"] == company["company"]["email"]
