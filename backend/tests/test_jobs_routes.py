from __future__ import annotations

API = "/api/jobs"


def _create_job(client, **fields):
    body = {"companyName": "Acme", "positionTitle": "Engineer", **fields}
    res = client.post(f"{API}/", json=body)
    assert res.status_code == 201, res.text
    return res.json()["data"]


def test_create_job_defaults(client):
    job = _create_job(client)
    assert job["companyName"] == "Acme"
    assert job["positionTitle"] == "Engineer"
    assert job["isSaved"] is True
    assert job["techStack"] == []
    assert job["location"] is None


def test_create_job_validation(client):
    res = client.post(f"{API}/", json={"companyName": "", "positionTitle": "Eng"})
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "companyName"

    res = client.post(f"{API}/", json={"companyName": "A", "positionTitle": "B", "sourceUrl": "not a url"})
    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "sourceUrl"

    res = client.post(f"{API}/", json={"companyName": "A", "positionTitle": "B", "techStack": ["x"] * 51})
    assert res.status_code == 400

    # Empty string means "no URL".
    job = _create_job(client, sourceUrl="")
    assert job["sourceUrl"] is None


def test_list_jobs_filters(client):
    _create_job(client, companyName="Acme GmbH", location="Berlin", techStack=["Python", "PostgreSQL"])
    _create_job(client, companyName="Globex", positionTitle="Data Engineer", location="Munich", techStack=["Go"])
    _create_job(client, companyName="Initech", location="Berlin", techStack=["TypeScript"], isSaved=False)

    def names(params):
        res = client.get(f"{API}/", params=params)
        assert res.status_code == 200
        return sorted(j["companyName"] for j in res.json()["data"]["jobs"])

    assert names({"companyName": "acme"}) == ["Acme GmbH"]
    assert names({"positionTitle": "DATA"}) == ["Globex"]
    assert names({"location": "berlin"}) == ["Acme GmbH", "Initech"]
    assert names({"techStack": "Go,TypeScript"}) == ["Globex", "Initech"]
    assert names([("techStack", "Python"), ("techStack", "Go")]) == ["Acme GmbH", "Globex"]
    assert names({"isSaved": "false"}) == ["Initech"]
    assert names({"location": "Berlin", "isSaved": "true"}) == ["Acme GmbH"]


def test_tech_stack_filter_matches_whole_entries(client):
    _create_job(client, companyName="A", techStack=["JavaScript"])
    res = client.get(f"{API}/", params={"techStack": "Java"})
    assert res.json()["data"]["jobs"] == []


def test_list_jobs_paginates_newest_first(client):
    for i in range(12):
        _create_job(client, companyName=f"Company {i:02d}")

    first = client.get(f"{API}/", params={"page": 1, "limit": 5}).json()["data"]
    assert first["pagination"] == {"page": 1, "limit": 5, "total": 12, "totalPages": 3}
    assert len(first["jobs"]) == 5

    last = client.get(f"{API}/", params={"page": 3, "limit": 5}).json()["data"]
    assert len(last["jobs"]) == 2

    all_ids = [j["id"] for j in client.get(f"{API}/", params={"limit": 100}).json()["data"]["jobs"]]
    assert len(set(all_ids)) == 12


def test_update_job_partial_semantics(client):
    job = _create_job(client, location="Berlin", techStack=["Python"])

    res = client.put(f"{API}/{job['id']}", json={"location": None, "companyName": "Acme AG"})
    assert res.status_code == 200
    updated = res.json()["data"]
    assert updated["location"] is None
    assert updated["companyName"] == "Acme AG"
    assert updated["techStack"] == ["Python"]

    # An empty tech stack does not wipe the existing one.
    res = client.put(f"{API}/{job['id']}", json={"techStack": []})
    assert res.json()["data"]["techStack"] == ["Python"]


def test_update_job_requires_a_field(client):
    job = _create_job(client)
    res = client.put(f"{API}/{job['id']}", json={})
    assert res.status_code == 400
    assert res.json()["errors"][0]["message"] == "At least one field must be provided for update"


def test_get_job_includes_applications(client):
    job = _create_job(client)
    client.post("/api/applications/", json={"jobId": job["id"]})

    res = client.get(f"{API}/{job['id']}")
    assert res.status_code == 200
    apps = res.json()["data"]["applications"]
    assert len(apps) == 1
    assert apps[0]["status"] == "TO_APPLY"


def test_delete_job_cascades_to_applications(client):
    job = _create_job(client)
    app_id = client.post("/api/applications/", json={"jobId": job["id"]}).json()["data"]["id"]

    res = client.delete(f"{API}/{job['id']}")
    assert res.status_code == 200
    assert res.json() == {"success": True, "message": "Job deleted successfully"}

    assert client.get(f"{API}/{job['id']}").status_code == 404
    assert client.get(f"/api/applications/{app_id}").status_code == 404


def test_job_statistics(client):
    a = _create_job(client)
    _create_job(client, isSaved=False)
    _create_job(client)
    client.post("/api/applications/", json={"jobId": a["id"]})
    client.post("/api/applications/", json={"jobId": a["id"]})

    stats = client.get(f"{API}/statistics").json()["data"]
    assert stats == {
        "total": 3,
        "saved": 2,
        "unsaved": 1,
        "withApplications": 1,
        "withoutApplications": 2,
    }


def test_search_matches_company_position_or_description(client):
    _create_job(client, companyName="Acme", positionTitle="Backend Engineer")
    _create_job(client, companyName="Globex", positionTitle="Designer", jobDescription="We love BACKEND work")
    _create_job(client, companyName="Initech", positionTitle="Sales")

    res = client.get(f"{API}/search", params={"q": "backend"})
    assert res.status_code == 200
    assert sorted(j["companyName"] for j in res.json()["data"]) == ["Acme", "Globex"]

    limited = client.get(f"{API}/search", params={"q": "e", "limit": 2}).json()["data"]
    assert len(limited) == 2
