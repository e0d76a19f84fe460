import pytest


def registration(document="4455", **extra):
    return {"token": "pass", "documentID": document, "name": "Rosa Díaz", "phone": "3001112233", **extra}


@pytest.mark.anyio
async def test_member_registration_and_profile(client):
    r = await client.post("/api/v1/members/", json=registration())
    assert r.status_code == 201, r.text
    member = r.json()
    assert member["document_id"] == "4455"
    assert member["willing_to_lead"] is False

    rdup = await client.post("/api/v1/members/", json=registration())
    assert rdup.status_code == 400
    assert rdup.json() == {"error": "Member already registered"}

    rput = await client.put(
        "/api/v1/members/",
        json={
            "token": "pass",
            "documentID": "4455",
            "maritalStatus": "casada",
            "baptismYear": 2010,
            "willingToLead": True,
            "birthDate": "1980-03-04",
        },
    )
    assert rput.status_code == 200, rput.text
    profile = rput.json()
    assert profile["marital_status"] == "casada"
    assert profile["baptism_year"] == 2010
    assert profile["willing_to_lead"] is True
    assert profile["name"] == "Rosa Díaz"

    # Fields left out keep their value, fields sent empty are cleared
    rclear = await client.put(
        "/api/v1/members/", json={"token": "pass", "documentID": "4455", "maritalStatus": None}
    )
    assert rclear.json()["marital_status"] is None
    assert rclear.json()["baptism_year"] == 2010

    rget = await client.get("/api/v1/members/", params={"documentID": "4455", "token": "pass"})
    assert rget.status_code == 200
    assert rget.json()["found"] is True
    assert rget.json()["member"]["birth_date"] == "1980-03-04"

    rnone = await client.get("/api/v1/members/", params={"documentID": "0000", "token": "pass"})
    assert rnone.json() == {"found": False, "member": None}


@pytest.mark.anyio
async def test_member_form_requires_turnstile(client):
    r = await client.get("/api/v1/members/", params={"documentID": "4455"})
    assert r.status_code == 400
    assert r.json() == {"error": "Turnstile token is required"}

    rpost = await client.post("/api/v1/members/", json=registration(token="invalid-input-response"))
    assert rpost.status_code == 403

    assert (await client.get("/api/v1/admin/members/")).json() == []


@pytest.mark.anyio
async def test_member_registration_validation(client):
    r = await client.post("/api/v1/members/", json=registration(phone="12"))
    assert r.status_code == 400
    assert r.json()["error"].startswith("Invalid phone")

    rmissing = await client.put(
        "/api/v1/members/", json={"token": "pass", "documentID": "nobody", "gender": "F"}
    )
    assert rmissing.status_code == 404
    assert rmissing.json() == {"error": "Member not found"}


@pytest.mark.anyio
async def test_dashboard_stats(client):
    for document, year in (("1", 2015), ("2", 2001), ("3", 2015), ("4", None)):
        await client.post("/api/v1/members/", json=registration(document=document))
        if year:
            await client.put(
                "/api/v1/members/", json={"token": "pass", "documentID": document, "baptismYear": year}
            )
    for reason in ("oracion", "oracion", "visita"):
        await client.post("/api/v1/friend/", json={"name": "Ana", "phone": "12345", "reason": reason})

    r = await client.get("/api/v1/admin/dashboard/")
    assert r.status_code == 200
    assert r.json() == {
        "total_members": 4,
        "total_friends": 3,
        "chart_data": [
            {"name": "Oracion", "value": 2},
            {"name": "Visita", "value": 1},
            {"name": "Informacion", "value": 0},
        ],
        "year_chart_data": [{"year": 2001, "count": 1}, {"year": 2015, "count": 2}],
    }
