import pytest
from sqlalchemy import func, select

from church_portal.models.child import Child, ChildGuardian
from church_portal.models.enrollment import Enrollment
from church_portal.models.member import Member


def ana_ruiz(program_id, **overrides):
    payload = {
        "token": "pass",
        "programId": program_id,
        "childName": "Ana Ruiz",
        "childDocumentID": "1001",
        "useGuardian": True,
        "guardianName": "Luis Ruiz",
        "guardianDocumentID": "500",
        "guardianPhone": "3000000000",
    }
    payload.update(overrides)
    return payload


async def row_counts(session_factory):
    async with session_factory() as s:
        counts = {}
        for model in (Child, Member, ChildGuardian, Enrollment):
            counts[model.__tablename__] = await s.scalar(select(func.count()).select_from(model))
        return counts


@pytest.mark.anyio
async def test_enroll_then_resubmit(client, session_factory, make_program):
    program = await make_program()

    r = await client.post("/api/v1/enrollments/", json=ana_ruiz(program.id))
    assert r.status_code == 201, r.text
    created = r.json()
    assert created["message"] == "Enrollment created successfully"
    assert await row_counts(session_factory) == {
        "children": 1, "members": 1, "child_guardians": 1, "enrollments": 1,
    }

    async with session_factory() as s:
        enrollment = await s.get(Enrollment, created["enrollmentId"])
        first_updated_at = enrollment.updated_at
        child = await s.scalar(select(Child).where(Child.document_id == "1001"))
        assert enrollment.program_id == program.id
        assert enrollment.child_id == child.id
        link = await s.scalar(select(ChildGuardian).where(ChildGuardian.child_id == child.id))
        assert link.relationship.value == "guardian"

    r2 = await client.post("/api/v1/enrollments/", json=ana_ruiz(program.id))
    assert r2.status_code == 200, r2.text
    assert r2.json() == {
        "message": "Enrollment updated successfully",
        "enrollmentId": created["enrollmentId"],
    }
    assert await row_counts(session_factory) == {
        "children": 1, "members": 1, "child_guardians": 1, "enrollments": 1,
    }
    async with session_factory() as s:
        enrollment = await s.get(Enrollment, created["enrollmentId"])
        assert enrollment.updated_at > first_updated_at


@pytest.mark.anyio
async def test_same_child_in_two_programs(client, session_factory, make_program):
    first = await make_program(title="Coro Infantil", department="ministerio-musica")
    second = await make_program(title="Club de Aventureros", department="club-aventureros")

    r1 = await client.post("/api/v1/enrollments/", json=ana_ruiz(first.id))
    r2 = await client.post("/api/v1/enrollments/", json=ana_ruiz(second.id))

    assert (r1.status_code, r2.status_code) == (201, 201)
    assert r1.json()["enrollmentId"] != r2.json()["enrollmentId"]
    counts = await row_counts(session_factory)
    assert counts["children"] == 1
    assert counts["enrollments"] == 2


@pytest.mark.anyio
async def test_parent_mode_enrollment(client, session_factory, make_program):
    program = await make_program()
    payload = {
        "token": "pass",
        "programId": program.id,
        "childName": "Mateo Gómez",
        "childDocumentID": "2002",
        "childGender": "male",
        "childBirthDate": "2016-05-14",
        "useGuardian": False,
        "fatherName": "Carlos Gómez",
        "fatherDocumentID": "700",
        "fatherPhone": "3001112222",
        "motherName": "Lucía Pérez",
        "motherDocumentID": "701",
        "motherPhone": "3003334444",
    }

    r = await client.post("/api/v1/enrollments/", json=payload)

    assert r.status_code == 201, r.text
    async with session_factory() as s:
        result = await s.execute(select(ChildGuardian.relationship))
        assert sorted(rel.value for rel in result.scalars().all()) == ["father", "mother"]


@pytest.mark.anyio
async def test_missing_guardian_field_is_400_without_writes(client, session_factory, make_program):
    program = await make_program()

    r = await client.post("/api/v1/enrollments/", json=ana_ruiz(program.id, guardianPhone=""))

    assert r.status_code == 400
    assert r.json() == {"error": "Missing required guardian fields"}
    assert set((await row_counts(session_factory)).values()) == {0}


@pytest.mark.anyio
async def test_missing_parent_field_is_400_without_writes(client, session_factory, make_program):
    program = await make_program()
    payload = ana_ruiz(program.id, useGuardian=False, fatherName="Carlos", fatherDocumentID="700")

    r = await client.post("/api/v1/enrollments/", json=payload)

    assert r.status_code == 400
    assert r.json() == {"error": "Missing required parent fields"}
    assert set((await row_counts(session_factory)).values()) == {0}


@pytest.mark.anyio
async def test_missing_child_document_is_400(client, make_program):
    program = await make_program()
    payload = ana_ruiz(program.id)
    del payload["childDocumentID"]

    r = await client.post("/api/v1/enrollments/", json=payload)

    assert r.status_code == 400
    assert r.json() == {"error": "Missing required child fields"}


@pytest.mark.anyio
async def test_whitespace_only_name_counts_as_missing(client, session_factory, make_program):
    program = await make_program()

    r = await client.post("/api/v1/enrollments/", json=ana_ruiz(program.id, guardianName="   "))

    assert r.status_code == 400
    assert r.json() == {"error": "Missing required guardian fields"}
    assert set((await row_counts(session_factory)).values()) == {0}


@pytest.mark.anyio
@pytest.mark.parametrize("field, value", [("childBirthDate", "14/05/2016"), ("programId", "abc")])
async def test_malformed_field_is_400_without_writes(client, session_factory, make_program, field, value):
    program = await make_program()

    r = await client.post("/api/v1/enrollments/", json=ana_ruiz(program.id, **{field: value}))

    assert r.status_code == 400
    assert r.json()["error"].startswith(f"Invalid {field}")
    assert r.json()["details"][0]["loc"] == ["body", field]
    assert set((await row_counts(session_factory)).values()) == {0}


@pytest.mark.anyio
async def test_inactive_program_is_404_without_writes(client, session_factory, make_program):
    program = await make_program(is_active=False)

    r = await client.post("/api/v1/enrollments/", json=ana_ruiz(program.id))

    assert r.status_code == 404
    assert r.json() == {"error": "Program not found or inactive"}
    assert set((await row_counts(session_factory)).values()) == {0}


@pytest.mark.anyio
async def test_missing_turnstile_token(client, verifier, make_program):
    program = await make_program()
    payload = ana_ruiz(program.id)
    del payload["token"]

    r = await client.post("/api/v1/enrollments/", json=payload)

    assert r.status_code == 400
    assert r.json() == {"error": "Turnstile token is required"}
    assert verifier.calls == []


@pytest.mark.anyio
async def test_expired_turnstile_token_is_retryable(client, session_factory, make_program):
    program = await make_program()

    r = await client.post(
        "/api/v1/enrollments/", json=ana_ruiz(program.id, token="timeout-or-duplicate")
    )

    assert r.status_code == 400
    assert r.json() == {
        "error": "Invalid Turnstile token: timeout-or-duplicate",
        "code": "TURNSTILE_TIMEOUT_OR_DUPLICATE",
    }
    assert set((await row_counts(session_factory)).values()) == {0}


@pytest.mark.anyio
async def test_rejected_turnstile_token_is_403(client, make_program):
    program = await make_program()

    r = await client.post(
        "/api/v1/enrollments/", json=ana_ruiz(program.id, token="invalid-input-response")
    )

    assert r.status_code == 403
    assert "code" not in r.json()


@pytest.mark.anyio
async def test_unexpected_failure_is_500(client, make_program, monkeypatch):
    from church_portal.services.enrollment import EnrollmentService

    program = await make_program()

    async def boom(self, request, now):
        raise RuntimeError("database went away")

    monkeypatch.setattr(EnrollmentService, "upsert_child", boom)

    r = await client.post("/api/v1/enrollments/", json=ana_ruiz(program.id))

    assert r.status_code == 500
    assert r.json() == {"error": "Failed to create enrollment"}
