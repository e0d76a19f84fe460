from datetime import date

import pytest

from church_portal.services.courses import SeatAvailability, slugify

ADULT_BIRTH_DATE = "1988-02-10"


def course_payload(title="Matrimonios Sólidos", **extra):
    return {
        "title": title,
        "description": "Curso para parejas",
        "content": "Ocho sesiones los sábados",
        **extra,
    }


def enrollment_payload(document="7001", is_member=False, **extra):
    return {
        "token": "pass",
        "documentNumber": document,
        "fullName": "Carlos Mora",
        "phone": "3157654321",
        "birthDate": ADULT_BIRTH_DATE,
        "isMember": is_member,
        **extra,
    }


async def create_course(client, **kwargs):
    r = await client.post("/api/v1/admin/courses/", json=course_payload(**kwargs))
    assert r.status_code == 201, r.text
    return r.json()


def test_slugify_strips_accents_and_symbols():
    assert slugify("Matrimonios Sólidos 2025") == "matrimonios-solidos-2025"
    assert slugify("  ¿Finanzas   en Familia?  ") == "finanzas-en-familia"
    assert slugify("Pre-- Matrimonial") == "pre-matrimonial"


def test_seat_split_between_members_and_visitors():
    seats = SeatAvailability(capacity=5, enrollment_count=3, member_count=2, non_member_count=1)
    assert seats.member_quota == 2
    assert seats.non_member_quota == 3
    assert seats.member_spots_left == 0
    assert seats.non_member_spots_left == 2
    assert seats.is_full is False

    unlimited = SeatAvailability(capacity=None, enrollment_count=40)
    assert unlimited.member_quota is None
    assert unlimited.is_full is False

    full = SeatAvailability(capacity=2, enrollment_count=2, member_count=2)
    assert full.is_full is True


@pytest.mark.anyio
async def test_course_slugs_are_unique(client):
    first = await create_course(client)
    second = await create_course(client)
    assert first["slug"] == "matrimonios-solidos"
    assert second["slug"] == "matrimonios-solidos-1"
    assert first["color"] == "#4b207f"
    assert first["counts"] == {"enrollments": 0, "pending": 0, "confirmed": 0, "rejected": 0}

    r = await client.put(f"/api/v1/admin/courses/{second['id']}", json={"title": "Finanzas Sanas"})
    assert r.status_code == 200
    assert r.json()["slug"] == "finanzas-sanas"
    assert r.json()["description"] == "Curso para parejas"


@pytest.mark.anyio
async def test_course_field_validation(client):
    rcolor = await client.post("/api/v1/admin/courses/", json=course_payload(color="purple"))
    assert rcolor.status_code == 400
    assert rcolor.json() == {"error": "Invalid color format. Use hex format: #RRGGBB"}

    rcost = await client.post("/api/v1/admin/courses/", json=course_payload(cost=-5))
    assert rcost.status_code == 400
    assert rcost.json() == {"error": "Cost cannot be negative"}

    rblank = await client.post("/api/v1/admin/courses/", json=course_payload(title=" "))
    assert rblank.status_code == 400


@pytest.mark.anyio
async def test_enroll_and_check(client, verifier):
    course = await create_course(client, capacity=4)

    r = await client.post(f"/api/v1/courses/{course['slug']}/enroll", json=enrollment_payload(is_member=True))
    assert r.status_code == 201, r.text
    body = r.json()
    assert body["success"] is True
    assert body["message"] == "Inscripción registrada exitosamente"
    assert body["enrollment"]["status"] == "pending"
    assert verifier.calls[-1][0] == "pass"

    rpublic = await client.get(f"/api/v1/courses/{course['slug']}")
    seats = rpublic.json()
    assert seats["member_count"] == 1
    assert seats["member_spots_left"] == 1
    assert seats["non_member_spots_left"] == 2

    rdup = await client.post(f"/api/v1/courses/{course['slug']}/enroll", json=enrollment_payload(is_member=True))
    assert rdup.status_code == 400
    assert rdup.json() == {"error": "Ya estás inscrito en este curso"}

    rcheck = await client.post(
        f"/api/v1/courses/{course['slug']}/check-enrollment", json={"documentNumber": " 7001 "}
    )
    assert rcheck.json()["found"] is True
    assert rcheck.json()["enrollment"]["full_name"] == "Carlos Mora"

    rnone = await client.post(
        f"/api/v1/courses/{course['slug']}/check-enrollment", json={"documentNumber": "1"}
    )
    assert rnone.json() == {"found": False, "enrollment": None}

    rblank = await client.post(f"/api/v1/courses/{course['slug']}/check-enrollment", json={})
    assert rblank.status_code == 400
    assert rblank.json() == {"error": "Número de documento requerido"}


@pytest.mark.anyio
async def test_enrollment_rules(client):
    course = await create_course(client, capacity=1, cost=50)
    slug = course["slug"]

    rminor = await client.post(
        f"/api/v1/courses/{slug}/enroll",
        json=enrollment_payload(birthDate=date(date.today().year - 10, 1, 1).isoformat()),
    )
    assert rminor.status_code == 400
    assert rminor.json() == {"error": "Debes ser mayor de 18 años para inscribirte"}

    rmissing = await client.post(f"/api/v1/courses/{slug}/enroll", json=enrollment_payload(fullName="  "))
    assert rmissing.json() == {"error": "Todos los campos son requeridos"}

    rproof = await client.post(f"/api/v1/courses/{slug}/enroll", json=enrollment_payload())
    assert rproof.json() == {"error": "Se requiere comprobante de pago para este curso"}

    rok = await client.post(
        f"/api/v1/courses/{slug}/enroll",
        json=enrollment_payload(paymentProofUrl="https://files.example/recibo.jpg"),
    )
    assert rok.status_code == 201

    rfull = await client.post(
        f"/api/v1/courses/{slug}/enroll",
        json=enrollment_payload(document="7002", paymentProofUrl="https://files.example/r2.jpg"),
    )
    assert rfull.status_code == 400
    assert rfull.json() == {"error": "El curso ha alcanzado su capacidad máxima"}

    rnotfound = await client.post("/api/v1/courses/no-existe/enroll", json=enrollment_payload())
    assert rnotfound.status_code == 404
    assert rnotfound.json() == {"error": "Curso no encontrado"}


@pytest.mark.anyio
async def test_enroll_requires_turnstile(client):
    course = await create_course(client)
    payload = enrollment_payload()
    payload.pop("token")

    r = await client.post(f"/api/v1/courses/{course['slug']}/enroll", json=payload)
    assert r.status_code == 400
    assert r.json() == {"error": "Turnstile token is required"}

    radmin = await client.get(f"/api/v1/admin/courses/{course['id']}/enrollments")
    assert radmin.json() == []


@pytest.mark.anyio
async def test_admin_reviews_enrollments(client):
    course = await create_course(client)
    enrolled = (await client.post(
        f"/api/v1/courses/{course['slug']}/enroll", json=enrollment_payload()
    )).json()["enrollment"]

    r = await client.put(
        f"/api/v1/admin/courses/{course['id']}/enrollments",
        json={"enrollmentId": enrolled["id"], "status": "confirmed"},
    )
    assert r.status_code == 200
    assert r.json()["status"] == "confirmed"

    rcourse = await client.get(f"/api/v1/admin/courses/{course['id']}")
    assert rcourse.json()["counts"] == {"enrollments": 1, "pending": 0, "confirmed": 1, "rejected": 0}

    rwrong = await client.put(
        f"/api/v1/admin/courses/{course['id'] + 1}/enrollments",
        json={"enrollmentId": enrolled["id"], "status": "rejected"},
    )
    assert rwrong.status_code == 404

    rdelete = await client.delete(f"/api/v1/admin/courses/{course['id']}")
    assert rdelete.json() == {"success": True}
    assert (await client.get(f"/api/v1/admin/courses/{course['id']}")).status_code == 404
    assert (await client.get("/api/v1/admin/courses/")).json() == []


@pytest.mark.anyio
async def test_inactive_course_is_hidden(client):
    course = await create_course(client, is_active=False)
    r = await client.get(f"/api/v1/courses/{course['slug']}")
    assert r.status_code == 404
