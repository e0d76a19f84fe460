import pytest

from church_portal.core.dependencies import get_current_active_user
from church_portal.core.security import create_refresh_token, get_password_hash
from church_portal.main import app
from church_portal.models.enums import AdminRole
from church_portal.models.user import AdminUser


@pytest.fixture
async def admin_user(session_factory):
    async with session_factory() as s:
        user = AdminUser(
            email="pastor@example.com",
            password_hash=get_password_hash("secret"),
            full_name="Pastor Admin",
            role=AdminRole.SUPER_ADMIN,
        )
        s.add(user)
        await s.commit()
        await s.refresh(user)
        return user


@pytest.fixture
def real_auth(client):
    app.dependency_overrides.pop(get_current_active_user, None)
    return client


async def login(client, password="secret"):
    return await client.post(
        "/api/v1/auth/login",
        data={"username": "pastor@example.com", "password": password},
    )


@pytest.mark.anyio
async def test_login_and_me(real_auth, admin_user):
    r = await login(real_auth)
    assert r.status_code == 200, r.text
    tokens = r.json()
    assert tokens["token_type"] == "bearer"

    rme = await real_auth.get(
        "/api/v1/users/me", headers={"Authorization": f"Bearer {tokens['access_token']}"}
    )
    assert rme.status_code == 200
    assert rme.json()["email"] == "pastor@example.com"
    assert rme.json()["role"] == "super_admin"


@pytest.mark.anyio
async def test_wrong_password(real_auth, admin_user):
    r = await login(real_auth, password="nope")

    assert r.status_code == 401


@pytest.mark.anyio
async def test_refresh_token_cannot_access_admin(real_auth, admin_user):
    refresh = create_refresh_token(subject=admin_user.id)

    r = await real_auth.get(
        "/api/v1/admin/members/", headers={"Authorization": f"Bearer {refresh}"}
    )

    assert r.status_code == 401


@pytest.mark.anyio
async def test_refresh_rotates_tokens(real_auth, admin_user):
    tokens = (await login(real_auth)).json()

    r = await real_auth.post("/api/v1/auth/refresh", json={"refresh_token": tokens["refresh_token"]})
    assert r.status_code == 200
    assert set(r.json()) == {"access_token", "refresh_token", "token_type"}

    rbad = await real_auth.post("/api/v1/auth/refresh", json={"refresh_token": tokens["access_token"]})
    assert rbad.status_code == 401


@pytest.mark.anyio
async def test_super_admin_creates_admin(client):
    payload = {"email": "secretaria@example.com", "full_name": "Secretaría", "password": "x"}

    r = await client.post("/api/v1/users/", json=payload)
    assert r.status_code == 201, r.text
    assert r.json()["role"] == "admin"

    rdup = await client.post("/api/v1/users/", json=payload)
    assert rdup.status_code == 400


@pytest.mark.anyio
async def test_admin_cannot_create_users(client):
    async def fake_admin():
        class _U:
            id = 7
            role = AdminRole.ADMIN
            is_active = True
        return _U()

    app.dependency_overrides[get_current_active_user] = fake_admin

    r = await client.post(
        "/api/v1/users/", json={"email": "x@example.com", "full_name": "X", "password": "x"}
    )

    assert r.status_code == 403
