import os
import sys
from pathlib import Path

import pytest

# Ensure project root is on sys.path so `import church_portal` works during test collection
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Provide minimal env vars required by church_portal.core.config.Settings
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret")

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlmodel import SQLModel  # noqa: E402

from church_portal.core.dependencies import get_current_active_user  # noqa: E402
from church_portal.core.turnstile import VerificationResult, get_turnstile_verifier  # noqa: E402
from church_portal.db import base  # noqa: E402,F401
from church_portal.db.session import enable_sqlite_savepoints, get_session  # noqa: E402
from church_portal.main import app  # noqa: E402
from church_portal.models.enums import AdminRole  # noqa: E402
from church_portal.models.program import Program  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
async def engine(tmp_path):
    # File database: the app and the test each get their own connection
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}", future=True)
    enable_sqlite_savepoints(engine)
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


class FakeVerifier:
    """Stands in for Cloudflare: tokens are 'pass' or the error code to return."""

    def __init__(self):
        self.calls = []

    async def verify(self, token, secret_key):
        self.calls.append((token, secret_key))
        if token == "pass":
            return VerificationResult(success=True)
        return VerificationResult(success=False, error=token)


@pytest.fixture
def verifier():
    return FakeVerifier()


@pytest.fixture
async def client(session_factory, verifier):
    async def _get_session_override():
        async with session_factory() as s:
            yield s

    # stub auth to return an active admin
    async def fake_current_active_user():
        class _U:
            id = 1
            email = "admin@example.com"
            full_name = "Test Admin"
            role = AdminRole.SUPER_ADMIN
            is_active = True
        return _U()

    app.dependency_overrides[get_session] = _get_session_override
    app.dependency_overrides[get_current_active_user] = fake_current_active_user
    app.dependency_overrides[get_turnstile_verifier] = lambda: verifier

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest.fixture
def make_program(session_factory):
    async def _make(title="Escuela de Vacaciones", department="ministerio-infantil-adolescente", is_active=True):
        async with session_factory() as s:
            program = Program(title=title, department=department, is_active=is_active)
            s.add(program)
            await s.commit()
            await s.refresh(program)
            return program
    return _make
