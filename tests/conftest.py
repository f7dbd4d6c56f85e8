"""Pytest configuration and shared fixtures."""

import os


# Must be set before warden.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key-with-at-least-32-characters")

from collections.abc import AsyncGenerator  # noqa: E402
from datetime import timedelta  # noqa: E402

import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker  # noqa: E402

from warden.config import Settings, get_settings  # noqa: E402
from warden.core.auth.backend import (  # noqa: E402
    TokenCodec,
    generate_refresh_token,
    get_token_expiration,
)
from warden.core.database import Base, build_engine, get_db  # noqa: E402
from warden.main import create_app  # noqa: E402

# Import all models to ensure they're registered with Base.metadata
from warden.modules.accounts.models import Account, AccountRole, RefreshToken  # noqa: E402, F401
from warden.modules.permissions.models import Permission  # noqa: E402
from warden.modules.roles.models import Role, RolePermission  # noqa: E402
from tests.factories import AccountFactory, PermissionFactory, RoleFactory  # noqa: E402


# In-memory SQLite by default; point at PostgreSQL with TEST_DATABASE_URL
TEST_DATABASE_URL = os.environ.get("TEST_DATABASE_URL", "sqlite+aiosqlite:///:memory:")


@pytest.fixture
def test_settings() -> Settings:
    """Settings used by the application under test.

    The grant cookie is not marked Secure so it travels over plain
    http in the test client.
    """
    return Settings(
        secret_key=os.environ["SECRET_KEY"],
        environment="testing",
        grant_cookie_secure=False,
    )


@pytest.fixture
def codec(test_settings: Settings) -> TokenCodec:
    """Token codec sharing the application's secret."""
    return TokenCodec(
        test_settings.secret_key,
        algorithm=test_settings.jwt_algorithm,
        access_ttl=timedelta(hours=test_settings.access_token_expire_hours),
    )


@pytest.fixture
async def engine() -> AsyncGenerator[AsyncEngine, None]:
    """Create test database engine with a fresh schema."""
    engine = build_engine(TEST_DATABASE_URL)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """Provide a transactional database session for tests.

    Each test runs in its own transaction that is rolled back
    after the test completes, ensuring test isolation.
    """
    session_factory = async_sessionmaker(
        bind=engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )

    async with engine.connect() as conn:
        await conn.begin()

        async with session_factory(bind=conn) as session:
            yield session

        await conn.rollback()


@pytest.fixture
async def app(db: AsyncSession, test_settings: Settings):
    """Create test application instance."""
    application = create_app()

    # Every request shares the test transaction
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    application.dependency_overrides[get_db] = override_get_db
    application.dependency_overrides[get_settings] = lambda: test_settings

    yield application

    application.dependency_overrides.clear()


@pytest.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    """Provide async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client


# ============================================================
# Data Fixtures
# ============================================================


@pytest.fixture
async def account(db: AsyncSession) -> Account:
    """Create a persisted account whose password is TEST_PASSWORD."""
    account = AccountFactory.build()
    db.add(account)
    await db.flush()
    return account


@pytest.fixture
def auth_headers(account: Account, codec: TokenCodec) -> dict[str, str]:
    """Authorization header carrying a valid access token for ``account``."""
    token, _ = codec.create_access_token(account.id, account.email)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
async def authenticated_client(
    app, auth_headers: dict[str, str]
) -> AsyncGenerator[AsyncClient, None]:
    """Provide an authenticated async HTTP client for API testing."""
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers=auth_headers,
    ) as client:
        yield client


@pytest.fixture
async def live_session(db: AsyncSession, account: Account) -> RefreshToken:
    """Open a session for ``account`` the way login does."""
    session = RefreshToken(
        token_value=generate_refresh_token(),
        account_id=account.id,
        expires_at=get_token_expiration(7),
    )
    db.add(session)
    await db.flush()
    return session


@pytest.fixture
async def session_client(
    app, account: Account, live_session: RefreshToken, codec: TokenCodec
) -> AsyncGenerator[AsyncClient, None]:
    """Client whose access token is bound to ``live_session``.

    Protected actions accept only such tokens.
    """
    token, _ = codec.create_access_token(
        account.id, account.email, session_id=live_session.id
    )
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
        headers={"Authorization": f"Bearer {token}"},
    ) as client:
        yield client


@pytest.fixture
def grant_role(db: AsyncSession):
    """Return a helper that gives an account a new role with new permissions.

    Usage:
        role, permissions = await grant_role(account, ["/manage-inventory"])
    """

    async def _grant(
        account: Account,
        permission_urls: list[str],
    ) -> tuple[Role, list[Permission]]:
        role = RoleFactory.build()
        permissions = [PermissionFactory.build(url=url) for url in permission_urls]
        db.add(role)
        db.add_all(permissions)
        await db.flush()

        db.add_all(
            RolePermission(role_id=role.id, permission_id=p.id) for p in permissions
        )
        db.add(AccountRole(account_id=account.id, role_id=role.id))
        await db.flush()
        return role, permissions

    return _grant
