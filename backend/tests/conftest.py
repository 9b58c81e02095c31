"""
Pytest fixtures for LeaseDesk backend tests.

Provides test database setup, seeded users, and test client.
"""

import pytest
from leasedesk import create_app
from leasedesk.extensions import db
from leasedesk.models import User, USER_STATUS_ACTIVE
from leasedesk.services.registry import get_services, seed_defaults
from leasedesk.time_utils import utcnow


ADMIN_PASSWORD = "admin123"
USER_PASSWORD = "Password123!"


@pytest.fixture(scope='session')
def app():
    """Create application for testing."""
    app = create_app({
        'TESTING': True,
        'SQLALCHEMY_DATABASE_URI': 'sqlite://',
        'SQLALCHEMY_TRACK_MODIFICATIONS': False,
        'SECRET_KEY': 'test-secret',
        'JWT_SECRET': 'test-jwt-secret',
        'BCRYPT_ROUNDS': 4,
        'ADMIN_DEFAULT_PASSWORD': ADMIN_PASSWORD,
        'CORS_ORIGINS': ('http://localhost:5173',),
    })

    with app.app_context():
        db.create_all()
        yield app
        db.drop_all()


@pytest.fixture(scope='function')
def client(app):
    """Create test client."""
    return app.test_client()


@pytest.fixture(scope='function')
def db_session(app):
    """Create fresh database for each test."""
    with app.app_context():
        # Clear all data but keep schema
        meta = db.metadata
        for table in reversed(meta.sorted_tables):
            db.session.execute(table.delete())
        db.session.commit()

        yield db.session

        # Cleanup after test
        db.session.rollback()


@pytest.fixture(scope='function')
def services(app, db_session):
    """The application's service bundle, bound to db.session."""
    return get_services()


@pytest.fixture(scope='function')
def seeded(app, services):
    """Primary admin, settings row and default agents."""
    seed_defaults(services, app.config)
    return services


@pytest.fixture(scope='function')
def admin(seeded, db_session):
    """The primary admin account (password: admin123)."""
    return db_session.query(User).filter_by(username="admin").one()


def make_user(db_session, services, username: str, role: str = "user", password: str = USER_PASSWORD) -> User:
    user = User(
        username=username,
        password_hash=services.passwords.hash(password),
        role=role,
        status=USER_STATUS_ACTIVE,
        created_at=utcnow(),
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture(scope='function')
def regular_user(db_session, seeded):
    """A non-admin user (role: user)."""
    return make_user(db_session, seeded, "alice")


@pytest.fixture(scope='function')
def second_admin(db_session, seeded):
    """An admin account other than the primary admin."""
    return make_user(db_session, seeded, "bob", role="admin")


def get_auth_token(client, username: str, password: str) -> str:
    """Helper to get auth token for a user."""
    response = client.post('/api/auth/login', json={
        'username': username,
        'password': password
    })
    if response.status_code == 200:
        return response.json.get('token')
    return None


def auth_headers(token: str) -> dict:
    """Helper to create Authorization headers."""
    return {'Authorization': f'Bearer {token}'}


@pytest.fixture(scope='function')
def admin_headers(client, admin):
    return auth_headers(get_auth_token(client, "admin", ADMIN_PASSWORD))


@pytest.fixture(scope='function')
def user_headers(client, regular_user):
    return auth_headers(get_auth_token(client, "alice", USER_PASSWORD))


def agreement_payload(**overrides) -> dict:
    """Minimal valid agreement body in the client's camelCase."""
    payload = {
        "ownerName": "A",
        "location": "L1",
        "tokenNumber": "T-100",
        "totalPayment": 1000,
        "actualCost": 400,
        "agentCommission": 50,
        "otherExpenses": 10,
    }
    payload.update(overrides)
    return payload
