import os

# Configuración de pruebas antes de importar la aplicación
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["REDIS_URL"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from gymflow.db.base import Base
from gymflow.db.session import get_db, get_session_factory
from gymflow.main import app
from gymflow.models.user import UserRole
from gymflow.models.user_gym import GymRoleType
from tests.factories import add_to_roster, auth_headers, make_gym, make_user


# Usar una base de datos en memoria para pruebas
SQLALCHEMY_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="function")
def db_engine():
    """
    Tablas nuevas en cada test: los servicios hacen commit y rollback reales.
    """
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def db(db_engine):
    session = TestingSessionLocal()
    yield session
    session.close()


@pytest.fixture(scope="function")
def client(db):
    """
    Cliente de prueba que comparte la sesión del test.
    """
    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_factory] = lambda: TestingSessionLocal
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()


# ---------- cuentas ----------

@pytest.fixture(scope="function")
def gym(db):
    return make_gym(db, "central@gym.test", "Central Gym")


@pytest.fixture(scope="function")
def other_gym(db):
    return make_gym(db, "norte@gym.test", "Gym Norte")


@pytest.fixture(scope="function")
def admin_user(db):
    return make_user(db, "admin@test.com", UserRole.ADMIN, "Admin Test")


@pytest.fixture(scope="function")
def member_user(db):
    return make_user(db, "member@test.com", UserRole.MEMBER, "Member Test")


@pytest.fixture(scope="function")
def other_member(db):
    return make_user(db, "member2@test.com", UserRole.MEMBER, "Member Two")


@pytest.fixture(scope="function")
def trainer_user(db):
    return make_user(db, "trainer@test.com", UserRole.TRAINER, "Trainer Test")


@pytest.fixture(scope="function")
def gym_trainer(db, gym, trainer_user):
    """Entrenador que ya pertenece al roster de ``gym``."""
    add_to_roster(db, trainer_user, gym, GymRoleType.TRAINER)
    return trainer_user


@pytest.fixture(scope="function")
def gym_headers(gym):
    return auth_headers(gym.id, UserRole.GYM)


@pytest.fixture(scope="function")
def admin_headers(admin_user):
    return auth_headers(admin_user.id, UserRole.ADMIN)


@pytest.fixture(scope="function")
def member_headers(member_user):
    return auth_headers(member_user.id, UserRole.MEMBER)


@pytest.fixture(scope="function")
def other_member_headers(other_member):
    return auth_headers(other_member.id, UserRole.MEMBER)


@pytest.fixture(scope="function")
def trainer_headers(trainer_user):
    return auth_headers(trainer_user.id, UserRole.TRAINER)
