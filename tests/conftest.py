"""
Employee Document Portal - Test Configuration and Fixtures
"""
import os
import tempfile
from datetime import datetime, timedelta
from typing import Generator

import pytest

# Set testing environment before config is imported
os.environ['DATA_DIR'] = tempfile.mkdtemp(prefix='portal-test-')
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'

from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from app import app
from core.database import get_db
from core.dependencies import get_blob_storage
from core.security import create_access_token
from models import Base, FileRecordModel, UserModel
from schemas.user import Role
from utils.blob_storage import LocalBlobStorage
from utils.user_manager import UserManager, model_to_identity

PASSWORD = 'correct-horse-battery'

# Test database setup
test_engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)


class ReadOnlyBlobStorage(LocalBlobStorage):
    """Local storage on a mount that refuses reads and deletes"""

    def read(self, storage_ref):
        raise PermissionError(13, 'Permission denied')

    def delete(self, storage_ref):
        raise PermissionError(13, 'Read-only file system')


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    yield session
    session.close()
    Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def storage(tmp_path) -> LocalBlobStorage:
    return LocalBlobStorage(tmp_path / 'uploads')


@pytest.fixture
def client(db_session: Session, storage: LocalBlobStorage) -> Generator[TestClient, None, None]:
    """Create test client with database and storage overrides"""
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_blob_storage] = lambda: storage
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(db_session: Session):
    """Factory registering a user through UserManager"""
    manager = UserManager(db_session, bcrypt_rounds=4)

    def _make_user(username: str, role: Role = Role.EMPLOYEE, department: str = 'Engineering',
                   email: str = None) -> UserModel:
        return manager.create_user(
            username=username,
            email=email or f'{username.lower()}@example.com',
            password=PASSWORD,
            role=role,
            department=department,
        )

    return _make_user


@pytest.fixture
def make_file(db_session: Session):
    """Factory inserting a file record with a fixed creation time"""
    def _make_file(owner: UserModel, category: str, created_at: datetime,
                   filename: str = 'doc.pdf') -> FileRecordModel:
        record = FileRecordModel(
            owner_id=owner.id,
            filename=filename,
            storage_ref=f'{owner.id}-{category}-{created_at.timestamp()}-{filename}',
            mime_type='application/pdf',
            size_bytes=3,
            category=category,
            status='uploaded',
            created_at=created_at,
        )
        db_session.add(record)
        db_session.commit()
        return record

    return _make_file


@pytest.fixture
def employee(make_user) -> UserModel:
    return make_user('Alice', department='HR')


@pytest.fixture
def other_employee(make_user) -> UserModel:
    return make_user('Bob', department='Finance')


@pytest.fixture
def admin(make_user) -> UserModel:
    return make_user('Root', role=Role.ADMIN, department=None)


def token_for(user: UserModel, expires_delta: timedelta = None) -> str:
    return create_access_token(model_to_identity(user), expires_delta=expires_delta)


def auth_headers_for(user: UserModel) -> dict:
    return {'Authorization': f'Bearer {token_for(user)}'}


@pytest.fixture
def employee_headers(employee) -> dict:
    return auth_headers_for(employee)


@pytest.fixture
def other_headers(other_employee) -> dict:
    return auth_headers_for(other_employee)


@pytest.fixture
def admin_headers(admin) -> dict:
    return auth_headers_for(admin)
