"""
Complaint Desk - Test Configuration and Fixtures
"""
import os
from typing import Callable, Dict, Generator

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment before the app reads its settings
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['JWT_SECRET_KEY'] = 'test-jwt-secret-key-for-testing'
os.environ['BCRYPT_ROUNDS'] = '4'
os.environ['ENABLE_DEMO_SEED'] = 'true'

from complaint_desk.main import app
from complaint_desk.api.deps import get_db
from complaint_desk.core.security import create_access_token, get_password_hash
from complaint_desk.db.base import Base
from complaint_desk.db.session import init_db
from complaint_desk.models import Category, Department, User
from complaint_desk.models.enums import RoleEnum
from complaint_desk.services.notifier import ComplaintNotifier

fake = Faker()

API = '/api/v1'

# One in-memory database shared by every session in a test
test_engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture(scope='function')
def db_session() -> Generator[Session, None, None]:
    """Fresh schema and session for each test"""
    init_db(test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Test client with database override and a clean notifier"""
    def override_get_db():
        db = TestSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.state.notifier = ComplaintNotifier()

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def departments(db_session: Session) -> Dict[str, Category]:
    """Two departments with two categories each, keyed by category name"""
    it = Department(name='IT Support', description='Technical issues')
    hr = Department(name='HR', description='Human resources')
    db_session.add_all([it, hr])
    db_session.flush()

    categories = {
        'Hardware': Category(name='Hardware', department_id=it.id),
        'Software': Category(name='Software', department_id=it.id),
        'Payroll': Category(name='Payroll', department_id=hr.id),
        'Benefits': Category(name='Benefits', department_id=hr.id),
    }
    db_session.add_all(categories.values())
    db_session.commit()
    return categories


@pytest.fixture
def category(departments: Dict[str, Category]) -> Category:
    return departments['Hardware']


@pytest.fixture
def make_user(db_session: Session) -> Callable[..., User]:
    """Factory creating users straight in the database"""
    def _make_user(role: RoleEnum = RoleEnum.USER, password: str = 'password123', **kwargs) -> User:
        user = User(
            name=kwargs.pop('name', fake.name()),
            email=kwargs.pop('email', fake.unique.email()).lower(),
            password_hash=get_password_hash(password),
            role=role,
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make_user


@pytest.fixture
def test_user(make_user) -> User:
    return make_user(RoleEnum.USER)


@pytest.fixture
def other_user(make_user) -> User:
    return make_user(RoleEnum.USER)


@pytest.fixture
def staff_user(make_user) -> User:
    return make_user(RoleEnum.STAFF)


@pytest.fixture
def admin_user(make_user) -> User:
    return make_user(RoleEnum.ADMIN)


def token_for(user: User) -> str:
    return create_access_token({'sub': str(user.id), 'role': user.role.value})


def headers_for(user: User) -> dict:
    return {'Authorization': f'Bearer {token_for(user)}'}


@pytest.fixture
def auth_headers(test_user: User) -> dict:
    return headers_for(test_user)


@pytest.fixture
def staff_auth_headers(staff_user: User) -> dict:
    return headers_for(staff_user)


@pytest.fixture
def admin_auth_headers(admin_user: User) -> dict:
    return headers_for(admin_user)


@pytest.fixture
def complaint_data(category: Category) -> dict:
    return {
        'title': 'Laptop does not boot',
        'description': 'The screen stays black after pressing the power button.',
        'categoryId': category.id,
        'priority': 'HIGH',
    }
