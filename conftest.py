import pytest

from app import create_app
from config import TestingConfig
from extensions import db
from models import Staff, Student

PASSWORD = 'password123'


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def make_staff(app):
    """Create a staff account and return its id."""
    def _make_staff(name, email, role='staff', color='#3b82f6'):
        with app.app_context():
            staff = Staff(name=name, email=email, role=role, color=color)
            staff.set_password(PASSWORD)
            db.session.add(staff)
            db.session.commit()
            return staff.id
    return _make_staff


@pytest.fixture
def make_student(app):
    """Create a student and return its id."""
    def _make_student(name, year='Junior', **fields):
        with app.app_context():
            tags = fields.pop('tags', None)
            student = Student(name=name, year=year, status=fields.pop('status', 'active'), **fields)
            if tags:
                student.tags = tags
            db.session.add(student)
            db.session.commit()
            return student.id
    return _make_student


@pytest.fixture
def admin_id(make_staff):
    return make_staff('Admin User', 'admin@ministry.local', role='admin', color='#ef4444')


@pytest.fixture
def staff_id(make_staff):
    return make_staff('John Smith', 'john@ministry.local')


@pytest.fixture
def other_staff_id(make_staff):
    return make_staff('Grace Lee', 'grace@ministry.local')


def login(client, email):
    response = client.post('/auth/login', json={'email': email, 'password': PASSWORD})
    assert response.status_code == 200, response.get_json()
    return client


@pytest.fixture
def admin_client(app, admin_id):
    return login(app.test_client(), 'admin@ministry.local')


@pytest.fixture
def staff_client(app, staff_id):
    return login(app.test_client(), 'john@ministry.local')


@pytest.fixture
def other_client(app, other_staff_id):
    return login(app.test_client(), 'grace@ministry.local')
