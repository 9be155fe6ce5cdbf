from extensions import db
from models import ActivityLog, Interaction, Staff, Student


def test_staff_admin_requires_admin(staff_client):
    response = staff_client.get('/api/staff')
    assert response.status_code == 403
    assert response.get_json()['message'] == 'Admin access required'


def test_list_staff_sorted_by_name(admin_client, staff_id, other_staff_id):
    staff = admin_client.get('/api/staff').get_json()['staff']
    assert [s['name'] for s in staff] == ['Admin User', 'Grace Lee', 'John Smith']
    assert all('password_hash' not in s for s in staff)


def test_create_staff_and_login(app, admin_client):
    response = admin_client.post('/api/staff', json={
        'name': 'Volunteer Val', 'email': 'Val@Ministry.local', 'password': 'hunter22', 'role': 'volunteer',
    })
    assert response.status_code == 201
    staff = response.get_json()['staff']
    assert staff['email'] == 'val@ministry.local'
    assert staff['color'] == '#3b82f6'

    client = app.test_client()
    response = client.post('/auth/login', json={'email': 'val@ministry.local', 'password': 'hunter22'})
    assert response.status_code == 200
    assert client.get('/api/students').status_code == 200


def test_duplicate_email_is_rejected(admin_client, staff_id):
    response = admin_client.post('/api/staff', json={
        'name': 'John Again', 'email': 'JOHN@ministry.local', 'password': 'x',
    })
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Email already exists'


def test_update_staff_password(app, admin_client, staff_id):
    response = admin_client.put(f'/api/staff/{staff_id}', json={'role': 'volunteer', 'password': 'newpass'})
    assert response.status_code == 200
    assert response.get_json()['staff']['role'] == 'volunteer'

    client = app.test_client()
    assert client.post('/auth/login', json={'email': 'john@ministry.local', 'password': 'newpass'}).status_code == 200


def test_cannot_delete_own_account(admin_client, admin_id):
    response = admin_client.delete(f'/api/staff/{admin_id}')
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Cannot delete your own account'


def test_delete_staff_removes_owned_records(app, admin_client, staff_client, staff_id, make_student):
    student_id = make_student('Sarah Johnson')
    staff_client.post('/api/interactions', json={'student_id': student_id, 'type': 'Text'})
    staff_client.post(f'/api/students/{student_id}/notes', json={'content': 'Met after church'})

    assert admin_client.delete(f'/api/staff/{staff_id}').status_code == 200

    with app.app_context():
        assert db.session.get(Staff, staff_id) is None
        assert Interaction.query.count() == 0
        student = db.session.get(Student, student_id)
        assert [entry.content for entry in student.notes] == ['Met after church']
        assert student.note_entries[0].staff_id is None


def test_activity_log_records_logins(app, admin_client, staff_client, staff_id):
    entries = admin_client.get(f'/api/activity-log?user_id={staff_id}&action=login').get_json()['entries']
    assert len(entries) == 1
    assert entries[0]['success'] is True

    app.test_client().post('/auth/login', json={'email': 'john@ministry.local', 'password': 'wrong'})
    failed = admin_client.get('/api/activity-log?action=login_failed').get_json()['entries']
    assert len(failed) == 1
    assert failed[0]['success'] is False


def test_activity_log_is_admin_only(staff_client):
    assert staff_client.get('/api/activity-log').status_code == 403


def test_activity_rows_survive_staff_deletion(app, admin_client, staff_client, staff_id):
    admin_client.delete(f'/api/staff/{staff_id}')
    with app.app_context():
        assert ActivityLog.query.filter_by(action='login', user_id=None).count() == 1
