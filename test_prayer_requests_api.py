import pytest


@pytest.fixture
def student_id(make_student):
    return make_student('Emily Davis', year='Senior')


def add_request(client, student_id, **fields):
    payload = {'student_id': student_id, 'content': 'Guidance for next steps'}
    payload.update(fields)
    response = client.post('/api/prayer-requests', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['prayer_request']


def test_create_uses_defaults(staff_client, student_id):
    prayer_request = add_request(staff_client, student_id)
    assert prayer_request['category'] == 'other'
    assert prayer_request['status'] == 'active'
    assert prayer_request['is_private'] is False


def test_create_requires_content(staff_client, student_id):
    response = staff_client.post('/api/prayer-requests', json={'student_id': student_id, 'content': ''})
    assert response.status_code == 400


def test_private_requests_only_reach_owner_and_admin(staff_client, other_client, admin_client, student_id):
    add_request(staff_client, student_id, content='Family situation', category='family', is_private=True)
    add_request(staff_client, student_id, content='Exams', category='academic')

    assert len(staff_client.get('/api/prayer-requests').get_json()['prayer_requests']) == 2
    assert len(admin_client.get('/api/prayer-requests').get_json()['prayer_requests']) == 2
    theirs = other_client.get('/api/prayer-requests').get_json()['prayer_requests']
    assert [p['content'] for p in theirs] == ['Exams']


def test_status_filter(staff_client, student_id):
    answered = add_request(staff_client, student_id, status='answered')
    add_request(staff_client, student_id)

    listed = staff_client.get('/api/prayer-requests?status=answered').get_json()['prayer_requests']
    assert [p['id'] for p in listed] == [answered['id']]
    assert len(staff_client.get('/api/prayer-requests?status=all').get_json()['prayer_requests']) == 2


def test_update_and_delete(staff_client, other_client, student_id):
    shared = add_request(staff_client, student_id)
    hidden = add_request(staff_client, student_id, is_private=True)

    response = other_client.put(f"/api/prayer-requests/{shared['id']}", json={'status': 'answered'})
    assert response.status_code == 200
    assert response.get_json()['prayer_request']['status'] == 'answered'

    assert other_client.put(f"/api/prayer-requests/{hidden['id']}", json={'status': 'answered'}).status_code == 404
    assert other_client.delete(f"/api/prayer-requests/{hidden['id']}").status_code == 404
    assert staff_client.delete(f"/api/prayer-requests/{hidden['id']}").status_code == 200


def test_invalid_category(staff_client, student_id):
    response = staff_client.post('/api/prayer-requests', json={
        'student_id': student_id, 'content': 'x', 'category': 'weather',
    })
    assert response.status_code == 400
    assert response.get_json()['field'] == 'category'
