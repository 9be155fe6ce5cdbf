import pytest


@pytest.fixture
def student_id(make_student):
    return make_student('Sarah Johnson')


def log_interaction(client, student_id, **fields):
    payload = {'student_id': student_id, 'type': '1-on-1'}
    payload.update(fields)
    response = client.post('/api/interactions', json=payload)
    assert response.status_code == 201, response.get_json()
    return response.get_json()['interaction']


def test_create_interaction(staff_client, staff_id, student_id):
    interaction = log_interaction(staff_client, student_id,
                                  date='2024-03-01T10:30:00Z', location='Coffee shop',
                                  topics='faith, school, faith')
    assert interaction['staff_id'] == staff_id
    assert interaction['date'] == '2024-03-01T10:30:00'
    assert interaction['topics'] == ['faith', 'school']
    assert interaction['is_confidential'] is False
    assert interaction['student'] == {'id': student_id, 'name': 'Sarah Johnson', 'year': 'Junior', 'status': 'active'}


def test_create_validates_type_and_student(staff_client, student_id):
    response = staff_client.post('/api/interactions', json={'student_id': student_id, 'type': 'Carrier pigeon'})
    assert response.status_code == 400
    assert response.get_json()['field'] == 'type'

    response = staff_client.post('/api/interactions', json={'student_id': 999, 'type': 'Text'})
    assert response.status_code == 404

    response = staff_client.post('/api/interactions', json={'type': 'Text'})
    assert response.status_code == 400


def test_list_is_newest_first_and_filters_confidential(staff_client, other_client, admin_client, student_id):
    log_interaction(staff_client, student_id, date='2024-01-01', notes='open')
    log_interaction(staff_client, student_id, date='2024-02-01', is_confidential=True)
    log_interaction(other_client, student_id, date='2024-03-01', type='Text')

    mine = staff_client.get(f'/api/interactions?student_id={student_id}').get_json()['interactions']
    assert [i['date'][:10] for i in mine] == ['2024-03-01', '2024-02-01', '2024-01-01']

    theirs = other_client.get('/api/interactions').get_json()['interactions']
    assert [i['date'][:10] for i in theirs] == ['2024-03-01', '2024-01-01']

    everything = admin_client.get('/api/interactions').get_json()['interactions']
    assert len(everything) == 3


def test_only_owner_or_admin_can_change(staff_client, other_client, admin_client, student_id):
    interaction = log_interaction(staff_client, student_id, topics=['faith'])

    response = other_client.put(f"/api/interactions/{interaction['id']}", json={'notes': 'edited'})
    assert response.status_code == 403

    response = staff_client.put(f"/api/interactions/{interaction['id']}",
                                json={'notes': 'edited', 'topics': ['faith', 'family']})
    assert response.status_code == 200
    updated = response.get_json()['interaction']
    assert updated['notes'] == 'edited'
    assert updated['topics'] == ['faith', 'family']
    assert updated['type'] == '1-on-1'

    assert other_client.delete(f"/api/interactions/{interaction['id']}").status_code == 403
    assert admin_client.delete(f"/api/interactions/{interaction['id']}").status_code == 200
    assert staff_client.get('/api/interactions').get_json()['interactions'] == []


def test_hidden_interaction_is_not_found(staff_client, other_client, student_id):
    interaction = log_interaction(staff_client, student_id, is_confidential=True)
    response = other_client.put(f"/api/interactions/{interaction['id']}", json={'notes': 'x'})
    assert response.status_code == 404
    assert response.get_json()['message'] == 'Interaction not found'


def test_offset_dates_are_stored_as_utc(staff_client, student_id):
    interaction = log_interaction(staff_client, student_id, date='2024-03-01T10:30:00+05:00')
    assert interaction['date'] == '2024-03-01T05:30:00'


def test_topics_must_be_text(staff_client, student_id):
    response = staff_client.post('/api/interactions', json={
        'student_id': student_id, 'type': 'Text', 'topics': {'faith': True},
    })
    assert response.status_code == 400
    assert response.get_json()['field'] == 'topics'

    interaction = log_interaction(staff_client, student_id)
    response = staff_client.put(f"/api/interactions/{interaction['id']}", json={'topics': ['faith', 3]})
    assert response.status_code == 400
    assert response.get_json()['field'] == 'topics'
