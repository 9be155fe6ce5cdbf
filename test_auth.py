from conftest import PASSWORD


def test_login_returns_user(app, staff_id):
    client = app.test_client()
    response = client.post('/auth/login', json={'email': 'JOHN@ministry.local', 'password': PASSWORD})
    assert response.status_code == 200
    user = response.get_json()['user']
    assert user['id'] == staff_id
    assert user['role'] == 'staff'

    assert client.get('/auth/me').get_json()['user']['email'] == 'john@ministry.local'


def test_login_with_form_data(app, staff_id):
    response = app.test_client().post('/auth/login', data={'email': 'john@ministry.local', 'password': PASSWORD})
    assert response.status_code == 200


def test_bad_password(app, staff_id):
    response = app.test_client().post('/auth/login', json={'email': 'john@ministry.local', 'password': 'nope'})
    assert response.status_code == 401
    assert response.get_json() == {'success': False, 'message': 'Invalid email or password.'}


def test_missing_credentials(app):
    response = app.test_client().post('/auth/login', json={'email': 'john@ministry.local'})
    assert response.status_code == 400


def test_invalid_json_body(app):
    response = app.test_client().post('/auth/login', data='{not json', content_type='application/json')
    assert response.status_code == 400
    assert response.get_json()['message'] == 'Invalid JSON payload'


def test_logout(staff_client):
    assert staff_client.post('/auth/logout').status_code == 200
    assert staff_client.get('/auth/me').status_code == 401


def test_home_reports_session(app, staff_client):
    assert app.test_client().get('/').get_json()['authenticated'] is False
    assert staff_client.get('/').get_json()['authenticated'] is True


def test_security_headers(app):
    response = app.test_client().get('/')
    assert response.headers['X-Content-Type-Options'] == 'nosniff'
    assert response.headers['X-Frame-Options'] == 'DENY'


def test_unknown_route_is_json_404(app):
    response = app.test_client().get('/api/nothing-here')
    assert response.status_code == 404
    assert response.get_json()['success'] is False


def test_form_posts_require_csrf_token(app, staff_client):
    app.config['WTF_CSRF_ENABLED'] = True
    form = {'name': 'Sam Rivera', 'year': 'Freshman'}

    response = staff_client.post('/api/students', data=form)
    assert response.status_code == 400
    assert response.get_json()['message'] == 'CSRF token missing or invalid. Please try again.'

    assert staff_client.post('/api/students', json=form).status_code == 201

    token = staff_client.get('/auth/csrf-token').get_json()['csrf_token']
    assert staff_client.post('/api/students', data=dict(form, csrf_token=token)).status_code == 201
    assert staff_client.post('/api/students', data=form, headers={'X-CSRFToken': token}).status_code == 201


def test_public_form_is_csrf_exempt(app):
    app.config['WTF_CSRF_ENABLED'] = True
    response = app.test_client().post('/api/public/submit', data={
        'name': 'Jordan Park', 'phone': '555-0199', 'gender': 'Female', 'year': 'Freshman',
    })
    assert response.status_code == 200
