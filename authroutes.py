# Core Flask imports
from flask import Blueprint, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user
from flask_wtf.csrf import generate_csrf

# Database and model imports
from models import Staff

# Application imports
from api_routes.utils import clean_str, get_payload, parse_bool, serialize_staff
from error_handler import ValidationError
from services.activity_log import log_activity

auth_blueprint = Blueprint('auth', __name__)


@auth_blueprint.route('/login', methods=['POST'])
def login():
    data = get_payload()
    email = clean_str(data.get('email'))
    password = data.get('password')

    # Check if email and password are provided
    if not email or not password:
        raise ValidationError('Email and password are required.')

    staff = Staff.query.filter_by(email=email.lower()).first()
    if not staff or not staff.check_password(password):
        log_activity(
            user_id=staff.id if staff else None,
            action='login_failed',
            details={'email': email},
            success=False,
            error_message='Invalid email or password'
        )
        current_app.logger.warning(f"Failed login attempt for {email}")
        return jsonify({'success': False, 'message': 'Invalid email or password.'}), 401

    login_user(staff, remember=parse_bool(data.get('remember')))
    log_activity(user_id=staff.id, action='login', details={'role': staff.role})
    return jsonify({'success': True, 'user': serialize_staff(staff)})


@auth_blueprint.route('/logout', methods=['POST'])
@login_required
def logout():
    log_activity(user_id=current_user.id, action='logout')
    logout_user()
    return jsonify({'success': True, 'message': 'Logged out'})


@auth_blueprint.route('/me', methods=['GET'])
@login_required
def me():
    return jsonify({'success': True, 'user': serialize_staff(current_user)})


@auth_blueprint.route('/csrf-token', methods=['GET'])
def csrf_token():
    """Token for clients that post form-encoded bodies (X-CSRFToken header or csrf_token field)."""
    return jsonify({'success': True, 'csrf_token': generate_csrf()})
