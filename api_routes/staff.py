"""
Staff account administration (admins only).
"""

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user

from decorators import admin_required
from error_handler import ValidationError
from extensions import db
from models import Staff, ROLES, DEFAULT_STAFF_COLOR
from services.activity_log import get_user_activity_log, log_activity
from .utils import (
    clean_str, get_payload, iso, parse_choice, parse_datetime, parse_int,
    require_fields, serialize_staff,
)

bp = Blueprint('staff', __name__)


def email_taken(email, exclude_id=None):
    query = Staff.query.filter(db.func.lower(Staff.email) == email.lower())
    if exclude_id is not None:
        query = query.filter(Staff.id != exclude_id)
    return query.first() is not None


@bp.route('/staff', methods=['GET'])
@admin_required
def list_staff():
    staff = Staff.query.order_by(Staff.name.asc()).all()
    return jsonify({'success': True, 'staff': [serialize_staff(s) for s in staff]})


@bp.route('/staff', methods=['POST'])
@admin_required
def create_staff():
    data = get_payload()
    require_fields(data, 'name', 'email', 'password')

    email = clean_str(data.get('email')).lower()
    if email_taken(email):
        raise ValidationError('Email already exists', field='email')

    staff = Staff(
        name=clean_str(data.get('name')),
        email=email,
        role=parse_choice(data.get('role'), ROLES, 'role', default='staff'),
        color=clean_str(data.get('color')) or DEFAULT_STAFF_COLOR,
    )
    staff.set_password(data.get('password'))
    db.session.add(staff)
    db.session.commit()

    log_activity(current_user.id, 'create_staff', details={'staff_id': staff.id, 'role': staff.role})
    return jsonify({'success': True, 'staff': serialize_staff(staff)}), 201


@bp.route('/staff/<int:staff_id>', methods=['PUT'])
@admin_required
def update_staff(staff_id):
    staff = db.get_or_404(Staff, staff_id, description='Staff member not found')
    data = get_payload()

    if clean_str(data.get('name')):
        staff.name = clean_str(data.get('name'))
    if clean_str(data.get('email')):
        email = clean_str(data.get('email')).lower()
        if email_taken(email, exclude_id=staff.id):
            raise ValidationError('Email already exists', field='email')
        staff.email = email
    if clean_str(data.get('role')):
        staff.role = parse_choice(data.get('role'), ROLES, 'role')
    if clean_str(data.get('color')):
        staff.color = clean_str(data.get('color'))
    if data.get('password'):
        staff.set_password(data.get('password'))

    db.session.commit()
    return jsonify({'success': True, 'staff': serialize_staff(staff)})


@bp.route('/staff/<int:staff_id>', methods=['DELETE'])
@admin_required
def delete_staff(staff_id):
    """Delete a staff account along with the records it owns."""
    if staff_id == current_user.id:
        raise ValidationError('Cannot delete your own account')
    staff = db.get_or_404(Staff, staff_id, description='Staff member not found')
    email = staff.email
    db.session.delete(staff)
    db.session.commit()

    log_activity(current_user.id, 'delete_staff', details={'staff_id': staff_id, 'email': email})
    current_app.logger.info(f"Staff {staff_id} deleted by admin {current_user.id}")
    return jsonify({'success': True, 'message': 'Staff member deleted'})


@bp.route('/activity-log', methods=['GET'])
@admin_required
def activity_log():
    entries = get_user_activity_log(
        user_id=parse_int(request.args.get('user_id'), 'user_id'),
        action=clean_str(request.args.get('action')),
        start_date=parse_datetime(request.args.get('start_date'), 'start_date'),
        end_date=parse_datetime(request.args.get('end_date'), 'end_date'),
        limit=min(parse_int(request.args.get('limit'), 'limit', default=100, minimum=1), 500),
    )
    return jsonify({'success': True, 'entries': [serialize_activity(entry) for entry in entries]})


def serialize_activity(entry):
    return {
        'id': entry.id,
        'user_id': entry.user_id,
        'action': entry.action,
        'details': entry.details,
        'success': entry.success,
        'error_message': entry.error_message,
        'ip_address': entry.ip_address,
        'timestamp': iso(entry.timestamp),
    }
