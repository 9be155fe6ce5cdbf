"""
Prayer request routes. Private requests pass through the same visibility
rule as confidential interactions.
"""

from flask import Blueprint, abort, jsonify, request
from flask_login import current_user

from decorators import staff_required
from extensions import db
from models import PrayerRequest, Student, PRAYER_CATEGORIES, PRAYER_STATUSES
from services.visibility import filter_visible, record_is_visible
from .utils import (
    clean_str, get_payload, parse_bool, parse_choice, parse_int, require_fields,
    serialize_prayer_request,
)

bp = Blueprint('prayer_requests', __name__)


def get_visible_prayer_request(prayer_request_id):
    prayer_request = db.get_or_404(PrayerRequest, prayer_request_id, description='Prayer request not found')
    if not record_is_visible(current_user, prayer_request):
        abort(404, description='Prayer request not found')
    return prayer_request


@bp.route('/prayer-requests', methods=['GET'])
@staff_required
def list_prayer_requests():
    query = PrayerRequest.query
    status = clean_str(request.args.get('status'))
    if status and status != 'all':
        query = query.filter_by(status=status)
    prayer_requests = query.order_by(PrayerRequest.date.desc()).all()

    visible = filter_visible(prayer_requests, current_user)
    return jsonify({'success': True, 'prayer_requests': [serialize_prayer_request(p) for p in visible]})


@bp.route('/prayer-requests', methods=['POST'])
@staff_required
def create_prayer_request():
    data = get_payload()
    require_fields(data, 'student_id', 'content')
    student = db.get_or_404(Student, parse_int(data.get('student_id'), 'student_id'),
                            description='Student not found')

    prayer_request = PrayerRequest(
        student=student,
        staff_id=current_user.id,
        content=clean_str(data.get('content')),
        category=parse_choice(data.get('category'), PRAYER_CATEGORIES, 'category', default='other'),
        status=parse_choice(data.get('status'), PRAYER_STATUSES, 'status', default='active'),
        is_private=parse_bool(data.get('is_private')),
    )
    db.session.add(prayer_request)
    db.session.commit()
    return jsonify({'success': True, 'prayer_request': serialize_prayer_request(prayer_request)}), 201


@bp.route('/prayer-requests/<int:prayer_request_id>', methods=['PUT'])
@staff_required
def update_prayer_request(prayer_request_id):
    prayer_request = get_visible_prayer_request(prayer_request_id)
    data = get_payload()

    if clean_str(data.get('content')):
        prayer_request.content = clean_str(data.get('content'))
    if clean_str(data.get('category')):
        prayer_request.category = parse_choice(data.get('category'), PRAYER_CATEGORIES, 'category')
    if clean_str(data.get('status')):
        prayer_request.status = parse_choice(data.get('status'), PRAYER_STATUSES, 'status')
    if 'is_private' in data:
        prayer_request.is_private = parse_bool(data.get('is_private'))

    db.session.commit()
    return jsonify({'success': True, 'prayer_request': serialize_prayer_request(prayer_request)})


@bp.route('/prayer-requests/<int:prayer_request_id>', methods=['DELETE'])
@staff_required
def delete_prayer_request(prayer_request_id):
    prayer_request = get_visible_prayer_request(prayer_request_id)
    db.session.delete(prayer_request)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Prayer request deleted'})
