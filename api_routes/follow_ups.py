"""
Follow-up routes. Staff work their own follow-up list; admins see everyone's.
"""

from flask import Blueprint, abort, jsonify, request
from flask_login import current_user

from decorators import staff_required
from extensions import db
from models import FollowUp, Student, PRIORITIES
from services.visibility import is_admin
from .utils import (
    clean_str, get_payload, parse_bool, parse_choice, parse_datetime, parse_int,
    require_fields, serialize_follow_up,
)

bp = Blueprint('follow_ups', __name__)


def get_own_follow_up(follow_up_id):
    follow_up = db.get_or_404(FollowUp, follow_up_id, description='Follow-up not found')
    if not is_admin(current_user.role) and follow_up.staff_id != current_user.id:
        abort(404, description='Follow-up not found')
    return follow_up


@bp.route('/follow-ups', methods=['GET'])
@staff_required
def list_follow_ups():
    query = FollowUp.query
    if not is_admin(current_user.role):
        query = query.filter_by(staff_id=current_user.id)

    completed = request.args.get('completed')
    if completed == 'true':
        query = query.filter_by(completed=True)
    elif completed == 'false':
        query = query.filter_by(completed=False)

    follow_ups = query.order_by(FollowUp.due_date.asc()).all()
    return jsonify({'success': True, 'follow_ups': [serialize_follow_up(f) for f in follow_ups]})


@bp.route('/follow-ups', methods=['POST'])
@staff_required
def create_follow_up():
    data = get_payload()
    require_fields(data, 'student_id', 'due_date')
    student = db.get_or_404(Student, parse_int(data.get('student_id'), 'student_id'),
                            description='Student not found')

    follow_up = FollowUp(
        student=student,
        staff_id=current_user.id,
        due_date=parse_datetime(data.get('due_date'), 'due_date'),
        priority=parse_choice(data.get('priority'), PRIORITIES, 'priority', default='medium'),
        reason=clean_str(data.get('reason')),
    )
    db.session.add(follow_up)
    db.session.commit()
    return jsonify({'success': True, 'follow_up': serialize_follow_up(follow_up)}), 201


@bp.route('/follow-ups/<int:follow_up_id>', methods=['PUT'])
@staff_required
def update_follow_up(follow_up_id):
    follow_up = get_own_follow_up(follow_up_id)
    data = get_payload()

    if 'completed' in data:
        follow_up.set_completed(parse_bool(data.get('completed')))
    if clean_str(data.get('due_date')):
        follow_up.due_date = parse_datetime(data.get('due_date'), 'due_date')
    if clean_str(data.get('priority')):
        follow_up.priority = parse_choice(data.get('priority'), PRIORITIES, 'priority')
    if 'reason' in data:
        follow_up.reason = clean_str(data.get('reason'))

    db.session.commit()
    return jsonify({'success': True, 'follow_up': serialize_follow_up(follow_up)})


@bp.route('/follow-ups/<int:follow_up_id>', methods=['DELETE'])
@staff_required
def delete_follow_up(follow_up_id):
    follow_up = get_own_follow_up(follow_up_id)
    db.session.delete(follow_up)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Follow-up deleted'})
