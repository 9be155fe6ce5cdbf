"""
Action item routes.
"""

from flask import Blueprint, abort, jsonify, request
from flask_login import current_user

from decorators import staff_required
from error_handler import ValidationError
from extensions import db
from models import ActionItem, Interaction, Student, ACTION_STATUSES
from services.visibility import is_admin, record_is_visible
from .utils import (
    clean_str, get_payload, parse_choice, parse_datetime, parse_int, require_fields,
    serialize_action_item,
)

bp = Blueprint('action_items', __name__)


def get_own_action_item(action_item_id):
    action_item = db.get_or_404(ActionItem, action_item_id, description='Action item not found')
    if not is_admin(current_user.role) and action_item.staff_id != current_user.id:
        abort(404, description='Action item not found')
    return action_item


@bp.route('/action-items', methods=['GET'])
@staff_required
def list_action_items():
    query = ActionItem.query
    if not is_admin(current_user.role):
        query = query.filter_by(staff_id=current_user.id)

    status = clean_str(request.args.get('status'))
    if status and status != 'all':
        query = query.filter_by(status=status)

    action_items = query.order_by(ActionItem.created_at.desc(), ActionItem.id.desc()).all()
    return jsonify({'success': True, 'action_items': [serialize_action_item(a) for a in action_items]})


@bp.route('/action-items', methods=['POST'])
@staff_required
def create_action_item():
    data = get_payload()
    require_fields(data, 'description')

    student = None
    student_id = parse_int(data.get('student_id'), 'student_id')
    if student_id:
        student = db.get_or_404(Student, student_id, description='Student not found')

    interaction_id = parse_int(data.get('interaction_id'), 'interaction_id')
    if interaction_id:
        interaction = db.get_or_404(Interaction, interaction_id, description='Interaction not found')
        if not record_is_visible(current_user, interaction):
            abort(404, description='Interaction not found')
        if student is None:
            student = interaction.student
        elif interaction.student_id != student.id:
            raise ValidationError('Interaction belongs to a different student', field='interaction_id')

    action_item = ActionItem(
        student=student,
        staff_id=current_user.id,
        interaction_id=interaction_id,
        description=clean_str(data.get('description')),
        due_date=parse_datetime(data.get('due_date'), 'due_date'),
        status=parse_choice(data.get('status'), ACTION_STATUSES, 'status', default='pending'),
    )
    db.session.add(action_item)
    db.session.commit()
    return jsonify({'success': True, 'action_item': serialize_action_item(action_item)}), 201


@bp.route('/action-items/<int:action_item_id>', methods=['PUT'])
@staff_required
def update_action_item(action_item_id):
    action_item = get_own_action_item(action_item_id)
    data = get_payload()

    if clean_str(data.get('description')):
        action_item.description = clean_str(data.get('description'))
    if 'due_date' in data:
        action_item.due_date = parse_datetime(data.get('due_date'), 'due_date')
    if clean_str(data.get('status')):
        action_item.status = parse_choice(data.get('status'), ACTION_STATUSES, 'status')

    db.session.commit()
    return jsonify({'success': True, 'action_item': serialize_action_item(action_item)})


@bp.route('/action-items/<int:action_item_id>', methods=['DELETE'])
@staff_required
def delete_action_item(action_item_id):
    action_item = get_own_action_item(action_item_id)
    db.session.delete(action_item)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Action item deleted'})
