"""
Interaction log routes.
"""

from datetime import datetime

from flask import Blueprint, abort, jsonify, request
from flask_login import current_user

from decorators import staff_required
from extensions import db
from models import Interaction, Student, INTERACTION_TYPES
from services.visibility import filter_visible, is_admin, record_is_visible
from .utils import (
    clean_str, get_payload, parse_bool, parse_choice, parse_datetime, parse_int,
    parse_labels, require_fields, serialize_interaction,
)

bp = Blueprint('interactions', __name__)


def get_owned_interaction(interaction_id):
    """Load an interaction the current user may change: hidden ones 404, others' 403."""
    interaction = db.get_or_404(Interaction, interaction_id, description='Interaction not found')
    if not record_is_visible(current_user, interaction):
        abort(404, description='Interaction not found')
    if not is_admin(current_user.role) and interaction.staff_id != current_user.id:
        abort(403, description='Only the staff member who logged this interaction can change it')
    return interaction


@bp.route('/interactions', methods=['GET'])
@staff_required
def list_interactions():
    query = Interaction.query
    student_id = parse_int(request.args.get('student_id'), 'student_id')
    if student_id:
        query = query.filter_by(student_id=student_id)
    interactions = query.order_by(Interaction.date.desc()).all()

    visible = filter_visible(interactions, current_user)
    return jsonify({'success': True, 'interactions': [serialize_interaction(i) for i in visible]})


@bp.route('/interactions', methods=['POST'])
@staff_required
def create_interaction():
    data = get_payload()
    require_fields(data, 'student_id', 'type')
    student_id = parse_int(data.get('student_id'), 'student_id')
    student = db.get_or_404(Student, student_id, description='Student not found')
    topics = parse_labels(data.get('topics'), 'topics')

    interaction = Interaction(
        student=student,
        staff_id=current_user.id,
        date=parse_datetime(data.get('date'), 'date', default=datetime.utcnow()),
        type=parse_choice(data.get('type'), INTERACTION_TYPES, 'type'),
        location=clean_str(data.get('location')),
        notes=clean_str(data.get('notes')),
        is_confidential=parse_bool(data.get('is_confidential')),
        attachments=clean_str(data.get('attachments')),
    )
    interaction.topics = topics
    db.session.add(interaction)
    db.session.commit()
    return jsonify({'success': True, 'interaction': serialize_interaction(interaction)}), 201


@bp.route('/interactions/<int:interaction_id>', methods=['PUT'])
@staff_required
def update_interaction(interaction_id):
    interaction = get_owned_interaction(interaction_id)
    data = get_payload()

    if 'date' in data:
        interaction.date = parse_datetime(data.get('date'), 'date', default=interaction.date)
    if 'type' in data:
        interaction.type = parse_choice(data.get('type'), INTERACTION_TYPES, 'type', default=interaction.type)
    for field in ('location', 'notes', 'attachments'):
        if field in data:
            setattr(interaction, field, clean_str(data.get(field)))
    if 'is_confidential' in data:
        interaction.is_confidential = parse_bool(data.get('is_confidential'))
    if 'topics' in data:
        interaction.topics = parse_labels(data.get('topics'), 'topics')

    db.session.commit()
    return jsonify({'success': True, 'interaction': serialize_interaction(interaction)})


@bp.route('/interactions/<int:interaction_id>', methods=['DELETE'])
@staff_required
def delete_interaction(interaction_id):
    interaction = get_owned_interaction(interaction_id)
    db.session.delete(interaction)
    db.session.commit()
    return jsonify({'success': True, 'message': 'Interaction deleted'})
