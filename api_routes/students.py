"""
Student roster routes: search, profile, create, update, delete and notes.
"""

from datetime import date

from flask import Blueprint, current_app, jsonify, request
from flask_login import current_user
from sqlalchemy import or_

from decorators import admin_required, staff_required
from error_handler import ValidationError
from extensions import db
from models import Student, StudentTag, STUDENT_STATUSES, YEARS
from services.activity_log import log_activity
from services.visibility import filter_visible
from .utils import (
    clean_str, get_payload, parse_choice, parse_date, parse_int, parse_labels, parse_text,
    require_fields, serialize_action_item, serialize_follow_up, serialize_interaction, serialize_note,
    serialize_prayer_request, serialize_student,
)

bp = Blueprint('students', __name__)

MAX_PAGE_LIMIT = 100
OPTIONAL_TEXT_FIELDS = ('phone', 'gender', 'major', 'address', 'photo')


def apply_student_fields(student, data):
    """Copy the fields present in data onto the student."""
    if 'name' in data:
        name = clean_str(data.get('name'))
        if not name:
            raise ValidationError('Name cannot be blank', field='name')
        student.name = name
    if 'year' in data:
        year = parse_choice(data.get('year'), YEARS, 'year')
        if not year:
            raise ValidationError('Year cannot be blank', field='year')
        student.year = year
    if 'status' in data:
        student.status = parse_choice(data.get('status'), STUDENT_STATUSES, 'status', default='active')
    if 'email' in data:
        email = clean_str(data.get('email'))
        student.email = email.lower() if email else None
    for field in OPTIONAL_TEXT_FIELDS:
        if field in data:
            setattr(student, field, clean_str(data.get(field)))
    if 'tags' in data:
        student.tags = parse_labels(data.get('tags'), 'tags')
    if 'notes' in data:
        student.import_notes(parse_text(data.get('notes'), 'notes'), author_id=current_user.id)


@bp.route('/students', methods=['GET'])
@staff_required
def list_students():
    """Search and filter the roster, one page at a time."""
    query = Student.query

    search = clean_str(request.args.get('search'))
    if search:
        pattern = f'%{search}%'
        query = query.filter(or_(
            Student.name.ilike(pattern),
            Student.email.ilike(pattern),
            Student.major.ilike(pattern),
        ))

    for field in ('status', 'year', 'gender'):
        value = clean_str(request.args.get(field))
        if value and value != 'all':
            query = query.filter(getattr(Student, field) == value)

    tag = clean_str(request.args.get('tag'))
    if tag:
        query = query.filter(Student.tag_links.any(StudentTag.name == tag))

    page = parse_int(request.args.get('page'), 'page', default=1, minimum=1)
    limit = parse_int(request.args.get('limit'), 'limit',
                      default=current_app.config.get('STUDENTS_PAGE_LIMIT', 20), minimum=1)
    limit = min(limit, MAX_PAGE_LIMIT)

    pagination = query.order_by(Student.name.asc()).paginate(page=page, per_page=limit, error_out=False)

    return jsonify({
        'success': True,
        'students': [serialize_student(student, with_counts=True) for student in pagination.items],
        'pagination': {
            'page': page,
            'limit': limit,
            'total': pagination.total,
            'total_pages': pagination.pages,
        },
    })


@bp.route('/students', methods=['POST'])
@staff_required
def create_student():
    data = get_payload()
    require_fields(data, 'name', 'year')

    student = Student(status='active')
    apply_student_fields(student, data)
    db.session.add(student)
    db.session.commit()

    log_activity(current_user.id, 'create_student', details={'student_id': student.id, 'name': student.name})
    current_app.logger.info(f"Student {student.id} created by staff {current_user.id}")
    return jsonify({'success': True, 'student': serialize_student(student)}), 201


@bp.route('/students/<int:student_id>', methods=['GET'])
@staff_required
def get_student(student_id):
    """
    Full student profile. Confidential interactions and private prayer
    requests are only included for their owner and for admins.
    """
    student = db.get_or_404(Student, student_id, description='Student not found')

    interactions = sorted(student.interactions, key=lambda i: i.date, reverse=True)
    follow_ups = sorted(student.follow_ups, key=lambda f: f.due_date)
    prayer_requests = sorted(student.prayer_requests, key=lambda p: p.date, reverse=True)
    action_items = sorted(student.action_items, key=lambda a: a.created_at, reverse=True)

    data = serialize_student(student)
    data.update({
        'interactions': [serialize_interaction(i) for i in filter_visible(interactions, current_user)],
        'follow_ups': [serialize_follow_up(f) for f in follow_ups],
        'prayer_requests': [serialize_prayer_request(p) for p in filter_visible(prayer_requests, current_user)],
        'action_items': [serialize_action_item(a) for a in action_items],
        'notes': [serialize_note(entry) for entry in student.notes],
        'notes_text': student.notes_text,
    })
    return jsonify({'success': True, 'student': data})


@bp.route('/students/<int:student_id>', methods=['PUT'])
@staff_required
def update_student(student_id):
    student = db.get_or_404(Student, student_id, description='Student not found')
    data = get_payload()
    apply_student_fields(student, data)
    db.session.commit()
    return jsonify({'success': True, 'student': serialize_student(student)})


@bp.route('/students/<int:student_id>', methods=['DELETE'])
@admin_required
def delete_student(student_id):
    """Delete a student together with everything recorded against them."""
    student = db.get_or_404(Student, student_id, description='Student not found')
    name = student.name
    db.session.delete(student)
    db.session.commit()

    log_activity(current_user.id, 'delete_student', details={'student_id': student_id, 'name': name})
    current_app.logger.info(f"Student {student_id} deleted by admin {current_user.id}")
    return jsonify({'success': True, 'message': 'Student deleted'})


@bp.route('/students/<int:student_id>/notes', methods=['POST'])
@staff_required
def add_student_note(student_id):
    student = db.get_or_404(Student, student_id, description='Student not found')
    data = get_payload()
    require_fields(data, 'content', message='Note content is required')

    entry_date = parse_date(data.get('date'), 'date', default=date.today())
    note = student.add_note(entry_date.isoformat(), clean_str(data.get('content')), author_id=current_user.id)
    db.session.commit()

    return jsonify({
        'success': True,
        'note': {'id': note.id, 'date': note.entry_date, 'content': note.content},
        'notes': [serialize_note(entry) for entry in student.notes],
    }), 201
