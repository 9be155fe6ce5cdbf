"""
Routes that do not require a staff session: the public intake form and the
first-run seed endpoint.
"""

from flask import Blueprint, current_app, jsonify, request

from error_handler import ValidationError
from models import YEARS
from services.activity_log import log_activity
from services.intake import submit_intake_form
from services.sample_data import ADMIN_CREDENTIALS, STAFF_CREDENTIALS, seed_database
from .utils import clean_str, get_payload, parse_choice, parse_text

bp = Blueprint('public', __name__)


@bp.route('/public/submit', methods=['POST'])
def submit_form():
    data = get_payload()
    name = clean_str(data.get('name'))
    phone = clean_str(data.get('phone'))
    gender = clean_str(data.get('gender'))
    year = clean_str(data.get('year'))
    if not (name and phone and gender and year):
        raise ValidationError('Name, phone, gender, and year are required')

    email = clean_str(data.get('email'))
    student, created, prayer_request = submit_intake_form(
        name=name,
        phone=phone,
        gender=gender,
        year=parse_choice(year, YEARS, 'year'),
        email=email.lower() if email else None,
        major=clean_str(data.get('major')),
        prayer_request=parse_text(data.get('prayer_request'), 'prayer_request'),
    )

    log_activity(None, 'public_form_submission', details={
        'student_id': student.id,
        'created': created,
        'prayer_request_id': prayer_request.id if prayer_request else None,
    })
    current_app.logger.info(f"Public form submission for student {student.id} (new={created})")
    return jsonify({'success': True, 'message': 'Form submitted successfully'})


@bp.route('/seed', methods=['GET'])
def seed():
    secret = current_app.config.get('SEED_SECRET')
    if secret and request.args.get('secret') != secret:
        return jsonify({
            'success': False,
            'message': 'Unauthorized. Add ?secret=YOUR_SEED_SECRET to seed.',
        }), 401

    summary = seed_database()
    if summary is None:
        return jsonify({
            'success': True,
            'message': 'Database already seeded',
            'hint': 'Delete all data first if you want to reseed',
        })

    return jsonify({
        'success': True,
        'message': 'Database seeded successfully!',
        'data': summary,
        'credentials': {'admin': ADMIN_CREDENTIALS, 'staff': STAFF_CREDENTIALS},
    })
