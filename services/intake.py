"""
Public intake form handling.

Submissions come from students themselves, without a staff session. A
returning student (matched by phone or email) has their details refreshed;
anyone else is added to the roster as a new active student.
"""

import logging
from datetime import date

from sqlalchemy import func, or_

from extensions import db
from models import PrayerRequest, Staff, Student

logger = logging.getLogger(__name__)

INTAKE_TAGS = ['new', 'form submission']


def find_existing_student(phone, email=None):
    conditions = [Student.phone == phone]
    if email:
        conditions.append(func.lower(Student.email) == email.lower())
    return Student.query.filter(or_(*conditions)).order_by(Student.id.asc()).first()


def submit_intake_form(name, phone, gender, year, email=None, major=None, prayer_request=None):
    """
    Create or update the student behind a form submission and file their
    prayer request, if any.

    Returns (student, created, prayer_request_or_None).
    """
    student = find_existing_student(phone, email)
    created = student is None

    if created:
        student = Student(
            name=name,
            email=email,
            phone=phone,
            gender=gender,
            year=year,
            major=major,
            status='active',
        )
        student.tags = INTAKE_TAGS
        student.add_note(date.today().isoformat(), 'Submitted via public form')
        db.session.add(student)
    else:
        student.name = name
        student.email = email or student.email
        student.phone = phone
        student.gender = gender or student.gender
        student.year = year
        student.major = major or student.major

    request_record = None
    content = (prayer_request or '').strip()
    if content:
        # Public requests are filed under the first admin
        admin = Staff.query.filter_by(role='admin').order_by(Staff.id.asc()).first()
        if admin:
            request_record = PrayerRequest(
                student=student,
                staff_id=admin.id,
                content=content,
                category='other',
                status='active',
                is_private=False,
            )
            db.session.add(request_record)
        else:
            logger.warning("Intake prayer request dropped: no admin account to own it")

    db.session.commit()
    return student, created, request_record
