"""
Sample data for a fresh install: two staff accounts, three students and a
few records against them.
"""

import logging
from datetime import datetime, timedelta

from extensions import db
from models import FollowUp, Interaction, PrayerRequest, Staff, Student

logger = logging.getLogger(__name__)

ADMIN_CREDENTIALS = {'email': 'admin@ministry.local', 'password': 'changeme'}
STAFF_CREDENTIALS = {'email': 'john@ministry.local', 'password': 'password123'}

SAMPLE_STUDENTS = [
    {
        'name': 'Sarah Johnson',
        'email': 'sarah.johnson@university.edu',
        'phone': '555-0101',
        'year': 'Junior',
        'major': 'Psychology',
        'tags': ['small group leader', 'worship team'],
        'note': 'Very involved in campus ministry. Leading a small group this semester.',
    },
    {
        'name': 'Michael Chen',
        'email': 'michael.chen@university.edu',
        'phone': '555-0102',
        'year': 'Sophomore',
        'major': 'Computer Science',
        'tags': ['new believer', 'interested in serving'],
        'note': 'Became a Christian last semester. Eager to grow in faith.',
    },
    {
        'name': 'Emily Davis',
        'email': 'emily.davis@university.edu',
        'phone': '555-0103',
        'year': 'Senior',
        'major': 'Nursing',
        'tags': ['mentor', 'graduating soon'],
        'note': 'Strong faith. Mentoring younger students. Graduating in May.',
    },
]


def seed_database():
    """
    Populate an empty database. Returns a summary of what was created, or
    None when staff accounts already exist.
    """
    if Staff.query.first() is not None:
        logger.info("Database already seeded; skipping sample data")
        return None

    now = datetime.utcnow()

    admin = Staff(name='Admin User', email=ADMIN_CREDENTIALS['email'], role='admin', color='#ef4444')
    admin.set_password(ADMIN_CREDENTIALS['password'])
    staff = Staff(name='John Smith', email=STAFF_CREDENTIALS['email'], role='staff', color='#3b82f6')
    staff.set_password(STAFF_CREDENTIALS['password'])
    db.session.add_all([admin, staff])
    db.session.flush()

    students = []
    for sample in SAMPLE_STUDENTS:
        student = Student(
            name=sample['name'],
            email=sample['email'],
            phone=sample['phone'],
            year=sample['year'],
            major=sample['major'],
            status='active',
        )
        student.tags = sample['tags']
        student.add_note(now.date().isoformat(), sample['note'])
        db.session.add(student)
        students.append(student)

    sarah, michael, emily = students

    interactions = [
        Interaction(
            student=sarah, staff_id=staff.id, date=now, type='1-on-1',
            location='Campus Coffee Shop',
            notes='Great conversation about her small group. She is feeling confident about leading.',
        ),
        Interaction(
            student=michael, staff_id=staff.id, date=now - timedelta(days=7), type='1-on-1',
            location='Student Center',
            notes='Followed up on his baptism decision. He wants to get baptized next month!',
        ),
    ]
    interactions[0].topics = ['Leadership', 'Small Groups']
    interactions[1].topics = ['Gospel', 'Baptism', 'Growth']

    follow_ups = [
        FollowUp(student=michael, staff_id=staff.id, due_date=now + timedelta(days=3),
                 priority='high', reason='Follow up about baptism preparation'),
        FollowUp(student=emily, staff_id=staff.id, due_date=now + timedelta(days=14),
                 priority='medium', reason='Discuss post-graduation plans and staying connected'),
    ]

    prayer_requests = [
        PrayerRequest(student=sarah, staff_id=staff.id, category='spiritual', status='active',
                      content='Pray for wisdom in leading her small group through a difficult study.'),
        PrayerRequest(student=michael, staff_id=staff.id, category='family', status='active', is_private=True,
                      content='Pray for his family to be supportive of his faith decision.'),
    ]

    db.session.add_all(interactions + follow_ups + prayer_requests)
    db.session.commit()
    logger.info("Sample data created")

    return {
        'staff': 2,
        'students': len(students),
        'interactions': len(interactions),
        'follow_ups': len(follow_ups),
        'prayer_requests': len(prayer_requests),
    }
