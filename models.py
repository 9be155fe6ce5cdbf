from datetime import datetime

from flask_login import UserMixin
from sqlalchemy.ext.hybrid import hybrid_property
from werkzeug.security import check_password_hash, generate_password_hash

from extensions import db
from services.notes import NoteEntry, format_notes, parse_notes
from services.tags import normalize_labels

ROLES = ['admin', 'staff', 'volunteer']
STUDENT_STATUSES = ['active', 'inactive', 'graduated', 'transferred']
YEARS = ['Freshman', 'Sophomore', 'Junior', 'Senior', 'Grad']
INTERACTION_TYPES = ['1-on-1', 'Small group', 'Event', 'Phone call', 'Text', 'Other']
PRIORITIES = ['high', 'medium', 'low']
PRAYER_CATEGORIES = ['personal', 'family', 'academic', 'spiritual', 'health', 'other']
PRAYER_STATUSES = ['active', 'ongoing', 'answered']
ACTION_STATUSES = ['pending', 'in_progress', 'completed']

DEFAULT_STAFF_COLOR = '#3b82f6'


class Staff(db.Model, UserMixin):
    """
    A ministry staff member. Staff sign in with their email and own the
    interactions, follow-ups, prayer requests and action items they create.
    """
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    role = db.Column(db.String(20), nullable=False, default='staff')  # admin, staff, volunteer
    color = db.Column(db.String(20), nullable=False, default=DEFAULT_STAFF_COLOR)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Deleting a staff member removes what they own so every record keeps one owner
    interactions = db.relationship('Interaction', backref='staff', lazy=True, cascade='all, delete')
    follow_ups = db.relationship('FollowUp', backref='staff', lazy=True, cascade='all, delete')
    prayer_requests = db.relationship('PrayerRequest', backref='staff', lazy=True, cascade='all, delete')
    action_items = db.relationship('ActionItem', backref='staff', lazy=True, cascade='all, delete')
    notes = db.relationship('StudentNote', backref='staff', lazy=True)

    def set_password(self, password):
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == 'admin'

    def __repr__(self):
        return f"Staff('{self.email}', '{self.role}')"


class Student(db.Model):
    """
    Model for storing student information.
    """
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(120), nullable=False, index=True)
    email = db.Column(db.String(120), nullable=True, index=True)
    phone = db.Column(db.String(30), nullable=True, index=True)
    gender = db.Column(db.String(20), nullable=True)
    year = db.Column(db.String(20), nullable=False)
    major = db.Column(db.String(120), nullable=True)
    address = db.Column(db.Text, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='active')
    photo = db.Column(db.String(255), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    interactions = db.relationship('Interaction', backref='student', lazy=True, cascade='all, delete-orphan')
    follow_ups = db.relationship('FollowUp', backref='student', lazy=True, cascade='all, delete-orphan')
    prayer_requests = db.relationship('PrayerRequest', backref='student', lazy=True, cascade='all, delete-orphan')
    action_items = db.relationship('ActionItem', backref='student', lazy=True, cascade='all, delete')
    tag_links = db.relationship('StudentTag', backref='student', lazy=True,
                                cascade='all, delete-orphan', order_by='StudentTag.name')
    note_entries = db.relationship('StudentNote', backref='student', lazy=True,
                                   cascade='all, delete-orphan', order_by='desc(StudentNote.id)')

    @property
    def tags(self):
        return [link.name for link in self.tag_links]

    @tags.setter
    def tags(self, value):
        # Reuse rows for labels that stay, so the (student, name) constraint holds
        existing = {link.name: link for link in self.tag_links}
        self.tag_links = [existing.get(name) or StudentTag(name=name) for name in normalize_labels(value)]

    @property
    def notes(self):
        """Note entries, newest first."""
        ordered = sorted(self.note_entries, key=lambda note: note.id or 0, reverse=True)
        return [NoteEntry(note.entry_date or '', note.content) for note in ordered]

    @property
    def notes_text(self):
        """The note entries rendered in the old single-field format."""
        return format_notes(self.notes)

    def import_notes(self, blob, author_id=None):
        """
        Replace the note entries with those parsed from a legacy notes blob.

        Entries are inserted oldest first so that newest-first ordering by id
        reproduces the order of the blob.
        """
        self.note_entries = [
            StudentNote(entry_date=entry.date or None, content=entry.content, staff_id=author_id)
            for entry in reversed(parse_notes(blob))
        ]

    def add_note(self, entry_date, content, author_id=None):
        note = StudentNote(entry_date=entry_date, content=content, staff_id=author_id)
        self.note_entries.append(note)
        return note

    def __repr__(self):
        return f"Student('{self.name}', Year: '{self.year}')"


class StudentTag(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String(100), nullable=False, index=True)

    __table_args__ = (db.UniqueConstraint('student_id', 'name', name='uq_student_tag'),)


class StudentNote(db.Model):
    """
    One dated entry on a student's profile.
    """
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), nullable=False)
    staff_id = db.Column(db.Integer, db.ForeignKey('staff.id', ondelete='SET NULL'), nullable=True)
    # ISO date string as written; legacy undated entries have none
    entry_date = db.Column(db.String(10), nullable=True)
    content = db.Column(db.Text, nullable=False, default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)


class Interaction(db.Model):
    """
    A logged contact between a staff member and a student.
    Confidential interactions are only visible to their owner and admins.
    """
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), nullable=False)
    staff_id = db.Column(db.Integer, db.ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    type = db.Column(db.String(30), nullable=False)
    location = db.Column(db.String(200), nullable=True)
    notes = db.Column(db.Text, nullable=True)
    is_confidential = db.Column(db.Boolean, nullable=False, default=False)
    attachments = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    topic_links = db.relationship('InteractionTopic', backref='interaction', lazy=True,
                                  cascade='all, delete-orphan', order_by='InteractionTopic.name')
    action_items = db.relationship('ActionItem', backref='interaction', lazy=True)

    @hybrid_property
    def is_sensitive(self):
        return self.is_confidential

    @property
    def topics(self):
        return [link.name for link in self.topic_links]

    @topics.setter
    def topics(self, value):
        existing = {link.name: link for link in self.topic_links}
        self.topic_links = [existing.get(name) or InteractionTopic(name=name) for name in normalize_labels(value)]

    def __repr__(self):
        return f"Interaction(Student: {self.student_id}, Staff: {self.staff_id}, Type: '{self.type}')"


class InteractionTopic(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    interaction_id = db.Column(db.Integer, db.ForeignKey('interaction.id', ondelete='CASCADE'), nullable=False)
    name = db.Column(db.String(100), nullable=False)

    __table_args__ = (db.UniqueConstraint('interaction_id', 'name', name='uq_interaction_topic'),)


class FollowUp(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), nullable=False)
    staff_id = db.Column(db.Integer, db.ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    due_date = db.Column(db.DateTime, nullable=False, index=True)
    priority = db.Column(db.String(10), nullable=False, default='medium')
    reason = db.Column(db.Text, nullable=True)
    completed = db.Column(db.Boolean, nullable=False, default=False)
    completed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def set_completed(self, completed):
        self.completed = bool(completed)
        self.completed_at = datetime.utcnow() if self.completed else None

    def __repr__(self):
        return f"FollowUp(Student: {self.student_id}, Due: {self.due_date}, Completed: {self.completed})"


class PrayerRequest(db.Model):
    """
    A prayer request shared by a student. Private requests are only visible
    to the staff member who recorded them and to admins.
    """
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), nullable=False)
    staff_id = db.Column(db.Integer, db.ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    date = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, index=True)
    content = db.Column(db.Text, nullable=False)
    category = db.Column(db.String(20), nullable=False, default='other')
    status = db.Column(db.String(20), nullable=False, default='active')
    is_private = db.Column(db.Boolean, nullable=False, default=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @hybrid_property
    def is_sensitive(self):
        return self.is_private

    def __repr__(self):
        return f"PrayerRequest(Student: {self.student_id}, Status: '{self.status}', Private: {self.is_private})"


class ActionItem(db.Model):
    id = db.Column(db.Integer, primary_key=True)
    student_id = db.Column(db.Integer, db.ForeignKey('student.id', ondelete='CASCADE'), nullable=True)
    staff_id = db.Column(db.Integer, db.ForeignKey('staff.id', ondelete='CASCADE'), nullable=False)
    interaction_id = db.Column(db.Integer, db.ForeignKey('interaction.id', ondelete='SET NULL'), nullable=True)
    description = db.Column(db.Text, nullable=False)
    due_date = db.Column(db.DateTime, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='pending')
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"ActionItem(Staff: {self.staff_id}, Status: '{self.status}')"


class ActivityLog(db.Model):
    """
    Model for tracking user activities for auditing and security purposes.
    """
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('staff.id', ondelete='SET NULL'), nullable=True)
    action = db.Column(db.String(100), nullable=False)
    details = db.Column(db.Text, nullable=True)
    ip_address = db.Column(db.String(45), nullable=True)
    user_agent = db.Column(db.Text, nullable=True)
    success = db.Column(db.Boolean, default=True)
    error_message = db.Column(db.Text, nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow)

    user = db.relationship('Staff', backref='activity_logs', lazy=True)

    def __repr__(self):
        return f"ActivityLog(User: {self.user_id}, Action: {self.action}, Success: {self.success})"
