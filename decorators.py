from functools import wraps
from flask import abort
from flask_login import current_user

from services.visibility import is_admin

STAFF_ROLES = ['admin', 'staff', 'volunteer']


def admin_required(f):
    """Restricts access to users with the 'admin' role."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            abort(401)  # Unauthorized - not logged in
        if not is_admin(current_user.role):
            abort(403, description='Admin access required')
        return f(*args, **kwargs)
    return decorated_function


def staff_required(f):
    """Restricts access to signed-in users holding one of the ministry roles."""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            abort(401)  # Unauthorized - not logged in
        if current_user.role not in STAFF_ROLES:
            abort(403)  # Forbidden - wrong role
        return f(*args, **kwargs)
    return decorated_function
