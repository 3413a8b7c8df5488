"""
User model for MediaDeck.
Provides Flask-Login integration.
"""
from flask_login import UserMixin

from core.auth_db import ROLE_ADMIN


class User(UserMixin):
    """Session principal backed by a users-document record."""

    def __init__(self, user_data):
        self.id = user_data['username']
        self.username = user_data['username']
        self.name = user_data.get('name') or user_data['username']
        self.role = user_data.get('role')

    def get_id(self):
        """Return the username, which Flask-Login stores in the session."""
        return self.username

    @property
    def is_admin(self):
        return self.role == ROLE_ADMIN

    def to_principal(self):
        """Public view of the principal; never includes the credential."""
        return {
            'username': self.username,
            'name': self.name,
            'role': self.role,
        }
