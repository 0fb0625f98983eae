"""
Demo accounts for the mock login flow.

This is a placeholder, not an authentication scheme: tokens are opaque
strings that embed the user id as ``-<id>-`` and are matched by substring.
"""
import copy
import time

TOKEN_EXPIRES_IN = 3600  # 1 hour

DEMO_USERS = {
    '1': {
        'id': '1',
        'firstName': 'Admin',
        'lastName': 'User',
        'email': 'admin@shrimpfarm.com',
        'role': 'admin',
        'permissions': ['read', 'write', 'delete', 'manage'],
    },
    '2': {
        'id': '2',
        'firstName': 'Farm',
        'lastName': 'Manager',
        'email': 'manager@shrimpfarm.com',
        'role': 'manager',
        'permissions': ['read', 'write'],
    },
    '3': {
        'id': '3',
        'firstName': 'Demo',
        'lastName': 'User',
        'email': 'demo@shrimpfarm.com',
        'role': 'editor',
        'permissions': ['read'],
    },
}

# (email, password, user id)
DEMO_CREDENTIALS = [
    ('admin@shrimpfarm.com', 'admin123', '1'),
    ('manager@shrimpfarm.com', 'manager123', '2'),
    ('demo@shrimpfarm.com', 'demo123', '3'),
]

DEMO_ACCOUNTS_HINT = 'Available demo accounts:\n' + '\n'.join(
    f"- {email} / {password}" for email, password, _ in DEMO_CREDENTIALS
)


def get_demo_user(user_id):
    user = DEMO_USERS.get(user_id)
    return copy.deepcopy(user) if user else None


def authenticate_demo(email, password):
    """Return a copy of the matching demo user, or None."""
    for demo_email, demo_password, user_id in DEMO_CREDENTIALS:
        if email == demo_email and password == demo_password:
            return get_demo_user(user_id)
    return None


def issue_demo_tokens(user, now_ms=None):
    now_ms = now_ms if now_ms is not None else int(time.time() * 1000)
    return {
        'accessToken': f"mock-jwt-token-{user['id']}-{now_ms}",
        'refreshToken': f"mock-refresh-token-{user['id']}-{now_ms}",
        'expiresIn': TOKEN_EXPIRES_IN,
    }


def user_for_token(token):
    """Map a bearer token to a demo user; ids are checked in order 1, 2, 3."""
    if not token:
        return None
    for user_id in ('1', '2', '3'):
        if f"-{user_id}-" in token:
            return get_demo_user(user_id)
    return None
