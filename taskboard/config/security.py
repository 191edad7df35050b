# taskboard/config/security.py
# Security configuration for sessions, passwords and response headers

import os
from typing import Dict


class SecurityConfig:
    """Security configuration for the application"""

    # Session cookie settings
    SESSION = {
        'cookie_name': os.getenv('SESSION_COOKIE_NAME', 'taskboard_session'),
        'max_age_hours': int(os.getenv('SESSION_MAX_AGE_HOURS', 24)),
        'cookie_secure': os.getenv('SESSION_COOKIE_SECURE', 'false').lower() == 'true',
        'cookie_samesite': os.getenv('SESSION_COOKIE_SAMESITE', 'lax'),
    }

    # Password policy
    PASSWORD = {
        'bcrypt_rounds': int(os.getenv('BCRYPT_ROUNDS', 10)),
        'min_length': int(os.getenv('PASSWORD_MIN_LENGTH', 6)),
    }

    # Security headers
    SECURITY_HEADERS = {
        'X-Content-Type-Options': 'nosniff',
        'X-Frame-Options': 'DENY',
        'Referrer-Policy': 'same-origin',
    }

    @classmethod
    def session_max_age_seconds(cls) -> int:
        """Cookie lifetime in seconds"""
        return cls.SESSION['max_age_hours'] * 60 * 60

    @classmethod
    def get_security_headers(cls) -> Dict[str, str]:
        return dict(cls.SECURITY_HEADERS)
