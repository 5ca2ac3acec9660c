"""
Auth Service - Sign-in, JWT tokens, profiles and the unlock PIN
"""

from typing import Dict, Any, Optional
from datetime import datetime, timedelta, timezone
import logging
import re

import jwt
from flask import current_app
from werkzeug.security import generate_password_hash, check_password_hash

from stockroom.database import transaction
from stockroom.models import Profile, ProfileRole
from stockroom.repositories import ProfileRepository
from stockroom.services.errors import ServiceError, AuthError, NotFound, DuplicateValue, InvalidInput

logger = logging.getLogger(__name__)

PIN_PATTERN = re.compile(r'^\d{4,8}$')
MIN_PASSWORD_LENGTH = 8


def _jwt_config():
    config = current_app.config
    return {
        'secret': config['JWT_SECRET'],
        'algorithm': config['JWT_ALGORITHM'],
        'issuer': config['JWT_ISSUER'],
        'audience': config['JWT_AUDIENCE'],
        'expires_minutes': config['JWT_EXPIRES_MINUTES']
    }


def issue_token(profile: Profile) -> str:
    """Signed access token for a profile"""
    jwt_config = _jwt_config()
    now = datetime.now(timezone.utc)
    payload = {
        'sub': profile.id,
        'email': profile.email,
        'roles': [profile.role.value],
        'iss': jwt_config['issuer'],
        'aud': jwt_config['audience'],
        'iat': now,
        'exp': now + timedelta(minutes=jwt_config['expires_minutes'])
    }
    return jwt.encode(payload, jwt_config['secret'], algorithm=jwt_config['algorithm'])


def decode_token(token: str) -> Dict[str, Any]:
    """Decode and validate a token"""
    jwt_config = _jwt_config()
    try:
        return jwt.decode(
            token,
            jwt_config['secret'],
            algorithms=[jwt_config['algorithm']],
            issuer=jwt_config['issuer'],
            audience=jwt_config['audience']
        )
    except jwt.ExpiredSignatureError:
        raise AuthError('Token has expired')
    except jwt.InvalidTokenError as e:
        logger.warning(f'Invalid token: {str(e)}')
        raise AuthError('Invalid token')


class AuthService:
    """Credentials and profile management"""

    def __init__(self):
        self.profile_repo = ProfileRepository()

    def _get_or_404(self, profile_id: str) -> Profile:
        profile = self.profile_repo.get_by_id(profile_id)
        if not profile:
            raise NotFound(f"Profile {profile_id} not found", profile_id=profile_id)
        return profile

    def register(self, email: str, password: str, full_name: Optional[str] = None,
                 role: str = ProfileRole.MEMBER.value) -> Dict[str, Any]:
        try:
            email = (email or '').strip().lower()
            if not email or '@' not in email:
                raise InvalidInput("A valid email is required")
            if not password or len(password) < MIN_PASSWORD_LENGTH:
                raise InvalidInput(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
            if self.profile_repo.get_by_email(email):
                raise DuplicateValue(f"An account for {email} already exists", email=email)

            with transaction():
                profile = self.profile_repo.add(Profile(
                    email=email,
                    password_hash=generate_password_hash(password),
                    full_name=full_name,
                    role=ProfileRole(role)
                ))

            logger.info(f"Registered profile {profile.id}")
            return profile.to_dict()

        except ServiceError as e:
            logger.warning(f"Registration rejected: {e.message}")
            raise
        except Exception as e:
            logger.error(f"Error registering profile: {str(e)}")
            raise

    def sign_in(self, email: str, password: str) -> Dict[str, Any]:
        """Check credentials and return a session with token and profile"""
        profile = self.profile_repo.get_by_email(email or '')
        if not profile or not check_password_hash(profile.password_hash, password or ''):
            logger.warning("Sign-in failed: bad credentials")
            raise AuthError("Invalid email or password")

        logger.info(f"Signed in profile {profile.id}")
        return {
            'access_token': issue_token(profile),
            'token_type': 'Bearer',
            'expires_in': _jwt_config()['expires_minutes'] * 60,
            'user': {'id': profile.id, 'email': profile.email, 'roles': [profile.role.value]},
            'profile': profile.to_dict()
        }

    def get_profile(self, profile_id: str) -> Dict[str, Any]:
        return self._get_or_404(profile_id).to_dict()

    def update_profile(self, profile_id: str, **data) -> Dict[str, Any]:
        profile = self._get_or_404(profile_id)
        with transaction():
            for key in ('full_name', 'avatar_url'):
                if key in data:
                    setattr(profile, key, data[key])
        return profile.to_dict()

    def set_pin(self, profile_id: str, pin: str) -> Dict[str, Any]:
        """Store a 4 to 8 digit unlock PIN as a hash"""
        if not isinstance(pin, str) or not PIN_PATTERN.match(pin):
            raise InvalidInput("PIN must be 4 to 8 digits")
        profile = self._get_or_404(profile_id)
        with transaction():
            profile.pin_hash = generate_password_hash(pin)
        logger.info(f"PIN set for profile {profile_id}")
        return profile.to_dict()

    def verify_pin(self, profile_id: str, pin: str) -> bool:
        profile = self._get_or_404(profile_id)
        if not profile.pin_hash or not isinstance(pin, str):
            return False
        return check_password_hash(profile.pin_hash, pin)

    def clear_pin(self, profile_id: str) -> Dict[str, Any]:
        profile = self._get_or_404(profile_id)
        with transaction():
            profile.pin_hash = None
        logger.info(f"PIN cleared for profile {profile_id}")
        return profile.to_dict()
