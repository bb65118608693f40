"""Identity service: local user accounts and the active session.

Accounts live in the same key-value store as the finance records, under the
``users`` key; the signed-in user (without password material) is kept under
``current_user`` so a session survives a restart.
"""

from __future__ import annotations

import hashlib
import hmac
import secrets
import uuid
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional

import structlog

from .config import DEFAULT_CURRENCY
from .exceptions import NotAuthenticatedError
from .models import User
from .serialization import record_from_dict, record_to_dict
from .storage import KeyValueStore

logger = structlog.get_logger()

USERS_KEY = 'users'
CURRENT_USER_KEY = 'current_user'

_HASH_ITERATIONS = 120_000


def hash_password(password: str, salt: Optional[str] = None) -> Dict[str, str]:
    salt = salt or secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac(
        'sha256', password.encode('utf-8'), bytes.fromhex(salt), _HASH_ITERATIONS
    )
    return {'salt': salt, 'password_hash': digest.hex()}


def verify_password(password: str, salt: str, expected_hash: str) -> bool:
    candidate = hash_password(password, salt)['password_hash']
    return hmac.compare_digest(candidate, expected_hash)


def _public_user(account: Dict[str, Any]) -> User:
    user = record_from_dict(User, account)
    if not account.get('currency'):
        user = replace(user, currency=DEFAULT_CURRENCY)
    return user


class IdentityService:
    """Registers users, signs them in and out, and tracks the active session."""

    def __init__(self, store: KeyValueStore):
        self.store = store
        self._user: Optional[User] = None
        self.restore_session()

    @property
    def current_user(self) -> Optional[User]:
        return self._user

    def require_user(self, action: str = "This operation") -> User:
        if self._user is None:
            raise NotAuthenticatedError(action)
        return self._user

    def restore_session(self) -> Optional[User]:
        """Reload the signed-in user from the store, if any.

        Users saved before currencies existed get the default currency.
        """
        saved = self.store.get(CURRENT_USER_KEY)
        self._user = _public_user(saved) if isinstance(saved, dict) else None
        return self._user

    def _accounts(self) -> List[Dict[str, Any]]:
        accounts = self.store.get(USERS_KEY)
        return accounts if isinstance(accounts, list) else []

    def _start_session(self, user: User) -> None:
        self._user = user
        self.store.set(CURRENT_USER_KEY, record_to_dict(user))

    def register(self, email: str, password: str, name: str, currency: str = DEFAULT_CURRENCY) -> bool:
        """Create an account and sign it in.

        Returns:
            False if an account with ``email`` already exists, True otherwise.
        """
        accounts = self._accounts()
        if any(account.get('email') == email for account in accounts):
            logger.info("Registration rejected, email in use", email=email)
            return False

        user = User(
            id=str(uuid.uuid4()),
            email=email,
            name=name,
            currency=currency,
            created_at=datetime.now(),
        )
        accounts.append({**record_to_dict(user), **hash_password(password)})
        self.store.set(USERS_KEY, accounts)
        self._start_session(user)
        logger.info("User registered", user_id=user.id)
        return True

    def login(self, email: str, password: str) -> bool:
        for account in self._accounts():
            if account.get('email') != email:
                continue
            salt = account.get('salt')
            expected = account.get('password_hash')
            if salt and expected and verify_password(password, salt, expected):
                user = _public_user(account)
                self._start_session(user)
                logger.info("User signed in", user_id=user.id)
                return True
            break
        logger.info("Sign-in failed", email=email)
        return False

    def logout(self) -> None:
        if self._user is not None:
            logger.info("User signed out", user_id=self._user.id)
        self._user = None
        self.store.remove(CURRENT_USER_KEY)

    def update_user_currency(self, currency: str) -> None:
        """Change the display currency of the signed-in user.

        The currency only affects formatting; stored amounts are untouched.
        """
        if self._user is None:
            return
        self._start_session(replace(self._user, currency=currency))

        accounts = [
            {**account, 'currency': currency} if account.get('id') == self._user.id else account
            for account in self._accounts()
        ]
        self.store.set(USERS_KEY, accounts)
        logger.info("Display currency updated", user_id=self._user.id, currency=currency)
