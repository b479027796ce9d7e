"""HTTP Basic authentication against an htpasswd file."""

from pathlib import Path
from typing import Dict, Optional

import bcrypt
from fastapi import Depends, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from common.logging_config import get_logger
from fragments.exceptions import AuthenticationError
from fragments.utils import hash_owner

logger = get_logger(__name__)

basic_scheme = HTTPBasic(auto_error=False)


def verify_password(password: str, password_hash: str) -> bool:
    """
    Verify a password against a bcrypt hash.

    Apache writes bcrypt hashes with the $2y$ prefix; it is the same
    algorithm as $2b$.

    Args:
        password: Plain text password to verify
        password_hash: Bcrypt hash to verify against

    Returns:
        True if password matches hash, False otherwise
    """
    if password_hash.startswith('$2y$'):
        password_hash = '$2b$' + password_hash[4:]
    try:
        return bcrypt.checkpw(password.encode('utf-8'), password_hash.encode('utf-8'))
    except ValueError:
        logger.warning("Stored password hash is not a valid bcrypt hash")
        return False


class HtpasswdAuthenticator:
    """
    Verifies username/password pairs against bcrypt entries in an htpasswd file.

    Lines look like "user@example.com:$2y$10$...". Blank lines and lines
    starting with '#' are ignored.
    """

    def __init__(self, users: Dict[str, str]):
        self._users = users

    @classmethod
    def from_file(cls, path: str) -> "HtpasswdAuthenticator":
        users: Dict[str, str] = {}
        for line in Path(path).read_text(encoding='utf-8').splitlines():
            line = line.strip()
            if not line or line.startswith('#'):
                continue
            username, sep, password_hash = line.partition(':')
            if not sep or not username:
                logger.warning("Skipping malformed htpasswd line")
                continue
            users[username] = password_hash
        logger.info(f"Loaded {len(users)} users from htpasswd file {path}")
        return cls(users)

    def authenticate(self, username: str, password: str) -> str:
        """
        Check credentials and return the owner id for the user.

        Raises:
            AuthenticationError: If the user is unknown or the password is wrong
        """
        password_hash = self._users.get(username)
        if password_hash is None or not verify_password(password, password_hash):
            logger.warning("Authentication failed")
            raise AuthenticationError("Unauthorized")
        return hash_owner(username)


def get_current_user(
    request: Request,
    credentials: Optional[HTTPBasicCredentials] = Depends(basic_scheme),
) -> str:
    """
    FastAPI dependency to validate Basic credentials and extract the owner id.

    Declared sync so FastAPI runs the bcrypt check in its threadpool.

    Returns:
        Owner id of the authenticated user

    Raises:
        AuthenticationError: If credentials are missing or invalid
    """
    if credentials is None:
        raise AuthenticationError("Unauthorized")

    authenticator: Optional[HtpasswdAuthenticator] = request.app.state.authenticator
    if authenticator is None:
        logger.error("No authenticator configured; rejecting request")
        raise AuthenticationError("Unauthorized")

    owner_id = authenticator.authenticate(credentials.username, credentials.password)
    request.state.user_id = owner_id
    return owner_id
