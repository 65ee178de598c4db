"""
Identity resolution strategies.

The "current user" is inferred from ambient, untrusted signals (header,
environment, configuration, OS account). This is a convention for an
internal tool, NOT a security boundary.
"""

import getpass
import logging
import os
from abc import ABC, abstractmethod
from typing import Mapping, Optional

logger = logging.getLogger(__name__)

ANONYMOUS = "anonymous"


def sanitize_username(username: Optional[str]) -> str:
    """
    Normalize a raw user name.

    DOMAIN\\alice -> alice, alice@corp.example -> alice, then lowercase and trim.
    """
    if not username:
        return ANONYMOUS

    if "\\" in username:
        username = username.split("\\")[-1]
    if "@" in username:
        username = username.split("@")[0]

    username = username.lower().strip()
    return username or ANONYMOUS


def is_authenticated_name(name: str) -> bool:
    return bool(name) and name != ANONYMOUS


class IdentityResolver(ABC):
    """Abstract identity provider. Returns a plain user name string."""

    @abstractmethod
    def resolve(
        self,
        header_value: Optional[str] = None,
        principal_name: Optional[str] = None,
    ) -> str:
        """
        Resolve the current user.

        Args:
            header_value: Value of the trusted user header, if the request has one
            principal_name: Name of an already-authenticated principal, if any

        Returns:
            Sanitized user name; never empty
        """
        pass


class AmbientIdentityResolver(IdentityResolver):
    """
    Layered resolver, first non-empty source wins:

    1. request header (X-User-Name by default)
    2. process environment override (CURRENT_USER by default)
    3. static configuration value
    4. OS account name
    5. authenticated principal
    6. "anonymous"
    """

    def __init__(
        self,
        default_user: Optional[str] = None,
        env_var: str = "CURRENT_USER",
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.default_user = default_user
        self.env_var = env_var
        # Read lazily so a changed environment is seen on the next request
        self._environ = environ

    @property
    def environ(self) -> Mapping[str, str]:
        return self._environ if self._environ is not None else os.environ

    def resolve(
        self,
        header_value: Optional[str] = None,
        principal_name: Optional[str] = None,
    ) -> str:
        if header_value:
            return sanitize_username(header_value)

        env_user = self.environ.get(self.env_var)
        if env_user:
            return sanitize_username(env_user)

        if self.default_user:
            return sanitize_username(self.default_user)

        system_user = self._system_username()
        if system_user:
            return sanitize_username(system_user)

        if principal_name:
            return sanitize_username(principal_name)

        return ANONYMOUS

    @staticmethod
    def _system_username() -> Optional[str]:
        # getpass checks LOGNAME, USER, LNAME, USERNAME, then the password db
        try:
            return getpass.getuser()
        except (OSError, KeyError, ImportError) as e:
            logger.warning("Could not determine system username: %s", e)
            return None
