"""
Account flows: sign-in, password reset and change, beta-access requests.

These are thin wrappers over the auth provider and API client that add the
form-level validation the screens need. Provider failures come back as
AuthError with the provider's own message; the session is not touched.
"""

import logging
import re
from typing import List, Optional

from apicius.api_client import ApiClient
from apicius.config import SiteConfig
from apicius.errors import ApiError, AuthError, ErrorKind, PasswordPolicyError
from apicius.models import AuthSession
from apicius.providers.base import AuthProvider
from apicius.routes import LOGIN, Navigator

logger = logging.getLogger(__name__)

PASSWORD_CHANGED_MESSAGE = "Password updated successfully. Please log in with your new password."
BETA_REQUEST_FAILED_MESSAGE = "Failed to submit beta request. Please try again."

PASSWORD_RULES = [
    (lambda p: len(p) >= 8, "Password must be at least 8 characters long"),
    (lambda p: re.search(r"[A-Z]", p), "Password must contain at least one uppercase letter"),
    (lambda p: re.search(r"[a-z]", p), "Password must contain at least one lowercase letter"),
    (lambda p: re.search(r"[0-9]", p), "Password must contain at least one number"),
    (lambda p: re.search(r"[!@#$%^&*]", p), "Password must contain at least one special character (!@#$%^&*)"),
]


def password_problems(password: str) -> List[str]:
    """Every password rule the given password breaks, in rule order."""
    return [message for rule, message in PASSWORD_RULES if not rule(password)]


class AccountService:
    """
    Account screens' actions.

    Args:
        auth: Auth provider
        api: Backend API client (beta-access requests)
        navigate: Route callback; a successful password change goes to login
    """

    def __init__(self, auth: AuthProvider, api: ApiClient, navigate: Navigator):
        self.auth = auth
        self.api = api
        self.navigate = navigate

    def sign_in(self, email: str, password: str) -> AuthSession:
        """
        Sign in with email and password.

        Raises:
            AuthError: On missing input or rejected credentials.
        """
        if not email.strip() or not password:
            raise AuthError("Please enter your email and password")
        return self.auth.sign_in_with_password(email.strip(), password)

    def send_password_reset(self, email: str, redirect_to: Optional[str] = None) -> None:
        """
        Email a password-reset link that returns to the change-password screen.

        Raises:
            AuthError: On missing email or provider failure.
        """
        if not email.strip():
            raise AuthError("Please enter your email address")
        target = redirect_to or SiteConfig.get_change_password_url()
        logger.info("Sending password reset email (redirect to %s)", target)
        self.auth.reset_password_for_email(email.strip(), target)

    def change_password(self, password: str, confirm_password: str) -> str:
        """
        Set a new password for the signed-in user.

        Returns:
            Confirmation message for the next screen.

        Raises:
            PasswordPolicyError: If the passwords differ or break any rule
                (all broken rules are listed together).
            AuthError: If the provider rejects the change.
        """
        if password != confirm_password:
            raise PasswordPolicyError(["Passwords do not match"])
        problems = password_problems(password)
        if problems:
            raise PasswordPolicyError(problems)

        self.auth.update_password(password)
        logger.info("Password updated")
        self.navigate(LOGIN)
        return PASSWORD_CHANGED_MESSAGE

    def request_beta_access(self, email: str) -> None:
        """
        Ask to join the beta.

        Raises:
            ApiError: kind "validation" for a blank email (nothing is sent);
                otherwise a generic failure message keeping the original kind.
        """
        if not email.strip():
            raise ApiError(ErrorKind.VALIDATION, "Please enter your email address")
        result = self.api.request_beta_access(email.strip())
        if not result.is_ok:
            logger.warning("Beta access request failed: %s", result.message)
            raise ApiError(result.kind, BETA_REQUEST_FAILED_MESSAGE, status=result.status, code=result.code)
