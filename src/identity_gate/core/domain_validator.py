"""Registration eligibility rules.

Pure, synchronous checks run before any identity provider call:
- Email must belong to the organizational domain
- Password must satisfy the password policy
"""

DEFAULT_REGISTRATION_DOMAIN = "cesaris.edu.it"
DEFAULT_PASSWORD_MIN_LENGTH = 8


def is_eligible_email(email: str, domain: str = DEFAULT_REGISTRATION_DOMAIN) -> bool:
    """
    Check that an email belongs to the registration domain.

    The comparison is a case-insensitive suffix match against "@<domain>".

    Args:
        email: Email address to check
        domain: Registration domain, with or without a leading "@"

    Returns:
        True if the email may register, False otherwise (never raises)
    """
    if not isinstance(email, str) or not isinstance(domain, str):
        return False
    suffix = ("@" + domain.lstrip("@")).upper()
    return email.upper().endswith(suffix)


def meets_password_policy(
    password: str, min_length: int = DEFAULT_PASSWORD_MIN_LENGTH
) -> bool:
    """Return True if password is acceptable for a new account."""
    if not isinstance(password, str):
        return False
    return len(password) >= min_length


class DomainValidator:
    """Registration rules bound to one deployment's configuration"""

    def __init__(
        self,
        domain: str = DEFAULT_REGISTRATION_DOMAIN,
        password_min_length: int = DEFAULT_PASSWORD_MIN_LENGTH,
    ):
        self.domain = domain.lstrip("@").lower()
        self.password_min_length = password_min_length

    def is_eligible_email(self, email: str) -> bool:
        return is_eligible_email(email, self.domain)

    def meets_password_policy(self, password: str) -> bool:
        return meets_password_policy(password, self.password_min_length)
