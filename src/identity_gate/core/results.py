"""Uniform result shape returned by every lifecycle operation"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .errors import ErrorKind
from .models import Account, Session


@dataclass
class OperationResult:
    """
    Outcome of a lifecycle operation.

    Exactly one field group is populated:
    - success: message, requires_confirmation, user, session
    - failure: error, technical_error, error_kind

    technical_error carries raw provider or exception detail for logs and
    support tooling. It is never folded into error.
    """

    success: bool
    message: Optional[str] = None
    requires_confirmation: Optional[bool] = None
    user: Optional[Account] = None
    session: Optional[Session] = None
    error: Optional[str] = None
    technical_error: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    def __post_init__(self):
        if self.success:
            if self.error or self.technical_error or self.error_kind:
                raise ValueError("Successful result cannot carry error fields")
        else:
            if not self.error or not self.error.strip():
                raise ValueError("Failed result requires a non-empty error message")
            if any(
                value is not None
                for value in (self.message, self.requires_confirmation, self.user, self.session)
            ):
                raise ValueError("Failed result cannot carry success fields")

    @classmethod
    def ok(
        cls,
        message: str,
        requires_confirmation: Optional[bool] = None,
        user: Optional[Account] = None,
        session: Optional[Session] = None,
    ) -> "OperationResult":
        return cls(
            success=True,
            message=message,
            requires_confirmation=requires_confirmation,
            user=user,
            session=session,
        )

    @classmethod
    def fail(
        cls,
        kind: ErrorKind,
        error: str,
        technical_error: Optional[str] = None,
    ) -> "OperationResult":
        return cls(
            success=False,
            error=error,
            technical_error=technical_error,
            error_kind=kind,
        )

    def to_dict(self, include_technical: bool = True) -> Dict[str, Any]:
        """
        Convert to JSON-serializable dict.

        Only populated fields are emitted. Set include_technical=False when
        the dict is going to an end user.
        """
        if self.success:
            data: Dict[str, Any] = {"success": True, "message": self.message}
            if self.requires_confirmation is not None:
                data["requiresConfirmation"] = self.requires_confirmation
            if self.user is not None:
                data["user"] = self.user.to_dict()
            if self.session is not None:
                data["session"] = self.session.to_dict()
            return data

        data = {
            "success": False,
            "error": self.error,
            "errorKind": self.error_kind.value if self.error_kind else None,
        }
        if include_technical and self.technical_error:
            data["technicalError"] = self.technical_error
        return data
