"""
DashChat Errors

Error taxonomy shared by services, storages and routes.
Each kind maps to one HTTP status and one realtime error reason.
"""
from typing import Dict, Iterable, Optional


class ChatError(Exception):
    """Base class for all DashChat errors"""

    status_code = 500
    kind = "ChatError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Convert to dictionary for API response"""
        return {"error": self.message, "type": self.kind}


class ValidationError(ChatError):
    """Malformed or missing input. Always client-caused."""

    status_code = 400
    kind = "ValidationError"

    def __init__(self, message: str, fields: Optional[Dict[str, str]] = None):
        super().__init__(message)
        self.fields = fields or {}

    @classmethod
    def for_field(cls, field: str, reason: str) -> "ValidationError":
        return cls(f"{field}: {reason}", {field: reason})

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.fields:
            result["fields"] = self.fields
        return result


class NotFoundError(ChatError):
    """Referenced entity does not exist"""

    status_code = 404
    kind = "NotFound"


class AuthorizationError(ChatError):
    """Actor lacks rights over the target entity"""

    status_code = 403
    kind = "AuthorizationError"


class PersistenceError(ChatError):
    """Store operation failed. Details are logged, never sent to clients."""

    status_code = 500
    kind = "PersistenceError"

    def __init__(self, message: str = "Storage operation failed"):
        super().__init__(message)


def fields_from_errors(errors: Iterable[dict]) -> Dict[str, str]:
    """
    Flatten pydantic error dicts into {field path: message}.

    The leading "body"/"query"/"path" location segment is dropped.
    """
    fields: Dict[str, str] = {}
    for error in errors:
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in ("body", "query", "path", "header"):
            loc = loc[1:]
        key = ".".join(loc) or "payload"
        fields.setdefault(key, error.get("msg", "invalid value"))
    return fields
