"""
Error taxonomy for the signing core.

Every failure the core can report is a SigningError subclass with a stable
`code` (the name returned to HTTP clients) and the HTTP status the facade
answers with.  Raw library exceptions are never re-raised through this
hierarchy; callers only ever see these types.
"""

from __future__ import annotations


class SigningError(Exception):
    code        = "SigningError"
    status_code = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def to_dict(self) -> dict[str, str]:
        return {"error": self.code, "detail": self.detail}


class InvalidKeyLength(SigningError):
    code = "InvalidKeyLength"

    def __init__(self, field: str, expected: int, actual: int) -> None:
        super().__init__(f"{field} must be {expected} bytes, got {actual}")
        self.field    = field
        self.expected = expected
        self.actual   = actual


class InvalidSignatureLength(SigningError):
    code = "InvalidSignatureLength"

    def __init__(self, field: str, expected: int, actual: int) -> None:
        super().__init__(f"{field} must be {expected} bytes, got {actual}")
        self.field    = field
        self.expected = expected
        self.actual   = actual


class MalformedEncoding(SigningError):
    code = "MalformedEncoding"

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field} is not valid hex: {reason}")
        self.field = field


class NoKeyConfigured(SigningError):
    code = "NoKeyConfigured"

    def __init__(self, detail: str = "Generate keys first") -> None:
        super().__init__(detail)


class RandomnessExhausted(SigningError):
    code        = "RandomnessExhausted"
    status_code = 503


class UnknownScheme(SigningError):
    code = "UnknownScheme"

    def __init__(self, name: str, known: list[str]) -> None:
        super().__init__(f"unknown signature scheme {name!r} (known: {', '.join(known)})")
        self.name = name


class MessageTooLarge(SigningError):
    code        = "MessageTooLarge"
    status_code = 413

    def __init__(self, limit: int, actual: int) -> None:
        super().__init__(f"message is {actual} bytes, limit is {limit}")
        self.limit  = limit
        self.actual = actual


class MalformedKey(SigningError):
    code = "MalformedKey"

    def __init__(self, field: str, reason: str) -> None:
        super().__init__(f"{field} is malformed: {reason}")
        self.field = field


class InvalidInput(SigningError):
    code = "InvalidInput"
