"""Identity claims carried by tokens.

A token identifies either a user (``username``) or a company (``handle``),
never both. decode_claim() turns a raw payload into one of the two claim
types and refuses anything else.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

USER_FIELD = "username"
COMPANY_FIELD = "handle"


@dataclass(frozen=True)
class UserClaim:
    """Claim of a token issued to a user."""

    username: str

    def to_payload(self) -> dict[str, str]:
        return {USER_FIELD: self.username}


@dataclass(frozen=True)
class CompanyClaim:
    """Claim of a token issued to a company."""

    handle: str

    def to_payload(self) -> dict[str, str]:
        return {COMPANY_FIELD: self.handle}


Claim = UserClaim | CompanyClaim


def _identity(payload: Mapping[str, Any], field: str) -> str | None:
    value = payload.get(field)
    if isinstance(value, str) and value:
        return value
    return None


def decode_claim(payload: Mapping[str, Any]) -> Claim | None:
    """Decode the role-bearing part of a verified token payload.

    Args:
        payload: Decoded JWT payload.

    Returns:
        UserClaim if only a non-empty ``username`` is present, CompanyClaim if
        only a non-empty ``handle`` is present, otherwise None.

    Examples:
        {"username": "alice"} -> UserClaim("alice")
        {"handle": "acme"} -> CompanyClaim("acme")
        {"username": "alice", "handle": "acme"} -> None
        {"username": ""} -> None
    """
    username = _identity(payload, USER_FIELD)
    handle = _identity(payload, COMPANY_FIELD)

    if username is not None and handle is None and COMPANY_FIELD not in payload:
        return UserClaim(username=username)
    if handle is not None and username is None and USER_FIELD not in payload:
        return CompanyClaim(handle=handle)
    return None
