"""Token issuing and verification.

verify_token() never raises for a bad token. It returns a Verified or a
Rejected value and leaves it to the caller to decide which status and message
a rejection maps to.
"""

import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Any

import jwt as pyjwt

from jobly_auth.config import AuthSettings
from jobly_auth.core.claims import Claim, decode_claim

logger = logging.getLogger(__name__)


class RejectionReason(str, Enum):
    """Why a token failed verification."""

    MISSING = "missing"
    MALFORMED = "malformed"
    EXPIRED = "expired"
    BAD_SIGNATURE = "bad_signature"
    INVALID = "invalid"
    UNRECOGNIZED_CLAIM = "unrecognized_claim"


@dataclass(frozen=True)
class Verified:
    """A token that passed verification.

    Attributes:
        claim: The typed identity carried by the token.
        payload: The exact decoded payload, read-only.
    """

    claim: Claim
    payload: Mapping[str, Any]


@dataclass(frozen=True)
class Rejected:
    """A token that failed verification."""

    reason: RejectionReason


TokenResult = Verified | Rejected


def issue_token(claim: Claim, settings: AuthSettings, *, now: float | None = None) -> str:
    """Sign a token for the given claim.

    Args:
        claim: Identity to embed (UserClaim or CompanyClaim).
        settings: Shared secret, algorithm and lifetime.
        now: Issue time as a UNIX timestamp (defaults to the current time).

    Returns:
        The encoded JWT string.
    """
    issued_at = int(time.time() if now is None else now)
    payload: dict[str, Any] = {
        **claim.to_payload(),
        "iat": issued_at,
        "exp": issued_at + settings.token_ttl_seconds,
    }
    return pyjwt.encode(payload, settings.secret_key, algorithm=settings.algorithm)


def verify_token(token: str | None, settings: AuthSettings) -> TokenResult:
    """Decode and verify a raw token.

    The signature, ``exp`` (required) and claim shape are all checked. Only
    ``settings.algorithm`` is accepted, so unsigned or differently signed
    tokens are rejected.

    Args:
        token: Raw token string from the request, or None if absent.
        settings: Shared secret and algorithm.

    Returns:
        Verified with the claim and payload, or Rejected with the reason.
    """
    if not token:
        return Rejected(RejectionReason.MISSING)

    try:
        payload = pyjwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.algorithm],
            leeway=settings.leeway_seconds,
            options={"require": ["exp"]},
        )
    except pyjwt.ExpiredSignatureError:
        return Rejected(RejectionReason.EXPIRED)
    except pyjwt.InvalidSignatureError:
        return Rejected(RejectionReason.BAD_SIGNATURE)
    except pyjwt.DecodeError:
        return Rejected(RejectionReason.MALFORMED)
    except pyjwt.InvalidTokenError as exc:
        logger.debug("Token failed validation", extra={"error_type": type(exc).__name__})
        return Rejected(RejectionReason.INVALID)

    claim = decode_claim(payload)
    if claim is None:
        return Rejected(RejectionReason.UNRECOGNIZED_CLAIM)

    return Verified(claim=claim, payload=MappingProxyType(payload))
