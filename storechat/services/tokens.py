"""
Short-lived HMAC-SHA256 bearer tokens for the chat endpoints.

Tokens use the compact JWT layout (``header.payload.signature``, each part
base64url without padding) so they can be inspected with ordinary JWT
tooling, but only HS256 with a shared secret is supported.
"""
import base64
import hashlib
import hmac
import json
import time

from storechat.errors import TokenError

DEFAULT_EXPIRES_IN = 300

_HEADER = {"alg": "HS256", "typ": "JWT"}


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def _b64decode(segment: str) -> bytes:
    return base64.urlsafe_b64decode(segment + "=" * (-len(segment) % 4))


def _sign(signing_input: str, secret: str) -> str:
    digest = hmac.new(secret.encode("utf-8"), signing_input.encode("utf-8"), hashlib.sha256).digest()
    return _b64encode(digest)


def issue_token(api_key: str, secret: str, expires_in: int = DEFAULT_EXPIRES_IN, now: int | None = None) -> str:
    """Sign a token for ``api_key`` valid for ``expires_in`` seconds."""
    iat = int(time.time()) if now is None else now
    payload = {"apiKey": api_key, "iat": iat, "exp": iat + expires_in}

    header_segment = _b64encode(json.dumps(_HEADER, separators=(",", ":")).encode("utf-8"))
    payload_segment = _b64encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
    signing_input = f"{header_segment}.{payload_segment}"
    return f"{signing_input}.{_sign(signing_input, secret)}"


def verify_token(authorization: str | None, secret: str, now: int | None = None) -> dict:
    """Check an ``Authorization: Bearer <token>`` header value and return the payload.

    Raises TokenError whose ``reason`` is one of ``missing``, ``malformed_header``,
    ``malformed_token``, ``bad_signature`` or ``expired``.
    """
    if not authorization:
        raise TokenError("missing", "Missing authorization token")

    parts = authorization.split(" ")
    if len(parts) != 2 or parts[0] != "Bearer":
        raise TokenError("malformed_header", "Authorization header must be 'Bearer <token>'")

    segments = parts[1].split(".")
    if len(segments) != 3:
        raise TokenError("malformed_token", "Invalid token format")

    header_segment, payload_segment, signature = segments
    expected = _sign(f"{header_segment}.{payload_segment}", secret)
    if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("ascii")):
        raise TokenError("bad_signature", "Invalid token signature")

    try:
        payload = json.loads(_b64decode(payload_segment))
        exp = int(payload["exp"])
    except (ValueError, KeyError, TypeError, OverflowError) as e:
        raise TokenError("malformed_token", "Invalid token payload") from e

    current = int(time.time()) if now is None else now
    if exp < current:
        raise TokenError("expired", "Token has expired")
    return payload
