"""Webhook signature verification.

Facebook signs every webhook POST with the App secret and sends the digest
in the ``X-Hub-Signature`` header as ``method=hexdigest`` (``sha1=...``), and
in ``X-Hub-Signature-256`` as ``sha256=...``.
"""

import hashlib
import hmac

import logfire

# Digest methods accepted in the signature header
SUPPORTED_METHODS = {
    "sha1": hashlib.sha1,
    "sha256": hashlib.sha256,
}


class SignatureVerificationError(Exception):
    """Base exception for signature verification failures."""

    pass


class MissingSignatureError(SignatureVerificationError):
    """Raised when the request carries no signature header."""

    pass


class InvalidSignatureError(SignatureVerificationError):
    """Raised when the signature does not match the body."""

    pass


def compute_signature(body: bytes, secret: str, method: str = "sha1") -> str:
    """Return the hex HMAC digest of ``body`` keyed by ``secret``.

    Raises:
        ValueError: If ``method`` is not a supported digest.
    """
    digestmod = SUPPORTED_METHODS.get(method.lower())
    if digestmod is None:
        raise ValueError(f"Unsupported signature method: {method}")
    return hmac.new(secret.encode("utf-8"), body, digestmod).hexdigest()


def is_valid_signature(body: bytes, header_value: str, secret: str) -> bool:
    """Check a ``method=hexdigest`` header value against the body.

    Malformed headers and unknown methods never match.
    """
    method, sep, signature_hash = header_value.partition("=")
    if not sep or not signature_hash:
        return False
    try:
        expected = compute_signature(body, secret, method)
    except ValueError:
        return False
    return hmac.compare_digest(expected, signature_hash.lower())


def verify_request_signature(
    body: bytes,
    header_value: str | None,
    secret: str,
    *,
    require_signature: bool = True,
) -> None:
    """Verify that a webhook request came from Facebook.

    Args:
        body: Raw request body bytes
        header_value: Value of the signature header, if any
        secret: Facebook App secret
        require_signature: Reject unsigned requests instead of only logging

    Raises:
        MissingSignatureError: No header and ``require_signature`` is set
        InvalidSignatureError: Header present but digest does not match
    """
    if not header_value:
        if require_signature:
            logfire.warning("Rejected webhook request without signature")
            raise MissingSignatureError("Missing request signature")
        logfire.warning("Couldn't validate the signature: header missing")
        return

    if not is_valid_signature(body, header_value, secret):
        logfire.warning(
            "Rejected webhook request with invalid signature",
            method=header_value.partition("=")[0],
            body_length=len(body),
        )
        raise InvalidSignatureError("Couldn't validate the request signature")
