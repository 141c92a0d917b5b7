"""
Bridge Codec

Turns a LedgerState into a piece of text that can be pasted into a chat
message or carried in a link, and back again.

Format:
    base64url( percent_encode( JSON({charges, payments, templates}) ) )

- Security logs are never exported; they stay on the device they were
  recorded on.
- Percent-encoding uses the same unreserved set as JavaScript's
  encodeURIComponent, so the base64 input is always plain ASCII.
- The base64 step uses the URL-safe alphabet without padding, so the blob
  can go into a query string untouched. Decoding also accepts the standard
  alphabet, padding, and '+' turned into ' ' by form decoding.

CRITICAL: decode() fails closed. Anything that is not a complete, valid
ledger raises DecodeError; nothing is partially accepted.
"""

import base64
import binascii
import json
import re
from typing import Optional
from urllib.parse import quote, unquote

from pydantic import BaseModel, ValidationError

from design_ledger.models import LedgerState


# Characters encodeURIComponent leaves alone (besides alphanumerics)
_UNRESERVED = "-_.!~*'()"

_BASE64_TEXT = re.compile(r"^[A-Za-z0-9+/]*={0,2}$")
_BAD_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")


class DecodeError(Exception):
    """The bridge blob could not be turned back into a ledger."""
    pass


class BridgePreview(BaseModel):
    """What an incoming bridge blob contains, shown before it is accepted."""

    charges: int
    payments: int


def encode(state: LedgerState) -> str:
    """Encode a ledger (minus security logs) as a URL-safe bridge blob."""
    document = state.model_dump_json(by_alias=True, exclude={"security_logs"})
    escaped = quote(document, safe=_UNRESERVED)
    raw = base64.urlsafe_b64encode(escaped.encode("ascii"))
    return raw.rstrip(b"=").decode("ascii")


def _unwrap_base64(text: str) -> str:
    cleaned = text.strip().replace(" ", "+").replace("-", "+").replace("_", "/")
    if not cleaned or not _BASE64_TEXT.match(cleaned):
        raise DecodeError("Bridge blob is not base64 text")

    cleaned = cleaned.rstrip("=")
    cleaned += "=" * (-len(cleaned) % 4)
    try:
        return base64.b64decode(cleaned, validate=True).decode("ascii")
    except (binascii.Error, UnicodeDecodeError) as e:
        raise DecodeError(f"Bridge blob is not valid base64: {e}")


def _unwrap_percent(text: str) -> str:
    if _BAD_PERCENT.search(text):
        raise DecodeError("Bridge blob contains a malformed percent escape")
    try:
        return unquote(text, errors="strict")
    except UnicodeDecodeError as e:
        raise DecodeError(f"Bridge blob does not decode to UTF-8 text: {e}")


def decode(text: str) -> LedgerState:
    """
    Decode a bridge blob.

    Raises:
        DecodeError: If any layer is invalid, or the ledger has neither
                     a charges nor a payments field
    """
    if not isinstance(text, str):
        raise DecodeError("Bridge blob must be text")

    document = _unwrap_percent(_unwrap_base64(text))

    try:
        data = json.loads(document)
    except (ValueError, RecursionError) as e:
        raise DecodeError(f"Bridge blob is not valid JSON: {e}")

    if not isinstance(data, dict):
        raise DecodeError("Bridge blob does not contain a ledger object")
    if "charges" not in data and "payments" not in data:
        raise DecodeError("Bridge blob has neither charges nor payments")

    try:
        return LedgerState.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"Bridge blob does not match the ledger shape: {e.error_count()} errors")
    except RecursionError:
        raise DecodeError("Bridge blob is nested too deeply")


def try_decode(text: str) -> Optional[LedgerState]:
    """Decode a bridge blob, returning None instead of raising."""
    try:
        return decode(text)
    except DecodeError:
        return None


def preview(text: str) -> Optional[BridgePreview]:
    """Summarize an incoming blob, or None if it is unreadable."""
    state = try_decode(text)
    if state is None:
        return None
    return BridgePreview(charges=len(state.charges), payments=len(state.payments))
