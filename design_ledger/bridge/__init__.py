"""Bridge package: manual, out-of-band transfer of the ledger between devices."""

from design_ledger.bridge.codec import (
    BridgePreview,
    DecodeError,
    decode,
    encode,
    preview,
    try_decode,
)
from design_ledger.bridge.links import (
    build_bridge_link,
    extract_bridge_blob,
    strip_bridge_param,
)

__all__ = [
    "BridgePreview",
    "DecodeError",
    "build_bridge_link",
    "decode",
    "encode",
    "extract_bridge_blob",
    "preview",
    "strip_bridge_param",
    "try_decode",
]
