"""Cursor encoding and decoding for keyset pagination.

Cursors are opaque strings that encode a position in a sorted result set.
They contain the values of the sort fields for one row, so the next query
can compute where that row sits without an offset.

The cursor format is:
1. BSON canonical extended JSON of the sort-field projection, so ObjectIds,
   Decimal128, binaries, UUIDs and dates keep their exact type
2. Base64 URL-safe encoded for use in URLs

Example cursor payload:
    {"_id": {"$oid": "65a4f1c2e4b0a1b2c3d4e5f6"}, "score": {"$numberInt": "42"}}

Both steps of the transport are pluggable: pass ``encoder``/``decoder``
callables (sync or async) to substitute encryption or compaction for the
base64 step. Substitutes must be inverses of each other.
"""

from __future__ import annotations

import base64
import binascii
import inspect
import logging
from collections.abc import Awaitable, Callable, Mapping
from types import MappingProxyType
from typing import Any

from bson import json_util
from bson.binary import UuidRepresentation
from bson.errors import BSONError
from bson.json_util import JSONMode, JSONOptions

from keyset_service.core.exceptions import CursorDecodeError

logger = logging.getLogger(__name__)

type CursorTransform = Callable[[str], str | Awaitable[str]]
type Cursor = Mapping[str, Any]


def encode_base64(text: str) -> str:
    """Encode canonical cursor text as URL-safe base64."""
    return base64.urlsafe_b64encode(text.encode("utf-8")).decode("ascii")


def decode_base64(token: str) -> str:
    """Decode a URL-safe base64 token back to canonical cursor text.

    Raises:
        ValueError: If the token is not valid URL-safe base64 or not UTF-8.
    """
    try:
        raw = base64.b64decode(token.encode("ascii"), altchars=b"-_", validate=True)
    except (binascii.Error, UnicodeEncodeError) as e:
        raise ValueError(f"Invalid base64 cursor: {e}") from e
    return raw.decode("utf-8")


class CursorCodec:
    """Encode and decode pagination cursors.

    Usage:
        codec = CursorCodec()

        token = await codec.encode({"_id": ObjectId(), "score": 42})
        cursor = await codec.decode(token)
        cursor["_id"]  # ObjectId(...)

    Attributes:
        encoder: Transform from canonical text to token.
        decoder: Transform from token to canonical text.
        json_options: Extended JSON options used for the canonical text.
    """

    def __init__(
        self,
        encoder: CursorTransform | None = None,
        decoder: CursorTransform | None = None,
        *,
        tz_aware: bool = False,
    ) -> None:
        self.encoder: CursorTransform = encoder or encode_base64
        self.decoder: CursorTransform = decoder or decode_base64
        self.json_options = JSONOptions(
            json_mode=JSONMode.CANONICAL,
            uuid_representation=UuidRepresentation.STANDARD,
            tz_aware=tz_aware,
        )

    def dumps(self, cursor: Cursor) -> str:
        """Serialize a cursor mapping to canonical extended JSON."""
        return json_util.dumps(dict(cursor), json_options=self.json_options)

    def loads(self, text: str) -> Cursor:
        """Parse canonical extended JSON into a read-only cursor mapping.

        Raises:
            CursorDecodeError: If the text is not extended JSON or not an object.
        """
        try:
            payload = json_util.loads(text, json_options=self.json_options)
        except (ValueError, TypeError, KeyError, BSONError) as e:
            raise CursorDecodeError(f"Unable to decode cursor: {e}") from e
        if not isinstance(payload, Mapping):
            raise CursorDecodeError("Unable to decode cursor: payload is not an object")
        return MappingProxyType(payload)

    async def encode(self, cursor: Cursor) -> str:
        """Encode a cursor mapping to an opaque token."""
        token = self.encoder(self.dumps(cursor))
        if inspect.isawaitable(token):
            token = await token
        return token

    async def decode(self, token: str) -> Cursor:
        """Decode an opaque token into a read-only cursor mapping.

        Raises:
            CursorDecodeError: If the token cannot be decoded. Any error
                raised by the decoder is chained as its cause.
        """
        if not isinstance(token, str) or not token:
            raise CursorDecodeError()
        try:
            text = self.decoder(token)
            if inspect.isawaitable(text):
                text = await text
        except CursorDecodeError:
            raise
        except Exception as e:
            logger.debug("Cursor transport decode failed", extra={"error": str(e)})
            raise CursorDecodeError(f"Unable to decode cursor: {e}") from e
        return self.loads(text)


__all__ = ["Cursor", "CursorCodec", "CursorTransform", "decode_base64", "encode_base64"]
