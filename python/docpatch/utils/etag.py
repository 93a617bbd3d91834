import base64
import json
from hashlib import blake2b
from typing import Any

ETAG_DIGEST_SIZE = 15


def document_etag(document: Any) -> str:
    """Entity tag that only depends on the document structure, not on its key order."""

    digest = blake2b(digest_size=ETAG_DIGEST_SIZE)
    digest.update(json.dumps(document, sort_keys=True, separators=(",", ":")).encode("utf8"))
    return base64.urlsafe_b64encode(digest.digest()).decode("utf8")


def strip_quotes(etag: str) -> str:
    return etag.strip().removeprefix("W/").strip('"')
