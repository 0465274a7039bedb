"""Size-bounded reading of HTTP response bodies.

NIP-05 documents are served by arbitrary hosts, so the body is never read
unbounded: a declared ``Content-Length`` above the limit is rejected
before reading, and the stream is cut as soon as it passes the limit
(chunked responses carry no length).

See Also:
    [lookup_nip05()][notefeed.nips.nip05.lookup_nip05]: The only caller.
"""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any


if TYPE_CHECKING:
    import aiohttp


def _too_large(max_size: int) -> ValueError:
    return ValueError(f"Response body too large: >{max_size} bytes")


async def _read_bounded(response: aiohttp.ClientResponse, max_size: int) -> bytes:
    """Read the body of *response*, at most *max_size* bytes.

    Raises:
        ValueError: If the declared or actual length exceeds *max_size*.
    """
    declared = response.content_length
    if declared is not None and declared > max_size:
        raise _too_large(max_size)

    body = bytearray()
    # Ask for one byte more than allowed so an overflow is always observed.
    while chunk := await response.content.read(max_size + 1 - len(body)):
        body += chunk
        if len(body) > max_size:
            raise _too_large(max_size)
    return bytes(body)


async def read_bounded_json(response: aiohttp.ClientResponse, max_size: int) -> Any:
    """Decode the JSON body of *response*, refusing bodies over *max_size* bytes.

    Raises:
        ValueError: If the body is too large, or is not valid JSON
            (``json.JSONDecodeError`` is a subclass).
    """
    return json.loads(await _read_bounded(response, max_size))
