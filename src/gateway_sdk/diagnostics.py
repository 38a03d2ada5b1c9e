"""
Request diagnostics

Helpers to reconstruct a failed request as a cURL command that can be replayed
by hand.
"""

from typing import Iterable

from .signing.utils import mask_secret
from .transport.base import HttpRequest


def build_curl_command(request: HttpRequest, masked_headers: Iterable[str] = ()) -> str:
    """
    Build a cURL command string for a request.

    Args:
        request: Request to reconstruct
        masked_headers: Header names whose values are masked in the output

    Returns:
        str: Multi-line cURL command
    """
    masked = {name.lower() for name in masked_headers}
    lines = [f'curl -X {request.method} "{request.url}"']

    for name, value in request.headers.items():
        if name.lower() in masked:
            value = mask_secret(value)
        lines.append(f' -H "{name}: {value}"')

    if request.body:
        escaped_body = request.body.replace("'", "''")
        lines.append(f" -d '{escaped_body}'")

    return "\n".join(lines)
