"""
Path Serialization: options map + source URL to the path that gets signed.

Output shape:
    /<segment>/<segment>/.../<encoded source>

CRITICAL RULES:
1. Segments are sorted lexicographically by their rendered text, so the
   path never depends on the order options were applied in
2. A segment is "<key>" when its arguments are empty, else "<key>:<args>"
3. The source is base64url without padding (".<format>" suffix) or
   "plain/" + query-escaped URL ("@<format>" suffix)
"""

import base64
from typing import List, Mapping, Optional
from urllib.parse import quote_plus

PLAIN_PREFIX = "plain/"


def b64encode_url(data: bytes) -> str:
    """URL-safe base64 without '=' padding."""
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def render_segment(key: str, arguments: str) -> str:
    if not arguments:
        return key
    return f"{key}:{arguments}"


def encode_source(source_url: str, plain: bool = False, output_format: Optional[str] = None) -> str:
    """
    Encode the source URL as the last path segment.

    Args:
        source_url: Source image locator (e.g. "s3://bucket/img.jpg")
        plain: Use plain mode instead of base64
        output_format: Optional output format appended to the source

    Returns:
        Encoded source segment
    """
    if plain:
        encoded = PLAIN_PREFIX + quote_plus(source_url)
        if output_format:
            encoded += "@" + output_format
    else:
        encoded = b64encode_url(source_url.encode("utf-8"))
        if output_format:
            encoded += "." + output_format
    return encoded


def build_path(
    options: Mapping[str, str],
    source_url: str,
    plain: bool = False,
    output_format: Optional[str] = None,
) -> str:
    """Serialize the options map and source into a canonical path."""
    segments: List[str] = sorted(
        render_segment(key, arguments) for key, arguments in options.items()
    )
    segments.append(encode_source(source_url, plain, output_format))
    return "/" + "/".join(segments)
