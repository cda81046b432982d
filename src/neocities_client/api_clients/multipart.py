"""multipart/form-data encoding for file uploads."""

from typing import BinaryIO, Tuple

import httpx

# Fixed so that identical input always encodes to identical bytes.
MULTIPART_BOUNDARY = "NEOCITIES-PY-CLIENT"
MULTIPART_CONTENT_TYPE = f"multipart/form-data; boundary={MULTIPART_BOUNDARY}"

_PART_CONTENT_TYPE = "application/octet-stream"


def make_multipart_file(reader: BinaryIO, name: str) -> Tuple[bytes, str]:
    """Encode one file as a multipart/form-data body.

    The form field name and the filename are both ``name``. The whole
    input is read into memory.

    Args:
        reader: Binary file-like object holding the file contents
        name: Form field name and filename

    Returns:
        Tuple of (encoded body, Content-Type header value)

    Raises:
        OSError: If the input cannot be read
    """
    contents = reader.read()

    # httpx takes the boundary from the Content-Type header when one is given.
    encoder = httpx.Request(
        "POST",
        "http://multipart.invalid/",
        files={name: (name, contents, _PART_CONTENT_TYPE)},
        headers={"Content-Type": MULTIPART_CONTENT_TYPE},
    )
    return encoder.read(), MULTIPART_CONTENT_TYPE
