# jrdriving/utils/attachments.py
"""
Helpers for uploaded files sent inline as base64 in JSON bodies.
"""

import base64
import binascii
from urllib.parse import quote

from fastapi import Response

from jrdriving.errors import ValidationError
from jrdriving.schemas.base import AttachmentIn


def check_attachments(attachments: list[AttachmentIn], max_bytes: int, field: str = "attachments"):
    """
    Reject oversized files and content that is not valid base64.
    Field errors are keyed like "attachments.0".
    """
    errors = {}
    for i, item in enumerate(attachments):
        key = f"{field}.{i}"
        if item.size > max_bytes:
            errors[key] = [f"File {item.name} exceeds {max_bytes} bytes"]
            continue
        try:
            decoded = base64.b64decode(item.data, validate=True)
        except (binascii.Error, ValueError):
            errors[key] = [f"File {item.name} is not valid base64"]
            continue
        if len(decoded) > max_bytes:
            errors[key] = [f"File {item.name} exceeds {max_bytes} bytes"]
    if errors:
        raise ValidationError("Invalid attachments", fields=errors)


def decode_content(content: str) -> bytes:
    return base64.b64decode(content)


def attachment_payload(attachments: list[AttachmentIn]) -> list[dict]:
    """Webhook representation of uploaded files, content included."""
    return [
        {"fileName": a.name, "mimeType": a.type, "fileSize": a.size, "data": a.data}
        for a in attachments
    ]


def group_by(rows, key: str) -> dict:
    grouped = {}
    for row in rows:
        grouped.setdefault(getattr(row, key), []).append(row)
    return grouped


def content_disposition(file_name: str) -> str:
    """
    Header value for a download. Headers are latin-1 only, so non-ASCII names go
    in the RFC 5987 filename* parameter with an ASCII fallback for old clients.
    """
    fallback = file_name.encode("ascii", "replace").decode("ascii").replace("?", "_")
    fallback = fallback.replace('"', "").replace("\\", "").replace("\r", "").replace("\n", "") or "download"
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{quote(file_name, safe='')}"


def download_response(attachment) -> Response:
    """Raw file bytes with the stored mime type, served as a download."""
    return Response(
        content=decode_content(attachment.content),
        media_type=attachment.mime_type or "application/octet-stream",
        headers={"Content-Disposition": content_disposition(attachment.file_name)},
    )
