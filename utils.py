"""Utility functions."""
from typing import Optional, Union

from starlette.datastructures import UploadFile

from errors import ValidationError

FormValue = Union[str, UploadFile, None]


async def field_text(value: FormValue) -> Optional[str]:
    """Text of a form field, whether it arrived as a plain part or a file part."""
    if not isinstance(value, UploadFile):
        return value
    data = await value.read()
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValidationError("tags must be UTF-8") from exc


async def field_bytes(value: FormValue) -> Optional[bytes]:
    """Raw bytes of a form field; ``None`` when the field was not sent."""
    if value is None:
        return None
    if isinstance(value, UploadFile):
        return await value.read()
    return value.encode("utf-8")
