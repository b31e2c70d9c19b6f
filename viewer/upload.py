import base64
import mimetypes
from pathlib import Path
from typing import Optional, Union

import config


class InvalidFileType(ValueError):
    def __init__(self, mime_type: Optional[str]):
        self.mime_type = mime_type
        super().__init__("Please upload a JPG or PNG image")


def detect_mime_type(filename: Union[str, Path]) -> Optional[str]:
    mime_type, _ = mimetypes.guess_type(str(filename))
    return mime_type


def validate_image_type(mime_type: Optional[str]) -> str:
    if mime_type not in config.ALLOWED_IMAGE_TYPES:
        raise InvalidFileType(mime_type)
    return mime_type


def to_data_url(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


def load_image_as_data_url(path: Union[str, Path]) -> str:
    """Read an image file into a data URL, rejecting anything that is not JPG or PNG."""
    mime_type = validate_image_type(detect_mime_type(path))
    return to_data_url(Path(path).read_bytes(), mime_type)
