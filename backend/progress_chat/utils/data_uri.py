"""
Helpers for base64 data URIs (data:<mime>;base64,<payload>)
"""
import base64
import binascii
from dataclasses import dataclass


class DataURIError(ValueError):
    """Raised when a string is not a valid base64 data URI"""


@dataclass
class DataURI:
    mime_type: str
    data: bytes

    @property
    def is_image(self) -> bool:
        return self.mime_type.startswith("image/")

    @property
    def is_audio(self) -> bool:
        return self.mime_type.startswith("audio/") or self.mime_type == "video/webm"

    @property
    def extension(self) -> str:
        return extension_for_mime(self.mime_type)

    @property
    def base64_payload(self) -> str:
        return base64.b64encode(self.data).decode("ascii")


def parse_data_uri(value: str) -> DataURI:
    """
    Parse a base64 data URI

    Raises:
        DataURIError: if the prefix, separator or payload is malformed
    """
    if not value or not value.startswith("data:"):
        raise DataURIError("Value is not a data URI")

    header, sep, payload = value.partition(",")
    if not sep:
        raise DataURIError("Data URI is missing its payload")

    params = header[len("data:"):].split(";")
    if "base64" not in params[1:]:
        raise DataURIError("Only base64 data URIs are supported")

    mime_type = params[0].strip().lower() or "application/octet-stream"

    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DataURIError(f"Invalid base64 payload: {e}")

    return DataURI(mime_type=mime_type, data=data)


def build_data_uri(data: bytes, mime_type: str) -> str:
    encoded = base64.b64encode(data).decode("ascii")
    return f"data:{mime_type};base64,{encoded}"


_EXTENSIONS = {
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/webm": "webm",
    "video/webm": "webm",
    "audio/ogg": "ogg",
    "audio/mp4": "m4a",
    "image/png": "png",
    "image/jpeg": "jpg",
    "image/gif": "gif",
    "image/webp": "webp",
    "application/pdf": "pdf",
    "text/plain": "txt",
}


def extension_for_mime(mime_type: str) -> str:
    """File extension for a MIME type, falling back to its subtype"""
    if mime_type in _EXTENSIONS:
        return _EXTENSIONS[mime_type]
    subtype = mime_type.split("/")[-1]
    return subtype.split("+")[0] or "bin"
