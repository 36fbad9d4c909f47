"""Input audio, script files and output naming."""

import mimetypes
import os
import re

from dialogue_studio.constants import FALLBACK_BASENAME
from dialogue_studio.wav import encode_transport_encoding

# Containers browsers hand over that mimetypes may not know everywhere
_EXTRA_AUDIO_TYPES = {
    ".m4a": "audio/mp4",
    ".aac": "audio/aac",
    ".flac": "audio/flac",
    ".ogg": "audio/ogg",
    ".opus": "audio/ogg",
    ".webm": "audio/webm",
}

SCRIPT_SUFFIX = ".script.txt"


def sanitize_basename(name: str) -> str:
    """Turn a source name into a safe download basename (no extension).

    "My Talk.mp3" → "My Talk"
    "我的播客.mp3" → "audio"
    """
    cleaned = re.sub(r"[^a-zA-Z0-9_ .\-]", "_", name).lstrip("_")
    base = cleaned.split(".")[0].strip()
    return base or FALLBACK_BASENAME


def wav_filename(source_name: str) -> str:
    """Download name for the produced audio: <sanitized-source-name>.wav."""
    return f"{sanitize_basename(source_name)}.wav"


def script_filename(source_name: str) -> str:
    return f"{sanitize_basename(source_name)}{SCRIPT_SUFFIX}"


def source_name_from_script(script_path: str) -> str:
    """Recover the source name a script file was saved under."""
    name = os.path.basename(script_path)
    if name.endswith(SCRIPT_SUFFIX):
        return name[:-len(SCRIPT_SUFFIX)]
    return name


def guess_audio_mime_type(path: str) -> str | None:
    ext = os.path.splitext(path)[1].lower()
    if ext in _EXTRA_AUDIO_TYPES:
        return _EXTRA_AUDIO_TYPES[ext]
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type


def read_audio_file(path: str) -> tuple[str, str]:
    """Read an audio file for upload.

    Returns (base64 data, MIME type). Raises FileNotFoundError for a missing
    file and ValueError for empty files or non-audio types.
    """
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")

    mime_type = guess_audio_mime_type(path)
    if not mime_type or not mime_type.startswith(("audio/", "video/")):
        raise ValueError(f"Not an audio file: {path} ({mime_type or 'unknown type'})")

    with open(path, "rb") as f:
        data = f.read()
    if not data:
        raise ValueError(f"File is empty: {path}")

    return encode_transport_encoding(data), mime_type


def write_script(output_dir: str, source_name: str, text: str) -> str:
    """Save a script for review/editing. Returns the file path."""
    os.makedirs(output_dir, exist_ok=True)
    path = os.path.join(output_dir, script_filename(source_name))
    with open(path, "w", encoding="utf-8") as f:
        f.write(text.rstrip("\n") + "\n")
    return path


def load_script(path: str) -> str:
    """Read a script file. Raises FileNotFoundError / ValueError like read_audio_file()."""
    if not os.path.exists(path):
        raise FileNotFoundError(f"File not found: {path}")
    with open(path, encoding="utf-8") as f:
        text = f.read()
    if not text.strip():
        raise ValueError(f"File is empty: {path}")
    return text
