"""Transient playable-audio handles and local playback."""

import os
import tempfile

from pydub import AudioSegment
from pydub.playback import play

from dialogue_studio.errors import PlaybackError


class PlaybackHandle:
    """A WAV container materialized as a temporary file for a player.

    Use as a context manager: the file is removed when the block exits,
    whether playback finished, failed, or never started. release() is
    idempotent so it is safe to call early as well.
    """

    def __init__(self, wav: bytes):
        self._wav = wav
        self.path: str | None = None

    def acquire(self) -> str:
        if self.path is not None:
            return self.path
        fd, path = tempfile.mkstemp(suffix=".wav", prefix="dialogue_studio_")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(self._wav)
        except BaseException:
            os.remove(path)
            raise
        self.path = path
        return path

    def release(self) -> None:
        if self.path is None:
            return
        path, self.path = self.path, None
        if os.path.exists(path):
            os.remove(path)

    @property
    def active(self) -> bool:
        return self.path is not None

    def __enter__(self) -> "PlaybackHandle":
        self.acquire()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()


def play_wav(wav: bytes) -> None:
    """Play a WAV container, blocking until done. The temp file never outlives the call.

    Raises PlaybackError when no player is available (e.g. ffplay missing).
    """
    with PlaybackHandle(wav) as handle:
        try:
            play(AudioSegment.from_wav(handle.path))
        except OSError as e:
            raise PlaybackError(f"Could not play audio: {e}") from e
