"""Shared fixtures for dialogue studio tests."""

import pytest

from dialogue_studio.wav import encode_transport_encoding


class FakeSpeechService:
    """Canned SpeechService: records every call, never touches the network."""

    def __init__(self, script="SPEAKER_1: 你好\nSPEAKER_2: 你好呀", pcm=b"\x01\x00\x02\x00"):
        self.script = script
        self.pcm = pcm
        self.calls = []

    def transcribe(self, audio_b64, mime_type, language, mode):
        self.calls.append(("transcribe", audio_b64, mime_type, language, mode))
        return self.script

    def author_script(self, topic, language, mode):
        self.calls.append(("author_script", topic, language, mode))
        return self.script

    def synthesize(self, text, plan):
        self.calls.append(("synthesize", text, plan))
        return encode_transport_encoding(self.pcm)

    def preview(self, voice, language):
        self.calls.append(("preview", voice, language))
        return encode_transport_encoding(self.pcm)


@pytest.fixture
def fake_service():
    return FakeSpeechService()


@pytest.fixture
def sample_pcm():
    """48000 bytes = one second of 24 kHz 16-bit mono audio."""
    return bytes(i % 256 for i in range(48000))


@pytest.fixture
def tiny_audio(tmp_path):
    """A small file with an audio extension; content is never decoded."""
    path = tmp_path / "interview.mp3"
    path.write_bytes(b"ID3\x03\x00fake-mp3-bytes")
    return path
