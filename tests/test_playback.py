"""Tests for playback module."""

import os
from unittest.mock import patch

import pytest

from dialogue_studio.errors import PlaybackError
from dialogue_studio.playback import PlaybackHandle, play_wav
from dialogue_studio.wav import encode_wav


def test_handle_writes_and_releases():
    wav = encode_wav(b"\x00\x00" * 10)
    with PlaybackHandle(wav) as handle:
        path = handle.path
        assert handle.active
        with open(path, "rb") as f:
            assert f.read() == wav
    assert not handle.active
    assert not os.path.exists(path)


def test_handle_released_on_error():
    handle = PlaybackHandle(encode_wav(b""))
    with pytest.raises(RuntimeError):
        with handle:
            path = handle.path
            raise RuntimeError("player crashed")
    assert not os.path.exists(path)


def test_release_is_idempotent():
    handle = PlaybackHandle(encode_wav(b""))
    path = handle.acquire()
    assert handle.acquire() == path
    handle.release()
    handle.release()
    assert not os.path.exists(path)


def test_release_without_acquire():
    PlaybackHandle(b"").release()


@patch("dialogue_studio.playback.play")
def test_play_wav_plays_and_cleans_up(mock_play, tmp_path, monkeypatch):
    monkeypatch.setattr("dialogue_studio.playback.tempfile.tempdir", str(tmp_path))
    play_wav(encode_wav(b"\x00\x00" * 2400))

    segment = mock_play.call_args.args[0]
    assert segment.frame_rate == 24000
    assert segment.channels == 1
    assert len(segment) == 100  # ms
    assert os.listdir(tmp_path) == []


@patch("dialogue_studio.playback.play", side_effect=OSError("no audio device"))
def test_play_wav_cleans_up_on_playback_error(mock_play, tmp_path, monkeypatch):
    monkeypatch.setattr("dialogue_studio.playback.tempfile.tempdir", str(tmp_path))
    with pytest.raises(PlaybackError, match="no audio device") as info:
        play_wav(encode_wav(b"\x00\x00" * 2400))
    assert isinstance(info.value.__cause__, OSError)
    assert os.listdir(tmp_path) == []


@patch("dialogue_studio.playback.play", side_effect=FileNotFoundError(2, "No such file or directory", "ffplay"))
def test_play_wav_missing_player(mock_play, tmp_path, monkeypatch):
    monkeypatch.setattr("dialogue_studio.playback.tempfile.tempdir", str(tmp_path))
    with pytest.raises(PlaybackError, match="ffplay"):
        play_wav(encode_wav(b"\x00\x00" * 2400))
    assert os.listdir(tmp_path) == []
