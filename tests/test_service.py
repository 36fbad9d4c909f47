"""Tests for service module (Gemini client mocked)."""

import base64
import logging
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from dialogue_studio.config import Settings
from dialogue_studio.errors import ExternalServiceError, MalformedTransportDataError
from dialogue_studio.models import ScriptMode
from dialogue_studio.service import (
    GeminiService,
    authoring_prompt,
    build_speech_config,
    language_name,
    transcription_prompt,
)
from dialogue_studio.voices import dual_voice_plan, single_voice_plan


def _text_response(text):
    return SimpleNamespace(text=text, candidates=[])


def _audio_response(data, mime_type="audio/L16;codec=pcm;rate=24000"):
    inline = SimpleNamespace(data=data, mime_type=mime_type)
    part = SimpleNamespace(inline_data=inline)
    return SimpleNamespace(text=None, candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def _service(response=None, error=None):
    client = MagicMock()
    if error is not None:
        client.models.generate_content.side_effect = error
    else:
        client.models.generate_content.return_value = response
    return GeminiService(Settings(api_key="test"), client=client), client


# --- Construction ---

@patch("dialogue_studio.service.genai.Client")
def test_client_created_with_api_key(mock_client):
    GeminiService(Settings(api_key="secret"))
    mock_client.assert_called_once_with(api_key="secret")


@patch("dialogue_studio.service.genai.Client")
def test_missing_api_key(mock_client):
    with pytest.raises(ExternalServiceError):
        GeminiService(Settings())
    mock_client.assert_not_called()


# --- Prompts and speech config ---

def test_language_name_fallback():
    assert language_name("en") == "English"
    assert language_name("xx") == language_name("zh")


def test_dialogue_prompts_ask_for_canonical_labels():
    assert "SPEAKER_1" in transcription_prompt("en", ScriptMode.DIALOGUE)
    assert "SPEAKER_2" in authoring_prompt("space", "en", ScriptMode.DIALOGUE)


def test_narration_prompts_have_no_labels():
    assert "SPEAKER_1" not in transcription_prompt("en", ScriptMode.NARRATION)
    prompt = authoring_prompt("space travel", "en", ScriptMode.NARRATION)
    assert "SPEAKER_1" not in prompt
    assert '"space travel"' in prompt


def test_speech_config_single_voice():
    config = build_speech_config(single_voice_plan("Kore"))
    assert config.voice_config.prebuilt_voice_config.voice_name == "Kore"
    assert config.multi_speaker_voice_config is None


def test_speech_config_two_voices():
    config = build_speech_config(dual_voice_plan("Kore", "Puck"))
    speakers = config.multi_speaker_voice_config.speaker_voice_configs
    assert [(s.speaker, s.voice_config.prebuilt_voice_config.voice_name) for s in speakers] == [
        ("SPEAKER_1", "Kore"),
        ("SPEAKER_2", "Puck"),
    ]


# --- Text requests ---

def test_author_script_returns_trimmed_text():
    service, client = _service(_text_response("  SPEAKER_1: hi\n"))
    assert service.author_script("cats", "en", ScriptMode.DIALOGUE) == "SPEAKER_1: hi"
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-pro"
    assert "cats" in kwargs["contents"]


def test_transcribe_sends_audio_and_prompt():
    service, client = _service(_text_response("SPEAKER_1: bonjour"))
    audio_b64 = base64.b64encode(b"audio-bytes").decode()
    assert service.transcribe(audio_b64, "audio/mpeg", "en", ScriptMode.DIALOGUE) == "SPEAKER_1: bonjour"
    contents = client.models.generate_content.call_args.kwargs["contents"]
    assert contents[0].inline_data.data == b"audio-bytes"
    assert contents[0].inline_data.mime_type == "audio/mpeg"
    assert "SPEAKER_1" in contents[1].text


def test_transcribe_rejects_bad_upload_encoding():
    service, client = _service(_text_response("x"))
    with pytest.raises(MalformedTransportDataError):
        service.transcribe("@@@", "audio/mpeg", "en", ScriptMode.DIALOGUE)
    client.models.generate_content.assert_not_called()


def test_empty_text_response():
    service, _ = _service(_text_response("   "))
    with pytest.raises(ExternalServiceError, match="no text"):
        service.author_script("cats", "en", ScriptMode.DIALOGUE)


def test_sdk_error_wrapped():
    service, _ = _service(error=RuntimeError("quota exceeded"))
    with pytest.raises(ExternalServiceError, match="quota exceeded") as info:
        service.author_script("cats", "en", ScriptMode.DIALOGUE)
    assert isinstance(info.value.__cause__, RuntimeError)


def test_invalid_api_key_message():
    service, _ = _service(error=RuntimeError("400 API key not valid. Please pass a valid API key."))
    with pytest.raises(ExternalServiceError, match="API key is invalid"):
        service.author_script("cats", "en", ScriptMode.DIALOGUE)


# --- Speech synthesis ---

def test_synthesize_returns_transport_encoding():
    service, client = _service(_audio_response(b"\x01\x02\x03\x04"))
    audio_b64 = service.synthesize("SPEAKER_1: hi\nSPEAKER_2: yo", dual_voice_plan("Kore", "Puck"))
    assert base64.b64decode(audio_b64) == b"\x01\x02\x03\x04"

    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["model"] == "gemini-2.5-flash-preview-tts"
    assert kwargs["contents"] == "SPEAKER_1: hi\nSPEAKER_2: yo"
    assert kwargs["config"].speech_config.multi_speaker_voice_config is not None


def test_synthesize_passes_string_payload_through():
    service, _ = _service(_audio_response("AQIDBA=="))
    assert service.synthesize("hi", single_voice_plan("Kore")) == "AQIDBA=="


def test_synthesize_no_audio():
    service, _ = _service(_audio_response(b""))
    with pytest.raises(ExternalServiceError, match="no audio"):
        service.synthesize("hi", single_voice_plan("Kore"))


def test_synthesize_no_candidates():
    service, _ = _service(SimpleNamespace(text=None, candidates=None))
    with pytest.raises(ExternalServiceError, match="no audio"):
        service.synthesize("hi", single_voice_plan("Kore"))


def test_synthesize_warns_on_unexpected_rate(caplog):
    service, _ = _service(_audio_response(b"\x00\x00", mime_type="audio/L16;codec=pcm;rate=16000"))
    with caplog.at_level(logging.WARNING, logger="dialogue_studio.service"):
        service.synthesize("hi", single_voice_plan("Kore"))
    assert "rate=16000" in caplog.text


def test_preview_uses_language_phrase():
    service, client = _service(_audio_response(b"\x00\x00"))
    service.preview("Kore", "en")
    kwargs = client.models.generate_content.call_args.kwargs
    assert kwargs["contents"] == "Hello, this is a voice test."
    assert kwargs["config"].speech_config.voice_config.prebuilt_voice_config.voice_name == "Kore"
