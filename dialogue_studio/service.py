"""Generative-AI capability: transcription, script authoring and speech synthesis via Gemini."""

import logging
from typing import Protocol

from google import genai
from google.genai import types

from dialogue_studio.config import Settings
from dialogue_studio.constants import (
    LANGUAGES,
    DEFAULT_LANGUAGE,
    PREVIEW_PHRASES,
    SAMPLE_RATE,
)
from dialogue_studio.errors import ExternalServiceError
from dialogue_studio.models import ScriptMode, SpeechRoutingPlan
from dialogue_studio.voices import single_voice_plan
from dialogue_studio.wav import decode_transport_encoding, encode_transport_encoding

logger = logging.getLogger(__name__)

_DIALOGUE_FORMAT = "SPEAKER_1: [content]\nSPEAKER_2: [content]"


class SpeechService(Protocol):
    """The external capability the pipeline depends on.

    Every audio payload crosses this boundary in the base64 transport
    encoding: 16-bit mono PCM at 24 kHz.
    """

    def transcribe(self, audio_b64: str, mime_type: str, language: str, mode: ScriptMode) -> str: ...

    def author_script(self, topic: str, language: str, mode: ScriptMode) -> str: ...

    def synthesize(self, text: str, plan: SpeechRoutingPlan) -> str: ...

    def preview(self, voice: str, language: str) -> str: ...


def language_name(code: str) -> str:
    """Prompt-facing name for a language code; unknown codes use the default."""
    return LANGUAGES.get(code, LANGUAGES[DEFAULT_LANGUAGE])


def transcription_prompt(language: str, mode: ScriptMode) -> str:
    target = language_name(language)
    if mode == ScriptMode.NARRATION:
        return (
            f"Transcribe this audio as a single-speaker narration, then translate the whole "
            f"text into {target}. Reply with the {target} text only."
        )
    return (
        "Transcribe this audio and label every distinct speaker with a neutral label "
        f"such as SPEAKER_1, SPEAKER_2 and so on. Translate the dialogue into {target}, "
        f"keeping the labels exactly as they are. Reply with the labelled {target} text only, "
        f"in this format:\n{_DIALOGUE_FORMAT}"
    )


def authoring_prompt(topic: str, language: str, mode: ScriptMode) -> str:
    target = language_name(language)
    if mode == ScriptMode.NARRATION:
        instruction = (
            f"You are a professional writer. Write an engaging narration script in {target} "
            "about the topic below. Reply with the script only, no preamble or closing remarks."
        )
    else:
        instruction = (
            f"You are a podcast scriptwriter. Write a natural two-person dialogue in {target} "
            "about the topic below, labelling the speakers SPEAKER_1 and SPEAKER_2. "
            "Reply with the script only, no preamble or closing remarks, in this format:\n"
            f"{_DIALOGUE_FORMAT}"
        )
    return f'{instruction}\n\nTopic: "{topic}"'


def build_speech_config(plan: SpeechRoutingPlan) -> types.SpeechConfig:
    """One prebuilt voice, or a two-speaker config keyed by canonical labels."""
    if not plan.is_multi_speaker:
        return types.SpeechConfig(
            voice_config=types.VoiceConfig(
                prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=plan.bindings[0].voice),
            ),
        )
    return types.SpeechConfig(
        multi_speaker_voice_config=types.MultiSpeakerVoiceConfig(
            speaker_voice_configs=[
                types.SpeakerVoiceConfig(
                    speaker=binding.speaker.label,
                    voice_config=types.VoiceConfig(
                        prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=binding.voice),
                    ),
                )
                for binding in plan.bindings
            ],
        ),
    )


def _mime_rate(mime_type: str | None) -> int | None:
    """Sample rate from a MIME type like "audio/L16;codec=pcm;rate=24000"."""
    if not mime_type:
        return None
    for param in mime_type.split(";"):
        param = param.strip()
        if param.lower().startswith("rate="):
            try:
                return int(param.split("=", 1)[1])
            except ValueError:
                return None
    return None


def _describe_failure(action: str, error: Exception) -> str:
    message = str(error)
    if "API key not valid" in message:
        return "The provided API key is invalid. Please check your configuration."
    return f"Failed to {action}: {message}"


class GeminiService:
    """SpeechService backed by the google-genai SDK."""

    def __init__(self, settings: Settings, client=None):
        self.settings = settings
        self._client = client if client is not None else genai.Client(api_key=settings.require_api_key())

    def _generate(self, action: str, model: str, contents, config=None):
        logger.debug("Gemini request: %s (model=%s)", action, model)
        try:
            return self._client.models.generate_content(model=model, contents=contents, config=config)
        except Exception as e:
            raise ExternalServiceError(_describe_failure(action, e)) from e

    def _text_from(self, response, action: str) -> str:
        text = (response.text or "").strip()
        if not text:
            raise ExternalServiceError(f"Failed to {action}: the model returned no text.")
        return text

    def _audio_from(self, response, action: str) -> str:
        try:
            inline = response.candidates[0].content.parts[0].inline_data
        except (AttributeError, IndexError, TypeError):
            inline = None
        if inline is None or not inline.data:
            raise ExternalServiceError(f"Failed to {action}: the model returned no audio.")

        rate = _mime_rate(inline.mime_type)
        if rate is not None and rate != SAMPLE_RATE:
            logger.warning("Expected %d Hz audio, service reported %s", SAMPLE_RATE, inline.mime_type)

        # The SDK hands back decoded bytes; keep the transport encoding at this boundary
        if isinstance(inline.data, str):
            return inline.data
        return encode_transport_encoding(inline.data)

    def transcribe(self, audio_b64: str, mime_type: str, language: str, mode: ScriptMode) -> str:
        audio_part = types.Part.from_bytes(data=decode_transport_encoding(audio_b64), mime_type=mime_type)
        prompt_part = types.Part.from_text(text=transcription_prompt(language, mode))
        response = self._generate("transcribe audio", self.settings.text_model, [audio_part, prompt_part])
        return self._text_from(response, "transcribe audio")

    def author_script(self, topic: str, language: str, mode: ScriptMode) -> str:
        response = self._generate(
            "generate a script", self.settings.text_model, authoring_prompt(topic, language, mode),
        )
        return self._text_from(response, "generate a script")

    def synthesize(self, text: str, plan: SpeechRoutingPlan) -> str:
        logger.debug("Synthesizing %d chars with voices %s", len(text), plan.voices)
        config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=build_speech_config(plan),
        )
        response = self._generate("generate speech", self.settings.tts_model, text, config)
        return self._audio_from(response, "generate speech")

    def preview(self, voice: str, language: str) -> str:
        phrase = PREVIEW_PHRASES.get(language, PREVIEW_PHRASES[DEFAULT_LANGUAGE])
        return self.synthesize(phrase, single_voice_plan(voice))
