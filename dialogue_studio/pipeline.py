"""Operations tying the normalizer, the speech service and the WAV encoder together."""

from dialogue_studio.artifacts import read_audio_file
from dialogue_studio.constants import DEFAULT_PRIMARY_VOICE, DEFAULT_SECONDARY_VOICE
from dialogue_studio.models import ScriptMode, SpeechResult
from dialogue_studio.normalizer import normalize
from dialogue_studio.service import SpeechService
from dialogue_studio.voices import validate_voice_pair
from dialogue_studio.wav import decode_transport_encoding, encode_wav


def script_from_audio(service: SpeechService, audio_path: str, language: str, mode: ScriptMode) -> str:
    """Transcribe and translate an audio file into an editable script."""
    audio_b64, mime_type = read_audio_file(audio_path)
    return service.transcribe(audio_b64, mime_type, language, mode)


def script_from_topic(service: SpeechService, topic: str, language: str, mode: ScriptMode) -> str:
    """Have the service author a script about a topic."""
    if not topic.strip():
        raise ValueError("Topic is empty.")
    return service.author_script(topic.strip(), language, mode)


def synthesize_script(
    service: SpeechService,
    text: str,
    mode: ScriptMode,
    primary_voice: str = DEFAULT_PRIMARY_VOICE,
    secondary_voice: str = DEFAULT_SECONDARY_VOICE,
) -> SpeechResult:
    """Finalize an edited script into audio.

    Voices are validated and the text normalized before the service is
    called, so a bad selection or empty script never costs a request.
    """
    validate_voice_pair(primary_voice, secondary_voice, mode)
    normalized, plan = normalize(text, mode, primary_voice, secondary_voice)
    audio_b64 = service.synthesize(normalized.to_text(), plan)
    pcm = decode_transport_encoding(audio_b64)
    return SpeechResult(text=text, normalized=normalized, plan=plan, pcm=pcm)


def preview_voice(service: SpeechService, voice: str, language: str) -> bytes:
    """Return a playable WAV of the voice reading the language's test phrase."""
    pcm = decode_transport_encoding(service.preview(voice, language))
    return encode_wav(pcm)
