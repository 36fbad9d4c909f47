"""Voice catalogue, voice-pair validation and routing-plan construction."""

import logging

from dialogue_studio.models import (
    CanonicalSpeaker,
    ScriptMode,
    SpeechRoutingPlan,
    VoiceBinding,
    VoiceOption,
)
from dialogue_studio.errors import VoiceSelectionError

logger = logging.getLogger(__name__)

# Prebuilt TTS voices offered to the user (avoids a network call at startup)
VOICE_POOL = [
    VoiceOption("Zephyr", "male, deep and powerful"),
    VoiceOption("Puck", "male, young and lively"),
    VoiceOption("Charon", "male, mature and steady"),
    VoiceOption("Kore", "female, gentle and clear"),
    VoiceOption("Fenrir", "male, loud and warm"),
    VoiceOption("Erinome", "female, elegant"),
    VoiceOption("Achernar", "male, bright"),
    VoiceOption("Achird", "female, friendly"),
    VoiceOption("Algenib", "male, professional"),
    VoiceOption("Algieba", "female, calm"),
    VoiceOption("Alnilam", "male, authoritative"),
    VoiceOption("Aoede", "female, lively"),
    VoiceOption("Autonoe", "female, confident"),
    VoiceOption("Callirrhoe", "female, sweet"),
    VoiceOption("Despina", "female, soft"),
    VoiceOption("Enceladus", "male, mild"),
    VoiceOption("Gacrux", "male, dependable"),
    VoiceOption("Iapetus", "male, serious"),
]


def find_voice(name: str) -> VoiceOption | None:
    """Look up a catalogue entry by exact name."""
    for option in VOICE_POOL:
        if option.name == name:
            return option
    return None


def filter_voices(substring: str | None = None) -> list[VoiceOption]:
    """Case-insensitive substring match over names and descriptions."""
    if not substring:
        return list(VOICE_POOL)
    needle = substring.lower()
    return [
        v for v in VOICE_POOL
        if needle in v.name.lower() or needle in v.description.lower()
    ]


def validate_voice_pair(primary: str, secondary: str, mode: ScriptMode) -> None:
    """Check the voice selection before any service call.

    Dialogue needs two different voices; narration only uses the primary one.
    Voices outside the catalogue are allowed but logged, since the service
    knows more voices than we list.
    """
    for name in (primary, secondary):
        if find_voice(name) is None:
            logger.warning("Voice %r is not in the catalogue, passing it through", name)

    if mode == ScriptMode.DIALOGUE and primary == secondary:
        raise VoiceSelectionError(
            f"Primary and secondary voices must differ in dialogue mode (both are {primary!r})."
        )


def single_voice_plan(voice: str) -> SpeechRoutingPlan:
    """Everything spoken by one voice."""
    return SpeechRoutingPlan(bindings=(VoiceBinding(CanonicalSpeaker.PRIMARY, voice),))


def dual_voice_plan(primary: str, secondary: str) -> SpeechRoutingPlan:
    """SPEAKER_1 → primary voice, SPEAKER_2 → secondary voice."""
    return SpeechRoutingPlan(bindings=(
        VoiceBinding(CanonicalSpeaker.PRIMARY, primary),
        VoiceBinding(CanonicalSpeaker.SECONDARY, secondary),
    ))
