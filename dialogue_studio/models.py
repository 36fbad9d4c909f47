"""Data models for dialogue normalization and speech synthesis."""

from dataclasses import dataclass
from enum import Enum

from dialogue_studio.constants import PRIMARY_SPEAKER_LABEL, SECONDARY_SPEAKER_LABEL
from dialogue_studio.wav import encode_wav, pcm_duration_seconds


class ScriptMode(Enum):
    NARRATION = "narration"
    DIALOGUE = "dialogue"


class CanonicalSpeaker(Enum):
    """The two synthesis roles every dialogue voice collapses onto."""

    PRIMARY = PRIMARY_SPEAKER_LABEL
    SECONDARY = SECONDARY_SPEAKER_LABEL

    @property
    def label(self) -> str:
        return self.value


@dataclass(frozen=True)
class ScriptLine:
    raw_label: str | None   # speaker tag as written, None if untagged
    content: str            # spoken text with the tag stripped


@dataclass(frozen=True)
class NormalizedLine:
    speaker: CanonicalSpeaker
    content: str


@dataclass(frozen=True)
class NormalizedScript:
    lines: tuple[NormalizedLine, ...]
    multi_speaker: bool = False

    def to_text(self) -> str:
        """Serialize for synthesis.

        Multi-speaker scripts keep a "LABEL: content" prefix on every line;
        single-voice scripts are plain content lines.
        """
        if self.multi_speaker:
            return "\n".join(f"{line.speaker.label}: {line.content}" for line in self.lines)
        return "\n".join(line.content for line in self.lines)


@dataclass(frozen=True)
class VoiceBinding:
    speaker: CanonicalSpeaker
    voice: str


@dataclass(frozen=True)
class SpeechRoutingPlan:
    bindings: tuple[VoiceBinding, ...]

    @property
    def is_multi_speaker(self) -> bool:
        return len(self.bindings) > 1

    @property
    def voices(self) -> list[str]:
        return [b.voice for b in self.bindings]

    def voice_for(self, speaker: CanonicalSpeaker) -> str:
        for binding in self.bindings:
            if binding.speaker == speaker:
                return binding.voice
        # Single-voice plans speak everything with the one voice
        return self.bindings[0].voice


@dataclass(frozen=True)
class SpeechResult:
    text: str                       # script as finalized by the user
    normalized: NormalizedScript
    plan: SpeechRoutingPlan
    pcm: bytes                      # raw 16-bit mono PCM at SAMPLE_RATE

    @property
    def wav(self) -> bytes:
        return encode_wav(self.pcm)

    @property
    def duration_seconds(self) -> float:
        return pcm_duration_seconds(self.pcm)


@dataclass(frozen=True)
class VoiceOption:
    name: str
    description: str
