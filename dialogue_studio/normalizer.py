"""Map speaker-tagged script text onto the two synthesis voices."""

import re

from dialogue_studio.constants import DEFAULT_PRIMARY_VOICE, DEFAULT_SECONDARY_VOICE
from dialogue_studio.errors import EmptyInputError, EmptyProcessedTextError
from dialogue_studio.models import (
    CanonicalSpeaker,
    NormalizedLine,
    NormalizedScript,
    ScriptLine,
    ScriptMode,
    SpeechRoutingPlan,
)
from dialogue_studio.voices import single_voice_plan, dual_voice_plan

# Leading "label:" or "label：" (fullwidth colon); label is the shortest prefix
_TAG_RE = re.compile(r"^(.+?)(:|：)\s*")


def split_lines(text: str) -> list[str]:
    """Split on newlines, trim, and drop blank lines."""
    lines = [line.strip() for line in text.split("\n")]
    return [line for line in lines if line]


def parse_line(line: str) -> ScriptLine:
    """Separate a leading speaker tag from the line's content.

    "Host: Hi" → ScriptLine("Host", "Hi"); "Hi" → ScriptLine(None, "Hi").
    """
    match = _TAG_RE.match(line)
    if not match:
        return ScriptLine(raw_label=None, content=line)
    return ScriptLine(
        raw_label=match.group(1).strip(),
        content=line[match.end():].strip(),
    )


def strip_speaker_tag(line: str) -> str:
    """Return the line with any leading tag removed."""
    return parse_line(line.strip()).content


def distinct_labels(lines: list[ScriptLine]) -> list[str]:
    """Distinct raw labels in order of first appearance."""
    seen = []
    for line in lines:
        if line.raw_label is not None and line.raw_label not in seen:
            seen.append(line.raw_label)
    return seen


def build_speaker_assignment(labels: list[str]) -> dict[str, CanonicalSpeaker]:
    """First label → PRIMARY, every other label → SECONDARY."""
    assignment = {}
    for i, label in enumerate(labels):
        assignment[label] = CanonicalSpeaker.PRIMARY if i == 0 else CanonicalSpeaker.SECONDARY
    return assignment


def _normalize_narration(text: str) -> NormalizedScript:
    # Blank lines survive as paragraph breaks
    lines = tuple(
        NormalizedLine(CanonicalSpeaker.PRIMARY, strip_speaker_tag(line))
        for line in text.split("\n")
    )
    return NormalizedScript(lines=lines, multi_speaker=False)


def _normalize_single_voice(parsed: list[ScriptLine]) -> NormalizedScript:
    # Tag-only lines are dropped, not kept as empty lines; the audio is the same
    lines = tuple(
        NormalizedLine(CanonicalSpeaker.PRIMARY, line.content)
        for line in parsed
        if line.content
    )
    return NormalizedScript(lines=lines, multi_speaker=False)


def _normalize_dual_voice(parsed: list[ScriptLine], labels: list[str]) -> NormalizedScript:
    assignment = build_speaker_assignment(labels)
    last_known_speaker = CanonicalSpeaker.PRIMARY
    lines = []

    for line in parsed:
        if line.raw_label is None:
            # Continuation without a tag belongs to whoever spoke last
            lines.append(NormalizedLine(last_known_speaker, line.content))
            continue

        if not line.content:
            # Tag-only line: dropped, speaker state untouched
            continue

        speaker = assignment[line.raw_label]
        lines.append(NormalizedLine(speaker, line.content))
        last_known_speaker = speaker

    return NormalizedScript(lines=tuple(lines), multi_speaker=True)


def normalize(
    text: str,
    mode: ScriptMode,
    primary_voice: str = DEFAULT_PRIMARY_VOICE,
    secondary_voice: str = DEFAULT_SECONDARY_VOICE,
) -> tuple[NormalizedScript, SpeechRoutingPlan]:
    """Normalize script text for synthesis and decide which voices speak it.

    Narration: tags are stripped from every line and one voice reads it all.

    Dialogue: with fewer than two distinct tags the script degrades to a
    single voice. Otherwise the first tag seen becomes SPEAKER_1 and every
    other tag SPEAKER_2; tag-only lines are dropped and untagged lines
    inherit the last speaker (SPEAKER_1 before any tag).

    Raises EmptyInputError when dialogue text has no non-blank lines, and
    EmptyProcessedTextError when nothing is left to synthesize.
    """
    if mode == ScriptMode.NARRATION:
        script = _normalize_narration(text)
        plan = single_voice_plan(primary_voice)
    else:
        raw_lines = split_lines(text)
        if not raw_lines:
            raise EmptyInputError("Input text is empty.")

        parsed = [parse_line(line) for line in raw_lines]
        labels = distinct_labels(parsed)

        if len(labels) >= 2:
            script = _normalize_dual_voice(parsed, labels)
            plan = dual_voice_plan(primary_voice, secondary_voice)
        else:
            script = _normalize_single_voice(parsed)
            plan = single_voice_plan(primary_voice)

    if not script.to_text().strip():
        raise EmptyProcessedTextError("Processed text for speech synthesis is empty.")

    return script, plan
