"""Export synthesized speech as WAV with the script and a provenance manifest."""

import json
import os
from datetime import datetime, timezone

from dialogue_studio.artifacts import sanitize_basename, wav_filename
from dialogue_studio.constants import SAMPLE_RATE, CHANNELS, BITS_PER_SAMPLE, VERSION
from dialogue_studio.models import ScriptMode, SpeechResult


def export(
    result: SpeechResult,
    output_dir: str,
    source_name: str,
    language: str,
    mode: ScriptMode,
) -> str:
    """Write the produced audio and its companions.

    Creates:
      - <output_dir>/<name>.wav (the download)
      - <output_dir>/<name>.txt (the finalized script)
      - <output_dir>/<name>.json (provenance manifest)

    Returns path to the WAV file.
    """
    os.makedirs(output_dir, exist_ok=True)
    base = sanitize_basename(source_name)

    wav_path = os.path.join(output_dir, wav_filename(source_name))
    with open(wav_path, "wb") as f:
        f.write(result.wav)

    text_path = os.path.join(output_dir, f"{base}.txt")
    with open(text_path, "w", encoding="utf-8") as f:
        f.write(result.text.rstrip("\n") + "\n")

    manifest = {
        "source": source_name,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "producer_version": VERSION,
        "mode": mode.value,
        "language": language,
        "voices": {b.speaker.label: b.voice for b in result.plan.bindings},
        "audio": {
            "file": os.path.basename(wav_path),
            "sample_rate": SAMPLE_RATE,
            "channels": CHANNELS,
            "bits_per_sample": BITS_PER_SAMPLE,
        },
        "stats": {
            "lines": len(result.normalized.lines),
            "pcm_bytes": len(result.pcm),
            "duration_seconds": round(result.duration_seconds, 1),
        },
    }

    manifest_path = os.path.join(output_dir, f"{base}.json")
    with open(manifest_path, "w", encoding="utf-8") as f:
        json.dump(manifest, f, indent=2, ensure_ascii=False)

    return wav_path
