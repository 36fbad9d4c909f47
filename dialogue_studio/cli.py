"""CLI interface with subcommand routing and pipeline orchestration."""

import argparse
import dataclasses
import logging
import os
import sys

from dialogue_studio.artifacts import (
    load_script,
    source_name_from_script,
    write_script,
)
from dialogue_studio.config import Settings, load_settings
from dialogue_studio.constants import (
    DEFAULT_PRIMARY_VOICE,
    DEFAULT_SECONDARY_VOICE,
    LANGUAGES,
    VERSION,
)
from dialogue_studio.errors import DialogueStudioError, PlaybackError
from dialogue_studio.exporter import export
from dialogue_studio.models import ScriptMode
from dialogue_studio.normalizer import normalize
from dialogue_studio.pipeline import (
    preview_voice,
    script_from_audio,
    script_from_topic,
    synthesize_script,
)
from dialogue_studio.playback import play_wav
from dialogue_studio.service import GeminiService
from dialogue_studio.voices import filter_voices


def _fail(message: str):
    print(f"Error: {message}", file=sys.stderr)
    raise SystemExit(1)


def _mode(args) -> ScriptMode:
    return ScriptMode.NARRATION if args.narration else ScriptMode.DIALOGUE


def _settings(args) -> Settings:
    """Settings from the environment, with command-line overrides applied."""
    settings = load_settings()
    overrides = {}
    if getattr(args, "language", None):
        overrides["language"] = args.language
    if getattr(args, "output_dir", None):
        overrides["output_dir"] = args.output_dir
    return dataclasses.replace(settings, **overrides)


def _make_service(settings: Settings) -> GeminiService:
    return GeminiService(settings)


def _read_script(path: str) -> str:
    try:
        return load_script(path)
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _generate_script(args, settings: Settings, service) -> tuple[str, str]:
    """Produce a script from an audio file or a topic. Returns (source_name, text)."""
    mode = _mode(args)
    try:
        if getattr(args, "topic", None):
            print(f"Writing a {mode.value} script about {args.topic!r}...")
            text = script_from_topic(service, args.topic, settings.language, mode)
            return args.topic.strip(), text

        print(f"Transcribing {os.path.basename(args.audio)} into {LANGUAGES[settings.language]}...")
        text = script_from_audio(service, args.audio, settings.language, mode)
        return os.path.basename(args.audio), text
    except (FileNotFoundError, ValueError) as e:
        _fail(str(e))


def _synthesize_and_export(args, settings: Settings, service, source_name: str, text: str) -> str:
    mode = _mode(args)
    print("Generating speech...")
    result = synthesize_script(service, text, mode, args.primary_voice, args.secondary_voice)
    output_path = export(result, settings.output_dir, source_name, settings.language, mode)

    voices = ", ".join(f"{b.speaker.label} → {b.voice}" for b in result.plan.bindings)
    print(f"Done: {output_path} ({result.duration_seconds:.1f}s; {voices})")

    if args.play:
        try:
            play_wav(result.wav)
        except PlaybackError as e:
            _fail(f"{e} The audio was still saved to {output_path}.")
    return output_path


def cmd_transcribe(args):
    """Transcribe and translate an audio file into a script."""
    settings = _settings(args)
    service = _make_service(settings)
    source_name, text = _generate_script(args, settings, service)
    path = write_script(settings.output_dir, source_name, text)
    print(f"Script written to {path}")
    print(f"Review it, then run 'dialogue-studio speak {path}' to generate audio.")


def cmd_write(args):
    """Author a script for a topic."""
    if not args.topic.strip():
        _fail("Topic is empty.")
    cmd_transcribe(args)


def cmd_speak(args):
    """Synthesize an existing script file."""
    text = _read_script(args.script)
    settings = _settings(args)
    service = _make_service(settings)
    _synthesize_and_export(args, settings, service, source_name_from_script(args.script), text)


def cmd_run(args):
    """Script generation followed by synthesis, with an edit gate in a terminal."""
    if not args.audio and not args.topic:
        _fail("Provide an audio file or --topic.")
    if args.audio and args.topic:
        _fail("Provide either an audio file or --topic, not both.")

    settings = _settings(args)
    service = _make_service(settings)
    source_name, text = _generate_script(args, settings, service)
    path = write_script(settings.output_dir, source_name, text)
    print(f"Script written to {path}")

    # Edit gate: only in an interactive terminal
    if not args.yes and sys.stdin.isatty():
        print(f"\n{text}\n")
        print(f"Edit {path} now if you want changes.")
        response = input("Generate audio? [Y/n] ").strip().lower()
        if response == "n":
            print(f"Stopped. Run 'dialogue-studio speak {path}' when ready.")
            return
        text = _read_script(path)

    _synthesize_and_export(args, settings, service, source_name, text)


def cmd_preview(args):
    """Play a short sample of a voice."""
    settings = _settings(args)
    service = _make_service(settings)
    print(f"Previewing {args.voice}...")
    play_wav(preview_voice(service, args.voice, settings.language))


def cmd_normalize(args):
    """Show what would be sent to synthesis, without calling the service."""
    text = _read_script(args.script)
    script, plan = normalize(text, _mode(args), args.primary_voice, args.secondary_voice)
    print(script.to_text())
    print()
    print("Voices:")
    for binding in plan.bindings:
        print(f"  {binding.speaker.label} → {binding.voice}")


def cmd_voices(args):
    """List available voices."""
    voices = filter_voices(args.filter)
    if not voices:
        print("No matching voices found.")
        return
    print("Available voices:")
    for v in voices:
        print(f"  {v.name:<12} {v.description}")


def _script_options() -> argparse.ArgumentParser:
    parent = argparse.ArgumentParser(add_help=False)
    parent.add_argument("--language", choices=sorted(LANGUAGES), help="Output language (default: zh)")
    parent.add_argument("--narration", action="store_true", help="Single-voice narration instead of dialogue")
    parent.add_argument("--primary-voice", default=DEFAULT_PRIMARY_VOICE, help="Voice for SPEAKER_1 / narration")
    parent.add_argument("--secondary-voice", default=DEFAULT_SECONDARY_VOICE, help="Voice for SPEAKER_2")
    parent.add_argument("--output-dir", help="Where scripts and audio are written")
    return parent


def main():
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="dialogue-studio",
        description="Dialogue Studio: turn audio or a topic into a two-voice dialogue or narration",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")
    script_options = _script_options()

    # transcribe
    transcribe_parser = subparsers.add_parser(
        "transcribe", parents=[script_options], help="Transcribe and translate an audio file into a script",
    )
    transcribe_parser.add_argument("audio", help="Path to the audio file")
    transcribe_parser.set_defaults(func=cmd_transcribe)

    # write
    write_parser = subparsers.add_parser("write", parents=[script_options], help="Write a script about a topic")
    write_parser.add_argument("topic", help="Topic for the script")
    write_parser.set_defaults(func=cmd_write)

    # speak
    speak_parser = subparsers.add_parser("speak", parents=[script_options], help="Generate audio from a script file")
    speak_parser.add_argument("script", help="Path to the script file")
    speak_parser.add_argument("--play", action="store_true", help="Play the result when done")
    speak_parser.set_defaults(func=cmd_speak)

    # run
    run_parser = subparsers.add_parser("run", parents=[script_options], help="Generate a script, then audio")
    run_parser.add_argument("audio", nargs="?", help="Path to the audio file")
    run_parser.add_argument("--topic", help="Write a script about this topic instead")
    run_parser.add_argument("-y", "--yes", action="store_true", help="Skip the edit pause")
    run_parser.add_argument("--play", action="store_true", help="Play the result when done")
    run_parser.set_defaults(func=cmd_run)

    # preview
    preview_parser = subparsers.add_parser("preview", help="Listen to a voice")
    preview_parser.add_argument("voice", help="Voice name")
    preview_parser.add_argument("--language", choices=sorted(LANGUAGES), help="Preview phrase language")
    preview_parser.set_defaults(func=cmd_preview)

    # normalize
    normalize_parser = subparsers.add_parser(
        "normalize", parents=[script_options], help="Show the normalized script and voice routing",
    )
    normalize_parser.add_argument("script", help="Path to the script file")
    normalize_parser.set_defaults(func=cmd_normalize)

    # voices
    voices_parser = subparsers.add_parser("voices", help="List available voices")
    voices_parser.add_argument("--filter", help="Filter voices by substring")
    voices_parser.set_defaults(func=cmd_voices)

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if not args.command:
        parser.print_help()
        return

    try:
        args.func(args)
    except DialogueStudioError as e:
        _fail(str(e))
