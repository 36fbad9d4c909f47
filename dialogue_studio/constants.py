"""All magic numbers and configuration constants."""

SAMPLE_RATE = 24000                 # Hz, fixed output rate of the TTS model
CHANNELS = 1                        # mono
BITS_PER_SAMPLE = 16                # signed little-endian PCM
WAV_HEADER_SIZE = 44                # canonical RIFF/WAVE header length
PCM_FORMAT_TAG = 1                  # WAVE_FORMAT_PCM

PRIMARY_SPEAKER_LABEL = "SPEAKER_1"     # label bound to the primary voice
SECONDARY_SPEAKER_LABEL = "SPEAKER_2"   # label bound to the secondary voice

DEFAULT_PRIMARY_VOICE = "Zephyr"
DEFAULT_SECONDARY_VOICE = "Puck"

TEXT_MODEL = "gemini-2.5-pro"                   # transcription, translation, authoring
TTS_MODEL = "gemini-2.5-flash-preview-tts"      # speech synthesis

# CLI language code → language name used in prompts
LANGUAGES = {
    "zh": "简体中文",
    "en": "English",
}
DEFAULT_LANGUAGE = "zh"

# Short phrase spoken when previewing a voice
PREVIEW_PHRASES = {
    "zh": "你好，这是一个声音测试。",
    "en": "Hello, this is a voice test.",
}

FALLBACK_BASENAME = "audio"         # download name when the source has none usable
OUTPUT_DIR = "output"
VERSION = "0.1.0"
