"""Runtime settings resolved from the environment and an optional .env file."""

import os
from dataclasses import dataclass
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from dialogue_studio.constants import TEXT_MODEL, TTS_MODEL, OUTPUT_DIR, DEFAULT_LANGUAGE, LANGUAGES
from dialogue_studio.errors import ExternalServiceError

API_KEY_ENV = "GEMINI_API_KEY"
LEGACY_API_KEY_ENV = "API_KEY"
TEXT_MODEL_ENV = "DIALOGUE_STUDIO_TEXT_MODEL"
TTS_MODEL_ENV = "DIALOGUE_STUDIO_TTS_MODEL"
OUTPUT_DIR_ENV = "DIALOGUE_STUDIO_OUTPUT_DIR"
LANGUAGE_ENV = "DIALOGUE_STUDIO_LANGUAGE"


@dataclass(frozen=True)
class Settings:
    api_key: str | None = None
    text_model: str = TEXT_MODEL
    tts_model: str = TTS_MODEL
    output_dir: str = OUTPUT_DIR
    language: str = DEFAULT_LANGUAGE

    def require_api_key(self) -> str:
        if not self.api_key:
            raise ExternalServiceError(
                f"{API_KEY_ENV} environment variable is not set. Add it to your environment or a .env file."
            )
        return self.api_key


def load_settings(env: Mapping[str, str] | None = None) -> Settings:
    """Build Settings from env (defaults to os.environ after loading .env).

    Passing an explicit mapping skips .env loading.
    An unknown language code falls back to the default.
    """
    if env is None:
        load_dotenv(find_dotenv(usecwd=True))
        env = os.environ

    language = env.get(LANGUAGE_ENV) or DEFAULT_LANGUAGE
    if language not in LANGUAGES:
        language = DEFAULT_LANGUAGE

    return Settings(
        api_key=env.get(API_KEY_ENV) or env.get(LEGACY_API_KEY_ENV) or None,
        text_model=env.get(TEXT_MODEL_ENV) or TEXT_MODEL,
        tts_model=env.get(TTS_MODEL_ENV) or TTS_MODEL,
        output_dir=env.get(OUTPUT_DIR_ENV) or OUTPUT_DIR,
        language=language,
    )
