"""Error types raised by the normalizer, encoder, service and playback layers."""


class DialogueStudioError(Exception):
    """Base class for all terminal failures of a single operation."""


class EmptyInputError(DialogueStudioError):
    """Raised when the input text has no usable lines after trimming."""


class EmptyProcessedTextError(DialogueStudioError):
    """Raised when normalization leaves nothing to synthesize."""


class MalformedTransportDataError(DialogueStudioError):
    """Raised when audio in the base64 transport encoding cannot be decoded."""


class ExternalServiceError(DialogueStudioError):
    """Raised when the generative-AI service fails or returns no payload."""


class VoiceSelectionError(DialogueStudioError):
    """Raised when the chosen voices cannot be used together."""


class PlaybackError(DialogueStudioError):
    """Raised when no local player could play the audio."""
