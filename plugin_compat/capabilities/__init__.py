"""Legacy services backed by current capabilities or model calls."""

from plugin_compat.capabilities.adapters import (
    BrowserAdapter,
    FileStorageAdapter,
    GenericAdapter,
    ImageDescriptionAdapter,
    PdfAdapter,
    SpeechAdapter,
    TextGenerationAdapter,
    TranscriptionAdapter,
    VideoAdapter,
)
from plugin_compat.capabilities.base import ServiceAdapter
from plugin_compat.capabilities.manager import (
    SERVICE_NAMES,
    CapabilityManager,
    determine_service_type,
)

__all__ = [
    "SERVICE_NAMES",
    "BrowserAdapter",
    "CapabilityManager",
    "FileStorageAdapter",
    "GenericAdapter",
    "ImageDescriptionAdapter",
    "PdfAdapter",
    "ServiceAdapter",
    "SpeechAdapter",
    "TextGenerationAdapter",
    "TranscriptionAdapter",
    "VideoAdapter",
    "determine_service_type",
]
