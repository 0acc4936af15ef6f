"""Legacy service adapters.

Each adapter implements one legacy service interface on top of a current
service, the engine's model calls, or both. Where the legacy interface has
a failure value, errors are logged and converted to it; otherwise they are
logged and re-raised.
"""

from __future__ import annotations

import io
import json
import logging
import tempfile
from collections.abc import Mapping
from pathlib import Path
from typing import Any
from urllib.parse import urlparse

from plugin_compat.capabilities.base import ServiceAdapter, has_method, resolve
from plugin_compat.current.types import ModelType
from plugin_compat.errors import CompatError, forwarding
from plugin_compat.legacy.services import ImageDescription, PageContent, UploadResult
from plugin_compat.legacy.types import ServiceType

logger = logging.getLogger(__name__)

_VIDEO_HOSTS = ("youtube.com", "youtu.be", "vimeo.com")


def _model_of(result: Any, model: type[Any]) -> Any:
    if isinstance(result, model):
        return result
    if isinstance(result, Mapping):
        return model.model_validate(dict(result))
    return model.model_validate(result, from_attributes=True)


# -- Direct adapters ---------------------------------------------------------


class BrowserAdapter(ServiceAdapter):
    service_type = ServiceType.BROWSER

    async def close_browser(self) -> None:
        if has_method(self.service, "stop"):
            await resolve(self.service.stop())
        elif has_method(self.service, "close_browser"):
            await resolve(self.service.close_browser())

    async def stop(self) -> None:
        await self.close_browser()

    async def get_page_content(self, url: str, runtime: Any = None) -> PageContent:
        if self.service is None:
            return PageContent(title=url, description="Browser service not available")
        try:
            result = await resolve(self.service.get_page_content(url, self.engine))
            return _model_of(result, PageContent)
        except Exception:
            logger.exception("get_page_content failed for %s", url)
            return PageContent(title=url, description="Error fetching content", body_content="")


class PdfAdapter(ServiceAdapter):
    service_type = ServiceType.PDF

    async def convert_pdf_to_text(self, data: bytes) -> str:
        if self.service is None:
            return ""
        try:
            return await resolve(self.service.convert_pdf_to_text(data)) or ""
        except Exception:
            logger.exception("convert_pdf_to_text failed")
            return ""


class VideoAdapter(ServiceAdapter):
    service_type = ServiceType.VIDEO

    def is_video_url(self, url: str) -> bool:
        if has_method(self.service, "is_video_url"):
            return bool(self.service.is_video_url(url))
        host = (urlparse(url).hostname or "").lower()
        return any(host == h or host.endswith("." + h) for h in _VIDEO_HOSTS)

    def _require(self) -> Any:
        if self.service is None:
            msg = "Video service not available"
            raise CompatError(msg)
        return self.service

    async def fetch_video_info(self, url: str) -> Any:
        service = self._require()
        with forwarding("fetch_video_info"):
            return await resolve(service.fetch_video_info(url))

    async def download_video(self, video_info: Any) -> str:
        service = self._require()
        with forwarding("download_video"):
            return await resolve(service.download_video(video_info))

    async def process_video(self, url: str, runtime: Any = None) -> Any:
        service = self._require()
        with forwarding("process_video"):
            return await resolve(service.process_video(url, self.engine))


class FileStorageAdapter(ServiceAdapter):
    """Legacy S3-style storage on top of the engine's remote file service."""

    service_type = ServiceType.AWS_S3

    async def upload_file(
        self,
        path: str,
        sub_directory: str = "",
        use_signed_url: bool = False,
        expires_in: int = 900,
    ) -> UploadResult:
        if self.service is None:
            return UploadResult(success=False, error="File service not available")
        try:
            result = await resolve(
                self.service.upload_file(path, sub_directory, use_signed_url, expires_in)
            )
        except Exception as exc:
            logger.exception("upload_file failed for %s", path)
            return UploadResult(success=False, error=str(exc))
        return _model_of(result, UploadResult)

    async def generate_signed_url(self, file_name: str, expires_in: int = 900) -> str:
        if self.service is None:
            msg = "File service not available"
            raise CompatError(msg)
        with forwarding("generate_signed_url"):
            return await resolve(self.service.generate_signed_url(file_name, expires_in))

    async def upload_json(
        self,
        data: Any,
        file_name: str | None = None,
        sub_directory: str = "",
        use_signed_url: bool = False,
        expires_in: int = 900,
    ) -> UploadResult:
        """Upload ``data`` as JSON, via a temp file when the service has no JSON upload."""
        if self.service is None:
            return UploadResult(success=False, error="File service not available")
        if has_method(self.service, "upload_json"):
            try:
                result = await resolve(
                    self.service.upload_json(
                        data, file_name, sub_directory, use_signed_url, expires_in
                    )
                )
            except Exception as exc:
                logger.exception("upload_json failed for %s", file_name)
                return UploadResult(success=False, error=str(exc))
            return _model_of(result, UploadResult)

        logger.warning("Remote file service has no upload_json, uploading via temp file")
        prefix = f"{Path(file_name).stem}-" if file_name else None
        with tempfile.NamedTemporaryFile(
            "w", suffix=".json", prefix=prefix, delete=False, encoding="utf-8"
        ) as fh:
            json.dump(data, fh, default=str)
            temp_path = Path(fh.name)
        try:
            result = await self.upload_file(
                str(temp_path), sub_directory, use_signed_url, expires_in
            )
        finally:
            temp_path.unlink(missing_ok=True)
        if result.url and result.key is None:
            result.key = result.url.rsplit("/", 1)[-1]
        return result


class TranscriptionAdapter(ServiceAdapter):
    """Uses the transcription service when present, else the TRANSCRIPTION model."""

    service_type = ServiceType.TRANSCRIPTION

    async def _call(self, method: str, audio: bytes) -> str | None:
        if has_method(self.service, method):
            try:
                return await resolve(getattr(self.service, method)(audio))
            except Exception:
                logger.exception("%s failed", method)
                return None
        return await self._transcribe_with_model(audio)

    async def _transcribe_with_model(self, audio: bytes) -> str | None:
        try:
            return await self.engine.use_model(ModelType.TRANSCRIPTION, {"audio": audio})
        except Exception:
            logger.exception("Transcription model call failed")
            return None

    async def transcribe(self, audio: bytes) -> str | None:
        return await self._call("transcribe", audio)

    async def transcribe_locally(self, audio: bytes) -> str | None:
        if has_method(self.service, "transcribe_locally"):
            return await self._call("transcribe_locally", audio)
        return await self.transcribe(audio)

    async def transcribe_attachment(self, audio: bytes) -> str | None:
        if has_method(self.service, "transcribe_attachment"):
            return await self._call("transcribe_attachment", audio)
        return await self.transcribe(audio)

    async def transcribe_attachment_locally(self, audio: bytes) -> str | None:
        if has_method(self.service, "transcribe_attachment_locally"):
            return await self._call("transcribe_attachment_locally", audio)
        return await self.transcribe_locally(audio)


class GenericAdapter(ServiceAdapter):
    """Passes attribute access straight through to the wrapped service."""

    def __init__(self, engine: Any, service: Any, service_type: ServiceType) -> None:
        super().__init__(engine, service)
        self.service_type = service_type

    def __getattr__(self, name: str) -> Any:
        # Only called for attributes the adapter itself lacks
        service = self.__dict__.get("service")
        if service is None:
            raise AttributeError(name)
        return getattr(service, name)


# -- Model-backed adapters ---------------------------------------------------


class SpeechAdapter(ServiceAdapter):
    service_type = ServiceType.SPEECH_GENERATION

    async def generate(self, runtime: Any, text: str) -> Any:
        """Return the synthesized audio as a readable stream."""
        try:
            result = await self.engine.use_model(ModelType.TEXT_TO_SPEECH, {"text": text})
        except Exception:
            logger.exception("Speech generation failed")
            raise
        if isinstance(result, bytes | bytearray):
            return io.BytesIO(bytes(result))
        if hasattr(result, "read"):
            return result
        msg = f"Unexpected TEXT_TO_SPEECH result type: {type(result).__name__}"
        raise CompatError(msg)


class ImageDescriptionAdapter(ServiceAdapter):
    service_type = ServiceType.IMAGE_DESCRIPTION

    async def describe_image(self, image_url: str) -> ImageDescription:
        try:
            result = await self.engine.use_model(
                ModelType.IMAGE_DESCRIPTION, {"image_url": image_url}
            )
        except Exception:
            logger.exception("Image description failed for %s", image_url)
            return ImageDescription(title="Error", description="Failed to describe image")
        if not result:
            return ImageDescription(title="Image", description="No description available")
        if isinstance(result, str):
            return ImageDescription(title="Image", description=result)
        return _model_of(result, ImageDescription)


class TextGenerationAdapter(ServiceAdapter):
    service_type = ServiceType.TEXT_GENERATION

    async def initialize_model(self) -> None:
        """Models are managed by the engine."""

    async def _complete(
        self,
        context: str,
        temperature: float,
        stop: list[str] | None,
        frequency_penalty: float,
        presence_penalty: float,
        max_tokens: int,
    ) -> Any:
        params = {
            "prompt": context,
            "temperature": temperature,
            "stop_sequences": stop or [],
            "frequency_penalty": frequency_penalty,
            "presence_penalty": presence_penalty,
            "max_tokens": max_tokens,
        }
        try:
            return await self.engine.use_model(ModelType.TEXT_LARGE, params)
        except Exception:
            logger.exception("Text generation failed")
            raise

    async def queue_message_completion(
        self,
        context: str,
        temperature: float = 0.7,
        stop: list[str] | None = None,
        frequency_penalty: float = 0.0,
        presence_penalty: float = 0.0,
        max_tokens: int = 2048,
    ) -> Any:
        return await self._complete(
            context, temperature, stop, frequency_penalty, presence_penalty, max_tokens
        )

    async def queue_text_completion(
        self,
        context: str,
        temperature: float = 0.7,
        stop: list[str] | None = None,
        frequency_penalty: float = 0.0,
        presence_penalty: float = 0.0,
        max_tokens: int = 2048,
    ) -> str:
        result = await self._complete(
            context, temperature, stop, frequency_penalty, presence_penalty, max_tokens
        )
        return result if isinstance(result, str) else str(result)

    async def get_embedding_response(self, text: str) -> list[float] | None:
        try:
            return await self.engine.use_model(ModelType.TEXT_EMBEDDING, {"text": text})
        except Exception:
            logger.exception("Embedding generation failed")
            return None
