"""Capability discovery: legacy service requests resolved against the engine."""

from __future__ import annotations

import logging
from typing import Any

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
from plugin_compat.capabilities.base import ServiceAdapter, has_method, resolve
from plugin_compat.errors import UnknownServiceTypeError
from plugin_compat.legacy.types import ServiceType

logger = logging.getLogger(__name__)

# Legacy capability -> name of the engine service that provides it
SERVICE_NAMES: dict[ServiceType, str] = {
    ServiceType.BROWSER: "browser",
    ServiceType.VIDEO: "video",
    ServiceType.PDF: "pdf",
    ServiceType.AWS_S3: "remote_files",
    ServiceType.WEB_SEARCH: "web_search",
    ServiceType.TRANSCRIPTION: "transcription",
    ServiceType.EMAIL_AUTOMATION: "email",
    ServiceType.TEE_LOG: "tee",
}

_DIRECT_ADAPTERS: dict[ServiceType, type[ServiceAdapter]] = {
    ServiceType.BROWSER: BrowserAdapter,
    ServiceType.PDF: PdfAdapter,
    ServiceType.VIDEO: VideoAdapter,
    ServiceType.AWS_S3: FileStorageAdapter,
    ServiceType.TRANSCRIPTION: TranscriptionAdapter,
}

# Capabilities the engine provides through model calls rather than services
_MODEL_ADAPTERS: dict[ServiceType, type[ServiceAdapter]] = {
    ServiceType.SPEECH_GENERATION: SpeechAdapter,
    ServiceType.IMAGE_DESCRIPTION: ImageDescriptionAdapter,
    ServiceType.TEXT_GENERATION: TextGenerationAdapter,
    ServiceType.TRANSCRIPTION: TranscriptionAdapter,
}


def determine_service_type(service: Any) -> ServiceType:
    """Read the ``service_type`` tag a service class declares.

    Raises UnknownServiceTypeError when the tag is missing or not a known
    capability type.
    """
    if service is None:
        msg = "Cannot determine the type of a missing service"
        raise UnknownServiceTypeError(msg)
    tag = getattr(type(service), "service_type", None)
    if tag is None:
        msg = f"{type(service).__name__} does not declare a service_type"
        raise UnknownServiceTypeError(msg)
    try:
        return ServiceType(tag)
    except ValueError as exc:
        msg = f"{type(service).__name__} declares unknown service_type {tag!r}"
        raise UnknownServiceTypeError(msg) from exc


class CapabilityManager:
    """Per-façade registry of legacy services.

    Services registered by legacy plugins win. Otherwise a request is served
    by (a) an adapter around the engine's equivalent service, (b) an adapter
    synthesized from model calls, or (c) nothing. Adapters are created on
    first request and kept until ``stop_all``; registered services outlive it.
    """

    def __init__(self, engine: Any) -> None:
        self._engine = engine
        self._registered: dict[ServiceType, Any] = {}
        self._adapters: dict[ServiceType, ServiceAdapter] = {}

    def __contains__(self, service_type: object) -> bool:
        return service_type in self._registered or service_type in self._adapters

    def get_service(self, service_type: ServiceType | str) -> Any | None:
        try:
            service_type = ServiceType(service_type)
        except ValueError:
            logger.warning("Unknown service type requested: %s", service_type)
            return None
        if service_type in self._registered:
            return self._registered[service_type]
        if service_type in self._adapters:
            return self._adapters[service_type]
        adapter = self._create_adapter(service_type)
        if adapter is not None:
            self._adapters[service_type] = adapter
        return adapter

    def register_service(self, service: Any) -> ServiceType:
        """Register a legacy service under its declared type. Returns the type."""
        service_type = determine_service_type(service)
        if service_type in self._registered:
            logger.info("Replacing service for %s", service_type)
        self._registered[service_type] = service
        return service_type

    def registered_services(self) -> list[tuple[ServiceType, Any]]:
        """Services registered by legacy code, in registration order."""
        return list(self._registered.items())

    def _engine_service(self, service_type: ServiceType) -> Any | None:
        name = SERVICE_NAMES.get(service_type)
        if name is None:
            return None
        try:
            return self._engine.get_service(name)
        except Exception:
            logger.exception("Looking up engine service %s failed", name)
            return None

    def _create_adapter(self, service_type: ServiceType) -> ServiceAdapter | None:
        service = self._engine_service(service_type)
        if service is not None:
            logger.info(
                "Adapting engine service %s for %s", SERVICE_NAMES[service_type], service_type
            )
            adapter_cls = _DIRECT_ADAPTERS.get(service_type)
            if adapter_cls is None:
                return GenericAdapter(self._engine, service, service_type)
            return adapter_cls(self._engine, service)

        adapter_cls = _MODEL_ADAPTERS.get(service_type)
        if adapter_cls is not None:
            logger.info("Synthesizing %s from model calls", service_type)
            return adapter_cls(self._engine)

        logger.warning("No capability available for service type: %s", service_type)
        return None

    async def stop_all(self) -> None:
        """Stop every service and adapter, then drop the adapters.

        Failures are logged, never raised.
        """
        services = [*self._registered.items(), *self._adapters.items()]
        self._adapters.clear()
        for service_type, service in services:
            if not has_method(service, "stop"):
                continue
            try:
                await resolve(service.stop())
            except Exception:
                logger.exception("Stopping %s failed", service_type)
