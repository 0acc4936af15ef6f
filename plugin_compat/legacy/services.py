"""Legacy service base class and the result shapes legacy services return."""

from __future__ import annotations

from abc import ABC
from typing import Any, ClassVar

from pydantic import BaseModel

from plugin_compat.legacy.types import ServiceType


class Service(ABC):
    """Base for legacy capability implementations.

    Subclasses must set ``service_type``; it is the only thing used to
    decide which capability a service provides.

    Example::

        class MyPdfService(Service):
            service_type = ServiceType.PDF

            async def convert_pdf_to_text(self, data: bytes) -> str:
                ...
    """

    service_type: ClassVar[ServiceType]

    async def initialize(self, runtime: Any) -> None:
        """Called once when the runtime starts. Override to acquire resources."""


class PageContent(BaseModel):
    title: str = ""
    description: str = ""
    body_content: str = ""


class ImageDescription(BaseModel):
    title: str = ""
    description: str = ""


class UploadResult(BaseModel):
    success: bool
    url: str | None = None
    error: str | None = None
    key: str | None = None
