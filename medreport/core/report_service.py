from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime
import logging

from medreport.core.logo import LogoLoader
from medreport.core.pdf_service import ComposedDocument, ReportPdfRenderer, compose_report
from medreport.core.report_input import ReportInput
from medreport.core.storage import ReportStorage, build_report_storage


@dataclass(frozen=True)
class PublishedReport:
    content_identifier: str
    filename: str
    document: ComposedDocument


class ReportService:
    """Composes a report and hands the finished bytes to the upload backend.

    ``publish`` fails as a whole: a composition error means nothing was
    uploaded, and an upload error is re-raised unchanged. Callers that want to
    retry only the upload use ``compose`` and ``upload`` separately.
    """

    def __init__(
        self,
        *,
        storage: ReportStorage | None = None,
        renderer: ReportPdfRenderer | None = None,
        logo_loader: LogoLoader | None = None,
    ) -> None:
        self._logger = logging.getLogger(__name__)
        self._storage = storage or build_report_storage()
        self._renderer = renderer or ReportPdfRenderer()
        self._logo_loader = logo_loader

    def close(self) -> None:
        """Release HTTP clients held by the logo loader and the storage backend."""
        for resource in (self._logo_loader, self._storage):
            close = getattr(resource, "close", None)
            if close is not None:
                close()

    async def compose(self, report: ReportInput, *, composed_at: datetime | None = None) -> ComposedDocument:
        return await compose_report(
            report,
            renderer=self._renderer,
            logo_loader=self._logo_loader,
            composed_at=composed_at,
        )

    async def upload(self, document: ComposedDocument) -> str:
        try:
            content_id = await asyncio.to_thread(self._storage.upload, document.content, document.filename)
        except Exception as exc:
            self._logger.warning(
                "report_upload_failed",
                extra={"report_filename": document.filename, "error": str(exc)},
            )
            raise
        self._logger.info(
            "report_uploaded",
            extra={"report_filename": document.filename, "content_identifier": content_id},
        )
        return content_id

    async def publish(self, report: ReportInput, *, composed_at: datetime | None = None) -> PublishedReport:
        document = await self.compose(report, composed_at=composed_at)
        content_id = await self.upload(document)
        return PublishedReport(content_identifier=content_id, filename=document.filename, document=document)
