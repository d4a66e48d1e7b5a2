# praxpdf/services/document_service.py
"""
Document service: the entry point used by the UI layer.

Wraps the processors for the three user actions:
- listing selected PDFs with their recognized field values
- saving edited field values (Save / Save As)
- merging all pages of a PDF into one page, optionally in the background
"""

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path
from typing import Iterable, Mapping, Optional, Union

from praxpdf.config.settings import AppSettings, get_default_settings_path
from praxpdf.models.types import (
    DocumentMetrics, EdgeTrims, FieldEntry, MergeRequest, MergeResult, PdfEntry,
)
from praxpdf.processors.field_registry import KNOWN_FIELD_NAMES
from praxpdf.processors.pdf_common import _open_pymupdf_document, is_pdf
from praxpdf.processors.pdf_fields import (
    collect_metrics, extract_fields, list_field_entries, save_fields,
)
from praxpdf.processors.pdf_merger import PdfMerger
from praxpdf.services.exceptions import PdfOpenError

# Module logger
logger = logging.getLogger(__name__)


class PdfFormService:
    """
    Field editing and page merging for a set of PDFs.

    Merges submitted with submit_merge() run on a single worker thread,
    one at a time, in submission order.
    """

    def __init__(
        self,
        settings: Optional[AppSettings] = None,
        merger: Optional[PdfMerger] = None,
        settings_path: Optional[Path] = None,
    ):
        self.settings_path = Path(settings_path) if settings_path is not None else get_default_settings_path()
        # None = persisted settings (template + user_settings.json)
        self.settings = settings if settings is not None else AppSettings.load(self.settings_path)
        self._merger = merger if merger is not None else PdfMerger()
        self._executor: Optional[ThreadPoolExecutor] = None
        self._executor_lock = threading.Lock()

    # -------------------------------------------------------------------------
    # Settings
    # -------------------------------------------------------------------------

    def update_merge_settings(
        self,
        trim_top: Optional[float] = None,
        trim_bottom: Optional[float] = None,
        inter_page_gap: Optional[float] = None,
    ) -> AppSettings:
        """
        Change the merge trims and gap and persist them.

        Values outside the documented ranges are reset to 0 (see
        AppSettings._validate). None keeps the current value.
        """
        if trim_top is not None:
            self.settings.trim_top = trim_top
        if trim_bottom is not None:
            self.settings.trim_bottom = trim_bottom
        if inter_page_gap is not None:
            self.settings.inter_page_gap = inter_page_gap
        self.settings._validate()
        self.settings.save(self.settings_path)
        logger.info(
            "Merge settings saved: trim_top=%.1f, trim_bottom=%.1f, gap=%.1f",
            self.settings.trim_top, self.settings.trim_bottom, self.settings.inter_page_gap,
        )
        return self.settings

    def reload_settings(self) -> AppSettings:
        """Re-read settings from disk (cached while the files are unchanged)."""
        self.settings = AppSettings.load(self.settings_path)
        return self.settings

    # -------------------------------------------------------------------------
    # Entries
    # -------------------------------------------------------------------------

    def read_entry(self, path: Union[str, Path]) -> PdfEntry:
        """
        Read the recognized field values of one PDF.

        An unreadable PDF still produces an entry, without values.
        """
        path = Path(path)
        try:
            with _open_pymupdf_document(path) as doc:
                fields = extract_fields(doc, KNOWN_FIELD_NAMES)
                logger.info("Parsed %s: %d page(s), %d field value(s)", path.name, doc.page_count, len(fields))
        except PdfOpenError as e:
            logger.warning("Failed to read fields from %s: %s", path, e)
            fields = {}
        return PdfEntry(path=path, fields=fields)

    def read_entries(
        self,
        paths: Iterable[Union[str, Path]],
        existing: Iterable[PdfEntry] = (),
    ) -> list[PdfEntry]:
        """
        Build entries for newly selected files.

        Non-PDF paths and paths already listed (in `existing` or earlier in
        `paths`) are skipped. Order is preserved.
        """
        seen = {entry.path for entry in existing}
        entries = []
        for path in paths:
            path = Path(path)
            if not is_pdf(path):
                logger.debug("Skipping non-PDF file: %s", path)
                continue
            if path in seen:
                continue
            seen.add(path)
            entries.append(self.read_entry(path))
        return entries

    def save_edits(
        self,
        entry: PdfEntry,
        values: Mapping[str, str],
        destination: Optional[Union[str, Path]] = None,
    ) -> PdfEntry:
        """
        Write edited field values.

        Args:
            entry: Entry being edited
            values: Field name -> new value (empty clears the field)
            destination: Save As target. None overwrites the entry's file.

        Returns:
            Updated entry for the written file

        Raises:
            PdfOpenError, PdfSerializationError, PdfReplaceError
        """
        target = Path(destination) if destination is not None else entry.path
        save_fields(entry.path, target, values)
        return PdfEntry(path=target, fields=entry.fields).with_fields(dict(values))

    def list_fields(self, path: Union[str, Path]) -> list[FieldEntry]:
        """Every named field of a PDF with its page and bounds."""
        with _open_pymupdf_document(path) as doc:
            return list_field_entries(doc)

    def get_metrics(self, path: Union[str, Path]) -> DocumentMetrics:
        """Page count, stacked height, max width and unknown field names."""
        with _open_pymupdf_document(path) as doc:
            metrics = collect_metrics(doc)
        if metrics.unknown_field_names:
            logger.warning(
                "%s has unrecognized fields: %s",
                Path(path).name, ", ".join(metrics.unknown_field_names),
            )
        return metrics

    # -------------------------------------------------------------------------
    # Merge
    # -------------------------------------------------------------------------

    def build_merge_request(
        self,
        source: Union[str, Path],
        destination: Optional[Union[str, Path]] = None,
        page_trims: Optional[Mapping[int, EdgeTrims]] = None,
    ) -> MergeRequest:
        """Merge request using the current settings' trims and gap."""
        source = Path(source)
        if destination is None:
            destination = self.settings.get_merged_output_path(source)
        return MergeRequest(
            source=source,
            destination=Path(destination),
            settings=self.settings.to_merge_settings(),
            page_trims=dict(page_trims or {}),
        )

    def merge(self, request: MergeRequest) -> MergeResult:
        """Run a merge synchronously (see PdfMerger.merge)."""
        return self._merger.merge(request)

    def submit_merge(self, request: MergeRequest) -> Future:
        """Run a merge on the background worker. The Future holds the MergeResult or the error."""
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="praxpdf-merge")
            return self._executor.submit(self._merger.merge, request)

    def shutdown(self, wait: bool = True) -> None:
        """Stop the background worker."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=wait)
                self._executor = None
