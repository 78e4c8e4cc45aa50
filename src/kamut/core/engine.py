#!/usr/bin/env python3
"""
KAMUT ENGINE - The File Orchestrator
------------------------------------
ManifestEngine drives a kamut file through its phases:

    1. Read (BOM-aware)
    2. Split into YAML documents and parse each into a KamutConfig
    3. Dispatch to the generators for the document's kind
    4. Validate and render every manifest
    5. Atomically write <base>.yaml next to the input

Output is written only after every document of a file has been handled and
at least one manifest exists, so a failure never leaves a half-written file.

Author: Kamut Team
Date: 2026-10-16
"""

import glob
import logging
import os
import time
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Union

from kamut.core.context import SKIPPED, DocumentOutcome, FileReport
from kamut.core.errors import (
    FileIOError,
    KamutError,
    MissingKindError,
    MissingRequiredFieldError,
    SerializationError,
    UnsupportedKindError,
)
from kamut.core.models import parse_config
from kamut.core.settings import RECOGNIZED_SUFFIXES, GeneratorSettings
from kamut.core.splitter import DocumentSplitter
from kamut.generators.dispatcher import generate_for, resolve_kind
from kamut.rendering.exporter import ManifestExporter
from kamut.validator.validator import ManifestValidator

logger = logging.getLogger("kamut.engine")

PathLike = Union[str, Path]


def output_path_for(file_path: PathLike) -> Path:
    """
    Derives the output path: recognized kamut suffix stripped (or everything
    from the first dot when none matches), '.yaml' appended, same directory.

    Raises:
        FileIOError: when the derived path would overwrite the input.
    """
    path = Path(file_path)
    file_name = path.name
    base_name = None
    for suffix in RECOGNIZED_SUFFIXES:
        if file_name.endswith(suffix):
            base_name = file_name[: -len(suffix)]
            break
    if base_name is None:
        base_name = file_name.split(".", 1)[0]
    if not base_name:
        raise FileIOError(path, "Cannot derive an output name")

    output = path.with_name(f"{base_name}.yaml")
    if output.resolve() == path.resolve():
        raise FileIOError(path, "Refusing to overwrite the input file")
    return output


class ManifestEngine:
    """
    Principal orchestrator for manifest generation.
    Holds no state between files beyond its settings and helper objects.
    """

    def __init__(self, settings: Optional[GeneratorSettings] = None):
        self.settings = settings or GeneratorSettings()
        self.splitter = DocumentSplitter()
        self.validator = ManifestValidator()
        self.exporter = ManifestExporter()

    def find_config_files(self, pattern: str) -> List[Path]:
        """Matching regular files, sorted so runs are reproducible."""
        matches = glob.glob(pattern, recursive=True)
        return sorted(Path(m) for m in matches if os.path.isfile(m))

    def find_all(self, patterns: Iterable[str]) -> List[Path]:
        """Union of several patterns; a file matched twice is listed once."""
        found: Dict[Path, Path] = {}
        for pattern in patterns:
            for path in self.find_config_files(pattern):
                found.setdefault(path.resolve(), path)
        return sorted(found.values())

    def process_file(self, file_path: PathLike) -> FileReport:
        """
        Generates manifests for one file and writes its output.

        Raises:
            FileIOError, ParseError, MissingKindError, SerializationError:
                fatal for this file; remaining documents are not processed.
        """
        report = FileReport(file_path=str(file_path))
        self._process(Path(file_path), report)
        return report

    def run(self, pattern: str, fail_fast: bool = False,
            on_report: Optional[Callable[[FileReport], None]] = None) -> List[FileReport]:
        """Processes every file matching pattern."""
        return self.run_files(self.find_config_files(pattern), fail_fast, on_report)

    def run_files(self, file_paths: Iterable[PathLike], fail_fast: bool = False,
                  on_report: Optional[Callable[[FileReport], None]] = None) -> List[FileReport]:
        """
        Processes the given files in order. A fatal error is recorded on that
        file's report and the run moves on, unless fail_fast is set.
        """
        reports = []
        for file_path in map(Path, file_paths):
            report = FileReport(file_path=str(file_path))
            try:
                self._process(file_path, report)
            except KamutError as e:
                logger.error(f"Error processing {file_path}: {e}")
                report.error = str(e)
            reports.append(report)
            if on_report:
                on_report(report)
            if fail_fast and report.error:
                break
        return reports

    def _process(self, file_path: Path, report: FileReport) -> None:
        source = str(file_path)
        logger.info(f"Processing file: {source}")

        try:
            raw_text = file_path.read_text(encoding='utf-8-sig')
        except (OSError, UnicodeDecodeError) as e:
            raise FileIOError(file_path, f"Failed to read file ({e})") from e

        rendered: List[str] = []
        for index, document in enumerate(self.splitter.split(raw_text), 1):
            data = self.splitter.load(document, index, source)
            if data is None:
                continue

            config = parse_config(data, index, source)
            outcome = DocumentOutcome(index=index, name=config.name, kind=config.kind)
            report.documents.append(outcome)

            try:
                kind = resolve_kind(config, self.settings)
                outcome.kind = kind.value
                manifests = generate_for(kind, config, self.settings)
            except MissingKindError as e:
                raise e.with_location(index, source)
            except (MissingRequiredFieldError, UnsupportedKindError) as e:
                outcome.status = SKIPPED
                outcome.message = str(e.with_location(index, source))
                logger.info(f"Skipping document: {outcome.message}")
                continue

            for manifest in manifests:
                try:
                    self.validator.ensure_valid(manifest)
                    rendered.append(self.exporter.export(manifest))
                except SerializationError as e:
                    raise e.with_location(index, source)
                outcome.manifest_kinds.append(manifest["kind"])

        report.manifest_count = len(rendered)
        if not rendered:
            logger.info(f"No manifests generated for {source}")
            return

        output_path = output_path_for(file_path)
        report.output_path = str(output_path)
        if self.settings.dry_run:
            return

        self._atomic_write(output_path, self.exporter.join(rendered))
        report.written = True
        logger.info(f"Saved {len(rendered)} manifest(s) to {output_path}")

    def _atomic_write(self, target_path: Path, content: str):
        if not os.access(target_path.parent, os.W_OK):
            raise FileIOError(target_path.parent, "No write access")
        temp_file = target_path.with_suffix('.kamut.tmp')
        try:
            temp_file.write_text(content, encoding='utf-8')
            os.replace(temp_file, target_path)
        except OSError as e:
            if temp_file.exists():
                temp_file.unlink()
            raise FileIOError(target_path, f"Atomic write failed ({e})") from e

    def generate_summary(self, reports: List[FileReport]) -> Dict[str, Any]:
        """Totals for the end-of-run panel."""
        return {
            "total_files": len(reports),
            "written": sum(1 for r in reports if r.written),
            "manifests": sum(r.manifest_count for r in reports),
            "warnings": sum(len(r.warnings) for r in reports),
            "failures": sum(1 for r in reports if not r.success),
            "summary_timestamp": time.strftime("%Y-%m-%d %H:%M:%S"),
        }
