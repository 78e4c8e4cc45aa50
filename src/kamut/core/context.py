#!/usr/bin/env python3
"""
KAMUT RUN CONTEXT
-----------------
Records what happened to each file and document during a run. The engine
fills these in; the CLI turns them into console output and the summary.

Author: Kamut Team
Date: 2026-10-16
"""

from dataclasses import dataclass, field
from typing import List, Optional

GENERATED = "GENERATED"
SKIPPED = "SKIPPED"


@dataclass
class DocumentOutcome:
    """The result of one document within a file."""
    index: int                             # 1-based position in the file
    name: Optional[str] = None             # Config name, when it parsed
    kind: Optional[str] = None             # Effective kind, when resolved
    status: str = GENERATED                # GENERATED or SKIPPED
    manifest_kinds: List[str] = field(default_factory=list)
    message: str = ""                      # Warning text for skipped documents


@dataclass
class FileReport:
    """Everything the engine learned about one input file."""
    file_path: str
    output_path: Optional[str] = None
    documents: List[DocumentOutcome] = field(default_factory=list)
    manifest_count: int = 0
    written: bool = False
    error: Optional[str] = None            # Set when processing aborted

    @property
    def success(self) -> bool:
        return self.error is None

    @property
    def warnings(self) -> List[str]:
        return [doc.message for doc in self.documents if doc.status == SKIPPED]

    @property
    def status(self) -> str:
        if self.error:
            return "FAILED"
        if self.written:
            return "WRITTEN"
        if self.manifest_count:
            return "PREVIEW"
        return "EMPTY"
