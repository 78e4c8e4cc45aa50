#!/usr/bin/env python3
"""
KAMUT SPLITTER - Multi-Document Reader
--------------------------------------
Cuts the raw text of a kamut file into its YAML documents and loads each one
into plain Python objects. Separator lines are a bare '---' (trailing
whitespace tolerated); blank and comment-only documents are dropped. Loaded documents hold
only dicts, lists and strings.

Author: Kamut Team
Date: 2026-10-16
"""

import re
from typing import Any, List, Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from kamut.core.errors import ParseError

SEPARATOR = "---"
SEPARATOR_LINE = re.compile(r"^---[ \t]*$", re.MULTILINE)


class DocumentSplitter:
    """
    Splits multi-document kamut text and loads each piece with ruamel's
    base loader. No tags are resolved, so every scalar arrives as its source
    text ('1.10' stays '1.10'); typed fields are converted in models.
    """

    def __init__(self):
        self.yaml = YAML(typ="base", pure=True)

    def _clean_artifacts(self, text: str) -> str:
        """Removes a UTF-8 BOM and standardizes line endings."""
        text = text.lstrip("\ufeff")
        return text.replace("\r\n", "\n").replace("\r", "\n")

    def split(self, text: str) -> List[str]:
        """Returns the non-blank documents of text, in file order."""
        chunks = SEPARATOR_LINE.split(self._clean_artifacts(text))
        return [chunk for chunk in chunks if chunk.strip()]

    def load(self, document: str, index: Optional[int] = None, source: Optional[str] = None) -> Any:
        """
        Parses one document. Returns None for comment-only documents.

        Raises:
            ParseError: when the text is not well-formed YAML.
        """
        try:
            return self.yaml.load(document)
        except YAMLError as e:
            reason = " ".join(str(e).split())
            raise ParseError(f"Invalid YAML: {reason}", index, source) from e
