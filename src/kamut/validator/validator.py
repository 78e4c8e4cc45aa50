#!/usr/bin/env python3
"""
KAMUT VALIDATOR - The Judge
---------------------------
Final safety gate before rendering. Every generated manifest is checked for
the fields the API server refuses to live without, so a broken generator
never produces an output file.

Author: Kamut Team
Date: 2026-10-16
"""

import logging
from typing import Any, Dict, Tuple

from kamut.core.errors import SerializationError

logger = logging.getLogger("kamut.validator")


class ManifestValidator:
    """Structural checks on generated objects."""

    def __init__(self):
        # Core fields that must exist in every single K8s resource
        self.required_fields = ["apiVersion", "kind", "metadata"]

    def validate(self, doc: Any) -> Tuple[bool, str]:
        """Returns (ok, message) for one manifest."""
        if not isinstance(doc, dict):
            return False, "Generated manifest is not a mapping."

        for field in self.required_fields:
            if field not in doc:
                return False, f"Missing required top-level field '{field}'."

        metadata = doc["metadata"]
        if not isinstance(metadata, dict) or not metadata.get("name"):
            return False, f"{doc['kind']} has no metadata.name."

        if doc["kind"] == "Deployment":
            return self._validate_selector(doc)

        return True, "Manifest passes structural integrity check."

    def _validate_selector(self, doc: Dict[str, Any]) -> Tuple[bool, str]:
        """A Deployment's selector must match its own pod template."""
        spec = doc.get("spec") or {}
        selector = (spec.get("selector") or {}).get("matchLabels")
        template_labels = ((spec.get("template") or {}).get("metadata") or {}).get("labels")
        if not selector or selector != template_labels:
            return False, "Deployment selector does not match its pod template labels."
        return True, "Manifest passes structural integrity check."

    def ensure_valid(self, doc: Any) -> None:
        """
        Raises:
            SerializationError: when validate() rejects doc.
        """
        valid, message = self.validate(doc)
        if not valid:
            logger.error(f"Rejected generated manifest: {message}")
            raise SerializationError(message)
