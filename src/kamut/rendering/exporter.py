#!/usr/bin/env python3
"""
KAMUT EXPORTER - Manifest Renderer
----------------------------------
Converts generated manifests (plain dicts) into YAML text.

Output is reproducible: the identity keys of a Kubernetes object
(apiVersion, kind, metadata, spec) lead the top level and every other
mapping key is emitted in lexicographic order.

Author: Kamut Team
Date: 2026-10-16
"""

import io
from typing import Any, Dict, List

from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap
from ruamel.yaml.error import YAMLError

from kamut.core.errors import SerializationError
from kamut.core.splitter import SEPARATOR


class ManifestExporter:
    """
    The Renderer: dumps manifests with Kubernetes-style indentation and
    joins sibling manifests with document separators.
    """

    def __init__(self):
        self.yaml = YAML(typ='rt')
        # Standard K8s: 2 spaces, sequences indented 4 (offset 2)
        self.yaml.indent(mapping=2, sequence=4, offset=2)
        self.yaml.width = 4096
        self.preferred_order = ["apiVersion", "kind", "metadata", "spec"]

    def _get_sorted_map(self, data: Any, top_level: bool = False) -> Any:
        """Recursively rebuilds mappings in a stable key order. Lists keep their order."""
        if isinstance(data, list):
            return [self._get_sorted_map(item) for item in data]
        if not isinstance(data, dict):
            return data

        def sort_logic(key):
            if top_level and key in self.preferred_order:
                return (0, self.preferred_order.index(key), "")
            return (1, 0, str(key))

        sorted_map = CommentedMap()
        for key in sorted(data.keys(), key=sort_logic):
            sorted_map[key] = self._get_sorted_map(data[key])
        return sorted_map

    def export(self, manifest: Dict[str, Any]) -> str:
        """
        Renders one manifest to YAML text.

        Raises:
            SerializationError: when the object cannot be represented.
        """
        stream = io.StringIO()
        try:
            self.yaml.dump(self._get_sorted_map(manifest, top_level=True), stream)
        except YAMLError as e:
            kind = manifest.get("kind", "manifest") if isinstance(manifest, dict) else "manifest"
            raise SerializationError(f"Failed to serialize {kind} to YAML: {e}") from e
        return stream.getvalue()

    def join(self, rendered: List[str]) -> str:
        """Concatenates rendered manifests, one separator line between each."""
        return f"\n{SEPARATOR}\n".join(rendered)
