#!/usr/bin/env python3
"""
KAMUT CORE MODELS
-----------------
The in-memory form of one kamut document. A KamutConfig is built from a single
YAML document, handed to the dispatcher and then dropped; nothing persists
across documents or files.

Field names follow the canonical camelCase schema (nodeSelector,
serviceAccount, className, ...). Unknown keys are ignored so older or newer
files still load. Absent fields are None, which keeps them distinct from
explicit empty values such as ``env: {}``.

Author: Kamut Team
Date: 2026-10-16
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from kamut.core.errors import ParseError

logger = logging.getLogger("kamut.models")

# Field names from older schema revisions that are no longer read.
LEGACY_FIELDS = {
    "replicaCount": "replicas",
    "node_selector": "nodeSelector",
    "service_account": "serviceAccount",
}

# YAML 1.2 core schema spellings, matched against untyped scalar text.
NULL_SCALARS = {"", "~", "null", "Null", "NULL"}
TRUE_SCALARS = {"true", "True", "TRUE"}
FALSE_SCALARS = {"false", "False", "FALSE"}
_DECIMAL = re.compile(r"^[-+]?[0-9]+$")
_HEX = re.compile(r"^0x[0-9a-fA-F]+$")
_OCTAL = re.compile(r"^0o[0-7]+$")


@dataclass
class ResourceSpec:
    """A cpu/memory pair. Quantities are opaque strings, never validated."""
    cpu: Optional[str] = None
    memory: Optional[str] = None


@dataclass
class Resources:
    requests: Optional[ResourceSpec] = None
    limits: Optional[ResourceSpec] = None


@dataclass
class Storage:
    size: str
    class_name: str


@dataclass
class Ingress:
    host: Optional[str] = None


@dataclass
class ServiceAccount:
    """Identity settings. Both flags default to True once the block is present."""
    create: bool = True
    annotations: Optional[Dict[str, str]] = None
    cluster_role: bool = True


@dataclass
class KamutConfig:
    """
    One parsed kamut document.

    Only ``name`` is required. Kind-specific requirements (image for
    workloads, role for scrape targets) are enforced by the generators.
    """
    name: str
    kind: Optional[str] = None
    namespace: Optional[str] = None
    image: Optional[str] = None
    env: Optional[Dict[str, str]] = None
    resources: Optional[Resources] = None
    storage: Optional[Storage] = None
    node_selector: Optional[Dict[str, str]] = None
    replicas: Optional[int] = None
    retention: Optional[str] = None
    ingress: Optional[Ingress] = None
    service_account: Optional[ServiceAccount] = None

    # ScrapeConfig fields
    role: Optional[str] = None
    scrape_interval: Optional[str] = None
    scrape_timeout: Optional[str] = None
    metrics_path: Optional[str] = None
    labels: Optional[Dict[str, str]] = None
    port: Optional[Union[int, str]] = None


class _Reader:
    """
    Typed accessors over one raw mapping, raising ParseError with provenance.

    The loader hands every scalar over as its source text, so strings pass
    through untouched and only integer and boolean fields are converted here,
    using the YAML 1.2 core spellings.
    """

    def __init__(self, index: Optional[int], source: Optional[str]):
        self.index = index
        self.source = source

    def fail(self, message: str) -> ParseError:
        return ParseError(message, self.index, self.source)

    def _get(self, data: Mapping[str, Any], key: str) -> Any:
        value = data.get(key)
        if isinstance(value, str) and value in NULL_SCALARS:
            return None
        return value

    def mapping(self, data: Mapping[str, Any], key: str, path: str = "") -> Optional[Mapping[str, Any]]:
        value = self._get(data, key)
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise self.fail(f"Field '{path}{key}' must be a mapping")
        return value

    def string(self, data: Mapping[str, Any], key: str, path: str = "") -> Optional[str]:
        value = self._get(data, key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise self.fail(f"Field '{path}{key}' must be a string")
        return value

    def integer(self, data: Mapping[str, Any], key: str, path: str = "") -> Optional[int]:
        value = self._get(data, key)
        if value is None:
            return None
        text = value.strip() if isinstance(value, str) else ""
        if _DECIMAL.match(text):
            return int(text)
        if _HEX.match(text):
            return int(text[2:], 16)
        if _OCTAL.match(text):
            return int(text[2:], 8)
        raise self.fail(f"Field '{path}{key}' must be an integer")

    def boolean(self, data: Mapping[str, Any], key: str, default: bool, path: str = "") -> bool:
        value = self._get(data, key)
        if value is None:
            return default
        if isinstance(value, str) and value in TRUE_SCALARS:
            return True
        if isinstance(value, str) and value in FALSE_SCALARS:
            return False
        raise self.fail(f"Field '{path}{key}' must be true or false")

    def string_map(self, data: Mapping[str, Any], key: str, path: str = "") -> Optional[Dict[str, str]]:
        raw = self.mapping(data, key, path)
        if raw is None:
            return None
        result: Dict[str, str] = {}
        for map_key, map_value in raw.items():
            if not isinstance(map_value, str):
                raise self.fail(f"Value of '{path}{key}.{map_key}' must be a scalar")
            result[str(map_key)] = map_value
        return result


def _parse_resource_spec(reader: _Reader, data: Mapping[str, Any], key: str) -> Optional[ResourceSpec]:
    raw = reader.mapping(data, key, "resources.")
    if raw is None:
        return None
    path = f"resources.{key}."
    return ResourceSpec(cpu=reader.string(raw, "cpu", path), memory=reader.string(raw, "memory", path))


def parse_config(data: Any, index: Optional[int] = None, source: Optional[str] = None) -> KamutConfig:
    """
    Builds a KamutConfig from one loaded YAML document.

    Args:
        data: The object produced by the YAML loader for this document.
        index: 1-based position of the document in its file.
        source: Path of the file the document came from.

    Raises:
        ParseError: when the document shape does not match the schema.
    """
    reader = _Reader(index, source)
    if not isinstance(data, Mapping):
        raise reader.fail("Document must be a mapping of fields")

    name = reader.string(data, "name")
    if name is None:
        raise reader.fail("Missing required field 'name'")
    if not name.strip():
        raise reader.fail("Field 'name' must be a non-empty string")

    for legacy, canonical in LEGACY_FIELDS.items():
        if legacy in data:
            logger.debug(f"Ignoring legacy field '{legacy}' in {source or '<input>'}; use '{canonical}'")

    resources = None
    raw_resources = reader.mapping(data, "resources")
    if raw_resources is not None:
        resources = Resources(
            requests=_parse_resource_spec(reader, raw_resources, "requests"),
            limits=_parse_resource_spec(reader, raw_resources, "limits"),
        )

    storage = None
    raw_storage = reader.mapping(data, "storage")
    if raw_storage is not None:
        size = reader.string(raw_storage, "size", "storage.")
        class_name = reader.string(raw_storage, "className", "storage.")
        if size is None or class_name is None:
            raise reader.fail("Field 'storage' requires both 'size' and 'className'")
        storage = Storage(size=size, class_name=class_name)

    ingress = None
    raw_ingress = reader.mapping(data, "ingress")
    if raw_ingress is not None:
        ingress = Ingress(host=reader.string(raw_ingress, "host", "ingress."))

    service_account = None
    raw_sa = reader.mapping(data, "serviceAccount")
    if raw_sa is not None:
        service_account = ServiceAccount(
            create=reader.boolean(raw_sa, "create", True, "serviceAccount."),
            annotations=reader.string_map(raw_sa, "annotations", "serviceAccount."),
            cluster_role=reader.boolean(raw_sa, "clusterRole", True, "serviceAccount."),
        )

    port = reader.string(data, "port")

    return KamutConfig(
        name=name,
        kind=reader.string(data, "kind"),
        namespace=reader.string(data, "namespace"),
        image=reader.string(data, "image"),
        env=reader.string_map(data, "env"),
        resources=resources,
        storage=storage,
        node_selector=reader.string_map(data, "nodeSelector"),
        replicas=reader.integer(data, "replicas"),
        retention=reader.string(data, "retention"),
        ingress=ingress,
        service_account=service_account,
        role=reader.string(data, "role"),
        scrape_interval=reader.string(data, "scrapeInterval"),
        scrape_timeout=reader.string(data, "scrapeTimeout"),
        metrics_path=reader.string(data, "metricsPath"),
        labels=reader.string_map(data, "labels"),
        port=port,
    )
