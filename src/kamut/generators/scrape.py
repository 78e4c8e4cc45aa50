#!/usr/bin/env python3
"""
KAMUT SCRAPE GENERATOR
----------------------
Turns a ScrapeConfig document into a monitoring.coreos.com/v1alpha1
ScrapeConfig using Kubernetes service discovery.

Discovered targets pass through a fixed relabeling chain:
    1. keep pods whose 'app' label equals the document name
    2. copy the pod name into a 'pod' label
    3. keep only the configured container port (when 'port' is set)
    4. drop pods in a terminal phase
Prometheus applies relabelings in order, so the sequence is preserved as-is.

Author: Kamut Team
Date: 2026-10-16
"""

import logging
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from kamut.core.errors import MissingRequiredFieldError
from kamut.core.models import KamutConfig

logger = logging.getLogger("kamut.scrape")

API_VERSION = "monitoring.coreos.com/v1alpha1"
TERMINAL_PHASES = "(Failed|Succeeded)"


class DiscoveryRole(Enum):
    POD = "Pod"
    SERVICE = "Service"
    ENDPOINTS = "Endpoints"
    ENDPOINT_SLICE = "EndpointSlice"
    NODE = "Node"
    INGRESS = "Ingress"

    @classmethod
    def parse(cls, value: str) -> "DiscoveryRole":
        """Case-insensitive lookup; unknown roles fall back to Pod."""
        wanted = value.strip().lower()
        for role in cls:
            if role.value.lower() == wanted:
                return role
        logger.warning(f"Unknown discovery role '{value}', falling back to {cls.POD.value}")
        return cls.POD


def sanitize_duration(value: Optional[str]) -> Optional[str]:
    """Keeps the first whitespace-delimited token ('30s # every half minute' -> '30s')."""
    if value is None:
        return None
    tokens = value.split()
    return tokens[0] if tokens else None


def _port_relabeling(port: Union[int, str]) -> Dict[str, Any]:
    text = str(port).strip()
    try:
        number = int(text)
    except ValueError:
        return {
            "sourceLabels": ["__meta_kubernetes_pod_container_port_name"],
            "regex": text,
            "action": "keep",
        }
    return {
        "sourceLabels": ["__meta_kubernetes_pod_container_port_number"],
        "regex": str(number),
        "action": "keep",
    }


def build_relabelings(config: KamutConfig) -> List[Dict[str, Any]]:
    relabelings: List[Dict[str, Any]] = [
        {
            "sourceLabels": ["__meta_kubernetes_pod_label_app"],
            "regex": config.name,
            "action": "keep",
        },
        {
            "sourceLabels": ["__meta_kubernetes_pod_name"],
            "targetLabel": "pod",
            "action": "replace",
        },
    ]
    if config.port is not None:
        relabelings.append(_port_relabeling(config.port))
    relabelings.append({
        "sourceLabels": ["__meta_kubernetes_pod_phase"],
        "regex": TERMINAL_PHASES,
        "action": "drop",
    })
    return relabelings


def generate_scrape_config(config: KamutConfig) -> Dict[str, Any]:
    """
    Builds the ScrapeConfig manifest for config.

    Raises:
        MissingRequiredFieldError: when the document has no role.
    """
    if not config.role:
        raise MissingRequiredFieldError("role", "ScrapeConfig")

    sd_config: Dict[str, Any] = {"role": DiscoveryRole.parse(config.role).value}
    if config.namespace:
        sd_config["namespaces"] = {"names": [config.namespace]}

    spec: Dict[str, Any] = {
        "jobName": config.name,
        "kubernetesSDConfigs": [sd_config],
        "relabelings": build_relabelings(config),
    }
    interval = sanitize_duration(config.scrape_interval)
    if interval:
        spec["scrapeInterval"] = interval
    timeout = sanitize_duration(config.scrape_timeout)
    if timeout:
        spec["scrapeTimeout"] = timeout
    if config.metrics_path:
        spec["metricsPath"] = config.metrics_path

    labels = {"app": config.name}
    if config.labels:
        labels.update(config.labels)
    metadata: Dict[str, Any] = {"name": config.name, "labels": labels}
    if config.namespace:
        metadata["namespace"] = config.namespace

    return {
        "apiVersion": API_VERSION,
        "kind": "ScrapeConfig",
        "metadata": metadata,
        "spec": spec,
    }
