#!/usr/bin/env python3
"""
KAMUT MONITORING GENERATOR
--------------------------
Renders the monitoring.coreos.com/v1 Prometheus custom resource consumed by
the Prometheus operator.

Besides the fields copied from the document, every Prometheus gets the
operator defaults kamut standardizes on: a non-root security context, pod
labels matching the Deployment convention, and an empty ScrapeConfig
selector so ScrapeConfig objects from any namespace are picked up.

Author: Kamut Team
Date: 2026-10-16
"""

from typing import Any, Dict, List

from kamut.core.errors import MissingRequiredFieldError
from kamut.core.models import KamutConfig, Storage
from kamut.core.settings import DEFAULT_RETENTION
from kamut.generators.common import (
    app_labels,
    identity_enabled,
    object_meta,
    resource_requirements,
    service_account_name,
)

API_VERSION = "monitoring.coreos.com/v1"

SECURITY_CONTEXT = {"fsGroup": 2000, "runAsNonRoot": True, "runAsUser": 1000}


def tolerations_for(node_selector: Dict[str, str]) -> List[Dict[str, str]]:
    """One NoSchedule toleration per nodeSelector entry, ordered by key."""
    return [
        {"key": key, "operator": "Equal", "value": node_selector[key], "effect": "NoSchedule"}
        for key in sorted(node_selector)
    ]


def _storage_spec(storage: Storage) -> Dict[str, Any]:
    return {
        "volumeClaimTemplate": {
            "spec": {
                "storageClassName": storage.class_name,
                "resources": {"requests": {"storage": storage.size}},
            }
        }
    }


def generate_prometheus(config: KamutConfig, default_retention: str = DEFAULT_RETENTION) -> Dict[str, Any]:
    """
    Builds the Prometheus manifest for config.

    Raises:
        MissingRequiredFieldError: when the document has no image.
    """
    if not config.image:
        raise MissingRequiredFieldError("image", "Prometheus")

    spec: Dict[str, Any] = {
        "image": config.image,
        "retention": config.retention or default_retention,
        "podMetadata": {"labels": app_labels(config)},
        "securityContext": dict(SECURITY_CONTEXT),
        "scrapeConfigSelector": {"matchLabels": {}},
        "scrapeConfigNamespaceSelector": {},
    }
    if config.replicas is not None:
        spec["replicas"] = config.replicas

    resources = resource_requirements(config.resources)
    if resources is not None:
        spec["resources"] = resources

    if config.storage is not None:
        spec["storage"] = _storage_spec(config.storage)

    if config.node_selector is not None:
        spec["nodeSelector"] = dict(config.node_selector)
        spec["tolerations"] = tolerations_for(config.node_selector)

    if identity_enabled(config):
        spec["serviceAccountName"] = service_account_name(config)

    return {
        "apiVersion": API_VERSION,
        "kind": "Prometheus",
        "metadata": object_meta(config),
        "spec": spec,
    }
