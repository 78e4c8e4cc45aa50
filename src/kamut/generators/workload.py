#!/usr/bin/env python3
"""
KAMUT WORKLOAD GENERATOR
------------------------
Maps a Deployment document onto an apps/v1 Deployment with a single
container. Pod template and selector share the app=<name> label.

Author: Kamut Team
Date: 2026-10-16
"""

from typing import Any, Dict, List

from kamut.core.errors import MissingRequiredFieldError
from kamut.core.models import KamutConfig
from kamut.generators.common import app_labels, object_meta, resource_requirements


def _env_vars(env: Dict[str, str]) -> List[Dict[str, str]]:
    return [{"name": key, "value": env[key]} for key in sorted(env)]


def generate_deployment(config: KamutConfig) -> Dict[str, Any]:
    """
    Builds the Deployment manifest for config.

    Raises:
        MissingRequiredFieldError: when the document has no image.
    """
    if not config.image:
        raise MissingRequiredFieldError("image", "Deployment")

    container: Dict[str, Any] = {"name": config.name, "image": config.image}
    if config.env is not None:
        container["env"] = _env_vars(config.env)
    resources = resource_requirements(config.resources)
    if resources is not None:
        container["resources"] = resources

    pod_spec: Dict[str, Any] = {"containers": [container]}
    if config.node_selector is not None:
        pod_spec["nodeSelector"] = dict(config.node_selector)

    spec: Dict[str, Any] = {
        "selector": {"matchLabels": app_labels(config)},
        "template": {
            "metadata": {"labels": app_labels(config)},
            "spec": pod_spec,
        },
    }
    if config.replicas is not None:
        spec["replicas"] = config.replicas

    return {
        "apiVersion": "apps/v1",
        "kind": "Deployment",
        "metadata": object_meta(config),
        "spec": spec,
    }
