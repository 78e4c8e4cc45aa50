#!/usr/bin/env python3
"""
KAMUT RBAC GENERATOR
--------------------
Identity and authorization objects for a Prometheus instance: a
ServiceAccount, plus a read-only ClusterRole and its binding when cluster
access is requested.

Author: Kamut Team
Date: 2026-10-16
"""

from typing import Any, Dict, List

from kamut.core.models import KamutConfig
from kamut.generators.common import (
    cluster_role_binding_name,
    cluster_role_name,
    identity_enabled,
    object_meta,
    service_account_name,
)

RBAC_API_GROUP = "rbac.authorization.k8s.io"
READ_VERBS = ["get", "list", "watch"]

# Order is part of the rendered output.
CLUSTER_ROLE_RULES: List[Dict[str, Any]] = [
    {"apiGroups": [""], "resources": ["nodes", "nodes/proxy", "services", "endpoints", "pods"], "verbs": READ_VERBS},
    {"apiGroups": ["extensions"], "resources": ["ingresses"], "verbs": READ_VERBS},
    {"apiGroups": ["networking.k8s.io"], "resources": ["ingresses"], "verbs": READ_VERBS},
    {"nonResourceURLs": ["/metrics"], "verbs": ["get"]},
]


def generate_service_account(config: KamutConfig) -> Dict[str, Any]:
    metadata = object_meta(config, service_account_name(config))
    annotations = config.service_account.annotations if config.service_account else None
    if annotations:
        metadata["annotations"] = dict(annotations)
    return {
        "apiVersion": "v1",
        "kind": "ServiceAccount",
        "metadata": metadata,
        "automountServiceAccountToken": True,
    }


def generate_cluster_role(config: KamutConfig) -> Dict[str, Any]:
    return {
        "apiVersion": f"{RBAC_API_GROUP}/v1",
        "kind": "ClusterRole",
        "metadata": object_meta(config, cluster_role_name(config), namespaced=False),
        "rules": [{key: list(value) for key, value in rule.items()} for rule in CLUSTER_ROLE_RULES],
    }


def generate_cluster_role_binding(config: KamutConfig) -> Dict[str, Any]:
    return {
        "apiVersion": f"{RBAC_API_GROUP}/v1",
        "kind": "ClusterRoleBinding",
        "metadata": object_meta(config, cluster_role_binding_name(config), namespaced=False),
        "roleRef": {"apiGroup": RBAC_API_GROUP, "kind": "ClusterRole", "name": cluster_role_name(config)},
        "subjects": [
            {
                "kind": "ServiceAccount",
                "name": service_account_name(config),
                "namespace": config.namespace or "default",
            }
        ],
    }


def generate_identity(config: KamutConfig) -> List[Dict[str, Any]]:
    """
    ServiceAccount, then ClusterRole and ClusterRoleBinding when clusterRole
    is enabled. Empty when the document has no serviceAccount block or sets
    create: false.
    """
    if not identity_enabled(config):
        return []
    manifests = [generate_service_account(config)]
    if config.service_account.cluster_role:
        manifests.append(generate_cluster_role(config))
        manifests.append(generate_cluster_role_binding(config))
    return manifests
