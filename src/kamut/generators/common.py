"""Helpers shared by every manifest generator."""

from typing import Any, Dict, Optional

from kamut.core.models import KamutConfig, ResourceSpec, Resources


def app_labels(config: KamutConfig) -> Dict[str, str]:
    return {"app": config.name}


def object_meta(config: KamutConfig, name: Optional[str] = None, namespaced: bool = True) -> Dict[str, Any]:
    """metadata block labelled app=<config name>. Cluster-scoped objects get no namespace."""
    metadata: Dict[str, Any] = {
        "name": name or config.name,
        "labels": app_labels(config),
    }
    if namespaced and config.namespace:
        metadata["namespace"] = config.namespace
    return metadata


def _quantities(spec: Optional[ResourceSpec]) -> Optional[Dict[str, str]]:
    if spec is None:
        return None
    values: Dict[str, str] = {}
    if spec.cpu is not None:
        values["cpu"] = spec.cpu
    if spec.memory is not None:
        values["memory"] = spec.memory
    return values


def resource_requirements(resources: Optional[Resources]) -> Optional[Dict[str, Any]]:
    """requests/limits maps with quantities passed through verbatim."""
    if resources is None:
        return None
    block: Dict[str, Any] = {}
    requests = _quantities(resources.requests)
    if requests is not None:
        block["requests"] = requests
    limits = _quantities(resources.limits)
    if limits is not None:
        block["limits"] = limits
    return block


# Derived object names use the suffix convention throughout.
def service_name(config: KamutConfig) -> str:
    return config.name


def ingress_name(config: KamutConfig) -> str:
    return f"{config.name}-ingress"


def service_account_name(config: KamutConfig) -> str:
    return f"{config.name}-sa"


def cluster_role_name(config: KamutConfig) -> str:
    return f"{config.name}-role"


def cluster_role_binding_name(config: KamutConfig) -> str:
    return f"{config.name}-role-binding"


def identity_enabled(config: KamutConfig) -> bool:
    """True when a serviceAccount block is present and asks for creation."""
    return config.service_account is not None and config.service_account.create
