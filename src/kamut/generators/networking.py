"""Service and Ingress objects that expose a Prometheus instance."""

from typing import Any, Dict

from kamut.core.errors import MissingRequiredFieldError
from kamut.core.models import KamutConfig
from kamut.core.settings import PROMETHEUS_PORT
from kamut.generators.common import ingress_name, object_meta, service_name


def generate_service(config: KamutConfig, port: int = PROMETHEUS_PORT) -> Dict[str, Any]:
    # The operator labels its pods prometheus=<name>.
    return {
        "apiVersion": "v1",
        "kind": "Service",
        "metadata": object_meta(config, service_name(config)),
        "spec": {
            "type": "ClusterIP",
            "selector": {"prometheus": config.name},
            "ports": [
                {"name": "web", "port": port, "targetPort": port, "protocol": "TCP"},
            ],
        },
    }


def generate_ingress(config: KamutConfig, port: int = PROMETHEUS_PORT) -> Dict[str, Any]:
    """
    Single-rule Ingress routing '/' on ingress.host to the Prometheus Service.

    Raises:
        MissingRequiredFieldError: when the ingress block has no host.
    """
    host = config.ingress.host if config.ingress else None
    if not host:
        raise MissingRequiredFieldError("ingress.host", "Ingress")

    backend = {"service": {"name": service_name(config), "port": {"number": port}}}
    return {
        "apiVersion": "networking.k8s.io/v1",
        "kind": "Ingress",
        "metadata": object_meta(config, ingress_name(config)),
        "spec": {
            "rules": [
                {
                    "host": host,
                    "http": {
                        "paths": [{"path": "/", "pathType": "Prefix", "backend": backend}],
                    },
                }
            ]
        },
    }
