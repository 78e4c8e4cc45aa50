#!/usr/bin/env python3
"""
KAMUT DISPATCHER - Kind Router
------------------------------
Resolves the effective kind of a document and fans it out into manifests.

Kinds form a closed set (Kind). Each member owns exactly one entry in
KIND_GENERATORS; anything outside the set is reported as unsupported and
the document is skipped.

Author: Kamut Team
Date: 2026-10-16
"""

import logging
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from kamut.core.errors import MissingKindError, UnsupportedKindError
from kamut.core.models import KamutConfig
from kamut.core.settings import GeneratorSettings
from kamut.generators.monitoring import generate_prometheus
from kamut.generators.networking import generate_ingress, generate_service
from kamut.generators.rbac import generate_identity
from kamut.generators.scrape import generate_scrape_config
from kamut.generators.workload import generate_deployment

logger = logging.getLogger("kamut.dispatcher")

Manifest = Dict[str, Any]


class Kind(Enum):
    DEPLOYMENT = "Deployment"
    PROMETHEUS = "Prometheus"
    SCRAPE_CONFIG = "ScrapeConfig"

    @classmethod
    def parse(cls, value: str) -> Optional["Kind"]:
        for kind in cls:
            if kind.value == value:
                return kind
        return None


def infer_kind(config: KamutConfig) -> Optional[Kind]:
    """Guesses the kind from which kind-specific fields are populated."""
    if config.role is not None:
        return Kind.SCRAPE_CONFIG
    prometheus_fields = (config.retention, config.storage, config.ingress, config.service_account)
    if any(field is not None for field in prometheus_fields):
        return Kind.PROMETHEUS
    if config.image is not None:
        return Kind.DEPLOYMENT
    return None


def _deployment_set(config: KamutConfig, settings: GeneratorSettings) -> List[Manifest]:
    return [generate_deployment(config)]


def _prometheus_set(config: KamutConfig, settings: GeneratorSettings) -> List[Manifest]:
    manifests = [
        generate_prometheus(config, settings.default_retention),
        generate_service(config, settings.service_port),
    ]
    if config.ingress is not None:
        manifests.append(generate_ingress(config, settings.service_port))
    manifests.extend(generate_identity(config))
    return manifests


def _scrape_config_set(config: KamutConfig, settings: GeneratorSettings) -> List[Manifest]:
    return [generate_scrape_config(config)]


KIND_GENERATORS: Dict[Kind, Callable[[KamutConfig, GeneratorSettings], List[Manifest]]] = {
    Kind.DEPLOYMENT: _deployment_set,
    Kind.PROMETHEUS: _prometheus_set,
    Kind.SCRAPE_CONFIG: _scrape_config_set,
}


def resolve_kind(config: KamutConfig, settings: GeneratorSettings) -> Kind:
    """
    Determines which generator set applies to config.

    Raises:
        MissingKindError: no 'kind' and settings.require_kind is set.
        UnsupportedKindError: the declared or inferred kind is not handled.
    """
    if config.kind is None:
        if settings.require_kind:
            raise MissingKindError("'kind' field is required")
        kind = infer_kind(config)
        if kind is None:
            raise UnsupportedKindError(None)
        logger.debug(f"Inferred kind {kind.value} for '{config.name}'")
        return kind

    kind = Kind.parse(config.kind)
    if kind is None:
        raise UnsupportedKindError(config.kind)
    return kind


def generate_for(kind: Kind, config: KamutConfig, settings: GeneratorSettings) -> List[Manifest]:
    """
    Runs every generator registered for kind, in output order.
    A generator failure discards the whole set for this document.
    """
    return KIND_GENERATORS[kind](config, settings)


def dispatch(config: KamutConfig, settings: GeneratorSettings) -> List[Manifest]:
    """Resolves the kind of config and returns its manifests."""
    return generate_for(resolve_kind(config, settings), config, settings)
