"""Run-wide settings for kamut.

Settings come from three layers, lowest priority first: the dataclass
defaults, KAMUT_* environment variables, and CLI flags (applied by the CLI
through ``dataclasses.replace``).
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple

DEFAULT_PATTERN = "*.kamut.yaml"
DEFAULT_RETENTION = "15d"
PROMETHEUS_PORT = 9090

RECOGNIZED_SUFFIXES: Tuple[str, ...] = (".kamut.yaml", "-kamut.yaml", ".kamut.yml", "-kamut.yml")

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def parse_bool(value: str, default: bool) -> bool:
    """Interpret an environment flag, falling back to default on junk."""
    lowered = value.strip().lower()
    if lowered in _TRUTHY:
        return True
    if lowered in _FALSY:
        return False
    return default


@dataclass(frozen=True)
class GeneratorSettings:
    """
    Knobs that change how documents are dispatched and files are written.

    Attributes:
        require_kind: Fail the whole file when a document has no 'kind'.
            When False, the kind is inferred from the populated fields.
        default_retention: Prometheus retention used when a document omits it.
        default_pattern: Glob used when the CLI gets no pattern.
        service_port: Port exposed by the Prometheus Service and Ingress.
        dry_run: Render and report without writing output files.
    """
    require_kind: bool = True
    default_retention: str = DEFAULT_RETENTION
    default_pattern: str = DEFAULT_PATTERN
    service_port: int = PROMETHEUS_PORT
    dry_run: bool = False

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "GeneratorSettings":
        """Build settings with KAMUT_* environment overrides applied."""
        env = os.environ if environ is None else environ
        base = cls()
        return cls(
            require_kind=parse_bool(env.get("KAMUT_REQUIRE_KIND", ""), base.require_kind),
            default_retention=env.get("KAMUT_DEFAULT_RETENTION") or base.default_retention,
            default_pattern=env.get("KAMUT_PATTERN") or base.default_pattern,
        )
