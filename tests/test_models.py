import pytest

from kamut.core.errors import ParseError
from kamut.core.models import parse_config
from kamut.core.splitter import DocumentSplitter


def load(text):
    return DocumentSplitter().load(text)


def test_deployment_config_deserialization():
    config = parse_config(load("""
name: app-server
kind: Deployment
image: hello:v0.1.0
env:
  DATABASE_URL: IN_VAULT
  LOG_LEVEL: INFO
resources:
  requests:
    cpu: 100m
    memory: 100Mi
  limits:
    cpu: 300m
    memory: 300Mi
replicas: 2
nodeSelector:
  group: frontend
"""))

    assert config.name == "app-server"
    assert config.kind == "Deployment"
    assert config.image == "hello:v0.1.0"
    assert config.env == {"DATABASE_URL": "IN_VAULT", "LOG_LEVEL": "INFO"}
    assert config.resources.requests.cpu == "100m"
    assert config.resources.requests.memory == "100Mi"
    assert config.resources.limits.cpu == "300m"
    assert config.resources.limits.memory == "300Mi"
    assert config.replicas == 2
    assert config.node_selector == {"group": "frontend"}


def test_prometheus_config_deserialization():
    config = parse_config(load("""
name: example2
kind: Prometheus
image: prom/prometheus:v2.7.1
retention: 15d
storage:
  size: 200Gi
  className: gp3-prom
ingress:
  host: "example.com"
serviceAccount:
  clusterRole: false
  annotations:
    eks.amazonaws.com/role-arn: "arn:aws:iam::123456789012:role/prometheus-role"
"""))

    assert config.retention == "15d"
    assert config.storage.size == "200Gi"
    assert config.storage.class_name == "gp3-prom"
    assert config.ingress.host == "example.com"
    assert config.service_account.create is True
    assert config.service_account.cluster_role is False
    assert config.service_account.annotations == {
        "eks.amazonaws.com/role-arn": "arn:aws:iam::123456789012:role/prometheus-role"
    }


def test_scrape_config_fields():
    config = parse_config(load("""
name: api
kind: ScrapeConfig
role: pod
scrapeInterval: 30s
scrapeTimeout: 10s
metricsPath: /stats
labels:
  team: core
port: 8080
"""))

    assert config.role == "pod"
    assert config.scrape_interval == "30s"
    assert config.scrape_timeout == "10s"
    assert config.metrics_path == "/stats"
    assert config.labels == {"team": "core"}
    assert config.port == "8080"


def test_absent_fields_are_none():
    config = parse_config(load("name: minimal-app\nkind: Deployment\nimage: minimal:v1.0.0\n"))

    assert config.env is None
    assert config.resources is None
    assert config.replicas is None
    assert config.node_selector is None
    assert config.retention is None
    assert config.ingress is None
    assert config.storage is None
    assert config.service_account is None


def test_explicit_empty_env_is_distinct_from_absent():
    config = parse_config(load("name: app\nenv: {}\n"))
    assert config.env == {}


def test_unknown_and_legacy_fields_are_ignored():
    config = parse_config(load("name: app\nreplicaCount: 4\nsomethingNew: true\n"))
    assert config.replicas is None


def test_scalar_env_values_are_stringified():
    config = parse_config(load("name: app\nenv:\n  PORT: 8080\n  DEBUG: true\n"))
    assert config.env == {"PORT": "8080", "DEBUG": "true"}


def test_missing_name_is_a_parse_error():
    with pytest.raises(ParseError) as excinfo:
        parse_config(load("kind: Deployment\nimage: hello:v0.1.0\n"), index=2, source="apps.kamut.yaml")

    assert excinfo.value.index == 2
    assert excinfo.value.source == "apps.kamut.yaml"
    assert "document 2 of apps.kamut.yaml" in str(excinfo.value)


@pytest.mark.parametrize("document", [
    "- just\n- a list\n",
    "name: app\nreplicas: three\n",
    "name: app\nreplicas: true\n",
    "name: app\nenv: [A, B]\n",
    "name: app\nstorage:\n  size: 10Gi\n",
    "name: app\nserviceAccount:\n  create: maybe\n",
])
def test_malformed_documents_raise_parse_error(document):
    with pytest.raises(ParseError):
        parse_config(load(document), index=1, source="bad.kamut.yaml")


def test_numeric_looking_scalars_are_kept_verbatim():
    config = parse_config(load("""
name: 2024
kind: Deployment
image: app:1
env:
  APP_VERSION: 1.10
  BUILD: 0x1F
  ENABLED: yes
resources:
  requests:
    cpu: 0.50
"""))

    assert config.name == "2024"
    assert config.env == {"APP_VERSION": "1.10", "BUILD": "0x1F", "ENABLED": "yes"}
    assert config.resources.requests.cpu == "0.50"


@pytest.mark.parametrize("text, expected", [("3", 3), ("+2", 2), ("0x10", 16), ("0o17", 15)])
def test_integer_fields_use_core_schema_spellings(text, expected):
    assert parse_config(load(f"name: app\nreplicas: {text}\n")).replicas == expected


def test_null_spellings_are_absent():
    config = parse_config(load("name: app\nnamespace: ~\nenv: null\nreplicas:\n"))
    assert config.namespace is None
    assert config.env is None
    assert config.replicas is None


def test_boolean_spellings():
    config = parse_config(load("name: app\nserviceAccount:\n  create: False\n  clusterRole: TRUE\n"))
    assert config.service_account.create is False
    assert config.service_account.cluster_role is True
