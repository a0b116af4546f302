"""Configuration for talking to the API server from inside a cluster."""

import logging
import os
import ssl
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

import requests

log = logging.getLogger(__name__)

SERVICE_ACCOUNT_DIR = "/var/run/secrets/kubernetes.io/serviceaccount"


class ConfigError(Exception):
    """Raised when the in-cluster configuration cannot be loaded."""


@dataclass(frozen=True)
class InClusterConfig:
    """Where the API server is and how to authenticate to it."""

    host: str
    bearer_token: str
    token_file: str
    ca_file: Optional[str] = None

    def session(self) -> requests.Session:
        """Return a session that authenticates with the service account token."""
        session = requests.Session()
        session.headers["Authorization"] = f"Bearer {self.bearer_token}"
        session.verify = self.ca_file if self.ca_file else True
        return session


def _join_host_port(host: str, port: str) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def _valid_ca(path: Path) -> bool:
    try:
        ssl.create_default_context().load_verify_locations(cafile=str(path))
    except (OSError, ssl.SSLError) as exc:
        log.error("Expected to load root CA config from %s, but got err: %s", path, exc)
        return False
    return True


def in_cluster_config(
    environ: Optional[Mapping[str, str]] = None,
    service_account_dir: Union[str, Path, None] = None,
) -> InClusterConfig:
    """Build the configuration from the service environment and service account files."""
    env = os.environ if environ is None else environ
    account_dir = Path(SERVICE_ACCOUNT_DIR if service_account_dir is None else service_account_dir)

    host = env.get("KUBERNETES_SERVICE_HOST", "")
    port = env.get("KUBERNETES_SERVICE_PORT", "")
    if not host or not port:
        raise ConfigError(
            "unable to load in-cluster configuration, "
            "KUBERNETES_SERVICE_HOST and KUBERNETES_SERVICE_PORT must be defined"
        )

    token_file = account_dir / "token"
    try:
        bearer_token = token_file.read_text()
    except OSError as exc:
        raise ConfigError(f"could not read service account token {token_file}: {exc}") from exc

    ca_path = account_dir / "ca.crt"
    ca_file = str(ca_path) if _valid_ca(ca_path) else None

    return InClusterConfig(
        host="https://" + _join_host_port(host, port),
        bearer_token=bearer_token,
        token_file=str(token_file),
        ca_file=ca_file,
    )