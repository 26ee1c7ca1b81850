"""Cluster connection settings for the Kubernetes API.

Credentials are resolved the way ``kubectl`` and client-go do it: the in-cluster
service account when running inside a pod, otherwise the current context of a
kubeconfig file (``KUBECONFIG`` or ``~/.kube/config``).
"""

from __future__ import annotations

import base64
import os
import ssl
import tempfile
import time
from dataclasses import dataclass, field
from logging import getLogger
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final

import yaml

from .errors import ConfigurationError, MissingConfigurationError
from .http_resilience import RateLimit, ResilienceConfig

if TYPE_CHECKING:
    from collections.abc import Callable, Mapping

log = getLogger(__name__)

SERVICE_ACCOUNT_DIR: Final[Path] = Path("/var/run/secrets/kubernetes.io/serviceaccount")
KUBERNETES_TIMEOUT_SECONDS = 30.0
TOKEN_REFRESH_SECONDS = 60.0


@dataclass(slots=True)
class TokenFile:
    """Bearer token backed by a file that is re-read every ``refresh_seconds``.

    Projected service account tokens are rotated by the kubelet. A failed re-read
    keeps serving the last token until the next refresh.
    """

    path: Path
    refresh_seconds: float = TOKEN_REFRESH_SECONDS
    clock: Callable[[], float] = time.monotonic
    _token: str | None = field(default=None, init=False)
    _read_at: float = field(default=0.0, init=False)

    def __call__(self) -> str:
        now = self.clock()
        if self._token is None or now - self._read_at >= self.refresh_seconds:
            try:
                self._token = self.path.read_text().strip()
            except OSError:
                if self._token is None:
                    raise
                log.warning("Failed to re-read token file %s, keeping the current token", self.path)
            self._read_at = now
        return self._token


@dataclass(frozen=True, slots=True)
class ClusterConfig:
    """Resolved API server endpoint and credentials."""

    server: str
    token: str | None = None
    token_file: str | None = None
    ca_file: str | None = None
    ca_data: str | None = None
    client_cert_file: str | None = None
    client_cert_data: bytes | None = field(default=None, repr=False)
    client_key_file: str | None = None
    client_key_data: bytes | None = field(default=None, repr=False)
    insecure_skip_tls_verify: bool = False

    def ssl_context(self) -> ssl.SSLContext | bool:
        if self.insecure_skip_tls_verify:
            return False
        context = ssl.create_default_context(cafile=self.ca_file, cadata=self.ca_data)
        try:
            self._load_client_certificate(context)
        except OSError as exc:
            raise ConfigurationError(f"Invalid client certificate: {exc}") from exc
        return context

    def _load_client_certificate(self, context: ssl.SSLContext) -> None:
        if self.client_cert_data is None and self.client_key_data is None:
            if self.client_cert_file is not None:
                context.load_cert_chain(self.client_cert_file, self.client_key_file)
            return
        # load_cert_chain only accepts paths; the PEM files exist only while loading.
        with tempfile.TemporaryDirectory(prefix="homepage-discovery-") as directory:
            cert_file = self.client_cert_file or _write_pem(
                Path(directory) / "client.crt", self.client_cert_data
            )
            key_file = self.client_key_file or _write_pem(
                Path(directory) / "client.key", self.client_key_data
            )
            if cert_file is None:
                raise ConfigurationError("Client key given without a client certificate")
            context.load_cert_chain(cert_file, key_file)

    def resilience(self) -> ResilienceConfig:
        headers = {"Accept": "application/json"}
        token_provider = TokenFile(Path(self.token_file)) if self.token_file else None
        if token_provider is None and self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return ResilienceConfig(
            name="kubernetes",
            base_url=self.server,
            timeout_seconds=KUBERNETES_TIMEOUT_SECONDS,
            ratelimit=RateLimit(max_calls=20, per_seconds=1.0),
            verify=self.ssl_context(),
            default_headers=headers,
            token_provider=token_provider,
        )


def _write_pem(path: Path, data: bytes | None) -> str | None:
    if data is None:
        return None
    path.write_bytes(data)
    return str(path)


def get_cluster_config(*, service_account_dir: Path = SERVICE_ACCOUNT_DIR) -> ClusterConfig:
    """Return in-cluster credentials when available, else the kubeconfig's."""

    in_cluster = load_in_cluster_config(service_account_dir=service_account_dir)
    if in_cluster is not None:
        return in_cluster
    return load_kubeconfig(_default_kubeconfig_path())


def load_in_cluster_config(
    *, service_account_dir: Path = SERVICE_ACCOUNT_DIR
) -> ClusterConfig | None:
    host = os.getenv("KUBERNETES_SERVICE_HOST")
    port = os.getenv("KUBERNETES_SERVICE_PORT")
    token_path = service_account_dir / "token"
    if not host or not port or not token_path.is_file():
        return None

    if ":" in host:
        host = f"[{host}]"
    ca_path = service_account_dir / "ca.crt"
    return ClusterConfig(
        server=f"https://{host}:{port}",
        token=token_path.read_text().strip(),
        token_file=str(token_path),
        ca_file=str(ca_path) if ca_path.is_file() else None,
    )


def _default_kubeconfig_path() -> Path:
    env_path = os.getenv("KUBECONFIG")
    if env_path:
        # Only the first entry of a path list is honoured.
        return Path(env_path.split(os.pathsep)[0]).expanduser()
    return Path.home() / ".kube" / "config"


def load_kubeconfig(path: Path, *, context: str | None = None) -> ClusterConfig:
    """Resolve the server and credentials of ``context`` (default: current-context)."""

    if not path.is_file():
        raise MissingConfigurationError(
            f"Not running in-cluster and no kubeconfig found at {path}"
        )
    try:
        document = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid kubeconfig {path}: {exc}") from exc
    if not isinstance(document, dict):
        raise ConfigurationError(f"Invalid kubeconfig {path}: expected a mapping")

    context_name = context or document.get("current-context")
    if not context_name:
        raise MissingConfigurationError(f"Kubeconfig {path} has no current-context")
    context_entry = _named(document, "contexts", context_name, "context")
    cluster = _named(document, "clusters", context_entry.get("cluster"), "cluster")
    user = (
        _named(document, "users", context_entry["user"], "user")
        if context_entry.get("user")
        else {}
    )

    server = cluster.get("server")
    if not server:
        raise MissingConfigurationError(f"Cluster of context {context_name!r} has no server")

    base_dir = path.parent
    ca_data = cluster.get("certificate-authority-data")
    token = user.get("token")
    token_file = None
    if token is None and user.get("tokenFile"):
        token_path = _resolve(user["tokenFile"], base_dir)
        token = token_path.read_text().strip()
        token_file = str(token_path)

    return ClusterConfig(
        server=str(server).rstrip("/"),
        token=token,
        token_file=token_file,
        ca_file=(
            str(_resolve(cluster["certificate-authority"], base_dir))
            if cluster.get("certificate-authority")
            else None
        ),
        ca_data=base64.b64decode(ca_data).decode() if ca_data else None,
        client_cert_file=_file(user, "client-certificate", base_dir),
        client_cert_data=_data(user, "client-certificate"),
        client_key_file=_file(user, "client-key", base_dir),
        client_key_data=_data(user, "client-key"),
        insecure_skip_tls_verify=bool(cluster.get("insecure-skip-tls-verify", False)),
    )


def _named(document: Mapping[str, Any], section: str, name: object, key: str) -> dict[str, Any]:
    for item in document.get(section) or ():
        if isinstance(item, dict) and item.get("name") == name:
            value = item.get(key)
            if isinstance(value, dict):
                return value
    raise ConfigurationError(f"Kubeconfig has no {key} named {name!r}")


def _resolve(value: str, base_dir: Path) -> Path:
    candidate = Path(value).expanduser()
    return candidate if candidate.is_absolute() else base_dir / candidate


def _file(user: Mapping[str, Any], field_name: str, base_dir: Path) -> str | None:
    value = user.get(field_name)
    return str(_resolve(value, base_dir)) if value else None


def _data(user: Mapping[str, Any], field_name: str) -> bytes | None:
    value = user.get(f"{field_name}-data")
    return base64.b64decode(value) if value else None
