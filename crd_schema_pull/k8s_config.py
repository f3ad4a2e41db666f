"""Cluster client and output location resolution."""

import logging
import os
from pathlib import Path
from typing import Optional, Union

from kubernetes import client, config

from crd_schema_pull.errors import ConfigurationError

logger = logging.getLogger("crd-schema-pull")

SCHEMA_ROOT_ENV = "CRD_SCHEMA_PULL_ROOT"


def get_api_client(context: str = "") -> client.ApiClient:
    """Build an API client from the caller's kubeconfig.

    Uses the standard loading rules (``KUBECONFIG`` then ``~/.kube/config``).
    When no context was requested and no kubeconfig is usable, the in-cluster
    service account is tried instead.

    Args:
        context: Kubernetes context (uses current if not specified)
    """
    try:
        return config.new_client_from_config(context=context or None)
    except config.ConfigException as e:
        if context:
            raise ConfigurationError("kubeconfig", e) from e
        logger.debug(f"No usable kubeconfig ({e}), trying in-cluster config")

    configuration = client.Configuration()
    try:
        config.load_incluster_config(client_configuration=configuration)
    except config.ConfigException as e:
        raise ConfigurationError("kubeconfig", e) from e
    return client.ApiClient(configuration)


def default_schema_root() -> Path:
    """The directory the linter reads cluster schemas from."""
    try:
        home = Path.home()
    except (RuntimeError, KeyError) as e:
        raise ConfigurationError("Path.home", e) from e
    return home / ".ytt-lint" / "schema" / "k8s"


def get_schema_root(root: Optional[Union[str, Path]] = None) -> Path:
    """Resolve the schema root: explicit value, then environment, then default."""
    if root:
        return Path(root).expanduser()
    from_env = os.environ.get(SCHEMA_ROOT_ENV)
    if from_env:
        return Path(from_env).expanduser()
    return default_schema_root()
