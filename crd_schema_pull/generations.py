"""CRD listing for the two apiextensions API generations.

Clusters expose CustomResourceDefinitions either through the stable
``apiextensions.k8s.io/v1`` API, where every version embeds its own schema,
or only through the older ``apiextensions.k8s.io/v1beta1`` API, where a
single ``spec.validation`` schema may be shared by all versions.

Both shapes are wrapped in a ``SchemaGeneration`` so the pipeline can walk
CRDs, versions and schemas without caring which API answered.
"""

import copy
import logging
from typing import Any, Dict, List, Optional, Tuple

import urllib3
from kubernetes import client
from kubernetes.client.rest import ApiException

from crd_schema_pull.errors import MalformedCRDError, TransportError

logger = logging.getLogger("crd-schema-pull")

LEGACY_CRD_PATH = "/apis/apiextensions.k8s.io/v1beta1/customresourcedefinitions"


class SchemaGeneration:
    """Access to CRDs, versions and schemas of one API generation."""

    name = ""
    # Whether a version skipped for lack of a schema is reported.
    reports_missing_schema = False

    def __init__(self, api_client: client.ApiClient):
        self.api_client = api_client

    def list_crds(self) -> List[Any]:
        raise NotImplementedError

    def kind(self, crd: Any) -> str:
        raise NotImplementedError

    def group(self, crd: Any) -> str:
        raise NotImplementedError

    def versions(self, crd: Any) -> List[Any]:
        raise NotImplementedError

    def version_name(self, version: Any) -> str:
        raise NotImplementedError

    def version_schema(self, version: Any) -> Optional[Dict[str, Any]]:
        """The schema embedded in ``version``, or None."""
        raise NotImplementedError

    def fallback_schema(self, crd: Any) -> Optional[Dict[str, Any]]:
        """A CRD-wide schema for versions without their own, or None."""
        return None

    def string_property(self) -> Dict[str, Any]:
        return {"type": "string"}


class StableGeneration(SchemaGeneration):
    """``apiextensions.k8s.io/v1``, read through the typed client models."""

    name = "ApiextensionsV1"

    def list_crds(self) -> List[client.V1CustomResourceDefinition]:
        api = client.ApiextensionsV1Api(self.api_client)
        return api.list_custom_resource_definition().items

    def kind(self, crd: client.V1CustomResourceDefinition) -> str:
        return crd.spec.names.kind

    def group(self, crd: client.V1CustomResourceDefinition) -> str:
        return crd.spec.group

    def versions(self, crd: client.V1CustomResourceDefinition) -> List[Any]:
        return crd.spec.versions or []

    def version_name(self, version: client.V1CustomResourceDefinitionVersion) -> str:
        return version.name

    def version_schema(
        self, version: client.V1CustomResourceDefinitionVersion
    ) -> Optional[Dict[str, Any]]:
        if version.schema is None or version.schema.open_apiv3_schema is None:
            return None
        # Back to wire names: openAPIV3Schema, x-kubernetes-*, $ref, ...
        return self.api_client.sanitize_for_serialization(
            version.schema.open_apiv3_schema
        )


class LegacyGeneration(SchemaGeneration):
    """``apiextensions.k8s.io/v1beta1``, read as plain JSON.

    Current client releases no longer ship models for this API, so the list
    is fetched with ``ApiClient.call_api`` and kept as dicts.
    """

    name = "ApiextensionsV1beta1"
    reports_missing_schema = True

    def list_crds(self) -> List[Dict[str, Any]]:
        data = self.api_client.call_api(
            LEGACY_CRD_PATH,
            "GET",
            header_params={"Accept": "application/json"},
            response_type="object",
            auth_settings=["BearerToken"],
            _return_http_data_only=True,
        )
        if data is None:
            return []
        if not isinstance(data, dict):
            raise TransportError(
                f"GET {LEGACY_CRD_PATH}", f"unexpected response {type(data).__name__}"
            )
        return data.get("items") or []

    def kind(self, crd: Dict[str, Any]) -> str:
        return _field(crd, "spec", "names", "kind")

    def group(self, crd: Dict[str, Any]) -> str:
        return _field(crd, "spec", "group")

    def versions(self, crd: Dict[str, Any]) -> List[Dict[str, Any]]:
        return _field(crd, "spec").get("versions") or []

    def version_name(self, version: Dict[str, Any]) -> str:
        return _field(version, "name")

    def version_schema(self, version: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        schema = (version.get("schema") or {}).get("openAPIV3Schema")
        return copy.deepcopy(schema) if schema is not None else None

    def fallback_schema(self, crd: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        schema = (_field(crd, "spec").get("validation") or {}).get("openAPIV3Schema")
        return copy.deepcopy(schema) if schema is not None else None


def _field(obj: Any, *path: str) -> Any:
    """Follow ``path`` through nested dicts of a raw v1beta1 object."""
    value = obj
    for key in path:
        if not isinstance(value, dict) or value.get(key) is None:
            raise MalformedCRDError(LEGACY_CRD_PATH, f"item without {'.'.join(path)}")
        value = value[key]
    return value


def select_generation(
    api_client: client.ApiClient, log: logging.Logger = logger
) -> Tuple[SchemaGeneration, List[Any]]:
    """List CRDs from the stable API, falling back to v1beta1 on a 404.

    Returns:
        The generation that answered and the CRDs it listed, in server order.

    Raises:
        TransportError: if a list call fails for any other reason.
    """
    stable = StableGeneration(api_client)
    try:
        return stable, stable.list_crds()
    except ApiException as e:
        if e.status != 404:
            raise TransportError(
                "ApiextensionsV1Api.list_custom_resource_definition", e
            ) from e
    # ValueError: the client rejected the response while building models.
    except (urllib3.exceptions.HTTPError, ValueError) as e:
        raise TransportError(
            "ApiextensionsV1Api.list_custom_resource_definition", e
        ) from e

    log.warning("Error for ApiextensionsV1. Falling back to ApiextensionsV1beta1.")
    legacy = LegacyGeneration(api_client)
    try:
        return legacy, legacy.list_crds()
    except (ApiException, urllib3.exceptions.HTTPError, ValueError) as e:
        raise TransportError(f"GET {LEGACY_CRD_PATH}", e) from e
