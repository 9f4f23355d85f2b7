"""Binding credentials for single-instance Redis deployments."""

from __future__ import annotations

from typing import Optional

import structlog

from redis_adapter.binding.secrets import generated_secret, resolve_secret_reference
from redis_adapter.core.exceptions import BindingError, TopologyError
from redis_adapter.core.models import (
    BoshManifest,
    Credentials,
    DeploymentTopology,
    ManifestSecrets,
    RequestParameters,
    redis_properties,
    stored_password,
)
from redis_adapter.manifest.releases import REDIS_SERVER_JOB_NAME

logger = structlog.get_logger()

REDIS_SERVER_PORT = 6379
CLOUD_FOUNDRY_PLATFORM = "cloudfoundry"


def get_redis_host(topology: DeploymentTopology) -> str:
    """Return the address of the only redis-server instance."""
    if len(topology) != 1:
        raise TopologyError(f"expected 1 instance group in the Redis deployment, got {len(topology)}")

    addresses = topology.get(REDIS_SERVER_JOB_NAME, [])
    if len(addresses) != 1:
        raise TopologyError(
            f"expected {REDIS_SERVER_JOB_NAME} instance group to have only 1 instance, got {len(addresses)}"
        )
    return addresses[0]


class Binder:
    """Creates and deletes bindings. Nothing is persisted per binding."""

    def __init__(self, expected_platform: str = CLOUD_FOUNDRY_PLATFORM):
        self.expected_platform = expected_platform

    def create_binding(
        self,
        binding_id: str,
        topology: DeploymentTopology,
        manifest: BoshManifest,
        request_params: RequestParameters,
        secrets: Optional[ManifestSecrets] = None,
    ) -> Credentials:
        """Resolve credentials for a consumer of the deployment.

        ``secrets`` is ``None`` when the broker passed no secrets at all; an
        empty mapping means secrets were passed but ``secret_pass`` is missing.
        """
        log = logger.bind(binding_id=binding_id, deployment=manifest.name)

        platform = request_params.platform()
        if not request_params.arbitrary_context() or platform != self.expected_platform:
            log.warning("Non Cloud Foundry platform (or pre OSBAPI 2.13) detected", platform=platform)

        try:
            host = get_redis_host(topology)
            binding_secret = generated_secret(secrets)

            properties = redis_properties(manifest)
            config_store_secret = ""
            if properties.get("secret") is not None:
                config_store_secret = resolve_secret_reference(properties["secret"], secrets)
        except BindingError as e:
            log.error("Failed to create binding", error=str(e))
            raise

        password = stored_password(properties)

        log.info("Created binding", host=host)
        return Credentials(
            host=host,
            port=REDIS_SERVER_PORT,
            generated_secret=binding_secret,
            password=password,
            secret=config_store_secret,
        )

    def delete_binding(
        self,
        binding_id: str,
        topology: Optional[DeploymentTopology] = None,
        manifest: Optional[BoshManifest] = None,
        request_params: Optional[RequestParameters] = None,
    ) -> None:
        """Nothing to revoke: credentials are shared by the deployment, so this never fails."""
        logger.info("Deleted binding", binding_id=binding_id)
