"""Manifest generation for single-instance Redis deployments."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog

from redis_adapter.core.exceptions import ConfigurationError, InvalidParameterError, PasswordGenerationError
from redis_adapter.core.models import (
    REDIS_PROPERTIES_KEY,
    BoshManifest,
    InstanceGroup,
    Job,
    ManifestStemcell,
    Network,
    Plan,
    PlanInstanceGroup,
    PlanUpdate,
    RedisProperties,
    Release,
    RequestParameters,
    ServiceDeployment,
    Update,
    redis_properties,
    stored_maxclients,
    stored_password,
)
from redis_adapter.manifest.passwords import PasswordGenerator, random_password
from redis_adapter.manifest.releases import REDIS_SERVER_JOB_NAME, find_release_for_job
from redis_adapter.manifest.versions import validate_upgrade_path

logger = structlog.get_logger()

STEMCELL_ALIAS = "only-stemcell"
PERSISTENCE_PROPERTY_KEY = "persistence"
MAXCLIENTS_PARAMETER = "maxclients"
ALLOWED_ARBITRARY_PARAMS = frozenset({MAXCLIENTS_PARAMETER})
DEFAULT_MAXCLIENTS = 10000

DEFAULT_WATCH_TIME = "30000-240000"
DEFAULT_CANARIES = 1
DEFAULT_MAX_IN_FLIGHT = 4


def find_illegal_arbitrary_params(arbitrary_params: Dict[str, Any]) -> List[str]:
    return sorted(key for key in arbitrary_params if key not in ALLOWED_ARBITRARY_PARAMS)


def find_redis_server_instance_group(plan: Plan) -> Optional[PlanInstanceGroup]:
    for instance_group in plan.instance_groups:
        if instance_group.name == REDIS_SERVER_JOB_NAME:
            return instance_group
    return None


def generate_update_block(update: Optional[PlanUpdate]) -> Update:
    """Copy the plan's update policy, or fall back to the adapter defaults."""
    if update is not None:
        return Update(
            canaries=update.canaries,
            max_in_flight=update.max_in_flight,
            canary_watch_time=update.canary_watch_time,
            update_watch_time=update.update_watch_time,
            serial=update.serial,
        )
    return Update(
        canaries=DEFAULT_CANARIES,
        max_in_flight=DEFAULT_MAX_IN_FLIGHT,
        canary_watch_time=DEFAULT_WATCH_TIME,
        update_watch_time=DEFAULT_WATCH_TIME,
    )


class ManifestGenerator:
    """Builds BOSH manifests for the redis-server instance group.

    The password generator is injected so that callers can make password
    creation deterministic; it is only consulted when there is no previous
    manifest to carry the password forward from.
    """

    def __init__(self, password_generator: PasswordGenerator = random_password):
        self.password_generator = password_generator

    def generate_manifest(
        self,
        service_deployment: ServiceDeployment,
        plan: Plan,
        request_params: RequestParameters,
        previous_manifest: Optional[BoshManifest] = None,
        previous_plan: Optional[Plan] = None,
    ) -> BoshManifest:
        """Generate the manifest for a create (no previous manifest) or update.

        Raises:
            InvalidParameterError: unsupported or malformed request parameters
            UpgradeError, ReleaseJobError, VersionParseError: unsafe release change
            ConfigurationError: the plan is missing required configuration
            InternalError: stored properties are malformed or password generation failed
        """
        arbitrary_params = request_params.arbitrary_params()
        illegal_params = find_illegal_arbitrary_params(arbitrary_params)
        if illegal_params:
            raise InvalidParameterError(
                f"unsupported parameter(s) for this service plan: {', '.join(illegal_params)}"
            )

        if previous_manifest is not None:
            validate_upgrade_path(previous_manifest, service_deployment.releases)

        instance_group = find_redis_server_instance_group(plan)
        if instance_group is None:
            detail = f"no {REDIS_SERVER_JOB_NAME} instance group definition found"
            logger.error(detail, deployment=service_deployment.deployment_name)
            raise ConfigurationError(detail)

        properties = self.redis_server_properties(
            service_deployment.deployment_name,
            plan.properties,
            arbitrary_params,
            previous_manifest,
        )

        redis_release = find_release_for_job(REDIS_SERVER_JOB_NAME, service_deployment.releases)

        manifest = BoshManifest(
            name=service_deployment.deployment_name,
            releases=[
                Release(name=release.name, version=release.version)
                for release in service_deployment.releases
            ],
            stemcells=[
                ManifestStemcell(
                    alias=STEMCELL_ALIAS,
                    os=service_deployment.stemcell.stemcell_os,
                    version=service_deployment.stemcell.stemcell_version,
                )
            ],
            instance_groups=[
                InstanceGroup(
                    name=REDIS_SERVER_JOB_NAME,
                    instances=instance_group.instances,
                    jobs=[Job(name=REDIS_SERVER_JOB_NAME, release=redis_release.name)],
                    vm_type=instance_group.vm_type,
                    vm_extensions=instance_group.vm_extensions,
                    persistent_disk_type=instance_group.persistent_disk_type,
                    stemcell=STEMCELL_ALIAS,
                    networks=[Network(name=network) for network in instance_group.networks],
                    azs=instance_group.azs,
                    properties={REDIS_PROPERTIES_KEY: properties.model_dump(exclude_none=True)},
                )
            ],
            update=generate_update_block(plan.update),
            properties={},
        )

        logger.info(
            "Generated manifest",
            deployment=service_deployment.deployment_name,
            release=redis_release.name,
            update=previous_manifest is not None,
        )
        return manifest

    def redis_server_properties(
        self,
        deployment_name: str,
        plan_properties: Dict[str, Any],
        arbitrary_params: Dict[str, Any],
        previous_manifest: Optional[BoshManifest],
    ) -> RedisProperties:
        previous_properties = redis_properties(previous_manifest) if previous_manifest is not None else None

        persistence = self.persistence_for_redis_server(deployment_name, plan_properties)
        password = self.password_for_redis_server(previous_properties)
        maxclients = maxclients_for_redis_server(arbitrary_params, previous_properties)

        return RedisProperties(persistence=persistence, password=password, maxclients=maxclients)

    def persistence_for_redis_server(self, deployment_name: str, plan_properties: Dict[str, Any]) -> str:
        if PERSISTENCE_PROPERTY_KEY not in plan_properties:
            detail = f"the plan property '{PERSISTENCE_PROPERTY_KEY}' is missing"
            logger.error(detail, deployment=deployment_name)
            raise ConfigurationError(detail)

        persistence = plan_properties[PERSISTENCE_PROPERTY_KEY]
        if not isinstance(persistence, bool):
            detail = f"the plan property '{PERSISTENCE_PROPERTY_KEY}' must be a boolean, got {persistence!r}"
            logger.error(detail, deployment=deployment_name)
            raise ConfigurationError(detail)

        return "yes" if persistence else "no"

    def password_for_redis_server(self, previous_properties: Optional[Dict[str, Any]]) -> str:
        # Generated once per deployment, then always carried forward
        if previous_properties is not None:
            return stored_password(previous_properties)
        password = self.password_generator()
        if not isinstance(password, str) or not password:
            raise PasswordGenerationError("password generator did not return a usable password")
        return password


def maxclients_for_redis_server(
    arbitrary_params: Dict[str, Any],
    previous_properties: Optional[Dict[str, Any]],
) -> int:
    """Request parameter wins over the previous manifest, which wins over the default."""
    if MAXCLIENTS_PARAMETER in arbitrary_params:
        configured = arbitrary_params[MAXCLIENTS_PARAMETER]
        if isinstance(configured, bool) or not isinstance(configured, (int, float)):
            raise InvalidParameterError(f"parameter {MAXCLIENTS_PARAMETER} must be a number, got {configured!r}")
        try:
            return int(configured)
        except (OverflowError, ValueError) as e:
            raise InvalidParameterError(f"parameter {MAXCLIENTS_PARAMETER} must be finite, got {configured!r}") from e
    if previous_properties is not None:
        return stored_maxclients(previous_properties)
    return DEFAULT_MAXCLIENTS
