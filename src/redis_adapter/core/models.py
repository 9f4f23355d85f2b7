"""Core data models for the Redis service adapter.

Input models follow the JSON shapes the on-demand broker passes to a service
adapter; ``BoshManifest`` and friends follow the BOSH manifest v2 schema for
the fields this adapter reads or writes.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, field_validator

from redis_adapter.core.exceptions import ManifestPropertyError

REDIS_PROPERTIES_KEY = "redis"

# Topology: instance group name -> instance addresses
DeploymentTopology = Dict[str, List[str]]
# Resolved manifest secrets: secret name -> value
ManifestSecrets = Dict[str, str]


class ServiceRelease(BaseModel):
    """A release made available to the service deployment."""

    name: str = Field(..., description="Release name")
    version: str = Field(..., description="Release version or 'latest'")
    jobs: List[str] = Field(default_factory=list, description="Jobs provided by the release")


class Stemcell(BaseModel):
    stemcell_os: str
    stemcell_version: str


class ServiceDeployment(BaseModel):
    """Deployment descriptor supplied fresh on every call."""

    model_config = ConfigDict(frozen=True)

    deployment_name: str = Field(..., description="BOSH deployment name")
    releases: List[ServiceRelease] = Field(default_factory=list)
    stemcell: Stemcell


class PlanInstanceGroup(BaseModel):
    """Instance group definition from the service plan."""

    name: str
    instances: int = Field(..., description="Number of instances")
    vm_type: str
    vm_extensions: Optional[List[str]] = None
    persistent_disk_type: Optional[str] = None
    networks: List[str] = Field(default_factory=list)
    azs: List[str] = Field(default_factory=list)
    lifecycle: Optional[str] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class PlanUpdate(BaseModel):
    canaries: int
    max_in_flight: Union[int, str]
    canary_watch_time: str
    update_watch_time: str
    serial: Optional[bool] = None


class Plan(BaseModel):
    """Service plan as configured by the operator."""

    instance_groups: List[PlanInstanceGroup] = Field(default_factory=list)
    properties: Dict[str, Any] = Field(default_factory=dict, description="Plan-level properties")
    update: Optional[PlanUpdate] = None


class RequestParameters(BaseModel):
    """Provision/update/bind request parameters."""

    model_config = ConfigDict(extra="allow")

    plan_id: Optional[str] = None
    service_id: Optional[str] = None
    parameters: Dict[str, Any] = Field(default_factory=dict, description="Arbitrary caller parameters")
    context: Dict[str, Any] = Field(default_factory=dict, description="Platform context (diagnostics only)")

    @field_validator("parameters", "context", mode="before")
    @classmethod
    def null_as_empty(cls, v: Any) -> Any:
        return {} if v is None else v

    def arbitrary_params(self) -> Dict[str, Any]:
        return self.parameters

    def arbitrary_context(self) -> Dict[str, Any]:
        return self.context

    def platform(self) -> str:
        platform = self.context.get("platform")
        return platform if isinstance(platform, str) else ""


class Release(BaseModel):
    name: str
    version: str


class ManifestStemcell(BaseModel):
    alias: str
    os: str
    version: str


class Job(BaseModel):
    name: str
    release: str


class Network(BaseModel):
    name: str


class InstanceGroup(BaseModel):
    name: str
    instances: int
    jobs: List[Job] = Field(default_factory=list)
    vm_type: Optional[str] = None
    vm_extensions: Optional[List[str]] = None
    persistent_disk_type: Optional[str] = None
    stemcell: Optional[str] = None
    networks: List[Network] = Field(default_factory=list)
    azs: Optional[List[str]] = None
    properties: Dict[str, Any] = Field(default_factory=dict)


class Update(BaseModel):
    canaries: int
    max_in_flight: Union[int, str]
    canary_watch_time: str
    update_watch_time: str
    serial: Optional[bool] = None


class BoshManifest(BaseModel):
    """BOSH deployment manifest, generated or previously applied."""

    name: str
    releases: List[Release] = Field(default_factory=list)
    stemcells: List[ManifestStemcell] = Field(default_factory=list)
    instance_groups: List[InstanceGroup] = Field(default_factory=list)
    update: Optional[Update] = None
    properties: Dict[str, Any] = Field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Plain mapping suitable for YAML serialization."""
        return self.model_dump(mode="json", exclude_none=True)


class RedisProperties(BaseModel):
    """Properties this adapter writes under the ``redis`` instance group key."""

    persistence: str = Field(..., pattern="^(yes|no)$")
    password: StrictStr
    maxclients: StrictInt


class Credentials(BaseModel):
    """Connection credentials handed to a binding consumer."""

    host: str
    port: int
    generated_secret: str = ""
    password: str
    secret: str = ""


def redis_properties(manifest: BoshManifest) -> Dict[str, Any]:
    """Return the ``redis`` properties block of the manifest's instance group.

    The block is read as a plain mapping; each key is checked only where it
    is used, via the ``stored_*`` helpers.
    """
    if not manifest.instance_groups:
        raise ManifestPropertyError(f"manifest {manifest.name} has no instance groups")

    raw = manifest.instance_groups[0].properties.get(REDIS_PROPERTIES_KEY)
    if not isinstance(raw, dict):
        raise ManifestPropertyError(
            f"manifest {manifest.name} has no '{REDIS_PROPERTIES_KEY}' properties block"
        )
    return raw


def stored_password(properties: Dict[str, Any]) -> str:
    password = properties.get("password")
    if not isinstance(password, str):
        raise ManifestPropertyError(
            f"stored '{REDIS_PROPERTIES_KEY}.password' must be a string, got {type(password).__name__}"
        )
    return password


def stored_maxclients(properties: Dict[str, Any]) -> int:
    maxclients = properties.get("maxclients")
    # bool is an int subclass
    if isinstance(maxclients, bool) or not isinstance(maxclients, int):
        raise ManifestPropertyError(
            f"stored '{REDIS_PROPERTIES_KEY}.maxclients' must be an integer, got {type(maxclients).__name__}"
        )
    return maxclients
