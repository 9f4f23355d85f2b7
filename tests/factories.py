"""Builders for adapter inputs shared across tests."""

from redis_adapter.core.models import BoshManifest, Plan, RequestParameters, ServiceDeployment


def make_deployment(version="2.5", releases=None, name="service-instance_abc"):
    if releases is None:
        releases = [{"name": "redis-release", "version": version, "jobs": ["redis-server"]}]
    return ServiceDeployment.model_validate(
        {
            "deployment_name": name,
            "releases": releases,
            "stemcell": {"stemcell_os": "ubuntu-jammy", "stemcell_version": "1.200"},
        }
    )


def make_plan(persistence=True, update=None, instance_group_name="redis-server"):
    properties = {} if persistence is None else {"persistence": persistence}
    data = {
        "instance_groups": [
            {
                "name": instance_group_name,
                "instances": 1,
                "vm_type": "small",
                "vm_extensions": ["public_ip"],
                "persistent_disk_type": "ten",
                "networks": ["redis-net"],
                "azs": ["z1", "z2"],
            }
        ],
        "properties": properties,
    }
    if update is not None:
        data["update"] = update
    return Plan.model_validate(data)


def make_request_params(parameters=None, context=None):
    return RequestParameters.model_validate(
        {
            "plan_id": "redis-small",
            "service_id": "redis",
            "parameters": parameters or {},
            "context": context if context is not None else {"platform": "cloudfoundry"},
        }
    )


def make_previous_manifest(version="2.5", password="old-password", maxclients=5000, release_name="redis-release", **extra):
    redis = {"persistence": "yes", "password": password, "maxclients": maxclients}
    redis.update(extra)
    return BoshManifest.model_validate(
        {
            "name": "service-instance_abc",
            "releases": [{"name": release_name, "version": version}],
            "stemcells": [{"alias": "only-stemcell", "os": "ubuntu-jammy", "version": "1.200"}],
            "instance_groups": [
                {
                    "name": "redis-server",
                    "instances": 1,
                    "jobs": [{"name": "redis-server", "release": release_name}],
                    "vm_type": "small",
                    "stemcell": "only-stemcell",
                    "networks": [{"name": "redis-net"}],
                    "azs": ["z1"],
                    "properties": {"redis": redis},
                }
            ],
            "update": {
                "canaries": 1,
                "max_in_flight": 4,
                "canary_watch_time": "30000-240000",
                "update_watch_time": "30000-240000",
            },
            "properties": {},
        }
    )

