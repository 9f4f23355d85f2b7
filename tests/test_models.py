"""
Tests for adapter models.
"""

import pytest
import yaml

from redis_adapter.core.exceptions import ManifestPropertyError
from redis_adapter.core.models import (
    BoshManifest,
    RequestParameters,
    redis_properties,
    stored_maxclients,
    stored_password,
)

from factories import make_previous_manifest


def test_request_parameters_accessors():
    params = RequestParameters.model_validate(
        {
            "plan_id": "p",
            "parameters": {"maxclients": 10},
            "context": {"platform": "cloudfoundry", "space_guid": "s"},
            "bind_resource": {"app_guid": "a"},
        }
    )

    assert params.arbitrary_params() == {"maxclients": 10}
    assert params.arbitrary_context()["space_guid"] == "s"
    assert params.platform() == "cloudfoundry"


def test_request_parameters_null_sections():
    params = RequestParameters.model_validate({"parameters": None, "context": None})

    assert params.arbitrary_params() == {}
    assert params.arbitrary_context() == {}
    assert params.platform() == ""


def test_previous_manifest_from_yaml_ignores_unknown_keys():
    manifest = BoshManifest.model_validate(
        yaml.safe_load(
            """
name: service-instance_abc
director_uuid: ignored
releases:
- name: redis-release
  version: "2.5"
instance_groups:
- name: redis-server
  instances: 1
  lifecycle: service
  properties:
    redis:
      persistence: "yes"
      password: p4ss
      maxclients: 300
      secret: ((my/path))
"""
        )
    )

    properties = redis_properties(manifest)
    assert stored_password(properties) == "p4ss"
    assert stored_maxclients(properties) == 300
    assert properties["secret"] == "((my/path))"


def test_redis_properties_requires_instance_group():
    with pytest.raises(ManifestPropertyError, match="no instance groups"):
        redis_properties(BoshManifest(name="empty"))


def test_redis_properties_requires_redis_block():
    manifest = make_previous_manifest()
    manifest.instance_groups[0].properties = {"other": {}}

    with pytest.raises(ManifestPropertyError):
        redis_properties(manifest)


def test_manifest_to_dict_omits_unset_optionals():
    data = make_previous_manifest().to_dict()

    assert "vm_extensions" not in data["instance_groups"][0]
    assert "serial" not in data["update"]
    assert data["properties"] == {}


def test_redis_properties_is_passthrough():
    manifest = make_previous_manifest()
    manifest.instance_groups[0].properties = {"redis": {"password": "p"}}

    assert redis_properties(manifest) == {"password": "p"}


@pytest.mark.parametrize("password", [None, 1234, ["p"]])
def test_stored_password_must_be_string(password):
    with pytest.raises(ManifestPropertyError, match="password"):
        stored_password({"password": password})


def test_stored_password_missing():
    with pytest.raises(ManifestPropertyError, match="password"):
        stored_password({})


@pytest.mark.parametrize("properties", [{}, {"maxclients": "100"}, {"maxclients": 10.5}, {"maxclients": True}])
def test_stored_maxclients_must_be_integer(properties):
    with pytest.raises(ManifestPropertyError, match="maxclients"):
        stored_maxclients(properties)
