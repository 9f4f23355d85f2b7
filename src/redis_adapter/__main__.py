"""Service adapter executable invoked by the on-demand broker.

Each subcommand receives its inputs as positional JSON/YAML arguments and
writes its result to stdout. Failures print the caller-facing message to
stdout and exit 1; operator detail is logged to stderr.
"""

from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Optional, Type, TypeVar

import structlog
import yaml
from pydantic import BaseModel, TypeAdapter, ValidationError
from structlog.contextvars import clear_contextvars

from redis_adapter.binding.binder import Binder
from redis_adapter.core.config import Settings
from redis_adapter.core.exceptions import AdapterError, ConfigurationError, InvalidPayloadError
from redis_adapter.core.models import (
    BoshManifest,
    DeploymentTopology,
    ManifestSecrets,
    Plan,
    RequestParameters,
    ServiceDeployment,
)
from redis_adapter.manifest.generator import ManifestGenerator
from redis_adapter.utils.logging import bind_request_context, setup_logging

logger = structlog.get_logger()

ModelT = TypeVar("ModelT", bound=BaseModel)

_topology_adapter = TypeAdapter(DeploymentTopology)
_secrets_adapter = TypeAdapter(ManifestSecrets)


def _is_blank(raw: Optional[str]) -> bool:
    return raw is None or raw.strip() in ("", "null")


def _load_json(raw: str, what: str) -> Any:
    try:
        return json.loads(raw)
    except json.JSONDecodeError as e:
        raise InvalidPayloadError(f"invalid {what} JSON: {e}") from e


def _load_yaml(raw: str, what: str) -> Any:
    try:
        return yaml.safe_load(raw)
    except yaml.YAMLError as e:
        raise InvalidPayloadError(f"invalid {what} YAML: {e}") from e


def _validate(model: Type[ModelT], data: Any, what: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise InvalidPayloadError(f"invalid {what}: {e}") from e


def _validate_with(adapter: TypeAdapter, data: Any, what: str) -> Any:
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise InvalidPayloadError(f"invalid {what}: {e}") from e


def _optional_manifest(raw: Optional[str]) -> Optional[BoshManifest]:
    if _is_blank(raw):
        return None
    data = _load_yaml(raw, "previous manifest")
    if data is None:
        return None
    return _validate(BoshManifest, data, "previous manifest")


def generate_manifest(args: argparse.Namespace, settings: Settings) -> str:
    deployment = _validate(ServiceDeployment, _load_json(args.service_deployment, "service deployment"), "service deployment")
    plan = _validate(Plan, _load_json(args.plan, "plan"), "plan")
    request_params = _validate(RequestParameters, _load_json(args.request_params, "request parameters"), "request parameters")
    previous_manifest = _optional_manifest(args.previous_manifest)
    previous_plan = None
    if not _is_blank(args.previous_plan):
        previous_plan = _validate(Plan, _load_json(args.previous_plan, "previous plan"), "previous plan")

    bind_request_context(deployment_name=deployment.deployment_name)
    manifest = ManifestGenerator().generate_manifest(
        deployment, plan, request_params, previous_manifest, previous_plan
    )
    return yaml.safe_dump(manifest.to_dict(), default_flow_style=False, sort_keys=False)


def _binding_inputs(args: argparse.Namespace):
    topology = _validate_with(_topology_adapter, _load_json(args.bosh_vms, "BOSH VMs"), "BOSH VMs")
    manifest = _validate(BoshManifest, _load_yaml(args.manifest, "manifest"), "manifest")
    request_params = _validate(RequestParameters, _load_json(args.request_params, "request parameters"), "request parameters")
    bind_request_context(deployment_name=manifest.name, binding_id=args.binding_id)
    return topology, manifest, request_params


def create_binding(args: argparse.Namespace, settings: Settings) -> str:
    topology, manifest, request_params = _binding_inputs(args)
    secrets = None
    if not _is_blank(args.secrets):
        secrets = _validate_with(_secrets_adapter, _load_json(args.secrets, "secrets"), "secrets")

    credentials = Binder(settings.expected_platform).create_binding(
        args.binding_id, topology, manifest, request_params, secrets
    )
    return json.dumps({"credentials": credentials.model_dump()})


def delete_binding(args: argparse.Namespace, settings: Settings) -> str:
    # The remaining arguments are accepted for the broker's calling convention
    # but never decoded, so malformed values cannot fail the delete.
    bind_request_context(binding_id=args.binding_id)
    Binder(settings.expected_platform).delete_binding(args.binding_id)
    return ""


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="service-adapter", description="Redis on-demand service adapter")
    sub = parser.add_subparsers(dest="cmd")

    cmd_generate = sub.add_parser("generate-manifest", help="Generate a BOSH manifest")
    cmd_generate.add_argument("service_deployment", help="Service deployment JSON")
    cmd_generate.add_argument("plan", help="Plan JSON")
    cmd_generate.add_argument("request_params", help="Request parameters JSON")
    cmd_generate.add_argument("previous_manifest", nargs="?", default=None, help="Previous manifest YAML (empty on create)")
    cmd_generate.add_argument("previous_plan", nargs="?", default=None, help="Previous plan JSON (empty on create)")
    cmd_generate.set_defaults(handler=generate_manifest)

    cmd_create = sub.add_parser("create-binding", help="Create binding credentials")
    cmd_create.add_argument("binding_id")
    cmd_create.add_argument("bosh_vms", help="Instance group name to addresses JSON")
    cmd_create.add_argument("manifest", help="Deployed manifest YAML")
    cmd_create.add_argument("request_params", help="Request parameters JSON")
    cmd_create.add_argument("secrets", nargs="?", default=None, help="Resolved manifest secrets JSON")
    cmd_create.set_defaults(handler=create_binding)

    cmd_delete = sub.add_parser("delete-binding", help="Delete a binding")
    cmd_delete.add_argument("binding_id")
    cmd_delete.add_argument("bosh_vms", help="Instance group name to addresses JSON")
    cmd_delete.add_argument("manifest", help="Deployed manifest YAML")
    cmd_delete.add_argument("request_params", help="Request parameters JSON")
    cmd_delete.set_defaults(handler=delete_binding)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = Settings()
    except ValidationError as e:
        setup_logging()
        error = ConfigurationError(f"invalid adapter settings: {e}")
        logger.error("Service configuration error", command=args.cmd, detail=error.detail)
        print(str(error))
        return 1

    setup_logging(settings.log_level, settings.log_format)
    clear_contextvars()

    if not args.cmd:
        parser.print_usage(sys.stderr)
        return 1

    try:
        output = args.handler(args, settings)
    except ConfigurationError as e:
        logger.error("Service configuration error", command=args.cmd, detail=e.detail)
        print(str(e))
        return 1
    except AdapterError as e:
        logger.error("Adapter command failed", command=args.cmd, error=str(e), error_type=type(e).__name__)
        print(str(e))
        return 1

    if output:
        sys.stdout.write(output if output.endswith("\n") else output + "\n")
    return 0


def run() -> None:
    """Console script entry point."""
    sys.exit(main())


if __name__ == "__main__":
    run()
