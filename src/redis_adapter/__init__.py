"""Redis service adapter - manifest generation and binding for on-demand Redis."""

__version__ = "0.1.0"

from redis_adapter.binding.binder import Binder
from redis_adapter.core.models import BoshManifest, Credentials, Plan, RequestParameters, ServiceDeployment
from redis_adapter.manifest.generator import ManifestGenerator

__all__ = [
    "Binder",
    "BoshManifest",
    "Credentials",
    "ManifestGenerator",
    "Plan",
    "RequestParameters",
    "ServiceDeployment",
    "__version__",
]
