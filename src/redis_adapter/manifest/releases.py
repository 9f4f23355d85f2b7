"""Release lookup helpers."""

from typing import List

from redis_adapter.core.exceptions import ReleaseJobError
from redis_adapter.core.models import ServiceRelease

REDIS_SERVER_JOB_NAME = "redis-server"


def find_release_for_job(job_name: str, releases: List[ServiceRelease]) -> ServiceRelease:
    """Return the single release that provides ``job_name``.

    Ambiguous ownership is an error, never resolved by picking one.
    """
    providers = [release for release in releases if job_name in release.jobs]

    if not providers:
        raise ReleaseJobError(f"no release provided for job {job_name}")

    if len(providers) > 1:
        names = ", ".join(release.name for release in providers)
        raise ReleaseJobError(f"job {job_name} defined in multiple releases: {names}")

    return providers[0]
