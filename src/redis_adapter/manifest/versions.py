"""
BOSH release version parsing and upgrade-path validation.

Release versions follow ``MAJOR[.MINOR][+dev.PATCH]``. The literal ``latest``
is a floating version and is never ordered against anything.
"""

import re
from typing import List, NamedTuple

import structlog

from redis_adapter.core.exceptions import UpgradeError, VersionParseError
from redis_adapter.core.models import BoshManifest, Release, ServiceRelease
from redis_adapter.manifest.releases import REDIS_SERVER_JOB_NAME, find_release_for_job

logger = structlog.get_logger()

LATEST_VERSION = "latest"

_VERSION_RE = re.compile(r"^(\d+)(?:\.(\d+))?(?:\+dev\.(\d+))?$")


class ReleaseVersion(NamedTuple):
    major: int
    minor: int = 0
    patch: int = 0


def parse_release_version(version: str) -> ReleaseVersion:
    """Parse a BOSH release version; missing components default to 0."""
    match = _VERSION_RE.match(version)
    if not match:
        raise VersionParseError(f"{version} is not a valid BOSH release version")

    major, minor, patch = match.groups()
    return ReleaseVersion(int(major), int(minor or 0), int(patch or 0))


def find_previous_release(name: str, previous_releases: List[Release]) -> Release:
    for release in previous_releases:
        if release.name == name:
            return release
    raise UpgradeError(f"no release with name {name} found in previous manifest")


def validate_upgrade_path(previous_manifest: BoshManifest, releases: List[ServiceRelease]) -> None:
    """Reject release changes that would downgrade the redis-server release.

    Raises:
        ReleaseJobError: redis-server is not provided by exactly one new release
        UpgradeError: the release was renamed or its version went down
        VersionParseError: either version is not a valid release version
    """
    new_release = find_release_for_job(REDIS_SERVER_JOB_NAME, releases)
    old_release = find_previous_release(new_release.name, previous_manifest.releases)

    # Floating releases are not version-ordered
    if LATEST_VERSION in (new_release.version, old_release.version):
        logger.debug(
            "Skipping release version check for floating release",
            release=new_release.name,
            old_version=old_release.version,
            new_version=new_release.version,
        )
        return

    new_version = parse_release_version(new_release.version)
    old_version = parse_release_version(old_release.version)

    if old_version > new_version:
        raise UpgradeError(
            "error generating manifest: new release version "
            f"{new_release.version} is lower than existing release version {old_release.version}"
        )
