"""Manifest generation and upgrade validation."""

from .generator import ManifestGenerator
from .passwords import PasswordGenerator, random_password
from .versions import ReleaseVersion, parse_release_version, validate_upgrade_path

__all__ = [
    "ManifestGenerator",
    "PasswordGenerator",
    "random_password",
    "ReleaseVersion",
    "parse_release_version",
    "validate_upgrade_path",
]
