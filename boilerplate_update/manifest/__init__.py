"""Project manifest reading."""

from .package_json_reader import Manifest, PackageJsonReader

__all__ = ["Manifest", "PackageJsonReader"]
