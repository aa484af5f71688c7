"""
Profile storage: writing and reading profile JSON and flamegraph SVG files.

Profiles are written as pretty-printed JSON. Reading a profile back checks
the schema version and ignores fields it does not know about.
"""

import json
import logging
from pathlib import Path
from typing import Union

from ..core.config import SCHEMA_VERSION
from ..core.errors import InvalidFormat, OutputError, UnsupportedVersion
from ..core.types import Profile

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def _major(version: str) -> str:
    return str(version).split('.', 1)[0]


def _ensure_parent_dir(path: Path) -> None:
    """Create the parent directory of path if it doesn't exist."""
    path.parent.mkdir(parents=True, exist_ok=True)


def write_profile(profile: Profile, path: PathLike) -> Path:
    """
    Write a profile to disk as JSON.
    
    Args:
        profile: Profile to persist
        path: Destination file
        
    Returns:
        Path that was written
        
    Raises:
        OutputError: If the file cannot be written
    """
    path = Path(path)
    try:
        _ensure_parent_dir(path)
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(profile.to_dict(), f, indent=2)
    except OSError as e:
        raise OutputError(f"Failed to write profile to {path}: {e}") from e
    
    logger.info("Profile written to %s", path)
    return path


def read_profile(path: PathLike) -> Profile:
    """
    Read a profile written by write_profile.
    
    Args:
        path: Profile JSON file
        
    Returns:
        Profile
        
    Raises:
        OutputError: If the file cannot be read or is not JSON
        UnsupportedVersion: If the major schema version differs
        InvalidFormat: If required fields are missing
    """
    path = Path(path)
    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise OutputError(f"Failed to read profile from {path}: {e}") from e
    
    if not isinstance(data, dict):
        raise InvalidFormat(f"Profile {path} must be a JSON object")
    if 'version' not in data:
        raise InvalidFormat(f"Profile {path} has no 'version' field")
    
    version = str(data['version'])
    if _major(version) != _major(SCHEMA_VERSION):
        raise UnsupportedVersion(version, SCHEMA_VERSION)
    if version != SCHEMA_VERSION:
        logger.warning("Profile %s has schema version %s, reading as %s", path, version, SCHEMA_VERSION)
    
    try:
        return Profile.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidFormat(f"Profile {path} is missing or has a malformed field: {e}") from e


def write_svg(svg_content: str, path: PathLike) -> Path:
    """
    Write flamegraph SVG content to disk.
    
    Raises:
        OutputError: If the file cannot be written
    """
    path = Path(path)
    try:
        _ensure_parent_dir(path)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(svg_content)
    except OSError as e:
        raise OutputError(f"Failed to write SVG to {path}: {e}") from e
    
    logger.info("Flamegraph written to %s", path)
    return path
