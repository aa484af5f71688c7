"""Storage module for profile and flamegraph output."""

from .profile_storage import read_profile, write_profile, write_svg

__all__ = ['read_profile', 'write_profile', 'write_svg']
