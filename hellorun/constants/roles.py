"""
Role Constants for helloRun

This module defines constants for user roles to avoid hardcoded values
throughout the codebase.
"""

from enum import Enum


class RoleName(str, Enum):
    """Enumeration of role names in the system."""

    RUNNER = "runner"
    ORGANISER = "organiser"
    ADMIN = "admin"


# Default role for new user registrations
DEFAULT_ROLE = RoleName.RUNNER
