"""Group source - where group membership comes from."""

from enum import StrEnum


class GroupSource(StrEnum):
    """Directory groups are synchronized; custom groups hold users directly."""

    DIRECTORY = "directory"
    CUSTOM = "custom"
