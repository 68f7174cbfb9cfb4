"""
Theme value for portfolio.
"""

from enum import Enum


class Theme(str, Enum):
    """The page color theme. There is no unset state."""
    LIGHT = "light"
    DARK = "dark"

    @property
    def opposite(self) -> 'Theme':
        return Theme.DARK if self is Theme.LIGHT else Theme.LIGHT

    @classmethod
    def parse(cls, value) -> 'Theme':
        """
        Parse a stored or user-supplied value.

        Raises:
            ValueError: For anything other than "light" or "dark"
        """
        if isinstance(value, cls):
            return value
        return cls(value)

    def __str__(self) -> str:
        return self.value
