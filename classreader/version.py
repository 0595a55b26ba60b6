"""Versions of the class file format."""

from __future__ import annotations

import enum

from classreader.errors import UnsupportedVersionError


class ClassFileVersion(enum.Enum):
    """Known class file versions, keyed by their major version number."""

    JDK1_1 = 45
    JDK1_2 = 46
    JDK1_3 = 47
    JDK1_4 = 48
    JDK1_5 = 49
    JDK6 = 50
    JDK7 = 51
    JDK8 = 52
    JDK9 = 53
    JDK10 = 54
    JDK11 = 55
    JDK12 = 56
    JDK13 = 57
    JDK14 = 58
    JDK15 = 59
    JDK16 = 60
    JDK17 = 61
    JDK18 = 62
    JDK19 = 63
    JDK20 = 64
    JDK21 = 65
    JDK22 = 66

    @classmethod
    def from_numbers(cls, major: int, minor: int) -> ClassFileVersion:
        """Return the version for the major and minor numbers of a class file."""
        try:
            return cls(major)
        except ValueError:
            raise UnsupportedVersionError(major, minor) from None

    @property
    def major(self) -> int:
        return self.value

    def __str__(self) -> str:
        return self.name


DEFAULT_VERSION = ClassFileVersion.JDK8