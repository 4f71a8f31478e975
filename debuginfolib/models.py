from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any


class CallerNameFormat(Enum):
    """Which parts of the caller identity are rendered."""
    NAME = "name"
    SHORT_NAME = "short_name"
    FULL_NAME = "full_name"
    CLASS_NAME = "class_name"
    FULL_CLASS_NAME = "full_class_name"

    @classmethod
    def coerce(cls, value: Any) -> CallerNameFormat:
        """Accept a member, its value, or its name (case-insensitive).

        Raises ``ValueError`` for anything else.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            key = value.strip()
            for member in cls:
                if key == member.value or key.upper() == member.name:
                    return member
        raise ValueError(f"Unknown caller name format: {value!r}")


@dataclass(frozen=True)
class CallerIdentity:
    """Identity of one stack frame.

    Attributes:
        full_class_name: Module-qualified name of the declaring class, or
                         the module name for module-level code.
        class_name:      Unqualified class name (last dotted segment).
        method_name:     Name of the function running in the frame.
    """
    full_class_name: str
    class_name: str
    method_name: str

    def render(self, fmt: CallerNameFormat) -> str:
        if fmt is CallerNameFormat.NAME:
            return self.method_name
        if fmt is CallerNameFormat.SHORT_NAME:
            return f"{self.class_name}.{self.method_name}"
        if fmt is CallerNameFormat.FULL_NAME:
            return f"{self.full_class_name}.{self.method_name}"
        if fmt is CallerNameFormat.CLASS_NAME:
            return self.class_name
        if fmt is CallerNameFormat.FULL_CLASS_NAME:
            return self.full_class_name
        raise ValueError(f"Unsupported caller name format: {fmt!r}")
