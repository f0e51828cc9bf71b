"""Optional provider capabilities.

A provider client is either ``Configured`` or ``Unconfigured``. Call sites
branch on the variant with ``isinstance`` instead of testing for ``None``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

ClientT = TypeVar("ClientT")


@dataclass(frozen=True, slots=True)
class Configured(Generic[ClientT]):
    client: ClientT


@dataclass(frozen=True, slots=True)
class Unconfigured:
    reason: str = "no API key configured"


Capability = Union[Configured[ClientT], Unconfigured]


def is_configured(capability: "Capability[ClientT]") -> bool:
    return isinstance(capability, Configured)


__all__ = ["Capability", "Configured", "Unconfigured", "is_configured"]
