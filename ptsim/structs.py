from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias

from constants import PAGE_COUNT, U8_MAX, AccessOp
from ptsim.errors import InvalidAddress, InvalidProcessId

VirtAddr: TypeAlias = int
PhysAddr: TypeAlias = int


def _u8(v: int) -> int:
    if not (0 <= v <= U8_MAX):
        raise ValueError(f"u8 out of range: {v}")
    return v


@dataclass(frozen=True, slots=True)
class ProcessId:
    """Process number, which doubles as an index into the process directory."""

    value: int
    limit: int = PAGE_COUNT

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidProcessId(f"process id must be an int: {self.value!r}")
        if not (0 <= self.value < self.limit):
            raise InvalidProcessId(f"process id out of range: {self.value} (0 .. {self.limit - 1})")

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True, slots=True)
class VirtualPage:
    value: int
    limit: int = PAGE_COUNT

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise InvalidAddress(f"virtual page must be an int: {self.value!r}")
        if not (0 <= self.value < self.limit):
            raise InvalidAddress(f"virtual page out of range: {self.value} (0 .. {self.limit - 1})")

    def __int__(self) -> int:
        return self.value


@dataclass(frozen=True, slots=True)
class AccessRecord:
    op: AccessOp
    proc_id: int
    virt_addr: VirtAddr
    phys_addr: PhysAddr
    value: int

    def __post_init__(self) -> None:
        _u8(self.value)

    def format(self) -> str:
        verb = "Store" if self.op == AccessOp.STORE else "Load"
        return f"{verb} proc {self.proc_id}: {self.virt_addr} => {self.phys_addr}, value={self.value}"
