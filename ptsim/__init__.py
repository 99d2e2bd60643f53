from __future__ import annotations

from .errors import (
    DoubleFreeError,
    InvalidAddress,
    InvalidPageCount,
    InvalidProcessId,
    OOMError,
    PageFault,
    ProcessExistsError,
    PtSimError,
    UnknownProcessError,
)
from .structs import AccessRecord, ProcessId, VirtualPage
from .mem import PageAllocator, PhysMem, make_address, split_address
from .proc import Process, ProcessTable
from .access import MemoryAccessor
from .machine import Machine, MachineConfig

__all__ = [
    "AccessRecord",
    "DoubleFreeError",
    "InvalidAddress",
    "InvalidPageCount",
    "InvalidProcessId",
    "Machine",
    "MachineConfig",
    "MemoryAccessor",
    "OOMError",
    "PageAllocator",
    "PageFault",
    "PhysMem",
    "Process",
    "ProcessExistsError",
    "ProcessId",
    "ProcessTable",
    "PtSimError",
    "UnknownProcessError",
    "VirtualPage",
    "make_address",
    "split_address",
]
