from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

from constants import PAGE_COUNT, PAGE_SIZE
from ptsim.access import MemoryAccessor
from ptsim.mem import PageAllocator, PhysMem, check_geometry
from ptsim.proc import Process, ProcessTable
from ptsim.structs import AccessRecord, PhysAddr, VirtAddr

TraceHook = Callable[[AccessRecord], None]


@dataclass(slots=True)
class MachineConfig:
    page_size: int = PAGE_SIZE
    page_count: int = PAGE_COUNT
    page_shift: int = field(init=False)

    def __post_init__(self) -> None:
        self.page_shift = check_geometry(self.page_size, self.page_count)


class Machine:
    def __init__(self, config: Optional[MachineConfig] = None, *, trace: Optional[TraceHook] = None):
        # One PhysMem holds the allocation table, the process directory and
        # every page table / data page. All public calls take the same lock.
        self.config = config or MachineConfig()
        self.physmem = PhysMem(self.config.page_size, self.config.page_count)
        self.page_alloc = PageAllocator(self.physmem)
        self.procs = ProcessTable(self.physmem, self.page_alloc)
        self.accessor = MemoryAccessor(self.physmem, self.procs)
        self.trace = trace
        self._lock = threading.RLock()
        self.page_alloc.initialize()

    def reset(self) -> None:
        with self._lock:
            self.page_alloc.initialize()

    def new_process(self, proc_id: int, page_count: int) -> Process:
        with self._lock:
            return self.procs.create_process(proc_id, page_count)

    def kill_process(self, proc_id: int) -> int:
        with self._lock:
            return self.procs.destroy_process(proc_id)

    def page_table(self, proc_id: int) -> List[Tuple[int, int]]:
        with self._lock:
            return self.procs.mappings(proc_id)

    def free_map(self) -> List[bool]:
        with self._lock:
            return self.page_alloc.free_map()

    def translate(self, proc_id: int, virt_addr: VirtAddr) -> PhysAddr:
        with self._lock:
            return self.accessor.translate(proc_id, virt_addr)

    def store(self, proc_id: int, virt_addr: VirtAddr, value: int) -> AccessRecord:
        with self._lock:
            rec = self.accessor.store(proc_id, virt_addr, value)
        self._emit(rec)
        return rec

    def load(self, proc_id: int, virt_addr: VirtAddr) -> AccessRecord:
        with self._lock:
            rec = self.accessor.load(proc_id, virt_addr)
        self._emit(rec)
        return rec

    def _emit(self, rec: AccessRecord) -> None:
        if self.trace is not None:
            self.trace(rec)
