from __future__ import annotations

from constants import UNMAPPED, AccessOp
from ptsim.errors import InvalidAddress, PageFault
from ptsim.mem import PhysMem, split_address
from ptsim.proc import ProcessTable
from ptsim.structs import AccessRecord, PhysAddr, VirtAddr


class MemoryAccessor:
    def __init__(self, physmem: PhysMem, procs: ProcessTable):
        self._physmem = physmem
        self._procs = procs

    @property
    def virt_size(self) -> int:
        return self._physmem.page_count * self._physmem.page_size

    def translate(self, proc_id: int, virt_addr: VirtAddr) -> PhysAddr:
        if virt_addr < 0 or virt_addr >= self.virt_size:
            raise InvalidAddress(f"virtual address out of range: {virt_addr}")
        virtual_page, offset = split_address(virt_addr, page_shift=self._physmem.page_shift)
        phys_page = self._procs.lookup_entry(proc_id, virtual_page)
        if phys_page == UNMAPPED:
            raise PageFault(proc_id, virt_addr, "not_present")
        return self._physmem.address(phys_page, offset)

    def store(self, proc_id: int, virt_addr: VirtAddr, value: int) -> AccessRecord:
        phys_addr = self.translate(proc_id, virt_addr)
        self._physmem.write_byte(phys_addr, value)
        return AccessRecord(
            op=AccessOp.STORE,
            proc_id=int(proc_id),
            virt_addr=int(virt_addr),
            phys_addr=phys_addr,
            value=self._physmem.read_byte(phys_addr),
        )

    def load(self, proc_id: int, virt_addr: VirtAddr) -> AccessRecord:
        phys_addr = self.translate(proc_id, virt_addr)
        return AccessRecord(
            op=AccessOp.LOAD,
            proc_id=int(proc_id),
            virt_addr=int(virt_addr),
            phys_addr=phys_addr,
            value=self._physmem.read_byte(phys_addr),
        )
