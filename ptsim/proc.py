from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from constants import UNMAPPED, ZERO_PAGE, PageKind
from ptsim.errors import InvalidPageCount, OOMError, ProcessExistsError, UnknownProcessError
from ptsim.mem import PageAllocator, PhysMem
from ptsim.structs import ProcessId, VirtualPage


@dataclass(slots=True)
class Process:
    pid: int
    page_table: int
    data_pages: List[int] = field(default_factory=list)


class ProcessTable:
    """Process directory in the zero page plus one page table per process.

    Directory slot ``pid`` holds the physical page of that process's page
    table. Entry ``i`` of a page table holds the physical page backing
    virtual page ``i``. In both places 0 means "none", which is unambiguous
    because page 0 is never allocated.
    """

    def __init__(self, physmem: PhysMem, page_alloc: PageAllocator):
        self._physmem = physmem
        self._page_alloc = page_alloc

    def _pid(self, proc_id: int) -> int:
        return ProcessId(proc_id, limit=self._physmem.page_count).value

    def _dir_addr(self, pid: int) -> int:
        return self._physmem.address(ZERO_PAGE, self._physmem.proc_dir_base + pid)

    def _entry_addr(self, page_table: int, virtual_page: int) -> int:
        return self._physmem.address(page_table, virtual_page)

    def exists(self, proc_id: int) -> bool:
        pid = self._pid(proc_id)
        return self._physmem.read_byte(self._dir_addr(pid)) != UNMAPPED

    def lookup_table(self, proc_id: int) -> int:
        pid = self._pid(proc_id)
        page_table = self._physmem.read_byte(self._dir_addr(pid))
        if page_table == UNMAPPED:
            raise UnknownProcessError(pid)
        return page_table

    def lookup_entry(self, proc_id: int, virtual_page: int) -> int:
        page_table = self.lookup_table(proc_id)
        vpn = VirtualPage(virtual_page, limit=self._physmem.page_count).value
        return self._physmem.read_byte(self._entry_addr(page_table, vpn))

    def create_process(self, proc_id: int, page_count: int) -> Process:
        pid = self._pid(proc_id)
        if page_count < 0 or page_count > self._physmem.page_count:
            raise InvalidPageCount(f"page_count out of range: {page_count} (0 .. {self._physmem.page_count})")
        if self.exists(pid):
            raise ProcessExistsError(pid)

        page_table = self._page_alloc.alloc_page()
        if page_table is None:
            raise OOMError(pid, PageKind.TABLE)

        # A recycled page may still hold a previous owner's data.
        for vpn in range(self._physmem.page_count):
            self._physmem.write_byte(self._entry_addr(page_table, vpn), UNMAPPED)
        self._physmem.write_byte(self._dir_addr(pid), page_table)

        proc = Process(pid=pid, page_table=page_table)
        for vpn in range(page_count):
            new_page = self._page_alloc.alloc_page()
            if new_page is None:
                self._rollback(proc)
                raise OOMError(pid, PageKind.DATA)
            self._physmem.write_byte(self._entry_addr(page_table, vpn), new_page)
            proc.data_pages.append(new_page)
        return proc

    def _rollback(self, proc: Process) -> None:
        for page in reversed(proc.data_pages):
            self._page_alloc.free_page(page)
        self._page_alloc.free_page(proc.page_table)
        self._physmem.write_byte(self._dir_addr(proc.pid), UNMAPPED)
        proc.data_pages.clear()

    def mappings(self, proc_id: int) -> List[Tuple[int, int]]:
        page_table = self.lookup_table(proc_id)
        out: List[Tuple[int, int]] = []
        for vpn in range(self._physmem.page_count):
            page = self._physmem.read_byte(self._entry_addr(page_table, vpn))
            if page != UNMAPPED:
                out.append((vpn, page))
        return out

    def destroy_process(self, proc_id: int) -> int:
        """Free every page owned by the process and return how many were freed."""
        pid = self._pid(proc_id)
        page_table = self.lookup_table(pid)
        freed = 0
        for vpn, page in self.mappings(pid):
            self._page_alloc.free_page(page)
            self._physmem.write_byte(self._entry_addr(page_table, vpn), UNMAPPED)
            freed += 1
        self._page_alloc.free_page(page_table)
        self._physmem.write_byte(self._dir_addr(pid), UNMAPPED)
        return freed + 1
