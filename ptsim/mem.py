from __future__ import annotations

from typing import List, Optional, Tuple

from constants import (
    ALLOC_TABLE_BASE,
    PAGE_COUNT,
    PAGE_FREE,
    PAGE_SHIFT,
    PAGE_SIZE,
    PAGE_USED,
    U8_MAX,
    ZERO_PAGE,
)
from ptsim.errors import DoubleFreeError, InvalidAddress


def make_address(page: int, offset: int, *, page_shift: int = PAGE_SHIFT) -> int:
    return (page << page_shift) | offset


def split_address(addr: int, *, page_shift: int = PAGE_SHIFT) -> Tuple[int, int]:
    return addr >> page_shift, addr & ((1 << page_shift) - 1)


def check_geometry(page_size: int, page_count: int) -> int:
    """Validate a page size / page count pair and return the page shift.

    The zero page must hold both the allocation table and the process
    directory (one byte per page each), and every page number must fit in a
    single page-table byte.
    """
    if page_size <= 0 or (page_size & (page_size - 1)) != 0:
        raise ValueError("page_size must be a power of two")
    if page_count <= 0:
        raise ValueError("page_count must be positive")
    if page_count > U8_MAX + 1:
        raise ValueError("page_count must fit in one byte per entry")
    if 2 * page_count > page_size:
        raise ValueError("zero page too small for allocation table and process directory")
    return page_size.bit_length() - 1


class PhysMem:
    def __init__(self, page_size: int = PAGE_SIZE, page_count: int = PAGE_COUNT):
        self._page_shift = check_geometry(page_size, page_count)
        self._page_size = page_size
        self._page_count = page_count
        self._mem = bytearray(page_size * page_count)

    @property
    def size_bytes(self) -> int:
        return len(self._mem)

    @property
    def page_size(self) -> int:
        return self._page_size

    @property
    def page_count(self) -> int:
        return self._page_count

    @property
    def page_shift(self) -> int:
        return self._page_shift

    @property
    def proc_dir_base(self) -> int:
        return ALLOC_TABLE_BASE + self._page_count

    def address(self, page: int, offset: int) -> int:
        return make_address(page, offset, page_shift=self._page_shift)

    def clear(self) -> None:
        self._mem[:] = bytes(len(self._mem))

    def read_byte(self, phys_addr: int) -> int:
        if phys_addr < 0 or phys_addr >= self.size_bytes:
            raise InvalidAddress(f"phys read out of range: addr={phys_addr}")
        return self._mem[phys_addr]

    def write_byte(self, phys_addr: int, value: int) -> None:
        if phys_addr < 0 or phys_addr >= self.size_bytes:
            raise InvalidAddress(f"phys write out of range: addr={phys_addr}")
        self._mem[phys_addr] = value & U8_MAX

    def read(self, phys_addr: int, size: int) -> bytes:
        if size < 0:
            raise ValueError("size must be non-negative")
        if phys_addr < 0 or phys_addr + size > self.size_bytes:
            raise InvalidAddress(f"phys read out of range: addr={phys_addr} size={size}")
        return bytes(self._mem[phys_addr : phys_addr + size])

    def read_page(self, page: int) -> bytes:
        return self.read(self.address(page, 0), self._page_size)


class PageAllocator:
    """First-fit allocator over the used/free byte table in the zero page."""

    def __init__(self, physmem: PhysMem):
        self._physmem = physmem

    @property
    def total_pages(self) -> int:
        return self._physmem.page_count

    def _table_addr(self, page: int) -> int:
        return self._physmem.address(ZERO_PAGE, ALLOC_TABLE_BASE + page)

    def initialize(self) -> None:
        self._physmem.clear()
        # The allocation table lives in page 0, so page 0 is never handed out.
        self._physmem.write_byte(self._table_addr(ZERO_PAGE), PAGE_USED)

    def is_used(self, page: int) -> bool:
        if page < 0 or page >= self.total_pages:
            raise InvalidAddress(f"page out of range: {page}")
        return self._physmem.read_byte(self._table_addr(page)) != PAGE_FREE

    def alloc_page(self) -> Optional[int]:
        for page in range(self.total_pages):
            addr = self._table_addr(page)
            if self._physmem.read_byte(addr) == PAGE_FREE:
                self._physmem.write_byte(addr, PAGE_USED)
                return page
        return None

    def free_page(self, page: int) -> None:
        if page == ZERO_PAGE:
            raise InvalidAddress("page 0 is reserved")
        if not self.is_used(page):
            raise DoubleFreeError(page)
        self._physmem.write_byte(self._table_addr(page), PAGE_FREE)

    def free_map(self) -> List[bool]:
        table = self._physmem.read(self._table_addr(0), self.total_pages)
        return [b != PAGE_FREE for b in table]

    def used_count(self) -> int:
        return sum(self.free_map())

    def available_count(self) -> int:
        return self.total_pages - self.used_count()
