from __future__ import annotations

from enum import IntEnum

PAGE_SIZE = 256  # MUST equal 1 << PAGE_SHIFT
PAGE_COUNT = 64
PAGE_SHIFT = 8
MEM_SIZE = PAGE_SIZE * PAGE_COUNT

# Zero page layout: allocation table, then the process directory
# at byte page_count (one byte per page in each)
ZERO_PAGE = 0
ALLOC_TABLE_BASE = 0

PAGE_FREE = 0
PAGE_USED = 1

# Page-table entry / directory slot meaning "nothing here"
UNMAPPED = 0

U8_MAX = 0xFF


class PageKind(IntEnum):
    TABLE = 1
    DATA = 2

    @property
    def label(self) -> str:
        return "page table" if self is PageKind.TABLE else "data page"


class AccessOp(IntEnum):
    STORE = 1
    LOAD = 2
