from __future__ import annotations

from constants import MEM_SIZE, PAGE_COUNT
from ptsim.errors import DoubleFreeError
from ptsim.mem import PageAllocator, PhysMem


def main() -> None:
    physmem = PhysMem()
    assert physmem.size_bytes == MEM_SIZE
    page_alloc = PageAllocator(physmem)
    page_alloc.initialize()

    # 1) zero page is reserved, so allocation starts at 1
    assert page_alloc.is_used(0)
    assert page_alloc.alloc_page() == 1

    # 2) exhaust every page
    while page_alloc.alloc_page() is not None:
        pass
    assert page_alloc.used_count() == PAGE_COUNT

    # 3) freeing one page makes exactly that page come back
    page_alloc.free_page(17)
    assert page_alloc.alloc_page() == 17
    assert page_alloc.alloc_page() is None

    # 4) double free is rejected
    page_alloc.free_page(5)
    try:
        page_alloc.free_page(5)
        raise AssertionError("expected DoubleFreeError")
    except DoubleFreeError:
        pass

    print("M0 demo ok")


if __name__ == "__main__":
    main()
