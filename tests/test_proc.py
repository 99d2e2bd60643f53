"""Tests for the process directory and per-process page tables."""

import pytest

from constants import PAGE_COUNT, PageKind
from ptsim.errors import (
    InvalidAddress,
    InvalidPageCount,
    InvalidProcessId,
    OOMError,
    ProcessExistsError,
    UnknownProcessError,
)
from ptsim.mem import PageAllocator, PhysMem
from ptsim.proc import ProcessTable


@pytest.fixture
def physmem() -> PhysMem:
    return PhysMem()


@pytest.fixture
def page_alloc(physmem: PhysMem) -> PageAllocator:
    alloc = PageAllocator(physmem)
    alloc.initialize()
    return alloc


@pytest.fixture
def procs(physmem: PhysMem, page_alloc: PageAllocator) -> ProcessTable:
    return ProcessTable(physmem, page_alloc)


class TestCreate:
    def test_layout(self, procs: ProcessTable, physmem: PhysMem) -> None:
        proc = procs.create_process(1, 2)
        assert proc.page_table == 1
        assert proc.data_pages == [2, 3]
        # directory slot lives right after the allocation table
        assert physmem.read_byte(PAGE_COUNT + 1) == 1
        assert procs.lookup_table(1) == 1
        assert procs.mappings(1) == [(0, 2), (1, 3)]

    def test_zero_data_pages(self, procs: ProcessTable, page_alloc: PageAllocator) -> None:
        procs.create_process(0, 0)
        assert procs.mappings(0) == []
        assert page_alloc.used_count() == 2

    def test_existing_process_rejected(self, procs: ProcessTable) -> None:
        procs.create_process(3, 1)
        with pytest.raises(ProcessExistsError):
            procs.create_process(3, 1)

    @pytest.mark.parametrize("proc_id", [-1, PAGE_COUNT])
    def test_bad_process_id(self, procs: ProcessTable, proc_id: int) -> None:
        with pytest.raises(InvalidProcessId):
            procs.create_process(proc_id, 1)

    def test_bad_page_count(self, procs: ProcessTable) -> None:
        with pytest.raises(InvalidPageCount):
            procs.create_process(1, PAGE_COUNT + 1)

    def test_oom_on_page_table(self, procs: ProcessTable, page_alloc: PageAllocator) -> None:
        while page_alloc.alloc_page() is not None:
            pass
        with pytest.raises(OOMError) as exc:
            procs.create_process(4, 1)
        assert exc.value.proc_id == 4
        assert exc.value.kind == PageKind.TABLE
        assert not procs.exists(4)

    def test_oom_on_data_rolls_back(self, procs: ProcessTable, page_alloc: PageAllocator) -> None:
        procs.create_process(1, 10)
        used_before = page_alloc.used_count()
        with pytest.raises(OOMError) as exc:
            procs.create_process(2, PAGE_COUNT)
        assert exc.value.kind == PageKind.DATA
        assert page_alloc.used_count() == used_before
        assert not procs.exists(2)
        # the id is usable again
        procs.create_process(2, 1)

    def test_recycled_page_table_is_clean(self, procs: ProcessTable, physmem: PhysMem) -> None:
        procs.create_process(1, 3)
        procs.destroy_process(1)
        # stale byte left behind in the freed page
        physmem.write_byte(physmem.address(1, 10), 0x2A)
        procs.create_process(2, 1)
        assert procs.mappings(2) == [(0, 2)]


class TestGeometry:
    """The directory follows the configured page count, not the default."""

    @pytest.mark.parametrize(("page_size", "page_count"), [(64, 16), (512, 256)])
    def test_directory_after_allocation_table(self, page_size: int, page_count: int) -> None:
        physmem = PhysMem(page_size, page_count)
        page_alloc = PageAllocator(physmem)
        page_alloc.initialize()
        procs = ProcessTable(physmem, page_alloc)

        procs.create_process(0, 0)
        assert page_alloc.used_count() == 2
        assert physmem.read_byte(page_count + 0) == 1

        procs.create_process(1, 2)
        assert page_alloc.used_count() == 5
        assert physmem.read_byte(page_count + 1) == 2
        assert procs.mappings(1) == [(0, 3), (1, 4)]
        # process 0's page table stays empty
        assert physmem.read_page(1) == bytes(page_size)
        assert page_alloc.free_map() == [True] * 5 + [False] * (page_count - 5)


class TestLookup:
    def test_unknown_process(self, procs: ProcessTable) -> None:
        with pytest.raises(UnknownProcessError):
            procs.lookup_table(9)

    def test_lookup_entry(self, procs: ProcessTable) -> None:
        procs.create_process(1, 2)
        assert procs.lookup_entry(1, 1) == 3
        assert procs.lookup_entry(1, 2) == 0
        with pytest.raises(InvalidAddress):
            procs.lookup_entry(1, PAGE_COUNT)


class TestDestroy:
    def test_releases_exactly_its_pages(self, procs: ProcessTable, page_alloc: PageAllocator) -> None:
        procs.create_process(1, 2)
        free_before = page_alloc.available_count()
        procs.create_process(2, 5)
        assert page_alloc.available_count() == free_before - 6
        assert procs.destroy_process(2) == 6
        assert page_alloc.available_count() == free_before
        assert procs.mappings(1) == [(0, 2), (1, 3)]

    def test_clears_directory_slot(self, procs: ProcessTable) -> None:
        procs.create_process(7, 1)
        procs.destroy_process(7)
        assert not procs.exists(7)
        with pytest.raises(UnknownProcessError):
            procs.destroy_process(7)
