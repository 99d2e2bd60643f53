from __future__ import annotations

from dataclasses import dataclass

from constants import PageKind


class PtSimError(Exception):
    pass


class OOMError(PtSimError):
    def __init__(self, proc_id: int, kind: PageKind):
        self.proc_id = int(proc_id)
        self.kind = PageKind(kind)
        super().__init__(f"out of memory: proc {self.proc_id}: {self.kind.label}")


class InvalidAddress(PtSimError):
    pass


@dataclass(slots=True)
class PageFault(InvalidAddress):
    proc_id: int
    virt_addr: int
    reason: str

    def __str__(self) -> str:
        return f"page fault: proc {self.proc_id} vaddr={self.virt_addr} ({self.reason})"


class InvalidPageCount(PtSimError):
    pass


class InvalidProcessId(PtSimError):
    pass


class UnknownProcessError(PtSimError):
    def __init__(self, proc_id: int):
        self.proc_id = int(proc_id)
        super().__init__(f"unknown process: {self.proc_id}")


class ProcessExistsError(PtSimError):
    def __init__(self, proc_id: int):
        self.proc_id = int(proc_id)
        super().__init__(f"process already exists: {self.proc_id}")


class DoubleFreeError(PtSimError):
    def __init__(self, page: int):
        self.page = int(page)
        super().__init__(f"page already free: {self.page}")
