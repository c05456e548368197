"""
Result records produced by the system tester.
"""

from dataclasses import dataclass, asdict
from typing import Any, Dict, Optional

PASS = "PASS"
FAIL = "FAIL"


@dataclass(frozen=True)
class TestResult:
    """Outcome of a single endpoint check."""

    endpoint: str
    method: str
    status: str
    message: str
    status_code: Optional[int] = None
    # diagnostic only; shape differs per check (headers, counts, payloads)
    data: Optional[Any] = None

    # keep pytest from collecting this as a test class
    __test__ = False

    @property
    def passed(self) -> bool:
        return self.status == PASS

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
