from __future__ import annotations

import io
import sys
from pathlib import Path
from typing import Dict, List, Tuple

import pytest

BASE_DIR = Path(__file__).resolve().parent.parent
SRC_DIR = (BASE_DIR / "src").resolve()

if str(BASE_DIR) not in sys.path:
    sys.path.append(str(BASE_DIR))
if str(SRC_DIR) not in sys.path:
    sys.path.append(str(SRC_DIR))

from realtype.report import Reporter


@pytest.fixture
def reporter() -> Tuple[Reporter, io.StringIO]:
    """Reporter writing into an in-memory buffer."""
    out = io.StringIO()
    return Reporter(out), out


@pytest.fixture
def no_py_trace(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("REALTYPE_DEBUG_PY_TRACE", raising=False)


def pytest_collection_modifyitems(
    session: pytest.Session,
    config: pytest.Config,
    items: List[pytest.Item],
) -> None:
    """Fail fast if pytest ever generates duplicate node IDs."""
    del session
    del config

    seen: Dict[str, int] = {}
    duplicates: List[str] = []
    for item in items:
        nodeid = item.nodeid
        if nodeid in seen:
            duplicates.append(nodeid)
            continue
        seen[nodeid] = 1

    if not duplicates:
        return

    lines = "\n".join(f"- {nodeid}" for nodeid in sorted(set(duplicates)))
    raise pytest.UsageError(
        "Duplicate pytest nodeids detected during collection:\n" f"{lines}"
    )
