"""Root conftest.py for test configuration.

Ensures local src/ directory takes priority over any installed packages.
"""

import sys
from pathlib import Path

import pytest

# Insert local src directory at the beginning of sys.path
# This ensures that the local apexlog package is used, not any installed one
_src_dir = Path(__file__).parent.parent / "src"
if str(_src_dir) not in sys.path:
    sys.path.insert(0, str(_src_dir))

# Force reimport of apexlog modules if already imported
for module_name in list(sys.modules.keys()):
    if module_name.startswith("apexlog"):
        del sys.modules[module_name]


SAMPLE_LOG = """\
59.0 APEX_CODE,FINEST;APEX_PROFILING,INFO;DB,INFO
Execute Anonymous: new Foo().run();
12:00:00.1 (100)|EXECUTION_STARTED
12:00:00.1 (110)|CODE_UNIT_STARTED|[EXTERNAL]|execute_anonymous_apex
12:00:00.1 (120)|METHOD_ENTRY|[1]|01p000000000001|Foo.run()
12:00:00.1 (130)|SOQL_EXECUTE_BEGIN|[2]|Aggregations:0|SELECT Id FROM Account
12:00:00.1 (150)|SOQL_EXECUTE_END|[2]|Rows:5
12:00:00.1 (160)|DML_BEGIN|[3]|Op:Insert|Type:Account|Rows:2
12:00:00.1 (180)|DML_END|[3]
12:00:00.1 (190)|USER_DEBUG|[4]|DEBUG|first
second
12:00:00.1 (200)|METHOD_EXIT|[1]|01p000000000001|Foo.run()
12:00:00.1 (210)|CUMULATIVE_LIMIT_USAGE
12:00:00.1 (211)|LIMIT_USAGE_FOR_NS|(default)|
  Number of SOQL queries: 1 out of 100
  Number of DML statements: 1 out of 150
12:00:00.1 (212)|CUMULATIVE_LIMIT_USAGE_END
12:00:00.1 (220)|CODE_UNIT_FINISHED|execute_anonymous_apex
12:00:00.1 (230)|EXECUTION_FINISHED
"""
"""A small well-formed anonymous Apex log: one method doing a query and an insert."""


@pytest.fixture
def sample_log_text() -> str:
    return SAMPLE_LOG


@pytest.fixture
def sample_log_file(tmp_path: Path) -> Path:
    path = tmp_path / "apex.log"
    path.write_text(SAMPLE_LOG, encoding="utf-8")
    return path
