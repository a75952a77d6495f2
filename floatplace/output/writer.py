"""
Result Writer

Serialises a ``PlacementResult`` for downstream tools (legalizers, viewers).

YAML layout (``.yaml`` / ``.yml``, the default):
```yaml
status: converged
iterations_run: 12
final_delta: 6.1e-05
energy: null
cells:
  - {id: A, x: 5.0, y: 0.0, fixed: false}
```
JSON (``.json``) uses the same structure. Text (``.txt``) is a whitespace
table of ``id x y`` lines preceded by a ``#`` header.
"""

from enum import Enum
from pathlib import Path
from typing import Optional
import json
import logging

import yaml

from ..placement.result import PlacementResult

logger = logging.getLogger(__name__)


class OutputFormat(Enum):
    YAML = "yaml"
    JSON = "json"
    TEXT = "text"


_SUFFIX_FORMATS = {
    ".yaml": OutputFormat.YAML,
    ".yml": OutputFormat.YAML,
    ".json": OutputFormat.JSON,
    ".txt": OutputFormat.TEXT,
}


def format_table(result: PlacementResult) -> str:
    """Plain text ``id x y`` table, one cell per line."""
    lines = [f"# status={result.status.value} iterations={result.iterations_run}"]
    for cell_id, (x, y) in result.positions.items():
        lines.append(f"{cell_id} {x} {y}")
    return "\n".join(lines) + "\n"


def write_result(result: PlacementResult, path: Path,
                 fmt: Optional[OutputFormat] = None) -> Path:
    """
    Write a placement result.

    Args:
        result: Result to write
        path: Destination file
        fmt: Output format; inferred from the suffix when omitted (YAML for
            unknown suffixes)

    Returns:
        The path written
    """
    path = Path(path)
    if fmt is None:
        fmt = _SUFFIX_FORMATS.get(path.suffix.lower(), OutputFormat.YAML)
    fmt = OutputFormat(fmt)

    if fmt == OutputFormat.TEXT:
        content = format_table(result)
    elif fmt == OutputFormat.JSON:
        content = json.dumps(result.to_dict(), indent=2) + "\n"
    else:
        content = yaml.dump(
            result.to_dict(),
            default_flow_style=False,
            sort_keys=False,
            allow_unicode=True,
        )

    path.write_text(content)
    logger.info("Saved placement: %s (%d cells, %s)",
                path, len(result.positions), fmt.value)
    return path
