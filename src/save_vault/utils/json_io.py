"""Atomic JSON persistence helpers built on orjson."""

import tempfile
from pathlib import Path
from typing import Any

import orjson

from save_vault.constants import JSON_TMP_PREFIX, JSON_TMP_SUFFIX


def read_json(path: Path) -> Any:
    """Read and decode a JSON file.

    Raises:
        OSError: If the file cannot be read
        orjson.JSONDecodeError: If the content is not valid JSON

    """
    with path.open("rb") as f:
        return orjson.loads(f.read())


def write_json_atomic(path: Path, data: Any) -> None:
    """Write JSON to path atomically.

    The document is written to a hidden temporary file in the same
    directory and moved over the target, so readers see either the old or
    the new document and never a partial one.

    Raises:
        OSError: If writing or replacing fails

    """
    path.parent.mkdir(parents=True, exist_ok=True)

    with tempfile.NamedTemporaryFile(
        mode="wb",
        dir=path.parent,
        prefix=f"{JSON_TMP_PREFIX}{path.name}_",
        suffix=JSON_TMP_SUFFIX,
        delete=False,
    ) as tmp_file:
        temp_path = Path(tmp_file.name)
        try:
            tmp_file.write(
                orjson.dumps(
                    data,
                    option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS,
                )
            )
            tmp_file.flush()
        except BaseException:
            tmp_file.close()
            temp_path.unlink(missing_ok=True)
            raise

    try:
        temp_path.replace(path)
    except OSError:
        temp_path.unlink(missing_ok=True)
        raise
