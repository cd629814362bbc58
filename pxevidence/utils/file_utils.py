import logging
import uuid
from pathlib import Path
from typing import Union

import pyarrow as pa
import pyarrow.parquet as pq

logger = logging.getLogger(__name__)


def create_uuid_filename(prefix: str, extension: str) -> str:
    """Build a unique output file name such as ``prefix-<uuid>.psm.parquet``."""
    return f"{prefix}-{uuid.uuid4()}{extension}"


def check_directory(folder: Union[Path, str]) -> Path:
    """Create the output folder if it does not exist and return it."""
    path = Path(folder)
    path.mkdir(parents=True, exist_ok=True)
    return path


def write_parquet(table: pa.Table, output_path: Union[Path, str]) -> Path:
    """Write an Arrow table to parquet, returning the written path."""
    output_path = Path(output_path)
    pq.write_table(table, str(output_path))
    logger.debug(f"Wrote {table.num_rows:,} rows to {output_path}")
    return output_path
