"""
File persistence (CSV and Parquet) for benchmark results.
"""

import os
import logging
from typing import Any, Dict, List

import pandas as pd

from persistence.base import BufferedPersistence

logger = logging.getLogger(__name__)


class CsvPersistence(BufferedPersistence):
    """Appends result rows to a CSV file.

    Rows are buffered in memory and written on close(). Several reporting
    passes of one run share the same file; the header is only written when
    the file is created.

    Attributes:
        output_dir: Directory where the CSV file is written
        filepath: Full path of the CSV file
    """

    extension = "csv"

    def __init__(self, output_dir: str = "results", run_id: str = "benchmark"):
        """Initialize file persistence.

        Args:
            output_dir: Directory for result files (default: 'results')
            run_id: File name stem shared by all passes of one run
        """
        super().__init__()
        self.output_dir: str = output_dir
        self.filepath: str = os.path.join(output_dir, f"{run_id}.{self.extension}")

        # Ensure output directory exists
        os.makedirs(output_dir, exist_ok=True)

    def _flush(self, rows: List[Dict[str, Any]]) -> None:
        logger.info(f"Saving {len(rows)} results to {self.filepath}")
        df = pd.DataFrame(rows, columns=['category', 'metric', 'value', 'ts'])
        try:
            self._write(df)
        except OSError as e:
            logger.error(f"Failed to write results to {self.filepath}: {e}")
            raise

    def _write(self, df: pd.DataFrame) -> None:
        write_header = not os.path.exists(self.filepath)
        df.to_csv(self.filepath, mode='a', header=write_header, index=False)


class ParquetPersistence(CsvPersistence):
    """Result rows in a Parquet file, rewritten with earlier rows on each close()."""

    extension = "parquet"

    def _write(self, df: pd.DataFrame) -> None:
        if os.path.exists(self.filepath):
            df = pd.concat([pd.read_parquet(self.filepath), df], ignore_index=True)
        df.to_parquet(self.filepath, index=False)
