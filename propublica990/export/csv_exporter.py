# propublica990/export/csv_exporter.py

import csv
import logging
from pathlib import Path
from typing import Any, List, Sequence

import pandas as pd

logger = logging.getLogger(__name__)


class CSVExporter:
    @staticmethod
    def to_frame(header: Sequence[str], rows: List[List[Any]]) -> pd.DataFrame:
        # object dtype keeps ints as ints next to empty cells
        return pd.DataFrame(rows, columns=list(header), dtype=object)

    @staticmethod
    def export(df: pd.DataFrame, filename: str, output_dir: str = ".") -> Path:
        output_dir_path = Path(output_dir)
        output_dir_path.mkdir(parents=True, exist_ok=True)

        full_path = output_dir_path / filename
        # Quote everything: org names carry commas
        df.to_csv(full_path, index=False, quoting=csv.QUOTE_ALL, encoding="utf-8")
        logger.info("Saved %d rows to %s", len(df), full_path)
        return full_path
