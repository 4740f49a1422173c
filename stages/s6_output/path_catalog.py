"""Placeholder path catalogue

Lists every path the processed records produce so that template authors
can see which placeholders are available.
"""

from pathlib import Path
from typing import Dict

import pandas as pd

from core.models import Scalar, ValueMap

COLUMNS = ["placeholder", "path", "records", "example"]


class PathCatalog:
    """Accumulates flattened records and reports the union of their paths"""

    def __init__(self):
        self._records: Dict[str, int] = {}
        self._examples: Dict[str, Scalar] = {}
        self.record_count = 0

    def add(self, record_name: str, values: ValueMap) -> None:
        self.record_count += 1
        for path, value in values.items():
            self._records[path] = self._records.get(path, 0) + 1
            self._examples.setdefault(path, value)

    def __len__(self) -> int:
        return len(self._records)

    def to_frame(self) -> pd.DataFrame:
        rows = [
            {
                "placeholder": "{{" + path + "}}",
                "path": path,
                "records": count,
                "example": self._examples[path],
            }
            for path, count in self._records.items()
        ]
        df = pd.DataFrame(rows, columns=COLUMNS)
        return df.sort_values("path", kind="stable").reset_index(drop=True)

    def write_csv(self, file_path) -> Path:
        path = Path(file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        self.to_frame().to_csv(path, index=False)
        return path
