"""Progress tracking"""

from abc import ABC, abstractmethod
from typing import Optional


class ProgressTracker(ABC):
    """Abstract progress tracker"""

    @abstractmethod
    def start_stage(self, stage_num: int, stage_name: str):
        """Start a stage"""
        pass

    @abstractmethod
    def complete_stage(self, stage_num: int):
        """Complete a stage"""
        pass

    @abstractmethod
    def update(self, label: str, current: int, total: int):
        """Report progress within a long-running step"""
        pass

    @abstractmethod
    def fail(self, stage_num: int, message: str):
        """Mark stage as failed"""
        pass

    @abstractmethod
    def complete(self):
        """Mark pipeline as complete"""
        pass


class ConsoleProgress(ProgressTracker):
    """Console-based progress tracker"""

    def __init__(self):
        self.stages = {
            0: "Term Directory",
            1: "Record Catalog",
            2: "Template Scan",
            3: "Record Normalization",
            4: "Path Flattening",
            5: "Sheet Population",
            6: "Workbook Output",
        }
        self.completed = set()
        self.current = None
        self._inline: Optional[str] = None

    def start_stage(self, stage_num: int, stage_name: str):
        """Start a stage"""
        self._end_inline()
        self.current = stage_num
        print(f"[◉] Stage {stage_num}: {stage_name}...")

    def complete_stage(self, stage_num: int):
        """Complete a stage"""
        self._end_inline()
        self.completed.add(stage_num)
        self.current = None
        print(f"[✓] Stage {stage_num}: {self.stages.get(stage_num, 'Unknown')} complete")

    def update(self, label: str, current: int, total: int):
        """Rewrite the current line with a percentage"""
        percent = (current * 100) // total if total else 100
        print(f"\r{label} {percent}%   ", end="", flush=True)
        self._inline = label
        if current >= total:
            self._end_inline()

    def fail(self, stage_num: int, message: str):
        """Mark stage as failed"""
        self._end_inline()
        print(f"[✗] Stage {stage_num}: {self.stages.get(stage_num, 'Unknown')} failed - {message}")

    def complete(self):
        """Mark pipeline as complete"""
        self._end_inline()
        print("\n[✓] Pipeline complete!")

    def _end_inline(self):
        if self._inline is not None:
            print()
            self._inline = None


class SilentProgress(ProgressTracker):
    """Tracker that prints nothing (quiet mode, tests)"""

    def start_stage(self, stage_num: int, stage_name: str):
        pass

    def complete_stage(self, stage_num: int):
        pass

    def update(self, label: str, current: int, total: int):
        pass

    def fail(self, stage_num: int, message: str):
        pass

    def complete(self):
        pass
