"""Schemas for cross-validation results."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import List, Optional

from pydantic import BaseModel, Field


class ScoreRecord(BaseModel):
    """Outcome of a single fold."""

    fold: int
    score: Optional[float] = None
    failed: bool = False
    error: Optional[str] = None
    train_size: int = 0
    test_size: int = 0


class CrossValidationSummary(BaseModel):
    """Aggregate over the successful folds."""

    metric: str
    mean: float
    std: float
    fold_count: int
    failed_count: int


class CrossValidationResult(BaseModel):
    """Aggregated summary plus per-fold records."""

    generated_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    expression: Optional[str] = None
    summary: CrossValidationSummary
    folds: List[ScoreRecord] = Field(default_factory=list)

    @property
    def mean(self) -> float:
        return self.summary.mean

    @property
    def std(self) -> float:
        return self.summary.std

    @property
    def fold_count(self) -> int:
        return self.summary.fold_count

    @property
    def failed_count(self) -> int:
        return self.summary.failed_count

    def scores(self) -> List[Optional[float]]:
        """Per-fold scores in fold order (None for failed folds)."""
        return [record.score for record in self.folds]
