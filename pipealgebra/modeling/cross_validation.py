"""K-fold cross-validation over compiled node trees."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, List, Optional

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.model_selection import KFold, StratifiedKFold

from ..config import get_settings
from ..data.dataset import Fold, as_frame, as_target
from ..exceptions import AllFoldsFailedError, ShapeMismatchError
from ..nodes.base import Node
from .evaluation.metrics import Metric, get_metric
from .evaluation.schemas import CrossValidationResult, CrossValidationSummary, ScoreRecord

logger = logging.getLogger(__name__)


class CVState(str, Enum):
    IDLE = "idle"
    SPLITTING = "splitting"
    FIT_TRAIN = "fit_train"
    PREDICT_TEST = "predict_test"
    SCORE = "score"
    AGGREGATING = "aggregating"
    DONE = "done"
    FAILED = "failed"


def _aggregate_scores(records: List[ScoreRecord], metric_name: str) -> CrossValidationSummary:
    """Mean and std over the successful folds."""
    values = [r.score for r in records if not r.failed and r.score is not None]
    return CrossValidationSummary(
        metric=metric_name,
        mean=float(np.mean(values)),
        std=float(np.std(values)),
        fold_count=len(records),
        failed_count=sum(1 for r in records if r.failed),
    )


def _run_fold(
    node: Node,
    X: pd.DataFrame,
    y: pd.Series,
    fold: Fold,
    metric: Metric,
    on_state: Optional[Callable[[CVState], None]] = None,
) -> ScoreRecord:
    """
    Fit a fresh clone on the training slice and score it on the test slice.

    Any exception is recorded on the returned ScoreRecord instead of propagating,
    so one bad fold cannot abort the others.
    """
    notify = on_state or (lambda state: None)
    record = ScoreRecord(fold=fold.index + 1, train_size=fold.train_size, test_size=fold.test_size)

    try:
        model = node.clone()

        notify(CVState.FIT_TRAIN)
        model.fit(X.iloc[fold.train_index], y.iloc[fold.train_index])

        notify(CVState.PREDICT_TEST)
        output = model.transform(X.iloc[fold.test_index])

        notify(CVState.SCORE)
        score = metric(y.iloc[fold.test_index], output.iloc[:, 0])
        if not np.isfinite(score):
            raise ValueError(f"Metric '{metric.name}' returned a non-finite score ({score})")
        record.score = score
    except Exception as e:
        logger.warning(f"Fold {fold.index + 1} failed: {type(e).__name__}: {e}")
        record.failed = True
        record.error = f"{type(e).__name__}: {e}"

    return record


class CrossValidator:
    """
    Drives k-fold cross-validation of a node tree.

    States: IDLE -> SPLITTING -> (FIT_TRAIN -> PREDICT_TEST -> SCORE) x k
    -> AGGREGATING -> DONE, or FAILED when every fold failed. Each fold works on
    its own clone of the tree. With ``n_jobs != 1`` folds run on joblib workers
    and only the outer states are tracked.
    """

    def __init__(
        self,
        metric: Optional[str] = None,
        n_folds: Optional[int] = None,
        strategy: Optional[str] = None,
        shuffle: Optional[bool] = None,
        random_state: Optional[int] = None,
        n_jobs: Optional[int] = None,
        progress_callback: Optional[Callable[[int, int], None]] = None,
    ):
        settings = get_settings()
        self.metric = get_metric(metric or settings.DEFAULT_METRIC)
        self.n_folds = n_folds if n_folds is not None else settings.CV_FOLDS
        self.strategy = strategy or settings.CV_STRATEGY
        self.shuffle = settings.CV_SHUFFLE if shuffle is None else shuffle
        self.random_state = settings.RANDOM_STATE if random_state is None else random_state
        self.n_jobs = settings.N_JOBS if n_jobs is None else n_jobs
        self.progress_callback = progress_callback

        if self.n_folds < 2:
            raise ValueError(f"n_folds must be at least 2, got {self.n_folds}")
        if self.strategy not in ("kfold", "stratified_kfold"):
            raise ValueError(f"Unknown cross-validation strategy: {self.strategy}")

        self.state = CVState.IDLE
        self.history: List[CVState] = [CVState.IDLE]

    def _transition(self, state: CVState) -> None:
        logger.debug(f"Cross-validation state: {self.state.value} -> {state.value}")
        self.state = state
        self.history.append(state)

    def split(self, X: pd.DataFrame, y: pd.Series) -> List[Fold]:
        """Partition row positions into k disjoint test slices."""
        n_rows = X.shape[0]
        if self.n_folds > n_rows:
            raise ShapeMismatchError(
                f"Cannot split {n_rows} rows into {self.n_folds} folds",
                {"rows": n_rows, "n_folds": self.n_folds},
            )

        random_state = self.random_state if self.shuffle else None
        if self.strategy == "stratified_kfold":
            splitter: Any = StratifiedKFold(n_splits=self.n_folds, shuffle=self.shuffle, random_state=random_state)
        else:
            # Default: contiguous blocks unless shuffling is requested
            splitter = KFold(n_splits=self.n_folds, shuffle=self.shuffle, random_state=random_state)

        placeholder = np.zeros((n_rows, 1))
        return [
            Fold(index=i, train_index=train_idx, test_index=test_idx)
            for i, (train_idx, test_idx) in enumerate(splitter.split(placeholder, y.to_numpy()))
        ]

    def run(self, node: Node, X: Any, y: Any, expression: Optional[str] = None) -> CrossValidationResult:
        """
        Cross-validate ``node`` on (X, y).

        Returns:
            CrossValidationResult with the summary over successful folds and one
            ScoreRecord per fold.

        Raises:
            AllFoldsFailedError: if no fold produced a score.
        """
        X = as_frame(X)
        y = as_target(y, X)
        if y is None:
            raise ShapeMismatchError("Cross-validation requires a target", {"feature_rows": X.shape[0]})

        self.state = CVState.IDLE
        self.history = [CVState.IDLE]

        self._transition(CVState.SPLITTING)
        folds = self.split(X, y)
        logger.info(
            f"Cross-validating {node!r} with {len(folds)} folds "
            f"({self.strategy}, metric={self.metric.name})"
        )

        if self.n_jobs == 1:
            records = []
            for fold in folds:
                if self.progress_callback:
                    self.progress_callback(fold.index + 1, len(folds))
                records.append(_run_fold(node, X, y, fold, self.metric, on_state=self._transition))
        else:
            records = Parallel(n_jobs=self.n_jobs)(
                delayed(_run_fold)(node, X, y, fold, self.metric) for fold in folds
            )

        self._transition(CVState.AGGREGATING)
        if all(r.failed for r in records):
            self._transition(CVState.FAILED)
            raise AllFoldsFailedError(records)

        summary = _aggregate_scores(records, self.metric.name)
        self._transition(CVState.DONE)
        logger.info(
            f"Cross-validation done: {self.metric.name} mean={summary.mean:.4f} std={summary.std:.4f} "
            f"failed={summary.failed_count}/{summary.fold_count}"
        )
        return CrossValidationResult(expression=expression, summary=summary, folds=list(records))


def cross_validate(
    node: Node,
    X: Any,
    y: Any,
    metric: Optional[str] = None,
    n_folds: Optional[int] = None,
    **kwargs: Any,
) -> CrossValidationResult:
    """Convenience wrapper around ``CrossValidator(...).run(node, X, y)``."""
    return CrossValidator(metric=metric, n_folds=n_folds, **kwargs).run(node, X, y)
