"""
Ensemble meta-learners.

Every ensemble is itself a Node: it takes child learner nodes, fits them on the
same data and combines their predictions into a single column named after the
ensemble. Children may be any node (including other ensembles), so ensembles of
ensembles need no special handling.
"""

import logging
from collections import Counter
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
import pandas as pd
from sklearn.model_selection import train_test_split

from ..config import get_settings
from ..exceptions import AllFoldsFailedError, PipelineAlgebraError, ShapeMismatchError
from ..nodes.base import Node
from ..utils import make_unique_columns
from .base import StatefulEstimator, predict_labels
from .classification import RandomForestClassifierApplier, RandomForestClassifierCalculator
from .cross_validation import CrossValidator
from .evaluation.metrics import get_metric

logger = logging.getLogger(__name__)


def majority_vote(predictions: pd.DataFrame) -> pd.Series:
    """
    Row-wise majority over prediction columns.

    Ties go to the tied label predicted by the left-most column.
    """
    winners = []
    for row in predictions.itertuples(index=False, name=None):
        counts = Counter(row)
        best = max(counts.values())
        winners.append(next(label for label in row if counts[label] == best))
    return pd.Series(winners, index=predictions.index).infer_objects()


class EnsembleNode(Node):
    """Common plumbing for ensembles over two or more child nodes."""

    strategy = "ensemble"

    def __init__(self, learners: Sequence[Node], name: Optional[str] = None):
        super().__init__(name or self.strategy)
        learners = list(learners)
        if len(learners) < 2:
            raise ValueError(f"{type(self).__name__} needs at least 2 learners, got {len(learners)}")
        for learner in learners:
            if not isinstance(learner, Node):
                raise TypeError(f"Ensemble members must be Nodes, got {type(learner).__name__}")
        self.children: List[Node] = learners

    def _child_predictions(self, X: pd.DataFrame) -> pd.DataFrame:
        preds = pd.concat(
            [predict_labels(child, X) for child in self.children],
            axis=1,
        )
        preds.columns = make_unique_columns([child.name for child in self.children])
        return preds

    def _as_output(self, values: pd.Series, X: pd.DataFrame) -> pd.DataFrame:
        return pd.DataFrame({self.name: values.to_numpy()}, index=X.index)

    @property
    def is_fitted(self) -> bool:
        return super().is_fitted and all(c.is_fitted for c in self.children)

    @property
    def structure(self) -> Tuple[Any, ...]:
        return ("ensemble", self.strategy, self.name, tuple(c.structure for c in self.children))

    def __repr__(self) -> str:
        inner = ", ".join(repr(c) for c in self.children)
        return f"{type(self).__name__}([{inner}])"


# --- Vote ---
class VoteEnsemble(EnsembleNode):
    """Majority vote over the children's predictions."""

    strategy = "vote"

    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        for child in self.children:
            child.fit(X, y)

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        return self._as_output(majority_vote(self._child_predictions(X)), X)

    def clone(self) -> "VoteEnsemble":
        return VoteEnsemble([c.clone() for c in self.children], name=self.name)


# --- Stack ---
class StackEnsemble(EnsembleNode):
    """
    Stacked generalisation.

    The training rows are split: children fit on one part, and their predictions
    on the held-out part (optionally alongside the original features) train the
    meta-learner. Non-numeric predictions are ordinal-encoded against the class
    labels seen during fit; unseen labels map to -1.
    """

    strategy = "stack"

    def __init__(
        self,
        learners: Sequence[Node],
        stacker: Optional[Node] = None,
        name: Optional[str] = None,
        stacker_training_proportion: Optional[float] = None,
        keep_original_features: bool = False,
        stratify: bool = False,
        random_state: Optional[int] = None,
    ):
        super().__init__(learners, name=name)
        if stacker is None:
            stacker = StatefulEstimator(
                name="stacker",
                calculator=RandomForestClassifierCalculator(),
                applier=RandomForestClassifierApplier(),
            )
        self.stacker = stacker
        self.stacker_training_proportion = stacker_training_proportion
        self.keep_original_features = keep_original_features
        self.stratify = stratify
        self.random_state = random_state
        self.label_codes_: Optional[Dict[Any, int]] = None

    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        if y is None:
            raise ShapeMismatchError(f"StackEnsemble '{self.name}' requires a target", {"node": self.name})

        settings = get_settings()
        proportion = self.stacker_training_proportion or settings.STACKER_TRAINING_PROPORTION
        random_state = settings.RANDOM_STATE if self.random_state is None else self.random_state

        positions = np.arange(X.shape[0])
        learner_idx, stacker_idx = train_test_split(
            positions,
            test_size=proportion,
            random_state=random_state,
            stratify=y.to_numpy() if self.stratify else None,
        )

        self.label_codes_ = {label: code for code, label in enumerate(sorted(y.unique(), key=str))}

        for child in self.children:
            child.fit(X.iloc[learner_idx], y.iloc[learner_idx])

        meta_X = self._meta_features(X.iloc[stacker_idx])
        logger.debug(f"StackEnsemble '{self.name}': stacker trained on {meta_X.shape}")
        self.stacker.fit(meta_X, y.iloc[stacker_idx])

    def _meta_features(self, X: pd.DataFrame) -> pd.DataFrame:
        preds = self._child_predictions(X)
        codes = self.label_codes_ or {}
        for col in preds.columns:
            if not pd.api.types.is_numeric_dtype(preds[col]):
                preds[col] = preds[col].map(codes).fillna(-1).astype(int)

        if self.keep_original_features:
            return pd.concat([X, preds.add_prefix("stack_")], axis=1)
        return preds

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        return self._as_output(predict_labels(self.stacker, self._meta_features(X)), X)

    @property
    def is_fitted(self) -> bool:
        return super().is_fitted and self.stacker.is_fitted

    def clone(self) -> "StackEnsemble":
        return StackEnsemble(
            [c.clone() for c in self.children],
            stacker=self.stacker.clone(),
            name=self.name,
            stacker_training_proportion=self.stacker_training_proportion,
            keep_original_features=self.keep_original_features,
            stratify=self.stratify,
            random_state=self.random_state,
        )

    @property
    def structure(self) -> Tuple[Any, ...]:
        return super().structure + (self.stacker.structure,)


# --- Best ---
@dataclass
class SelectionPolicy:
    """How BestLearner scores its candidates."""

    metric: Optional[str] = None
    strategy: str = "holdout"  # holdout | cv
    test_size: Optional[float] = None
    n_folds: int = 3
    stratify: bool = False
    shuffle: bool = True
    random_state: Optional[int] = None


class BestLearner(EnsembleNode):
    """
    Keeps the single best child.

    Each candidate is scored on a holdout split (or by cross-validation) according
    to the SelectionPolicy. The winner, ties going to the first candidate, is
    refit on all rows and serves every later transform.
    """

    strategy = "best"

    def __init__(
        self,
        learners: Sequence[Node],
        policy: Optional[SelectionPolicy] = None,
        name: Optional[str] = None,
    ):
        super().__init__(learners, name=name)
        self.policy = policy or SelectionPolicy()
        self.best_: Optional[Node] = None
        self.best_index_: Optional[int] = None
        self.scores_: List[Tuple[str, float]] = []

    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        if y is None:
            raise ShapeMismatchError(f"BestLearner '{self.name}' requires a target", {"node": self.name})

        settings = get_settings()
        metric = get_metric(self.policy.metric or settings.DEFAULT_METRIC)
        random_state = settings.RANDOM_STATE if self.policy.random_state is None else self.policy.random_state

        if self.policy.strategy == "holdout":
            scores = self._holdout_scores(X, y, metric, random_state)
        elif self.policy.strategy == "cv":
            scores = self._cv_scores(X, y, metric.name, random_state)
        else:
            raise ValueError(f"Unknown selection strategy: {self.policy.strategy}")

        best_index: Optional[int] = None
        for i, score in enumerate(scores):
            if not np.isfinite(score):
                continue
            if best_index is None or metric.is_better(score, scores[best_index]):
                best_index = i

        self.scores_ = [(child.name, score) for child, score in zip(self.children, scores)]
        if best_index is None:
            raise PipelineAlgebraError(
                f"BestLearner '{self.name}': no candidate produced a finite score",
                {"node": self.name, "scores": self.scores_},
            )

        self.best_index_ = best_index
        self.best_ = self.children[best_index]
        logger.info(
            f"BestLearner '{self.name}' selected '{self.best_.name}' "
            f"({metric.name}={scores[best_index]:.4f})"
        )
        self.best_.fit(X, y)

    def _holdout_scores(self, X: pd.DataFrame, y: pd.Series, metric: Any, random_state: int) -> List[float]:
        test_size = self.policy.test_size or get_settings().BEST_HOLDOUT_SIZE
        train_idx, test_idx = train_test_split(
            np.arange(X.shape[0]),
            test_size=test_size,
            shuffle=self.policy.shuffle,
            random_state=random_state if self.policy.shuffle else None,
            stratify=y.to_numpy() if self.policy.stratify else None,
        )
        scores = []
        for child in self.children:
            candidate = child.clone()
            candidate.fit(X.iloc[train_idx], y.iloc[train_idx])
            predictions = predict_labels(candidate, X.iloc[test_idx])
            scores.append(metric(y.iloc[test_idx], predictions))
        return scores

    def _cv_scores(self, X: pd.DataFrame, y: pd.Series, metric_name: str, random_state: int) -> List[float]:
        validator = CrossValidator(
            metric=metric_name,
            n_folds=self.policy.n_folds,
            strategy="stratified_kfold" if self.policy.stratify else "kfold",
            shuffle=self.policy.shuffle,
            random_state=random_state,
            n_jobs=1,
        )
        scores = []
        for child in self.children:
            try:
                scores.append(validator.run(child, X, y).summary.mean)
            except AllFoldsFailedError:
                logger.warning(f"BestLearner '{self.name}': every fold failed for '{child.name}'")
                scores.append(float("nan"))
        return scores

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        return self._as_output(predict_labels(self.best_, X), X)

    @property
    def is_fitted(self) -> bool:
        # Only the winner is refit; the losing candidates stay unfitted
        return self.input_columns_ is not None and self.best_ is not None and self.best_.is_fitted

    def clone(self) -> "BestLearner":
        return BestLearner([c.clone() for c in self.children], policy=replace(self.policy), name=self.name)


# --- Bagging ---
class BaggingEnsemble(EnsembleNode):
    """
    Bootstrap aggregation of one template learner.

    ``n_estimators`` clones are fit on bootstrap samples of ``max_samples`` x rows.
    Classification combines by majority vote, regression by the mean.
    """

    strategy = "bagging"

    def __init__(
        self,
        learner: Node,
        n_estimators: int = 10,
        max_samples: float = 1.0,
        task: str = "classification",
        random_state: Optional[int] = None,
        name: Optional[str] = None,
    ):
        if task not in ("classification", "regression"):
            raise ValueError(f"task must be 'classification' or 'regression', got '{task}'")
        if not 0.0 < max_samples <= 1.0:
            raise ValueError(f"max_samples must be in (0, 1], got {max_samples}")
        super().__init__([learner.clone() for _ in range(n_estimators)], name=name)
        self.learner = learner
        self.n_estimators = n_estimators
        self.max_samples = max_samples
        self.task = task
        self.random_state = random_state

    def _fit(self, X: pd.DataFrame, y: Optional[pd.Series]) -> None:
        if y is None:
            raise ShapeMismatchError(f"BaggingEnsemble '{self.name}' requires a target", {"node": self.name})

        seed = get_settings().RANDOM_STATE if self.random_state is None else self.random_state
        rng = np.random.RandomState(seed)
        n_rows = X.shape[0]
        n_draw = max(1, int(round(self.max_samples * n_rows)))

        for child in self.children:
            sample = rng.randint(0, n_rows, size=n_draw)
            child.fit(X.iloc[sample], y.iloc[sample])

    def _transform(self, X: pd.DataFrame) -> pd.DataFrame:
        preds = self._child_predictions(X)
        if self.task == "regression":
            return self._as_output(preds.mean(axis=1), X)
        return self._as_output(majority_vote(preds), X)

    def clone(self) -> "BaggingEnsemble":
        return BaggingEnsemble(
            self.learner.clone(),
            n_estimators=self.n_estimators,
            max_samples=self.max_samples,
            task=self.task,
            random_state=self.random_state,
            name=self.name,
        )

    @property
    def structure(self) -> Tuple[Any, ...]:
        return ("ensemble", self.strategy, self.name, self.n_estimators, self.learner.structure)
