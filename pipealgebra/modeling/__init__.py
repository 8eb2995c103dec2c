from .base import BaseModelApplier, BaseModelCalculator, StatefulEstimator
from .cross_validation import CrossValidator, CVState, cross_validate
from .ensemble import (
    BaggingEnsemble,
    BestLearner,
    EnsembleNode,
    SelectionPolicy,
    StackEnsemble,
    VoteEnsemble,
    majority_vote,
)
from .sklearn_wrapper import SklearnApplier, SklearnCalculator, sklearn_learner
