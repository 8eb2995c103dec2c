"""Named component registry used to resolve expression identifiers."""

import logging
import re
from typing import Dict, List, Optional

from pydantic import BaseModel

from .exceptions import UnknownComponentError
from .modeling.base import StatefulEstimator
from .modeling.classification import (
    AdaBoostClassifierApplier,
    AdaBoostClassifierCalculator,
    DecisionTreeClassifierApplier,
    DecisionTreeClassifierCalculator,
    GaussianNBApplier,
    GaussianNBCalculator,
    GradientBoostingClassifierApplier,
    GradientBoostingClassifierCalculator,
    KNeighborsClassifierApplier,
    KNeighborsClassifierCalculator,
    LogisticRegressionApplier,
    LogisticRegressionCalculator,
    RandomForestClassifierApplier,
    RandomForestClassifierCalculator,
    SVCApplier,
    SVCCalculator,
)
from .modeling.regression import (
    RandomForestRegressorApplier,
    RandomForestRegressorCalculator,
    RidgeRegressionApplier,
    RidgeRegressionCalculator,
)
from .nodes.base import Node
from .preprocessing.base import StatefulTransformer
from .preprocessing.decomposition import (
    FactorAnalysisApplier,
    FactorAnalysisCalculator,
    FastICAApplier,
    FastICACalculator,
    PCAApplier,
    PCACalculator,
)
from .preprocessing.encoding import OneHotEncoderApplier, OneHotEncoderCalculator
from .preprocessing.imputation import SimpleImputerApplier, SimpleImputerCalculator
from .preprocessing.scaling import (
    MinMaxScalerApplier,
    MinMaxScalerCalculator,
    RobustScalerApplier,
    RobustScalerCalculator,
    StandardScalerApplier,
    StandardScalerCalculator,
)
from .preprocessing.selection import (
    CategoricalSelectorApplier,
    CategoricalSelectorCalculator,
    CatNumDiscriminatorApplier,
    CatNumDiscriminatorCalculator,
    NumericSelectorApplier,
    NumericSelectorCalculator,
    PassthroughApplier,
    PassthroughCalculator,
)

logger = logging.getLogger(__name__)

_NAME_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ComponentInfo(BaseModel):
    name: str
    kind: str
    category: str = "custom"
    description: str = ""


class ComponentRegistry:
    """
    Maps identifiers to node prototypes.

    The registry never hands out a prototype for execution: ``create`` returns a
    fresh clone renamed to the identifier, so two occurrences of the same name in
    one expression never share state.
    """

    def __init__(self):
        self._prototypes: Dict[str, Node] = {}
        self._metadata: Dict[str, ComponentInfo] = {}

    def register(
        self,
        name: str,
        node: Node,
        category: str = "custom",
        description: str = "",
        overwrite: bool = True,
    ) -> Node:
        if not _NAME_PATTERN.match(name):
            raise ValueError(f"Invalid component name '{name}': must match {_NAME_PATTERN.pattern}")
        if not isinstance(node, Node):
            raise TypeError(f"Component '{name}' must be a Node, got {type(node).__name__}")
        if name in self._prototypes and not overwrite:
            raise ValueError(f"Component '{name}' is already registered")
        if name in self._prototypes:
            logger.debug(f"Replacing registered component '{name}'")

        self._prototypes[name] = node
        self._metadata[name] = ComponentInfo(
            name=name,
            kind=type(node).__name__,
            category=category,
            description=description,
        )
        return node

    def unregister(self, name: str) -> None:
        if name not in self._prototypes:
            raise UnknownComponentError([name], self.names())
        del self._prototypes[name]
        del self._metadata[name]

    def get(self, name: str) -> Node:
        """The registered prototype itself (not a copy)."""
        try:
            return self._prototypes[name]
        except KeyError:
            raise UnknownComponentError([name], self.names()) from None

    def create(self, name: str) -> Node:
        """An unfitted clone of the prototype, named after ``name``."""
        node = self.get(name).clone()
        node.name = name
        return node

    def describe(self, name: Optional[str] = None) -> List[ComponentInfo]:
        if name is not None:
            self.get(name)
            return [self._metadata[name]]
        return [self._metadata[n] for n in self.names()]

    def names(self) -> List[str]:
        return sorted(self._prototypes)

    def copy(self) -> "ComponentRegistry":
        other = ComponentRegistry()
        other._prototypes = dict(self._prototypes)
        other._metadata = dict(self._metadata)
        return other

    def __contains__(self, name: object) -> bool:
        return name in self._prototypes

    def __len__(self) -> int:
        return len(self._prototypes)


def _transformer(name: str, calculator, applier, config=None) -> StatefulTransformer:
    return StatefulTransformer(name=name, calculator=calculator, applier=applier, config=config)


def _learner(name: str, calculator, applier) -> StatefulEstimator:
    return StatefulEstimator(name=name, calculator=calculator, applier=applier)


def default_registry() -> ComponentRegistry:
    """A new registry pre-loaded with the built-in selectors, transformers and learners."""
    registry = ComponentRegistry()

    # --- Feature selectors ---
    registry.register(
        "catf",
        _transformer("catf", CategoricalSelectorCalculator(), CategoricalSelectorApplier()),
        category="selector",
        description="Keep categorical (object, category, bool) columns.",
    )
    registry.register(
        "numf",
        _transformer("numf", NumericSelectorCalculator(), NumericSelectorApplier()),
        category="selector",
        description="Keep numeric columns.",
    )
    registry.register(
        "catnum",
        _transformer("catnum", CatNumDiscriminatorCalculator(), CatNumDiscriminatorApplier()),
        category="selector",
        description="Recast low-cardinality numeric columns as categorical labels.",
    )

    # --- Transformers ---
    transformers = [
        ("ohe", OneHotEncoderCalculator(), OneHotEncoderApplier(), "One-hot encode categorical columns."),
        ("pca", PCACalculator(), PCAApplier(), "Principal component projection of numeric columns."),
        ("ica", FastICACalculator(), FastICAApplier(), "Independent component projection of numeric columns."),
        ("fa", FactorAnalysisCalculator(), FactorAnalysisApplier(), "Factor analysis of numeric columns."),
        ("stdsc", StandardScalerCalculator(), StandardScalerApplier(), "Standardize numeric columns."),
        ("minmax", MinMaxScalerCalculator(), MinMaxScalerApplier(), "Scale numeric columns to [0, 1]."),
        ("robust", RobustScalerCalculator(), RobustScalerApplier(), "Scale numeric columns with median/IQR."),
        ("imputer", SimpleImputerCalculator(), SimpleImputerApplier(), "Fill missing numeric values."),
        ("noop", PassthroughCalculator(), PassthroughApplier(), "Identity transform."),
    ]
    for name, calculator, applier, description in transformers:
        registry.register(
            name,
            _transformer(name, calculator, applier),
            category="transformer",
            description=description,
        )

    # --- Learners ---
    learners = [
        ("rf", RandomForestClassifierCalculator(), RandomForestClassifierApplier(), "Random forest classifier."),
        ("ada", AdaBoostClassifierCalculator(), AdaBoostClassifierApplier(), "AdaBoost classifier."),
        ("gb", GradientBoostingClassifierCalculator(), GradientBoostingClassifierApplier(), "Gradient boosting classifier."),
        ("lr", LogisticRegressionCalculator(), LogisticRegressionApplier(), "Logistic regression."),
        ("svc", SVCCalculator(), SVCApplier(), "Support vector classifier."),
        ("knn", KNeighborsClassifierCalculator(), KNeighborsClassifierApplier(), "k-nearest neighbours classifier."),
        ("dt", DecisionTreeClassifierCalculator(), DecisionTreeClassifierApplier(), "Decision tree classifier."),
        ("nb", GaussianNBCalculator(), GaussianNBApplier(), "Gaussian naive Bayes."),
        ("rfr", RandomForestRegressorCalculator(), RandomForestRegressorApplier(), "Random forest regressor."),
        ("ridge", RidgeRegressionCalculator(), RidgeRegressionApplier(), "Ridge regression."),
    ]
    for name, calculator, applier, description in learners:
        registry.register(
            name,
            _learner(name, calculator, applier),
            category=calculator.problem_type,
            description=description,
        )

    return registry
