"""Classification learners (``rf``, ``ada``, ``gb``, ``lr``, ``svc``, ``knn``, ``dt``, ``nb``)."""

from sklearn.ensemble import AdaBoostClassifier, GradientBoostingClassifier, RandomForestClassifier
from sklearn.linear_model import LogisticRegression
from sklearn.naive_bayes import GaussianNB
from sklearn.neighbors import KNeighborsClassifier
from sklearn.svm import SVC
from sklearn.tree import DecisionTreeClassifier

from .sklearn_wrapper import SklearnApplier, SklearnCalculator


# --- Random Forest ---
class RandomForestClassifierCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=RandomForestClassifier,
            default_params={"n_estimators": 50, "min_samples_leaf": 2, "random_state": 42},
            problem_type="classification",
        )


class RandomForestClassifierApplier(SklearnApplier):
    pass


# --- AdaBoost ---
class AdaBoostClassifierCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=AdaBoostClassifier,
            default_params={"n_estimators": 50, "random_state": 42},
            problem_type="classification",
        )


class AdaBoostClassifierApplier(SklearnApplier):
    pass


# --- Gradient Boosting ---
class GradientBoostingClassifierCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=GradientBoostingClassifier,
            default_params={"n_estimators": 100, "max_depth": 3, "random_state": 42},
            problem_type="classification",
        )


class GradientBoostingClassifierApplier(SklearnApplier):
    pass


# --- Logistic Regression ---
class LogisticRegressionCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=LogisticRegression,
            default_params={"max_iter": 1000},
            problem_type="classification",
        )


class LogisticRegressionApplier(SklearnApplier):
    pass


# --- Support Vector Classifier ---
class SVCCalculator(SklearnCalculator):
    def __init__(self):
        # probability=True so the node can also serve ``output="proba"``
        super().__init__(
            model_class=SVC,
            default_params={"kernel": "rbf", "probability": True, "random_state": 42},
            problem_type="classification",
        )


class SVCApplier(SklearnApplier):
    pass


# --- k-Nearest Neighbours ---
class KNeighborsClassifierCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=KNeighborsClassifier,
            default_params={"n_neighbors": 5},
            problem_type="classification",
        )


class KNeighborsClassifierApplier(SklearnApplier):
    pass


# --- Decision Tree ---
class DecisionTreeClassifierCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=DecisionTreeClassifier,
            default_params={"random_state": 42},
            problem_type="classification",
        )


class DecisionTreeClassifierApplier(SklearnApplier):
    pass


# --- Gaussian Naive Bayes ---
class GaussianNBCalculator(SklearnCalculator):
    def __init__(self):
        super().__init__(
            model_class=GaussianNB,
            default_params={},
            problem_type="classification",
        )


class GaussianNBApplier(SklearnApplier):
    pass
