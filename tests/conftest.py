"""Pytest fixtures for pipealgebra tests."""

import numpy as np
import pandas as pd
import pytest
from sklearn.datasets import make_classification

from pipealgebra.config import get_settings
from pipealgebra.registry import default_registry


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are cached per process; reset so monkeypatched env vars apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def registry():
    return default_registry()


@pytest.fixture
def mixed_data():
    """Two categorical and three numeric features with a learnable binary target."""
    np.random.seed(42)
    n_samples = 120
    X = pd.DataFrame({
        "color": np.random.choice(["red", "green", "blue"], n_samples),
        "size": np.random.choice(["S", "M", "L", "XL"], n_samples),
        "age": np.random.normal(40, 10, n_samples),
        "income": np.random.normal(50000, 12000, n_samples),
        "score": np.random.normal(0, 1, n_samples),
    })
    y = ((X["income"] > 50000) | (X["color"] == "red")).astype(int)
    return X, y


@pytest.fixture
def numeric_data():
    """Numeric-only classification data."""
    X, y = make_classification(
        n_samples=150, n_features=6, n_informative=4,
        n_redundant=1, random_state=42,
    )
    return pd.DataFrame(X, columns=[f"f{i}" for i in range(6)]), pd.Series(y, name="target")


@pytest.fixture
def string_label_data(numeric_data):
    """Same features as numeric_data with string class labels."""
    X, y = numeric_data
    return X, y.map({0: "no", 1: "yes"})
