"""
Pipeline algebra quickstart.

This script demonstrates how to:
1. Compile a pipeline from an expression.
2. Cross-validate it.
3. Train, save and reload it.
4. Make predictions.
"""

import os

import numpy as np
import pandas as pd

from pipealgebra import ExpressionPipeline, configure_logging


def create_dummy_data():
    """Create a dummy dataset for demonstration."""
    np.random.seed(42)
    n = 200
    df = pd.DataFrame(
        {
            "age": np.random.randint(18, 80, n),
            "income": np.random.normal(50000, 15000, n),
            "city": np.random.choice(["New York", "London", "Paris"], n),
        }
    )
    target = ((df["income"] > 50000) | (df["city"] == "London")).astype(int)
    return df, target


def main():
    configure_logging("INFO")

    print("1. Creating dummy data...")
    X, y = create_dummy_data()
    print(f"   Data shape: {X.shape}")

    expression = "(catf |> ohe) + (numf |> stdsc) |> rf"
    print(f"\n2. Compiling '{expression}'...")
    pipeline = ExpressionPipeline(expression)
    print("   ", pipeline.explain())

    print("\n3. Cross-validating...")
    result = pipeline.cross_validate(X, y, metric="accuracy", n_folds=5)
    print(f"   accuracy: {result.mean:.4f} +/- {result.std:.4f} ({result.failed_count} failed folds)")

    print("\n4. Training and saving to 'my_pipeline.joblib'...")
    pipeline.fit(X, y)
    pipeline.save("my_pipeline.joblib")

    print("\n5. Loading and predicting...")
    loaded = ExpressionPipeline.load("my_pipeline.joblib")
    new_data = pd.DataFrame(
        {
            "age": [25, 40],
            "income": [60000.0, 30000.0],
            "city": ["London", "Paris"],
        }
    )
    print("   Predictions:", loaded.predict(new_data).tolist())

    if os.path.exists("my_pipeline.joblib"):
        os.remove("my_pipeline.joblib")
        print("\n   (Cleaned up 'my_pipeline.joblib')")


if __name__ == "__main__":
    main()
