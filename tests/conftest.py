import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest


@pytest.fixture
def joined() -> pd.DataFrame:
    """Four joined abstracts, two per decision, with different lengths."""
    return pd.DataFrame(
        {
            "AbstractID": [1, 2, 3, 4],
            "Title": ["Shiny dashboards", "Tidy models", "Spatial stats", "Package tests"],
            "TitleShort": ["Shiny dashboard", "Tidy models", "Spatial stats", "Package tests"],
            "Abstract": [
                "R is great for data science and R is fun",
                "We fit tidy models in R with 3 recipes and 2.5 workflows for reproducible modelling",
                "Spatial statistics with sf and terra for raster data",
                "Testing packages with testthat is great practice for data pipelines",
            ],
            "Accepted": ["yes", "yes", "no", "no"],
        }
    )
