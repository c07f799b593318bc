"""Base scorer abstract class."""

from abc import ABC, abstractmethod

import numpy as np


class BaseScorer(ABC):
    """Opaque probability function over a fixed-length feature vector."""

    scorer_type: str = ""

    @abstractmethod
    def score(self, features: np.ndarray) -> float:
        """Return P(High) in [0, 1] for one slot's feature vector.

        Args:
            features: Array of shape (FEATURE_DIM,), in FEATURE_NAMES order
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} type={self.scorer_type}>"
