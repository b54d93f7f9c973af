import logging
import random

from . import logging_config  # noqa: F401  (NullHandler on the patientflow logger)

logger = logging.getLogger(__name__)


class Distribution:
    """Helper to generate values based on a discrete probability distribution (PMF)."""
    def __init__(self, pmf_dict, rng=None):
        """
        pmf_dict: Dict {Value: Probability}
        e.g., {0: 0.5, 1: 0.3, 2: 0.2}
        rng: random.Random instance (defaults to the module-level generator)
        """
        if not pmf_dict:
            raise ValueError("PMF must not be empty")
        self.values = list(pmf_dict.keys())
        self.probabilities = list(pmf_dict.values())
        self.rng = rng or random

        # Normalize if needed (floating point issues)
        total = sum(self.probabilities)
        if total <= 0:
            raise ValueError(f"PMF must have positive total weight, got {total}")
        if abs(total - 1.0) > 0.01:
            logger.warning("PMF sums to %s, normalizing...", total)
            self.probabilities = [p/total for p in self.probabilities]

    def sample(self):
        """Return a value sampled from the distribution."""
        return self.rng.choices(self.values, weights=self.probabilities, k=1)[0]
