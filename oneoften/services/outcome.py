import random
from typing import Optional


class OutcomeGenerator:
    """
    Fair draw of a whole number from a closed range.

    Production code draws from the operating system's entropy pool via
    ``random.SystemRandom``; any object with a ``randint`` method can be
    passed in instead (a seeded ``random.Random`` in tests).
    """

    def __init__(self, source: Optional[random.Random] = None):
        self._source = source if source is not None else random.SystemRandom()

    def draw(self, low: int, high: int) -> int:
        """Return an integer uniformly distributed over [low, high]."""
        if low > high:
            raise ValueError(f"Invalid draw range [{low}, {high}]")
        return self._source.randint(low, high)


_default_generator = OutcomeGenerator()


def get_outcome_generator() -> OutcomeGenerator:
    """FastAPI dependency; tests override it with a scripted generator."""
    return _default_generator
