"""Parameter learning from observation streams."""

from probnet.learning.distributions import (
    learn_conditional_distributions,
    learn_distributions,
)

__all__ = ["learn_conditional_distributions", "learn_distributions"]
