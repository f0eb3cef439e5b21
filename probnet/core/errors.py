"""Exception types raised by ProbNet.

All errors derive from :class:`ProbNetError` and additionally from the
closest built-in exception, so callers can catch either.
"""


class ProbNetError(Exception):
    """Base class for all ProbNet errors."""


class UnsupportedOperationError(ProbNetError, NotImplementedError):
    """Raised by operations that are declared but not supported.

    Sequential structure generation, structure learning and single-query
    sampling on a :class:`~probnet.networks.dag.BayesianNetwork` raise
    this instead of returning a partial or empty result.
    """


class LearningError(ProbNetError, ValueError):
    """A conditional distribution could not be learned from the data."""


class MissingDistributionError(ProbNetError, KeyError):
    """A CPT has no distribution for a requested parent instantiation."""

    def __str__(self) -> str:
        # KeyError quotes its argument; keep the message readable.
        return str(self.args[0]) if self.args else ""


class SamplingError(ProbNetError, RuntimeError):
    """No value of a variable has non-zero probability given its blanket."""


class InconsistentOrderingError(ProbNetError, AssertionError):
    """A topological ordering violated the ancestor/descendant order.

    This signals a broken invariant upstream (usually a cycle) and is not
    meant to be recovered from.
    """
