"""Learning conditional probability tables from observations.

:func:`learn_conditional_distributions` is the per-variable statistics
accumulator: it sweeps an observation stream once and returns one
distribution per parent instantiation seen, or ``None`` where there was
not enough data.  :func:`learn_distributions` runs it for every
variable of a network and attaches the resulting CPTs.

Missing distributions are an error; there is no smoothing or back-off.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from typing import TYPE_CHECKING, Dict, Hashable, List, Optional, Sequence, Tuple

from probnet.config import DEFAULT_CONFIG, EngineConfig
from probnet.core.errors import LearningError
from probnet.core.types import MISSING
from probnet.data.observations import ObservationSet
from probnet.distributions.conditional import ConditionalProbabilityTable, Instantiation
from probnet.distributions.discrete import DiscreteDistribution
from probnet.networks.variable import RandomVariable

if TYPE_CHECKING:
    from probnet.networks.dag import BayesianNetwork

logger = logging.getLogger(__name__)


def learn_conditional_distributions(
    variable: RandomVariable,
    parents: Sequence[RandomVariable],
    observations: ObservationSet,
    min_count: int = 1,
) -> Dict[Instantiation, Optional[DiscreteDistribution]]:
    """Estimate P(variable | parents) from one pass over *observations*.

    Rows lacking a value for any parent are skipped.  A row with all
    parent values marks that instantiation as seen; it is counted only
    if it also has a value for *variable*.  The stream is consumed from
    its current position to the end.

    Parameters
    ----------
    variable : RandomVariable
        The variable whose distributions are learned.
    parents : sequence of RandomVariable
        Its parents, in CPT key order.
    observations : ObservationSet
        Training rows.
    min_count : int
        Minimum counted rows for an instantiation to get a distribution.

    Returns
    -------
    dict
        Instantiation -> normalized distribution, or ``None`` for
        instantiations with fewer than *min_count* counted rows.
    """
    if min_count < 1:
        raise ValueError(f"min_count must be >= 1, got {min_count}")

    parent_names = [p.name for p in parents]
    counts: Dict[Instantiation, Counter] = defaultdict(Counter)

    while True:
        obs = observations.next()
        if obs is None:
            break
        instantiation = tuple(obs.value_for(name) for name in parent_names)
        if any(value is MISSING for value in instantiation):
            continue
        bucket = counts[instantiation]
        value = obs.value_for(variable.name)
        if value is not MISSING:
            bucket[value] += 1

    learned: Dict[Instantiation, Optional[DiscreteDistribution]] = {}
    for instantiation, bucket in counts.items():
        if sum(bucket.values()) < min_count:
            learned[instantiation] = None
        else:
            learned[instantiation] = DiscreteDistribution.from_counts(bucket)
    return learned


def learn_distributions(
    network: BayesianNetwork,
    observations: ObservationSet,
    min_count: Optional[int] = None,
    config: Optional[EngineConfig] = None,
) -> None:
    """Learn and attach a CPT for every variable of *network*.

    The stream is reset before each variable.  Values found in the data
    but missing from a variable's declared domain are added to it.  The
    network is only updated once every variable has been learned, so a
    failed pass leaves all CPTs and domains untouched.

    Parameters
    ----------
    network : BayesianNetwork
        Network whose structure is fixed.
    observations : ObservationSet
        Training rows.  The caller keeps ownership; the stream is not
        closed.
    min_count : int, optional
        Overrides ``config.min_count``.
    config : EngineConfig, optional
        Defaults to :data:`~probnet.config.DEFAULT_CONFIG`.

    Raises
    ------
    LearningError
        If any seen parent instantiation has no learnable distribution.
    """
    if min_count is None:
        min_count = (config or DEFAULT_CONFIG).min_count

    learned_cpts: List[Tuple[RandomVariable, ConditionalProbabilityTable]] = []
    for variable in network.variables:
        parents: List[RandomVariable] = network.parents_of(variable)

        observations.reset()
        learned = learn_conditional_distributions(
            variable, parents, observations, min_count=min_count,
        )

        cpt = ConditionalProbabilityTable()
        for instantiation, distribution in learned.items():
            if distribution is None:
                raise LearningError(
                    f"A necessary distribution was not learned for "
                    f"'{variable.name}' given "
                    f"{_describe(parents, instantiation)}"
                )
            cpt.set_conditional_distribution(instantiation, distribution)
        learned_cpts.append((variable, cpt))
        logger.debug(
            "Learned CPT for %r with %d instantiation(s)",
            variable.name, len(cpt),
        )

    for variable, cpt in learned_cpts:
        for _, distribution in cpt.items():
            for value in distribution.values:
                variable.add_value(value)
        variable.cpt = cpt

    logger.info(
        "Learned distributions for %d variable(s) of %s",
        len(network), network.name,
    )


def _describe(parents: Sequence[RandomVariable], instantiation: Sequence[Hashable]) -> str:
    if not parents:
        return "no parents"
    return ", ".join(f"{p.name}={v!r}" for p, v in zip(parents, instantiation))
