"""Topological ordering of network variables.

The ordering is built by incremental insertion over the
ancestor/descendant partial order: each variable is placed after the
last already-placed ancestor, or before the first already-placed
descendant, or right after the head when it is unrelated to everything
placed so far.  This is O(n^2) in the number of variables, which is fine
for the network sizes this package targets.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, List, Optional, Sequence, Set

from probnet.core.errors import InconsistentOrderingError
from probnet.networks.variable import RandomVariable

if TYPE_CHECKING:
    from probnet.networks.dag import BayesianNetwork

logger = logging.getLogger(__name__)


def _ancestor_table(network: BayesianNetwork) -> Dict[str, Set[str]]:
    return {name: network.ancestors_of(name) for name in network.variable_names}


def topological_ordering(
    network: BayesianNetwork,
    check: bool = False,
) -> List[RandomVariable]:
    """Return the variables of *network* ordered ancestors-first.

    For every pair of positions ``i < j`` in the result, the variable at
    ``j`` is never an ancestor of the variable at ``i``.

    Parameters
    ----------
    network : BayesianNetwork
        The network to order.  Must be acyclic.
    check : bool
        If True, verify the result with :func:`verify_ordering`.

    Returns
    -------
    list of RandomVariable
        Every variable exactly once.
    """
    variables = network.variables
    if not variables:
        return []

    ancestors = _ancestor_table(network)
    ordering: List[RandomVariable] = [variables[0]]

    for rv in variables[1:]:
        own_ancestors = ancestors[rv.name]

        # First placed descendant of rv, scanning from the front.
        descendant: Optional[int] = None
        for i, placed in enumerate(ordering):
            if rv.name in ancestors[placed.name]:
                descendant = i
                break

        # Last placed ancestor of rv, scanning from the back.
        ancestor: Optional[int] = None
        for i in range(len(ordering) - 1, -1, -1):
            if ordering[i].name in own_ancestors:
                ancestor = i
                break

        if ancestor is not None:
            ordering.insert(ancestor + 1, rv)
        elif descendant is not None:
            ordering.insert(descendant, rv)
        else:
            ordering.insert(1, rv)

    if check:
        verify_ordering(network, ordering, ancestors)
    logger.debug(
        "Topological ordering of %s: %s",
        network.name, [rv.name for rv in ordering],
    )
    return ordering


def verify_ordering(
    network: BayesianNetwork,
    ordering: Sequence[RandomVariable],
    ancestors: Optional[Dict[str, Set[str]]] = None,
) -> None:
    """Check that no variable in *ordering* precedes one of its ancestors.

    Raises
    ------
    InconsistentOrderingError
        On the first violating pair, or if *ordering* does not contain
        every variable exactly once.
    """
    if ancestors is None:
        ancestors = _ancestor_table(network)

    names = [rv.name for rv in ordering]
    if len(set(names)) != len(names) or set(names) != set(network.variable_names):
        raise InconsistentOrderingError(
            "Ordering does not contain every network variable exactly once"
        )

    for i, earlier in enumerate(names):
        for later in names[i + 1:]:
            if later in ancestors[earlier]:
                raise InconsistentOrderingError(
                    f"Ordering not correct: '{later}' is an ancestor of "
                    f"'{earlier}' but is placed after it"
                )
