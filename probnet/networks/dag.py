"""Directed acyclic graph (DAG) of discrete random variables.

Provides :class:`BayesianNetwork`, the owning container for
:class:`~probnet.networks.variable.RandomVariable` objects and the
parent/child edges between them.  The node table is a
:class:`networkx.DiGraph` keyed by variable name, so membership and
edge lookups are O(1).

Structure helpers:

* :meth:`BayesianNetwork.generate_structure` – seeded synthetic DAGs
  (``RANDOM`` and ``PAIRWISE_SINGLE``).
* :meth:`BayesianNetwork.get_topological_ordering` – ancestor-first
  ordering used by learning and sampling.
* :meth:`BayesianNetwork.learn_distributions` – fills every CPT from an
  observation stream.

Acyclicity is maintained by the generators; :meth:`add_edge` does not
re-check it.  Use :meth:`is_acyclic` after manual edits if needed.
"""

from __future__ import annotations

import enum
import logging
from typing import Any, Callable, Iterator, List, Optional, Set, Tuple, Union

import networkx as nx
import numpy as np

from probnet.config import DEFAULT_CONFIG, EngineConfig
from probnet.core.errors import UnsupportedOperationError
from probnet.learning.distributions import learn_distributions
from probnet.networks.ordering import topological_ordering
from probnet.networks.variable import RandomVariable

logger = logging.getLogger(__name__)

VariableRef = Union[RandomVariable, str]
StructureListener = Callable[["BayesianNetwork"], None]


class StructureMode(enum.Enum):
    """Strategies for :meth:`BayesianNetwork.generate_structure`.

    Members
    -------
    SEQUENTIAL
        Not supported; always raises.
    RANDOM
        Each variable draws up to ``parent_limit`` parents from the
        variables shuffled before it.
    PAIRWISE_SINGLE
        Disjoint (parent, child) pairs over a shuffled order.
    """

    SEQUENTIAL = "sequential"
    RANDOM = "random"
    PAIRWISE_SINGLE = "pairwise_single"


def _name_of(variable: VariableRef) -> str:
    if isinstance(variable, RandomVariable):
        return variable.name
    return variable


class BayesianNetwork:
    """Bayesian network over discrete random variables.

    Parameters
    ----------
    name : str, optional
        Label for the network, used in ``repr`` and log messages.

    Examples
    --------
    >>> bn = BayesianNetwork()
    >>> a = RandomVariable("A", ["a0", "a1"])
    >>> b = RandomVariable("B", ["b0", "b1"])
    >>> bn.add_variable(a)
    >>> bn.add_variable(b)
    >>> bn.add_edge(a, b)
    >>> bn.parents_of("B")
    [RandomVariable(name='A', values=['a0', 'a1'])]
    """

    def __init__(self, name: str = "network") -> None:
        self.name = name
        self._graph: nx.DiGraph = nx.DiGraph()
        self._listeners: List[StructureListener] = []
        self._suspended = 0

    # ------------------------------------------------------------------ #
    #  Change notification
    # ------------------------------------------------------------------ #

    def subscribe(self, listener: StructureListener) -> None:
        """Register *listener* to be called with this network on every
        structural edit."""
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: StructureListener) -> None:
        """Remove a listener; silently succeeds if it is not registered."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        if self._suspended:
            return
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------ #
    #  Membership
    # ------------------------------------------------------------------ #

    def add_variable(self, variable: RandomVariable) -> None:
        """Add *variable*; a no-op if a variable with its name is present."""
        if not isinstance(variable, RandomVariable):
            raise TypeError(
                f"Expected a RandomVariable, got {type(variable).__name__}"
            )
        if variable.name in self._graph:
            return
        self._graph.add_node(variable.name, variable=variable)
        logger.debug("Added variable %r to %s", variable.name, self.name)
        self._notify()

    def remove_variable(self, variable: VariableRef) -> None:
        """Remove *variable* and every edge touching it.

        Silently succeeds if the variable is not a member.
        """
        name = _name_of(variable)
        if name not in self._graph:
            return
        self._graph.remove_node(name)
        logger.debug("Removed variable %r from %s", name, self.name)
        self._notify()

    def variable(self, name: str) -> RandomVariable:
        """Return the member variable called *name*.

        Raises
        ------
        ValueError
            If no such variable exists.
        """
        if name not in self._graph:
            raise ValueError(f"Variable '{name}' not in network")
        return self._graph.nodes[name]["variable"]

    @property
    def variables(self) -> List[RandomVariable]:
        """Member variables in insertion order."""
        return [data["variable"] for _, data in self._graph.nodes(data=True)]

    @property
    def variable_names(self) -> List[str]:
        return list(self._graph.nodes)

    def __contains__(self, variable: object) -> bool:
        if isinstance(variable, (RandomVariable, str)):
            return _name_of(variable) in self._graph
        return False

    def __iter__(self) -> Iterator[RandomVariable]:
        return iter(self.variables)

    def __len__(self) -> int:
        return self._graph.number_of_nodes()

    # ------------------------------------------------------------------ #
    #  Edges
    # ------------------------------------------------------------------ #

    def _require(self, variable: VariableRef) -> str:
        name = _name_of(variable)
        if name not in self._graph:
            raise ValueError(f"Variable '{name}' not in network")
        return name

    def add_edge(self, parent: VariableRef, child: VariableRef) -> None:
        """Make *parent* a parent of *child*.

        Parents are ordered by insertion; adding an existing edge is a
        no-op.  Acyclicity is not checked.

        Raises
        ------
        ValueError
            If either endpoint is not a member or the edge is a self-loop.
        """
        p = self._require(parent)
        c = self._require(child)
        if p == c:
            raise ValueError(f"Variable '{p}' cannot be its own parent")
        if self._graph.has_edge(p, c):
            return
        self._graph.add_edge(p, c)
        logger.debug("Added edge %r -> %r", p, c)
        self._notify()

    def remove_edge(self, parent: VariableRef, child: VariableRef) -> None:
        """Remove the edge *parent* -> *child* if present."""
        p, c = _name_of(parent), _name_of(child)
        if not self._graph.has_edge(p, c):
            return
        self._graph.remove_edge(p, c)
        logger.debug("Removed edge %r -> %r", p, c)
        self._notify()

    @property
    def edges(self) -> List[Tuple[str, str]]:
        """Directed edges as (parent, child) name tuples."""
        return list(self._graph.edges())

    def parents_of(self, variable: VariableRef) -> List[RandomVariable]:
        """Parents of *variable* in edge-insertion order."""
        name = self._require(variable)
        return [self._graph.nodes[p]["variable"] for p in self._graph.predecessors(name)]

    def children_of(self, variable: VariableRef) -> List[RandomVariable]:
        name = self._require(variable)
        return [self._graph.nodes[c]["variable"] for c in self._graph.successors(name)]

    def ancestors_of(self, variable: VariableRef) -> Set[str]:
        """Names of all ancestors of *variable* (excluding itself)."""
        return nx.ancestors(self._graph, self._require(variable))

    def descendants_of(self, variable: VariableRef) -> Set[str]:
        """Names of all descendants of *variable* (excluding itself)."""
        return nx.descendants(self._graph, self._require(variable))

    def has_ancestor(self, variable: VariableRef, candidate: VariableRef) -> bool:
        """Return True if *candidate* is an ancestor of *variable*."""
        return _name_of(candidate) in self.ancestors_of(variable)

    def has_descendant(self, variable: VariableRef, candidate: VariableRef) -> bool:
        """Return True if *candidate* is a descendant of *variable*."""
        return _name_of(candidate) in self.descendants_of(variable)

    def markov_blanket(self, variable: VariableRef) -> Set[str]:
        """Parents, children and the children's other parents."""
        name = self._require(variable)
        blanket = set(self._graph.predecessors(name))
        for child in self._graph.successors(name):
            blanket.add(child)
            blanket.update(self._graph.predecessors(child))
        blanket.discard(name)
        return blanket

    def is_acyclic(self) -> bool:
        return nx.is_directed_acyclic_graph(self._graph)

    # ------------------------------------------------------------------ #
    #  Structure generation / learning
    # ------------------------------------------------------------------ #

    def generate_structure(
        self,
        mode: Union[StructureMode, str],
        seed: Optional[int] = None,
        parent_limit: Optional[int] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        """Generate a DAG over the current variables.  Useful for testing.

        Edges are added to any that already exist.  The result depends
        only on *mode*, *seed*, *parent_limit* and the variable order.

        Parameters
        ----------
        mode : StructureMode or str
            Generation strategy.
        seed : int, optional
            Seed for the :class:`numpy.random.Generator` used.  Defaults
            to ``config.seed``.
        parent_limit : int, optional
            Maximum number of parent draws per variable (``RANDOM`` only).
            Defaults to ``config.parent_limit``.
        config : EngineConfig, optional
            Defaults to :data:`~probnet.config.DEFAULT_CONFIG`.

        Raises
        ------
        UnsupportedOperationError
            For ``StructureMode.SEQUENTIAL``.
        ValueError
            If *parent_limit* is negative or *mode* is unknown.
        """
        config = config or DEFAULT_CONFIG
        if seed is None:
            seed = config.seed
        if parent_limit is None:
            parent_limit = config.parent_limit
        mode = StructureMode(mode)
        if mode is StructureMode.SEQUENTIAL:
            raise UnsupportedOperationError(
                "Sequential structure generation is not supported"
            )
        if parent_limit < 0:
            raise ValueError(f"parent_limit must be >= 0, got {parent_limit}")

        rng = np.random.default_rng(seed)
        names = self.variable_names
        shuffled = [names[i] for i in rng.permutation(len(names))]

        self._suspended += 1
        try:
            if mode is StructureMode.RANDOM:
                self._generate_random(shuffled, parent_limit, rng)
            else:
                self._generate_pairwise_single(shuffled)
        finally:
            self._suspended -= 1

        logger.info(
            "Generated %s structure for %s (seed=%s): %d edges",
            mode.value, self.name, seed, self._graph.number_of_edges(),
        )
        self._notify()

    def _generate_random(
        self,
        shuffled: List[str],
        parent_limit: int,
        rng: np.random.Generator,
    ) -> None:
        # Parents always come from earlier positions, so no cycle can form.
        for position in range(1, len(shuffled)):
            num_parents = int(rng.integers(0, parent_limit + 1))
            for _ in range(num_parents):
                parent = shuffled[int(rng.integers(0, position))]
                self.add_edge(parent, shuffled[position])

    def _generate_pairwise_single(self, shuffled: List[str]) -> None:
        for i in range(0, len(shuffled) - 1, 2):
            self.add_edge(shuffled[i], shuffled[i + 1])

    def learn_structure(self, observations: Any) -> None:
        """Structure learning is not supported.

        Raises
        ------
        UnsupportedOperationError
            Always.
        """
        raise UnsupportedOperationError("Structure learning is not supported")

    def learn_distributions(
        self,
        observations: Any,
        min_count: Optional[int] = None,
        config: Optional[EngineConfig] = None,
    ) -> None:
        """Learn a CPT for every variable from *observations*.

        See :func:`probnet.learning.distributions.learn_distributions`.
        """
        learn_distributions(self, observations, min_count=min_count, config=config)

    def get_topological_ordering(self, check: bool = False) -> List[RandomVariable]:
        """Return the variables ordered ancestors-first.

        See :func:`probnet.networks.ordering.topological_ordering`.
        """
        return topological_ordering(self, check=check)

    def sample(self, evidence: Any) -> Any:
        """Single-query likelihood-weighted sampling is not supported here.

        Use :meth:`probnet.inference.query.InferenceQuery.likelihood_weighting`
        or :func:`probnet.inference.sampling.likelihood_weighted_sample`.

        Raises
        ------
        UnsupportedOperationError
            Always.
        """
        raise UnsupportedOperationError(
            "Single-query sampling on a network is not supported; "
            "use an InferenceQuery"
        )

    def __repr__(self) -> str:
        return (
            f"BayesianNetwork(name={self.name!r}, "
            f"variables={self.variable_names}, edges={self.edges})"
        )
