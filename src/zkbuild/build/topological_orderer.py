"""Build ordering.

Depth-first postorder over the dependency graph: every file is emitted after
all files it imports. Nodes are tracked as in-progress while their
dependencies are being visited, so re-entering one means the graph has a
cycle; what happens then depends on the CyclePolicy.
"""

import logging
from pathlib import Path
from typing import Dict, Iterator, List, Tuple

from ..config.build_config import CyclePolicy
from .dependency_graph import DependencyGraph

logger = logging.getLogger(__name__)

_IN_PROGRESS = 1
_DONE = 2


class CycleDetectedError(Exception):
    """Raised when the dependency graph contains a cycle and the policy is ERROR."""

    def __init__(self, cycle: List[Path]):
        self.cycle = cycle
        super().__init__(
            "Dependency cycle detected: " + " -> ".join(str(node) for node in cycle)
        )


class TopologicalOrderer:
    """
    Produces a build order from a DependencyGraph.

    Roots are visited in the graph's key order and dependencies in each
    node's edge order, so the same graph always yields the same sequence.
    Files that are only reached as dependencies (e.g. remapped library
    files outside the source root) are included too.

    With CyclePolicy.WARN a back edge is skipped and logged, which matches
    the plain visited-set DFS: the order is still complete, but a node on a
    cycle may precede one of its own dependencies. Cycles found in the last
    call to order() are kept in `cycles`.
    """

    def __init__(self, cycle_policy: CyclePolicy = CyclePolicy.ERROR):
        self.cycle_policy = cycle_policy
        self.cycles: List[List[Path]] = []

    def order(self, graph: DependencyGraph) -> List[Path]:
        """
        Compute the build order.

        Args:
            graph: Dependency graph to order

        Returns:
            Files such that, for an acyclic graph, each appears after all
            of its dependencies

        Raises:
            CycleDetectedError: On the first cycle, when the policy is ERROR
        """
        self.cycles = []
        state: Dict[Path, int] = {}
        result: List[Path] = []

        for root in graph:
            if root in state:
                continue

            state[root] = _IN_PROGRESS
            stack: List[Tuple[Path, Iterator[Path]]] = [(root, iter(graph.dependencies(root)))]

            while stack:
                node, pending = stack[-1]
                for dep in pending:
                    dep_state = state.get(dep)
                    if dep_state is None:
                        state[dep] = _IN_PROGRESS
                        stack.append((dep, iter(graph.dependencies(dep))))
                        break
                    if dep_state == _IN_PROGRESS:
                        self._handle_cycle(stack, dep)
                else:
                    stack.pop()
                    state[node] = _DONE
                    result.append(node)

        return result

    def _handle_cycle(self, stack: List[Tuple[Path, Iterator[Path]]], reentered: Path) -> None:
        on_stack = [node for node, _ in stack]
        cycle = on_stack[on_stack.index(reentered):] + [reentered]

        if self.cycle_policy is CyclePolicy.ERROR:
            raise CycleDetectedError(cycle)

        self.cycles.append(cycle)
        logger.warning(
            "Dependency cycle detected, build order across it is best-effort: "
            + " -> ".join(node.name for node in cycle)
        )
