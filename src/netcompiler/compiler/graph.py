"""Order layer declarations so every producer is emitted before its consumers.

Modules live in an arena (the input list) and the graph is built over their
integer indices. Edges come from two declarations:

  consumer.input == producer.name   (producer -> consumer)
  module.output == target.name      (module -> target)

Ordering is a breadth-first topological sort rooted at the single Input
module. A module becomes ready once all its producers are emitted; ready
modules are taken FIFO, and modules released by the same producer keep their
declaration order. Sibling branches of a skip connection are therefore emitted
level by level instead of being interleaved by recursion depth.
"""

from collections import deque
from collections.abc import Sequence
from enum import Enum

import structlog

from netcompiler.errors import GraphError, UnreachableModuleError
from netcompiler.schemas.project import Module

logger = structlog.get_logger()

INPUT_TYPE = "Input"


class UnreachablePolicy(str, Enum):
    DROP = "drop"
    WARN = "warn"
    ERROR = "error"


class LayerGraph:
    def __init__(self, modules: Sequence[Module]) -> None:
        self.modules = list(modules)
        self.index: dict[str, int] = {}
        for i, module in enumerate(self.modules):
            if module.name in self.index:
                raise GraphError(f"Duplicate module name: {module.name!r}")
            self.index[module.name] = i

        self.successors: list[list[int]] = [[] for _ in self.modules]
        self.predecessors: list[set[int]] = [set() for _ in self.modules]

        for i, module in enumerate(self.modules):
            if module.input is not None and module.type != INPUT_TYPE:
                producer = self._lookup(module.input, module.name, "input")
                self._add_edge(producer, i)
        for i, module in enumerate(self.modules):
            if module.output is not None:
                target = self._lookup(module.output, module.name, "output")
                if self.modules[target].type == INPUT_TYPE:
                    raise GraphError(
                        f"Module {module.name!r} cannot feed the input layer {module.output!r}"
                    )
                self._add_edge(i, target)

        roots = [i for i, m in enumerate(self.modules) if m.type == INPUT_TYPE]
        if not roots:
            raise GraphError("No module of type 'Input'")
        if len(roots) > 1:
            names = ", ".join(self.modules[i].name for i in roots)
            raise GraphError(f"Expected exactly one 'Input' module, found: {names}")
        self.root = roots[0]

    def _lookup(self, name: str, referrer: str, field: str) -> int:
        try:
            return self.index[name]
        except KeyError:
            raise GraphError(
                f"Module {referrer!r} declares {field} {name!r}, which is not a module"
            ) from None

    def _add_edge(self, src: int, dst: int) -> None:
        if src == dst:
            raise GraphError(f"Module {self.modules[src].name!r} references itself")
        if src not in self.predecessors[dst]:
            self.predecessors[dst].add(src)
            self.successors[src].append(dst)

    def reachable(self) -> set[int]:
        seen = {self.root}
        queue = deque([self.root])
        while queue:
            for nxt in self.successors[queue.popleft()]:
                if nxt not in seen:
                    seen.add(nxt)
                    queue.append(nxt)
        return seen

    def topological_order(self) -> list[int]:
        reachable = self.reachable()
        pending = {i: len(self.predecessors[i] & reachable) for i in reachable}
        order: list[int] = []
        queue = deque([self.root])
        while queue:
            current = queue.popleft()
            order.append(current)
            for nxt in sorted(self.successors[current]):
                pending[nxt] -= 1
                if pending[nxt] == 0:
                    queue.append(nxt)

        if len(order) < len(reachable):
            stuck = sorted(reachable - set(order))
            names = ", ".join(self.modules[i].name for i in stuck)
            raise GraphError(f"Cycle detected among modules: {names}")
        return order


class LayerGraphResolver:
    def __init__(self, policy: UnreachablePolicy = UnreachablePolicy.WARN) -> None:
        self.policy = UnreachablePolicy(policy)

    def order(self, modules: Sequence[Module]) -> list[Module]:
        graph = LayerGraph(modules)
        order = graph.topological_order()

        if len(order) < len(graph.modules):
            emitted = set(order)
            dropped = [m.name for i, m in enumerate(graph.modules) if i not in emitted]
            if self.policy is UnreachablePolicy.ERROR:
                raise UnreachableModuleError(dropped)
            if self.policy is UnreachablePolicy.WARN:
                logger.warning("unreachable_modules_dropped", modules=dropped)

        return [graph.modules[i] for i in order]
