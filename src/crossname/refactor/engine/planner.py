from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from crossname.spec import Cycle, ExecutionStep, RenameMapping, RenamePlan
from .graph import RenameGraphBuilder, dependency_of

TEMP_PREFIX = "__tmp_"


class BatchPlanner:
    """
    Turns a set of rename mappings into a linear sequence of steps that can be
    executed strictly in order without any name being swept up by a later step.

    Policy: when a dependency could be satisfied by several mappings, the first
    one in input order wins. The plan records every such case in
    `RenamePlan.ambiguities` instead of guessing further.
    """

    def __init__(self, graph_builder: Optional[RenameGraphBuilder] = None):
        self.graph_builder = graph_builder or RenameGraphBuilder()

    def plan(
        self, mappings: Sequence[RenameMapping], reserved: Iterable[str] = ()
    ) -> RenamePlan:
        mappings = list(mappings)
        graph, ambiguities = self.graph_builder.build(mappings)
        depends_on = [dependency_of(graph, i) for i in range(len(mappings))]

        cycle_ids, cycles = self._detect_cycles(depends_on)
        temp_names = self._temp_names(mappings, cycles, set(reserved))
        steps = self._order(mappings, depends_on, cycle_ids, cycles, temp_names)

        return RenamePlan(
            mappings=mappings,
            depends_on=depends_on,
            cycles=cycles,
            steps=steps,
            ambiguities=ambiguities,
        )

    def _detect_cycles(
        self, depends_on: List[Optional[int]]
    ) -> Tuple[List[Optional[int]], List[Cycle]]:
        cycle_ids: List[Optional[int]] = [None] * len(depends_on)
        cycles: List[Cycle] = []
        visited: Set[int] = set()

        for start in range(len(depends_on)):
            if start in visited:
                continue

            path: List[int] = []
            on_path: Set[int] = set()
            current: Optional[int] = start
            while current is not None:
                if current in on_path:
                    members = sorted(path[path.index(current) :])
                    cycle = Cycle(id=len(cycles), members=members)
                    cycles.append(cycle)
                    for member in members:
                        cycle_ids[member] = cycle.id
                    break
                if current in visited:
                    # Reached a chain that an earlier walk already settled.
                    break
                path.append(current)
                on_path.add(current)
                current = depends_on[current]

            visited.update(path)

        return cycle_ids, cycles

    def _temp_names(
        self,
        mappings: List[RenameMapping],
        cycles: List[Cycle],
        reserved: Set[str],
    ) -> Dict[int, str]:
        taken = reserved | {m.old for m in mappings} | {m.new for m in mappings}
        temp_names: Dict[int, str] = {}
        for cycle in cycles:
            for index in cycle.members:
                base = f"{TEMP_PREFIX}{mappings[index].old}"
                candidate = base
                suffix = 1
                while candidate in taken:
                    candidate = f"{base}_{suffix}"
                    suffix += 1
                taken.add(candidate)
                temp_names[index] = candidate
        return temp_names

    def _order(
        self,
        mappings: List[RenameMapping],
        depends_on: List[Optional[int]],
        cycle_ids: List[Optional[int]],
        cycles: List[Cycle],
        temp_names: Dict[int, str],
    ) -> List[ExecutionStep]:
        steps: List[ExecutionStep] = []
        emitted: Set[int] = set()

        def emit_cycle(cycle: Cycle) -> None:
            for index in cycle.members:
                steps.append(
                    ExecutionStep(mappings[index].old, temp_names[index], index, is_temp=True)
                )
            for index in cycle.members:
                steps.append(
                    ExecutionStep(temp_names[index], mappings[index].new, index, is_temp=True)
                )
            emitted.update(cycle.members)

        # 1. Acyclic mappings, each after the mapping it depends on.
        for index in range(len(mappings)):
            if cycle_ids[index] is not None or index in emitted:
                continue

            chain: List[int] = []
            current: Optional[int] = index
            while (
                current is not None
                and current not in emitted
                and cycle_ids[current] is None
            ):
                chain.append(current)
                current = depends_on[current]

            # A chain ending in a cycle member waits for that whole cycle.
            if current is not None and current not in emitted:
                emit_cycle(cycles[cycle_ids[current]])

            for pending in reversed(chain):
                mapping = mappings[pending]
                steps.append(ExecutionStep(mapping.old, mapping.new, pending))
                emitted.add(pending)

        # 2. Remaining cycles, broken in two passes through unique temporary names.
        for cycle in cycles:
            if cycle.members[0] not in emitted:
                emit_cycle(cycle)

        return steps
