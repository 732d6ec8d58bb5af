from collections import defaultdict
from typing import Dict, List, Optional, Sequence, Tuple

import networkx as nx

from crossname.spec import AmbiguousDependency, RenameMapping


class RenameGraphBuilder:
    def build(
        self, mappings: Sequence[RenameMapping]
    ) -> Tuple[nx.DiGraph, List[AmbiguousDependency]]:
        """
        Builds the dependency graph of a rename batch.

        Nodes: mapping indices, carrying `old` and `new` attributes.
        Edges: i -> j when mapping i's new name is mapping j's old name, i.e. j
               must run before i. Only the first such j (in input order) gets an
               edge; every other candidate is reported as an ambiguity.
        """
        graph = nx.DiGraph()
        indices_by_old: Dict[str, List[int]] = defaultdict(list)
        indices_by_new: Dict[str, List[int]] = defaultdict(list)

        for index, mapping in enumerate(mappings):
            graph.add_node(index, old=mapping.old, new=mapping.new)
            indices_by_old[mapping.old].append(index)
            indices_by_new[mapping.new].append(index)

        ambiguities: List[AmbiguousDependency] = []

        for index, mapping in enumerate(mappings):
            candidates = [j for j in indices_by_old.get(mapping.new, []) if j != index]
            if not candidates:
                continue
            chosen = candidates[0]
            graph.add_edge(index, chosen)
            if len(candidates) > 1:
                ambiguities.append(
                    AmbiguousDependency(
                        index=index,
                        candidates=candidates,
                        chosen=chosen,
                        reason=f"'{mapping.new}' is the old name of several mappings",
                    )
                )

        for name, indices in indices_by_old.items():
            if len(indices) > 1:
                ambiguities.append(
                    AmbiguousDependency(
                        index=indices[0],
                        candidates=indices,
                        chosen=indices[0],
                        reason=f"several mappings rename '{name}'",
                    )
                )

        for name, indices in indices_by_new.items():
            if len(indices) > 1:
                ambiguities.append(
                    AmbiguousDependency(
                        index=indices[0],
                        candidates=indices,
                        chosen=indices[0],
                        reason=f"several mappings rename to '{name}'",
                    )
                )

        return graph, ambiguities


def dependency_of(graph: nx.DiGraph, index: int) -> Optional[int]:
    return next(iter(graph.successors(index)), None)
