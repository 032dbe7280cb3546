"""
Family integrity checks using NetworkX.

Periodic families form a forest: an edge goes from each mother to each of
its children. This module builds that graph from a task list and reports:
- Families (mother id -> member ids)
- Orphans (children whose mother no longer exists)
- Invariant violations (shared properties out of sync, bad child ids, ...)
"""

from dataclasses import dataclass, field

import networkx as nx

from app.models.task import MAX_CHILDREN, Task, child_index
from app.services.recurrence import GROUP_PROPERTIES


@dataclass
class IntegrityReport:
    families: dict[int, list[int]] = field(default_factory=dict)
    orphans: list[int] = field(default_factory=list)
    problems: list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.orphans and not self.problems


def build_family_graph(tasks: list[Task]) -> nx.DiGraph:
    """
    Build a DiGraph of periodic tasks.

    Returns a graph where:
    - Nodes are task ids (with the task under the "task" attribute)
    - Edges go from parent_id -> child id
    - A parent id with no task behind it becomes a bare node
    """
    graph = nx.DiGraph()

    periodic = [task for task in tasks if task.is_periodic]
    for task in periodic:
        graph.add_node(task.id, task=task)

    for task in periodic:
        if task.parent_id is not None and task.parent_id != task.id:
            graph.add_edge(task.parent_id, task.id)

    return graph


def find_families(graph: nx.DiGraph) -> dict[int, list[int]]:
    """Map each family root to its sorted member ids (root included)."""
    families = {}
    for component in nx.weakly_connected_components(graph):
        roots = [node for node in component if graph.in_degree(node) == 0]
        root = min(roots) if roots else min(component)
        families[root] = sorted(component)
    return families


def find_orphans(graph: nx.DiGraph) -> list[int]:
    """Children whose parent id does not resolve to a stored task."""
    orphans = []
    for parent, child in graph.edges:
        if "task" not in graph.nodes[parent]:
            orphans.append(child)
    return sorted(orphans)


def integrity_problems(graph: nx.DiGraph) -> list[str]:
    problems = []

    for node, data in graph.nodes(data=True):
        task: Task | None = data.get("task")
        if task is None:
            continue

        if task.end_date is None or task.frequency is None:
            problems.append(f"Periodic task {node} is missing its end date or frequency")

        parent = task.parent_id
        if parent is None:
            problems.append(f"Periodic task {node} has no parent id")
            continue
        if parent == node:
            continue

        index = child_index(parent, node)
        if not 1 <= index <= MAX_CHILDREN:
            problems.append(f"Child {node} does not follow the id scheme of mother {parent}")

        mother: Task | None = graph.nodes[parent].get("task")
        if mother is None:
            continue
        if mother.parent_id not in (None, mother.id):
            problems.append(f"Child {node} points at {parent}, which is itself a child")
            continue
        for name in GROUP_PROPERTIES:
            if getattr(task, name) != getattr(mother, name):
                problems.append(f"Child {node} differs from mother {parent} in {name}")

    return problems


def check_integrity(tasks: list[Task]) -> IntegrityReport:
    graph = build_family_graph(tasks)
    return IntegrityReport(
        families=find_families(graph),
        orphans=find_orphans(graph),
        problems=integrity_problems(graph),
    )
