"""
Shortest relationship path between two persons, labeled and rendered as text.
"""
import logging
from typing import NamedTuple, Optional

import networkx as nx

from .constants import NO_RELATIONSHIP_MESSAGE
from .heritage_graph import Relationship

logger = logging.getLogger(__name__)


class UnknownPersonError(LookupError):
    """A person id does not appear in the relationship table."""

    def __init__(self, person_id):
        self.person_id = person_id
        super().__init__(f"Unknown person id: {person_id}")


class PathStep(NamedTuple):
    person_id: int
    name: str
    # Relationship of this person to the next step; None on the last step.
    relationship: Optional[Relationship]


def _lookup(index, person_id):
    try:
        return index[person_id]
    except KeyError:
        raise UnknownPersonError(person_id) from None


def shortest_path(graph, index, start_id, finish_id):
    """
    Finds a shortest chain of relatives from `start_id` to `finish_id`.

    All edges weigh the same, so this is a breadth-first search over the
    undirected graph.

    Args:
        graph (nx.MultiGraph): The family graph from `build_graph`.
        index (dict): Person id -> `Heritage`, as returned with the graph.
        start_id (int): The person the query is about.
        finish_id (int): The relative to reach.

    Returns:
        list or None: Person ids from start to finish, both included, or None
                      if the two persons are not connected.

    Raises:
        UnknownPersonError: If either id is not in the table.
    """
    start_node = _lookup(index, start_id).node
    finish_node = _lookup(index, finish_id).node
    try:
        nodes = nx.shortest_path(graph, start_node, finish_node)
    except nx.NetworkXNoPath:
        logger.info(f"No path between {start_id} and {finish_id}")
        return None
    return [graph.nodes[node]["person_id"] for node in nodes]


def distance_and_path(graph, index, start_id, finish_id):
    """
    Returns the number of edges between two persons along with the path.

    Returns:
        tuple: `(distance, path)`, or `(None, [])` when no path exists.
    """
    path = shortest_path(graph, index, start_id, finish_id)
    if path is None:
        return None, []
    return len(path) - 1, path


def get_relationship(graph, from_node, to_node, reciprocal=False):
    """
    Label for the step from `from_node` to the adjacent `to_node`.

    The answer reads "from_node is <label> of to_node". By default this is the
    kind the edge was declared with, whichever way it is walked. With
    `reciprocal`, walking a parent edge from the declaring child's side
    reports `Child` instead.

    When several edges join the two nodes, the first one added wins.
    """
    edges = graph.get_edge_data(from_node, to_node)
    if not edges:
        raise ValueError(f"Nodes {from_node} and {to_node} are not adjacent")
    data = edges[min(edges)]
    kind = data["kind"]

    if reciprocal and data["declared_from"] == from_node:
        if kind in (Relationship.FATHER, Relationship.MOTHER):
            return Relationship.CHILD
    return kind


def resolve_path(graph, index, start_id, finish_id, reciprocal=False):
    """
    Resolves the labeled chain of relatives between two persons.

    The chain starts at `finish_id` and ends at `start_id`, so that every
    entry reads as "<person> is <relationship> of" the entry after it.

    Args:
        graph (nx.MultiGraph): The family graph.
        index (dict): Person id -> `Heritage`.
        start_id (int): The person the query is about; listed last.
        finish_id (int): The relative to reach; listed first.
        reciprocal (bool): Invert parent labels walked from the child's side.

    Returns:
        list or None: `PathStep` entries in output order, or None if the two
                      persons are not related.

    Raises:
        UnknownPersonError: If an id, or a person on the path, is not in the table.
    """
    path = shortest_path(graph, index, start_id, finish_id)
    if path is None:
        return None

    path.reverse()
    heritages = [_lookup(index, person_id) for person_id in path]

    steps = []
    for position, heritage in enumerate(heritages):
        relationship = None
        if position + 1 < len(heritages):
            relationship = get_relationship(
                graph, heritage.node, heritages[position + 1].node, reciprocal=reciprocal
            )
        steps.append(PathStep(heritage.record.person_id, heritage.record.name, relationship))
    return steps


def format_step(step):
    if step.relationship is None:
        return f"{step.name}({step.person_id})"
    return f"{step.name}({step.person_id}) is {step.relationship} of"


def format_path(steps):
    """Renders resolved steps one per line, e.g. `Anna(5) is Mother of`."""
    return "\n".join(format_step(step) for step in steps)


def describe_relationship(graph, index, start_id, finish_id, reciprocal=False):
    """
    Runs a full query and returns the text to show the user.

    Returns the formatted chain, or `NO_RELATIONSHIP_MESSAGE` when the two
    persons are not connected. Unknown ids still raise `UnknownPersonError`.
    """
    steps = resolve_path(graph, index, start_id, finish_id, reciprocal=reciprocal)
    if steps is None:
        return NO_RELATIONSHIP_MESSAGE
    logger.info(f"Found relationship over {len(steps) - 1} step(s)")
    return format_path(steps)
