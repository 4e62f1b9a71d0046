"""
Build an undirected family graph from the relationship table.
"""
import logging
from enum import Enum
from typing import NamedTuple

import networkx as nx

from .constants import CSV_DELIMITER
from .records import PersonRecord, merge_records, read_records

logger = logging.getLogger(__name__)


class Relationship(str, Enum):
    SPOUSE = "Spouse"
    FATHER = "Father"
    MOTHER = "Mother"
    # Only reported when a parent edge is walked from the child's side.
    CHILD = "Child"

    def __str__(self):
        return self.value


# Record attribute -> label of the edge it declares.
RELATIVE_KINDS = (
    ("spouse_id", Relationship.SPOUSE),
    ("father_id", Relationship.FATHER),
    ("mother_id", Relationship.MOTHER),
)


class Heritage(NamedTuple):
    record: PersonRecord
    node: int


def extract_graph_from_csv(stream, delimiter=CSV_DELIMITER):
    """
    Reads the table and registers one graph node per distinct person.

    Rows repeating a person id are merged into the first record for that id
    (see `merge_records`); the node handle assigned on first encounter is kept.
    Nodes are plain ints numbered in order of first appearance and carry the
    person id as the `person_id` attribute. No edges are added here.

    Args:
        stream: An open text stream of the relationship table.
        delimiter (str): Field separator.

    Returns:
        tuple: A tuple containing:
            - nx.MultiGraph: The graph with one node per person.
            - dict: Person id -> `Heritage(record, node)`, in insertion order.

    Raises:
        RowParseError: If any row is malformed.
    """
    graph = nx.MultiGraph()
    index = {}

    for record in read_records(stream, delimiter=delimiter):
        heritage = index.get(record.person_id)
        if heritage is None:
            node = graph.number_of_nodes()
            graph.add_node(node, person_id=record.person_id)
            index[record.person_id] = Heritage(record, node)
        else:
            logger.debug(f"Merging repeated row for person {record.person_id}")
            index[record.person_id] = heritage._replace(record=merge_records(heritage.record, record))

    logger.info(f"Registered {len(index)} persons")
    return graph, index


def add_graph_edges(graph, index):
    """
    Adds one edge per relative reference that resolves to a known person.

    Each edge is labeled with its `kind` and remembers which record declared
    it (`declared_from`) and which relative it points at (`declared_to`).
    References to persons outside the table are skipped. Parallel edges, e.g.
    two spouses naming each other, are kept as-is.

    Returns:
        int: The number of edges added.
    """
    added = 0
    for person_id, heritage in index.items():
        for field, kind in RELATIVE_KINDS:
            relative_id = getattr(heritage.record, field)
            if relative_id is None:
                continue
            relative = index.get(relative_id)
            if relative is None:
                logger.debug(f"Skipping {kind} {relative_id} of person {person_id}: not in table")
                continue
            graph.add_edge(
                heritage.node, relative.node,
                kind=kind, declared_from=heritage.node, declared_to=relative.node,
            )
            added += 1

    logger.info(f"Added {added} relationship edges")
    return added


def build_graph(stream, delimiter=CSV_DELIMITER):
    """Ingests the table and adds all relationship edges in one go."""
    graph, index = extract_graph_from_csv(stream, delimiter=delimiter)
    add_graph_edges(graph, index)
    return graph, index
