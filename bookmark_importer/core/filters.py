"""
Search filtering for bookmark trees.

A filter decides which nodes match; applying it to a forest keeps matching
nodes and the folders that lead to them, pruning everything else. The
input forest is never modified.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from typing import Callable, List, Optional

from .data_models import Folder, Link, Node


class NodeFilter(ABC):
    """
    Abstract base class for node filters.

    Subclasses only decide whether a single node matches. ``apply`` handles
    the tree: a matching folder is kept whole, a non-matching folder is
    kept only when a descendant matches.
    """

    @abstractmethod
    def matches(self, node: Node) -> bool:
        """
        Check if a node matches this filter on its own fields.

        Args:
            node: The link or folder to check

        Returns:
            True if the node matches the filter criteria
        """
        pass

    def apply(self, nodes: List[Node]) -> List[Node]:
        """
        Filter a forest.

        Args:
            nodes: Root-level nodes to filter

        Returns:
            A new forest holding matching nodes and their ancestor folders
        """
        result: List[Node] = []
        for node in nodes:
            kept = self._apply_to_node(node)
            if kept is not None:
                result.append(kept)
        return result

    def _apply_to_node(self, node: Node) -> Optional[Node]:
        if self.matches(node):
            return node

        if isinstance(node, Folder):
            children = self.apply(node.children)
            if children:
                # Same id, pruned children
                return replace(node, children=children)

        return None


class QueryFilter(NodeFilter):
    """Case-insensitive substring match on link titles, link URLs and folder names."""

    def __init__(self, query: str):
        """
        Initialize query filter.

        Args:
            query: Text to search for; surrounding whitespace is ignored
        """
        self.query = query.strip()
        self._needle = self.query.lower()

    def matches(self, node: Node) -> bool:
        if isinstance(node, Link):
            return self._needle in node.title.lower() or self._needle in node.url.lower()
        return self._needle in node.name.lower()

    def __repr__(self) -> str:
        return f"QueryFilter(query={self.query!r})"


def filter_nodes(nodes: List[Node], query: str) -> List[Node]:
    """
    Filter a forest by a search query.

    Args:
        nodes: Root-level nodes
        query: Search text; a blank query disables filtering

    Returns:
        ``nodes`` itself for a blank query, otherwise a pruned copy
    """
    if not query or not query.strip():
        return nodes
    return QueryFilter(query).apply(nodes)


class SearchCoordinator:
    """
    Holds the current search query and filters forests with it.

    ``on_query_changed`` is called with the raw query after every update,
    including ``clear_query``.
    """

    def __init__(self, on_query_changed: Optional[Callable[[str], None]] = None):
        self.current_query = ""
        self.on_query_changed = on_query_changed
        self.logger = logging.getLogger(__name__)

    def update_query(self, query: str) -> None:
        self.current_query = query
        self.logger.debug(f"Search query changed to {query!r}")
        if self.on_query_changed is not None:
            self.on_query_changed(query)

    def clear_query(self) -> None:
        self.update_query("")

    @property
    def trimmed_query(self) -> str:
        return self.current_query.strip()

    @property
    def is_search_active(self) -> bool:
        return bool(self.trimmed_query)

    def filter(self, nodes: List[Node], query: Optional[str] = None) -> List[Node]:
        """
        Filter nodes by ``query``, or by the current query when omitted.

        Args:
            nodes: The nodes to filter
            query: Optional query override

        Returns:
            Filtered nodes matching the query
        """
        search_query = self.current_query if query is None else query
        return filter_nodes(nodes, search_query)
