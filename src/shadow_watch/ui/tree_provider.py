"""
Tree data provider for analysis results.

Follows the usual hierarchical data-provider contract of editor tree views:
``get_children(None)`` returns the roots and ``get_children(node)`` returns a
node's children. Listeners registered with ``on_did_change_tree_data`` are
told when the data changes so the view can re-query.
"""

from dataclasses import dataclass
from typing import Callable, List, Optional

from shadow_watch.analysis.models import AnalysisData, TreeNode
from shadow_watch.logging.logger import get_logger

logger = get_logger(__name__)

TreeChangeListener = Callable[[Optional[TreeNode]], None]


@dataclass
class TreeItem:
    """Display attributes of a node."""

    id: str
    label: str
    description: Optional[str] = None
    tooltip: Optional[str] = None
    collapsible: bool = False
    context_value: str = ""


class Subscription:
    """Handle returned by on_did_change_tree_data; dispose() unsubscribes."""

    def __init__(self, listeners: List[TreeChangeListener], listener: TreeChangeListener):
        self._listeners = listeners
        self._listener = listener

    def dispose(self) -> None:
        if self._listener in self._listeners:
            self._listeners.remove(self._listener)


class AnalysisTreeProvider:
    def __init__(self, analysis_data: Optional[AnalysisData] = None):
        self._analysis_data = analysis_data
        self._listeners: List[TreeChangeListener] = []

    @property
    def analysis_data(self) -> Optional[AnalysisData]:
        return self._analysis_data

    def set_analysis_data(self, analysis_data: Optional[AnalysisData]) -> None:
        """Replace the displayed data and notify listeners."""
        self._analysis_data = analysis_data
        self.refresh()

    def on_did_change_tree_data(self, listener: TreeChangeListener) -> Subscription:
        self._listeners.append(listener)
        return Subscription(self._listeners, listener)

    def refresh(self, element: Optional[TreeNode] = None) -> None:
        """Notify listeners that ``element`` (or the whole tree) changed."""
        for listener in list(self._listeners):
            listener(element)

    def get_children(self, element: Optional[TreeNode] = None) -> List[TreeNode]:
        """
        Get the children of a node, or the root nodes when no node is given.

        Returns:
            The nodes in their stored order; empty when there is no data or
            the node has no children
        """
        if element is None:
            if self._analysis_data is None:
                return []
            return list(self._analysis_data.root_nodes or [])
        return list(element.children or [])

    def get_tree_item(self, element: TreeNode) -> TreeItem:
        return TreeItem(
            id=element.id,
            label=element.label,
            description=element.description,
            tooltip=element.tooltip,
            collapsible=bool(element.children),
            context_value=element.type,
        )

    def dispose(self) -> None:
        logger.debug(f"Disposing analysis tree provider ({len(self._listeners)} listeners)")
        self._listeners.clear()
