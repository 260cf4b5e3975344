import json
from pathlib import Path

from rich.console import Console
from rich.markup import escape
from rich.tree import Tree

from shadow_watch.analysis.models import AnalysisData, TreeNode
from shadow_watch.logging.logger import get_logger
from shadow_watch.ui.tree_provider import AnalysisTreeProvider

logger = get_logger(__name__)
console = Console()


def _label(provider: AnalysisTreeProvider, node: TreeNode) -> str:
    item = provider.get_tree_item(node)
    if item.description:
        return f"{escape(item.label)} [dim]{escape(item.description)}[/dim]"
    return escape(item.label)


def build_tree(provider: AnalysisTreeProvider, title: str = "Analysis") -> Tree:
    """Render the provider's nodes as a rich tree."""
    tree = Tree(escape(title))

    def add_children(branch: Tree, element=None):
        for node in provider.get_children(element):
            add_children(branch.add(_label(provider, node)), node)

    add_children(tree)
    return tree


class TreeCommands:
    """Commands for viewing analysis results."""

    def show(self, analysis_file: str) -> None:
        """
        Show analysis results as a tree.

        Args:
            analysis_file: JSON file with a ``rootNodes`` list
        """
        try:
            data = json.loads(Path(analysis_file).read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to load analysis from {analysis_file}: {str(e)}")
            raise

        provider = AnalysisTreeProvider(AnalysisData.from_dict(data))
        try:
            if not provider.get_children():
                console.print("No analysis results")
                return
            console.print(build_tree(provider, Path(analysis_file).name))
        finally:
            provider.dispose()
