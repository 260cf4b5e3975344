"""
Activation and deactivation of Shadow Watch.

``activate`` wires up the long-lived services and registers everything that
holds a resource in a process-wide disposables collection. ``deactivate``
tears that collection down in registration order, continuing past failures
so one broken disposable cannot keep the others alive.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Union

from shadow_watch.config.settings import ConfigurationManager, get_configuration_manager
from shadow_watch.llm.providers.factory import ProviderFactory
from shadow_watch.llm.rate_limiter import RateLimiter
from shadow_watch.llm.service import LLMService
from shadow_watch.logging.logger import attach_workspace_log, detach_workspace_log, get_logger
from shadow_watch.ui.tree_provider import AnalysisTreeProvider

logger = get_logger(__name__)


class Disposable(Protocol):
    def dispose(self) -> None:
        ...


class WorkspaceLogDisposable:
    """Detaches the workspace log handler on dispose."""

    def __init__(self, handler):
        self._handler = handler

    def dispose(self) -> None:
        detach_workspace_log(self._handler)


@dataclass
class ExtensionContext:
    config: ConfigurationManager
    provider_factory: ProviderFactory
    rate_limiter: RateLimiter
    llm_service: LLMService
    tree_provider: AnalysisTreeProvider
    workspace_root: Optional[Path] = None


_disposables: List[Optional[Disposable]] = []


def register_disposable(disposable: Optional[Disposable]) -> None:
    """Add an item to be disposed on deactivate."""
    _disposables.append(disposable)


def activate(workspace_root: Optional[Union[str, Path]] = None) -> ExtensionContext:
    """
    Build the services used by the commands and register their disposables.

    Args:
        workspace_root: Workspace to mirror logs into. When None, logs only go
            to the console.

    Returns:
        The services created for this activation
    """
    config = get_configuration_manager()
    root = Path(workspace_root) if workspace_root is not None else None

    if root is not None:
        register_disposable(WorkspaceLogDisposable(attach_workspace_log(root)))

    logger.info("Shadow Watch activating...")

    validation = config.validate()
    if not validation.valid:
        for error in validation.errors:
            logger.warning(f"Configuration problem: {error}")

    provider_factory = ProviderFactory(config)
    rate_limiter = RateLimiter()
    llm_service = LLMService(
        provider_factory=provider_factory,
        rate_limiter=rate_limiter,
        config_manager=config,
    )
    tree_provider = AnalysisTreeProvider()
    register_disposable(tree_provider)

    logger.info("Shadow Watch activated")

    return ExtensionContext(
        config=config,
        provider_factory=provider_factory,
        rate_limiter=rate_limiter,
        llm_service=llm_service,
        tree_provider=tree_provider,
        workspace_root=root,
    )


def deactivate() -> List[Exception]:
    """
    Dispose every registered item.

    Items are disposed in registration order and ``None`` entries are
    skipped. A failing dispose is logged and collected; the remaining items
    are still disposed. The collection is empty afterwards.

    Returns:
        The errors raised by failing disposables, in order
    """
    errors: List[Exception] = []

    for disposable in list(_disposables):
        if disposable is None:
            continue
        try:
            disposable.dispose()
        except Exception as e:
            logger.error(f"Error disposing {type(disposable).__name__}: {e}")
            errors.append(e)

    _disposables.clear()
    return errors
