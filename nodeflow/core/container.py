"""Dependency injection container for the node catalog."""

from dependency_injector import containers, providers

from nodeflow.core.config import Settings
from nodeflow.core.cache import CacheService
from nodeflow.core.logging import get_logger
from nodeflow.services.catalog import NodeCatalog
from nodeflow.services.execution.context import ExecutionContext

logger = get_logger(__name__)


class Container(containers.DeclarativeContainer):
    """Composition root: owns the settings, the cache and the catalog."""

    # Settings
    settings = providers.Singleton(
        Settings,
    )

    # Cache service (uses Redis when enabled, memory otherwise)
    cache = providers.Singleton(
        CacheService,
        settings=settings
    )

    # Node catalog, shared by reference with every consumer
    node_catalog = providers.Singleton(
        NodeCatalog,
        cache=cache,
        manifest_cache_key=settings.provided.manifest_cache_key,
        manifest_cache_ttl=settings.provided.manifest_cache_ttl,
        auto_invalidate=settings.provided.manifest_auto_invalidate,
    )

    # One context per node invocation, seeded with the configured timeout
    execution_context = providers.Factory(
        ExecutionContext,
        execution_timeout=settings.provided.default_execution_timeout,
    )


def build_catalog(container: Container) -> NodeCatalog:
    """Create the catalog and register node kinds from configured packages."""
    catalog = container.node_catalog()
    for package_name in container.settings().node_packages:
        catalog.discover(package_name)

    logger.info("Node catalog ready", **catalog.get_statistics())
    return catalog
