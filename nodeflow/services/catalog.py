"""Node Catalog - directory of installed node kinds.

Owns the id -> descriptor mapping and a category index, and answers the
lookup, search, manifest, compatibility and recommendation queries the
scheduler and API layers need. The catalog is built by the composition
root (see ``nodeflow.core.container``) and passed to whoever needs it.

Registration is expected during startup; concurrent register/unregister
calls need external synchronization. Queries are safe for concurrent
readers once registration is done.
"""

import importlib
import inspect
import pkgutil
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING, Union

from nodeflow.constants import MANIFEST_CACHE_KEY, MANIFEST_CACHE_TTL, RECOMMENDATION_LIMIT
from nodeflow.core.logging import get_logger, log_node_event
from nodeflow.models.nodes import NodeDescriptor
from nodeflow.nodes.base import BaseNode

if TYPE_CHECKING:
    from nodeflow.core.cache import CachePort

logger = get_logger(__name__)

NodeSource = Union[NodeDescriptor, BaseNode, type]


class NodeCatalog:
    """In-memory catalog of node kinds indexed by id and category."""

    def __init__(
        self,
        cache: "CachePort",
        manifest_cache_key: str = MANIFEST_CACHE_KEY,
        manifest_cache_ttl: int = MANIFEST_CACHE_TTL,
        auto_invalidate: bool = False,
    ):
        self.cache = cache
        self.manifest_cache_key = manifest_cache_key
        self.manifest_cache_ttl = manifest_cache_ttl
        self.auto_invalidate = auto_invalidate
        self._nodes: Dict[str, NodeDescriptor] = {}
        self._categories: Dict[str, List[str]] = {}
        self._manifest_stale = False

    # =========================================================================
    # REGISTRATION
    # =========================================================================

    def register(self, descriptor: NodeDescriptor) -> None:
        """Register a node kind; an already registered id is kept as is."""
        node_id = descriptor.id

        if node_id in self._nodes:
            logger.warning(f"Node {node_id} is already registered, skipping registration",
                           node_id=node_id)
            return

        self._nodes[node_id] = descriptor
        self._categories.setdefault(descriptor.category, []).append(node_id)

        log_node_event(logger, f"Node {node_id} registered successfully", node_id,
                       category=descriptor.category)
        self._on_change()

    def register_node(self, node: BaseNode) -> None:
        """Register a node instance by its descriptor."""
        self.register(node.describe())

    def unregister(self, node_id: str) -> bool:
        """Remove a node kind. Returns False if it was not registered."""
        descriptor = self._nodes.pop(node_id, None)
        if descriptor is None:
            return False

        category_ids = self._categories.get(descriptor.category)
        if category_ids is not None:
            self._categories[descriptor.category] = [i for i in category_ids if i != node_id]

        log_node_event(logger, f"Node {node_id} unregistered successfully", node_id)
        self._on_change()
        return True

    def load(self, nodes: Iterable[NodeSource]) -> int:
        """Register descriptors, node instances or node classes.

        Nodes that fail to instantiate are logged and skipped. Returns the
        number of newly registered node kinds.
        """
        before = len(self._nodes)
        for source in nodes:
            name = getattr(source, "__name__", None) or type(source).__name__
            try:
                self.register(self._to_descriptor(source))
            except Exception as e:
                logger.error(f"Failed to register node {name}", error=str(e))
        return len(self._nodes) - before

    def discover(self, package_name: str) -> int:
        """Import every module of a package and register its node classes.

        Only concrete ``BaseNode`` subclasses defined in the scanned modules
        are picked up. Returns the number of newly registered node kinds.
        """
        try:
            package = importlib.import_module(package_name)
        except Exception as e:
            logger.error(f"Failed to import node package {package_name}", error=str(e))
            return 0

        modules = [package]
        for module_info in pkgutil.walk_packages(getattr(package, "__path__", []),
                                                 prefix=f"{package_name}."):
            try:
                modules.append(importlib.import_module(module_info.name))
            except Exception as e:
                logger.error(f"Failed to auto-discover nodes from {module_info.name}",
                             error=str(e))

        classes = []
        for module in modules:
            for _, obj in inspect.getmembers(module, inspect.isclass):
                if (issubclass(obj, BaseNode) and obj.__module__ == module.__name__
                        and not inspect.isabstract(obj)):
                    classes.append(obj)

        registered = self.load(classes)
        logger.info("Node discovery completed", package=package_name,
                    found=len(classes), registered=registered)
        return registered

    @staticmethod
    def _to_descriptor(source: NodeSource) -> NodeDescriptor:
        if isinstance(source, NodeDescriptor):
            return source
        if isinstance(source, BaseNode):
            return source.describe()
        if inspect.isclass(source) and issubclass(source, BaseNode):
            return source().describe()
        raise TypeError(f"Cannot register {source!r} as a node")

    def _on_change(self) -> None:
        if self.auto_invalidate:
            self._manifest_stale = True

    # =========================================================================
    # LOOKUPS
    # =========================================================================

    def get(self, node_id: str) -> Optional[NodeDescriptor]:
        return self._nodes.get(node_id)

    def has(self, node_id: str) -> bool:
        return node_id in self._nodes

    def all(self) -> Dict[str, NodeDescriptor]:
        return dict(self._nodes)

    def get_node(self, node_id: str) -> Optional[BaseNode]:
        """Resolve a node id into its executable capability handle."""
        descriptor = self._nodes.get(node_id)
        return descriptor.node if descriptor is not None else None

    def get_by_category(self, category: str) -> Dict[str, NodeDescriptor]:
        return {
            node_id: self._nodes[node_id]
            for node_id in self._categories.get(category, [])
            if node_id in self._nodes
        }

    def get_categories(self) -> List[str]:
        return list(self._categories)

    def get_by_tags(self, tags: Iterable[str]) -> Dict[str, NodeDescriptor]:
        """Nodes sharing at least one tag with ``tags``."""
        wanted = frozenset(tags)
        return {
            node_id: descriptor
            for node_id, descriptor in self._nodes.items()
            if descriptor.shares_tags(wanted)
        }

    def search(self, query: str) -> Dict[str, NodeDescriptor]:
        """Case-insensitive substring match on name or description."""
        needle = query.lower()
        return {
            node_id: descriptor
            for node_id, descriptor in self._nodes.items()
            if needle in descriptor.name.lower() or needle in descriptor.description.lower()
        }

    # =========================================================================
    # MANIFEST
    # =========================================================================

    def get_manifest(self) -> List[Dict[str, Any]]:
        """Serializable snapshot of every node kind, in catalog order."""
        return [descriptor.to_manifest() for descriptor in self._nodes.values()]

    async def get_cached_manifest(self) -> List[Dict[str, Any]]:
        """Manifest served from the cache port; regenerated once per miss.

        With ``auto_invalidate`` a catalog mutation drops the cached entry
        before the next read.
        """
        if self._manifest_stale:
            await self.clear_cache()
            self._manifest_stale = False
        return await self.cache.remember(
            self.manifest_cache_key,
            self.manifest_cache_ttl,
            self.get_manifest,
        )

    async def clear_cache(self) -> None:
        await self.cache.delete(self.manifest_cache_key)
        logger.debug("Node manifest cache cleared", cache_key=self.manifest_cache_key)

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_nodes": len(self._nodes),
            "categories": {
                category: len(node_ids)
                for category, node_ids in self._categories.items()
            },
            "categories_count": len(self._categories),
        }

    # =========================================================================
    # GRAPH HELPERS
    # =========================================================================

    def validate_node_compatibility(self, source_node_id: str, target_node_id: str) -> bool:
        """Shallow check: source has outputs and target has inputs.

        Slot types are not matched.
        """
        source = self._nodes.get(source_node_id)
        target = self._nodes.get(target_node_id)

        if source is None or target is None:
            return False

        return bool(source.outputs) and bool(target.inputs)

    def get_recommended_nodes(self, node_id: str) -> List[str]:
        """First few node ids sharing the category or a tag, in catalog order."""
        node = self._nodes.get(node_id)
        if node is None:
            return []

        recommended = []
        for candidate_id, candidate in self._nodes.items():
            if candidate_id == node_id:
                continue
            if candidate.category == node.category or candidate.shares_tags(node.tag_set):
                recommended.append(candidate_id)
                if len(recommended) == RECOMMENDATION_LIMIT:
                    break
        return recommended
