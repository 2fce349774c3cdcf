# ==========================================================================================================
# -------------- Hierarchy builder -------------------------------------------------------------------------
# ==========================================================================================================
import logging
import time
from typing import List, Optional

import gevent
from gevent.pool import Pool

from hierarchy.errors import NotFound, StoreUnavailable
from hierarchy.nodes import HierarchyNode, PartnerRecord
from hierarchy.store import PartnerStore
from hierarchy.taxonomy import PartnerRole, child_role


logger = logging.getLogger(__name__)


class HierarchyBuilder:
    """
    Rebuilds the subtree owned by one partner from flat store records.

    Expansion walks the taxonomy one tier at a time and issues one
    `find_by_parent` lookup per node. With `pool_size` set, the lookups of a
    tier run concurrently on a gevent pool; `Pool.map` hands results back in
    sibling order so the tree comes out the same as a sequential build.

    The build is all-or-nothing: a store failure or an expired `timeout`
    raises StoreUnavailable and no tree is returned.
    """

    def __init__(self, store: PartnerStore, pool_size: Optional[int] = None,
                 timeout: Optional[float] = None):
        self.store = store
        self.pool_size = pool_size or None
        self.timeout = timeout or None

    def build(self, root_role, root_id) -> HierarchyNode:
        role = PartnerRole.parse(root_role)
        started = time.monotonic()

        pool = Pool(self.pool_size) if self.pool_size else None
        expired = StoreUnavailable(f"Hierarchy build for {root_id!r} timed out after {self.timeout}s")
        try:
            with gevent.Timeout(self.timeout, expired):
                root = self._resolve_root(role, root_id)
                lookups = self._expand(root, pool)
        finally:
            if pool is not None:
                # abandon whatever is still in flight; lookups are read-only
                pool.kill()

        logger.info(
            f"Built {role.label} hierarchy for id={root_id}: "
            f"{lookups} lookups in {(time.monotonic() - started) * 1000:.1f}ms"
        )
        return root

    # ------------------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------------------
    def _resolve_root(self, role: PartnerRole, root_id) -> HierarchyNode:
        record = self._call_store(self.store.find_by_id, root_id)
        if record is None:
            raise NotFound(root_id)
        if record.role is not role:
            logger.warning(f"Partner id={root_id} is a {record.role.label}, not a {role.label}")
            raise NotFound(root_id, f"No {role.label} found for id {root_id!r}")
        return HierarchyNode.from_record(record)

    def _expand(self, root: HierarchyNode, pool: Optional[Pool]) -> int:
        """Attach descendants tier by tier. Returns the number of child lookups issued."""
        lookups = 0
        tier = [root]
        role = root.role

        while tier and child_role(role) is not None:
            if pool is not None:
                results = pool.map(self._fetch_children, tier)
            else:
                results = [self._fetch_children(node) for node in tier]
            lookups += len(tier)

            next_tier = []
            for node, records in zip(tier, results):
                node.children.extend(HierarchyNode.from_record(record) for record in records)
                next_tier.extend(node.children)

            logger.debug(f"Expanded {len(tier)} {role.label} node(s) into {len(next_tier)} child node(s)")
            tier = next_tier
            role = child_role(role)

        return lookups

    def _fetch_children(self, node: HierarchyNode) -> List[PartnerRecord]:
        return list(self._call_store(
            self.store.find_by_parent,
            child_role(node.role),
            node.linkage_key,
            node.role,
        ))

    @staticmethod
    def _call_store(fn, *args):
        try:
            return fn(*args)
        except StoreUnavailable:
            raise
        except Exception as e:
            logger.exception(f"Partner store call {fn.__name__}{args} failed: {e}")
            raise StoreUnavailable(str(e)) from e


def build_hierarchy(store: PartnerStore, root_role, root_id,
                    pool_size: Optional[int] = None, timeout: Optional[float] = None) -> HierarchyNode:
    return HierarchyBuilder(store, pool_size=pool_size, timeout=timeout).build(root_role, root_id)
