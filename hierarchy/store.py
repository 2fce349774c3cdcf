# ==========================================================================================================
# -------------- Partner record store adapters -------------------------------------------------------------
# ==========================================================================================================
import logging
from contextlib import nullcontext
from typing import Iterable, List, Optional

from sqlalchemy.exc import SQLAlchemyError

from extensions import db
from hierarchy.errors import StoreUnavailable
from hierarchy.nodes import PartnerRecord
from hierarchy.taxonomy import PartnerRole
from models import Partner


logger = logging.getLogger(__name__)


class PartnerStore:
    """
    Read side of the partner record store, as consumed by the hierarchy builder.

    Implementations translate their own infrastructure failures into
    StoreUnavailable; they never return partial results. The builder reports
    any other exception escaping an adapter as StoreUnavailable as well.
    """

    def find_by_id(self, store_id) -> Optional[PartnerRecord]:
        raise NotImplementedError

    def find_by_parent(self, role: PartnerRole, parent_linkage_key: str,
                       parent_role: PartnerRole) -> List[PartnerRecord]:
        raise NotImplementedError


class InMemoryPartnerStore(PartnerStore):
    """List-backed store. Lookups return records in insertion order."""

    def __init__(self, records: Iterable[PartnerRecord] = ()):
        self._records = list(records)

    def add(self, record: PartnerRecord) -> PartnerRecord:
        self._records.append(record)
        return record

    def __len__(self):
        return len(self._records)

    def find_by_id(self, store_id) -> Optional[PartnerRecord]:
        for record in self._records:
            if str(record.id) == str(store_id):
                return record
        return None

    def find_by_parent(self, role, parent_linkage_key, parent_role):
        return [
            record for record in self._records
            if record.role is role
            and record.parent_id == parent_linkage_key
            and record.parent_role is parent_role
        ]


class SqlPartnerStore(PartnerStore):
    """
    Store backed by the `partners` table.

    When an application is given, every lookup runs inside its own app context
    (and therefore its own scoped session), which lets the builder issue
    lookups from pooled greenlets that never saw the request context.
    """

    def __init__(self, app=None):
        self._app = app

    def _context(self):
        if self._app is None:
            return nullcontext()
        return self._app.app_context()

    def find_by_id(self, store_id) -> Optional[PartnerRecord]:
        try:
            pk = int(store_id)
        except (TypeError, ValueError):
            return None

        try:
            with self._context():
                partner = db.session.get(Partner, pk)
                return partner.to_record() if partner else None
        except SQLAlchemyError as e:
            logger.error(f"Partner lookup failed for id={store_id}: {e}")
            raise StoreUnavailable(f"Partner store unavailable while loading {store_id!r}") from e

    def find_by_parent(self, role, parent_linkage_key, parent_role):
        try:
            with self._context():
                partners = (
                    Partner.query
                    .filter_by(
                        user_type=role.label,
                        parent_id=parent_linkage_key,
                        parent_type=parent_role.label,
                    )
                    .order_by(Partner.id)
                    .all()
                )
                return [partner.to_record() for partner in partners]
        except SQLAlchemyError as e:
            logger.error(
                f"Child lookup failed for {parent_role.label} {parent_linkage_key!r} -> {role.label}: {e}"
            )
            raise StoreUnavailable(
                f"Partner store unavailable while loading children of {parent_linkage_key!r}"
            ) from e
