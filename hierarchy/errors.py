# ==========================================================================================================
# -------------- Error taxonomy for the partner hierarchy engine -------------------------------------------
# ==========================================================================================================


class HierarchyError(Exception):
    """Base class for everything the hierarchy engine raises on purpose."""


class NotFound(HierarchyError):
    """The requested root partner does not resolve in the record store."""

    def __init__(self, root_id, message=None):
        self.root_id = root_id
        super().__init__(message or f"No partner found for id {root_id!r}")


class StoreUnavailable(HierarchyError):
    """The record store failed or timed out while the tree was being built."""


class EmptyTree(HierarchyError):
    """Insights were requested over a tree with no countable nodes."""


class UnknownRole(HierarchyError, ValueError):
    def __init__(self, value):
        self.value = value
        super().__init__(f"Unknown partner role: {value!r}")


class RegistrationError(HierarchyError, ValueError):
    """A partner registration payload was rejected."""


class InvalidCredentials(HierarchyError):
    """A partner exists but the supplied password does not match."""
