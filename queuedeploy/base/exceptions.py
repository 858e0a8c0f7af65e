"""
queuedeploy exception hierarchy.

Every failure surfaced by a deploy or remove run inherits from
:class:`QueueDeployError`.  Provider modules translate SDK error codes
into these classes so the reconciler never compares raw code strings.
"""


# ── Base ──────────────────────────────────────────────────────────────
class QueueDeployError(Exception):
    """Root exception for all queuedeploy errors."""


# ── Input / identity ──────────────────────────────────────────────────
class InvalidConfigError(QueueDeployError):
    """Desired configuration is invalid (e.g. empty queue name)."""


class AuthError(QueueDeployError):
    """Account identity could not be resolved."""


# ── Provider calls ────────────────────────────────────────────────────
class ProviderError(QueueDeployError):
    """The provider rejected a request."""


class ProviderUnavailableError(ProviderError):
    """Transport failure, throttling or timeout talking to the provider."""


# ── Not found ─────────────────────────────────────────────────────────
class NotFoundError(ProviderError):
    """The addressed remote resource does not exist."""


class QueueNotFoundError(NotFoundError):
    """Queue does not exist."""


class BindingNotFoundError(NotFoundError):
    """Function trigger binding does not exist."""


# ── Reconciliation ────────────────────────────────────────────────────
class BindingConflictError(QueueDeployError):
    """The provider already holds an incompatible binding."""


class InconsistentStateError(QueueDeployError):
    """Persisted state disagrees with remote reality."""


# ── State ─────────────────────────────────────────────────────────────
class StateStoreError(QueueDeployError):
    """Persisted state could not be read or written."""
