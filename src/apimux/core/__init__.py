"""Core / service layer — models, provider catalog and the façade.

Rules
-----
* No ``print()`` calls.
* No direct network I/O; requests go through injected executors.
* No imports from ``cli`` or ``infra``.
"""

from apimux.core.models import CapabilityRequest, ProviderReply, SearchResults
from apimux.core.protocols import RequestExecutor
from apimux.core.provider_facade import ProviderFacade

__all__: list[str] = [
    "CapabilityRequest",
    "ProviderFacade",
    "ProviderReply",
    "RequestExecutor",
    "SearchResults",
]
