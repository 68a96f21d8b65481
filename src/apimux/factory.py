"""Composition root: wire configuration, executors and the façade."""

from __future__ import annotations

from apimux.config import FacadeConfig
from apimux.core.provider_facade import ProviderFacade
from apimux.infra.http_executor import HttpxExecutor
from apimux.infra.ytdlp_executor import YtDlpExecutor


def create_facade(config: FacadeConfig | None = None) -> ProviderFacade:
    """Build a :class:`ProviderFacade` with the production executors.

    When *config* is ``None`` it is read from ``APIMUX_*`` environment
    variables.
    """
    config = config or FacadeConfig.from_env()
    return ProviderFacade(
        executors={
            "http": HttpxExecutor(config),
            "ytdlp": YtDlpExecutor(config),
        },
        config=config,
    )
