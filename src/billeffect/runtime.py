"""Application level helpers for assembling the analyst and document clients."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional
import logging
import random
import time

from .analysis import ImpactAnalyst, LocalAnalyst, RemoteAnalyst
from .analysis.remote import ChatBackend
from .clients import ReductoClient
from .config import AppConfig
from .core.errors import ConfigurationError

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class AppResources:
    """Container bundling the collaborators used by a session."""

    analyst: ImpactAnalyst
    pdf_extractor: ReductoClient | None
    remote: bool
    owns_analyst: bool = True
    owns_extractor: bool = True

    def close(self) -> None:
        if self.owns_analyst:
            close = getattr(self.analyst, "close", None)
            if close is not None:
                close()
        if self.owns_extractor and self.pdf_extractor is not None:
            self.pdf_extractor.close()


def _provider_key(config: AppConfig) -> Optional[str]:
    if config.analysis.provider == "gemini":
        return config.gemini.api_key
    return config.grok.api_key


def create_backend(config: AppConfig) -> ChatBackend:
    """Build the chat backend of the configured provider."""

    if config.analysis.provider == "gemini":
        from .analysis.gemini import GeminiChatBackend

        return GeminiChatBackend(
            api_key=config.gemini.api_key,
            base_url=config.gemini.base_url,
            model=config.gemini.model,
            timeout=config.gemini.timeout,
        )
    from .analysis.grok import GrokChatBackend

    return GrokChatBackend(
        api_key=config.grok.api_key,
        base_url=config.grok.base_url,
        model=config.grok.model,
        temperature=config.grok.temperature,
        timeout=config.grok.timeout,
    )


def create_analyst(
    config: AppConfig,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> tuple[ImpactAnalyst, bool]:
    """Return the analyst selected by ``config`` and whether it is remote."""

    mode = config.analysis.mode
    has_key = bool(_provider_key(config))
    if mode == "remote" and not has_key:
        raise ConfigurationError(
            f"Remote analysis requested but no {config.analysis.provider} API key is configured"
        )
    if mode == "remote" or (mode == "auto" and has_key):
        LOGGER.info("Using remote analyst (%s)", config.analysis.provider)
        return RemoteAnalyst(create_backend(config)), True
    if mode == "auto":
        LOGGER.warning("%s API key missing - using the offline analyst", config.analysis.provider.title())
    return (
        LocalAnalyst(
            analysis_delay=config.analysis.analysis_delay,
            simulation_delay=config.analysis.simulation_delay,
            sleep=sleep,
            rng=random.Random(config.analysis.seed),
        ),
        False,
    )


def create_resources(
    config: AppConfig,
    *,
    analyst: ImpactAnalyst | None = None,
    pdf_extractor: ReductoClient | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> AppResources:
    owns_analyst = analyst is None
    owns_extractor = pdf_extractor is None
    remote = False
    if analyst is None:
        analyst, remote = create_analyst(config, sleep=sleep)
    extractor = pdf_extractor
    if extractor is None and config.reducto.api_key:
        extractor = ReductoClient(
            config.reducto.base_url,
            config.reducto.api_key,
            timeout=config.reducto.timeout,
        )
    elif extractor is None:
        LOGGER.info("Reducto API key missing - PDF upload disabled")
    return AppResources(
        analyst=analyst,
        pdf_extractor=extractor,
        remote=remote,
        owns_analyst=owns_analyst,
        owns_extractor=owns_extractor,
    )


__all__ = ["AppResources", "create_analyst", "create_backend", "create_resources"]
