from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from loguru import logger

DEFAULT_AGENT = "CrowdHandlerPython"
DEFAULT_LANG = "en"


@dataclass(frozen=True)
class AgentLanguage:
    agent: str
    lang: str


DEFAULT_AGENT_LANGUAGE = AgentLanguage(agent=DEFAULT_AGENT, lang=DEFAULT_LANG)


@runtime_checkable
class AgentLanguageProvider(Protocol):
    def agent_language(self) -> AgentLanguage:
        """Return the agent label and language tag sent with every call."""
        ...


class StaticAgentLanguageProvider:
    def __init__(self, agent: str = DEFAULT_AGENT, lang: str = DEFAULT_LANG) -> None:
        self._value = AgentLanguage(agent=agent or DEFAULT_AGENT, lang=lang or DEFAULT_LANG)

    def agent_language(self) -> AgentLanguage:
        return self._value


class CallableAgentLanguageProvider:
    """Wraps host lookups for the agent and language.

    Either lookup may return None/empty or raise; the default pair is used
    for whichever half is unavailable.
    """

    def __init__(
        self,
        agent: Callable[[], str | None] | None = None,
        lang: Callable[[], str | None] | None = None,
    ) -> None:
        self._agent = agent
        self._lang = lang

    def agent_language(self) -> AgentLanguage:
        return AgentLanguage(
            agent=self._lookup("agent", self._agent, DEFAULT_AGENT),
            lang=self._lookup("lang", self._lang, DEFAULT_LANG),
        )

    @staticmethod
    def _lookup(name: str, fn: Callable[[], str | None] | None, default: str) -> str:
        if fn is None:
            return default
        try:
            value = fn()
        except Exception as ex:
            logger.warning(f"{name} detection failed: {ex}")
            return default
        return value or default


def resolve_agent_language(provider: AgentLanguageProvider) -> AgentLanguage:
    try:
        return provider.agent_language()
    except Exception as ex:
        logger.warning(f"Agent/language provider failed, using defaults: {ex}")
        return DEFAULT_AGENT_LANGUAGE
