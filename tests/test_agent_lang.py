import unittest

from crowdhandler_sdk.agent_lang import (
    DEFAULT_AGENT_LANGUAGE,
    AgentLanguage,
    AgentLanguageProvider,
    CallableAgentLanguageProvider,
    StaticAgentLanguageProvider,
    resolve_agent_language,
)


class _BrokenProvider:
    def agent_language(self) -> AgentLanguage:
        raise RuntimeError("no platform")


class AgentLanguageTests(unittest.TestCase):
    def test_static_provider(self) -> None:
        provider = StaticAgentLanguageProvider("MyApp/1.0", "de")
        self.assertEqual(provider.agent_language(), AgentLanguage("MyApp/1.0", "de"))
        self.assertIsInstance(provider, AgentLanguageProvider)

    def test_static_provider_empty_values_use_defaults(self) -> None:
        provider = StaticAgentLanguageProvider("", "")
        self.assertEqual(provider.agent_language(), DEFAULT_AGENT_LANGUAGE)

    def test_callable_provider(self) -> None:
        provider = CallableAgentLanguageProvider(agent=lambda: "Mozilla/5.0", lang=lambda: "es")
        self.assertEqual(provider.agent_language(), AgentLanguage("Mozilla/5.0", "es"))

    def test_callable_provider_falls_back_per_field(self) -> None:
        def failing() -> str:
            raise OSError("user agent unavailable")

        provider = CallableAgentLanguageProvider(agent=failing, lang=lambda: None)
        self.assertEqual(provider.agent_language(), DEFAULT_AGENT_LANGUAGE)

    def test_callable_provider_without_lookups(self) -> None:
        self.assertEqual(CallableAgentLanguageProvider().agent_language(), DEFAULT_AGENT_LANGUAGE)

    def test_resolve_falls_back_when_provider_raises(self) -> None:
        self.assertEqual(resolve_agent_language(_BrokenProvider()), DEFAULT_AGENT_LANGUAGE)


if __name__ == "__main__":
    unittest.main()
