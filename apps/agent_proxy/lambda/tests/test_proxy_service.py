import unittest
from unittest.mock import Mock

from agent_proxy.errors import BadRequestError, RateLimitExceeded
from agent_proxy.orchestration.sequential import SequentialFallbackOrchestrator
from agent_proxy.providers.registry import ProviderRegistry
from agent_proxy.rate_limiter import SlidingWindowRateLimiter
from agent_proxy.schemas import ProxyRequest
from agent_proxy.services.proxy_service import AgentProxyService

from support import StubProvider, failing, make_request


class AgentProxyServiceTests(unittest.TestCase):
    def setUp(self) -> None:
        self.calls: list[str] = []
        self.groq = StubProvider("groq", calls=self.calls, content="cloud")
        self.ollama = StubProvider("ollama", kind="local", calls=self.calls, content="local")
        self.broken = StubProvider("vllm", kind="local", error=failing("vllm"), calls=self.calls)
        self.registry = ProviderRegistry()
        for provider in (self.groq, self.ollama, self.broken):
            self.registry.register(provider)
        self.limiter = SlidingWindowRateLimiter({"groq": 2, "ollama": 30, "vllm": 25})
        self.service = AgentProxyService(
            registry=self.registry,
            orchestrator=SequentialFallbackOrchestrator(self.registry, ("groq",), ("ollama", "vllm")),
            rate_limiter=self.limiter,
        )

    def _proxy_request(self, provider: str | None, content: str = "hi") -> ProxyRequest:
        return ProxyRequest(provider=provider, payload=make_request(content))

    def test_named_provider_is_called_directly(self) -> None:
        response = self.service.handle(self._proxy_request("ollama"), "client")

        self.assertEqual(self.calls, ["ollama"])
        self.assertEqual(response.content, "local")
        self.assertEqual(response.selected_provider, "ollama")
        self.assertIsNone(response.fallback_to_local)
        self.assertEqual(response.processing_time_ms, 5)

    def test_named_provider_failure_serves_canned_response_without_trying_others(self) -> None:
        response = self.service.handle(self._proxy_request("vllm", "startup advice"), "client")

        self.assertEqual(self.calls, ["vllm"])
        self.assertTrue(response.fallback)
        self.assertEqual(response.original_error, "[vllm] boom")
        self.assertIn("Venture Launch Specialist", response.content)

    def test_auto_and_missing_provider_use_orchestrator(self) -> None:
        for provider in ("auto", None):
            with self.subTest(provider=provider):
                self.calls.clear()
                response = self.service.handle(self._proxy_request(provider), "client")

                self.assertEqual(self.calls, ["groq"])
                self.assertEqual(response.selected_provider, "groq")

    def test_auto_mode_is_not_rate_limited(self) -> None:
        for _ in range(5):
            self.service.handle(self._proxy_request("auto"), "client")

        self.assertEqual(self.limiter.request_count("groq", "client"), 0)

    def test_unknown_provider_is_a_bad_request(self) -> None:
        with self.assertRaisesRegex(BadRequestError, "Unsupported provider: skynet"):
            self.service.handle(self._proxy_request("skynet"), "client")
        self.assertEqual(self.calls, [])

    def test_rate_limit_is_checked_before_dispatch(self) -> None:
        self.service.handle(self._proxy_request("groq"), "client")
        self.service.handle(self._proxy_request("groq"), "client")

        with self.assertRaises(RateLimitExceeded) as ctx:
            self.service.handle(self._proxy_request("groq"), "client")

        self.assertEqual(ctx.exception.provider_id, "groq")
        self.assertEqual(ctx.exception.client_id, "client")
        self.assertEqual(self.calls, ["groq", "groq"])

    def test_orchestrator_crash_still_serves_canned_response(self) -> None:
        orchestrator = Mock()
        orchestrator.run.side_effect = RuntimeError("graph broke")
        service = AgentProxyService(self.registry, orchestrator, self.limiter)

        response = service.handle(self._proxy_request("auto"), "client")

        self.assertTrue(response.fallback)
        self.assertEqual(response.original_error, "graph broke")

    def test_health_reports_status_without_rate_limiting(self) -> None:
        statuses = {
            provider_id: self.service.health(provider_id).status
            for provider_id in ("ollama", "vllm", "skynet")
        }

        self.assertEqual(
            statuses, {"ollama": "available", "vllm": "unavailable", "skynet": "unsupported"}
        )
        self.assertEqual(self.ollama.probes, 1)
        self.assertEqual(self.calls, [])
        self.assertEqual(self.limiter.tracked_keys(), [])


if __name__ == "__main__":
    unittest.main()
