import os
import unittest
from unittest.mock import Mock, patch

from agent_proxy.infra import runtime


class ResolveSecretTests(unittest.TestCase):
    def test_returns_decrypted_value(self) -> None:
        ssm = Mock()
        ssm.get_parameter.return_value = {"Parameter": {"Value": "sk-secret"}}

        with patch.object(runtime, "get_ssm_client", return_value=ssm) as get_client:
            value = runtime.resolve_secret("/agent-proxy/openai", region="eu-west-1")

        self.assertEqual(value, "sk-secret")
        get_client.assert_called_once_with("eu-west-1")
        ssm.get_parameter.assert_called_once_with(Name="/agent-proxy/openai", WithDecryption=True)

    def test_unreadable_or_empty_parameter_yields_none(self) -> None:
        failing_ssm = Mock()
        failing_ssm.get_parameter.side_effect = RuntimeError("AccessDenied")
        empty_ssm = Mock()
        empty_ssm.get_parameter.return_value = {"Parameter": {"Value": ""}}

        for ssm in (failing_ssm, empty_ssm):
            with self.subTest(ssm=ssm):
                with patch.object(runtime, "get_ssm_client", return_value=ssm):
                    self.assertIsNone(runtime.resolve_secret("/agent-proxy/groq", region="us-east-1"))


class LangSmithConfigurationTests(unittest.TestCase):
    def setUp(self) -> None:
        runtime.ensure_langsmith_configured.cache_clear()
        self.addCleanup(runtime.ensure_langsmith_configured.cache_clear)

    def test_tracing_disabled_without_key(self) -> None:
        with patch.dict(os.environ, {"LANGSMITH_TRACING": "true"}, clear=True):
            runtime.ensure_langsmith_configured()

            self.assertNotIn("LANGSMITH_TRACING", os.environ)
            with patch.object(runtime, "get_cached_client") as get_client:
                runtime.flush_langsmith_traces()
            get_client.assert_not_called()

    def test_tracing_enabled_with_key(self) -> None:
        with patch.dict(os.environ, {"LANGSMITH_API_KEY": "ls-key"}, clear=True):
            runtime.ensure_langsmith_configured()

            self.assertEqual(os.environ["LANGSMITH_TRACING"], "true")
            self.assertEqual(os.environ["LANGSMITH_PROJECT"], "agent-proxy")
            with patch.object(runtime, "get_cached_client") as get_client:
                runtime.flush_langsmith_traces()
            get_client.return_value.flush.assert_called_once_with()


if __name__ == "__main__":
    unittest.main()
