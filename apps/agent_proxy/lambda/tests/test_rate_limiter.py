import unittest

from agent_proxy.rate_limiter import SlidingWindowRateLimiter


class FakeClock:
    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class SlidingWindowRateLimiterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = FakeClock()
        self.limiter = SlidingWindowRateLimiter({"ollama": 30, "huggingface": 2}, clock=self.clock)

    def test_request_over_cap_is_rejected_without_being_recorded(self) -> None:
        admitted = [self.limiter.check_rate_limit("ollama", "1.2.3.4") for _ in range(30)]

        self.assertTrue(all(admitted))
        self.assertFalse(self.limiter.check_rate_limit("ollama", "1.2.3.4"))
        self.assertEqual(self.limiter.request_count("ollama", "1.2.3.4"), 30)

    def test_window_slides_after_sixty_seconds(self) -> None:
        self.assertTrue(self.limiter.check_rate_limit("huggingface", "client"))
        self.clock.advance(30)
        self.assertTrue(self.limiter.check_rate_limit("huggingface", "client"))
        self.assertFalse(self.limiter.check_rate_limit("huggingface", "client"))

        self.clock.advance(30)
        self.assertTrue(self.limiter.check_rate_limit("huggingface", "client"))
        self.assertFalse(self.limiter.check_rate_limit("huggingface", "client"))

        self.clock.advance(30)
        self.assertTrue(self.limiter.check_rate_limit("huggingface", "client"))

    def test_windows_are_per_provider_and_client(self) -> None:
        for _ in range(2):
            self.limiter.check_rate_limit("huggingface", "a")

        self.assertFalse(self.limiter.check_rate_limit("huggingface", "a"))
        self.assertTrue(self.limiter.check_rate_limit("huggingface", "b"))
        self.assertTrue(self.limiter.check_rate_limit("ollama", "a"))
        self.assertEqual(
            sorted(self.limiter.tracked_keys()),
            ["huggingface-a", "huggingface-b", "ollama-a"],
        )

    def test_provider_without_cap_is_not_limited(self) -> None:
        for _ in range(100):
            self.assertTrue(self.limiter.check_rate_limit("openai", "client"))
        self.assertEqual(self.limiter.tracked_keys(), [])

    def test_zero_cap_means_unlimited(self) -> None:
        limiter = SlidingWindowRateLimiter({"vllm": 0}, clock=self.clock)

        self.assertIsNone(limiter.limit_for("vllm"))
        self.assertTrue(limiter.check_rate_limit("vllm", "client"))

    def test_sweep_drops_idle_windows(self) -> None:
        self.limiter.check_rate_limit("ollama", "old")
        self.clock.advance(45)
        self.limiter.check_rate_limit("ollama", "recent")
        self.clock.advance(20)

        self.assertEqual(self.limiter.sweep(), 1)
        self.assertEqual(self.limiter.tracked_keys(), ["ollama-recent"])

    def test_periodic_sweep_runs_during_checks(self) -> None:
        self.limiter.check_rate_limit("ollama", "idle")
        self.clock.advance(301)

        self.limiter.check_rate_limit("ollama", "active")

        self.assertEqual(self.limiter.tracked_keys(), ["ollama-active"])

    def test_separate_instances_count_separately(self) -> None:
        other = SlidingWindowRateLimiter({"huggingface": 2}, clock=self.clock)
        for _ in range(2):
            self.limiter.check_rate_limit("huggingface", "client")

        self.assertFalse(self.limiter.check_rate_limit("huggingface", "client"))
        self.assertTrue(other.check_rate_limit("huggingface", "client"))


if __name__ == "__main__":
    unittest.main()
