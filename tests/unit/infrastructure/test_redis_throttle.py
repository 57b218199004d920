from unittest.mock import MagicMock

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from src.domain.rate_limiting import FixedWindowThrottle
from src.infrastructure.rate_limiting import RedisFixedWindowThrottle


@pytest.fixture
def redis_client():
    client = MagicMock()
    client.register_script.return_value = MagicMock()
    return client


@pytest.fixture
def throttle(redis_client):
    return RedisFixedWindowThrottle(redis_client, limit=3, interval=60.0, name="contact")


@pytest.mark.unit
class TestRedisFixedWindowThrottle:
    def test_admitted_attempt(self, throttle, redis_client):
        redis_client.register_script.return_value.return_value = [1, 1, 60000]

        decision = throttle.allow("203.0.113.7")

        assert decision.allowed
        assert decision.count == 1
        assert decision.retry_after == 60.0
        redis_client.register_script.return_value.assert_called_once_with(
            keys=["leadgate:throttle:contact:203.0.113.7"], args=[3, 60000]
        )

    def test_rejected_attempt(self, throttle, redis_client):
        redis_client.register_script.return_value.return_value = [0, 3, 1500]

        decision = throttle.allow("203.0.113.7")

        assert not decision.allowed
        assert decision.count == 3
        assert decision.retry_after == 1.5

    def test_negative_ttl_means_no_wait(self, throttle, redis_client):
        redis_client.register_script.return_value.return_value = [1, 1, -2]

        assert throttle.allow("a").retry_after == 0.0

    def test_redis_outage_falls_back_to_memory(self, redis_client):
        redis_client.register_script.return_value.side_effect = RedisConnectionError("refused")
        fallback = FixedWindowThrottle(limit=2, interval=60.0)
        throttle = RedisFixedWindowThrottle(redis_client, limit=2, interval=60.0, fallback=fallback)

        decisions = [throttle.allow("a") for _ in range(3)]

        assert [d.allowed for d in decisions] == [True, True, False]
        assert fallback.window_for("a").count == 2

    def test_reset_deletes_key(self, throttle, redis_client):
        throttle.reset("a")

        redis_client.delete.assert_called_once_with("leadgate:throttle:contact:a")

    def test_reset_tolerates_outage(self, throttle, redis_client):
        redis_client.delete.side_effect = RedisConnectionError("refused")

        throttle.reset("a")

    def test_rejects_invalid_configuration(self, redis_client):
        with pytest.raises(ValueError):
            RedisFixedWindowThrottle(redis_client, limit=0, interval=60.0)
