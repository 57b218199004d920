from unittest.mock import AsyncMock

import pytest

from src.core.exceptions import CaptchaVerificationError
from src.domain.interfaces.services import ICaptchaVerifier
from src.domain.services.lead_capture import PLACEHOLDER_TOKEN, CaptchaPolicy
from src.domain.value_objects.captcha import CaptchaOutcome, CaptchaVerdict


@pytest.fixture
def verifier():
    mock = AsyncMock(spec=ICaptchaVerifier)
    mock.verify.return_value = CaptchaOutcome(CaptchaVerdict.PASSED, 0.9)
    return mock


@pytest.mark.unit
class TestCaptchaPolicy:
    @pytest.mark.asyncio
    async def test_disabled_policy_never_calls_provider(self, verifier):
        policy = CaptchaPolicy(verifier, enabled=False, required=True)

        await policy.check(None)

        verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    async def test_policy_without_verifier_is_disabled(self):
        policy = CaptchaPolicy(None, enabled=True, required=True)

        assert not policy.enabled
        await policy.check(None)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, "", "  ", PLACEHOLDER_TOKEN])
    async def test_missing_token_allowed_when_optional(self, verifier, token):
        policy = CaptchaPolicy(verifier, required=False)

        await policy.check(token)

        verifier.verify.assert_not_called()

    @pytest.mark.asyncio
    @pytest.mark.parametrize("token", [None, PLACEHOLDER_TOKEN])
    async def test_missing_token_rejected_when_required(self, verifier, token):
        policy = CaptchaPolicy(verifier, required=True)

        with pytest.raises(CaptchaVerificationError):
            await policy.check(token)

    @pytest.mark.asyncio
    async def test_passed_token(self, verifier):
        policy = CaptchaPolicy(verifier)

        await policy.check("token", "203.0.113.7")

        verifier.verify.assert_awaited_once_with("token", "203.0.113.7")

    @pytest.mark.asyncio
    async def test_rejected_token(self, verifier):
        verifier.verify.return_value = CaptchaOutcome(CaptchaVerdict.REJECTED, 0.1)
        policy = CaptchaPolicy(verifier)

        with pytest.raises(CaptchaVerificationError) as exc_info:
            await policy.check("token")

        assert exc_info.value.code == "captcha_failed"

    @pytest.mark.asyncio
    async def test_unavailable_provider_fails_open(self, verifier):
        verifier.verify.return_value = CaptchaOutcome.unavailable()
        policy = CaptchaPolicy(verifier, fail_open=True)

        await policy.check("token")

    @pytest.mark.asyncio
    async def test_unavailable_provider_fails_closed(self, verifier):
        verifier.verify.return_value = CaptchaOutcome.unavailable()
        policy = CaptchaPolicy(verifier, fail_open=False)

        with pytest.raises(CaptchaVerificationError) as exc_info:
            await policy.check("token")

        assert exc_info.value.code == "captcha_unavailable"
