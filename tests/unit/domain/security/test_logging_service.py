import pytest

from src.domain.security.logging_service import secure_logging_service


@pytest.mark.unit
class TestSecureLoggingService:
    @pytest.mark.parametrize(
        "email, expected",
        [
            ("jane.doe@example.com", "ja***@ex***.com"),
            ("jd@localhost", "jd***@lo***"),
            ("no-at-sign", "no***"),
            ("", "[empty]"),
        ],
    )
    def test_mask_email(self, email, expected):
        assert secure_logging_service.mask_email(email) == expected

    @pytest.mark.parametrize(
        "ip, expected",
        [
            ("203.0.113.7", "203.0.113.***"),
            ("2001:db8::1", "2001:db8::***"),
            ("unknown", "[unknown]"),
            ("", "[unknown]"),
        ],
    )
    def test_mask_ip_address(self, ip, expected):
        assert secure_logging_service.mask_ip_address(ip) == expected
