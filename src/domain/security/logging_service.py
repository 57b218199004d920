"""Secure logging helpers for lead-capture audit trails.

Submitters' e-mail addresses and IP addresses are personal data. Every log
line that refers to a lead goes through this service so the logs stay useful
for correlating incidents without storing the raw values.
"""


class SecureLoggingService:
    """Masks personal data before it reaches structured logs.

    Masking is deterministic within a deployment (same input, same output) so
    repeated submissions from one address can still be correlated.
    """

    EMAIL_MASK_LENGTH = 2     # Show only first 2 characters of the local part
    IP_MASK_LAST_OCTET = True # Mask last octet of IPv4 addresses

    def mask_email(self, email: str) -> str:
        """Mask an e-mail address, keeping the first characters and the TLD.

        Args:
            email: Raw email to mask

        Returns:
            str: Masked email, e.g. ``ja***@ex***.com``
        """
        if not email:
            return "[empty]"

        if "@" not in email:
            return f"{email[:self.EMAIL_MASK_LENGTH]}***"

        local, domain = email.split("@", 1)
        masked_local = f"{local[:self.EMAIL_MASK_LENGTH]}***"

        domain_parts = domain.split(".")
        if len(domain_parts) > 1:
            masked_domain = f"{domain_parts[0][:2]}***.{domain_parts[-1]}"
        else:
            masked_domain = f"{domain[:2]}***"

        return f"{masked_local}@{masked_domain}"

    def mask_ip_address(self, ip_address: str) -> str:
        """Apply IP address masking for privacy compliance.

        Args:
            ip_address: Raw IP address to mask

        Returns:
            str: Privacy-compliant masked IP address
        """
        if not ip_address or ip_address == "unknown":
            return "[unknown]"

        if "." in ip_address and self.IP_MASK_LAST_OCTET:
            parts = ip_address.split(".")
            if len(parts) == 4:
                return f"{parts[0]}.{parts[1]}.{parts[2]}.***"

        return ip_address.rsplit(":", 1)[0] + ":***" if ":" in ip_address else ip_address[:8] + "***"


# Global secure logging service instance
secure_logging_service = SecureLoggingService()
