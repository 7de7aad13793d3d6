class WebhookError(Exception):
    """Base class for webhook handling errors."""


class ConfigurationError(WebhookError):
    """Raised when the service is deployed without required settings."""


class MisconfiguredSecret(ConfigurationError):
    """Raised when no webhook signing secret is configured."""


class VerificationError(WebhookError):
    """Raised when an incoming notification cannot be authenticated."""


class MissingSignature(VerificationError):
    """Raised when the request carries no signature header."""


class InvalidSignature(VerificationError):
    """Raised when the signature does not match the received bytes."""


class InvalidPayload(VerificationError):
    """Raised when the signed body is not an event envelope."""


class ProcessingError(WebhookError):
    """Raised when a verified event could not be materialized."""


class MalformedPaymentData(ProcessingError):
    """Raised when a payment event lacks usable amount data."""


class PersistenceError(ProcessingError):
    """Raised when the order store rejects a write."""
