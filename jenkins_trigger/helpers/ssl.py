"""
SSL configuration helpers for the Jenkins HTTP client.
"""
import ssl

from loguru import logger


def get_ssl_context(
    verify_ssl: bool = True, no_strict_verify_ssl: bool = False
) -> ssl.SSLContext | bool:
    """
    Get the `verify` value to hand to the HTTP client.

    Args:
        verify_ssl: Enable/disable SSL certificate verification
        no_strict_verify_ssl: Disable strict x509 verification introduced in Python 3.13

    Returns:
        False when verification is disabled, a custom SSL context when strict
        verification is relaxed, True for default behavior
    """
    if not verify_ssl:
        logger.warning(
            "SSL certificate verification is disabled for the Jenkins client. "
            "This is not recommended for production use."
        )
        return False

    if no_strict_verify_ssl:
        logger.warning(
            "Strict X.509 certificate verification is disabled for the Jenkins client. "
            "This may affect security."
        )
        context = ssl.create_default_context()
        # Remove VERIFY_X509_STRICT flag that is set by default starting Python 3.13
        # See: https://docs.python.org/3/library/ssl.html#ssl.create_default_context
        context.verify_flags &= ~ssl.VERIFY_X509_STRICT
        return context

    return True
