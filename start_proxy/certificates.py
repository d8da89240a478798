"""Certificate authority generation for HTTPS interception.

A fresh CA is minted on every run. The proxy uses it to sign per-host
certificates; nothing is written to disk.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID

from .errors import CertificateError
from .models import CertificateAuthority

logger = logging.getLogger(__name__)

KEY_SIZE = 2048
KEY_EXPIRY_YEARS = 2
SERIAL_NUMBER = 1

CERT_SUBJECT = x509.Name([
    x509.NameAttribute(NameOID.COMMON_NAME, "Dependabot Internal CA"),
    x509.NameAttribute(NameOID.ORGANIZATION_NAME, "GitHub inc."),
    x509.NameAttribute(NameOID.ORGANIZATIONAL_UNIT_NAME, "Dependabot"),
    x509.NameAttribute(NameOID.COUNTRY_NAME, "US"),
    x509.NameAttribute(NameOID.STATE_OR_PROVINCE_NAME, "California"),
    x509.NameAttribute(NameOID.LOCALITY_NAME, "San Francisco"),
])


def add_years(moment: datetime, years: int) -> datetime:
    """Shift *moment* by whole calendar years.

    February 29th rolls over to March 1st when the target year has no leap day.
    """
    try:
        return moment.replace(year=moment.year + years)
    except ValueError:
        return moment.replace(year=moment.year + years, month=3, day=1)


def generate_certificate_authority(now: Optional[datetime] = None) -> CertificateAuthority:
    """Generate a new self-signed CA certificate and RSA private key.

    Args:
        now: Start of the validity window, defaults to the current UTC time

    Returns:
        The PEM encoded certificate and private key

    Raises:
        CertificateError: If key generation or signing fails
    """
    if now is None:
        now = datetime.now(timezone.utc)
    # X.509 validity has second precision
    not_before = now.replace(microsecond=0)
    not_after = add_years(not_before, KEY_EXPIRY_YEARS)

    try:
        private_key = rsa.generate_private_key(
            public_exponent=65537,
            key_size=KEY_SIZE
        )

        cert = x509.CertificateBuilder().subject_name(
            CERT_SUBJECT
        ).issuer_name(
            CERT_SUBJECT
        ).public_key(
            private_key.public_key()
        ).serial_number(
            SERIAL_NUMBER
        ).not_valid_before(
            not_before
        ).not_valid_after(
            not_after
        ).add_extension(
            x509.BasicConstraints(ca=True, path_length=None), critical=True
        ).sign(private_key, hashes.SHA256())
    except (ValueError, TypeError, UnsupportedAlgorithm) as e:
        logger.error("Certificate authority generation failed: %s", e)
        raise CertificateError(f"Certificate authority generation failed: {e}") from e

    cert_pem = cert.public_bytes(serialization.Encoding.PEM).decode("ascii")
    key_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption()
    ).decode("ascii")

    logger.debug("Generated certificate authority valid until %s", not_after.isoformat())
    return CertificateAuthority(cert=cert_pem, key=key_pem)
