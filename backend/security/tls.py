"""
TLS material for the HTTPS listener.

Uses an existing key/certificate pair from the TLS directory when present
(optionally with a passphrase file for an encrypted key). Otherwise a
self-signed certificate is generated. Browsers will warn about it until
the certificate is trusted on the client device.
"""

import datetime
import ipaddress
import logging
from pathlib import Path

from cryptography import x509
from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.x509.oid import NameOID
from pydantic import BaseModel

from config import (
    TLS_CERT_DAYS,
    TLS_CERT_FILE,
    TLS_KEY_FILE,
    TLS_PASSPHRASE_FILE,
)

logger = logging.getLogger(__name__)

# RSA key size for generated certificates
KEY_SIZE = 2048


class TLSFiles(BaseModel):
    """Paths handed to uvicorn's ssl_* options."""
    certfile: Path
    keyfile: Path
    password: str | None = None


def load_or_create(tls_dir: Path, lan_ip: str | None = None) -> TLSFiles:
    """Return the TLS files in ``tls_dir``, generating a self-signed pair if missing."""
    keyfile = tls_dir / TLS_KEY_FILE
    certfile = tls_dir / TLS_CERT_FILE
    passphrase_file = tls_dir / TLS_PASSPHRASE_FILE

    if keyfile.exists() and certfile.exists():
        password = None
        if passphrase_file.exists():
            password = passphrase_file.read_text(encoding="utf-8").strip() or None
        logger.info(f"Using TLS certificate {certfile}")
        return TLSFiles(certfile=certfile, keyfile=keyfile, password=password)

    logger.info(f"No TLS certificate in {tls_dir}, generating a self-signed one")
    tls_dir.mkdir(parents=True, exist_ok=True)
    key_pem, cert_pem = generate_self_signed(lan_ip)
    keyfile.write_bytes(key_pem)
    keyfile.chmod(0o600)
    certfile.write_bytes(cert_pem)
    return TLSFiles(certfile=certfile, keyfile=keyfile)


def generate_self_signed(lan_ip: str | None = None) -> tuple[bytes, bytes]:
    """
    Create an unencrypted RSA key and a matching self-signed certificate.

    Returns:
        (key_pem, cert_pem)
    """
    key = rsa.generate_private_key(public_exponent=65537, key_size=KEY_SIZE)

    name = x509.Name([
        x509.NameAttribute(NameOID.ORGANIZATION_NAME, "Drop Spot"),
        x509.NameAttribute(NameOID.COMMON_NAME, lan_ip or "localhost"),
    ])
    alt_names: list[x509.GeneralName] = [
        x509.DNSName("localhost"),
        x509.IPAddress(ipaddress.ip_address("127.0.0.1")),
    ]
    if lan_ip:
        alt_names.append(x509.IPAddress(ipaddress.ip_address(lan_ip)))

    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(minutes=5))
        .not_valid_after(now + datetime.timedelta(days=TLS_CERT_DAYS))
        .add_extension(x509.SubjectAlternativeName(alt_names), critical=False)
        .sign(key, hashes.SHA256())
    )

    key_pem = key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    cert_pem = cert.public_bytes(serialization.Encoding.PEM)
    return key_pem, cert_pem
