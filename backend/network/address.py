"""LAN address discovery and QR code announcement."""

import ipaddress
import logging
import socket

import qrcode

logger = logging.getLogger(__name__)

# Any routable address works: connecting a UDP socket sends no packets,
# it only makes the OS pick the outgoing interface.
_PROBE_ADDR = ("10.255.255.255", 1)


def get_lan_ip() -> str | None:
    """Return this host's IPv4 address on the local network, or None."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        sock.connect(_PROBE_ADDR)
        ip = sock.getsockname()[0]
    except OSError as e:
        logger.warning(f"Couldn't get IP address on local network: {e}")
        return None
    finally:
        sock.close()

    if ipaddress.ip_address(ip).is_loopback or ip == "0.0.0.0":
        return None
    return ip


def public_url(host: str, port: int, tls: bool = True) -> str:
    scheme = "https" if tls else "http"
    default_port = 443 if tls else 80
    if port == default_port:
        return f"{scheme}://{host}"
    return f"{scheme}://{host}:{port}"


def print_qr(url: str, out=None) -> None:
    """Render ``url`` as a QR code in the terminal."""
    qr = qrcode.QRCode(border=1)
    qr.add_data(url)
    qr.make(fit=True)
    qr.print_ascii(out=out, invert=True)
