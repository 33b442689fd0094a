"""Addresses printed at startup.

A plan is shared by opening ``/?id=<plan id>`` on another device, so the
server also announces its LAN address when it has one.
"""
import socket
from typing import Optional, Tuple

LOOPBACK = ("127.0.0.1", "localhost")


def get_local_ip() -> str:
    """Return the address of the interface used for outbound traffic, or 127.0.0.1.

    Connecting a UDP socket only selects a route; nothing is sent.
    """
    s = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    try:
        s.connect(("8.8.8.8", 80))
        ip = str(s.getsockname()[0])
    except OSError:
        ip = "127.0.0.1"
    finally:
        s.close()
    return ip


def startup_urls(port: int, local_ip: Optional[str] = None) -> Tuple[str, Optional[str]]:
    """(local URL, LAN URL or None when only loopback is available)."""
    local_ip = local_ip or get_local_ip()
    lan_url = f"http://{local_ip}:{port}" if local_ip not in LOOPBACK else None
    return f"http://localhost:{port}", lan_url
