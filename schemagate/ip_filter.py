"""WSGI middleware that admits requests only from allowed networks."""

from __future__ import annotations

import ipaddress
import json
import logging
from collections.abc import Callable, Iterable
from typing import Any, Union

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]


def _as_network(network: str | IPNetwork) -> IPNetwork:
    if isinstance(network, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return network
    return ipaddress.ip_network(network, strict=False)


def _as_address(ip: str | IPAddress) -> IPAddress:
    if isinstance(ip, (ipaddress.IPv4Address, ipaddress.IPv6Address)):
        return ip
    return ipaddress.ip_address(ip)


def is_allowed(allowed_networks: Iterable[str | IPNetwork], ip: str | IPAddress) -> bool:
    """True if ``ip`` is a loopback address or lies in one of ``allowed_networks``."""
    address = _as_address(ip)
    if address.is_loopback:
        return True
    return any(
        net.version == address.version and address in net
        for net in map(_as_network, allowed_networks)
    )


def _parse_ip(text: str | None) -> IPAddress | None:
    if not text:
        return None
    try:
        return ipaddress.ip_address(text.strip())
    except ValueError:
        return None


class IpFilter:
    """Wraps a WSGI app and answers 403 to clients outside the allowed networks."""

    def __init__(self, app: Callable[..., Any], allowed_networks: Iterable[str | IPNetwork]) -> None:
        self.app = app
        self.allowed_networks = [_as_network(n) for n in allowed_networks]

    def client_ip(self, environ: dict[str, Any]) -> IPAddress | None:
        """The first X-Forwarded-For address if valid, else the peer address."""
        forwarded = environ.get("HTTP_X_FORWARDED_FOR")
        if forwarded:
            ip = _parse_ip(forwarded.split(",", 1)[0])
            if ip is not None:
                return ip
        return _parse_ip(environ.get("REMOTE_ADDR"))

    def __call__(self, environ: dict[str, Any], start_response: Callable[..., Any]) -> Iterable[bytes]:
        ip = self.client_ip(environ)
        if ip is not None and is_allowed(self.allowed_networks, ip):
            return self.app(environ, start_response)

        if ip is None:
            logger.warning("Unauthorized access: could not determine client IP")
            message = "Could not determine client IP"
        else:
            logger.warning("Unauthorized access attempt from IP: %s", ip)
            message = f"Access denied for IP address: {ip}"

        body = json.dumps(
            {"error": "unauthorized", "message": message}, separators=(",", ":")
        ).encode("utf-8")
        start_response(
            "403 Forbidden",
            [("Content-Type", "application/json"), ("Content-Length", str(len(body)))],
        )
        return [body]