"""IP address parsing and bit-exact CIDR matching.

Addresses are parsed into fixed-width integers (32 bits for IPv4, 128 bits
for IPv6) and compared under an explicit prefix mask, so membership is exact
at any bit boundary, including prefixes that are not byte or hextet aligned
(e.g. /33, /65). Textual or hextet-level prefix comparison must never be used
here: it lets an address that shares leading hextets with a trusted block
but differs past a non-aligned boundary pass as trusted.

All functions absorb malformed input. An unparsable address, a non-numeric
or out-of-range prefix, or mismatched address families yields False/None,
never an exception, so a single bad entry cannot disable an allowlist.

Usage:
    from src.core.ip_address import is_ip_in_cidr, is_private_or_reserved

    is_ip_in_cidr("2001:db8:8000::1", "2001:db8::/33")  # False
    is_ip_in_cidr("203.0.113.9", "203.0.113.0/24")      # True
    is_private_or_reserved("10.1.2.3")                  # True
"""

import re
from collections.abc import Iterable
from ipaddress import IPv4Address, IPv6Address, ip_address, ip_network
from typing import TypeAlias

IPAddress: TypeAlias = IPv4Address | IPv6Address

_PREFIX_PATTERN = re.compile(r"^[0-9]{1,3}$")

# Non-public IPv4 ranges (RFC 1918, loopback, link-local, multicast,
# reserved, "this network").
_IPV4_NON_PUBLIC = tuple(
    ip_network(block)
    for block in (
        "0.0.0.0/8",
        "10.0.0.0/8",
        "127.0.0.0/8",
        "169.254.0.0/16",
        "172.16.0.0/12",
        "192.168.0.0/16",
        "224.0.0.0/4",
        "240.0.0.0/4",
    )
)

# Non-public IPv6 ranges (unspecified, loopback, link-local, unique local,
# multicast).
_IPV6_NON_PUBLIC = tuple(
    ip_network(block)
    for block in (
        "::/128",
        "::1/128",
        "fe80::/10",
        "fc00::/7",
        "ff00::/8",
    )
)


def _strip_zone(value: str) -> str:
    """Remove an IPv6 zone suffix such as ``%eth0``."""
    head, _, _ = value.partition("%")
    return head


def parse_ip(value: str | None) -> IPAddress | None:
    """Parse a textual IPv4/IPv6 address.

    Surrounding whitespace and IPv6 zone suffixes are ignored.

    Args:
        value: Address text (e.g. "203.0.113.7", "fe80::1%eth0").

    Returns:
        Parsed address, or None if the text is not a valid address.
    """
    if not value:
        return None
    text = value.strip()
    if ":" in text:
        text = _strip_zone(text)
    if not text:
        return None
    try:
        return ip_address(text)
    except ValueError:
        return None


def is_valid_ip(value: str | None) -> bool:
    """Check whether text is a syntactically valid IPv4 or IPv6 address."""
    return parse_ip(value) is not None


def parse_cidr(cidr: str | None) -> tuple[IPAddress, int] | None:
    """Parse "address/prefix" notation.

    The network address may carry host bits (``10.1.2.3/8`` is accepted);
    they are masked off at comparison time.

    Args:
        cidr: CIDR text.

    Returns:
        Tuple of (network address, prefix length), or None when the text is
        malformed or the prefix is outside 0..32 (IPv4) / 0..128 (IPv6).
    """
    if not cidr:
        return None
    parts = cidr.strip().split("/")
    if len(parts) != 2:
        return None
    network_text, prefix_text = parts
    if not _PREFIX_PATTERN.match(prefix_text.strip()):
        return None
    network = parse_ip(network_text)
    if network is None:
        return None
    prefix_length = int(prefix_text.strip())
    if prefix_length > network.max_prefixlen:
        return None
    return network, prefix_length


def prefix_mask(prefix_length: int, width: int) -> int:
    """Build a mask of ``prefix_length`` leading one-bits in a ``width``-bit word.

    Example:
        >>> hex(prefix_mask(33, 128))
        '0xffffffff800000000000000000000000'
    """
    if prefix_length <= 0:
        return 0
    all_ones = (1 << width) - 1
    return (all_ones << (width - prefix_length)) & all_ones


def address_in_network(address: IPAddress, network: IPAddress, prefix_length: int) -> bool:
    """Bit-exact membership test on already parsed values.

    Returns False when the address families differ.
    """
    if address.version != network.version:
        return False
    if not 0 <= prefix_length <= network.max_prefixlen:
        return False
    mask = prefix_mask(prefix_length, network.max_prefixlen)
    return (int(address) & mask) == (int(network) & mask)


def is_ip_in_cidr(ip: str | None, cidr: str | None) -> bool:
    """Check whether an address falls inside a CIDR block.

    ``/0`` matches every address of the same family; ``/32`` (IPv4) and
    ``/128`` (IPv6) match only the identical address. IPv4-mapped IPv6
    addresses (``::ffff:a.b.c.d``) match IPv6 blocks written in the same
    mapped form.

    Args:
        ip: Address text.
        cidr: CIDR text ("network/prefix").

    Returns:
        True on a match; False on no match or any malformed input.
    """
    address = parse_ip(ip)
    if address is None:
        return False
    parsed = parse_cidr(cidr)
    if parsed is None:
        return False
    network, prefix_length = parsed
    return address_in_network(address, network, prefix_length)


def is_ip_in_any_cidr(ip: str | None, cidrs: Iterable[str]) -> bool:
    """Check an address against a list of CIDR blocks.

    Malformed entries are skipped; they never match and never raise.
    """
    address = parse_ip(ip)
    if address is None:
        return False
    for cidr in cidrs:
        parsed = parse_cidr(cidr)
        if parsed is not None and address_in_network(address, *parsed):
            return True
    return False


def is_private_or_reserved(ip: str | None) -> bool:
    """Check whether an address is private, loopback, link-local, multicast or reserved.

    IPv4-mapped IPv6 addresses are classified by their embedded IPv4
    address. Text that does not parse is treated as reserved.

    Args:
        ip: Address text.

    Returns:
        True if the address must not be used as a public client identity.
    """
    address = parse_ip(ip)
    if address is None:
        return True

    if isinstance(address, IPv6Address) and address.ipv4_mapped is not None:
        address = address.ipv4_mapped

    blocks = _IPV4_NON_PUBLIC if address.version == 4 else _IPV6_NON_PUBLIC
    return any(
        address_in_network(address, block.network_address, block.prefixlen)
        for block in blocks
    )
