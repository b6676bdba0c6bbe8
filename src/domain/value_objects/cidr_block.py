"""CIDR block value object.

Immutable "network/prefix" pair parsed from configuration. Parsing never
raises: invalid text yields None so one bad entry in a trusted proxy list is
discarded instead of disabling the whole list.

Usage:
    from src.domain.value_objects import CidrBlock

    block = CidrBlock.parse("2001:db8::/33")
    if block is not None and block.contains(peer_ip):
        ...
"""

from collections.abc import Iterable
from dataclasses import dataclass
from ipaddress import ip_address

from src.core.ip_address import address_in_network, parse_cidr, parse_ip


@dataclass(frozen=True, slots=True, kw_only=True)
class CidrBlock:
    """Parsed CIDR block.

    Attributes:
        network_address: Canonical text of the network address (host bits
            are kept as written; masking happens on comparison).
        prefix_length: Number of leading network bits.
    """

    network_address: str
    prefix_length: int

    @classmethod
    def parse(cls, text: str) -> "CidrBlock | None":
        """Parse "address/prefix" notation.

        Args:
            text: CIDR text, surrounding whitespace allowed.

        Returns:
            CidrBlock, or None when the text is malformed.
        """
        parsed = parse_cidr(text)
        if parsed is None:
            return None
        network, prefix_length = parsed
        return cls(network_address=str(network), prefix_length=prefix_length)

    @classmethod
    def parse_many(cls, texts: Iterable[str]) -> tuple["CidrBlock", ...]:
        """Parse a list of CIDRs, dropping malformed entries."""
        blocks = (cls.parse(text) for text in texts)
        return tuple(block for block in blocks if block is not None)

    @property
    def version(self) -> int:
        """IP version of the block (4 or 6)."""
        return ip_address(self.network_address).version

    def contains(self, ip: str | None) -> bool:
        """Bit-exact membership test.

        Args:
            ip: Address text.

        Returns:
            True if the address is inside the block; False on no match,
            family mismatch or malformed input.
        """
        address = parse_ip(ip)
        if address is None:
            return False
        return address_in_network(
            address, ip_address(self.network_address), self.prefix_length
        )

    def __str__(self) -> str:
        return f"{self.network_address}/{self.prefix_length}"
