"""Unit tests for IP parsing and bit-exact CIDR matching.

Tests cover:
- Boundary exactness at non-aligned prefixes (/23, /33, /65)
- /0 and full-length prefixes
- IPv4-mapped IPv6 and zone suffixes
- Malformed input absorbed as "no match"
- Private/reserved classification
"""

from ipaddress import ip_address, ip_network

import pytest

from src.core.ip_address import (
    is_ip_in_any_cidr,
    is_ip_in_cidr,
    is_private_or_reserved,
    is_valid_ip,
    parse_cidr,
    parse_ip,
    prefix_mask,
)


def flip_bit(address: str, bit_index: int) -> str:
    """Flip one bit of an address, counting from the most significant bit (0)."""
    parsed = ip_address(address)
    width = parsed.max_prefixlen
    flipped = int(parsed) ^ (1 << (width - 1 - bit_index))
    return str(type(parsed)(flipped))


@pytest.mark.unit
class TestParseIp:
    """Test address parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("203.0.113.7", "203.0.113.7"),
            ("  8.8.8.8 ", "8.8.8.8"),
            ("2001:db8::1", "2001:db8::1"),
            ("2001:0DB8:0000:0000:0000:0000:0000:0001", "2001:db8::1"),
            ("fe80::1%eth0", "fe80::1"),
        ],
    )
    def test_valid_addresses(self, value, expected):
        """Test valid IPv4/IPv6 text parses (whitespace and zones ignored)."""
        assert str(parse_ip(value)) == expected

    @pytest.mark.parametrize(
        "value",
        [
            None,
            "",
            "   ",
            "not-an-ip",
            "256.1.1.1",
            "1.2.3",
            "1.2.3.4.5",
            "2001:db8:::1",
            "%eth0",
        ],
    )
    def test_invalid_addresses(self, value):
        """Test malformed text returns None and is_valid_ip is False."""
        assert parse_ip(value) is None
        assert is_valid_ip(value) is False


@pytest.mark.unit
class TestParseCidr:
    """Test CIDR parsing."""

    def test_valid_cidr(self):
        """Test network and prefix are returned."""
        network, prefix = parse_cidr("10.0.0.0/8")
        assert str(network) == "10.0.0.0"
        assert prefix == 8

    def test_host_bits_are_accepted(self):
        """Test host bits in the network address are tolerated."""
        assert parse_cidr("10.1.2.3/8") is not None

    @pytest.mark.parametrize(
        "cidr",
        [
            None,
            "",
            "10.0.0.0",
            "10.0.0.0/",
            "10.0.0.0/33",
            "2001:db8::/129",
            "10.0.0.0/-1",
            "10.0.0.0/abc",
            "10.0.0.0/8/8",
            "10.0.0.0/1000",
            "bogus/8",
        ],
    )
    def test_malformed_cidr(self, cidr):
        """Test malformed CIDRs return None."""
        assert parse_cidr(cidr) is None


@pytest.mark.unit
class TestPrefixMask:
    """Test mask construction."""

    def test_non_aligned_ipv6_mask(self):
        """Test /33 mask in a 128-bit word."""
        assert hex(prefix_mask(33, 128)) == "0xffffffff800000000000000000000000"

    def test_zero_prefix_is_empty_mask(self):
        """Test /0 mask is zero."""
        assert prefix_mask(0, 32) == 0

    def test_full_prefix_is_all_ones(self):
        """Test /32 mask is all ones."""
        assert prefix_mask(32, 32) == 0xFFFFFFFF


@pytest.mark.unit
class TestBoundaryExactness:
    """Flipping the last network bit leaves the block; flipping the first host bit does not."""

    @pytest.mark.parametrize(
        "cidr,inside",
        [
            ("10.0.0.0/23", "10.0.1.5"),
            ("203.0.113.0/27", "203.0.113.17"),
            ("2001:db8::/33", "2001:db8::1"),
            ("2001:db8::/65", "2001:db8::1"),
            ("2001:db8:abcd:1200::/55", "2001:db8:abcd:1234::1"),
            ("2001:db8::/127", "2001:db8::1"),
        ],
    )
    def test_flip_last_network_bit_leaves_block(self, cidr, inside):
        """Test a single bit flip at position p-1 changes the result."""
        prefix = int(cidr.split("/")[1])
        assert is_ip_in_cidr(inside, cidr) is True
        assert is_ip_in_cidr(flip_bit(inside, prefix - 1), cidr) is False

    @pytest.mark.parametrize(
        "cidr,inside",
        [
            ("10.0.0.0/23", "10.0.1.5"),
            ("2001:db8::/33", "2001:db8::1"),
            ("2001:db8::/65", "2001:db8::1"),
        ],
    )
    def test_flip_first_host_bit_stays_inside(self, cidr, inside):
        """Test a flip at position p stays inside the block."""
        prefix = int(cidr.split("/")[1])
        assert is_ip_in_cidr(flip_bit(inside, prefix), cidr) is True

    def test_shared_leading_hextets_do_not_match(self):
        """Test an address sharing both leading hextets is rejected past /33."""
        assert is_ip_in_cidr("2001:db8:8000::1", "2001:db8::/33") is False
        assert is_ip_in_cidr("2001:db8:7fff:ffff::1", "2001:db8::/33") is True

    def test_agrees_with_stdlib_network_membership(self):
        """Test results match ipaddress network membership across prefixes."""
        address = "2001:db8:1234:5678:9abc:def0:1234:5678"
        for prefix in range(0, 129):
            network = ip_network(f"{address}/{prefix}", strict=False)
            candidate = flip_bit(address, prefix - 1) if prefix else address
            expected = ip_address(candidate) in network
            assert is_ip_in_cidr(candidate, f"{network.network_address}/{prefix}") is expected


@pytest.mark.unit
class TestSpecialPrefixes:
    """Test /0 and full-length prefixes."""

    @pytest.mark.parametrize("ip", ["0.0.0.0", "8.8.8.8", "255.255.255.255", "10.0.0.1"])
    def test_ipv4_zero_prefix_matches_all(self, ip):
        """Test 0.0.0.0/0 matches every IPv4 address."""
        assert is_ip_in_cidr(ip, "0.0.0.0/0") is True

    @pytest.mark.parametrize("ip", ["::", "::1", "2001:db8::1", "ffff::ffff"])
    def test_ipv6_zero_prefix_matches_all(self, ip):
        """Test ::/0 matches every IPv6 address."""
        assert is_ip_in_cidr(ip, "::/0") is True

    def test_zero_prefix_respects_family(self):
        """Test /0 does not cross address families."""
        assert is_ip_in_cidr("8.8.8.8", "::/0") is False
        assert is_ip_in_cidr("2001:db8::1", "0.0.0.0/0") is False

    def test_ipv4_host_prefix(self):
        """Test /32 matches only the identical address."""
        assert is_ip_in_cidr("203.0.113.7", "203.0.113.7/32") is True
        assert is_ip_in_cidr("203.0.113.6", "203.0.113.7/32") is False

    def test_ipv6_host_prefix(self):
        """Test /128 matches only the identical address."""
        assert is_ip_in_cidr("2001:db8::7", "2001:db8::7/128") is True
        assert is_ip_in_cidr("2001:db8::6", "2001:db8::7/128") is False


@pytest.mark.unit
class TestMappedAndZoned:
    """Test IPv4-mapped IPv6 and zone suffixes."""

    def test_mapped_address_matches_mapped_block(self):
        """Test ::ffff:a.b.c.d matches a CIDR written in the mapped form."""
        assert is_ip_in_cidr("::ffff:192.0.2.5", "::ffff:192.0.2.0/120") is True
        assert is_ip_in_cidr("::ffff:192.0.3.5", "::ffff:192.0.2.0/120") is False

    def test_mapped_address_does_not_match_ipv4_block(self):
        """Test mapped IPv6 is a different family from IPv4 blocks."""
        assert is_ip_in_cidr("::ffff:192.0.2.5", "192.0.2.0/24") is False

    def test_zone_suffix_is_ignored(self):
        """Test fe80::1%eth0 is matched as fe80::1."""
        assert is_ip_in_cidr("fe80::1%eth0", "fe80::/10") is True


@pytest.mark.unit
class TestMalformedInput:
    """Test malformed input never raises."""

    @pytest.mark.parametrize(
        "ip,cidr",
        [
            ("not-an-ip", "10.0.0.0/8"),
            ("10.0.0.1", "garbage"),
            ("10.0.0.1", "10.0.0.0/33"),
            ("10.0.0.1", "10.0.0.0/-1"),
            ("10.0.0.1", "10.0.0.0/x"),
            (None, "10.0.0.0/8"),
            ("10.0.0.1", None),
            ("", ""),
        ],
    )
    def test_returns_false(self, ip, cidr):
        """Test malformed address or CIDR yields False."""
        assert is_ip_in_cidr(ip, cidr) is False

    def test_bad_entries_do_not_disable_list(self):
        """Test one malformed CIDR is skipped and the rest still match."""
        cidrs = ["bogus", "10.0.0.0/99", "203.0.113.0/24"]
        assert is_ip_in_any_cidr("203.0.113.9", cidrs) is True
        assert is_ip_in_any_cidr("198.51.100.1", cidrs) is False

    def test_empty_list(self):
        """Test no CIDRs means no match."""
        assert is_ip_in_any_cidr("203.0.113.9", []) is False


@pytest.mark.unit
class TestPrivateOrReserved:
    """Test private/reserved classification."""

    @pytest.mark.parametrize(
        "ip",
        [
            "0.1.2.3",
            "10.1.2.3",
            "127.0.0.1",
            "169.254.10.10",
            "172.16.0.1",
            "172.31.255.255",
            "192.168.1.1",
            "224.0.0.1",
            "239.255.255.255",
            "240.0.0.1",
            "255.255.255.255",
            "::",
            "::1",
            "fe80::1",
            "febf::1",
            "fc00::1",
            "fd12:3456::1",
            "ff02::1",
            "::ffff:10.0.0.1",
            "not-an-ip",
        ],
    )
    def test_non_public(self, ip):
        """Test private, loopback, link-local, multicast, reserved and unparsable."""
        assert is_private_or_reserved(ip) is True

    @pytest.mark.parametrize(
        "ip",
        [
            "8.8.8.8",
            "172.15.255.255",
            "172.32.0.1",
            "192.169.0.1",
            "223.255.255.255",
            "2001:4860:4860::8888",
            "fec0::1",
            "::ffff:8.8.8.8",
        ],
    )
    def test_public(self, ip):
        """Test public addresses just outside the reserved blocks."""
        assert is_private_or_reserved(ip) is False
