"""
Domain Identifiers

Chains are addressed inside the messaging protocol by a 32-bit domain. The
convention is a short ASCII tag read as a big-endian integer, so b'celo'
becomes 0x63656c6f. The mapping is fixed and reversible, not a hash: two
chains sharing a tag share a domain, and keeping tags unique is up to whoever
assembles the set of chains.
"""

from collections import defaultdict
from typing import Dict, List, Mapping

from .errors import InvalidDomain

MAX_DOMAIN = 2**32 - 1
MAX_TAG_BYTES = 4

# Tags used by the existing deployments
KNOWN_DOMAIN_TAGS: Dict[str, str] = {
    "ethereum": "eth",
    "celo": "celo",
    "polygon": "poly",
    "avalanche": "avax",
}


def domain_from_tag(tag: str) -> int:
    """
    Interpret an ASCII tag of at most 4 bytes as a big-endian integer.

    Longer tags are rejected rather than truncated, since truncation would
    silently map 'celo' and 'celonet' to the same domain.

    Args:
        tag: ASCII tag, e.g. 'eth' or 'celo'

    Returns:
        Domain identifier

    Raises:
        InvalidDomain: tag is empty, non-ASCII or longer than 4 bytes
    """
    if not isinstance(tag, str) or not tag:
        raise InvalidDomain(f"Domain tag must be a non-empty string, got {tag!r}", "domain_tag")
    try:
        raw = tag.encode("ascii")
    except UnicodeEncodeError:
        raise InvalidDomain(f"Domain tag must be ASCII, got {tag!r}", "domain_tag") from None
    if len(raw) > MAX_TAG_BYTES:
        raise InvalidDomain(
            f"Domain tag {tag!r} is {len(raw)} bytes, at most {MAX_TAG_BYTES} allowed",
            "domain_tag",
        )
    return int.from_bytes(raw, "big")


def tag_from_domain(domain: int) -> str:
    """Recover the ASCII tag a domain was derived from"""
    validate_domain(domain)
    length = max(1, (domain.bit_length() + 7) // 8)
    try:
        return domain.to_bytes(length, "big").decode("ascii")
    except UnicodeDecodeError:
        raise InvalidDomain(f"Domain {domain:#x} does not encode an ASCII tag") from None


def validate_domain(domain: int) -> int:
    """Check that a domain fits in an unsigned 32-bit integer"""
    if isinstance(domain, bool) or not isinstance(domain, int):
        raise InvalidDomain(f"Domain must be an integer, got {domain!r}")
    if not 0 <= domain <= MAX_DOMAIN:
        raise InvalidDomain(f"Domain {domain} is out of range for uint32 (0..{MAX_DOMAIN})")
    return domain


def get_domain(chain_name: str) -> int:
    """Get the domain of a chain, using its registered tag if it has one"""
    tag = KNOWN_DOMAIN_TAGS.get(chain_name.lower(), chain_name.lower())
    return domain_from_tag(tag)


def get_known_chains() -> List[str]:
    """Get names of chains with a registered domain tag"""
    return list(KNOWN_DOMAIN_TAGS.keys())


def find_domain_collisions(domains: Mapping[str, int]) -> Dict[int, List[str]]:
    """
    Find chains that share a domain identifier.

    Args:
        domains: Chain name to domain mapping

    Returns:
        Domain to chain names, only for domains claimed by more than one chain
    """
    owners: Dict[int, List[str]] = defaultdict(list)
    for name, domain in domains.items():
        owners[domain].append(name)
    return {domain: names for domain, names in owners.items() if len(names) > 1}
