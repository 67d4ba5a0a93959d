# hwid_agent/utils/hash_utils.py

import hashlib

# sha256 rendered as full lowercase hex, never truncated
HWID_LENGTH = 64


def sha256_string(data: str):
    return hashlib.sha256(data.encode("utf-8")).hexdigest()


def digest_identifier(composite: str) -> str:
    """
    One-way digest of a composite identifier into a fixed-length hwid
    """
    return sha256_string(composite)
