"""Credential comparison and normalization.

Stored credentials are plaintext in this demo. Comparison goes through a
verifier so the storage format can be hardened without touching the policies.
"""

import hmac
import secrets
from typing import List, Optional, Protocol

MNEMONIC_WORD_COUNT = 12

MNEMONIC_WORDS = [
    "apple", "banana", "cherry", "date", "elderberry", "fig", "grape", "honeydew",
    "kiwi", "lemon", "mango", "nectarine", "orange", "papaya", "quince", "raspberry",
    "strawberry", "tangerine", "ugli", "vanilla", "watermelon", "xigua", "yuzu", "zucchini",
    "able", "baker", "charlie", "delta", "echo", "foxtrot", "golf", "hotel",
    "india", "juliett", "kilo", "lima", "mike", "november", "oscar", "papa",
    "quebec", "romeo", "sierra", "tango", "uniform", "victor", "whiskey", "xray",
    "yankee", "zulu",
]


class CredentialVerifier(Protocol):
    def verify(self, submitted: str, stored: Optional[str]) -> bool:
        ...


class PlaintextCredentialVerifier:
    """Equality check against a stored plaintext secret, in constant time"""

    def verify(self, submitted: str, stored: Optional[str]) -> bool:
        if stored is None:
            return False
        return hmac.compare_digest(submitted.encode("utf-8"), stored.encode("utf-8"))


def normalize_mnemonic(phrase: str) -> str:
    """Lower-case and collapse all whitespace runs to single spaces"""
    return " ".join(phrase.strip().lower().split())


def normalize_security_answer(answer: str) -> str:
    return answer.strip().lower()


def generate_mnemonic(word_count: int = MNEMONIC_WORD_COUNT, words: List[str] = MNEMONIC_WORDS) -> str:
    return " ".join(secrets.choice(words) for _ in range(word_count))
