"""Signature and voice verification gates around the external oracles"""

import logging
import re
from typing import Protocol

from bankshield.domain.credentials import normalize_mnemonic, normalize_security_answer
from bankshield.domain.models import Account, SignatureVerification, VoiceVerification

logger = logging.getLogger(__name__)

_WRAPPING_QUOTES = re.compile(r"^[\"']|[\"']$")


class SignatureOracle(Protocol):
    async def verify_signature(self, signature_data_uri: str) -> SignatureVerification:
        ...


class VoiceOracle(Protocol):
    async def verify_voice(self, login_audio: str, registration_audio: str, phrase: str) -> VoiceVerification:
        ...


async def verify_signature(oracle: SignatureOracle, signature_data_uri: str) -> SignatureVerification:
    """Oracle failure counts as an invalid signature"""
    try:
        return await oracle.verify_signature(signature_data_uri)
    except Exception as e:
        logger.warning("Signature oracle failed", extra={"step": "signature_verification", "error": repr(e)})
        return SignatureVerification(
            is_valid=False,
            confidence=0.0,
            reason="Signature could not be analyzed. Please try again.",
        )


async def verify_voice(
    oracle: VoiceOracle, login_audio: str, registration_audio: str, phrase: str
) -> VoiceVerification:
    """Oracle failure counts as not verified, with the reason surfaced"""
    try:
        return await oracle.verify_voice(login_audio, registration_audio, phrase)
    except Exception as e:
        logger.warning("Voice oracle failed", extra={"step": "voice_verification", "error": repr(e)})
        return VoiceVerification(
            is_speaker_verified=False,
            is_match=False,
            transcribed_text="",
            reason="AI model failed to produce a valid analysis.",
        )


def clean_transcription(text: str) -> str:
    """Strip one wrapping quote character from each end, trimming spaces inside and out"""
    return _WRAPPING_QUOTES.sub("", text.strip()).strip()


def mnemonic_matches(account: Account, phrase: str) -> bool:
    if not account.mnemonic:
        return False
    return normalize_mnemonic(account.mnemonic) == normalize_mnemonic(phrase)


def security_answer_matches(account: Account, answer: str) -> bool:
    if not account.security_answer:
        return False
    return account.security_answer == normalize_security_answer(answer)
