"""Signature, voice, transcription, speech and chat oracle clients"""

import math

from bankshield.domain.exceptions import OracleError
from bankshield.domain.models import SignatureVerification, VoiceVerification
from bankshield.domain.verification import clean_transcription
from bankshield.infrastructure.clients.base import OracleClient


def _flag(data: dict, key: str) -> bool:
    value = data[key]
    if not isinstance(value, bool):
        raise OracleError(f"{key} is not a boolean: {value!r}")
    return value


def _confidence(data: dict) -> float:
    value = data["confidence"]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise OracleError(f"confidence is not a number: {value!r}")
    if math.isnan(value) or not 0.0 <= value <= 1.0:
        raise OracleError(f"confidence out of range: {value}")
    return float(value)


class SignatureClient(OracleClient):
    oracle_name = "signature"

    async def verify_signature(self, signature_data_uri: str) -> SignatureVerification:
        data = await self._post("/verify-signature", {"signatureDataUri": signature_data_uri})
        try:
            return SignatureVerification(
                is_valid=_flag(data, "isValid"),
                confidence=_confidence(data),
                reason=str(data["reason"]),
            )
        except (KeyError, TypeError) as e:
            raise OracleError(f"Invalid signature verdict from oracle: {e}") from e


class VoiceClient(OracleClient):
    oracle_name = "voice"

    async def verify_voice(self, login_audio: str, registration_audio: str, phrase: str) -> VoiceVerification:
        """Phrase matching tolerates transcription noise on the oracle side"""
        data = await self._post(
            "/verify-voice",
            {
                "loginAudioDataUri": login_audio,
                "registrationAudioDataUri": registration_audio,
                "phrase": phrase,
            },
        )
        try:
            return VoiceVerification(
                is_speaker_verified=_flag(data, "isSpeakerVerified"),
                is_match=_flag(data, "isMatch"),
                transcribed_text=str(data.get("transcribedText", "")),
                reason=str(data.get("reason", "")),
            )
        except (KeyError, TypeError) as e:
            raise OracleError(f"Invalid voice verdict from oracle: {e}") from e

    async def transcribe(self, audio_data_uri: str) -> str:
        data = await self._post("/transcribe", {"audioDataUri": audio_data_uri})
        text = data.get("text")
        if not isinstance(text, str):
            raise OracleError("Transcription oracle returned no text")
        return clean_transcription(text)

    async def text_to_speech(self, text: str) -> str:
        data = await self._post("/text-to-speech", {"text": text})
        audio = data.get("audioDataUri")
        if not isinstance(audio, str) or not audio:
            raise OracleError("No audio was generated.")
        return audio


class AssistantClient(OracleClient):
    oracle_name = "chat"

    async def ask(self, question: str) -> str:
        data = await self._post("/chat", {"prompt": question})
        answer = data.get("answer")
        if not isinstance(answer, str):
            raise OracleError("Chat oracle returned no answer")
        return answer
