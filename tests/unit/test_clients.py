"""Unit tests for the oracle and geolocation HTTP clients"""

import httpx
import pytest
from unittest.mock import AsyncMock, patch
from bankshield.domain.exceptions import OracleError
from bankshield.domain.verification import verify_signature, verify_voice
from bankshield.infrastructure.clients.geo import UNKNOWN_LOCATION, IpLocatorClient
from bankshield.infrastructure.clients.risk_oracle import RiskOracleClient, signals_payload
from bankshield.infrastructure.clients.verification import AssistantClient, SignatureClient, VoiceClient

BASE = "http://oracle.test"


def json_response(method: str, url: str, payload, status_code: int = 200) -> httpx.Response:
    return httpx.Response(status_code, json=payload, request=httpx.Request(method, url))


def test_signals_payload_uses_wire_names(sample_signals):
    payload = signals_payload(sample_signals)
    assert payload["tapPressure"] == [0.42, 0.51, 0.47]
    assert payload["swipeGestures"] == [{"angle": 12.5, "speed": 0.8}]
    assert payload["pastedCredentials"] is False
    assert payload["sessionDuration"] == 84.0
    assert "baselineKeyHoldTimes" not in payload

    sample_signals.baseline_key_hold_times = [0.1, 0.2]
    assert signals_payload(sample_signals)["baselineKeyHoldTimes"] == [0.1, 0.2]


async def test_risk_oracle_parses_score(sample_signals):
    response = json_response("POST", f"{BASE}/risk-score", {"riskScore": 0.45, "reasons": ["new device"]})
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)) as mock_post:
        assessment = await RiskOracleClient(base_url=BASE).score(sample_signals)

    assert assessment.risk_score == 0.45
    assert assessment.reasons == ["new device"]
    assert mock_post.call_args.args[0] == f"{BASE}/risk-score"


async def test_risk_oracle_missing_fields_raise(sample_signals):
    response = json_response("POST", f"{BASE}/risk-score", {"score": 0.45})
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        with pytest.raises(OracleError):
            await RiskOracleClient(base_url=BASE).score(sample_signals)


async def test_http_error_maps_to_oracle_error(sample_signals):
    response = json_response("POST", f"{BASE}/risk-score", {"error": "overloaded"}, status_code=503)
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        with pytest.raises(OracleError, match="503"):
            await RiskOracleClient(base_url=BASE).score(sample_signals)


async def test_timeout_maps_to_oracle_error(sample_signals):
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(side_effect=httpx.ReadTimeout("slow"))):
        with pytest.raises(OracleError, match="timeout"):
            await RiskOracleClient(base_url=BASE, timeout=0.5).score(sample_signals)


async def test_non_object_response_maps_to_oracle_error(sample_signals):
    response = json_response("POST", f"{BASE}/risk-score", [0.1])
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        with pytest.raises(OracleError):
            await RiskOracleClient(base_url=BASE).score(sample_signals)


async def test_voice_client_verify_voice():
    response = json_response(
        "POST",
        f"{BASE}/verify-voice",
        {"isSpeakerVerified": True, "isMatch": False, "transcribedText": "open sesam", "reason": "phrase differs"},
    )
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)) as mock_post:
        verdict = await VoiceClient(base_url=BASE).verify_voice("data:audio/a", "data:audio/b", "open sesame")

    assert not verdict.verified
    assert verdict.reason == "phrase differs"
    sent = mock_post.call_args.kwargs["json"]
    assert sent == {
        "loginAudioDataUri": "data:audio/a",
        "registrationAudioDataUri": "data:audio/b",
        "phrase": "open sesame",
    }


async def test_transcribe_strips_wrapping_quotes():
    response = json_response("POST", f"{BASE}/transcribe", {"text": ' "open sesame" '})
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        assert await VoiceClient(base_url=BASE).transcribe("data:audio/a") == "open sesame"


async def test_text_to_speech_without_audio_raises():
    response = json_response("POST", f"{BASE}/text-to-speech", {"audioDataUri": ""})
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        with pytest.raises(OracleError):
            await VoiceClient(base_url=BASE).text_to_speech("hello")


async def test_signature_client():
    response = json_response(
        "POST", f"{BASE}/verify-signature", {"isValid": True, "confidence": 0.82, "reason": "consistent strokes"}
    )
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        verdict = await SignatureClient(base_url=BASE).verify_signature("data:image/png;base64,AAAA")
    assert verdict.is_valid
    assert verdict.confidence == 0.82


@pytest.mark.parametrize(
    "payload",
    [
        {"isSpeakerVerified": "false", "isMatch": "false", "transcribedText": "open sesame", "reason": ""},
        {"isSpeakerVerified": 1, "isMatch": True, "transcribedText": "open sesame", "reason": ""},
        {"isMatch": True, "transcribedText": "open sesame"},
    ],
)
async def test_malformed_voice_verdict_raises(payload):
    response = json_response("POST", f"{BASE}/verify-voice", payload)
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        with pytest.raises(OracleError):
            await VoiceClient(base_url=BASE).verify_voice("data:audio/a", "data:audio/b", "open sesame")


async def test_malformed_voice_verdict_is_not_verified():
    response = json_response(
        "POST",
        f"{BASE}/verify-voice",
        {"isSpeakerVerified": "false", "isMatch": "false", "transcribedText": "open sesame", "reason": ""},
    )
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        verdict = await verify_voice(VoiceClient(base_url=BASE), "data:audio/a", "data:audio/b", "open sesame")
    assert not verdict.verified


@pytest.mark.parametrize(
    "payload",
    [
        {"isValid": "false", "confidence": 0.5, "reason": "r"},
        {"isValid": True, "confidence": 7.5, "reason": "r"},
        {"isValid": True, "confidence": -0.1, "reason": "r"},
        {"isValid": True, "confidence": "0.9", "reason": "r"},
        {"isValid": True, "confidence": True, "reason": "r"},
    ],
)
async def test_malformed_signature_verdict_raises(payload):
    response = json_response("POST", f"{BASE}/verify-signature", payload)
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        with pytest.raises(OracleError):
            await SignatureClient(base_url=BASE).verify_signature("data:image/png;base64,AAAA")


async def test_malformed_signature_verdict_is_invalid():
    response = json_response("POST", f"{BASE}/verify-signature", {"isValid": "false", "confidence": 7.5, "reason": "r"})
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)):
        verdict = await verify_signature(SignatureClient(base_url=BASE), "data:image/png;base64,AAAA")
    assert verdict.is_valid is False
    assert verdict.confidence == 0.0


async def test_assistant_client_sends_prompt():
    response = json_response("POST", f"{BASE}/chat", {"answer": "Visit the Fixed Deposits tab."})
    with patch.object(httpx.AsyncClient, "post", new=AsyncMock(return_value=response)) as mock_post:
        answer = await AssistantClient(base_url=BASE).ask("How do I open an FD?")
    assert answer == "Visit the Fixed Deposits tab."
    assert mock_post.call_args.kwargs["json"] == {"prompt": "How do I open an FD?"}


async def test_ip_locator_describes_location():
    response = json_response(
        "GET",
        "http://ip.test/json/8.8.8.8",
        {"status": "success", "city": "Mountain View", "regionName": "California", "country": "United States"},
    )
    with patch.object(httpx.AsyncClient, "get", new=AsyncMock(return_value=response)):
        described = await IpLocatorClient(base_url="http://ip.test").describe("8.8.8.8")
    assert described == "Mountain View, California, United States"


async def test_ip_locator_failure_is_unknown_location():
    response = json_response("GET", "http://ip.test/json/10.0.0.1", {"status": "fail", "message": "private range"})
    with patch.object(httpx.AsyncClient, "get", new=AsyncMock(return_value=response)):
        assert await IpLocatorClient(base_url="http://ip.test").describe("10.0.0.1") == UNKNOWN_LOCATION

    with patch.object(httpx.AsyncClient, "get", new=AsyncMock(side_effect=httpx.ConnectError("down"))):
        assert await IpLocatorClient(base_url="http://ip.test").describe("10.0.0.1") == UNKNOWN_LOCATION
