"""Oracle-backed helpers - signature check, transcription, speech and chat assistant"""

import logging
from fastapi import APIRouter, Depends, HTTPException
from bankshield.api.v1.schemas import (
    ChatRequest,
    ChatResponse,
    SignatureRequest,
    SignatureResponse,
    SpeechRequest,
    SpeechResponse,
    TranscribeRequest,
    TranscribeResponse,
)
from bankshield.api.dependencies import (
    SessionContext,
    get_assistant_client,
    get_signature_client,
    get_voice_client,
    require_active_session,
)
from bankshield.domain.exceptions import OracleError
from bankshield.domain.verification import verify_signature
from bankshield.infrastructure.clients.verification import AssistantClient, SignatureClient, VoiceClient

router = APIRouter()

ASSISTANT_FALLBACK = "I'm sorry, I'm having trouble connecting right now. Please try again later."


@router.post("/signature/verify", response_model=SignatureResponse)
async def check_signature(
    request_body: SignatureRequest,
    ctx: SessionContext = Depends(require_active_session),
    signature_client: SignatureClient = Depends(get_signature_client),
):
    """Oracle failures come back as an invalid signature with zero confidence"""
    verdict = await verify_signature(signature_client, request_body.signature_data_uri)
    return SignatureResponse(is_valid=verdict.is_valid, confidence=verdict.confidence, reason=verdict.reason)


@router.post("/voice/transcribe", response_model=TranscribeResponse)
async def transcribe(
    request_body: TranscribeRequest,
    ctx: SessionContext = Depends(require_active_session),
    voice_client: VoiceClient = Depends(get_voice_client),
):
    try:
        text = await voice_client.transcribe(request_body.audio_data_uri)
    except OracleError as e:
        logging.error(f"Transcription failed: {e}")
        raise HTTPException(status_code=503, detail="Transcription service unavailable")
    return TranscribeResponse(text=text)


@router.post("/voice/speech", response_model=SpeechResponse)
async def text_to_speech(
    request_body: SpeechRequest,
    ctx: SessionContext = Depends(require_active_session),
    voice_client: VoiceClient = Depends(get_voice_client),
):
    try:
        audio = await voice_client.text_to_speech(request_body.text)
    except OracleError as e:
        logging.error(f"Text-to-speech failed: {e}")
        raise HTTPException(status_code=503, detail="Speech service unavailable")
    return SpeechResponse(audio_data_uri=audio)


@router.post("/assistant/chat", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    ctx: SessionContext = Depends(require_active_session),
    assistant: AssistantClient = Depends(get_assistant_client),
):
    try:
        answer = await assistant.ask(request_body.question)
    except OracleError as e:
        logging.warning(f"Assistant unavailable: {e}")
        answer = ASSISTANT_FALLBACK
    return ChatResponse(answer=answer)
