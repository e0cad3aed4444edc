from fastapi import FastAPI
from pydantic import BaseModel
from statistics import mean
from typing import List, Optional

app = FastAPI(title="Mock Oracle Server", version="1.0.0")

# Deterministic stand-ins for the judgment services; no real analysis happens here
SILENT_WAV = "data:audio/wav;base64,UklGRiQAAABXQVZFZm10IBAAAAABAAEAQB8AAIA+AAACABAAZGF0YQAAAAA="


class Swipe(BaseModel):
    angle: float
    speed: float


class RiskRequest(BaseModel):
    tapPressure: List[float] = []
    swipeGestures: List[Swipe] = []
    keyHoldTimes: List[float] = []
    screenNavigation: List[str] = []
    ip: str = ""
    gyroVariance: float = 0.0
    sessionDuration: float = 0.0
    pastedCredentials: bool = False
    baselineKeyHoldTimes: Optional[List[float]] = None


class SignatureRequest(BaseModel):
    signatureDataUri: str


class VoiceRequest(BaseModel):
    loginAudioDataUri: str
    registrationAudioDataUri: str
    phrase: str


class AudioRequest(BaseModel):
    audioDataUri: str


class TextRequest(BaseModel):
    text: str


class ChatRequest(BaseModel):
    prompt: str


@app.get("/health")
def health(): return {"status": "ok"}


@app.post("/risk-score")
def risk_score(body: RiskRequest):
    score, reasons = 0.05, []
    if body.pastedCredentials:
        score += 0.5
        reasons.append("Credentials were pasted")
    if body.gyroVariance > 0.6:
        score += 0.2
        reasons.append("Erratic device handling")
    if body.sessionDuration < 5:
        score += 0.15
        reasons.append("Very short session")
    if body.baselineKeyHoldTimes and body.keyHoldTimes:
        baseline = mean(body.baselineKeyHoldTimes)
        if baseline > 0 and abs(mean(body.keyHoldTimes) - baseline) / baseline > 0.5:
            score += 0.25
            reasons.append("Typing rhythm differs from baseline")
    if not reasons:
        reasons.append("Behavior consistent with normal usage")
    return {"riskScore": round(min(score, 1.0), 2), "reasons": reasons}


@app.post("/verify-signature")
def verify_signature(body: SignatureRequest):
    valid = body.signatureDataUri.startswith("data:image/")
    return {
        "isValid": valid,
        "confidence": 0.9 if valid else 0.1,
        "reason": "Signature looks consistent" if valid else "Not an image",
    }


@app.post("/verify-voice")
def verify_voice(body: VoiceRequest):
    same = body.loginAudioDataUri == body.registrationAudioDataUri
    return {
        "isSpeakerVerified": same,
        "isMatch": same,
        "transcribedText": body.phrase if same else "",
        "reason": "Voice verified" if same else "Voice does not match the enrolled sample",
    }


@app.post("/transcribe")
def transcribe(body: AudioRequest):
    return {"text": '"open sesame"'}


@app.post("/text-to-speech")
def text_to_speech(body: TextRequest):
    return {"audioDataUri": SILENT_WAV}


@app.post("/chat")
def chat(body: ChatRequest):
    return {"answer": f"You asked: {body.prompt}. Please visit a branch for account-specific help."}
