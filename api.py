from functools import lru_cache
from typing import Literal

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel
import uvicorn

from docchat import config
from docchat.application.chat_session import ChatSession
from docchat.domain.models import SourceKind
from main import build_session


# ── API Models ───────────────────────────────────────────────────────────────
class LoadRequest(BaseModel):
    source: Literal["pdf", "word", "web"]
    location: str


class ChatRequest(BaseModel):
    message: str


class ReplyResponse(BaseModel):
    answer: str


# ── App Initialization ───────────────────────────────────────────────────────
app = FastAPI(
    title="DocChat API",
    description="Ask questions about a PDF, Word document or web page.",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:8080", "http://127.0.0.1:8080"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@lru_cache(maxsize=1)
def get_session() -> ChatSession:
    """One session per process; built on first request."""
    return build_session()


# ── Endpoints ────────────────────────────────────────────────────────────────
@app.get("/status")
def get_status(session: ChatSession = Depends(get_session)):
    """Readiness of the loaded document and the retrieval mode in use."""
    return {
        "active_source": session.active_source.value,
        "selected": session.selected(session.active_source),
        "chunks_loaded": len(session.chunks),
        "vocabulary_size": len(session.vocabulary),
        "semantic_index": session.has_index,
        "semantic_mode_available": config.SEMANTIC_MODE_AVAILABLE,
    }


@app.post("/load", response_model=ReplyResponse)
async def load_document(request: LoadRequest, session: ChatSession = Depends(get_session)):
    if not request.location.strip():
        raise HTTPException(status_code=400, detail="location cannot be empty.")

    source = SourceKind(request.source)
    if source is SourceKind.WEB:
        answer = await session.load_web(request.location)
    else:
        answer = await session.load(source, request.location.strip())
    return ReplyResponse(answer=answer)


@app.post("/chat", response_model=ReplyResponse)
async def chat(request: ChatRequest, session: ChatSession = Depends(get_session)):
    if not request.message.strip():
        raise HTTPException(status_code=400, detail="message cannot be empty.")
    return ReplyResponse(answer=await session.send(request.message))


@app.post("/new", response_model=ReplyResponse)
def new_chat(session: ChatSession = Depends(get_session)):
    return ReplyResponse(answer=session.new_chat())


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
