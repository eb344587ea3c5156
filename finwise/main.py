"""FastAPI main application."""
import logging
from typing import List, Optional
from fastapi import Depends, FastAPI, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from finwise.adapters.factory import build_default_adapter
from finwise.config import settings
from finwise.errors import NotAuthenticatedError, TransactionNotFoundError, TransactionWriteError, require_user
from finwise.models.chat import ChatMessage, ChatMessageCreate, ChatRequest, ChatResponse, Sender
from finwise.models.summary import TotalsReport
from finwise.models.transaction import Transaction, TransactionCreate, TransactionIn
from finwise.services.aggregation import FinanceAggregator, resolve_window
from finwise.services.assistant import AssistantOrchestrator
from finwise.storage.database import ChatStore, TransactionStore, get_db
from finwise.utils.logging import configure_logging

configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_name, debug=settings.debug)

aggregator = FinanceAggregator()
_adapter_built = False
_adapter = None


@app.exception_handler(NotAuthenticatedError)
async def not_authenticated_handler(request: Request, exc: NotAuthenticatedError):
    return JSONResponse(status_code=401, content={"detail": str(exc)})


@app.exception_handler(TransactionNotFoundError)
async def not_found_handler(request: Request, exc: TransactionNotFoundError):
    return JSONResponse(status_code=404, content={"detail": str(exc)})


def get_user_id(x_user_id: Optional[str] = Header(None)) -> str:
    """Caller identity, resolved upstream and passed in the X-User-Id header."""
    return require_user(x_user_id)


def get_transaction_store() -> TransactionStore:
    transaction_store, _ = get_db()
    return transaction_store


def get_chat_store() -> ChatStore:
    _, chat_store = get_db()
    return chat_store


def get_assistant(
    transaction_store: TransactionStore = Depends(get_transaction_store),
) -> AssistantOrchestrator:
    """Assistant wired to the configured completion model (or none when unconfigured)."""
    global _adapter_built, _adapter
    if not _adapter_built:
        _adapter = build_default_adapter()
        _adapter_built = True
    return AssistantOrchestrator(transaction_store, adapter=_adapter)


@app.get("/")
async def root():
    """Root endpoint."""
    return {"message": "FinWise Assistant API", "version": "1.0.0"}


@app.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    user_id: str = Depends(get_user_id),
    chat_store: ChatStore = Depends(get_chat_store),
    assistant: AssistantOrchestrator = Depends(get_assistant),
):
    """
    Send a message to the assistant.

    The user's message and the reply are both appended to the chat log.
    """
    user_message = chat_store.append(ChatMessageCreate(text=request.text, sender=Sender.USER, user_id=user_id))
    reply = await assistant.handle_message(user_id, request.text)
    bot_message = chat_store.append(ChatMessageCreate(text=reply.text, sender=Sender.BOT, user_id=user_id))
    logger.info("Chat reply sent", extra={"user_id": user_id, "outcome": reply.outcome.value})
    return ChatResponse(user_message=user_message, bot_message=bot_message)


@app.get("/chat/history", response_model=List[ChatMessage])
async def chat_history(
    user_id: str = Depends(get_user_id),
    chat_store: ChatStore = Depends(get_chat_store),
):
    """The user's conversation, oldest first."""
    return chat_store.list_by_user(user_id)


@app.delete("/chat/history")
async def clear_chat_history(
    user_id: str = Depends(get_user_id),
    chat_store: ChatStore = Depends(get_chat_store),
):
    """Delete every message in the user's conversation."""
    deleted = chat_store.delete_all_by_user(user_id)
    return {"user_id": user_id, "deleted": deleted}


@app.post("/transactions", response_model=Transaction)
async def create_transaction(
    body: TransactionIn,
    user_id: str = Depends(get_user_id),
    transaction_store: TransactionStore = Depends(get_transaction_store),
):
    """Record a transaction for the user."""
    data = body.model_dump(exclude_none=True)
    try:
        tx = TransactionCreate(user_id=user_id, **data)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    try:
        tx_id = transaction_store.write(tx)
    except TransactionWriteError as e:
        raise HTTPException(status_code=500, detail=str(e))
    return Transaction(id=tx_id, **tx.model_dump())


@app.get("/transactions", response_model=List[Transaction])
async def list_transactions(
    window: Optional[str] = Query(None, description="today, week, month, year or days"),
    days: Optional[int] = Query(None, ge=1, description="Day count for window=days"),
    user_id: str = Depends(get_user_id),
    transaction_store: TransactionStore = Depends(get_transaction_store),
):
    """The user's transactions, newest first, optionally limited to a window."""
    if window is None:
        return transaction_store.query(user_id)
    try:
        bounds = resolve_window(window, days=days)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    transactions = transaction_store.query(user_id, bounds.start, bounds.end)
    return aggregator.filter_window(transactions, bounds, user_id=user_id)


@app.get("/transactions/search", response_model=List[Transaction])
async def search_transactions(
    q: str = Query(..., description="Text to find in title or category"),
    user_id: str = Depends(get_user_id),
    transaction_store: TransactionStore = Depends(get_transaction_store),
):
    """Case-insensitive search over the user's transaction titles and categories."""
    return transaction_store.search(user_id, q)


@app.delete("/transactions/{tx_id}")
async def delete_transaction(
    tx_id: str,
    user_id: str = Depends(get_user_id),
    transaction_store: TransactionStore = Depends(get_transaction_store),
):
    """Delete one of the user's transactions."""
    transaction_store.delete(user_id, tx_id)
    return {"deleted": tx_id}


@app.get("/stats", response_model=TotalsReport)
async def stats(
    window: str = Query("month", description="today, week, month, year or days"),
    days: Optional[int] = Query(None, ge=1, description="Day count for window=days"),
    user_id: str = Depends(get_user_id),
    transaction_store: TransactionStore = Depends(get_transaction_store),
):
    """Income, expenses, balance, savings rate and category breakdown for a window."""
    try:
        bounds = resolve_window(window, days=days)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    transactions = transaction_store.query(user_id, bounds.start, bounds.end)
    return aggregator.totals(transactions, bounds, user_id=user_id)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
