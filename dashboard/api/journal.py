from fastapi import APIRouter, HTTPException, Depends
from typing import Dict, Any

from services import UserSession
from services.journal_service import random_prompt
from shared.models import JournalForm, JournalPublish
from ..dependencies import get_session

router = APIRouter(prefix="/api/journal", tags=["journal"])


@router.get("/", response_model=Dict[str, Any])
async def get_journal(session: UserSession = Depends(get_session)):
    """
    Записи (новые первыми), черновики, форма редактора и подсказка дня
    """
    return {
        "entries": [entry.to_dict() for entry in session.journal.list_entries()],
        "drafts": [draft.to_dict() for draft in session.journal.list_drafts()],
        "editor": session.editor.get_state(),
        "prompt": random_prompt()
    }


@router.post("/entries", response_model=Dict[str, Any], status_code=201)
async def publish_entry(body: JournalPublish, session: UserSession = Depends(get_session)):
    """Прямая публикация без редактора"""
    return session.journal.publish(body.title, body.content, body.mood).to_dict()


@router.delete("/entries/{entry_id}")
async def delete_entry(entry_id: str, session: UserSession = Depends(get_session)):
    if not session.journal.delete_entry(entry_id):
        raise HTTPException(status_code=404, detail="Journal entry not found")
    return {"success": True}


# ===== РЕДАКТОР =====

@router.get("/editor", response_model=Dict[str, Any])
async def get_editor(session: UserSession = Depends(get_session)):
    return session.editor.get_state()


@router.patch("/editor", response_model=Dict[str, Any])
async def edit_form(body: JournalForm, session: UserSession = Depends(get_session)):
    """
    Изменение полей формы; черновик сохраняется через 30 секунд после последней правки
    """
    session.editor.edit(title=body.title, content=body.content, mood=body.mood)
    return session.editor.get_state()


@router.post("/editor/save", response_model=Dict[str, Any])
async def save_form(session: UserSession = Depends(get_session)):
    return session.editor.save().to_dict()


@router.post("/editor/clear", response_model=Dict[str, Any])
async def clear_form(session: UserSession = Depends(get_session)):
    session.editor.clear()
    return session.editor.get_state()


@router.post("/editor/entries/{entry_id}", response_model=Dict[str, Any])
async def edit_entry(entry_id: str, session: UserSession = Depends(get_session)):
    session.editor.edit_entry(entry_id)
    return session.editor.get_state()


# ===== ЧЕРНОВИКИ =====

@router.post("/drafts/{draft_id}/load", response_model=Dict[str, Any])
async def load_draft(draft_id: str, session: UserSession = Depends(get_session)):
    session.editor.load_draft(draft_id)
    return session.editor.get_state()


@router.delete("/drafts/{draft_id}")
async def delete_draft(draft_id: str, session: UserSession = Depends(get_session)):
    if not session.editor.delete_draft(draft_id):
        raise HTTPException(status_code=404, detail="Draft not found")
    return {"success": True}


@router.post("/drafts/flush", response_model=Dict[str, Any])
async def flush_draft(session: UserSession = Depends(get_session)):
    """Сохранить черновик немедленно, не дожидаясь таймера"""
    draft = session.editor.flush()
    return {"draft": draft.to_dict() if draft else None, "editor": session.editor.get_state()}
