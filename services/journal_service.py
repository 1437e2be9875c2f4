# services/journal_service.py

import asyncio
import logging
import random
from typing import Callable, List, Optional

from config import config
from core.models import (
    JournalEntry, JournalDraft, EntryStatus, ValidationError, UNTITLED_ENTRY,
    new_id, validate_mood
)
from services.data_service import UserDataService

logger = logging.getLogger(__name__)

MINDFULNESS_PROMPTS = [
    "What are you grateful for today?",
    "What made you smile today?",
    "What challenged you today and how did you handle it?",
    "What is one thing you learned about yourself today?",
    "How did you practice kindness today?"
]

EMPTY_CONTENT_MESSAGE = 'Please write something in your journal!'


def random_prompt() -> str:
    return random.choice(MINDFULNESS_PROMPTS)


class JournalService:
    """Опубликованные записи и черновики журнала"""

    def __init__(self, data: UserDataService,
                 on_publish: Optional[Callable[[], None]] = None,
                 on_change: Optional[Callable[[], None]] = None):
        self.data = data
        self.on_publish = on_publish
        self.on_change = on_change

    # ===== ЗАПИСИ =====

    def list_entries(self) -> List[JournalEntry]:
        """Записи, новые первыми"""
        return self.data.get_journal_entries()

    def get_entry(self, entry_id: str) -> Optional[JournalEntry]:
        for entry in self.data.get_journal_entries():
            if entry.id == entry_id:
                return entry
        return None

    def entries_today(self) -> int:
        today = self.data.today()
        return sum(1 for entry in self.data.get_journal_entries() if entry.date == today)

    def publish(self, title: str, content: str, mood: Optional[str] = None,
                entry_id: Optional[str] = None) -> JournalEntry:
        """Опубликовать новую запись или обновить существующую на месте"""
        if not (content or '').strip():
            raise ValidationError(EMPTY_CONTENT_MESSAGE)
        mood = validate_mood(mood)
        entries = self.data.get_journal_entries()
        today = self.data.today()

        if entry_id is not None:
            for index, entry in enumerate(entries):
                if entry.id == entry_id:
                    updated = JournalEntry(
                        id=entry.id, date=today, title=title or UNTITLED_ENTRY, content=content,
                        mood=mood, status=EntryStatus.PUBLISHED.value
                    )
                    entries[index] = updated
                    self.data.save_journal_entries(entries)
                    logger.info(f"✏️ Запись журнала {entry.id} обновлена")
                    self._changed()
                    return updated
            raise ValidationError(f"Journal entry {entry_id} not found")

        entry = JournalEntry(
            id=new_id(), date=today, title=title or UNTITLED_ENTRY,
            content=content, mood=mood
        )
        self.data.save_journal_entries([entry] + entries)
        logger.info(f"📝 Новая запись журнала {entry.id}")

        if self.on_publish:
            self.on_publish()
        self._changed()
        return entry

    def delete_entry(self, entry_id: str) -> bool:
        entries = self.data.get_journal_entries()
        remaining = [entry for entry in entries if entry.id != entry_id]
        if len(remaining) == len(entries):
            return False
        self.data.save_journal_entries(remaining)
        self._changed()
        return True

    # ===== ЧЕРНОВИКИ =====

    def list_drafts(self) -> List[JournalDraft]:
        return self.data.get_journal_drafts()

    def get_draft(self, draft_id: str) -> Optional[JournalDraft]:
        for draft in self.data.get_journal_drafts():
            if draft.id == draft_id:
                return draft
        return None

    def save_draft(self, title: str, content: str, mood: Optional[str],
                   draft_id: Optional[str] = None) -> JournalDraft:
        """Создать черновик или обновить существующий с тем же id"""
        drafts = self.data.get_journal_drafts()
        now = self.data.now().isoformat()
        existing = next((d for d in drafts if d.id == draft_id), None) if draft_id else None

        draft = JournalDraft(
            id=draft_id or new_id('draft_'),
            user_id=self.data.user_id,
            title=title or UNTITLED_ENTRY,
            content=content,
            mood=mood,
            last_saved=now,
            created=existing.created if existing else now
        )

        if existing:
            drafts = [draft if d.id == draft.id else d for d in drafts]
        else:
            drafts = [draft] + drafts
        self.data.save_journal_drafts(drafts)
        logger.debug(f"💾 Черновик {draft.id} сохранен")
        return draft

    def delete_draft(self, draft_id: str) -> bool:
        drafts = self.data.get_journal_drafts()
        remaining = [draft for draft in drafts if draft.id != draft_id]
        if len(remaining) == len(drafts):
            return False
        self.data.save_journal_drafts(remaining)
        return True

    def _changed(self) -> None:
        if self.on_change:
            self.on_change()


class JournalEditor:
    """
    Сессия редактирования записи с автосохранением черновика

    Каждое изменение заголовка, текста или настроения переносит
    сохранение на delay секунд вперед (debounce). Черновик создается при
    первом автосохранении и дальше обновляется под тем же id.
    """

    def __init__(self, journal: JournalService, delay: Optional[float] = None,
                 loop: Optional[asyncio.AbstractEventLoop] = None):
        self.journal = journal
        self.delay = delay if delay is not None else config.tracking.draft_autosave_seconds
        self._loop = loop
        self._handle = None
        self.clear()

    def clear(self) -> None:
        """Пустая форма без привязки к записи или черновику"""
        self.cancel()
        self.title = ''
        self.content = ''
        self.mood: Optional[str] = None
        self.editing_id: Optional[str] = None
        self.current_draft_id: Optional[str] = None
        self.draft_status = ''

    @property
    def has_pending_save(self) -> bool:
        return self._handle is not None

    def get_state(self) -> dict:
        return {
            'title': self.title,
            'content': self.content,
            'mood': self.mood or '',
            'editingId': self.editing_id,
            'currentDraftId': self.current_draft_id,
            'draftStatus': self.draft_status,
        }

    # ===== РЕДАКТИРОВАНИЕ =====

    def edit(self, title: Optional[str] = None, content: Optional[str] = None,
             mood: Optional[str] = None) -> None:
        """Изменение полей формы; перезапускает отложенное сохранение"""
        if title is not None:
            self.title = title
        if content is not None:
            self.content = content
        if mood is not None:
            self.mood = validate_mood(mood)

        self.cancel()
        if self.content.strip():
            self.draft_status = 'saving'
            self._handle = self._get_loop().call_later(self.delay, self._autosave)

    def load_draft(self, draft_id: str) -> JournalDraft:
        """Продолжить редактирование черновика под его id"""
        draft = self.journal.get_draft(draft_id)
        if draft is None:
            raise ValidationError(f"Draft {draft_id} not found")
        self.clear()
        self.title = draft.title
        self.content = draft.content
        self.mood = draft.mood
        self.current_draft_id = draft.id
        return draft

    def edit_entry(self, entry_id: str) -> JournalEntry:
        """Открыть опубликованную запись для правки на месте"""
        entry = self.journal.get_entry(entry_id)
        if entry is None:
            raise ValidationError(f"Journal entry {entry_id} not found")
        self.clear()
        self.title = entry.title
        self.content = entry.content
        self.mood = entry.mood
        self.editing_id = entry.id
        return entry

    def delete_draft(self, draft_id: str) -> bool:
        deleted = self.journal.delete_draft(draft_id)
        if self.current_draft_id == draft_id:
            self.cancel()
            self.current_draft_id = None
        return deleted

    def save(self) -> JournalEntry:
        """Опубликовать форму и удалить черновик текущей сессии"""
        entry = self.journal.publish(self.title, self.content, self.mood, entry_id=self.editing_id)

        if self.current_draft_id:
            self.journal.delete_draft(self.current_draft_id)

        self.clear()
        return entry

    def flush(self) -> Optional[JournalDraft]:
        """Немедленно выполнить отложенное сохранение"""
        if self._handle is None:
            return None
        self.cancel()
        return self._autosave()

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    # ===== АВТОСОХРАНЕНИЕ =====

    def _get_loop(self):
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def _autosave(self) -> Optional[JournalDraft]:
        self._handle = None
        try:
            draft = self.journal.save_draft(
                self.title, self.content, self.mood, draft_id=self.current_draft_id
            )
        except Exception as e:
            logger.error(f"❌ Ошибка автосохранения черновика: {e}")
            self.draft_status = ''
            return None

        self.current_draft_id = draft.id
        self.draft_status = 'saved'
        return draft
