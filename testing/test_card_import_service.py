"""
Tests for persisting imported cards into the contact and world book stores.
"""

import json

import pytest

from lorechat_engine.config.models import ImportConfig
from lorechat_engine.models import ChatMessage, Contact, MessageRole, WorldBookCategory
from lorechat_engine.repositories import ContactRepository, MessageRepository, WorldBookRepository
from lorechat_engine.services import CardImportService
from lorechat_engine.services.character_cards import CharacterCardImporter, CharacterCardSource
from png_factory import card_png


def _import_json(card):
    return CharacterCardImporter().import_card(CharacterCardSource.json(json.dumps(card)))


class TestCardImportService:

    def test_end_to_end(self, db_session, shen_mo_card):
        result = _import_json(shen_mo_card)

        contact = CardImportService(db_session).import_result(result)

        assert contact.name == "沈墨"
        assert contact.remark == "沈墨"
        assert contact.ai_name == "沈墨"
        assert contact.first_message == "你好"
        assert contact.subtitle == "你好..."
        assert contact.avatar == "🐱"
        assert contact.my_nickname == "我"
        assert contact.group_name == "未分组"
        assert contact.world_book_id == result.character.lorebook_ref

        category = WorldBookRepository(db_session).get_by_id(contact.world_book_id)
        assert category.name == "沈墨的世界书 (导入)"
        assert [(e.keys, e.content, e.enabled) for e in category.entries] == [(["书房"], "案情", True)]

        messages = MessageRepository(db_session).list_by_contact(contact.id)
        assert len(messages) == 1
        assert messages[0].role == MessageRole.ASSISTANT
        assert messages[0].content == "你好"

    def test_without_lorebook(self, db_session):
        contact = CardImportService(db_session).import_result(_import_json({"name": "A", "first_mes": "hi"}))

        assert contact.world_book_id is None
        assert db_session.query(WorldBookCategory).count() == 0

    def test_lorebooks_are_appended(self, db_session):
        service = CardImportService(db_session)
        first = service.import_result(_import_json({
            "name": "甲", "character_book": {"entries": [{"content": "1"}]},
        }))
        second = service.import_result(_import_json({
            "name": "乙", "lorebook": {"entries": [{"content": "2"}, {"content": "3", "enabled": False}]},
        }))

        categories = WorldBookRepository(db_session).list_categories()

        assert [c.id for c in categories] == [first.world_book_id, second.world_book_id]
        assert [e.content for e in categories[1].entries] == ["2", "3"]
        assert [e.enabled for e in categories[1].entries] == [True, False]

    def test_entry_order_preserved(self, db_session):
        entries = [{"keys": [str(i)], "content": f"c{i}"} for i in range(5)]
        contact = CardImportService(db_session).import_result(
            _import_json({"name": "A", "character_book": {"entries": entries}})
        )

        category = WorldBookRepository(db_session).get_by_id(contact.world_book_id)

        assert [e.content for e in category.entries] == ["c0", "c1", "c2", "c3", "c4"]

    def test_png_avatar_is_kept(self, db_session):
        result = CharacterCardImporter().import_card(CharacterCardSource.png(card_png({"name": "图"})))

        contact = CardImportService(db_session).import_result(result)

        assert contact.avatar.startswith("data:image/png;base64,")

    def test_empty_greeting_seeds_no_message(self, db_session):
        contact = CardImportService(db_session).import_result(_import_json({"name": "A", "first_mes": ""}))

        assert contact.subtitle is None
        assert db_session.query(ChatMessage).count() == 0

    def test_settings_applied(self, db_session):
        settings = ImportConfig(default_avatar="🦊", my_nickname="旅人", default_group="导入")

        contact = CardImportService(db_session, settings).import_result(_import_json({"name": "A"}))

        assert (contact.avatar, contact.my_nickname, contact.group_name) == ("🦊", "旅人", "导入")

    def test_failure_rolls_back(self, db_session, monkeypatch):
        service = CardImportService(db_session)

        def boom(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(service.messages, "create", boom)

        with pytest.raises(RuntimeError):
            service.import_result(_import_json({
                "name": "A", "character_book": {"entries": [{"content": "x"}]},
            }))

        assert db_session.query(Contact).count() == 0
        assert db_session.query(WorldBookCategory).count() == 0


class TestContactRepository:

    def test_list_pinned_first(self, db_session):
        repo = ContactRepository(db_session)
        plain = repo.create(name="plain")
        pinned = repo.create(name="pinned")
        pinned.is_pinned = True
        db_session.commit()

        assert [c.id for c in repo.list_all()][0] == pinned.id
        assert plain.id in [c.id for c in repo.list_all()]

    def test_delete_cascades_messages(self, db_session):
        contact = ContactRepository(db_session).create(name="A", first_message="hi")
        MessageRepository(db_session).create(contact.id, MessageRole.ASSISTANT, "hi")

        assert ContactRepository(db_session).delete(contact.id) is True
        assert db_session.query(ChatMessage).count() == 0
        assert ContactRepository(db_session).delete(contact.id) is False
