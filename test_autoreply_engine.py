#!/usr/bin/env python3
"""
Tests for the auto-reply engine: training, toggling, test messages, backups
"""

import json

import pytest

from autoreply_engine import AutoReplyBot
from bot_session import BackupImportError, LocalStorage, serialize_state
from conftest import RecordingScheduler
from reply_generator import CANNED_REPLIES, FixedReplyPicker
from style_analyzer import StyleProfile, FORMAL

TRAINING = "Hey! How are you?\nSounds good!\n\nSee you soon!"


def test_blank_training_is_noop(bot, storage):
    assert bot.train("   \n  ") is None
    assert bot.messages == []
    assert bot.style_profile == StyleProfile()
    assert not storage.path.exists()


def test_training_updates_profile_and_transcript(bot):
    profile = bot.train(TRAINING)

    assert profile.punctuation_style == FORMAL
    assert bot.style_profile == profile
    assert [m.text for m in bot.messages] == ["Hey! How are you?", "Sounds good!", "See you soon!"]
    assert all(m.is_user for m in bot.messages)
    assert all(m.id.startswith("train-") for m in bot.messages)


def test_training_replaces_profile_wholesale(bot):
    bot.train(TRAINING)
    second = bot.train("lol ok\nsure thing")

    assert bot.style_profile == second
    assert second.punctuation_style == "casual"
    assert len(bot.messages) == 5


def test_state_survives_restart(bot, storage):
    bot.train(TRAINING)
    bot.toggle()

    restarted = AutoReplyBot(storage=storage, picker=FixedReplyPicker(0),
                             scheduler=RecordingScheduler())

    assert restarted.is_active is True
    assert restarted.style_profile == bot.style_profile
    assert restarted.messages == bot.messages


def test_toggle_flips_and_persists(bot, storage):
    assert bot.toggle() is True
    assert bot.toggle() is False
    assert storage.get_item("whatsappBotData")["isActive"] is False


def test_blank_test_message_is_noop(bot, scheduler):
    bot.toggle()
    assert bot.send_test_message("  ") is None
    assert bot.messages == []
    assert scheduler.delays == []


def test_inactive_bot_never_replies(bot, scheduler):
    sent = bot.send_test_message("you around?")

    assert sent.is_user is False
    assert sent.id.startswith("msg-")
    assert bot.messages == [sent]
    assert scheduler.delays == []


def test_active_bot_replies_after_delay(bot, scheduler, storage):
    bot.toggle()
    bot.send_test_message("you around?")

    assert scheduler.delays == [3]
    incoming, reply = bot.messages
    assert incoming.is_user is False
    assert reply.is_user is True
    assert reply.id.startswith("reply-")
    # Default profile is casual
    assert reply.text == CANNED_REPLIES[0].lower()
    assert len(storage.get_item("whatsappBotData")["messages"]) == 2


def test_reply_uses_profile_at_send_time(storage):
    scheduler = RecordingScheduler(hold=True)
    bot = AutoReplyBot(storage=storage, picker=FixedReplyPicker(2), scheduler=scheduler)
    bot.toggle()
    bot.send_test_message("ping")

    bot.train(TRAINING)
    bot.toggle()
    scheduler.fire_all()

    # Scheduled replies can't be cancelled, even once the bot is off
    assert bot.messages[-1].text == CANNED_REPLIES[2].lower()


def test_reply_delay_bounds(bot):
    assert bot.set_reply_delay(1) == 1
    assert bot.set_reply_delay(30) == 30

    for bad in (0, 31, -5, "5", 2.5, None, True):
        with pytest.raises(ValueError):
            bot.set_reply_delay(bad)
    assert bot.reply_delay == 30


def test_reply_delay_used_for_scheduling(bot, scheduler):
    bot.set_reply_delay(12)
    bot.toggle()
    bot.send_test_message("hello")
    assert scheduler.delays == [12]


def test_out_of_range_initial_delay_clamped(storage):
    assert AutoReplyBot(storage=storage, reply_delay=90).reply_delay == 30
    assert AutoReplyBot(storage=storage, reply_delay=0).reply_delay == 1


def test_recent_messages_and_stats(bot):
    bot.train("\n".join(f"line {i}" for i in range(12)))
    bot.send_test_message("hi")

    assert len(bot.recent_messages()) == 10
    assert bot.recent_messages()[-1].text == "hi"
    assert bot.stats() == {
        "messages_trained": 12,
        "auto_replies_sent": 1,
        "is_active": False,
    }


def test_export_import_round_trip(bot, storage, tmp_path):
    bot.train(TRAINING)
    bot.toggle()
    bot.send_test_message("you around?")
    backup = bot.export_backup()

    assert "exportDate" in json.loads(backup)

    other = AutoReplyBot(storage=LocalStorage(tmp_path / "other.json"),
                         scheduler=RecordingScheduler())
    other.import_backup(backup)

    assert other.messages == bot.messages
    assert other.style_profile == bot.style_profile
    assert other.is_active == bot.is_active


def test_malformed_import_leaves_everything_unchanged(bot, storage):
    bot.train(TRAINING)
    before_state = serialize_state(bot.state)
    before_bytes = storage.path.read_bytes()

    with pytest.raises(BackupImportError):
        bot.import_backup("{definitely not json")

    assert serialize_state(bot.state) == before_state
    assert storage.path.read_bytes() == before_bytes


def test_save_and_load_backup_file(bot, tmp_path):
    bot.train(TRAINING)
    path = bot.save_backup(tmp_path)

    assert path.name.startswith("whatsapp-bot-backup-")
    assert path.suffix == ".json"

    bot.train("more text here")
    bot.load_backup(path)
    assert len(bot.messages) == 3


def test_import_with_overflowing_number_rejected(bot, storage):
    bot.train(TRAINING)
    before_bytes = storage.path.read_bytes()

    with pytest.raises(BackupImportError):
        bot.import_backup('{"styleData": {"avgLength": 1e400}}')

    assert storage.path.read_bytes() == before_bytes
