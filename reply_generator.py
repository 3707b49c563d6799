#!/usr/bin/env python3
"""
Reply Generator - Auto-Reply Bot
================================

Picks one of a fixed set of "away" replies and dresses it up to match
the trained style profile. Cosmetic templating only.
"""

import random
from typing import Optional, Sequence

import emoji

from style_analyzer import StyleProfile, CASUAL

CANNED_REPLIES = (
    "Hey! I'm not available right now, but I'll get back to you soon",
    "Thanks for reaching out! I'll respond when I can",
    "Got your message! Will reply shortly",
    "Can't respond right now, but I saw your message",
    "I'm away at the moment, will get back to you",
)

REPLY_EMOJI = emoji.emojize(":smiling_face_with_smiling_eyes:")
EMOJI_THRESHOLD = 50


class ReplyPicker:
    """Strategy for choosing one reply out of the canned list."""

    def pick(self, replies: Sequence[str]) -> str:
        raise NotImplementedError


class RandomReplyPicker(ReplyPicker):
    """Uniform random choice; pass a seed for repeatable runs."""

    def __init__(self, seed: Optional[int] = None):
        self._rng = random.Random(seed)

    def pick(self, replies: Sequence[str]) -> str:
        return self._rng.choice(list(replies))


class FixedReplyPicker(ReplyPicker):
    """Always returns the reply at ``index``."""

    def __init__(self, index: int = 0):
        self.index = index

    def pick(self, replies: Sequence[str]) -> str:
        return replies[self.index % len(replies)]


def generate_reply(incoming: str, profile: StyleProfile,
                   picker: Optional[ReplyPicker] = None) -> str:
    """Generate an auto-reply for ``incoming`` in the profile's style.

    The incoming text only triggers the reply; its content is not used.
    Heavy emoji users get the emoji appended (and keep the original casing),
    otherwise casual writers get the reply lower-cased.
    """
    picker = picker or RandomReplyPicker()
    reply = picker.pick(CANNED_REPLIES)

    if profile.emoji_usage > EMOJI_THRESHOLD:
        return f"{reply} {REPLY_EMOJI}"

    if profile.punctuation_style == CASUAL:
        return reply.lower()

    return reply
