#!/usr/bin/env python3
"""
Style Analyzer - Auto-Reply Bot
===============================

Derives a texting style profile from a block of pasted sample messages
(one message per line). Pure string statistics, no model involved.
"""

import math
import re
from collections import Counter
from dataclasses import dataclass, field, asdict
from typing import Dict, List, Any

import numpy as np
from rich.console import Console
from rich.table import Table
from rich.panel import Panel

console = Console()

FORMAL = "formal"
CASUAL = "casual"
DEFAULT_RESPONSE_TIME = "2-5 minutes"

# Emoticons, misc symbols & pictographs, transport, regional indicators,
# misc symbols, dingbats
EMOJI_PATTERN = re.compile(
    "["
    "\U0001F600-\U0001F64F"
    "\U0001F300-\U0001F5FF"
    "\U0001F680-\U0001F6FF"
    "\U0001F1E0-\U0001F1FF"
    "\u2600-\u26FF"
    "\u2700-\u27BF"
    "]"
)
PUNCTUATION_PATTERN = re.compile(r"[.!?]")

MAX_COMMON_PHRASES = 5


@dataclass
class StyleProfile:
    """Data class to hold the analyzed texting style."""
    avg_length: int = 0
    common_phrases: List[str] = field(default_factory=list)
    emoji_usage: int = 0
    punctuation_style: str = CASUAL
    response_time: str = DEFAULT_RESPONSE_TIME

    def to_dict(self) -> Dict[str, Any]:
        """Camel-cased mapping used in storage and backups."""
        return {
            'avgLength': self.avg_length,
            'commonPhrases': list(self.common_phrases),
            'emojiUsage': self.emoji_usage,
            'punctuationStyle': self.punctuation_style,
            'responseTime': self.response_time,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "StyleProfile":
        """Rebuild a profile from its stored mapping."""
        if not isinstance(data, dict):
            raise ValueError(f"style data must be an object, got {type(data).__name__}")

        defaults = asdict(cls())
        phrases = data.get('commonPhrases', defaults['common_phrases'])
        if not isinstance(phrases, list):
            raise ValueError("commonPhrases must be a list")

        return cls(
            avg_length=int(data.get('avgLength', defaults['avg_length'])),
            common_phrases=[str(p) for p in phrases],
            emoji_usage=int(data.get('emojiUsage', defaults['emoji_usage'])),
            punctuation_style=str(data.get('punctuationStyle', defaults['punctuation_style'])),
            response_time=str(data.get('responseTime', defaults['response_time'])),
        )


def round_half_up(value: float) -> int:
    """Round .5 upwards, the way the dashboard always displayed it."""
    return int(math.floor(value + 0.5))


def split_lines(text: str) -> List[str]:
    """Non-blank lines of ``text``, whitespace left intact."""
    return [line for line in text.split('\n') if line.strip()]


def count_emoji(text: str) -> int:
    return len(EMOJI_PATTERN.findall(text))


def top_bigrams(text: str, limit: int = MAX_COMMON_PHRASES) -> List[str]:
    """Most frequent adjacent lowercase word pairs.

    Words are whitespace-separated, so punctuation stays attached and pairs
    run across line breaks. Equal counts keep first-seen order.
    """
    words = text.lower().split()
    bigrams = Counter(f"{words[i]} {words[i + 1]}" for i in range(len(words) - 1))
    return [phrase for phrase, _ in bigrams.most_common(limit)]


def analyze_style(text: str) -> StyleProfile:
    """Compute a fresh style profile from sample text."""
    lines = split_lines(text)
    if not lines:
        return StyleProfile()

    line_count = len(lines)
    avg_length = round_half_up(np.mean([len(line) for line in lines]))
    emoji_usage = round_half_up(count_emoji(text) / line_count * 100)

    # Every . ! ? counts, not only line endings
    marks = len(PUNCTUATION_PATTERN.findall(text))
    punctuation_style = FORMAL if marks > line_count * 0.5 else CASUAL

    return StyleProfile(
        avg_length=avg_length,
        common_phrases=top_bigrams(text),
        emoji_usage=emoji_usage,
        punctuation_style=punctuation_style,
        response_time=DEFAULT_RESPONSE_TIME,
    )


def display_style_report(profile: StyleProfile) -> None:
    """Display the style profile the way the dashboard shows it."""
    table = Table(title="📱 Your Style Profile", style="cyan")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Avg message length", f"{profile.avg_length} chars")
    table.add_row("Emoji usage", f"{profile.emoji_usage}%")
    table.add_row("Style", profile.punctuation_style.capitalize())
    table.add_row("Response time", profile.response_time)

    console.print(table)

    if profile.common_phrases:
        body = "\n".join(f"• {phrase}" for phrase in profile.common_phrases)
    else:
        body = "[dim]Train the bot to see your common phrases[/dim]"
    console.print(Panel(body, title="Common Phrases", style="yellow"))
