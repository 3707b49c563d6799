#!/usr/bin/env python3
"""
Auto-Reply Engine - Style-Matching Away Bot
===========================================

Ties the style analyzer and reply generator to the persisted session:
training, the on/off switch, test messages with a delayed simulated reply,
and backup export/import. Also provides the terminal menu.
"""

import threading
from datetime import datetime
from pathlib import Path
from typing import Callable, Dict, List, Optional, Union

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.prompt import Prompt, IntPrompt

from bot_session import (
    BackupImportError,
    BotState,
    LocalStorage,
    Message,
    dump_backup,
    export_filename,
    load_state,
    new_message_id,
    parse_backup,
    save_state,
    utc_now,
)
from config import cfg, clamp_delay, MIN_REPLY_DELAY, MAX_REPLY_DELAY
from reply_generator import ReplyPicker, RandomReplyPicker, generate_reply
from style_analyzer import StyleProfile, analyze_style, display_style_report, split_lines

console = Console()

Scheduler = Callable[[float, Callable[[], None]], None]

RECENT_LIMIT = 10


def timer_scheduler(delay: float, callback: Callable[[], None]) -> None:
    """Run ``callback`` once after ``delay`` seconds on a daemon timer."""
    timer = threading.Timer(delay, callback)
    timer.daemon = True
    timer.start()


class AutoReplyBot:
    """Owns the bot state and mirrors every change to local storage."""

    def __init__(self, storage: Optional[LocalStorage] = None,
                 picker: Optional[ReplyPicker] = None,
                 scheduler: Optional[Scheduler] = None,
                 reply_delay: int = cfg.reply_delay):
        self.storage = storage or LocalStorage(cfg.storage_path)
        self.picker = picker or RandomReplyPicker(cfg.reply_seed)
        self.scheduler = scheduler or timer_scheduler
        self.reply_delay = clamp_delay(reply_delay)
        self._lock = threading.Lock()
        self.state = load_state(self.storage)

    @property
    def style_profile(self) -> StyleProfile:
        return self.state.style_data

    @property
    def is_active(self) -> bool:
        return self.state.is_active

    @property
    def messages(self) -> List[Message]:
        return list(self.state.messages)

    def _persist(self) -> None:
        save_state(self.storage, self.state)

    def train(self, text: str) -> Optional[StyleProfile]:
        """Analyze pasted messages and add them to the transcript."""
        if not text.strip():
            return None

        profile = analyze_style(text)
        stamp = utc_now()
        trained = [
            Message(id=new_message_id("train", i), text=line, timestamp=stamp, is_user=True)
            for i, line in enumerate(split_lines(text))
        ]

        with self._lock:
            self.state.style_data = profile
            self.state.messages.extend(trained)
            self._persist()

        console.print(f"✓ Style analysis complete ({len(trained)} messages)")
        return profile

    def toggle(self) -> bool:
        with self._lock:
            self.state.is_active = not self.state.is_active
            self._persist()
            active = self.state.is_active
        console.print(f"🤖 Bot {'active' if active else 'inactive'}")
        return active

    def set_reply_delay(self, seconds: int) -> int:
        if isinstance(seconds, bool) or not isinstance(seconds, int):
            raise ValueError(f"Reply delay must be a whole number of seconds, got {seconds!r}")
        if not MIN_REPLY_DELAY <= seconds <= MAX_REPLY_DELAY:
            raise ValueError(
                f"Reply delay must be between {MIN_REPLY_DELAY} and {MAX_REPLY_DELAY} seconds"
            )
        self.reply_delay = seconds
        return seconds

    def send_test_message(self, text: str) -> Optional[Message]:
        """Add an incoming test message; schedule a reply if the bot is on."""
        if not text.strip():
            return None

        incoming = Message(id=new_message_id("msg"), text=text,
                           timestamp=utc_now(), is_user=False)

        with self._lock:
            self.state.messages.append(incoming)
            self._persist()
            active = self.state.is_active
            # Reply uses the style as it is right now
            profile = self.state.style_data

        if active:
            self.scheduler(self.reply_delay, lambda: self._deliver_reply(text, profile))

        return incoming

    def _deliver_reply(self, incoming: str, profile: StyleProfile) -> Message:
        reply = Message(id=new_message_id("reply"),
                        text=generate_reply(incoming, profile, self.picker),
                        timestamp=utc_now(), is_user=True)
        with self._lock:
            self.state.messages.append(reply)
            self._persist()
        console.print(f"💬 Auto-reply: [bold green]{reply.text}[/bold green]")
        return reply

    def recent_messages(self, limit: int = RECENT_LIMIT) -> List[Message]:
        return self.messages[-limit:]

    def stats(self) -> Dict[str, Union[int, bool]]:
        messages = self.messages
        trained = sum(1 for m in messages if m.is_user)
        return {
            'messages_trained': trained,
            'auto_replies_sent': len(messages) - trained,
            'is_active': self.is_active,
        }

    def export_backup(self, exported_at: Optional[datetime] = None) -> str:
        with self._lock:
            return dump_backup(self.state, exported_at)

    def import_backup(self, raw: Union[str, bytes]) -> BotState:
        """Replace state with a backup; raises BackupImportError and keeps
        the current state if the file is unusable."""
        with self._lock:
            new_state = parse_backup(raw, self.state)
            self.state = new_state
            self._persist()
        console.print(f"✓ Imported {len(new_state.messages)} messages")
        return new_state

    def save_backup(self, directory: Union[str, Path] = ".") -> Path:
        path = Path(directory) / export_filename()
        path.write_text(self.export_backup(), encoding="utf-8")
        console.print(f"✓ Backup saved to {path}")
        return path

    def load_backup(self, filepath: Union[str, Path]) -> BotState:
        return self.import_backup(Path(filepath).read_bytes())

    # Terminal views

    def display_dashboard(self) -> None:
        display_style_report(self.style_profile)

        recent = self.recent_messages()
        if not recent:
            console.print("[dim]No messages yet[/dim]")
            return

        transcript = Table(title="Recent Messages", style="green", show_header=False)
        transcript.add_column("Them")
        transcript.add_column("You", justify="right")
        for msg in recent:
            if msg.is_user:
                transcript.add_row("", msg.text)
            else:
                transcript.add_row(msg.text, "")
        console.print(transcript)

    def display_settings(self) -> None:
        stats = self.stats()
        status = "[green]Active[/green]" if stats['is_active'] else "[red]Inactive[/red]"
        console.print(Panel(
            f"Auto-reply delay: [bold]{self.reply_delay}s[/bold]\n"
            f"Messages trained: [bold]{stats['messages_trained']}[/bold]\n"
            f"Auto-replies sent: [bold]{stats['auto_replies_sent']}[/bold]\n"
            f"Bot status: {status}",
            title="Statistics",
            style="blue"
        ))
        console.print(Panel(
            "This is a demonstration bot. A real WhatsApp integration would go "
            "through the WhatsApp Business API or a third-party service such as "
            "Twilio or the WhatsApp Cloud API.",
            title="Integration Note",
            style="yellow"
        ))


def _read_training_text() -> str:
    console.print("[dim]Paste your messages, one per line. Finish with an empty line.[/dim]")
    lines = []
    while True:
        line = input()
        if not line:
            break
        lines.append(line)
    return "\n".join(lines)


def main():
    """Main CLI interface for the auto-reply bot."""
    console.print(Panel(
        "🤖 [bold green]WhatsApp Auto-Reply Bot[/bold green]\n\n" +
        "Learns your style and replies automatically (demo)",
        style="green"
    ))

    bot = AutoReplyBot()

    while True:
        console.print("\n[bold cyan]What would you like to do?[/bold cyan]")

        table = Table(style="cyan")
        table.add_column("Option", style="bold")
        table.add_column("Description")

        table.add_row("1", "dashboard")
        table.add_row("2", "train bot")
        table.add_row("3", "send test message")
        table.add_row("4", f"turn bot {'off' if bot.is_active else 'on'}")
        table.add_row("5", "settings")
        table.add_row("6", "export training data")
        table.add_row("7", "import training data")
        table.add_row("q", "quit")

        console.print(table)

        choice = Prompt.ask("Choose an option", choices=["1", "2", "3", "4", "5", "6", "7", "q"])

        try:
            if choice == "1":
                bot.display_dashboard()

            elif choice == "2":
                if bot.train(_read_training_text()) is None:
                    console.print("[dim]Nothing to train on[/dim]")
                else:
                    display_style_report(bot.style_profile)

            elif choice == "3":
                text = Prompt.ask("Send a test message", default="")
                if bot.send_test_message(text) and bot.is_active:
                    console.print(f"[dim]Reply arrives in {bot.reply_delay}s...[/dim]")

            elif choice == "4":
                bot.toggle()

            elif choice == "5":
                bot.display_settings()
                while True:
                    delay = IntPrompt.ask("Auto-reply delay (seconds)", default=bot.reply_delay)
                    try:
                        bot.set_reply_delay(delay)
                        break
                    except ValueError as e:
                        console.print(f"[red]{e}[/red]")

            elif choice == "6":
                bot.save_backup()

            elif choice == "7":
                filepath = Prompt.ask("Enter path to backup JSON file")
                bot.load_backup(filepath)

            elif choice == "q":
                console.print("[dim]Goodbye! 👋[/dim]")
                break

        except BackupImportError:
            console.print("[red]Invalid backup file[/red]")
        except OSError as e:
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
