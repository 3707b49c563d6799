#!/usr/bin/env python3
"""
Auto-Reply Bot Demo Script
==========================

Walks through training, the style profile and a few auto-replies without
interactive prompts. Uses a throwaway storage file.
"""

import tempfile
import time
from pathlib import Path

from rich.console import Console
from rich.panel import Panel

from autoreply_engine import AutoReplyBot
from bot_session import LocalStorage

console = Console()

SAMPLE_MESSAGES = """Hey! How are you doing?
Thanks for that, really appreciate it 😊
Let me know when you're free
Sure thing, sounds good!
haha see you soon 🎉"""


def run_demo():
    """Run a complete demonstration of the auto-reply bot."""

    console.print(Panel(
        "🎯 [bold green]Auto-Reply Bot Demo[/bold green]\n\n" +
        "This demo will:\n" +
        "1. Train the bot on sample messages\n" +
        "2. Show the learned style profile\n" +
        "3. Turn the bot on and send test messages\n" +
        "4. Export a backup",
        style="green"
    ))

    with tempfile.TemporaryDirectory() as workdir:
        storage = LocalStorage(Path(workdir) / "local_storage.json")
        bot = AutoReplyBot(storage=storage, reply_delay=1)

        console.print("\n[bold cyan]Step 1: Training on sample messages...[/bold cyan]")
        bot.train(SAMPLE_MESSAGES)

        console.print("\n[bold cyan]Step 2: Your style profile[/bold cyan]")
        bot.display_dashboard()

        console.print("\n[bold cyan]Step 3: Sending test messages...[/bold cyan]")
        bot.toggle()

        test_messages = [
            "hey what's up?",
            "want to grab dinner tonight?",
            "call me when you can",
        ]
        for msg in test_messages:
            console.print(f"\n[bold green]📱 Someone texts you:[/bold green] \"{msg}\"")
            bot.send_test_message(msg)

        # Let the reply timers fire
        time.sleep(bot.reply_delay + 0.5)
        bot.display_dashboard()
        bot.display_settings()

        console.print("\n[bold cyan]Step 4: Exporting a backup...[/bold cyan]")
        bot.save_backup(workdir)

    console.print(Panel(
        "✅ [bold green]Demo complete![/bold green]\n\n" +
        "Run [bold]python autoreply_engine.py[/bold] for the interactive menu\n" +
        "or [bold]python autoreply_gui.py[/bold] for the web dashboard.",
        style="green"
    ))


if __name__ == "__main__":
    run_demo()
