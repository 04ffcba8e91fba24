"""Terminal transport for trying the interview flow locally."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from config import load_config, resolve_route
from config.settings import settings
from llm_gateway import build_gateway
from storage.vacancies import insert_vacancy, list_active_vacancies

from .app import bootstrap
from .transport import ChatUser, Choice, IncomingDocument


class ConsoleTransport:  # Prints bot output and reads attachments from local paths
    def __init__(self) -> None:
        self.last_choices: list[Choice] = []

    def send_text(self, chat_id: str, text: str, choices: Optional[Sequence[Choice]] = None) -> None:
        print(f"\nbot> {text}")
        self.last_choices = list(choices or [])
        for index, choice in enumerate(self.last_choices, start=1):
            print(f"  [{index}] {choice.label}")

    def send_typing(self, chat_id: str) -> None:
        print("bot is typing...")

    def download_attachment(self, file_id: str) -> bytes:
        return Path(file_id).read_bytes()


def _seed_demo_vacancy() -> None:
    if list_active_vacancies():
        return
    insert_vacancy(
        title="Python Backend Engineer",
        description="Build and operate HTTP services and data pipelines.",
        requirements={"skills": ["Python", "SQL", "HTTP APIs"], "experience_years": 3},
    )


def main() -> None:
    parser = argparse.ArgumentParser()
    parser.add_argument("--config", default=settings.APP_CONFIG_PATH, help="Path to the JSON app config")
    parser.add_argument("--check", action="store_true", help="Only test the LLM connection and exit")
    parser.add_argument("--demo-vacancy", action="store_true", help="Create a sample vacancy when none exist")
    args = parser.parse_args()

    logging.basicConfig(level=logging.WARNING, format="[%(asctime)s] %(levelname)s %(name)s :: %(message)s")

    if args.check:
        route = resolve_route(load_config(Path(args.config)))
        ok = build_gateway(route).test_connection()
        print(f"route={route.name} provider={route.provider} reachable={ok}")
        return

    transport = ConsoleTransport()
    bot = bootstrap(transport, args.config)
    if args.demo_vacancy:
        _seed_demo_vacancy()
    chat_id = "console"
    user = ChatUser(id="console-user", first_name="Console")
    print("Type /start to begin, a number to pick an option, 'file <path>' to upload, Ctrl-D to quit.")
    while True:
        try:
            line = input("you> ").strip()
        except EOFError:
            break
        if not line:
            continue
        if line.isdigit() and transport.last_choices:
            index = int(line) - 1
            if 0 <= index < len(transport.last_choices):
                bot.handle_callback(chat_id, user, transport.last_choices[index].payload)
                continue
        if line.startswith("file "):
            path = Path(line[5:].strip())
            size = path.stat().st_size if path.exists() else None
            bot.handle_document(chat_id, user, IncomingDocument(file_id=str(path), file_name=path.name, file_size=size))
            continue
        bot.handle_text(chat_id, user, line)


if __name__ == "__main__":
    main()
