import os
import sys
import tempfile
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Union

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

os.environ.setdefault("ENABLE_FILE_LOGS", "0")

from storage.migrate import migrate
from config.settings import settings
from llm_gateway import GenerationError


@pytest.fixture(autouse=True)
def tmp_db(monkeypatch):
    td = tempfile.TemporaryDirectory()
    db_path = os.path.join(td.name, "test.db")
    monkeypatch.setattr(settings, "DB_PATH", db_path, raising=False)
    monkeypatch.setattr(settings, "UPLOAD_DIR", os.path.join(td.name, "uploads"), raising=False)
    migrate(db_path)
    try:
        yield
    finally:
        td.cleanup()


Reply = Union[str, Exception, Callable[[str], str]]


class ScriptedGateway:
    """Completion gateway double that replays canned replies and records prompts."""

    def __init__(self, replies: Optional[Sequence[Reply]] = None, default: str = "") -> None:
        self.replies: List[Reply] = list(replies or [])
        self.default = default
        self.prompts: List[str] = []

    def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        reply: Reply = self.replies.pop(0) if self.replies else self.default
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(prompt)
        return reply

    def test_connection(self) -> bool:
        return True


class RecordingTransport:
    """Chat transport double collecting everything the bot sends."""

    def __init__(self, attachments: Optional[dict] = None) -> None:
        self.sent: List[dict] = []
        self.typing: List[str] = []
        self.attachments = attachments or {}

    def send_text(self, chat_id, text, choices=None):
        self.sent.append({"chat_id": chat_id, "text": text, "choices": list(choices or [])})

    def send_typing(self, chat_id):
        self.typing.append(chat_id)

    def download_attachment(self, file_id):
        return self.attachments[file_id]

    @property
    def texts(self) -> List[str]:
        return [item["text"] for item in self.sent]


@pytest.fixture
def scripted_gateway():
    return ScriptedGateway


@pytest.fixture
def recording_transport():
    return RecordingTransport


@pytest.fixture
def generation_error():
    return GenerationError("provider unavailable")


@pytest.fixture
def make_vacancy():
    from storage.vacancies import insert_vacancy

    def _make(title: str = "Backend Engineer", **overrides):
        data = {
            "title": title,
            "description": f"{title} working on Python services.",
            "requirements": {"skills": ["Python", "SQL"]},
        }
        data.update(overrides)
        return insert_vacancy(**data)

    return _make


@pytest.fixture
def make_candidate():
    from storage.candidates import upsert_candidate

    def _make(external_user_id: str = "tg-1", **overrides):
        data = {"external_user_id": external_user_id, "first_name": "Ada"}
        data.update(overrides)
        return upsert_candidate(**data)

    return _make


@pytest.fixture
def user():
    from interview_bot import ChatUser

    return ChatUser(id="tg-1", first_name="Ada", username="ada")


@pytest.fixture
def bot_factory(recording_transport):
    from config import AppConfig, FlowSettings, LlmRoute
    from interview_bot import build_bot

    def _build(gateway, *, target=5, attachments=None, **overrides):
        transport = recording_transport(attachments)
        cfg = AppConfig(
            llm_routes={"test": LlmRoute(name="test", base_url="http://llm.invalid", model="test-model")},
            active_route="test",
            flow=FlowSettings(question_target=target, typing_interval_s=30.0),
        )
        return build_bot(transport, cfg, gateway=gateway, **overrides), transport

    return _build
