from __future__ import annotations  # Chat front end driving the interview pipeline

import logging
import re
import sqlite3
from typing import Callable, Optional, Tuple

from attachments import (
    AttachmentError,
    FileStorage,
    FileTooLarge,
    MissingFileName,
    UnsupportedFileType,
    extract_text,
    placeholder_text,
)
from graph import AnswerPipeline
from interview_session import (
    InterviewAlreadyCompleted,
    NoActiveSession,
    SessionStateMachine,
    VacancyNotFound,
)
from llm_gateway import CompletionGateway, GenerationError
from observability import log_event
from output_normalizer import Ok, parse_json_object, strip_all_fences
from prompt_compiler import CV_ANALYSIS, RESUME_ANALYSIS, PromptCompiler, vacancy_context
from services import KeyedLocks, typing_signal
from storage.candidates import Candidate, get_candidate_by_external_id, update_cv, upsert_candidate
from storage.vacancies import get_vacancy, list_active_vacancies
from turn_store import TurnStore

from .messages import format_sections, text
from .transport import ChatTransport, ChatUser, Choice, IncomingDocument


logger = logging.getLogger(__name__)

VACANCY_PAYLOAD = re.compile(r"^vacancy_(\d+)$")
_RESUME_SECTIONS = re.compile(r"vacancy:\s*(?P<vacancy>.*?)\s*resume:\s*(?P<resume>.*)", re.IGNORECASE | re.DOTALL)


def parse_resume_request(message: str) -> Optional[Tuple[str, str]]:  # (job description, résumé) when both sections exist
    match = _RESUME_SECTIONS.search(message)
    if match is None:
        return None
    vacancy, resume = match.group("vacancy").strip(), match.group("resume").strip()
    if not vacancy or not resume:
        return None
    return vacancy, resume


def is_resume_request(message: str) -> bool:
    lowered = message.lower()
    return "vacancy:" in lowered and "resume:" in lowered


class InterviewBot:  # One entry point per inbound event; work for a chat is serialized
    def __init__(
        self,
        transport: ChatTransport,
        machine: SessionStateMachine,
        pipeline: AnswerPipeline,
        compiler: PromptCompiler,
        gateway: CompletionGateway,
        turns: TurnStore,
        *,
        files: Optional[FileStorage] = None,
        locks: Optional[KeyedLocks] = None,
        typing_interval_s: float = 4.0,
        extractor: Callable[[str], str] = extract_text,
    ) -> None:
        self._transport = transport
        self._machine = machine
        self._pipeline = pipeline
        self._compiler = compiler
        self._gateway = gateway
        self._turns = turns
        self._files = files or FileStorage()
        self._locks = locks or KeyedLocks()
        self._typing_interval_s = typing_interval_s
        self._extractor = extractor

    # Inbound events -----------------------------------------------------

    def handle_text(self, chat_id: str, user: ChatUser, message: str) -> None:
        command = message.strip().split(maxsplit=1)[0].lower() if message.strip() else ""
        if command in ("/start", "/help", "/clear", "/reset"):
            handler = {
                "/start": self.handle_start,
                "/help": self.handle_help,
                "/clear": self.handle_clear,
                "/reset": self.handle_clear,
            }[command]
            handler(chat_id, user)
            return
        with self._locks.hold(chat_id):
            self._guarded(chat_id, lambda: self._on_text(chat_id, user, message))

    def handle_start(self, chat_id: str, user: ChatUser) -> None:
        with self._locks.hold(chat_id):
            self._guarded(chat_id, lambda: self._on_start(chat_id, user))

    def handle_help(self, chat_id: str, user: Optional[ChatUser] = None) -> None:
        self._transport.send_text(chat_id, text("help"))

    def handle_clear(self, chat_id: str, user: ChatUser) -> None:
        with self._locks.hold(chat_id):
            self._guarded(chat_id, lambda: self._on_clear(chat_id, user))

    def handle_callback(self, chat_id: str, user: ChatUser, payload: str) -> None:
        with self._locks.hold(chat_id):
            self._guarded(chat_id, lambda: self._on_callback(chat_id, user, payload))

    def handle_document(self, chat_id: str, user: ChatUser, document: IncomingDocument) -> None:
        with self._locks.hold(chat_id):
            self._guarded(chat_id, lambda: self._on_document(chat_id, user, document))

    # Handlers (lock held) ---------------------------------------------

    def _on_start(self, chat_id: str, user: ChatUser) -> None:
        candidate = self._register(user)
        self._machine.begin(chat_id, candidate.id)
        vacancies = list_active_vacancies()
        if not vacancies:
            self._transport.send_text(chat_id, text("no_vacancies"))
            return
        choices = [Choice(label=vacancy.title, payload=f"vacancy_{vacancy.id}") for vacancy in vacancies]
        self._transport.send_text(chat_id, text("greeting", name=user.display_name), choices=choices)

    def _on_clear(self, chat_id: str, user: ChatUser) -> None:
        candidate = get_candidate_by_external_id(user.id)
        self._machine.reset(chat_id, candidate_id=candidate.id if candidate else None)
        self._transport.send_text(chat_id, text("history_cleared"))

    def _on_callback(self, chat_id: str, user: ChatUser, payload: str) -> None:
        match = VACANCY_PAYLOAD.match(payload.strip())
        if match is None:
            logger.warning("Unrecognised callback payload chat=%s payload=%r", chat_id, payload)
            self._transport.send_text(chat_id, text("invalid_choice"))
            return
        candidate = get_candidate_by_external_id(user.id) or self._register(user)
        try:
            _, vacancy = self._machine.select_vacancy(chat_id, int(match.group(1)), candidate_id=candidate.id)
        except VacancyNotFound:
            self._transport.send_text(chat_id, text("vacancy_not_found"))
            return
        self._transport.send_text(
            chat_id,
            text("vacancy_selected", title=vacancy.title, description=vacancy.description),
        )

    def _on_text(self, chat_id: str, user: ChatUser, message: str) -> None:
        if is_resume_request(message):
            self._analyse_pasted_resume(chat_id, message)
            return
        try:
            self._machine.require_interviewing(chat_id)
        except InterviewAlreadyCompleted:
            self._transport.send_text(chat_id, text("interview_finished"))
            return
        except NoActiveSession:
            self._transport.send_text(chat_id, text("select_vacancy_first"))
            return
        try:
            with self._typing(chat_id):
                result = self._pipeline.run(chat_id, message)
        except GenerationError as exc:
            logger.error("Answer generation failed chat=%s: %s", chat_id, exc)
            log_event("answer.generation_failed", chat_id)
            self._transport.send_text(chat_id, text("interview_error"))
            return
        self._transport.send_text(chat_id, result["reply"])
        outcome = result.get("evaluation")
        if outcome is not None:
            self._transport.send_text(chat_id, outcome.feedback)
        elif result.get("evaluation_failed"):
            self._transport.send_text(chat_id, text("evaluation_processing"))

    def _on_document(self, chat_id: str, user: ChatUser, document: IncomingDocument) -> None:
        state = self._machine.get(chat_id)
        if state.stage == "completed":
            self._transport.send_text(chat_id, text("interview_finished"))
            return
        if state.stage != "interviewing" or state.current_vacancy_id is None or state.candidate_id is None:
            self._transport.send_text(chat_id, text("select_vacancy_first"))
            return
        try:
            self._files.validate(document.file_name, document.file_size)
            content = self._transport.download_attachment(document.file_id)
            stored = self._files.save(chat_id, document.file_name or "", content)
        except AttachmentError as exc:
            self._transport.send_text(chat_id, self._attachment_message(exc))
            return
        except OSError as exc:
            logger.error("Upload failed chat=%s: %s", chat_id, exc)
            self._transport.send_text(chat_id, text("file_upload_error"))
            return

        candidate_id, vacancy_id = state.candidate_id, state.current_vacancy_id
        update_cv(candidate_id, file_path=stored.path, file_name=stored.original_name, file_size=stored.size)
        self._turns.append(
            candidate_id,
            vacancy_id,
            "candidate",
            f"Uploaded résumé: {stored.original_name}",
            kind="document",
            metadata={"path": stored.path, "size": stored.size},
        )
        try:
            file_content = self._extractor(stored.path)
        except Exception:  # noqa: BLE001
            logger.exception("Extraction crashed chat=%s path=%s", chat_id, stored.path)
            file_content = placeholder_text(stored.original_name)
        prompt = self._compiler.render(
            CV_ANALYSIS,
            {
                "vacancy_context": vacancy_context(get_vacancy(vacancy_id)),
                "file_name": stored.original_name,
                "file_content": file_content,
            },
        )
        try:
            with self._typing(chat_id):
                raw = self._gateway.generate(prompt)
        except GenerationError as exc:
            logger.error("Résumé analysis failed chat=%s: %s", chat_id, exc)
            self._transport.send_text(chat_id, text("cv_analysis_fallback"))
            return
        reply = self._format_cv_analysis(raw)
        self._turns.append(candidate_id, vacancy_id, "assistant", reply)
        self._transport.send_text(chat_id, text("cv_uploaded_success"))
        self._transport.send_text(chat_id, reply)
        log_event("cv.analysed", chat_id, vacancy_id=vacancy_id)

    def _analyse_pasted_resume(self, chat_id: str, message: str) -> None:
        sections = parse_resume_request(message)
        if sections is None:
            self._transport.send_text(chat_id, text("resume_format_error"))
            return
        job_description, resume = sections
        prompt = self._compiler.render(RESUME_ANALYSIS, {"job_description": job_description, "resume": resume})
        try:
            with self._typing(chat_id):
                raw = self._gateway.generate(prompt)
        except GenerationError as exc:
            logger.error("Pasted résumé analysis failed chat=%s: %s", chat_id, exc)
            self._transport.send_text(chat_id, text("resume_analysis_error"))
            return
        parsed = parse_json_object(raw)
        body = format_sections(parsed.value) if isinstance(parsed, Ok) else strip_all_fences(raw)
        self._transport.send_text(chat_id, f"{text('resume_analysis_title')}\n\n{body or text('resume_analysis_error')}")

    # Helpers ------------------------------------------------------------

    def _register(self, user: ChatUser) -> Candidate:
        return upsert_candidate(
            external_user_id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            username=user.username,
        )

    def _typing(self, chat_id: str):
        return typing_signal(lambda: self._transport.send_typing(chat_id), self._typing_interval_s)

    def _guarded(self, chat_id: str, action: Callable[[], None]) -> None:
        try:
            action()
        except sqlite3.Error:
            logger.exception("Storage failure while handling chat=%s", chat_id)
            self._transport.send_text(chat_id, text("error_occurred"))

    def _attachment_message(self, exc: AttachmentError) -> str:
        if isinstance(exc, FileTooLarge):
            return text("file_too_large", limit_mb=self._files.max_bytes // (1024 * 1024))
        if isinstance(exc, UnsupportedFileType):
            return text("unsupported_format")
        if isinstance(exc, MissingFileName):
            return text("file_name_error")
        return text("file_upload_error")

    @staticmethod
    def _format_cv_analysis(raw: str) -> str:
        parsed = parse_json_object(raw)
        if not isinstance(parsed, Ok):
            prose = strip_all_fences(raw)
            return prose or text("cv_analysis_fallback")
        data = parsed.value
        parts = [text("cv_analysis_title")]
        if data.get("analysis"):
            parts.append(str(data["analysis"]))
        if data.get("strengths"):
            parts.append(f"{text('cv_strengths')}\n{_as_text(data['strengths'])}")
        if data.get("gaps"):
            parts.append(f"{text('cv_gaps')}\n{_as_text(data['gaps'])}")
        if data.get("first_question"):
            parts.append(f"{text('cv_first_question')}\n{data['first_question']}")
        if len(parts) == 1:
            return text("cv_analysis_fallback")
        return "\n\n".join(parts)


def _as_text(value: object) -> str:
    if isinstance(value, list):
        return "\n".join(f"• {item}" for item in value)
    return str(value)


__all__ = ["InterviewBot", "is_resume_request", "parse_resume_request"]
