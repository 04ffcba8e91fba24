"""Composition root wiring the bot to configuration and storage."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable, Optional

from attachments import FileStorage, extract_text
from config import AppConfig, load_config, resolve_route
from config.settings import settings
from graph import AnswerPipeline, PipelineDeps
from interview_evaluation import EvaluationEngine
from interview_results import InterviewResultTracker
from interview_session import InMemorySessionStore, SessionStateMachine, SessionStore
from llm_gateway import CompletionGateway, build_gateway
from prompt_compiler import PromptCompiler
from storage.migrate import migrate
from turn_store import TurnStore

from .handlers import InterviewBot
from .transport import ChatTransport

logger = logging.getLogger(__name__)


def build_bot(
    transport: ChatTransport,
    cfg: AppConfig,
    *,
    gateway: Optional[CompletionGateway] = None,
    session_store: Optional[SessionStore] = None,
    files: Optional[FileStorage] = None,
    extractor: Callable[[str], str] = extract_text,
) -> InterviewBot:
    flow = cfg.flow
    gateway = gateway or build_gateway(resolve_route(cfg))
    turns = TurnStore()
    compiler = PromptCompiler()
    results = InterviewResultTracker(question_target=flow.question_target)
    machine = SessionStateMachine(
        session_store or InMemorySessionStore(),
        turns,
        results,
        question_target=flow.question_target,
    )
    engine = EvaluationEngine(gateway, compiler, turns)
    pipeline = AnswerPipeline(
        PipelineDeps(
            machine=machine,
            turns=turns,
            compiler=compiler,
            gateway=gateway,
            engine=engine,
            results=results,
            context_window=flow.context_window,
        )
    )
    return InterviewBot(
        transport,
        machine,
        pipeline,
        compiler,
        gateway,
        turns,
        files=files,
        extractor=extractor,
        typing_interval_s=flow.typing_interval_s,
    )


def bootstrap(transport: ChatTransport, config_path: Optional[str] = None) -> InterviewBot:
    """Migrate the database, seed prompt templates and build a bot from the JSON config."""

    migrate(settings.DB_PATH)
    cfg = load_config(Path(config_path or settings.APP_CONFIG_PATH))
    PromptCompiler().seed_defaults()
    route = resolve_route(cfg)
    logger.info("Bot configured route=%s provider=%s model=%s", route.name, route.provider, route.model)
    return build_bot(transport, cfg)


__all__ = ["bootstrap", "build_bot"]
