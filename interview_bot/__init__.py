"""Chat front end for screening interviews."""
from .app import bootstrap, build_bot
from .handlers import InterviewBot, is_resume_request, parse_resume_request
from .transport import ChatTransport, ChatUser, Choice, IncomingDocument

__all__ = [
    "ChatTransport",
    "ChatUser",
    "Choice",
    "IncomingDocument",
    "InterviewBot",
    "bootstrap",
    "build_bot",
    "is_resume_request",
    "parse_resume_request",
]
