"""User-facing bot texts."""
from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping

from prompt_compiler import substitute

MESSAGES: Dict[str, str] = {
    "greeting": "Hello, {{name}}! I am an HR assistant. Please select a vacancy that interests you:",
    "no_vacancies": "Unfortunately, there are no active vacancies at the moment. Please try again later.",
    "select_vacancy_first": "Please select a vacancy first using the /start command.",
    "vacancy_not_found": "Vacancy not found. Please try selecting another one.",
    "invalid_choice": "That option is not recognised. Please pick a vacancy from the list or send /start.",
    "vacancy_selected": (
        'Great! You have selected the vacancy: "{{title}}"\n\n{{description}}\n\n'
        "Now let's conduct an interview. You can:\n"
        "1. Upload your résumé (PDF, DOC, DOCX, TXT, RTF)\n"
        "2. Or simply tell us about yourself and your work experience\n\n"
        "Let's begin!"
    ),
    "file_too_large": "File is too large. Maximum size: {{limit_mb}}MB",
    "unsupported_format": "Unsupported file format. Supported formats: PDF, DOC, DOCX, TXT, RTF",
    "file_name_error": "Could not get the file name. Please try uploading the file again.",
    "file_upload_error": "An error occurred while uploading the file. Please try again.",
    "user_error": "An error occurred while identifying you. Please send /start.",
    "cv_uploaded_success": "Your résumé has been uploaded and analysed!",
    "cv_analysis_title": "Analysis of your résumé:",
    "cv_strengths": "Strengths:",
    "cv_gaps": "Areas for discussion:",
    "cv_first_question": "First question:",
    "cv_analysis_fallback": (
        "Unfortunately, automatic analysis could not be performed, but we can continue with the interview. "
        "Please tell us about your work experience and key skills."
    ),
    "interview_error": "Sorry, something went wrong while processing your message. Please send it again.",
    "interview_finished": "This interview is already finished. Send /start to choose another vacancy.",
    "evaluation_processing": "Interview completed! We will process your answers and be in touch soon.",
    "help": (
        "I am an HR assistant for conducting interviews and analysing résumés.\n\n"
        "Features:\n"
        "• Résumé upload (PDF, DOC, DOCX, TXT, RTF files)\n"
        "• Interactive interview for the selected vacancy\n"
        "• Analysis of how you match the vacancy requirements\n\n"
        "How to use:\n"
        "1. Select a vacancy using the /start command\n"
        "2. Upload your résumé or tell us about yourself\n"
        "3. Answer the interview questions\n\n"
        "Commands:\n"
        "/start - start vacancy selection\n"
        "/help - show this help\n"
        "/clear - clear the conversation history"
    ),
    "history_cleared": "Conversation history cleared.",
    "resume_format_error": "Please send the vacancy and résumé in the format:\nVacancy: [description]\nResume: [text]",
    "resume_analysis_title": "Résumé analysis:",
    "resume_analysis_error": "Error analysing the résumé. Please try again.",
    "error_occurred": "An error occurred. Please try again.",
}


def text(key: str, **variables: Any) -> str:
    return substitute(MESSAGES[key], variables)


def _lines(value: Any) -> Iterable[str]:
    if isinstance(value, list):
        for item in value:
            if isinstance(item, Mapping):
                yield "• " + ", ".join(f"{k}: {v}" for k, v in item.items())
            elif item not in (None, ""):
                yield f"• {item}"
    elif isinstance(value, Mapping):
        for key, item in value.items():
            yield f"• {key}: {item}"
    elif value not in (None, ""):
        yield str(value)


def format_sections(data: Mapping[str, Any]) -> str:
    """Render a JSON object as titled sections: ``Key name:`` followed by its lines."""

    blocks = []
    for key, value in data.items():
        body = list(_lines(value))
        if body:
            blocks.append(f"{key.replace('_', ' ').capitalize()}:\n" + "\n".join(body))
    return "\n\n".join(blocks)


__all__ = ["MESSAGES", "format_sections", "text"]
