"""
Message assembly and gating helpers shared by the writing agents.

The agents differ only in when they answer with help text instead of
calling the model; building the conversation is the same for all of
them and lives here.
"""

from typing import Dict, List, Optional, Sequence

from story_builders.agents.base import AgentContext, FileAttachment

GREETINGS = frozenset({"hi", "hello", "hey", "help"})
MIN_REQUEST_LENGTH = 10

# Heuristic for "the user pasted a passage of fiction".
NARRATIVE_MARKERS = ('"', "said", "thought", "walked", "looked", "felt")
MIN_SAMPLE_LENGTH = 100

MIN_ATTACHMENT_CHARS = 20


def format_user_message(user_text: str, context: AgentContext) -> str:
    """
    Render the current turn with any attachments inlined as fenced blocks.
    """
    files = context.files
    if not files:
        return user_text

    if len(files) == 1:
        only = files[0]
        return f"{user_text}\n\n[Attached file: {only.name}]\n```\n{only.content}\n```"

    sections = [f"{user_text}\n\n[Attached files: {len(files)}]"]
    for index, attachment in enumerate(files, start=1):
        sections.append(f"[File {index}: {attachment.name}]\n```\n{attachment.content}\n```")
    return "\n\n".join(sections)


def build_messages(user_text: str, context: AgentContext) -> List[Dict[str, str]]:
    """
    Build the chat message list: thread history first, current turn last.
    """
    messages = [{"role": msg.role, "content": msg.text} for msg in context.thread_history]
    messages.append({"role": "user", "content": format_user_message(user_text, context)})
    return messages


def is_empty_or_greeting(text: str) -> bool:
    trimmed = text.strip().lower()
    return len(trimmed) < MIN_REQUEST_LENGTH or trimmed in GREETINGS


def seems_like_writing_sample(text: str) -> bool:
    if len(text) < MIN_SAMPLE_LENGTH:
        return False
    lower = text.lower()
    return any(marker in lower for marker in NARRATIVE_MARKERS)


def find_empty_attachment(files: Sequence[FileAttachment]) -> Optional[FileAttachment]:
    """Return the first attachment with too little text to review."""
    for attachment in files:
        if len(attachment.content.strip()) < MIN_ATTACHMENT_CHARS:
            return attachment
    return None


def empty_attachment_notice(attachment: FileAttachment) -> str:
    return (
        f'The attached file "{attachment.name}" appears to be empty or too short to critique. '
        "Please check the file and upload it again, or paste your writing "
        "directly into your message."
    )
