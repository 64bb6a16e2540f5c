"""
Generation feature: system instructions and user prompts per artifact kind.
"""

from studynotes.features.generation.schemas import QUIZ_OPTION_COUNT, QUIZ_QUESTION_COUNT

SUMMARY_SYSTEM_PROMPT = (
    "You are a study assistant. Summarize the study material provided by the user. "
    "Cover the main ideas, key terms and any definitions or formulas a student must remember. "
    "Use short paragraphs or bullet points. Do not add facts that are not in the material."
)

QUIZ_SYSTEM_PROMPT = (
    f"You are a quiz generator. Create {QUIZ_QUESTION_COUNT} multiple choice questions based on "
    f"the study material provided. Each question should have {QUIZ_OPTION_COUNT} options "
    "with exactly one correct answer. The correct_answer field must repeat the text of the "
    "correct option exactly."
)

CHAT_SYSTEM_PROMPT_TEMPLATE = """You are a helpful study assistant answering questions about the user's notes.

## Rules
- Answer using the notes below. If the notes do not contain the answer, say so, then give a brief general answer.
- Be concise and clear. Use examples from the notes when they help.

## Notes
{note_content}
"""


def build_summary_prompt(note_content: str) -> str:
    return f"Summarize these notes:\n\n{note_content}"


def build_quiz_prompt(note_content: str) -> str:
    return f"Create {QUIZ_QUESTION_COUNT} multiple choice questions from these notes:\n\n{note_content}"


def build_chat_system_prompt(note_content: str) -> str:
    """Ground the chat in the full document text."""
    return CHAT_SYSTEM_PROMPT_TEMPLATE.format(note_content=note_content)
