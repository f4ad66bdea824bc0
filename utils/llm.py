# utils/llm.py
import logging
import requests

logger = logging.getLogger(__name__)

GUIDED_STUDY_SYSTEM_PROMPT = (
    "You are Guided Study, a neutral and balanced religious study companion.\n"
    "You help users explore religious texts respectfully across Christianity, Islam, Judaism, Hinduism, Buddhism.\n"
    "If a request is outside religious texts, religious traditions, spiritual practice, or reflection, gently redirect to this scope.\n"
    "Use wording like: I’m here to help with guided study of religious texts and traditions. "
    "If you share a passage, tradition, or question you’re exploring, I can help.\n"
    "Provide context grounded in the tradition.\n"
    "Explain themes calmly.\n"
    "Present interpretations descriptively, not prescriptively.\n"
    "Do not assert theological truth claims.\n"
    "Do not challenge or correct beliefs.\n"
    "Do not compare religions unless asked.\n"
    "Do not rank traditions.\n"
    "Avoid preachy, devotional, skeptical, or dismissive tone.\n"
    "Avoid moral prescriptions and 'you should' language.\n"
    "Use clean language: no profanity, vulgarity, slang, sexualized, or aggressive phrasing.\n"
    "Maintain calm, respectful wording even if the user is harsh.\n"
    "You may ask one gentle optional follow-up question."
)

HISTORY_ROLES = ('user', 'assistant')


def filter_history(messages):
    """Keep only user/assistant turns whose content is a string."""
    if not isinstance(messages, list):
        return []
    return [
        {"role": m["role"], "content": m["content"]}
        for m in messages
        if isinstance(m, dict) and m.get("role") in HISTORY_ROLES and isinstance(m.get("content"), str)
    ]


def build_guided_study_messages(scripture_ref, passage_text, locale, history):
    """System prompt, then the passage context as a user turn, then prior chat."""
    context = "\n".join([
        f"Scripture Reference: {scripture_ref}",
        f"Passage Text: {passage_text}",
        f"Locale: {locale}"
    ])
    return [
        {"role": "system", "content": GUIDED_STUDY_SYSTEM_PROMPT},
        {"role": "user", "content": context},
        *history
    ]


def call_chat_completion(messages, api_key, api_url, model, timeout=60):
    """POST a chat-completion request and return the raw ``requests.Response``.

    Status handling is left to the caller; there are no retries.
    """
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json"
    }
    data = {
        "model": model,
        "messages": messages
    }
    logger.info(f"Calling {model} with {len(messages)} messages")
    return requests.post(api_url, headers=headers, json=data, timeout=timeout)


def extract_reply(payload):
    """Text of the first choice, or an empty string."""
    choices = payload.get("choices") or []
    if not choices:
        return ""
    message = choices[0].get("message") or {}
    return str(message.get("content") or "").strip()
