from .messages import MESSAGES, Texts, get_text

__all__ = ["MESSAGES", "Texts", "get_text"]
