from .parsing import (
    EmptyReply,
    MalformedReply,
    TraitProposal,
    ValidReply,
    parse_guess_reply,
    parse_question_reply,
    parse_trait_proposal,
)
from .prompts import build_beyond_knowledge_messages, build_question_messages, build_trait_messages

__all__ = [
    "EmptyReply",
    "MalformedReply",
    "TraitProposal",
    "ValidReply",
    "build_beyond_knowledge_messages",
    "build_question_messages",
    "build_trait_messages",
    "parse_guess_reply",
    "parse_question_reply",
    "parse_trait_proposal",
]
