"""Keyword intent rules for free-text chat prompts.

An ordered table of (keywords, feature) rules, first match wins. A rule matches
when any of its keywords is a case-insensitive substring of the prompt. There
is no scoring; prompts that match nothing stay with the general chat feature.
"""

from dataclasses import dataclass

import structlog

from backend.assistant.prompts import Feature

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class IntentRule:
    """Route prompts containing any keyword to `feature`."""
    keywords: tuple[str, ...]
    feature: Feature

    def matches(self, text: str) -> bool:
        lowered = text.lower()
        return any(kw in lowered for kw in self.keywords)


MARKET_KEYWORDS = ("price", "mandi", "market", "trend", "prediction")

INTENT_RULES: tuple[IntentRule, ...] = (
    IntentRule(keywords=MARKET_KEYWORDS, feature=Feature.MARKET_PRICES),
)


def classify_intent(text: str, rules: tuple[IntentRule, ...] = INTENT_RULES) -> Feature:
    """Pick the feature that should serve a chat prompt.

    Args:
        text: The caller's free-text prompt.
        rules: Ordered rule table to evaluate.

    Returns:
        The first matching rule's feature, or Feature.CHAT.
    """
    for rule in rules:
        if rule.matches(text):
            logger.debug("intent.matched", feature=rule.feature.value)
            return rule.feature
    return Feature.CHAT


def is_market_request(text: str) -> bool:
    return classify_intent(text) is Feature.MARKET_PRICES
