"""Content screening through the external text classifier.

The classifier is asked to answer ALLOW or REJECT. Only an explicit REJECT
denies a message. When the classifier cannot be reached or its reply cannot
be read, the configured fail policy decides.
"""

from dataclasses import dataclass
from typing import Optional

from stillgrateful.adapters.exceptions import AdapterError
from stillgrateful.adapters.gemini import GeminiClassifierClient
from stillgrateful.config.models import FailPolicy
from stillgrateful.logging import get_logger

logger = get_logger(__name__, component="filter")

FILTER_SYSTEM_PROMPT = """You are a permissive content filter for an anonymous gratitude app. Your default is to ALLOW messages. People use this app to thank teachers, mentors, friends, and family members who impacted their lives.

ONLY REJECT a message if it clearly contains:
- Direct threats, harassment, or violent language
- Explicit sexual content
- Obvious spam or promotional content
- Clear abuse or hate speech

ALLOW messages that:
- Express thanks, appreciation, or gratitude (even if brief or simple)
- Share positive memories or impacts someone had
- Are heartfelt, even if imperfectly written
- Mention how someone helped or influenced them
- Are nostalgic or sentimental

When in doubt, ALLOW the message. This app is meant to spread kindness.

Respond with exactly one word: ALLOW or REJECT"""

VERDICT_ALLOW = "allow"
VERDICT_REJECT = "reject"
VERDICT_UNAVAILABLE = "unavailable"


@dataclass
class FilterDecision:
    """Outcome of screening one message.

    Attributes:
        allowed: Whether the message may be delivered
        verdict: "allow", "reject" or "unavailable" (classifier failed)
        classifier_text: Raw classifier reply, if one was received
        error: Error description when the classifier was unavailable
    """

    allowed: bool
    verdict: str
    classifier_text: Optional[str] = None
    error: Optional[str] = None


class ContentFilter:
    """Maps classifier replies and failures to allow/deny decisions."""

    def __init__(self, client: GeminiClassifierClient, fail_policy: str = FailPolicy.CLOSED.value):
        """Initialize the filter.

        Args:
            client: Classifier client
            fail_policy: "closed" rejects and "open" allows when the classifier is unavailable
        """
        self.client = client
        self.fail_policy = FailPolicy(fail_policy)

    def check(self, message: str) -> FilterDecision:
        """Screen a message.

        Never raises for classifier problems; those become an "unavailable"
        verdict resolved by the fail policy.

        Args:
            message: Validated message text

        Returns:
            FilterDecision
        """
        try:
            reply = self.client.classify(message)
        except AdapterError as e:
            allowed = self.fail_policy == FailPolicy.OPEN
            logger.warning(
                "Classifier unavailable, applying fail policy",
                extra={
                    "event": "filter.unavailable",
                    "fail_policy": self.fail_policy.value,
                    "allowed": allowed,
                    "error_type": type(e).__name__,
                },
            )
            return FilterDecision(
                allowed=allowed,
                verdict=VERDICT_UNAVAILABLE,
                error=str(e),
            )

        if "REJECT" in reply.upper():
            logger.info(
                "Message rejected by classifier",
                extra={"event": "filter.rejected", "classifier_text": reply},
            )
            return FilterDecision(allowed=False, verdict=VERDICT_REJECT, classifier_text=reply)

        logger.info(
            "Message allowed by classifier",
            extra={"event": "filter.allowed", "classifier_text": reply},
        )
        return FilterDecision(allowed=True, verdict=VERDICT_ALLOW, classifier_text=reply)
