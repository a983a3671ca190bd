from enum import Enum


class Intent(str, Enum):
    """Behavioural categories a survey question can measure"""
    OVERALL_SATISFACTION = "OVERALL_SATISFACTION"
    EASE_OF_USE = "EASE_OF_USE"
    CONFUSION_LEVEL = "CONFUSION_LEVEL"
    FRUSTRATION_LEVEL = "FRUSTRATION_LEVEL"
    TRUST_CONFIDENCE = "TRUST_CONFIDENCE"
    LIKELIHOOD_TO_CONTINUE = "LIKELIHOOD_TO_CONTINUE"
    OPEN_FEEDBACK = "OPEN_FEEDBACK"

    @classmethod
    def parse(cls, value) -> "Intent":
        """Exact-name lookup; raises ValueError for anything outside the set"""
        if isinstance(value, cls):
            return value
        return cls(value)
