"""Errors raised while anchoring and describing selectors."""


class AnchoringError(Exception):
    """Base class for all anchoring failures."""


class SelectorInvalid(AnchoringError):
    """A selector's stored data does not correspond to a location in the document."""


class RangeUnsupported(AnchoringError):
    """A live range cannot be expressed by a resolver variant."""


class RangeNotFound(AnchoringError):
    """A resolver's search found no matching location."""


class QuoteMismatch(AnchoringError):
    """A resolved range's text differs from the accompanying quote."""

    def __init__(self, expected: str, actual: str) -> None:
        super().__init__(f"quote mismatch: expected {expected!r}, got {actual!r}")
        self.expected = expected
        self.actual = actual


class AnchorExhausted(AnchoringError):
    """Every applicable strategy failed; the annotation cannot be found."""

    def __init__(self, message: str = "unable to anchor") -> None:
        super().__init__(message)
