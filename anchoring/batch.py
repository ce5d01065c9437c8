"""
Anchoring of stored annotations.

An annotation that cannot be anchored is an orphan: it stays attached to the
document, but has no location in the current text. Orphans are reported in
the results, never raised.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any

from pydantic import BaseModel, computed_field

from anchoring.exceptions import AnchorExhausted
from anchoring.logging_config import logger
from anchoring.models import Annotation
from anchoring.orchestrator import Anchorer
from anchoring.protocols import AnchorOptions


class AnchorStatus(str, Enum):
    """Status of an annotation target after anchoring."""

    ANCHORED = "anchored"
    ORPHANED = "orphaned"


class AnchorResult(BaseModel):
    """
    Result of anchoring one annotation target.

        for result in await anchor_annotations(document, annotations):
            if result.found:
                print(result.annotation_id, result.start, result.end)
            elif result.orphaned:
                print(f"{result.annotation_id} is not on this page")
    """

    annotation_id: str | None = None
    target_index: int = 0
    status: AnchorStatus
    start: int | None = None
    end: int | None = None
    text: str | None = None

    @computed_field  # type: ignore[prop-decorator]
    @property
    def found(self) -> bool:
        """True if the target was anchored."""
        return self.status == AnchorStatus.ANCHORED

    @computed_field  # type: ignore[prop-decorator]
    @property
    def orphaned(self) -> bool:
        """True if no strategy could anchor the target."""
        return self.status == AnchorStatus.ORPHANED


async def anchor_annotations(
    document: Any,
    annotations: list[Annotation],
    options: AnchorOptions | None = None,
    anchorer: Anchorer | None = None,
) -> list[AnchorResult]:
    """
    Anchor every target of every annotation.

    Targets are anchored concurrently; results keep the order of the input.

    Args:
        document: The document to anchor in
        annotations: Annotations to anchor
        options: Options passed to every anchoring call
        anchorer: Anchorer to use (default resolvers if omitted)

    Returns:
        One AnchorResult per annotation target
    """
    anchorer = anchorer or Anchorer()
    jobs = [
        _anchor_target(anchorer, document, annotation, index, options)
        for annotation in annotations
        for index in range(len(annotation.target))
    ]
    return list(await asyncio.gather(*jobs))


async def _anchor_target(
    anchorer: Anchorer,
    document: Any,
    annotation: Annotation,
    index: int,
    options: AnchorOptions | None,
) -> AnchorResult:
    target = annotation.target[index]
    try:
        found = await anchorer.anchor(document, target.selector, options)
    except AnchorExhausted:
        logger.info(f"Annotation {annotation.id or '<unnamed>'} is orphaned")
        return AnchorResult(
            annotation_id=annotation.id,
            target_index=index,
            status=AnchorStatus.ORPHANED,
        )

    return AnchorResult(
        annotation_id=annotation.id,
        target_index=index,
        status=AnchorStatus.ANCHORED,
        start=found.start,
        end=found.end,
        text=found.text,
    )
