"""
W3C Web Annotation selector and annotation models.

Selectors are stored with annotations and handed to the anchoring engine;
these models validate the wire shape (camelCase keys, ``type`` discriminator)
and expose snake_case attributes to Python code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any, Literal, Self, Union

import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    NonNegativeInt,
    TypeAdapter,
    ValidationError,
    model_validator,
)

from anchoring.exceptions import SelectorInvalid


class _WireModel(BaseModel):
    """Base for models that round-trip through the annotation wire format."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    def to_wire(self) -> dict[str, Any]:
        """Dump to the JSON-serializable wire shape."""
        return self.model_dump(by_alias=True, exclude_none=True)


class RangeSelector(_WireModel):
    """
    Structural selector: element paths plus character offsets.

    Attributes:
        start_container: Path of the element holding the start, relative to
            the document root ("" is the root itself, e.g. "/p[2]")
        start_offset: Character offset within the start container's text
        end_container: Path of the element holding the end
        end_offset: Character offset within the end container's text
    """

    type: Literal["RangeSelector"] = "RangeSelector"
    start_container: str = Field(alias="startContainer")
    start_offset: NonNegativeInt = Field(alias="startOffset")
    end_container: str = Field(alias="endContainer")
    end_offset: NonNegativeInt = Field(alias="endOffset")


class TextPositionSelector(_WireModel):
    """
    Character offsets into the document's plain-text content.

    Attributes:
        start: Offset of the first selected character
        end: Offset just past the last selected character
    """

    type: Literal["TextPositionSelector"] = "TextPositionSelector"
    start: NonNegativeInt
    end: NonNegativeInt


class TextQuoteSelector(_WireModel):
    """
    W3C Web Annotation TextQuoteSelector.

    Selects text by an exact quote with optional prefix/suffix context. The
    context disambiguates repeated quotes and guides fuzzy relocation.

    Example:
        selector = TextQuoteSelector(exact="hello world", prefix="said ")

    Attributes:
        type: Selector type identifier (always "TextQuoteSelector")
        exact: The exact text to match
        prefix: Optional text that appears before the exact match
        suffix: Optional text that appears after the exact match
    """

    type: Literal["TextQuoteSelector"] = "TextQuoteSelector"
    exact: str
    prefix: str | None = None
    suffix: str | None = None


Selector = Annotated[
    Union[RangeSelector, TextPositionSelector, TextQuoteSelector],
    Field(discriminator="type"),
]

SELECTOR_TYPES: dict[str, type[BaseModel]] = {
    "RangeSelector": RangeSelector,
    "TextPositionSelector": TextPositionSelector,
    "TextQuoteSelector": TextQuoteSelector,
}

_selector_adapter: TypeAdapter[Selector] = TypeAdapter(Selector)


def parse_selector(data: Any) -> Selector | None:
    """
    Validate a wire selector.

    Selector models are returned as-is. Selector types this engine does not
    anchor with (e.g. FragmentSelector) yield None.

    Raises:
        SelectorInvalid: If a known selector type has malformed fields
    """
    if isinstance(data, tuple(SELECTOR_TYPES.values())):
        return data
    if not isinstance(data, dict):
        raise SelectorInvalid(f"selector must be a mapping, got {type(data).__name__}")
    if data.get("type") not in SELECTOR_TYPES:
        return None
    try:
        return _selector_adapter.validate_python(data)
    except ValidationError as e:
        raise SelectorInvalid(f"malformed {data['type']}: {e}") from e


class Target(BaseModel):
    """An annotation target: the annotated document and its selectors."""

    model_config = ConfigDict(populate_by_name=True)

    source: str | None = None
    selector: list[dict[str, Any]] = []

    @model_validator(mode="before")
    @classmethod
    def _wrap_single_selector(cls, data: Any) -> Any:
        # W3C allows a single selector object instead of a list
        if isinstance(data, dict) and isinstance(data.get("selector"), dict):
            return {**data, "selector": [data["selector"]]}
        return data


class Annotation(BaseModel):
    """
    A stored annotation with one or more targets.

    Example:
        annotation = Annotation.from_yaml('''
            id: a1
            target:
              - selector:
                  - type: TextQuoteSelector
                    exact: "hello world"
        ''')
    """

    id: str | None = None
    uri: str | None = None
    target: list[Target] = []

    @model_validator(mode="before")
    @classmethod
    def _wrap_single_target(cls, data: Any) -> Any:
        if isinstance(data, dict) and isinstance(data.get("target"), dict):
            return {**data, "target": [data["target"]]}
        return data

    @classmethod
    def from_yaml(cls, yaml_text: str) -> Self:
        """Load a single annotation from YAML (or JSON) text."""
        return cls.model_validate(yaml.safe_load(yaml_text))


def load_annotations(source: str | Path) -> list[Annotation]:
    """
    Load annotations from a YAML or JSON file.

    The file may hold a single annotation, a list of annotations, or a mapping
    with an ``annotations`` list.
    """
    with open(source, encoding="utf-8") as f:
        data = yaml.safe_load(f)
    return parse_annotations(data)


def parse_annotations(data: Any) -> list[Annotation]:
    """Parse already-loaded annotation data into Annotation models."""
    if data is None:
        return []
    if isinstance(data, dict) and "annotations" in data:
        data = data["annotations"] or []
    if isinstance(data, dict):
        data = [data]
    return [Annotation.model_validate(item) for item in data]
