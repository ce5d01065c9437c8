"""
Step definitions for anchoring scenarios.
"""

import asyncio

import yaml
from behave import given, then, when  # type: ignore[import-untyped]

from anchoring import AnchorExhausted, HtmlDocument, anchor, describe


# === Setup ===


@given("the document:")  # type: ignore[misc]
def step_given_document(context):
    """Parse an HTML fragment."""
    context.document = HtmlDocument.from_html(context.text.strip())


@given("the document is edited to:")  # type: ignore[misc]
def step_given_document_edited(context):
    """Replace the document with an edited version."""
    context.document = HtmlDocument.from_html(context.text.strip())


@given("the annotation selectors:")  # type: ignore[misc]
def step_given_selectors(context):
    """Parse selectors from YAML format."""
    context.selectors = yaml.safe_load(context.text) or []


# === Actions ===


@when("I anchor the annotation")  # type: ignore[misc]
def step_when_anchor(context):
    """Anchor the selectors, remembering an exhausted failure."""
    try:
        context.result = asyncio.run(anchor(context.document, context.selectors))
    except AnchorExhausted as e:
        context.error = e


@when("I describe the range {start:d} to {end:d}")  # type: ignore[misc]
def step_when_describe(context, start, end):
    context.described = describe(context.document, context.document.range(start, end))


# === Assertions ===


@then('the anchored text is "{expected}"')  # type: ignore[misc]
def step_then_text(context, expected):
    assert not hasattr(context, "error"), f"Anchoring failed: {context.error}"
    assert context.result.text == expected, (
        f"Expected '{expected}' but got '{context.result.text}'"
    )


@then("the anchored range is {start:d} to {end:d}")  # type: ignore[misc]
def step_then_range(context, start, end):
    actual = (context.result.start, context.result.end)
    assert actual == (start, end), f"Expected {start}-{end} but got {actual}"


@then("the annotation cannot be anchored")  # type: ignore[misc]
def step_then_orphaned(context):
    assert hasattr(context, "error"), (
        f"Expected anchoring to fail but got '{context.result.text}'"
    )
    assert isinstance(context.error, AnchorExhausted)


@then('the selector types are "{types}"')  # type: ignore[misc]
def step_then_selector_types(context, types):
    expected = [t.strip() for t in types.split(",")]
    actual = [s.type for s in context.described]
    assert actual == expected, f"Expected {expected} but got {actual}"


@then("anchoring the described selectors gives the range {start:d} to {end:d}")  # type: ignore[misc]
def step_then_round_trip(context, start, end):
    result = asyncio.run(anchor(context.document, context.described))
    actual = (result.start, result.end)
    assert actual == (start, end), f"Expected {start}-{end} but got {actual}"
