"""Locator chains and per-variant strategy tables.

A :class:`LocatorChain` is an ordered list of :class:`Strategy` objects for one
field.  Strategies are tried strictly in order; the first one that finds a node
with non-blank text wins and later strategies are never consulted.  There is
no scoring across strategies.

Which chains apply depends on the webmail variant the document came from.
Each variant is described by a :class:`VariantProfile`, and profiles live in a
registry keyed by variant name so hosts can add shapes without touching the
extractor (see :func:`register_profile`).
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

import structlog

from threadscope.dom.node import Node
from threadscope.dom.query import (
    AttrContains,
    AttrEquals,
    AttrPrefix,
    ChildOf,
    ClassContains,
    HasAttr,
    HasClass,
    Selector,
    Tag,
    Within,
    iter_matches,
)
from threadscope.domain.types import DocumentVariant, ExtractionField

logger = structlog.get_logger()


@dataclass(frozen=True)
class Strategy:
    """One way of finding a field's node.

    Attributes:
        name: Short label used in logs.
        selector: Predicate over descendant elements.
        min_length: Minimum trimmed text length for a match to count.
    """

    name: str
    selector: Selector
    min_length: int = 0

    def find(self, root: Node) -> Node | None:
        """Return the first match under *root* with usable text."""
        for node in iter_matches(root, self.selector):
            content = node.text.strip()
            if content and len(content) > self.min_length:
                return node
        return None


def strategy(selector: Selector, *, name: str | None = None, min_length: int = 0) -> Strategy:
    """Build a :class:`Strategy` named after its selector by default."""
    return Strategy(name=name or str(selector), selector=selector, min_length=min_length)


@dataclass(frozen=True)
class LocatorChain:
    """Ordered strategies for one field; first match wins."""

    field: ExtractionField
    strategies: tuple[Strategy, ...] = ()

    def __add__(self, other: LocatorChain) -> LocatorChain:
        return LocatorChain(self.field, self.strategies + other.strategies)

    def __bool__(self) -> bool:
        return bool(self.strategies)

    def locate_with_strategy(self, root: Node) -> tuple[Node, Strategy] | None:
        """Return the matched node together with the strategy that found it."""
        for candidate in self.strategies:
            node = candidate.find(root)
            if node is not None:
                logger.debug("locator_matched", field=str(self.field), strategy=candidate.name)
                return node, candidate
        logger.debug("locator_exhausted", field=str(self.field), tried=len(self.strategies))
        return None

    def locate(self, root: Node) -> Node | None:
        """Return the first node found by the highest-priority strategy."""
        found = self.locate_with_strategy(root)
        return found[0] if found else None


def chain(field_: ExtractionField, *selectors: Selector | Strategy) -> LocatorChain:
    """Build a chain from selectors (wrapped as strategies) and strategies."""
    return LocatorChain(
        field_,
        tuple(item if isinstance(item, Strategy) else strategy(item) for item in selectors),
    )


# ---------------------------------------------------------------------------
# Variant profiles
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class VariantProfile:
    """Locator tables for one document variant.

    Attributes:
        variant: Registry key (a :class:`DocumentVariant` value or custom name).
        location_markers: Substrings of the location string identifying it.
        sender: Sender chain for single-message extraction.
        subject: Subject chain (also used for the first thread message).
        timestamp: Primary timestamp chain.
        timestamp_fallback: Variant-specific timestamp chain tried next.
        body: Primary body chain for single-message extraction.
        expanded_body: Body chain used when the message is expanded.
        fallback_body: Body chain tried after the expansion-aware steps.
        scan_content_divs: Try the largest leaf ``div`` before text blocks.
        thread_sender_label: One match per thread message; ``None`` disables
            thread mode.
        message_containers: Ancestor selectors delimiting one thread message.
        thread_timestamp: Timestamp chain scoped to one thread message.
        thread_expanded_body: Body chain for the expanded thread message.
        thread_collapsed_body: Body chain for collapsed thread messages.
        unique_body: Selector for the uniquely-tagged rendered body node.
        expansion_flag: Attribute flag set on (or inside) an expanded message.
        expansion_markers: Marker classes found on expanded message containers.
        body_indicators: Descendants whose presence suggests a rendered body.
        content_areas: Nodes searched for caller-supplied content patterns.
    """

    variant: str
    location_markers: tuple[str, ...] = ()
    sender: LocatorChain = LocatorChain(ExtractionField.SENDER)
    subject: LocatorChain = LocatorChain(ExtractionField.SUBJECT)
    timestamp: LocatorChain = LocatorChain(ExtractionField.TIMESTAMP)
    timestamp_fallback: LocatorChain = LocatorChain(ExtractionField.TIMESTAMP)
    body: LocatorChain = LocatorChain(ExtractionField.BODY)
    expanded_body: LocatorChain = LocatorChain(ExtractionField.BODY)
    fallback_body: LocatorChain = LocatorChain(ExtractionField.BODY)
    scan_content_divs: bool = False
    thread_sender_label: Selector | None = None
    message_containers: tuple[Selector, ...] = ()
    thread_timestamp: LocatorChain = LocatorChain(ExtractionField.TIMESTAMP)
    thread_expanded_body: LocatorChain = LocatorChain(ExtractionField.BODY)
    thread_collapsed_body: LocatorChain = LocatorChain(ExtractionField.BODY)
    unique_body: Selector | None = None
    expansion_flag: Selector | None = None
    expansion_markers: tuple[Selector, ...] = ()
    body_indicators: tuple[Selector, ...] = ()
    content_areas: tuple[Selector, ...] = ()

    @property
    def supports_threads(self) -> bool:
        return self.thread_sender_label is not None

    @property
    def structural_flags(self) -> tuple[Selector, ...]:
        flag = (self.expansion_flag,) if self.expansion_flag is not None else ()
        return flag + self.expansion_markers

    @property
    def expansion_aware(self) -> bool:
        return bool(self.expanded_body)


# -- Shared selectors ---------------------------------------------------------

_MESSAGE_BODY_LABEL = AttrEquals("aria-label", "Message body")
_MESSAGE_BODY_LABEL_TITLE = AttrEquals("aria-label", "Message Body")
_UNIQUE_BODY = AttrPrefix("id", "UniqueMessageBody")
_DOCUMENT_ROLE = Tag("div") & AttrEquals("role", "document")
_FOCUSABLE_DIV = Tag("div") & AttrEquals("tabindex", "0")
_EXPANDED_FLAG = AttrEquals("aria-expanded", "true")

_OUTLOOK_SENDER = chain(
    ExtractionField.SENDER,
    HasClass("OZZZK"),
    AttrContains("title", "@"),
    AttrContains("aria-label", "From"),
    AttrContains("aria-label", "Sender"),
)

_OUTLOOK_TIMESTAMP = chain(
    ExtractionField.TIMESTAMP,
    HasClass("AL_OM") & HasClass("l8Tnu") & HasClass("I1wdR"),
    AttrEquals("data-testid", "SentReceivedSavedTime"),
    HasClass("AL_OM"),
)

OUTLOOK_LIVE = VariantProfile(
    variant=DocumentVariant.OUTLOOK_LIVE,
    location_markers=("outlook.live",),
    sender=_OUTLOOK_SENDER,
    subject=chain(ExtractionField.SUBJECT, HasClass("JdFsz"), AttrEquals("role", "heading")),
    timestamp=_OUTLOOK_TIMESTAMP,
    body=chain(
        ExtractionField.BODY,
        HasClass("ulb23") & HasClass("GNqVo") & HasClass("allowTextSelection") & HasClass("OuGoX"),
        HasClass("allowTextSelection"),
    ),
)

OUTLOOK_OFFICE = VariantProfile(
    variant=DocumentVariant.OUTLOOK_OFFICE,
    location_markers=("outlook.office",),
    sender=_OUTLOOK_SENDER,
    subject=chain(
        ExtractionField.SUBJECT,
        AttrEquals("role", "heading"),
        HasClass("rps_4c88"),
        HasClass("ms-font-xl"),
    ),
    timestamp=_OUTLOOK_TIMESTAMP,
    timestamp_fallback=chain(
        ExtractionField.TIMESTAMP,
        Tag("time"),
        HasClass("rps_a44a"),
        AttrContains("aria-label", "Received"),
        AttrContains("title", "Received"),
    ),
    body=chain(
        ExtractionField.BODY,
        strategy(
            ChildOf(
                _DOCUMENT_ROLE,
                _FOCUSABLE_DIV
                & _MESSAGE_BODY_LABEL
                & ClassContains("XbIp4")
                & ClassContains("GNoVo")
                & ClassContains("allowTextSelection"),
            ),
            name="document > focusable message body",
        ),
        Within(_DOCUMENT_ROLE, Tag("div") & _MESSAGE_BODY_LABEL),
        Within(_DOCUMENT_ROLE, _UNIQUE_BODY),
        _UNIQUE_BODY,
    ),
    expanded_body=chain(
        ExtractionField.BODY,
        _UNIQUE_BODY,
        ClassContains("GNoVo") & ClassContains("allowTextSelection"),
        ClassContains("XbIp4") & ClassContains("TmmB7") & ClassContains("GNoVo"),
        _FOCUSABLE_DIV & _MESSAGE_BODY_LABEL,
        _MESSAGE_BODY_LABEL,
        _MESSAGE_BODY_LABEL_TITLE,
        AttrEquals("tabindex", "0") & AttrContains("aria-label", "Message body"),
        ClassContains("GNoVo"),
        ClassContains("allowTextSelection"),
        strategy(_FOCUSABLE_DIV, name="substantial focusable div", min_length=100),
    ),
    fallback_body=chain(
        ExtractionField.BODY,
        _MESSAGE_BODY_LABEL,
        _MESSAGE_BODY_LABEL_TITLE,
        HasClass("_nzWz"),
        HasClass("allowTextSelection"),
        HasClass("rps_f5b0"),
        HasClass("rps_05c5"),
        ClassContains("GNoVo"),
    ),
    scan_content_divs=True,
    thread_sender_label=HasClass("OZZZK"),
    message_containers=(
        Tag("div") & AttrEquals("role", "listitem"),
        HasClass("ms-Stack"),
    ),
    thread_timestamp=chain(
        ExtractionField.TIMESTAMP,
        HasClass("AL_OM"),
        Tag("time"),
        AttrContains("title", "Received"),
    ),
    thread_expanded_body=chain(
        ExtractionField.BODY,
        Within(_DOCUMENT_ROLE, Tag("div") & _MESSAGE_BODY_LABEL),
        Within(_DOCUMENT_ROLE, _FOCUSABLE_DIV),
        _MESSAGE_BODY_LABEL,
        ClassContains("GNoVo") & ClassContains("allowTextSelection"),
        ClassContains("XbIp4") & ClassContains("TmmB7") & ClassContains("GNoVo"),
        _FOCUSABLE_DIV & _MESSAGE_BODY_LABEL,
    ),
    thread_collapsed_body=chain(
        ExtractionField.BODY,
        HasClass("_nzWz"),
        _MESSAGE_BODY_LABEL,
        HasClass("allowTextSelection"),
    ),
    unique_body=_UNIQUE_BODY,
    expansion_flag=_EXPANDED_FLAG,
    expansion_markers=(HasClass("BSQOK"), HasClass("avla3")),
    body_indicators=(_MESSAGE_BODY_LABEL, ClassContains("allowTextSelection")),
    content_areas=(
        _UNIQUE_BODY,
        Tag("div") & _MESSAGE_BODY_LABEL,
        _FOCUSABLE_DIV,
        HasClass("allowTextSelection"),
    ),
)

GMAIL = VariantProfile(
    variant=DocumentVariant.GMAIL,
    location_markers=("mail.google.com",),
    sender=chain(ExtractionField.SENDER, HasClass("gD"), HasAttr("email")),
    subject=chain(
        ExtractionField.SUBJECT,
        Tag("h2") & HasClass("hP"),
        AttrEquals("role", "heading"),
    ),
    timestamp=chain(ExtractionField.TIMESTAMP, HasClass("g3")),
    body=chain(
        ExtractionField.BODY,
        HasClass("a3s") & HasClass("aiL"),
        HasClass("a3s"),
    ),
)

GENERIC = VariantProfile(
    variant=DocumentVariant.GENERIC,
    sender=_OUTLOOK_SENDER + chain(ExtractionField.SENDER, HasAttr("email")),
    subject=chain(
        ExtractionField.SUBJECT,
        AttrEquals("role", "heading"),
        Tag("h1"),
        Tag("h2"),
        HasClass("JdFsz"),
    ),
    timestamp=_OUTLOOK_TIMESTAMP + chain(ExtractionField.TIMESTAMP, Tag("time")),
    body=chain(
        ExtractionField.BODY,
        AttrEquals("role", "region") & AttrContains("aria-label", "Message body"),
        AttrEquals("role", "region") & AttrContains("aria-label", "message"),
        _MESSAGE_BODY_LABEL,
        HasClass("allowTextSelection"),
    ),
)


_PROFILES: dict[str, VariantProfile] = {}


def register_profile(profile: VariantProfile) -> None:
    """Add or replace the profile for ``profile.variant``.

    Variant detection checks profiles in registration order; replacing an
    existing variant keeps its original position.
    """
    _PROFILES[profile.variant] = profile


def get_profile(variant: str) -> VariantProfile:
    """Return the profile for *variant*, falling back to the generic one."""
    return _PROFILES.get(variant, _PROFILES[DocumentVariant.GENERIC])


def iter_profiles() -> Iterator[VariantProfile]:
    return iter(tuple(_PROFILES.values()))


for _profile in (OUTLOOK_LIVE, OUTLOOK_OFFICE, GMAIL, GENERIC):
    register_profile(_profile)
