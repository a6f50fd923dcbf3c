"""Extraction pipeline: locators, heuristics, expansion, threads, orchestration."""

from threadscope.extraction.expansion import detect_expanded_index, find_expanded_container
from threadscope.extraction.fields import extract_body, extract_message, extract_timestamp
from threadscope.extraction.identity import detect_variant, resolve_identity
from threadscope.extraction.locators import (
    LocatorChain,
    Strategy,
    VariantProfile,
    get_profile,
    register_profile,
)
from threadscope.extraction.orchestrator import extract
from threadscope.extraction.text_blocks import longest_text_block
from threadscope.extraction.thread import reconstruct_thread, select_primary
from threadscope.extraction.timestamps import standardize_timestamp

__all__ = [
    "LocatorChain",
    "Strategy",
    "VariantProfile",
    "detect_expanded_index",
    "detect_variant",
    "extract",
    "extract_body",
    "extract_message",
    "extract_timestamp",
    "find_expanded_container",
    "get_profile",
    "longest_text_block",
    "reconstruct_thread",
    "register_profile",
    "resolve_identity",
    "select_primary",
    "standardize_timestamp",
]
