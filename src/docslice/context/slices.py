"""Resolve sentence slice specifications against doc text.

A slice spec is a comma-separated list of tokens, each selecting sentences
by zero-based position:

    i       the single sentence i
    i:j     sentences i up to, not including, j
    i:      sentences i to the end
    :j      sentences 0 up to, not including, j

Docs are referenced inline as ``Name[spec]``, e.g. ``Client.send[0:2,4]``.
"""

import re
from typing import Optional

from docslice.errors import OrderError, OutOfRangeError, SpecSyntaxError

DOC_REFERENCE_PATTERN = re.compile(r"([\w.]+)\[([0-9:, ]+)\]")

RANGE_PATTERN = re.compile(r"([0-9]+):([0-9]+)")
FROM_PATTERN = re.compile(r"([0-9]+):")
TO_PATTERN = re.compile(r":([0-9]+)")
SINGLE_PATTERN = re.compile(r"([0-9]+)")


def parse_doc_reference(spec: str) -> tuple[str, Optional[str]]:
    """Split an inline reference into a doc name and its slice spec.

    Args:
        spec: Either a plain name or ``Name[slice spec]``.

    Returns:
        Tuple of (name, slice spec or None).
    """
    match = DOC_REFERENCE_PATTERN.fullmatch(spec)
    if match is None:
        return spec, None
    return match.group(1), match.group(2)


def split_sentences(text: str, terminator: str = ".") -> list[str]:
    """Split text on the terminator, dropping blank candidates.

    Kept sentences retain their surrounding whitespace.
    """
    return [s for s in text.split(terminator) if s.strip(" \n")]


def check_bounds(start: Optional[int], end: Optional[int], length: int, full_spec: str) -> None:
    """Validate explicit slice bounds against the sentence count.

    Raises:
        OutOfRangeError: If a bound falls outside the sentences or end is 0.
        OrderError: If start is not strictly before end.
    """
    if end == 0:
        raise OutOfRangeError(end, length, full_spec, bound="end")
    if start is not None and start >= length:
        raise OutOfRangeError(start, length, full_spec)
    # The last sentence is only reachable through the open-ended forms
    if end is not None and end >= length:
        raise OutOfRangeError(end, length, full_spec, bound="end")
    if start is not None and end is not None and start >= end:
        raise OrderError(start, end, full_spec)


def select_sentences(token: str, sentences: list[str], full_spec: str) -> list[str]:
    """Return the sentences a single token selects."""
    length = len(sentences)

    if match := RANGE_PATTERN.fullmatch(token):
        start, end = int(match.group(1)), int(match.group(2))
        check_bounds(start, end, length, full_spec)
        return sentences[start:end]

    if match := FROM_PATTERN.fullmatch(token):
        start = int(match.group(1))
        check_bounds(start, None, length, full_spec)
        return sentences[start:]

    if match := TO_PATTERN.fullmatch(token):
        end = int(match.group(1))
        check_bounds(None, end, length, full_spec)
        return sentences[:end]

    if match := SINGLE_PATTERN.fullmatch(token):
        index = int(match.group(1))
        check_bounds(index, None, length, full_spec)
        return [sentences[index]]

    raise SpecSyntaxError(token, full_spec)


def resolve_slice(full_spec: str, slice_spec: str, text: str, terminator: str = ".") -> str:
    """Reassemble the sentences a slice spec selects from text.

    Tokens are applied in the order written, without sorting or removing
    repeats. Each selected sentence gets its terminator back.

    Args:
        full_spec: The complete reference, used in error messages.
        slice_spec: Comma-separated slice tokens.
        text: Doc text to slice.
        terminator: Sentence terminator character.

    Returns:
        The excerpt, trimmed of leading and trailing spaces.
    """
    sentences = split_sentences(text, terminator)

    out = []
    for token in slice_spec.split(","):
        for sentence in select_sentences(token, sentences, full_spec):
            out.append(sentence + terminator)

    return "".join(out).strip(" ")
