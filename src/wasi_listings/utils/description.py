"""
Description assembly for listing pages.

Wasi's "Descripción Adicional" section is rendered as a run of sibling
<div> fragments with no delimiters, so its text arrives as one merged
blob ("Se alquila apartamento en Las Mercedes64mts22 amplias
habitaciones1 bañoCocina equipada..."). The assembler recovers readable
lines from it, falling back through progressively broader DOM scans.
"""

import logging
import re
from typing import Callable, List, Optional, Sequence

from bs4 import BeautifulSoup, Tag

from ..config.constants import (
    BOILERPLATE_PHRASES,
    DESCRIPTION_SECTION_LABEL,
    DESCRIPTION_SELECTORS,
    NON_DESCRIPTION_LABELS,
)
from .fallbacks import run_fallbacks
from .metadata import get_meta_content
from .text import clean_html_text

logger = logging.getLogger(__name__)

UPPER = 'A-ZÁÉÍÓÚÑÜ'
LOWER = 'a-záéíóúñü'
MASK = '\x00'

SECTION_LABEL_PREFIX = re.compile(r'^.*?descripci[oó]n\s+adicional\s*', re.I)

# "Se alquila apartamento en Las Mercedes", ending where the next fragment
# was glued on (a digit, punctuation or a lowercase-to-uppercase junction)
LEAD_SENTENCE = re.compile(
    r'^((?i:se\s+(?:alquila|vende|arrienda))\s+.{1,200}?)'
    rf'(?=\d|[.!?]|(?<=[{LOWER}])[{UPPER}]|$)'
)

# Fragments that start with a quantity; area first so its trailing "2"
# (as in "64mts2") is consumed before room counts are searched
FEATURE_LINE_PATTERNS = [
    re.compile(r'\d+\s*(?:mts?2|m²|m2|metros?\s+cuadrados?)', re.I),
    re.compile(r'\d+\s+amplias?\s+habitaci(?:o|ó)n(?:es)?', re.I),
    re.compile(r'\d+\s+baños?', re.I),
    re.compile(r'\d+\s+puestos?\s+(?:de\s+)?estacionamiento', re.I),
    re.compile(r'\d+\s+habitaci(?:o|ó)n(?:es)?', re.I),
    re.compile(r'\d+\s+dormitorios?', re.I),
]

# Everything up to the next capital, digit or already-claimed fragment
CLAUSE_TAIL = re.compile(rf'[^{UPPER}0-9{MASK}]{{0,50}}')

SENTENCE_SPLIT = re.compile(rf'(?=[{UPPER}][{LOWER}]{{3,}})|(?<=[.!?])\s+')
EDGE_PUNCTUATION = re.compile(r'^[,.\s]+|[,.\s]+$')
NOISE_WORD = re.compile(r'^[a-z]{1,3}$', re.I)
SHORT_WORD = re.compile(r'^[a-z]{1,2}$', re.I)
DIGITS_ONLY = re.compile(r'^\d+$')

MIN_BLOB_LENGTH = 50
MAX_BLOB_CHILD_DIVS = 5
MAX_LINE_LENGTH = 200
MAX_FRAGMENT_LENGTH = 500
MIN_RESIDUAL_LENGTH = 5
MIN_USABLE_LINES = 3
MAX_SIBLINGS_SCANNED = 5
MIN_PARAGRAPH_LENGTH = 50


def is_boilerplate(text: str) -> bool:
    lower = text.lower()
    return any(phrase in lower for phrase in BOILERPLATE_PHRASES)


def unique_lines(lines: Sequence[str]) -> List[str]:
    seen = set()
    result = []
    for line in lines:
        if line not in seen:
            seen.add(line)
            result.append(line)
    return result


def split_description_blob(text: str) -> List[str]:
    """
    Split a merged description blob into lines.

    Args:
        text: Section text with the "Descripción Adicional" label removed

    Returns:
        Filtered lines: the lead sentence, quantity clauses in text order,
        then any residual sentences
    """
    lines: List[str] = []
    text = (text or '').strip()

    lead = LEAD_SENTENCE.match(text)
    if lead:
        lines.append(lead.group(1).strip())
        text = text[lead.end():].strip()

    masked = text
    clauses = []
    for pattern in FEATURE_LINE_PATTERNS:
        for match in pattern.finditer(masked):
            start = match.start()
            tail = CLAUSE_TAIL.match(masked, match.end())
            end = tail.end() if tail else match.end()
            clause = masked[start:end].strip()
            if not clause or MASK in clause or len(clause) >= MAX_LINE_LENGTH:
                continue
            clauses.append((start, clause))
            masked = masked[:start] + MASK * (end - start) + masked[end:]

    clauses.sort(key=lambda item: item[0])
    lines.extend(clause for _, clause in clauses)

    remaining = masked.replace(MASK, ' ')
    for piece in SENTENCE_SPLIT.split(remaining):
        piece = EDGE_PUNCTUATION.sub('', piece.strip())
        if MIN_RESIDUAL_LENGTH < len(piece) < MAX_LINE_LENGTH and not DIGITS_ONLY.match(piece):
            lines.append(piece)

    return [
        line.strip() for line in lines
        if line.strip()
        and len(line.strip()) < MAX_LINE_LENGTH
        and not is_boilerplate(line)
        and DESCRIPTION_SECTION_LABEL not in line.lower()
        and not NOISE_WORD.match(line.strip())
    ]


def _is_fragment(text: str, exclude_digits: bool = False,
                 extra_labels: Sequence[str] = ()) -> bool:
    """Whether a div's text looks like a piece of the listing description."""
    if not text or len(text) >= MAX_FRAGMENT_LENGTH:
        return False
    if is_boilerplate(text) or SHORT_WORD.match(text):
        return False
    if exclude_digits and DIGITS_ONLY.match(text):
        return False
    lower = text.lower()
    if DESCRIPTION_SECTION_LABEL in lower:
        return False
    return not any(label in lower for label in extra_labels)


class DescriptionAssembler:
    """
    Recover a plain-text, newline-separated listing description.

    Strategies, in order: meta description tags; the "Descripción Adicional"
    section (merged blob, leaf divs, following siblings, whole container);
    known description containers; the first long paragraph on the page.
    """

    def __init__(self, soup: BeautifulSoup):
        self.soup = soup
        self.heading_pattern = re.compile(
            DESCRIPTION_SELECTORS["heading"]["text"], re.I)

    def assemble(self) -> str:
        return run_fallbacks([
            self.from_meta_tags,
            self.from_description_section,
            self.from_known_containers,
            self.from_long_paragraph,
        ], default_value='')

    def from_meta_tags(self) -> Optional[str]:
        return (get_meta_content(self.soup, prop='og:description')
                or get_meta_content(self.soup, name='description'))

    def find_heading(self) -> Optional[Tag]:
        for heading in self.soup.find_all(DESCRIPTION_SELECTORS["heading"]["tags"]):
            if self.heading_pattern.search(heading.get_text()):
                return heading
        return None

    def find_section(self, heading: Tag) -> Optional[Tag]:
        return heading.find_parent(class_=DESCRIPTION_SELECTORS["container_class"])

    def from_description_section(self) -> Optional[str]:
        heading = self.find_heading()
        if heading is None:
            return None
        section = self.find_section(heading)
        if section is None:
            return None

        paragraph = section.find('p')
        strategies: List[Callable[[], List[str]]] = [
            lambda: self.lines_from_blob(section),
            lambda: self.lines_from_leaf_divs(paragraph),
            lambda: self.lines_from_siblings(heading),
            lambda: self.lines_from_container(section),
        ]

        lines: List[str] = []
        for strategy in strategies:
            if len(lines) >= MIN_USABLE_LINES:
                break
            lines.extend(strategy())

        if lines:
            return '\n'.join(unique_lines(lines))
        if paragraph is not None:
            return clean_html_text(paragraph.get_text()) or None
        return None

    def find_blob(self, section: Tag) -> Optional[Tag]:
        """The container holding the bulk of the merged description text."""
        triggers = DESCRIPTION_SELECTORS["trigger_phrases"]
        for candidate in section.find_all(class_=DESCRIPTION_SELECTORS["container_class"]):
            text = candidate.get_text().strip()
            if not any(trigger in text.lower() for trigger in triggers):
                continue
            if len(text) <= MIN_BLOB_LENGTH:
                continue
            if len(candidate.find_all('div', recursive=False)) < MAX_BLOB_CHILD_DIVS:
                return candidate
        return None

    def lines_from_blob(self, section: Tag) -> List[str]:
        blob = self.find_blob(section)
        if blob is None:
            return []
        text = SECTION_LABEL_PREFIX.sub('', blob.get_text().strip(), count=1)
        return split_description_blob(text)

    def lines_from_leaf_divs(self, paragraph: Optional[Tag]) -> List[str]:
        if paragraph is None:
            return []
        lines = []
        for div in paragraph.find_all('div'):
            if div.find('div', recursive=False) is not None:
                continue
            text = div.get_text().strip()
            if _is_fragment(text):
                lines.append(text)
        return lines

    def lines_from_siblings(self, heading: Tag) -> List[str]:
        """Scan the elements following the heading's parent for description divs."""
        element = heading.parent
        for _ in range(MAX_SIBLINGS_SCANNED):
            element = element.find_next_sibling() if element is not None else None
            if element is None:
                break
            lines = [
                div.get_text().strip() for div in element.find_all('div')
                if _is_fragment(div.get_text().strip(), exclude_digits=True)
            ]
            if lines:
                return lines
        return []

    def lines_from_container(self, section: Tag) -> List[str]:
        return [
            div.get_text().strip() for div in section.find_all('div')
            if _is_fragment(div.get_text().strip(), exclude_digits=True,
                            extra_labels=NON_DESCRIPTION_LABELS)
        ]

    def from_known_containers(self) -> Optional[str]:
        for selector in DESCRIPTION_SELECTORS["fallback_containers"]:
            container = self.soup.select_one(selector)
            if container is None:
                continue
            paragraph = container.find('p')
            if paragraph is None:
                continue
            lines = [
                div.get_text().strip() for div in paragraph.find_all('div')
                if 2 < len(div.get_text().strip()) < MAX_LINE_LENGTH
            ]
            if lines:
                return '\n'.join(lines)
        return None

    def from_long_paragraph(self) -> Optional[str]:
        for paragraph in self.soup.find_all('p'):
            text = paragraph.get_text().strip()
            if len(text) > MIN_PARAGRAPH_LENGTH and not is_boilerplate(text):
                return text
        return None


def assemble_description(soup: BeautifulSoup) -> str:
    """Return the listing description, or an empty string when none is found."""
    return DescriptionAssembler(soup).assemble()
