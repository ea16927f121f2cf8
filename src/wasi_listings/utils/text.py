"""
Text processing utilities for Wasi Listings.
Regex heuristics for prices, room counts, property types and labeled fields.
"""

from typing import Dict, List, Optional, Any
import re
import logging
import html

from ..config.constants import PROPERTY_TYPE_RULES, DEFAULT_PROPERTY_TYPE
from ..models.base import snap_to_half

logger = logging.getLogger(__name__)

NUMBER = r'(\d+(?:\.\d+)?)'
HALF_STEP_NUMBER = r'(\d+(?:\.\d)?)'

ABBREVIATED_PATTERNS = [
    # "2h/1.5b/1e"
    re.compile(NUMBER + r'\s*h[^/]*/' + NUMBER + r'\s*b[^/]*/' + NUMBER + r'\s*e', re.I),
    # "2hab/1baño/1est"
    re.compile(r'(\d+)\s*hab[^/]*/' + NUMBER + r'\s*ba[^/]*/(\d+)\s*est', re.I),
]

# Number-before-keyword patterns come first in each list
BEDROOM_PATTERNS = [
    re.compile(r'(\d+)\s*(?:amplias?\s+)?habitaci(?:o|ó)n(?:es)?', re.I),
    re.compile(r'(\d+)\s*dormitorios?', re.I),
    re.compile(r'(\d+)\s*bedrooms?', re.I),
    re.compile(r'(\d+)\s*hab(?!\w)', re.I),
    re.compile(r'habitaci(?:o|ó)n(?:es)?[:\s]+(\d+)', re.I),
    re.compile(r'dormitorios?[:\s]+(\d+)', re.I),
    re.compile(r'bedrooms?[:\s]+(\d+)', re.I),
]

BATHROOM_PATTERNS = [
    re.compile(HALF_STEP_NUMBER + r'\s*baños?', re.I),
    re.compile(HALF_STEP_NUMBER + r'\s*bathrooms?', re.I),
    re.compile(r'baños?[:\s]+' + HALF_STEP_NUMBER, re.I),
    re.compile(r'bathrooms?[:\s]+' + HALF_STEP_NUMBER, re.I),
]

PARKING_PATTERNS = [
    re.compile(r'(\d+)\s+puestos?\s+(?:de\s+)?estacionamiento', re.I),
    re.compile(r'(\d+)\s+estacionamientos?', re.I),
    re.compile(r'puestos?\s+(?:de\s+)?estacionamiento[:\s]+(\d+)', re.I),
    re.compile(r'parking[:\s]+(\d+)', re.I),
    re.compile(r'garage[:\s]+(\d+)', re.I),
]

CURRENCY_PRICE = re.compile(r'(?:US\$|USD|\$)\s*(\d[\d,]*)', re.I)
BARE_PRICE = re.compile(r'(\d{3,})')
TITLE_PRICE_SUFFIX = re.compile(r'\s*-\s*US\$\s*\d.*$', re.I)

# Labeled values in the "Detalle del Inmueble" block
AREA_PATTERNS = [
    re.compile(r'[ÁA]rea\s+Construida[:\s]*(\d+(?:\.\d+)?)\s*(?:m²|mts2|m2|metros)', re.I),
    re.compile(r'(\d+(?:\.\d+)?)\s*(?:mts2|m²|m2)', re.I),
]
LEVEL_PATTERN = re.compile(r'(?:Nivel|Piso)[:\s]*(\d+)', re.I)
YEAR_PATTERN = re.compile(
    r'(?:Año de construcción|Año construcción|Año)[:\s]*(\d{4})', re.I)
ADMIN_FEE_PATTERN = re.compile(
    r'Administración[:\s]*(?:US\$|USD|\$)?\s*(\d+(?:,\d+)?)', re.I)
BUSINESS_IN_TITLE = re.compile(r'(alquiler|venta|arriendo)', re.I)

# String labels must start a line and be followed by a colon or a line break,
# so prose such as "en buen estado" or the amenity "Zona residencial" is not
# read as a label
LABELED_STRING_FIELDS = {
    'property_status': 'Estado',
    'country': 'País',
    'province': 'Provincia',
    'city': 'Ciudad',
    'zone': 'Zona',
    'business_type': 'Negocio',
}
MAX_LABELED_VALUE_LENGTH = 100
MIN_CONSTRUCTION_YEAR = 1800
MAX_CONSTRUCTION_YEAR = 2100


def _labeled_value_pattern(label: str) -> re.Pattern:
    return re.compile(
        r'^[ \t]*' + label + r'\b[ \t]*(?::\s*|\n\s*)([^.\n]+)', re.I | re.M)


class TextProcessor:
    """
    Utility class for processing listing text.
    Every extractor degrades to a safe default instead of raising.
    """

    def __init__(self, room_count_min: int = 1, room_count_max: int = 19):
        self.room_count_min = room_count_min
        self.room_count_max = room_count_max

    @staticmethod
    def clean_html_text(text: str) -> str:
        """
        Enhanced HTML text cleaning.

        Args:
            text: Raw HTML text

        Returns:
            Cleaned text
        """
        if not text:
            return ""

        # Remove extra whitespace and normalize
        text = re.sub(r'\s+', ' ', text).strip()

        # Handle HTML entities
        text = html.unescape(text)

        # Remove non-printable characters
        text = ''.join(char for char in text if char.isprintable())

        return text.strip()

    @staticmethod
    def clean_title(title: str) -> str:
        """Strip the trailing "- US$<amount>" fragment listing sites append."""
        return TITLE_PRICE_SUFFIX.sub('', TextProcessor.clean_html_text(title)).strip()

    @staticmethod
    def extract_price(text: str) -> int:
        """
        Extract a price from free text.

        A currency-marked amount (US$, USD, $) wins; otherwise the first
        standalone number of three or more digits. Returns 0 when nothing
        matches.
        """
        if not text:
            return 0

        match = CURRENCY_PRICE.search(text)
        if match:
            return int(match.group(1).replace(',', ''))

        match = BARE_PRICE.search(text)
        if match:
            return int(match.group(1))

        return 0

    @staticmethod
    def normalize_property_type(text: str) -> str:
        """
        Classify free text into one of the four catalog property types.

        Args:
            text: Title plus keyword metadata

        Returns:
            One of casa, apartamento, townhouse, terreno
        """
        text_lower = (text or '').lower()

        for prop_type, patterns in PROPERTY_TYPE_RULES:
            for pattern in patterns:
                if re.search(pattern, text_lower):
                    return prop_type

        return DEFAULT_PROPERTY_TYPE

    @staticmethod
    def extract_abbreviated_counts(text: str) -> Dict[str, float]:
        """
        Parse the compact "<beds>h/<baths>b/<parking>e" code used in titles.

        Returns:
            Dictionary with 'bedrooms', 'bathrooms' and 'parking'; all zero
            when no code is present
        """
        for pattern in ABBREVIATED_PATTERNS:
            match = pattern.search(text or '')
            if match:
                return {
                    'bedrooms': int(float(match.group(1))),
                    'bathrooms': snap_to_half(float(match.group(2))),
                    'parking': int(float(match.group(3))),
                }

        return {'bedrooms': 0, 'bathrooms': 0, 'parking': 0}

    def _in_bounds(self, value: float) -> bool:
        return self.room_count_min <= value <= self.room_count_max

    def extract_count(self, text: str, patterns: List[re.Pattern]) -> float:
        """
        Return the first in-range count matched by the ordered patterns.

        A match outside the configured bounds is discarded and the next
        pattern is tried; 0 when no pattern yields a plausible count.
        """
        if not text:
            return 0

        for pattern in patterns:
            match = pattern.search(text)
            if not match:
                continue
            value = float(match.group(1))
            if self._in_bounds(value):
                return value
            logger.debug(
                f"Discarding implausible count {value} from pattern {pattern.pattern}")

        return 0

    def extract_room_counts(self, title: str, description: str, body_text: str,
                            structured_rooms: Any = None) -> Dict[str, float]:
        """
        Resolve bedroom, bathroom and parking counts.

        The abbreviated code in the title is tried first. When it is absent,
        each count is searched independently across title, description and
        body text. When it is present, a larger bathroom count from the
        description replaces the abbreviated one. A structured room count
        fills a missing bedroom count.
        """
        counts = self.extract_abbreviated_counts(title)
        description_text = description or body_text

        if not any(counts.values()):
            search_text = ' '.join([title or '', description_text or '', body_text or ''])
            counts = {
                'bedrooms': int(self.extract_count(search_text, BEDROOM_PATTERNS)),
                'bathrooms': snap_to_half(self.extract_count(search_text, BATHROOM_PATTERNS)),
                'parking': int(self.extract_count(search_text, PARKING_PATTERNS)),
            }
        else:
            desc_bathrooms = snap_to_half(
                self.extract_count(description_text, BATHROOM_PATTERNS))
            if desc_bathrooms > counts['bathrooms']:
                counts['bathrooms'] = desc_bathrooms

        if counts['bedrooms'] == 0 and structured_rooms is not None:
            rooms = self.parse_structured_count(structured_rooms)
            if rooms > 0:
                counts['bedrooms'] = rooms

        return counts

    @staticmethod
    def parse_structured_count(value: Any) -> int:
        """Read numberOfRooms, which may be a number, a string or a QuantitativeValue."""
        if isinstance(value, dict):
            value = value.get('value')
        if isinstance(value, bool) or value is None:
            return 0
        if isinstance(value, (int, float)):
            return int(value)
        match = re.match(r'\s*(\d+)', str(value))
        return int(match.group(1)) if match else 0

    @staticmethod
    def extract_detail_fields(body_text: str, title: str = '') -> Dict[str, Any]:
        """
        Extract the optional labeled fields of a listing.

        Args:
            body_text: Page text with block elements separated by newlines
            title: Listing title, used for the business type fallback

        Returns:
            Dictionary containing only the fields that were found
        """
        details: Dict[str, Any] = {}
        text = body_text or ''

        for pattern in AREA_PATTERNS:
            match = pattern.search(text)
            if match:
                details['area_constructed'] = float(match.group(1))
                break

        match = LEVEL_PATTERN.search(text)
        if match:
            details['level'] = int(match.group(1))

        match = YEAR_PATTERN.search(text)
        if match:
            year = int(match.group(1))
            if MIN_CONSTRUCTION_YEAR <= year <= MAX_CONSTRUCTION_YEAR:
                details['construction_year'] = year

        for field_name, label in LABELED_STRING_FIELDS.items():
            match = _labeled_value_pattern(label).search(text)
            if match:
                value = TextProcessor.clean_html_text(match.group(1))
                if value:
                    details[field_name] = value[:MAX_LABELED_VALUE_LENGTH]

        if 'business_type' not in details:
            match = BUSINESS_IN_TITLE.search(title or '')
            if match:
                details['business_type'] = match.group(1).capitalize()

        match = ADMIN_FEE_PATTERN.search(text)
        if match:
            details['administration_fee'] = float(match.group(1).replace(',', ''))

        return details


# Module-level wrappers
def clean_html_text(text: str) -> str:
    """Module-level wrapper for TextProcessor.clean_html_text"""
    return TextProcessor.clean_html_text(text)


def extract_price(text: str) -> int:
    """Module-level wrapper for TextProcessor.extract_price"""
    return TextProcessor.extract_price(text)


def normalize_property_type(text: str) -> str:
    """Module-level wrapper for TextProcessor.normalize_property_type"""
    return TextProcessor.normalize_property_type(text)
