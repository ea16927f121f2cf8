# src/wasi_listings/config/constants.py

from typing import Dict, List, Tuple

# Listing sites the scraper knows how to read
SUPPORTED_DOMAINS: Dict[str, str] = {
    "info.wasi.co": "Wasi",
    "wasi.co": "Wasi",
    "remaxhabitat.com": "Remax Habitat",
}

# Site whose URL slug is "<type>-<operation>-<location words...>"
SLUG_LOCATION_DOMAIN = "info.wasi.co"
SLUG_PREFIX_WORDS = 2

# Image CDN hostnames
IMAGE_CDN_HOSTS: Tuple[str, ...] = ("image.wasi.co", "images.wasi.co")

DEFAULT_TITLE = "Propiedad sin título"
DEFAULT_LOCATION = "Caracas"

# Desktop browser identity; the listing sites reject non-browser clients
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/122.0.0.0 Safari/537.36"
)

MAX_IMAGES = 20
MAX_DESCRIPTION_LENGTH = 1000

# Gallery widgets, in collection priority order
GALLERY_SELECTORS: Dict[str, str] = {
    "swiper_slides": ".swiper-slide, a.swiper-slide",
    "fotorama_frames": ".fotorama__stage__frame, .fotorama__frame",
    "fotorama_thumbnails": ".fotorama img, .fotorama__nav__frame img",
    "fotorama_containers": '.fotorama, [class*="fotorama"]',
}

# Attributes that may hold an image URL, most specific first
IMAGE_SOURCE_ATTRIBUTES: Tuple[str, ...] = (
    "src",
    "data-src",
    "data-lazy-src",
    "data-full",
    "data-original",
    "data-img",
    "href",
)

GALLERY_DATA_ATTRIBUTES: Tuple[str, ...] = (
    "data-images",
    "data-gallery",
    "data-photos",
)

DESCRIPTION_SELECTORS: Dict[str, object] = {
    "heading": {"tags": ["h3"], "text": r"descripci[oó]n"},
    "container_class": "col-md-12",
    "trigger_phrases": [
        "descripción adicional",
        "se alquila",
        "se vende",
        "se arrienda",
    ],
    "fallback_containers": [
        ".description",
        ".descripcion",
        '[class*="description"]',
        '[class*="descripcion"]',
    ],
}

ADDRESS_SELECTORS: List[str] = [
    ".address",
    ".direccion",
    '[class*="address"]',
    '[class*="direccion"]',
]

# Lines that belong to page chrome rather than the listing text
BOILERPLATE_PHRASES: Tuple[str, ...] = (
    "contacte al asesor",
    "mostrar número",
    "enviar formulario",
    "términos de servicio",
    "data-cursor-element-id",
)

DESCRIPTION_SECTION_LABEL = "descripción adicional"

# Labels of neighbouring sections excluded by the broad container scan
NON_DESCRIPTION_LABELS: Tuple[str, ...] = (
    "características",
    "detalle del inmueble",
)

# Amenity vocabularies and the section labels that introduce them
INTERNAL_FEATURES_LABEL = "características internas"
INTERNAL_FEATURE_KEYWORDS: List[str] = [
    "Agua",
    "Aire acondicionado",
    "Armarios Empotrados",
    "Clósets",
    "Cocina equipada",
    "Gas domiciliario",
    "Habitación servicio",
    "Internet",
    "Puerta eléctrica",
]

EXTERNAL_FEATURES_LABEL = "características externas"
EXTERNAL_FEATURE_KEYWORDS: List[str] = [
    "Ascensor",
    "Centros comerciales",
    "Jardín",
    "Kiosko",
    "Parqueadero inteligente",
    "Parques cercanos",
    "Terraza",
    "Trans. público cercano",
    "Urbanización Cerrada",
    "Vigilancia",
    "Zona residencial",
]

# Phrases that mark a candidate as description prose, not an amenity tag
FEATURE_PROSE_PHRASES: Tuple[str, ...] = ("se alquila", "se vende", "apartamento en")
FEATURE_PROSE_MAX_LENGTH = 40

# Property type rules, checked in order; first match wins
PROPERTY_TYPE_RULES: List[Tuple[str, List[str]]] = [
    ("terreno", [r"galp[oó]n", r"local\s+comercial", r"dep[oó]sito", r"piso\s+industrial"]),
    ("apartamento", [r"\bapartamentos?\b", r"\bapartments?\b"]),
    ("casa", [r"\bcasas?\b", r"\bhouses?\b", r"\bhomes?\b"]),
    ("townhouse", [r"\btownhouses?\b"]),
    ("terreno", [r"\bterrenos?\b", r"\blotes?\b", r"\bparcelas?\b", r"\blands?\b"]),
]
DEFAULT_PROPERTY_TYPE = "apartamento"

# CDN resize directive defaults and caller presets
DEFAULT_RESIZE_WIDTH = 979
DEFAULT_RESIZE_HEIGHT = 743

QUALITY_PRESETS: Dict[str, Tuple[int, int]] = {
    "high": (1920, 1080),
    "medium": (800, 600),
    "thumbnail": (200, 150),
}
