# tests/test_utils/test_features.py
from bs4 import BeautifulSoup

from wasi_listings.config.constants import EXTERNAL_FEATURE_KEYWORDS, INTERNAL_FEATURE_KEYWORDS
from wasi_listings.utils.features import (
    extract_external_features,
    extract_features,
    extract_internal_features,
    looks_like_prose,
    matches_vocabulary,
)


def soup_of(html):
    return BeautifulSoup(html, "html.parser")


def test_listing_sections(listing_soup):
    assert extract_internal_features(listing_soup) == ["Agua", "Aire acondicionado", "Cocina equipada"]
    assert extract_external_features(listing_soup) == ["Ascensor", "Vigilancia", "Zona residencial"]


def test_items_outside_vocabulary_are_ignored(listing_soup):
    assert "Gimnasio privado" not in extract_internal_features(listing_soup)


def test_vocabulary_match_is_loose():
    assert matches_vocabulary("Aire acondicionado central", INTERNAL_FEATURE_KEYWORDS)
    assert matches_vocabulary("Clóset", INTERNAL_FEATURE_KEYWORDS)
    assert not matches_vocabulary("Piscina", INTERNAL_FEATURE_KEYWORDS)


def test_section_found_through_ancestor():
    soup = soup_of(
        "<section><div><h4>Características externas</h4></div>"
        "<div><span>Jardín</span></div></section>"
    )
    assert extract_external_features(soup) == ["Jardín"]


def test_wrapper_items_are_not_joined():
    soup = soup_of(
        "<h4>Características externas</h4>"
        '<div class="row"><span>Ascensor</span><span>Terraza</span></div>'
    )
    assert extract_external_features(soup) == ["Ascensor", "Terraza"]


def test_external_prose_excluded():
    soup = soup_of(
        "<h4>Características externas</h4>"
        "<ul><li>Se vende apartamento con ascensor</li><li>Terraza</li></ul>"
    )
    assert extract_external_features(soup) == ["Terraza"]


def test_prose_detection():
    assert looks_like_prose("Se alquila apartamento")
    assert looks_like_prose("x" * 41)
    assert not looks_like_prose("Parques cercanos")


def test_page_text_fallback():
    soup = soup_of("<p>Edificio con ascensor y vigilancia privada</p>")
    assert extract_external_features(soup) == ["Ascensor", "Vigilancia"]


def test_none_when_nothing_matches():
    soup = soup_of("<p>Nada</p>")
    assert extract_internal_features(soup) is None
    assert extract_features(soup, "características externas", EXTERNAL_FEATURE_KEYWORDS) is None
