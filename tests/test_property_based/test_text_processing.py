# tests/test_property_based/test_text_processing.py
import base64
import json

from bs4 import BeautifulSoup
from hypothesis import given, settings, strategies as st

from wasi_listings.config.constants import QUALITY_PRESETS
from wasi_listings.extractors import WasiExtractor
from wasi_listings.utils.image_quality import improve_image_quality, scale_to_fit
from wasi_listings.utils.images import collect_images
from wasi_listings.utils.text import TextProcessor, extract_price, normalize_property_type

PAGE_URL = "https://info.wasi.co/casa-venta-chacao/1"
CDN = "https://image.wasi.co/inmuebles"


# ------------------- Custom Strategies -------------------

@st.composite
def price_texts(draw):
    """Prices in the formats listing titles use."""
    value = draw(st.integers(min_value=100, max_value=10000000))
    fmt = draw(st.sampled_from([
        "US${:,}",
        "US$ {:,}",
        "USD {:,}",
        "${:,}",
        "Precio: US${:,} negociable",
    ]))
    prefix = draw(st.sampled_from(["", "Apartamento en venta ", "Casa - "]))
    return value, prefix + fmt.format(value)


@st.composite
def cdn_directives(draw):
    """CDN URLs whose segment carries a positive resize directive."""
    width = draw(st.integers(min_value=1, max_value=6000))
    height = draw(st.integers(min_value=1, max_value=6000))
    params = {"bucket": "wasi-media", "key": "inmuebles/foto.jpg",
              "edits": {"resize": {"width": width, "height": height}}}
    segment = base64.urlsafe_b64encode(json.dumps(params).encode("utf-8")).decode("ascii")
    return f"https://image.wasi.co/{segment}"


def decode(url):
    segment = url.rsplit("/", 1)[-1].replace("-", "+").replace("_", "/")
    return json.loads(base64.b64decode(segment + "=" * (-len(segment) % 4)))


# ------------------- Text heuristics -------------------

class TestPriceProperties:
    @given(price_texts())
    def test_marked_prices_recovered(self, case):
        value, text = case
        assert extract_price(text) == value

    @given(st.text())
    def test_price_never_negative(self, text):
        assert extract_price(text) >= 0


class TestPropertyTypeProperties:
    @given(st.text())
    def test_type_is_one_of_four(self, text):
        assert normalize_property_type(text) in {"casa", "apartamento", "townhouse", "terreno"}


class TestRoomCountProperties:
    @given(st.text(max_size=200), st.text(max_size=200))
    def test_counts_within_bounds_or_zero(self, title, description):
        counts = TextProcessor(1, 19).extract_room_counts(title, description, "")
        for key in ("bedrooms", "parking"):
            assert counts[key] == 0 or 1 <= counts[key]
        assert counts["bathrooms"] >= 0
        assert (counts["bathrooms"] * 2) == int(counts["bathrooms"] * 2)


# ------------------- Page sections -------------------

class TestDescriptionProperties:
    @given(st.text(min_size=1, max_size=3000))
    @settings(max_examples=50)
    def test_description_capped(self, text):
        soup = BeautifulSoup("<html><head></head><body></body></html>", "html.parser")
        soup.head.append(soup.new_tag("meta", attrs={"name": "description", "content": text}))
        extractor = WasiExtractor(PAGE_URL)
        extractor.soup = soup
        description = extractor.extract_description()
        assert description is None or 0 < len(description) <= 1000


class TestImageProperties:
    @given(st.lists(st.integers(min_value=0, max_value=40), max_size=60))
    @settings(max_examples=50)
    def test_images_unique_and_capped(self, ids):
        slides = "".join(f'<a class="swiper-slide" href="{CDN}/{i}.jpg"></a>' for i in ids)
        images = collect_images(BeautifulSoup(slides, "html.parser"), PAGE_URL)
        assert len(images) <= 20
        assert len(images) == len(set(images))
        assert images == list(dict.fromkeys(f"{CDN}/{i}.jpg" for i in ids))[:20]


# ------------------- Image quality -------------------

class TestImageQualityProperties:
    @given(st.text())
    def test_never_raises(self, text):
        assert isinstance(improve_image_quality(text), str)

    @given(st.text(alphabet=st.characters(blacklist_categories=("Cs",)), max_size=80))
    def test_arbitrary_cdn_segment_never_raises(self, segment):
        url = f"https://image.wasi.co/{segment}"
        assert isinstance(improve_image_quality(url), str)

    @given(st.from_regex(r"https://(www\.)?example\.com/[a-z0-9/]{0,30}", fullmatch=True))
    def test_foreign_urls_unchanged(self, url):
        assert improve_image_quality(url) == url

    @given(cdn_directives(), st.sampled_from(sorted(QUALITY_PRESETS)))
    def test_result_fits_box(self, url, preset):
        max_width, max_height = QUALITY_PRESETS[preset]
        resize = decode(improve_image_quality(url, max_width, max_height))["edits"]["resize"]
        assert resize["width"] <= max_width
        assert resize["height"] <= max_height
        assert resize["width"] == max_width or resize["height"] == max_height

    @given(st.integers(1, 5000), st.integers(1, 5000), st.integers(1, 4000), st.integers(1, 4000))
    def test_scale_to_fit_touches_box(self, width, height, max_width, max_height):
        new_width, new_height = scale_to_fit(width, height, max_width, max_height)
        assert new_width <= max_width and new_height <= max_height
        assert new_width == max_width or new_height == max_height
