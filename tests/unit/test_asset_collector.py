"""Unit tests for inline asset collection and data URL helpers."""

import pytest

from pdfcore.contexts.templating.asset_collector import (
    DEFAULT_MIME_TYPE,
    asset_to_data_url,
    collect_assets,
    decode_data_url,
    guess_mime_type,
    resolve_asset_urls,
)

PNG_BYTES = b"\x89PNG\r\n\x1a\n"
PNG_URL = "data:image/png;base64,iVBORw0KGgo="


def image_element(name, src):
    return f'<div data-pdf-type="Image" data-pdf-src="{name}"><img src="{src}"></div>'


@pytest.mark.unit
def test_decode_base64_data_url():
    assert decode_data_url(PNG_URL) == ("image/png", PNG_BYTES)


@pytest.mark.unit
def test_decode_percent_encoded_data_url():
    assert decode_data_url("data:text/plain,hi%21") == ("text/plain", b"hi!")
    assert decode_data_url("data:,x") == ("text/plain", b"x")


@pytest.mark.unit
def test_decode_rejects_malformed_urls():
    with pytest.raises(ValueError):
        decode_data_url("https://example.com/a.png")
    with pytest.raises(ValueError):
        decode_data_url("data:image/png;base64")
    with pytest.raises(ValueError):
        decode_data_url("data:image/png;base64,***")


@pytest.mark.unit
def test_collect_assets_by_logical_name():
    markup = (
        '<div data-pdf-type="Column">'
        + image_element("logo.png", PNG_URL)
        + image_element("remote.png", "https://example.com/remote.png")
        + '<div data-pdf-type="Image" data-pdf-src="missing.png">placeholder</div>'
        + "</div>"
    )

    assert collect_assets(markup) == {"logo.png": PNG_BYTES}


@pytest.mark.unit
def test_collect_assets_requires_a_name():
    markup = f'<div data-pdf-type="Image"><img src="{PNG_URL}"></div>'
    assert collect_assets(markup) == {}


@pytest.mark.unit
def test_collect_assets_last_duplicate_wins():
    markup = image_element("logo.png", PNG_URL) + image_element(
        "logo.png", "data:image/png;base64,AAAA"
    )
    assert collect_assets(markup) == {"logo.png": b"\x00\x00\x00"}


@pytest.mark.unit
def test_collect_assets_skips_undecodable_urls():
    markup = image_element("bad.png", "data:image/png;base64,@@@") + image_element(
        "good.png", PNG_URL
    )
    assert collect_assets(markup) == {"good.png": PNG_BYTES}


@pytest.mark.unit
def test_guess_mime_type():
    assert guess_mime_type("logo.png") == "image/png"
    assert guess_mime_type("photo.jpg") == "image/jpeg"
    assert guess_mime_type("blob") == DEFAULT_MIME_TYPE


@pytest.mark.unit
def test_asset_to_data_url():
    assert asset_to_data_url("logo.png", PNG_BYTES) == PNG_URL
    assert asset_to_data_url("x", b"ab", mime_type="image/gif") == "data:image/gif;base64,YWI="


@pytest.mark.unit
def test_resolve_asset_urls_inverts_collection():
    urls = resolve_asset_urls({"logo.png": PNG_BYTES})

    assert urls == {"logo.png": PNG_URL}
    assert decode_data_url(urls["logo.png"])[1] == PNG_BYTES
