from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import pytest
import requests

from fontfind.config import FontFindConfig
from fontfind.context import Context
from fontfind.exceptions import InvalidPatternError, LocatorError, ResolutionCancelled
from fontfind.locators.googlefont import (
    GOOGLE_FONTS_API,
    GoogleFontService,
    list_google_fonts,
)
from fontfind.types import Descriptor, Style, Weight


DIRECTORY = {
    "kind": "webfonts#webfontList",
    "items": [
        {
            "kind": "webfonts#webfont",
            "family": "Anonymous Pro",
            "variants": ["regular", "italic", "700", "700italic"],
            "subsets": ["latin", "greek"],
            "version": "v3",
            "lastModified": "2012-07-25",
            "files": {
                "regular": "http://fonts.example/anonymouspro/regular.ttf",
                "italic": "http://fonts.example/anonymouspro/italic.ttf",
                "700": "http://fonts.example/anonymouspro/700.ttf",
                "700italic": "http://fonts.example/anonymouspro/700italic.ttf",
            },
        },
        {
            "kind": "webfonts#webfont",
            "family": "Antic",
            "variants": ["regular"],
            "subsets": ["latin"],
            "version": "v4",
            "files": {"regular": "http://fonts.example/antic/regular.ttf"},
        },
    ],
}


class FakeResponse:
    def __init__(self, status_code: int = 200, payload: Any = None, content: bytes = b"") -> None:
        self.status_code = status_code
        self._payload = payload
        self._content = content

    def json(self) -> Any:
        if self._payload is None:
            raise ValueError("no JSON payload")
        return self._payload

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")

    def iter_content(self, chunk_size: int = 1):
        yield self._content


class FakeSession:
    def __init__(self, directory: FakeResponse | None = None) -> None:
        self.directory = directory or FakeResponse(payload=DIRECTORY)
        self.calls: list[tuple[str, dict[str, Any] | None]] = []

    def get(self, url: str, params: dict[str, Any] | None = None, **kwargs: Any) -> FakeResponse:
        self.calls.append((url, params))
        if url == GOOGLE_FONTS_API:
            return self.directory
        return FakeResponse(content=b"font:" + url.encode())


def _service(tmp_path: Path, session: FakeSession, **config: Any) -> GoogleFontService:
    settings = {"google_fonts_api_key": "secret", "fonts_cache_dir": tmp_path}
    settings.update(config)
    return GoogleFontService(FontFindConfig(**settings), session=session)


def test_regular_request_downloads_matching_variant(tmp_path: Path):
    session = FakeSession()
    service = _service(tmp_path, session)

    font = service(Context.background(), Descriptor("anonymous"))

    assert font.name == "Anonymous Pro-regular.ttf"
    assert font.fs == tmp_path / "A"
    assert font.path == font.name
    assert font.weight is Weight.NORMAL
    assert (tmp_path / "A" / "Anonymous Pro-regular.ttf").read_bytes() == (
        b"font:http://fonts.example/anonymouspro/regular.ttf"
    )
    assert session.calls[0] == (GOOGLE_FONTS_API, {"sort": "alpha", "key": "secret"})


def test_directory_is_fetched_once_and_files_are_cached(tmp_path: Path):
    session = FakeSession()
    service = _service(tmp_path, session)
    descriptor = Descriptor("Antic")

    first = service.find(descriptor)
    second = service.find(descriptor)

    assert first == second
    assert [url for url, _ in session.calls] == [
        GOOGLE_FONTS_API,
        "http://fonts.example/antic/regular.ttf",
    ]


def test_best_variant_is_chosen_over_first_one(tmp_path: Path):
    service = _service(tmp_path, FakeSession())

    font = service.find(Descriptor("Anonymous Pro", Style.ITALIC))

    assert font.path == "Anonymous Pro-italic.ttf"


def test_unmatched_pattern_declines(tmp_path: Path):
    service = _service(tmp_path, FakeSession())

    with pytest.raises(LocatorError):
        service.find(Descriptor("Roboto"))
    # "700" scores nothing on style, so a plain bold request stays at low confidence.
    with pytest.raises(LocatorError):
        service.find(Descriptor("Anonymous", weight=Weight.BOLD))
    with pytest.raises(LocatorError):
        service.find(Descriptor("Antic", Style.ITALIC, Weight.LIGHT))


def test_missing_api_key_is_remembered(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("GOOGLE_FONTS_API_KEY", raising=False)
    session = FakeSession()
    service = _service(tmp_path, session, google_fonts_api_key=None)

    with pytest.raises(LocatorError) as first:
        service.find(Descriptor("Antic"))
    with pytest.raises(LocatorError) as second:
        service.find(Descriptor("Antic"))

    assert first.value is second.value
    assert session.calls == []


def test_api_key_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("GOOGLE_FONTS_API_KEY", "from-env")
    session = FakeSession()
    service = _service(tmp_path, session, google_fonts_api_key=None)

    service.find(Descriptor("Antic"))

    assert session.calls[0][1] == {"sort": "alpha", "key": "from-env"}


def test_directory_http_failure(tmp_path: Path):
    session = FakeSession(FakeResponse(status_code=403))
    service = _service(tmp_path, session)

    with pytest.raises(LocatorError):
        service.find(Descriptor("Antic"))
    with pytest.raises(LocatorError):
        service.find(Descriptor("Antic"))

    assert len(session.calls) == 1


def test_cancelled_context_skips_download(tmp_path: Path):
    session = FakeSession()
    service = _service(tmp_path, session)
    ctx = Context.with_cancel()
    ctx.cancel()

    with pytest.raises(ResolutionCancelled) as excinfo:
        service(ctx, Descriptor("Antic"))

    assert excinfo.value is ctx.err()
    assert [url for url, _ in session.calls] == [GOOGLE_FONTS_API]


def test_list_google_fonts_logs_matches(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
):
    config = FontFindConfig(google_fonts_api_key="secret", fonts_cache_dir=tmp_path)

    with caplog.at_level(logging.INFO, logger="fontfind.locators.googlefont"):
        found = list_google_fonts("^Anon", config, session=FakeSession())

    assert [info.family for info in found] == ["Anonymous Pro"]
    assert "2 fonts in Google font list" in caplog.text
    assert "Anonymous Pro" in caplog.text
    assert "Antic" not in caplog.text


def test_invalid_pattern_is_reported_before_directory_fetch(tmp_path: Path, monkeypatch):
    monkeypatch.delenv("GOOGLE_FONTS_API_KEY", raising=False)
    session = FakeSession()
    service = _service(tmp_path, session, google_fonts_api_key=None)

    with pytest.raises(InvalidPatternError):
        service.find(Descriptor("Noto["))
    with pytest.raises(InvalidPatternError):
        service.list_fonts("Noto[")

    assert session.calls == []
