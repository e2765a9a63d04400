from __future__ import annotations

import pytest

import fontfind
from fontfind import api
from fontfind.config import FontFindConfig
from fontfind.context import Context
from fontfind.exceptions import FontNotFoundError, LocatorError
from fontfind.locators.googlefont import GoogleFontService
from fontfind.locators.packaged import PackagedFontLocator
from fontfind.locators.systemfont import SystemFontLocator
from fontfind.types import Descriptor, ScalableFont, Style


@pytest.fixture(autouse=True)
def _fresh_registry(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(api, "_REGISTRY", None)


def test_default_registry_is_shared():
    assert api.default_registry() is api.default_registry()


def test_resolve_font_falls_back_to_packaged_font():
    def nothing(descriptor: Descriptor) -> ScalableFont:
        raise LocatorError("no such font")

    resolution = fontfind.resolve_font(Descriptor("Nonexistent Grotesk"), nothing).result(
        Context.with_timeout(5.0)
    )

    assert isinstance(resolution.error, FontNotFoundError)
    assert resolution.font.name == "DejaVuSans.ttf"
    assert "nonexistent_grotesk" not in api.default_registry()


def test_resolve_font_with_context_caches_in_default_registry():
    packaged = PackagedFontLocator()

    def locate(ctx: Context, descriptor: Descriptor) -> ScalableFont:
        return packaged(descriptor)

    promise = api.resolve_font_with_context(
        Context.background(), Descriptor("DejaVu", Style.NORMAL), locate
    )

    font = promise.font(Context.with_timeout(5.0))

    assert font.name == "DejaVuSans.ttf"
    assert api.default_registry().get_font("dejavu") == font


def test_standard_locators_order():
    locators = api.standard_locators(FontFindConfig(app_key="demo"))

    assert [type(locator) for locator in locators] == [SystemFontLocator, GoogleFontService]
    assert all(locator.config.app_key == "demo" for locator in locators)
