import pytest
import requests

from conftest import FakeResponse, FakeSession
from gradient_studio import raster, session as session_mod
from gradient_studio.errors import RenderExportError
from gradient_studio.generators import PRESETS
from gradient_studio.session import AI_FAILED, AI_OK, CSS_COPIED, EXPORT_FAILED, GradientSession

AI_BODY = {"kind": "conic", "direction": 200, "stops": [{"color": "#123456", "position": 0}, {"color": "#abcdef", "position": 100}]}


def make(http, rng):
    return GradientSession(api_url="http://test/api/generate-gradient", http=http, rng=rng)


def test_starts_on_first_preset(rng):
    s = make(FakeSession(), rng)
    assert s.current is PRESETS["Sunset"]
    assert s.css.startswith("linear-gradient(45deg")


def test_ai_success_adopts_response(rng):
    http = FakeSession(response=FakeResponse(200, AI_BODY))
    s = make(http, rng)

    g = s.generate_ai("deep space")

    assert g.kind == "conic" and g.direction == 200
    assert s.current == g
    assert s.notices[-1].message == AI_OK
    assert not s.busy
    url, kwargs = http.calls[0]
    assert url == "http://test/api/generate-gradient"
    assert kwargs["json"] == {"prompt": "deep space"}


@pytest.mark.parametrize(
    "http",
    [
        FakeSession(response=FakeResponse(500, {"error": "boom"})),
        FakeSession(response=FakeResponse(400, {"error": "Prompt is required"})),
        FakeSession(response=FakeResponse(200, None)),
        FakeSession(response=FakeResponse(200, {"kind": "linear"})),
        FakeSession(error=requests.ConnectionError("offline")),
    ],
)
def test_ai_failure_falls_back_to_random(http, rng):
    s = make(http, rng)
    g = s.generate_ai("deep space")

    assert s.current == g
    assert [st.position for st in g.stops][0] == 0
    assert [st.position for st in g.stops][-1] == 100
    assert s.notices[-1].message == AI_FAILED
    assert s.notices[-1].level == "error"
    assert not s.busy


def test_blank_prompt_is_ignored(rng):
    http = FakeSession(response=FakeResponse(200, AI_BODY))
    s = make(http, rng)
    before = s.current
    assert s.generate_ai("   ") is before
    assert http.calls == [] and s.notices == []


def test_busy_suppresses_second_request(rng):
    http = FakeSession(response=FakeResponse(200, AI_BODY))
    s = make(http, rng)
    s.busy = True
    before = s.current
    assert s.generate_ai("ocean") is before
    assert http.calls == []


def test_edits_replace_current(rng):
    s = make(FakeSession(), rng)
    original = s.current

    s.set_kind("radial")
    s.set_direction(10)
    s.update_stop_color(1, "hsl(240, 100%, 50%)")
    s.update_stop_position(0, 150)

    assert original is PRESETS["Sunset"]
    assert original.kind == "linear"
    assert s.current.stops[0].position == 150
    assert s.css == "radial-gradient(circle, #ff6b6b 150%, #0000ff 50%, #ff9ff3 100%)"


def test_preset_and_randomize(rng):
    s = make(FakeSession(), rng)
    assert s.apply_preset("Forest").kind == "radial"
    g = s.randomize()
    assert s.current is g
    assert len(g.stops) in {2, 3, 4}


def test_copy_css(rng):
    s = make(FakeSession(), rng)
    s.apply_preset("Ocean")
    assert s.copy_css() == "background: linear-gradient(135deg, #667eea 0%, #764ba2 100%);"
    assert s.notices[-1].message == CSS_COPIED


def test_export(monkeypatch, rng):
    monkeypatch.setitem(raster.RESOLUTIONS, "4K", (8, 8))
    s = make(FakeSession(), rng)
    result = s.export("png", "4K")
    assert result is not None and result.data.startswith(b"\x89PNG")
    assert s.notices[-1].level == "success"


def test_export_failure_keeps_state(monkeypatch, rng):
    def broken(desc, fmt, resolution):
        raise RenderExportError("canvas too large")

    monkeypatch.setattr(session_mod, "export_image", broken)
    s = make(FakeSession(), rng)
    before = s.current

    assert s.export("jpeg", "8K") is None
    assert s.current is before
    assert s.notices[-1].message == EXPORT_FAILED
