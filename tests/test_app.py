import httpx
import pytest

from movie_identifier.app import MovieIdentifierApp
from movie_identifier.config import MovieIdentifierConfig
from movie_identifier.memory import Idle, Ready, Succeeded

from conftest import ScriptedTransport, gemini_body


def test_requires_initialize(config):
    """Test orchestrator() refuses to run before initialize()"""
    app = MovieIdentifierApp(config)
    with pytest.raises(RuntimeError, match="initialize"):
        app.orchestrator("abc")


def test_orchestrators_share_session_state(config, png_image):
    """Test orchestrators for one session see the same state"""
    app = MovieIdentifierApp(config)
    app.initialize()

    app.orchestrator("a").select(png_image)

    assert isinstance(app.orchestrator("a").state, Ready)
    assert app.orchestrator("b").state == Idle()


async def test_identify_through_facade(config, png_image):
    """Test select + identify through the facade with one retry"""
    transport = ScriptedTransport([
        httpx.Response(503),
        httpx.Response(200, json=gemini_body("Title: Heat\nYear: 1995\nSynopsis: A heist.")),
    ])
    app = MovieIdentifierApp(config, http_client=transport.client())
    app.initialize()

    app.select_image(png_image, session_id="s1")
    state = await app.identify(session_id="s1")

    assert isinstance(state, Succeeded)
    assert state.outcome.title == "Heat"
    assert app.get_state("s1") is state
    assert app.get_state("s2") == Idle()
    assert transport.calls == 2


async def test_api_key_sent_with_injected_client(config, png_image):
    """Test the configured API key reaches an injected HTTP client"""
    transport = ScriptedTransport([httpx.Response(200, json=gemini_body("Title: Heat"))])
    app = MovieIdentifierApp(config, http_client=transport.client())
    app.initialize()

    app.select_image(png_image, session_id="s1")
    await app.identify(session_id="s1")

    url = transport.requests[0].url
    assert url.params["key"] == config.api_key
    assert url.path.endswith(f"/{config.model}:generateContent")


def test_end_session(config, png_image):
    """Test end_session forgets the session"""
    app = MovieIdentifierApp(config)
    app.initialize()
    app.select_image(png_image, session_id="s1")
    assert isinstance(app.get_state("s1"), Ready)

    app.end_session("s1")

    assert app.get_state("s1") == Idle()
    assert app.active_sessions == 0


def test_clearing_frees_session(config, png_image):
    """Test clear_image leaves no stored entry behind"""
    app = MovieIdentifierApp(config)
    app.initialize()
    app.select_image(png_image, session_id="s1")
    assert app.active_sessions == 1

    app.clear_image(session_id="s1")

    assert app.active_sessions == 0


def test_session_bound_from_config(png_image):
    """Test max_sessions caps the sessions the facade keeps"""
    app = MovieIdentifierApp(MovieIdentifierConfig(api_key="k" * 39, max_sessions=3))
    app.initialize()

    for i in range(10):
        app.select_image(png_image, session_id=f"s{i}")

    assert app.active_sessions == 3
    assert app.get_state("s0") == Idle()
    assert isinstance(app.get_state("s9"), Ready)
