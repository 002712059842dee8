import threading

import pytest

from movie_identifier.memory import Busy, Failed, Idle, Ready, SessionStateManager, Succeeded
from movie_identifier.schemas import IdentificationOutcome, ImageUpload, Source


class TestSessionStateManager:

    def test_new_session_is_idle(self):
        """Test an unknown session reads as Idle"""
        manager = SessionStateManager()
        assert manager.get_state("abc") == Idle()

    def test_reading_does_not_store(self):
        """Test looking up unknown sessions allocates nothing"""
        manager = SessionStateManager()

        for i in range(200):
            manager.get_state(f"visitor-{i}")

        assert len(manager) == 0

    def test_set_and_clear_state(self):
        """Test a stored state is returned until cleared"""
        manager = SessionStateManager()
        manager.set_state("abc", Failed(message="nope"))

        assert manager.get_state("abc") == Failed(message="nope")

        manager.clear_state("abc")
        assert manager.get_state("abc") == Idle()
        assert len(manager) == 0

    def test_setting_idle_drops_entry(self):
        """Test returning to Idle frees the session's entry"""
        manager = SessionStateManager()
        manager.set_state("abc", Failed(message="nope"))

        manager.set_state("abc", Idle())

        assert len(manager) == 0
        assert manager.get_state("abc") == Idle()

    def test_clear_all(self):
        """Test clear_all forgets every session"""
        manager = SessionStateManager()
        manager.set_state("a", Failed(message="x"))
        manager.set_state("b", Failed(message="y"))

        manager.clear_all()

        assert manager.get_state("a") == Idle()
        assert manager.get_state("b") == Idle()

    def test_rejects_non_positive_bound(self):
        """Test max_sessions must be at least 1"""
        with pytest.raises(ValueError):
            SessionStateManager(max_sessions=0)


class TestEviction:

    def test_least_recently_used_evicted(self):
        """Test the oldest session goes first once the bound is exceeded"""
        manager = SessionStateManager(max_sessions=2)
        manager.set_state("a", Failed(message="a"))
        manager.set_state("b", Failed(message="b"))

        manager.set_state("c", Failed(message="c"))

        assert len(manager) == 2
        assert manager.get_state("a") == Idle()
        assert manager.get_state("c") == Failed(message="c")

    def test_reading_refreshes_recency(self):
        """Test a recently read session survives eviction"""
        manager = SessionStateManager(max_sessions=2)
        manager.set_state("a", Failed(message="a"))
        manager.set_state("b", Failed(message="b"))
        manager.get_state("a")

        manager.set_state("c", Failed(message="c"))

        assert manager.get_state("a") == Failed(message="a")
        assert manager.get_state("b") == Idle()

    def test_busy_session_never_evicted(self):
        """Test an in-flight session is skipped by eviction"""
        image = ImageUpload(filename="scene.png", mime_type="image/png", data=b"x")
        manager = SessionStateManager(max_sessions=2)
        manager.set_state("a", Busy(image=image))
        manager.set_state("b", Failed(message="b"))

        manager.set_state("c", Failed(message="c"))

        assert manager.get_state("a") == Busy(image=image)
        assert manager.get_state("b") == Idle()

    def test_all_busy_allows_overflow(self):
        """Test eviction stops when every stored session is Busy"""
        image = ImageUpload(filename="scene.png", mime_type="image/png", data=b"x")
        manager = SessionStateManager(max_sessions=1)
        manager.set_state("a", Busy(image=image))

        manager.set_state("b", Busy(image=image))

        assert len(manager) == 2

    def test_concurrent_writers_respect_bound(self):
        """Test writes from several threads keep the bound"""
        manager = SessionStateManager(max_sessions=10)

        def writer(prefix):
            for i in range(100):
                manager.set_state(f"{prefix}-{i}", Failed(message="x"))

        threads = [threading.Thread(target=writer, args=(n,)) for n in range(4)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert len(manager) == 10


class TestSerialization:
    """States serialize for the REST API without leaking image bytes."""

    def test_ready_and_busy_summarize_image(self):
        """Test image states report metadata, not bytes"""
        image = ImageUpload(filename="scene.jpg", mime_type="image/jpeg", data=b"12345")

        for state in (Ready(image=image), Busy(image=image)):
            data = state.to_dict()
            assert data["status"] == state.name
            assert data["image"] == {"filename": "scene.jpg", "mime_type": "image/jpeg", "size": 5}

    def test_succeeded_includes_outcome(self):
        """Test Succeeded carries the full outcome"""
        outcome = IdentificationOutcome(
            title="Inception",
            release_year="2010",
            main_actors="Leonardo DiCaprio",
            synopsis="Dreams.",
            success=True,
            sources=[Source(uri="https://example.org", title="Example")],
        )

        data = Succeeded(outcome=outcome).to_dict()

        assert data["status"] == "succeeded"
        assert data["outcome"]["title"] == "Inception"
        assert data["outcome"]["sources"] == [{"uri": "https://example.org", "title": "Example"}]

    def test_idle_and_failed(self):
        """Test Idle and Failed serialization"""
        assert Idle().to_dict() == {"status": "idle"}
        assert Failed(message="oops").to_dict() == {"status": "failed", "message": "oops"}
