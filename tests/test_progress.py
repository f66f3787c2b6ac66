"""Tests for progress broadcasting."""

from proxyprinter.models.progress import ProgressEvent, ProgressStage
from proxyprinter.services.progress import ProgressBroadcaster, percent_of


class TestPercentOf:
    def test_fraction(self) -> None:
        assert percent_of(1, 4) == 25.0

    def test_clamped(self) -> None:
        """Never exceeds 100."""
        assert percent_of(5, 4) == 100.0

    def test_empty_total(self) -> None:
        """Nothing to do counts as done."""
        assert percent_of(0, 0) == 100.0


class TestProgressBroadcaster:
    def test_delivers_to_all_listeners_in_order(self) -> None:
        """Every listener receives every event."""
        broadcaster = ProgressBroadcaster()
        received: list[tuple[str, ProgressEvent]] = []
        broadcaster.subscribe(lambda e: received.append(("first", e)))
        broadcaster.subscribe(lambda e: received.append(("second", e)))

        event = ProgressEvent(stage=ProgressStage.FETCH_IMAGES, percent=50.0)
        broadcaster.notify(event)

        assert received == [("first", event), ("second", event)]

    def test_duplicates_are_forwarded(self) -> None:
        """No coalescing of identical events."""
        broadcaster = ProgressBroadcaster()
        received: list[ProgressEvent] = []
        broadcaster.subscribe(received.append)

        event = ProgressEvent(stage=ProgressStage.RESOLVE_DECK, percent=0.0)
        broadcaster.notify(event)
        broadcaster.notify(event)

        assert received == [event, event]

    def test_unsubscribe(self) -> None:
        """Unsubscribed listeners stop receiving events."""
        broadcaster = ProgressBroadcaster()
        received: list[ProgressEvent] = []
        unsubscribe = broadcaster.subscribe(received.append)

        unsubscribe()
        unsubscribe()
        broadcaster.notify(ProgressEvent(stage=ProgressStage.RESOLVE_DECK))

        assert received == []

    def test_failing_listener_does_not_block_others(self) -> None:
        """A listener raising doesn't stop delivery."""
        broadcaster = ProgressBroadcaster()
        received: list[ProgressEvent] = []

        def broken(event: ProgressEvent) -> None:
            raise RuntimeError("boom")

        broadcaster.subscribe(broken)
        broadcaster.subscribe(received.append)
        broadcaster.notify(ProgressEvent(stage=ProgressStage.RESOLVE_DECK))

        assert len(received) == 1

    def test_reporter_tags_stage(self) -> None:
        """Reporters stamp their stage on each event."""
        broadcaster = ProgressBroadcaster()
        received: list[ProgressEvent] = []
        broadcaster.subscribe(received.append)

        report = broadcaster.reporter(ProgressStage.RESOLVE_IMAGES)
        report(10.0)
        report(20.0, "Card 'X' not found")

        assert received == [
            ProgressEvent(stage=ProgressStage.RESOLVE_IMAGES, percent=10.0),
            ProgressEvent(
                stage=ProgressStage.RESOLVE_IMAGES,
                percent=20.0,
                error_message="Card 'X' not found",
            ),
        ]
