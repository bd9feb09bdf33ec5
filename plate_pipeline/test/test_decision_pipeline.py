import threading

import pytest

from conftest import line, ocr_of
from plate_pipeline.domain.Models.candidate import Candidate
from plate_pipeline.domain.Models.outcome import (
    Accepted,
    DuplicateSuppressed,
    InsufficientCorroboration,
    LowConfidence,
    NoDetection,
    OutcomeKind,
    RecognitionFailed,
)
from plate_pipeline.domain.Models.text_line import BoundingBox, OcrResult
from plate_pipeline.domain.Services.decision_pipeline import PipelineState


def test_no_candidates(make_pipeline):
    pipeline = make_pipeline()
    assert isinstance(pipeline.decide([]), NoDetection)
    assert isinstance(pipeline.process(OcrResult()), NoDetection)
    assert isinstance(pipeline.process(None), NoDetection)


def test_low_confidence_does_not_touch_state(make_pipeline):
    pipeline = make_pipeline()
    outcome = pipeline.decide([Candidate("12가3456", 0.69)])

    assert isinstance(outcome, LowConfidence)
    assert outcome.kind is OutcomeKind.LOW_CONFIDENCE
    assert len(pipeline.memory) == 0
    assert pipeline.state == PipelineState()


def test_corroboration_gate_at_threshold(make_pipeline):
    pipeline = make_pipeline()

    first = pipeline.decide([Candidate("12가3456", 0.7)])
    assert isinstance(first, InsufficientCorroboration)
    assert first.observations == 1
    assert pipeline.state.last_accepted_plate == ""

    second = pipeline.decide([Candidate("12가3456", 0.7)])
    assert isinstance(second, Accepted)
    assert second.plate == "12가3456"
    assert second.observations == 2
    assert pipeline.state.last_accepted_plate == "12가3456"
    assert pipeline.state.last_accepted_time == 1000.0


def test_high_confidence_accepts_on_first_sight(make_pipeline):
    pipeline = make_pipeline()
    outcome = pipeline.decide([Candidate("12가3456", 0.9)], now=42.0)

    assert isinstance(outcome, Accepted)
    assert outcome.observations == 1
    assert outcome.accepted_at == 42.0


def test_override_is_strictly_greater(make_pipeline):
    pipeline = make_pipeline()
    assert isinstance(pipeline.decide([Candidate("12가3456", 0.85)]), InsufficientCorroboration)


def test_duplicate_is_suppressed_without_mutation(make_pipeline):
    pipeline = make_pipeline(state=PipelineState(last_accepted_plate="12가3456", last_accepted_time=5.0))

    for confidence in (0.7, 0.85, 1.0):
        outcome = pipeline.decide([Candidate("12가3456", confidence)])
        assert isinstance(outcome, DuplicateSuppressed)

    assert pipeline.state == PipelineState(last_accepted_plate="12가3456", last_accepted_time=5.0)
    assert pipeline.memory.count("12가3456") == 0


def test_duplicate_suppression_ignores_elapsed_time(make_pipeline):
    pipeline = make_pipeline()
    assert isinstance(pipeline.decide([Candidate("12가3456", 0.95)], now=0.0), Accepted)
    assert isinstance(pipeline.decide([Candidate("12가3456", 0.95)], now=86400.0), DuplicateSuppressed)


def test_new_plate_releases_previous_duplicate(make_pipeline):
    pipeline = make_pipeline()
    pipeline.decide([Candidate("12가3456", 0.95)])
    assert isinstance(pipeline.decide([Candidate("34나5678", 0.95)]), Accepted)

    # la primera ya no es la última aceptada y tiene conteo previo
    again = pipeline.decide([Candidate("12가3456", 0.7)])
    assert isinstance(again, Accepted)
    assert again.observations == 2


def test_best_candidate_is_selected(make_pipeline):
    pipeline = make_pipeline()
    outcome = pipeline.decide([
        Candidate("12가3456", 0.6),
        Candidate("34나5678", 0.95),
        Candidate("56다7890", 0.8),
    ])
    assert isinstance(outcome, Accepted)
    assert outcome.plate == "34나5678"


def test_end_to_end_two_frames(make_pipeline):
    pipeline = make_pipeline()
    frame = ocr_of(line("12가1234", (100, 200, 200, 50)))

    first = pipeline.process(frame)
    assert isinstance(first, InsufficientCorroboration)
    assert first.confidence == pytest.approx(0.8)

    second = pipeline.process(frame)
    assert isinstance(second, Accepted)
    assert second.plate == "12가1234"
    assert second.confidence == pytest.approx(0.8)
    # 10% del ancho y 20% del alto por lado
    assert second.region == BoundingBox(80, 190, 240, 70)


def test_region_is_clamped_at_origin(make_pipeline):
    pipeline = make_pipeline()
    outcome = pipeline.process(ocr_of(line("12가1234", (5, 3, 80, 20))))

    assert isinstance(outcome, Accepted)
    assert outcome.region == BoundingBox(0, 0, 93, 27)


def test_business_plate_wins_tie(make_pipeline):
    pipeline = make_pipeline()
    outcome = pipeline.process(ocr_of(line("경기12가1234", (0, 0, 100, 25))))

    assert isinstance(outcome, Accepted)
    assert outcome.plate == "경기12가1234"


class _StubLocator:
    def __init__(self, box):
        self.box = box
        self.calls = 0

    def locate_plate_region(self, image):
        self.calls += 1
        return self.box


def test_region_locator_used_without_line_geometry(make_pipeline):
    locator = _StubLocator(BoundingBox(1, 2, 30, 8))
    pipeline = make_pipeline(confidence_threshold=0.5, high_confidence=0.4, region_locator=locator)

    outcome = pipeline.process(ocr_of(line("12가1234", None)), image=object())

    assert isinstance(outcome, Accepted)
    assert outcome.region == BoundingBox(1, 2, 30, 8)
    assert locator.calls == 1


def test_region_absent_without_geometry_or_image(make_pipeline):
    locator = _StubLocator(BoundingBox(1, 2, 30, 8))
    pipeline = make_pipeline(confidence_threshold=0.5, high_confidence=0.4, region_locator=locator)

    outcome = pipeline.process(ocr_of(line("12가1234", None)))

    assert isinstance(outcome, Accepted)
    assert outcome.region is None
    assert locator.calls == 0


def test_locator_failure_is_not_fatal(make_pipeline):
    class Broken:
        def locate_plate_region(self, image):
            raise RuntimeError("boom")

    pipeline = make_pipeline(confidence_threshold=0.5, high_confidence=0.4, region_locator=Broken())
    outcome = pipeline.process(ocr_of(line("12가1234", None)), image=object())

    assert isinstance(outcome, Accepted)
    assert outcome.region is None


def test_recognition_failed_carries_description(make_pipeline):
    outcome = make_pipeline().recognition_failed(RuntimeError("modelo no disponible"))
    assert isinstance(outcome, RecognitionFailed)
    assert outcome.error == "modelo no disponible"
    assert "modelo no disponible" in outcome.describe()


def test_reset_clears_session(make_pipeline):
    pipeline = make_pipeline()
    pipeline.decide([Candidate("12가3456", 0.95)])
    pipeline.reset()

    assert pipeline.state == PipelineState()
    assert len(pipeline.memory) == 0
    assert isinstance(pipeline.decide([Candidate("12가3456", 0.95)]), Accepted)


def test_memory_capacity_holds_through_pipeline(make_pipeline):
    pipeline = make_pipeline()
    for i in range(40):
        pipeline.decide([Candidate(f"{10 + i}가1234", 0.7)])
        assert len(pipeline.memory) <= 10


def test_concurrent_decides_keep_state_consistent(make_pipeline):
    pipeline = make_pipeline()
    plates = [f"{10 + i}가1234" for i in range(25)]
    accepted = set()
    sizes = []
    errors = []
    guard = threading.Lock()

    def worker(offset):
        try:
            for n in range(300):
                plate = plates[(offset + n) % len(plates)]
                # una de cada cinco entra por confianza alta
                confidence = 0.9 if plates.index(plate) % 5 == 0 else 0.75
                outcome = pipeline.decide([Candidate(plate, confidence)])
                with guard:
                    sizes.append(len(pipeline.memory))
                    if isinstance(outcome, Accepted):
                        accepted.add(outcome.plate)
        except Exception as e:
            errors.append(e)

    threads = [threading.Thread(target=worker, args=(i * 4,)) for i in range(6)]
    for t in threads:
        t.start()
    for t in threads:
        t.join(timeout=10)

    assert errors == []
    assert max(sizes) <= 10
    assert len(pipeline.memory) <= 10
    assert accepted
    assert pipeline.state.last_accepted_plate in accepted
