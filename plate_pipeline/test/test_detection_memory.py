import pytest

from plate_pipeline.domain.Services.detection_memory import MAX_RECENT, DetectionMemory


def test_increment_counts_observations():
    memory = DetectionMemory(capacity=MAX_RECENT)
    assert memory.increment("12가3456") == 1
    assert memory.increment("12가3456") == 2
    assert memory.count("12가3456") == 2
    assert memory.count("34나5678") == 0


def test_eleven_distinct_plates_evict_exactly_one():
    memory = DetectionMemory(capacity=10)
    plates = [f"{10 + i}가1234" for i in range(11)]
    for p in plates:
        memory.increment(p)

    assert len(memory) == 10
    # el menos recientemente incrementado con conteo mínimo
    assert plates[0] not in memory
    assert all(p in memory for p in plates[1:])


def test_size_never_exceeds_capacity():
    memory = DetectionMemory(capacity=10)
    for i in range(500):
        memory.increment(f"{10 + i % 37}가{1000 + i % 13}")
        assert len(memory) <= 10


def test_lowest_count_is_evicted_first():
    memory = DetectionMemory(capacity=3)
    memory.increment("A")
    memory.increment("A")
    memory.increment("B")
    memory.increment("C")
    memory.increment("C")
    memory.increment("D")

    assert set(memory.snapshot()) == {"A", "C", "D"}


def test_fresh_plate_survives_its_own_insertion():
    memory = DetectionMemory(capacity=2)
    for p in ("A", "A", "B", "B"):
        memory.increment(p)

    assert memory.increment("C") == 1
    assert "C" in memory
    assert set(memory.snapshot()) == {"B", "C"}


def test_clear():
    memory = DetectionMemory(capacity=4)
    memory.increment("A")
    memory.clear()
    assert len(memory) == 0
    assert memory.increment("A") == 1


def test_invalid_capacity():
    with pytest.raises(ValueError):
        DetectionMemory(capacity=0)
