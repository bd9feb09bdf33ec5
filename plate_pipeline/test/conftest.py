import pytest

from plate_pipeline.domain.Models.text_line import BoundingBox, OcrResult, TextLine
from plate_pipeline.domain.Services.candidate_extractor import CandidateExtractor
from plate_pipeline.domain.Services.confidence_scorer import ConfidenceScorer, ScoringPolicy
from plate_pipeline.domain.Services.decision_pipeline import DecisionPipeline
from plate_pipeline.domain.Services.detection_memory import DetectionMemory
from plate_pipeline.infrastructure.Normalizer.plate_normalizer import PlateNormalizer


def line(text, box=None):
    return TextLine(text=text, box=BoundingBox(*box) if box else None)


def ocr_of(*lines):
    return OcrResult.from_lines(lines)


@pytest.fixture
def normalizer():
    return PlateNormalizer(validate_charset=True)


@pytest.fixture
def scorer():
    return ConfidenceScorer(ScoringPolicy())


@pytest.fixture
def extractor(normalizer, scorer):
    return CandidateExtractor(normalizer=normalizer, scorer=scorer)


@pytest.fixture
def make_pipeline(extractor):
    def _make(**kwargs):
        kwargs.setdefault("memory", DetectionMemory(capacity=10))
        kwargs.setdefault("confidence_threshold", 0.7)
        kwargs.setdefault("corroboration_count", 2)
        kwargs.setdefault("high_confidence", 0.85)
        kwargs.setdefault("roi_expand", (0.1, 0.2))
        kwargs.setdefault("clock", lambda: 1000.0)
        return DecisionPipeline(extractor=extractor, **kwargs)
    return _make
