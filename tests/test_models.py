"""Tests for metadata models."""

import dataclasses

import pytest

from photometa.exif import ExtractedMetadata, ExtractionResult


def test_empty_record():
    metadata = ExtractedMetadata()
    assert metadata.is_empty
    assert metadata.to_dict() == {}
    assert not metadata.has_coordinates
    assert str(metadata) == "ExtractedMetadata(empty)"


def test_to_dict_keeps_zero_values():
    metadata = ExtractedMetadata(latitude=0.0, longitude=0.0, altitude=0.0)
    assert metadata.to_dict() == {"latitude": 0.0, "longitude": 0.0, "altitude": 0.0}
    assert metadata.has_coordinates


def test_records_are_immutable():
    metadata = ExtractedMetadata(make="Canon")
    with pytest.raises(dataclasses.FrozenInstanceError):
        metadata.make = "Nikon"


def test_merged_prefers_other_and_leaves_inputs_alone():
    base = ExtractedMetadata(make="Canon", model="R5", orientation=1)
    update = ExtractedMetadata(model="R6", latitude=1.5)

    merged = base.merged(update)

    assert merged == ExtractedMetadata(make="Canon", model="R6", orientation=1, latitude=1.5)
    assert base.model == "R5"
    assert update.make is None


def test_with_dimensions():
    metadata = ExtractedMetadata(make="Canon").with_dimensions(640, 480)
    assert metadata.to_dict() == {"make": "Canon", "width": 640, "height": 480}


def test_extraction_result_defaults():
    result = ExtractionResult()
    assert result.metadata.is_empty
    assert result.ok


def test_extraction_result_with_warnings():
    result = ExtractionResult(warnings=("IFD0 truncated",))
    assert not result.ok
