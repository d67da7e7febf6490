"""Tests for the wire representation of beacon models."""

from fractions import Fraction

import pytest

from vcfbeacon.models import (
    AlleleRequest,
    AlleleResponse,
    BeaconInfo,
    BeaconError,
    DatasetAlleleResponse,
    DatasetMetadata,
    IncludeDatasetResponses,
    KeyValuePair,
)


def test_request_from_dict_uses_wire_names():
    request = AlleleRequest.from_dict({
        "referenceName": 1,
        "start": "100",
        "referenceBases": "T",
        "alternateBases": "C",
        "assemblyId": "grch37",
        "datasetIds": ["a", "b"],
        "includeDatasetResponses": "miss",
    })
    assert request.reference_name == "1"
    assert request.start == 100
    assert request.dataset_ids == ("a", "b")
    assert request.include_dataset_responses == IncludeDatasetResponses.MISS
    assert request.to_dict()["includeDatasetResponses"] == "MISS"


def test_request_rejects_unknown_policy():
    with pytest.raises(ValueError, match="includeDatasetResponses"):
        AlleleRequest(include_dataset_responses="SOME")


def test_request_is_frozen():
    request = AlleleRequest(reference_name="1", dataset_ids=["a"])
    with pytest.raises(AttributeError):
        request.start = 5
    assert request.to_dict() == {"referenceName": "1", "datasetIds": ["a"]}


def test_dataset_response_to_dict():
    response = DatasetAlleleResponse(
        "a",
        exists=True,
        variant_count=1,
        call_count=1,
        sample_count=1,
        frequency=Fraction(1, 4),
        info=(KeyValuePair("warn", "note"),),
    )
    assert response.to_dict() == {
        "datasetId": "a",
        "exists": True,
        "frequency": 0.25,
        "variantCount": 1,
        "callCount": 1,
        "sampleCount": 1,
        "info": [{"key": "warn", "value": "note"}],
    }

    errored = DatasetAlleleResponse("b", error=BeaconError(404, "missing"))
    assert errored.to_dict() == {"datasetId": "b", "error": {"errorCode": 404, "errorMessage": "missing"}}


def test_response_keeps_false_exists():
    response = AlleleResponse("beacon", AlleleRequest(reference_name="1"), exists=False)
    assert response.to_dict() == {
        "beaconId": "beacon",
        "exists": False,
        "alleleRequest": {"referenceName": "1"},
    }


def test_dataset_metadata_from_dict():
    metadata = DatasetMetadata.from_dict({"id": "a", "assemblyId": "grch37", "sampleCount": 3, "name": "A"})
    assert metadata == DatasetMetadata("a", "grch37", 3, name="A")
    with pytest.raises(ValueError):
        DatasetMetadata.from_dict({"id": "a", "assemblyId": "grch37", "sampleCount": -1})


def test_single_dataset_id_string_is_not_split():
    request = AlleleRequest.from_dict({
        "referenceName": "1",
        "start": 100,
        "referenceBases": "T",
        "alternateBases": "C",
        "assemblyId": "grch37",
        "datasetIds": "gt-dataset",
    })
    assert request.dataset_ids == ("gt-dataset",)
    assert request.to_dict()["datasetIds"] == ["gt-dataset"]
    assert AlleleRequest(dataset_ids="").dataset_ids == ()


def test_sample_request_with_single_dataset_id(beacon_info):
    data = beacon_info.to_dict()
    data["sampleAlleleRequests"][0]["datasetIds"] = "gt-dataset"
    beacon = BeaconInfo.from_dict(data)
    assert beacon.sample_allele_requests[0].dataset_ids == ("gt-dataset",)
