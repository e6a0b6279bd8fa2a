import pytest

from lmiamap.records import Record, known_categories, parse_records


def test_parse_records_maps_source_fields():
    payload = [
        {
            "Province/Territory": "Ontario",
            "Program Stream": "High-wage",
            "Employer": "Acme Ltd.",
            "Address": "1 King St, Toronto",
            "Occupation": "Welder",
            "Latitude": "43.65",
            "Longitude": "-79.38",
            "Extra": "ignored",
        }
    ]

    records = parse_records(payload)

    assert records == [
        Record(
            province="Ontario",
            program_stream="High-wage",
            employer="Acme Ltd.",
            address="1 King St, Toronto",
            occupation="Welder",
            latitude="43.65",
            longitude="-79.38",
        )
    ]


def test_missing_fields_become_none():
    (record,) = parse_records([{"Province/Territory": "Yukon"}])
    assert record.province == "Yukon"
    assert record.program_stream is None
    assert record.employer is None
    assert record.latitude is None


def test_non_string_region_never_matches():
    (record,) = parse_records([{"Province/Territory": 12, "Program Stream": ["x"]}])
    assert record.province is None
    assert record.program_stream is None


@pytest.mark.parametrize("payload", [{"records": []}, "text", None, [1, 2], [{"a": 1}, "b"]])
def test_parse_records_rejects_malformed_payload(payload):
    with pytest.raises(ValueError):
        parse_records(payload)


def test_known_categories_sorted_and_distinct():
    records = parse_records(
        [
            {"Program Stream": "Low-wage"},
            {"Program Stream": "High-wage"},
            {"Program Stream": "Low-wage"},
            {"Program Stream": ""},
            {},
        ]
    )
    assert known_categories(records) == ["High-wage", "Low-wage"]


def test_record_round_trips_to_source_keys():
    raw = {"Province/Territory": "Quebec", "Latitude": 46.8}
    mapping = Record.from_mapping(raw).to_mapping()
    assert mapping["Province/Territory"] == "Quebec"
    assert mapping["Latitude"] == 46.8
    assert mapping["Employer"] is None
