import json

import pytest
import yaml

from bigip_sd.exceptions import OutputFileError
from bigip_sd.models.schemas import ClassifiedTargets, TargetLabels
from bigip_sd.pipeline.exporter import build_export_records, render_targets, write_targets


def test_two_groups_matched_first_with_bigip_label():
    classified = ClassifiedTargets(matched=["https://intranet.example"], unmatched=["http://espn.com"])

    records = build_export_records(classified, TargetLabels())

    assert [r.targets for r in records] == [["https://intranet.example"], ["http://espn.com"]]
    assert records[0].labels == {"location": "BigIP"}
    assert records[1].labels == {}


def test_empty_groups_are_still_exported():
    records = build_export_records(ClassifiedTargets(), TargetLabels())

    assert len(records) == 2
    assert all(r.targets == [] for r in records)


def test_records_do_not_share_label_dicts():
    labels = TargetLabels()
    records = build_export_records(ClassifiedTargets(), labels)

    records[0].labels["extra"] = "x"

    assert labels.matched == {"location": "BigIP"}


def test_render_json_is_file_sd_shape():
    records = build_export_records(ClassifiedTargets(matched=["https://a"], unmatched=["https://b"]), TargetLabels())

    data = json.loads(render_targets(records, "json"))

    assert data == [
        {"targets": ["https://a"], "labels": {"location": "BigIP"}},
        {"targets": ["https://b"], "labels": {}},
    ]


def test_render_yaml_round_trips_to_same_structure():
    labels = TargetLabels(matched={"location": "BigIP", "team": "net"}, unmatched={"location": "other"})
    records = build_export_records(ClassifiedTargets(matched=["https://a"], unmatched=["https://b"]), labels)

    text = render_targets(records, "yaml")

    assert text.index("targets") < text.index("labels")
    assert yaml.safe_load(text)[1] == {"targets": ["https://b"], "labels": {"location": "other"}}


def test_write_targets_to_file_creates_parents(tmp_path):
    out = tmp_path / "sd" / "targets.json"
    records = build_export_records(ClassifiedTargets(matched=["https://a"]), TargetLabels())

    write_targets(records, output=str(out))

    assert json.loads(out.read_text())[0]["targets"] == ["https://a"]


def test_write_targets_defaults_to_stdout(capsys):
    records = build_export_records(ClassifiedTargets(unmatched=["https://b"]), TargetLabels())

    write_targets(records)

    assert json.loads(capsys.readouterr().out)[1]["targets"] == ["https://b"]


def test_write_targets_to_directory_raises_output_error(tmp_path):
    records = build_export_records(ClassifiedTargets(matched=["https://a"]), TargetLabels())

    with pytest.raises(OutputFileError) as excinfo:
        write_targets(records, output=str(tmp_path))

    assert excinfo.value.code == "output_unwritable"
    assert excinfo.value.path == str(tmp_path)


def test_configured_matched_labels_keep_bigip_location():
    labels = TargetLabels(matched={"location": "F5", "team": "net"})

    records = build_export_records(ClassifiedTargets(matched=["https://a"]), labels)

    assert records[0].labels == {"location": "BigIP", "team": "net"}
