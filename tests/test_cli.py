import json
import socket

import pytest

import bigip_sd.pipeline.cli as cli


@pytest.fixture
def inputs(tmp_path):
    urls = tmp_path / "urls.txt"
    urls.write_text("https://intranet.example\nhttp://espn.com\n")
    subnets = tmp_path / "subnets.txt"
    subnets.write_text("10.0.0.0/8\n")
    return urls, subnets


def test_cli_invokes_run_pipeline(monkeypatch, inputs, tmp_path):
    urls, subnets = inputs
    output_path = tmp_path / "out.json"
    captured = {}

    def fake_run_pipeline(**kwargs):
        captured["kwargs"] = kwargs

    monkeypatch.setattr(cli, "run_pipeline", fake_run_pipeline)

    code = cli.main([str(urls), str(subnets), "--output", str(output_path), "--format", "yaml"])

    assert code == 0
    assert captured["kwargs"]["urls_path"] == str(urls)
    assert captured["kwargs"]["subnets_path"] == str(subnets)
    assert captured["kwargs"]["output"] == str(output_path)
    assert captured["kwargs"]["fmt"] == "yaml"
    assert captured["kwargs"]["config"].labels.matched == {"location": "BigIP"}


def test_cli_full_run_with_system_lookup(monkeypatch, inputs, tmp_path):
    urls, subnets = inputs
    output_path = tmp_path / "out.json"
    answers = {"intranet.example": "10.1.1.1", "espn.com": "199.181.132.250"}

    def fake_getaddrinfo(host, port, family=0, type=0, *args):
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", (answers[host], 0))]

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)

    code = cli.main([str(urls), str(subnets), "-o", str(output_path)])

    assert code == 0
    data = json.loads(output_path.read_text())
    assert data[0] == {"targets": ["https://intranet.example"], "labels": {"location": "BigIP"}}
    assert data[1] == {"targets": ["http://espn.com"], "labels": {}}


def test_cli_missing_input_exits_nonzero(inputs, tmp_path, caplog):
    _, subnets = inputs
    missing = tmp_path / "missing.txt"

    code = cli.main([str(missing), str(subnets)])

    assert code == 1
    assert str(missing) in caplog.text


def test_cli_bad_config_exits_nonzero(inputs, tmp_path):
    urls, subnets = inputs

    code = cli.main([str(urls), str(subnets), "--config", str(tmp_path / "absent.yaml")])

    assert code == 1


def test_cli_requires_both_paths(capsys):
    with pytest.raises(SystemExit) as excinfo:
        cli.main(["only-one.txt"])

    assert excinfo.value.code == 2


def test_cli_config_directory_exits_nonzero(inputs, tmp_path):
    urls, subnets = inputs

    code = cli.main([str(urls), str(subnets), "--config", str(tmp_path)])

    assert code == 1


def test_cli_undecodable_config_exits_nonzero(inputs, tmp_path):
    urls, subnets = inputs
    config = tmp_path / "config.yaml"
    config.write_bytes(b"labels: \xff\xfe\n")

    code = cli.main([str(urls), str(subnets), "--config", str(config)])

    assert code == 1


def test_cli_unwritable_output_exits_nonzero(monkeypatch, inputs, tmp_path, caplog):
    urls, subnets = inputs

    def fake_getaddrinfo(host, port, family=0, type=0, *args):
        return [(socket.AF_INET, socket.SOCK_STREAM, 6, "", ("10.1.1.1", 0))]

    monkeypatch.setattr(socket, "getaddrinfo", fake_getaddrinfo)

    code = cli.main([str(urls), str(subnets), "-o", str(tmp_path)])

    assert code == 1
    assert str(tmp_path) in caplog.text
