import io

import pytest

from timoni.values import ValuesFormatError, convert_to_cue, encode_cue


def test_cue_file_passes_through(tmp_path):
    content = b'values: domain: "example.com"\n'
    path = tmp_path / "example.com.cue"
    path.write_bytes(content)
    assert convert_to_cue([str(path)]) == [content]


def test_stdin_is_read_as_cue():
    stdin = io.BytesIO(b'values: domain: "example.org"')
    assert convert_to_cue(["-"], stdin) == [b'values: domain: "example.org"']


def test_stdin_text_stream():
    stdin = io.StringIO("values: ns: enabled: true")
    assert convert_to_cue(["-"], stdin) == [b"values: ns: enabled: true"]


def test_yaml_and_json_values(tmp_path):
    yaml_path = tmp_path / "example.com.yaml"
    yaml_path.write_text("values:\n  domain: yaml.example.com\n")
    json_path = tmp_path / "example.com.json"
    json_path.write_text('{"values": {"metadata": {"annotations": {"scope": "from-json"}}}}')

    yaml_out, json_out = convert_to_cue([str(yaml_path), str(json_path)])
    assert 'domain: "yaml.example.com"' in yaml_out.decode()
    assert 'scope: "from-json"' in json_out.decode()


def test_yml_extension(tmp_path):
    path = tmp_path / "values.yml"
    path.write_text("values:\n  replicas: 2\n")
    assert convert_to_cue([str(path)]) == [b"values: {\n\treplicas: 2\n}\n"]


def test_order_is_preserved(tmp_path):
    first = tmp_path / "a.cue"
    first.write_bytes(b"a: 1\n")
    second = tmp_path / "b.cue"
    second.write_bytes(b"b: 2\n")
    assert convert_to_cue([str(first), str(second)]) == [b"a: 1\n", b"b: 2\n"]


def test_unknown_extension(tmp_path):
    path = tmp_path / "invalid.unknown-extension"
    path.write_text("values: {}")
    with pytest.raises(ValuesFormatError, match="unknown values file format"):
        convert_to_cue([str(path)])


def test_missing_file(tmp_path):
    path = tmp_path / "missing.cue"
    with pytest.raises(OSError, match="could not read values file at"):
        convert_to_cue([str(path)])


def test_invalid_json(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json")
    with pytest.raises(ValuesFormatError, match="could not serialise value"):
        convert_to_cue([str(path)])


def test_encode_nested_struct():
    assert encode_cue({"values": {"domain": "example.com"}}) == (
        'values: {\n\tdomain: "example.com"\n}\n'
    )


def test_encode_quotes_special_labels():
    out = encode_cue({"app.kubernetes.io/team": "test", "_hidden": 1, "if": True})
    assert '"app.kubernetes.io/team": "test"' in out
    assert '"_hidden": 1' in out
    assert '"if": true' in out


def test_encode_scalars_and_lists():
    out = encode_cue({"a": None, "b": [1, "x", False], "c": {}, "d": []})
    assert out == 'a: null\nb: [1, "x", false]\nc: {}\nd: []\n'


def test_encode_empty_mapping():
    assert encode_cue({}) == ""


def test_encode_rejects_nan():
    with pytest.raises(ValueError):
        encode_cue({"x": float("nan")})