import json

import pytest

from timoni.api import (
    API_VERSION,
    BUNDLE_NAME_LABEL_KEY,
    INSTANCE_KIND,
    Instance,
    ModuleReference,
    ResourceInventory,
    ResourceRef,
    Selector,
)


def _full_instance() -> Instance:
    return Instance(
        name="app",
        namespace="apps",
        labels={BUNDLE_NAME_LABEL_KEY: "my-bundle"},
        annotations={"scope": "external"},
        api_version=API_VERSION,
        kind=INSTANCE_KIND,
        module=ModuleReference(
            name="my-mod",
            repository="oci://registry.example.com/org/my-mod",
            version="1.0.0",
            digest="sha256:abc",
        ),
        values='values: domain: "example.com"',
        last_transition_time="2023-01-01T00:00:00Z",
        inventory=ResourceInventory(
            entries=[ResourceRef(id="apps_app-client__ConfigMap", version="v1")]
        ),
        images=["timoni:latest-dev"],
    )


def test_selector_str_and_format():
    assert str(Selector("bundle.name")) == "bundle.name"
    assert f"{Selector('timoni.instance.config')}" == "timoni.instance.config"


def test_selector_lookup_by_value():
    assert Selector("bundle.name") is Selector.BUNDLE_NAME
    assert Selector("timoni.apply") is Selector.APPLY


def test_instance_round_trip():
    inst = _full_instance()
    assert Instance.from_dict(inst.to_dict()) == inst


def test_instance_round_trip_through_json():
    inst = _full_instance()
    decoded = json.loads(json.dumps(inst.to_dict()))
    assert Instance.from_dict(decoded) == inst


def test_to_dict_uses_wire_field_names():
    d = _full_instance().to_dict()
    assert d["apiVersion"] == API_VERSION
    assert d["kind"] == INSTANCE_KIND
    assert d["metadata"]["labels"][BUNDLE_NAME_LABEL_KEY] == "my-bundle"
    assert d["inventory"]["entries"][0] == {
        "id": "apps_app-client__ConfigMap",
        "v": "v1",
    }
    assert d["lastTransitionTime"] == "2023-01-01T00:00:00Z"
    assert d["module"]["digest"] == "sha256:abc"


def test_to_dict_omits_empty_optional_fields():
    d = Instance(name="app").to_dict()
    assert "inventory" not in d
    assert "images" not in d
    assert "lastTransitionTime" not in d
    assert "apiVersion" not in d
    assert d["values"] == ""
    assert d["metadata"] == {"name": "app"}


def test_from_empty_mapping_gives_defaults():
    inst = Instance.from_dict({})
    assert inst == Instance()
    assert inst.inventory is None


def test_from_dict_rejects_non_mapping():
    with pytest.raises(TypeError):
        Instance.from_dict(["not", "a", "mapping"])


def test_to_dict_copies_labels():
    inst = _full_instance()
    d = inst.to_dict()
    d["metadata"]["labels"]["extra"] = "x"
    assert "extra" not in inst.labels


def test_empty_inventory_is_kept():
    inst = Instance(name="app", inventory=ResourceInventory())
    d = inst.to_dict()
    assert d["inventory"] == {"entries": []}
    assert Instance.from_dict(d).inventory == ResourceInventory()