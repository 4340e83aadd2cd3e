from cmdbservice.common import ATTRIBUTE_TYPE, K8sResource, attribute_types


def test_attribute_types_split_source_list():
    types = attribute_types()
    assert ",".join(types) == ATTRIBUTE_TYPE
    assert types[0] == "短字符"
    assert types[-1] == "列表"
    assert len(types) == 10


def test_attribute_types_are_unique():
    types = attribute_types()
    assert len(set(types)) == len(types)
    assert "布尔" in types


def test_k8s_resource_to_dict_uses_json_names():
    resource = K8sResource(
        compass_name="pod",
        resource_name="host",
        resource_attribute={"ip": "1"},
        resource_relation={"node": "belong"},
    )
    assert resource.to_dict() == {
        "compassName": "pod",
        "resourceName": "host",
        "resourceAttribute": {"ip": "1"},
        "resourceRelation": {"node": "belong"},
    }


def test_k8s_resource_to_dict_returns_copies():
    resource = K8sResource(resource_attribute={"ip": "1"})
    result = resource.to_dict()
    result["resourceAttribute"]["cpu"] = "12"
    assert resource.resource_attribute == {"ip": "1"}


def test_k8s_resource_defaults_are_empty():
    result = K8sResource().to_dict()
    assert result["compassName"] == ""
    assert result["resourceAttribute"] == {}
    assert result["resourceRelation"] == {}