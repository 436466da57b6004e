from pullsdk.core.model import (
    ServiceModel,
    is_flattened,
    list_member_xml_name,
    load_service_model,
    member_xml_name,
    result_wrapper,
)

from .models import QUERY_MODEL


def test_load_service_model_is_cached():
    model = load_service_model("sdb")
    assert isinstance(model, ServiceModel)
    assert model is load_service_model("sdb")
    assert model.metadata["protocol"] == "query"


def test_void_operations_and_method_names():
    model = ServiceModel(QUERY_MODEL, service_name="widgets")
    assert model.void_operation_names == frozenset(["DeleteThing"])
    assert model.method_names == {
        "describe_things": "DescribeThings",
        "delete_thing": "DeleteThing",
    }


def test_serialization_helpers():
    model = ServiceModel(QUERY_MODEL, service_name="widgets")
    output = model.operation_model("DescribeThings").output_shape
    assert result_wrapper(output) == "DescribeThingsResult"
    assert result_wrapper(None) is None

    thing = model.shape_for("Thing")
    tags = thing.members["Tags"]
    assert is_flattened(tags)
    assert member_xml_name(tags, "Tags") == "Tag"
    assert member_xml_name(thing.members["Id"], "Id") == "id"
    assert member_xml_name(thing.members["Name"], "Name") == "Name"

    things = model.shape_for("ThingList")
    assert not is_flattened(things)
    assert list_member_xml_name(things) == "Thing"
    assert list_member_xml_name(model.shape_for("ScoreList")) == "member"
