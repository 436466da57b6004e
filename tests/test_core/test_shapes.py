import threading
import time

from botocore.model import ServiceModel

from pullsdk.core.shapes import ShapeUnmarshallerFactory
from pullsdk.core.unmarshallers import (
    AttributeRule,
    ContainerRule,
    FieldRule,
    ListMemberRule,
    MapEntryRule,
    unmarshall,
)

from .models import EC2_BODY, EXPECTED_THINGS, THINGS_BODY, ec2_model, query_model


def _output_shape(model, operation_name):
    return model.operation_model(operation_name).output_shape


def test_query_output_shape():
    shape = _output_shape(query_model(), "DescribeThings")
    unmarshaller = ShapeUnmarshallerFactory().for_output(shape)
    assert unmarshaller.envelope_depth == 2
    result, metadata = unmarshall(unmarshaller, THINGS_BODY, [("ResponseMetadata/*", 2)])
    assert result == EXPECTED_THINGS
    assert metadata == {"RequestId": "5f0a1b2c-0000-0000-0000-000000000000"}


def test_ec2_output_shape_has_single_envelope():
    shape = _output_shape(ec2_model(), "DescribeKeyPairs")
    unmarshaller = ShapeUnmarshallerFactory().for_output(shape)
    assert unmarshaller.envelope_depth == 1
    result, _ = unmarshall(unmarshaller, EC2_BODY)
    assert result == {
        "KeyPairs": [
            {"KeyName": "my-key-pair", "KeyFingerprint": "1f:51:ae:28"},
            {"KeyName": "other"},
        ]
    }


def test_rule_tables():
    model = query_model()
    factory = ShapeUnmarshallerFactory()
    thing = factory.for_shape(model.shape_for("Thing"))
    rules = {rule.name: rule for rule in thing.rules if not isinstance(rule, ContainerRule)}

    assert isinstance(rules["Id"], AttributeRule)
    assert rules["Id"].expression == "@id"
    assert isinstance(rules["Name"], FieldRule)
    assert isinstance(rules["Tags"], ListMemberRule)
    assert rules["Tags"].expression == "Tag"
    assert isinstance(rules["Attributes"], MapEntryRule)
    assert rules["Attributes"].expression == "Attributes/entry"
    assert rules["Scores"].expression == "Scores/member"
    containers = [rule.expression for rule in thing.rules if isinstance(rule, ContainerRule)]
    assert containers == ["Attributes", "Scores"]


def test_recursive_shapes_resolve_to_one_instance():
    model = query_model()
    factory = ShapeUnmarshallerFactory()
    thing = factory.for_shape(model.shape_for("Thing"))
    parent_rule = [rule for rule in thing.rules if rule.name == "Parent"][0]
    assert parent_rule.unmarshaller is thing
    assert factory.for_shape(model.shape_for("Thing")) is thing


def test_output_unmarshaller_is_cached():
    shape = _output_shape(query_model(), "DescribeThings")
    factory = ShapeUnmarshallerFactory()
    assert factory.for_output(shape) is factory.for_output(shape)


def test_custom_timestamp_parser():
    model = ServiceModel(
        {
            "metadata": {"protocol": "query", "apiVersion": "2014-01-01"},
            "documentation": "",
            "operations": {},
            "shapes": {
                "Event": {
                    "type": "structure",
                    "members": {"At": {"shape": "Timestamp"}},
                },
                "Timestamp": {"type": "timestamp"},
            },
        }
    )
    factory = ShapeUnmarshallerFactory(timestamp_parser=lambda value: "parsed:" + value)
    unmarshaller = factory.for_shape(model.shape_for("Event"))
    result, _ = unmarshall(unmarshaller, "<R><Event><At>now</At></Event></R>")
    assert result == {"At": "parsed:now"}


def test_members_bound_elsewhere_are_skipped():
    model = ServiceModel(
        {
            "metadata": {"protocol": "query", "apiVersion": "2014-01-01"},
            "documentation": "",
            "operations": {},
            "shapes": {
                "Output": {
                    "type": "structure",
                    "members": {
                        "ETag": {"shape": "String", "location": "header", "locationName": "ETag"},
                        "Body": {"shape": "String"},
                    },
                },
                "String": {"type": "string"},
            },
        }
    )
    unmarshaller = ShapeUnmarshallerFactory().for_shape(model.shape_for("Output"))
    assert [rule.name for rule in unmarshaller.rules] == ["Body"]


class SlowShapeUnmarshallerFactory(ShapeUnmarshallerFactory):
    """Pauses in the middle of every table build."""

    def __init__(self):
        super(SlowShapeUnmarshallerFactory, self).__init__()
        self.building = threading.Event()

    def _member_rules(self, member_name, member_shape):
        self.building.set()
        time.sleep(0.01)
        return super(SlowShapeUnmarshallerFactory, self)._member_rules(
            member_name, member_shape
        )


def test_concurrent_first_build_sees_complete_table():
    shape = _output_shape(query_model(), "DescribeThings")
    factory = SlowShapeUnmarshallerFactory()
    results = [None, None]

    def run(index):
        result, _ = unmarshall(factory.for_output(shape), THINGS_BODY)
        results[index] = result

    first = threading.Thread(target=run, args=(0,))
    first.start()
    assert factory.building.wait(5)
    second = threading.Thread(target=run, args=(1,))
    second.start()
    first.join(10)
    second.join(10)
    assert results == [EXPECTED_THINGS, EXPECTED_THINGS]
