from concurrent.futures import ThreadPoolExecutor

import pytest

from pullsdk.core.model import load_service_model
from pullsdk.core.serialize import create_serializer
from pullsdk.rds import (
    MODIFY_DB_PARAMETER_GROUP_RESULT_UNMARSHALLER,
    ModifyDBParameterGroupResult,
    ResetDBParameterGroupResult,
    unmarshall_modify_db_parameter_group_result,
    unmarshall_reset_db_parameter_group_result,
)

FULL_RESPONSE = b"""<ModifyDBParameterGroupResponse xmlns="http://rds.amazonaws.com/doc/2014-10-31/">
  <ModifyDBParameterGroupResult>
    <DBParameterGroupName>mydbparametergroup</DBParameterGroupName>
  </ModifyDBParameterGroupResult>
  <ResponseMetadata>
    <RequestId>12d7435e-bba0-11e3-ae4e-cdb6ff20fd10</RequestId>
  </ResponseMetadata>
</ModifyDBParameterGroupResponse>
"""


def test_bare_result_root():
    body = (
        b"<ModifyDBParameterGroupResult>"
        b"<DBParameterGroupName>my-group</DBParameterGroupName>"
        b"</ModifyDBParameterGroupResult>"
    )
    result = unmarshall_modify_db_parameter_group_result(body, envelope_depth=1)
    assert result == ModifyDBParameterGroupResult(db_parameter_group_name="my-group")
    assert result.response_metadata == {}


def test_bare_result_root_needs_single_envelope():
    body = (
        b"<ModifyDBParameterGroupResult>"
        b"<DBParameterGroupName>mygroup</DBParameterGroupName>"
        b"</ModifyDBParameterGroupResult>"
    )
    assert unmarshall_modify_db_parameter_group_result(body).db_parameter_group_name is None
    result = unmarshall_modify_db_parameter_group_result(body, envelope_depth=1)
    assert result.db_parameter_group_name == "mygroup"


def test_full_response():
    result = unmarshall_modify_db_parameter_group_result(FULL_RESPONSE)
    assert result.db_parameter_group_name == "mydbparametergroup"
    assert result.response_metadata == {"RequestId": "12d7435e-bba0-11e3-ae4e-cdb6ff20fd10"}


def test_reset_shares_the_wire_shape():
    body = FULL_RESPONSE.replace(b"ModifyDBParameterGroup", b"ResetDBParameterGroup")
    result = unmarshall_reset_db_parameter_group_result(body)
    assert result == ResetDBParameterGroupResult("mydbparametergroup")
    assert result.response_metadata["RequestId"] == "12d7435e-bba0-11e3-ae4e-cdb6ff20fd10"


@pytest.mark.parametrize(
    "body",
    [
        b"",
        b"<ModifyDBParameterGroupResponse/>",
        b"<ModifyDBParameterGroupResponse><ModifyDBParameterGroupResult/></ModifyDBParameterGroupResponse>",
    ],
)
def test_missing_field_stays_unset(body):
    result = unmarshall_modify_db_parameter_group_result(body)
    assert result == ModifyDBParameterGroupResult()
    assert result.db_parameter_group_name is None


def test_unknown_elements_are_ignored():
    body = (
        b"<ModifyDBParameterGroupResponse><ModifyDBParameterGroupResult>"
        b"<Parameters><DBParameterGroupName>decoy</DBParameterGroupName></Parameters>"
        b"<Extra>1</Extra>"
        b"<DBParameterGroupName>real</DBParameterGroupName>"
        b"</ModifyDBParameterGroupResult></ModifyDBParameterGroupResponse>"
    )
    result = unmarshall_modify_db_parameter_group_result(body)
    assert result.db_parameter_group_name == "real"


def test_shared_unmarshaller_across_threads():
    def run(n):
        body = FULL_RESPONSE.replace(b"mydbparametergroup", b"group-%d" % n)
        return unmarshall_modify_db_parameter_group_result(body)

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(run, range(100)))
    assert [r.db_parameter_group_name for r in results] == ["group-%d" % n for n in range(100)]
    assert MODIFY_DB_PARAMETER_GROUP_RESULT_UNMARSHALLER.envelope_depth == 2


def test_round_trip_through_serializer():
    operation_model = load_service_model("rds").operation_model("ModifyDBParameterGroup")
    original = ModifyDBParameterGroupResult(db_parameter_group_name="round-trip")
    serialized = create_serializer("query").serialize_to_response(original, operation_model)
    assert unmarshall_modify_db_parameter_group_result(serialized["body"]) == original
