"""Hand-declared unmarshallers for RDS results.

Both parameter group results come back as a ``DBParameterGroupNameMessage``:

.. code-block:: xml

    <ModifyDBParameterGroupResponse xmlns="http://rds.amazonaws.com/doc/2014-10-31/">
      <ModifyDBParameterGroupResult>
        <DBParameterGroupName>mydbparametergroup</DBParameterGroupName>
      </ModifyDBParameterGroupResult>
      <ResponseMetadata>
        <RequestId>12d7435e-bba0-11e3-ae4e-cdb6ff20fd10</RequestId>
      </ResponseMetadata>
    </ModifyDBParameterGroupResponse>

The unmarshallers are plain module constants; they hold no per-call state
and can be shared between threads.
"""
from pullsdk.core.unmarshallers import (
    ENVELOPE_DEPTH,
    STRING,
    FieldRule,
    StructureUnmarshaller,
    unmarshall,
)

from .models import ModifyDBParameterGroupResult, ResetDBParameterGroupResult

_DB_PARAMETER_GROUP_NAME_MESSAGE_RULES = (
    FieldRule("DBParameterGroupName", "db_parameter_group_name", STRING),
)

MODIFY_DB_PARAMETER_GROUP_RESULT_UNMARSHALLER = StructureUnmarshaller(
    ModifyDBParameterGroupResult, _DB_PARAMETER_GROUP_NAME_MESSAGE_RULES
)

RESET_DB_PARAMETER_GROUP_RESULT_UNMARSHALLER = StructureUnmarshaller(
    ResetDBParameterGroupResult, _DB_PARAMETER_GROUP_NAME_MESSAGE_RULES
)

RESPONSE_METADATA = (("ResponseMetadata/*", 2),)


def _unmarshall_result(unmarshaller, body, envelope_depth):
    if envelope_depth != unmarshaller.envelope_depth:
        unmarshaller = unmarshaller.with_envelope(envelope_depth)
    result, metadata = unmarshall(unmarshaller, body, RESPONSE_METADATA)
    result.response_metadata = metadata
    return result


def unmarshall_modify_db_parameter_group_result(body, envelope_depth=ENVELOPE_DEPTH):
    """Parse a ``ModifyDBParameterGroup`` response body.

    The default expects the full ``<...Response><...Result>`` envelope. A
    body whose root is ``<ModifyDBParameterGroupResult>`` itself leaves every
    field unset unless ``envelope_depth=1`` is passed.

    The ``ResponseMetadata`` children (``RequestId``) land in
    ``result.response_metadata``; it stays empty for a bare result root.
    """
    return _unmarshall_result(
        MODIFY_DB_PARAMETER_GROUP_RESULT_UNMARSHALLER, body, envelope_depth
    )


def unmarshall_reset_db_parameter_group_result(body, envelope_depth=ENVELOPE_DEPTH):
    return _unmarshall_result(
        RESET_DB_PARAMETER_GROUP_RESULT_UNMARSHALLER, body, envelope_depth
    )
