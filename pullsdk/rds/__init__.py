from .models import ModifyDBParameterGroupResult  # noqa: F401
from .models import ResetDBParameterGroupResult  # noqa: F401
from .unmarshallers import MODIFY_DB_PARAMETER_GROUP_RESULT_UNMARSHALLER  # noqa: F401
from .unmarshallers import RESET_DB_PARAMETER_GROUP_RESULT_UNMARSHALLER  # noqa: F401
from .unmarshallers import unmarshall_modify_db_parameter_group_result  # noqa: F401
from .unmarshallers import unmarshall_reset_db_parameter_group_result  # noqa: F401
