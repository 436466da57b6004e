from dataclasses import dataclass, field
from typing import Dict, Optional


@dataclass
class ModifyDBParameterGroupResult(object):
    db_parameter_group_name: Optional[str] = None
    response_metadata: Dict[str, str] = field(default_factory=dict, compare=False)


@dataclass
class ResetDBParameterGroupResult(object):
    db_parameter_group_name: Optional[str] = None
    response_metadata: Dict[str, str] = field(default_factory=dict, compare=False)
