"""A facade over the botocore model with the helpers pullsdk needs."""

from __future__ import annotations

import functools
from typing import FrozenSet, Optional

from botocore import xform_name
from botocore.loaders import Loader
from botocore.model import ServiceModel as BotocoreServiceModel
from botocore.model import Shape
from botocore.utils import CachedProperty


def is_flattened(shape: Shape) -> bool:
    return shape.serialization.get("flattened", False)


def result_wrapper(shape: Optional[Shape]) -> Optional[str]:
    if shape is None:
        return None
    return shape.serialization.get("resultWrapper")


def member_xml_name(member_shape: Shape, member_name: str) -> str:
    # A flattened list with a named member is keyed by the member's
    # locationName in the surrounding structure, not by its own.
    if member_shape.type_name == "list" and is_flattened(member_shape):
        list_member_name = member_shape.member.serialization.get("name")
        if list_member_name is not None:
            return list_member_name
    return member_shape.serialization.get("name", member_name)


def list_member_xml_name(list_shape: Shape) -> str:
    return list_shape.member.serialization.get("name", "member")


class ServiceModel(BotocoreServiceModel):
    @CachedProperty
    def void_operation_names(self) -> FrozenSet[str]:
        return frozenset(
            name
            for name in self.operation_names
            if self.operation_model(name).output_shape is None
        )

    @CachedProperty
    def method_names(self) -> dict[str, str]:
        """Python method name (``list_domains``) to operation name (``ListDomains``)."""
        return {xform_name(name): name for name in self.operation_names}


@functools.lru_cache(maxsize=None)
def load_service_model(service_name: str, api_version: str | None = None) -> ServiceModel:
    loader = Loader()
    description = loader.load_service_model(
        service_name, "service-2", api_version=api_version
    )
    return ServiceModel(description, service_name=service_name)
