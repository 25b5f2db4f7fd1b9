"""Read-only lookups over the members of a ClassModel."""

from class_maker.exceptions import UnknownMemberError, UnsupportedMemberError
from class_maker.models import ClassModel, MethodModel, OpaqueMember, PhpType, PropertyModel


class MemberRegistry:
    """Answers "does this member exist?" against the live model.

    Every lookup walks the current member list, so the answers always reflect
    the latest mutation. Method names compare case-insensitively, like PHP.
    Properties promoted in the constructor and those of multi-name
    declarations (``private $a, $b;``) exist but have no ``PropertyModel``.
    """

    def __init__(self, model: ClassModel) -> None:
        self.model = model

    def has_property(self, name: str) -> bool:
        if any(p.name == name for p in self.model.properties):
            return True
        return self._unstructured_reason(name) is not None

    def has_method(self, name: str) -> bool:
        return self.find_method(name) is not None

    def has_constructor_param(self, name: str) -> bool:
        constructor = self.model.constructor
        return constructor is not None and any(p.name == name for p in constructor.parameters)

    def find_property(self, name: str) -> PropertyModel | None:
        for prop in self.model.properties:
            if prop.name == name:
                return prop
        return None

    def find_method(self, name: str) -> MethodModel | None:
        lowered = name.lower()
        for method in self.model.methods:
            if method.name.lower() == lowered:
                return method
        return None

    def get_property(self, name: str) -> PropertyModel:
        prop = self.find_property(name)
        if prop is not None:
            return prop
        reason = self._unstructured_reason(name)
        if reason is not None:
            raise UnsupportedMemberError(name, self.model.name, reason)
        raise UnknownMemberError(name, self.model.name)

    def require_property(self, name: str) -> None:
        if not self.has_property(name):
            raise UnknownMemberError(name, self.model.name)

    def property_type(self, name: str) -> PhpType | None:
        """Declared type of a property, promoted parameters included."""
        prop = self.find_property(name)
        if prop is not None:
            return prop.type
        constructor = self.model.constructor
        if constructor is not None:
            for parameter in constructor.parameters:
                if parameter.promoted_visibility and parameter.name == name and parameter.type:
                    return PhpType.parse(parameter.type)
        return None

    def get_method(self, name: str) -> MethodModel:
        method = self.find_method(name)
        if method is None:
            raise UnknownMemberError(name, self.model.name)
        return method

    def property_names(self) -> list[str]:
        return [p.name for p in self.model.properties]

    def method_names(self) -> list[str]:
        return [m.name for m in self.model.methods]

    def _unstructured_reason(self, name: str) -> str | None:
        constructor = self.model.constructor
        if constructor is not None and name in constructor.promoted_properties:
            return "it is promoted in the constructor"
        for member in self.model.members:
            if isinstance(member, OpaqueMember) and name in member.declared_properties:
                return "it shares its declaration with other properties"
        return None
