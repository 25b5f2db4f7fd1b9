import os

from pydantic import BaseModel, Field

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"Invalid boolean value for {name}: '{value}'")


class ManipulatorConfig(BaseModel):
    """Switches consumed by ClassSourceManipulator at construction."""

    overwrite_existing_methods: bool = False
    use_annotations: bool = True
    use_fluent_mutators: bool = True
    omit_getters_setters: bool = False
    indent: str = "    "

    @classmethod
    def from_env(cls) -> "ManipulatorConfig":
        defaults = cls()
        return cls(
            overwrite_existing_methods=_env_flag(
                "CLASS_MAKER_OVERWRITE_METHODS", defaults.overwrite_existing_methods
            ),
            use_annotations=_env_flag("CLASS_MAKER_USE_ANNOTATIONS", defaults.use_annotations),
            use_fluent_mutators=_env_flag("CLASS_MAKER_FLUENT_MUTATORS", defaults.use_fluent_mutators),
        )


class MakerSettings(BaseModel):
    """Project layout used to place generated classes."""

    root_namespace: str = "App"
    source_dir: str = "src"
    manipulator: ManipulatorConfig = Field(default_factory=ManipulatorConfig)

    @classmethod
    def from_env(cls) -> "MakerSettings":
        return cls(
            root_namespace=os.getenv("CLASS_MAKER_ROOT_NAMESPACE", "App").strip("\\"),
            source_dir=os.getenv("CLASS_MAKER_SOURCE_DIR", "src"),
            manipulator=ManipulatorConfig.from_env(),
        )
