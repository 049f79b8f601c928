"""
Exceptions raised by the generation-request pipeline.

Every error carries the stages it passed through, so the message printed by
the CLI names which step failed (``Error reading config: Error processing
config: ...``) while callers can still catch the specific type.
"""

from typing import List, Optional


class LevoError(Exception):
    """Base exception for all levo errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message
        self.stages: List[str] = []

    def add_context(self, stage: str) -> "LevoError":
        """
        Prefix this error with the name of the stage it is leaving.

        Returns the same instance so it can be re-raised directly::

            except LevoError as e:
                raise e.add_context("Error processing config")
        """
        self.stages.insert(0, stage)
        return self

    def __str__(self) -> str:
        return "".join(f"{stage}: " for stage in self.stages) + self.message


class InvalidConfigFormat(LevoError):
    """Configuration document could not be read or decoded."""

    pass


class MissingRequiredField(LevoError):
    """A required configuration field is absent or empty."""

    def __init__(self, field_name: str, message: Optional[str] = None):
        super().__init__(message or f"Configuration did not define {field_name}")
        self.field_name = field_name


class MissingProjectName(LevoError):
    """Schema did not define a Project name."""

    pass


class UnknownParentModel(LevoError):
    """A model names a parent that is not part of the request."""

    def __init__(self, parent_name: str, message: Optional[str] = None):
        super().__init__(message or f"Unknown parent model: {parent_name}")
        self.parent_name = parent_name


class UnknownMappingReference(LevoError):
    """A mapping names a model or template that is not part of the request."""

    pass


class MalformedModelString(LevoError):
    """A compact model string could not be parsed."""

    pass


class ModelNotFoundInSchema(LevoError):
    """A requested model name is absent from the schema."""

    pass


class TemplateSourceUnavailable(LevoError):
    """Template path is missing, or its remote repository cannot be fetched."""

    pass


class NoFeatureFlagsDocumented(LevoError):
    """Template set documents no ``#### <Feature>`` headings."""

    pass


class FileWriteFailure(LevoError):
    """A generated file could not be written to disk."""

    pass


class ArchiveWriteFailure(LevoError):
    """The output archive could not be built or saved."""

    pass


class ModelDefinitionError(LevoError):
    """Rendering context rejected a model or property definition."""

    pass


class TemplateError(LevoError):
    """A template failed to render."""

    pass
