"""Resource definitions loaded from YAML."""

from pathlib import Path
from typing import Dict, List, Union

import structlog
import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

from lockable.resources.pool import ConfigurationError, ResourcePool
from lockable.resources.resource import LockableResource


logger = structlog.get_logger(__name__)


class ResourceDefinition(BaseModel):
    """One resource as written in the definitions file."""
    name: str = Field(min_length=1)
    labels: List[str] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)
    description: str = ""

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value or len(value.split()) > 1:
            raise ValueError("resource names must be a single non-empty word")
        return value

    @field_validator("labels", mode="before")
    @classmethod
    def _split_labels(cls, value: Union[str, List[str], None]) -> List[str]:
        # Labels may be given as a whitespace separated string
        if value is None:
            return []
        if isinstance(value, str):
            return value.split()
        return value

    @field_validator("attributes", mode="before")
    @classmethod
    def _stringify_attributes(cls, value):
        if value is None:
            return {}
        if isinstance(value, dict):
            return {str(k): str(v) for k, v in value.items()}
        return value

    def to_resource(self) -> LockableResource:
        return LockableResource(
            name=self.name,
            labels=frozenset(self.labels),
            attributes=dict(self.attributes),
            description=self.description,
        )


class PoolDefinition(BaseModel):
    """The complete set of resource definitions."""
    resources: List[ResourceDefinition] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_names(self) -> "PoolDefinition":
        seen = set()
        duplicates = []
        for definition in self.resources:
            if definition.name in seen:
                duplicates.append(definition.name)
            seen.add(definition.name)
        if duplicates:
            raise ValueError(f"duplicate resource names: {duplicates}")
        return self

    def build_pool(self) -> ResourcePool:
        return ResourcePool(d.to_resource() for d in self.resources)


def parse_definitions(data) -> PoolDefinition:
    """Validate already-loaded YAML/JSON data."""
    if data is None:
        data = {}
    if isinstance(data, list):
        data = {"resources": data}

    try:
        return PoolDefinition.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid resource definitions: {e}") from e


def load_definitions(path: Union[str, Path]) -> PoolDefinition:
    """Load resource definitions from a YAML file."""
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError as e:
        raise ConfigurationError(f"Resource file not found: {path}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    definition = parse_definitions(data)
    logger.debug("definitions_loaded", path=str(path), resources=len(definition.resources))
    return definition
