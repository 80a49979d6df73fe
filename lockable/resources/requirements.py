"""Resource requirements definitions."""

from collections import Counter
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Tuple, Union

from lockable.resources.pool import ConfigurationError, ResourcePool


class RequirementValidationError(ConfigurationError):
    """Raised when a requirement is rejected at configuration time."""

    def __init__(self, errors: List[str]):
        self.errors = list(errors)
        super().__init__("; ".join(self.errors))


class LabelCount(NamedTuple):
    """How many resources carrying ``label`` an item needs."""
    label: str
    count: int


@dataclass(frozen=True)
class ByName:
    """Requirement for an explicit set of resources."""
    names: Tuple[str, ...] = ()
    names_var: Optional[str] = None  # Env var exposing the reserved names

    @property
    def is_empty(self) -> bool:
        return not self.names

    def describe(self) -> str:
        return "[" + ", ".join(self.names) + "]"


@dataclass(frozen=True)
class ByLabel:
    """Requirement for a number of resources per label."""
    counts: Tuple[LabelCount, ...] = ()
    names_var: Optional[str] = None

    @property
    def is_empty(self) -> bool:
        return all(lc.count <= 0 for lc in self.counts)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(lc.label for lc in self.counts)

    @property
    def total(self) -> int:
        return sum(lc.count for lc in self.counts)

    def describe(self) -> str:
        return " ".join(
            lc.label if lc.count <= 1 else f"{lc.label} x{lc.count}"
            for lc in self.counts
        )


Requirement = Union[ByName, ByLabel]

NO_RESOURCES = ByName()


def _split(value: Optional[str]) -> List[str]:
    if value is None:
        return []
    return value.split()


def parse_requirement(
    names: Optional[str] = None,
    labels: Optional[str] = None,
    numbers: Optional[str] = None,
    names_var: Optional[str] = None
) -> Requirement:
    """Build a requirement from whitespace separated form values.

    ``numbers`` pairs positionally with ``labels``. The first structural
    problem found raises RequirementValidationError.
    """
    name_list = _split(names)
    label_list = _split(labels)
    number_list = _split(numbers)
    names_var = names_var.strip() if names_var and names_var.strip() else None

    if name_list and label_list:
        raise RequirementValidationError(
            ["Only label or resources can be defined, not both."]
        )

    if name_list:
        if number_list:
            raise RequirementValidationError(["Remove number when using 'Resources'"])
        return ByName(tuple(name_list), names_var=names_var)

    if not label_list:
        return ByName(names_var=names_var)

    if not number_list:
        raise RequirementValidationError(["Please fill the number values"])

    if len(number_list) != len(label_list):
        raise RequirementValidationError([
            f"Given amount of numbers {len(number_list)} is not equal to "
            f"the amount of labels: {len(label_list)}."
        ])

    counts = []
    for label, raw in zip(label_list, number_list):
        try:
            counts.append(LabelCount(label, int(raw)))
        except ValueError:
            raise RequirementValidationError(
                [f"Could not parse {raw!r} as integer."]
            ) from None

    invalid = [lc.count for lc in counts if lc.count <= 0]
    if invalid:
        raise RequirementValidationError(
            [f"{invalid[0]} is not a valid resource number"]
        )

    return ByLabel(tuple(counts), names_var=names_var)


@dataclass
class ValidationReport:
    """Outcome of checking a requirement against a pool."""
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise RequirementValidationError(self.errors)


def validate_requirement(requirement: Requirement, pool: ResourcePool) -> ValidationReport:
    """Check that a requirement can ever be satisfied by ``pool``.

    Availability is not considered; counts are compared against every
    resource carrying the label, free or not.
    """
    report = ValidationReport()

    if isinstance(requirement, ByName):
        missing = [name for name in requirement.names if name not in pool]
        if missing:
            report.errors.append(f"The following resources do not exist: {missing}")

        repeated = sorted(n for n, c in Counter(requirement.names).items() if c > 1)
        if repeated:
            report.errors.append(f"Resources listed more than once: {repeated}")

    elif isinstance(requirement, ByLabel):
        repeated = sorted(lbl for lbl, c in Counter(requirement.labels).items() if c > 1)
        if repeated:
            report.errors.append(f"Use each label only once: {repeated}")

        for label, count in requirement.counts:
            if not pool.is_valid_label(label):
                report.errors.append(f"The label does not exist: {label}")
                continue

            if count <= 0:
                report.errors.append(f"{count} is not a valid resource number")
                continue

            available = len(pool.with_label(label))
            if available < count:
                report.errors.append(
                    f"There are only {available} resources with the label: {label}"
                )

    else:
        raise TypeError(f"Unsupported requirement type: {type(requirement).__name__}")

    return report
