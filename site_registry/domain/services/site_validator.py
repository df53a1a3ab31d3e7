"""
Site Validator Domain Service.

Checks the power-source details of a site against the rules of each
selected kind. Every violation is collected; nothing short-circuits.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..entities.power_source import (
    PowerSourceKind,
    details_type_for,
    humanize,
    is_blank,
    is_positive_number,
    normalize_choice,
)
from ..exceptions import (
    FieldViolation,
    InvalidEnumError,
    InvalidNumberError,
    InvalidTextError,
    MissingFieldError,
    SiteValidationError,
)

DETAILS_PREFIX = 'powerSourceDetails'


def field_path(kind: PowerSourceKind, name: str) -> str:
    """Dotted path of a power-source field, e.g. powerSourceDetails.grid.voltage."""
    return f"{DETAILS_PREFIX}.{kind.key}.{name}"


def flatten_payload(value: Any, prefix: str = '', max_depth: Optional[int] = None) -> Dict[str, Any]:
    """
    Flatten nested mappings into a dotted-path view.

    Lists and scalars are leaves. With max_depth, paths stop at that many
    segments and deeper mappings are kept whole as values.
    """
    flat: Dict[str, Any] = {}
    if isinstance(value, Mapping):
        for key, item in value.items():
            path = f"{prefix}.{key}" if prefix else str(key)
            if isinstance(item, Mapping) and (max_depth is None or max_depth > 1):
                depth = None if max_depth is None else max_depth - 1
                flat.update(flatten_payload(item, path, depth))
            else:
                flat[path] = item
    elif prefix:
        flat[prefix] = value
    return flat


def flatten_details(details: Mapping[str, Any]) -> Dict[str, Any]:
    """Dotted-path view of power-source sub-records, one level per field."""
    return flatten_payload({DETAILS_PREFIX: details}, max_depth=3)


@dataclass
class ValidationResult:
    """Outcome of a validation pass, violations in discovery order."""
    violations: List[FieldViolation] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.violations

    @property
    def messages(self) -> List[str]:
        return [v.message for v in self.violations]

    def raise_if_invalid(self) -> None:
        if self.violations:
            raise SiteValidationError(self.violations)


class SiteValidator:
    """
    Pure domain service validating power-source details.

    Kinds are checked in selection order, fields in declaration order.
    Data for kinds that are not selected is ignored.
    """

    def validate(
        self,
        selected: Iterable[PowerSourceKind],
        fields: Mapping[str, Any],
    ) -> ValidationResult:
        """
        Validate the dotted-path field view for each selected kind.

        Args:
            selected: Power-source kinds chosen for the site
            fields: Flat view of candidate values keyed by dotted path

        Returns:
            ValidationResult listing every violation found
        """
        result = ValidationResult()
        seen = set()
        for kind in selected:
            if kind in seen:
                continue
            seen.add(kind)
            result.violations.extend(self._validate_kind(kind, fields))
        return result

    def _validate_kind(self, kind: PowerSourceKind, fields: Mapping[str, Any]) -> List[FieldViolation]:
        details_type = details_type_for(kind)
        violations: List[FieldViolation] = []

        for name in details_type.wire_fields():
            path = field_path(kind, name)
            value = fields.get(path)
            label = f"{kind.value} {humanize(name)}"

            if is_blank(value):
                if name in details_type.REQUIRED:
                    violations.append(MissingFieldError(path, f"{label} is required"))
                continue

            if name in details_type.NUMERIC:
                if not is_positive_number(value):
                    violations.append(InvalidNumberError(path, f"{label} must be a positive number"))
            elif name in details_type.ENUMS:
                allowed = [member.value for member in details_type.ENUMS[name]]
                if normalize_choice(value) not in allowed:
                    violations.append(InvalidEnumError(
                        path, value, allowed,
                        message=f"{label} must be one of: {', '.join(allowed)}"
                    ))
            elif not isinstance(value, str):
                violations.append(InvalidTextError(path, f"{label} must be text"))

        if details_type.REQUIRES_ANY and not self._has_any(kind, details_type.REQUIRES_ANY, fields):
            wanted = ', '.join(humanize(n) for n in details_type.REQUIRES_ANY)
            violations.append(MissingFieldError(
                f"{DETAILS_PREFIX}.{kind.key}",
                f"{kind.value} requires at least one of: {wanted}"
            ))

        return violations

    @staticmethod
    def _has_any(kind: PowerSourceKind, names: Iterable[str], fields: Mapping[str, Any]) -> bool:
        details_type = details_type_for(kind)
        for name in names:
            value = fields.get(field_path(kind, name))
            if is_blank(value):
                continue
            if name in details_type.NUMERIC:
                if is_positive_number(value):
                    return True
            elif isinstance(value, str):
                return True
        return False
