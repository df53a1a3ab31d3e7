"""
Power source kinds and their kind-specific detail records.

Each kind is a variant with its own frozen dataclass. The class-level
field tables (required, numeric, enumerated) drive validation.
"""
import math
import re
from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, Type

from ..exceptions import InvalidEnumError


class PowerSourceKind(str, Enum):
    """Kinds of power source a site can be fed by."""
    GENERATOR = "Generator"
    BATTERY = "Battery"
    SOLAR = "Solar"
    GRID = "Grid"
    OTHER = "Other"

    @property
    def key(self) -> str:
        """Key used under powerSourceDetails."""
        return self.value.lower()

    @classmethod
    def parse(cls, value: Any, field: str = 'powerSources') -> 'PowerSourceKind':
        """Match a kind name case-insensitively."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for kind in cls:
                if kind.key == wanted:
                    return kind
        raise InvalidEnumError(field, value, [k.value for k in cls])


class GridConnectionType(str, Enum):
    SINGLE_PHASE = "single_phase"
    THREE_PHASE = "three_phase"


class GeneratorType(str, Enum):
    """Generator vendors."""
    PERKINS = "perkins"
    CUMMINS = "cummins"
    CAT = "cat"
    FGT = "fgt"
    DOOSAN = "doosan"
    MTU = "mtu"
    VOLVO = "volvo"
    JOHN_DEERE = "john_deere"
    YANMAR = "yanmar"
    KIRLOSKAR = "kirloskar"
    MITSUBISHI = "mitsubishi"
    HONDA = "honda"
    KOHLER = "kohler"
    MECC_ALTE = "mecc_alte"
    PREMEC = "premec"
    NIROC = "niroc"
    OTHER = "other"


class BatteryType(str, Enum):
    LI_ION = "li_ion"
    LEAD_ACID = "lead_acid"
    FLOW = "flow"
    LITHIUM_IRON = "lithium_iron"


class SolarType(str, Enum):
    MONO = "mono"
    POLY = "poly"
    THIN = "thin"
    BIFACIAL = "bifacial"


def is_blank(value: Any) -> bool:
    """Absent, null, or a whitespace-only string."""
    return value is None or (isinstance(value, str) and not value.strip())


def to_number(value: Any) -> float:
    """
    Coerce a form or JSON value to a finite number.

    Raises:
        ValueError: if the value is not numeric
    """
    if isinstance(value, bool):
        raise ValueError("booleans are not numbers")
    if isinstance(value, (int, float)):
        number = value
    elif isinstance(value, str):
        number = float(value.strip())
    else:
        raise ValueError(f"not a number: {value!r}")
    if isinstance(number, float) and not math.isfinite(number):
        raise ValueError("number must be finite")
    return number


def is_positive_number(value: Any) -> bool:
    try:
        return to_number(value) > 0
    except ValueError:
        return False


def normalize_choice(value: Any) -> str:
    return str(value).strip().lower()


def to_camel(name: str) -> str:
    head, *rest = name.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def humanize(field: str) -> str:
    """Turn a wire field name into words: 'fuelTank' -> 'fuel tank'."""
    return re.sub(r'([A-Z])', r' \1', field).lower()


@dataclass(frozen=True)
class PowerSourceDetails:
    """
    Base for kind-specific detail records.

    Subclasses declare their dataclass fields in snake_case; the wire
    (JSON) names are the camelCase equivalents.
    """
    KIND: ClassVar[PowerSourceKind]
    REQUIRED: ClassVar[Tuple[str, ...]] = ()
    NUMERIC: ClassVar[Tuple[str, ...]] = ()
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {}
    # At least one of these must be present when non-empty
    REQUIRES_ANY: ClassVar[Tuple[str, ...]] = ()

    @classmethod
    def wire_fields(cls) -> Tuple[str, ...]:
        return tuple(to_camel(f.name) for f in fields(cls))

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> 'PowerSourceDetails':
        """
        Build a detail record from already-validated wire data.

        Blank values become None; unknown keys are dropped.
        """
        data = data or {}
        values: Dict[str, Any] = {}
        for f in fields(cls):
            wire = to_camel(f.name)
            raw = data.get(wire)
            if is_blank(raw):
                values[f.name] = None
            elif wire in cls.NUMERIC:
                values[f.name] = to_number(raw)
            elif wire in cls.ENUMS:
                values[f.name] = cls.ENUMS[wire](normalize_choice(raw))
            else:
                values[f.name] = str(raw).strip()
        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to wire format, omitting unset fields."""
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            result[to_camel(f.name)] = value.value if isinstance(value, Enum) else value
        return result


@dataclass(frozen=True)
class GridDetails(PowerSourceDetails):
    KIND: ClassVar[PowerSourceKind] = PowerSourceKind.GRID
    REQUIRED: ClassVar[Tuple[str, ...]] = ('connectionType', 'voltage', 'load')
    NUMERIC: ClassVar[Tuple[str, ...]] = ('voltage', 'load')
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {'connectionType': GridConnectionType}

    connection_type: Optional[GridConnectionType] = None
    voltage: Optional[float] = None
    load: Optional[float] = None


@dataclass(frozen=True)
class GeneratorDetails(PowerSourceDetails):
    KIND: ClassVar[PowerSourceKind] = PowerSourceKind.GENERATOR
    REQUIRED: ClassVar[Tuple[str, ...]] = ('type', 'capacity')
    NUMERIC: ClassVar[Tuple[str, ...]] = ('capacity', 'load', 'autonomy', 'fuelTank')
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {'type': GeneratorType}

    type: Optional[GeneratorType] = None
    capacity: Optional[float] = None    # kVA
    load: Optional[float] = None        # kW
    autonomy: Optional[float] = None    # hours
    fuel_tank: Optional[float] = None   # litres


@dataclass(frozen=True)
class BatteryDetails(PowerSourceDetails):
    KIND: ClassVar[PowerSourceKind] = PowerSourceKind.BATTERY
    REQUIRED: ClassVar[Tuple[str, ...]] = ('type', 'capacity')
    NUMERIC: ClassVar[Tuple[str, ...]] = ('capacity', 'voltage', 'depth', 'quantity')
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {'type': BatteryType}

    type: Optional[BatteryType] = None
    capacity: Optional[float] = None    # kWh
    voltage: Optional[float] = None     # V
    depth: Optional[float] = None       # % depth of discharge
    quantity: Optional[float] = None    # packs


@dataclass(frozen=True)
class SolarDetails(PowerSourceDetails):
    KIND: ClassVar[PowerSourceKind] = PowerSourceKind.SOLAR
    REQUIRED: ClassVar[Tuple[str, ...]] = ('type', 'capacity')
    NUMERIC: ClassVar[Tuple[str, ...]] = ('capacity', 'tilt', 'inverterSize', 'autonomy')
    ENUMS: ClassVar[Dict[str, Type[Enum]]] = {'type': SolarType}

    type: Optional[SolarType] = None
    capacity: Optional[float] = None        # kW
    tilt: Optional[float] = None            # degrees
    inverter_size: Optional[float] = None   # kW
    autonomy: Optional[float] = None        # kWh


@dataclass(frozen=True)
class OtherDetails(PowerSourceDetails):
    KIND: ClassVar[PowerSourceKind] = PowerSourceKind.OTHER
    NUMERIC: ClassVar[Tuple[str, ...]] = ('capacity',)
    REQUIRES_ANY: ClassVar[Tuple[str, ...]] = ('type', 'capacity', 'description')

    type: Optional[str] = None
    capacity: Optional[float] = None
    description: Optional[str] = None


POWER_SOURCE_DETAILS: Dict[PowerSourceKind, Type[PowerSourceDetails]] = {
    PowerSourceKind.GRID: GridDetails,
    PowerSourceKind.GENERATOR: GeneratorDetails,
    PowerSourceKind.BATTERY: BatteryDetails,
    PowerSourceKind.SOLAR: SolarDetails,
    PowerSourceKind.OTHER: OtherDetails,
}


def details_type_for(kind: PowerSourceKind) -> Type[PowerSourceDetails]:
    return POWER_SOURCE_DETAILS[kind]
