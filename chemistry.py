# Pool chemistry: ideal ranges, range checks and dosage instructions
import math
import numbers
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class ChemicalKind(Enum):
    PH = "ph"
    ALKALINITY = "alkalinity"
    CHLORINE = "chlorine"
    CYA = "cya"
    SALT = "salt"


class RangeStatus(Enum):
    IN_RANGE = "in"
    OUT_OF_RANGE = "out"
    NO_READING = "none"


@dataclass(frozen=True)
class ChemicalRange:
    label: str
    unit: str
    min: float
    max: float
    step: float


CHEMICAL_RANGES = MappingProxyType({
    ChemicalKind.PH: ChemicalRange("pH", "", 7.2, 7.6, 0.1),
    ChemicalKind.ALKALINITY: ChemicalRange("Total Alkalinity", "ppm", 80, 120, 1),
    ChemicalKind.CHLORINE: ChemicalRange("Free Chlorine", "ppm", 1.0, 3.0, 0.1),
    ChemicalKind.CYA: ChemicalRange("CYA", "ppm", 30, 50, 1),
    ChemicalKind.SALT: ChemicalRange("Salt", "ppm", 2700, 3400, 100),
})

# Field names used in a service visit's reading set
READING_FIELDS = MappingProxyType({
    ChemicalKind.PH: "ph",
    ChemicalKind.CHLORINE: "fc",
    ChemicalKind.ALKALINITY: "ta",
    ChemicalKind.CYA: "cya",
    ChemicalKind.SALT: "salt",
})

# Short names for the one-line reading summary
SUMMARY_LABELS = MappingProxyType({
    ChemicalKind.PH: "pH",
    ChemicalKind.CHLORINE: "FC",
    ChemicalKind.ALKALINITY: "TA",
    ChemicalKind.CYA: "CYA",
    ChemicalKind.SALT: "Salt",
})

# Dose quantities below are per 10,000 gallons
DOSE_GALLONS = 10000


def range_for(kind):
    return CHEMICAL_RANGES[kind]


def _is_missing(value):
    if isinstance(value, bool) or not isinstance(value, numbers.Real):
        return True
    try:
        return math.isnan(value)
    except OverflowError:
        return False


def classify(kind, value):
    """Classify a reading against the ideal range for ``kind`` (inclusive)."""
    if _is_missing(value):
        return RangeStatus.NO_READING
    rng = CHEMICAL_RANGES[kind]
    if rng.min <= value <= rng.max:
        return RangeStatus.IN_RANGE
    return RangeStatus.OUT_OF_RANGE


def _doses(amount, per_dose):
    count = amount / per_dose
    if not math.isfinite(count):
        return count
    # 7.2 - 7.0 is 0.20000000000000018 in floating point
    return math.ceil(round(count, 9))


def recommend(kind, value, pool_gallons):
    """
    Returns a plain-English dosage instruction when a reading is out of range,
    or None when the reading is missing or already in range.

    pool_gallons is not validated here: zero or negative volumes produce
    zero or negative quantities, and non-finite inputs give inf or nan
    quantities.
    """
    if classify(kind, value) is not RangeStatus.OUT_OF_RANGE:
        return None
    rng = CHEMICAL_RANGES[kind]
    low = value < rng.min
    try:
        change = float(rng.min - value if low else value - rng.max)
    except OverflowError:
        change = math.inf
    factor = pool_gallons / DOSE_GALLONS

    if kind is ChemicalKind.PH:
        if low:
            # ~6 oz soda ash raises pH ~0.2
            oz = _doses(change, 0.2) * 6 * factor
            return f"pH is low ({value}). Add ~{oz:.1f} oz of soda ash to raise pH."
        # ~12 oz muriatic acid lowers pH ~0.2
        oz = _doses(change, 0.2) * 12 * factor
        return f"pH is high ({value}). Add ~{oz:.1f} oz of muriatic acid to lower pH."

    if kind is ChemicalKind.ALKALINITY:
        if low:
            # ~1.5 lbs sodium bicarbonate raises TA ~10 ppm
            lbs = _doses(change, 10) * 1.5 * factor
            return f"Alkalinity is low ({value} ppm). Add ~{lbs:.1f} lbs of sodium bicarbonate."
        # ~26 oz muriatic acid lowers TA ~10 ppm
        oz = _doses(change, 10) * 26 * factor
        return f"Alkalinity is high ({value} ppm). Add ~{oz:.1f} oz of muriatic acid."

    if kind is ChemicalKind.CHLORINE:
        if low:
            # ~2 oz cal-hypo (65%) raises FC ~1 ppm
            oz = _doses(change, 1) * 2 * factor
            return f"Chlorine is low ({value} ppm). Add ~{oz:.1f} oz of cal-hypo (65%)."
        return f"Chlorine is high ({value} ppm). Allow to dissipate naturally or dilute."

    if kind is ChemicalKind.CYA:
        if low:
            # ~13 oz stabilizer raises CYA ~10 ppm
            oz = _doses(change, 10) * 13 * factor
            return f"CYA is low ({value} ppm). Add ~{oz:.1f} oz of stabilizer (cyanuric acid)."
        return f"CYA is high ({value} ppm). Partially drain and refill to dilute."

    if kind is ChemicalKind.SALT:
        if low:
            # ~30 lbs salt raises salinity ~360 ppm
            lbs = _doses(change / 360 * 30 * factor, 1)
            return f"Salt is low ({value} ppm). Add ~{lbs} lbs of pool-grade salt."
        return f"Salt is high ({value} ppm). Partially drain and refill to dilute."

    raise KeyError(kind)


def _finite(number):
    try:
        return number if math.isfinite(number) else None
    except OverflowError:
        return None


def parse_reading(raw):
    """Coerce a form or prompt value to a number, or None when not measured."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, (int, float)):
        return _finite(raw)
    text = str(raw).strip()
    if not text:
        return None
    try:
        return _finite(int(text))
    except ValueError:
        pass
    try:
        return _finite(float(text))
    except ValueError:
        return None


def evaluate_readings(readings, pool_gallons):
    """
    Check every chemical of a visit's reading set.

    ``readings`` is keyed by the raw visit field names (``ph``, ``fc``, ``ta``,
    ``cya``, ``salt``); missing fields count as not measured.
    """
    readings = readings or {}
    results = {}
    for kind, rng in CHEMICAL_RANGES.items():
        value = parse_reading(readings.get(READING_FIELDS[kind]))
        results[kind.value] = {
            "label": rng.label,
            "unit": rng.unit,
            "value": value,
            "status": classify(kind, value).value,
            "recommendation": recommend(kind, value, pool_gallons),
        }
    return results


def format_readings(readings):
    if not readings:
        return None
    items = []
    for kind, field in READING_FIELDS.items():
        value = parse_reading(readings.get(field))
        if not _is_missing(value):
            items.append(f"{SUMMARY_LABELS[kind]}: {value}")
    return " • ".join(items) or None
