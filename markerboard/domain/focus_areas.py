"""
Focus-area (organ system) classification.

The classifier is a single generic substring matcher over two declarative
tables: category hints are checked first, name heuristics are appended.
Adding a focus area or keyword means editing the tables only.

Keywords cover both the Swedish catalog and English marker names, and are
written already lower-cased and without diacritics.
"""

import unicodedata

from pydantic import BaseModel, ConfigDict

from markerboard.domain.models import FocusAreaId


class FocusAreaMeta(BaseModel):
    """Display metadata for a focus area."""

    model_config = ConfigDict(frozen=True)

    id: FocusAreaId
    title: str
    emoji: str
    description: str


FOCUS_AREAS: tuple[FocusAreaMeta, ...] = (
    FocusAreaMeta(
        id=FocusAreaId.CARDIOVASCULAR,
        title="Heart & vessels",
        emoji="🫀",
        description="Lipids, ApoB and cardiovascular risk markers.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.METABOLIC,
        title="Metabolic",
        emoji="⚡️",
        description="Glucose, insulin, HbA1c and energy metabolism.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.LIVER,
        title="Liver",
        emoji="🧪",
        description="ALT/AST/ALP/GGT, bilirubin and liver-related markers.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.KIDNEY,
        title="Kidneys",
        emoji="🫘",
        description="Creatinine, eGFR, cystatin C, urea and urate.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.THYROID,
        title="Thyroid",
        emoji="🦋",
        description="TSH, fT3, fT4 and autoantibodies.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.INFLAMMATION,
        title="Inflammation",
        emoji="🔥",
        description="CRP, ESR, cytokines and inflammation-related markers.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.BLOOD,
        title="Blood",
        emoji="🩸",
        description="Hb, RBC/WBC, platelets and blood status.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.HORMONES,
        title="Hormones",
        emoji="🧬",
        description="Testosterone, estradiol, cortisol, SHBG, LH/FSH and more.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.MICRONUTRIENTS,
        title="Micronutrients",
        emoji="🥬",
        description="Ferritin/iron, B12, folate, vitamin D, zinc, selenium and more.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.ELECTROLYTES,
        title="Electrolytes",
        emoji="🧂",
        description="Sodium, potassium, chloride, calcium, phosphate, CO2/bicarbonate.",
    ),
    FocusAreaMeta(
        id=FocusAreaId.OTHER,
        title="Other",
        emoji="🧩",
        description="Everything that does not fit another area.",
    ),
)

KeywordTable = tuple[tuple[FocusAreaId, tuple[str, ...]], ...]

# Category strings often already name the organ system
CATEGORY_HINTS: KeywordTable = (
    (FocusAreaId.LIVER, ("lever",)),
    (FocusAreaId.KIDNEY, ("njur",)),
    (FocusAreaId.THYROID, ("skold", "thyroid")),
    (FocusAreaId.INFLAMMATION, ("inflamm", "immun")),
    (FocusAreaId.CARDIOVASCULAR, ("lipid", "hjarta", "karl", "cardio")),
    (FocusAreaId.METABOLIC, ("metabol", "gluk", "diabet")),
    (FocusAreaId.HORMONES, ("hormon",)),
    (FocusAreaId.BLOOD, ("blod", "hemat")),
    (FocusAreaId.MICRONUTRIENTS, ("vitamin", "mineral", "naring")),
    (FocusAreaId.ELECTROLYTES, ("elektro", "salt")),
)

NAME_HEURISTICS: KeywordTable = (
    (
        FocusAreaId.CARDIOVASCULAR,
        (
            "apob",
            "apo b",
            "ldl",
            "hdl",
            "triglycer",
            "trigly",
            "cholesterol",
            "kolesterol",
            "non-hdl",
            "lipoprotein",
            "lp(a)",
            "lpa",
        ),
    ),
    (
        FocusAreaId.METABOLIC,
        ("glukos", "glucose", "hba1c", "insulin", "c-peptid", "keton", "homa"),
    ),
    (
        FocusAreaId.LIVER,
        ("alt", "alat", "ast", "asat", "alp", "ggt", "bilirubin", "albumin"),
    ),
    (
        FocusAreaId.KIDNEY,
        ("kreatinin", "creatinine", "egfr", "cystatin", "urea", "urat", "uric"),
    ),
    (
        FocusAreaId.THYROID,
        ("tsh", "ft3", "ft4", "t3", "t4", "tpo", "trab", "tgab", "thyro"),
    ),
    (
        FocusAreaId.INFLAMMATION,
        ("crp", "hscrp", "esr", "sr", "sedimentation", "il-6", "tnf"),
    ),
    (
        FocusAreaId.BLOOD,
        (
            "hemoglobin",
            "hb ",
            " hb",
            "erytro",
            "rbc",
            "wbc",
            "leuko",
            "tromb",
            "platelet",
            "hematokrit",
            "mcv",
            "mch",
            "mchc",
            "rdw",
        ),
    ),
    (
        FocusAreaId.HORMONES,
        (
            "testoster",
            "testosterone",
            "estradi",
            "oest",
            "progester",
            "prolakt",
            "dhea",
            "cortisol",
            "shbg",
            "lh",
            "fsh",
            "igf",
        ),
    ),
    (
        FocusAreaId.MICRONUTRIENTS,
        (
            "ferritin",
            "jarn",
            "iron",
            "b12",
            "folat",
            "folate",
            "vitamin d",
            "25-oh",
            "zink",
            "zinc",
            "magnesium",
            "selen",
            "iod",
            "vitamin a",
            "vitamin e",
        ),
    ),
    (
        FocusAreaId.ELECTROLYTES,
        (
            "natrium",
            "sodium",
            "kalium",
            "potassium",
            "klorid",
            "chloride",
            "calcium",
            "fosfat",
            "phosphate",
            "bikarbonat",
            "co2",
            "bicarbonate",
        ),
    ),
)


def normalize_text(text: str | None) -> str:
    """Lower-case and strip diacritics ("Sköldkörtel" -> "skoldkortel")."""
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _match(haystack: str, table: KeywordTable) -> list[FocusAreaId]:
    return [area for area, keywords in table if any(k in haystack for k in keywords)]


def focus_areas_for(name: str, category: str | None = None) -> tuple[FocusAreaId, ...]:
    """Tag a marker with every focus area its category or name suggests.

    Never empty: a marker nothing matches is tagged ``OTHER``.
    """
    matches = _match(normalize_text(category), CATEGORY_HINTS)
    matches += _match(normalize_text(name), NAME_HEURISTICS)

    unique = tuple(dict.fromkeys(matches))
    return unique or (FocusAreaId.OTHER,)


def focus_area_meta(area: FocusAreaId | str) -> FocusAreaMeta:
    """Metadata for a focus area; unknown ids fall back to ``OTHER``."""
    for meta in FOCUS_AREAS:
        if meta.id == area:
            return meta
    return FOCUS_AREAS[-1]
