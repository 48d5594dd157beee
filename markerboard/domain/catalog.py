"""Bundled starter catalog and sample readings for local use and demos."""

from markerboard.domain.models import MarkerDefinition, Measurement

DEFAULT_MARKERS: tuple[MarkerDefinition, ...] = (
    MarkerDefinition(
        id="hb",
        name="Hemoglobin",
        short_name="Hb",
        unit="g/L",
        min_ref=134,
        max_ref=170,
        category="Blod & Järn",
        description=(
            "Protein in red blood cells carrying oxygen from the lungs to the tissues. "
            "Low values may indicate anemia."
        ),
        display_min=110,
        display_max=195,
    ),
    MarkerDefinition(
        id="ferritin",
        name="Ferritin",
        short_name="Ferritin",
        unit="µg/L",
        min_ref=30,
        max_ref=400,
        category="Blod & Järn",
        description="Reflects iron stores. Low levels are the earliest sign of iron deficiency.",
        display_min=0,
        display_max=500,
    ),
    MarkerDefinition(
        id="ts",
        name="Testosteron",
        short_name="T",
        unit="nmol/L",
        min_ref=8.6,
        max_ref=29,
        category="Hormoner",
        description="Primary male sex hormone, affecting muscle mass, energy and mood.",
        display_min=0,
        display_max=40,
    ),
    MarkerDefinition(
        id="evf",
        name="Hematokrit",
        short_name="EVF",
        unit="%",
        min_ref=0.39,
        max_ref=0.50,
        category="Blod & Järn",
        description="Share of red blood cells in blood. High values can indicate dehydration.",
        display_min=0.30,
        display_max=0.60,
    ),
)

SAMPLE_MEASUREMENTS: tuple[Measurement, ...] = (
    # Hemoglobin trending up into the high range
    Measurement(id="1", marker_id="hb", value=145, date="2023-01-15"),
    Measurement(id="2", marker_id="hb", value=152, date="2023-06-20"),
    Measurement(id="3", marker_id="hb", value=168, date="2023-12-05"),
    Measurement(id="4", marker_id="hb", value=184, date="2024-02-14"),
    Measurement(id="5", marker_id="ferritin", value=120, date="2023-06-20"),
    Measurement(id="6", marker_id="ferritin", value=115, date="2024-02-14"),
    Measurement(id="7", marker_id="ts", value=12, date="2023-01-15"),
    Measurement(id="8", marker_id="ts", value=8.4, date="2024-02-14"),
    Measurement(id="9", marker_id="evf", value=0.45, date="2024-02-14"),
)
