"""
Tests for focus-area classification.
"""

import pytest

from markerboard.domain.focus_areas import (
    FOCUS_AREAS,
    focus_area_meta,
    focus_areas_for,
    normalize_text,
)
from markerboard.domain.models import FocusAreaId


class TestFocusAreasFor:
    def test_category_and_name_agree(self) -> None:
        assert focus_areas_for("ApoB", "Lipider") == (FocusAreaId.CARDIOVASCULAR,)

    def test_name_only(self) -> None:
        assert focus_areas_for("CRP") == (FocusAreaId.INFLAMMATION,)

    def test_nothing_matches_falls_back_to_other(self) -> None:
        assert focus_areas_for("Xyzzy", "") == (FocusAreaId.OTHER,)

    def test_category_hints_come_before_name_matches(self) -> None:
        assert focus_areas_for("Ferritin", "Blod & Järn") == (
            FocusAreaId.BLOOD,
            FocusAreaId.MICRONUTRIENTS,
        )

    def test_diacritics_in_category_are_ignored(self) -> None:
        assert focus_areas_for("TSH", "Sköldkörtel") == (FocusAreaId.THYROID,)

    @pytest.mark.parametrize(
        "name, category",
        [("Hemoglobin", "Blod & Järn"), ("Testosteron", "Hormoner"), ("Unknown", None)],
    )
    def test_never_empty_and_no_duplicates(self, name: str, category: str | None) -> None:
        areas = focus_areas_for(name, category)
        assert areas
        assert len(areas) == len(set(areas))


class TestHelpers:
    def test_normalize_text(self) -> None:
        assert normalize_text("Sköldkörtel") == "skoldkortel"
        assert normalize_text(None) == ""

    def test_every_area_has_metadata(self) -> None:
        assert {meta.id for meta in FOCUS_AREAS} == set(FocusAreaId)

    def test_meta_lookup_and_fallback(self) -> None:
        assert focus_area_meta(FocusAreaId.LIVER).title == "Liver"
        assert focus_area_meta("nonexistent").id == FocusAreaId.OTHER
