from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from src.api.models import StyleConfig
from src.api.schemas import CountdownCreate, CountdownUpdate

DEFAULT = StyleConfig()


class TestStyleFromInput:
    @pytest.mark.parametrize("raw", [None, {}])
    def test_no_input_gives_defaults(self, raw):
        assert StyleConfig.from_input(raw) == StyleConfig("#ffffff", "#000000", 48, "Arial")

    def test_valid_values_are_kept(self):
        style = StyleConfig.from_input(
            {"backgroundColor": "#AbCdEf", "textColor": "#000001", "fontSize": 96, "fontFamily": "Lobster"}
        )
        assert style == StyleConfig("#AbCdEf", "#000001", 96, "Lobster")

    def test_snake_case_keys_accepted(self):
        style = StyleConfig.from_input({"background_color": "#111111", "font_size": 20})
        assert style.background_color == "#111111"
        assert style.font_size == 20

    @pytest.mark.parametrize("color", ["#fff", "ffffff", "#1234567", "#GGGGGG", "red", 123456, None])
    def test_invalid_colors_fall_back_to_defaults(self, color):
        style = StyleConfig.from_input({"backgroundColor": color, "textColor": color})
        assert style.background_color == "#ffffff"
        assert style.text_color == "#000000"

    @pytest.mark.parametrize("size,expected", [(12, 12), (120, 120), (48.0, 48), (11, 48), (121, 48), ("48", 48), (True, 48), (60.5, 48)])
    def test_font_size_bounds(self, size, expected):
        assert StyleConfig.from_input({"fontSize": size}).font_size == expected

    @pytest.mark.parametrize("family", ["", "   ", None, 42])
    def test_invalid_font_family_falls_back(self, family):
        assert StyleConfig.from_input({"fontFamily": family}).font_family == "Arial"


class TestStyleUpdateAgainstExisting:
    existing = StyleConfig("#123456", "#654321", 90, "Lobster")

    def test_invalid_values_keep_existing(self):
        raw = {"backgroundColor": "nope", "textColor": "#12", "fontSize": 999, "fontFamily": ""}
        assert StyleConfig.from_input(raw, base=self.existing) == self.existing

    def test_omitted_keys_keep_existing(self):
        updated = StyleConfig.from_input({"textColor": "#ABCDEF"}, base=self.existing)
        assert updated == StyleConfig("#123456", "#ABCDEF", 90, "Lobster")

    def test_creation_and_update_fallbacks_differ(self):
        raw = {"backgroundColor": "invalid"}
        assert StyleConfig.from_input(raw).background_color == DEFAULT.background_color
        assert StyleConfig.from_input(raw, base=self.existing).background_color == "#123456"


def future(days=5) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


class TestCountdownSchemas:
    def test_naive_target_is_taken_as_utc(self):
        naive = (datetime.now() + timedelta(days=400)).replace(microsecond=0, tzinfo=None)
        created = CountdownCreate.model_validate({"targetDate": naive.isoformat()})
        assert created.target_date == naive.replace(tzinfo=timezone.utc)

    def test_z_suffix_and_offsets_normalize_to_utc(self):
        created = CountdownCreate.model_validate({"targetDate": "2099-05-01T10:00:00+02:00"})
        assert created.target_date == datetime(2099, 5, 1, 8, 0, tzinfo=timezone.utc)
        created_z = CountdownCreate.model_validate({"targetDate": "2099-05-01T08:00:00Z"})
        assert created_z.target_date == created.target_date

    def test_style_config_from_create(self):
        created = CountdownCreate.model_validate({"targetDate": future(), "style": {"fontSize": 70}})
        assert created.style_config() == StyleConfig(font_size=70)

    def test_non_object_style_is_ignored(self):
        created = CountdownCreate.model_validate({"targetDate": future(), "style": "bold"})
        assert created.style_config() == DEFAULT

    def test_title_is_stripped(self):
        created = CountdownCreate.model_validate({"targetDate": future(), "title": "  Launch  "})
        assert created.title == "Launch"

    def test_title_limit_applies_before_stripping(self):
        with pytest.raises(ValidationError):
            CountdownCreate.model_validate({"targetDate": future(), "title": "a" * 195 + " " * 10})
        assert CountdownCreate.model_validate({"targetDate": future(), "title": "a" * 200}).title == "a" * 200

    def test_title_with_lone_surrogate_is_rejected(self):
        with pytest.raises(ValidationError):
            CountdownUpdate.model_validate({"title": "x\ud800"})

    def test_font_family_with_lone_surrogate_is_ignored(self):
        assert StyleConfig.from_input({"fontFamily": "Ari\udfffal"}) == DEFAULT

    @pytest.mark.parametrize("payload", [{}, {"targetDate": None}, {"targetDate": "31/12/2099"}])
    def test_create_requires_parseable_date(self, payload):
        with pytest.raises(ValidationError):
            CountdownCreate.model_validate(payload)

    def test_update_fields_are_optional(self):
        update = CountdownUpdate.model_validate({})
        assert update.title is None and update.target_date is None and update.style is None
        assert update.model_fields_set == set()

    def test_update_rejects_past_date(self):
        with pytest.raises(ValidationError):
            CountdownUpdate.model_validate({"targetDate": "2000-01-01T00:00:00Z"})
