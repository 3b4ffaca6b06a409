"""
Tests for Settings validation
"""

import pytest
from pydantic import ValidationError

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from availability_calendar.config import Settings


class TestSettings:

    def test_defaults(self):
        s = Settings(_env_file=None)

        assert s.calendar_phone_months == 3
        assert s.calendar_tablet_months == 4
        assert s.calendar_tablet_landscape_months == 6
        assert (s.calendar_phone_page_months, s.calendar_tablet_page_months, s.calendar_tablet_landscape_page_months) == (1, 2, 3)

    def test_month_count_must_be_positive(self):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, CALENDAR_TABLET_PAGE_MONTHS=0)

    def test_log_level_normalized(self):
        assert Settings(_env_file=None, LOG_LEVEL="debug").log_level == "DEBUG"
        with pytest.raises(ValidationError):
            Settings(_env_file=None, LOG_LEVEL="loud")

    def test_cors_origins_parsed(self):
        s = Settings(_env_file=None, ALLOWED_ORIGINS="https://a.example/, https://b.example,https://a.example")

        assert s.cors_origins == ["https://a.example", "https://b.example"]
        assert Settings(_env_file=None, ALLOWED_ORIGINS="").cors_origins == ["http://localhost:3000"]
