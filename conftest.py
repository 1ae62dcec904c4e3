"""Shared pytest fixtures."""

from datetime import date

import pytest

from important_dates.config import ExtractorConfig


@pytest.fixture
def config():
    """Extractor config pinned to a fixed reference date."""
    return ExtractorConfig(reference_date=date(2024, 9, 1))


@pytest.fixture
def syllabus_text():
    """A small HTML-style syllabus with keyword lines."""
    return (
        "CS101 Introduction to Programming\n"
        "Welcome to the course.\n"
        "Assignment 3 - 10/20/2024\n"
        "Midterm Exam: October 30, 2024\n"
        "Final Exam: December 15, 2024\n"
        "Office hours are posted online.\n"
    )
