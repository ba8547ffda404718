"""Shared fixtures for fieldcheck tests."""

import os

import pytest

from fieldcheck import Schema, rules


@pytest.fixture
def user_schema():
    """Schema mixing builder-built and grammar-built fields."""
    return (
        Schema("user")
        .field("username", rules.required(), rules.min_length(3), rules.max_length(20), rules.alphanum())
        .field("email", rules.required(), rules.email())
        .rules("age", "min:18|max:120")
        .rules("role", "in:admin,editor,viewer")
    )


@pytest.fixture
def valid_user():
    return {
        "username": "john123",
        "email": "john@example.com",
        "age": 25,
        "role": "editor",
    }


@pytest.fixture
def clean_env(monkeypatch):
    """Remove any FIELDCHECK_* variables inherited from the environment."""
    for name in list(os.environ):
        if name.startswith("FIELDCHECK_"):
            monkeypatch.delenv(name)
    return monkeypatch
