"""
Tests for content units and providers
"""
import random

import pytest
from pydantic import ValidationError

from shortgen.content import StaticContentProvider, YamlContentProvider
from shortgen.models import ContentUnit
from shortgen.models.content import split_sentences


@pytest.mark.parametrize(
    "script,expected",
    [
        ("A. B. C.", ["A", "B", "C"]),
        ("Why?! Because... it works", ["Why", "Because", "it works"]),
        ("No terminator at all", ["No terminator at all"]),
        ("  First.\n\nSecond!  ", ["First", "Second"]),
    ],
)
def test_split_sentences(script, expected):
    assert split_sentences(script) == expected


def test_content_unit_rejects_empty_script():
    with pytest.raises(ValidationError):
        ContentUnit(title="Title", script=" ... ", keywords=["a"])


def test_content_unit_rejects_empty_title():
    with pytest.raises(ValidationError):
        ContentUnit(title="", script="Hello.")


@pytest.mark.parametrize("title", ["   ", "\t\n"])
def test_content_unit_rejects_blank_title(title):
    with pytest.raises(ValidationError):
        ContentUnit(title=title, script="Hello.")


def test_content_unit_strips_title():
    assert ContentUnit(title="  Stop wall cracks \n", script="S.").title == "Stop wall cracks"


def test_content_unit_strips_keywords():
    unit = ContentUnit(title="T", script="S.", keywords=[" mesh ", "", "  "])

    assert unit.keywords == ("mesh",)


def test_content_unit_is_frozen(content_unit):
    with pytest.raises(ValidationError):
        content_unit.title = "Other"


def test_static_provider_sequential_wraps():
    units = [ContentUnit(title=t, script="S.") for t in ("one", "two")]
    provider = StaticContentProvider(units, sequential=True)

    titles = [provider.next_content_unit().title for _ in range(3)]

    assert titles == ["one", "two", "one"]


def test_static_provider_seeded_random():
    units = [ContentUnit(title=str(i), script="S.") for i in range(10)]

    first = StaticContentProvider(units, rng=random.Random(3))
    second = StaticContentProvider(units, rng=random.Random(3))

    assert [first.next_content_unit() for _ in range(5)] == [
        second.next_content_unit() for _ in range(5)
    ]


def test_static_provider_requires_units():
    with pytest.raises(ValueError):
        StaticContentProvider([])


def test_yaml_provider_list(tmp_path):
    path = tmp_path / "content.yaml"
    path.write_text(
        "- title: Stop wall cracks\n"
        "  script: Check humidity. Use mesh.\n"
        "  keywords: [humidity, mesh]\n",
        encoding="utf-8",
    )

    provider = YamlContentProvider(path)

    unit = provider.next_content_unit()
    assert len(provider) == 1
    assert unit.keywords == ("humidity", "mesh")
    assert unit.sentences() == ["Check humidity", "Use mesh"]


def test_yaml_provider_units_mapping(tmp_path):
    path = tmp_path / "content.yaml"
    path.write_text(
        "units:\n"
        "  - {title: One, script: First.}\n"
        "  - {title: Two, script: Second.}\n",
        encoding="utf-8",
    )

    provider = YamlContentProvider(path, sequential=True)

    assert [provider.next_content_unit().title for _ in range(2)] == ["One", "Two"]


def test_yaml_provider_rejects_scalar(tmp_path):
    path = tmp_path / "content.yaml"
    path.write_text("just a string\n", encoding="utf-8")

    with pytest.raises(ValueError):
        YamlContentProvider(path)
