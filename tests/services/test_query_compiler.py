"""Tests for query compilation in both backend grammars."""

from __future__ import annotations

from taskchat.adapters.datacore import DatacoreGrammar
from taskchat.adapters.dataview import DataviewGrammar
from taskchat.models import FilterSpec, LocationFilters
from taskchat.services.query_compiler import QueryCompiler, QueryGrammar

datacore = QueryCompiler(DatacoreGrammar())
dataview = QueryCompiler(DataviewGrammar())


def _spec(inclusions=None, exclusions=None) -> FilterSpec:
    return FilterSpec(
        inclusions=LocationFilters(**(inclusions or {})),
        exclusions=LocationFilters(**(exclusions or {})),
    )


# ---------------------------------------------------------------------------
# Datacore
# ---------------------------------------------------------------------------


class TestDatacoreCompile:
    def test_empty_spec_selects_all_tasks(self):
        assert datacore.compile(FilterSpec()) == "@task"

    def test_inclusions_form_one_or_group(self):
        spec = _spec({"folders": ["Work"], "note_tags": ["#project"]})
        assert (
            datacore.compile(spec)
            == '@task and (path("Work") or childof(@page and #project))'
        )

    def test_exclusions_come_before_inclusions(self):
        spec = _spec({"folders": ["Work"]}, {"folders": ["Archive"], "task_tags": ["#skip"]})
        assert (
            datacore.compile(spec)
            == '@task and !path("Archive") and !#skip and (path("Work"))'
        )

    def test_note_by_name_and_by_path(self):
        spec = _spec({"notes": ["Plan.md", "Work/Ideas"]})
        assert datacore.compile(spec) == (
            '@task and (childof(@page and $name = "Plan")'
            ' or childof(@page and $path = "Work/Ideas.md"))'
        )

    def test_folder_is_normalized_and_quoted(self):
        spec = _spec({"folders": ['/My "Stuff"/']})
        assert datacore.compile(spec) == '@task and (path("My \\"Stuff\\""))'

    def test_blank_clauses_ignored(self):
        spec = _spec({"folders": ["", "/"], "task_tags": ["#"]})
        assert datacore.compile(spec) == "@task"

    def test_explicit_exclusions_override_spec(self):
        spec = _spec(exclusions={"folders": ["A"]})
        query = datacore.compile(spec, LocationFilters(folders=["B"]))
        assert query == '@task and !path("B")'

    def test_fully_expresses_everything(self):
        spec = _spec({"notes": ["a"], "task_tags": ["t"]}, {"note_tags": ["x"]})
        assert datacore.fully_expresses(spec)

    def test_malformed_tags_left_to_membership_pass(self):
        spec = _spec({"task_tags": ["my tag"]}, {"note_tags": ["x) or (#y"]})
        assert datacore.compile(spec) == "@task"
        assert not datacore.fully_expresses(spec)

    def test_nested_and_unicode_tags_compiled(self):
        spec = _spec({"task_tags": ["#area/home-2", "#café_list"]})
        assert datacore.compile(spec) == "@task and (#area/home-2 or #café_list)"
        assert datacore.fully_expresses(spec)


# ---------------------------------------------------------------------------
# Dataview
# ---------------------------------------------------------------------------


class TestDataviewCompile:
    def test_empty_spec_is_empty_source(self):
        assert dataview.compile(FilterSpec()) == ""

    def test_single_inclusion_not_parenthesized(self):
        assert dataview.compile(_spec({"folders": ["Work"]})) == '"Work"'

    def test_exclusions_and_group(self):
        spec = _spec({"folders": ["Work"], "note_tags": ["project"]}, {"folders": ["Archive"]})
        assert dataview.compile(spec) == '-"Archive" and ("Work" or #project)'

    def test_inexpressible_inclusion_drops_group(self):
        spec = _spec({"folders": ["Work"], "notes": ["Plan"]})
        assert dataview.compile(spec) == ""
        assert not dataview.fully_expresses(spec)

    def test_inexpressible_exclusion_skipped(self):
        spec = _spec(exclusions={"task_tags": ["skip"], "folders": ["Archive"]})
        assert dataview.compile(spec) == '-"Archive"'
        assert not dataview.fully_expresses(spec)

    def test_fully_expresses_folders_and_note_tags(self):
        spec = _spec({"folders": ["Work"]}, {"note_tags": ["#x"]})
        assert dataview.fully_expresses(spec)


def test_grammar_defaults():
    class Minimal(QueryGrammar):
        def all_tasks(self):
            return "*"

        def folder(self, folder):
            return f"f:{folder}"

        def note(self, note):
            return None

        def note_tag(self, tag):
            return None

        def task_tag(self, tag):
            return None

    grammar = Minimal()
    assert grammar.negate("x") == "!x"
    assert grammar.group(["a", "b"]) == "(a or b)"
    assert grammar.quote('a"b\\c') == '"a\\"b\\\\c"'
    assert QueryCompiler(grammar).compile(_spec({"folders": ["W"]})) == "* and (f:W)"
