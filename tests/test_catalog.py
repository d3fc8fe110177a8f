"""QuestionCatalog tests — YAML loading, lookup, and sequence composition."""

import pytest

from mindcheck.catalog import QuestionCatalog


class TestPackagedCatalog:
    """The catalog shipped with the package."""

    def test_base_questions_in_order(self, catalog):
        assert catalog.base_ids == [
            "hopeless", "anxiety", "sleep", "social_withdraw", "self_harm",
        ]

    def test_high_risk_questions_in_order(self, catalog):
        assert catalog.high_risk_ids == ["plan", "means"]

    def test_yes_no_values_are_strings(self, catalog):
        """YAML must not turn Yes/No tokens into booleans."""
        for qid in ("social_withdraw", "plan", "means"):
            values = catalog.get(qid).values
            assert set(values) == {"Yes", "No"}, f"{qid} has values {values}"

    def test_self_harm_scale(self, catalog):
        q = catalog.get("self_harm")
        assert q.values == [0, 1, 2, 3]
        assert [o.label for o in q.options] == [
            "Never", "Fleeting thoughts", "Sometimes", "Often",
        ]

    def test_unknown_id_raises_key_error(self, catalog):
        with pytest.raises(KeyError):
            catalog.get("nope")

    def test_active_sequence_not_escalated(self, catalog):
        assert [q.id for q in catalog.active_sequence(False)] == catalog.base_ids

    def test_active_sequence_escalated_keeps_base_prefix(self, catalog):
        seq = catalog.active_sequence(True)
        assert [q.id for q in seq] == catalog.base_ids + catalog.high_risk_ids

    def test_active_sequence_returns_fresh_list(self, catalog):
        seq = catalog.active_sequence(False)
        seq.clear()
        assert len(catalog.active_sequence(False)) == 5, "Catalog must not be mutated"

    def test_questions_are_frozen(self, catalog):
        with pytest.raises(Exception):
            catalog.get("hopeless").text = "changed"


class TestCatalogLoading:
    """Loading custom and malformed catalog files."""

    def test_missing_file_raises(self, tmp_path):
        c = QuestionCatalog(tmp_path / "missing.yaml")
        with pytest.raises(FileNotFoundError):
            c.load()

    def test_duplicate_id_across_blocks_raises(self, tmp_path):
        path = tmp_path / "dup.yaml"
        path.write_text(
            "base:\n"
            "  - {id: a, text: A, options: [{label: x, value: 0}]}\n"
            "high_risk:\n"
            "  - {id: a, text: A2, options: [{label: y, value: 1}]}\n",
            encoding="utf-8",
        )
        with pytest.raises(ValueError, match="Duplicate"):
            QuestionCatalog(path).load()

    def test_empty_base_raises(self, tmp_path):
        path = tmp_path / "empty.yaml"
        path.write_text("base: []\n", encoding="utf-8")
        with pytest.raises(ValueError, match="no base questions"):
            QuestionCatalog(path).load()

    def test_question_without_options_is_rejected(self, tmp_path):
        path = tmp_path / "bad.yaml"
        path.write_text("base:\n  - {id: a, text: A, options: []}\n", encoding="utf-8")
        with pytest.raises(ValueError):
            QuestionCatalog(path).load()

    def test_custom_catalog_loads(self, tmp_path):
        path = tmp_path / "custom.yaml"
        path.write_text(
            "base:\n"
            "  - {id: mood, text: Mood, options: [{label: ok, value: 0}, {label: bad, value: 3}]}\n",
            encoding="utf-8",
        )
        c = QuestionCatalog(str(path))
        c.load()
        assert c.base_ids == ["mood"]
        assert c.high_risk == ()
