"""
Unit tests for the batch runner.
"""

import logging

import pytest
from unittest.mock import Mock

from quizseed.core.config import SeedingConfig
from quizseed.core.exceptions import (
    BatchExecutionError,
    DependencyError,
    MissingReferenceError,
    ValidationError,
)
from quizseed.seeding import Batch, BatchRunner, BatchState, Outcome
from quizseed.storage.models import Answer, Category, Question, User


class TestRunnerWithMockStore:
    """Runner behaviour that does not need a database."""

    def test_commits_once_per_batch_in_order(self):
        events = []
        store = Mock()
        store.commit.side_effect = lambda: events.append("commit")

        def loader(name):
            return lambda context: events.append(name)

        batches = [
            Batch("questions", depends_on=["base"], load=loader("questions")),
            Batch("base", load=loader("base")),
            Batch("exam", depends_on=["questions"], load=loader("exam")),
        ]
        report = BatchRunner(store).run(batches)

        assert events == ["base", "commit", "questions", "commit", "exam", "commit"]
        assert report.order == ["base", "questions", "exam"]
        assert report.succeeded
        store.rollback.assert_not_called()

    def test_dependency_error_raised_before_any_batch_runs(self):
        store = Mock()
        load = Mock()

        with pytest.raises(DependencyError):
            BatchRunner(store).run([Batch("base", load=load), Batch("questions", depends_on=["missing"])])

        load.assert_not_called()
        store.commit.assert_not_called()

    def test_unexpected_error_is_wrapped(self):
        store = Mock()

        def broken(context):
            raise RuntimeError("boom")

        runner = BatchRunner(store)
        with pytest.raises(BatchExecutionError) as exc_info:
            runner.run([Batch("broken", load=broken)])

        assert exc_info.value.batch_name == "broken"
        assert isinstance(exc_info.value.__cause__, RuntimeError)
        assert runner.report.result("broken").state is BatchState.FAILED
        assert runner.report.result("broken").error == "boom"
        store.rollback.assert_called_once()
        store.commit.assert_not_called()

    def test_plan_does_not_execute(self):
        load = Mock()
        runner = BatchRunner(Mock())

        planned = runner.plan([Batch("base", load=load)])

        assert [batch.name for batch in planned] == ["base"]
        load.assert_not_called()

    def test_validation_mode_from_settings(self):
        assert BatchRunner(Mock(), SeedingConfig(validation_mode="permissive")).permissive
        assert not BatchRunner(Mock(), SeedingConfig()).permissive
        assert not BatchRunner(Mock(), SeedingConfig(validation_mode="permissive"), permissive=False).permissive


class TestRunnerWithDatabase:
    """Runner behaviour against a temporary SQLite database."""

    def test_seeds_reference_then_questions(self, store, test_db_session, reference_batch, question_batch):
        report = BatchRunner(store).run([question_batch(), reference_batch])

        assert report.committed == ["reference", "questions"]
        assert report.stats.count("category", Outcome.CREATED) == 2
        assert report.stats.count("subcategory", Outcome.CREATED) == 4
        assert report.stats.count("user", Outcome.CREATED) == 1
        assert report.result("questions").stats.count("question", Outcome.CREATED) == 1
        assert test_db_session.query(Question).count() == 1
        assert test_db_session.query(User).count() == 1

    def test_second_run_changes_nothing(self, store, test_db_session, reference_batch, question_batch):
        batches = [reference_batch, question_batch()]
        BatchRunner(store).run(batches)
        report = BatchRunner(store).run(batches)

        assert report.stats.total(Outcome.CREATED) == 0
        assert report.stats.total(Outcome.UPDATED) == 0
        assert report.stats.count("question", Outcome.UNCHANGED) == 1
        assert test_db_session.query(Question).count() == 1
        assert test_db_session.query(Answer).count() == 2

    def test_missing_reference_aborts_run(self, store, test_db_session, reference_batch,
                                          question_batch, make_question):
        batches = [
            reference_batch,
            question_batch(records=[make_question(category="Laravel")]),
            question_batch(name="exam", depends_on=["questions"]),
        ]
        runner = BatchRunner(store)

        with pytest.raises(MissingReferenceError):
            runner.run(batches)

        assert runner.report.result("reference").state is BatchState.COMMITTED
        assert runner.report.result("questions").state is BatchState.FAILED
        assert runner.report.result("exam").state is BatchState.PENDING
        assert runner.report.failed.name == "questions"
        assert test_db_session.query(Category).count() == 2

    def test_failed_batch_rolls_back_its_own_writes(self, store, test_db_session, reference_batch,
                                                    question_batch, make_question):
        records = [
            make_question(),
            make_question(text="Traits can declare abstract methods.", answers=[
                {"text": "True", "correct": True},
                {"text": "False", "correct": True},
            ]),
        ]
        runner = BatchRunner(store)

        with pytest.raises(ValidationError):
            runner.run([reference_batch, question_batch(records=records)])

        assert test_db_session.query(Question).count() == 0
        assert test_db_session.query(Category).count() == 2

    def test_permissive_mode_skips_invalid_questions(self, store, test_db_session, reference_batch,
                                                     question_batch, make_question):
        records = [
            make_question(type="multiple_choice", text="Which are PHP visibility keywords?", answers=[
                {"text": "internal", "correct": False},
                {"text": "friend", "correct": False},
            ]),
            make_question(),
        ]
        report = BatchRunner(store, permissive=True).run([reference_batch, question_batch(records=records)])

        assert report.succeeded
        assert report.stats.count("question", Outcome.SKIPPED) == 1
        assert report.stats.count("question", Outcome.CREATED) == 1
        assert test_db_session.query(Question).count() == 1

    def test_skipped_question_logged_with_entity_kind(self, store, reference_batch, question_batch,
                                                      make_question, caplog):
        records = [make_question(type="single_choice", answers=[
            {"text": "a", "correct": True},
            {"text": "b", "correct": True},
        ])]

        with caplog.at_level(logging.WARNING, logger="quizseed.batch"):
            BatchRunner(store, permissive=True).run([reference_batch, question_batch(records=records)])

        skipped = [r for r in caplog.records if "Skipping invalid question" in r.getMessage()]
        assert len(skipped) == 1
        assert skipped[0].batch == "questions"
        assert skipped[0].entity_kind == "question"

    def test_permissive_mode_still_aborts_on_missing_reference(self, store, reference_batch,
                                                              question_batch, make_question):
        batch = question_batch(records=[make_question(subcategory="Generators")])

        with pytest.raises(MissingReferenceError):
            BatchRunner(store, permissive=True).run([reference_batch, batch])

    def test_dry_run_rolls_everything_back(self, store, test_db_session, reference_batch, question_batch):
        runner = BatchRunner(store)
        report = runner.run([reference_batch, question_batch()], dry_run=True)

        assert report.dry_run
        assert report.stats.count("question", Outcome.CREATED) == 1
        assert len(runner.orchestrator.lookup) == 0
        assert test_db_session.query(Category).count() == 0
        assert test_db_session.query(Question).count() == 0
        assert [result.state for result in report.results] == [BatchState.ROLLED_BACK, BatchState.ROLLED_BACK]
        assert report.succeeded
        assert report.committed == []

    def test_dry_run_failure_reports_nothing_committed(self, store, test_db_session, reference_batch,
                                                       question_batch, make_question):
        runner = BatchRunner(store)
        broken = question_batch(records=[make_question(subcategory="Generators")])

        with pytest.raises(MissingReferenceError):
            runner.run([reference_batch, broken], dry_run=True)

        assert runner.report.result("reference").state is BatchState.ROLLED_BACK
        assert runner.report.result("questions").state is BatchState.FAILED
        assert runner.report.committed == []
        assert not runner.report.succeeded
        assert test_db_session.query(Category).count() == 0

    def test_groups_restrict_run(self, store, test_db_session, reference_batch, question_batch):
        batches = [reference_batch, question_batch(), question_batch(name="exam", groups=["exam"])]
        report = BatchRunner(store).run(batches, groups=["questions"])

        assert report.order == ["reference", "questions"]

    def test_overwrite_policy_from_settings(self, store, test_db_session, reference_batch,
                                            question_batch, make_question):
        BatchRunner(store).run([reference_batch, question_batch()])

        settings = SeedingConfig(policies={"question": "keep"})
        report = BatchRunner(store, settings).run(
            [reference_batch, question_batch(records=[make_question(difficulty=4)])]
        )

        assert report.stats.count("question", Outcome.UNCHANGED) == 1
        assert test_db_session.query(Question).one().difficulty == 1
