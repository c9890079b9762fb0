"""
Integration tests for seeding the built-in fixtures.

Runs every built-in batch against a temporary SQLite database and checks
that repeated runs converge to the same rows.
"""

import pytest
from sqlalchemy import func

from quizseed.core.config import SeedingConfig
from quizseed.seeding import BatchRunner, BatchState, Outcome, discover_batches
from quizseed.seeding.keys import question_fingerprint
from quizseed.storage.models import Answer, Category, Question, Subcategory, User, QuestionType
from quizseed.fixtures.documentation import DOCUMENTATION_URLS


pytestmark = pytest.mark.integration


@pytest.fixture
def builtin_batches():
    return discover_batches()


@pytest.fixture
def seeded(store, builtin_batches):
    return BatchRunner(store).run(builtin_batches)


def table_counts(session):
    return {
        model.__tablename__: session.query(model).count()
        for model in (Category, Subcategory, Question, Answer, User)
    }


class TestBuiltinSeeding:
    """Seed the packaged fixtures end to end."""

    def test_every_batch_committed(self, seeded, builtin_batches):
        assert seeded.succeeded
        assert sorted(seeded.order) == sorted(batch.name for batch in builtin_batches)
        assert all(result.state is BatchState.COMMITTED for result in seeded.results)

    def test_reference_data(self, seeded, test_db_session):
        names = {category.name for category in test_db_session.query(Category)}
        assert names == {"Symfony", "PHP"}
        assert test_db_session.query(User).one().email == "user@quiz.local"

    def test_question_count_matches_fixtures(self, seeded, builtin_batches, test_db_session):
        declared = sum(len(batch.records) for batch in builtin_batches)
        assert test_db_session.query(Question).count() == declared

    def test_second_run_converges(self, seeded, store, builtin_batches, test_db_session):
        before = table_counts(test_db_session)

        report = BatchRunner(store).run(builtin_batches)

        assert table_counts(test_db_session) == before
        assert report.stats.total(Outcome.CREATED) == 0
        assert report.stats.total(Outcome.UPDATED) == 0
        assert report.stats.count("question", Outcome.UNCHANGED) == before["questions"]

    def test_overwrite_everything_second_time(self, seeded, store, builtin_batches, test_db_session):
        before = table_counts(test_db_session)
        settings = SeedingConfig(policies={
            "category": "overwrite", "subcategory": "overwrite", "question": "overwrite", "user": "overwrite",
        })

        BatchRunner(store, settings).run(builtin_batches)

        assert table_counts(test_db_session) == before


class TestSeededIntegrity:
    """Invariants over the seeded rows."""

    def test_natural_keys_unique(self, seeded, test_db_session):
        duplicate_subcategories = (
            test_db_session.query(Subcategory.category_id, Subcategory.name)
            .group_by(Subcategory.category_id, Subcategory.name)
            .having(func.count(Subcategory.id) > 1)
            .all()
        )
        assert duplicate_subcategories == []

        texts = [text for (text,) in test_db_session.query(Question.text)]
        assert len(texts) == len(set(texts))

    def test_answers_match_question_type(self, seeded, test_db_session):
        for question in test_db_session.query(Question):
            correct = len(question.correct_answers)
            assert len(question.answers) >= 2, question.text
            if question.question_type is QuestionType.MULTIPLE_CHOICE:
                assert correct >= 1, question.text
            else:
                assert correct == 1, question.text
            assert [answer.position for answer in question.answers] == list(range(len(question.answers)))

    def test_references_consistent(self, seeded, test_db_session):
        for question in test_db_session.query(Question):
            assert question.subcategory.category_id == question.category_id, question.text

    def test_identifiers_are_fingerprints(self, seeded, test_db_session):
        for question in test_db_session.query(Question):
            expected = question_fingerprint(
                question.text,
                question.category.name,
                question.subcategory.name,
                [(answer.text, answer.is_correct) for answer in question.answers],
            )
            assert question.identifier == expected

    def test_certification_questions_flagged(self, seeded, test_db_session):
        exam = test_db_session.query(Question).filter(Question.symfony_version.isnot(None)).all()

        assert exam
        assert all(question.is_certification for question in exam)

    def test_documentation_urls_set(self, seeded, test_db_session):
        for subcategory in test_db_session.query(Subcategory):
            if subcategory.name in DOCUMENTATION_URLS:
                assert subcategory.documentation_url == DOCUMENTATION_URLS[subcategory.name]
